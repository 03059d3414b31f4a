from rest_framework.throttling import AnonRateThrottle


class LoginRateThrottle(AnonRateThrottle):
    """Per-IP limit on password attempts (``login`` rate in settings)."""
    scope = 'login'
