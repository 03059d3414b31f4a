"""
Bearer token authentication for the API.

A subclass of simplejwt's ``JWTAuthentication`` that verifies tokens
through :mod:`care.services.tokens` and re-reads the user on every
request, so deactivating an account locks it out even while its token
is still within the 24 hour window.  Username-only legacy tokens are
resolved to a synthetic admin principal without a database lookup;
deactivation cannot be checked for them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication

from care.exceptions import Unauthenticated
from care.services.tokens import LEGACY_ROLE, TokenClaims, verify_token


@dataclass
class LegacyPrincipal:
    """Identity behind a legacy username-only token."""
    username: str
    role: str = LEGACY_ROLE
    is_active: bool = True
    id: Optional[int] = None
    pk: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_anonymous(self) -> bool:
        return False

    @property
    def name(self) -> str:
        return self.username


class BearerTokenAuthentication(JWTAuthentication):
    """``Authorization: Bearer <token>`` authentication."""

    www_authenticate_realm = 'api'

    def get_validated_token(self, raw_token: bytes) -> TokenClaims:
        return verify_token(raw_token)

    def get_user(self, validated_token: TokenClaims):
        if validated_token.is_legacy:
            return LegacyPrincipal(username=validated_token.legacy_username)
        try:
            user = self.user_model.objects.filter(pk=validated_token.subject_id).first()
        except (TypeError, ValueError):
            # ids minted by another store (non-numeric) never match a local user
            user = None
        if user is None or not user.is_active:
            raise Unauthenticated()
        return user


def resolve_optional_principal(request):
    """Return the caller's principal, or None when the token is absent or unusable.

    Used by endpoints that are public but behave differently for staff
    (signup).  A bad token is treated as no token.
    """
    try:
        result = BearerTokenAuthentication().authenticate(request)
    except exceptions.AuthenticationFailed:
        return None
    return result[0] if result else None
