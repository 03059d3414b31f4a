"""
Issue and verify the signed bearer tokens handed out at login.

Tokens are HS256 JWTs carrying ``userId``, ``role`` and a 24 hour
``exp``.  Verification also accepts the older username-only tokens
that predate user ids; those always resolve to the ``admin`` role and
carry no subject id.  Nothing here touches the database.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from rest_framework_simplejwt.exceptions import TokenBackendError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.state import token_backend
from rest_framework_simplejwt.tokens import AccessToken

from care.exceptions import InvalidToken

LEGACY_ROLE = 'admin'
ROLE_CLAIM = 'role'
LEGACY_USERNAME_CLAIM = 'username'


@dataclass(frozen=True)
class TokenClaims:
    subject_id: Optional[Any]
    role: str
    legacy_username: Optional[str] = None

    @property
    def is_legacy(self) -> bool:
        return self.subject_id is None


def issue_token(subject_id: Any, role: str, *, issued_at: Optional[datetime] = None) -> str:
    """Return a signed token for ``subject_id`` valid for ACCESS_TOKEN_LIFETIME."""
    token = AccessToken()
    if issued_at is not None:
        token.set_iat(at_time=issued_at)
        token.set_exp(from_time=issued_at, lifetime=token.lifetime)
    token[api_settings.USER_ID_CLAIM] = subject_id
    token[ROLE_CLAIM] = role
    return str(token)


def verify_token(raw: str | bytes) -> TokenClaims:
    """Decode ``raw`` and return its claims, or raise :class:`InvalidToken`."""
    try:
        payload = token_backend.decode(raw, verify=True)
    except TokenBackendError as exc:
        raise InvalidToken() from exc

    # Tokens minted before simplejwt carry no token_type claim.
    token_type = payload.get(api_settings.TOKEN_TYPE_CLAIM)
    if token_type is not None and token_type != AccessToken.token_type:
        raise InvalidToken()

    subject_id = payload.get(api_settings.USER_ID_CLAIM)
    if subject_id is not None:
        return TokenClaims(subject_id=subject_id, role=payload.get(ROLE_CLAIM, ''))

    username = payload.get(LEGACY_USERNAME_CLAIM)
    if username:
        return TokenClaims(subject_id=None, role=LEGACY_ROLE, legacy_username=username)
    raise InvalidToken()
