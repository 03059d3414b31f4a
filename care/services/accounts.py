"""
Staff accounts: signup, login and user administration.

Receptionists may register themselves; doctor accounts must be created
by a signed-in admin or receptionist.  Passwords are hashed with the
project's password hashers and never leave this module.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from django.conf import settings
from django.db import IntegrityError
from django.utils import timezone

from care.exceptions import BadCredentials, Conflict, Forbidden, NotFound, ValidationError
from care.models import User
from care.services.tokens import issue_token

logger = logging.getLogger(__name__)

SIGNUP_ROLES = (User.ROLE_DOCTOR, User.ROLE_RECEPTIONIST)
CREATOR_ROLES = (User.ROLE_ADMIN, User.ROLE_RECEPTIONIST)

BAD_CREDENTIALS_MESSAGE = 'Invalid username or password.'


def _min_password_length() -> int:
    return getattr(settings, 'MIN_PASSWORD_LENGTH', 6)


def signup(*, name: str, username: str, password: str, role: str,
           email: Optional[str] = None, creator=None) -> Tuple[User, str]:
    """Create a doctor or receptionist account and return it with a fresh token.

    ``creator`` is the principal behind the request's bearer token, or
    None for an anonymous request.
    """
    if not name or not username or not password or not role:
        raise ValidationError('Name, username, password, and role are required.')
    if role not in SIGNUP_ROLES:
        raise ValidationError('Role must be doctor or receptionist.')
    if len(password) < _min_password_length():
        raise ValidationError(f'Password must be at least {_min_password_length()} characters.')

    creator_role = getattr(creator, 'role', None)
    if role == User.ROLE_DOCTOR and creator_role not in CREATOR_ROLES:
        raise Forbidden('Only admin or receptionist can create doctor accounts.')
    if role == User.ROLE_RECEPTIONIST and creator is not None and creator_role not in CREATOR_ROLES:
        raise Forbidden('Only admin or receptionist can create receptionist accounts.')

    username = username.strip().lower()
    if User.objects.filter(username=username).exists():
        raise Conflict('Username already taken. Please choose another.')

    user = User(name=name, username=username, email=(email or '').lower(), role=role)
    user.set_password(password)
    try:
        user.save()
    except IntegrityError:
        # lost a race against a concurrent signup with the same username
        raise Conflict('Username already exists.')
    logger.info('account %s created with role %s', user.username, role)
    return user, issue_token(user.pk, user.role)


def login(*, username: str, password: str) -> Tuple[User, str]:
    if not username or not password:
        raise ValidationError('Please provide username and password.')

    user = User.objects.filter(username=username.strip().lower()).first()
    if user is None:
        logger.warning('login failed: unknown username %r', username)
        raise BadCredentials(BAD_CREDENTIALS_MESSAGE)
    if not user.is_active:
        raise Forbidden('Account is deactivated. Contact admin.')
    if not user.check_password(password):
        logger.warning('login failed: bad password for %s', user.username)
        raise BadCredentials(BAD_CREDENTIALS_MESSAGE)

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    return user, issue_token(user.pk, user.role)


def list_users() -> List[User]:
    return list(User.objects.order_by('-date_joined', '-id'))


def delete_user(pk: int) -> User:
    user = User.objects.filter(pk=pk).first()
    if user is None:
        raise NotFound('User not found.')
    user.delete()
    return user
