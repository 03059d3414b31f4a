"""
Account endpoints: signup, login, the current user and user admin.

Signup and login are public.  Signup still looks at the bearer token,
when one is sent, to decide who is creating the account; a token that
fails verification is ignored and the request is treated as anonymous.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from care.authentication import resolve_optional_principal
from care.exceptions import BadCredentials, Forbidden
from care.permissions import IsFrontDesk
from care.serializers.auth import LoginSerializer, SignupSerializer
from care.services import accounts
from care.services.audit import log_action
from care.throttles import LoginRateThrottle
from care.views.common import iso, ok


def serialize_user(user) -> dict:
    return {
        'id': user.pk,
        'name': user.name,
        'username': user.username,
        'email': getattr(user, 'email', ''),
        'role': user.role,
        'isActive': user.is_active,
        'lastLogin': iso(getattr(user, 'last_login', None)),
        'createdAt': iso(getattr(user, 'date_joined', None)),
    }


def _client_ip(request):
    return request.META.get('REMOTE_ADDR')


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def signup_view(request):
    s = SignupSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    creator = resolve_optional_principal(request)
    user, token = accounts.signup(creator=creator, **s.validated_data)
    log_action(user=creator, action='signup', object_type='user', object_id=user.pk,
               detail={'username': user.username, 'role': user.role, 'ip': _client_ip(request)})
    return ok(
        message=f'{user.role.capitalize()} account created successfully!',
        status_code=status.HTTP_201_CREATED,
        token=token,
        user=serialize_user(user),
    )


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    try:
        user, token = accounts.login(**s.validated_data)
    except (BadCredentials, Forbidden) as exc:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'reason': exc.default_code, 'username': username,
                           'ip': _client_ip(request)})
        raise
    log_action(user=user, action='login', object_type='user', object_id=user.pk,
               detail={'result': 'ok', 'ip': _client_ip(request)})
    return ok(message=f'Welcome back, {user.name}!', token=token, user=serialize_user(user))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return ok(user=serialize_user(request.user))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsFrontDesk])
def list_users_view(request):
    users = [serialize_user(u) for u in accounts.list_users()]
    return ok(users, count=True)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsFrontDesk])
def delete_user_view(request, pk: int):
    user = accounts.delete_user(pk)
    log_action(user=request.user, action='delete_user', object_type='user', object_id=pk,
               detail={'username': user.username})
    return ok(message='User deleted.')
