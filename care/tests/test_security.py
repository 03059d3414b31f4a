import os
import subprocess
import sys
from datetime import timedelta
from pathlib import Path

import jwt
import pytest
from django.conf import settings
from django.utils import timezone
from rest_framework.test import APIClient

from care.permissions import role_permitted
from care.services.tokens import issue_token
from care.throttles import LoginRateThrottle

pytestmark = pytest.mark.django_db


def _bearer(raw):
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f'Bearer {raw}')
    return c


def test_role_permitted():
    assert role_permitted('admin', ['admin', 'receptionist'])
    assert not role_permitted('doctor', ['admin', 'receptionist'])
    assert not role_permitted(None, ['admin'])


def test_missing_token_is_rejected(api):
    r = api.get('/api/appointments')
    assert r.status_code == 401
    assert r.data == {'success': False, 'message': 'Not authorized. No token provided.'}


def test_other_auth_scheme_counts_as_missing(api):
    api.credentials(HTTP_AUTHORIZATION='Basic Zm9vOmJhcg==')
    r = api.get('/api/patients')
    assert r.status_code == 401
    assert r.data['message'] == 'Not authorized. No token provided.'


def test_expired_token_is_rejected(make_user):
    user = make_user('desk')
    raw = issue_token(user.pk, user.role, issued_at=timezone.now() - timedelta(hours=25))
    r = _bearer(raw).get('/api/appointments/today')
    assert r.status_code == 401
    assert r.data == {'success': False, 'message': 'Token is invalid or expired.'}


def test_deactivated_user_is_locked_out_with_a_live_token(make_user, client_for):
    user = make_user('desk')
    client = client_for(user)
    assert client.get('/api/auth/me').status_code == 200

    user.is_active = False
    user.save()
    r = client.get('/api/auth/me')
    assert r.status_code == 401
    assert r.data['message'] == 'User not found or inactive.'


def test_token_for_deleted_user_is_rejected():
    r = _bearer(issue_token(9999, 'admin')).get('/api/auth/me')
    assert r.status_code == 401
    assert r.data['message'] == 'User not found or inactive.'


def test_legacy_token_acts_as_admin():
    raw = jwt.encode({'username': 'boss', 'exp': timezone.now() + timedelta(hours=1)},
                     settings.SIMPLE_JWT['SIGNING_KEY'], algorithm='HS256')
    client = _bearer(raw)
    r = client.get('/api/auth/me')
    assert r.status_code == 200
    assert r.data['user']['role'] == 'admin'
    assert r.data['user']['username'] == 'boss'
    # admin-only endpoint
    assert client.get('/api/contact').status_code == 200


def test_role_allow_list_returns_403(make_user, client_for):
    doctor = make_user('doc', role='doctor')
    r = client_for(doctor).get('/api/auth/users')
    assert r.status_code == 403
    assert r.data == {'success': False, 'message': "Access denied. Role 'doctor' is not permitted."}


def test_public_endpoints_ignore_stale_tokens():
    client = _bearer('garbage.token.value')
    assert client.get('/api/doctors').status_code == 200
    r = client.post('/api/contact', {'fullName': 'Ann', 'email': 'ann@example.com', 'message': 'Hi'}, format='json')
    assert r.status_code == 201


def test_unknown_route_uses_envelope(api):
    r = api.get('/api/nothing-here')
    assert r.status_code == 404
    assert r.json()['success'] is False


def test_method_not_allowed_uses_envelope(api):
    r = api.delete('/api/appointments')
    assert r.status_code == 405
    assert r.json()['success'] is False


def test_login_is_throttled(make_user):
    make_user('desk')
    client = APIClient()
    rate = LoginRateThrottle().get_rate()
    limit = int(rate.split('/')[0])
    for _ in range(limit):
        client.post('/api/auth/login', {'username': 'desk', 'password': 'wrong'}, format='json')
    r = client.post('/api/auth/login', {'username': 'desk', 'password': 'wrong'}, format='json')
    assert r.status_code == 429
    assert r.data['success'] is False


@pytest.mark.parametrize('first', ['care.exceptions', 'care.authentication', 'care.services.tokens'])
def test_modules_import_in_any_order(first):
    # a fresh interpreter, so the import order is not decided by what the test run already loaded
    code = f'import django; django.setup(); import {first}; import care.routers'
    env = {**os.environ, 'DJANGO_SETTINGS_MODULE': 'clinic.settings'}
    done = subprocess.run([sys.executable, '-c', code], cwd=Path(__file__).resolve().parents[2],
                          env=env, capture_output=True, text=True)
    assert done.returncode == 0, done.stderr
