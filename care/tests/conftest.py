import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from care.models import User
from care.services.tokens import issue_token


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api():
    return APIClient()


@pytest.fixture
def make_user(db):
    def _make(username, role='receptionist', password='secret123', **extra):
        return User.objects.create_user(username=username, password=password, role=role,
                                        name=extra.pop('name', username.title()), **extra)
    return _make


@pytest.fixture
def client_for():
    """APIClient sending a bearer token for ``user``."""
    def _client(user):
        c = APIClient()
        c.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user.pk, user.role)}')
        return c
    return _client
