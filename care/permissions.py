"""
Role based access control.

Role checks always come after ``IsAuthenticated`` in a view's
permission list, so an anonymous caller gets 401 rather than 403.
"""
from __future__ import annotations

from typing import Iterable

from rest_framework.permissions import BasePermission

from care.exceptions import Forbidden



def role_permitted(role: str | None, allowed: Iterable[str]) -> bool:
    return role is not None and role in set(allowed)


def allow_roles(*roles: str) -> type[BasePermission]:
    """Build a permission class admitting only ``roles``."""

    class RoleAllowList(BasePermission):
        allowed_roles = frozenset(roles)

        def has_permission(self, request, view) -> bool:  # type: ignore[override]
            role = getattr(request.user, 'role', None)
            if role_permitted(role, self.allowed_roles):
                return True
            raise Forbidden(f"Access denied. Role '{role}' is not permitted.")

    RoleAllowList.__name__ = 'Allow' + ''.join(r.title() for r in roles)
    return RoleAllowList


IsAdmin = allow_roles('admin')
IsFrontDesk = allow_roles('admin', 'receptionist')
