"""
Helpers shared by the resource views.

Every response uses the ``{success, message?, data?, count?}`` envelope.
Some paths serve a public method and a staff-only method (booking vs.
listing appointments, for instance); :func:`by_method` routes each HTTP
method to its own DRF view so the public one can skip bearer
authentication entirely.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, DatabaseError, connections
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def db_alias() -> str:
    return getattr(settings, 'CLINIC_DB_ALIAS', DEFAULT_DB_ALIAS)


def ok(data: Any = None, *, message: Optional[str] = None, status_code: int = status.HTTP_200_OK,
       count: bool = False, **extra) -> Response:
    body: Dict[str, Any] = {'success': True}
    if message is not None:
        body['message'] = message
    if count:
        body['count'] = len(data)
    if data is not None:
        body['data'] = data
    body.update(extra)
    return Response(body, status=status_code)


def iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def by_method(**handlers: Callable) -> Callable:
    """Build a view that hands each HTTP method to its own view function.

    ``by_method(GET=list_view, POST=create_view)``.  HEAD falls back to
    GET; unknown methods get a 405 envelope.
    """
    table = {method.upper(): view for method, view in handlers.items()}
    if 'GET' in table:
        table.setdefault('HEAD', table['GET'])
    allowed = ', '.join(sorted(table))

    @csrf_exempt
    def dispatch(request, *args, **kwargs):
        view = table.get(request.method)
        if view is None and request.method == 'OPTIONS':
            view = next(iter(table.values()))
        if view is None:
            resp = JsonResponse(
                {'success': False, 'message': f'Method "{request.method}" not allowed.'},
                status=status.HTTP_405_METHOD_NOT_ALLOWED,
            )
            resp['Allow'] = allowed
            return resp
        return view(request, *args, **kwargs)

    return dispatch


# ---------------------------------------------------------------------
# Service endpoints
# ---------------------------------------------------------------------
def api_index(request):
    return JsonResponse({
        'success': True,
        'message': 'Clinic API is running!',
        'endpoints': {
            'auth': '/api/auth/login | /api/auth/signup',
            'doctors': '/api/doctors',
            'appointments': '/api/appointments',
            'patients': '/api/patients',
            'contact': '/api/contact',
            'blog': '/api/blog',
            'reviews': '/api/reviews',
        },
    })


def healthz(request):
    try:
        with connections[db_alias()].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        return JsonResponse({'success': True, 'db': bool(row and row[0] == 1)})
    except DatabaseError as e:
        logger.error('health check failed: %s', e)
        return JsonResponse({'success': False, 'message': str(e)}, status=500)


def not_found(request, exception=None):
    return JsonResponse({'success': False, 'message': f'Route {request.path} not found.'}, status=404)


def server_error(request):
    return JsonResponse({'success': False, 'message': 'Internal server error.'}, status=500)
