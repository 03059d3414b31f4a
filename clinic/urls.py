"""
URL configuration for the clinic backend project.

The Django admin, the API routes of the ``care`` app, and OpenAPI
documentation at ``/swagger/`` and ``/redoc/``.  Unknown URLs and
server errors answer with the API's JSON envelope.
"""
from django.contrib import admin
from django.urls import include, path

from rest_framework import permissions
from drf_yasg import openapi
from drf_yasg.views import get_schema_view

api_info = openapi.Info(
    title="Clinic Backend API",
    default_version='v1',
    description="Appointments, patients, staff accounts and website content for the clinic.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('care.routers')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]

handler404 = 'care.views.common.not_found'
handler500 = 'care.views.common.server_error'
