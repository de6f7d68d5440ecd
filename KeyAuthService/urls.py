"""
URL configuration for KeyAuthService project.
"""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from core.views import HealthDBView, HealthView, MetricsView

urlpatterns = [
    # Health check endpoints
    path("", HealthView.as_view(), name="root"),
    path("health/", HealthView.as_view(), name="health"),
    path("health/db/", HealthDBView.as_view(), name="health-db"),
    path("metrics", MetricsView.as_view(), name="metrics"),
    # Read-only key listing for staff users
    path("django-admin/", admin.site.urls),
    # API endpoints
    path("api/admin/", include("api.v1.admin.urls")),
    path("api/", include("api.v1.client.urls")),
    # OpenAPI Schema
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    # Swagger UI
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    # ReDoc
    path(
        "api/redoc/",
        SpectacularRedocView.as_view(url_name="schema"),
        name="redoc",
    ),
]
