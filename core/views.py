"""
Core views for health checks and system status.
"""

import logging

from asgiref.sync import async_to_sync
from django.db import connection
from django.http import HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from core.domain.exceptions import StoreError
from keys.infrastructure.factory import build_engine

logger = logging.getLogger(__name__)

SERVICE_NAME = "key-auth-service"


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Health check endpoint reporting the number of stored keys."""

    def get(self, _request):
        """Return service health status."""
        engine = build_engine()
        try:
            total = async_to_sync(engine.count)()
        except StoreError as e:
            logger.error("Health check failed: %s", e.message, exc_info=True)
            return JsonResponse(
                {"status": "unhealthy", "service": SERVICE_NAME, "error": {"code": e.code}},
                status=503,
            )
        return JsonResponse({"status": "ok", "service": SERVICE_NAME, "total_keys": total})


@method_decorator(csrf_exempt, name="dispatch")
class HealthDBView(View):
    """Database health check endpoint."""

    def get(self, _request):
        """Check database connectivity."""
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                return JsonResponse({"status": "healthy", "database": "connected"})
        except Exception as e:  # pylint: disable=broad-exception-caught
            return JsonResponse(
                {"status": "unhealthy", "database": "disconnected", "error": str(e)},
                status=503,
            )


@method_decorator(csrf_exempt, name="dispatch")
class MetricsView(View):
    """Prometheus scrape endpoint."""

    def get(self, _request):
        """Return metrics in Prometheus text format."""
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
