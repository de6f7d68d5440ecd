"""
Admin secret authentication middleware.

This middleware guards the administrative key API with a shared secret
configured for the process. Requests are rejected before any view or
store access happens.
"""

import hmac
import logging
from typing import Callable, Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse

from api.exceptions import error_body
from core.domain.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

ADMIN_SECRET_HEADER = "X-Admin-Secret"
ADMIN_PATH_PREFIX = "/api/admin/"


class AdminSecretMiddleware:
    """
    Middleware for admin secret authentication.

    This middleware:
    1. Leaves every path outside /api/admin/ untouched
    2. Compares the X-Admin-Secret header with settings.ADMIN_SECRET
    3. Returns 401 Unauthorized if the secret is missing, wrong, or
       not configured at all
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Authenticate admin requests, then continue."""
        rejection = self._authenticate(request)
        if rejection is not None:
            return rejection
        return self.get_response(request)

    def _authenticate(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Authenticate an admin API request.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if auth fails, None if successful
        """
        if not request.path.startswith(ADMIN_PATH_PREFIX):
            return None

        expected = getattr(settings, "ADMIN_SECRET", None) or ""
        provided = request.headers.get(ADMIN_SECRET_HEADER) or ""

        if not expected:
            logger.error("ADMIN_SECRET is not configured; rejecting admin request")
            return self._unauthorized()

        if not provided or not hmac.compare_digest(
            provided.encode("utf-8"), expected.encode("utf-8")
        ):
            logger.warning(
                "Rejected admin request with %s admin secret: %s %s",
                "missing" if not provided else "invalid",
                request.method,
                request.path,
            )
            return self._unauthorized()

        return None

    def _unauthorized(self) -> JsonResponse:
        error = UnauthorizedError()
        return JsonResponse(error_body(error.code, error.message), status=401)
