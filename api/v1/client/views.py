"""
Client API views.

Used by client applications to verify a key and, for device-bound keys,
activate it on the calling device.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import validation_error_response
from api.v1.admin.serializers import ErrorResponseSerializer
from api.v1.client.serializers import VerifyKeyRequestSerializer, VerifyKeyResponseSerializer
from core.instrumentation import Status, StatusCode, get_tracer
from keys.application.commands.verify_key import VerifyKeyCommand
from keys.application.handlers.verify_key_handler import VerifyKeyHandler
from keys.infrastructure.factory import build_engine

tracer = get_tracer(__name__)


class VerifyKeyView(APIView):
    """View for verifying keys."""

    @extend_schema(
        operation_id="verify_key",
        summary="Verify Key",
        description=(
            "Check a key and record its use. Duration keys are activated and "
            "bound to device_id on their first successful verification."
        ),
        tags=["Client API"],
        request=VerifyKeyRequestSerializer,
        responses={
            200: VerifyKeyResponseSerializer,
            400: ErrorResponseSerializer,
            401: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Verify a key."""
        return async_to_sync(self._handle_verify_key)(request)

    async def _handle_verify_key(self, request: Request) -> Response:
        """Async handler for verify key."""
        with tracer.start_as_current_span("verify_key") as span:
            span.set_attribute("operation", "verify_key")

            serializer = VerifyKeyRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            key = serializer.validated_data.get("key")
            if key:
                span.set_attribute("key.prefix", key[:8])

            handler = VerifyKeyHandler(engine=build_engine())
            command = VerifyKeyCommand(
                key=key,
                device_id=serializer.validated_data.get("device_id"),
                device_name=serializer.validated_data.get("device_name"),
            )

            result = await handler.handle(command)

            span.set_attribute("key.uses", result.user.uses)
            span.set_status(Status(StatusCode.OK))
            return Response(
                VerifyKeyResponseSerializer(result).data,
                status=status.HTTP_200_OK,
            )
