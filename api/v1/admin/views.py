"""
Admin API views.

These endpoints are used by administrators to:
- Mint keys
- List every issued key
- Revoke and delete keys

All of them sit behind AdminSecretMiddleware (X-Admin-Secret header).
"""

from dataclasses import asdict

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import validation_error_response
from api.v1.admin.serializers import (
    CreateKeyRequestSerializer,
    CreateKeyResponseSerializer,
    ErrorResponseSerializer,
    KeyListResponseSerializer,
    KeyRequestSerializer,
    MessageResponseSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from core.middleware.auth import ADMIN_SECRET_HEADER
from keys.application.commands.create_key import CreateKeyCommand
from keys.application.commands.delete_key import DeleteKeyCommand
from keys.application.commands.revoke_key import RevokeKeyCommand
from keys.application.handlers.create_key_handler import CreateKeyHandler
from keys.application.handlers.key_lifecycle_handlers import DeleteKeyHandler, RevokeKeyHandler
from keys.application.handlers.list_keys_handler import ListKeysHandler
from keys.application.queries.list_keys import ListKeysQuery
from keys.infrastructure.factory import build_engine

tracer = get_tracer(__name__)

ADMIN_SECRET_PARAMETER = OpenApiParameter(
    name=ADMIN_SECRET_HEADER,
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Shared admin secret",
)

ERROR_RESPONSES = {
    400: ErrorResponseSerializer,
    401: ErrorResponseSerializer,
    503: ErrorResponseSerializer,
}


class CreateKeyView(APIView):
    """View for minting keys."""

    @extend_schema(
        operation_id="create_key",
        summary="Create Key",
        description=(
            "Mint a new key. In fixed-date mode pass expires_in_days (omit for a "
            "key that never expires); in duration mode pass duration "
            "(day, week, month or lifetime)."
        ),
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER],
        request=CreateKeyRequestSerializer,
        responses={201: CreateKeyResponseSerializer, **ERROR_RESPONSES},
    )
    def post(self, request: Request) -> Response:
        """Create a key."""
        return async_to_sync(self._handle_create_key)(request)

    async def _handle_create_key(self, request: Request) -> Response:
        """Async handler for create key."""
        with tracer.start_as_current_span("create_key") as span:
            span.set_attribute("operation", "create_key")

            serializer = CreateKeyRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            handler = CreateKeyHandler(engine=build_engine())
            command = CreateKeyCommand(
                name=serializer.validated_data.get("name"),
                expires_in_days=serializer.validated_data.get("expires_in_days"),
                duration=serializer.validated_data.get("duration"),
            )

            result = await handler.handle(command)

            span.set_attribute("key.policy", result.policy)
            span.set_status(Status(StatusCode.OK))

            response_serializer = CreateKeyResponseSerializer(
                {"success": True, "message": "Key created", **asdict(result)}
            )
            return Response(response_serializer.data, status=status.HTTP_201_CREATED)


class ListKeysView(APIView):
    """View for listing keys."""

    @extend_schema(
        operation_id="list_keys",
        summary="List Keys",
        description="List every issued key, newest first, with derived status.",
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER],
        responses={200: KeyListResponseSerializer, **ERROR_RESPONSES},
    )
    def get(self, request: Request) -> Response:
        """List keys."""
        return async_to_sync(self._handle_list_keys)(request)

    async def _handle_list_keys(self, request: Request) -> Response:
        """Async handler for list keys."""
        with tracer.start_as_current_span("list_keys") as span:
            span.set_attribute("operation", "list_keys")

            handler = ListKeysHandler(engine=build_engine())
            result = await handler.handle(ListKeysQuery())

            span.set_attribute("keys.count", result.total)
            span.set_status(Status(StatusCode.OK))

            response_serializer = KeyListResponseSerializer({"success": True, **asdict(result)})
            return Response(response_serializer.data, status=status.HTTP_200_OK)


class RevokeKeyView(APIView):
    """View for revoking keys."""

    @extend_schema(
        operation_id="revoke_key",
        summary="Revoke Key",
        description="Permanently deactivate a key. Revoking a revoked key succeeds.",
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER],
        request=KeyRequestSerializer,
        responses={
            200: MessageResponseSerializer,
            404: ErrorResponseSerializer,
            **ERROR_RESPONSES,
        },
    )
    def patch(self, request: Request) -> Response:
        """Revoke a key."""
        return async_to_sync(self._handle_revoke_key)(request)

    async def _handle_revoke_key(self, request: Request) -> Response:
        """Async handler for revoke key."""
        with tracer.start_as_current_span("revoke_key") as span:
            span.set_attribute("operation", "revoke_key")

            serializer = KeyRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            key = serializer.validated_data["key"]
            span.set_attribute("key.prefix", key[:8])

            handler = RevokeKeyHandler(engine=build_engine())
            await handler.handle(RevokeKeyCommand(key=key))

            span.set_status(Status(StatusCode.OK))
            return Response(
                {"success": True, "message": "Key revoked"},
                status=status.HTTP_200_OK,
            )


class DeleteKeyView(APIView):
    """View for deleting keys."""

    @extend_schema(
        operation_id="delete_key",
        summary="Delete Key",
        description="Permanently remove a key. A deleted key verifies as invalid.",
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER],
        request=KeyRequestSerializer,
        responses={
            200: MessageResponseSerializer,
            404: ErrorResponseSerializer,
            **ERROR_RESPONSES,
        },
    )
    def delete(self, request: Request) -> Response:
        """Delete a key."""
        return async_to_sync(self._handle_delete_key)(request)

    async def _handle_delete_key(self, request: Request) -> Response:
        """Async handler for delete key."""
        with tracer.start_as_current_span("delete_key") as span:
            span.set_attribute("operation", "delete_key")

            serializer = KeyRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            key = serializer.validated_data["key"]
            span.set_attribute("key.prefix", key[:8])

            handler = DeleteKeyHandler(engine=build_engine())
            await handler.handle(DeleteKeyCommand(key=key))

            span.set_status(Status(StatusCode.OK))
            return Response(
                {"success": True, "message": "Key deleted"},
                status=status.HTTP_200_OK,
            )
