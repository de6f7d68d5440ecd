"""
Serializers for Admin API endpoints.
"""

from rest_framework import serializers

from keys.domain.key_record import MAX_EXPIRES_IN_DAYS, MAX_NAME_LENGTH


class CreateKeyRequestSerializer(serializers.Serializer):
    """Serializer for create key request."""

    # Blank names are rejected by the engine with a VALIDATION_ERROR.
    name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=MAX_NAME_LENGTH
    )
    expires_in_days = serializers.IntegerField(
        required=False, allow_null=True, max_value=MAX_EXPIRES_IN_DAYS
    )
    duration = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="One of day, week, month, lifetime (duration mode only)",
    )


class KeyRequestSerializer(serializers.Serializer):
    """Serializer for revoke and delete requests addressing one key."""

    key = serializers.CharField(required=True)


class CreateKeyResponseSerializer(serializers.Serializer):
    """Serializer for CreatedKeyDTO."""

    success = serializers.BooleanField()
    message = serializers.CharField()
    key = serializers.CharField()
    name = serializers.CharField()
    policy = serializers.CharField()
    expires_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()


class KeyListItemSerializer(serializers.Serializer):
    """Serializer for KeyListItemDTO."""

    key = serializers.CharField()
    name = serializers.CharField()
    active = serializers.BooleanField()
    policy = serializers.CharField()
    status = serializers.CharField()
    expired = serializers.BooleanField()
    uses = serializers.IntegerField()
    created_at = serializers.DateTimeField()
    last_used_at = serializers.DateTimeField(allow_null=True)
    activated_at = serializers.DateTimeField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)
    device_id = serializers.CharField(allow_null=True)
    device_name = serializers.CharField(allow_null=True)


class KeyListResponseSerializer(serializers.Serializer):
    """Serializer for KeyListDTO."""

    success = serializers.BooleanField()
    total = serializers.IntegerField()
    keys = KeyListItemSerializer(many=True)


class MessageResponseSerializer(serializers.Serializer):
    """Serializer for plain success messages."""

    success = serializers.BooleanField()
    message = serializers.CharField()


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.CharField()
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    """Serializer documenting the error body."""

    success = serializers.BooleanField()
    message = serializers.CharField()
    error = ErrorDetailSerializer()
