"""
Serializers for Client API endpoints.
"""

from rest_framework import serializers


class VerifyKeyRequestSerializer(serializers.Serializer):
    """Serializer for verify key request."""

    # Missing values are reported by the engine as MISSING_KEY / MISSING_DEVICE_ID.
    key = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    device_id = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )
    device_name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )


class VerifiedKeySerializer(serializers.Serializer):
    """Serializer for VerifiedKeyDTO."""

    name = serializers.CharField()
    uses = serializers.IntegerField()
    expires_at = serializers.DateTimeField(allow_null=True)
    type = serializers.CharField(allow_null=True, required=False)
    device_name = serializers.CharField(allow_null=True, required=False)

    def to_representation(self, instance):
        """Omit device fields for keys that are not device-bound."""
        data = super().to_representation(instance)
        if data.get("type") is None:
            data.pop("type", None)
            data.pop("device_name", None)
        return data


class VerifyKeyResponseSerializer(serializers.Serializer):
    """Serializer for VerifyKeyResponseDTO."""

    success = serializers.BooleanField()
    message = serializers.CharField()
    user = VerifiedKeySerializer()
