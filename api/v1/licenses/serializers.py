"""
Serializers for the license client API.

Request fields are lenient on purpose: a missing email or device id is
reported by the handlers with the same error codes the clients expect.
"""

from rest_framework import serializers

# Matches the seat columns in accounts.infrastructure.models.
DEVICE_FIELD_MAX_LENGTH = 500


class RedeemRequestSerializer(serializers.Serializer):
    """Serializer for redeem request."""

    email = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    licenseKey = serializers.CharField(
        source="license_key", required=False, allow_blank=True, allow_null=True, default=""
    )


class DeviceRequestSerializer(serializers.Serializer):
    """
    Serializer for assign/release requests.

    ``modelId``/``modelName`` are accepted as aliases of
    ``deviceId``/``deviceName`` for older desktop clients.
    """

    email = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    deviceId = serializers.CharField(
        source="device_id",
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
        max_length=DEVICE_FIELD_MAX_LENGTH,
    )
    deviceName = serializers.CharField(
        source="device_name",
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
        max_length=DEVICE_FIELD_MAX_LENGTH,
    )
    modelId = serializers.CharField(
        source="model_id",
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
        max_length=DEVICE_FIELD_MAX_LENGTH,
    )
    modelName = serializers.CharField(
        source="model_name",
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
        max_length=DEVICE_FIELD_MAX_LENGTH,
    )

    def validate(self, attrs):
        model_id = attrs.pop("model_id", None)
        model_name = attrs.pop("model_name", None)
        attrs["device_id"] = attrs.get("device_id") or model_id or ""
        attrs["device_name"] = attrs.get("device_name") or model_name
        return attrs


class RemoveSeatRequestSerializer(serializers.Serializer):
    """Serializer for remove seat request."""

    email = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    seatId = serializers.CharField(
        source="seat_id", required=False, allow_blank=True, allow_null=True, default=""
    )


class RedeemResponseSerializer(serializers.Serializer):
    """Serializer for RedeemLicenseKeyResponseDTO."""

    seatId = serializers.UUIDField(source="seat_id")
    totalSeats = serializers.IntegerField(source="total_seats")
    usedSeats = serializers.IntegerField(source="used_seats")


class AssignResponseSerializer(serializers.Serializer):
    """Serializer for AssignSeatResponseDTO."""

    seatId = serializers.UUIDField(source="seat_id")
    totalSeats = serializers.IntegerField(source="total_seats")
    usedSeats = serializers.IntegerField(source="used_seats")
    alreadyAssigned = serializers.BooleanField(source="already_assigned")


class ReleaseResponseSerializer(serializers.Serializer):
    """Serializer for ReleaseSeatResponseDTO."""

    released = serializers.BooleanField()
    seatId = serializers.UUIDField(source="seat_id", allow_null=True)
    msg = serializers.CharField(source="message")


class SeatSerializer(serializers.Serializer):
    """Serializer for SeatDTO."""

    id = serializers.UUIDField()
    assignedDeviceId = serializers.CharField(source="assigned_device_id", allow_null=True)
    assignedDeviceName = serializers.CharField(source="assigned_device_name", allow_null=True)
    paymentActive = serializers.BooleanField(source="payment_active")
    revoked = serializers.BooleanField()


class AccountStatusResponseSerializer(serializers.Serializer):
    """Serializer for AccountStatusDTO."""

    email = serializers.CharField()
    totalSeats = serializers.IntegerField(source="total_seats")
    usedSeats = serializers.IntegerField(source="used_seats")
    seats = SeatSerializer(many=True)
    locked = serializers.BooleanField()
    lockReason = serializers.CharField(source="lock_reason", allow_null=True)


class RemoveSeatResponseSerializer(serializers.Serializer):
    """Serializer for RemoveSeatResponseDTO."""

    seatId = serializers.UUIDField(source="seat_id")
    totalSeats = serializers.IntegerField(source="total_seats")
    usedSeats = serializers.IntegerField(source="used_seats")


class ErrorResponseSerializer(serializers.Serializer):
    """Shape of every error response."""

    ok = serializers.BooleanField(default=False)
    error = serializers.CharField()
    msg = serializers.CharField()
