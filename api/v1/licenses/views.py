"""
License client API views.

These endpoints are used by the desktop application to:
- Redeem license keys into seats
- Assign and release seats for devices
- Read account status
And by administrators to remove seats.
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.application.commands.assign_seat import AssignSeatCommand
from accounts.application.commands.release_seat import ReleaseSeatCommand
from accounts.application.commands.remove_seat import RemoveSeatCommand
from accounts.application.handlers.assign_seat_handler import AssignSeatHandler
from accounts.application.handlers.get_account_status_handler import GetAccountStatusHandler
from accounts.application.handlers.release_seat_handler import ReleaseSeatHandler
from accounts.application.handlers.remove_seat_handler import RemoveSeatHandler
from accounts.application.queries.get_account_status import GetAccountStatusQuery
from accounts.infrastructure.repositories.django_account_repository import (
    DjangoAccountRepository,
)
from api.exceptions import error_body
from api.v1.licenses.serializers import (
    AccountStatusResponseSerializer,
    AssignResponseSerializer,
    DeviceRequestSerializer,
    ErrorResponseSerializer,
    RedeemRequestSerializer,
    RedeemResponseSerializer,
    ReleaseResponseSerializer,
    RemoveSeatRequestSerializer,
    RemoveSeatResponseSerializer,
)
from core.domain.exceptions import SeatNotFoundError
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.redeem_license_key import RedeemLicenseKeyCommand
from licenses.application.handlers.redeem_license_key_handler import RedeemLicenseKeyHandler
from licenses.infrastructure.key_lookup.factory import build_key_lookup
from licenses.infrastructure.repositories.django_redemption_registry import (
    DjangoRedemptionRegistry,
)

# Initialize repositories (in production, use DI container)
_account_repo = DjangoAccountRepository()
_redemption_registry = DjangoRedemptionRegistry()

tracer = get_tracer(__name__)

ERROR_RESPONSES = {
    400: ErrorResponseSerializer,
    403: ErrorResponseSerializer,
    409: ErrorResponseSerializer,
    503: ErrorResponseSerializer,
}


def _invalid_request(span, errors) -> Response:
    span.set_attribute("error", "validation_failed")
    span.set_status(Status(StatusCode.ERROR, "Validation failed"))
    return Response(
        {**error_body("invalid_request", "invalid request"), "details": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


class RedeemView(APIView):
    """View for redeeming license keys."""

    @extend_schema(
        operation_id="redeem_license_key",
        summary="Redeem License Key",
        description=(
            "Exchange a one-time license key for one new, unassigned seat. "
            "A key can be redeemed once across all accounts."
        ),
        tags=["Licenses"],
        request=RedeemRequestSerializer,
        responses={
            200: RedeemResponseSerializer,
            **ERROR_RESPONSES,
            422: ErrorResponseSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Redeem a license key."""
        return async_to_sync(self._handle_redeem)(request)

    async def _handle_redeem(self, request: Request) -> Response:
        """Async handler for redeem."""
        with tracer.start_as_current_span("redeem_license_key") as span:
            span.set_attribute("operation", "redeem_license_key")

            serializer = RedeemRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _invalid_request(span, serializer.errors)

            handler = RedeemLicenseKeyHandler(
                account_repository=_account_repo,
                redemption_registry=_redemption_registry,
                key_lookup=build_key_lookup(),
            )
            command = RedeemLicenseKeyCommand(
                email=serializer.validated_data["email"],
                license_key=serializer.validated_data["license_key"],
            )

            try:
                result = await handler.handle(command)
            except Exception as e:
                span.set_attribute("error", getattr(e, "code", type(e).__name__))
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            span.set_attribute("seat.id", str(result.seat_id))
            span.set_attribute("total_seats", result.total_seats)
            span.set_status(Status(StatusCode.OK))

            return Response(
                {"ok": True, **RedeemResponseSerializer(result).data},
                status=status.HTTP_200_OK,
            )


class AssignView(APIView):
    """View for binding a seat to a device."""

    @extend_schema(
        operation_id="assign_seat",
        summary="Assign Seat",
        description=(
            "Bind the first free seat to a device. Assigning a device that "
            "already holds a seat returns that seat."
        ),
        tags=["Licenses"],
        request=DeviceRequestSerializer,
        responses={200: AssignResponseSerializer, **ERROR_RESPONSES},
    )
    def post(self, request: Request) -> Response:
        """Assign a seat."""
        return async_to_sync(self._handle_assign)(request)

    async def _handle_assign(self, request: Request) -> Response:
        """Async handler for assign."""
        with tracer.start_as_current_span("assign_seat") as span:
            span.set_attribute("operation", "assign_seat")

            serializer = DeviceRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _invalid_request(span, serializer.errors)

            command = AssignSeatCommand(
                email=serializer.validated_data["email"],
                device_id=serializer.validated_data["device_id"],
                device_name=serializer.validated_data["device_name"],
            )
            span.set_attribute("device_id", command.device_id or "")

            try:
                result = await AssignSeatHandler(account_repository=_account_repo).handle(command)
            except Exception as e:
                span.set_attribute("error", getattr(e, "code", type(e).__name__))
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            span.set_attribute("seat.id", str(result.seat_id))
            span.set_status(Status(StatusCode.OK))

            body = {"ok": True, **AssignResponseSerializer(result).data}
            if result.already_assigned:
                body["msg"] = "already assigned"
            return Response(body, status=status.HTTP_200_OK)


class ReleaseView(APIView):
    """View for clearing a device binding."""

    @extend_schema(
        operation_id="release_seat",
        summary="Release Seat",
        description=(
            "Free the seat held by a device. Succeeds when the device holds no "
            "seat, and on locked accounts."
        ),
        tags=["Licenses"],
        request=DeviceRequestSerializer,
        responses={200: ReleaseResponseSerializer, 400: ErrorResponseSerializer},
    )
    def post(self, request: Request) -> Response:
        """Release a seat."""
        return async_to_sync(self._handle_release)(request)

    async def _handle_release(self, request: Request) -> Response:
        """Async handler for release."""
        with tracer.start_as_current_span("release_seat") as span:
            span.set_attribute("operation", "release_seat")

            serializer = DeviceRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _invalid_request(span, serializer.errors)

            command = ReleaseSeatCommand(
                email=serializer.validated_data["email"],
                device_id=serializer.validated_data["device_id"],
            )
            span.set_attribute("device_id", command.device_id or "")

            result = await ReleaseSeatHandler(account_repository=_account_repo).handle(command)

            span.set_attribute("released", result.released)
            span.set_status(Status(StatusCode.OK))
            return Response(
                {"ok": True, **ReleaseResponseSerializer(result).data},
                status=status.HTTP_200_OK,
            )


class StatusView(APIView):
    """View for reading account status."""

    @extend_schema(
        operation_id="account_status",
        summary="Account Status",
        description="Seats, seat usage and lock state of an account.",
        tags=["Licenses"],
        parameters=[
            OpenApiParameter(
                name="email",
                type=str,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Account email (case-insensitive)",
            ),
        ],
        responses={200: AccountStatusResponseSerializer, 400: ErrorResponseSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get account status."""
        return async_to_sync(self._handle_status)(request)

    async def _handle_status(self, request: Request) -> Response:
        """Async handler for status."""
        with tracer.start_as_current_span("account_status") as span:
            span.set_attribute("operation", "account_status")

            query = GetAccountStatusQuery(email=request.query_params.get("email", ""))
            result = await GetAccountStatusHandler(account_repository=_account_repo).handle(query)

            span.set_attribute("total_seats", result.total_seats)
            span.set_attribute("locked", result.locked)
            span.set_status(Status(StatusCode.OK))
            return Response(
                {"ok": True, **AccountStatusResponseSerializer(result).data},
                status=status.HTTP_200_OK,
            )


class RemoveSeatView(APIView):
    """Administrative view for deleting a seat."""

    @extend_schema(
        operation_id="remove_seat",
        summary="Remove Seat",
        description=(
            "Delete a seat. The license key that created it stays consumed. "
            "Requires the admin key."
        ),
        tags=["Licenses"],
        parameters=[
            OpenApiParameter(
                name="X-API-Key",
                type=str,
                location=OpenApiParameter.HEADER,
                required=True,
                description="Administrator API key",
            ),
        ],
        request=RemoveSeatRequestSerializer,
        responses={
            200: RemoveSeatResponseSerializer,
            400: ErrorResponseSerializer,
            401: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Remove a seat."""
        return async_to_sync(self._handle_remove_seat)(request)

    async def _handle_remove_seat(self, request: Request) -> Response:
        """Async handler for remove seat."""
        with tracer.start_as_current_span("remove_seat") as span:
            span.set_attribute("operation", "remove_seat")

            serializer = RemoveSeatRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _invalid_request(span, serializer.errors)

            try:
                seat_id = uuid.UUID(str(serializer.validated_data["seat_id"]))
            except ValueError:
                span.set_attribute("error", "seat_not_found")
                raise SeatNotFoundError()

            span.set_attribute("seat.id", str(seat_id))
            command = RemoveSeatCommand(email=serializer.validated_data["email"], seat_id=seat_id)
            result = await RemoveSeatHandler(account_repository=_account_repo).handle(command)

            span.set_status(Status(StatusCode.OK))
            return Response(
                {"ok": True, **RemoveSeatResponseSerializer(result).data},
                status=status.HTTP_200_OK,
            )
