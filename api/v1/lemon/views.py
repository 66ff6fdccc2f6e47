"""
Payment provider webhook view.

Lemon Squeezy posts signed JSON here. The signature covers the raw body,
so the body is read as bytes and never parsed by DRF.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.infrastructure.repositories.django_account_repository import (
    DjangoAccountRepository,
)
from api.v1.licenses.serializers import ErrorResponseSerializer
from billing.application.commands.reconcile_provider_event import (
    ReconcileProviderEventCommand,
)
from billing.application.handlers.reconcile_provider_event_handler import (
    ReconcileProviderEventHandler,
)
from billing.infrastructure.seat_quantity.factory import build_seat_quantity
from core.instrumentation import Status, StatusCode, get_tracer

_account_repo = DjangoAccountRepository()

tracer = get_tracer(__name__)


class LemonWebhookView(APIView):
    """View receiving provider webhooks."""

    parser_classes = []

    @extend_schema(
        operation_id="lemon_webhook",
        summary="Payment Provider Webhook",
        description=(
            "Signed Lemon Squeezy event. Answers 200 for every verified "
            "delivery, including events that are ignored or already processed."
        ),
        tags=["Webhooks"],
        parameters=[
            OpenApiParameter(
                name="X-Signature",
                type=str,
                location=OpenApiParameter.HEADER,
                required=True,
                description="Hex HMAC-SHA256 of the raw body",
            ),
            OpenApiParameter(
                name="X-Event-Name",
                type=str,
                location=OpenApiParameter.HEADER,
                required=False,
                description="Event name, used when the body has none",
            ),
        ],
        request=None,
        responses={
            200: {"description": "Accepted or already processed"},
            400: ErrorResponseSerializer,
            500: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Receive a provider webhook."""
        return async_to_sync(self._handle_webhook)(request)

    async def _handle_webhook(self, request: Request) -> Response:
        """Async handler for the webhook."""
        with tracer.start_as_current_span("lemon_webhook") as span:
            span.set_attribute("operation", "lemon_webhook")

            command = ReconcileProviderEventCommand(
                raw_body=request.body,
                signature=request.headers.get("X-Signature"),
                header_event_name=request.headers.get("X-Event-Name"),
            )
            handler = ReconcileProviderEventHandler(
                account_repository=_account_repo,
                signing_secret=settings.LEMONSQUEEZY_SIGNING_SECRET,
                seat_quantity=build_seat_quantity(),
                create_seats_on_order=settings.CREATE_SEATS_ON_ORDER,
            )

            try:
                result = await handler.handle(command)
            except Exception as e:
                span.set_attribute("error", getattr(e, "code", type(e).__name__))
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            span.set_attribute("event_name", result.event_name)
            span.set_attribute("outcome", result.outcome)
            span.set_status(Status(StatusCode.OK))

            return Response(
                {
                    "ok": True,
                    "outcome": result.outcome,
                    "eventName": result.event_name,
                    "eventId": result.event_id,
                },
                status=status.HTTP_200_OK,
            )
