"""Payment endpoints: intent creation, client confirmation, details and the Stripe webhook."""

from __future__ import annotations

import structlog
from django.http import JsonResponse  # type: ignore
from django.views.decorators.csrf import csrf_exempt  # type: ignore
from django.views.decorators.http import require_POST  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.serializers import BookingSerializer
from apps.users.permissions import IsUserPrincipal
from shared.exceptions import PaymentProviderUnavailable
from shared.responses import success_response

from . import gateway, services
from .serializers import PaymentConfirmSerializer, PaymentIntentRequestSerializer, PaymentSerializer

logger = structlog.get_logger(__name__)


class CreatePaymentIntentView(APIView):
    permission_classes = [IsAuthenticated, IsUserPrincipal]

    def post(self, request):  # type: ignore
        serializer = PaymentIntentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            intent = services.create_intent(request.user, **serializer.validated_data)
        except gateway.PaymentGatewayError:
            raise PaymentProviderUnavailable()
        return success_response(intent)


class ConfirmPaymentView(APIView):
    permission_classes = [IsAuthenticated, IsUserPrincipal]

    def post(self, request):  # type: ignore
        serializer = PaymentConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.confirm_payment(request.user, **serializer.validated_data)
        return success_response(BookingSerializer(booking).data)


class PaymentDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, booking_id: str):  # type: ignore
        payment = services.payment_details_for(request.user, booking_id)
        return success_response(PaymentSerializer(payment).data)


@csrf_exempt
@require_POST
def stripe_webhook(request):
    """Verify and apply a Stripe event; the raw body is needed for the signature."""
    signature = request.headers.get("Stripe-Signature", "")
    try:
        event = gateway.construct_webhook_event(request.body, signature)
    except gateway.WebhookVerificationError as exc:
        logger.warning("webhook_rejected", reason=str(exc))
        return JsonResponse({"success": False, "error": str(exc)}, status=400)

    services.handle_webhook_event(event)
    return JsonResponse({"received": True})
