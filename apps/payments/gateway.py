"""Thin wrapper around the Stripe SDK.

Only the calls the payment flows need are exposed; SDK exceptions are
translated into the two errors below so callers never import ``stripe``.
"""

from __future__ import annotations

from functools import lru_cache

import stripe
import structlog
from django.conf import settings  # type: ignore

logger = structlog.get_logger(__name__)


class PaymentGatewayError(Exception):
    """The provider rejected a request or could not be reached."""


class WebhookVerificationError(Exception):
    """A webhook payload failed signature verification or could not be parsed."""


@lru_cache(maxsize=1)
def _configure_client() -> None:
    stripe.default_http_client = stripe.RequestsClient(timeout=settings.PAYMENT_GATEWAY_TIMEOUT)


def create_payment_intent(amount: int, currency: str, metadata: dict[str, str]):
    """Create a PaymentIntent for ``amount`` minor units of ``currency``."""
    _configure_client()
    try:
        intent = stripe.PaymentIntent.create(
            amount=amount,
            currency=currency,
            metadata=metadata,
            api_key=settings.STRIPE_SECRET_KEY,
        )
    except stripe.StripeError as exc:
        logger.error("intent_failed", amount=amount, currency=currency, error=str(exc))
        raise PaymentGatewayError(str(exc)) from exc
    logger.info("intent_created", intent_id=intent.id, amount=amount, currency=currency)
    return intent


def construct_webhook_event(payload: bytes, signature: str):
    """Verify ``payload`` against the endpoint secret and return the event."""
    try:
        return stripe.Webhook.construct_event(payload, signature, settings.STRIPE_WEBHOOK_SECRET)
    except ValueError as exc:
        raise WebhookVerificationError("Invalid payload.") from exc
    except stripe.SignatureVerificationError as exc:
        raise WebhookVerificationError("Invalid signature.") from exc
