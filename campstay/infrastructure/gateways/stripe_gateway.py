import asyncio
import json
import logging
from decimal import Decimal

import stripe

from campstay.application.interfaces.payment_gateway import (
    PaymentGateway,
    PaymentIntentResult,
    RefundResult,
)
from campstay.domain.entities.payment import PaymentEvent
from campstay.domain.errors import WebhookVerificationError
from campstay.domain.value_objects.money import Money
from campstay.infrastructure.circuit_breaker import CircuitBreakerError, stripe_breaker

logger = logging.getLogger(__name__)


class StripePaymentGateway(PaymentGateway):
    """
    Stripe adapter.

    The SDK is synchronous, so every call runs in a worker thread through the
    circuit breaker; the event loop is never blocked on the network.
    """

    def __init__(self, api_key: str | None, webhook_secret: str | None) -> None:
        stripe.api_key = api_key
        stripe.max_network_retries = 2
        self._webhook_secret = webhook_secret

    async def _call(self, func, **kwargs):
        try:
            return await asyncio.to_thread(stripe_breaker.call, func, **kwargs)
        except CircuitBreakerError as e:
            logger.error(
                "Stripe circuit breaker is open - service unavailable",
                extra={"circuit_state": str(e)},
            )
            raise
        except stripe.StripeError as e:
            logger.error("Stripe API error", exc_info=e, extra={"stripe_code": e.code})
            raise

    async def create_intent(
        self,
        amount: Decimal,
        currency: str,
        metadata: dict[str, str] | None = None,
    ) -> PaymentIntentResult:
        money = Money(amount=amount, currency_code=currency)
        intent = await self._call(
            stripe.PaymentIntent.create,
            amount=money.to_cents(),
            currency=money.currency_code,
            metadata=metadata or {},
            automatic_payment_methods={"enabled": True},
        )
        return PaymentIntentResult(
            intent_id=intent.id,
            client_secret=intent.client_secret,
            amount=money.amount,
            currency=money.currency_code,
        )

    async def verify_webhook(self, payload: bytes, signature: str | None) -> PaymentEvent:
        if not self._webhook_secret:
            raise WebhookVerificationError("Webhook secret is not configured")
        if not signature:
            raise WebhookVerificationError("Missing Stripe-Signature header")
        try:
            stripe.Webhook.construct_event(
                payload=payload.decode(),
                sig_header=signature,
                secret=self._webhook_secret,
            )
        except stripe.SignatureVerificationError as exc:
            raise WebhookVerificationError("Invalid Stripe signature") from exc
        except ValueError as exc:
            raise WebhookVerificationError("Invalid Stripe webhook payload") from exc

        return PaymentEvent.from_stripe_event(json.loads(payload.decode()))

    async def refund(self, intent_id: str) -> RefundResult:
        refund = await self._call(stripe.Refund.create, payment_intent=intent_id)
        return RefundResult(refund_id=refund.id, status=refund.status)
