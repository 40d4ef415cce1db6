import json
from decimal import Decimal
from uuid import uuid4

from campstay.application.interfaces.payment_gateway import (
    PaymentGateway,
    PaymentIntentResult,
    RefundResult,
)
from campstay.domain.entities.payment import PaymentEvent
from campstay.domain.errors import WebhookVerificationError


class StubPaymentGateway(PaymentGateway):
    """
    Offline stand-in for Stripe.

    The signature header must equal `webhook_secret`; without a secret every
    webhook is rejected. Set `refund_error` to make every refund raise it,
    or `refund_status` to change the status refunds report.
    """

    def __init__(self, webhook_secret: str | None = None) -> None:
        self.webhook_secret = webhook_secret
        self.refund_error: Exception | None = None
        self.refund_status = "succeeded"
        self.refunded_intents: list[str] = []
        self.created_intents: list[PaymentIntentResult] = []

    async def create_intent(
        self,
        amount: Decimal,
        currency: str,
        metadata: dict[str, str] | None = None,
    ) -> PaymentIntentResult:
        intent_id = f"pi_{uuid4().hex[:14]}"
        result = PaymentIntentResult(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            amount=amount,
            currency=currency.lower(),
        )
        self.created_intents.append(result)
        return result

    async def verify_webhook(self, payload: bytes, signature: str | None) -> PaymentEvent:
        if not self.webhook_secret:
            raise WebhookVerificationError("Webhook secret is not configured")
        if signature != self.webhook_secret:
            raise WebhookVerificationError("Invalid webhook signature")
        if not payload:
            raise WebhookVerificationError("Empty webhook payload")
        try:
            event = json.loads(payload.decode())
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise WebhookVerificationError("Invalid webhook payload") from exc
        if not isinstance(event, dict):
            raise WebhookVerificationError("Invalid webhook payload")
        return PaymentEvent.from_stripe_event(event)

    async def refund(self, intent_id: str) -> RefundResult:
        if self.refund_error is not None:
            raise self.refund_error
        self.refunded_intents.append(intent_id)
        return RefundResult(refund_id=f"re_{uuid4().hex[:14]}", status=self.refund_status)
