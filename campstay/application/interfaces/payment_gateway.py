from dataclasses import dataclass
from decimal import Decimal

from campstay.domain.entities.payment import PaymentEvent


@dataclass
class PaymentIntentResult:
    intent_id: str
    client_secret: str
    amount: Decimal
    currency: str


@dataclass
class RefundResult:
    refund_id: str
    status: str


class PaymentGateway:
    async def create_intent(
        self,
        amount: Decimal,
        currency: str,
        metadata: dict[str, str] | None = None,
    ) -> PaymentIntentResult:
        raise NotImplementedError

    async def verify_webhook(self, payload: bytes, signature: str | None) -> PaymentEvent:
        """Raises WebhookVerificationError when the payload is not authentic."""
        raise NotImplementedError

    async def refund(self, intent_id: str) -> RefundResult:
        raise NotImplementedError
