import logging
from datetime import date

from campstay.application.interfaces.payment_gateway import PaymentGateway, PaymentIntentResult
from campstay.application.use_cases.create_booking import StayQuoter
from campstay.domain.errors import DomainError, ExternalServiceError


class CreatePaymentIntentUseCase:
    """Quotes the stay server-side and opens a gateway intent for that amount."""

    def __init__(self, quoter: StayQuoter, payment_gateway: PaymentGateway) -> None:
        self._quoter = quoter
        self._payment_gateway = payment_gateway
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        resource_id: int,
        renter_id: int,
        start_date: date,
        end_date: date,
    ) -> PaymentIntentResult:
        quoted = await self._quoter.quote(resource_id, renter_id, start_date, end_date)
        total = quoted.quote.total
        try:
            intent = await self._payment_gateway.create_intent(
                amount=total.amount,
                currency=total.currency_code,
                metadata={
                    "renter_id": str(renter_id),
                    "resource_id": str(resource_id),
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                },
            )
        except DomainError:
            raise
        except Exception as exc:
            self._logger.error(
                "Payment intent creation failed",
                exc_info=exc,
                extra={"resource_id": resource_id, "renter_id": renter_id},
            )
            raise ExternalServiceError("payment_gateway", str(exc)) from exc

        self._logger.info(
            "Payment intent created",
            extra={
                "payment_intent_id": intent.intent_id,
                "resource_id": resource_id,
                "amount": str(intent.amount),
                "currency": intent.currency,
            },
        )
        return intent
