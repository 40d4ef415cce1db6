"""Value Object Money - an amount together with its currency."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary amount.

    Attributes:
        amount: Decimal amount, quantized to cents.
        currency_code: ISO 4217 code, stored lower-case as the gateway reports it.
    """

    amount: Decimal
    currency_code: str

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        object.__setattr__(self, "amount", self.amount.quantize(CENT, rounding=ROUND_HALF_UP))
        object.__setattr__(self, "currency_code", self.currency_code.lower())

        if len(self.currency_code) != 3:
            raise ValueError(f"currency_code must have 3 characters: {self.currency_code}")

        if self.amount < 0:
            raise ValueError(f"amount cannot be negative: {self.amount}")

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            raise TypeError(f"Cannot add Money and {type(other)}")
        if self.currency_code != other.currency_code:
            raise ValueError(
                f"Cannot add amounts in different currencies: "
                f"{self.currency_code} vs {other.currency_code}"
            )
        return Money(amount=self.amount + other.amount, currency_code=self.currency_code)

    def __mul__(self, factor: int) -> "Money":
        return Money(amount=self.amount * factor, currency_code=self.currency_code)

    def differs_from(self, amount: Decimal, tolerance: Decimal) -> bool:
        return abs(self.amount - Decimal(str(amount))) > tolerance

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency_code}"

    @classmethod
    def from_cents(cls, cents: int, currency_code: str) -> "Money":
        """Build from minor units, as Stripe reports amounts."""
        return cls(amount=Decimal(cents) / 100, currency_code=currency_code)

    def to_cents(self) -> int:
        return int(self.amount * 100)
