from datetime import date
from decimal import Decimal

import pytest

from campstay.domain.errors import InvalidDateRangeError
from campstay.domain.value_objects import DateRange, Money


class TestDateRange:
    def test_rejects_empty_and_inverted_ranges(self):
        with pytest.raises(InvalidDateRangeError):
            DateRange(start=date(2031, 1, 10), end=date(2031, 1, 10))
        with pytest.raises(InvalidDateRangeError):
            DateRange(start=date(2031, 1, 12), end=date(2031, 1, 10))

    def test_nights(self):
        assert DateRange(start=date(2031, 1, 10), end=date(2031, 1, 12)).nights == 2

    def test_overlap_is_half_open(self):
        booked = DateRange(start=date(2031, 1, 10), end=date(2031, 1, 12))

        assert booked.overlaps_with(DateRange(start=date(2031, 1, 11), end=date(2031, 1, 13)))
        assert booked.overlaps_with(DateRange(start=date(2031, 1, 9), end=date(2031, 1, 15)))
        # checkout day equals the next check-in day
        assert not booked.overlaps_with(DateRange(start=date(2031, 1, 12), end=date(2031, 1, 14)))
        assert not booked.overlaps_with(DateRange(start=date(2031, 1, 8), end=date(2031, 1, 10)))

    def test_for_stay_rejects_past_start(self):
        with pytest.raises(InvalidDateRangeError):
            DateRange.for_stay(date(2030, 12, 31), date(2031, 1, 2), today=date(2031, 1, 1))

    def test_for_stay_accepts_today(self):
        stay = DateRange.for_stay(date(2031, 1, 1), date(2031, 1, 2), today=date(2031, 1, 1))
        assert stay.nights == 1


class TestMoney:
    def test_quantizes_and_lowercases(self):
        money = Money(amount=Decimal("10.005"), currency_code="EUR")

        assert money.amount == Decimal("10.01")
        assert money.currency_code == "eur"

    def test_rejects_negative_and_bad_currency(self):
        with pytest.raises(ValueError):
            Money(amount=Decimal("-1"), currency_code="eur")
        with pytest.raises(ValueError):
            Money(amount=Decimal("1"), currency_code="euro")

    def test_arithmetic(self):
        nightly = Money(amount=Decimal("50"), currency_code="eur")
        fee = Money(amount=Decimal("2.50"), currency_code="eur")

        assert (nightly * 2 + fee).amount == Decimal("102.50")

    def test_cannot_add_different_currencies(self):
        with pytest.raises(ValueError):
            Money(amount=Decimal("1"), currency_code="eur") + Money(amount=Decimal("1"), currency_code="usd")

    def test_cents_conversion(self):
        assert Money.from_cents(10050, "EUR").amount == Decimal("100.50")
        assert Money(amount=Decimal("100.50"), currency_code="eur").to_cents() == 10050

    def test_differs_from_uses_tolerance(self):
        total = Money(amount=Decimal("100.00"), currency_code="eur")

        assert not total.differs_from(Decimal("100.01"), Decimal("0.01"))
        assert total.differs_from(Decimal("100.02"), Decimal("0.01"))
