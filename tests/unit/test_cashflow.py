"""
Tests for the CashFlow value type.

Tests correctness of:
- Checked arithmetic (same currency and settlement only)
- Scaling and division
- Currency conversion
- Compound discounting between instants
"""

import math
from datetime import datetime, timezone

import pytest

from mc_derivatives.cashflows import SECONDS_PER_YEAR, CashFlow, Currency, year_fraction
from mc_derivatives.errors import PricingError, ValidationError

JAN_2023 = datetime(2023, 1, 1, tzinfo=timezone.utc)
JUL_2023 = datetime(2023, 7, 1, tzinfo=timezone.utc)
JAN_2024 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def usd(amount: float, when: datetime = JAN_2024) -> CashFlow:
    return CashFlow(amount, Currency.USD, when)


@pytest.mark.unit
class TestYearFraction:
    """Tests for the 365.25-day year fraction."""

    def test_julian_year(self):
        """Exactly 365.25 days is one year."""
        assert SECONDS_PER_YEAR == 365.25 * 86400
        assert year_fraction(JAN_2023, JAN_2024) == pytest.approx(365 / 365.25)

    def test_negative_when_reversed(self):
        """End before start gives a negative fraction."""
        assert year_fraction(JAN_2024, JAN_2023) == pytest.approx(-365 / 365.25)


@pytest.mark.unit
class TestCashFlowEquality:
    """Value semantics."""

    def test_same_fields_equal(self):
        assert usd(100.0) == usd(100.0)

    def test_different_amounts_not_equal(self):
        assert usd(100.0) != usd(150.0)

    def test_different_settlement_not_equal(self):
        assert usd(100.0, JAN_2023) != usd(100.0, JAN_2024)

    def test_immutable(self):
        cf = usd(100.0)
        with pytest.raises(AttributeError):
            cf.amount = 5.0

    def test_str(self):
        assert str(usd(12.3456789)) == "USD 12.345679"


@pytest.mark.unit
class TestCashFlowArithmetic:
    """Tests for checked arithmetic."""

    def test_add(self):
        result = usd(100.0) + usd(150.0)
        assert result.amount == 250.0
        assert result.currency == Currency.USD
        assert result.settlement_datetime == JAN_2024

    def test_sub(self):
        assert (usd(100.0) - usd(50.0)).amount == 50.0

    def test_neg(self):
        assert (-usd(100.0)).amount == -100.0

    def test_mul(self):
        assert (usd(100.0) * 4).amount == 400.0
        assert (4 * usd(100.0)).amount == 400.0

    def test_div(self):
        assert (usd(400.0) / 4).amount == 100.0

    def test_div_by_zero_raises(self):
        with pytest.raises(ValidationError, match="divide cashflow by zero"):
            usd(400.0) / 0

    def test_builtin_sum(self):
        """sum() starts from integer 0, which is the additive identity."""
        total = sum([usd(1.0), usd(2.0), usd(3.5)])
        assert total == usd(6.5)

    def test_zero_is_identity(self):
        cf = usd(42.0)
        assert CashFlow.zero(Currency.USD, JAN_2024) + cf == cf

    @pytest.mark.parametrize("op", ["add", "sub"])
    def test_different_settlement_raises(self, op):
        a, b = usd(100.0, JAN_2023), usd(150.0, JAN_2024)
        with pytest.raises(ValidationError, match="different settlement dates"):
            a + b if op == "add" else a - b

    @pytest.mark.parametrize("op", ["add", "sub"])
    def test_different_currency_raises(self, op):
        a = usd(100.0)
        b = CashFlow(150.0, Currency.EUR, JAN_2024)
        with pytest.raises(ValidationError, match="different currencies"):
            a + b if op == "add" else a - b

    def test_mismatch_is_pricing_error_and_value_error(self):
        """Callers catching ValueError or PricingError both see mismatches."""
        with pytest.raises(PricingError):
            usd(1.0, JAN_2023) + usd(1.0)
        with pytest.raises(ValueError):
            usd(1.0, JAN_2023) + usd(1.0)

    def test_add_non_cashflow_is_type_error(self):
        with pytest.raises(TypeError):
            usd(1.0) + 1.0


@pytest.mark.unit
class TestCurrencyConversion:
    """Tests for convert_to."""

    def test_conversion(self):
        converted = usd(100.0).convert_to(Currency.EUR, 0.8)
        assert converted.amount == 80.0
        assert converted.currency == Currency.EUR
        assert converted.settlement_datetime == JAN_2024

    def test_identity_conversion(self):
        assert usd(100.0).convert_to(Currency.USD, 1.0) == usd(100.0)

    def test_round_trip(self):
        back = usd(100.0).convert_to(Currency.EUR, 0.8).convert_to(Currency.USD, 1 / 0.8)
        assert back.amount == pytest.approx(100.0, abs=1e-12)
        assert back.currency == Currency.USD

    def test_zero_amount(self):
        converted = usd(0.0).convert_to(Currency.EUR, 0.8)
        assert converted.amount == 0.0
        assert converted.currency == Currency.EUR


@pytest.mark.unit
class TestValueAtDate:
    """
    Tests for compound discounting.

    [T1] V = A * (1 + r)^(-t), t = (settlement - valuation) / 365.25 days
    """

    def test_present_value_one_year(self):
        pv = usd(100.0, JAN_2024).value_at_date(JAN_2023, 0.05)
        assert pv.amount == pytest.approx(95.2412757719014, rel=1e-12)
        assert pv.settlement_datetime == JAN_2023
        assert pv.currency == Currency.USD

    def test_present_value_six_months(self):
        pv = usd(100.0, JUL_2023).value_at_date(JAN_2023, 0.05)
        assert pv.amount == pytest.approx(97.61119324310415, rel=1e-12)

    def test_negative_discount_rate(self):
        pv = usd(100.0, JAN_2024).value_at_date(JAN_2023, -0.01)
        assert pv.amount == pytest.approx(101.00940615592717, rel=1e-12)

    def test_future_value_one_year(self):
        """Valuing after settlement accrues."""
        fv = usd(100.0, JAN_2023).value_at_date(JAN_2024, 0.05)
        assert fv.amount == pytest.approx(104.99649357857778, rel=1e-12)

    def test_zero_rate_is_identity(self):
        assert usd(100.0, JAN_2024).value_at_date(JAN_2023, 0.0).amount == 100.0

    def test_same_instant_is_identity(self):
        assert usd(100.0).value_at_date(JAN_2024, 0.05).amount == 100.0

    def test_not_continuous_compounding(self):
        """Compound factor differs from exp(-rt) at the same rate."""
        pv = usd(100.0, JAN_2024).value_at_date(JAN_2023, 0.05)
        t = year_fraction(JAN_2023, JAN_2024)
        assert pv.amount != pytest.approx(100.0 * math.exp(-0.05 * t), rel=1e-6)

    @pytest.mark.parametrize("rate", [-1.0, -1.5])
    def test_rate_at_or_below_minus_one_raises(self, rate):
        with pytest.raises(ValidationError, match="must be > -1"):
            usd(100.0).value_at_date(JAN_2023, rate)


@pytest.mark.unit
class TestCurrency:
    """Tests for the Currency enum."""

    def test_str_is_code(self):
        assert str(Currency.EUR) == "EUR"

    def test_lookup_by_code(self):
        assert Currency("JPY") is Currency.JPY
