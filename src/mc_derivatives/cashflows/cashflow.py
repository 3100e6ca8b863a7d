"""
CashFlow value type.

A cashflow is an amount of money in one currency, settled at one instant.
Arithmetic between two cashflows is only defined when both currency and
settlement instant match; anything else raises ValidationError rather than
silently coercing.

[T1] Compound discounting: PV = A * (1 + r)^(-t), t in years of 365.25 days.
This is deliberately NOT continuous compounding (exp(-rT)); the closed-form
pricer in mc_derivatives.pricing.black_scholes uses the continuous convention.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from numbers import Real

from mc_derivatives.cashflows.currency import Currency
from mc_derivatives.errors import ValidationError

#: Seconds in an average (Julian) year
SECONDS_PER_YEAR: float = 365.25 * 24.0 * 3600.0


def year_fraction(start: datetime, end: datetime) -> float:
    """
    Elapsed time from start to end in years of 365.25 days.

    Negative when end precedes start.

    Parameters
    ----------
    start : datetime
        Start instant
    end : datetime
        End instant

    Returns
    -------
    float
        Year fraction (end - start) / 365.25 days
    """
    return (end - start).total_seconds() / SECONDS_PER_YEAR


@dataclass(frozen=True)
class CashFlow:
    """
    Immutable amount tagged with a currency and a settlement instant.

    Attributes
    ----------
    amount : float
        Cash amount
    currency : Currency
        Currency of the amount
    settlement_datetime : datetime
        Instant at which the amount is paid

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> when = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> total = CashFlow(100.0, Currency.USD, when) + CashFlow(150.0, Currency.USD, when)
    >>> total.amount
    250.0
    """

    amount: float
    currency: Currency
    settlement_datetime: datetime

    @classmethod
    def zero(cls, currency: Currency, settlement_datetime: datetime) -> "CashFlow":
        """Zero cashflow, the identity for addition."""
        return cls(0.0, currency, settlement_datetime)

    def _validate_operation_with(self, other: "CashFlow") -> None:
        if self.settlement_datetime != other.settlement_datetime:
            raise ValidationError(
                f"CRITICAL: Cannot operate on cashflows with different settlement dates. "
                f"Got {self.settlement_datetime.isoformat()} and "
                f"{other.settlement_datetime.isoformat()}"
            )
        if self.currency != other.currency:
            raise ValidationError(
                f"CRITICAL: Cannot operate on cashflows with different currencies. "
                f"Got {self.currency} and {other.currency}"
            )

    def __add__(self, other: "CashFlow") -> "CashFlow":
        if not isinstance(other, CashFlow):
            return NotImplemented
        self._validate_operation_with(other)
        return replace(self, amount=self.amount + other.amount)

    def __radd__(self, other: object) -> "CashFlow":
        # Lets the built-in sum() start from its integer 0
        if isinstance(other, Real) and other == 0:
            return self
        return NotImplemented

    def __sub__(self, other: "CashFlow") -> "CashFlow":
        if not isinstance(other, CashFlow):
            return NotImplemented
        self._validate_operation_with(other)
        return replace(self, amount=self.amount - other.amount)

    def __neg__(self) -> "CashFlow":
        return replace(self, amount=-self.amount)

    def __mul__(self, multiplier: float) -> "CashFlow":
        if not isinstance(multiplier, Real):
            return NotImplemented
        return replace(self, amount=self.amount * float(multiplier))

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "CashFlow":
        if not isinstance(divisor, Real):
            return NotImplemented
        if divisor == 0:
            raise ValidationError("CRITICAL: Attempt to divide cashflow by zero.")
        return replace(self, amount=self.amount / float(divisor))

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.6f}"

    def value_at_date(
        self,
        valuation_datetime: datetime,
        annual_discount_rate: float,
    ) -> "CashFlow":
        """
        Move this cashflow to another instant with compound discounting.

        [T1] V = A / (1 + r)^t, t = (settlement - valuation) in years.
        A valuation instant after settlement accrues instead (t < 0).

        Parameters
        ----------
        valuation_datetime : datetime
            Instant to value the cashflow at (becomes the new settlement)
        annual_discount_rate : float
            Annually compounded rate (decimal), must be > -1

        Returns
        -------
        CashFlow
            Same currency, settled at valuation_datetime
        """
        if annual_discount_rate <= -1.0:
            raise ValidationError(
                f"CRITICAL: annual_discount_rate must be > -1, got {annual_discount_rate}"
            )

        years = year_fraction(valuation_datetime, self.settlement_datetime)
        factor = (1.0 + annual_discount_rate) ** (-years)

        return CashFlow(self.amount * factor, self.currency, valuation_datetime)

    def convert_to(self, other_currency: Currency, conversion_rate: float) -> "CashFlow":
        """
        Convert to another currency at a given rate (units of target per unit of source).

        Settlement instant is unchanged.
        """
        return CashFlow(self.amount * conversion_rate, other_currency, self.settlement_datetime)
