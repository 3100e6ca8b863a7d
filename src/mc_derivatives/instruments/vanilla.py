"""
Vanilla European option.
"""

from dataclasses import dataclass
from datetime import datetime

from mc_derivatives.cashflows import CashFlow, Currency
from mc_derivatives.instruments.base import (
    Instrument,
    OptionType,
    PricePath,
    as_price_path,
    intrinsic_value,
)


@dataclass(frozen=True)
class VanillaOption(Instrument):
    """
    European call or put paying on the terminal price of the path.

    Attributes
    ----------
    strike : float
        Strike price
    exercise_datetime : datetime
        Exercise instant (horizon of the simulated path)
    settlement_datetime : datetime
        Instant the payoff is paid
    option_type : OptionType
        Call or put
    underlying_currency : Currency
        Currency of the payoff
    """

    strike: float
    exercise_datetime: datetime
    settlement_datetime: datetime
    option_type: OptionType
    underlying_currency: Currency

    def calculate_payoff(self, price_path: PricePath) -> CashFlow:
        path = as_price_path(price_path)
        return self._cashflow(intrinsic_value(float(path[-1]), self.strike, self.option_type))
