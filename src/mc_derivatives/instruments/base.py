"""
Base classes for payoff evaluation.

Every instrument turns one completed price path into a settlement CashFlow.
The Monte Carlo engine only relies on:
- calculate_payoff(price_path) -> CashFlow
- settlement_datetime (read-only attribute)
- underlying_currency (read-only attribute)
so any new contract type plugs into the same engine.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Sequence, Union

import numpy as np

from mc_derivatives.cashflows import CashFlow, Currency
from mc_derivatives.errors import DomainError

PricePath = Union[np.ndarray, Sequence[float]]


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


def intrinsic_value(spot: float, strike: float, option_type: OptionType) -> float:
    """
    Vanilla payoff at expiry.

    [T1] Call payoff: max(S - K, 0)
    [T1] Put payoff: max(K - S, 0)
    """
    if option_type == OptionType.CALL:
        return max(spot - strike, 0.0)
    return max(strike - spot, 0.0)


def as_price_path(price_path: PricePath) -> np.ndarray:
    """Coerce a price path to a 1-D float array, rejecting empty paths."""
    path = np.asarray(price_path, dtype=np.float64)
    if path.ndim != 1:
        raise DomainError(f"CRITICAL: price path must be 1-D, got shape {path.shape}")
    if path.size == 0:
        raise DomainError("CRITICAL: price path is empty; no terminal price to evaluate")
    return path


class Instrument(ABC):
    """
    Abstract payoff evaluator.

    Subclasses must provide the attributes below and calculate_payoff().

    Attributes
    ----------
    settlement_datetime : datetime
        Instant the payoff is paid
    underlying_currency : Currency
        Currency of the payoff
    """

    settlement_datetime: datetime
    underlying_currency: Currency

    @abstractmethod
    def calculate_payoff(self, price_path: PricePath) -> CashFlow:
        """
        Evaluate the payoff on one simulated path.

        Parameters
        ----------
        price_path : array-like
            Prices at each simulation step; the last element is the price at expiry

        Returns
        -------
        CashFlow
            Payoff in underlying_currency, settled at settlement_datetime
        """
        pass

    def _cashflow(self, amount: float) -> CashFlow:
        return CashFlow(float(amount), self.underlying_currency, self.settlement_datetime)
