"""
Barrier options with discrete monitoring.

The barrier is checked on every simulated price of the path and nowhere in
between. [T1] Discrete monitoring under-detects crossings relative to a
continuously monitored barrier, so knock-out prices come out high and
knock-in prices low; the gap shrinks as the step count grows.

[T1] In-out parity: knock-in + knock-out = vanilla, for the same level and direction.

See: Broadie, Glasserman & Kou (1997) for the continuity correction (not applied).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import numpy as np

from mc_derivatives.cashflows import CashFlow, Currency
from mc_derivatives.instruments.base import (
    Instrument,
    OptionType,
    PricePath,
    as_price_path,
    intrinsic_value,
)


class BarrierType(Enum):
    """Barrier direction and effect."""

    UP_AND_IN = "up_and_in"
    UP_AND_OUT = "up_and_out"
    DOWN_AND_IN = "down_and_in"
    DOWN_AND_OUT = "down_and_out"

    @property
    def is_up(self) -> bool:
        """True when the barrier sits above the price (triggered from below)."""
        return self in (BarrierType.UP_AND_IN, BarrierType.UP_AND_OUT)

    @property
    def is_knock_in(self) -> bool:
        """True when crossing activates the option."""
        return self in (BarrierType.UP_AND_IN, BarrierType.DOWN_AND_IN)


@dataclass(frozen=True)
class Barrier:
    """
    Barrier level and type.

    Attributes
    ----------
    barrier_type : BarrierType
        Direction (up/down) and effect (in/out)
    level : float
        Barrier price level
    """

    barrier_type: BarrierType
    level: float

    def is_crossed(self, path: np.ndarray) -> bool:
        """
        Whether any monitored price touches or crosses the level.

        Up barriers trigger on price >= level, down barriers on price <= level.
        """
        if self.barrier_type.is_up:
            return bool(np.any(path >= self.level))
        return bool(np.any(path <= self.level))


@dataclass(frozen=True)
class BarrierOption(Instrument):
    """
    European call or put that is activated or extinguished by a barrier.

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
    barrier : Barrier
        Barrier level and type
    underlying_currency : Currency
        Currency of the payoff
    """

    strike: float
    exercise_datetime: datetime
    settlement_datetime: datetime
    option_type: OptionType
    barrier: Barrier
    underlying_currency: Currency

    def is_in_play(self, price_path: PricePath) -> bool:
        """Whether the option is alive at expiry for this path."""
        crossed = self.barrier.is_crossed(as_price_path(price_path))
        if self.barrier.barrier_type.is_knock_in:
            return crossed
        return not crossed

    def calculate_payoff(self, price_path: PricePath) -> CashFlow:
        path = as_price_path(price_path)

        if not self.is_in_play(path):
            return self._cashflow(0.0)

        return self._cashflow(intrinsic_value(float(path[-1]), self.strike, self.option_type))
