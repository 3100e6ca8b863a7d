"""
Property-based tests for payoff and cashflow invariants.

Uses Hypothesis to verify invariants hold across randomly generated paths
and amounts.

Properties tested:
1. Pathwise put-call parity: call - put = S_T - K
2. In-out decomposition: knock-in + knock-out = vanilla, for every path
3. Payoffs are non-negative and settle at the instrument's settlement
4. Cashflow arithmetic: (a + b) - b = a, and PV/FV round-trips
5. Engine reproducibility: worker count does not change a seeded estimate

References:
    [T1] Hull (2021) Ch. 11 - Put-call parity
    [T1] Haug (2007) - Barrier in-out parity
"""

from datetime import datetime, timedelta, timezone

import numpy as np
from hypothesis import given, settings
from hypothesis import strategies as st

from mc_derivatives.cashflows import CashFlow, Currency
from mc_derivatives.config import SETTINGS, SimulationConfig
from mc_derivatives.config.tolerances import IN_OUT_PARITY_TOLERANCE, PUT_CALL_PARITY_TOLERANCE
from mc_derivatives.instruments import (
    Barrier,
    BarrierOption,
    BarrierType,
    OptionType,
    VanillaOption,
)
from mc_derivatives.pricing import MonteCarloEngine
from mc_derivatives.processes import GBMParams, GBMProcess

VALUATION = datetime(2024, 1, 1, tzinfo=timezone.utc)
EXERCISE = VALUATION + timedelta(days=365)

# =============================================================================
# Strategy Definitions
# =============================================================================

price_strategy = st.floats(min_value=1.0, max_value=500.0, allow_nan=False, allow_infinity=False)
path_strategy = st.lists(price_strategy, min_size=1, max_size=60)
strike_strategy = st.floats(min_value=10.0, max_value=300.0, allow_nan=False, allow_infinity=False)
amount_strategy = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)
rate_strategy = st.floats(min_value=-0.05, max_value=0.25, allow_nan=False, allow_infinity=False)
days_strategy = st.integers(min_value=-3650, max_value=3650)
barrier_direction = st.sampled_from(["up", "down"])
option_type_strategy = st.sampled_from([OptionType.CALL, OptionType.PUT])


def vanilla(strike: float, option_type: OptionType) -> VanillaOption:
    return VanillaOption(
        strike=strike,
        exercise_datetime=EXERCISE,
        settlement_datetime=EXERCISE,
        option_type=option_type,
        underlying_currency=Currency.USD,
    )


def barrier(strike: float, option_type: OptionType, barrier_type: BarrierType, level: float):
    return BarrierOption(
        strike=strike,
        exercise_datetime=EXERCISE,
        settlement_datetime=EXERCISE,
        option_type=option_type,
        barrier=Barrier(barrier_type, level),
        underlying_currency=Currency.USD,
    )


# =============================================================================
# Payoff Properties
# =============================================================================

class TestPayoffParity:
    """[T1] Pathwise identities that must hold for every simulated path."""

    @given(path=path_strategy, strike=strike_strategy)
    @settings(max_examples=200)
    def test_put_call_parity_on_path(self, path: list[float], strike: float) -> None:
        """[T1] max(S-K,0) - max(K-S,0) = S - K."""
        call = vanilla(strike, OptionType.CALL).calculate_payoff(path)
        put = vanilla(strike, OptionType.PUT).calculate_payoff(path)

        assert abs((call - put).amount - (path[-1] - strike)) < PUT_CALL_PARITY_TOLERANCE

    @given(
        path=path_strategy,
        strike=strike_strategy,
        level=price_strategy,
        direction=barrier_direction,
        option_type=option_type_strategy,
    )
    @settings(max_examples=300)
    def test_in_out_parity_on_path(
        self, path: list[float], strike: float, level: float,
        direction: str, option_type: OptionType,
    ) -> None:
        """[T1] knock-in + knock-out = vanilla on the same level and direction."""
        if direction == "up":
            knock_in, knock_out = BarrierType.UP_AND_IN, BarrierType.UP_AND_OUT
        else:
            knock_in, knock_out = BarrierType.DOWN_AND_IN, BarrierType.DOWN_AND_OUT

        total = (
            barrier(strike, option_type, knock_in, level).calculate_payoff(path)
            + barrier(strike, option_type, knock_out, level).calculate_payoff(path)
        )
        expected = vanilla(strike, option_type).calculate_payoff(path)

        assert abs(total.amount - expected.amount) < IN_OUT_PARITY_TOLERANCE

    @given(path=path_strategy, strike=strike_strategy, option_type=option_type_strategy)
    @settings(max_examples=100)
    def test_payoff_non_negative_and_settled(
        self, path: list[float], strike: float, option_type: OptionType
    ) -> None:
        payoff = vanilla(strike, option_type).calculate_payoff(path)
        assert payoff.amount >= 0.0
        assert payoff.settlement_datetime == EXERCISE
        assert payoff.currency == Currency.USD

    @given(path=path_strategy, strike=strike_strategy, level=price_strategy)
    @settings(max_examples=100)
    def test_knock_out_never_exceeds_vanilla(
        self, path: list[float], strike: float, level: float
    ) -> None:
        out = barrier(strike, OptionType.CALL, BarrierType.DOWN_AND_OUT, level).calculate_payoff(path)
        assert out.amount <= vanilla(strike, OptionType.CALL).calculate_payoff(path).amount


# =============================================================================
# Cashflow Properties
# =============================================================================

class TestCashFlowProperties:
    """Cashflow arithmetic and discounting identities."""

    @given(a=amount_strategy, b=amount_strategy)
    @settings(max_examples=200)
    def test_add_then_subtract(self, a: float, b: float) -> None:
        cf_a = CashFlow(a, Currency.EUR, EXERCISE)
        cf_b = CashFlow(b, Currency.EUR, EXERCISE)
        result = (cf_a + cf_b) - cf_b

        assert abs(result.amount - a) <= 1e-9 * max(1.0, abs(a), abs(b))
        assert result.currency == Currency.EUR
        assert result.settlement_datetime == EXERCISE

    @given(amount=amount_strategy, rate=rate_strategy, days=days_strategy)
    @settings(max_examples=200)
    def test_discount_round_trip(self, amount: float, rate: float, days: int) -> None:
        """Moving to another instant and back restores the amount."""
        cf = CashFlow(amount, Currency.USD, VALUATION)
        other = VALUATION + timedelta(days=days)

        back = cf.value_at_date(other, rate).value_at_date(VALUATION, rate)

        assert back.settlement_datetime == VALUATION
        tolerance = SETTINGS.validation.cashflow_tolerance
        assert abs(back.amount - amount) <= tolerance * max(1.0, abs(amount))

    @given(
        amount=st.floats(min_value=0.0, max_value=1e6),
        rate=st.floats(min_value=0.0, max_value=0.25),
    )
    @settings(max_examples=100)
    def test_positive_rate_discounts(self, amount: float, rate: float) -> None:
        """A non-negative rate never increases a future non-negative amount."""
        cf = CashFlow(amount, Currency.USD, EXERCISE)
        assert cf.value_at_date(VALUATION, rate).amount <= amount


# =============================================================================
# Engine Properties
# =============================================================================

class TestEngineProperties:
    """Seeded estimates do not depend on the worker count."""

    @given(
        seed=st.integers(min_value=0, max_value=2**32 - 1),
        n_workers=st.integers(min_value=2, max_value=4),
    )
    @settings(max_examples=10, deadline=None)
    def test_worker_count_invariance(self, seed: int, n_workers: int) -> None:
        process = GBMProcess(GBMParams(s0=100.0, r=0.05, sigma=0.2, T=1.0))
        option = vanilla(100.0, OptionType.CALL)

        def run(workers: int) -> float:
            config = SimulationConfig(
                n_paths=300, n_steps=8, seed=seed, n_workers=workers, chunk_size=64
            )
            return MonteCarloEngine(config).price(
                option, process, 0.05, valuation_datetime=VALUATION
            ).price

        assert run(1) == run(n_workers)

    @given(seed=st.integers(min_value=0, max_value=2**32 - 1))
    @settings(max_examples=10, deadline=None)
    def test_estimate_non_negative(self, seed: int) -> None:
        process = GBMProcess(GBMParams(s0=100.0, r=0.05, sigma=0.2, T=1.0))
        config = SimulationConfig(n_paths=200, n_steps=8, seed=seed)
        result = MonteCarloEngine(config).price(
            vanilla(100.0, OptionType.PUT), process, 0.05, valuation_datetime=VALUATION
        )
        assert result.price >= 0.0
        assert np.isfinite(result.standard_error)
