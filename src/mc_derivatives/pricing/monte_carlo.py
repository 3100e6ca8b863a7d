"""
Monte Carlo pricing engine.

Composes any StochasticProcess with any Instrument:
    path   = process.generate_price_path(n_steps)
    payoff = instrument.calculate_payoff(path)      (CashFlow at settlement)
    PV     = (sum(payoffs) / n_paths).value_at_date(valuation, rate)

[T1] The estimator is unbiased for the discretized-path payoff; its standard
error decays as 1/sqrt(N). Euler discretization and discrete barrier
monitoring add a bias that only more steps remove.

Discounting is compound, (1 + r)^(-t), through CashFlow.value_at_date. The
closed-form pricer uses continuous discounting exp(-rT); the two are not
interchangeable.

Paths are split into fixed-size chunks, each with its own random stream
spawned from one SeedSequence. Chunks run sequentially or on a thread pool and
their partial sums are combined in chunk order, so a seeded run gives the same
estimate for any worker count.

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from mc_derivatives.cashflows import CashFlow, year_fraction
from mc_derivatives.config.settings import SETTINGS, SimulationConfig
from mc_derivatives.errors import DomainError, PricingCancelled
from mc_derivatives.instruments.base import Instrument
from mc_derivatives.processes.base import StochasticProcess

logger = logging.getLogger(__name__)

#: 95% two-sided normal quantile
Z_95: float = 1.96


@dataclass(frozen=True)
class MCResult:
    """
    Monte Carlo pricing result.

    Attributes
    ----------
    present_value : CashFlow
        Discounted average payoff, settled at the valuation instant
    undiscounted : CashFlow
        Average payoff, settled at the instrument's settlement instant
    standard_error : float
        Standard error of present_value.amount (nan for a single path)
    confidence_interval : tuple[float, float]
        95% confidence interval for present_value.amount
    n_paths : int
        Number of paths used
    n_steps : int
        Euler steps per path
    discount_factor : float
        Compound discount factor applied to the average payoff
    """

    present_value: CashFlow
    undiscounted: CashFlow
    standard_error: float
    confidence_interval: tuple[float, float]
    n_paths: int
    n_steps: int
    discount_factor: float

    @property
    def price(self) -> float:
        """Present value amount."""
        return self.present_value.amount

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)

    @property
    def ci_width(self) -> float:
        """Width of 95% confidence interval."""
        return self.confidence_interval[1] - self.confidence_interval[0]


@dataclass(frozen=True)
class _ChunkResult:
    """Partial statistics from one chunk of paths."""

    total: CashFlow
    mean: float
    sum_sq_dev: float
    n_paths: int


def _merge_moments(
    left: tuple[int, float, float], right: tuple[int, float, float]
) -> tuple[int, float, float]:
    """
    Combine (count, mean, sum of squared deviations) of two samples.

    [T1] Chan, Golub & LeVeque (1983) pairwise update:
        delta = mean_b - mean_a
        M2    = M2_a + M2_b + delta^2 * n_a * n_b / n
    """
    n_a, mean_a, m2_a = left
    n_b, mean_b, m2_b = right
    n = n_a + n_b
    delta = mean_b - mean_a
    mean = mean_a + delta * n_b / n
    m2 = m2_a + m2_b + delta**2 * n_a * n_b / n
    return n, mean, m2


def _chunk_sizes(n_paths: int, chunk_size: int) -> list[int]:
    full, remainder = divmod(n_paths, chunk_size)
    return [chunk_size] * full + ([remainder] if remainder else [])


def _check_cancelled(events: Sequence[threading.Event]) -> None:
    if any(event.is_set() for event in events):
        raise PricingCancelled("Pricing cancelled before all paths were evaluated.")


class MonteCarloEngine:
    """
    Monte Carlo pricing engine.

    Parameters
    ----------
    config : SimulationConfig, optional
        Run configuration; defaults to SETTINGS.simulation

    Examples
    --------
    >>> engine = MonteCarloEngine(SimulationConfig(n_paths=10_000, n_steps=252, seed=42))
    >>> result = engine.price(option, GBMProcess(params), annual_discount_rate=0.05)
    >>> print(f"{result.present_value} ± {result.standard_error:.4f}")
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config if config is not None else SETTINGS.simulation

    def price(
        self,
        instrument: Instrument,
        process: StochasticProcess,
        annual_discount_rate: float,
        number_of_paths: Optional[int] = None,
        number_of_steps: Optional[int] = None,
        valuation_datetime: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> MCResult:
        """
        Estimate the present value of an instrument under a process.

        Parameters
        ----------
        instrument : Instrument
            Payoff evaluator (vanilla, barrier, ...)
        process : StochasticProcess
            Path simulator (GBM, Heston, ...)
        annual_discount_rate : float
            Annually compounded discount rate (decimal)
        number_of_paths : int, optional
            Paths to simulate; defaults to config.n_paths
        number_of_steps : int, optional
            Euler steps per path; defaults to config.n_steps
        valuation_datetime : datetime, optional
            Instant to discount to; defaults to now (UTC)
        cancel_event : threading.Event, optional
            Set it from another thread to abort the call

        Returns
        -------
        MCResult
            Present value with standard error and confidence interval

        Raises
        ------
        DomainError
            If number_of_paths or number_of_steps is not positive
        ValidationError
            If a payoff's currency or settlement differs from the instrument's
        PricingCancelled
            If cancel_event is set before the run completes
        """
        n_paths = self.config.n_paths if number_of_paths is None else number_of_paths
        n_steps = self.config.n_steps if number_of_steps is None else number_of_steps

        if n_paths <= 0:
            raise DomainError(
                f"CRITICAL: number_of_paths must be > 0, got {n_paths}. "
                f"An average over zero paths is undefined."
            )
        if n_steps <= 0:
            raise DomainError(
                f"CRITICAL: number_of_steps must be > 0, got {n_steps}. "
                f"A zero-step path has no terminal price."
            )

        if valuation_datetime is None:
            valuation_datetime = datetime.now(timezone.utc)

        start_time = time.time()
        sizes = _chunk_sizes(n_paths, self.config.chunk_size)
        seeds = np.random.SeedSequence(self.config.seed).spawn(len(sizes))

        if self.config.verbose:
            logger.info(
                f"Pricing {type(instrument).__name__} under {type(process).__name__}: "
                f"{n_paths} paths x {n_steps} steps in {len(sizes)} chunks, "
                f"{self.config.n_workers} worker(s)"
            )

        events = [cancel_event] if cancel_event is not None else []
        if self.config.n_workers == 1 or len(sizes) == 1:
            partials = [
                self._run_chunk(instrument, process, size, n_steps, seed, events)
                for size, seed in zip(sizes, seeds)
            ]
        else:
            partials = self._run_parallel(instrument, process, sizes, n_steps, seeds, events)

        result = self._compute_result(
            partials, n_paths, n_steps, annual_discount_rate, valuation_datetime
        )

        if self.config.verbose:
            logger.info(
                f"Completed in {time.time() - start_time:.2f}s: "
                f"{result.present_value} (SE {result.standard_error:.6f})"
            )

        return result

    def _run_chunk(
        self,
        instrument: Instrument,
        process: StochasticProcess,
        n_paths: int,
        n_steps: int,
        seed: np.random.SeedSequence,
        events: Sequence[threading.Event],
    ) -> _ChunkResult:
        """Simulate and evaluate one chunk with its own random stream."""
        _check_cancelled(events)

        rng = np.random.default_rng(seed)
        paths = process.generate_price_paths(n_paths, n_steps, rng)

        # Every payoff must match the instrument's currency and settlement
        total = CashFlow.zero(instrument.underlying_currency, instrument.settlement_datetime)
        amounts = np.empty(n_paths)

        for i, path in enumerate(paths):
            _check_cancelled(events)
            payoff = instrument.calculate_payoff(path)
            total = total + payoff
            amounts[i] = payoff.amount

        # Centered second moment; chunks are merged in _compute_result
        mean = float(amounts.mean())
        sum_sq_dev = float(((amounts - mean) ** 2).sum())

        logger.debug(f"Chunk of {n_paths} paths done, partial sum {total.amount:.6f}")

        return _ChunkResult(total=total, mean=mean, sum_sq_dev=sum_sq_dev, n_paths=n_paths)

    def _run_parallel(
        self,
        instrument: Instrument,
        process: StochasticProcess,
        sizes: list[int],
        n_steps: int,
        seeds: list[np.random.SeedSequence],
        events: list[threading.Event],
    ) -> list[_ChunkResult]:
        """Run chunks on a thread pool, failing fast on the first error."""
        abort = threading.Event()
        chunk_events = [*events, abort]

        with ThreadPoolExecutor(max_workers=self.config.n_workers) as executor:
            futures = [
                executor.submit(
                    self._run_chunk, instrument, process, size, n_steps, seed, chunk_events
                )
                for size, seed in zip(sizes, seeds)
            ]

            try:
                for future in as_completed(futures):
                    future.result()
            except BaseException:
                abort.set()
                for future in futures:
                    future.cancel()
                raise

        # Combine in submission order, not completion order
        return [future.result() for future in futures]

    def _compute_result(
        self,
        partials: list[_ChunkResult],
        n_paths: int,
        n_steps: int,
        annual_discount_rate: float,
        valuation_datetime: datetime,
    ) -> MCResult:
        """Reduce chunk sums to the discounted estimate with statistics."""
        total = sum(partial.total for partial in partials)
        moments = (partials[0].n_paths, partials[0].mean, partials[0].sum_sq_dev)
        for partial in partials[1:]:
            moments = _merge_moments(moments, (partial.n_paths, partial.mean, partial.sum_sq_dev))
        sum_sq_dev = moments[2]

        average = total / n_paths
        present_value = average.value_at_date(valuation_datetime, annual_discount_rate)

        years = year_fraction(valuation_datetime, average.settlement_datetime)
        df = (1.0 + annual_discount_rate) ** (-years)

        if n_paths > 1:
            variance = sum_sq_dev / (n_paths - 1)
            se = df * np.sqrt(variance / n_paths)
        else:
            se = float("nan")

        price = present_value.amount

        return MCResult(
            present_value=present_value,
            undiscounted=average,
            standard_error=float(se),
            confidence_interval=(price - Z_95 * se, price + Z_95 * se),
            n_paths=n_paths,
            n_steps=n_steps,
            discount_factor=float(df),
        )


def monte_carlo_price(
    instrument: Instrument,
    process: StochasticProcess,
    annual_discount_rate: float,
    number_of_paths: int,
    number_of_steps: int,
    valuation_datetime: Optional[datetime] = None,
    seed: Optional[int] = None,
    n_workers: int = 1,
) -> CashFlow:
    """
    Convenience function returning only the discounted price.

    Parameters
    ----------
    instrument : Instrument
        Payoff evaluator
    process : StochasticProcess
        Path simulator
    annual_discount_rate : float
        Annually compounded discount rate (decimal)
    number_of_paths : int
        Number of simulated paths (> 0)
    number_of_steps : int
        Euler steps per path (> 0)
    valuation_datetime : datetime, optional
        Instant to discount to; defaults to now (UTC)
    seed : int, optional
        Root seed for reproducibility
    n_workers : int, default 1
        Worker threads

    Returns
    -------
    CashFlow
        Present value in the instrument's currency, settled at valuation_datetime

    Examples
    --------
    >>> pv = monte_carlo_price(option, GBMProcess(params), 0.05, 1000, 365)
    >>> print(pv)
    USD 10.412345
    """
    config = replace(SETTINGS.simulation, seed=seed, n_workers=n_workers, verbose=False)
    engine = MonteCarloEngine(config)
    result = engine.price(
        instrument,
        process,
        annual_discount_rate,
        number_of_paths=number_of_paths,
        number_of_steps=number_of_steps,
        valuation_datetime=valuation_datetime,
    )
    return result.present_value


def convergence_analysis(
    instrument: Instrument,
    process: StochasticProcess,
    annual_discount_rate: float,
    reference_price: float,
    path_counts: Sequence[int] = (1_000, 5_000, 10_000, 50_000),
    number_of_steps: int = 252,
    valuation_datetime: Optional[datetime] = None,
    seed: int = 42,
) -> pd.DataFrame:
    """
    Analyze MC convergence to a reference price.

    [T1] MC error should converge at rate 1/sqrt(N).

    Parameters
    ----------
    instrument : Instrument
        Payoff evaluator
    process : StochasticProcess
        Path simulator
    annual_discount_rate : float
        Annually compounded discount rate
    reference_price : float
        Price to compare against (closed form, lattice, or a large MC run)
    path_counts : sequence of int
        Number of paths to test
    number_of_steps : int, default 252
        Euler steps per path
    valuation_datetime : datetime, optional
        Instant to discount to; defaults to now (UTC)
    seed : int, default 42
        Root seed

    Returns
    -------
    pd.DataFrame
        One row per path count with price, errors and CI coverage
    """
    if valuation_datetime is None:
        valuation_datetime = datetime.now(timezone.utc)

    results = []

    for n in path_counts:
        engine = MonteCarloEngine(replace(SETTINGS.simulation, seed=seed, verbose=False))
        mc_result = engine.price(
            instrument,
            process,
            annual_discount_rate,
            number_of_paths=n,
            number_of_steps=number_of_steps,
            valuation_datetime=valuation_datetime,
        )

        error = abs(mc_result.price - reference_price)
        rel_error = error / reference_price if reference_price > 0 else float("inf")

        results.append(
            {
                "n_paths": n,
                "mc_price": mc_result.price,
                "reference_price": reference_price,
                "absolute_error": error,
                "relative_error": rel_error,
                "standard_error": mc_result.standard_error,
                "within_ci": mc_result.confidence_interval[0]
                <= reference_price
                <= mc_result.confidence_interval[1],
            }
        )

    return pd.DataFrame(results)


def estimate_convergence_rate(results: pd.DataFrame, column: str = "standard_error") -> float:
    """
    Estimate the log-log slope of an error column against path count.

    [T1] Theory predicts slope = -0.5 for the standard error.
    """
    slope, _ = np.polyfit(np.log(results["n_paths"]), np.log(results[column] + 1e-12), 1)
    return float(slope)
