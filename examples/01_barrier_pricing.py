#!/usr/bin/env python3
"""
Vanilla and Barrier Option Pricing Demo.

Prices the same one-year call as a vanilla, an up-and-out and an up-and-in
barrier option, under both GBM and Heston dynamics, then checks convergence of
the vanilla price against Black-Scholes.

Key Concepts:
- One engine, any process x any instrument
- In-out parity: knock-in + knock-out = vanilla on common random numbers
- Standard error shrinks as 1/sqrt(N)

Usage:
    python examples/01_barrier_pricing.py
    python examples/01_barrier_pricing.py --paths 50000 --workers 4 --verbose
"""

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone

import numpy as np

# Add src to path if running as script
sys.path.insert(0, "src")

from mc_derivatives import (
    Barrier,
    BarrierOption,
    BarrierType,
    Currency,
    GBMParams,
    GBMProcess,
    HestonParams,
    HestonProcess,
    MonteCarloEngine,
    OptionType,
    SimulationConfig,
    VanillaOption,
    black_scholes_price,
    convergence_analysis,
)
from mc_derivatives.pricing import estimate_convergence_rate

RATE = 0.05
VOLATILITY = 0.20


def build_instruments(valuation: datetime, barrier_level: float) -> dict:
    """Vanilla, up-and-out and up-and-in calls maturing in one year."""
    expiry = valuation + timedelta(days=365.25)
    common = {
        "strike": 100.0,
        "exercise_datetime": expiry,
        "settlement_datetime": expiry,
        "option_type": OptionType.CALL,
        "underlying_currency": Currency.USD,
    }
    return {
        "Vanilla call": VanillaOption(**common),
        "Up-and-out call": BarrierOption(
            barrier=Barrier(BarrierType.UP_AND_OUT, barrier_level), **common
        ),
        "Up-and-in call": BarrierOption(
            barrier=Barrier(BarrierType.UP_AND_IN, barrier_level), **common
        ),
    }


def print_price_table(engine: MonteCarloEngine, instruments: dict, valuation: datetime) -> None:
    """Price every instrument under both processes."""
    processes = {
        "GBM": GBMProcess(GBMParams(s0=100.0, r=RATE, sigma=VOLATILITY, T=1.0)),
        "Heston": HestonProcess(HestonParams(
            s0=100.0, r=RATE, v0=0.04, kappa=2.0, theta=0.04, sigma_v=0.3, rho=-0.7, T=1.0
        )),
    }
    # Annual rate whose compound discount factor over one year equals exp(-RATE)
    annual_rate = np.exp(RATE) - 1.0

    print("\n" + "=" * 60)
    print("MONTE CARLO PRICES")
    print("=" * 60)
    print(f"\n  {'Instrument':<18}{'Process':<10}{'Price':>10}{'Std Err':>10}")
    print("  " + "-" * 48)

    for process_name, process in processes.items():
        for name, instrument in instruments.items():
            result = engine.price(instrument, process, annual_rate, valuation_datetime=valuation)
            print(
                f"  {name:<18}{process_name:<10}"
                f"{result.price:>10.4f}{result.standard_error:>10.4f}"
            )

    bs = black_scholes_price(100.0, 100.0, RATE, VOLATILITY, 1.0, OptionType.CALL)
    print(f"\n  Black-Scholes vanilla call: {bs:.4f}")


def print_convergence(instruments: dict, valuation: datetime) -> None:
    """Vanilla GBM price vs Black-Scholes as the path count grows."""
    process = GBMProcess(GBMParams(s0=100.0, r=RATE, sigma=VOLATILITY, T=1.0))
    reference = black_scholes_price(100.0, 100.0, RATE, VOLATILITY, 1.0, OptionType.CALL)

    df = convergence_analysis(
        instruments["Vanilla call"],
        process,
        np.exp(RATE) - 1.0,
        reference,
        path_counts=(1_000, 4_000, 16_000),
        number_of_steps=100,
        valuation_datetime=valuation,
    )

    print("\n" + "=" * 60)
    print("CONVERGENCE TO BLACK-SCHOLES")
    print("=" * 60)
    print(df.to_string(index=False, float_format=lambda x: f"{x:.4f}"))
    print(f"\n  Standard error slope: {estimate_convergence_rate(df):.3f} (theory: -0.5)")


def main() -> None:
    """Run barrier pricing demo."""
    parser = argparse.ArgumentParser(description="Vanilla/Barrier Monte Carlo Demo")
    parser.add_argument("--paths", type=int, default=20_000, help="Paths (default: 20000)")
    parser.add_argument("--steps", type=int, default=252, help="Steps per path (default: 252)")
    parser.add_argument("--workers", type=int, default=1, help="Worker threads (default: 1)")
    parser.add_argument("--seed", type=int, default=42, help="Root seed (default: 42)")
    parser.add_argument("--barrier", type=float, default=130.0, help="Barrier level (default: 130)")
    parser.add_argument("--verbose", action="store_true", help="Log engine progress")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    valuation = datetime.now(timezone.utc)
    instruments = build_instruments(valuation, args.barrier)
    engine = MonteCarloEngine(SimulationConfig(
        n_paths=args.paths,
        n_steps=args.steps,
        seed=args.seed,
        n_workers=args.workers,
        verbose=args.verbose,
    ))

    print_price_table(engine, instruments, valuation)
    print_convergence(instruments, valuation)

    print("\n" + "=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
