"""
Frozen configuration settings for Monte Carlo pricing.

All configuration is immutable (frozen dataclasses) so a config object can be
shared read-only across worker threads.

Environment overrides (read once, when SETTINGS is built):
    MC_DERIVATIVES_PATHS    default number of paths
    MC_DERIVATIVES_STEPS    default number of steps per path
    MC_DERIVATIVES_SEED     default seed (unset = fresh entropy per run)
    MC_DERIVATIVES_WORKERS  default worker-thread count
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from mc_derivatives.config.tolerances import (
    CASHFLOW_TOLERANCE,
    MC_STANDARD_ERRORS,
    PUT_CALL_PARITY_TOLERANCE,
)
from mc_derivatives.errors import ValidationError


def _env_int(name: str) -> Optional[int]:
    """Read an integer environment variable, None when unset or empty."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"CRITICAL: {name} must be an integer, got {raw!r}") from None


# =============================================================================
# Simulation Configuration
# =============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable Monte Carlo run configuration.

    Attributes
    ----------
    n_paths : int
        Default number of simulated paths
    n_steps : int
        Default number of Euler steps per path
    seed : int, optional
        Root seed; None draws fresh entropy on every run (not reproducible)
    n_workers : int
        Worker threads; 1 runs sequentially in the calling thread
    chunk_size : int
        Paths per work unit. Each chunk owns one random stream, so seeded
        results depend on chunk_size but not on n_workers.
    verbose : bool
        Log run progress at INFO
    """

    n_paths: int = 10_000  # [T3: Assumption]
    n_steps: int = 252  # Daily steps for one trading year [T1]
    seed: Optional[int] = None
    n_workers: int = 1
    chunk_size: int = 1_000
    verbose: bool = False

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.n_paths <= 0:
            raise ValidationError(f"CRITICAL: n_paths must be > 0, got {self.n_paths}")
        if self.n_steps <= 0:
            raise ValidationError(f"CRITICAL: n_steps must be > 0, got {self.n_steps}")
        if self.n_workers <= 0:
            raise ValidationError(f"CRITICAL: n_workers must be > 0, got {self.n_workers}")
        if self.chunk_size <= 0:
            raise ValidationError(f"CRITICAL: chunk_size must be > 0, got {self.chunk_size}")

    @classmethod
    def from_env(cls) -> "SimulationConfig":
        """Build a config from defaults overridden by MC_DERIVATIVES_* variables."""
        overrides = {
            "n_paths": _env_int("MC_DERIVATIVES_PATHS"),
            "n_steps": _env_int("MC_DERIVATIVES_STEPS"),
            "seed": _env_int("MC_DERIVATIVES_SEED"),
            "n_workers": _env_int("MC_DERIVATIVES_WORKERS"),
        }
        return cls(**{k: v for k, v in overrides.items() if v is not None})


# =============================================================================
# Validation Configuration
# =============================================================================

@dataclass(frozen=True)
class ValidationConfig:
    """
    Immutable tolerances used by pricing sanity checks.

    Attributes
    ----------
    put_call_parity_tolerance : float
        Absolute tolerance for closed-form put-call parity
    cashflow_tolerance : float
        Relative tolerance for cashflow round-trips
    mc_standard_errors : float
        Standard errors allowed between an MC estimate and a reference
    """

    put_call_parity_tolerance: float = PUT_CALL_PARITY_TOLERANCE
    cashflow_tolerance: float = CASHFLOW_TOLERANCE
    mc_standard_errors: float = MC_STANDARD_ERRORS


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from mc_derivatives.config.settings import SETTINGS
    >>> SETTINGS.simulation.n_paths
    10000
    """

    simulation: SimulationConfig = field(default_factory=SimulationConfig.from_env)
    validation: ValidationConfig = ValidationConfig()


# Singleton instance - import this
SETTINGS = Settings()
