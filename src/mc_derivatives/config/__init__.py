"""
Configuration and tolerances.
"""

from mc_derivatives.config.settings import SETTINGS, Settings, SimulationConfig, ValidationConfig

__all__ = [
    "SETTINGS",
    "Settings",
    "SimulationConfig",
    "ValidationConfig",
]
