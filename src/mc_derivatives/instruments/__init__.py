"""
Payoff evaluators.

Provides:
- Vanilla European options
- Discretely monitored barrier options (knock-in / knock-out, up / down)
"""

from mc_derivatives.instruments.barrier import Barrier, BarrierOption, BarrierType
from mc_derivatives.instruments.base import Instrument, OptionType, intrinsic_value
from mc_derivatives.instruments.vanilla import VanillaOption

__all__ = [
    "Instrument",
    "OptionType",
    "intrinsic_value",
    "VanillaOption",
    "Barrier",
    "BarrierOption",
    "BarrierType",
]
