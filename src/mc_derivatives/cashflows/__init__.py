"""
Cashflow value types.
"""

from mc_derivatives.cashflows.cashflow import SECONDS_PER_YEAR, CashFlow, year_fraction
from mc_derivatives.cashflows.currency import Currency

__all__ = [
    "CashFlow",
    "Currency",
    "SECONDS_PER_YEAR",
    "year_fraction",
]
