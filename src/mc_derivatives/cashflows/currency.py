"""
Currency enumeration for cashflows.
"""

from enum import Enum


class Currency(Enum):
    """ISO 4217 currency codes supported for cashflows."""

    AUD = "AUD"
    CAD = "CAD"
    CHF = "CHF"
    CNH = "CNH"
    CZK = "CZK"
    DKK = "DKK"
    EUR = "EUR"
    HKD = "HKD"
    HUF = "HUF"
    JPY = "JPY"
    MXN = "MXN"
    NOK = "NOK"
    NZD = "NZD"
    PLN = "PLN"
    SEK = "SEK"
    SGD = "SGD"
    USD = "USD"
    ZAR = "ZAR"

    def __str__(self) -> str:
        return self.value
