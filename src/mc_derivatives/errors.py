"""
Exception hierarchy for the pricing engine.

All pricing failures derive from PricingError. Validation and domain errors
also subclass ValueError so callers catching ValueError keep working.

NEVER fails silently - a wrong-but-plausible price is worse than an error.
"""


class PricingError(Exception):
    """Base class for all pricing engine errors."""

    pass


class ValidationError(PricingError, ValueError):
    """Raised when an operation's inputs violate an invariant (e.g. cashflow mismatch)."""

    pass


class DomainError(PricingError, ValueError):
    """Raised when an estimate is undefined for the given inputs (e.g. zero paths)."""

    pass


class PricingCancelled(PricingError):
    """Raised when a pricing call is cancelled cooperatively."""

    pass
