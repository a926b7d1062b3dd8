"""
Pricing Errors
==============
Exceptions raised while loading pricing data. None of them is fatal: callers
fall through to the next data source or keep the current table.
"""


class PricingError(Exception):
    """Base class for pricing errors."""


class PricingDataError(PricingError):
    """Pricing bytes could not be parsed into a pricing table."""


class PricingSourceError(PricingError):
    """A pricing data source could not produce data."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message
