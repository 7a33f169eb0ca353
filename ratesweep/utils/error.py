"""
Exception classes for ratesweep library errors.

Provides a specialized exception type to distinguish errors originating
from the ratesweep library from other Python exceptions, and two narrower
kinds raised by the pricers:

- MarketDataError: a curve, index value, fixing or FX rate required by a
  valuation is not available in the rates environment. Never defaulted.
- PreconditionError: the trade structure does not satisfy what an operation
  needs (no fixed leg for a par rate, compounding with non-unit accrual
  factors, unsupported PVBP compounding, ...).

Example:
    >>> from ratesweep.utils.error import LibError, MarketDataError
    >>>
    >>> try:
    ...     env.discount_factor(CurrencyTypes.JPY, payment_dt)
    ... except MarketDataError as e:
    ...     print(f"ratesweep error: {e._message}")
"""


class LibError(Exception):
    """ Class to understand if the error is coming from this library """

    def __init__(self,
                 message: str):
        """ Create error object """
        super().__init__(message)
        self._message = message

    def _print(self):
        print("LibError:", self._message)


class MarketDataError(LibError, KeyError):
    """ A value needed for pricing is missing from the rates environment. """

    def __str__(self):
        # KeyError quotes its argument, keep the plain message instead
        return self._message


class PreconditionError(LibError, ValueError):
    """ The product structure is not supported by the requested measure. """
