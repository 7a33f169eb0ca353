"""
Price index (CPI/RPI/HICP) definition.

The index itself only identifies the series; published values live in the
time series of the rates environment and projected values on a
PriceIndexCurve.
"""

from dataclasses import dataclass

from ratesweep.utils.currency import CurrencyTypes


@dataclass(frozen=True)
class PriceIndex:
    name: str
    currency: CurrencyTypes

    def __str__(self):
        return self.name
