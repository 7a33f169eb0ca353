"""
Point sensitivities.

A point sensitivity is the derivative of a value with respect to one market
quantity read from the rates environment:

- ZeroRateSensitivity: continuously compounded zero rate of the discount
  curve of a currency at a date (d df / d z = -t * df)
- IborRateSensitivity: forward of an Ibor index for one fixing
- OvernightRateSensitivity: forward of an overnight index for one fixing
- InflationRateSensitivity: level of a price index for a reference month

Every point carries the currency of the value it differentiates and an
amount. PointSensitivities is the additive, mergeable collection the
pricers return: chain-rule steps scale it (multiplied_by), currency
conversion retags it (with_currency) and aggregation concatenates it
(combined_with). normalized() merges points with identical keys.

Example:
    >>> s1 = PointSensitivities.of(ZeroRateSensitivity(GBP, d1, GBP, -120.0))
    >>> s2 = PointSensitivities.of(ZeroRateSensitivity(GBP, d1, GBP, 20.0))
    >>> s1.combined_with(s2).normalized().total()
    -100.0
"""

import datetime
from dataclasses import dataclass, replace, asdict
from typing import Any, Dict, Iterable, Iterator, Tuple

import pandas as pd

from ratesweep.utils.error import LibError
from ratesweep.utils.currency import CurrencyTypes
from ratesweep.utils.date import YearMonth
from ratesweep.market.indices import IborIndex, OvernightIndex, PriceIndex
from ratesweep.requests.results_base import BaseResult, ExportMixin

###############################################################################


class PointSensitivity:
    """ Behaviour shared by all point sensitivity records. Subclasses are
    frozen dataclasses with `currency` and `amount` fields. """

    def key(self) -> Tuple:
        raise NotImplementedError

    def curve_label(self) -> str:
        raise NotImplementedError

    def bucket_label(self) -> str:
        raise NotImplementedError

    def with_amount(self, amount: float) -> "PointSensitivity":
        return replace(self, amount=amount)

    def with_currency(self, currency: CurrencyTypes) -> "PointSensitivity":
        if currency == self.currency:
            return self
        return replace(self, currency=currency)

    def multiplied_by(self, factor: float) -> "PointSensitivity":
        return replace(self, amount=self.amount * factor)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": type(self).__name__,
                "curve": self.curve_label(),
                "bucket": self.bucket_label(),
                "currency": self.currency.name,
                "amount": self.amount}


@dataclass(frozen=True)
class ZeroRateSensitivity(PointSensitivity):
    curve_currency: CurrencyTypes
    date: datetime.date
    currency: CurrencyTypes
    amount: float

    def key(self):
        return ("ZeroRate", self.curve_currency.name, self.date, self.currency.name)

    def curve_label(self):
        return f"{self.curve_currency.name} discounting"

    def bucket_label(self):
        return self.date.isoformat()


@dataclass(frozen=True)
class IborRateSensitivity(PointSensitivity):
    index: IborIndex
    fixing_date: datetime.date
    effective_date: datetime.date
    maturity_date: datetime.date
    year_fraction: float
    currency: CurrencyTypes
    amount: float

    def key(self):
        return ("IborRate", self.index.name, self.fixing_date,
                self.effective_date, self.maturity_date, self.currency.name)

    def curve_label(self):
        return self.index.name

    def bucket_label(self):
        return self.fixing_date.isoformat()


@dataclass(frozen=True)
class OvernightRateSensitivity(PointSensitivity):
    index: OvernightIndex
    fixing_date: datetime.date
    end_date: datetime.date
    currency: CurrencyTypes
    amount: float

    def key(self):
        return ("OvernightRate", self.index.name, self.fixing_date,
                self.end_date, self.currency.name)

    def curve_label(self):
        return self.index.name

    def bucket_label(self):
        return self.fixing_date.isoformat()


@dataclass(frozen=True)
class InflationRateSensitivity(PointSensitivity):
    index: PriceIndex
    reference_month: YearMonth
    currency: CurrencyTypes
    amount: float

    def key(self):
        return ("InflationRate", self.index.name,
                (self.reference_month.year, self.reference_month.month),
                self.currency.name)

    def curve_label(self):
        return self.index.name

    def bucket_label(self):
        return str(self.reference_month)

###############################################################################


class PointSensitivities(BaseResult, ExportMixin):
    """ Immutable collection of point sensitivities. """

    def __init__(self, points: Iterable[PointSensitivity] = ()):
        self._points = tuple(points)
        for p in self._points:
            if not isinstance(p, PointSensitivity):
                raise LibError(f"Not a point sensitivity: {p!r}")

    @classmethod
    def none(cls) -> "PointSensitivities":
        return cls(())

    @classmethod
    def of(cls, *points: PointSensitivity) -> "PointSensitivities":
        return cls(points)

    @property
    def points(self) -> Tuple[PointSensitivity, ...]:
        return self._points

    def __iter__(self) -> Iterator[PointSensitivity]:
        return iter(self._points)

    def __len__(self):
        return len(self._points)

###############################################################################

    def combined_with(self, other: "PointSensitivities") -> "PointSensitivities":
        if not isinstance(other, PointSensitivities):
            raise LibError("Can only combine with PointSensitivities")
        if len(other) == 0:
            return self
        if len(self) == 0:
            return other
        return PointSensitivities(self._points + other._points)

    def multiplied_by(self, factor: float) -> "PointSensitivities":
        return PointSensitivities(p.multiplied_by(factor) for p in self._points)

    def with_currency(self, currency: CurrencyTypes) -> "PointSensitivities":
        return PointSensitivities(p.with_currency(currency) for p in self._points)

    def normalized(self) -> "PointSensitivities":
        """ Sort by key and merge points sharing a key. """
        merged = {}
        for p in self._points:
            k = p.key()
            if k in merged:
                merged[k] = merged[k].with_amount(merged[k].amount + p.amount)
            else:
                merged[k] = p
        return PointSensitivities(merged[k] for k in sorted(merged))

    def __add__(self, other):
        if not isinstance(other, PointSensitivities):
            return NotImplemented
        return self.combined_with(other)

    def __radd__(self, other):
        if other == 0:
            return self
        return self.__add__(other)

    def __mul__(self, factor: float):
        return self.multiplied_by(factor)

    __rmul__ = __mul__

###############################################################################

    def total(self) -> float:
        """ Sum of all amounts; only meaningful within one currency. """
        return float(sum(p.amount for p in self._points))

    def equal_with_tolerance(self,
                             other: "PointSensitivities",
                             tolerance: float) -> bool:
        a = {p.key(): p.amount for p in self.normalized()}
        b = {p.key(): p.amount for p in other.normalized()}
        for k in set(a) | set(b):
            if abs(a.get(k, 0.0) - b.get(k, 0.0)) > tolerance:
                return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"points": [p.to_dict() for p in self._points]}

    @property
    def df(self) -> pd.DataFrame:
        return pd.DataFrame([p.to_dict() for p in self._points],
                            columns=["type", "curve", "bucket", "currency", "amount"])

    def __repr__(self):
        return f"PointSensitivities(points={len(self._points)})"

###############################################################################
