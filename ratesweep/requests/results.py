"""
Result classes for storing valuation and risk analytics.

Provides:
- CurrencyAmount: Monetary amount with currency
- MultiCurrencyAmount: One amount per currency, no implicit conversion
- Ladder: Tenor -> sensitivity mapping with a DataFrame view
- CurveDelta: First-order sensitivity to the nodes of one curve
- Risk: Container for multiple curve deltas
- AnalyticsResult: Complete result set returned by the Engine

All classes support arithmetic operations where appropriate and provide
formatted output for analysis.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

import numpy as np
import pandas as pd
from tabulate import tabulate

from ratesweep.utils.error import LibError
from ratesweep.utils.currency import CurrencyTypes
from ratesweep.requests.results_base import BaseResult, ExportMixin

###############################################################################


@dataclass(frozen=True)
class CurrencyAmount:
    """
    A monetary amount together with its currency.

    Supports arithmetic operations (+, -, *, /) when currencies match.
    Immutable dataclass suitable for use in aggregations.

    Attributes:
        amount (float): Monetary value
        currency (CurrencyTypes): Currency denomination

    Example:
        >>> v1 = CurrencyAmount(1000.0, CurrencyTypes.GBP)
        >>> v2 = CurrencyAmount(500.0, CurrencyTypes.GBP)
        >>> total = v1 + v2  # CurrencyAmount(1500.0, GBP)
        >>> scaled = v1 * 1.1  # CurrencyAmount(1100.0, GBP)
    """
    amount: float
    currency: CurrencyTypes

    def __post_init__(self):
        if not isinstance(self.currency, CurrencyTypes):
            raise LibError(
                f"currency must be a CurrencyTypes enum, got {type(self.currency)}"
            )

    def __repr__(self) -> str:
        return f"{self.amount:.2f} {self.currency.name}"

    def __add__(self, other: Any) -> "CurrencyAmount":
        if not isinstance(other, CurrencyAmount):
            return NotImplemented
        if self.currency is not other.currency:
            raise LibError(
                f"Cannot add {self.currency.name} to {other.currency.name}"
            )
        return CurrencyAmount(self.amount + other.amount, self.currency)

    def __sub__(self, other: Any) -> "CurrencyAmount":
        if not isinstance(other, CurrencyAmount):
            return NotImplemented
        if self.currency is not other.currency:
            raise LibError(
                f"Cannot subtract {other.currency.name} from {self.currency.name}"
            )
        return CurrencyAmount(self.amount - other.amount, self.currency)

    def __mul__(self, factor: float) -> "CurrencyAmount":
        return CurrencyAmount(self.amount * factor, self.currency)

    def __rmul__(self, factor: float) -> "CurrencyAmount":
        return self.__mul__(factor)

    def __truediv__(self, divisor: float) -> "CurrencyAmount":
        return CurrencyAmount(self.amount / divisor, self.currency)

    def __neg__(self) -> "CurrencyAmount":
        return CurrencyAmount(-self.amount, self.currency)

    def __radd__(self, other: Any) -> "CurrencyAmount":
        # support sum() with initial zero
        if other == 0:
            return self
        return self.__add__(other)

    def convert_to(self, currency: CurrencyTypes, env) -> "CurrencyAmount":
        """ Convert with the spot FX rate of the rates environment. """
        if currency == self.currency:
            return self
        return CurrencyAmount(self.amount * env.fx_rate(self.currency, currency),
                              currency)

###############################################################################


class MultiCurrencyAmount(BaseResult, ExportMixin):
    """
    A set of amounts, at most one per currency.

    Adding an amount in a currency already present sums the two; amounts in
    different currencies are never combined unless convert_to is called with
    a rates environment.

    Example:
        >>> mca = MultiCurrencyAmount.of(CurrencyAmount(100.0, CurrencyTypes.GBP),
        ...                              CurrencyAmount(-120.0, CurrencyTypes.USD))
        >>> mca.amount(CurrencyTypes.USD)
        -120.0
        >>> mca.convert_to(CurrencyTypes.GBP, env)
    """

    def __init__(self, amounts: Optional[Dict[CurrencyTypes, float]] = None):
        self._amounts = {}  # type: Dict[CurrencyTypes, float]
        for ccy, amt in (amounts or {}).items():
            if not isinstance(ccy, CurrencyTypes):
                raise LibError(f"currency must be CurrencyTypes, got {type(ccy)}")
            self._amounts[ccy] = self._amounts.get(ccy, 0.0) + float(amt)

    @classmethod
    def empty(cls) -> "MultiCurrencyAmount":
        return cls({})

    @classmethod
    def of(cls, *amounts: CurrencyAmount) -> "MultiCurrencyAmount":
        mca = cls({})
        for a in amounts:
            mca = mca.plus(a)
        return mca

    @property
    def currencies(self) -> List[CurrencyTypes]:
        return list(self._amounts)

    def __len__(self):
        return len(self._amounts)

    def __iter__(self) -> Iterator[CurrencyAmount]:
        return (CurrencyAmount(a, c) for c, a in self._amounts.items())

    def __contains__(self, currency: CurrencyTypes) -> bool:
        return currency in self._amounts

    def amount(self, currency: CurrencyTypes) -> float:
        if currency not in self._amounts:
            raise LibError(f"No amount for currency {currency.name}")
        return self._amounts[currency]

    def plus(self, other: Union[CurrencyAmount, "MultiCurrencyAmount"]) -> "MultiCurrencyAmount":
        amounts = dict(self._amounts)
        if isinstance(other, CurrencyAmount):
            amounts[other.currency] = amounts.get(other.currency, 0.0) + other.amount
        elif isinstance(other, MultiCurrencyAmount):
            for c, a in other._amounts.items():
                amounts[c] = amounts.get(c, 0.0) + a
        else:
            raise LibError(f"Cannot add {type(other).__name__} to MultiCurrencyAmount")
        return MultiCurrencyAmount(amounts)

    def multiplied_by(self, factor: float) -> "MultiCurrencyAmount":
        return MultiCurrencyAmount({c: a * factor for c, a in self._amounts.items()})

    def __add__(self, other):
        if not isinstance(other, (CurrencyAmount, MultiCurrencyAmount)):
            return NotImplemented
        return self.plus(other)

    def __radd__(self, other):
        if other == 0:
            return self
        return self.__add__(other)

    def __neg__(self):
        return self.multiplied_by(-1.0)

    def __eq__(self, other):
        if not isinstance(other, MultiCurrencyAmount):
            return NotImplemented
        return self._amounts == other._amounts

    __hash__ = None

    def convert_to(self, currency: CurrencyTypes, env) -> CurrencyAmount:
        """ Sum of all amounts converted with the spot FX rates of env. """
        total = 0.0
        for c, a in self._amounts.items():
            total += a * env.fx_rate(c, currency)
        return CurrencyAmount(total, currency)

    def to_dict(self) -> Dict[str, Any]:
        return {c.name: a for c, a in self._amounts.items()}

    @property
    def df(self) -> pd.DataFrame:
        df = pd.DataFrame({"amount": list(self._amounts.values())},
                          index=[c.name for c in self._amounts])
        df.index.name = "currency"
        return df

    def __repr__(self):
        parts = [f"{a:.2f} {c.name}" for c, a in self._amounts.items()]
        return f"MultiCurrencyAmount({', '.join(parts)})"

###############################################################################


class Ladder:
    """
    Encapsulates a tenor->sensitivity mapping and provides a DataFrame view.

    Example:
        >>> data = {"1Y": 10.5, "5Y": -8.2, "10Y": 15.3}
        >>> ladder = Ladder(data, "GBP-DSC")
        >>> df = ladder.df  # Returns pandas DataFrame
    """
    def __init__(self, data: Dict[str, float], curve_name: str):
        self.data = data
        self._curve_name = curve_name

    @property
    def df(self) -> pd.DataFrame:
        """
        Return the risk ladder as a pandas DataFrame:
          - index: tenor strings
          - single column: "<CURVE>_Risk"
        """
        df = pd.DataFrame.from_dict(
            self.data,
            orient='index',
            columns=[f"{self._curve_name}_Risk"]
        )
        df.index.name = 'Tenor'
        return df

    def to_dict(self) -> Dict[str, float]:
        """Return the raw tenor->value mapping."""
        return dict(self.data)

    def __repr__(self):
        count = len(self.data)
        return f"Ladder(curve={self._curve_name}, points={count}, curve_data={self.data})"

###############################################################################


def node_tenor_label(t: float) -> str:
    """ Label of a curve node time in years, e.g. 0.5 -> '0.5Y'. """
    return f"{t:g}Y"


@dataclass(frozen=True)
class CurveDelta:
    """
    First-order sensitivity of a value to every node of one curve.

    risk_ladder[k] is d value / d z_k where z_k is the zero rate (discount
    and forward curves) or zero inflation rate (price index curves) at node
    k. Multiply by ONE_BP for the value of a one basis point node move.

    Attributes:
        risk_ladder (np.ndarray): Sensitivities for each node (shape: [N])
        tenors (List[str]): Node labels (e.g., ["0.5Y", "1Y", "5Y"])
        currency (CurrencyTypes): Currency of the sensitivities
        curve_name (str): Name of the curve in the rates environment
    """
    risk_ladder: np.ndarray
    tenors: List[str]
    currency: CurrencyTypes
    curve_name: str

    def __post_init__(self):
        arr = np.asarray(self.risk_ladder, dtype=float)
        object.__setattr__(self, 'risk_ladder', arr)
        n = len(arr)
        if n != len(self.tenors):
            raise LibError(f"Expected {n} tenors, got {len(self.tenors)}")
        if not isinstance(self.currency, CurrencyTypes):
            raise LibError(
                f"currency must be CurrencyTypes, got {type(self.currency)}"
            )

    @property
    def value(self) -> CurrencyAmount:
        """Sum of the ladder, the parallel shift sensitivity."""
        return CurrencyAmount(float(np.sum(self.risk_ladder)), self.currency)

    @property
    def ladder(self) -> Ladder:
        data = dict(zip(self.tenors, self.risk_ladder.tolist()))
        return Ladder(data, self.curve_name)

    def __repr__(self):
        total = self.value.amount
        return (
            f"{self.__class__.__name__}("
            f"{self.curve_name}: {total:.6g} {self.currency.name}, "
            f"points={len(self.tenors)})"
        )

    def __add__(self, other: Any) -> "CurveDelta":
        if not isinstance(other, CurveDelta):
            return NotImplemented
        if (self.curve_name != other.curve_name or
            self.currency != other.currency or
            self.tenors != other.tenors):
            raise LibError(
                "Cannot add CurveDelta with mismatched curve, currency, or tenors"
            )
        return CurveDelta(self.risk_ladder + other.risk_ladder,
                          self.tenors, self.currency, self.curve_name)

    def __radd__(self, other: Any) -> "CurveDelta":
        if other == 0:
            return self
        return self.__add__(other)

###############################################################################


class Risk(BaseResult, ExportMixin):
    """
    Container for per-curve delta ladders.

    Access patterns:
        1. Callable: risk("GBP-DSC")
        2. Attribute: risk.GBP_DSC when the curve name is a valid identifier
           after replacing '-' by '_'

    Raises:
        LibError: If duplicate curve names provided
    """
    def __init__(self, deltas: Iterable[CurveDelta]):
        self._by_curve = {}  # type: Dict[str, CurveDelta]

        for delta in deltas:
            name = delta.curve_name
            if name in self._by_curve:
                raise LibError(f"Duplicate curve {name}")
            self._by_curve[name] = delta
            attr = name.replace("-", "_")
            if attr.isidentifier() and not hasattr(type(self), attr):
                setattr(self, attr, delta)

    def __call__(self, curve_name: str) -> CurveDelta:
        try:
            return self._by_curve[curve_name]
        except KeyError:
            raise LibError(f"No risk data for curve: {curve_name}")

    @property
    def curve_names(self) -> List[str]:
        return list(self._by_curve)

    def __len__(self):
        return len(self._by_curve)

    def __iter__(self) -> Iterator[CurveDelta]:
        return iter(self._by_curve.values())

    def to_dict(self) -> Dict[str, Any]:
        return {name: {"currency": d.currency.name,
                       "ladder": d.ladder.to_dict()}
                for name, d in self._by_curve.items()}

    @property
    def df(self) -> pd.DataFrame:
        rows = []
        for name, d in self._by_curve.items():
            for tenor, v in zip(d.tenors, d.risk_ladder.tolist()):
                rows.append({"curve": name, "tenor": tenor,
                             "currency": d.currency.name, "delta": v})
        return pd.DataFrame(rows, columns=["curve", "tenor", "currency", "delta"])

    def table(self) -> str:
        """ Ladders as a grid table for printing. """
        return tabulate(self.df, headers='keys', tablefmt='grid',
                        floatfmt=".4f", showindex=False)

    def __repr__(self):
        parts = []
        for name, obj in self._by_curve.items():
            mv = obj.value
            parts.append(f"{name}={mv.amount:.6g} {mv.currency.name}")
        return f"{self.__class__.__name__}({', '.join(parts)})"

###############################################################################


class AnalyticsResult:
    """
    Complete analytics result set returned by Engine.compute().

    Args:
        value (Optional[MultiCurrencyAmount or CurrencyAmount]): Present value
        risk (Optional[Risk]): Delta ladders per curve
        par_rate (Optional[float]): Par rate of the first fixed leg
        par_spread (Optional[float]): Par spread of the first leg
        cash_flows (Optional[CashFlows]): Future cash flows of all legs
        forecast_value (Optional[MultiCurrencyAmount or CurrencyAmount]):
            Undiscounted value

    Example:
        >>> result = engine.compute(swap, [RequestTypes.VALUE, RequestTypes.DELTA])
        >>> print(result.value)
        >>> print(result.risk("GBP-DSC").ladder.df)
    """
    def __init__(
        self,
        value=None,
        risk: Optional[Risk] = None,
        par_rate: Optional[float] = None,
        par_spread: Optional[float] = None,
        cash_flows=None,
        forecast_value=None,
    ):
        self._value = value
        self._risk = risk
        self._par_rate = par_rate
        self._par_spread = par_spread
        self._cash_flows = cash_flows
        self._forecast_value = forecast_value

    @property
    def value(self):
        return self._value

    @property
    def risk(self) -> Optional[Risk]:
        return self._risk

    @property
    def par_rate(self) -> Optional[float]:
        return self._par_rate

    @property
    def par_spread(self) -> Optional[float]:
        return self._par_spread

    @property
    def cash_flows(self):
        return self._cash_flows

    @property
    def forecast_value(self):
        return self._forecast_value

    def __repr__(self):
        cls = self.__class__.__name__
        parts = []
        if self._value is not None:
            parts.append(f"value={self._value!r}")
        if self._forecast_value is not None:
            parts.append(f"forecast_value={self._forecast_value!r}")
        if self._par_rate is not None:
            parts.append(f"par_rate={self._par_rate:.8f}")
        if self._par_spread is not None:
            parts.append(f"par_spread={self._par_spread:.8f}")
        if self._risk is not None:
            parts.append(f"risk={self._risk!r}")
        if self._cash_flows is not None:
            parts.append(f"cash_flows={self._cash_flows!r}")
        return f"{cls}({', '.join(parts)})"

###############################################################################
