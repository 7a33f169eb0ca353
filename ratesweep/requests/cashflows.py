"""
Future cash flows of a swap.

A CashFlow is one payment on or after the valuation date, with its
undiscounted (forecast) amount and the discount factor to its payment date.
CashFlows keeps its entries in chronological order; combined_with merges
two sets preserving that order.
"""

import datetime
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List

import pandas as pd

from ratesweep.utils.currency import CurrencyTypes
from ratesweep.utils.helpers import format_table
from ratesweep.requests.results_base import BaseResult, ExportMixin

###############################################################################


@dataclass(frozen=True)
class CashFlow:
    payment_date: datetime.date
    currency: CurrencyTypes
    forecast_value: float
    discount_factor: float

    @property
    def present_value(self) -> float:
        return self.forecast_value * self.discount_factor

    def to_dict(self) -> Dict[str, Any]:
        return {"payment_date": self.payment_date,
                "currency": self.currency.name,
                "forecast_value": self.forecast_value,
                "discount_factor": self.discount_factor,
                "present_value": self.present_value}

###############################################################################


class CashFlows(BaseResult, ExportMixin):

    def __init__(self, cash_flows: Iterable[CashFlow] = ()):
        # stable sort keeps leg order for equal dates
        self._flows = tuple(sorted(cash_flows, key=lambda cf: cf.payment_date))

    @classmethod
    def none(cls) -> "CashFlows":
        return cls(())

    @property
    def cash_flows(self) -> List[CashFlow]:
        return list(self._flows)

    def __iter__(self) -> Iterator[CashFlow]:
        return iter(self._flows)

    def __len__(self):
        return len(self._flows)

    def __getitem__(self, i: int) -> CashFlow:
        return self._flows[i]

    def combined_with(self, other: "CashFlows") -> "CashFlows":
        return CashFlows(self._flows + other._flows)

    def to_dict(self) -> Dict[str, Any]:
        return {"cash_flows": [cf.to_dict() for cf in self._flows]}

    @property
    def df(self) -> pd.DataFrame:
        return pd.DataFrame([cf.to_dict() for cf in self._flows],
                            columns=["payment_date", "currency", "forecast_value",
                                     "discount_factor", "present_value"])

    def table(self) -> str:
        rows = [[cf.payment_date, cf.currency.name, round(cf.forecast_value, 2),
                 round(cf.discount_factor, 8), round(cf.present_value, 2)]
                for cf in self._flows]
        return str(format_table(["PAYMENT DATE", "CCY", "FORECAST", "DF", "PV"], rows))

    def __repr__(self):
        return f"CashFlows(count={len(self._flows)})"

###############################################################################
