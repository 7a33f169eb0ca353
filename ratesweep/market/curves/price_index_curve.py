##############################################################################

##############################################################################

"""
Price index projection curve.

Projects monthly price index levels from a base month and value using
continuously compounded zero inflation rates on node times:

    I(m) = base_value * exp(z(t_m) * t_m),  t_m = months(base, m) / 12

Months at or before the base month are not projected; their values must
come from published fixings.
"""

from typing import List, Optional, Union

import numpy as np

from ratesweep.utils.error import MarketDataError
from ratesweep.utils.error import LibError
from ratesweep.utils.date import YearMonth
from ratesweep.utils.helpers import label_to_string
from ratesweep.market.curves.interpolator import LinearZeroInterpolator

###############################################################################


class PriceIndexCurve:

    def __init__(self,
                 name: str,
                 base_month: YearMonth,
                 base_value: float,
                 times: Union[List[float], np.ndarray],
                 zero_rates: Union[List[float], np.ndarray]):

        if base_value <= 0.0:
            raise LibError("Base index value must be positive")

        zero_rates = np.asarray(zero_rates, dtype=float)

        if len(times) != len(zero_rates):
            raise LibError("Times and zero rates must have the same length")

        self._name = name
        self._base_month = base_month
        self._base_value = base_value
        self._interpolator = LinearZeroInterpolator(times)
        self._zero_rates = zero_rates

    @property
    def name(self) -> str:
        return self._name

    @property
    def base_month(self) -> YearMonth:
        return self._base_month

    @property
    def times(self) -> np.ndarray:
        return self._interpolator.times

    @property
    def num_nodes(self) -> int:
        return self._zero_rates.size

    def _time(self, month: YearMonth) -> float:
        t = self._base_month.months_until(month) / 12.0
        if t <= 0.0:
            raise MarketDataError(
                f"Month {month} is not after base month {self._base_month} "
                f"of curve {self._name}")
        return t

    def value(self, month: YearMonth) -> float:
        t = self._time(month)
        z = self._interpolator.interpolate(t, self._zero_rates)
        return self._base_value * float(np.exp(z * t))

    def value_node_sensitivity(self, month: YearMonth) -> np.ndarray:
        """ d I(m) / d z_k for every node k. """
        t = self._time(month)
        return self.value(month) * t * self._interpolator.node_weights(t)

    def bumped(self, node: Optional[int], shift: float) -> "PriceIndexCurve":
        rates = self._zero_rates.copy()
        if node is None:
            rates = rates + shift
        else:
            rates[node] += shift
        return PriceIndexCurve(self._name, self._base_month, self._base_value,
                               self.times, rates)

    def __repr__(self):
        s = label_to_string("OBJECT TYPE", type(self).__name__)
        s += label_to_string("NAME", self._name)
        s += label_to_string("BASE MONTH", self._base_month)
        s += label_to_string("BASE VALUE", self._base_value)
        s += label_to_string("TIMES", list(np.round(self.times, 6)))
        s += label_to_string("ZERO RATES", list(np.round(self._zero_rates, 8)))
        return s

###############################################################################
