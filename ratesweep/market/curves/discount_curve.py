##############################################################################

##############################################################################

"""
Zero rate discount curve.

The curve is defined by continuously compounded zero rates at node times
(year fractions from the valuation date). Discount factors are
df(t) = exp(-z(t) * t) with z(t) linearly interpolated between nodes.

The same class serves as a discounting curve (keyed by currency in the
rates environment) and as a forward curve for an Ibor or overnight index.

Example:
    >>> curve = DiscountCurve("GBP-DSC", [0.5, 1.0, 5.0], [0.045, 0.044, 0.040])
    >>> curve.df(2.0)
    >>> up = curve.bumped(1, 1e-4)   # bump the 1Y node by one basis point
"""

from typing import List, Optional, Union

import numpy as np

from ratesweep.utils.error import LibError
from ratesweep.utils.helpers import label_to_string
from ratesweep.market.curves.interpolator import InterpTypes, LinearZeroInterpolator

###############################################################################


class DiscountCurve:
    """ Curve of zero rates on node times, linear in zero rates. """

    def __init__(self,
                 name: str,
                 times: Union[List[float], np.ndarray],
                 zero_rates: Union[List[float], np.ndarray],
                 interp_type: InterpTypes = InterpTypes.LINEAR_ZERO_RATES):

        zero_rates = np.asarray(zero_rates, dtype=float)

        if len(times) != len(zero_rates):
            raise LibError("Times and zero rates must have the same length")

        if interp_type != InterpTypes.LINEAR_ZERO_RATES:
            raise LibError(f"Interpolation {interp_type} not supported")

        self._name = name
        self._interpolator = LinearZeroInterpolator(times)
        self._zero_rates = zero_rates
        self._interp_type = interp_type

    @property
    def name(self) -> str:
        return self._name

    @property
    def times(self) -> np.ndarray:
        return self._interpolator.times

    @property
    def zero_rates(self) -> np.ndarray:
        return self._zero_rates.copy()

    @property
    def num_nodes(self) -> int:
        return self._zero_rates.size

###############################################################################

    def zero_rate(self, t: float) -> float:
        return self._interpolator.interpolate(t, self._zero_rates)

    def df(self, t: float) -> float:
        """ Discount factor to time t. Times at or before zero give 1. """
        if t <= 0.0:
            return 1.0
        return float(np.exp(-self.zero_rate(t) * t))

    def node_weights(self, t: float) -> np.ndarray:
        return self._interpolator.node_weights(t)

    def df_node_sensitivity(self, t: float) -> np.ndarray:
        """ d df(t) / d z_k for every node k. """
        if t <= 0.0:
            return np.zeros(self.num_nodes)
        return -t * self.df(t) * self.node_weights(t)

###############################################################################

    def bumped(self, node: Optional[int], shift: float) -> "DiscountCurve":
        """ New curve with one node (or all nodes when node is None)
        shifted by an additive amount. """
        rates = self._zero_rates.copy()
        if node is None:
            rates = rates + shift
        else:
            rates[node] += shift
        return DiscountCurve(self._name, self.times, rates, self._interp_type)

###############################################################################

    def __repr__(self):
        s = label_to_string("OBJECT TYPE", type(self).__name__)
        s += label_to_string("NAME", self._name)
        s += label_to_string("INTERP TYPE", self._interp_type.name)
        s += label_to_string("TIMES", list(np.round(self.times, 6)))
        s += label_to_string("ZERO RATES", list(np.round(self._zero_rates, 8)))
        return s

###############################################################################
