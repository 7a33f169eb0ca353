##############################################################################

##############################################################################

from enum import Enum

import numpy as np

from ratesweep.utils.error import LibError

###############################################################################


class InterpTypes(Enum):
    LINEAR_ZERO_RATES = 4

###############################################################################


class LinearZeroInterpolator:
    """ Linear interpolation of zero rates between curve nodes with flat
    extrapolation on both sides. Because the interpolated rate is linear in
    the node rates, the weights returned by node_weights(t) are exactly
    d z(t) / d z_k and are used to map point sensitivities to nodes. """

    def __init__(self, times: np.ndarray):

        times = np.asarray(times, dtype=float)

        if times.ndim != 1 or times.size == 0:
            raise LibError("Interpolator needs a non-empty vector of times")

        if np.any(times <= 0.0):
            raise LibError("Curve node times must be positive")

        if np.any(np.diff(times) <= 0.0):
            raise LibError("Curve node times must be strictly increasing")

        self._times = times

    @property
    def times(self) -> np.ndarray:
        return self._times

    def interpolate(self, t: float, values: np.ndarray) -> float:
        return float(np.interp(t, self._times, values))

    def node_weights(self, t: float) -> np.ndarray:
        """ Weights w such that interpolate(t, v) == w @ v. """
        n = self._times.size
        w = np.zeros(n)

        if t <= self._times[0]:
            w[0] = 1.0
            return w

        if t >= self._times[-1]:
            w[-1] = 1.0
            return w

        i = int(np.searchsorted(self._times, t, side="right"))
        t0 = self._times[i - 1]
        t1 = self._times[i]
        w[i - 1] = (t1 - t) / (t1 - t0)
        w[i] = (t - t0) / (t1 - t0)
        return w

###############################################################################
