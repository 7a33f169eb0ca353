"""
Observed rate of an accrual period.

Each observation variant has a function object with a pair of methods:

- rate(observation, start_date, end_date, env): the observed rate
- rate_sensitivity(observation, start_date, end_date, env): its point
  sensitivity to the market quantities it reads

Where the formula has intermediate values, a forward pass stores them in a
small record and the backward pass consumes that record, so that the
derivative always matches the formula it differentiates.

DispatchingRateObservationFn selects the function by observation type.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from ratesweep.utils.error import LibError
from ratesweep.utils.messages import format_message
from ratesweep.sensitivity.point_sensitivity import PointSensitivities
from ratesweep.trades.rates.observations import (FixedRateObservation,
                                                 IborRateObservation,
                                                 OvernightCompoundedRateObservation,
                                                 OvernightAveragedRateObservation,
                                                 InflationMonthlyRateObservation,
                                                 InflationInterpolatedRateObservation)

logger = logging.getLogger(__name__)

###############################################################################


class FixedRateObservationFn:

    def rate(self, observation, start_date, end_date, env) -> float:
        return observation.rate

    def rate_sensitivity(self, observation, start_date, end_date, env) -> PointSensitivities:
        return PointSensitivities.none()

###############################################################################


class IborRateObservationFn:

    def rate(self, observation, start_date, end_date, env) -> float:
        return env.ibor_rate(observation)

    def rate_sensitivity(self, observation, start_date, end_date, env) -> PointSensitivities:
        return env.ibor_rate_sensitivity(observation)

###############################################################################


@dataclass(frozen=True)
class _OvernightSweep:
    """ Daily rates and accrual factors of an overnight observation. """
    publication_dates: Tuple
    rates: Tuple[float, ...]
    accruals: Tuple[float, ...]
    total_accrual: float


def _overnight_forward(observation, env) -> _OvernightSweep:
    index = observation.index
    n = len(observation.fixing_dates)
    publication_dates = []
    rates = []
    accruals = []
    published = {}

    for i in range(n):
        pub_dt = observation.fixing_dates[observation.publication_index(i)]
        if pub_dt not in published:
            published[pub_dt] = env.overnight_rate(index, pub_dt)
        publication_dates.append(pub_dt)
        rates.append(published[pub_dt])
        accruals.append(observation.accrual_year_fraction(i))

    total = sum(accruals)
    if total <= 0.0:
        raise LibError(format_message(
            "Overnight observation {} to {} has no accrual",
            observation.start_date, observation.end_date))

    return _OvernightSweep(tuple(publication_dates), tuple(rates),
                           tuple(accruals), total)


def _overnight_backward(observation, sweep, rate_bars, env) -> PointSensitivities:
    """ Pull back d rate / d r_i onto the rate sensitivity of each fixing. """
    sens = PointSensitivities.none()
    for pub_dt, bar in zip(sweep.publication_dates, rate_bars):
        if bar == 0.0:
            continue
        sens = sens.combined_with(
            env.overnight_rate_sensitivity(observation.index, pub_dt).multiplied_by(bar))
    return sens.normalized()


class OvernightCompoundedRateObservationFn:
    """ (prod(1 + r_i * tau_i) - 1) / sum(tau_i) """

    def rate(self, observation, start_date, end_date, env) -> float:
        sweep = _overnight_forward(observation, env)
        product = 1.0
        for r, tau in zip(sweep.rates, sweep.accruals):
            product *= 1.0 + r * tau
        return (product - 1.0) / sweep.total_accrual

    def rate_sensitivity(self, observation, start_date, end_date, env) -> PointSensitivities:
        sweep = _overnight_forward(observation, env)
        factors = [1.0 + r * tau for r, tau in zip(sweep.rates, sweep.accruals)]

        # product of all factors except the i-th, without dividing by factors
        n = len(factors)
        prefix = [1.0] * (n + 1)
        for i in range(n):
            prefix[i + 1] = prefix[i] * factors[i]
        suffix = [1.0] * (n + 1)
        for i in range(n - 1, -1, -1):
            suffix[i] = suffix[i + 1] * factors[i]

        bars = [prefix[i] * suffix[i + 1] * sweep.accruals[i] / sweep.total_accrual
                for i in range(n)]
        return _overnight_backward(observation, sweep, bars, env)


class OvernightAveragedRateObservationFn:
    """ sum(r_i * tau_i) / sum(tau_i) """

    def rate(self, observation, start_date, end_date, env) -> float:
        sweep = _overnight_forward(observation, env)
        accrued = sum(r * tau for r, tau in zip(sweep.rates, sweep.accruals))
        return accrued / sweep.total_accrual

    def rate_sensitivity(self, observation, start_date, end_date, env) -> PointSensitivities:
        sweep = _overnight_forward(observation, env)
        bars = [tau / sweep.total_accrual for tau in sweep.accruals]
        return _overnight_backward(observation, sweep, bars, env)

###############################################################################


class InflationMonthlyRateObservationFn:
    """ I(end) / I(start) - 1 """

    def rate(self, observation, start_date, end_date, env) -> float:
        index_start = env.inflation_index_rate(observation.index,
                                               observation.reference_start_month)
        index_end = env.inflation_index_rate(observation.index,
                                             observation.reference_end_month)
        return index_end / index_start - 1.0

    def rate_sensitivity(self, observation, start_date, end_date, env) -> PointSensitivities:
        index = observation.index
        index_start = env.inflation_index_rate(index, observation.reference_start_month)
        index_end = env.inflation_index_rate(index, observation.reference_end_month)

        start_bar = -index_end / (index_start * index_start)
        end_bar = 1.0 / index_start

        sens_start = env.inflation_index_rate_sensitivity(
            index, observation.reference_start_month).multiplied_by(start_bar)
        sens_end = env.inflation_index_rate_sensitivity(
            index, observation.reference_end_month).multiplied_by(end_bar)
        return sens_start.combined_with(sens_end).normalized()

###############################################################################


@dataclass(frozen=True)
class _IndexRatioSweep:
    """ Interpolated start and end index values. """
    index_start: float
    index_start_interp: float
    index_end: float
    index_end_interp: float
    numerator: float
    denominator: float


class InflationInterpolatedRateObservationFn:
    """ (w * I(e) + (1 - w) * I(e + 1)) / (w * I(s) + (1 - w) * I(s + 1)) - 1 """

    def _forward(self, observation, env) -> _IndexRatioSweep:
        index = observation.index
        w = observation.weight
        i_s = env.inflation_index_rate(index, observation.reference_start_month)
        i_s1 = env.inflation_index_rate(index, observation.reference_start_interpolation_month)
        i_e = env.inflation_index_rate(index, observation.reference_end_month)
        i_e1 = env.inflation_index_rate(index, observation.reference_end_interpolation_month)
        numerator = w * i_e + (1.0 - w) * i_e1
        denominator = w * i_s + (1.0 - w) * i_s1
        return _IndexRatioSweep(i_s, i_s1, i_e, i_e1, numerator, denominator)

    def rate(self, observation, start_date, end_date, env) -> float:
        sweep = self._forward(observation, env)
        return sweep.numerator / sweep.denominator - 1.0

    def rate_sensitivity(self, observation, start_date, end_date, env) -> PointSensitivities:
        sweep = self._forward(observation, env)
        index = observation.index
        w = observation.weight
        den2 = sweep.denominator * sweep.denominator

        bars = ((observation.reference_end_month, w / sweep.denominator),
                (observation.reference_end_interpolation_month,
                 (1.0 - w) / sweep.denominator),
                (observation.reference_start_month, -sweep.numerator * w / den2),
                (observation.reference_start_interpolation_month,
                 -sweep.numerator * (1.0 - w) / den2))

        sens = PointSensitivities.none()
        for month, bar in bars:
            if bar == 0.0:
                continue
            sens = sens.combined_with(
                env.inflation_index_rate_sensitivity(index, month).multiplied_by(bar))
        return sens.normalized()

###############################################################################


DEFAULT_OBSERVATION_FNS = {
    FixedRateObservation: FixedRateObservationFn(),
    IborRateObservation: IborRateObservationFn(),
    OvernightCompoundedRateObservation: OvernightCompoundedRateObservationFn(),
    OvernightAveragedRateObservation: OvernightAveragedRateObservationFn(),
    InflationMonthlyRateObservation: InflationMonthlyRateObservationFn(),
    InflationInterpolatedRateObservation: InflationInterpolatedRateObservationFn(),
}


class DispatchingRateObservationFn:
    """ Routes each observation to the function registered for its type. """

    def __init__(self, fns: Dict[type, object] = None):
        self._fns = dict(DEFAULT_OBSERVATION_FNS)
        if fns:
            self._fns.update(fns)

    def _fn(self, observation):
        fn = self._fns.get(type(observation))
        if fn is None:
            raise LibError(format_message(
                "No rate function for observation {}", type(observation).__name__))
        return fn

    def rate(self, observation, start_date, end_date, env) -> float:
        value = self._fn(observation).rate(observation, start_date, end_date, env)
        logger.debug("Observed %s rate %s for %s to %s",
                     type(observation).__name__, value, start_date, end_date)
        return value

    def rate_sensitivity(self, observation, start_date, end_date, env) -> PointSensitivities:
        return self._fn(observation).rate_sensitivity(observation, start_date,
                                                      end_date, env)

###############################################################################
