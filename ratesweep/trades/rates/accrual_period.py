"""
Rate accrual period: one accrual sub-period of a rate payment.
"""

import datetime
from dataclasses import dataclass, replace
from typing import Union

from ratesweep.utils.error import LibError
from ratesweep.utils.messages import format_message
from ratesweep.utils.date import check_dt
from ratesweep.utils.global_types import NegativeRateTypes
from ratesweep.trades.rates.observations import (FixedRateObservation,
                                                 IborRateObservation,
                                                 OvernightCompoundedRateObservation,
                                                 OvernightAveragedRateObservation,
                                                 InflationMonthlyRateObservation,
                                                 InflationInterpolatedRateObservation)

RateObservation = Union[FixedRateObservation,
                        IborRateObservation,
                        OvernightCompoundedRateObservation,
                        OvernightAveragedRateObservation,
                        InflationMonthlyRateObservation,
                        InflationInterpolatedRateObservation]

_OBSERVATION_TYPES = (FixedRateObservation,
                      IborRateObservation,
                      OvernightCompoundedRateObservation,
                      OvernightAveragedRateObservation,
                      InflationMonthlyRateObservation,
                      InflationInterpolatedRateObservation)

###############################################################################


@dataclass(frozen=True)
class RateAccrualPeriod:
    """ Accrual of rate * gearing + spread over year_fraction. """
    start_date: datetime.date
    end_date: datetime.date
    year_fraction: float
    rate_observation: RateObservation
    gearing: float = 1.0
    spread: float = 0.0
    negative_rate_method: NegativeRateTypes = NegativeRateTypes.ALLOW_NEGATIVE

    def __post_init__(self):
        check_dt(self.start_date)
        check_dt(self.end_date)

        if self.start_date >= self.end_date:
            raise LibError(format_message(
                "Accrual start date {} must be before end date {}",
                self.start_date, self.end_date))

        if self.year_fraction < 0.0:
            raise LibError(format_message(
                "Accrual year fraction must not be negative", self.year_fraction))

        if not isinstance(self.rate_observation, _OBSERVATION_TYPES):
            raise LibError(format_message(
                "Unknown rate observation {}", type(self.rate_observation).__name__))

        if not isinstance(self.negative_rate_method, NegativeRateTypes):
            raise LibError("negative_rate_method must be NegativeRateTypes")

    def with_rate_observation(self, observation) -> "RateAccrualPeriod":
        return replace(self, rate_observation=observation)

    def with_spread(self, spread: float) -> "RateAccrualPeriod":
        return replace(self, spread=spread)

###############################################################################
