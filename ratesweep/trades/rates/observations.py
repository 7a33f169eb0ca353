"""
Rate observations.

A rate observation describes how the rate of one accrual period is
observed. The variants form a closed set of immutable value types:

- FixedRateObservation: a rate agreed in the trade
- IborRateObservation: one term rate fixing
- OvernightCompoundedRateObservation: daily overnight fixings compounded
- OvernightAveragedRateObservation: daily overnight fixings averaged
- InflationMonthlyRateObservation: ratio of two monthly index values
- InflationInterpolatedRateObservation: ratio of two values interpolated
  between consecutive months

Overnight observations expand into the business days of the index calendar
in [start_date, end_date). With a rate cut-off of N days the last N - 1
fixings reuse the rate of the fixing N business days before the end.
"""

import datetime
from dataclasses import dataclass, field
from typing import Tuple

from ratesweep.utils.error import LibError
from ratesweep.utils.messages import format_message
from ratesweep.utils.date import YearMonth, check_dt
from ratesweep.market.indices import IborIndex, OvernightIndex, PriceIndex

###############################################################################


@dataclass(frozen=True)
class FixedRateObservation:
    rate: float

###############################################################################


@dataclass(frozen=True)
class IborRateObservation:
    index: IborIndex
    fixing_date: datetime.date
    effective_date: datetime.date
    maturity_date: datetime.date
    year_fraction: float

    def __post_init__(self):
        check_dt(self.fixing_date)
        if self.effective_date >= self.maturity_date:
            raise LibError(format_message(
                "Ibor effective date {} must be before maturity {}",
                self.effective_date, self.maturity_date))
        if self.year_fraction <= 0.0:
            raise LibError("Ibor year fraction must be positive")

    @classmethod
    def of(cls, index: IborIndex, fixing_date: datetime.date,
           effective_date: datetime.date, maturity_date: datetime.date):
        """ Observation with the year fraction of the index day count. """
        yf = (maturity_date - effective_date).days / index.day_count_basis
        return cls(index, fixing_date, effective_date, maturity_date, yf)

###############################################################################


@dataclass(frozen=True)
class _OvernightRateObservation:
    index: OvernightIndex
    start_date: datetime.date
    end_date: datetime.date
    rate_cut_off_days: int = 0
    fixing_dates: Tuple[datetime.date, ...] = field(init=False, repr=False,
                                                    compare=False)

    def __post_init__(self):
        check_dt(self.start_date)
        check_dt(self.end_date)

        if self.start_date >= self.end_date:
            raise LibError(format_message(
                "Overnight observation start {} must be before end {}",
                self.start_date, self.end_date))

        if self.rate_cut_off_days < 0:
            raise LibError("Rate cut-off days must not be negative")

        dates = tuple(self.index.calendar.business_days(self.start_date,
                                                        self.end_date))
        if len(dates) == 0:
            raise LibError(format_message(
                "No {} fixing dates between {} and {}",
                self.index.name, self.start_date, self.end_date))

        if self.rate_cut_off_days >= len(dates) and self.rate_cut_off_days > 1:
            raise LibError(format_message(
                "Rate cut-off of {} days needs more than {} fixing dates",
                self.rate_cut_off_days, len(dates)))

        object.__setattr__(self, "fixing_dates", dates)

    def publication_index(self, i: int) -> int:
        """ Position of the fixing whose rate applies to fixing date i. """
        n = len(self.fixing_dates)
        if self.rate_cut_off_days <= 1:
            return i
        return min(i, n - self.rate_cut_off_days)

    def accrual_end(self, i: int) -> datetime.date:
        """ Date until which fixing i accrues, capped at the period end. """
        return min(self.index.maturity_date(self.fixing_dates[i]), self.end_date)

    def accrual_year_fraction(self, i: int) -> float:
        return self.index.year_fraction(self.fixing_dates[i], self.accrual_end(i))


@dataclass(frozen=True)
class OvernightCompoundedRateObservation(_OvernightRateObservation):
    pass


@dataclass(frozen=True)
class OvernightAveragedRateObservation(_OvernightRateObservation):
    pass

###############################################################################


@dataclass(frozen=True)
class InflationMonthlyRateObservation:
    index: PriceIndex
    reference_start_month: YearMonth
    reference_end_month: YearMonth

    def __post_init__(self):
        if self.reference_start_month >= self.reference_end_month:
            raise LibError(format_message(
                "Reference start month {} must be before end month {}",
                self.reference_start_month, self.reference_end_month))


@dataclass(frozen=True)
class InflationInterpolatedRateObservation:
    """ Index value at a reference date between two months:
    w * I(m) + (1 - w) * I(m + 1) for both the start and end reference. """
    index: PriceIndex
    reference_start_month: YearMonth
    reference_end_month: YearMonth
    weight: float

    def __post_init__(self):
        if self.reference_start_month >= self.reference_end_month:
            raise LibError(format_message(
                "Reference start month {} must be before end month {}",
                self.reference_start_month, self.reference_end_month))
        if not 0.0 <= self.weight <= 1.0:
            raise LibError(format_message(
                "Interpolation weight {} must be in [0, 1]", self.weight))

    @property
    def reference_start_interpolation_month(self) -> YearMonth:
        return self.reference_start_month.plus_months(1)

    @property
    def reference_end_interpolation_month(self) -> YearMonth:
        return self.reference_end_month.plus_months(1)

###############################################################################
