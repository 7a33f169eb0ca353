"""
Date helpers.

Dates are plain ``datetime.date`` objects. Inflation indices are published
monthly and are referenced by ``YearMonth``.

Example:
    >>> ym = YearMonth(2023, 11)
    >>> ym.plus_months(3)
    YearMonth(year=2024, month=2)
    >>> YearMonth.of(date(2024, 1, 15))
    YearMonth(year=2024, month=1)
"""

import datetime
from dataclasses import dataclass

from ratesweep.utils.error import LibError
from ratesweep.utils.global_vars import gDaysInYear

###############################################################################


@dataclass(frozen=True, order=True)
class YearMonth:
    """ A calendar month, the reference unit of a price index. """
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise LibError(f"Month must be in 1..12, got {self.month}")

    @classmethod
    def of(cls, dt: datetime.date) -> "YearMonth":
        return cls(dt.year, dt.month)

    def plus_months(self, months: int) -> "YearMonth":
        total = self.year * 12 + (self.month - 1) + months
        return YearMonth(total // 12, total % 12 + 1)

    def months_until(self, other: "YearMonth") -> int:
        """ Signed number of months from self to other. """
        return (other.year - self.year) * 12 + (other.month - self.month)

    def __str__(self):
        return f"{self.year:04d}-{self.month:02d}"

###############################################################################


def check_dt(d):
    """ Check that input d is a date. """

    if not isinstance(d, datetime.date):
        raise LibError(f"Should be a date, got {type(d).__name__}")

###############################################################################


def year_frac_act(start_dt: datetime.date,
                  end_dt: datetime.date,
                  basis: float = gDaysInYear) -> float:
    """ Actual days between the dates over a fixed basis. """
    return (end_dt - start_dt).days / basis

###############################################################################
