"""
Interest rate index definitions.

An index is an immutable, hashable identifier used to look up forward
curves and fixings in the rates environment and to key point sensitivities.

Example:
    >>> SONIA = OvernightIndex("GBP-SONIA", CurrencyTypes.GBP, 365.0)
    >>> SOFR = OvernightIndex("USD-SOFR", CurrencyTypes.USD, 360.0,
    ...                       CalendarTypes.WEEKEND)
    >>> LIBOR3M = IborIndex("GBP-LIBOR-3M", CurrencyTypes.GBP, 3, 365.0)
"""

from dataclasses import dataclass

from ratesweep.utils.error import LibError
from ratesweep.utils.currency import CurrencyTypes
from ratesweep.utils.calendar import Calendar, CalendarTypes

###############################################################################


@dataclass(frozen=True)
class IborIndex:
    """ Term rate index, fixed in advance for a tenor of months. """
    name: str
    currency: CurrencyTypes
    tenor_months: int = 3
    day_count_basis: float = 360.0

    def __post_init__(self):
        if self.tenor_months <= 0:
            raise LibError("Ibor tenor must be positive")
        if self.day_count_basis <= 0.0:
            raise LibError("Day count basis must be positive")

    def __str__(self):
        return self.name

###############################################################################


@dataclass(frozen=True)
class OvernightIndex:
    """ Overnight rate index published for every business day. The rate
    fixed on a date accrues until the next business day. """
    name: str
    currency: CurrencyTypes
    day_count_basis: float = 365.0
    calendar_type: CalendarTypes = CalendarTypes.WEEKEND

    def __post_init__(self):
        if self.day_count_basis <= 0.0:
            raise LibError("Day count basis must be positive")

    @property
    def calendar(self) -> Calendar:
        return Calendar(self.calendar_type)

    def maturity_date(self, fixing_dt):
        """ End of the overnight deposit fixed on fixing_dt. """
        return self.calendar.next_business_day(fixing_dt)

    def year_fraction(self, start_dt, end_dt) -> float:
        return (end_dt - start_dt).days / self.day_count_basis

    def __str__(self):
        return self.name

###############################################################################
