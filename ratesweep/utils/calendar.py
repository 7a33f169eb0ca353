"""
Business day calendars for overnight fixing dates.

Only the two calendars needed to expand an overnight observation into its
daily fixings are provided: every day is a business day (NONE) or weekends
are holidays (WEEKEND).
"""

import datetime
from enum import Enum

from ratesweep.utils.error import LibError


class CalendarTypes(Enum):
    NONE = 1
    WEEKEND = 2

###############################################################################


class Calendar:
    """ Business day rules for a calendar type. """

    def __init__(self, cal_type: CalendarTypes):
        if not isinstance(cal_type, CalendarTypes):
            raise LibError(f"Unknown calendar type {cal_type}")
        self._cal_type = cal_type

    def is_business_day(self, dt: datetime.date) -> bool:
        if self._cal_type == CalendarTypes.WEEKEND:
            return dt.weekday() < 5
        return True

    def next_business_day(self, dt: datetime.date) -> datetime.date:
        """ First business day strictly after dt. """
        nxt = dt + datetime.timedelta(days=1)
        while not self.is_business_day(nxt):
            nxt += datetime.timedelta(days=1)
        return nxt

    def business_days(self,
                      start_dt: datetime.date,
                      end_dt: datetime.date):
        """ Business days in the half-open interval [start_dt, end_dt). """
        days = []
        dt = start_dt
        while dt < end_dt:
            if self.is_business_day(dt):
                days.append(dt)
            dt += datetime.timedelta(days=1)
        return days

    def __repr__(self):
        return f"Calendar({self._cal_type.name})"
