"""Shared numeric constants used across the ratesweep package."""

gDaysInYear = 365.0   #: Days per year used for curve times
ONE_BP = 1.0e-4       #: One basis point
