from ratesweep.utils.error import LibError, MarketDataError, PreconditionError
from ratesweep.utils.messages import format_message
from ratesweep.utils.currency import CurrencyTypes, fx_pair_name
from ratesweep.utils.date import YearMonth
from ratesweep.utils.calendar import Calendar, CalendarTypes
from ratesweep.utils.global_types import (SwapTypes,
                                          SwapLegTypes,
                                          CompoundingTypes,
                                          NegativeRateTypes,
                                          RequestTypes,
                                          ExplainKey)
