"""
Payment events of a swap leg: single cash flows outside the coupon
schedule, such as the notional exchanges of a cross-currency swap.
"""

import datetime
from dataclasses import dataclass

from ratesweep.utils.error import LibError
from ratesweep.utils.date import check_dt
from ratesweep.utils.currency import CurrencyTypes


@dataclass(frozen=True)
class NotionalExchange:
    """ Signed amount paid on payment_date, negative when paid. """
    payment_date: datetime.date
    amount: float
    currency: CurrencyTypes

    def __post_init__(self):
        check_dt(self.payment_date)
        if not isinstance(self.currency, CurrencyTypes):
            raise LibError("currency must be CurrencyTypes")
