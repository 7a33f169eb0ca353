"""
Payment periods of a swap leg.

- RatePaymentPeriod: a payment computed from one or more rate accrual
  periods, combined by the compounding method. The notional is signed,
  negative when the leg is paid.
- KnownAmountPaymentPeriod: a payment of an amount fixed in the trade.
"""

import datetime
from dataclasses import dataclass, field, replace
from typing import Tuple

from ratesweep.utils.error import LibError
from ratesweep.utils.messages import format_message
from ratesweep.utils.date import check_dt
from ratesweep.utils.currency import CurrencyTypes
from ratesweep.utils.global_types import CompoundingTypes
from ratesweep.trades.rates.accrual_period import RateAccrualPeriod
from ratesweep.trades.rates.observations import FixedRateObservation

###############################################################################


@dataclass(frozen=True)
class RatePaymentPeriod:
    payment_date: datetime.date
    accrual_periods: Tuple[RateAccrualPeriod, ...]
    notional: float
    currency: CurrencyTypes
    compounding_method: CompoundingTypes = CompoundingTypes.NONE

    def __post_init__(self):
        check_dt(self.payment_date)

        periods = tuple(self.accrual_periods)
        object.__setattr__(self, "accrual_periods", periods)

        if len(periods) == 0:
            raise LibError(format_message(
                "Payment period paid on {} has no accrual periods", self.payment_date))

        for i, ap in enumerate(periods):
            if not isinstance(ap, RateAccrualPeriod):
                raise LibError(format_message(
                    "Accrual period {} is a {}, expected RateAccrualPeriod",
                    i, type(ap).__name__))

        for prev, nxt in zip(periods[:-1], periods[1:]):
            if prev.end_date != nxt.start_date:
                raise LibError(format_message(
                    "Accrual periods must be contiguous: {} ends {} but next starts {}",
                    prev.start_date, prev.end_date, nxt.start_date))

        if not isinstance(self.currency, CurrencyTypes):
            raise LibError("currency must be CurrencyTypes")

        if not isinstance(self.compounding_method, CompoundingTypes):
            raise LibError("compounding_method must be CompoundingTypes")

    @property
    def start_date(self) -> datetime.date:
        return self.accrual_periods[0].start_date

    @property
    def end_date(self) -> datetime.date:
        return self.accrual_periods[-1].end_date

    def with_accrual_periods(self, accrual_periods) -> "RatePaymentPeriod":
        return replace(self, accrual_periods=tuple(accrual_periods))

    def with_fixed_rate(self, rate: float) -> "RatePaymentPeriod":
        """ Copy with every fixed observation replaced by rate. """
        periods = [ap.with_rate_observation(FixedRateObservation(rate))
                   if isinstance(ap.rate_observation, FixedRateObservation) else ap
                   for ap in self.accrual_periods]
        return self.with_accrual_periods(periods)

    def with_spread(self, spread: float) -> "RatePaymentPeriod":
        return self.with_accrual_periods(ap.with_spread(spread)
                                         for ap in self.accrual_periods)

###############################################################################


@dataclass(frozen=True)
class KnownAmountPaymentPeriod:
    payment_date: datetime.date
    start_date: datetime.date
    end_date: datetime.date
    amount: float
    currency: CurrencyTypes

    def __post_init__(self):
        check_dt(self.payment_date)
        if self.start_date >= self.end_date:
            raise LibError(format_message(
                "Known amount period start {} must be before end {}",
                self.start_date, self.end_date))
        if not isinstance(self.currency, CurrencyTypes):
            raise LibError("currency must be CurrencyTypes")

    def with_fixed_rate(self, rate: float) -> "KnownAmountPaymentPeriod":
        return self

    def with_spread(self, spread: float) -> "KnownAmountPaymentPeriod":
        return self

###############################################################################
