##############################################################################

##############################################################################

"""
Resolved swap legs.

A ResolvedSwapLeg is an ordered sequence of payment periods and payment
events in a single currency, together with its type and direction. Amounts
inside the leg are already signed: notionals and event amounts are negative
when the leg is paid.

The builder functions create the common leg shapes from an explicit list of
accrual dates; schedule generation and business day adjustment are the
caller's concern.

Example:
    >>> dates = [date(2024, 1, 15), date(2025, 1, 15), date(2026, 1, 15)]
    >>> fixed = fixed_rate_leg(SwapTypes.PAY, CurrencyTypes.GBP, 1e6, dates, 0.04)
    >>> flt = overnight_leg(SwapTypes.RECEIVE, SONIA, 1e6, dates)
    >>> swap = ResolvedSwap([fixed, flt])
"""

import datetime
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple, Union

from ratesweep.utils.error import LibError
from ratesweep.utils.messages import format_message
from ratesweep.utils.helpers import check_argument_types
from ratesweep.utils.currency import CurrencyTypes
from ratesweep.utils.global_types import (SwapTypes,
                                          SwapLegTypes,
                                          CompoundingTypes,
                                          NegativeRateTypes)
from ratesweep.utils.date import YearMonth, year_frac_act
from ratesweep.market.indices import IborIndex, OvernightIndex, PriceIndex
from ratesweep.trades.rates.observations import (FixedRateObservation,
                                                 IborRateObservation,
                                                 OvernightCompoundedRateObservation,
                                                 OvernightAveragedRateObservation,
                                                 InflationMonthlyRateObservation,
                                                 InflationInterpolatedRateObservation)
from ratesweep.trades.rates.accrual_period import RateAccrualPeriod
from ratesweep.trades.rates.payment_period import (RatePaymentPeriod,
                                                   KnownAmountPaymentPeriod)
from ratesweep.trades.rates.payment_event import NotionalExchange

PaymentPeriod = Union[RatePaymentPeriod, KnownAmountPaymentPeriod]

###############################################################################


@dataclass(frozen=True)
class ResolvedSwapLeg:
    leg_type: SwapLegTypes
    pay_receive: SwapTypes
    payment_periods: Tuple[PaymentPeriod, ...]
    payment_events: Tuple[NotionalExchange, ...] = ()

    def __post_init__(self):
        periods = tuple(self.payment_periods)
        events = tuple(self.payment_events)
        object.__setattr__(self, "payment_periods", periods)
        object.__setattr__(self, "payment_events", events)

        if not isinstance(self.leg_type, SwapLegTypes):
            raise LibError("leg_type must be SwapLegTypes")

        if not isinstance(self.pay_receive, SwapTypes):
            raise LibError("pay_receive must be SwapTypes")

        if len(periods) == 0 and len(events) == 0:
            raise LibError("Swap leg needs at least one payment period or event")

        currencies = {p.currency for p in periods} | {e.currency for e in events}
        if len(currencies) != 1:
            raise LibError(format_message(
                "All payments of a leg must share one currency, found {}",
                sorted(c.name for c in currencies)))

    @property
    def currency(self) -> CurrencyTypes:
        if self.payment_periods:
            return self.payment_periods[0].currency
        return self.payment_events[0].currency

    @property
    def start_date(self) -> datetime.date:
        return min(p.start_date for p in self.payment_periods)

    @property
    def end_date(self) -> datetime.date:
        return max(p.end_date for p in self.payment_periods)

    def with_fixed_rate(self, rate: float) -> "ResolvedSwapLeg":
        return replace(self, payment_periods=tuple(
            p.with_fixed_rate(rate) for p in self.payment_periods))

    def with_spread(self, spread: float) -> "ResolvedSwapLeg":
        return replace(self, payment_periods=tuple(
            p.with_spread(spread) for p in self.payment_periods))

###############################################################################


def _direction(pay_receive: SwapTypes) -> float:
    return -1.0 if pay_receive == SwapTypes.PAY else 1.0


def _check_dates(accrual_dates):
    if len(accrual_dates) < 2:
        raise LibError("Need at least two accrual dates")
    for d0, d1 in zip(accrual_dates[:-1], accrual_dates[1:]):
        if d0 >= d1:
            raise LibError(format_message(
                "Accrual dates must be strictly increasing: {} then {}", d0, d1))


def _notional_exchanges(signed_notional, currency, accrual_dates):
    return (NotionalExchange(accrual_dates[0], -signed_notional, currency),
            NotionalExchange(accrual_dates[-1], signed_notional, currency))


def _leg(leg_type, pay_receive, periods, signed_notional, currency,
         accrual_dates, notional_exchange):
    events = ()
    if notional_exchange:
        events = _notional_exchanges(signed_notional, currency, accrual_dates)
    return ResolvedSwapLeg(leg_type, pay_receive, tuple(periods), events)

###############################################################################


def fixed_rate_leg(pay_receive: SwapTypes,
                   currency: CurrencyTypes,
                   notional: float,
                   accrual_dates: list,
                   rate: float,
                   day_count_basis: float = 365.0,
                   notional_exchange: bool = False) -> ResolvedSwapLeg:
    """ Fixed leg paying on each accrual end date. """
    check_argument_types(fixed_rate_leg, locals())
    _check_dates(accrual_dates)

    signed = notional * _direction(pay_receive)
    periods = []
    for start_dt, end_dt in zip(accrual_dates[:-1], accrual_dates[1:]):
        ap = RateAccrualPeriod(start_dt, end_dt,
                               year_frac_act(start_dt, end_dt, day_count_basis),
                               FixedRateObservation(rate))
        periods.append(RatePaymentPeriod(end_dt, (ap,), signed, currency))

    return _leg(SwapLegTypes.FIXED, pay_receive, periods, signed, currency,
                accrual_dates, notional_exchange)

###############################################################################


def compounded_fixed_leg(pay_receive: SwapTypes,
                         currency: CurrencyTypes,
                         notional: float,
                         accrual_dates: list,
                         rate: float,
                         compounding_method: CompoundingTypes = CompoundingTypes.STRAIGHT) -> ResolvedSwapLeg:
    """ Single fixed payment at the last date, compounding annual accrual
    periods of year fraction one, as in a zero coupon swap. """
    check_argument_types(compounded_fixed_leg, locals())
    _check_dates(accrual_dates)

    signed = notional * _direction(pay_receive)
    accruals = [RateAccrualPeriod(start_dt, end_dt, 1.0, FixedRateObservation(rate))
                for start_dt, end_dt in zip(accrual_dates[:-1], accrual_dates[1:])]
    period = RatePaymentPeriod(accrual_dates[-1], tuple(accruals), signed,
                               currency, compounding_method)
    return ResolvedSwapLeg(SwapLegTypes.FIXED, pay_receive, (period,))

###############################################################################


def ibor_leg(pay_receive: SwapTypes,
             index: IborIndex,
             notional: float,
             accrual_dates: list,
             spread: float = 0.0,
             gearing: float = 1.0,
             negative_rate_method: NegativeRateTypes = NegativeRateTypes.ALLOW_NEGATIVE,
             notional_exchange: bool = False) -> ResolvedSwapLeg:
    """ Ibor leg fixing at the start of each accrual period. """
    check_argument_types(ibor_leg, locals())
    _check_dates(accrual_dates)

    signed = notional * _direction(pay_receive)
    periods = []
    for start_dt, end_dt in zip(accrual_dates[:-1], accrual_dates[1:]):
        obs = IborRateObservation.of(index, start_dt, start_dt, end_dt)
        ap = RateAccrualPeriod(start_dt, end_dt,
                               year_frac_act(start_dt, end_dt, index.day_count_basis),
                               obs, gearing, spread, negative_rate_method)
        periods.append(RatePaymentPeriod(end_dt, (ap,), signed, index.currency))

    return _leg(SwapLegTypes.IBOR, pay_receive, periods, signed, index.currency,
                accrual_dates, notional_exchange)

###############################################################################


def overnight_leg(pay_receive: SwapTypes,
                  index: OvernightIndex,
                  notional: float,
                  accrual_dates: list,
                  spread: float = 0.0,
                  rate_cut_off_days: int = 0,
                  averaged: bool = False,
                  gearing: float = 1.0,
                  negative_rate_method: NegativeRateTypes = NegativeRateTypes.ALLOW_NEGATIVE,
                  notional_exchange: bool = False) -> ResolvedSwapLeg:
    """ Overnight leg with one compounded (or averaged) observation per
    accrual period. """
    check_argument_types(overnight_leg, locals())
    _check_dates(accrual_dates)

    obs_type = (OvernightAveragedRateObservation if averaged
                else OvernightCompoundedRateObservation)

    signed = notional * _direction(pay_receive)
    periods = []
    for start_dt, end_dt in zip(accrual_dates[:-1], accrual_dates[1:]):
        obs = obs_type(index, start_dt, end_dt, rate_cut_off_days)
        ap = RateAccrualPeriod(start_dt, end_dt,
                               index.year_fraction(start_dt, end_dt),
                               obs, gearing, spread, negative_rate_method)
        periods.append(RatePaymentPeriod(end_dt, (ap,), signed, index.currency))

    return _leg(SwapLegTypes.OVERNIGHT, pay_receive, periods, signed, index.currency,
                accrual_dates, notional_exchange)

###############################################################################


def known_amount_leg(pay_receive: SwapTypes,
                     currency: CurrencyTypes,
                     amounts: List[float],
                     accrual_dates: list) -> ResolvedSwapLeg:
    """ Leg of amounts fixed in the trade, paid at each accrual end. """
    check_argument_types(known_amount_leg, locals())
    _check_dates(accrual_dates)

    if len(amounts) != len(accrual_dates) - 1:
        raise LibError(format_message(
            "Need one amount per period, got {} amounts for {} periods",
            len(amounts), len(accrual_dates) - 1))

    sign = _direction(pay_receive)
    periods = [KnownAmountPaymentPeriod(end_dt, start_dt, end_dt, sign * amt, currency)
               for amt, start_dt, end_dt in zip(amounts, accrual_dates[:-1],
                                                accrual_dates[1:])]
    return ResolvedSwapLeg(SwapLegTypes.OTHER, pay_receive, tuple(periods))

###############################################################################


def inflation_zero_coupon_leg(pay_receive: SwapTypes,
                              index: PriceIndex,
                              notional: float,
                              start_date: datetime.date,
                              end_date: datetime.date,
                              reference_start_month: YearMonth,
                              reference_end_month: YearMonth,
                              weight: Optional[float] = None) -> ResolvedSwapLeg:
    """ Single payment of notional * (I_end / I_start - 1) at end_date. The
    index values are interpolated between consecutive months when a weight
    is given. """
    check_argument_types(inflation_zero_coupon_leg, locals())

    if weight is None:
        obs = InflationMonthlyRateObservation(index, reference_start_month,
                                              reference_end_month)
    else:
        obs = InflationInterpolatedRateObservation(index, reference_start_month,
                                                   reference_end_month, weight)

    signed = notional * _direction(pay_receive)
    ap = RateAccrualPeriod(start_date, end_date, 1.0, obs)
    period = RatePaymentPeriod(end_date, (ap,), signed, index.currency)
    return ResolvedSwapLeg(SwapLegTypes.INFLATION, pay_receive, (period,))

###############################################################################
