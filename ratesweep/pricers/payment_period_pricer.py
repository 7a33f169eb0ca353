"""
Pricers for the payment periods of a swap leg.

DiscountingRatePaymentPeriodPricer values a RatePaymentPeriod. The rate of
each accrual period is observed, geared and spread:

    unit accrual = year_fraction * floor(rate * gearing + spread)

where the floor at zero only applies under NegativeRateTypes.NOT_NEGATIVE
and has zero derivative where it binds. The unit accruals are combined by
the compounding method of the payment, with N the signed notional:

    NONE              N * sum(u_k)
    STRAIGHT          N * prod(1 + u_k) - N
    FLAT              N * c_n,  c_k = c_(k-1) * (1 + a_k) + u_k,  c_0 = 0
    SPREAD_EXCLUSIVE  N * prod(1 + a_k) - N + N * sum(spread_k * yf_k)

a_k being the unit accrual without spread. Present value multiplies the
forecast value by the discount factor to the payment date. Payments before
the valuation date have no value.

Every value has its sensitivity twin. The forward pass stores the observed
rates, unit accruals and their local derivatives in a _CompoundingSweep;
the backward pass walks it in reverse to get d value / d rate_k, which
scales the rate sensitivity of accrual period k.

DiscountingKnownAmountPaymentPeriodPricer values a KnownAmountPaymentPeriod.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from ratesweep.utils.error import LibError, PreconditionError
from ratesweep.utils.messages import format_message
from ratesweep.utils.global_types import (CompoundingTypes,
                                          NegativeRateTypes,
                                          ExplainKey)
from ratesweep.sensitivity.point_sensitivity import PointSensitivities
from ratesweep.trades.rates.observations import FixedRateObservation
from ratesweep.trades.rates.payment_period import (RatePaymentPeriod,
                                                   KnownAmountPaymentPeriod)
from ratesweep.requests.cashflows import CashFlow
from ratesweep.requests.explain import ExplainMap

logger = logging.getLogger(__name__)

###############################################################################


@dataclass(frozen=True)
class _CompoundingSweep:
    """ Forward pass over the accrual periods of one payment. """
    raw_rates: Tuple[float, ...]
    unit_accruals: Tuple[float, ...]        # u_k, with spread
    unit_accruals_no_spread: Tuple[float, ...]  # a_k
    d_unit: Tuple[float, ...]               # d u_k / d raw_k
    d_unit_no_spread: Tuple[float, ...]     # d a_k / d raw_k
    floored: Tuple[bool, ...]               # u_k hit the floor


def _geared(ap, raw: float, spread: float):
    """ Floored effective rate and its derivative in the raw rate. """
    rate = raw * ap.gearing + spread
    if ap.negative_rate_method == NegativeRateTypes.NOT_NEGATIVE and rate < 0.0:
        return 0.0, 0.0, True
    return rate, ap.gearing, False

###############################################################################


class DiscountingRatePaymentPeriodPricer:

    def __init__(self, rate_observation_fn):
        self._rate_fn = rate_observation_fn

    @property
    def rate_observation_fn(self):
        return self._rate_fn

###############################################################################
# Forward pass
###############################################################################

    def _raw_rate(self, ap, env) -> float:
        return self._rate_fn.rate(ap.rate_observation, ap.start_date, ap.end_date, env)

    def _sweep(self, period: RatePaymentPeriod, env) -> _CompoundingSweep:
        raw_rates, units, units_ns, d_units, d_units_ns, floored = [], [], [], [], [], []

        for ap in period.accrual_periods:
            raw = self._raw_rate(ap, env)
            rate, d_rate, is_floored = _geared(ap, raw, ap.spread)
            rate_ns, d_rate_ns, _ = _geared(ap, raw, 0.0)

            if is_floored:
                logger.debug("Rate %s floored at zero for accrual %s to %s",
                             raw * ap.gearing + ap.spread, ap.start_date, ap.end_date)

            raw_rates.append(raw)
            units.append(ap.year_fraction * rate)
            units_ns.append(ap.year_fraction * rate_ns)
            d_units.append(ap.year_fraction * d_rate)
            d_units_ns.append(ap.year_fraction * d_rate_ns)
            floored.append(is_floored)

        return _CompoundingSweep(tuple(raw_rates), tuple(units), tuple(units_ns),
                                 tuple(d_units), tuple(d_units_ns), tuple(floored))

    def _compounded_unit(self, period: RatePaymentPeriod, sweep: _CompoundingSweep) -> float:
        """ Forecast value per unit of notional. """
        method = period.compounding_method

        if len(period.accrual_periods) == 1 or method == CompoundingTypes.NONE:
            return sum(sweep.unit_accruals)

        if method == CompoundingTypes.STRAIGHT:
            product = 1.0
            for u in sweep.unit_accruals:
                product *= 1.0 + u
            return product - 1.0

        if method == CompoundingTypes.FLAT:
            cpa = 0.0
            for a, u in zip(sweep.unit_accruals_no_spread, sweep.unit_accruals):
                cpa = cpa * (1.0 + a) + u
            return cpa

        if method == CompoundingTypes.SPREAD_EXCLUSIVE:
            product = 1.0
            for a in sweep.unit_accruals_no_spread:
                product *= 1.0 + a
            spread_part = sum(ap.spread * ap.year_fraction
                              for ap in period.accrual_periods)
            return product - 1.0 + spread_part

        raise LibError(format_message("Unknown compounding method {}", method))

###############################################################################
# Backward pass
###############################################################################

    @staticmethod
    def _products_except(factors):
        n = len(factors)
        prefix = [1.0] * (n + 1)
        for i in range(n):
            prefix[i + 1] = prefix[i] * factors[i]
        suffix = [1.0] * (n + 1)
        for i in range(n - 1, -1, -1):
            suffix[i] = suffix[i + 1] * factors[i]
        return [prefix[i] * suffix[i + 1] for i in range(n)]

    def _compounded_unit_bars(self, period: RatePaymentPeriod,
                              sweep: _CompoundingSweep):
        """ d compounded unit / d raw rate of each accrual period. """
        method = period.compounding_method

        if len(period.accrual_periods) == 1 or method == CompoundingTypes.NONE:
            return list(sweep.d_unit)

        if method == CompoundingTypes.STRAIGHT:
            others = self._products_except([1.0 + u for u in sweep.unit_accruals])
            return [o * d for o, d in zip(others, sweep.d_unit)]

        if method == CompoundingTypes.FLAT:
            n = len(sweep.unit_accruals)
            cpa = [0.0] * (n + 1)
            for k in range(n):
                cpa[k + 1] = cpa[k] * (1.0 + sweep.unit_accruals_no_spread[k]) \
                    + sweep.unit_accruals[k]
            bars = [0.0] * n
            cpa_bar = 1.0
            for k in range(n - 1, -1, -1):
                a_bar = cpa_bar * cpa[k]
                u_bar = cpa_bar
                bars[k] = a_bar * sweep.d_unit_no_spread[k] + u_bar * sweep.d_unit[k]
                cpa_bar = cpa_bar * (1.0 + sweep.unit_accruals_no_spread[k])
            return bars

        if method == CompoundingTypes.SPREAD_EXCLUSIVE:
            others = self._products_except([1.0 + a for a in sweep.unit_accruals_no_spread])
            return [o * d for o, d in zip(others, sweep.d_unit_no_spread)]

        raise LibError(format_message("Unknown compounding method {}", method))

    def _rate_sensitivities(self, period, bars, env) -> PointSensitivities:
        sens = PointSensitivities.none()
        for ap, bar in zip(period.accrual_periods, bars):
            if bar == 0.0:
                continue
            sens = sens.combined_with(self._rate_fn.rate_sensitivity(
                ap.rate_observation, ap.start_date, ap.end_date, env).multiplied_by(bar))
        return sens

###############################################################################
# Values
###############################################################################

    def _is_paid(self, period, env) -> bool:
        return period.payment_date < env.valuation_date

    def forecast_value(self, period: RatePaymentPeriod, env) -> float:
        if self._is_paid(period, env):
            return 0.0
        sweep = self._sweep(period, env)
        return period.notional * self._compounded_unit(period, sweep)

    def discount_factor(self, period: RatePaymentPeriod, env) -> float:
        return env.discount_factor(period.currency, period.payment_date)

    def present_value(self, period: RatePaymentPeriod, env) -> float:
        if self._is_paid(period, env):
            return 0.0
        return self.forecast_value(period, env) * self.discount_factor(period, env)

    def forecast_value_sensitivity(self, period: RatePaymentPeriod, env) -> PointSensitivities:
        if self._is_paid(period, env):
            return PointSensitivities.none()
        sweep = self._sweep(period, env)
        bars = self._compounded_unit_bars(period, sweep)
        return self._rate_sensitivities(period, bars, env).multiplied_by(period.notional)

    def present_value_sensitivity(self, period: RatePaymentPeriod, env) -> PointSensitivities:
        if self._is_paid(period, env):
            return PointSensitivities.none()
        df = self.discount_factor(period, env)
        forecast = self.forecast_value(period, env)
        forecast_sens = self.forecast_value_sensitivity(period, env).multiplied_by(df)
        df_sens = env.discount_factor_sensitivity(
            period.currency, period.payment_date).multiplied_by(forecast)
        return forecast_sens.combined_with(df_sens)

###############################################################################
# PVBP
###############################################################################

    def _check_pvbp(self, period: RatePaymentPeriod):
        if (len(period.accrual_periods) > 1
                and period.compounding_method != CompoundingTypes.FLAT):
            raise PreconditionError(format_message(
                "PVBP needs one accrual period or flat compounding, payment on {} "
                "has {} accrual periods compounded {}",
                period.payment_date, len(period.accrual_periods),
                period.compounding_method.name))

    def _flat_spread_derivative(self, period, sweep):
        """ D_k = d c_k / d spread for a parallel shift of all spreads. """
        d = [0.0]
        for ap, a, floored in zip(period.accrual_periods,
                                  sweep.unit_accruals_no_spread, sweep.floored):
            d.append(d[-1] * (1.0 + a) + (0.0 if floored else ap.year_fraction))
        return d

    def pvbp(self, period: RatePaymentPeriod, env) -> float:
        """ Present value of a unit change in the spread of every accrual. """
        self._check_pvbp(period)
        df = self.discount_factor(period, env)

        if len(period.accrual_periods) == 1:
            return df * period.accrual_periods[0].year_fraction * period.notional

        sweep = self._sweep(period, env)
        d = self._flat_spread_derivative(period, sweep)
        return df * period.notional * d[-1]

    def pvbp_sensitivity(self, period: RatePaymentPeriod, env) -> PointSensitivities:
        self._check_pvbp(period)
        df_sens = env.discount_factor_sensitivity(period.currency, period.payment_date)

        if len(period.accrual_periods) == 1:
            return df_sens.multiplied_by(
                period.accrual_periods[0].year_fraction * period.notional)

        df = self.discount_factor(period, env)
        sweep = self._sweep(period, env)
        d = self._flat_spread_derivative(period, sweep)

        n = len(period.accrual_periods)
        bars = [0.0] * n
        d_bar = df * period.notional
        for k in range(n - 1, -1, -1):
            bars[k] = d_bar * d[k] * sweep.d_unit_no_spread[k]
            d_bar = d_bar * (1.0 + sweep.unit_accruals_no_spread[k])

        return df_sens.multiplied_by(period.notional * d[-1]).combined_with(
            self._rate_sensitivities(period, bars, env))

###############################################################################
# Reports
###############################################################################

    def accrued_interest(self, period: RatePaymentPeriod, env) -> float:
        """ Forecast value of the period truncated at the valuation date.
        The year fraction of the truncated accrual is pro-rated by days. """
        val_dt = env.valuation_date
        if val_dt <= period.start_date or val_dt > period.end_date:
            return 0.0

        truncated = []
        for ap in period.accrual_periods:
            if val_dt > ap.end_date:
                truncated.append(ap)
            elif val_dt > ap.start_date:
                days = (ap.end_date - ap.start_date).days
                part = (val_dt - ap.start_date).days
                truncated.append(ap.__class__(
                    ap.start_date, val_dt, ap.year_fraction * part / days,
                    ap.rate_observation, ap.gearing, ap.spread,
                    ap.negative_rate_method))
                break
            else:
                break

        return self.forecast_value(period.with_accrual_periods(truncated), env)

    def current_cash(self, period: RatePaymentPeriod, env) -> float:
        if period.payment_date == env.valuation_date:
            return self.forecast_value(period, env)
        return 0.0

    def cash_flow(self, period: RatePaymentPeriod, env) -> CashFlow:
        return CashFlow(period.payment_date, period.currency,
                        self.forecast_value(period, env),
                        self.discount_factor(period, env))

    def explain_present_value(self, period: RatePaymentPeriod, env) -> ExplainMap:
        entries = [(ExplainKey.ENTRY_TYPE, "RatePaymentPeriod"),
                   (ExplainKey.PAYMENT_DATE, period.payment_date),
                   (ExplainKey.PAYMENT_CURRENCY, period.currency),
                   (ExplainKey.START_DATE, period.start_date),
                   (ExplainKey.END_DATE, period.end_date),
                   (ExplainKey.NOTIONAL, period.notional),
                   (ExplainKey.TRADE_NOTIONAL, abs(period.notional)),
                   (ExplainKey.COMPOUNDING, period.compounding_method.name)]

        if self._is_paid(period, env):
            entries += [(ExplainKey.COMPLETED, True),
                        (ExplainKey.FORECAST_VALUE, 0.0),
                        (ExplainKey.PRESENT_VALUE, 0.0)]
            return ExplainMap(entries)

        sweep = self._sweep(period, env)
        accruals = []
        for ap, raw, u in zip(period.accrual_periods, sweep.raw_rates,
                              sweep.unit_accruals):
            obs = ap.rate_observation
            rate_key = (ExplainKey.FIXED_RATE if isinstance(obs, FixedRateObservation)
                        else ExplainKey.FORWARD_RATE)
            accruals.append(ExplainMap([
                (ExplainKey.ENTRY_TYPE, "AccrualPeriod"),
                (ExplainKey.START_DATE, ap.start_date),
                (ExplainKey.END_DATE, ap.end_date),
                (ExplainKey.ACCRUAL_YEAR_FRACTION, ap.year_fraction),
                (ExplainKey.GEARING, ap.gearing),
                (ExplainKey.SPREAD, ap.spread),
                (rate_key, raw),
                (ExplainKey.PAY_OFF_RATE,
                 u / ap.year_fraction if ap.year_fraction > 0.0 else 0.0),
                (ExplainKey.UNIT_AMOUNT, u)]))

        forecast = period.notional * self._compounded_unit(period, sweep)
        df = self.discount_factor(period, env)
        entries += [(ExplainKey.ACCRUAL_PERIODS, accruals),
                    (ExplainKey.DISCOUNT_FACTOR, df),
                    (ExplainKey.FORECAST_VALUE, forecast),
                    (ExplainKey.PRESENT_VALUE, forecast * df)]
        return ExplainMap(entries)

###############################################################################


class DiscountingKnownAmountPaymentPeriodPricer:
    """ Pricer for a payment whose amount is fixed in the trade. """

    def forecast_value(self, period: KnownAmountPaymentPeriod, env) -> float:
        if period.payment_date < env.valuation_date:
            return 0.0
        return period.amount

    def discount_factor(self, period: KnownAmountPaymentPeriod, env) -> float:
        return env.discount_factor(period.currency, period.payment_date)

    def present_value(self, period: KnownAmountPaymentPeriod, env) -> float:
        if period.payment_date < env.valuation_date:
            return 0.0
        return period.amount * self.discount_factor(period, env)

    def forecast_value_sensitivity(self, period, env) -> PointSensitivities:
        return PointSensitivities.none()

    def present_value_sensitivity(self, period, env) -> PointSensitivities:
        if period.payment_date < env.valuation_date:
            return PointSensitivities.none()
        return env.discount_factor_sensitivity(
            period.currency, period.payment_date).multiplied_by(period.amount)

    def pvbp(self, period, env) -> float:
        return 0.0

    def pvbp_sensitivity(self, period, env) -> PointSensitivities:
        return PointSensitivities.none()

    def accrued_interest(self, period: KnownAmountPaymentPeriod, env) -> float:
        val_dt = env.valuation_date
        if val_dt <= period.start_date or val_dt > period.end_date:
            return 0.0
        days = (period.end_date - period.start_date).days
        return period.amount * (val_dt - period.start_date).days / days

    def current_cash(self, period: KnownAmountPaymentPeriod, env) -> float:
        if period.payment_date == env.valuation_date:
            return period.amount
        return 0.0

    def cash_flow(self, period: KnownAmountPaymentPeriod, env) -> CashFlow:
        return CashFlow(period.payment_date, period.currency,
                        self.forecast_value(period, env),
                        self.discount_factor(period, env))

    def explain_present_value(self, period: KnownAmountPaymentPeriod, env) -> ExplainMap:
        entries = [(ExplainKey.ENTRY_TYPE, "KnownAmountPaymentPeriod"),
                   (ExplainKey.PAYMENT_DATE, period.payment_date),
                   (ExplainKey.PAYMENT_CURRENCY, period.currency),
                   (ExplainKey.START_DATE, period.start_date),
                   (ExplainKey.END_DATE, period.end_date)]
        if period.payment_date < env.valuation_date:
            entries += [(ExplainKey.COMPLETED, True),
                        (ExplainKey.FORECAST_VALUE, 0.0),
                        (ExplainKey.PRESENT_VALUE, 0.0)]
        else:
            df = self.discount_factor(period, env)
            entries += [(ExplainKey.DISCOUNT_FACTOR, df),
                        (ExplainKey.FORECAST_VALUE, period.amount),
                        (ExplainKey.PRESENT_VALUE, period.amount * df)]
        return ExplainMap(entries)

###############################################################################


class DispatchingPaymentPeriodPricer:
    """ Routes each payment period to the pricer for its type. """

    def __init__(self, rate_pricer, known_amount_pricer):
        self._pricers = {RatePaymentPeriod: rate_pricer,
                         KnownAmountPaymentPeriod: known_amount_pricer}

    def pricer(self, period):
        pricer = self._pricers.get(type(period))
        if pricer is None:
            raise PreconditionError(format_message(
                "Unsupported payment period {}", type(period).__name__))
        return pricer

    def forecast_value(self, period, env) -> float:
        return self.pricer(period).forecast_value(period, env)

    def present_value(self, period, env) -> float:
        return self.pricer(period).present_value(period, env)

    def forecast_value_sensitivity(self, period, env) -> PointSensitivities:
        return self.pricer(period).forecast_value_sensitivity(period, env)

    def present_value_sensitivity(self, period, env) -> PointSensitivities:
        return self.pricer(period).present_value_sensitivity(period, env)

    def pvbp(self, period, env) -> float:
        return self.pricer(period).pvbp(period, env)

    def pvbp_sensitivity(self, period, env) -> PointSensitivities:
        return self.pricer(period).pvbp_sensitivity(period, env)

    def accrued_interest(self, period, env) -> float:
        return self.pricer(period).accrued_interest(period, env)

    def current_cash(self, period, env) -> float:
        return self.pricer(period).current_cash(period, env)

    def cash_flow(self, period, env) -> CashFlow:
        return self.pricer(period).cash_flow(period, env)

    def explain_present_value(self, period, env) -> ExplainMap:
        return self.pricer(period).explain_present_value(period, env)

###############################################################################
