"""
Pricer for swaps.

DiscountingSwapProductPricer composes leg values into swap values:

- present_value / forecast_value: one amount per leg currency, or a single
  amount when a target currency is given (legs converted at spot FX)
- par_rate: rate of the first fixed leg that sets the present value to zero
- par_spread: spread to add to the first leg that sets the present value,
  expressed in that leg's currency, to zero
- sensitivities of all of the above, by reverse-mode differentiation

Par rate forward pass (F the first fixed leg, all values in its currency):

    other  = sum over legs L != F of pv(L) * fx(L, F)
    events = pv of the payment events of F
    pvbp   = pvbp(F)
    par    = -(other + events) / pvbp

and its backward pass:

    other_bar = events_bar = -1 / pvbp
    pvbp_bar  = (other + events) / pvbp^2

Each bar scales the point sensitivity of the quantity it belongs to. When F
is a single payment compounding several accrual periods of year fraction
one, the par rate has the closed form

    par = (-(other + events) / (N * df) + 1)^(1 / n) - 1

whose sensitivity is not provided.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ratesweep.utils.error import LibError, PreconditionError
from ratesweep.utils.messages import format_message
from ratesweep.utils.currency import CurrencyTypes
from ratesweep.utils.global_types import CompoundingTypes, ExplainKey
from ratesweep.sensitivity.point_sensitivity import PointSensitivities
from ratesweep.trades.rates.payment_period import RatePaymentPeriod
from ratesweep.trades.rates.swap import ResolvedSwap
from ratesweep.trades.rates.swap_leg import ResolvedSwapLeg
from ratesweep.requests.results import CurrencyAmount, MultiCurrencyAmount
from ratesweep.requests.cashflows import CashFlows
from ratesweep.requests.explain import ExplainMap

logger = logging.getLogger(__name__)

###############################################################################


@dataclass(frozen=True)
class _ParRateSweep:
    """ Forward pass of the par rate, in the fixed leg currency. """
    fixed_leg: ResolvedSwapLeg
    currency: CurrencyTypes
    other_legs_pv: float
    fixed_leg_events_pv: float

    @property
    def numerator(self) -> float:
        return self.other_legs_pv + self.fixed_leg_events_pv


@dataclass(frozen=True)
class _ParSpreadSweep:
    """ Forward pass of the par spread, in the first leg currency. """
    reference_leg: ResolvedSwapLeg
    currency: CurrencyTypes
    converted_pv: float
    pvbp: float

###############################################################################


class DiscountingSwapProductPricer:

    def __init__(self, leg_pricer):
        self._leg_pricer = leg_pricer

    @property
    def leg_pricer(self):
        return self._leg_pricer

    def _check(self, swap, env):
        if not isinstance(swap, ResolvedSwap):
            raise LibError(format_message("Expected ResolvedSwap, got {}",
                                          type(swap).__name__))
        if env is None:
            raise LibError("Rates environment is required")

###############################################################################
# Present value and forecast value
###############################################################################

    def _aggregate(self, swap, env, leg_value, currency):
        if currency is None:
            total = MultiCurrencyAmount.empty()
            for leg in swap.legs:
                total = total.plus(CurrencyAmount(leg_value(leg, env), leg.currency))
            return total

        amount = 0.0
        for leg in swap.legs:
            amount += leg_value(leg, env) * env.fx_rate(leg.currency, currency)
        return CurrencyAmount(amount, currency)

    def present_value(self, swap: ResolvedSwap, env,
                      currency: Optional[CurrencyTypes] = None):
        """ MultiCurrencyAmount with one entry per leg currency, or a
        CurrencyAmount in currency when one is given. """
        self._check(swap, env)
        return self._aggregate(swap, env, self._leg_pricer.present_value_internal,
                               currency)

    def forecast_value(self, swap: ResolvedSwap, env,
                       currency: Optional[CurrencyTypes] = None):
        self._check(swap, env)
        return self._aggregate(swap, env, self._leg_pricer.forecast_value_internal,
                               currency)

    def accrued_interest(self, swap: ResolvedSwap, env) -> MultiCurrencyAmount:
        self._check(swap, env)
        total = MultiCurrencyAmount.empty()
        for leg in swap.legs:
            total = total.plus(self._leg_pricer.accrued_interest(leg, env))
        return total

    def _aggregate_sensitivity(self, swap, env, leg_sensitivity, currency):
        sens = PointSensitivities.none()
        for leg in swap.legs:
            leg_sens = leg_sensitivity(leg, env)
            if currency is not None:
                leg_sens = leg_sens.multiplied_by(
                    env.fx_rate(leg.currency, currency)).with_currency(currency)
            sens = sens.combined_with(leg_sens)
        return sens.normalized()

    def present_value_sensitivity(self, swap: ResolvedSwap, env,
                                  currency: Optional[CurrencyTypes] = None) -> PointSensitivities:
        self._check(swap, env)
        return self._aggregate_sensitivity(
            swap, env, self._leg_pricer.present_value_sensitivity, currency)

    def forecast_value_sensitivity(self, swap: ResolvedSwap, env,
                                   currency: Optional[CurrencyTypes] = None) -> PointSensitivities:
        self._check(swap, env)
        return self._aggregate_sensitivity(
            swap, env, self._leg_pricer.forecast_value_sensitivity, currency)

###############################################################################
# Par rate
###############################################################################

    def _fixed_leg(self, swap: ResolvedSwap) -> ResolvedSwapLeg:
        try:
            return swap.fixed_leg()
        except PreconditionError:
            raise PreconditionError(
                "Par rate needs a fixed leg, swap has leg types "
                + str([leg.leg_type.name for leg in swap.legs]))

    def _par_rate_forward(self, swap: ResolvedSwap, env) -> _ParRateSweep:
        fixed_leg = self._fixed_leg(swap)
        ccy = fixed_leg.currency

        other_pv = 0.0
        for leg in swap.legs:
            if leg is not fixed_leg:
                other_pv += (self._leg_pricer.present_value_internal(leg, env)
                             * env.fx_rate(leg.currency, ccy))

        events_pv = self._leg_pricer.present_value_events_internal(fixed_leg, env)
        return _ParRateSweep(fixed_leg, ccy, other_pv, events_pv)

    @staticmethod
    def _is_compounding_branch(fixed_leg: ResolvedSwapLeg) -> bool:
        if len(fixed_leg.payment_periods) != 1:
            return False
        period = fixed_leg.payment_periods[0]
        if not isinstance(period, RatePaymentPeriod):
            raise PreconditionError(format_message(
                "Fixed leg payment must be a RatePaymentPeriod, got {}",
                type(period).__name__))
        return len(period.accrual_periods) > 1

    def _compounded_par_rate(self, sweep: _ParRateSweep, env) -> float:
        period = sweep.fixed_leg.payment_periods[0]

        if period.compounding_method == CompoundingTypes.NONE:
            raise PreconditionError(format_message(
                "Fixed payment on {} has {} accrual periods but no compounding",
                period.payment_date, len(period.accrual_periods)))

        for i, ap in enumerate(period.accrual_periods):
            if ap.year_fraction != 1.0:
                raise PreconditionError(format_message(
                    "Compounded par rate needs year fraction 1, accrual {} from {} has {}",
                    i, ap.start_date, ap.year_fraction))
            if ap.spread != 0.0:
                raise PreconditionError(format_message(
                    "Compounded par rate needs zero spread, accrual {} from {} has {}",
                    i, ap.start_date, ap.spread))

        n = len(period.accrual_periods)
        df = env.discount_factor(sweep.currency, period.payment_date)
        base = -sweep.numerator / period.notional / df + 1.0
        if base <= 0.0:
            raise PreconditionError(format_message(
                "No real compounded par rate for payment on {}, base {}",
                period.payment_date, base))
        return base ** (1.0 / n) - 1.0

    def _pvbp(self, leg: ResolvedSwapLeg, env) -> float:
        pvbp = self._leg_pricer.pvbp(leg, env)
        if pvbp == 0.0:
            raise PreconditionError(format_message(
                "{} leg in {} has no unpaid payment periods",
                leg.leg_type.name, leg.currency.name))
        return pvbp

    def par_rate(self, swap: ResolvedSwap, env) -> float:
        self._check(swap, env)
        sweep = self._par_rate_forward(swap, env)

        if self._is_compounding_branch(sweep.fixed_leg):
            logger.debug("Par rate from compounded single payment")
            return self._compounded_par_rate(sweep, env)

        pvbp = self._pvbp(sweep.fixed_leg, env)
        logger.debug("Par rate from pvbp %s, other legs %s, events %s",
                     pvbp, sweep.other_legs_pv, sweep.fixed_leg_events_pv)
        return -sweep.numerator / pvbp

    def par_rate_sensitivity(self, swap: ResolvedSwap, env) -> PointSensitivities:
        self._check(swap, env)
        sweep = self._par_rate_forward(swap, env)
        fixed_leg = sweep.fixed_leg

        if self._is_compounding_branch(fixed_leg):
            raise PreconditionError(
                "Par rate sensitivity of a compounded single payment is not supported")

        pvbp = self._pvbp(fixed_leg, env)

        # backward sweep
        other_bar = -1.0 / pvbp
        events_bar = -1.0 / pvbp
        pvbp_bar = sweep.numerator / (pvbp * pvbp)

        pvbp_dr = self._leg_pricer.pvbp_sensitivity(fixed_leg, env)
        events_dr = self._leg_pricer.present_value_sensitivity_events_internal(fixed_leg, env)
        other_dr = PointSensitivities.none()
        for leg in swap.legs:
            if leg is not fixed_leg:
                other_dr = other_dr.combined_with(
                    self._leg_pricer.present_value_sensitivity(leg, env).multiplied_by(
                        env.fx_rate(leg.currency, sweep.currency)))
        other_dr = other_dr.with_currency(sweep.currency)

        return (pvbp_dr.multiplied_by(pvbp_bar)
                .combined_with(events_dr.multiplied_by(events_bar))
                .combined_with(other_dr.multiplied_by(other_bar))
                .normalized())

###############################################################################
# Par spread
###############################################################################

    def _par_spread_forward(self, swap: ResolvedSwap, env) -> _ParSpreadSweep:
        reference_leg = swap.legs[0]
        ccy = reference_leg.currency
        converted_pv = self.present_value(swap, env, ccy).amount
        pvbp = self._pvbp(reference_leg, env)
        return _ParSpreadSweep(reference_leg, ccy, converted_pv, pvbp)

    def par_spread(self, swap: ResolvedSwap, env) -> float:
        self._check(swap, env)
        sweep = self._par_spread_forward(swap, env)
        logger.debug("Par spread from pvbp %s, converted pv %s",
                     sweep.pvbp, sweep.converted_pv)
        return -sweep.converted_pv / sweep.pvbp

    def par_spread_sensitivity(self, swap: ResolvedSwap, env) -> PointSensitivities:
        self._check(swap, env)
        sweep = self._par_spread_forward(swap, env)

        # backward sweep
        converted_pv_bar = -1.0 / sweep.pvbp
        pvbp_bar = sweep.converted_pv / (sweep.pvbp * sweep.pvbp)

        pvbp_dr = self._leg_pricer.pvbp_sensitivity(sweep.reference_leg, env)
        converted_pv_dr = self.present_value_sensitivity(swap, env, sweep.currency)

        return (converted_pv_dr.multiplied_by(converted_pv_bar)
                .combined_with(pvbp_dr.multiplied_by(pvbp_bar))
                .normalized())

###############################################################################
# Reports
###############################################################################

    def cash_flows(self, swap: ResolvedSwap, env) -> CashFlows:
        self._check(swap, env)
        flows = CashFlows.none()
        for leg in swap.legs:
            flows = flows.combined_with(self._leg_pricer.cash_flows(leg, env))
        return flows

    def currency_exposure(self, swap: ResolvedSwap, env) -> MultiCurrencyAmount:
        self._check(swap, env)
        total = MultiCurrencyAmount.empty()
        for leg in swap.legs:
            total = total.plus(self._leg_pricer.currency_exposure(leg, env))
        return total

    def current_cash(self, swap: ResolvedSwap, env) -> MultiCurrencyAmount:
        self._check(swap, env)
        total = MultiCurrencyAmount.empty()
        for leg in swap.legs:
            total = total.plus(self._leg_pricer.current_cash(leg, env))
        return total

    def explain_present_value(self, swap: ResolvedSwap, env) -> ExplainMap:
        self._check(swap, env)
        legs = []
        for i, leg in enumerate(swap.legs):
            leg_explain = self._leg_pricer.explain_present_value_internal(leg, env)
            legs.append(ExplainMap([(ExplainKey.ENTRY_INDEX, i)]
                                   + list(leg_explain.items())))
        return ExplainMap([(ExplainKey.ENTRY_TYPE, "Swap"),
                           (ExplainKey.LEGS, legs)])

###############################################################################
