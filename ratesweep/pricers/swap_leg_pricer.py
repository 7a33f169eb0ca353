"""
Pricer for a single swap leg.

The leg value is the sum of its payment period and payment event values,
all in the leg currency. The *_internal methods return plain floats in the
leg currency; the public methods wrap them in CurrencyAmount. Payments
before the valuation date contribute nothing.
"""

import logging

from ratesweep.utils.global_types import ExplainKey
from ratesweep.sensitivity.point_sensitivity import PointSensitivities
from ratesweep.trades.rates.swap_leg import ResolvedSwapLeg
from ratesweep.requests.results import CurrencyAmount, MultiCurrencyAmount
from ratesweep.requests.cashflows import CashFlows
from ratesweep.requests.explain import ExplainMap

logger = logging.getLogger(__name__)

###############################################################################


class DiscountingSwapLegPricer:

    def __init__(self, period_pricer, event_pricer):
        self._period_pricer = period_pricer
        self._event_pricer = event_pricer

    @property
    def period_pricer(self):
        return self._period_pricer

    @property
    def event_pricer(self):
        return self._event_pricer

    def _future_periods(self, leg: ResolvedSwapLeg, env):
        return [p for p in leg.payment_periods if p.payment_date >= env.valuation_date]

    def _future_events(self, leg: ResolvedSwapLeg, env):
        return [e for e in leg.payment_events if e.payment_date >= env.valuation_date]

###############################################################################
# Present value
###############################################################################

    def present_value(self, leg: ResolvedSwapLeg, env) -> CurrencyAmount:
        return CurrencyAmount(self.present_value_internal(leg, env), leg.currency)

    def present_value_internal(self, leg: ResolvedSwapLeg, env) -> float:
        pv = (self.present_value_periods_internal(leg, env)
              + self.present_value_events_internal(leg, env))
        logger.debug("Leg %s %s %s present value %s", leg.leg_type.name,
                     leg.pay_receive.name, leg.currency.name, pv)
        return pv

    def present_value_periods_internal(self, leg: ResolvedSwapLeg, env) -> float:
        return sum(self._period_pricer.present_value(p, env)
                   for p in self._future_periods(leg, env))

    def present_value_events_internal(self, leg: ResolvedSwapLeg, env) -> float:
        return sum(self._event_pricer.present_value(e, env)
                   for e in self._future_events(leg, env))

    def present_value_sensitivity(self, leg: ResolvedSwapLeg, env) -> PointSensitivities:
        return self.present_value_sensitivity_periods_internal(leg, env).combined_with(
            self.present_value_sensitivity_events_internal(leg, env))

    def present_value_sensitivity_periods_internal(self, leg: ResolvedSwapLeg, env) -> PointSensitivities:
        sens = PointSensitivities.none()
        for p in self._future_periods(leg, env):
            sens = sens.combined_with(self._period_pricer.present_value_sensitivity(p, env))
        return sens

    def present_value_sensitivity_events_internal(self, leg: ResolvedSwapLeg, env) -> PointSensitivities:
        sens = PointSensitivities.none()
        for e in self._future_events(leg, env):
            sens = sens.combined_with(self._event_pricer.present_value_sensitivity(e, env))
        return sens

###############################################################################
# Forecast value
###############################################################################

    def forecast_value(self, leg: ResolvedSwapLeg, env) -> CurrencyAmount:
        return CurrencyAmount(self.forecast_value_internal(leg, env), leg.currency)

    def forecast_value_internal(self, leg: ResolvedSwapLeg, env) -> float:
        return (sum(self._period_pricer.forecast_value(p, env)
                    for p in self._future_periods(leg, env))
                + sum(self._event_pricer.forecast_value(e, env)
                      for e in self._future_events(leg, env)))

    def forecast_value_sensitivity(self, leg: ResolvedSwapLeg, env) -> PointSensitivities:
        sens = PointSensitivities.none()
        for p in self._future_periods(leg, env):
            sens = sens.combined_with(self._period_pricer.forecast_value_sensitivity(p, env))
        for e in self._future_events(leg, env):
            sens = sens.combined_with(self._event_pricer.forecast_value_sensitivity(e, env))
        return sens

###############################################################################
# PVBP and accrued interest
###############################################################################

    def pvbp(self, leg: ResolvedSwapLeg, env) -> float:
        """ Present value of one unit of spread on every payment period. """
        return sum(self._period_pricer.pvbp(p, env)
                   for p in self._future_periods(leg, env))

    def pvbp_sensitivity(self, leg: ResolvedSwapLeg, env) -> PointSensitivities:
        sens = PointSensitivities.none()
        for p in self._future_periods(leg, env):
            sens = sens.combined_with(self._period_pricer.pvbp_sensitivity(p, env))
        return sens

    def accrued_interest(self, leg: ResolvedSwapLeg, env) -> CurrencyAmount:
        """ Accrual of the period containing the valuation date, undiscounted. """
        val_dt = env.valuation_date
        for p in leg.payment_periods:
            if p.start_date < val_dt <= p.end_date:
                return CurrencyAmount(self._period_pricer.accrued_interest(p, env),
                                      leg.currency)
        return CurrencyAmount(0.0, leg.currency)

###############################################################################
# Reports
###############################################################################

    def cash_flows(self, leg: ResolvedSwapLeg, env) -> CashFlows:
        flows = [self._period_pricer.cash_flow(p, env)
                 for p in self._future_periods(leg, env)]
        flows += [self._event_pricer.cash_flow(e, env)
                  for e in self._future_events(leg, env)]
        return CashFlows(flows)

    def currency_exposure(self, leg: ResolvedSwapLeg, env) -> MultiCurrencyAmount:
        return MultiCurrencyAmount.of(self.present_value(leg, env))

    def current_cash(self, leg: ResolvedSwapLeg, env) -> CurrencyAmount:
        cash = (sum(self._period_pricer.current_cash(p, env) for p in leg.payment_periods)
                + sum(self._event_pricer.current_cash(e, env) for e in leg.payment_events))
        return CurrencyAmount(cash, leg.currency)

    def explain_present_value_internal(self, leg: ResolvedSwapLeg, env) -> ExplainMap:
        periods = [self._period_pricer.explain_present_value(p, env)
                   for p in leg.payment_periods]
        events = [self._event_pricer.explain_present_value(e, env)
                  for e in leg.payment_events]
        return ExplainMap([
            (ExplainKey.ENTRY_TYPE, "Leg"),
            (ExplainKey.PAY_RECEIVE, leg.pay_receive.name),
            (ExplainKey.LEG_TYPE, leg.leg_type.name),
            (ExplainKey.PAYMENT_CURRENCY, leg.currency),
            (ExplainKey.PAYMENT_PERIODS, periods),
            (ExplainKey.PAYMENT_EVENTS, events),
            (ExplainKey.PRESENT_VALUE, self.present_value(leg, env)),
        ])

###############################################################################
