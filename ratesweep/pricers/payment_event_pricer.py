"""
Pricer for payment events. A NotionalExchange pays a known amount, so only
the discount factor carries market sensitivity.
"""

from ratesweep.utils.error import PreconditionError
from ratesweep.utils.messages import format_message
from ratesweep.utils.global_types import ExplainKey
from ratesweep.sensitivity.point_sensitivity import PointSensitivities
from ratesweep.trades.rates.payment_event import NotionalExchange
from ratesweep.requests.cashflows import CashFlow
from ratesweep.requests.explain import ExplainMap

###############################################################################


class DiscountingNotionalExchangePricer:

    def _check(self, event):
        if not isinstance(event, NotionalExchange):
            raise PreconditionError(format_message(
                "Unsupported payment event {}", type(event).__name__))

    def forecast_value(self, event: NotionalExchange, env) -> float:
        self._check(event)
        if event.payment_date < env.valuation_date:
            return 0.0
        return event.amount

    def present_value(self, event: NotionalExchange, env) -> float:
        self._check(event)
        if event.payment_date < env.valuation_date:
            return 0.0
        return event.amount * env.discount_factor(event.currency, event.payment_date)

    def forecast_value_sensitivity(self, event, env) -> PointSensitivities:
        return PointSensitivities.none()

    def present_value_sensitivity(self, event: NotionalExchange, env) -> PointSensitivities:
        self._check(event)
        if event.payment_date < env.valuation_date:
            return PointSensitivities.none()
        return env.discount_factor_sensitivity(
            event.currency, event.payment_date).multiplied_by(event.amount)

    def current_cash(self, event: NotionalExchange, env) -> float:
        if event.payment_date == env.valuation_date:
            return event.amount
        return 0.0

    def cash_flow(self, event: NotionalExchange, env) -> CashFlow:
        return CashFlow(event.payment_date, event.currency,
                        self.forecast_value(event, env),
                        env.discount_factor(event.currency, event.payment_date))

    def explain_present_value(self, event: NotionalExchange, env) -> ExplainMap:
        entries = [(ExplainKey.ENTRY_TYPE, "NotionalExchange"),
                   (ExplainKey.PAYMENT_DATE, event.payment_date),
                   (ExplainKey.PAYMENT_CURRENCY, event.currency),
                   (ExplainKey.TRADE_NOTIONAL, abs(event.amount))]
        if event.payment_date < env.valuation_date:
            entries += [(ExplainKey.COMPLETED, True),
                        (ExplainKey.FORECAST_VALUE, 0.0),
                        (ExplainKey.PRESENT_VALUE, 0.0)]
        else:
            df = env.discount_factor(event.currency, event.payment_date)
            entries += [(ExplainKey.DISCOUNT_FACTOR, df),
                        (ExplainKey.FORECAST_VALUE, event.amount),
                        (ExplainKey.PRESENT_VALUE, event.amount * df)]
        return ExplainMap(entries)

###############################################################################
