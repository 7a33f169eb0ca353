"Valuation Engine"

import logging
from typing import Iterable, Optional

from ratesweep.utils.error import LibError
from ratesweep.utils.messages import format_message
from ratesweep.utils.currency import CurrencyTypes
from ratesweep.utils.global_types import RequestTypes
from ratesweep.trades.rates.swap import ResolvedSwap
from ratesweep.pricers.config import create_default_pricer
from ratesweep.requests.results import AnalyticsResult

logger = logging.getLogger(__name__)


class Engine:
    """ Computes the requested measures of a swap against one rates
    environment. The pricer is built from the default configuration unless
    one is passed in. """

    def __init__(self,
                 env,
                 pricer=None):

        if env is None:
            raise LibError("Engine needs a rates environment")

        self.env = env
        self.pricer = pricer if pricer is not None else create_default_pricer()

    def compute(self,
                swap: ResolvedSwap,
                request_list: Iterable[RequestTypes],
                currency: Optional[CurrencyTypes] = None) -> AnalyticsResult:
        """Return analytics for the given swap and requested measures.

        VALUE and FORECAST_VALUE are per currency unless currency is given.
        DELTA maps the present value sensitivity onto curve nodes."""
        reqs = set(request_list)

        if not isinstance(swap, ResolvedSwap):
            raise LibError(format_message("{} not yet implemented",
                                          type(swap).__name__))

        for req in reqs:
            if not isinstance(req, RequestTypes):
                raise LibError(format_message("Unknown request {}", req))

        logger.debug("Computing %s for swap with %s legs",
                     sorted(r.name for r in reqs), len(swap.legs))

        value = None
        if RequestTypes.VALUE in reqs:
            value = self.pricer.present_value(swap, self.env, currency)

        forecast_value = None
        if RequestTypes.FORECAST_VALUE in reqs:
            forecast_value = self.pricer.forecast_value(swap, self.env, currency)

        risk = None
        if RequestTypes.DELTA in reqs:
            points = self.pricer.present_value_sensitivity(swap, self.env, currency)
            risk = self.env.parameter_sensitivity(points)

        par_rate = None
        if RequestTypes.PAR_RATE in reqs:
            par_rate = self.pricer.par_rate(swap, self.env)

        par_spread = None
        if RequestTypes.PAR_SPREAD in reqs:
            par_spread = self.pricer.par_spread(swap, self.env)

        cash_flows = None
        if RequestTypes.CASHFLOWS in reqs:
            cash_flows = self.pricer.cash_flows(swap, self.env)

        return AnalyticsResult(value=value,
                               risk=risk,
                               par_rate=par_rate,
                               par_spread=par_spread,
                               cash_flows=cash_flows,
                               forecast_value=forecast_value)
