"""
Pricer configuration.

The pricer tree is built once from a PricerConfig and passed explicitly to
the code that values swaps. There is no process-wide default instance.

Example:
    >>> pricer = create_default_pricer()
    >>> pricer.present_value(swap, env)
    >>>
    >>> # replace the rate function of one observation type
    >>> config = PricerConfig(observation_fns={FixedRateObservation: MyFixedFn()})
    >>> pricer = create_default_pricer(config)
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from ratesweep.pricers.rate_observation_fn import DispatchingRateObservationFn
from ratesweep.pricers.payment_period_pricer import (DiscountingRatePaymentPeriodPricer,
                                                     DiscountingKnownAmountPaymentPeriodPricer,
                                                     DispatchingPaymentPeriodPricer)
from ratesweep.pricers.payment_event_pricer import DiscountingNotionalExchangePricer
from ratesweep.pricers.swap_leg_pricer import DiscountingSwapLegPricer
from ratesweep.pricers.swap_product_pricer import DiscountingSwapProductPricer

###############################################################################


@dataclass(frozen=True)
class PricerConfig:
    """ Rate functions to use in place of the defaults, keyed by
    observation type. """
    observation_fns: Mapping[type, object] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "observation_fns",
                           MappingProxyType(dict(self.observation_fns)))

###############################################################################


def create_default_pricer(config: Optional[PricerConfig] = None) -> DiscountingSwapProductPricer:
    """ Build the swap pricer and the leg, period and observation pricers
    it delegates to. """
    config = config or PricerConfig()

    rate_fn = DispatchingRateObservationFn(config.observation_fns)
    period_pricer = DispatchingPaymentPeriodPricer(
        DiscountingRatePaymentPeriodPricer(rate_fn),
        DiscountingKnownAmountPaymentPeriodPricer())
    leg_pricer = DiscountingSwapLegPricer(period_pricer,
                                          DiscountingNotionalExchangePricer())
    return DiscountingSwapProductPricer(leg_pricer)

###############################################################################
