from ratesweep.pricers.rate_observation_fn import (DispatchingRateObservationFn,
                                                  FixedRateObservationFn,
                                                  IborRateObservationFn,
                                                  OvernightCompoundedRateObservationFn,
                                                  OvernightAveragedRateObservationFn,
                                                  InflationMonthlyRateObservationFn,
                                                  InflationInterpolatedRateObservationFn)
from ratesweep.pricers.payment_period_pricer import (DiscountingRatePaymentPeriodPricer,
                                                     DiscountingKnownAmountPaymentPeriodPricer,
                                                     DispatchingPaymentPeriodPricer)
from ratesweep.pricers.payment_event_pricer import DiscountingNotionalExchangePricer
from ratesweep.pricers.swap_leg_pricer import DiscountingSwapLegPricer
from ratesweep.pricers.swap_product_pricer import DiscountingSwapProductPricer
from ratesweep.pricers.config import PricerConfig, create_default_pricer
