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
from ratesweep.trades.rates.swap_leg import (ResolvedSwapLeg,
                                             fixed_rate_leg,
                                             compounded_fixed_leg,
                                             ibor_leg,
                                             overnight_leg,
                                             known_amount_leg,
                                             inflation_zero_coupon_leg)
from ratesweep.trades.rates.swap import ResolvedSwap
