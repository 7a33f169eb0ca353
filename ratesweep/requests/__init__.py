from ratesweep.requests.results import (CurrencyAmount,
                                        MultiCurrencyAmount,
                                        Ladder,
                                        CurveDelta,
                                        Risk,
                                        AnalyticsResult)
from ratesweep.requests.cashflows import CashFlow, CashFlows
from ratesweep.requests.explain import ExplainMap
