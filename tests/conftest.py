"""
Pytest configuration file for ratesweep tests
Provides common market data, indices and swaps
"""
from datetime import date

import numpy as np
import pandas as pd
import pytest

from ratesweep.utils.currency import CurrencyTypes
from ratesweep.utils.date import YearMonth
from ratesweep.utils.global_types import SwapTypes
from ratesweep.market.indices import IborIndex, OvernightIndex, PriceIndex
from ratesweep.market.curves import DiscountCurve, PriceIndexCurve
from ratesweep.market.environment import RatesEnvironment
from ratesweep.trades.rates import (ResolvedSwap,
                                    fixed_rate_leg,
                                    overnight_leg,
                                    ibor_leg)
from ratesweep.pricers import create_default_pricer

CURVE_TIMES = [0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 10.0]

SONIA = OvernightIndex("GBP-SONIA", CurrencyTypes.GBP, 365.0)
SOFR = OvernightIndex("USD-SOFR", CurrencyTypes.USD, 360.0)
LIBOR_3M = IborIndex("GBP-LIBOR-3M", CurrencyTypes.GBP, 3, 365.0)
RPI = PriceIndex("GB-RPI", CurrencyTypes.GBP)


@pytest.fixture(scope="session")
def value_dt():
    """Standard valuation date for tests (a Monday)"""
    return date(2024, 1, 15)


@pytest.fixture(scope="session")
def sonia():
    return SONIA


@pytest.fixture(scope="session")
def sofr():
    return SOFR


@pytest.fixture(scope="session")
def libor_3m():
    return LIBOR_3M


@pytest.fixture(scope="session")
def rpi():
    return RPI


@pytest.fixture(scope="session")
def gbp_curve():
    """GBP OIS curve, used for discounting and SONIA forwards"""
    return DiscountCurve("GBP-SONIA", CURVE_TIMES,
                         [0.0515, 0.0505, 0.0480, 0.0450, 0.0430, 0.0410, 0.0400])


@pytest.fixture(scope="session")
def usd_curve():
    """USD OIS curve, used for discounting and SOFR forwards"""
    return DiscountCurve("USD-SOFR", CURVE_TIMES,
                         [0.0535, 0.0530, 0.0505, 0.0470, 0.0445, 0.0425, 0.0415])


@pytest.fixture(scope="session")
def libor_curve():
    return DiscountCurve("GBP-LIBOR-3M", CURVE_TIMES,
                         [0.0540, 0.0530, 0.0505, 0.0475, 0.0455, 0.0435, 0.0425])


@pytest.fixture(scope="session")
def rpi_curve():
    return PriceIndexCurve("GB-RPI", YearMonth(2023, 12), 380.0,
                           [1.0, 2.0, 5.0, 10.0, 20.0],
                           [0.0380, 0.0350, 0.0330, 0.0320, 0.0310])


@pytest.fixture(scope="session")
def sonia_fixings():
    """Published SONIA for every weekday before the valuation date"""
    days = pd.bdate_range("2023-11-01", "2024-01-12")
    return pd.Series(0.0519, index=days)


@pytest.fixture(scope="session")
def libor_fixings():
    return pd.Series({date(2023, 12, 15): 0.0532, date(2024, 1, 15): 0.0529})


@pytest.fixture(scope="session")
def rpi_fixings():
    return pd.Series({YearMonth(2023, 9): 377.0,
                      YearMonth(2023, 10): 378.5,
                      YearMonth(2023, 11): 379.0,
                      YearMonth(2023, 12): 380.0})


@pytest.fixture(scope="session")
def env(value_dt, gbp_curve, usd_curve, libor_curve, rpi_curve,
        sonia_fixings, libor_fixings, rpi_fixings):
    """Rates environment shared by most tests"""
    return RatesEnvironment(
        valuation_date=value_dt,
        discount_curves={CurrencyTypes.GBP: gbp_curve,
                         CurrencyTypes.USD: usd_curve},
        ibor_curves={LIBOR_3M: libor_curve},
        overnight_curves={SONIA: gbp_curve, SOFR: usd_curve},
        price_index_curves={RPI: rpi_curve},
        fx_rates={"USDGBP": 0.79},
        time_series={SONIA: sonia_fixings,
                     LIBOR_3M: libor_fixings,
                     RPI: rpi_fixings})


@pytest.fixture(scope="session")
def pricer():
    return create_default_pricer()


@pytest.fixture(scope="session")
def swap_dates():
    """Annual accrual dates of a forward starting 3Y swap"""
    return [date(2024, 1, 17), date(2025, 1, 17), date(2026, 1, 19), date(2027, 1, 18)]


@pytest.fixture(scope="session")
def gbp_ois_swap(swap_dates):
    """Pay 4.5% fixed, receive SONIA compounded, GBP 10m"""
    fixed = fixed_rate_leg(SwapTypes.PAY, CurrencyTypes.GBP, 10_000_000.0,
                           swap_dates, 0.045)
    flt = overnight_leg(SwapTypes.RECEIVE, SONIA, 10_000_000.0, swap_dates)
    return ResolvedSwap((fixed, flt))


@pytest.fixture(scope="session")
def seasoned_ois_swap():
    """Swap that started before the valuation date"""
    dates = [date(2023, 12, 15), date(2024, 12, 16), date(2025, 12, 15)]
    fixed = fixed_rate_leg(SwapTypes.RECEIVE, CurrencyTypes.GBP, 5_000_000.0,
                           dates, 0.04)
    flt = overnight_leg(SwapTypes.PAY, SONIA, 5_000_000.0, dates)
    return ResolvedSwap((fixed, flt))


@pytest.fixture(scope="session")
def gbp_libor_swap():
    """Quarterly LIBOR leg against annual fixed, first fixing in the past"""
    float_dates = [date(2023, 12, 15), date(2024, 3, 15), date(2024, 6, 17),
                   date(2024, 9, 16), date(2024, 12, 16)]
    fixed = fixed_rate_leg(SwapTypes.PAY, CurrencyTypes.GBP, 1_000_000.0,
                           [date(2023, 12, 15), date(2024, 12, 16)], 0.05)
    flt = ibor_leg(SwapTypes.RECEIVE, LIBOR_3M, 1_000_000.0, float_dates)
    return ResolvedSwap((fixed, flt))


@pytest.fixture(scope="session")
def xccy_swap(swap_dates):
    """Receive GBP fixed against pay USD SOFR, notionals exchanged"""
    gbp = fixed_rate_leg(SwapTypes.RECEIVE, CurrencyTypes.GBP, 7_900_000.0,
                         swap_dates, 0.043, notional_exchange=True)
    usd = overnight_leg(SwapTypes.PAY, SOFR, 10_000_000.0, swap_dates,
                        notional_exchange=True)
    return ResolvedSwap((gbp, usd))


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom test markers"""
    config.addinivalue_line("markers", "slow: marks tests as slow (may take longer to run)")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "numerical: marks tests with numerical precision requirements")
    config.addinivalue_line("markers", "jax: marks tests that cross-check against jax")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add default markers"""
    for item in items:
        if not any(item.iter_markers()):
            item.add_marker(pytest.mark.unit)

        if "integration" in item.name or item.fspath.basename.startswith("test_integration"):
            item.add_marker(pytest.mark.integration)


# Finite difference helpers
@pytest.fixture(scope="session")
def fd_ladder():
    """Central difference of measure(env) for every node of a curve"""
    def _fd_ladder(measure, env, curve_name, num_nodes, shift=1e-5):
        out = np.zeros(num_nodes)
        for k in range(num_nodes):
            up = measure(env.bumped(curve_name, k, shift))
            down = measure(env.bumped(curve_name, k, -shift))
            out[k] = (up - down) / (2.0 * shift)
        return out
    return _fd_ladder
