"""
Tests for the swap pricer: present value, par rate, par spread and their
curve sensitivities, checked against finite differences of bumped curves.
"""

from datetime import date

import numpy as np
import pytest

from ratesweep.utils.error import LibError, PreconditionError, MarketDataError
from ratesweep.utils.currency import CurrencyTypes
from ratesweep.utils.global_types import (SwapTypes,
                                          SwapLegTypes,
                                          CompoundingTypes,
                                          ExplainKey)
from ratesweep.requests import CurrencyAmount, MultiCurrencyAmount
from ratesweep.trades.rates import (ResolvedSwap,
                                    FixedRateObservation,
                                    RateAccrualPeriod,
                                    RatePaymentPeriod,
                                    ResolvedSwapLeg,
                                    fixed_rate_leg,
                                    compounded_fixed_leg,
                                    ibor_leg,
                                    known_amount_leg,
                                    overnight_leg)
from ratesweep.pricers import (PricerConfig,
                               FixedRateObservationFn,
                               OvernightCompoundedRateObservationFn,
                               create_default_pricer)

GBP = CurrencyTypes.GBP
USD = CurrencyTypes.USD


def _check_ladders(env, points, measure, fd_ladder, curve_names, atol):
    risk = env.parameter_sensitivity(points)
    for name in curve_names:
        fd = fd_ladder(measure, env, name, 7)
        if name in risk.curve_names:
            ladder = risk(name).risk_ladder
        else:
            ladder = np.zeros(7)
        assert np.allclose(ladder, fd, atol=atol), name


class TestPresentValue:

    def test_sum_of_legs(self, pricer, env, gbp_ois_swap):
        pv = pricer.present_value(gbp_ois_swap, env)
        legs = sum(pricer.leg_pricer.present_value_internal(leg, env)
                   for leg in gbp_ois_swap.legs)
        assert isinstance(pv, MultiCurrencyAmount)
        assert pv.currencies == [GBP]
        assert pv.amount(GBP) == pytest.approx(legs)

    def test_in_currency(self, pricer, env, gbp_ois_swap):
        pv = pricer.present_value(gbp_ois_swap, env, GBP)
        assert isinstance(pv, CurrencyAmount)
        assert pv.amount == pytest.approx(pricer.present_value(gbp_ois_swap, env).amount(GBP))

    def test_xccy_per_currency_and_converted(self, pricer, env, xccy_swap):
        pv = pricer.present_value(xccy_swap, env)
        assert set(pv.currencies) == {GBP, USD}
        converted = pricer.present_value(xccy_swap, env, GBP)
        assert converted.amount == pytest.approx(pv.amount(GBP) + 0.79 * pv.amount(USD))
        assert pv.convert_to(GBP, env).amount == pytest.approx(converted.amount)

    def test_missing_fx(self, pricer, env, xccy_swap):
        with pytest.raises(MarketDataError):
            pricer.present_value(xccy_swap, env, CurrencyTypes.EUR)

    def test_forecast_value(self, pricer, env, gbp_ois_swap):
        fv = pricer.forecast_value(gbp_ois_swap, env)
        legs = sum(pricer.leg_pricer.forecast_value_internal(leg, env)
                   for leg in gbp_ois_swap.legs)
        assert fv.amount(GBP) == pytest.approx(legs)

    def test_not_a_swap(self, pricer, env, gbp_ois_swap):
        with pytest.raises(LibError):
            pricer.present_value(gbp_ois_swap.legs[0], env)

    def test_currency_exposure_matches_pv(self, pricer, env, xccy_swap):
        assert pricer.currency_exposure(xccy_swap, env) == pricer.present_value(xccy_swap, env)

    def test_accrued_interest(self, pricer, env, seasoned_ois_swap):
        accrued = pricer.accrued_interest(seasoned_ois_swap, env)
        assert accrued.currencies == [GBP]
        fixed_part = 5e6 * 0.04 * 31.0 / 365.0
        # paid floating leg accrues at the rate observed over the whole period
        first = seasoned_ois_swap.legs[1].payment_periods[0].accrual_periods[0]
        rate = OvernightCompoundedRateObservationFn().rate(
            first.rate_observation, first.start_date, first.end_date, env)
        assert accrued.amount(GBP) == pytest.approx(fixed_part - 5e6 * rate * 31.0 / 365.0)

    def test_custom_config(self, env, gbp_ois_swap):

        class Zero(FixedRateObservationFn):
            def rate(self, observation, start_date, end_date, env):
                return 0.0

        pricer = create_default_pricer(PricerConfig(observation_fns={FixedRateObservation: Zero()}))
        assert pricer.leg_pricer.present_value_internal(gbp_ois_swap.legs[0], env) == 0.0

    @pytest.mark.numerical
    def test_sensitivity_matches_bumps(self, pricer, env, gbp_ois_swap, fd_ladder):
        points = pricer.present_value_sensitivity(gbp_ois_swap, env)
        _check_ladders(env, points, lambda e: pricer.present_value(gbp_ois_swap, e).amount(GBP),
                       fd_ladder, ["GBP-SONIA"], atol=1e-1)

    @pytest.mark.numerical
    def test_seasoned_sensitivity_matches_bumps(self, pricer, env, seasoned_ois_swap, fd_ladder):
        points = pricer.present_value_sensitivity(seasoned_ois_swap, env)
        _check_ladders(env, points,
                       lambda e: pricer.present_value(seasoned_ois_swap, e).amount(GBP),
                       fd_ladder, ["GBP-SONIA"], atol=1e-1)

    @pytest.mark.numerical
    def test_xccy_sensitivity_in_currency(self, pricer, env, xccy_swap, fd_ladder):
        points = pricer.present_value_sensitivity(xccy_swap, env, GBP)
        assert {p.currency for p in points} == {GBP}
        _check_ladders(env, points, lambda e: pricer.present_value(xccy_swap, e, GBP).amount,
                       fd_ladder, ["GBP-SONIA", "USD-SOFR"], atol=1e-1)

    def test_sensitivity_normalized(self, pricer, env, gbp_ois_swap):
        points = pricer.present_value_sensitivity(gbp_ois_swap, env)
        keys = [p.key() for p in points]
        assert keys == sorted(set(keys))


class TestParRate:

    def test_par_rate_zeroes_pv(self, pricer, env, gbp_ois_swap):
        par = pricer.par_rate(gbp_ois_swap, env)
        assert 0.02 < par < 0.07
        repriced = pricer.present_value(gbp_ois_swap.with_fixed_rate(par), env)
        assert repriced.amount(GBP) == pytest.approx(0.0, abs=1e-4)

    def test_par_rate_with_libor(self, pricer, env, gbp_libor_swap):
        par = pricer.par_rate(gbp_libor_swap, env)
        repriced = pricer.present_value(gbp_libor_swap.with_fixed_rate(par), env)
        assert repriced.amount(GBP) == pytest.approx(0.0, abs=1e-5)

    def test_xccy_par_rate_zeroes_converted_pv(self, pricer, env, xccy_swap):
        par = pricer.par_rate(xccy_swap, env)
        repriced = pricer.present_value(xccy_swap.with_fixed_rate(par), env, GBP)
        assert repriced.amount == pytest.approx(0.0, abs=1e-4)

    def test_no_fixed_leg(self, pricer, env, swap_dates, sonia):
        swap = ResolvedSwap((overnight_leg(SwapTypes.RECEIVE, sonia, 1e6, swap_dates),))
        with pytest.raises(PreconditionError):
            pricer.par_rate(swap, env)

    def test_compounded_par_rate(self, pricer, env, swap_dates, sonia):
        fixed = compounded_fixed_leg(SwapTypes.PAY, GBP, 1e6, swap_dates, 0.04)
        flt = overnight_leg(SwapTypes.RECEIVE, sonia, 1e6, [swap_dates[0], swap_dates[-1]])
        swap = ResolvedSwap((fixed, flt))
        par = pricer.par_rate(swap, env)
        repriced = pricer.present_value(swap.with_fixed_rate(par), env)
        assert repriced.amount(GBP) == pytest.approx(0.0, abs=1e-6)

        with pytest.raises(PreconditionError):
            pricer.par_rate_sensitivity(swap, env)

    def test_compounded_par_rate_needs_unit_year_fraction(self, pricer, env, sonia, swap_dates):
        accruals = (RateAccrualPeriod(date(2024, 1, 17), date(2024, 7, 17), 0.5,
                                      FixedRateObservation(0.04)),
                    RateAccrualPeriod(date(2024, 7, 17), date(2025, 1, 17), 0.5,
                                      FixedRateObservation(0.04)))
        period = RatePaymentPeriod(date(2025, 1, 17), accruals, -1e6, GBP,
                                   CompoundingTypes.STRAIGHT)
        fixed = ResolvedSwapLeg(SwapLegTypes.FIXED, SwapTypes.PAY, (period,))
        flt = overnight_leg(SwapTypes.RECEIVE, sonia, 1e6, swap_dates[:2])
        with pytest.raises(PreconditionError):
            pricer.par_rate(ResolvedSwap((fixed, flt)), env)

    def test_compounded_par_rate_needs_compounding(self, pricer, env, sonia, swap_dates):
        fixed = compounded_fixed_leg(SwapTypes.PAY, GBP, 1e6, swap_dates, 0.04,
                                     CompoundingTypes.NONE)
        flt = overnight_leg(SwapTypes.RECEIVE, sonia, 1e6, swap_dates)
        with pytest.raises(PreconditionError):
            pricer.par_rate(ResolvedSwap((fixed, flt)), env)

    def test_compounded_par_rate_without_real_root(self, pricer, env, swap_dates):
        fixed = compounded_fixed_leg(SwapTypes.PAY, GBP, 1e6, swap_dates, 0.04)
        other = known_amount_leg(SwapTypes.PAY, GBP, [3e6], [swap_dates[0], swap_dates[-1]])
        with pytest.raises(PreconditionError, match="base"):
            pricer.par_rate(ResolvedSwap((fixed, other)), env)

    def test_fully_paid_fixed_leg(self, pricer, env, sonia):
        paid = [date(2022, 1, 12), date(2023, 1, 12), date(2024, 1, 12)]
        fixed = fixed_rate_leg(SwapTypes.PAY, GBP, 1e6, paid, 0.04)
        flt = overnight_leg(SwapTypes.RECEIVE, sonia, 1e6,
                            [date(2024, 1, 17), date(2025, 1, 17)])
        swap = ResolvedSwap((fixed, flt))
        with pytest.raises(PreconditionError, match="no unpaid payment periods"):
            pricer.par_rate(swap, env)
        with pytest.raises(PreconditionError, match="no unpaid payment periods"):
            pricer.par_rate_sensitivity(swap, env)
        with pytest.raises(PreconditionError, match="no unpaid payment periods"):
            pricer.par_spread(swap, env)
        with pytest.raises(PreconditionError, match="no unpaid payment periods"):
            pricer.par_spread_sensitivity(swap, env)

    @pytest.mark.numerical
    def test_sensitivity_matches_bumps(self, pricer, env, gbp_ois_swap, fd_ladder):
        points = pricer.par_rate_sensitivity(gbp_ois_swap, env)
        _check_ladders(env, points, lambda e: pricer.par_rate(gbp_ois_swap, e),
                       fd_ladder, ["GBP-SONIA"], atol=1e-7)

    @pytest.mark.numerical
    def test_libor_sensitivity_matches_bumps(self, pricer, env, gbp_libor_swap, fd_ladder):
        points = pricer.par_rate_sensitivity(gbp_libor_swap, env)
        _check_ladders(env, points, lambda e: pricer.par_rate(gbp_libor_swap, e),
                       fd_ladder, ["GBP-SONIA", "GBP-LIBOR-3M"], atol=1e-7)

    @pytest.mark.numerical
    def test_xccy_sensitivity_matches_bumps(self, pricer, env, xccy_swap, fd_ladder):
        points = pricer.par_rate_sensitivity(xccy_swap, env)
        assert {p.currency for p in points} == {GBP}
        _check_ladders(env, points, lambda e: pricer.par_rate(xccy_swap, e),
                       fd_ladder, ["GBP-SONIA", "USD-SOFR"], atol=1e-7)


class TestParSpread:

    def test_par_spread_zeroes_pv(self, pricer, env, swap_dates, sonia):
        flt = overnight_leg(SwapTypes.RECEIVE, sonia, 1e6, swap_dates, spread=0.001)
        fixed = fixed_rate_leg(SwapTypes.PAY, GBP, 1e6, swap_dates, 0.045)
        swap = ResolvedSwap((flt, fixed))
        spread = pricer.par_spread(swap, env)
        repriced = pricer.present_value(swap.with_first_leg_spread(0.001 + spread), env)
        assert repriced.amount(GBP) == pytest.approx(0.0, abs=1e-5)

    def test_par_spread_of_fixed_first_leg(self, pricer, env, gbp_ois_swap):
        # spread on a fixed leg moves its rate one for one
        spread = pricer.par_spread(gbp_ois_swap, env)
        par = pricer.par_rate(gbp_ois_swap, env)
        assert 0.045 + spread == pytest.approx(par, abs=1e-12)

    def test_xccy_par_spread(self, pricer, env, swap_dates, sofr):
        usd = overnight_leg(SwapTypes.PAY, sofr, 10_000_000.0, swap_dates,
                            notional_exchange=True)
        gbp = fixed_rate_leg(SwapTypes.RECEIVE, GBP, 7_900_000.0, swap_dates, 0.043,
                             notional_exchange=True)
        swap = ResolvedSwap((usd, gbp))
        spread = pricer.par_spread(swap, env)
        repriced = pricer.present_value(swap.with_first_leg_spread(spread), env, USD)
        assert repriced.amount == pytest.approx(0.0, abs=1e-4)

    @pytest.mark.numerical
    def test_sensitivity_matches_bumps(self, pricer, env, xccy_swap, fd_ladder):
        points = pricer.par_spread_sensitivity(xccy_swap, env)
        _check_ladders(env, points, lambda e: pricer.par_spread(xccy_swap, e),
                       fd_ladder, ["GBP-SONIA", "USD-SOFR"], atol=1e-7)

    @pytest.mark.numerical
    def test_flat_compounded_libor_sensitivity(self, pricer, env, libor_3m, fd_ladder):
        dates = [date(2024, 3, 15), date(2024, 6, 17), date(2024, 9, 16),
                 date(2024, 12, 16), date(2025, 3, 17)]
        flt = ibor_leg(SwapTypes.RECEIVE, libor_3m, 1e6, dates, spread=0.001)
        period = RatePaymentPeriod(dates[-1],
                                   tuple(p.accrual_periods[0] for p in flt.payment_periods),
                                   1e6, GBP, CompoundingTypes.FLAT)
        flat = ResolvedSwapLeg(SwapLegTypes.IBOR, SwapTypes.RECEIVE, (period,))
        fixed = fixed_rate_leg(SwapTypes.PAY, GBP, 1e6, [dates[0], dates[-1]], 0.05)
        swap = ResolvedSwap((flat, fixed))

        spread = pricer.par_spread(swap, env)
        repriced = pricer.present_value(swap.with_first_leg_spread(0.001 + spread), env)
        assert repriced.amount(GBP) == pytest.approx(0.0, abs=1e-5)

        points = pricer.par_spread_sensitivity(swap, env)
        _check_ladders(env, points, lambda e: pricer.par_spread(swap, e),
                       fd_ladder, ["GBP-SONIA", "GBP-LIBOR-3M"], atol=1e-7)


class TestReports:

    def test_cash_flows_ordered(self, pricer, env, xccy_swap):
        flows = pricer.cash_flows(xccy_swap, env)
        dates = [cf.payment_date for cf in flows]
        assert dates == sorted(dates)
        # three coupons and two exchanges per leg
        assert len(flows) == 10

    def test_cash_flows_present_value(self, pricer, env, gbp_ois_swap):
        flows = pricer.cash_flows(gbp_ois_swap, env)
        total = sum(cf.present_value for cf in flows)
        assert total == pytest.approx(pricer.present_value(gbp_ois_swap, env).amount(GBP))

    def test_current_cash(self, pricer, env):
        dates = [date(2023, 1, 15), date(2024, 1, 15), date(2025, 1, 15)]
        fixed = fixed_rate_leg(SwapTypes.RECEIVE, GBP, 1e6, dates, 0.04)
        cash = pricer.current_cash(ResolvedSwap((fixed,)), env)
        assert cash.amount(GBP) == pytest.approx(40_000.0)

    def test_explain(self, pricer, env, xccy_swap):
        explain = pricer.explain_present_value(xccy_swap, env)
        assert explain[ExplainKey.ENTRY_TYPE] == "Swap"
        legs = explain[ExplainKey.LEGS]
        assert [leg[ExplainKey.ENTRY_INDEX] for leg in legs] == [0, 1]
        assert list(legs[0].keys())[0] == ExplainKey.ENTRY_INDEX
        assert len(legs[1][ExplainKey.PAYMENT_EVENTS]) == 2
        pv = pricer.present_value(xccy_swap, env)
        assert legs[1][ExplainKey.PRESENT_VALUE].amount == pytest.approx(pv.amount(USD))
        assert "LEGS[0].PAYMENT_PERIODS[0]" in set(explain.df["path"])
        assert "PRESENT_VALUE" in explain.table()
