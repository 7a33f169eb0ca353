"""
Tests for rate observations and their rate functions, including overnight
rate cut-off and gradient cross-checks against jax.
"""

from datetime import date

import numpy as np
import pytest

from ratesweep.utils.error import LibError
from ratesweep.utils.date import YearMonth
from ratesweep.sensitivity import (OvernightRateSensitivity,
                                   InflationRateSensitivity)
from ratesweep.trades.rates import (FixedRateObservation,
                                    IborRateObservation,
                                    OvernightCompoundedRateObservation,
                                    OvernightAveragedRateObservation,
                                    InflationMonthlyRateObservation,
                                    InflationInterpolatedRateObservation)
from ratesweep.pricers import (DispatchingRateObservationFn,
                               FixedRateObservationFn,
                               OvernightCompoundedRateObservationFn)


@pytest.fixture(scope="module")
def rate_fn():
    return DispatchingRateObservationFn()


def _rate(rate_fn, obs, env):
    start = getattr(obs, "start_date", None)
    end = getattr(obs, "end_date", None)
    return rate_fn.rate(obs, start, end, env)


def _rate_sensitivity(rate_fn, obs, env):
    start = getattr(obs, "start_date", None)
    end = getattr(obs, "end_date", None)
    return rate_fn.rate_sensitivity(obs, start, end, env)


class TestObservationConstruction:

    def test_ibor_of_uses_index_basis(self, libor_3m):
        obs = IborRateObservation.of(libor_3m, date(2024, 3, 15),
                                     date(2024, 3, 15), date(2024, 6, 17))
        assert obs.year_fraction == pytest.approx(94.0 / 365.0)

    def test_ibor_bad_dates(self, libor_3m):
        with pytest.raises(LibError):
            IborRateObservation.of(libor_3m, date(2024, 3, 15),
                                   date(2024, 6, 17), date(2024, 3, 15))

    def test_overnight_fixing_dates(self, sonia):
        obs = OvernightCompoundedRateObservation(sonia, date(2024, 2, 2), date(2024, 2, 9))
        # Friday to Friday: Fri, Mon, Tue, Wed, Thu
        assert obs.fixing_dates == (date(2024, 2, 2), date(2024, 2, 5), date(2024, 2, 6),
                                    date(2024, 2, 7), date(2024, 2, 8))
        # Friday fixing accrues over the weekend
        assert obs.accrual_end(0) == date(2024, 2, 5)
        assert obs.accrual_year_fraction(0) == pytest.approx(3.0 / 365.0)

    def test_overnight_accrual_capped_at_end(self, sonia):
        # period ends on a Saturday
        obs = OvernightCompoundedRateObservation(sonia, date(2024, 2, 5), date(2024, 2, 10))
        assert obs.accrual_end(len(obs.fixing_dates) - 1) == date(2024, 2, 10)

    def test_overnight_needs_business_day(self, sonia):
        with pytest.raises(LibError):
            OvernightCompoundedRateObservation(sonia, date(2024, 2, 3), date(2024, 2, 5))

    def test_inflation_months_ordered(self, rpi):
        with pytest.raises(LibError):
            InflationMonthlyRateObservation(rpi, YearMonth(2025, 1), YearMonth(2024, 1))

    def test_interpolation_weight_range(self, rpi):
        with pytest.raises(LibError):
            InflationInterpolatedRateObservation(rpi, YearMonth(2024, 1),
                                                 YearMonth(2025, 1), 1.5)

    def test_interpolation_months(self, rpi):
        obs = InflationInterpolatedRateObservation(rpi, YearMonth(2024, 12),
                                                   YearMonth(2025, 12), 0.25)
        assert obs.reference_start_interpolation_month == YearMonth(2025, 1)
        assert obs.reference_end_interpolation_month == YearMonth(2026, 1)


class TestRateFunctions:

    def test_fixed(self, rate_fn, env):
        obs = FixedRateObservation(0.031)
        assert rate_fn.rate(obs, None, None, env) == 0.031
        assert len(rate_fn.rate_sensitivity(obs, None, None, env)) == 0

    def test_overnight_compounded_on_published_fixings(self, rate_fn, env, sonia):
        obs = OvernightCompoundedRateObservation(sonia, date(2024, 1, 2), date(2024, 1, 9))
        taus = [obs.accrual_year_fraction(i) for i in range(len(obs.fixing_dates))]
        expected = (np.prod([1.0 + 0.0519 * t for t in taus]) - 1.0) / sum(taus)
        assert _rate(rate_fn, obs, env) == pytest.approx(expected)
        assert len(_rate_sensitivity(rate_fn, obs, env)) == 0

    def test_overnight_averaged(self, rate_fn, env, sonia):
        obs = OvernightAveragedRateObservation(sonia, date(2024, 1, 2), date(2024, 1, 9))
        assert _rate(rate_fn, obs, env) == pytest.approx(0.0519)

    def test_overnight_across_valuation_date(self, rate_fn, env, sonia):
        # fixings before the valuation date carry no sensitivity
        obs = OvernightCompoundedRateObservation(sonia, date(2024, 1, 10), date(2024, 1, 19))
        sens = _rate_sensitivity(rate_fn, obs, env)
        fixing_dates = [p.fixing_date for p in sens]
        assert fixing_dates == [date(2024, 1, 15), date(2024, 1, 16),
                                date(2024, 1, 17), date(2024, 1, 18)]
        assert all(isinstance(p, OvernightRateSensitivity) for p in sens)

    @pytest.mark.numerical
    def test_overnight_averaged_sensitivity_matches_bumps(self, rate_fn, env, sonia,
                                                          fd_ladder):
        obs = OvernightAveragedRateObservation(sonia, date(2024, 5, 1), date(2024, 6, 3))
        risk = env.parameter_sensitivity(_rate_sensitivity(rate_fn, obs, env))
        fd = fd_ladder(lambda e: _rate(rate_fn, obs, e), env, "GBP-SONIA", 7)
        assert np.allclose(risk("GBP-SONIA").risk_ladder, fd, atol=1e-7)

    def test_inflation_monthly(self, rate_fn, env, rpi, rpi_curve):
        obs = InflationMonthlyRateObservation(rpi, YearMonth(2023, 10), YearMonth(2026, 10))
        expected = rpi_curve.value(YearMonth(2026, 10)) / 378.5 - 1.0
        assert _rate(rate_fn, obs, env) == pytest.approx(expected)
        sens = _rate_sensitivity(rate_fn, obs, env)
        assert len(sens) == 1
        assert sens.points[0].amount == pytest.approx(1.0 / 378.5)

    def test_inflation_interpolated(self, rate_fn, env, rpi, rpi_curve):
        obs = InflationInterpolatedRateObservation(rpi, YearMonth(2023, 10),
                                                   YearMonth(2026, 10), 0.4)
        start = 0.4 * 378.5 + 0.6 * 379.0
        end = (0.4 * rpi_curve.value(YearMonth(2026, 10))
               + 0.6 * rpi_curve.value(YearMonth(2026, 11)))
        assert _rate(rate_fn, obs, env) == pytest.approx(end / start - 1.0)

    def test_override_function(self, env):
        class Shifted(FixedRateObservationFn):
            def rate(self, observation, start_date, end_date, env):
                return observation.rate + 0.01

        fn = DispatchingRateObservationFn({FixedRateObservation: Shifted()})
        assert fn.rate(FixedRateObservation(0.02), None, None, env) == pytest.approx(0.03)

    def test_unknown_observation(self, env):
        fn = DispatchingRateObservationFn()
        with pytest.raises(LibError):
            fn.rate(object(), None, None, env)


class TestRateCutOff:
    """Last fixings reuse an earlier published rate"""

    START = date(2024, 3, 4)
    END = date(2024, 3, 11)

    def _daily_rates(self, env, sonia, obs):
        return [env.overnight_rate(sonia, d) for d in obs.fixing_dates]

    def test_cut_off_one_is_no_cut_off(self, rate_fn, env, sonia):
        plain = OvernightCompoundedRateObservation(sonia, self.START, self.END, 0)
        one = OvernightCompoundedRateObservation(sonia, self.START, self.END, 1)
        assert _rate(rate_fn, plain, env) == _rate(rate_fn, one, env)

    def test_cut_off_two(self, rate_fn, env, sonia):
        obs = OvernightCompoundedRateObservation(sonia, self.START, self.END, 2)
        assert [obs.publication_index(i) for i in range(5)] == [0, 1, 2, 3, 3]

        rates = self._daily_rates(env, sonia, obs)
        rates[4] = rates[3]
        taus = [obs.accrual_year_fraction(i) for i in range(5)]
        expected = (np.prod([1.0 + r * t for r, t in zip(rates, taus)]) - 1.0) / sum(taus)
        assert _rate(rate_fn, obs, env) == pytest.approx(expected, rel=1e-11)

    def test_cut_off_sensitivity_merged(self, rate_fn, env, sonia):
        obs = OvernightCompoundedRateObservation(sonia, self.START, self.END, 2)
        sens = _rate_sensitivity(rate_fn, obs, env)
        assert len(sens) == 4
        # the reused fixing collects two accrual weights
        assert sens.points[3].amount > 1.5 * sens.points[2].amount

    @pytest.mark.numerical
    def test_cut_off_sensitivity_matches_bumps(self, rate_fn, env, sonia, fd_ladder):
        obs = OvernightCompoundedRateObservation(sonia, self.START, self.END, 3)
        risk = env.parameter_sensitivity(_rate_sensitivity(rate_fn, obs, env))
        fd = fd_ladder(lambda e: _rate(rate_fn, obs, e), env, "GBP-SONIA", 7)
        assert np.allclose(risk("GBP-SONIA").risk_ladder, fd, atol=1e-7)

    def test_cut_off_too_long(self, sonia):
        with pytest.raises(LibError):
            OvernightCompoundedRateObservation(sonia, self.START, self.END, 5)

    def test_negative_cut_off(self, sonia):
        with pytest.raises(LibError):
            OvernightCompoundedRateObservation(sonia, self.START, self.END, -1)


@pytest.mark.jax
class TestGradientsAgainstJax:
    """Reverse-mode sensitivities match jax gradients of the same formulas"""

    @pytest.fixture(autouse=True)
    def _jax(self):
        jax = pytest.importorskip("jax")
        jax.config.update("jax_enable_x64", True)
        self.jax = jax
        self.jnp = pytest.importorskip("jax.numpy")

    def test_overnight_compounded(self, env, sonia):
        jnp = self.jnp
        obs = OvernightCompoundedRateObservation(sonia, date(2024, 5, 1), date(2024, 6, 3))
        rates = jnp.array([env.overnight_rate(sonia, d) for d in obs.fixing_dates])
        taus = jnp.array([obs.accrual_year_fraction(i) for i in range(len(obs.fixing_dates))])

        def compounded(r):
            return (jnp.prod(1.0 + r * taus) - 1.0) / jnp.sum(taus)

        grad = np.asarray(self.jax.grad(compounded)(rates))
        sens = OvernightCompoundedRateObservationFn().rate_sensitivity(
            obs, obs.start_date, obs.end_date, env)
        amounts = {p.fixing_date: p.amount for p in sens}

        assert float(compounded(rates)) == pytest.approx(
            OvernightCompoundedRateObservationFn().rate(obs, obs.start_date, obs.end_date, env),
            rel=1e-10)
        for d, g in zip(obs.fixing_dates, grad):
            assert amounts[d] == pytest.approx(g, rel=1e-10)

    def test_inflation_interpolated(self, rate_fn, env, rpi):
        jnp = self.jnp
        w = 0.3
        obs = InflationInterpolatedRateObservation(rpi, YearMonth(2024, 6),
                                                   YearMonth(2029, 6), w)
        months = [obs.reference_start_month, obs.reference_start_interpolation_month,
                  obs.reference_end_month, obs.reference_end_interpolation_month]
        values = jnp.array([env.inflation_index_rate(rpi, m) for m in months])

        def ratio(v):
            return (w * v[2] + (1.0 - w) * v[3]) / (w * v[0] + (1.0 - w) * v[1]) - 1.0

        grad = np.asarray(self.jax.grad(ratio)(values))
        sens = _rate_sensitivity(rate_fn, obs, env)
        amounts = {p.reference_month: p.amount for p in sens}

        assert all(isinstance(p, InflationRateSensitivity) for p in sens)
        for m, g in zip(months, grad):
            assert amounts[m] == pytest.approx(g, rel=1e-12)
