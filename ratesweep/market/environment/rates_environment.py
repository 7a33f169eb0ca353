"""
Market data container for a single valuation.

RatesEnvironment holds everything the pricers read: discount curves keyed
by currency, forward curves keyed by Ibor and overnight index, price index
curves, spot FX rates and historic fixings. It is immutable once built and
can be shared by concurrent valuations.

Lookup rules:
- Curve time of a date is actual days from the valuation date over 365.
- Ibor and overnight rates fixed before the valuation date come from the
  time series. On the valuation date the published fixing is used when
  present, the forward otherwise. Later dates always use the forward.
- Price index values come from the time series when published and are
  projected from the price index curve otherwise.
- FX rates are quoted by pair name, "USDGBP" being GBP per one USD. The
  inverse pair is used when only it is available.

Any value that cannot be found raises MarketDataError; nothing is defaulted.

Example:
    >>> env = RatesEnvironment(
    ...     valuation_date=date(2024, 1, 15),
    ...     discount_curves={CurrencyTypes.GBP: gbp_curve},
    ...     overnight_curves={SONIA: sonia_curve},
    ...     fx_rates={"USDGBP": 0.79},
    ...     time_series={SONIA: sonia_fixings})
    >>> env.discount_factor(CurrencyTypes.GBP, date(2025, 1, 15))
"""

import datetime
from typing import Dict, Optional

import numpy as np
import pandas as pd

from ratesweep.utils.error import LibError, MarketDataError
from ratesweep.utils.messages import format_message
from ratesweep.utils.currency import CurrencyTypes, fx_pair_name
from ratesweep.utils.date import YearMonth, check_dt
from ratesweep.utils.global_vars import gDaysInYear
from ratesweep.market.indices import IborIndex, OvernightIndex, PriceIndex
from ratesweep.market.curves import DiscountCurve, PriceIndexCurve
from ratesweep.sensitivity.point_sensitivity import (PointSensitivities,
                                                     ZeroRateSensitivity,
                                                     IborRateSensitivity,
                                                     OvernightRateSensitivity,
                                                     InflationRateSensitivity)
from ratesweep.requests.results import CurveDelta, Risk, node_tenor_label

###############################################################################


def _normalize_key(key):
    """ Fixing keys are dates for rate indices and YearMonth for price indices. """
    if isinstance(key, YearMonth):
        return key
    if isinstance(key, pd.Period):
        return YearMonth(key.year, key.month)
    if isinstance(key, pd.Timestamp):
        return key.date()
    if isinstance(key, datetime.datetime):
        return key.date()
    if isinstance(key, datetime.date):
        return key
    raise LibError(format_message("Unsupported fixing key {} of type {}",
                                  key, type(key).__name__))


def _normalize_series(series) -> Dict:
    """ Accept a pandas Series or a plain mapping; missing values are dropped. """
    out = {}
    for key, value in series.items():
        if pd.isna(value):
            continue
        out[_normalize_key(key)] = float(value)
    return out

###############################################################################


class RatesEnvironment:

    def __init__(self,
                 valuation_date: datetime.date,
                 discount_curves: Optional[Dict[CurrencyTypes, DiscountCurve]] = None,
                 ibor_curves: Optional[Dict[IborIndex, DiscountCurve]] = None,
                 overnight_curves: Optional[Dict[OvernightIndex, DiscountCurve]] = None,
                 price_index_curves: Optional[Dict[PriceIndex, PriceIndexCurve]] = None,
                 fx_rates: Optional[Dict[str, float]] = None,
                 time_series: Optional[Dict] = None):

        check_dt(valuation_date)

        self._valuation_date = valuation_date
        self._discount_curves = dict(discount_curves or {})
        self._ibor_curves = dict(ibor_curves or {})
        self._overnight_curves = dict(overnight_curves or {})
        self._price_index_curves = dict(price_index_curves or {})
        self._fx_rates = dict(fx_rates or {})
        self._time_series = {index: _normalize_series(s)
                             for index, s in (time_series or {}).items()}

        for pair, rate in self._fx_rates.items():
            if rate <= 0.0:
                raise LibError(format_message("FX rate {} must be positive", pair, rate))

    @property
    def valuation_date(self) -> datetime.date:
        return self._valuation_date

    def relative_time(self, dt: datetime.date) -> float:
        return (dt - self._valuation_date).days / gDaysInYear

###############################################################################
# Discounting
###############################################################################

    def discount_curve(self, currency: CurrencyTypes) -> DiscountCurve:
        try:
            return self._discount_curves[currency]
        except KeyError:
            raise MarketDataError(format_message(
                "Discount curve not found for currency {}", currency.name))

    def discount_factor(self, currency: CurrencyTypes, dt: datetime.date) -> float:
        return self.discount_curve(currency).df(self.relative_time(dt))

    def discount_factor_sensitivity(self,
                                    currency: CurrencyTypes,
                                    dt: datetime.date) -> PointSensitivities:
        """ d df / d z at the date, expressed in the curve currency. """
        t = self.relative_time(dt)
        if t <= 0.0:
            return PointSensitivities.none()
        df = self.discount_curve(currency).df(t)
        return PointSensitivities.of(
            ZeroRateSensitivity(currency, dt, currency, -t * df))

###############################################################################
# FX
###############################################################################

    def fx_rate(self, ccy_from: CurrencyTypes, ccy_to: CurrencyTypes) -> float:
        """ Units of ccy_to for one unit of ccy_from. """
        if ccy_from == ccy_to:
            return 1.0

        direct = fx_pair_name(ccy_from, ccy_to)
        if direct in self._fx_rates:
            return self._fx_rates[direct]

        inverse = fx_pair_name(ccy_to, ccy_from)
        if inverse in self._fx_rates:
            return 1.0 / self._fx_rates[inverse]

        raise MarketDataError(format_message(
            "FX rate {} not found. Available: {}", direct, sorted(self._fx_rates)))

###############################################################################
# Fixings
###############################################################################

    def _fixing(self, index, key):
        series = self._time_series.get(index)
        if series is None:
            return None
        return series.get(key)

    def _required_fixing(self, index, key):
        value = self._fixing(index, key)
        if value is None:
            raise MarketDataError(format_message(
                "No fixing for {} on {}", index.name, key))
        return value

    def _uses_fixing(self, index, fixing_date: datetime.date) -> bool:
        if fixing_date < self._valuation_date:
            return True
        if fixing_date == self._valuation_date:
            return self._fixing(index, fixing_date) is not None
        return False

###############################################################################
# Ibor
###############################################################################

    def ibor_curve(self, index: IborIndex) -> DiscountCurve:
        try:
            return self._ibor_curves[index]
        except KeyError:
            raise MarketDataError(format_message(
                "Forward curve not found for index {}", index.name))

    def _simple_forward(self, curve, start_dt, end_dt, year_fraction) -> float:
        df_start = curve.df(self.relative_time(start_dt))
        df_end = curve.df(self.relative_time(end_dt))
        return (df_start / df_end - 1.0) / year_fraction

    def ibor_rate(self, observation) -> float:
        index = observation.index
        if self._uses_fixing(index, observation.fixing_date):
            return self._required_fixing(index, observation.fixing_date)
        return self._simple_forward(self.ibor_curve(index),
                                    observation.effective_date,
                                    observation.maturity_date,
                                    observation.year_fraction)

    def ibor_rate_sensitivity(self, observation) -> PointSensitivities:
        index = observation.index
        if self._uses_fixing(index, observation.fixing_date):
            return PointSensitivities.none()
        return PointSensitivities.of(IborRateSensitivity(
            index, observation.fixing_date, observation.effective_date,
            observation.maturity_date, observation.year_fraction,
            index.currency, 1.0))

###############################################################################
# Overnight
###############################################################################

    def overnight_curve(self, index: OvernightIndex) -> DiscountCurve:
        try:
            return self._overnight_curves[index]
        except KeyError:
            raise MarketDataError(format_message(
                "Forward curve not found for index {}", index.name))

    def overnight_rate(self, index: OvernightIndex, fixing_date: datetime.date) -> float:
        if self._uses_fixing(index, fixing_date):
            return self._required_fixing(index, fixing_date)
        end_date = index.maturity_date(fixing_date)
        return self._simple_forward(self.overnight_curve(index), fixing_date,
                                    end_date, index.year_fraction(fixing_date, end_date))

    def overnight_rate_sensitivity(self,
                                   index: OvernightIndex,
                                   fixing_date: datetime.date) -> PointSensitivities:
        if self._uses_fixing(index, fixing_date):
            return PointSensitivities.none()
        return PointSensitivities.of(OvernightRateSensitivity(
            index, fixing_date, index.maturity_date(fixing_date), index.currency, 1.0))

###############################################################################
# Inflation
###############################################################################

    def price_index_curve(self, index: PriceIndex) -> PriceIndexCurve:
        try:
            return self._price_index_curves[index]
        except KeyError:
            raise MarketDataError(format_message(
                "Price index curve not found for index {}", index.name))

    def inflation_index_rate(self, index: PriceIndex, month: YearMonth) -> float:
        published = self._fixing(index, month)
        if published is not None:
            return published
        return self.price_index_curve(index).value(month)

    def inflation_index_rate_sensitivity(self,
                                         index: PriceIndex,
                                         month: YearMonth) -> PointSensitivities:
        if self._fixing(index, month) is not None:
            return PointSensitivities.none()
        return PointSensitivities.of(
            InflationRateSensitivity(index, month, index.currency, 1.0))

###############################################################################
# Curve parameter sensitivity
###############################################################################

    def _forward_node_sensitivity(self, curve, start_dt, end_dt, year_fraction):
        """ d forward / d z_k for a simply compounded forward on curve. """
        t_s = self.relative_time(start_dt)
        t_e = self.relative_time(end_dt)
        df_s = curve.df(t_s)
        df_e = curve.df(t_e)
        d_df_s = curve.df_node_sensitivity(t_s)
        d_df_e = curve.df_node_sensitivity(t_e)
        return (d_df_s / df_e - df_s * d_df_e / (df_e * df_e)) / year_fraction

    def _node_sensitivity(self, point):
        """ Curve and node sensitivity vector for one point sensitivity. """
        if isinstance(point, ZeroRateSensitivity):
            curve = self.discount_curve(point.curve_currency)
            t = self.relative_time(point.date)
            return curve, curve.node_weights(t)
        if isinstance(point, IborRateSensitivity):
            curve = self.ibor_curve(point.index)
            return curve, self._forward_node_sensitivity(
                curve, point.effective_date, point.maturity_date, point.year_fraction)
        if isinstance(point, OvernightRateSensitivity):
            curve = self.overnight_curve(point.index)
            yf = point.index.year_fraction(point.fixing_date, point.end_date)
            return curve, self._forward_node_sensitivity(
                curve, point.fixing_date, point.end_date, yf)
        if isinstance(point, InflationRateSensitivity):
            curve = self.price_index_curve(point.index)
            return curve, curve.value_node_sensitivity(point.reference_month)
        raise LibError(format_message("Unknown point sensitivity {}",
                                      type(point).__name__))

    def parameter_sensitivity(self, points: PointSensitivities) -> Risk:
        """ Map point sensitivities onto curve nodes, one CurveDelta per curve.

        Zero rate points carry d value / d z(t); the interpolated zero rate
        is linear in the node rates so the node weights give the ladder.
        Forward and index points carry d value / d rate and are chained
        through the derivative of the forward or index level. """
        ladders = {}
        currencies = {}
        curves = {}

        for point in points.normalized():
            curve, node_sens = self._node_sensitivity(point)
            name = curve.name

            if name in currencies and currencies[name] != point.currency:
                raise LibError(format_message(
                    "Curve {} has sensitivities in {} and {}; convert first",
                    name, currencies[name].name, point.currency.name))

            currencies[name] = point.currency
            curves[name] = curve
            ladders[name] = ladders.get(name, np.zeros(curve.num_nodes)) \
                + point.amount * node_sens

        deltas = [CurveDelta(ladders[name],
                             [node_tenor_label(t) for t in curves[name].times],
                             currencies[name],
                             name)
                  for name in ladders]
        return Risk(deltas)

###############################################################################
# Combination and scenarios
###############################################################################

    def combined_with(self, other: "RatesEnvironment") -> "RatesEnvironment":
        """ Environment reading from self first then other. """
        if not isinstance(other, RatesEnvironment):
            raise LibError("Can only combine with a RatesEnvironment")
        if other.valuation_date != self._valuation_date:
            raise LibError(format_message(
                "Cannot combine environments with valuation dates {} and {}",
                self._valuation_date, other.valuation_date))

        def merged(mine, theirs):
            out = dict(theirs)
            out.update(mine)
            return out

        env = RatesEnvironment(self._valuation_date)
        env._discount_curves = merged(self._discount_curves, other._discount_curves)
        env._ibor_curves = merged(self._ibor_curves, other._ibor_curves)
        env._overnight_curves = merged(self._overnight_curves, other._overnight_curves)
        env._price_index_curves = merged(self._price_index_curves,
                                         other._price_index_curves)
        env._fx_rates = merged(self._fx_rates, other._fx_rates)
        env._time_series = merged(self._time_series, other._time_series)
        return env

    def _all_curve_maps(self):
        return (self._discount_curves, self._ibor_curves,
                self._overnight_curves, self._price_index_curves)

    def bumped(self,
               curve_name: str,
               node: Optional[int],
               shift: float) -> "RatesEnvironment":
        """ Copy of the environment with one node of the named curve shifted.
        Every map holding a curve of that name sees the bumped curve. """
        env = self.combined_with(RatesEnvironment(self._valuation_date))
        found = False
        for curve_map in env._all_curve_maps():
            for key, curve in curve_map.items():
                if curve.name == curve_name:
                    curve_map[key] = curve.bumped(node, shift)
                    found = True
        if not found:
            raise MarketDataError(format_message("No curve named {}", curve_name))
        return env

    def with_fx_rate(self, pair: str, rate: float) -> "RatesEnvironment":
        env = self.combined_with(RatesEnvironment(self._valuation_date))
        if rate <= 0.0:
            raise LibError(format_message("FX rate {} must be positive", pair, rate))
        env._fx_rates[pair] = rate
        return env

    def __repr__(self):
        return (f"RatesEnvironment(valuation_date={self._valuation_date}, "
                f"discount={[c.name for c in self._discount_curves]}, "
                f"ibor={[i.name for i in self._ibor_curves]}, "
                f"overnight={[i.name for i in self._overnight_curves]}, "
                f"price_index={[i.name for i in self._price_index_curves]}, "
                f"fx={sorted(self._fx_rates)})")

###############################################################################
