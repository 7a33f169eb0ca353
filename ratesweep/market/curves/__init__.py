from ratesweep.market.curves.interpolator import InterpTypes, LinearZeroInterpolator
from ratesweep.market.curves.discount_curve import DiscountCurve
from ratesweep.market.curves.price_index_curve import PriceIndexCurve
