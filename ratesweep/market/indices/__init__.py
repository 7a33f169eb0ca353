from ratesweep.market.indices.rate_index import IborIndex, OvernightIndex
from ratesweep.market.indices.price_index import PriceIndex
