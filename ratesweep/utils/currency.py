"""
Currency type enumeration for multi-currency support.

Currency codes tag every monetary amount and every point sensitivity
produced by the pricers. A swap whose legs carry more than one currency is
cross-currency and its values are reported per currency unless a target
currency is requested.

Example:
    >>> CurrencyTypes.GBP.name
    'GBP'
    >>> fx_pair_name(CurrencyTypes.USD, CurrencyTypes.GBP)
    'USDGBP'
"""

from enum import Enum

###############################################################################

class CurrencyTypes(Enum):
    USD = 1
    EUR = 2
    GBP = 3
    CHF = 4
    CAD = 5
    AUD = 6
    NZD = 7
    DKK = 8
    SEK = 9
    HKD = 10
    JPY = 11
    NOK = 12
    PLN = 13
    RON = 14

###############################################################################

def fx_pair_name(ccy_from: CurrencyTypes, ccy_to: CurrencyTypes) -> str:
    """ Market quote name of the pair, e.g. USDGBP is GBP per one USD. """
    return f"{ccy_from.name}{ccy_to.name}"

###############################################################################
