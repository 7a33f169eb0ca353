"""
Global type enumerations for legs, compounding and requests.

- SwapTypes: PAY or RECEIVE for swap leg direction
- SwapLegTypes: kind of leg, FIXED is what par rate solves for
- CompoundingTypes: how accrual periods inside one payment period combine
- NegativeRateTypes: whether a geared/spread rate may go below zero
- RequestTypes: measures the Engine can compute
- ExplainKey: labels of the present value explanation
"""

from enum import Enum


class SwapTypes(Enum):
    PAY = 1
    RECEIVE = 2

class SwapLegTypes(Enum):
    FIXED = 1
    IBOR = 2
    OVERNIGHT = 3
    INFLATION = 4
    OTHER = 5

class CompoundingTypes(Enum):
    NONE = 1
    STRAIGHT = 2
    FLAT = 3
    SPREAD_EXCLUSIVE = 4

class NegativeRateTypes(Enum):
    ALLOW_NEGATIVE = 1
    NOT_NEGATIVE = 2

class RequestTypes(Enum):
    VALUE = 1
    DELTA = 2
    PAR_RATE = 3
    PAR_SPREAD = 4
    CASHFLOWS = 5
    FORECAST_VALUE = 6

class ExplainKey(Enum):
    ENTRY_TYPE = 1
    ENTRY_INDEX = 2
    LEGS = 3
    LEG_TYPE = 4
    PAY_RECEIVE = 5
    PAYMENT_PERIODS = 6
    PAYMENT_EVENTS = 7
    ACCRUAL_PERIODS = 8
    PAYMENT_DATE = 9
    PAYMENT_CURRENCY = 10
    START_DATE = 11
    END_DATE = 12
    NOTIONAL = 13
    TRADE_NOTIONAL = 14
    ACCRUAL_YEAR_FRACTION = 15
    GEARING = 16
    SPREAD = 17
    FIXED_RATE = 18
    FORWARD_RATE = 19
    PAY_OFF_RATE = 20
    UNIT_AMOUNT = 21
    COMPOUNDING = 22
    DISCOUNT_FACTOR = 23
    FORECAST_VALUE = 24
    PRESENT_VALUE = 25
    COMPLETED = 26
