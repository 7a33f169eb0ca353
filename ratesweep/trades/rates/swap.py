"""
Resolved swap: one or more legs valued together.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from ratesweep.utils.error import LibError, PreconditionError
from ratesweep.utils.currency import CurrencyTypes
from ratesweep.utils.global_types import SwapLegTypes
from ratesweep.trades.rates.swap_leg import ResolvedSwapLeg

###############################################################################


@dataclass(frozen=True)
class ResolvedSwap:
    legs: Tuple[ResolvedSwapLeg, ...]

    def __post_init__(self):
        legs = tuple(self.legs)
        object.__setattr__(self, "legs", legs)

        if len(legs) == 0:
            raise LibError("Swap must have at least one leg")

        for leg in legs:
            if not isinstance(leg, ResolvedSwapLeg):
                raise LibError(f"Swap leg must be ResolvedSwapLeg, got {type(leg).__name__}")

    @property
    def currencies(self) -> List[CurrencyTypes]:
        """ Leg currencies in leg order, without repeats. """
        out = []
        for leg in self.legs:
            if leg.currency not in out:
                out.append(leg.currency)
        return out

    @property
    def is_cross_currency(self) -> bool:
        return len(self.currencies) > 1

    def legs_of_type(self, leg_type: SwapLegTypes) -> List[ResolvedSwapLeg]:
        return [leg for leg in self.legs if leg.leg_type == leg_type]

    def first_leg_of_type(self, leg_type: SwapLegTypes) -> Optional[ResolvedSwapLeg]:
        legs = self.legs_of_type(leg_type)
        return legs[0] if legs else None

    def fixed_leg(self) -> ResolvedSwapLeg:
        leg = self.first_leg_of_type(SwapLegTypes.FIXED)
        if leg is None:
            raise PreconditionError("Swap must contain a fixed leg")
        return leg

    def with_leg(self, i: int, leg: ResolvedSwapLeg) -> "ResolvedSwap":
        legs = list(self.legs)
        legs[i] = leg
        return replace(self, legs=tuple(legs))

    def with_fixed_rate(self, rate: float) -> "ResolvedSwap":
        """ Copy with the rate of the first fixed leg replaced. """
        i = self.legs.index(self.fixed_leg())
        return self.with_leg(i, self.legs[i].with_fixed_rate(rate))

    def with_first_leg_spread(self, spread: float) -> "ResolvedSwap":
        return self.with_leg(0, self.legs[0].with_spread(spread))

###############################################################################
