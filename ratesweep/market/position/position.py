"Create Position to value swaps"

from typing import Optional

from ratesweep.utils.currency import CurrencyTypes
from ratesweep.market.position.engine import Engine


class Position:
    def __init__(self,
                 swap,
                 env,
                 pricer=None,
                 currency: Optional[CurrencyTypes] = None):

        self.swap = swap
        self.env = env
        self.currency = currency

        self._engine = Engine(env, pricer)

    def compute(self, request_list):
        return self._engine.compute(self.swap, request_list, self.currency)
