from ratesweep.market.position.engine import Engine
from ratesweep.market.position.position import Position
