"""qtanalysis services package.

External collaborators of the indicator engine:
- data: Bar and BarSeries (the series indicators are evaluated over)
- trading: Trade, Position and TradingRecord (what was traded, for returns and rules)
"""

from qtanalysis.services.data import Bar, BarSeries, IndexOutOfRangeError
from qtanalysis.services.trading import Position, Trade, TradeType, TradingRecord

__all__: list[str] = [
    "Bar",
    "BarSeries",
    "IndexOutOfRangeError",
    "Position",
    "Trade",
    "TradeType",
    "TradingRecord",
]
