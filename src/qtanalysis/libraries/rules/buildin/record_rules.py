"""
Trading Record Rules.

- WaitForRule: enough bars passed since the last trade of a type
"""

from qtanalysis.libraries.rules.base import Rule
from qtanalysis.services.trading.models import TradeType, TradingRecord


class WaitForRule(Rule):
    """
    Satisfied once at least number_of_bars bars passed since the last trade
    of trade_type.

    Without a trading record, or without such a trade, the rule is not
    satisfied.

    Parameters:
        trade_type: Trade type to wait after (BUY or SELL)
        number_of_bars: Minimum distance in bars from that trade

    Example:
        >>> rule = WaitForRule(TradeType.BUY, 3)
        >>> record.enter(2, price, amount)
        >>> rule.is_satisfied(5, record)
        True
    """

    def __init__(self, trade_type: TradeType, number_of_bars: int) -> None:
        if number_of_bars < 0:
            raise ValueError(f"Number of bars must be >= 0, got {number_of_bars}")
        self.trade_type = trade_type
        self.number_of_bars = number_of_bars

    def is_satisfied(self, index: int, trading_record: TradingRecord | None = None) -> bool:
        satisfied = False
        if trading_record is not None:
            last_trade = trading_record.get_last_trade(self.trade_type)
            if last_trade is not None:
                satisfied = index - last_trade.index >= self.number_of_bars
        self._trace(index, satisfied)
        return satisfied

    def __repr__(self) -> str:
        return f"WaitForRule({self.trade_type.value}, {self.number_of_bars})"
