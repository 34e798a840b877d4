"""
Indicator Rules.

- OverIndicatorRule: first indicator strictly above a second indicator or threshold
"""

from decimal import Decimal

from qtanalysis.libraries.indicators.base import Indicator
from qtanalysis.libraries.indicators.buildin.helpers import ConstantIndicator
from qtanalysis.libraries.rules.base import Rule
from qtanalysis.num import Num
from qtanalysis.services.trading.models import TradingRecord


class OverIndicatorRule(Rule):
    """
    Satisfied when the first indicator is strictly greater than the second.

    The second operand may be an indicator, a Num, or a raw number; numbers
    are converted with the first indicator's factory and wrapped in a
    ConstantIndicator. A NaN on either side never satisfies the rule.

    Parameters:
        first: Indicator compared
        second: Indicator or threshold compared against

    Example:
        >>> rule = OverIndicatorRule(ClosePriceIndicator(series), 100)
        >>> rule.is_satisfied(series.end_index)
        True
    """

    def __init__(self, first: Indicator[Num], second: "Indicator[Num] | Num | int | float | Decimal | str") -> None:
        if not isinstance(second, Indicator):
            second = ConstantIndicator(first.bar_series, second)
        self.first = first
        self.second = second

    def is_satisfied(self, index: int, trading_record: TradingRecord | None = None) -> bool:
        satisfied = self.first.get_value(index).is_greater_than(self.second.get_value(index))
        self._trace(index, satisfied)
        return satisfied

    def __repr__(self) -> str:
        return f"OverIndicatorRule({self.first!r}, {self.second!r})"
