"""
Volume Indicators.

- CLVIndicator: Close Location Value (money flow multiplier)
- AccumulationDistributionIndicator: cumulative money flow volume
"""

from qtanalysis.libraries.indicators.base import CachedIndicator, RecursiveCachedIndicator
from qtanalysis.num import Num
from qtanalysis.services.data.models import BarSeries


class CLVIndicator(CachedIndicator[Num]):
    """
    Close Location Value.

    Position of the close within the bar range, from -1 (close at the low)
    to +1 (close at the high).

    Formula:
        CLV = ((Close - Low) - (High - Close)) / (High - Low)

    A bar with no range (High == Low) yields zero.
    """

    def __init__(self, series: BarSeries) -> None:
        super().__init__(series)

    def calculate(self, index: int) -> Num:
        bar = self._series.get_bar(index)
        high_low = bar.high.minus(bar.low)
        if high_low.is_zero():
            return self._series.num_factory.zero
        close_low = bar.close.minus(bar.low)
        high_close = bar.high.minus(bar.close)
        return close_low.minus(high_close).divided_by(high_low)

    @property
    def count_of_unstable_bars(self) -> int:
        return 0


class AccumulationDistributionIndicator(RecursiveCachedIndicator[Num]):
    """
    Accumulation/Distribution Line.

    Volume indicator that measures cumulative flow of money into and out
    of a security. Uses the relationship between close and high-low range.

    Formula:
        Money Flow Multiplier = CLV
        Money Flow Volume = Money Flow Multiplier * Volume
        AD[i] = AD[i-1] + Money Flow Volume[i]
        AD[begin] = Money Flow Volume[begin]

    Traditional interpretation:
        Rising AD: Accumulation (buying pressure)
        Falling AD: Distribution (selling pressure)
        AD divergence from price: Potential trend reversal

    Example:
        >>> ad = AccumulationDistributionIndicator(series)
        >>> ad.get_value(series.end_index)
    """

    def __init__(self, series: BarSeries) -> None:
        super().__init__(series)
        self._clv = CLVIndicator(series)

    def calculate(self, index: int) -> Num:
        money_flow_volume = self._clv.get_value(index).multiplied_by(self._series.get_bar(index).volume)
        if index <= self._series.begin_index:
            previous = self._series.num_factory.zero
        else:
            previous = self.get_value(index - 1)
        return previous.plus(money_flow_volume)

    @property
    def count_of_unstable_bars(self) -> int:
        return 0
