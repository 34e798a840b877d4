"""
Helper Indicators.

Building blocks other indicators are composed from:
- ClosePriceIndicator, OpenPriceIndicator, HighPriceIndicator,
  LowPriceIndicator, VolumeIndicator: one bar field per index
- ConstantIndicator: the same value at every index
- MedianPriceIndicator: (high + low) / 2
- ClosePriceRatioIndicator: close / previous close

Bar field and constant indicators read directly from the series and are not
cached; derived values are.
"""

from abc import abstractmethod

from qtanalysis.libraries.indicators.base import CachedIndicator, Indicator
from qtanalysis.num import Num
from qtanalysis.services.data.models import Bar, BarSeries


class _BarFieldIndicator(Indicator[Num]):
    """Value of one bar field at each index."""

    def __init__(self, series: BarSeries) -> None:
        super().__init__(series)

    def get_value(self, index: int) -> Num:
        return self._field(self._series.get_bar(index))

    @abstractmethod
    def _field(self, bar: Bar) -> Num:
        """Bar field read at each index."""
        pass

    @property
    def count_of_unstable_bars(self) -> int:
        return 0


class ClosePriceIndicator(_BarFieldIndicator):
    """Close price of each bar."""

    def _field(self, bar: Bar) -> Num:
        return bar.close


class OpenPriceIndicator(_BarFieldIndicator):
    def _field(self, bar: Bar) -> Num:
        return bar.open


class HighPriceIndicator(_BarFieldIndicator):
    def _field(self, bar: Bar) -> Num:
        return bar.high


class LowPriceIndicator(_BarFieldIndicator):
    def _field(self, bar: Bar) -> Num:
        return bar.low


class VolumeIndicator(_BarFieldIndicator):
    def _field(self, bar: Bar) -> Num:
        return bar.volume


class ConstantIndicator(Indicator[Num]):
    """
    Indicator returning one value at every index.

    Args:
        series: Bound series
        value: Constant value (a Num, or a raw number converted with the series factory)
    """

    def __init__(self, series: BarSeries, value: Num | int | float | str) -> None:
        super().__init__(series)
        self.value = value if isinstance(value, Num) else series.num_factory.num_of(value)

    def get_value(self, index: int) -> Num:
        return self.value

    @property
    def count_of_unstable_bars(self) -> int:
        return 0

    def __repr__(self) -> str:
        return f"ConstantIndicator({self.value})"


class MedianPriceIndicator(CachedIndicator[Num]):
    """
    Median Price.

    Midpoint of the bar range.

    Formula:
        Median Price = (High + Low) / 2

    Example:
        >>> median = MedianPriceIndicator(series)
        >>> median.get_value(0)  # bar with high 16, low 8
        DecimalNum('12')
    """

    def __init__(self, series: BarSeries) -> None:
        super().__init__(series)

    def calculate(self, index: int) -> Num:
        bar = self._series.get_bar(index)
        return bar.high.plus(bar.low).divided_by(self._series.num_factory.two)

    @property
    def count_of_unstable_bars(self) -> int:
        return 0


class ClosePriceRatioIndicator(CachedIndicator[Num]):
    """
    Close Price Ratio.

    Ratio of each close to the previous close. The first bar has no previous
    close and yields one.

    Formula:
        Ratio[i] = Close[i] / Close[i-1]
        Ratio[begin] = 1

    A zero previous close yields NaN.
    """

    def __init__(self, series: BarSeries) -> None:
        super().__init__(series)
        self._close_price = ClosePriceIndicator(series)

    def calculate(self, index: int) -> Num:
        if index <= self._series.begin_index:
            return self._series.num_factory.one
        previous_close = self._close_price.get_value(index - 1)
        return self._close_price.get_value(index).divided_by(previous_close)

    @property
    def count_of_unstable_bars(self) -> int:
        return 1
