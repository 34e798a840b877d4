"""
Moving Average Indicators.

- LWMAIndicator: Linearly Weighted Moving Average
"""

from qtanalysis.libraries.indicators.base import CachedIndicator, Indicator
from qtanalysis.num import Num


class LWMAIndicator(CachedIndicator[Num]):
    """
    Linearly Weighted Moving Average.

    Weighted mean of the last N values where the most recent value has
    weight N, the one before it N-1, down to weight 1.

    Formula:
        LWMA = (1*P[i-N+1] + 2*P[i-N+2] + ... + N*P[i]) / (1 + 2 + ... + N)

    Until a full window is available (index + 1 < N) the value is zero.

    Parameters:
        indicator: Source indicator (e.g. ClosePriceIndicator)
        bar_count: Window length N

    Example:
        >>> lwma = LWMAIndicator(ClosePriceIndicator(series), bar_count=5)
        >>> lwma.get_value(series.end_index)
    """

    def __init__(self, indicator: Indicator[Num], bar_count: int) -> None:
        """
        Initialize LWMA indicator.

        Args:
            indicator: Source indicator
            bar_count: Number of values in the window

        Raises:
            ValueError: If bar_count < 1
        """
        if bar_count < 1:
            raise ValueError(f"Bar count must be >= 1, got {bar_count}")

        super().__init__(indicator)
        self.indicator = indicator
        self.bar_count = bar_count

    def calculate(self, index: int) -> Num:
        factory = self._series.num_factory
        if index + 1 < self.bar_count:
            return factory.zero

        weighted_sum = factory.zero
        weight_sum = factory.zero
        start = index - self.bar_count + 1
        for weight, i in enumerate(range(start, index + 1), start=1):
            weight_num = factory.num_of(weight)
            weighted_sum = weighted_sum.plus(self.indicator.get_value(i).multiplied_by(weight_num))
            weight_sum = weight_sum.plus(weight_num)

        return weighted_sum.divided_by(weight_sum)

    @property
    def count_of_unstable_bars(self) -> int:
        # Warmup values are reported as zero rather than flagged unstable
        return 0

    def __repr__(self) -> str:
        return f"LWMAIndicator(bar_count={self.bar_count})"
