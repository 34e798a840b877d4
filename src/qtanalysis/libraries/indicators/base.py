"""
Indicator Base Classes.

An indicator is a pure function from bar index to value over one BarSeries.
Callers pull values with ``get_value(index)``; indicators compute lazily and
only as far back as their own formula requires.

Philosophy:
- Indicators are bound to one series for their whole life
- Values are deterministic while the series only grows by appending bars
- Indicators may read other indicators (and themselves) at earlier indices
- Indicators are NOT services (no I/O, no event handling)

Classes:
- Indicator: the abstract capability (value at index, unstable bars, series)
- CachedIndicator: memoizes each index, computing it at most once
- RecursiveCachedIndicator: CachedIndicator for formulas reading their own
  previous value; fills the cache iteratively so deep series never hit
  Python's recursion limit

Log Name: Derived from class name (e.g., MedianPriceIndicator → "median_price")

Example Implementation:
    ```python
    class TypicalPriceIndicator(CachedIndicator[Num]):
        def __init__(self, series: BarSeries):
            super().__init__(series)

        def calculate(self, index: int) -> Num:
            bar = self.bar_series.get_bar(index)
            total = bar.high.plus(bar.low).plus(bar.close)
            return total.divided_by(self.bar_series.num_factory.three)

        @property
        def count_of_unstable_bars(self) -> int:
            return 0
    ```
"""

import re
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Iterator, TypeVar

import structlog

from qtanalysis.num import Num
from qtanalysis.services.data.models import BarSeries, IndexOutOfRangeError
from qtanalysis.system.config import get_system_config

T = TypeVar("T")

logger = structlog.get_logger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class Indicator(ABC, Generic[T]):
    """
    Abstract base class for all indicators.

    Responsibilities:
    - Provide a value for every index of the bound series
    - Declare how many leading bars give formulaically incorrect values
    - Expose the bound series

    Does NOT:
    - Mutate the series
    - Store state besides an optional memoization cache
    """

    def __init__(self, series: BarSeries) -> None:
        """
        Bind the indicator to a series.

        Args:
            series: Series the indicator is evaluated over

        Raises:
            ValueError: If series is None
        """
        if series is None:
            raise ValueError(f"{self.__class__.__name__} requires a bar series")
        self._series = series

    @abstractmethod
    def get_value(self, index: int) -> T:
        """
        Value of the indicator at a bar index.

        Args:
            index: Bar index in [begin_index, end_index]

        Returns:
            Indicator value

        Raises:
            IndexOutOfRangeError: If index is beyond the series bounds
        """
        pass

    @property
    @abstractmethod
    def count_of_unstable_bars(self) -> int:
        """Number of leading bars for which the value is not yet meaningful."""
        pass

    @property
    def bar_series(self) -> BarSeries:
        return self._series

    @property
    def is_stable(self) -> bool:
        """True once the series holds at least count_of_unstable_bars bars."""
        return self._series.bar_count >= self.count_of_unstable_bars

    def stream(self) -> Iterator[T]:
        """
        Lazily iterate values over [begin_index, end_index].

        Each call starts a fresh traversal; bounds are taken when called.
        """
        series = self._series
        if series.is_empty:
            return iter(())
        return (self.get_value(index) for index in range(series.begin_index, series.end_index + 1))

    def to_floats(self, index: int, bar_count: int) -> list[float]:
        """
        Window of values ending at index as floats (may lose precision).

        Args:
            index: Last index of the window
            bar_count: Window length

        Returns:
            Float values from max(0, index - bar_count + 1) onward
        """
        start = max(0, index - bar_count + 1)
        values = []
        for i in range(start, start + bar_count):
            value = self.get_value(i)
            values.append(value.float_value() if isinstance(value, Num) else float(value))
        return values

    @property
    def name(self) -> str:
        """
        Indicator name used in log events.

        Returns:
            snake_case class name without the "Indicator" suffix

        Example:
            MedianPriceIndicator → "median_price"
            LWMAIndicator → "lwma"
        """
        name = self.__class__.__name__
        if name.endswith("Indicator"):
            name = name[:-9]
        return _CAMEL_BOUNDARY.sub("_", name).lower()

    def __getitem__(self, index: int) -> T:
        return self.get_value(index)

    def __repr__(self) -> str:
        return self.__class__.__name__


@dataclass(frozen=True)
class _CacheEntry(Generic[T]):
    """Memoized value plus the series state it was computed against."""

    value: T
    end_index: int
    revision: int


class CachedIndicator(Indicator[T]):
    """
    Indicator computing each index at most once.

    Subclasses implement ``calculate(index)``; ``get_value`` memoizes it:

    1. index > end_index raises IndexOutOfRangeError. Indices below the first
       bar are passed to calculate() uncached so a formula can return a fixed
       seed ("no previous bar").
    2. A cached value is returned if its bar was already closed when it was
       computed (index < end_index at that time), or if the series has not
       changed since (same revision). Otherwise the bar was the open last bar
       and has since been replaced or followed by new bars.
    3. Otherwise calculate(index) runs and the result is stored.

    Formulas may call ``self.get_value(j)`` for j <= index (never forward);
    every such call goes through the same check, so each index is computed
    at most once. The cache only grows. Access is serialized by a re-entrant
    lock, which makes concurrent reads of one indicator safe.
    """

    def __init__(self, source: "BarSeries | Indicator") -> None:
        """
        Args:
            source: Series to bind to, or an indicator whose series is used
        """
        series = source.bar_series if isinstance(source, Indicator) else source
        super().__init__(series)
        self._cache: dict[int, _CacheEntry[T]] = {}
        self._highest_result_index = -1
        self._lock = threading.RLock()

    @abstractmethod
    def calculate(self, index: int) -> T:
        """
        Compute the value at index (no caching).

        Args:
            index: Bar index

        Returns:
            Indicator value
        """
        pass

    def get_value(self, index: int) -> T:
        series = self._series
        if index > series.end_index:
            raise IndexOutOfRangeError(
                f"{self.name}: index {index} beyond series end index {series.end_index} ('{series.name}')"
            )
        if index < max(series.begin_index, 0):
            return self.calculate(index)

        with self._lock:
            entry = self._cache.get(index)
            if entry is not None:
                if index < entry.end_index or entry.revision == series.revision:
                    return entry.value
                logger.debug(
                    "indicator.cache.stale",
                    indicator=self.name,
                    index=index,
                    cached_revision=entry.revision,
                    revision=series.revision,
                )

            value = self.calculate(index)
            self._cache[index] = _CacheEntry(value, series.end_index, series.revision)
            if index > self._highest_result_index:
                self._highest_result_index = index
            return value


class RecursiveCachedIndicator(CachedIndicator[T]):
    """
    CachedIndicator for formulas reading their own previous value.

    When asked for an index more than ``recursion_threshold`` bars past the
    highest cached result, earlier indices are computed first in a loop, so
    each recursive call only goes one step deep.
    """

    def __init__(self, source: "BarSeries | Indicator") -> None:
        super().__init__(source)
        self.recursion_threshold = get_system_config().indicators.recursion_threshold

    def get_value(self, index: int) -> T:
        series = self._series
        if max(series.begin_index, 0) <= index <= series.end_index:
            start = max(series.begin_index, self._highest_result_index)
            if index - start > self.recursion_threshold:
                logger.debug("indicator.recursion.prefill", indicator=self.name, start=start, index=index)
                for previous in range(start, index):
                    super().get_value(previous)
        return super().get_value(index)
