"""
Bar Data Models.

Published Data Models:
- Bar: OHLCV price bar with Num values
- BarSeries: Ordered, append-only sequence of bars bound to one NumFactory

Design Principles:
- Immutability: Bar is frozen (a bar is a fact); the series only grows
- Validation: Pydantic validation of OHLC relationships
- One backend per series: every Num in a series comes from its factory
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable

import structlog
from pydantic import BaseModel, Field, model_validator

from qtanalysis.num import MixedPrecisionError, Num, NumFactory
from qtanalysis.system.config import get_system_config

logger = structlog.get_logger(__name__)

RawNumber = int | float | Decimal | str | Num


class IndexOutOfRangeError(IndexError):
    """Index outside the bounds of a series."""

    pass


class Bar(BaseModel):
    """
    OHLCV price bar.

    Attributes:
        end_time: Bar close datetime (optional for synthetic series)
        open: Opening price
        high: High price (>= low)
        low: Low price (<= high)
        close: Closing price
        volume: Traded volume

    Validation:
        - High >= Low when both are defined
        - All values belong to one Num backend

    Examples:
        >>> factory = DecimalNumFactory.get_instance()
        >>> bar = Bar.of(factory, close=10, high=12, low=8, volume=200)
        >>> bar.close
        DecimalNum('10')
    """

    end_time: datetime | None = Field(default=None, description="Bar end datetime")
    open: Num = Field(..., description="Open price")
    high: Num = Field(..., description="High price")
    low: Num = Field(..., description="Low price")
    close: Num = Field(..., description="Close price")
    volume: Num = Field(..., description="Volume")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @model_validator(mode="after")
    def validate_ohlc(self) -> "Bar":
        """Ensure high >= low and a single numeric backend."""
        backends = {repr(value.num_factory) for value in self.values() if not value.is_nan()}
        if len(backends) > 1:
            raise ValueError(f"Bar values mix numeric backends: {sorted(backends)}")
        if self.high.is_less_than(self.low):
            raise ValueError(f"High ({self.high}) must be >= Low ({self.low})")
        return self

    def values(self) -> tuple[Num, ...]:
        """Numeric fields in OHLCV order."""
        return (self.open, self.high, self.low, self.close, self.volume)

    @classmethod
    def of(
        cls,
        num_factory: NumFactory,
        close: RawNumber,
        open: RawNumber | None = None,
        high: RawNumber | None = None,
        low: RawNumber | None = None,
        volume: RawNumber = 0,
        end_time: datetime | None = None,
    ) -> "Bar":
        """
        Build a bar from raw numbers.

        Missing open/high/low default to the close price.

        Args:
            num_factory: Factory converting raw numbers
            close: Close price
            open: Open price (default: close)
            high: High price (default: close)
            low: Low price (default: close)
            volume: Volume (default: 0)
            end_time: Bar end datetime

        Returns:
            New Bar with values in the factory's backend
        """
        return cls(
            end_time=end_time,
            open=num_factory.num_of(close if open is None else open),
            high=num_factory.num_of(close if high is None else high),
            low=num_factory.num_of(close if low is None else low),
            close=num_factory.num_of(close),
            volume=num_factory.num_of(volume),
        )


class BarSeries:
    """
    Append-only sequence of bars.

    Indices run from begin_index to end_index (both -1 while empty). Bars are
    only ever appended; the last bar may be replaced while it is still open
    (e.g. a live bar being updated), which bumps ``revision`` so indicator
    caches recompute it.

    Args:
        name: Series name
        num_factory: Numeric backend (default: from system configuration)
        bars: Initial bars

    Example:
        >>> series = BarSeries("AAPL", DoubleNumFactory.get_instance())
        >>> series.add_bar_values(close=150.5, high=151.0, low=149.5, volume=1000)
        >>> series.end_index
        0
    """

    def __init__(
        self,
        name: str = "unnamed_series",
        num_factory: NumFactory | None = None,
        bars: Iterable[Bar] | None = None,
    ) -> None:
        self.name = name
        self._num_factory = num_factory if num_factory is not None else get_system_config().num.build_factory()
        self._bars: list[Bar] = []
        self._revision = 0

        for bar in bars or []:
            self.add_bar(bar)

    @property
    def num_factory(self) -> NumFactory:
        return self._num_factory

    @property
    def bar_count(self) -> int:
        return len(self._bars)

    @property
    def is_empty(self) -> bool:
        return not self._bars

    @property
    def begin_index(self) -> int:
        return 0 if self._bars else -1

    @property
    def end_index(self) -> int:
        return len(self._bars) - 1

    @property
    def revision(self) -> int:
        """Counter bumped on every append or replacement."""
        return self._revision

    @property
    def bars(self) -> list[Bar]:
        return list(self._bars)

    @property
    def first_bar(self) -> Bar:
        return self.get_bar(self.begin_index)

    @property
    def last_bar(self) -> Bar:
        return self.get_bar(self.end_index)

    def get_bar(self, index: int) -> Bar:
        """
        Get bar at index.

        Raises:
            IndexOutOfRangeError: If index is outside [begin_index, end_index]
        """
        if self.is_empty or not self.begin_index <= index <= self.end_index:
            raise IndexOutOfRangeError(
                f"Bar index {index} out of range [{self.begin_index}, {self.end_index}] for series '{self.name}'"
            )
        return self._bars[index]

    def add_bar(self, bar: Bar, replace: bool = False) -> None:
        """
        Append a bar, or replace the last one.

        Args:
            bar: Bar to add
            replace: Replace the last (still open) bar instead of appending

        Raises:
            MixedPrecisionError: If the bar's values come from another backend
            ValueError: If the bar does not end after the current last bar
        """
        for value in bar.values():
            if not value.is_nan() and not self._num_factory.produces(value):
                raise MixedPrecisionError(
                    f"Bar value {value!r} does not belong to series backend {self._num_factory!r}"
                )

        if replace and self._bars:
            self._bars[-1] = bar
            logger.debug("bar_series.bar_replaced", series=self.name, index=self.end_index)
        else:
            if self._bars and bar.end_time is not None and self._bars[-1].end_time is not None:
                if bar.end_time <= self._bars[-1].end_time:
                    raise ValueError(
                        f"Cannot add a bar ending {bar.end_time} before last bar end {self._bars[-1].end_time}"
                    )
            self._bars.append(bar)

        self._revision += 1

    def add_bar_values(
        self,
        close: RawNumber,
        open: RawNumber | None = None,
        high: RawNumber | None = None,
        low: RawNumber | None = None,
        volume: RawNumber = 0,
        end_time: datetime | None = None,
        replace: bool = False,
    ) -> None:
        """Build a bar from raw numbers in this series' backend and add it."""
        bar = Bar.of(self._num_factory, close, open=open, high=high, low=low, volume=volume, end_time=end_time)
        self.add_bar(bar, replace=replace)

    def __len__(self) -> int:
        return len(self._bars)

    def __repr__(self) -> str:
        return f"BarSeries(name={self.name!r}, bars={len(self._bars)}, num_factory={self._num_factory!r})"
