"""Per-bar return series of a trading record.

Returns turns a BarSeries plus a TradingRecord (or a single Position) into
one return value per bar: what the strategy earned between bar i-1 and bar
i. Bars where no position is held earn zero; index 0 has no previous bar and
is NaN.

Usage:
    >>> returns = Returns(series, record, ReturnType.LOG)
    >>> returns.get_value(0).is_nan()
    True
    >>> returns.size
    11

Design Principles:
    - Values are computed once, at construction, in the series' Num backend
    - Entry and exit bars use the traded net prices, other bars use closes
    - Short positions earn the negated asset return
"""

from enum import Enum

import structlog

from qtanalysis.num import NaN, Num
from qtanalysis.services.data.models import BarSeries, IndexOutOfRangeError
from qtanalysis.services.trading.models import Position, TradingRecord

logger = structlog.get_logger(__name__)


class ReturnType(str, Enum):
    """How a price change is expressed as a return."""

    ARITHMETIC = "arithmetic"
    LOG = "log"

    def calculate(self, new_price: Num, old_price: Num) -> Num:
        """
        Return from old_price to new_price.

        ARITHMETIC: new / old - 1
        LOG: ln(new / old)
        """
        ratio = new_price.divided_by(old_price)
        if self is ReturnType.LOG:
            return ratio.log()
        return ratio.minus(ratio.num_factory.one)


class Returns:
    """
    Return series over a bar series.

    Args:
        series: Bar series the trades were made on
        record_or_position: TradingRecord, or a single Position
        return_type: ARITHMETIC (default) or LOG

    Raises:
        ValueError: If series is None
    """

    def __init__(
        self,
        series: BarSeries,
        record_or_position: TradingRecord | Position,
        return_type: ReturnType = ReturnType.ARITHMETIC,
    ) -> None:
        if series is None:
            raise ValueError("Returns requires a bar series")

        self._series = series
        self.return_type = return_type
        self._values: list[Num] = [NaN]

        if isinstance(record_or_position, Position):
            if record_or_position.entry is not None:
                self._calculate_position(record_or_position, series.end_index)
        else:
            self._calculate_record(record_or_position)

        self._fill_to(series.end_index)
        logger.debug(
            "returns.calculated",
            series=series.name,
            return_type=return_type.value,
            size=self.size,
        )

    @property
    def bar_series(self) -> BarSeries:
        return self._series

    @property
    def size(self) -> int:
        """Number of bar-to-bar transitions (bar count - 1)."""
        return max(self._series.bar_count - 1, 0)

    @property
    def values(self) -> list[Num]:
        return list(self._values)

    def get_value(self, index: int) -> Num:
        """
        Return realized between bar index-1 and bar index.

        Raises:
            IndexOutOfRangeError: If index is outside the computed range
        """
        if not 0 <= index < len(self._values):
            raise IndexOutOfRangeError(f"Return index {index} out of range [0, {len(self._values) - 1}]")
        return self._values[index]

    def __getitem__(self, index: int) -> Num:
        return self.get_value(index)

    def _calculate_record(self, record: TradingRecord) -> None:
        final_index = record.get_end_index(self._series)
        for position in record.positions:
            self._calculate_position(position, final_index)
        if record.current_position.is_opened:
            self._calculate_position(record.current_position, final_index)

    def _calculate_position(self, position: Position, final_index: int) -> None:
        entry = position.entry
        assert entry is not None
        exit_trade = position.exit
        series = self._series
        factory = series.num_factory

        end_index = final_index
        if exit_trade is not None:
            end_index = min(exit_trade.index, final_index)
        end_index = min(end_index, series.end_index)

        periods = end_index - entry.index
        if periods <= 0:
            logger.debug("returns.position_skipped", entry_index=entry.index, end_index=end_index)
            return

        self._fill_to(entry.index)

        is_long = entry.is_buy
        average_cost = position.holding_cost(end_index).divided_by(factory.num_of(periods))

        last_price = entry.net_price
        for i in range(entry.index + 1, end_index):
            close = series.get_bar(i).close
            asset_return = self.return_type.calculate(self._add_cost(close, average_cost, is_long), last_price)
            self._values.append(asset_return if is_long else asset_return.negate())
            last_price = close

        if exit_trade is not None and exit_trade.index == end_index:
            exit_price = exit_trade.net_price
        else:
            exit_price = series.get_bar(end_index).close
        asset_return = self.return_type.calculate(self._add_cost(exit_price, average_cost, is_long), last_price)
        self._values.append(asset_return if is_long else asset_return.negate())

    @staticmethod
    def _add_cost(price: Num, cost: Num, is_long: bool) -> Num:
        # Holding costs lower what a long earns and raise what a short pays back
        return price.minus(cost) if is_long else price.plus(cost)

    def _fill_to(self, index: int) -> None:
        """Pad with zero returns so the last value sits at index."""
        zero = self._series.num_factory.zero
        while len(self._values) <= index:
            self._values.append(zero)

    def __repr__(self) -> str:
        return f"Returns(series={self._series.name!r}, return_type={self.return_type.value}, size={self.size})"
