"""
Trading Record Models.

Models describing what was traded, consumed by the returns calculator and
by trade-aware rules:
- TradeType: BUY or SELL
- Trade: one executed leg (index, price per asset, amount)
- Position: an entry trade and, once closed, its exit trade
- TradingRecord: ordered trades grouped into positions

A long position is entered with a BUY and exited with a SELL; a short
position is entered with a SELL and exited with a BUY.

Example:
    >>> record = TradingRecord()
    >>> record.enter(0, factory.num_of(10), factory.one)
    True
    >>> record.exit(3, factory.num_of(12), factory.one)
    True
    >>> record.position_count
    1
"""

from enum import Enum
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, Field

from qtanalysis.num import Num
from qtanalysis.services.trading.costs import CostModel, ZeroCostModel

if TYPE_CHECKING:
    from qtanalysis.services.data.models import BarSeries

logger = structlog.get_logger(__name__)


class TradeType(str, Enum):
    """Direction of a trade."""

    BUY = "buy"
    SELL = "sell"

    @property
    def complement_type(self) -> "TradeType":
        """Opposite direction (the exit type for a position entered with self)."""
        return TradeType.SELL if self is TradeType.BUY else TradeType.BUY


class Trade(BaseModel):
    """
    One executed trade.

    Attributes:
        index: Bar index of the trade
        type: BUY or SELL
        price_per_asset: Execution price
        amount: Traded amount
        cost_model: Transaction cost model pricing the trade

    Derived:
        cost: Transaction cost of the trade
        net_price: Price per asset including costs (higher for buys, lower for sells)
    """

    index: int = Field(..., ge=0, description="Bar index")
    type: TradeType = Field(..., description="Trade direction")
    price_per_asset: Num = Field(..., description="Execution price per asset")
    amount: Num = Field(..., description="Traded amount")
    cost_model: CostModel = Field(default_factory=ZeroCostModel, description="Transaction cost model")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def is_buy(self) -> bool:
        return self.type is TradeType.BUY

    @property
    def is_sell(self) -> bool:
        return self.type is TradeType.SELL

    @property
    def cost(self) -> Num:
        return self.cost_model.calculate_trade(self.price_per_asset, self.amount)

    @property
    def net_price(self) -> Num:
        cost_per_asset = self.cost.divided_by(self.amount)
        if self.is_buy:
            return self.price_per_asset.plus(cost_per_asset)
        return self.price_per_asset.minus(cost_per_asset)

    @classmethod
    def buy_at(
        cls,
        index: int,
        series: "BarSeries",
        amount: Num | None = None,
        cost_model: CostModel | None = None,
    ) -> "Trade":
        """Buy at the close price of the bar at index (amount defaults to one)."""
        return cls._at_close(TradeType.BUY, index, series, amount, cost_model)

    @classmethod
    def sell_at(
        cls,
        index: int,
        series: "BarSeries",
        amount: Num | None = None,
        cost_model: CostModel | None = None,
    ) -> "Trade":
        """Sell at the close price of the bar at index (amount defaults to one)."""
        return cls._at_close(TradeType.SELL, index, series, amount, cost_model)

    @classmethod
    def _at_close(
        cls,
        trade_type: TradeType,
        index: int,
        series: "BarSeries",
        amount: Num | None,
        cost_model: CostModel | None,
    ) -> "Trade":
        return cls(
            index=index,
            type=trade_type,
            price_per_asset=series.get_bar(index).close,
            amount=amount if amount is not None else series.num_factory.one,
            cost_model=cost_model if cost_model is not None else ZeroCostModel(),
        )

    def __repr__(self) -> str:
        return f"Trade({self.type.value} index={self.index} price={self.price_per_asset} amount={self.amount})"


class Position:
    """
    Pair of an entry trade and its exit trade.

    A position is new (no trade), opened (entry only) or closed (entry and
    exit). The entry type is the position's starting type; the exit uses the
    complement type.

    Args:
        starting_type: Entry direction (BUY = long, SELL = short)
        transaction_cost_model: Cost model applied to both trades
        holding_cost_model: Cost model for keeping the position open
    """

    def __init__(
        self,
        starting_type: TradeType = TradeType.BUY,
        transaction_cost_model: CostModel | None = None,
        holding_cost_model: CostModel | None = None,
    ) -> None:
        self.starting_type = starting_type
        self.transaction_cost_model = transaction_cost_model or ZeroCostModel()
        self.holding_cost_model = holding_cost_model or ZeroCostModel()
        self._entry: Trade | None = None
        self._exit: Trade | None = None

    @property
    def entry(self) -> Trade | None:
        return self._entry

    @property
    def exit(self) -> Trade | None:
        return self._exit

    @property
    def is_new(self) -> bool:
        return self._entry is None

    @property
    def is_opened(self) -> bool:
        return self._entry is not None and self._exit is None

    @property
    def is_closed(self) -> bool:
        return self._exit is not None

    @property
    def is_long(self) -> bool:
        return self.starting_type is TradeType.BUY

    def operate(self, index: int, price: Num, amount: Num) -> Trade:
        """
        Enter the position if new, exit it if opened.

        Args:
            index: Bar index of the trade
            price: Price per asset
            amount: Traded amount

        Returns:
            The recorded trade

        Raises:
            ValueError: If the position is closed, or the exit precedes the entry
        """
        if self.is_new:
            self._entry = Trade(
                index=index,
                type=self.starting_type,
                price_per_asset=price,
                amount=amount,
                cost_model=self.transaction_cost_model,
            )
            return self._entry

        if self.is_opened:
            assert self._entry is not None
            if index < self._entry.index:
                raise ValueError(f"Exit index {index} precedes entry index {self._entry.index}")
            self._exit = Trade(
                index=index,
                type=self.starting_type.complement_type,
                price_per_asset=price,
                amount=amount,
                cost_model=self.transaction_cost_model,
            )
            return self._exit

        raise ValueError("Cannot operate a closed position")

    def holding_cost(self, final_index: int | None = None) -> Num:
        """Holding cost accrued up to final_index (default: exit index)."""
        if self._entry is None:
            raise ValueError("Cannot compute the holding cost of a new position")
        return self.holding_cost_model.calculate_position(self, final_index)

    def __repr__(self) -> str:
        return f"Position(entry={self._entry!r}, exit={self._exit!r})"


class TradingRecord:
    """
    Ordered record of trades grouped into positions.

    Built either incrementally (enter/exit/operate) or from a trade sequence.
    When built from trades, an entry whose type differs from the starting
    type opens a position of that type, so ``BUY, SELL, SELL, BUY`` yields a
    long position followed by a short one.

    Args:
        *trades: Trades to replay in order
        starting_type: Entry direction of positions (default: type of the first trade, else BUY)
        transaction_cost_model: Cost model for every trade
        holding_cost_model: Cost model for open positions
        start_index: Optional first bar index covered by the record
        end_index: Optional last bar index covered by the record

    Example:
        >>> record = TradingRecord(Trade.buy_at(0, series), Trade.sell_at(1, series))
        >>> record.positions[0].exit.index
        1
    """

    def __init__(
        self,
        *trades: Trade,
        starting_type: TradeType | None = None,
        transaction_cost_model: CostModel | None = None,
        holding_cost_model: CostModel | None = None,
        start_index: int | None = None,
        end_index: int | None = None,
    ) -> None:
        if starting_type is None:
            starting_type = trades[0].type if trades else TradeType.BUY

        self.starting_type = starting_type
        self.transaction_cost_model = transaction_cost_model or ZeroCostModel()
        self.holding_cost_model = holding_cost_model or ZeroCostModel()
        self.start_index = start_index
        self.end_index = end_index

        self._trades: list[Trade] = []
        self._positions: list[Position] = []
        self._current_position = self._new_position(starting_type)

        for trade in trades:
            is_entry = self._current_position.is_new
            if is_entry and trade.type is not self.starting_type:
                # Trade-type reversal: this entry opens a position in the other direction
                self._current_position = self._new_position(trade.type)
            recorded = self._current_position.operate(trade.index, trade.price_per_asset, trade.amount)
            self._record_trade(recorded, is_entry)

    def _new_position(self, starting_type: TradeType) -> Position:
        return Position(starting_type, self.transaction_cost_model, self.holding_cost_model)

    def _record_trade(self, trade: Trade, is_entry: bool) -> None:
        self._trades.append(trade)
        if not is_entry:
            self._positions.append(self._current_position)
            self._current_position = self._new_position(self.starting_type)
        logger.debug("trading_record.trade_recorded", type=trade.type.value, index=trade.index, entry=is_entry)

    @property
    def trades(self) -> list[Trade]:
        return list(self._trades)

    @property
    def positions(self) -> list[Position]:
        """Closed positions in order."""
        return list(self._positions)

    @property
    def position_count(self) -> int:
        return len(self._positions)

    @property
    def current_position(self) -> Position:
        """Position currently being built (new or opened)."""
        return self._current_position

    @property
    def is_closed(self) -> bool:
        """True when no position is open."""
        return not self._current_position.is_opened

    def operate(self, index: int, price: Num, amount: Num) -> Trade:
        """
        Record a trade on the current position (entry if new, exit if opened).

        Raises:
            ValueError: If the trade would exit before the entry
        """
        is_entry = self._current_position.is_new
        trade = self._current_position.operate(index, price, amount)
        self._record_trade(trade, is_entry)
        return trade

    def enter(self, index: int, price: Num, amount: Num) -> bool:
        """Enter a position if none is open. Returns True if a trade was recorded."""
        if self._current_position.is_new:
            self.operate(index, price, amount)
            return True
        return False

    def exit(self, index: int, price: Num, amount: Num) -> bool:
        """Exit the open position if any. Returns True if a trade was recorded."""
        if self._current_position.is_opened:
            self.operate(index, price, amount)
            return True
        return False

    def get_last_trade(self, trade_type: TradeType | None = None) -> Trade | None:
        """
        Last recorded trade, optionally of one type.

        Args:
            trade_type: Restrict to BUY or SELL trades

        Returns:
            The trade, or None if there is none
        """
        for trade in reversed(self._trades):
            if trade_type is None or trade.type is trade_type:
                return trade
        return None

    @property
    def last_entry(self) -> Trade | None:
        if self._current_position.entry is not None:
            return self._current_position.entry
        if self._positions:
            return self._positions[-1].entry
        return None

    @property
    def last_exit(self) -> Trade | None:
        if self._positions:
            return self._positions[-1].exit
        return None

    def get_start_index(self, series: "BarSeries") -> int:
        return self.start_index if self.start_index is not None else series.begin_index

    def get_end_index(self, series: "BarSeries") -> int:
        return self.end_index if self.end_index is not None else series.end_index

    def __len__(self) -> int:
        return len(self._trades)

    def __repr__(self) -> str:
        return f"TradingRecord(trades={len(self._trades)}, positions={len(self._positions)})"
