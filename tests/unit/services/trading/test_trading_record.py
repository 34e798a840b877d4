"""
Unit tests for qtanalysis.services.trading.

Tests:
- TradeType: complement
- Trade: net price with transaction costs, bar-close constructors
- Position: new → opened → closed lifecycle and illegal operations
- TradingRecord: incremental building, replay from trades, trade-type reversal
- Cost models: zero and linear transaction costs
"""

import pytest
from pydantic import ValidationError

from qtanalysis.services.trading import (
    LinearTransactionCostModel,
    Position,
    Trade,
    TradeType,
    TradingRecord,
    ZeroCostModel,
)


class TestTradeType:
    def test_complement_type(self):
        assert TradeType.BUY.complement_type is TradeType.SELL
        assert TradeType.SELL.complement_type is TradeType.BUY


class TestTrade:
    """Test Trade model."""

    def test_net_price_without_costs_is_price(self, num_factory):
        # Arrange
        trade = Trade(index=0, type=TradeType.BUY, price_per_asset=num_factory.hundred, amount=num_factory.two)

        # Assert
        assert trade.cost.is_zero()
        assert trade.net_price.is_equal(num_factory.hundred)

    @pytest.mark.parametrize(("trade_type", "expected"), [(TradeType.BUY, 101), (TradeType.SELL, 99)])
    def test_net_price_includes_cost_per_asset(self, num_factory, trade_type, expected):
        """Costs raise what a buy pays and lower what a sell receives."""
        # Arrange
        trade = Trade(
            index=0,
            type=trade_type,
            price_per_asset=num_factory.hundred,
            amount=num_factory.two,
            cost_model=LinearTransactionCostModel(0.01),
        )

        # Act
        net_price = trade.net_price

        # Assert
        assert trade.cost.is_equal(num_factory.two)
        assert net_price.is_equal(num_factory.num_of(expected))

    def test_buy_at_and_sell_at_use_bar_close(self, num_factory, series_of):
        # Arrange
        series = series_of(num_factory, [10, 11, 12])

        # Act
        buy = Trade.buy_at(1, series)
        sell = Trade.sell_at(2, series, amount=num_factory.three)

        # Assert
        assert buy.is_buy and not buy.is_sell
        assert buy.price_per_asset.is_equal(num_factory.num_of(11))
        assert buy.amount.is_equal(num_factory.one)
        assert sell.is_sell
        assert sell.price_per_asset.is_equal(num_factory.num_of(12))
        assert sell.amount.is_equal(num_factory.three)

    def test_negative_index_rejected(self, num_factory):
        with pytest.raises(ValidationError):
            Trade(index=-1, type=TradeType.BUY, price_per_asset=num_factory.one, amount=num_factory.one)


class TestPosition:
    """Test Position lifecycle."""

    def test_lifecycle(self, num_factory):
        # Arrange
        position = Position()

        # Assert - new
        assert position.is_new and not position.is_opened and not position.is_closed

        # Act & Assert - opened
        entry = position.operate(1, num_factory.num_of(10), num_factory.one)
        assert position.is_opened
        assert entry.is_buy
        assert position.entry is entry

        # Act & Assert - closed
        exit_trade = position.operate(3, num_factory.num_of(12), num_factory.one)
        assert position.is_closed
        assert exit_trade.is_sell
        assert position.exit is exit_trade

    def test_short_position_exits_with_buy(self, num_factory):
        # Arrange
        position = Position(TradeType.SELL)

        # Act
        position.operate(0, num_factory.one, num_factory.one)
        exit_trade = position.operate(1, num_factory.one, num_factory.one)

        # Assert
        assert not position.is_long
        assert exit_trade.is_buy

    def test_exit_before_entry_raises(self, num_factory):
        # Arrange
        position = Position()
        position.operate(5, num_factory.one, num_factory.one)

        # Act & Assert
        with pytest.raises(ValueError, match="precedes entry"):
            position.operate(4, num_factory.one, num_factory.one)

    def test_operate_closed_position_raises(self, num_factory):
        # Arrange
        position = Position()
        position.operate(0, num_factory.one, num_factory.one)
        position.operate(1, num_factory.one, num_factory.one)

        # Act & Assert
        with pytest.raises(ValueError, match="closed position"):
            position.operate(2, num_factory.one, num_factory.one)

    def test_holding_cost_of_new_position_raises(self):
        with pytest.raises(ValueError):
            Position().holding_cost()

    def test_linear_position_cost_sums_both_trades(self, num_factory):
        """Position cost = entry cost + exit cost."""
        # Arrange
        model = LinearTransactionCostModel(0.01)
        position = Position(transaction_cost_model=model)
        position.operate(0, num_factory.hundred, num_factory.one)
        position.operate(1, num_factory.num_of(200), num_factory.one)

        # Act
        cost = model.calculate_position(position)

        # Assert
        assert cost.is_equal(num_factory.three)


class TestTradingRecordIncremental:
    """Test building a record with enter/exit/operate."""

    def test_enter_and_exit(self, num_factory):
        # Arrange
        record = TradingRecord()

        # Act
        entered = record.enter(0, num_factory.num_of(10), num_factory.one)
        entered_again = record.enter(1, num_factory.num_of(11), num_factory.one)
        exited = record.exit(3, num_factory.num_of(12), num_factory.one)
        exited_again = record.exit(4, num_factory.num_of(13), num_factory.one)

        # Assert
        assert entered is True
        assert entered_again is False
        assert exited is True
        assert exited_again is False
        assert record.position_count == 1
        assert len(record) == 2
        assert record.is_closed

    def test_current_position_and_last_trades(self, num_factory):
        # Arrange
        record = TradingRecord()
        record.operate(0, num_factory.one, num_factory.one)
        record.operate(2, num_factory.two, num_factory.one)
        record.operate(4, num_factory.three, num_factory.one)

        # Assert
        assert not record.is_closed
        assert record.current_position.is_opened
        assert record.last_entry.index == 4
        assert record.last_exit.index == 2
        assert record.get_last_trade().index == 4
        assert record.get_last_trade(TradeType.SELL).index == 2

    def test_empty_record(self, num_factory, series_of):
        # Arrange
        series = series_of(num_factory, [1, 2, 3])
        record = TradingRecord()

        # Assert
        assert record.is_closed
        assert record.get_last_trade() is None
        assert record.last_entry is None
        assert record.last_exit is None
        assert record.get_start_index(series) == 0
        assert record.get_end_index(series) == 2

    def test_explicit_bounds(self, num_factory, series_of):
        # Arrange
        series = series_of(num_factory, [1, 2, 3])
        record = TradingRecord(start_index=1, end_index=1)

        # Assert
        assert record.get_start_index(series) == 1
        assert record.get_end_index(series) == 1

    def test_positions_returns_copy(self, num_factory):
        # Arrange
        record = TradingRecord()
        record.operate(0, num_factory.one, num_factory.one)
        record.operate(1, num_factory.one, num_factory.one)

        # Act
        record.positions.clear()
        record.trades.clear()

        # Assert
        assert record.position_count == 1
        assert len(record.trades) == 2


class TestTradingRecordReplay:
    """Test building a record from a trade sequence."""

    def test_starting_type_from_first_trade(self, num_factory, series_of):
        # Arrange
        series = series_of(num_factory, [1, 2, 3, 4])

        # Act
        record = TradingRecord(Trade.sell_at(0, series), Trade.buy_at(2, series))

        # Assert
        assert record.starting_type is TradeType.SELL
        assert record.positions[0].entry.is_sell
        assert not record.positions[0].is_long

    def test_reversal_opens_position_of_entry_type(self, num_factory, series_of):
        """An entry of the other type opens a position in that direction."""
        # Arrange
        series = series_of(num_factory, [2, 1, 3, 5, 6, 3, 20])
        trades = [
            Trade.buy_at(0, series),
            Trade.sell_at(1, series),
            Trade.buy_at(3, series),
            Trade.sell_at(4, series),
            Trade.sell_at(5, series),
            Trade.buy_at(6, series),
        ]

        # Act
        record = TradingRecord(*trades)

        # Assert
        assert record.position_count == 3
        assert [position.is_long for position in record.positions] == [True, True, False]
        assert record.positions[2].entry.index == 5
        assert record.positions[2].exit.index == 6
        assert record.current_position.starting_type is TradeType.BUY

    def test_open_position_after_replay(self, num_factory, series_of):
        # Arrange
        series = series_of(num_factory, [1, 2, 3])

        # Act
        record = TradingRecord(Trade.buy_at(0, series), Trade.sell_at(1, series), Trade.buy_at(2, series))

        # Assert
        assert record.position_count == 1
        assert record.current_position.is_opened
        assert record.current_position.entry.index == 2

    def test_record_cost_model_prices_trades(self, num_factory, series_of):
        # Arrange
        series = series_of(num_factory, [100, 100])

        # Act
        record = TradingRecord(
            Trade.buy_at(0, series),
            Trade.sell_at(1, series),
            transaction_cost_model=LinearTransactionCostModel(0.01),
        )

        # Assert
        assert record.positions[0].entry.net_price.is_equal(num_factory.num_of(101))
        assert record.positions[0].exit.net_price.is_equal(num_factory.num_of(99))


class TestCostModels:
    """Test cost model contracts."""

    def test_zero_cost_model(self, num_factory):
        # Arrange
        model = ZeroCostModel()

        # Assert
        assert model.calculate_trade(num_factory.hundred, num_factory.two).is_zero()
        assert model == ZeroCostModel()

    def test_linear_cost_model(self, num_factory):
        # Arrange
        model = LinearTransactionCostModel("0.005")

        # Act
        cost = model.calculate_trade(num_factory.thousand, num_factory.two)

        # Assert
        assert cost.is_equal(num_factory.num_of(10))
        assert model == LinearTransactionCostModel("0.005")
        assert model != LinearTransactionCostModel("0.01")

    def test_negative_fee_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            LinearTransactionCostModel(-0.01)
