"""Trading cost models.

Cost models price the friction of a trade (transaction costs) or of keeping
a position open (holding costs). Values are returned as Num in the backend
of the prices they are given.

Supported models:
1. ZeroCostModel: no costs (default)
2. LinearTransactionCostModel: fee proportional to traded notional
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING

from qtanalysis.num import Num

if TYPE_CHECKING:
    from qtanalysis.services.trading.models import Position


class CostModel(ABC):
    """Abstract cost model."""

    @abstractmethod
    def calculate_trade(self, price: Num, amount: Num) -> Num:
        """
        Cost of a single trade.

        Args:
            price: Price per asset
            amount: Traded amount

        Returns:
            Total cost of the trade
        """
        pass

    @abstractmethod
    def calculate_position(self, position: "Position", final_index: int | None = None) -> Num:
        """
        Cost of a position up to final_index.

        Args:
            position: An opened or closed position
            final_index: Bar index up to which costs accrue (default: exit index)

        Returns:
            Total cost of the position
        """
        pass


class ZeroCostModel(CostModel):
    """Cost model charging nothing."""

    def calculate_trade(self, price: Num, amount: Num) -> Num:
        return amount.num_factory.zero

    def calculate_position(self, position: "Position", final_index: int | None = None) -> Num:
        if position.entry is None:
            raise ValueError("Cannot compute the cost of a position without entry")
        return position.entry.amount.num_factory.zero

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ZeroCostModel)

    def __hash__(self) -> int:
        return hash(ZeroCostModel)

    def __repr__(self) -> str:
        return "ZeroCostModel()"


class LinearTransactionCostModel(CostModel):
    """
    Transaction cost proportional to traded notional.

    Cost of a trade = price * amount * fee_per_trade.

    Args:
        fee_per_trade: Fee as a fraction of notional (e.g. 0.001 for 10 bps)

    Raises:
        ValueError: If fee_per_trade is negative

    Example:
        >>> model = LinearTransactionCostModel(0.01)
        >>> model.calculate_trade(factory.num_of(100), factory.num_of(2))
        DecimalNum('2.00')
    """

    def __init__(self, fee_per_trade: float | Decimal | str) -> None:
        if Decimal(str(fee_per_trade)) < 0:
            raise ValueError(f"Fee must be non-negative, got {fee_per_trade}")
        self.fee_per_trade = fee_per_trade

    def calculate_trade(self, price: Num, amount: Num) -> Num:
        fee = price.num_factory.num_of(self.fee_per_trade)
        return price.multiplied_by(amount).multiplied_by(fee)

    def calculate_position(self, position: "Position", final_index: int | None = None) -> Num:
        if position.entry is None:
            raise ValueError("Cannot compute the cost of a position without entry")
        total = position.entry.cost
        if position.exit is not None:
            total = total.plus(position.exit.cost)
        return total

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LinearTransactionCostModel) and self.fee_per_trade == other.fee_per_trade

    def __hash__(self) -> int:
        return hash((LinearTransactionCostModel, self.fee_per_trade))

    def __repr__(self) -> str:
        return f"LinearTransactionCostModel(fee_per_trade={self.fee_per_trade})"
