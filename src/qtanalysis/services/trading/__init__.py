"""Trading record models and cost models."""

from qtanalysis.services.trading.costs import CostModel, LinearTransactionCostModel, ZeroCostModel
from qtanalysis.services.trading.models import Position, Trade, TradeType, TradingRecord

__all__ = [
    "CostModel",
    "LinearTransactionCostModel",
    "ZeroCostModel",
    "Position",
    "Trade",
    "TradeType",
    "TradingRecord",
]
