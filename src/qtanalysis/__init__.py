"""
QTAnalysis - Technical Analysis Core

Public API for evaluating indicators, rules and return series over bar series.
"""

from importlib.metadata import version

from qtanalysis.libraries.indicators import CachedIndicator, Indicator, RecursiveCachedIndicator
from qtanalysis.libraries.performance import Returns, ReturnType
from qtanalysis.num import NaN, Num, NumFactory
from qtanalysis.services.data import Bar, BarSeries
from qtanalysis.services.trading import Trade, TradeType, TradingRecord

try:
    __version__ = version("qtanalysis")
except Exception:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
    "Num",
    "NumFactory",
    "NaN",
    "Bar",
    "BarSeries",
    "Trade",
    "TradeType",
    "TradingRecord",
    "Indicator",
    "CachedIndicator",
    "RecursiveCachedIndicator",
    "Returns",
    "ReturnType",
]
