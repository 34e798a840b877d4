"""Performance library for trading record analysis.

1. **Returns** (`returns.py`): per-bar return series of a trading record
   - ReturnType: arithmetic or logarithmic returns
   - Returns: position-aware return series over a BarSeries

Usage:
    >>> from qtanalysis.libraries.performance import Returns, ReturnType
    >>> returns = Returns(series, record, ReturnType.LOG)
    >>> returns.get_value(series.end_index)
"""

from qtanalysis.libraries.performance.returns import Returns, ReturnType

__all__ = [
    "Returns",
    "ReturnType",
]
