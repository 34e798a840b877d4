"""Bar data models.

Provides the append-only BarSeries indicators are bound to.
"""

from qtanalysis.services.data.models import Bar, BarSeries, IndexOutOfRangeError

__all__ = [
    "Bar",
    "BarSeries",
    "IndexOutOfRangeError",
]
