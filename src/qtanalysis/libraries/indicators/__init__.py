"""
Indicators Library.

Technical indicators evaluated lazily over a BarSeries:
- Base: Indicator, CachedIndicator, RecursiveCachedIndicator
- Helpers: bar fields, constants, median price, close price ratio
- Moving Averages: LWMA
- Volume: CLV, Accumulation/Distribution
"""

from qtanalysis.libraries.indicators.base import CachedIndicator, Indicator, RecursiveCachedIndicator
from qtanalysis.libraries.indicators.buildin.helpers import (
    ClosePriceIndicator,
    ClosePriceRatioIndicator,
    ConstantIndicator,
    HighPriceIndicator,
    LowPriceIndicator,
    MedianPriceIndicator,
    OpenPriceIndicator,
    VolumeIndicator,
)
from qtanalysis.libraries.indicators.buildin.moving_averages import LWMAIndicator
from qtanalysis.libraries.indicators.buildin.volume import AccumulationDistributionIndicator, CLVIndicator

__all__ = [
    # Base
    "Indicator",
    "CachedIndicator",
    "RecursiveCachedIndicator",
    # Helpers
    "ClosePriceIndicator",
    "OpenPriceIndicator",
    "HighPriceIndicator",
    "LowPriceIndicator",
    "VolumeIndicator",
    "ConstantIndicator",
    "MedianPriceIndicator",
    "ClosePriceRatioIndicator",
    # Moving Averages
    "LWMAIndicator",
    # Volume
    "CLVIndicator",
    "AccumulationDistributionIndicator",
]
