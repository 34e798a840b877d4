"""
Num Library.

Numeric backends behind one algebraic interface:
- DoubleNum: float backend (fast, bounded precision)
- DecimalNum: decimal backend (exact to a configurable number of digits)
- NaN: shared "undefined value" sentinel absorbing all arithmetic
"""

from qtanalysis.num.base import MixedPrecisionError, NaN, NotANumber, Num, NumFactory, UnrepresentableValueError
from qtanalysis.num.decimal_num import DEFAULT_PRECISION, DecimalNum, DecimalNumFactory
from qtanalysis.num.double_num import DoubleNum, DoubleNumFactory

__all__ = [
    # Base
    "Num",
    "NumFactory",
    "NaN",
    "NotANumber",
    # Backends
    "DoubleNum",
    "DoubleNumFactory",
    "DecimalNum",
    "DecimalNumFactory",
    "DEFAULT_PRECISION",
    # Errors
    "MixedPrecisionError",
    "UnrepresentableValueError",
]
