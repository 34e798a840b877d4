"""
Floating-point Num backend.

DoubleNum wraps a Python float (IEEE 754 binary64). It is fast but subject
to binary rounding error, so results agree with the decimal backend only to
roughly 15 significant digits.
"""

import math
from decimal import Decimal

from qtanalysis.num.base import NaN, Num, NumFactory, UnrepresentableValueError


def _wrap(value: float) -> Num:
    """Wrap a float, mapping IEEE NaN onto the NaN singleton."""
    if math.isnan(value):
        return NaN
    return DoubleNum(value)


class DoubleNum(Num):
    """Num backed by a float."""

    __slots__ = ("_delegate",)

    def __init__(self, value: float) -> None:
        self._delegate = float(value)

    @classmethod
    def value_of(cls, value: "int | float | Decimal | str | Num") -> Num:
        """Shortcut for ``DoubleNumFactory.get_instance().num_of(value)``."""
        return DoubleNumFactory.get_instance().num_of(value)

    def plus(self, augend: Num) -> Num:
        other = self._unwrap(augend)
        if other is None:
            return NaN
        return _wrap(self._delegate + other)

    def minus(self, subtrahend: Num) -> Num:
        other = self._unwrap(subtrahend)
        if other is None:
            return NaN
        return _wrap(self._delegate - other)

    def multiplied_by(self, multiplicand: Num) -> Num:
        other = self._unwrap(multiplicand)
        if other is None:
            return NaN
        return _wrap(self._delegate * other)

    def divided_by(self, divisor: Num) -> Num:
        other = self._unwrap(divisor)
        if other is None or other == 0.0:
            return NaN
        return _wrap(self._delegate / other)

    def remainder(self, divisor: Num) -> Num:
        other = self._unwrap(divisor)
        if other is None or other == 0.0:
            return NaN
        return _wrap(math.fmod(self._delegate, other))

    def floor(self) -> Num:
        if math.isinf(self._delegate):
            return self
        return DoubleNum(math.floor(self._delegate))

    def ceil(self) -> Num:
        if math.isinf(self._delegate):
            return self
        return DoubleNum(math.ceil(self._delegate))

    def pow(self, exponent: "int | Num") -> Num:
        if isinstance(exponent, Num):
            power = self._unwrap(exponent)
            if power is None:
                return NaN
        else:
            power = exponent
        try:
            return _wrap(math.pow(self._delegate, power))
        except (ValueError, OverflowError, ZeroDivisionError):
            return NaN

    def sqrt(self, precision: int | None = None) -> Num:
        if self._delegate < 0:
            return NaN
        return DoubleNum(math.sqrt(self._delegate))

    def log(self) -> Num:
        if self._delegate <= 0:
            return NaN
        return DoubleNum(math.log(self._delegate))

    def abs(self) -> Num:
        return DoubleNum(abs(self._delegate))

    def negate(self) -> Num:
        return DoubleNum(-self._delegate)

    def min(self, other: Num) -> Num:
        value = self._unwrap(other)
        if value is None:
            return NaN
        return self if self._delegate <= value else other

    def max(self, other: Num) -> Num:
        value = self._unwrap(other)
        if value is None:
            return NaN
        return self if self._delegate >= value else other

    def is_zero(self) -> bool:
        return self._delegate == 0.0

    def is_positive(self) -> bool:
        return self._delegate > 0.0

    def is_positive_or_zero(self) -> bool:
        return self._delegate >= 0.0

    def is_negative(self) -> bool:
        return self._delegate < 0.0

    def is_negative_or_zero(self) -> bool:
        return self._delegate <= 0.0

    def is_nan(self) -> bool:
        return False

    def is_equal(self, other: Num) -> bool:
        value = self._unwrap(other)
        return value is not None and self._delegate == value

    def is_greater_than(self, other: Num) -> bool:
        value = self._unwrap(other)
        return value is not None and self._delegate > value

    def is_greater_than_or_equal(self, other: Num) -> bool:
        value = self._unwrap(other)
        return value is not None and self._delegate >= value

    def is_less_than(self, other: Num) -> bool:
        value = self._unwrap(other)
        return value is not None and self._delegate < value

    def is_less_than_or_equal(self, other: Num) -> bool:
        value = self._unwrap(other)
        return value is not None and self._delegate <= value

    def int_value(self) -> int:
        if math.isinf(self._delegate):
            raise UnrepresentableValueError(f"No integral representation for {self._delegate}")
        return int(self._delegate)

    def float_value(self) -> float:
        return self._delegate

    def decimal_value(self) -> Decimal:
        return Decimal(repr(self._delegate))

    @property
    def delegate(self) -> float:
        return self._delegate

    @property
    def num_factory(self) -> NumFactory:
        return DoubleNumFactory.get_instance()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DoubleNum) and self._delegate == other._delegate

    def __hash__(self) -> int:
        return hash(self._delegate)

    def __str__(self) -> str:
        return repr(self._delegate)

    def __repr__(self) -> str:
        return f"DoubleNum({self._delegate!r})"


class DoubleNumFactory(NumFactory):
    """Factory for the float backend."""

    _instance: "DoubleNumFactory | None" = None

    @classmethod
    def get_instance(cls) -> "DoubleNumFactory":
        """Shared default instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def num_of(self, value: "int | float | Decimal | str | Num") -> Num:
        if isinstance(value, Num):
            if value.is_nan() or self.produces(value):
                return value
            return _wrap(value.float_value())
        if isinstance(value, str):
            try:
                return _wrap(float(value.strip()))
            except ValueError:
                raise ValueError(f"Cannot convert {value!r} to a number") from None
        return _wrap(float(value))

    def produces(self, num: Num) -> bool:
        return isinstance(num, DoubleNum)

    def __repr__(self) -> str:
        return "DoubleNumFactory()"
