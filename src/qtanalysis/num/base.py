"""
Num - Numeric Value Abstraction.

Every price, volume and indicator value in qtanalysis is a Num. A Num hides
the numeric backend (machine float or arbitrary-precision decimal) behind one
algebraic interface so indicator formulas are written once and run on either.

Philosophy:
- Num values are immutable; every operation returns a new Num
- Operations keep the receiver's backend (DoubleNum stays DoubleNum)
- Arithmetic is total: undefined results become NaN, they never raise
- Mixing two backends in one expression is a programming error and raises

NaN:
    ``NaN`` is a single shared sentinel meaning "undefined value". Any
    arithmetic touching it returns NaN, every relational predicate on it is
    False, and ``NaN.is_equal(NaN)`` is True (unlike IEEE NaN).

Usage:
    >>> from qtanalysis.num import DecimalNumFactory
    >>> factory = DecimalNumFactory.get_instance()
    >>> price = factory.num_of("1.10")
    >>> (price * factory.two).is_greater_than(factory.two)
    True
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from functools import cached_property
from typing import Any


class UnrepresentableValueError(ArithmeticError):
    """Value has no integral projection (NaN converted to int)."""

    pass


class MixedPrecisionError(TypeError):
    """Num values from two different backends were combined."""

    pass


class Num(ABC):
    """
    Abstract numeric value.

    Concrete backends implement the operations; this base class maps the
    Python operators onto them. Operators accept Num operands only, so raw
    numbers must go through a NumFactory first.
    """

    __slots__ = ()

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    @abstractmethod
    def plus(self, augend: "Num") -> "Num":
        pass

    @abstractmethod
    def minus(self, subtrahend: "Num") -> "Num":
        pass

    @abstractmethod
    def multiplied_by(self, multiplicand: "Num") -> "Num":
        pass

    @abstractmethod
    def divided_by(self, divisor: "Num") -> "Num":
        """Quotient of this value and divisor; NaN when divisor is zero."""
        pass

    @abstractmethod
    def remainder(self, divisor: "Num") -> "Num":
        """Truncated remainder (sign of the dividend); NaN when divisor is zero."""
        pass

    @abstractmethod
    def floor(self) -> "Num":
        pass

    @abstractmethod
    def ceil(self) -> "Num":
        pass

    @abstractmethod
    def pow(self, exponent: "int | Num") -> "Num":
        """
        Raise this value to a power.

        Args:
            exponent: Integer (exact power) or Num (may be non-integral)

        Returns:
            Power in the receiver's backend, NaN when the result is not real
        """
        pass

    @abstractmethod
    def sqrt(self, precision: int | None = None) -> "Num":
        """
        Square root.

        Args:
            precision: Significant digits for the decimal backend. The float
                       backend ignores it and uses native precision.

        Returns:
            Square root, NaN for negative values
        """
        pass

    @abstractmethod
    def log(self) -> "Num":
        """Natural logarithm; NaN for values <= 0."""
        pass

    @abstractmethod
    def abs(self) -> "Num":
        pass

    @abstractmethod
    def negate(self) -> "Num":
        pass

    @abstractmethod
    def min(self, other: "Num") -> "Num":
        pass

    @abstractmethod
    def max(self, other: "Num") -> "Num":
        pass

    # ------------------------------------------------------------------
    # Predicates and relations
    # ------------------------------------------------------------------

    @abstractmethod
    def is_zero(self) -> bool:
        pass

    @abstractmethod
    def is_positive(self) -> bool:
        pass

    @abstractmethod
    def is_positive_or_zero(self) -> bool:
        pass

    @abstractmethod
    def is_negative(self) -> bool:
        pass

    @abstractmethod
    def is_negative_or_zero(self) -> bool:
        pass

    @abstractmethod
    def is_nan(self) -> bool:
        pass

    @abstractmethod
    def is_equal(self, other: "Num") -> bool:
        pass

    @abstractmethod
    def is_greater_than(self, other: "Num") -> bool:
        pass

    @abstractmethod
    def is_greater_than_or_equal(self, other: "Num") -> bool:
        pass

    @abstractmethod
    def is_less_than(self, other: "Num") -> bool:
        pass

    @abstractmethod
    def is_less_than_or_equal(self, other: "Num") -> bool:
        pass

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    @abstractmethod
    def int_value(self) -> int:
        """Truncated integral value. Raises UnrepresentableValueError for NaN."""
        pass

    @abstractmethod
    def float_value(self) -> float:
        pass

    @abstractmethod
    def decimal_value(self) -> Decimal:
        pass

    @property
    @abstractmethod
    def delegate(self) -> Any:
        """Raw backing value (float, Decimal, or None for NaN)."""
        pass

    @property
    @abstractmethod
    def num_factory(self) -> "NumFactory":
        """Factory producing values of this backend."""
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def _unwrap(self, other: "Num") -> Any:
        """
        Backing value of a same-backend operand.

        Returns None when other is NaN so callers can short-circuit.

        Raises:
            MixedPrecisionError: If other belongs to a different backend (or decimal precision)
        """
        if other is NaN:
            return None
        if not self.num_factory.produces(other):
            raise MixedPrecisionError(
                f"Cannot combine {self!r} from {self.num_factory!r} with {other!r} from {other.num_factory!r}"
            )
        return other.delegate

    # ------------------------------------------------------------------
    # Python operators
    # ------------------------------------------------------------------

    def __add__(self, other: object) -> "Num":
        if not isinstance(other, Num):
            return NotImplemented
        return self.plus(other)

    def __sub__(self, other: object) -> "Num":
        if not isinstance(other, Num):
            return NotImplemented
        return self.minus(other)

    def __mul__(self, other: object) -> "Num":
        if not isinstance(other, Num):
            return NotImplemented
        return self.multiplied_by(other)

    def __truediv__(self, other: object) -> "Num":
        if not isinstance(other, Num):
            return NotImplemented
        return self.divided_by(other)

    def __mod__(self, other: object) -> "Num":
        if not isinstance(other, Num):
            return NotImplemented
        return self.remainder(other)

    def __pow__(self, other: object) -> "Num":
        if isinstance(other, bool) or not isinstance(other, (int, Num)):
            return NotImplemented
        return self.pow(other)

    def __neg__(self) -> "Num":
        return self.negate()

    def __abs__(self) -> "Num":
        return self.abs()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Num):
            return NotImplemented
        return self.is_less_than(other)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Num):
            return NotImplemented
        return self.is_less_than_or_equal(other)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Num):
            return NotImplemented
        return self.is_greater_than(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Num):
            return NotImplemented
        return self.is_greater_than_or_equal(other)

    def __float__(self) -> float:
        return self.float_value()

    def __int__(self) -> int:
        return self.int_value()


class NumFactory(ABC):
    """
    Factory manufacturing Num values of one backend.

    Every Num used with one BarSeries must come from the series' factory so
    backends never mix inside a computation.
    """

    @abstractmethod
    def num_of(self, value: "int | float | Decimal | str | Num") -> Num:
        """
        Convert a raw number into this factory's backend.

        Args:
            value: int, float, Decimal, decimal string literal, or a Num of
                   any backend (explicit conversion)

        Returns:
            Num of this backend (NaN for NaN input)

        Raises:
            ValueError: If a string cannot be parsed as a number
        """
        pass

    @abstractmethod
    def produces(self, num: Num) -> bool:
        """True if num belongs to this factory's backend."""
        pass

    @cached_property
    def minus_one(self) -> Num:
        return self.num_of(-1)

    @cached_property
    def zero(self) -> Num:
        return self.num_of(0)

    @cached_property
    def one(self) -> Num:
        return self.num_of(1)

    @cached_property
    def two(self) -> Num:
        return self.num_of(2)

    @cached_property
    def three(self) -> Num:
        return self.num_of(3)

    @cached_property
    def hundred(self) -> Num:
        return self.num_of(100)

    @cached_property
    def thousand(self) -> Num:
        return self.num_of(1000)


class NotANumber(Num):
    """
    The undefined value.

    There is exactly one instance, exported as ``NaN``. It absorbs every
    arithmetic operation and is only equal to itself.
    """

    _instance: "NotANumber | None" = None

    def __new__(cls) -> "NotANumber":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __reduce__(self) -> tuple[Any, ...]:
        return (NotANumber, ())

    def plus(self, augend: Num) -> Num:
        return self

    def minus(self, subtrahend: Num) -> Num:
        return self

    def multiplied_by(self, multiplicand: Num) -> Num:
        return self

    def divided_by(self, divisor: Num) -> Num:
        return self

    def remainder(self, divisor: Num) -> Num:
        return self

    def floor(self) -> Num:
        return self

    def ceil(self) -> Num:
        return self

    def pow(self, exponent: "int | Num") -> Num:
        return self

    def sqrt(self, precision: int | None = None) -> Num:
        return self

    def log(self) -> Num:
        return self

    def abs(self) -> Num:
        return self

    def negate(self) -> Num:
        return self

    def min(self, other: Num) -> Num:
        return self

    def max(self, other: Num) -> Num:
        return self

    def is_zero(self) -> bool:
        return False

    def is_positive(self) -> bool:
        return False

    def is_positive_or_zero(self) -> bool:
        return False

    def is_negative(self) -> bool:
        return False

    def is_negative_or_zero(self) -> bool:
        return False

    def is_nan(self) -> bool:
        return True

    def is_equal(self, other: Num) -> bool:
        # Equal only to itself, not IEEE semantics
        return other is self

    def is_greater_than(self, other: Num) -> bool:
        return False

    def is_greater_than_or_equal(self, other: Num) -> bool:
        return False

    def is_less_than(self, other: Num) -> bool:
        return False

    def is_less_than_or_equal(self, other: Num) -> bool:
        return False

    def int_value(self) -> int:
        raise UnrepresentableValueError("No integral representation for NaN")

    def float_value(self) -> float:
        return float("nan")

    def decimal_value(self) -> Decimal:
        return Decimal("NaN")

    @property
    def delegate(self) -> None:
        return None

    @property
    def num_factory(self) -> NumFactory:
        return _NaNFactory()

    def __eq__(self, other: object) -> bool:
        return other is self

    def __hash__(self) -> int:
        return hash("NaN")

    def __str__(self) -> str:
        return "NaN"

    def __repr__(self) -> str:
        return "NaN"


class _NaNFactory(NumFactory):
    """Factory of the NaN backend: every constant and conversion is NaN."""

    def num_of(self, value: "int | float | Decimal | str | Num") -> Num:
        return NaN

    def produces(self, num: Num) -> bool:
        return num is NaN


NaN: Num = NotANumber()
