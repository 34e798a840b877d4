"""
Arbitrary-precision Num backend.

DecimalNum wraps a ``decimal.Decimal``. Every operation runs in the
``decimal.Context`` of the producing factory, rounding results to the
configured number of significant digits (32 by default) with ROUND_HALF_UP.

Decimal string literals are taken exactly (up to the precision), which makes
this backend the one to use for exact test fixtures:

    >>> factory = DecimalNumFactory.get_instance()
    >>> factory.num_of("1.1").divided_by(factory.num_of("1.2"))
    DecimalNum('0.91666666666666666666666666666667')
"""

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Context, Decimal, InvalidOperation

from qtanalysis.num.base import NaN, Num, NumFactory, UnrepresentableValueError

DEFAULT_PRECISION = 32

# Literal parsing still rejects malformed strings
_PARSE_CONTEXT = Context(traps=[InvalidOperation])


def _arithmetic_context(precision: int) -> Context:
    """Context whose undefined results (inf - inf, 0 * inf) come back as NaN and overflow as infinity."""
    return Context(prec=precision, rounding=ROUND_HALF_UP, traps=[])


class DecimalNum(Num):
    """Num backed by a Decimal rounded to its factory's precision."""

    __slots__ = ("_delegate", "_factory")

    def __init__(self, value: Decimal, factory: "DecimalNumFactory") -> None:
        self._delegate = value
        self._factory = factory

    @classmethod
    def value_of(cls, value: "int | float | Decimal | str | Num") -> Num:
        """Shortcut for ``DecimalNumFactory.get_instance().num_of(value)``."""
        return DecimalNumFactory.get_instance().num_of(value)

    @property
    def _context(self) -> Context:
        return self._factory.context

    def _wrap(self, value: Decimal) -> Num:
        if value.is_nan():
            return NaN
        return DecimalNum(value, self._factory)

    def plus(self, augend: Num) -> Num:
        other = self._unwrap(augend)
        if other is None:
            return NaN
        return self._wrap(self._context.add(self._delegate, other))

    def minus(self, subtrahend: Num) -> Num:
        other = self._unwrap(subtrahend)
        if other is None:
            return NaN
        return self._wrap(self._context.subtract(self._delegate, other))

    def multiplied_by(self, multiplicand: Num) -> Num:
        other = self._unwrap(multiplicand)
        if other is None:
            return NaN
        return self._wrap(self._context.multiply(self._delegate, other))

    def divided_by(self, divisor: Num) -> Num:
        other = self._unwrap(divisor)
        if other is None or other.is_zero():
            return NaN
        return self._wrap(self._context.divide(self._delegate, other))

    def remainder(self, divisor: Num) -> Num:
        other = self._unwrap(divisor)
        if other is None or other.is_zero():
            return NaN
        return self._wrap(self._context.remainder(self._delegate, other))

    def floor(self) -> Num:
        return self._wrap(self._delegate.to_integral_value(rounding=ROUND_FLOOR, context=self._context))

    def ceil(self) -> Num:
        return self._wrap(self._delegate.to_integral_value(rounding=ROUND_CEILING, context=self._context))

    def pow(self, exponent: "int | Num") -> Num:
        if isinstance(exponent, Num):
            power = self._unwrap(exponent)
            if power is None:
                return NaN
        else:
            power = Decimal(exponent)
        return self._wrap(self._context.power(self._delegate, power))

    def sqrt(self, precision: int | None = None) -> Num:
        if self._delegate.is_signed() and not self._delegate.is_zero():
            return NaN
        context = self._context if precision is None else _arithmetic_context(precision)
        return self._wrap(context.sqrt(self._delegate))

    def log(self) -> Num:
        if self._delegate <= 0:
            return NaN
        return self._wrap(self._context.ln(self._delegate))

    def abs(self) -> Num:
        return self._wrap(self._context.abs(self._delegate))

    def negate(self) -> Num:
        return self._wrap(self._context.minus(self._delegate))

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
        return self._delegate.is_zero()

    def is_positive(self) -> bool:
        return self._delegate > 0

    def is_positive_or_zero(self) -> bool:
        return self._delegate >= 0

    def is_negative(self) -> bool:
        return self._delegate < 0

    def is_negative_or_zero(self) -> bool:
        return self._delegate <= 0

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
        if self._delegate.is_infinite():
            raise UnrepresentableValueError(f"No integral representation for {self._delegate}")
        return int(self._delegate)

    def float_value(self) -> float:
        return float(self._delegate)

    def decimal_value(self) -> Decimal:
        return self._delegate

    @property
    def delegate(self) -> Decimal:
        return self._delegate

    @property
    def num_factory(self) -> NumFactory:
        return self._factory

    @property
    def precision(self) -> int:
        return self._factory.precision

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DecimalNum) and self._delegate == other._delegate

    def __hash__(self) -> int:
        return hash(self._delegate)

    def __str__(self) -> str:
        return str(self._delegate)

    def __repr__(self) -> str:
        return f"DecimalNum('{self._delegate}')"


class DecimalNumFactory(NumFactory):
    """
    Factory for the Decimal backend.

    Args:
        precision: Significant digits kept by every operation (default: 32)

    Raises:
        ValueError: If precision is less than 1
    """

    _instance: "DecimalNumFactory | None" = None

    def __init__(self, precision: int = DEFAULT_PRECISION) -> None:
        if precision < 1:
            raise ValueError(f"Precision must be >= 1, got {precision}")
        self.precision = precision
        self.context = _arithmetic_context(precision)

    @classmethod
    def get_instance(cls) -> "DecimalNumFactory":
        """Shared instance with the default precision."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def num_of(self, value: "int | float | Decimal | str | Num") -> Num:
        if isinstance(value, Num):
            if value.is_nan():
                return NaN
            value = value.decimal_value()
        elif isinstance(value, float):
            # Shortest repr, so 1.1 becomes Decimal("1.1") rather than its binary expansion
            value = repr(value)

        if isinstance(value, str):
            try:
                decimal = self.context.create_decimal(Decimal(value.strip(), _PARSE_CONTEXT))
            except InvalidOperation:
                raise ValueError(f"Cannot convert {value!r} to a number") from None
        else:
            decimal = self.context.create_decimal(value)

        if decimal.is_nan():
            return NaN
        return DecimalNum(decimal, self)

    def produces(self, num: Num) -> bool:
        """True for DecimalNums built with this factory's precision."""
        return isinstance(num, DecimalNum) and num.precision == self.precision

    def __repr__(self) -> str:
        return f"DecimalNumFactory(precision={self.precision})"
