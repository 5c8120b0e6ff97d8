"""Exact rational numbers over unbounded integers."""
from __future__ import annotations

import logging
import math
import numbers
import operator
import re
from collections.abc import Mapping
from fractions import Fraction
from typing import Any, List, Optional, Protocol, Tuple, Union

try:  # NumPy is optional; its scalars are accepted like native numbers.
    import numpy as np  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - optional dependency may be absent.
    np = None  # type: ignore

from .errors import (
    DivisionByZero,
    InvalidInput,
    InvalidRootDegree,
    NegativeRadicand,
    RationalError,
)
from .integers import absolute, gcd, integer_nth_root

logger = logging.getLogger(__name__)


class RationalLike(Protocol):
    """Any object exposing integral ``numerator`` and ``denominator`` fields."""

    @property
    def numerator(self) -> Any: ...

    @property
    def denominator(self) -> Any: ...


ParsableValue = Union[
    "RationalNumber",
    numbers.Real,
    str,
    Tuple[Any, Any],
    List[Any],
    Mapping[str, Any],
    RationalLike,
]

# Digits emitted by the decimal renderers.
DEFAULT_PRECISION = 16
# Newton updates performed by ``root`` before it gives up on an exact fixed point.
DEFAULT_MAX_ITERATIONS = 16
# Largest power of ten a decimal exponent suffix may scale by.
MAX_DECIMAL_EXPONENT = 100_000

# Decimal strings are converted digit by digit, never through a float.
# Both the integer and the fractional part may be empty and then count as 0.
_DECIMAL_PATTERN = re.compile(
    r"""
    \s*
    (?P<sign>[-+])?
    (?P<decimal>[0-9]*)
    (?:\.(?P<fraction>[0-9]*))?
    (?:[eE](?P<exponent>[-+]?[0-9]+))?
    \s*\Z
    """,
    re.VERBOSE,
)
_INTEGER_PATTERN = re.compile(r"\s*[-+]?[0-9]+\s*\Z")


def _parse_decimal(text: str) -> Tuple[int, int]:
    match = _DECIMAL_PATTERN.match(text)
    if match is None:
        raise InvalidInput(f"Cannot parse {text!r} as a decimal number")

    fraction = match.group("fraction") or ""
    denominator = 10 ** len(fraction)
    numerator = int(match.group("decimal") or "0") * denominator + int(fraction or "0")

    exponent = int(match.group("exponent") or "0")
    if abs(exponent) > MAX_DECIMAL_EXPONENT:
        raise InvalidInput(
            f"decimal exponent {exponent} exceeds the supported range of "
            f"+/-{MAX_DECIMAL_EXPONENT}"
        )
    if exponent > 0:
        numerator *= 10 ** exponent
    elif exponent < 0:
        denominator *= 10 ** -exponent

    if match.group("sign") == "-":
        numerator = -numerator
    return numerator, denominator


def _coerce_component(value: Any, *, name: str) -> int:
    """Convert one half of a pair to ``int`` when it represents an integer."""
    if np is not None and isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER_PATTERN.match(value):
        return int(value)
    raise InvalidInput(f"{name} must be an integer, got {value!r}")


def parse_value(value: ParsableValue) -> Tuple[int, int]:
    """Return the raw ``(numerator, denominator)`` pair described by *value*.

    The pair is neither reduced nor sign-normalized; that happens once in
    :func:`normalize_value`.
    """
    if isinstance(value, RationalNumber):
        return value._numerator, value._denominator
    if np is not None and isinstance(value, np.generic):
        return parse_value(value.item())
    if isinstance(value, numbers.Integral):
        return int(value), 1
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise InvalidInput("cannot convert NaN or infinity to RationalNumber")
        if value.is_integer():
            return int(value), 1
        return _parse_decimal(repr(value))
    if isinstance(value, str):
        return _parse_decimal(value)
    if isinstance(value, (tuple, list)):
        if len(value) != 2:
            raise InvalidInput(
                f"expected a (numerator, denominator) pair, got {len(value)} items"
            )
        return (
            _coerce_component(value[0], name="numerator"),
            _coerce_component(value[1], name="denominator"),
        )
    if isinstance(value, Mapping):
        if "numerator" not in value or "denominator" not in value:
            raise InvalidInput("mapping must provide 'numerator' and 'denominator' keys")
        return (
            _coerce_component(value["numerator"], name="numerator"),
            _coerce_component(value["denominator"], name="denominator"),
        )
    if hasattr(value, "numerator") and hasattr(value, "denominator"):
        return (
            _coerce_component(value.numerator, name="numerator"),
            _coerce_component(value.denominator, name="denominator"),
        )
    raise InvalidInput(f"Cannot interpret {type(value)!r} as RationalNumber")


def normalize_value(numerator: int, denominator: int) -> Tuple[int, int]:
    """Reduce a raw pair to lowest terms with a positive denominator."""
    if denominator == 0:
        raise DivisionByZero("denominator must be non-zero")
    if denominator < 0:
        numerator, denominator = -numerator, -denominator
    divisor = gcd(numerator, denominator)
    return numerator // divisor, denominator // divisor


def _truncating_division(numerator: int, denominator: int) -> int:
    quotient = absolute(numerator) // denominator
    return -quotient if numerator < 0 else quotient


def _stringify(numerator: int, denominator: int, precision: int, *, pad: bool) -> str:
    if precision < 0:
        raise ValueError(f"precision must be >= 0, got {precision}")

    negative = numerator < 0
    numerator = absolute(numerator)
    decimal = numerator // denominator

    digits = []
    remainder = (numerator % denominator) * 10
    while remainder != 0 and len(digits) < precision:
        digits.append(str(remainder // denominator))
        remainder = (remainder % denominator) * 10

    fraction = "".join(digits)
    if pad:
        fraction = fraction.ljust(precision, "0")

    sign = "-" if negative else ""
    if fraction:
        return f"{sign}{decimal}.{fraction}"
    return f"{sign}{decimal}"


class RationalNumber:
    """Exact fraction kept in lowest terms with a positive denominator.

    Instances are immutable. Every operation accepts any parsable value on
    the right-hand side (integers, integral or decimal-exact floats, decimal
    strings, ``(numerator, denominator)`` pairs, objects or mappings exposing
    ``numerator`` and ``denominator``, NumPy scalars and other instances)
    and returns a new canonical instance.
    """

    __slots__ = ("_numerator", "_denominator")

    def __init__(
        self,
        value: ParsableValue = 0,
        denominator: Optional[ParsableValue] = None,
    ) -> None:
        if denominator is None:
            num, den = parse_value(value)
        else:
            num, den = parse_value((value, denominator))
        self._numerator, self._denominator = normalize_value(num, den)

    @classmethod
    def _create(cls, numerator: int, denominator: int) -> "RationalNumber":
        instance = cls.__new__(cls)
        instance._numerator, instance._denominator = normalize_value(numerator, denominator)
        return instance

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def from_json(cls, text: str) -> "RationalNumber":
        """Parse the ``"numerator/denominator"`` form produced by :meth:`to_json`."""
        if not isinstance(text, str):
            raise InvalidInput(f"expected a string, got {type(text)!r}")
        parts = text.split("/")
        if len(parts) != 2:
            raise InvalidInput(f"expected 'numerator/denominator', got {text!r}")
        numerator, denominator = parts
        return cls({"numerator": numerator, "denominator": denominator})

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    def as_fraction(self) -> Fraction:
        """Return a :class:`Fraction` with the same value."""
        return Fraction(self._numerator, self._denominator)

    def limit_denominator(self, max_denominator: int) -> "RationalNumber":
        """Return the closest value whose denominator is at most *max_denominator*."""
        fraction = self.as_fraction().limit_denominator(max_denominator)
        return RationalNumber._create(fraction.numerator, fraction.denominator)

    @staticmethod
    def _coerce(value: Any) -> "RationalNumber":
        if isinstance(value, RationalNumber):
            return value
        return RationalNumber(value)

    # ------------------------------------------------------------------
    # Arithmetic
    def add(self, value: ParsableValue) -> "RationalNumber":
        other = self._coerce(value)
        if other._numerator == 0:
            return self
        return RationalNumber._create(
            self._numerator * other._denominator + other._numerator * self._denominator,
            self._denominator * other._denominator,
        )

    def subtract(self, value: ParsableValue) -> "RationalNumber":
        return self.add(self._coerce(value).negate())

    def negate(self) -> "RationalNumber":
        return RationalNumber._create(-self._numerator, self._denominator)

    def multiply(self, value: ParsableValue) -> "RationalNumber":
        other = self._coerce(value)
        return RationalNumber._create(
            self._numerator * other._numerator,
            self._denominator * other._denominator,
        )

    def divide(self, value: ParsableValue) -> "RationalNumber":
        other = self._coerce(value)
        if other._numerator == 0:
            raise DivisionByZero("division by zero")
        return self.multiply(other.inverse())

    def inverse(self) -> "RationalNumber":
        if self._numerator == 0:
            raise DivisionByZero("zero has no multiplicative inverse")
        if self._numerator == self._denominator:
            return self
        return RationalNumber._create(self._denominator, self._numerator)

    def absolute(self) -> "RationalNumber":
        if self._numerator < 0:
            return self.negate()
        return self

    def truncate(self) -> "RationalNumber":
        """Drop the fractional part, rounding toward zero."""
        return RationalNumber._create(
            _truncating_division(self._numerator, self._denominator), 1
        )

    def mod(self, value: ParsableValue) -> "RationalNumber":
        """Remainder of truncating division; the sign follows ``self``."""
        modulus = self._coerce(value)
        return self.subtract(modulus.multiply(self.divide(modulus).truncate()))

    def compare(self, value: ParsableValue) -> int:
        """Return -1, 0 or 1 as ``self`` is less than, equal to or greater than *value*.

        Finite floats are compared by their exact binary value, like the
        comparison operators.
        """
        float_value = self._float_operand(value)
        if float_value is not None and math.isfinite(float_value):
            other = RationalNumber._create(*float_value.as_integer_ratio())
        else:
            other = self._coerce(value)
        lhs = self._numerator * other._denominator
        rhs = other._numerator * self._denominator
        return (lhs > rhs) - (lhs < rhs)

    # ------------------------------------------------------------------
    # Powers and roots
    def power(
        self,
        exponent: ParsableValue,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        max_denominator: Optional[int] = None,
    ) -> "RationalNumber":
        """Raise to a rational *exponent*.

        A fractional exponent ``p/q`` raises to ``p`` exactly and then takes
        the ``q``-th root with :meth:`root`, forwarding *max_iterations* and
        *max_denominator*.
        """
        exp = self._coerce(exponent)
        p, q = exp._numerator, exp._denominator
        if p == 0:
            return RationalNumber(1)
        if p == q:
            return self
        if p < 0:
            return self.inverse().power(
                RationalNumber._create(-p, q), max_iterations, max_denominator
            )

        result = RationalNumber._create(self._numerator ** p, self._denominator ** p)
        if q != 1:
            result = result.root(q, max_iterations, max_denominator)
        return result

    def root(
        self,
        degree: ParsableValue,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        max_denominator: Optional[int] = None,
    ) -> "RationalNumber":
        """Return the *degree*-th root.

        Exact roots of perfect powers are found directly from the integer
        roots of numerator and denominator. Anything else runs Newton's
        iteration on exact rationals, seeded at 1, until two consecutive
        iterates are equal or *max_iterations* updates have been made. When
        *max_denominator* is given each iterate is replaced by its closest
        approximation with a bounded denominator, which keeps the operands
        small for roots that have no rational value.
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if max_denominator is not None and max_denominator < 1:
            raise ValueError("max_denominator must be >= 1")
        if self._numerator < 0:
            raise NegativeRadicand(f"cannot take a root of negative value {self!r}")
        if self._numerator == 0 or self._numerator == self._denominator:
            return self

        degree_value = self._coerce(degree)
        p, q = degree_value._numerator, degree_value._denominator
        if p < 0:
            return self.inverse().root(
                RationalNumber._create(-p, q), max_iterations, max_denominator
            )
        if p == 0:
            raise InvalidRootDegree("root degree must be non-zero")
        if p == q:
            return self
        if q != 1:
            # The p/q-th root is the q/p-th power: raise to q, then take the p-th root.
            return self.power(RationalNumber._create(q, p), max_iterations, max_denominator)

        numerator_root = integer_nth_root(self._numerator, p)
        denominator_root = integer_nth_root(self._denominator, p)
        if numerator_root ** p == self._numerator and denominator_root ** p == self._denominator:
            return RationalNumber._create(numerator_root, denominator_root)

        return self._newton_root(degree_value, max_iterations, max_denominator)

    def _newton_root(
        self,
        degree: "RationalNumber",
        max_iterations: int,
        max_denominator: Optional[int],
    ) -> "RationalNumber":
        multiplier = degree.inverse()
        degree_minus_one = degree.subtract(1)

        current = RationalNumber(1)
        converged = False
        iteration = 0
        while iteration < max_iterations:
            iteration += 1
            previous = current
            current = multiplier.multiply(
                previous.multiply(degree_minus_one).add(
                    self.divide(previous.power(degree_minus_one))
                )
            )
            if max_denominator is not None:
                current = current.limit_denominator(max_denominator)
            if current == previous:
                converged = True
                break

        logger.debug(
            "root of degree %s %s after %d iterations",
            degree,
            "converged" if converged else "stopped at the iteration limit",
            iteration,
        )
        return current

    # ------------------------------------------------------------------
    # Rendering and serialization
    def to_string(self, precision: int = DEFAULT_PRECISION) -> str:
        """Decimal expansion truncated to at most *precision* fraction digits."""
        return _stringify(self._numerator, self._denominator, precision, pad=False)

    def to_fixed(self, precision: int = DEFAULT_PRECISION) -> str:
        """Decimal expansion with exactly *precision* fraction digits."""
        return _stringify(self._numerator, self._denominator, precision, pad=True)

    def to_json(self) -> str:
        return f"{self._numerator}/{self._denominator}"

    # ------------------------------------------------------------------
    # Numeric protocol
    def __float__(self) -> float:
        return float(self.to_string(DEFAULT_PRECISION))

    def __int__(self) -> int:
        return _truncating_division(self._numerator, self._denominator)

    def __trunc__(self) -> int:
        return self.__int__()

    def __bool__(self) -> bool:
        return self._numerator != 0

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        return f"RationalNumber({self._numerator}, {self._denominator})"

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, format_spec: str) -> str:
        if format_spec == "":
            return str(self)
        if format_spec in ("r", "R"):
            return self.to_json()
        return format(float(self), format_spec)

    # ------------------------------------------------------------------
    # Operators
    def _binary_operation(self, other: Any, op):
        try:
            other_rat = self._coerce(other)
        except InvalidInput:
            return NotImplemented
        return op(self, other_rat)

    def _reflected_operation(self, other: Any, op):
        try:
            other_rat = self._coerce(other)
        except InvalidInput:
            return NotImplemented
        return op(other_rat, self)

    def __add__(self, other: Any) -> Any:
        return self._binary_operation(other, RationalNumber.add)

    def __radd__(self, other: Any) -> Any:
        return self._reflected_operation(other, RationalNumber.add)

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, RationalNumber.subtract)

    def __rsub__(self, other: Any) -> Any:
        return self._reflected_operation(other, RationalNumber.subtract)

    def __mul__(self, other: Any) -> Any:
        return self._binary_operation(other, RationalNumber.multiply)

    def __rmul__(self, other: Any) -> Any:
        return self._reflected_operation(other, RationalNumber.multiply)

    def __truediv__(self, other: Any) -> Any:
        return self._binary_operation(other, RationalNumber.divide)

    def __rtruediv__(self, other: Any) -> Any:
        return self._reflected_operation(other, RationalNumber.divide)

    def __mod__(self, other: Any) -> Any:
        return self._binary_operation(other, RationalNumber.mod)

    def __rmod__(self, other: Any) -> Any:
        return self._reflected_operation(other, RationalNumber.mod)

    def __pow__(self, exponent: Any) -> Any:
        return self._binary_operation(exponent, RationalNumber.power)

    def __rpow__(self, base: Any) -> Any:
        return self._reflected_operation(base, RationalNumber.power)

    def __neg__(self) -> "RationalNumber":
        return self.negate()

    def __pos__(self) -> "RationalNumber":
        return self

    def __abs__(self) -> "RationalNumber":
        return self.absolute()

    # ------------------------------------------------------------------
    # Comparisons
    @staticmethod
    def _float_operand(other: Any) -> Optional[float]:
        if np is not None and isinstance(other, np.floating):
            return other.item()
        if isinstance(other, float):
            return other
        return None

    def _compare(self, other: Any, op) -> bool:
        # Floats compare by their exact binary value, as Fraction does.
        float_value = self._float_operand(other)
        if float_value is not None:
            return op(self.as_fraction(), float_value)
        try:
            other_rat = self._coerce(other)
        except InvalidInput:
            return NotImplemented
        return op(
            self._numerator * other_rat._denominator,
            other_rat._numerator * self._denominator,
        )

    def __eq__(self, other: Any) -> bool:
        float_value = self._float_operand(other)
        if float_value is not None:
            return self.as_fraction() == float_value
        try:
            other_rat = self._coerce(other)
        except RationalError:
            return False
        return (
            self._numerator == other_rat._numerator
            and self._denominator == other_rat._denominator
        )

    def __lt__(self, other: Any) -> bool:
        return self._compare(other, operator.lt)

    def __le__(self, other: Any) -> bool:
        return self._compare(other, operator.le)

    def __gt__(self, other: Any) -> bool:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Any) -> bool:
        return self._compare(other, operator.ge)

    def __hash__(self) -> int:
        # Equal ints, floats and Fractions hash the same, since floats compare exactly.
        return hash(self.as_fraction())


def rationalize(value: ParsableValue) -> RationalNumber:
    """Public helper to convert *value* into :class:`RationalNumber`."""

    return RationalNumber._coerce(value)


def json_default(obj: Any) -> str:
    """``default`` hook for :func:`json.dumps` that encodes rational numbers."""
    if isinstance(obj, RationalNumber):
        return obj.to_json()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


__all__ = [
    "RationalNumber",
    "ParsableValue",
    "RationalLike",
    "MAX_DECIMAL_EXPONENT",
    "parse_value",
    "normalize_value",
    "rationalize",
    "json_default",
    "DEFAULT_PRECISION",
    "DEFAULT_MAX_ITERATIONS",
]
