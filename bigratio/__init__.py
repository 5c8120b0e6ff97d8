"""Arbitrary-precision rational number arithmetic."""

from .errors import (
    DivisionByZero,
    InvalidInput,
    InvalidRootDegree,
    NegativeRadicand,
    RationalError,
)
from .integers import absolute, gcd, integer_nth_root, lcm
from .rational import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_PRECISION,
    RationalNumber,
    json_default,
    normalize_value,
    parse_value,
    rationalize,
)

__all__ = [
    "RationalNumber",
    "rationalize",
    "parse_value",
    "normalize_value",
    "json_default",
    "DEFAULT_PRECISION",
    "DEFAULT_MAX_ITERATIONS",
    "absolute",
    "gcd",
    "lcm",
    "integer_nth_root",
    "RationalError",
    "DivisionByZero",
    "InvalidRootDegree",
    "NegativeRadicand",
    "InvalidInput",
]
