"""Exceptions raised by :mod:`bigratio`.

Each error also derives from the builtin exception a caller would expect for
the same failure, so ``except ZeroDivisionError`` keeps working.
"""
from __future__ import annotations


class RationalError(Exception):
    """Base class for every error raised by :mod:`bigratio`."""


class DivisionByZero(RationalError, ZeroDivisionError):
    """A zero denominator was constructed or a zero value was inverted."""


class InvalidRootDegree(RationalError, ValueError):
    """A root was requested with a degree whose numerator is zero."""


class NegativeRadicand(RationalError, ValueError):
    """A root was requested for a negative value."""


class InvalidInput(RationalError, TypeError):
    """A value could not be interpreted as a rational number."""


__all__ = [
    "RationalError",
    "DivisionByZero",
    "InvalidRootDegree",
    "NegativeRadicand",
    "InvalidInput",
]
