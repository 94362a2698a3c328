"""
dmtgeom/lengths.py - Millimetre length type v1.0

A distinguished scalar for physical lengths. Arithmetic with plain
numbers keeps the unit where one side is already a length and drops it
where the length cancels:

    Length + number  -> Length      number + Length  -> Length
    Length - number  -> Length      number - Length  -> Length
    Length * number  -> Length      number * Length  -> Length
    Length / number  -> Length      number / Length  -> float
    Length * Length  -> float       Length / Length  -> float

The division rule is asymmetric: scaling a length down is
still a length, while a number divided by a length is reduced to a
plain ratio rather than a reciprocal-length type.
"""

from __future__ import annotations
from typing import Any, Union
import numbers
import logging

logger = logging.getLogger("dmtgeom.lengths")

# Decimal places used by str()
DISPLAY_DECIMALS = 6


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, Length)


class Length:
    """Immutable length in millimetres."""

    __slots__ = ("_value",)

    # numpy scalars defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, value: Union["Length", numbers.Real] = 0.0):
        if isinstance(value, Length):
            value = value._value
        elif isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise TypeError(f"Length requires a real number, got {type(value).__name__}")
        object.__setattr__(self, "_value", float(value))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Length is immutable")

    @property
    def value(self) -> float:
        """Raw value in millimetres."""
        return self._value

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def __float__(self) -> float:
        return self._value

    def __int__(self) -> int:
        return int(self._value)

    def __bool__(self) -> bool:
        return self._value != 0.0

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Length({self._value!r})"

    def __str__(self) -> str:
        text = f"{self._value:.{DISPLAY_DECIMALS}f}".rstrip("0").rstrip(".")
        return "0" if text == "-0" else text

    def __format__(self, format_spec: str) -> str:
        if not format_spec:
            return str(self)
        return format(self._value, format_spec)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: Any) -> "Length":
        if isinstance(other, Length):
            return Length(self._value + other._value)
        if _is_number(other):
            return Length(self._value + other)
        return NotImplemented

    def __radd__(self, other: Any) -> "Length":
        if _is_number(other):
            return Length(other + self._value)
        return NotImplemented

    def __sub__(self, other: Any) -> "Length":
        if isinstance(other, Length):
            return Length(self._value - other._value)
        if _is_number(other):
            return Length(self._value - other)
        return NotImplemented

    def __rsub__(self, other: Any) -> "Length":
        if _is_number(other):
            return Length(other - self._value)
        return NotImplemented

    def __mul__(self, other: Any) -> Union["Length", float]:
        if isinstance(other, Length):
            return self._value * other._value
        if _is_number(other):
            return Length(self._value * other)
        return NotImplemented

    def __rmul__(self, other: Any) -> "Length":
        if _is_number(other):
            return Length(other * self._value)
        return NotImplemented

    def __truediv__(self, other: Any) -> Union["Length", float]:
        if isinstance(other, Length):
            return self._value / other._value
        if _is_number(other):
            return Length(self._value / other)
        return NotImplemented

    def __rtruediv__(self, other: Any) -> float:
        # number / Length collapses to a plain ratio
        if _is_number(other):
            return float(other) / self._value
        return NotImplemented

    def __neg__(self) -> "Length":
        return Length(-self._value)

    def __pos__(self) -> "Length":
        return self

    def __abs__(self) -> "Length":
        return Length(abs(self._value))

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    @staticmethod
    def _raw(other: Any):
        if isinstance(other, Length):
            return other._value
        if _is_number(other):
            return other
        return None

    def __eq__(self, other: Any) -> bool:
        raw = self._raw(other)
        if raw is None:
            return NotImplemented
        return self._value == raw

    def __ne__(self, other: Any) -> bool:
        raw = self._raw(other)
        if raw is None:
            return NotImplemented
        return self._value != raw

    def __lt__(self, other: Any) -> bool:
        raw = self._raw(other)
        if raw is None:
            return NotImplemented
        return self._value < raw

    def __le__(self, other: Any) -> bool:
        raw = self._raw(other)
        if raw is None:
            return NotImplemented
        return self._value <= raw

    def __gt__(self, other: Any) -> bool:
        raw = self._raw(other)
        if raw is None:
            return NotImplemented
        return self._value > raw

    def __ge__(self, other: Any) -> bool:
        raw = self._raw(other)
        if raw is None:
            return NotImplemented
        return self._value >= raw

    def equals(self, other: Any, decimal_places: int) -> bool:
        """
        Compare after rounding both sides to decimal_places.

        Returns False for values that are neither lengths nor numbers.
        """
        raw = self._raw(other)
        if raw is None:
            return False
        return round(self._value, decimal_places) == round(float(raw), decimal_places)


def mm(value: Union[Length, numbers.Real]) -> Length:
    """Shorthand constructor: mm(3) == Length(3)."""
    return Length(value)
