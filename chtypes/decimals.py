"""Fixed-point decimal values as stored in Decimal columns."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction

MAX_PRECISION = 18


class NoBits(Enum):
    """Storage width of a decimal."""

    N32 = 32
    N64 = 64

    @classmethod
    def from_precision(cls, precision: int) -> NoBits | None:
        """The narrowest width that holds ``precision`` digits, or None if none does."""
        if precision <= 9:
            return cls.N32
        if precision <= MAX_PRECISION:
            return cls.N64
        return None


def _check_scale(scale: int) -> None:
    if scale < 0:
        raise ValueError("scale can't be negative")
    if scale > MAX_PRECISION:
        raise ValueError(f"scale can't be greater than {MAX_PRECISION}")


def _truncating_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


@dataclass(frozen=True, eq=False, repr=False)
class Decimal:
    """A decimal number held as an integer and a count of fraction digits."""

    underlying: int
    scale: int
    precision: int = MAX_PRECISION
    nobits: NoBits = NoBits.N64

    def __post_init__(self) -> None:
        _check_scale(self.scale)

    @classmethod
    def of(cls, source: int | float, scale: int) -> Decimal:
        """Build a decimal from a number, keeping ``scale`` fraction digits."""
        _check_scale(scale)
        if isinstance(source, bool) or not isinstance(source, (int, float)):
            raise TypeError(f"can't build a decimal from {type(source).__name__}")
        factor = 10**scale
        if isinstance(source, float):
            scaled = source * factor
            if not math.isfinite(scaled):
                raise ValueError(f"can't build a decimal from {source!r}")
            underlying = int(scaled)
        else:
            underlying = source * factor
        limit = 10**MAX_PRECISION
        if underlying > limit:
            raise ValueError(f"{underlying} > {limit}")
        return cls(underlying, scale)

    def internal(self) -> int:
        """The integer representation of the decimal."""
        return self.underlying

    def set_scale(self, scale: int) -> Decimal:
        """The same number with ``scale`` fraction digits, truncating if fewer."""
        _check_scale(scale)
        if scale == self.scale:
            return self
        if scale < self.scale:
            underlying = _truncating_div(self.underlying, 10 ** (self.scale - scale))
        else:
            underlying = self.underlying * 10 ** (scale - self.scale)
        return Decimal(underlying, scale, self.precision, self.nobits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Decimal):
            return NotImplemented
        if self.scale < other.scale:
            return other.underlying == self.underlying * 10 ** (other.scale - self.scale)
        if self.scale > other.scale:
            return self.underlying == other.underlying * 10 ** (self.scale - other.scale)
        return self.underlying == other.underlying

    def __hash__(self) -> int:
        return hash(Fraction(self.underlying, 10**self.scale))

    def __float__(self) -> float:
        return self.underlying / 10**self.scale

    def __str__(self) -> str:
        text = str(self.underlying)
        if len(text) < self.scale:
            text = text.rjust(self.scale, "0")
        pos = len(text) - self.scale
        text = f"{text[:pos]}.{text[pos:]}"
        if text.startswith("."):
            text = "0" + text
        return text

    def __repr__(self) -> str:
        return str(self)