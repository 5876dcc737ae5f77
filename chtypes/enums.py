"""Values of Enum8 and Enum16 columns."""

from __future__ import annotations

from dataclasses import dataclass


def _check_range(value: int, bits: int) -> int:
    value = int(value)
    low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    if not low <= value <= high:
        raise ValueError(f"enum value {value} out of range {low}..{high}")
    return value


@dataclass(frozen=True, repr=False)
class Enum8:
    """The numeric value of an Enum8 cell."""

    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _check_range(self.value, 8))

    @classmethod
    def of(cls, source: int) -> Enum8:
        return cls(source)

    def internal(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"Enum8({self.value})"

    def __repr__(self) -> str:
        return str(self)


@dataclass(frozen=True, repr=False)
class Enum16:
    """The numeric value of an Enum16 cell."""

    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _check_range(self.value, 16))

    @classmethod
    def of(cls, source: int) -> Enum16:
        return cls(source)

    def internal(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"Enum({self.value})"

    def __repr__(self) -> str:
        return str(self)