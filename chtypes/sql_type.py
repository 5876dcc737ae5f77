"""Column type descriptions used by the native protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class TypeCode(Enum):
    """The kind of a column type."""

    UINT8 = "UInt8"
    UINT16 = "UInt16"
    UINT32 = "UInt32"
    UINT64 = "UInt64"
    INT8 = "Int8"
    INT16 = "Int16"
    INT32 = "Int32"
    INT64 = "Int64"
    STRING = "String"
    FIXED_STRING = "FixedString"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"
    DATE = "Date"
    DATETIME = "DateTime"
    IPV4 = "IPv4"
    IPV6 = "IPv6"
    UUID = "UUID"
    NULLABLE = "Nullable"
    ARRAY = "Array"
    DECIMAL = "Decimal"
    ENUM8 = "Enum8"
    ENUM16 = "Enum16"
    SIMPLE_AGGREGATE_FUNCTION = "SimpleAggregateFunction"
    MAP = "Map"


_SIMPLE_CODES = frozenset(
    {
        TypeCode.UINT8,
        TypeCode.UINT16,
        TypeCode.UINT32,
        TypeCode.UINT64,
        TypeCode.INT8,
        TypeCode.INT16,
        TypeCode.INT32,
        TypeCode.INT64,
        TypeCode.STRING,
        TypeCode.FLOAT32,
        TypeCode.FLOAT64,
        TypeCode.DATE,
        TypeCode.IPV4,
        TypeCode.IPV6,
        TypeCode.UUID,
    }
)


class DateTimeKind(Enum):
    """Flavours of a DateTime column."""

    DATETIME32 = "DateTime32"
    DATETIME64 = "DateTime64"
    CHRONO = "Chrono"


@dataclass(frozen=True)
class DateTimeType:
    """A DateTime flavour; DateTime64 carries a precision and a time zone name."""

    kind: DateTimeKind
    precision: int = 0
    tz: str | None = None

    @classmethod
    def datetime32(cls) -> DateTimeType:
        return cls(DateTimeKind.DATETIME32)

    @classmethod
    def datetime64(cls, precision: int, tz: str) -> DateTimeType:
        if not 0 <= precision <= 9:
            raise ValueError(f"DateTime64 precision must be in 0..9, got {precision}")
        return cls(DateTimeKind.DATETIME64, precision, tz)

    @classmethod
    def chrono(cls) -> DateTimeType:
        return cls(DateTimeKind.CHRONO)


class SimpleAggFunc(Enum):
    """Functions allowed in a SimpleAggregateFunction column."""

    ANY = "any"
    ANY_LAST = "anyLast"
    MIN = "min"
    MAX = "max"
    SUM = "sum"
    SUM_WITH_OVERFLOW = "sumWithOverflow"
    GROUP_BIT_AND = "groupBitAnd"
    GROUP_BIT_OR = "groupBitOr"
    GROUP_BIT_XOR = "groupBitXor"
    GROUP_ARRAY_ARRAY = "groupArrayArray"
    GROUP_UNIQ_ARRAY_ARRAY = "groupUniqArrayArray"
    SUM_MAP = "sumMap"
    MIN_MAP = "minMap"
    MAX_MAP = "maxMap"
    ARG_MIN = "argMin"
    ARG_MAX = "argMax"

    def __str__(self) -> str:
        return self.value


def _enum_values(values: Iterable[tuple[str, int]], low: int, high: int) -> tuple[tuple[str, int], ...]:
    result = []
    for name, number in values:
        number = int(number)
        if not low <= number <= high:
            raise ValueError(f"enum value {number} out of range {low}..{high}")
        result.append((str(name), number))
    return tuple(result)


@dataclass(frozen=True)
class SqlType:
    """A column type. Build instances with the class methods."""

    code: TypeCode
    length: int = 0
    datetime_type: DateTimeType | None = None
    inner: SqlType | None = None
    key: SqlType | None = None
    precision: int = 0
    scale: int = 0
    values: tuple[tuple[str, int], ...] = ()
    func: SimpleAggFunc | None = None

    @classmethod
    def simple(cls, code: TypeCode) -> SqlType:
        if code not in _SIMPLE_CODES:
            raise ValueError(f"{code.value} is not a type without parameters")
        return cls(code)

    @classmethod
    def fixed_string(cls, length: int) -> SqlType:
        if length < 0:
            raise ValueError("FixedString length can't be negative")
        return cls(TypeCode.FIXED_STRING, length=length)

    @classmethod
    def datetime(cls, datetime_type: DateTimeType | None = None) -> SqlType:
        if datetime_type is None:
            datetime_type = DateTimeType.datetime32()
        return cls(TypeCode.DATETIME, datetime_type=datetime_type)

    @classmethod
    def nullable(cls, inner: SqlType) -> SqlType:
        return cls(TypeCode.NULLABLE, inner=inner)

    @classmethod
    def array(cls, inner: SqlType) -> SqlType:
        return cls(TypeCode.ARRAY, inner=inner)

    @classmethod
    def decimal(cls, precision: int, scale: int) -> SqlType:
        return cls(TypeCode.DECIMAL, precision=precision, scale=scale)

    @classmethod
    def enum8(cls, values: Iterable[tuple[str, int]]) -> SqlType:
        return cls(TypeCode.ENUM8, values=_enum_values(values, -(2**7), 2**7 - 1))

    @classmethod
    def enum16(cls, values: Iterable[tuple[str, int]]) -> SqlType:
        return cls(TypeCode.ENUM16, values=_enum_values(values, -(2**15), 2**15 - 1))

    @classmethod
    def simple_aggregate_function(cls, func: SimpleAggFunc, inner: SqlType) -> SqlType:
        return cls(TypeCode.SIMPLE_AGGREGATE_FUNCTION, func=func, inner=inner)

    @classmethod
    def map(cls, key: SqlType, value: SqlType) -> SqlType:
        return cls(TypeCode.MAP, key=key, inner=value)

    def is_datetime(self) -> bool:
        return self.code is TypeCode.DATETIME

    def level(self) -> int:
        """Nesting depth through Nullable, Array and Map values."""
        if self.code in (TypeCode.NULLABLE, TypeCode.ARRAY, TypeCode.MAP):
            return 1 + self.inner.level()
        return 0

    def map_level(self) -> int:
        if self.code in (TypeCode.NULLABLE, TypeCode.ARRAY):
            return self.inner.level()
        if self.code is TypeCode.MAP:
            return 1 + self.inner.level()
        return 0

    def __str__(self) -> str:
        code = self.code
        if code in _SIMPLE_CODES:
            return code.value
        if code is TypeCode.FIXED_STRING:
            return f"FixedString({self.length})"
        if code is TypeCode.DATETIME:
            dt = self.datetime_type
            if dt is not None and dt.kind is DateTimeKind.DATETIME64:
                return f"DateTime64({dt.precision}, '{dt.tz}')"
            return "DateTime"
        if code is TypeCode.NULLABLE:
            return f"Nullable({self.inner})"
        if code is TypeCode.ARRAY:
            return f"Array({self.inner})"
        if code is TypeCode.SIMPLE_AGGREGATE_FUNCTION:
            return f"SimpleAggregateFunction({self.func.value}, {self.inner})"
        if code is TypeCode.DECIMAL:
            return f"Decimal({self.precision}, {self.scale})"
        if code in (TypeCode.ENUM8, TypeCode.ENUM16):
            items = ",".join(f"'{name}' = {number}" for name, number in self.values)
            return f"{code.value}({items})"
        return f"Map({self.key}, {self.inner})"