"""Read-side views of column values."""

from __future__ import annotations

from datetime import date, datetime
from email.utils import format_datetime
from typing import Any

from .sql_type import DateTimeKind, SqlType, TypeCode
from .value import (
    ConversionError,
    Value,
    datetime64_to_datetime,
    days_to_date,
)

_INT_CODES = frozenset(
    {
        TypeCode.UINT8,
        TypeCode.UINT16,
        TypeCode.UINT32,
        TypeCode.UINT64,
        TypeCode.INT8,
        TypeCode.INT16,
        TypeCode.INT32,
        TypeCode.INT64,
    }
)

# Types whose textual form is the same for a ValueRef as for a Value.
_RENDERED_LIKE_VALUE = _INT_CODES | {
    TypeCode.FLOAT32,
    TypeCode.FLOAT64,
    TypeCode.STRING,
    TypeCode.DATE,
    TypeCode.DECIMAL,
    TypeCode.IPV4,
    TypeCode.IPV6,
    TypeCode.UUID,
}


class FromSqlError(ConversionError):
    """A column value can't be read as the requested type."""

    def __init__(self, src: str, dst: str) -> None:
        self.src = src
        self.dst = dst
        super().__init__(f"From SQL error: `SqlType::{src} cannot be cast to {dst}.`")


def _datetime_kind(sql_type: SqlType) -> DateTimeKind:
    dt = sql_type.datetime_type
    return DateTimeKind.DATETIME32 if dt is None else dt.kind


class ValueRef:
    """A typed cell value as read from a block.

    ``data`` follows the conventions of :class:`Value`, with nested cells
    (Nullable, Array and Map contents) held as ValueRefs. DateTime cells are
    either ``(seconds, tz)`` or, for DateTime64, an int tick count.
    """

    __slots__ = ("sql_type", "data")

    def __init__(self, sql_type: SqlType, data: Any) -> None:
        self.sql_type = sql_type
        self.data = data

    @classmethod
    def from_value(cls, value: Value) -> ValueRef:
        """A view of ``value``; DateTimes held as datetime objects can't be viewed."""
        if not isinstance(value, Value):
            raise TypeError(f"expected a Value, got {type(value).__name__}")
        sql_type = value.sql_type
        code = sql_type.code
        if code is TypeCode.NULLABLE:
            data = None if value.data is None else cls.from_value(value.data)
            return cls(sql_type, data)
        if code is TypeCode.ARRAY:
            return cls(sql_type, tuple(cls.from_value(item) for item in value.data))
        if code is TypeCode.MAP:
            return cls(
                sql_type,
                {cls.from_value(k): cls.from_value(v) for k, v in value.data.items()},
            )
        if code is TypeCode.DATETIME and _datetime_kind(sql_type) is DateTimeKind.CHRONO:
            raise ConversionError("Can't view a DateTime held as a datetime object")
        return cls(sql_type, value.data)

    @classmethod
    def of(cls, obj: Any, sql_type: SqlType | None = None) -> ValueRef:
        """Convert a Python object into a view of ``sql_type`` (inferred if omitted)."""
        if isinstance(obj, ValueRef):
            return obj
        if isinstance(obj, Value):
            return cls.from_value(obj)
        if sql_type is None and isinstance(obj, datetime):
            sql_type = SqlType.datetime()
        return cls.from_value(Value.of(obj, sql_type))

    def to_value(self) -> Value:
        """An owned Value holding the same cell."""
        code = self.sql_type.code
        if code is TypeCode.NULLABLE:
            data = None if self.data is None else self.data.to_value()
            return Value(self.sql_type, data)
        if code is TypeCode.ARRAY:
            return Value(self.sql_type, tuple(item.to_value() for item in self.data))
        if code is TypeCode.MAP:
            return Value(
                self.sql_type,
                {k.to_value(): v.to_value() for k, v in self.data.items()},
            )
        return Value(self.sql_type, self.data)

    def _error(self, target: str) -> FromSqlError:
        return FromSqlError(str(self.sql_type), target)

    def as_str(self) -> str:
        """The text of a String cell; invalid UTF-8 raises UnicodeDecodeError."""
        if self.sql_type.code is TypeCode.STRING:
            return bytes(self.data).decode("utf-8")
        raise self._error("str")

    def as_string(self) -> str:
        return self.as_str()

    def as_bytes(self) -> bytes:
        if self.sql_type.code is TypeCode.STRING:
            return bytes(self.data)
        raise self._error("bytes")

    def as_date(self) -> date:
        if self.sql_type.code is TypeCode.DATE:
            days, tz = self.data
            return days_to_date(days, tz)
        raise self._error("date")

    def as_datetime(self) -> datetime:
        if self.sql_type.code is TypeCode.DATETIME:
            kind = _datetime_kind(self.sql_type)
            if kind is DateTimeKind.DATETIME64:
                dt = self.sql_type.datetime_type
                return datetime64_to_datetime(self.data, dt.precision, dt.tz)
            if kind is DateTimeKind.DATETIME32:
                seconds, tz = self.data
                return datetime64_to_datetime(seconds, 0, tz)
        raise self._error("datetime")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValueRef):
            return NotImplemented
        a, b = self.sql_type, other.sql_type
        if a.code is not b.code:
            return False
        code = a.code
        if code is TypeCode.DATE:
            return self.as_date() == other.as_date()
        if code is TypeCode.DATETIME:
            kinds = {_datetime_kind(a), _datetime_kind(b)}
            if kinds == {DateTimeKind.DATETIME32}:
                return self.data[0] == other.data[0]
            if kinds == {DateTimeKind.DATETIME64}:
                return self.as_datetime() == other.as_datetime()
            return False
        if code is TypeCode.NULLABLE:
            if self.data is None and other.data is None:
                return a.inner == b.inner
            if self.data is None or other.data is None:
                return False
            return self.data == other.data
        if code is TypeCode.ARRAY:
            return a.inner == b.inner and self.data == other.data
        if code in (TypeCode.ENUM8, TypeCode.ENUM16):
            return self.data == other.data and a.values == b.values
        if code is TypeCode.MAP:
            if len(self.data) != len(other.data) or a.key != b.key or a.inner != b.inner:
                return False
            return self.data == other.data
        return self.data == other.data

    def __hash__(self) -> int:
        if self.sql_type.code in _INT_CODES or self.sql_type.code is TypeCode.STRING:
            return hash(self.data)
        raise TypeError(f"unhashable value of type {self.sql_type}")

    def __repr__(self) -> str:
        return f"ValueRef({self.sql_type}, {self.data!r})"

    def __str__(self) -> str:
        return self._render(False)

    def __format__(self, spec: str) -> str:
        return self._render(spec == "#")

    def _render(self, alternate: bool) -> str:
        code = self.sql_type.code
        if code in _RENDERED_LIKE_VALUE:
            return format(Value(self.sql_type, self.data), "#" if alternate else "")
        if code is TypeCode.DATETIME:
            moment = self.as_datetime()
            if alternate and _datetime_kind(self.sql_type) is DateTimeKind.DATETIME32:
                return format_datetime(moment)
            return moment.strftime("%Y-%m-%d %H:%M:%S")
        if code is TypeCode.NULLABLE:
            return "NULL" if self.data is None else str(self.data)
        if code is TypeCode.ARRAY:
            return "[" + ", ".join(str(item) for item in self.data) + "]"
        if code in (TypeCode.ENUM8, TypeCode.ENUM16):
            return str(self.data)
        if code is TypeCode.MAP:
            return "[" + ", ".join(f"{k}-{v}" for k, v in self.data.items()) + "]"
        return str(self.data)