"""Client-side values of ClickHouse columns."""

from __future__ import annotations

import decimal as _decimal
import math
import struct
import uuid
from datetime import date, datetime, timedelta, timezone, tzinfo
from email.utils import format_datetime
from ipaddress import IPv4Address, IPv6Address
from typing import Any
from zoneinfo import ZoneInfo

from .decimals import Decimal, NoBits
from .enums import Enum8, Enum16
from .sql_type import DateTimeKind, DateTimeType, SqlType, TypeCode

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_EPOCH_DATE = date(1970, 1, 1)
_UTC_NAMES = frozenset({"UTC", "Zulu", "Etc/UTC", "GMT", "Etc/GMT", "UCT"})

_INT_RANGES = {
    TypeCode.UINT8: (0, 2**8 - 1),
    TypeCode.UINT16: (0, 2**16 - 1),
    TypeCode.UINT32: (0, 2**32 - 1),
    TypeCode.UINT64: (0, 2**64 - 1),
    TypeCode.INT8: (-(2**7), 2**7 - 1),
    TypeCode.INT16: (-(2**15), 2**15 - 1),
    TypeCode.INT32: (-(2**31), 2**31 - 1),
    TypeCode.INT64: (-(2**63), 2**63 - 1),
}
_FLOAT_CODES = (TypeCode.FLOAT32, TypeCode.FLOAT64)


class ConversionError(TypeError):
    """A value can't be converted to the requested type."""


def _tz(name: str) -> tzinfo:
    if name in _UTC_NAMES:
        return timezone.utc
    return ZoneInfo(name)


def _tz_name(moment: datetime) -> str:
    key = getattr(moment.tzinfo, "key", None)
    return key if isinstance(key, str) else "UTC"


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def decode_ipv4(octets: bytes) -> IPv4Address:
    """An IPv4 address from its wire form (octets in reverse order)."""
    return IPv4Address(bytes(reversed(bytes(octets))))


def decode_ipv6(octets: bytes) -> IPv6Address:
    """An IPv6 address from its wire form."""
    return IPv6Address(bytes(octets))


def uuid_to_wire(value: uuid.UUID) -> bytes:
    """The wire form of a UUID: each 8-byte half reversed."""
    raw = value.bytes
    return raw[7::-1] + raw[:7:-1]


def uuid_from_wire(octets: bytes) -> uuid.UUID:
    """A UUID from its wire form."""
    raw = bytes(octets)
    if len(raw) != 16:
        raise ValueError(f"a UUID needs 16 bytes, got {len(raw)}")
    return uuid.UUID(bytes=raw[7::-1] + raw[:7:-1])


def datetime64_to_datetime(value: int, precision: int, tz: str) -> datetime:
    """The moment ``value`` ticks of 10**-precision seconds after the epoch."""
    seconds, nanos = divmod(value * 10 ** (9 - precision), 10**9)
    moment = _EPOCH + timedelta(seconds=seconds, microseconds=nanos // 1000)
    return moment.astimezone(_tz(tz))


def days_to_date(days: int, tz: str) -> date:
    """The calendar date, in ``tz``, of midnight UTC ``days`` after the epoch."""
    return (_EPOCH + timedelta(days=days)).astimezone(_tz(tz)).date()


def date_to_days(value: date) -> int:
    """Days since the epoch, as stored in a Date column."""
    if isinstance(value, datetime):
        value = value.date()
    days = (value - _EPOCH_DATE).days
    if not 0 <= days <= 2**16 - 1:
        raise ValueError(f"{value} is out of the Date range")
    return days


def _to_f32(number: float) -> float:
    return struct.unpack("<f", struct.pack("<f", number))[0]


def _format_float(number: float, single: bool) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    text = repr(number)
    if single:
        for digits in range(1, 10):
            candidate = f"{number:.{digits}g}"
            if _to_f32(float(candidate)) == number:
                text = candidate
                break
    text = format(_decimal.Decimal(text), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _datetime_kind(sql_type: SqlType) -> DateTimeKind:
    dt = sql_type.datetime_type
    return DateTimeKind.DATETIME32 if dt is None else dt.kind


def _infer(obj: Any) -> SqlType:
    if isinstance(obj, Value):
        return obj.sql_type
    if isinstance(obj, bool):
        return SqlType.simple(TypeCode.UINT8)
    if isinstance(obj, int):
        return SqlType.simple(TypeCode.INT64)
    if isinstance(obj, float):
        return SqlType.simple(TypeCode.FLOAT64)
    if isinstance(obj, (str, bytes, bytearray)):
        return SqlType.simple(TypeCode.STRING)
    if isinstance(obj, Decimal):
        return SqlType.decimal(obj.precision, obj.scale)
    if isinstance(obj, Enum8):
        return SqlType.enum8(())
    if isinstance(obj, Enum16):
        return SqlType.enum16(())
    if isinstance(obj, datetime):
        if obj.tzinfo is timezone.utc:
            return SqlType.datetime(DateTimeType.datetime32())
        return SqlType.datetime(DateTimeType.chrono())
    if isinstance(obj, date):
        return SqlType.simple(TypeCode.DATE)
    if isinstance(obj, IPv4Address):
        return SqlType.simple(TypeCode.IPV4)
    if isinstance(obj, IPv6Address):
        return SqlType.simple(TypeCode.IPV6)
    if isinstance(obj, uuid.UUID):
        return SqlType.simple(TypeCode.UUID)
    if isinstance(obj, (list, tuple)):
        if not obj:
            raise ConversionError("can't infer the element type of an empty list")
        return SqlType.array(_infer(obj[0]))
    if isinstance(obj, dict):
        if not obj:
            raise ConversionError("can't infer the types of an empty map")
        key, item = next(iter(obj.items()))
        return SqlType.map(_infer(key), _infer(item))
    raise ConversionError(f"can't infer a column type for {type(obj).__name__}")


def _fail(obj: Any, sql_type: SqlType) -> ConversionError:
    return ConversionError(f"can't convert {obj!r} into {sql_type}")


def _coerce(obj: Any, sql_type: SqlType) -> Value:
    if isinstance(obj, Value):
        return obj
    code = sql_type.code
    if code is TypeCode.SIMPLE_AGGREGATE_FUNCTION:
        return _coerce(obj, sql_type.inner)
    if code is TypeCode.NULLABLE:
        if obj is None:
            return Value.null(sql_type.inner)
        inner = _coerce(obj, sql_type.inner)
        return Value(SqlType.nullable(inner.sql_type), inner)
    if obj is None:
        raise _fail(obj, sql_type)
    if code in _INT_RANGES:
        if not isinstance(obj, int):
            raise _fail(obj, sql_type)
        low, high = _INT_RANGES[code]
        if not low <= int(obj) <= high:
            raise _fail(obj, sql_type)
        return Value(sql_type, int(obj))
    if code in _FLOAT_CODES:
        if not isinstance(obj, (int, float)):
            raise _fail(obj, sql_type)
        number = float(obj)
        if code is TypeCode.FLOAT32:
            try:
                number = _to_f32(number)
            except (OverflowError, struct.error):
                raise _fail(obj, sql_type) from None
        return Value(sql_type, number)
    if code in (TypeCode.STRING, TypeCode.FIXED_STRING):
        if isinstance(obj, str):
            raw = obj.encode("utf-8")
        elif isinstance(obj, (bytes, bytearray)):
            raw = bytes(obj)
        else:
            raise _fail(obj, sql_type)
        if code is TypeCode.FIXED_STRING:
            if len(raw) > sql_type.length:
                raise _fail(obj, sql_type)
            raw = raw.ljust(sql_type.length, b"\0")
        return Value(SqlType.simple(TypeCode.STRING), raw)
    if code is TypeCode.DATE:
        if isinstance(obj, date):
            return Value(sql_type, (date_to_days(obj), "UTC"))
        if isinstance(obj, int):
            return Value(sql_type, (int(obj), "UTC"))
        raise _fail(obj, sql_type)
    if code is TypeCode.DATETIME:
        return _coerce_datetime(obj, sql_type)
    if code is TypeCode.IPV4:
        if isinstance(obj, (bytes, bytearray)) and len(obj) == 4:
            return Value(sql_type, bytes(obj))
        try:
            address = IPv4Address(obj)
        except ValueError:
            raise _fail(obj, sql_type) from None
        return Value(sql_type, address.packed[::-1])
    if code is TypeCode.IPV6:
        if isinstance(obj, (bytes, bytearray)) and len(obj) == 16:
            return Value(sql_type, bytes(obj))
        try:
            address = IPv6Address(obj)
        except ValueError:
            raise _fail(obj, sql_type) from None
        return Value(sql_type, address.packed)
    if code is TypeCode.UUID:
        if isinstance(obj, (bytes, bytearray)) and len(obj) == 16:
            return Value(sql_type, bytes(obj))
        try:
            parsed = obj if isinstance(obj, uuid.UUID) else uuid.UUID(str(obj))
        except ValueError:
            raise _fail(obj, sql_type) from None
        return Value(sql_type, uuid_to_wire(parsed))
    if code is TypeCode.ARRAY:
        if not isinstance(obj, (list, tuple)):
            raise _fail(obj, sql_type)
        return Value(sql_type, tuple(_coerce(item, sql_type.inner) for item in obj))
    if code is TypeCode.DECIMAL:
        if isinstance(obj, Decimal):
            number = obj.set_scale(sql_type.scale)
        elif isinstance(obj, (int, float)) and not isinstance(obj, bool):
            number = Decimal.of(obj, sql_type.scale)
        else:
            raise _fail(obj, sql_type)
        return Value(sql_type, Decimal(number.underlying, number.scale, sql_type.precision, number.nobits))
    if code in (TypeCode.ENUM8, TypeCode.ENUM16):
        kind = Enum8 if code is TypeCode.ENUM8 else Enum16
        if isinstance(obj, kind):
            return Value(sql_type, obj)
        if isinstance(obj, int) and not isinstance(obj, bool):
            return Value(sql_type, kind(obj))
        raise _fail(obj, sql_type)
    if code is TypeCode.MAP:
        if not isinstance(obj, dict):
            raise _fail(obj, sql_type)
        return Value(
            sql_type,
            {_coerce(k, sql_type.key): _coerce(v, sql_type.inner) for k, v in obj.items()},
        )
    raise _fail(obj, sql_type)


def _coerce_datetime(obj: Any, sql_type: SqlType) -> Value:
    kind = _datetime_kind(sql_type)
    if kind is DateTimeKind.CHRONO:
        if not isinstance(obj, datetime):
            raise _fail(obj, sql_type)
        return Value(sql_type, _aware(obj))
    if kind is DateTimeKind.DATETIME64:
        dt = sql_type.datetime_type
        if isinstance(obj, datetime):
            delta = _aware(obj) - _EPOCH
            micros = (delta.days * 86400 + delta.seconds) * 10**6 + delta.microseconds
            return Value(sql_type, micros * 1000 // 10 ** (9 - dt.precision))
        if isinstance(obj, int) and not isinstance(obj, bool):
            return Value(sql_type, int(obj))
        raise _fail(obj, sql_type)
    if isinstance(obj, datetime):
        moment = _aware(obj)
        seconds, tz = math.floor(moment.timestamp()), _tz_name(moment)
    elif isinstance(obj, int) and not isinstance(obj, bool):
        seconds, tz = int(obj), "UTC"
    else:
        raise _fail(obj, sql_type)
    if not 0 <= seconds <= 2**32 - 1:
        raise _fail(obj, sql_type)
    return Value(SqlType.datetime(DateTimeType.datetime32()), (seconds, tz))


class Value:
    """A typed cell value.

    ``data`` holds: int or float for numbers, bytes for strings, ``(days, tz)``
    for Date, ``(seconds, tz)`` for DateTime, an int tick count for DateTime64,
    an aware datetime for other DateTimes, wire bytes for IPv4/IPv6/UUID, None
    or a Value for Nullable, a tuple of Values for Array, a dict for Map and a
    Decimal, Enum8 or Enum16 for those types.
    """

    __slots__ = ("sql_type", "data")

    def __init__(self, sql_type: SqlType, data: Any) -> None:
        self.sql_type = sql_type
        self.data = data

    @classmethod
    def of(cls, obj: Any, sql_type: SqlType | None = None) -> Value:
        """Convert a Python object into a value of ``sql_type`` (inferred if omitted)."""
        return _coerce(obj, sql_type if sql_type is not None else _infer(obj))

    @classmethod
    def null(cls, sql_type: SqlType) -> Value:
        """A NULL of a Nullable column whose inner type is ``sql_type``."""
        return cls(SqlType.nullable(sql_type), None)

    @classmethod
    def default(cls, sql_type: SqlType) -> Value:
        """The zero value of a column type."""
        code = sql_type.code
        if code in _INT_RANGES:
            return cls(sql_type, 0)
        if code in _FLOAT_CODES:
            return cls(sql_type, 0.0)
        if code is TypeCode.STRING:
            return cls(sql_type, b"")
        if code is TypeCode.FIXED_STRING:
            return cls(SqlType.simple(TypeCode.STRING), bytes(sql_type.length))
        if code is TypeCode.DATE:
            return cls(sql_type, (0, "Zulu"))
        if code is TypeCode.DATETIME:
            if _datetime_kind(sql_type) is DateTimeKind.DATETIME64:
                return cls(SqlType.datetime(DateTimeType.datetime64(1, "Zulu")), 0)
            return cls(SqlType.datetime(DateTimeType.datetime32()), (0, "Zulu"))
        if code is TypeCode.SIMPLE_AGGREGATE_FUNCTION:
            return cls.default(sql_type.inner)
        if code is TypeCode.NULLABLE:
            return cls.null(sql_type.inner)
        if code is TypeCode.ARRAY:
            return cls(sql_type, ())
        if code is TypeCode.DECIMAL:
            return cls(sql_type, Decimal(0, sql_type.scale, sql_type.precision, NoBits.N64))
        if code is TypeCode.IPV4:
            return cls(sql_type, bytes(4))
        if code in (TypeCode.IPV6, TypeCode.UUID):
            return cls(sql_type, bytes(16))
        if code is TypeCode.ENUM8:
            return cls(sql_type, Enum8(0))
        if code is TypeCode.ENUM16:
            return cls(sql_type, Enum16(0))
        return cls(sql_type, {})

    def _error(self, target: str) -> ConversionError:
        return ConversionError(f"Can't convert Value::{self.sql_type} into {target}")

    def to_python(self) -> Any:
        """The natural Python object for this value."""
        code = self.sql_type.code
        if code is TypeCode.DATE:
            return self.as_date()
        if code is TypeCode.DATETIME:
            return self.as_datetime()
        if code is TypeCode.IPV4:
            return decode_ipv4(self.data)
        if code is TypeCode.IPV6:
            return decode_ipv6(self.data)
        if code is TypeCode.UUID:
            return uuid_from_wire(self.data)
        if code is TypeCode.NULLABLE:
            return None if self.data is None else self.data.to_python()
        if code is TypeCode.ARRAY:
            return [item.to_python() for item in self.data]
        if code is TypeCode.MAP:
            return {k.to_python(): v.to_python() for k, v in self.data.items()}
        return self.data

    def as_str(self) -> str:
        if self.sql_type.code is TypeCode.STRING:
            try:
                return self.data.decode("utf-8")
            except UnicodeDecodeError:
                pass
        raise self._error("String")

    def as_bytes(self) -> bytes:
        if self.sql_type.code is TypeCode.STRING:
            return self.data
        raise self._error("bytes")

    def as_date(self) -> date:
        if self.sql_type.code is TypeCode.DATE:
            days, tz = self.data
            return days_to_date(days, tz)
        raise self._error("date")

    def as_datetime(self) -> datetime:
        if self.sql_type.code is TypeCode.DATETIME:
            kind = _datetime_kind(self.sql_type)
            if kind is DateTimeKind.CHRONO:
                return self.data
            if kind is DateTimeKind.DATETIME64:
                dt = self.sql_type.datetime_type
                return datetime64_to_datetime(self.data, dt.precision, dt.tz)
            seconds, tz = self.data
            return (_EPOCH + timedelta(seconds=seconds)).astimezone(_tz(tz))
        raise self._error("datetime")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        a, b = self.sql_type, other.sql_type
        if a.code is not b.code:
            return False
        code = a.code
        if code is TypeCode.DATE:
            return self.as_date() == other.as_date()
        if code is TypeCode.DATETIME:
            kind = _datetime_kind(a)
            if kind is not _datetime_kind(b):
                return False
            if kind is DateTimeKind.DATETIME64:
                pa, pb = a.datetime_type.precision, b.datetime_type.precision
                return pa == pb and self.data * 10 ** (9 - pa) == other.data * 10 ** (9 - pb)
            if kind is DateTimeKind.DATETIME32:
                return self.data[0] == other.data[0]
            return self.data == other.data
        if code is TypeCode.NULLABLE:
            if self.data is None and other.data is None:
                return a.inner == b.inner
            if self.data is None or other.data is None:
                return False
            return self.data == other.data
        if code is TypeCode.ARRAY:
            return a.inner == b.inner and self.data == other.data
        if code in (TypeCode.ENUM8, TypeCode.ENUM16):
            return a.values == b.values and self.data == other.data
        if code is TypeCode.MAP:
            return a.key == b.key and a.inner == b.inner and self.data == other.data
        return self.data == other.data

    def __hash__(self) -> int:
        if self.sql_type.code in _INT_RANGES or self.sql_type.code is TypeCode.STRING:
            return hash(self.data)
        raise TypeError(f"unhashable value of type {self.sql_type}")

    def __repr__(self) -> str:
        return f"Value({self.sql_type}, {self.data!r})"

    def __str__(self) -> str:
        return self._render(False)

    def __format__(self, spec: str) -> str:
        return self._render(spec == "#")

    def _render(self, alternate: bool) -> str:
        code = self.sql_type.code
        if code in _INT_RANGES:
            return str(self.data)
        if code in _FLOAT_CODES:
            return _format_float(self.data, code is TypeCode.FLOAT32)
        if code is TypeCode.STRING:
            try:
                return self.data.decode("utf-8")
            except UnicodeDecodeError:
                return "[" + ", ".join(str(byte) for byte in self.data) + "]"
        if code is TypeCode.DATE:
            day = self.as_date()
            if alternate:
                tzname = datetime.combine(day, datetime.min.time(), _tz(self.data[1])).tzname()
                return f"{day.isoformat()}{tzname}"
            return day.strftime("%Y-%m-%d")
        if code is TypeCode.DATETIME:
            moment = self.as_datetime()
            if alternate and _datetime_kind(self.sql_type) is DateTimeKind.DATETIME32:
                return f"{moment.strftime('%Y-%m-%d %H:%M:%S')} {moment.tzname()}"
            return format_datetime(moment)
        if code is TypeCode.NULLABLE:
            return "NULL" if self.data is None else self.data._render(alternate)
        if code is TypeCode.ARRAY:
            return "[" + ", ".join(str(item) for item in self.data) + "]"
        if code is TypeCode.DECIMAL:
            return str(self.data)
        if code in (TypeCode.IPV4, TypeCode.IPV6, TypeCode.UUID):
            return str(self.to_python())
        if code is TypeCode.ENUM8:
            return f"Enum8, {self.data}"
        if code is TypeCode.ENUM16:
            return f"Enum16, {self.data}"
        cells = (f"key=>{k} value=>{v}" for k, v in self.data.items())
        return "[" + ", ".join(cells) + "]"