"""Reading column values as Python objects of a requested type."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from ipaddress import IPv4Address, IPv6Address
from typing import Any, Callable

from .decimals import Decimal
from .enums import Enum8, Enum16
from .marshal import Scalar
from .sql_type import TypeCode
from .value import Value, decode_ipv4, decode_ipv6, uuid_from_wire
from .value_ref import FromSqlError, ValueRef


@dataclass(frozen=True)
class Optional:
    """Target for a Nullable column: None or a value of ``inner``."""

    inner: Any


@dataclass(frozen=True)
class ListOf:
    """Target for an Array column whose items are read as ``inner``."""

    inner: Any


@dataclass(frozen=True)
class MapOf:
    """Target for a Map column read as a dict of ``key`` to ``value``."""

    key: Any
    value: Any


_SIMPLE_TARGETS: dict[Any, tuple[TypeCode, str, Callable[[ValueRef], Any]]] = {
    Decimal: (TypeCode.DECIMAL, "Decimal", lambda v: v.data),
    Enum8: (TypeCode.ENUM8, "Enum8", lambda v: v.data),
    Enum16: (TypeCode.ENUM16, "Enum16", lambda v: v.data),
    IPv4Address: (TypeCode.IPV4, "Ipv4", lambda v: decode_ipv4(v.data)),
    IPv6Address: (TypeCode.IPV6, "Ipv6", lambda v: decode_ipv6(v.data)),
    uuid.UUID: (TypeCode.UUID, "Uuid", lambda v: uuid_from_wire(v.data)),
}

# Item types an Array may be read as, with the element type they require.
_LIST_ITEM_CODES = {
    str: TypeCode.STRING,
    bytes: TypeCode.STRING,
    date: TypeCode.DATE,
    datetime: TypeCode.DATETIME,
}


def _target_name(target: Any) -> str:
    if isinstance(target, Scalar):
        return target.value
    if isinstance(target, Optional):
        return f"Option<{_target_name(target.inner)}>"
    if isinstance(target, ListOf):
        return f"Vec<{_target_name(target.inner)}>"
    if isinstance(target, MapOf):
        return f"HashMap<{_target_name(target.key)}, {_target_name(target.value)}>"
    if target is date:
        return "Date<Tz>"
    if target is datetime:
        return "DateTime<Tz>"
    return getattr(target, "__name__", str(target))


def _scalar_code(scalar: Scalar) -> TypeCode:
    try:
        return scalar.sql_type().code
    except TypeError:
        raise TypeError(f"can't read a column as {scalar.value}") from None


def _fail(value: ValueRef, dst: str) -> FromSqlError:
    return FromSqlError(str(value.sql_type), dst)


def _read_list(value: ValueRef, target: ListOf) -> list[Any]:
    inner = target.inner
    code = value.sql_type.code
    if inner is Scalar.U8:
        if code is TypeCode.ARRAY and value.sql_type.inner.code is TypeCode.UINT8:
            return [item.data for item in value.data]
        return list(value.as_bytes())
    if isinstance(inner, Scalar):
        wanted = _scalar_code(inner)
        dst = inner.value
    elif inner in _LIST_ITEM_CODES:
        wanted = _LIST_ITEM_CODES[inner]
        dst = _target_name(target)
    else:
        raise TypeError(f"can't read an array as {_target_name(target)}")
    if code is not TypeCode.ARRAY or value.sql_type.inner.code is not wanted:
        raise _fail(value, dst)
    return [from_sql(item, inner) for item in value.data]


def _read_bytes(value: ValueRef) -> bytes:
    sql_type = value.sql_type
    if sql_type.code is TypeCode.ARRAY and sql_type.inner.code is TypeCode.UINT8:
        return bytes(item.data for item in value.data)
    return value.as_bytes()


def _read_datetime(value: ValueRef) -> datetime:
    if value.sql_type.code is not TypeCode.DATETIME:
        raise _fail(value, "DateTime<Tz>")
    return value.as_datetime()


def from_sql(value: ValueRef | Value, target: Any) -> Any:
    """Read ``value`` as ``target``.

    ``target`` is a :class:`Scalar`, one of ``str``, ``bytes``, ``date``,
    ``datetime``, :class:`Decimal`, :class:`Enum8`, :class:`Enum16`,
    ``IPv4Address``, ``IPv6Address``, ``uuid.UUID``, or an :class:`Optional`,
    :class:`ListOf` or :class:`MapOf` wrapping such targets.
    """
    if isinstance(value, Value):
        value = ValueRef.from_value(value)
    if not isinstance(value, ValueRef):
        raise TypeError(f"expected a ValueRef, got {type(value).__name__}")

    if isinstance(target, Scalar):
        if value.sql_type.code is not _scalar_code(target):
            raise _fail(value, target.value)
        return value.data
    if isinstance(target, Optional):
        if value.sql_type.code is not TypeCode.NULLABLE:
            raise _fail(value, _target_name(target))
        if value.data is None:
            return None
        return from_sql(value.data, target.inner)
    if isinstance(target, ListOf):
        return _read_list(value, target)
    if isinstance(target, MapOf):
        if value.sql_type.code is not TypeCode.MAP:
            raise _fail(value, _target_name(target))
        return {
            from_sql(k, target.key): from_sql(v, target.value)
            for k, v in value.data.items()
        }
    if target is str:
        return value.as_str()
    if target is bytes:
        return _read_bytes(value)
    if target is date:
        if value.sql_type.code is not TypeCode.DATE:
            raise _fail(value, "Date<Tz>")
        return value.as_date()
    if target is datetime:
        return _read_datetime(value)
    entry = _SIMPLE_TARGETS.get(target)
    if entry is None:
        raise TypeError(f"can't read a column as {_target_name(target)}")
    code, dst, read = entry
    if value.sql_type.code is not code:
        raise _fail(value, dst)
    return read(value)