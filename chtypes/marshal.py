"""Little-endian encoding of fixed-width scalars."""

from __future__ import annotations

import struct
from enum import Enum

from .sql_type import SqlType, TypeCode


class Scalar(Enum):
    """Fixed-width scalar kinds and their wire layout."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    F32 = "f32"
    F64 = "f64"
    BOOL = "bool"

    @property
    def _struct(self) -> struct.Struct:
        return _STRUCTS[self]

    def size(self) -> int:
        return self._struct.size

    def sql_type(self) -> SqlType:
        code = _SQL_CODES.get(self)
        if code is None:
            raise TypeError(f"{self.value} has no SQL type")
        return SqlType.simple(code)

    def buffer(self) -> bytearray:
        """A zeroed scratch buffer of the scalar's width."""
        return bytearray(self.size())


_STRUCTS = {
    Scalar.U8: struct.Struct("<B"),
    Scalar.U16: struct.Struct("<H"),
    Scalar.U32: struct.Struct("<I"),
    Scalar.U64: struct.Struct("<Q"),
    Scalar.I8: struct.Struct("<b"),
    Scalar.I16: struct.Struct("<h"),
    Scalar.I32: struct.Struct("<i"),
    Scalar.I64: struct.Struct("<q"),
    Scalar.F32: struct.Struct("<f"),
    Scalar.F64: struct.Struct("<d"),
    Scalar.BOOL: struct.Struct("<B"),
}

_SQL_CODES = {
    Scalar.U8: TypeCode.UINT8,
    Scalar.U16: TypeCode.UINT16,
    Scalar.U32: TypeCode.UINT32,
    Scalar.U64: TypeCode.UINT64,
    Scalar.I8: TypeCode.INT8,
    Scalar.I16: TypeCode.INT16,
    Scalar.I32: TypeCode.INT32,
    Scalar.I64: TypeCode.INT64,
    Scalar.F32: TypeCode.FLOAT32,
    Scalar.F64: TypeCode.FLOAT64,
}


def marshal(scalar: Scalar, value: int | float | bool) -> bytes:
    """Encode ``value`` as ``scalar`` in little-endian order."""
    if scalar is Scalar.BOOL:
        value = 1 if value else 0
    try:
        return scalar._struct.pack(value)
    except struct.error as exc:
        raise ValueError(f"cannot encode {value!r} as {scalar.value}: {exc}") from None


def unmarshal(scalar: Scalar, data: bytes | bytearray | memoryview) -> int | float | bool:
    """Decode a ``scalar`` from the start of ``data``."""
    try:
        (result,) = scalar._struct.unpack_from(data, 0)
    except struct.error:
        raise ValueError(
            f"need {scalar.size()} bytes to decode {scalar.value}, got {len(data)}"
        ) from None
    if scalar is Scalar.BOOL:
        return result != 0
    return result