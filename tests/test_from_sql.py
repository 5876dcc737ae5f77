import uuid
from datetime import date, datetime, timezone
from ipaddress import IPv4Address, IPv6Address

import pytest

from chtypes.decimals import Decimal
from chtypes.enums import Enum8, Enum16
from chtypes.from_sql import ListOf, MapOf, Optional, from_sql
from chtypes.marshal import Scalar
from chtypes.sql_type import DateTimeType, SqlType, TypeCode
from chtypes.value import Value
from chtypes.value_ref import FromSqlError, ValueRef


def simple(code):
    return SqlType.simple(code)


def test_u8():
    v = ValueRef.of(42, simple(TypeCode.UINT8))
    assert from_sql(v, Scalar.U8) == 42


def test_bad_convert():
    v = ValueRef.of(42, simple(TypeCode.UINT16))
    with pytest.raises(FromSqlError) as info:
        from_sql(v, Scalar.U32)
    assert str(info.value) == "From SQL error: `SqlType::UInt16 cannot be cast to u32.`"


def test_null_to_datetime():
    null_value = ValueRef(SqlType.nullable(SqlType.datetime(DateTimeType.datetime32())), None)
    assert from_sql(null_value, Optional(datetime)) is None


@pytest.mark.parametrize(
    "code,scalar,number",
    [
        (TypeCode.INT8, Scalar.I8, -7),
        (TypeCode.INT64, Scalar.I64, -(2**40)),
        (TypeCode.UINT64, Scalar.U64, 2**63),
        (TypeCode.FLOAT64, Scalar.F64, 2.5),
    ],
)
def test_scalars(code, scalar, number):
    assert from_sql(ValueRef.of(number, simple(code)), scalar) == number


def test_accepts_value():
    assert from_sql(Value.of(5, simple(TypeCode.UINT32)), Scalar.U32) == 5


def test_string_and_bytes():
    v = ValueRef.of("text", simple(TypeCode.STRING))
    assert from_sql(v, str) == "text"
    assert from_sql(v, bytes) == b"text"


def test_binary_bytes():
    v = ValueRef.of(bytes([0, 159, 146, 150]), simple(TypeCode.STRING))
    assert from_sql(v, bytes) == bytes([0, 159, 146, 150])


def test_str_from_number_fails():
    with pytest.raises(FromSqlError):
        from_sql(ValueRef.of(1, simple(TypeCode.UINT8)), str)


def test_decimal():
    v = ValueRef.of(Decimal.of(1.23, 2), SqlType.decimal(10, 2))
    assert from_sql(v, Decimal) == Decimal.of(1.23, 2)
    with pytest.raises(FromSqlError) as info:
        from_sql(ValueRef.of(1, simple(TypeCode.INT32)), Decimal)
    assert info.value.dst == "Decimal"


def test_enums():
    v8 = ValueRef.of(Enum8.of(2), SqlType.enum8([("zero", 1), ("first", 2)]))
    v16 = ValueRef.of(Enum16.of(6), SqlType.enum16([("zero", 5), ("first", 6)]))
    assert from_sql(v8, Enum8) == Enum8.of(2)
    assert from_sql(v16, Enum16) == Enum16.of(6)
    with pytest.raises(FromSqlError):
        from_sql(v8, Enum16)


def test_ip_addresses():
    v4 = ValueRef.of("192.168.2.1", simple(TypeCode.IPV4))
    v6 = ValueRef.of("::1", simple(TypeCode.IPV6))
    assert from_sql(v4, IPv4Address) == IPv4Address("192.168.2.1")
    assert from_sql(v6, IPv6Address) == IPv6Address("::1")
    with pytest.raises(FromSqlError):
        from_sql(v4, IPv6Address)


def test_uuid():
    u = uuid.UUID("936da01f-9abd-4d9d-80c7-02af85c822a8")
    assert from_sql(ValueRef.of(u), uuid.UUID) == u


def test_date():
    d = date(2016, 10, 22)
    assert from_sql(ValueRef.of(d, simple(TypeCode.DATE)), date) == d
    with pytest.raises(FromSqlError):
        from_sql(ValueRef.of(1, simple(TypeCode.UINT8)), date)


def test_datetime32():
    moment = datetime(2014, 7, 8, 14, 0, 0, tzinfo=timezone.utc)
    assert from_sql(ValueRef.of(moment), datetime) == moment


def test_datetime64():
    moment = datetime(2014, 7, 8, 14, 0, 0, tzinfo=timezone.utc)
    v = ValueRef.of(moment, SqlType.datetime(DateTimeType.datetime64(3, "UTC")))
    assert from_sql(v, datetime) == moment


def test_datetime_from_string_fails():
    with pytest.raises(FromSqlError) as info:
        from_sql(ValueRef.of("x", simple(TypeCode.STRING)), datetime)
    assert info.value.dst == "DateTime<Tz>"


def test_optional_some():
    v = ValueRef.of(1, SqlType.nullable(simple(TypeCode.INT8)))
    assert from_sql(v, Optional(Scalar.I8)) == 1


def test_optional_on_plain_fails():
    with pytest.raises(FromSqlError):
        from_sql(ValueRef.of(1, simple(TypeCode.INT8)), Optional(Scalar.I8))


def test_list_of_numbers():
    v = ValueRef.of([42, 43], SqlType.array(simple(TypeCode.UINT32)))
    assert from_sql(v, ListOf(Scalar.U32)) == [42, 43]
    f = ValueRef.of([1.5], SqlType.array(simple(TypeCode.FLOAT32)))
    assert from_sql(f, ListOf(Scalar.F32)) == [1.5]


def test_list_wrong_element_fails():
    v = ValueRef.of([42], SqlType.array(simple(TypeCode.UINT32)))
    with pytest.raises(FromSqlError) as info:
        from_sql(v, ListOf(Scalar.U16))
    assert info.value.dst == "u16"


def test_list_of_strings():
    v = ValueRef.of(["A", "B"], SqlType.array(simple(TypeCode.STRING)))
    assert from_sql(v, ListOf(str)) == ["A", "B"]
    assert from_sql(v, ListOf(bytes)) == [b"A", b"B"]


def test_list_of_dates_and_times():
    d = date(2016, 10, 22)
    moment = datetime(2014, 7, 8, 14, 0, 0, tzinfo=timezone.utc)
    dv = ValueRef.of([d], SqlType.array(simple(TypeCode.DATE)))
    tv = ValueRef.of([moment], SqlType.array(SqlType.datetime()))
    assert from_sql(dv, ListOf(date)) == [d]
    assert from_sql(tv, ListOf(datetime)) == [moment]


def test_u8_list_and_bytes_from_array():
    v = ValueRef.of([41, 42], SqlType.array(simple(TypeCode.UINT8)))
    assert from_sql(v, ListOf(Scalar.U8)) == [41, 42]
    assert from_sql(v, bytes) == b")*"


def test_u8_list_from_string():
    v = ValueRef.of(b"\x01\x02", simple(TypeCode.STRING))
    assert from_sql(v, ListOf(Scalar.U8)) == [1, 2]


def test_map():
    v = ValueRef.of(
        {"test": 0, "foo": 1},
        SqlType.map(simple(TypeCode.STRING), simple(TypeCode.UINT8)),
    )
    assert from_sql(v, MapOf(str, Scalar.U8)) == {"test": 0, "foo": 1}


def test_nested_map():
    inner = SqlType.map(simple(TypeCode.UINT8), simple(TypeCode.UINT8))
    v = ValueRef.of({1: {3: 5}, 2: {4: 6, 7: 8}}, SqlType.map(simple(TypeCode.UINT8), inner))
    result = from_sql(v, MapOf(Scalar.U8, MapOf(Scalar.U8, Scalar.U8)))
    assert result == {1: {3: 5}, 2: {4: 6, 7: 8}}


def test_map_on_plain_fails():
    with pytest.raises(FromSqlError):
        from_sql(ValueRef.of(1, simple(TypeCode.UINT8)), MapOf(Scalar.U8, Scalar.U8))


def test_unsupported_target():
    with pytest.raises(TypeError):
        from_sql(ValueRef.of(1, simple(TypeCode.UINT8)), int)
    with pytest.raises(TypeError):
        from_sql(ValueRef.of(1, simple(TypeCode.UINT8)), Scalar.BOOL)