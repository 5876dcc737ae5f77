import uuid

import pytest

from chtypes.decimals import Decimal
from chtypes.enums import Enum8
from chtypes.sql_type import DateTimeType, SqlType, TypeCode
from chtypes.value import ConversionError, Value, uuid_to_wire
from chtypes.value_ref import FromSqlError, ValueRef

INT_CODES = [
    TypeCode.UINT8,
    TypeCode.UINT16,
    TypeCode.UINT32,
    TypeCode.UINT64,
    TypeCode.INT8,
    TypeCode.INT16,
    TypeCode.INT32,
    TypeCode.INT64,
]
FLOAT_CODES = [TypeCode.FLOAT32, TypeCode.FLOAT64]


def simple(code):
    return SqlType.simple(code)


def int32_array_ref():
    t = simple(TypeCode.INT32)
    return ValueRef(SqlType.array(t), tuple(ValueRef(t, n) for n in (1, 2, 3)))


def test_display_binary_string():
    assert str(ValueRef(simple(TypeCode.STRING), bytes([0, 159, 146, 150]))) == "[0, 159, 146, 150]"


def test_display_text():
    assert str(ValueRef(simple(TypeCode.STRING), b"text")) == "text"


@pytest.mark.parametrize("code", INT_CODES)
def test_display_ints(code):
    assert str(ValueRef(simple(code), 42)) == "42"


@pytest.mark.parametrize("code", FLOAT_CODES)
def test_display_floats(code):
    assert str(ValueRef(simple(code), 42.0)) == "42"


def test_display_nullable():
    assert str(ValueRef(SqlType.nullable(simple(TypeCode.UINT8)), None)) == "NULL"
    inner = ValueRef(simple(TypeCode.UINT8), 42)
    assert str(ValueRef(SqlType.nullable(simple(TypeCode.UINT8)), inner)) == "42"


def test_display_array():
    assert str(int32_array_ref()) == "[1, 2, 3]"


def test_display_date():
    ref = ValueRef(simple(TypeCode.DATE), (0, "Zulu"))
    assert str(ref) == "1970-01-01"
    assert f"{ref:#}" == "1970-01-01UTC"


def test_display_datetime():
    ref = ValueRef(SqlType.datetime(), (0, "Zulu"))
    assert str(ref) == "1970-01-01 00:00:00"
    assert f"{ref:#}" == "Thu, 01 Jan 1970 00:00:00 +0000"


def test_display_datetime64():
    ref = ValueRef(SqlType.datetime(DateTimeType.datetime64(3, "UTC")), 1500)
    assert str(ref) == "1970-01-01 00:00:01"


def test_display_decimal():
    ref = ValueRef.of(Decimal.of(2.0, 2))
    assert str(ref) == "2.00"


def test_display_enum():
    ref = ValueRef(SqlType.enum8([("a", 1)]), Enum8.of(1))
    assert str(ref) == "Enum8(1)"


def test_display_map():
    k, v = simple(TypeCode.UINT8), simple(TypeCode.UINT8)
    ref = ValueRef(SqlType.map(k, v), {ValueRef(k, 1): ValueRef(v, 2)})
    assert str(ref) == "[1-2]"


@pytest.mark.parametrize("code", INT_CODES)
def test_value_from_ref_ints(code):
    assert ValueRef(simple(code), 42).to_value() == Value(simple(code), 42)


@pytest.mark.parametrize("code", FLOAT_CODES)
def test_value_from_ref_floats(code):
    assert ValueRef(simple(code), 42.0).to_value() == Value(simple(code), 42.0)


def test_value_from_ref_dates():
    assert ValueRef(simple(TypeCode.DATE), (42, "Zulu")).to_value() == Value(
        simple(TypeCode.DATE), (42, "Zulu")
    )
    assert ValueRef(SqlType.datetime(), (42, "Zulu")).to_value() == Value(
        SqlType.datetime(), (42, "Zulu")
    )


def test_value_from_ref_decimal():
    t = SqlType.decimal(18, 4)
    assert ValueRef(t, Decimal.of(2.0, 4)).to_value() == Value(t, Decimal.of(2.0, 4))


def test_value_from_ref_array():
    t = simple(TypeCode.INT32)
    expected = Value(SqlType.array(t), tuple(Value(t, n) for n in (1, 2, 3)))
    assert int32_array_ref().to_value() == expected


def test_uuid_display():
    parsed = uuid.UUID("936da01f-9abd-4d9d-80c7-02af85c822a8")
    ref = ValueRef(simple(TypeCode.UUID), uuid_to_wire(parsed))
    assert str(ref) == "936da01f-9abd-4d9d-80c7-02af85c822a8"


def test_get_sql_type():
    for code in INT_CODES:
        assert ValueRef.of(42, simple(code)).sql_type == simple(code)
    for code in FLOAT_CODES:
        assert ValueRef.of(42.0, simple(code)).sql_type == simple(code)
    assert ValueRef.of(b"").sql_type == simple(TypeCode.STRING)
    assert ValueRef(simple(TypeCode.DATE), (42, "Zulu")).sql_type == simple(TypeCode.DATE)
    assert ValueRef.of(42, SqlType.datetime()).sql_type == SqlType.datetime(
        DateTimeType.datetime32()
    )
    assert ValueRef.of(Decimal.of(2.0, 4)).sql_type == SqlType.decimal(18, 4)
    assert int32_array_ref().sql_type == SqlType.array(simple(TypeCode.INT32))
    assert ValueRef.of(None, SqlType.nullable(simple(TypeCode.UINT8))).sql_type == SqlType.nullable(
        simple(TypeCode.UINT8)
    )
    assert ValueRef.of(42, SqlType.nullable(simple(TypeCode.INT8))).sql_type == SqlType.nullable(
        simple(TypeCode.INT8)
    )


def test_as_str_and_bytes():
    ref = ValueRef(simple(TypeCode.STRING), b"text")
    assert ref.as_str() == "text"
    assert ref.as_string() == "text"
    assert ref.as_bytes() == b"text"


def test_as_str_wrong_type():
    with pytest.raises(FromSqlError) as info:
        ValueRef(simple(TypeCode.UINT16), 42).as_str()
    assert str(info.value) == "From SQL error: `SqlType::UInt16 cannot be cast to str.`"


def test_as_bytes_wrong_type():
    with pytest.raises(FromSqlError):
        ValueRef(simple(TypeCode.INT32), 1).as_bytes()


def test_as_str_invalid_utf8():
    with pytest.raises(UnicodeDecodeError):
        ValueRef(simple(TypeCode.STRING), bytes([0, 159, 146, 150])).as_str()


def test_as_date_and_datetime():
    date_ref = ValueRef(simple(TypeCode.DATE), (1, "UTC"))
    assert date_ref.as_date().isoformat() == "1970-01-02"
    dt_ref = ValueRef(SqlType.datetime(), (60, "UTC"))
    assert dt_ref.as_datetime().isoformat() == "1970-01-01T00:01:00+00:00"
    with pytest.raises(FromSqlError):
        dt_ref.as_date()


def test_datetime64_equality_across_precisions():
    a = ValueRef(SqlType.datetime(DateTimeType.datetime64(0, "UTC")), 1)
    b = ValueRef(SqlType.datetime(DateTimeType.datetime64(3, "UTC")), 1000)
    assert a == b


def test_inequality_of_different_types():
    assert ValueRef(simple(TypeCode.UINT8), 1) != ValueRef(simple(TypeCode.UINT16), 1)


def test_hash_and_unhashable():
    ref = ValueRef(simple(TypeCode.STRING), b"k")
    assert {ref: 1}[ValueRef(simple(TypeCode.STRING), b"k")] == 1
    with pytest.raises(TypeError):
        hash(ValueRef(simple(TypeCode.FLOAT64), 1.0))


def test_round_trip_map():
    value = Value.of({"a": 1})
    ref = ValueRef.from_value(value)
    assert ref.to_value() == value
    assert ref == ValueRef.from_value(value)


def test_from_value_chrono_datetime_rejected():
    from datetime import datetime, timedelta, timezone

    moment = datetime(2019, 1, 1, tzinfo=timezone(timedelta(hours=3)))
    with pytest.raises(ConversionError):
        ValueRef.from_value(Value.of(moment))


def test_of_datetime_uses_datetime32():
    from datetime import datetime, timezone

    ref = ValueRef.of(datetime(1970, 1, 1, 0, 0, 5, tzinfo=timezone.utc))
    assert str(ref) == "1970-01-01 00:00:05"