# chtypes

The value and type model for talking to ClickHouse over its native
protocol: SQL column types, client-side values, decimals, enums and
query descriptions. It also has the little-endian encoding of fixed-width
scalars and the conversion of column values into plain Python objects.

It uses only the standard library.

## Installation

```
pip install chtypes
```

For running the test suite:

```
pip install "chtypes[test]"
pytest
```

## Overview

| Module              | What it holds                                                        |
|---------------------|----------------------------------------------------------------------|
| `chtypes.sql_type`  | `SqlType`, `TypeCode`, `DateTimeType`, `DateTimeKind`, `SimpleAggFunc` |
| `chtypes.marshal`   | `Scalar`, `marshal`, `unmarshal` for fixed-width values              |
| `chtypes.decimals`  | `Decimal` with a fixed scale, `NoBits`                               |
| `chtypes.enums`     | `Enum8`, `Enum16`                                                    |
| `chtypes.query`     | `Query`: SQL text plus an optional query id                          |
| `chtypes.info`      | `Progress`, `ProfileInfo`, `ServerInfo`                              |
| `chtypes.value`     | `Value`, `ConversionError`, and helpers for dates, IPs and UUIDs     |
| `chtypes.value_ref` | `ValueRef`, a value as read from a block, and `FromSqlError`         |
| `chtypes.from_sql`  | `from_sql` with the `Optional`, `ListOf` and `MapOf` targets         |

## Examples

SQL types render the way ClickHouse writes them:

```python
from chtypes.sql_type import SqlType, TypeCode

uint8 = SqlType.simple(TypeCode.UINT8)
print(SqlType.nullable(uint8))          # Nullable(UInt8)
print(SqlType.array(uint8).level())     # 1
```

Scalars are encoded in little-endian order:

```python
from chtypes.marshal import Scalar, marshal, unmarshal

data = marshal(Scalar.U16, 0x1234)      # b"\x34\x12"
assert unmarshal(Scalar.U16, data) == 0x1234
```

Decimals store an integer and a scale; equality compares across scales:

```python
from chtypes.decimals import Decimal

d = Decimal.of(2.1, 4)
print(d)                  # 2.1000
print(d.internal())       # 21000
assert Decimal.of(2.0, 4) == Decimal.of(2.0, 2)
```

Values carry their SQL type and turn back into Python objects:

```python
from chtypes.sql_type import SqlType, TypeCode
from chtypes.value import Value

print(Value.of(42))       # 42

null = Value.of(None, SqlType.nullable(SqlType.simple(TypeCode.UINT32)))
print(null)               # NULL
print(null.to_python())   # None
```

A `ValueRef` is the read-side view; with the `#` format spec some types
use an alternate form:

```python
from chtypes.value_ref import ValueRef

day = ValueRef(SqlType.simple(TypeCode.DATE), (0, "Zulu"))
print(f"{day}")           # 1970-01-01
print(f"{day:#}")         # 1970-01-01UTC
```

`from_sql` reads a value as a requested type:

```python
from chtypes.from_sql import Optional, from_sql
from chtypes.marshal import Scalar

u16 = Value.of(7, SqlType.simple(TypeCode.UINT16))
assert from_sql(u16, Scalar.U16) == 7
assert from_sql(null, Optional(Scalar.U32)) is None
```

Reading a value as a type that does not match its column type raises
`FromSqlError`, whose message names both types, for example
``From SQL error: `SqlType::UInt16 cannot be cast to u32.` ``.

Queries are immutable; `with_id` and `map_sql` return new queries:

```python
from chtypes.query import Query

q = Query("SELECT 1").with_id("report-1")
print(q.query_id)         # report-1
```

## What it does not do

This package is the type and value layer only. It opens no connections,
has no connection pool, does not send or receive protocol packets, and
has no blocks, columns or column-wise encoding; `Progress`, `ProfileInfo`
and `ServerInfo` are plain records for whatever code does that work.