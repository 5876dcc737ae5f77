"""Column types, values and conversions for the ClickHouse native protocol."""

__version__ = "1.0.0a1"

__all__ = [
    "decimals",
    "enums",
    "from_sql",
    "info",
    "marshal",
    "query",
    "sql_type",
    "value",
    "value_ref",
]