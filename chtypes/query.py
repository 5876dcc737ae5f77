"""An SQL statement with an optional query identifier."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable


@dataclass(frozen=True)
class Query:
    """SQL text and the id the server tracks it by."""

    sql: str
    query_id: str = ""

    def with_id(self, query_id: str) -> Query:
        """A copy of this query carrying ``query_id``."""
        return replace(self, query_id=str(query_id))

    def map_sql(self, func: Callable[[str], str]) -> Query:
        """A copy of this query with its SQL passed through ``func``."""
        return replace(self, sql=func(self.sql))