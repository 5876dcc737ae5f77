"""Server progress, profile and identity records."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Progress:
    """Progress of a running query as reported by the server."""

    rows: int = 0
    bytes: int = 0
    total_rows: int = 0


@dataclass(frozen=True)
class ProfileInfo:
    """Profiling counters sent at the end of a query."""

    rows: int = 0
    bytes: int = 0
    blocks: int = 0
    applied_limit: bool = False
    rows_before_limit: int = 0
    calculated_rows_before_limit: bool = False


@dataclass(frozen=True)
class ServerInfo:
    """Name, version and time zone of the server."""

    name: str = ""
    revision: int = 0
    minor_version: int = 0
    major_version: int = 0
    timezone: str = "Zulu"

    def __str__(self) -> str:
        return (
            f"{self.name} {self.major_version}.{self.minor_version}."
            f"{self.revision} ({self.timezone})"
        )