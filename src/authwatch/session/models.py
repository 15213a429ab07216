"""Session data models — parsed log events, open sessions and end outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SessionStart:
    """An accepted SSH authentication (``Accepted ... for USER from IP``)."""

    pid: int
    raw_timestamp: str
    user: str
    source_address: str


@dataclass(frozen=True)
class SessionEnd:
    """A PAM session closure (``session closed for user USER``)."""

    pid: int
    raw_timestamp: str
    user: str


@dataclass
class SessionRecord:
    """An open SSH login awaiting its closure."""

    pid: int
    user: str
    source_address: str
    raw_timestamp: str
    start_instant: datetime | None = None


@dataclass(frozen=True)
class Matched:
    """An end event correlated with a recorded start."""

    pid: int
    user: str
    source_address: str
    raw_timestamp: str
    duration_seconds: int | None


@dataclass(frozen=True)
class Unmatched:
    """An end event with no recorded start."""

    pid: int
    user: str
    raw_timestamp: str


@dataclass
class MonitorStats:
    """Counters collected by the monitor loop."""

    lines: int = 0
    starts: int = 0
    matched: int = 0
    unmatched: int = 0
    timestamp_errors: int = 0
    write_errors: int = 0
    started_at: datetime | None = None
    stopped_at: datetime | None = None
