"""Timestamp resolver for year-less syslog timestamps (``Apr  4 10:06:54``).

Syslog lines carry no year, so the resolver assumes the clock's current year.
Sessions spanning New Year therefore resolve to the wrong year; keep that
assumption here so a smarter year inference can replace it later.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, tzinfo

_FORMAT = "%b %d %H:%M:%S %Y"


class TimestampParseError(ValueError):
    """Raised when a log timestamp cannot be parsed."""


class TimestampResolver:
    """Converts raw log timestamps into aware datetimes in a fixed zone."""

    def __init__(
        self,
        tz: tzinfo,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._tz = tz
        self._clock = clock or (lambda: datetime.now(tz))

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def resolve(self, raw: str) -> datetime:
        year = self._clock().year
        text = " ".join(raw.split())
        try:
            naive = datetime.strptime(f"{text} {year}", _FORMAT)
        except ValueError as exc:
            raise TimestampParseError(f"Unparseable log timestamp: {raw!r}") from exc
        return naive.replace(tzinfo=self._tz)
