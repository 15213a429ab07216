"""Session tracker — correlates start and end events by sshd process id."""

from __future__ import annotations

import logging
from datetime import datetime

from authwatch.session.models import Matched, SessionRecord, Unmatched

logger = logging.getLogger(__name__)


class SessionTracker:
    """Keeps open sessions keyed by pid in a mapping owned by the caller.

    A start for a pid that is already open replaces the stored record.
    """

    def __init__(self, sessions: dict[int, SessionRecord] | None = None) -> None:
        self._sessions = sessions if sessions is not None else {}

    @property
    def sessions(self) -> dict[int, SessionRecord]:
        return self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, pid: object) -> bool:
        return pid in self._sessions

    def on_start(self, pid: int, record: SessionRecord) -> None:
        if pid in self._sessions:
            logger.debug("Replacing open session for pid %d", pid)
        self._sessions[pid] = record

    def on_end(
        self,
        pid: int,
        end_instant: datetime | None,
        raw_timestamp: str,
        user: str,
    ) -> Matched | Unmatched:
        """Close the session for ``pid``.

        ``user`` is the name parsed from the end line and is only used when
        no start was recorded for the pid.
        """
        record = self._sessions.pop(pid, None)
        if record is None:
            return Unmatched(pid=pid, user=user, raw_timestamp=raw_timestamp)

        return Matched(
            pid=pid,
            user=record.user,
            source_address=record.source_address,
            raw_timestamp=raw_timestamp,
            duration_seconds=elapsed_seconds(record.start_instant, end_instant),
        )


def elapsed_seconds(start: datetime | None, end: datetime | None) -> int | None:
    """Whole elapsed seconds between two instants; may be negative."""
    if start is None or end is None:
        return None
    # Epoch arithmetic so DST transitions count as real elapsed time.
    return int(end.timestamp() - start.timestamp())


def format_duration(seconds: int) -> str:
    """Render seconds as ``{h}h:{m}m:{s}s`` without day normalisation.

    Negative values truncate toward zero per component: -330 -> ``0h:-5m:-30s``.
    """
    sign = -1 if seconds < 0 else 1
    total = abs(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    return f"{sign * hours}h:{sign * minutes}m:{sign * secs}s"
