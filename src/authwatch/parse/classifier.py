"""Line classifier — turns raw auth log lines into session start/end events."""

from __future__ import annotations

import re

from authwatch.session.models import SessionEnd, SessionStart

START_MARKER = "Accepted"
END_MARKER = "session closed for user"

_PID_RE = re.compile(r"sshd\[(\d+)\]")


def extract_pid(line: str) -> int | None:
    """Return the sshd process id embedded as ``sshd[<digits>]``, if any."""
    match = _PID_RE.search(line)
    if match is None:
        return None
    return int(match.group(1))


def raw_timestamp(line: str) -> str:
    """First three whitespace-separated fields: month, day, time."""
    return " ".join(line.split()[:3])


def token_after(line: str, prefix: str) -> str:
    """Token following the first occurrence of ``prefix``, or ``""``."""
    _, found, rest = line.partition(prefix)
    if not found:
        return ""
    parts = rest.split(maxsplit=1)
    return parts[0] if parts else ""


def classify_line(line: str) -> list[SessionStart | SessionEnd]:
    """Classify one auth log line.

    Returns an empty list for lines that are not relevant, including any line
    without an sshd process id. The start and end checks run independently, so
    a line carrying both markers yields both events (start first).
    """
    pid = extract_pid(line)
    if pid is None:
        return []

    events: list[SessionStart | SessionEnd] = []
    timestamp = raw_timestamp(line)

    if START_MARKER in line:
        events.append(
            SessionStart(
                pid=pid,
                raw_timestamp=timestamp,
                user=token_after(line, "for "),
                source_address=token_after(line, "from "),
            )
        )

    if END_MARKER in line:
        events.append(
            SessionEnd(
                pid=pid,
                raw_timestamp=timestamp,
                user=token_after(line, "for user "),
            )
        )

    return events
