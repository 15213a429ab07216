"""Login monitor — drives lines through classification, tracking and output."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path

from authwatch.output import messages
from authwatch.output.writer import LogWriteError, MonthlyLogWriter
from authwatch.parse.classifier import classify_line
from authwatch.parse.timestamps import TimestampParseError, TimestampResolver
from authwatch.session.models import (
    Matched,
    MonitorStats,
    SessionEnd,
    SessionRecord,
    SessionStart,
    Unmatched,
)
from authwatch.session.tracker import SessionTracker

logger = logging.getLogger(__name__)


class LoginMonitor:
    """Consumes auth log lines in arrival order and records SSH sessions.

    Every rendered message goes to ``on_message`` (the live console) and to
    the monthly activity log. Sessions still open when the loop ends are
    dropped without being reported.
    """

    def __init__(
        self,
        source: Iterable[str],
        writer: MonthlyLogWriter,
        resolver: TimestampResolver,
        tracker: SessionTracker | None = None,
        clock: Callable[[], datetime] | None = None,
        on_message: Callable[[str], None] | None = None,
    ) -> None:
        self._source = source
        self._writer = writer
        self._resolver = resolver
        self._tracker = tracker if tracker is not None else SessionTracker()
        self._clock = clock or (lambda: datetime.now(resolver.tz))
        self._on_message = on_message
        self._stop_event = threading.Event()
        self._stats = MonitorStats()

    @property
    def stats(self) -> MonitorStats:
        return self._stats

    @property
    def tracker(self) -> SessionTracker:
        return self._tracker

    @property
    def open_sessions(self) -> int:
        return len(self._tracker)

    @property
    def output_path(self) -> Path:
        return self._writer.path

    def stop(self) -> None:
        """Signal the loop to stop; safe to call from a signal handler."""
        self._stop_event.set()
        stop_source = getattr(self._source, "stop", None)
        if callable(stop_source):
            stop_source()

    def run(self) -> Path:
        """Blocking consume→classify→track→write loop until stop or EOF."""
        self._stop_event.clear()
        self._stats.started_at = self._clock()

        try:
            self._write_marker(self._writer.write_startup_marker)
            logger.info("Monitor started, writing to %s", self._writer.path)

            for line in self._source:
                if self._stop_event.is_set():
                    break
                self.process_line(line)
        finally:
            self._stats.stopped_at = self._clock()
            if len(self._tracker):
                logger.info("Abandoning %d open session(s)", len(self._tracker))
            # close() releases the handle even when the shutdown marker fails.
            self._write_marker(self._writer.close)

        return self._writer.path

    def process_line(self, line: str) -> list[str]:
        """Handle one line; returns the messages it produced."""
        self._stats.lines += 1
        produced: list[str] = []

        for event in classify_line(line):
            if isinstance(event, SessionStart):
                message = self._handle_start(event)
            else:
                message = self._handle_end(event)
            self._dispatch(message)
            produced.append(message)

        return produced

    def _handle_start(self, event: SessionStart) -> str:
        self._tracker.on_start(
            event.pid,
            SessionRecord(
                pid=event.pid,
                user=event.user,
                source_address=event.source_address,
                raw_timestamp=event.raw_timestamp,
                start_instant=self._resolve(event.raw_timestamp),
            ),
        )
        self._stats.starts += 1
        logger.debug("Session start pid=%d user=%s", event.pid, event.user)
        return messages.start_line(self._clock(), event)

    def _handle_end(self, event: SessionEnd) -> str:
        outcome = self._tracker.on_end(
            event.pid,
            self._resolve(event.raw_timestamp),
            event.raw_timestamp,
            event.user,
        )
        if isinstance(outcome, Matched):
            self._stats.matched += 1
            if outcome.duration_seconds is None:
                logger.warning(
                    "Duration unavailable for pid %d (unparseable timestamp)",
                    outcome.pid,
                )
        elif isinstance(outcome, Unmatched):
            self._stats.unmatched += 1
            logger.debug("Session end without start pid=%d", event.pid)
        return messages.end_line(self._clock(), outcome)

    def _resolve(self, raw: str) -> datetime | None:
        try:
            return self._resolver.resolve(raw)
        except TimestampParseError as exc:
            self._stats.timestamp_errors += 1
            logger.warning("%s", exc)
            return None

    def _write_marker(self, write: Callable[[], object]) -> None:
        try:
            write()
        except LogWriteError:
            self._stats.write_errors += 1
            logger.exception("Could not write marker to %s", self._writer.path)

    def _dispatch(self, message: str) -> None:
        try:
            self._writer.append(message)
        except LogWriteError:
            self._stats.write_errors += 1
            logger.exception("Dropped activity line: %s", message)
        if self._on_message:
            try:
                self._on_message(message)
            except OSError:
                logger.warning("Console echo failed", exc_info=True)
