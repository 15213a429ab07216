"""Monthly activity log writer with daily headers.

One file per calendar month (``loginlog_MM-YYYY.log``) in the output
directory. Every write first reconciles the active month and day against the
clock, so a long-running monitor rolls over to a new file when the month
changes and inserts a ``Día dd-mm-YYYY`` header once per day.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import TextIO

from authwatch.output import messages

logger = logging.getLogger(__name__)

FILE_PREFIX = "loginlog_"


class LogWriteError(OSError):
    """Raised when a line could not be written after all retries."""


def log_path(output_dir: Path, month: str) -> Path:
    return output_dir / f"{FILE_PREFIX}{month}.log"


class MonthlyLogWriter:
    """Owns the active output file and rotates it by calendar month."""

    def __init__(
        self,
        output_dir: str | Path,
        clock: Callable[[], datetime] | None = None,
        max_attempts: int = 3,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._output_dir = Path(output_dir)
        self._clock = clock or datetime.now
        self._max_attempts = max_attempts
        self._month_key = messages.month_key(self._clock())
        self._last_header_date = ""
        self._handle: TextIO | None = None
        self._rotation_pending = False
        self._closed = False

    @property
    def month_key(self) -> str:
        return self._month_key

    @property
    def last_header_date(self) -> str:
        return self._last_header_date

    @property
    def path(self) -> Path:
        return log_path(self._output_dir, self._month_key)

    def __enter__(self) -> MonthlyLogWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def reconcile(self) -> None:
        """Rotate on month change, then add the daily header if needed."""
        now = self._clock()
        self._reconcile_month(now)
        self._reconcile_day(now)

    def append(self, line: str) -> None:
        self.reconcile()
        self._write(line)

    def write_startup_marker(self) -> None:
        # The day header follows with the first event.
        now = self._clock()
        self._reconcile_month(now)
        self._write(messages.startup_marker(now))

    def close(self) -> Path:
        """Write the shutdown marker and release the file; returns its path."""
        if self._closed:
            return self.path
        try:
            self.reconcile()
            self._write(messages.shutdown_marker(self._clock()))
        finally:
            self._close_handle()
            self._closed = True
        logger.info("Activity log saved to %s", self.path)
        return self.path

    def _reconcile_month(self, now: datetime) -> None:
        month = messages.month_key(now)
        if month != self._month_key:
            logger.info("Month changed %s -> %s, rotating", self._month_key, month)
            self._close_handle()
            self._month_key = month
            self._last_header_date = ""
            self._rotation_pending = True
        # Stays pending until the marker is actually written.
        if self._rotation_pending:
            self._write(messages.rotation_marker(self._month_key))
            self._rotation_pending = False

    def _reconcile_day(self, now: datetime) -> None:
        day = messages.day_key(now)
        if day == self._last_header_date:
            return
        self._write(messages.day_header(day))
        self._last_header_date = day

    def _open(self) -> TextIO:
        if self._handle is None:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            self._handle = open(self.path, "a", encoding="utf-8")
        return self._handle

    def _close_handle(self) -> None:
        if self._handle is not None:
            try:
                self._handle.close()
            except OSError:
                logger.warning("Error closing %s", self.path, exc_info=True)
            self._handle = None

    def _write(self, text: str) -> None:
        last_exc: OSError | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                handle = self._open()
                handle.write(text + "\n")
                handle.flush()
                return
            except OSError as exc:
                last_exc = exc
                logger.warning(
                    "Write to %s failed (attempt %d/%d): %s",
                    self.path,
                    attempt,
                    self._max_attempts,
                    exc,
                )
                # Reopen on the next attempt.
                self._close_handle()
        raise LogWriteError(f"Could not write to {self.path}") from last_exc
