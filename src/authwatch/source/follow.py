"""File followers — ``tail -F`` style live reading and one-shot replay."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)


def _inode(path: Path) -> int | None:
    try:
        return os.stat(path).st_ino
    except FileNotFoundError:
        return None


class FileFollower:
    """Yields lines appended to a file, surviving rotation and truncation.

    Starts at the end of the file unless ``from_end`` is False. When the file
    is replaced (new inode) it is reopened from the beginning; when it shrinks
    reading restarts at offset 0. Iteration ends once ``stop()`` is called.
    """

    def __init__(
        self,
        path: str | Path,
        poll_interval: float = 0.2,
        from_end: bool = True,
    ) -> None:
        self._path = Path(path)
        self._poll_interval = poll_interval
        self._from_end = from_end
        self._stop_event = threading.Event()

    @property
    def path(self) -> Path:
        return self._path

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def __iter__(self) -> Iterator[str]:
        handle: TextIO | None = None
        inode: int | None = None
        seek_end = self._from_end
        partial = ""

        try:
            while not self._stop_event.is_set():
                if handle is None:
                    handle, inode = self._open(seek_end)
                    # Only the file present at startup is skipped to its end.
                    seek_end = False
                    if handle is None:
                        self._stop_event.wait(self._poll_interval)
                        continue

                chunk = handle.readline()
                if chunk:
                    if not chunk.endswith("\n"):
                        # Writer is mid-line; keep it until the rest arrives.
                        partial += chunk
                        continue
                    yield (partial + chunk).rstrip("\r\n")
                    partial = ""
                    continue

                if self._rotated(handle, inode):
                    handle.close()
                    handle = None
                    partial = ""
                    continue

                self._stop_event.wait(self._poll_interval)
        finally:
            if handle is not None:
                handle.close()

    def _open(self, seek_end: bool) -> tuple[TextIO | None, int | None]:
        try:
            handle = open(self._path, encoding="utf-8", errors="replace")
        except FileNotFoundError:
            logger.debug("Waiting for %s to appear", self._path)
            return None, None
        if seek_end:
            handle.seek(0, os.SEEK_END)
        logger.debug("Following %s", self._path)
        return handle, _inode(self._path)

    def _rotated(self, handle: TextIO, inode: int | None) -> bool:
        current = _inode(self._path)
        if current is not None and inode is not None and current != inode:
            logger.info("%s was replaced, reopening", self._path)
            return True
        try:
            size = os.stat(self._path).st_size
        except FileNotFoundError:
            return False
        if size < handle.tell():
            logger.info("%s was truncated, reading from start", self._path)
            handle.seek(0)
        return False


def read_lines(path: str | Path) -> Iterator[str]:
    """Yield every line of an existing file once, without trailing newlines."""
    with open(path, encoding="utf-8", errors="replace") as handle:
        for line in handle:
            yield line.rstrip("\r\n")
