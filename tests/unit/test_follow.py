"""Tests for file following and replay sources."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from authwatch.source.base import LineSource
from authwatch.source.follow import FileFollower, read_lines


def _collect(follower: FileFollower, count: int, timeout: float = 5.0) -> list[str]:
    """Gather ``count`` lines from ``follower`` on a worker thread."""
    lines: list[str] = []
    done = threading.Event()

    def worker():
        for line in follower:
            lines.append(line)
            if len(lines) >= count:
                break
        done.set()

    t = threading.Thread(target=worker, daemon=True)
    t.start()
    done.wait(timeout)
    follower.stop()
    t.join(timeout)
    return lines


def test_follower_satisfies_protocol(tmp_path: Path):
    assert isinstance(FileFollower(tmp_path / "x.log"), LineSource)


def test_from_start_reads_existing_lines(tmp_path: Path):
    log = tmp_path / "auth.log"
    log.write_text("one\ntwo\n", encoding="utf-8")
    follower = FileFollower(log, poll_interval=0.01, from_end=False)
    assert _collect(follower, 2) == ["one", "two"]


def test_from_end_only_yields_new_lines(tmp_path: Path):
    log = tmp_path / "auth.log"
    log.write_text("old\n", encoding="utf-8")
    follower = FileFollower(log, poll_interval=0.01)

    lines: list[str] = []

    def worker():
        for line in follower:
            lines.append(line)

    t = threading.Thread(target=worker, daemon=True)
    t.start()
    threading.Event().wait(0.1)
    with open(log, "a", encoding="utf-8") as fh:
        fh.write("new\n")
    for _ in range(200):
        if lines:
            break
        threading.Event().wait(0.01)
    follower.stop()
    t.join(5)

    assert lines == ["new"]


def test_partial_line_is_held_until_complete(tmp_path: Path):
    log = tmp_path / "auth.log"
    log.write_text("half", encoding="utf-8")
    follower = FileFollower(log, poll_interval=0.01, from_end=False)

    lines: list[str] = []

    def worker():
        for line in follower:
            lines.append(line)

    t = threading.Thread(target=worker, daemon=True)
    t.start()
    threading.Event().wait(0.05)
    assert lines == []
    with open(log, "a", encoding="utf-8") as fh:
        fh.write(" done\n")
    for _ in range(200):
        if lines:
            break
        threading.Event().wait(0.01)
    follower.stop()
    t.join(5)

    assert lines == ["half done"]


def test_waits_for_missing_file(tmp_path: Path):
    log = tmp_path / "later.log"
    follower = FileFollower(log, poll_interval=0.01)

    def create():
        log.write_text("appeared\n", encoding="utf-8")

    timer = threading.Timer(0.05, create)
    timer.start()
    lines = _collect(follower, 1)
    timer.join()

    assert lines == ["appeared"]


def test_reopens_after_rotation(tmp_path: Path):
    log = tmp_path / "auth.log"
    log.write_text("before\n", encoding="utf-8")
    follower = FileFollower(log, poll_interval=0.01, from_end=False)

    lines: list[str] = []

    def worker():
        for line in follower:
            lines.append(line)

    t = threading.Thread(target=worker, daemon=True)
    t.start()
    for _ in range(200):
        if lines:
            break
        threading.Event().wait(0.01)

    os.rename(log, tmp_path / "auth.log.1")
    log.write_text("after\n", encoding="utf-8")
    for _ in range(300):
        if len(lines) >= 2:
            break
        threading.Event().wait(0.01)
    follower.stop()
    t.join(5)

    assert lines == ["before", "after"]


def test_stop_before_iteration_yields_nothing(tmp_path: Path):
    log = tmp_path / "auth.log"
    log.write_text("line\n", encoding="utf-8")
    follower = FileFollower(log, from_end=False)
    follower.stop()
    assert follower.stopped
    assert list(follower) == []


def test_read_lines_strips_newlines(tmp_path: Path):
    log = tmp_path / "auth.log"
    log.write_bytes(b"a\r\nb\n\xffc\n")
    assert list(read_lines(log)) == ["a", "b", "\ufffdc"]
