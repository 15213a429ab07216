"""Tests for auth log line classification."""

from __future__ import annotations

from authwatch.parse.classifier import (
    classify_line,
    extract_pid,
    raw_timestamp,
    token_after,
)
from authwatch.session.models import SessionEnd, SessionStart

ACCEPTED = "Apr  4 10:06:54 srv sshd[12345]: Accepted password for usuario from 10.1.2.3 port 22 ssh2"
CLOSED = "Apr  4 11:00:00 srv sshd[12345]: pam_unix(sshd:session): session closed for user usuario"


def test_start_line_extracts_fields():
    events = classify_line(ACCEPTED)
    assert events == [
        SessionStart(
            pid=12345,
            raw_timestamp="Apr 4 10:06:54",
            user="usuario",
            source_address="10.1.2.3",
        )
    ]


def test_publickey_start():
    line = "Apr 14 08:00:01 host sshd[77]: Accepted publickey for deploy from 2001:db8::1 port 50022 ssh2: RSA SHA256:xyz"
    (event,) = classify_line(line)
    assert isinstance(event, SessionStart)
    assert event.user == "deploy"
    assert event.source_address == "2001:db8::1"
    assert event.raw_timestamp == "Apr 14 08:00:01"


def test_end_line_extracts_user():
    events = classify_line(CLOSED)
    assert events == [
        SessionEnd(pid=12345, raw_timestamp="Apr 4 11:00:00", user="usuario")
    ]


def test_line_without_pid_is_ignored():
    line = "Apr  4 10:06:54 srv CRON[90]: pam_unix(cron:session): session closed for user root"
    assert classify_line(line) == []


def test_accepted_without_sshd_pid_is_ignored():
    line = "Apr  4 10:06:54 srv sshd: Accepted password for alice from 10.0.0.5 port 22 ssh2"
    assert classify_line(line) == []


def test_irrelevant_sshd_line():
    line = "Apr  4 10:01:12 srv sshd[150]: Failed password for invalid user admin from 203.0.113.9 port 51000 ssh2"
    assert classify_line(line) == []


def test_both_markers_yield_both_events_start_first():
    line = (
        "Apr  4 10:00:00 srv sshd[9]: Accepted password for eve from 1.2.3.4 "
        "port 22 ssh2 session closed for user eve"
    )
    events = classify_line(line)
    assert [type(e) for e in events] == [SessionStart, SessionEnd]
    assert all(e.pid == 9 for e in events)


def test_missing_tokens_are_empty_strings():
    line = "Apr  4 10:00:00 srv sshd[9]: Accepted"
    (event,) = classify_line(line)
    assert event.user == ""
    assert event.source_address == ""


class TestHelpers:
    def test_extract_pid(self):
        assert extract_pid("x sshd[42]: y") == 42
        assert extract_pid("x sshd[]: y") is None
        assert extract_pid("no pid here") is None

    def test_raw_timestamp_collapses_spaces(self):
        assert raw_timestamp("Apr  4 10:06:54 srv x") == "Apr 4 10:06:54"

    def test_token_after_first_occurrence(self):
        assert token_after("for a for b", "for ") == "a"
        assert token_after("nothing", "for ") == ""
        assert token_after("ends with for ", "for ") == ""
