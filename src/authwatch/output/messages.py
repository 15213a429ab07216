"""Activity log line formats."""

from __future__ import annotations

from datetime import datetime

from authwatch.session.models import Matched, SessionStart, Unmatched
from authwatch.session.tracker import format_duration

STAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
MONTH_FORMAT = "%m-%Y"
DAY_FORMAT = "%d-%m-%Y"

UNKNOWN_DURATION = "?"


def stamp(now: datetime) -> str:
    return now.strftime(STAMP_FORMAT)


def month_key(now: datetime) -> str:
    return now.strftime(MONTH_FORMAT)


def day_key(now: datetime) -> str:
    return now.strftime(DAY_FORMAT)


def start_line(now: datetime, event: SessionStart) -> str:
    return (
        f"[{stamp(now)}] NUEVA CONEXION -> Usuario: {event.user}, "
        f"IP: {event.source_address}, Hora Log: {event.raw_timestamp}"
    )


def end_line(now: datetime, outcome: Matched | Unmatched) -> str:
    if isinstance(outcome, Unmatched):
        return (
            f"[{stamp(now)}] DESCONEXION -> Usuario: {outcome.user} "
            f"(SIN REGISTRO PREVIO), Hora Log: {outcome.raw_timestamp}"
        )

    if outcome.duration_seconds is None:
        duration = UNKNOWN_DURATION
    else:
        duration = format_duration(outcome.duration_seconds)
    return (
        f"[{stamp(now)}] DESCONEXION -> Usuario: {outcome.user}, "
        f"IP: {outcome.source_address}, Hora Log: {outcome.raw_timestamp}, "
        f"Duración: {duration}"
    )


def startup_marker(now: datetime) -> str:
    return f"=== Iniciando monitor de auth.log: {stamp(now)} ==="


def shutdown_marker(now: datetime) -> str:
    return f"\nMonitor finalizado: {stamp(now)}"


def rotation_marker(month: str) -> str:
    return f"Creado nuevo archivo de log para el mes: {month}"


def day_header(day: str) -> str:
    return f"\nDía {day}"
