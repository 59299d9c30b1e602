# tests/helpers.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def iso_from_now(seconds: float) -> str:
    """ISO-строка с зоной UTC, сдвинутая на seconds от текущего момента"""
    return (datetime.now(timezone.utc) + timedelta(seconds=seconds)).isoformat()


def utc_from_now(seconds: float) -> datetime:
    """naive UTC, как значения хранятся в таблице"""
    return (datetime.now(timezone.utc) + timedelta(seconds=seconds)).replace(tzinfo=None)
