# src/taskflow/core/clock.py

"""Timestamp helpers: stored timestamps are UTC ISO-8601 with milliseconds and a trailing Z."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone

Clock = Callable[[], datetime]

_ONE_MS = timedelta(milliseconds=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_now() -> datetime:
    """Wall-clock time in the local zone (tz-aware)."""
    return datetime.now().astimezone()


def local_day(dt: datetime) -> date:
    """Local calendar date of an aware timestamp."""
    return dt.astimezone().date()


def to_iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(raw: object) -> datetime | None:
    """Parse a stored timestamp; naive values are taken as UTC. Returns None on garbage."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    s = raw.strip()
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_day(raw: object) -> date | None:
    """
    Calendar date of a due date / timestamp string.

    The date part is read as written: "2024-03-15T23:30:00-05:00" is
    March 15, not converted to UTC first.
    """
    if not isinstance(raw, str) or len(raw.strip()) < 10:
        return None
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


def next_timestamp(now: datetime, previous: object) -> datetime:
    """Return `now`, bumped past `previous` when the clock has not moved on."""
    # Compare at storage precision, otherwise two timestamps can differ only below 1 ms.
    now = now.replace(microsecond=now.microsecond - now.microsecond % 1000)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    prev = parse_iso(previous)
    if prev is not None and now <= prev:
        return prev + _ONE_MS
    return now
