from __future__ import annotations

import time
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Render a datetime as a UTC ISO string with milliseconds and a ``Z`` suffix.

    Naive datetimes are taken as UTC. The fixed width keeps lexicographic
    order equal to chronological order, which the itinerary query relies on.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_iso() -> str:
    return to_iso(utc_now())


def current_month_year() -> str:
    """Billing period (``YYYY-MM``) of the local calendar date."""
    today = date.today()
    return f"{today.year}-{today.month:02d}"


def _epoch_ms() -> int:
    return time.time_ns() // 1_000_000


def new_student_id() -> str:
    return f"s{_epoch_ms()}"


def new_itinerary_id() -> str:
    return f"it{_epoch_ms()}"
