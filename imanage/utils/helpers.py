# utils/helpers.py
from __future__ import annotations

import calendar
from datetime import date, datetime, timezone
import uuid


def today_str() -> str:
    """Return today's date as ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()


def utc_now_iso() -> str:
    """Timestamp stamped on created_at / updated_at columns."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_id() -> str:
    return str(uuid.uuid4())


def blank_to_none(value):
    """'' and whitespace-only strings become None; everything else is returned unchanged."""
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def normalize_month(value: str | None, fallback_date: str | None = None) -> str:
    """
    Zero-pad a month key to YYYY-MM ("2025-3" -> "2025-03").

    Falls back to the first 7 characters of `fallback_date` when `value` is
    missing or not in year-month form.
    """
    if value:
        parts = str(value).strip().split("-")
        if len(parts) >= 2 and parts[0].isdigit() and parts[1].isdigit():
            return f"{int(parts[0]):04d}-{int(parts[1]):02d}"
    if fallback_date:
        return str(fallback_date)[:7]
    return ""


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by `delta` months, e.g. (2025, 1, -1) -> (2024, 12)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def trailing_months(today: date, count: int = 12) -> list[str]:
    """The `count` calendar months ending with today's month, oldest first."""
    keys = []
    for delta in range(count - 1, -1, -1):
        y, m = shift_month(today.year, today.month, -delta)
        keys.append(month_key(y, m))
    return keys


def next_document_number(pattern: str, on_date: date, sequence: int) -> str:
    """
    Expand a numbering pattern such as 'AAT-YYYYMMDD-NNNN'.

    YYYY, MM and DD take the date parts; NNNN is the zero-padded sequence.
    A pattern without NNNN gets "-NNNN" appended so numbers stay distinct.
    """
    if "NNNN" not in pattern:
        pattern = f"{pattern}-NNNN"
    return (
        pattern.replace("YYYY", f"{on_date.year:04d}")
        .replace("MM", f"{on_date.month:02d}")
        .replace("DD", f"{on_date.day:02d}")
        .replace("NNNN", f"{sequence:04d}")
    )


def months_before(today: date, months: int) -> date:
    """Same day `months` calendar months earlier, clamped to the month's last day."""
    y, m = shift_month(today.year, today.month, -months)
    return date(y, m, min(today.day, calendar.monthrange(y, m)[1]))
