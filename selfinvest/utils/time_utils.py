"""
Date / time utility helpers.

All timestamps are parsed and serialised as ``"YYYY-MM-DD HH:mm:ss"``
(i.e. the Python format string ``"%Y-%m-%d %H:%M:%S"``).
"""

from __future__ import annotations

from datetime import datetime, timedelta

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_timestamp(raw: str) -> datetime:
    if not isinstance(raw, str):
        raise ValueError(
            f"Invalid timestamp {raw!r}. Expected format: YYYY-MM-DD HH:mm:ss"
        )
    try:
        return datetime.strptime(raw, TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise ValueError(
            f"Invalid timestamp {raw!r}. Expected format: YYYY-MM-DD HH:mm:ss"
        ) from exc


def parse_timestamp_lenient(raw: str) -> datetime:
    """
    Like :func:`parse_timestamp`, but a day past the end of the month rolls
    over into the next one (``"2023-11-31 23:59:59"`` → ``2023-12-01 23:59:59``).
    """
    # Fast path – valid date
    try:
        return parse_timestamp(raw)
    except ValueError:
        pass

    # Slow path – roll the day over from the first of the month
    try:
        date_part, time_part = raw.strip().split(" ", 1)
        y_str, m_str, d_str = date_part.split("-")
        day = int(d_str)
        if not 1 <= day <= 31:
            raise ValueError(f"day {day} out of range")
        first = datetime.strptime(f"{y_str}-{m_str}-01 {time_part}", TIMESTAMP_FORMAT)
        return first + timedelta(days=day - 1)
    except (ValueError, AttributeError) as exc:
        raise ValueError(
            f"Invalid timestamp {raw!r}. Expected format: YYYY-MM-DD HH:mm:ss"
        ) from exc


def format_timestamp(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT)


def is_within_range(dt: datetime, start: datetime, end: datetime) -> bool:
    return start <= dt <= end


def format_elapsed(milliseconds: float) -> str:
    """Render a duration as ``HH:mm:ss.SSS``."""
    total_ms = max(int(milliseconds), 0)
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1_000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"
