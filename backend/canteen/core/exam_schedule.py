"""Exam Schedule Windows — date ranges used to list upcoming exams.

Invariants:
    - "Active" exams start from midnight of the current day (inclusive)
    - The next-24-hours window runs to the last microsecond of the day after `now`
    - Callers pass `now`; nothing here reads the clock
"""

from datetime import datetime, time, timedelta


def start_of_day(now: datetime) -> datetime:
    return datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)


def next_24_hours_window(now: datetime) -> tuple[datetime, datetime]:
    """(start of today, end of the day containing now + 24h)."""
    later = now + timedelta(hours=24)
    return (
        start_of_day(now),
        datetime.combine(later.date(), time.max, tzinfo=now.tzinfo),
    )
