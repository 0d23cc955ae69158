from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from momentum.models.enums import Weekday


WEEKDAY_NAMES: tuple[str, ...] = tuple(day.value for day in Weekday)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_today(tz_name: str, now: datetime | None = None) -> date:
    """Calendar date of ``now`` (default: current instant) in the given IANA zone."""
    now = now or utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(tz_name)).date()


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def time_to_minutes(value: time | str) -> int:
    if isinstance(value, str):
        hours, minutes = (int(part) for part in value.split(":")[:2])
        return hours * 60 + minutes
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def end_minutes(start: time | str, duration: int) -> int:
    # Not wrapped at midnight: a 23:30 + 60 task ends at minute 1470 of its day.
    return time_to_minutes(start) + duration


def days_between(earlier: date, later: date) -> int:
    return (later - earlier).days


def previous_day(day: date) -> date:
    return day - timedelta(days=1)


def date_range(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def week_start(day: date, first_day_of_week: str = "Monday") -> date:
    if first_day_of_week == "Sunday":
        return day - timedelta(days=(day.weekday() + 1) % 7)
    return day - timedelta(days=day.weekday())


def week_dates(day: date, first_day_of_week: str = "Monday") -> list[date]:
    start = week_start(day, first_day_of_week)
    return [start + timedelta(days=offset) for offset in range(7)]


def same_month(a: date | datetime, b: date | datetime) -> bool:
    return (a.year, a.month) == (b.year, b.month)


def parse_iso_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)
