"""Reporting period bounds: All, trailing 1M / 3M, and a custom calendar month."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from journal.config import settings
from journal.services.errors import ValidationError
from journal.utils.constants import PERIOD_FILTERS, ROLLING_PERIOD_MONTHS


@dataclass(frozen=True)
class Period:
    name: str
    start: datetime | None = None  # inclusive; None = unbounded
    end: datetime | None = None  # inclusive; None = unbounded

    def contains(self, moment: datetime) -> bool:
        moment = as_utc(moment)
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes (as SQLite returns them) as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _local_zone() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def _start_of_day(day, tz) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def _end_of_day(day, tz) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)


def _shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` back by ``months``, clamping the day to the month length."""
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def month_range(month: int, year: int) -> tuple[datetime, datetime]:
    """First and last instant of a calendar month in the configured timezone."""
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}")
    tz = _local_zone()
    last_day = calendar.monthrange(year, month)[1]
    first = date(year, month, 1)
    last = date(year, month, last_day)
    return _start_of_day(first, tz), _end_of_day(last, tz)


def resolve_period(
    name: str,
    month: int | None = None,
    year: int | None = None,
    now: datetime | None = None,
) -> Period:
    """Turn a period filter selection into concrete inclusive bounds."""
    if name not in PERIOD_FILTERS:
        allowed = ", ".join(PERIOD_FILTERS)
        raise ValidationError(f"period must be one of: {allowed}")

    tz = _local_zone()
    now = as_utc(now).astimezone(tz) if now else datetime.now(tz)

    if name == "All":
        return Period(name=name)

    if name == "Custom":
        month = month if month is not None else now.month
        year = year if year is not None else now.year
        start, end = month_range(month, year)
        return Period(name=name, start=start, end=end)

    months_back = ROLLING_PERIOD_MONTHS[name]
    start = _start_of_day(_shift_months(now, months_back).date(), tz)
    end = _end_of_day(now.date(), tz)
    return Period(name=name, start=start, end=end)


def local_midnight(day: date) -> datetime:
    """00:00 of ``day`` in the configured timezone, expressed in UTC."""
    return _start_of_day(day, _local_zone()).astimezone(timezone.utc)


def to_local(moment: datetime) -> datetime:
    return as_utc(moment).astimezone(_local_zone())
