"""Current moment in the configured time zone."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

from .config import settings

# Sunday first, matching the week boundaries used for the "week" period
WEEKDAY_NAMES = ("일", "월", "화", "수", "목", "금", "토")


class ZoneClock:
    """Wall clock pinned to a single time zone."""

    def __init__(self, timezone_str: str = "Asia/Seoul"):
        self.tz = ZoneInfo(timezone_str)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class FixedClock(ZoneClock):
    """Clock frozen at a given moment. Naive moments are read in the clock's zone."""

    def __init__(self, moment: datetime, timezone_str: str = "Asia/Seoul"):
        super().__init__(timezone_str)
        self._moment = moment if moment.tzinfo else moment.replace(tzinfo=self.tz)

    def now(self) -> datetime:
        return self._moment.astimezone(self.tz)


def get_clock() -> ZoneClock:
    """FastAPI dependency returning the application clock."""
    return ZoneClock(settings.timezone)


def weekday_name(day: date) -> str:
    """Localized short weekday name for a date."""
    return WEEKDAY_NAMES[sunday_index(day)]


def sunday_index(day: date) -> int:
    """Index of the weekday with Sunday=0 .. Saturday=6."""
    return (day.weekday() + 1) % 7


def due_moment(due_date: date, due_time: str | None, tz: tzinfo) -> datetime:
    """Combine a due date and optional HH:MM time into an aware datetime.

    A missing or unreadable time resolves to the start of the day.
    """
    clock_time = time(0, 0)
    if due_time:
        try:
            hour, minute = due_time.split(":")
            clock_time = time(int(hour), int(minute))
        except ValueError:
            pass
    return datetime.combine(due_date, clock_time, tzinfo=tz)


def in_zone(moment: datetime, tz: tzinfo) -> datetime:
    """Convert an aware datetime to the zone; naive values are taken as already local."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


@dataclass(frozen=True)
class DateContext:
    """Date/time readout embedded in prompts."""

    now: datetime
    current_date: str
    current_time: str
    weekday: str
    tomorrow: str
    day_after_tomorrow: str

    @property
    def hours_left_today(self) -> int:
        return 24 - self.now.hour


def date_context(now: datetime) -> DateContext:
    """Build the prompt date context for a moment."""
    today = now.date()
    return DateContext(
        now=now,
        current_date=today.strftime("%Y-%m-%d"),
        current_time=now.strftime("%H:%M"),
        weekday=weekday_name(today),
        tomorrow=(today + timedelta(days=1)).strftime("%Y-%m-%d"),
        day_after_tomorrow=(today + timedelta(days=2)).strftime("%Y-%m-%d"),
    )
