"""
Working-calendar model: resolving a date to its working window and breaks.
"""

from datetime import date, datetime, timedelta
from typing import List, Tuple
import pytz

from calendar_engine.schemas import DaySchedule, WorkingHours, CalendarPreferences


def get_timezone(preferences: CalendarPreferences) -> pytz.BaseTzInfo:
    return pytz.timezone(preferences.time_zone)


def get_day_schedule(day: date, working_hours: WorkingHours) -> DaySchedule:
    return working_hours.for_weekday(day.weekday())


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def day_window(day: date, schedule: DaySchedule, tz: pytz.BaseTzInfo) -> Tuple[datetime, datetime]:
    """Localized [start, end) of the configured hours on a given date."""
    start = tz.localize(datetime.combine(day, schedule.start_time))
    end = tz.localize(datetime.combine(day, schedule.end_time))
    return start, end


def break_windows(day: date, schedule: DaySchedule, tz: pytz.BaseTzInfo) -> List[Tuple[datetime, datetime]]:
    windows = []
    for brk in schedule.breaks:
        if brk.end_time <= brk.start_time:
            continue
        windows.append((
            tz.localize(datetime.combine(day, brk.start_time)),
            tz.localize(datetime.combine(day, brk.end_time)),
        ))
    return windows


def day_bounds(moment: datetime) -> Tuple[datetime, datetime]:
    """Local midnight-to-midnight bounds of the day containing moment."""
    tz = moment.tzinfo
    naive_start = datetime.combine(moment.date(), datetime.min.time())
    if tz is not None and hasattr(tz, "localize"):
        start = tz.localize(naive_start)
        end = tz.localize(naive_start + timedelta(days=1))
    elif tz is not None:
        start = naive_start.replace(tzinfo=tz)
        end = start + timedelta(days=1)
    else:
        start = naive_start
        end = start + timedelta(days=1)
    return start, end


def dates_in_range(first: date, last: date) -> List[date]:
    days = []
    current = first
    while current <= last:
        days.append(current)
        current += timedelta(days=1)
    return days
