"""
Event-specific utility functions for schedule manipulation.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from calendar_engine.models import SchedulingFlexibility
from calendar_engine.schemas import CalendarEvent
from ..core.calendar import day_bounds


def event_duration(event: CalendarEvent) -> timedelta:
    return event.end_time - event.start_time


def event_hours(event: CalendarEvent) -> float:
    return event_duration(event).total_seconds() / 3600


def move_event(event: CalendarEvent, new_start_time: datetime) -> CalendarEvent:
    """Return a copy of event starting at new_start_time with the same duration."""
    return event.model_copy(update={
        "start_time": new_start_time,
        "end_time": new_start_time + event_duration(event),
    })


def is_movable(event: CalendarEvent) -> bool:
    return not event.is_all_day and event.scheduling_flexibility != SchedulingFlexibility.FIXED


def can_change_day(event: CalendarEvent) -> bool:
    return is_movable(event) and event.scheduling_flexibility == SchedulingFlexibility.FLEXIBLE


def events_within_day(moment: datetime, events: List[CalendarEvent], exclude_id: Optional[str] = None) -> List[CalendarEvent]:
    """Events lying entirely inside the local calendar day containing moment."""
    day_start, day_end = day_bounds(moment)
    return [
        e for e in events
        if e.id != exclude_id and e.start_time >= day_start and e.end_time <= day_end
    ]


def booked_hours_on_day(moment: datetime, events: List[CalendarEvent], exclude_id: Optional[str] = None) -> float:
    return sum(event_hours(e) for e in events_within_day(moment, events, exclude_id))


def group_by_day(events: List[CalendarEvent]) -> Dict[date, List[CalendarEvent]]:
    """Timed events keyed by start date, each day sorted by start time."""
    days: Dict[date, List[CalendarEvent]] = defaultdict(list)
    for event in events:
        if event.is_all_day:
            continue
        days[event.start_time.date()].append(event)
    for day_events in days.values():
        day_events.sort(key=lambda e: (e.start_time, e.end_time))
    return dict(days)


def week_dates(day: date) -> List[date]:
    """Monday-to-Sunday dates of the ISO week containing day."""
    monday = day - timedelta(days=day.weekday())
    return [monday + timedelta(days=i) for i in range(7)]
