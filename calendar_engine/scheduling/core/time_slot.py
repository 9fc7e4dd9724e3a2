"""
Time slot and interval helpers for the scheduling system.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional
import pytz

from calendar_engine.schemas import TimeSlot, CalendarEvent


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open overlap test: touching intervals do not overlap."""
    return start_a < end_b and end_a > start_b


def slot_overlaps_event(slot: TimeSlot, event: CalendarEvent) -> bool:
    return intervals_overlap(slot.start_time, slot.end_time, event.start_time, event.end_time)


def find_overlapping_events(start: datetime, end: datetime, events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
    return [e for e in events if intervals_overlap(start, end, e.start_time, e.end_time)]


def make_slot(start: datetime, duration_minutes: int) -> TimeSlot:
    """Create an unscored slot spanning exactly duration_minutes."""
    return TimeSlot(start_time=start, end_time=start + timedelta(minutes=duration_minutes))


def localize(value: datetime, tz: pytz.BaseTzInfo) -> datetime:
    """
    Bring a datetime into the user's timezone.
    Naive values are taken to already be user-local wall-clock time.
    """
    if value.tzinfo is None:
        return tz.localize(value)
    return value.astimezone(tz)


def localize_event(event: CalendarEvent, tz: pytz.BaseTzInfo) -> CalendarEvent:
    return event.model_copy(update={
        "start_time": localize(event.start_time, tz),
        "end_time": localize(event.end_time, tz),
    })


def localize_slot(slot: TimeSlot, tz: pytz.BaseTzInfo) -> TimeSlot:
    return slot.model_copy(update={
        "start_time": localize(slot.start_time, tz),
        "end_time": localize(slot.end_time, tz),
    })


def nearest_event_before(moment: datetime, events: Iterable[CalendarEvent]) -> Optional[CalendarEvent]:
    """Latest-ending event that ends at or before moment."""
    candidates = [e for e in events if e.end_time <= moment]
    if not candidates:
        return None
    return max(candidates, key=lambda e: e.end_time)


def nearest_event_after(moment: datetime, events: Iterable[CalendarEvent]) -> Optional[CalendarEvent]:
    """Earliest-starting event that starts at or after moment."""
    candidates = [e for e in events if e.start_time >= moment]
    if not candidates:
        return None
    return min(candidates, key=lambda e: e.start_time)
