"""
Time-related constraint checking functions.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from calendar_engine.schemas import TimeSlot, CalendarEvent, DaySchedule, SchedulingConstraints
from ..core.calendar import is_weekend
from ..core.time_slot import intervals_overlap


DEFAULT_CONSTRAINTS = SchedulingConstraints()


def resolve_constraints(constraints: Optional[SchedulingConstraints]) -> SchedulingConstraints:
    """Requests without constraints get the permissive-but-no-weekends defaults."""
    return constraints if constraints is not None else DEFAULT_CONSTRAINTS


def is_day_allowed(day: date, schedule: DaySchedule, constraints: SchedulingConstraints) -> bool:
    """
    Check whether any slot on this day may be offered.
    """
    # Rule 1: non-working days are out when the meeting must sit in working hours
    if constraints.must_be_within_working_hours and not schedule.is_working_day:
        return False

    # Rule 2: weekends need explicit permission
    if not constraints.allow_weekends and is_weekend(day):
        return False

    # Rule 3: preferred days act as a whitelist when given
    if constraints.preferred_days_of_week is not None and day.weekday() not in constraints.preferred_days_of_week:
        return False

    return True


def is_slot_allowed(
    slot: TimeSlot,
    constraints: SchedulingConstraints,
    existing_events: List[CalendarEvent],
    breaks: List[Tuple[datetime, datetime]],
    now: datetime,
) -> bool:
    """
    Check if a candidate slot is allowed based on strict rules.
    """
    # Rule 1: minimum notice (also keeps slots out of the past)
    if slot.start_time < now + timedelta(hours=constraints.minimum_notice_hours):
        return False

    # Rule 2: maximum advance booking
    if slot.start_time > now + timedelta(days=constraints.maximum_advance_days):
        return False

    # Rule 3: never collide with an existing commitment
    for event in existing_events:
        if intervals_overlap(slot.start_time, slot.end_time, event.start_time, event.end_time):
            return False

    # Rule 4: keep configured breaks free
    for break_start, break_end in breaks:
        if intervals_overlap(slot.start_time, slot.end_time, break_start, break_end):
            return False

    # Rule 5: caller-supplied blackout windows
    for avoided in constraints.avoid_time_slots:
        if intervals_overlap(slot.start_time, slot.end_time, avoided.start_time, avoided.end_time):
            return False

    return True
