"""
Candidate slot generation: fixed-duration windows inside the scheduling horizon.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List

import pytz

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.schemas import TimeSlot, SchedulingRequest, OptimizationContext, DaySchedule
from ..constraints.time_constraints import resolve_constraints, is_day_allowed, is_slot_allowed
from .calendar import get_day_schedule, day_window, break_windows, dates_in_range
from .time_slot import make_slot

logger = logging.getLogger(__name__)


def generate_day_slots(day: date, schedule: DaySchedule, duration_minutes: int, tz: pytz.BaseTzInfo,
                       stride_minutes: int) -> List[TimeSlot]:
    """
    Enumerate slots at a fixed stride from the day's start while the whole
    duration still fits before the day's end.
    """
    slots = []
    window_start, window_end = day_window(day, schedule, tz)
    duration = timedelta(minutes=duration_minutes)

    current_start = window_start
    while current_start + duration <= window_end:
        slots.append(make_slot(current_start, duration_minutes))
        current_start += timedelta(minutes=stride_minutes)

    return slots


def generate_candidate_slots(request: SchedulingRequest, context: OptimizationContext, now: datetime,
                             config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> List[TimeSlot]:
    """
    Generate unscored candidate slots for the request across the horizon.

    Expects a context whose events are already in the user's timezone and a
    timezone-aware now.
    """
    preferences = context.user_preferences
    tz = pytz.timezone(preferences.time_zone)
    constraints = resolve_constraints(request.constraints)

    horizon_days = min(config.horizon_days, constraints.maximum_advance_days)
    first_day = now.date()
    last_day = (now + timedelta(days=horizon_days)).date()

    candidates: List[TimeSlot] = []
    for day in dates_in_range(first_day, last_day):
        schedule = get_day_schedule(day, preferences.working_hours)
        if not is_day_allowed(day, schedule, constraints):
            continue

        breaks = break_windows(day, schedule, tz)
        for slot in generate_day_slots(day, schedule, request.duration, tz, config.slot_stride_minutes):
            if is_slot_allowed(slot, constraints, context.existing_events, breaks, now):
                candidates.append(slot)

    logger.debug(f"Generated {len(candidates)} candidate slots for '{request.title}' between {first_day} and {last_day}")
    return candidates
