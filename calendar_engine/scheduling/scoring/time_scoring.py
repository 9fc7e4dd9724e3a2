"""
Time-based scoring functions for slot evaluation.
"""

from datetime import datetime

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.schemas import TimeSlot, CalendarPreferences
from ..core.calendar import get_day_schedule


def _in_ranges(hour: int, ranges) -> bool:
    return any(low <= hour <= high for low, high in ranges)


def calculate_time_score(slot: TimeSlot, preferences: CalendarPreferences,
                         config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """
    Score the slot's start hour against the working day:
    1. Non-working day: 0.3
    2. Outside the day's working bounds: 0.2
    3. Peak productivity hours (9-11, 14-16): 1.0
    4. Good hours (8-17): 0.8
    5. Anything else inside working bounds: 0.5
    """
    hour = slot.start_time.hour
    schedule = get_day_schedule(slot.start_time.date(), preferences.working_hours)

    if not schedule.is_working_day:
        return 0.3

    if hour < schedule.start_time.hour or hour >= schedule.end_time.hour:
        return 0.2

    if _in_ranges(hour, config.peak_hours):
        return 1.0

    good_start, good_end = config.good_hours
    if good_start <= hour <= good_end:
        return 0.8

    return 0.5


def energy_at(moment: datetime, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """Circadian energy level for the local hour of moment."""
    return config.energy_curve.get(moment.hour, config.default_energy)


def calculate_energy_score(slot: TimeSlot, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    return energy_at(slot.start_time, config)
