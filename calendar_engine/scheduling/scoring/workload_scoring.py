"""
Workload-based scoring functions for slot evaluation.
"""

from datetime import datetime
from typing import List

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.schemas import TimeSlot, CalendarEvent
from ..utils.slot_utils import booked_hours_on_day


def score_for_hours(hours: float, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """Map hours already booked on a day onto the threshold table (strictly greater than)."""
    for threshold, score in config.workload_thresholds:
        if hours > threshold:
            return score
    return 1.0


def calculate_workload_score(slot: TimeSlot, existing_events: List[CalendarEvent],
                             config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """
    Penalize days that are already heavily loaded.
    Only events lying entirely inside the slot's local day count.
    """
    return daily_workload_score(slot.start_time, existing_events, config)


def daily_workload_score(moment: datetime, events: List[CalendarEvent],
                         config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    return score_for_hours(booked_hours_on_day(moment, events), config)
