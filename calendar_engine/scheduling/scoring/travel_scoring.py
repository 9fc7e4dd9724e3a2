"""
Travel feasibility scoring: is there time to get to and from the slot?
"""

from datetime import datetime, timedelta
from typing import List, Optional

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.schemas import TimeSlot, CalendarEvent, WeatherInfo, TrafficInfo
from calendar_engine.services.travel import TravelTimeEstimator, is_physical_location, is_virtual_location
from ..core.time_slot import nearest_event_before, nearest_event_after

# Anchor used when the meeting itself has no location
MEETING_ANCHOR = "meeting_location"


def gap_penalty(gap: timedelta, travel_minutes: float, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """0.3 when the gap cannot cover the trip, 0.7 when it covers it without slack, else 1.0."""
    gap_minutes = gap.total_seconds() / 60
    if gap_minutes < travel_minutes:
        return 0.3
    if gap_minutes < travel_minutes + config.travel_slack_minutes:
        return 0.7
    return 1.0


def calculate_travel_score(slot: TimeSlot, existing_events: List[CalendarEvent], estimator: TravelTimeEstimator,
                           meeting_location: Optional[str] = None,
                           weather: Optional[WeatherInfo] = None,
                           traffic: Optional[TrafficInfo] = None,
                           config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """
    Multiply penalties for the trip from the nearest physically located event
    before the slot and the trip to the nearest one after it.
    Virtual meetings and virtual neighbours need no travel.
    """
    if is_virtual_location(meeting_location):
        return 1.0

    anchor = meeting_location or MEETING_ANCHOR
    located = [e for e in existing_events if is_physical_location(e.location)]
    score = 1.0

    before = nearest_event_before(slot.start_time, located)
    if before is not None:
        travel = estimator.estimate(before.location, anchor, before.end_time, weather=weather, traffic=traffic)
        score *= gap_penalty(slot.start_time - before.end_time, travel.estimated_minutes, config)

    after = nearest_event_after(slot.end_time, located)
    if after is not None:
        travel = estimator.estimate(anchor, after.location, slot.end_time, weather=weather, traffic=traffic)
        score *= gap_penalty(after.start_time - slot.end_time, travel.estimated_minutes, config)

    return score


def transfer_feasibility(earlier: CalendarEvent, later: CalendarEvent, estimator: TravelTimeEstimator,
                         config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """Gap penalty between two consecutive located events."""
    departure: datetime = earlier.end_time
    travel = estimator.estimate(earlier.location, later.location, departure)
    return gap_penalty(later.start_time - earlier.end_time, travel.estimated_minutes, config)
