"""
Whole-schedule quality measure used to detect optimizer improvement.

The schedule score is the mean of four components, each in (0, 1]:
energy alignment, travel feasibility, daily workload and time blocking.
"""

from typing import List

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.schemas import CalendarEvent
from calendar_engine.services.travel import TravelTimeEstimator, is_physical_location
from ..utils.slot_utils import group_by_day
from .priority_scoring import calculate_priority_weight
from .time_scoring import energy_at
from .travel_scoring import transfer_feasibility
from .workload_scoring import daily_workload_score


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 1.0


def energy_alignment_score(events: List[CalendarEvent], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """Priority-weighted mean energy at each event's start hour."""
    timed = [e for e in events if not e.is_all_day]
    if not timed:
        return 1.0
    total_weight = sum(calculate_priority_weight(e.priority) for e in timed)
    weighted = sum(calculate_priority_weight(e.priority) * energy_at(e.start_time, config) for e in timed)
    return weighted / total_weight


def travel_feasibility_score(events: List[CalendarEvent], estimator: TravelTimeEstimator,
                             config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """Mean gap penalty over consecutive physically located events of each day."""
    penalties = []
    for day_events in group_by_day(events).values():
        located = [e for e in day_events if is_physical_location(e.location)]
        for earlier, later in zip(located, located[1:]):
            penalties.append(transfer_feasibility(earlier, later, estimator, config))
    return _mean(penalties)


def workload_balance_score(events: List[CalendarEvent], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """Mean workload score over days that have events."""
    return _mean([
        daily_workload_score(day_events[0].start_time, events, config)
        for day_events in group_by_day(events).values()
    ])


def time_blocking_score(events: List[CalendarEvent]) -> float:
    """1 - (event type switches / possible switches), averaged over days with two or more events."""
    day_scores = []
    for day_events in group_by_day(events).values():
        if len(day_events) < 2:
            continue
        switches = sum(1 for a, b in zip(day_events, day_events[1:]) if a.type != b.type)
        day_scores.append(1.0 - switches / (len(day_events) - 1))
    return _mean(day_scores)


def calculate_schedule_score(events: List[CalendarEvent], estimator: TravelTimeEstimator,
                             config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    if not any(not e.is_all_day for e in events):
        return config.neutral_schedule_score

    components = [
        energy_alignment_score(events, config),
        travel_feasibility_score(events, estimator, config),
        workload_balance_score(events, config),
        time_blocking_score(events),
    ]
    return sum(components) / len(components)
