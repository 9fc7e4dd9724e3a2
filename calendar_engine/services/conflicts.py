"""
Conflict detection for a proposed time range against existing events.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.models import EventPriority, EventStatus, ConflictType, ConflictSeverity, ResolutionType
from calendar_engine.schemas import CalendarEvent, ConflictInfo, ConflictResolution
from calendar_engine.scheduling.core.time_slot import intervals_overlap
from calendar_engine.scheduling.scoring.priority_scoring import higher_priority, overlap_severity
from calendar_engine.scheduling.utils.slot_utils import booked_hours_on_day, events_within_day, event_duration
from .travel import TravelTimeEstimator, is_physical_location

logger = logging.getLogger(__name__)


def _travel_conflict(start: datetime, end: datetime, location: Optional[str], event: CalendarEvent,
                     estimator: TravelTimeEstimator) -> bool:
    if not (is_physical_location(location) and is_physical_location(event.location)):
        return False
    if event.end_time <= start:
        travel = estimator.estimate(event.location, location, event.end_time)
        gap = start - event.end_time
    else:
        travel = estimator.estimate(location, event.location, end)
        gap = event.start_time - end
    return gap < timedelta(minutes=travel.estimated_minutes)


def detect_conflicts(start: datetime, end: datetime, existing_events: List[CalendarEvent],
                     estimator: TravelTimeEstimator,
                     priority: EventPriority = EventPriority.MEDIUM,
                     location: Optional[str] = None,
                     exclude_id: Optional[str] = None,
                     config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> List[ConflictInfo]:
    """
    Conflicts of [start, end) with existing events, in event order:

    - OVERLAP: the ranges intersect; severity follows the higher priority
    - BACK_TO_BACK: less than back_to_back_minutes between them
    - TRAVEL_TIME: both located and the gap is shorter than the trip
    - WORKLOAD: the day is already over the heaviest workload threshold
    """
    conflicts = []
    back_to_back = timedelta(minutes=config.back_to_back_minutes)

    active = [
        e for e in existing_events
        if e.id != exclude_id and e.status != EventStatus.CANCELLED and not e.is_all_day
    ]

    for event in active:
        if intervals_overlap(start, end, event.start_time, event.end_time):
            conflicts.append(ConflictInfo(
                conflicting_event_id=event.id,
                conflict_type=ConflictType.OVERLAP,
                severity=overlap_severity(higher_priority(priority, event.priority)),
                suggested_resolution=ConflictResolution(
                    type=ResolutionType.RESCHEDULE,
                    description=f'Reschedule to avoid conflict with "{event.title}"',
                ),
            ))
        elif abs(start - event.end_time) < back_to_back or abs(event.start_time - end) < back_to_back:
            conflicts.append(ConflictInfo(
                conflicting_event_id=event.id,
                conflict_type=ConflictType.BACK_TO_BACK,
                severity=ConflictSeverity.LOW,
                suggested_resolution=ConflictResolution(
                    type=ResolutionType.RESCHEDULE,
                    description="Add buffer time between meetings",
                ),
            ))
        elif _travel_conflict(start, end, location, event, estimator):
            conflicts.append(ConflictInfo(
                conflicting_event_id=event.id,
                conflict_type=ConflictType.TRAVEL_TIME,
                severity=ConflictSeverity.MEDIUM,
                suggested_resolution=ConflictResolution(
                    type=ResolutionType.RESCHEDULE,
                    description=f"Not enough time to travel between this meeting and {event.location}",
                ),
            ))

    heaviest_threshold = max(threshold for threshold, _ in config.workload_thresholds)
    if booked_hours_on_day(start, active) > heaviest_threshold:
        busiest = max(events_within_day(start, active), key=event_duration)
        conflicts.append(ConflictInfo(
            conflicting_event_id=busiest.id,
            conflict_type=ConflictType.WORKLOAD,
            severity=ConflictSeverity.MEDIUM,
            suggested_resolution=ConflictResolution(
                type=ResolutionType.RESCHEDULE,
                description=f"Day already has more than {heaviest_threshold:g} hours booked; consider a lighter day",
            ),
        ))

    if conflicts:
        logger.debug(f"Found {len(conflicts)} conflicts for {start} - {end}")
    return conflicts


def detect_event_conflicts(event: CalendarEvent, existing_events: List[CalendarEvent],
                           estimator: TravelTimeEstimator,
                           config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> List[ConflictInfo]:
    return detect_conflicts(
        event.start_time, event.end_time, existing_events, estimator,
        priority=event.priority,
        location=event.location,
        exclude_id=event.id,
        config=config,
    )
