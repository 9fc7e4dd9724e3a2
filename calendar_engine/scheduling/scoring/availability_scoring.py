"""
Availability and buffer scoring for slot evaluation.
"""

from datetime import timedelta
from typing import List

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.schemas import TimeSlot, CalendarEvent
from ..core.time_slot import slot_overlaps_event


def calculate_availability_score(slot: TimeSlot, existing_events: List[CalendarEvent],
                                 config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """
    1.0 when the slot is clear with a full buffer on both sides,
    0.7 when a neighbouring event sits inside the buffer,
    0.0 when the slot overlaps an event.
    """
    # Generation already filters overlaps; re-checked because slots can come from callers
    if any(slot_overlaps_event(slot, event) for event in existing_events):
        return 0.0

    buffer = timedelta(minutes=config.buffer_minutes)
    for event in existing_events:
        gap_before = abs(slot.start_time - event.end_time)
        gap_after = abs(event.start_time - slot.end_time)
        if gap_before < buffer or gap_after < buffer:
            return 0.7

    return 1.0
