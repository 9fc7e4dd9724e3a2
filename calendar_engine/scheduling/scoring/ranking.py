"""
Ranking of scored slots and the human-readable rationale attached to each.
"""

from typing import List

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.models import WEEKDAY_NAMES
from calendar_engine.schemas import TimeSlot


def describe_slot(slot: TimeSlot) -> str:
    """Rationale from the slot's confidence band."""
    if slot.confidence > 0.9:
        weekday = WEEKDAY_NAMES[slot.start_time.weekday()].capitalize()
        return f"Optimal time on {weekday} - high energy and no conflicts"
    elif slot.confidence > 0.8:
        return "Good time slot with minimal conflicts"
    elif slot.confidence > 0.7:
        return "Available time with some considerations"
    else:
        return "Available but may require adjustments"


def rank_slots(slots: List[TimeSlot], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> List[TimeSlot]:
    """
    Top max_suggestions slots by descending confidence.
    sorted() is stable, so ties keep generation order.
    """
    ranked = sorted(slots, key=lambda s: -s.confidence)[:config.max_suggestions]
    return [s.model_copy(update={"reason": describe_slot(s)}) for s in ranked]
