"""
Main slot scoring aggregator that combines all domain-specific scoring functions.
"""

import logging
from typing import Dict, List

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.schemas import TimeSlot, SchedulingRequest, OptimizationContext
from calendar_engine.services.travel import TravelTimeEstimator

from .time_scoring import calculate_time_score, calculate_energy_score
from .availability_scoring import calculate_availability_score
from .travel_scoring import calculate_travel_score
from .workload_scoring import calculate_workload_score
from .weather_scoring import calculate_weather_score
from .ranking import describe_slot

logger = logging.getLogger(__name__)


def calculate_sub_scores(slot: TimeSlot, request: SchedulingRequest, context: OptimizationContext,
                         estimator: TravelTimeEstimator,
                         config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> Dict[str, float]:
    """Each factor in [0, 1], keyed by factor name."""
    events = context.existing_events
    return {
        "time": calculate_time_score(slot, context.user_preferences, config),
        "availability": calculate_availability_score(slot, events, config),
        "travel": calculate_travel_score(
            slot, events, estimator,
            meeting_location=request.location,
            weather=context.weather_data,
            traffic=context.traffic_data,
            config=config,
        ),
        "workload": calculate_workload_score(slot, events, config),
        "weather": calculate_weather_score(slot, context.weather_data, config),
        "energy": calculate_energy_score(slot, config),
    }


def calculate_slot_score(slot: TimeSlot, request: SchedulingRequest, context: OptimizationContext,
                         estimator: TravelTimeEstimator,
                         config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """
    Calculate the composite confidence for a slot.
    This is the main scoring function that aggregates all domain-specific scores.
    """
    scores = calculate_sub_scores(slot, request, context, estimator, config)

    # Combine scores with weights
    total_score = (
        (config.time_weight * scores["time"]) +                  # Productive hours dominate
        (config.availability_weight * scores["availability"]) +  # Breathing room around neighbours
        (config.travel_weight * scores["travel"]) +              # Time to get there
        (config.workload_weight * scores["workload"]) +          # Day already full?
        (config.weather_weight * scores["weather"]) +
        (config.energy_weight * scores["energy"])
    )

    return min(1.0, max(0.0, total_score))


def score_slots(slots: List[TimeSlot], request: SchedulingRequest, context: OptimizationContext,
                estimator: TravelTimeEstimator,
                config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> List[TimeSlot]:
    """
    Return copies of slots with confidence and reason filled in, in input order.
    Start and end times are never altered.
    """
    scored = []
    for slot in slots:
        confidence = calculate_slot_score(slot, request, context, estimator, config)
        scored_slot = slot.model_copy(update={"confidence": confidence})
        scored.append(scored_slot.model_copy(update={"reason": describe_slot(scored_slot)}))

    logger.debug(f"Scored {len(scored)} slots for '{request.title}'")
    return scored
