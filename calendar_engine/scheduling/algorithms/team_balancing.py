"""
Team workload balancing: per-member load over a timeframe, overload
recommendations and skill-aware redistribution suggestions.
"""

import logging
from statistics import pstdev
from typing import Dict, List

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.models import ImpactLevel
from calendar_engine.schemas import (
    TeamMember, CalendarEvent, TimeFrame, TeamWorkloadResult, WorkloadRecommendation, RedistributionSuggestion,
)
from ..core.time_slot import intervals_overlap
from ..utils.slot_utils import event_hours

logger = logging.getLogger(__name__)


def is_assigned(member: TeamMember, event: CalendarEvent) -> bool:
    """Members take part in events they organise or attend."""
    if event.organizer_id == member.id:
        return True
    email = member.email.lower()
    return any(attendee.email.lower() == email for attendee in event.attendees)


def has_skills(member: TeamMember, required_skills: List[str]) -> bool:
    """Empty requirements are satisfied by anyone."""
    skills = {s.strip().lower() for s in member.skills}
    return all(skill.strip().lower() in skills for skill in required_skills)


def capacity_hours(timeframe: TimeFrame, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    days = (timeframe.end - timeframe.start).total_seconds() / 86400
    return max(days, 1.0) * config.team_capacity_hours_per_day


def calculate_member_loads(members: List[TeamMember], events: List[CalendarEvent], timeframe: TimeFrame,
                           config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> Dict[str, float]:
    """
    Baseline workload plus the share of capacity taken by assigned events
    inside the timeframe. Loads above 1.0 mean overcommitment.
    """
    capacity = capacity_hours(timeframe, config)
    loads = {}
    for member in members:
        assigned_hours = sum(
            event_hours(e) for e in events
            if intervals_overlap(e.start_time, e.end_time, timeframe.start, timeframe.end) and is_assigned(member, e)
        )
        loads[member.id] = member.workload + assigned_hours / capacity
    return loads


def calculate_team_efficiency_score(loads: List[float], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """
    1.0 for a perfectly even team with nobody overloaded; shrinks with the
    spread of loads and with the share of overloaded members.
    """
    if not loads:
        return 1.0
    spread_factor = 1.0 - pstdev(loads) / 0.5
    overloaded_fraction = sum(1 for load in loads if load > config.high_load_threshold) / len(loads)
    score = spread_factor * (1.0 - 0.5 * overloaded_fraction)
    return min(1.0, max(0.01, score))


def generate_workload_recommendations(members: List[TeamMember], loads: Dict[str, float],
                                      config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> List[WorkloadRecommendation]:
    recommendations = []
    for member in members:
        load = loads[member.id]
        if load > config.high_load_threshold:
            recommendations.append(WorkloadRecommendation(
                member_id=member.id,
                recommendation=f"{member.name} is at {load:.0%} of capacity; delegate or reschedule lower-priority work",
                impact=ImpactLevel.HIGH if load > 1.0 else ImpactLevel.MEDIUM,
            ))
        elif load < config.low_load_threshold:
            recommendations.append(WorkloadRecommendation(
                member_id=member.id,
                recommendation=f"{member.name} is at {load:.0%} of capacity and can take on additional work",
                impact=ImpactLevel.LOW,
            ))
    return recommendations


def suggest_workload_redistribution(members: List[TeamMember], events: List[CalendarEvent], timeframe: TimeFrame,
                                    loads: Dict[str, float],
                                    config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> List[RedistributionSuggestion]:
    """
    Propose handing events from overloaded members to members below the low
    threshold who have the event's required skills. Projected loads are
    updated after each suggestion so one receiver is not flooded.
    """
    capacity = capacity_hours(timeframe, config)
    projected = dict(loads)
    suggestions = []

    in_frame = [e for e in events if intervals_overlap(e.start_time, e.end_time, timeframe.start, timeframe.end)]
    # Heaviest first; sorted() keeps input order between equals
    overloaded = sorted(
        (m for m in members if projected[m.id] > config.high_load_threshold),
        key=lambda m: -projected[m.id],
    )

    for giver in overloaded:
        for event in in_frame:
            if projected[giver.id] <= config.high_load_threshold:
                break
            if not is_assigned(giver, event):
                continue

            share = event_hours(event) / capacity
            receivers = [
                m for m in members
                if m.id != giver.id
                and projected[m.id] < config.low_load_threshold
                and projected[m.id] + share <= config.high_load_threshold
                and not is_assigned(m, event)
                and has_skills(m, event.required_skills)
            ]
            if not receivers:
                continue

            receiver = min(receivers, key=lambda m: projected[m.id])
            reason = f"{giver.name} is overloaded ({projected[giver.id]:.0%}); {receiver.name} has capacity ({projected[receiver.id]:.0%})"
            if event.required_skills:
                reason += f" and the required skills: {', '.join(event.required_skills)}"

            suggestions.append(RedistributionSuggestion(
                from_member_id=giver.id,
                to_member_id=receiver.id,
                event_id=event.id,
                reason=reason,
            ))
            projected[giver.id] -= share
            projected[receiver.id] += share

    return suggestions


def balance_team_workload(members: List[TeamMember], events: List[CalendarEvent], timeframe: TimeFrame,
                          config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> TeamWorkloadResult:
    loads = calculate_member_loads(members, events, timeframe, config)
    result = TeamWorkloadResult(
        recommendations=generate_workload_recommendations(members, loads, config),
        redistribution_suggestions=suggest_workload_redistribution(members, events, timeframe, loads, config),
        team_efficiency_score=calculate_team_efficiency_score(list(loads.values()), config),
    )
    logger.info(
        f"Team workload for {len(members)} members: {len(result.recommendations)} recommendations, "
        f"{len(result.redistribution_suggestions)} redistributions, efficiency {result.team_efficiency_score:.2f}"
    )
    return result
