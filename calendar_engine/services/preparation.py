"""
Meeting preparation advice derived from event and request attributes.
"""

import logging
from datetime import timedelta
from typing import Dict, List, Optional

from calendar_engine.models import EventType, EventPriority
from calendar_engine.schemas import (
    CalendarEvent, CalendarPreferences, MeetingPreparation, ParticipantInsight, SchedulingRequest,
    TeamMember, WeatherInfo, TrafficInfo,
)
from calendar_engine.scheduling.scoring.priority_scoring import is_high_priority
from .travel import TravelTimeEstimator, is_physical_location, is_virtual_location

logger = logging.getLogger(__name__)

LARGE_MEETING = 5
VERY_LARGE_MEETING = 10
BASE_PREPARATION_MINUTES = 15
TRAVEL_LEAD_MINUTES = 30


def calculate_optimal_preparation_minutes(event: CalendarEvent) -> int:
    minutes = BASE_PREPARATION_MINUTES
    if event.priority == EventPriority.HIGH:
        minutes += 15
    elif event.priority == EventPriority.URGENT:
        minutes += 30

    attendee_count = len(event.attendees)
    if attendee_count > LARGE_MEETING:
        minutes += 15
    if attendee_count > VERY_LARGE_MEETING:
        minutes += 15
    return minutes


def suggest_documents(event: CalendarEvent) -> List[str]:
    documents = []
    if event.project_id:
        documents.append(f"Latest status report for project {event.project_id}")
    if event.client_id:
        documents.append(f"Account history and recent correspondence for client {event.client_id}")
    if len(event.attendees) > LARGE_MEETING:
        documents.append("Shared agenda document for all attendees")
    return documents


def build_participant_insights(event: CalendarEvent, team: Optional[List[TeamMember]]) -> List[ParticipantInsight]:
    """One insight per attendee; expertise comes from the team directory when the attendee is a member."""
    members: Dict[str, TeamMember] = {m.email.lower(): m for m in (team or [])}
    insights = []
    for attendee in event.attendees:
        member = members.get(attendee.email.lower())
        insights.append(ParticipantInsight(
            email=attendee.email,
            name=attendee.name or (member.name if member else ""),
            recent_interactions=[],
            expertise=list(member.skills) if member else [],
        ))
    return insights


def generate_meeting_preparation(event: CalendarEvent, preferences: CalendarPreferences,
                                 estimator: TravelTimeEstimator,
                                 team: Optional[List[TeamMember]] = None,
                                 weather: Optional[WeatherInfo] = None,
                                 traffic: Optional[TrafficInfo] = None) -> MeetingPreparation:
    """
    Checklist, documents, participant insights and lead time for an event.

    Rules:
    1. Meetings always get agenda review and key discussion points
    2. More than 5 attendees: question the list, use a structured format
    3. More than 10 attendees: facilitation and pre-reads on top
    4. Physical location: travel allowance from the default location,
       departing 30 minutes before start; virtual: check the link instead
    5. High and urgent priority: contingency plans and communications review
    """
    items = []
    attendee_count = len(event.attendees)

    if event.type == EventType.MEETING:
        items.append("Review meeting agenda")
        items.append("Prepare key discussion points")

    if attendee_count > LARGE_MEETING:
        items.append("Consider if all attendees are necessary")
        items.append("Prepare structured discussion format")

    if attendee_count > VERY_LARGE_MEETING:
        items.append("Assign a facilitator and a note-taker")
        items.append("Circulate pre-read materials in advance")

    if is_physical_location(event.location):
        departure = event.start_time - timedelta(minutes=TRAVEL_LEAD_MINUTES)
        travel = estimator.estimate(
            preferences.default_location, event.location, departure, weather=weather, traffic=traffic,
        )
        items.append(f"Allow {travel.estimated_minutes} minutes for travel to {event.location}")
    elif is_virtual_location(event.location):
        items.append("Test the video link and audio before joining")

    if is_high_priority(event.priority):
        items.append("Prepare backup plans for key decisions")
        items.append("Review recent related communications")

    preparation = MeetingPreparation(
        preparation_items=items,
        document_suggestions=suggest_documents(event),
        participant_insights=build_participant_insights(event, team),
        optimal_preparation_minutes=calculate_optimal_preparation_minutes(event),
    )
    logger.debug(f"Prepared {len(items)} items for event {event.id}")
    return preparation


def request_preparation_suggestions(request: SchedulingRequest) -> List[str]:
    """Suggestions attached to a scheduling result before the meeting exists."""
    suggestions = [
        "Prepare meeting agenda",
        "Review participant backgrounds",
        "Set up meeting room or virtual link",
    ]

    if len(request.attendee_emails) > LARGE_MEETING:
        suggestions.append("Consider breaking into smaller groups")

    if is_high_priority(request.priority):
        suggestions.append("Prepare decision-making framework")
        suggestions.append("Identify key stakeholders for follow-up")

    return suggestions
