"""
Tests for the meeting preparation advisor.
"""

import pytest

from calendar_engine.models import EventPriority, EventType
from calendar_engine.schemas import SchedulingRequest, TeamMember
from calendar_engine.services.preparation import (
    calculate_optimal_preparation_minutes, generate_meeting_preparation, request_preparation_suggestions,
)
from tests.factories import at, make_attendees, make_event


def meeting(**fields):
    fields.setdefault("attendees", make_attendees(2))
    return make_event("m", at(0, 14), at(0, 15), **fields)


def has_travel_item(items):
    return any("travel" in item.lower() for item in items)


class TestPreparationItems:
    def test_meeting_basics(self, preferences, estimator):
        items = generate_meeting_preparation(meeting(), preferences, estimator).preparation_items
        assert "Review meeting agenda" in items
        assert "Prepare key discussion points" in items

    def test_non_meeting_has_no_agenda_items(self, preferences, estimator):
        items = generate_meeting_preparation(meeting(type=EventType.TASK), preferences, estimator).preparation_items
        assert "Review meeting agenda" not in items

    def test_physical_location_needs_travel(self, preferences, estimator):
        prep = generate_meeting_preparation(meeting(location="Conference Room B"), preferences, estimator)
        assert has_travel_item(prep.preparation_items)
        assert "Allow 30 minutes for travel to Conference Room B" in prep.preparation_items

    def test_virtual_location_needs_no_travel(self, preferences, estimator):
        prep = generate_meeting_preparation(meeting(location="Virtual Meeting"), preferences, estimator)
        assert not has_travel_item(prep.preparation_items)

    def test_larger_meeting_gets_structure(self, preferences, estimator):
        small = generate_meeting_preparation(meeting(attendees=make_attendees(2)), preferences, estimator)
        large = generate_meeting_preparation(meeting(attendees=make_attendees(8)), preferences, estimator)

        assert len(large.preparation_items) >= len(small.preparation_items)
        assert "Prepare structured discussion format" in large.preparation_items
        assert "Consider if all attendees are necessary" in large.preparation_items

    def test_very_large_meeting_gets_facilitation(self, preferences, estimator):
        items = generate_meeting_preparation(meeting(attendees=make_attendees(12)), preferences, estimator).preparation_items
        assert "Assign a facilitator and a note-taker" in items

    @pytest.mark.parametrize("priority", [EventPriority.HIGH, EventPriority.URGENT])
    def test_high_priority_contingency(self, preferences, estimator, priority):
        items = generate_meeting_preparation(meeting(priority=priority), preferences, estimator).preparation_items
        assert "Prepare backup plans for key decisions" in items
        assert "Review recent related communications" in items


class TestPreparationMinutes:
    @pytest.mark.parametrize("priority, attendees, expected", [
        (EventPriority.LOW, 2, 15),
        (EventPriority.MEDIUM, 2, 15),
        (EventPriority.HIGH, 2, 30),
        (EventPriority.URGENT, 2, 45),
        (EventPriority.MEDIUM, 8, 30),
        (EventPriority.MEDIUM, 12, 45),
        (EventPriority.URGENT, 12, 75),
    ])
    def test_lead_time(self, priority, attendees, expected):
        event = meeting(priority=priority, attendees=make_attendees(attendees))
        assert calculate_optimal_preparation_minutes(event) == expected


class TestDocumentsAndInsights:
    def test_one_insight_per_attendee(self, preferences, estimator):
        prep = generate_meeting_preparation(meeting(attendees=make_attendees(3)), preferences, estimator)
        assert [i.email for i in prep.participant_insights] == [f"person{i}@example.com" for i in range(3)]
        assert all(i.recent_interactions == [] for i in prep.participant_insights)

    def test_expertise_from_team(self, preferences, estimator):
        team = [TeamMember(id="p0", name="Person 0", email="person0@example.com", skills=["finance"])]
        prep = generate_meeting_preparation(meeting(), preferences, estimator, team=team)
        assert prep.participant_insights[0].expertise == ["finance"]
        assert prep.participant_insights[1].expertise == []

    def test_documents_from_project_and_client(self, preferences, estimator):
        prep = generate_meeting_preparation(meeting(project_id="apollo", client_id="acme"), preferences, estimator)
        assert any("apollo" in d for d in prep.document_suggestions)
        assert any("acme" in d for d in prep.document_suggestions)


class TestRequestSuggestions:
    def test_basic_suggestions(self):
        suggestions = request_preparation_suggestions(SchedulingRequest(title="Sync", duration=30))
        assert suggestions == [
            "Prepare meeting agenda",
            "Review participant backgrounds",
            "Set up meeting room or virtual link",
        ]

    def test_large_high_priority_request(self):
        request = SchedulingRequest(
            title="Planning", duration=60, priority=EventPriority.URGENT,
            attendee_emails={f"person{i}@example.com" for i in range(6)},
        )
        suggestions = request_preparation_suggestions(request)
        assert "Consider breaking into smaller groups" in suggestions
        assert "Prepare decision-making framework" in suggestions
        assert "Identify key stakeholders for follow-up" in suggestions
