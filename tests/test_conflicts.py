"""
Tests for conflict detection.
"""

from calendar_engine.models import ConflictSeverity, ConflictType, EventPriority, EventStatus, ResolutionType
from calendar_engine.services.conflicts import detect_conflicts, detect_event_conflicts
from tests.factories import at, make_event


class TestDetectConflicts:
    def test_overlap_takes_severity_of_higher_priority(self, estimator):
        events = [make_event("ceo", at(0, 10), at(0, 11), priority=EventPriority.URGENT)]
        conflicts = detect_conflicts(at(0, 10, 30), at(0, 11, 30), events, estimator, priority=EventPriority.LOW)

        assert len(conflicts) == 1
        assert conflicts[0].conflicting_event_id == "ceo"
        assert conflicts[0].conflict_type == ConflictType.OVERLAP
        assert conflicts[0].severity == ConflictSeverity.CRITICAL
        assert conflicts[0].suggested_resolution.type == ResolutionType.RESCHEDULE

    def test_overlap_between_low_priority_events(self, estimator):
        events = [make_event("coffee", at(0, 10), at(0, 11), priority=EventPriority.LOW)]
        conflicts = detect_conflicts(at(0, 10), at(0, 11), events, estimator, priority=EventPriority.LOW)
        assert conflicts[0].severity == ConflictSeverity.LOW

    def test_back_to_back(self, estimator):
        events = [make_event("standup", at(0, 9, 30), at(0, 9, 58))]
        conflicts = detect_conflicts(at(0, 10), at(0, 11), events, estimator)

        assert len(conflicts) == 1
        assert conflicts[0].conflict_type == ConflictType.BACK_TO_BACK
        assert conflicts[0].severity == ConflictSeverity.LOW

    def test_comfortable_gap_is_not_a_conflict(self, estimator):
        events = [make_event("standup", at(0, 9), at(0, 9, 30))]
        assert detect_conflicts(at(0, 10), at(0, 11), events, estimator) == []

    def test_travel_time(self, estimator):
        events = [make_event("site", at(0, 11), at(0, 12), location="Client HQ")]
        conflicts = detect_conflicts(at(0, 12, 20), at(0, 13), events, estimator, location="Office")

        assert len(conflicts) == 1
        assert conflicts[0].conflict_type == ConflictType.TRAVEL_TIME
        assert conflicts[0].severity == ConflictSeverity.MEDIUM

    def test_no_travel_conflict_for_virtual_meeting(self, estimator):
        events = [make_event("site", at(0, 11), at(0, 12), location="Client HQ")]
        assert detect_conflicts(at(0, 12, 20), at(0, 13), events, estimator, location="Virtual Meeting") == []

    def test_workload(self, estimator):
        events = [make_event("offsite", at(0, 8), at(0, 17))]
        conflicts = detect_conflicts(at(0, 17, 30), at(0, 18), events, estimator)

        assert len(conflicts) == 1
        assert conflicts[0].conflict_type == ConflictType.WORKLOAD
        assert conflicts[0].conflicting_event_id == "offsite"

    def test_cancelled_events_are_ignored(self, estimator):
        events = [make_event("gone", at(0, 10), at(0, 11), status=EventStatus.CANCELLED)]
        assert detect_conflicts(at(0, 10), at(0, 11), events, estimator) == []

    def test_event_does_not_conflict_with_itself(self, estimator):
        event = make_event("review", at(0, 10), at(0, 11))
        other = make_event("lunch", at(0, 10, 30), at(0, 11, 30))
        conflicts = detect_event_conflicts(event, [event, other], estimator)
        assert [c.conflicting_event_id for c in conflicts] == ["lunch"]
