"""
Tests for the individual slot sub-scores, the composite scorer and the ranker.
"""

from datetime import date, time

import pytest
from pydantic import ValidationError

from calendar_engine.config import ScoringConfig
from calendar_engine.models import CongestionLevel, TransportMode, WeatherCondition
from calendar_engine.schemas import (
    CalendarPreferences, DaySchedule, SchedulingRequest, TrafficInfo, WeatherInfo, WorkingHours,
)
from calendar_engine.scheduling.scoring.availability_scoring import calculate_availability_score
from calendar_engine.scheduling.scoring.ranking import describe_slot, rank_slots
from calendar_engine.scheduling.scoring.slot_scoring import calculate_slot_score, score_slots
from calendar_engine.scheduling.scoring.time_scoring import calculate_energy_score, calculate_time_score
from calendar_engine.scheduling.scoring.travel_scoring import calculate_travel_score
from calendar_engine.scheduling.scoring.weather_scoring import calculate_weather_score
from calendar_engine.scheduling.scoring.workload_scoring import calculate_workload_score
from calendar_engine.services.providers import StaticTravelTimeProvider
from calendar_engine.services.travel import TravelTimeEstimator
from tests.factories import at, make_context, make_event, make_slot


class TestScoringConfig:
    def test_default_weights_sum_to_one(self, config):
        total = (
            config.time_weight + config.availability_weight + config.travel_weight +
            config.workload_weight + config.weather_weight + config.energy_weight
        )
        assert total == pytest.approx(1.0)

    def test_weights_not_summing_to_one_are_rejected(self):
        with pytest.raises(ValidationError):
            ScoringConfig(time_weight=0.5)

    def test_rebalanced_weights_are_accepted(self):
        config = ScoringConfig(time_weight=0.25, availability_weight=0.30)
        assert config.time_weight == 0.25


class TestTimeScore:
    def test_peak_hour(self, preferences):
        assert calculate_time_score(make_slot(at(0, 9, 30)), preferences) == 1.0
        assert calculate_time_score(make_slot(at(0, 15)), preferences) == 1.0

    def test_good_hour(self, preferences):
        assert calculate_time_score(make_slot(at(0, 12)), preferences) == 0.8

    def test_outside_working_bounds(self, preferences):
        assert calculate_time_score(make_slot(at(0, 8)), preferences) == 0.2
        assert calculate_time_score(make_slot(at(0, 17)), preferences) == 0.2

    def test_non_working_day(self, preferences):
        saturday = at(5, 10)
        assert calculate_time_score(make_slot(saturday), preferences) == 0.3

    def test_borderline_hour_inside_long_day(self):
        long_day = DaySchedule(start_time=time(6, 0), end_time=time(21, 0))
        preferences = CalendarPreferences(working_hours=WorkingHours(monday=long_day))
        assert calculate_time_score(make_slot(at(0, 18)), preferences) == 0.5


class TestEnergyScore:
    def test_morning_peak(self):
        assert calculate_energy_score(make_slot(at(0, 9))) == 1.0

    def test_afternoon_dip(self):
        assert calculate_energy_score(make_slot(at(0, 13))) == 0.5

    def test_hour_outside_curve_uses_default(self):
        assert calculate_energy_score(make_slot(at(0, 3))) == 0.3


class TestAvailabilityScore:
    def test_clear_slot(self):
        events = [make_event("a", at(0, 12), at(0, 13))]
        assert calculate_availability_score(make_slot(at(0, 10)), events) == 1.0

    def test_neighbour_inside_buffer(self):
        events = [make_event("a", at(0, 11, 5), at(0, 12))]
        assert calculate_availability_score(make_slot(at(0, 10)), events) == 0.7

    def test_touching_neighbour_is_inside_buffer(self):
        events = [make_event("a", at(0, 9), at(0, 10))]
        assert calculate_availability_score(make_slot(at(0, 10)), events) == 0.7

    def test_overlap(self):
        events = [make_event("a", at(0, 10, 30), at(0, 11, 30))]
        assert calculate_availability_score(make_slot(at(0, 10)), events) == 0.0


class TestTravelScore:
    def test_no_located_neighbours(self, estimator):
        events = [make_event("a", at(0, 9), at(0, 9, 50))]
        assert calculate_travel_score(make_slot(at(0, 10)), events, estimator) == 1.0

    def test_gap_shorter_than_travel(self, estimator):
        # Leaving at 14:00 (no rush) takes the default 30 minutes
        events = [make_event("a", at(0, 14, 20), at(0, 15), location="Client HQ")]
        assert calculate_travel_score(make_slot(at(0, 13)), events, estimator) == 0.3

    def test_gap_without_slack(self, estimator):
        events = [make_event("a", at(0, 11), at(0, 12), location="Office")]
        assert calculate_travel_score(make_slot(at(0, 12, 40)), events, estimator) == 0.7

    def test_rush_hour_lengthens_travel(self, estimator):
        # Leaving at 09:50 takes 45 minutes
        events = [make_event("a", at(0, 9), at(0, 9, 50), location="Office")]
        assert calculate_travel_score(make_slot(at(0, 10, 30)), events, estimator) == 0.3

    def test_penalties_multiply(self, estimator):
        events = [
            make_event("before", at(0, 11), at(0, 12), location="Office"),
            make_event("after", at(0, 14), at(0, 15), location="Client HQ"),
        ]
        score = calculate_travel_score(make_slot(at(0, 12, 40), minutes=60), events, estimator)
        assert score == pytest.approx(0.7 * 0.3)

    def test_meeting_location_is_the_anchor(self, config):
        provider = StaticTravelTimeProvider({("Office", "HQ", TransportMode.DRIVING): 10})
        estimator = TravelTimeEstimator(provider, config)
        events = [make_event("a", at(0, 11), at(0, 12), location="Office")]
        slot = make_slot(at(0, 12, 20))
        assert calculate_travel_score(slot, events, estimator, meeting_location="HQ") == 0.7
        assert calculate_travel_score(slot, events, estimator, meeting_location="Office") == 1.0

    def test_virtual_meeting_needs_no_travel(self, estimator):
        events = [make_event("a", at(0, 11), at(0, 12), location="Office")]
        slot = make_slot(at(0, 12))
        assert calculate_travel_score(slot, events, estimator, meeting_location="Virtual Meeting") == 1.0

    def test_virtual_neighbour_needs_no_travel(self, estimator):
        events = [make_event("call", at(0, 11), at(0, 12), location="Virtual Meeting")]
        slot = make_slot(at(0, 12))
        assert calculate_travel_score(slot, events, estimator, meeting_location="Client HQ") == 1.0

    def test_virtual_neighbour_does_not_hide_earlier_trip(self, estimator):
        events = [
            make_event("site", at(0, 10), at(0, 11), location="Office"),
            make_event("call", at(0, 11), at(0, 11, 30), location="Virtual Meeting"),
        ]
        # 30 minutes since leaving the office covers the trip but not the slack
        slot = make_slot(at(0, 11, 30))
        assert calculate_travel_score(slot, events, estimator, meeting_location="Client HQ") == 0.7

    def test_traffic_from_another_day_keeps_rush_hour(self, estimator):
        traffic = TrafficInfo(congestion_level=CongestionLevel.LOW, observed_at=at(0, 8))
        events = [make_event("site", at(3, 7), at(3, 8), location="Office")]
        # Leaving at 08:00 on Thursday still takes 45 minutes
        slot = make_slot(at(3, 8, 50))
        score = calculate_travel_score(slot, events, estimator, meeting_location="Client HQ", traffic=traffic)
        assert score == 0.7


class TestWorkloadScore:
    @pytest.mark.parametrize("hours, expected", [(2, 1.0), (4, 1.0), (5, 0.8), (7, 0.6), (9, 0.3)])
    def test_thresholds(self, hours, expected):
        events = [make_event("a", at(0, 6), at(0, 6 + hours))]
        assert calculate_workload_score(make_slot(at(0, 16)), events) == expected

    def test_only_same_day_counts(self):
        events = [make_event("a", at(1, 8), at(1, 17))]
        assert calculate_workload_score(make_slot(at(0, 10)), events) == 1.0


class TestWeatherScore:
    def test_no_weather_data(self):
        assert calculate_weather_score(make_slot(at(0, 10)), None) == 0.8

    def test_stormy_favours_indoor_meeting(self):
        weather = WeatherInfo(condition=WeatherCondition.STORMY, temperature=12)
        assert calculate_weather_score(make_slot(at(0, 10)), weather) == 0.9

    def test_heavy_precipitation(self):
        weather = WeatherInfo(condition=WeatherCondition.CLOUDY, temperature=12, precipitation=0.7)
        assert calculate_weather_score(make_slot(at(0, 10)), weather) == 0.9

    def test_mild_sunny(self):
        weather = WeatherInfo(condition=WeatherCondition.SUNNY, temperature=20)
        assert calculate_weather_score(make_slot(at(0, 10)), weather) == 1.0

    def test_hot_sunny_is_neutral(self):
        weather = WeatherInfo(condition=WeatherCondition.SUNNY, temperature=30)
        assert calculate_weather_score(make_slot(at(0, 10)), weather) == 0.8

    def test_forecast_for_another_day_is_ignored(self):
        weather = WeatherInfo(forecast_date=date(2025, 3, 4), condition=WeatherCondition.STORMY, temperature=12)
        assert calculate_weather_score(make_slot(at(0, 10)), weather) == 0.8


class TestCompositeScore:
    def test_ideal_slot_without_weather(self, estimator):
        request = SchedulingRequest(title="Sync", duration=60)
        score = calculate_slot_score(make_slot(at(0, 9)), request, make_context(), estimator)
        # Everything perfect except the 0.8 weather default
        assert score == pytest.approx(0.30 + 0.25 + 0.20 + 0.15 + 0.05 * 0.8 + 0.05)

    def test_score_slots_keeps_times_and_order(self, estimator):
        request = SchedulingRequest(title="Sync", duration=60)
        slots = [make_slot(at(0, 13)), make_slot(at(0, 9))]
        scored = score_slots(slots, request, make_context(), estimator)
        assert [s.start_time for s in scored] == [s.start_time for s in slots]
        assert [s.end_time for s in scored] == [s.end_time for s in slots]
        assert all(0.0 <= s.confidence <= 1.0 for s in scored)
        assert scored[1].confidence > scored[0].confidence


class TestRanking:
    def test_sorted_and_truncated(self):
        confidences = [0.5, 0.95, 0.75, 0.85, 0.6, 0.9, 0.4]
        slots = [make_slot(at(0, 9 + i)).model_copy(update={"confidence": c}) for i, c in enumerate(confidences)]
        ranked = rank_slots(slots)
        assert [s.confidence for s in ranked] == [0.95, 0.9, 0.85, 0.75, 0.6]

    def test_ties_keep_generation_order(self):
        slots = [make_slot(at(0, 9 + i)).model_copy(update={"confidence": 0.8}) for i in range(3)]
        ranked = rank_slots(slots)
        assert [s.start_time for s in ranked] == [s.start_time for s in slots]

    def test_reason_bands(self):
        def reason(confidence):
            return describe_slot(make_slot(at(0, 9)).model_copy(update={"confidence": confidence}))

        assert reason(0.95) == "Optimal time on Monday - high energy and no conflicts"
        assert reason(0.85) == "Good time slot with minimal conflicts"
        assert reason(0.75) == "Available time with some considerations"
        assert reason(0.7) == "Available but may require adjustments"

    def test_empty_input(self):
        assert rank_slots([]) == []
