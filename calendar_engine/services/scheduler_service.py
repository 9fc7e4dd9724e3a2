"""
Scheduling optimization service: the public operations of the engine.

The service owns configuration and providers only. Every call works on
its own snapshot of the optimization context, so one instance can serve
concurrent requests.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

import pytz

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.exceptions import InvalidSchedulingRequestError
from calendar_engine.models import TransportMode
from calendar_engine.schemas import (
    SchedulingRequest, OptimizationContext, SchedulingResult, CalendarEvent, TimeSlot, TimeFrame,
    MeetingContext, TeamMember, TravelTimeInfo, ScheduleOptimizationResult, TeamWorkloadResult,
    MeetingPreparation, ConflictInfo, WeatherInfo, TrafficInfo,
)
from calendar_engine.scheduling import (
    generate_candidate_slots, score_slots, rank_slots, optimize_schedule, balance_team_workload,
)
from calendar_engine.scheduling.core.calendar import get_timezone
from calendar_engine.scheduling.core.time_slot import (
    localize, localize_event, localize_slot, make_slot, nearest_event_before, find_overlapping_events,
)
from calendar_engine.scheduling.algorithms.team_balancing import has_skills
from .conflicts import detect_conflicts, detect_event_conflicts
from .preparation import generate_meeting_preparation, request_preparation_suggestions
from .providers import (
    TravelTimeProvider, WeatherProvider, TrafficProvider, TeamAvailabilityProvider,
    NullWeatherProvider, NullTrafficProvider, NullTeamAvailabilityProvider, fetch_with_fallback,
)
from .travel import TravelTimeEstimator, is_physical_location

logger = logging.getLogger(__name__)

MAX_DURATION_MINUTES = 24 * 60
VIRTUAL_MEETING_LOCATION = "Virtual Meeting"


class SchedulingOptimizationService:
    """Facade over candidate generation, scoring, ranking and the optimizers."""

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG,
                 travel_provider: Optional[TravelTimeProvider] = None,
                 weather_provider: Optional[WeatherProvider] = None,
                 traffic_provider: Optional[TrafficProvider] = None,
                 team_provider: Optional[TeamAvailabilityProvider] = None):
        self.config = config
        self.estimator = TravelTimeEstimator(travel_provider, config)
        self.weather_provider = weather_provider or NullWeatherProvider()
        self.traffic_provider = traffic_provider or NullTrafficProvider()
        self.team_provider = team_provider or NullTeamAvailabilityProvider()

    # ----------------- Input preparation ---------------------

    def _prepare_context(self, context: OptimizationContext) -> Tuple[OptimizationContext, pytz.BaseTzInfo, datetime]:
        """Bring every datetime in the context into the user's timezone and fix 'now'."""
        tz = get_timezone(context.user_preferences)
        now = localize(context.reference_time, tz) if context.reference_time else datetime.now(tz)

        team = None
        if context.team_availability is not None:
            team = [
                m.model_copy(update={"availability": [localize_slot(s, tz) for s in m.availability]})
                for m in context.team_availability
            ]

        traffic = context.traffic_data
        if traffic is not None:
            # Caller-supplied traffic describes current conditions unless it says otherwise
            observed_at = localize(traffic.observed_at, tz) if traffic.observed_at else now
            traffic = traffic.model_copy(update={"observed_at": observed_at})

        prepared = context.model_copy(update={
            "existing_events": [localize_event(e, tz) for e in context.existing_events],
            "team_availability": team,
            "traffic_data": traffic,
            "reference_time": now,
        })
        return prepared, tz, now

    def _localized_slots(self, slots: List[TimeSlot], tz: pytz.BaseTzInfo, field: str) -> List[TimeSlot]:
        localized = [localize_slot(s, tz) for s in slots]
        for slot in localized:
            if slot.end_time <= slot.start_time:
                raise InvalidSchedulingRequestError(
                    f"Slot starting {slot.start_time} does not end after it starts in {tz.zone}", field=field,
                )
        return localized

    def _prepare_request(self, request: SchedulingRequest, tz: pytz.BaseTzInfo) -> SchedulingRequest:
        if not request.title.strip():
            raise InvalidSchedulingRequestError("Title must not be blank", field="title")
        if request.duration > MAX_DURATION_MINUTES:
            raise InvalidSchedulingRequestError(
                f"Duration of {request.duration} minutes is longer than one day", field="duration",
            )

        update = {"preferred_times": self._localized_slots(request.preferred_times, tz, "preferred_times")}
        if request.constraints is not None:
            update["constraints"] = request.constraints.model_copy(update={
                "avoid_time_slots": self._localized_slots(
                    request.constraints.avoid_time_slots, tz, "constraints.avoid_time_slots",
                ),
            })
        return request.model_copy(update=update)

    async def _weather_for(self, context: OptimizationContext, when: datetime) -> Optional[WeatherInfo]:
        if context.weather_data is not None:
            return context.weather_data
        return await fetch_with_fallback(
            lambda: self.weather_provider.get_weather(when), None, self.config.provider_timeout_seconds, "Weather",
        )

    async def _traffic_for(self, context: OptimizationContext, from_location: str, to_location: Optional[str],
                           when: datetime) -> Optional[TrafficInfo]:
        if context.traffic_data is not None:
            return context.traffic_data
        if not is_physical_location(to_location):
            return None
        return await self._fetch_traffic(from_location, to_location, when)

    async def _fetch_traffic(self, from_location: str, to_location: str, when: datetime) -> Optional[TrafficInfo]:
        """Traffic snapshot tagged with the trip and time it was requested for."""
        traffic = await fetch_with_fallback(
            lambda: self.traffic_provider.get_traffic(from_location, to_location, when), None,
            self.config.provider_timeout_seconds, "Traffic",
        )
        if traffic is None:
            return None
        return traffic.model_copy(update={
            "observed_at": when,
            "from_location": from_location,
            "to_location": to_location,
        })

    async def _with_external_data(self, context: OptimizationContext, now: datetime,
                                  location: Optional[str]) -> OptimizationContext:
        weather = await self._weather_for(context, now)
        traffic = await self._traffic_for(context, context.user_preferences.default_location, location, now)
        return context.model_copy(update={"weather_data": weather, "traffic_data": traffic})

    # ----------------- Public operations ---------------------

    async def find_optimal_times(self, request: SchedulingRequest, context: OptimizationContext) -> SchedulingResult:
        """
        Suggest up to max_suggestions slots for a new meeting, best first.
        An impossible combination of constraints yields no suggestions, not an error.
        """
        context, tz, now = self._prepare_context(context)
        request = self._prepare_request(request, tz)
        context = await self._with_external_data(context, now, request.location)

        candidates = generate_candidate_slots(request, context, now, self.config)
        scored = score_slots(candidates, request, context, self.estimator, self.config)
        suggested = rank_slots(scored, self.config)

        conflicts: List[ConflictInfo] = []
        for preferred in request.preferred_times:
            conflicts.extend(detect_conflicts(
                preferred.start_time, preferred.end_time, context.existing_events, self.estimator,
                priority=request.priority,
                location=request.location,
                config=self.config,
            ))

        logger.info(
            f"Found {len(suggested)} suggestions from {len(candidates)} candidates for '{request.title}' "
            f"({len(conflicts)} conflicts on preferred times)"
        )
        return SchedulingResult(
            suggested_times=suggested,
            conflicts=conflicts,
            travel_time_considerations=self._travel_considerations(request, suggested, context),
            preparation_suggestions=request_preparation_suggestions(request),
        )

    def _travel_considerations(self, request: SchedulingRequest, slots: List[TimeSlot],
                               context: OptimizationContext) -> List[TravelTimeInfo]:
        """Trip from the nearest earlier physically located event on the same day to the meeting, per suggestion."""
        if not is_physical_location(request.location):
            return []

        located = [e for e in context.existing_events if is_physical_location(e.location)]
        considerations = []
        for slot in slots:
            same_day = [e for e in located if e.end_time.date() == slot.start_time.date()]
            previous = nearest_event_before(slot.start_time, same_day)
            if previous is None:
                continue
            considerations.append(self.estimator.estimate(
                previous.location, request.location, previous.end_time,
                weather=context.weather_data, traffic=context.traffic_data,
            ))
        return considerations

    def optimize_schedule(self, events: List[CalendarEvent], context: OptimizationContext) -> ScheduleOptimizationResult:
        context, tz, now = self._prepare_context(context)
        localized = [localize_event(e, tz) for e in events]

        result = optimize_schedule(localized, context.user_preferences, self.estimator, self.config, now)
        if not result.improvements:
            # Nothing moved: hand back the caller's events untouched
            return result.model_copy(update={"optimized_events": list(events)})
        return result

    async def suggest_meeting_times(self, meeting: MeetingContext, context: OptimizationContext) -> List[TimeSlot]:
        """
        Rank slots inside the participants' shared availability.
        Falls back to the candidate generator when no participant publishes availability.
        """
        context, tz, now = self._prepare_context(context)
        location = VIRTUAL_MEETING_LOCATION if meeting.is_virtual else meeting.location
        request = SchedulingRequest(
            title="Meeting",
            duration=meeting.estimated_duration,
            attendee_emails=set(meeting.participants),
            priority=meeting.priority,
            location=location,
        )
        request = self._prepare_request(request, tz)
        context = await self._with_external_data(context, now, location)

        members = await self._participants(meeting.participants, context, tz)
        self._check_skills(meeting, members)

        availability = [m.availability for m in members if m.availability]
        if availability:
            candidates = self._common_slots(availability, meeting.estimated_duration, context.existing_events, now)
        else:
            logger.debug("No participant availability published, using working-hours candidates")
            candidates = generate_candidate_slots(request, context, now, self.config)

        scored = score_slots(candidates, request, context, self.estimator, self.config)
        suggested = rank_slots(scored, self.config)
        logger.info(f"Suggested {len(suggested)} times for {len(meeting.participants)} participants")
        return suggested

    async def _participants(self, emails: List[str], context: OptimizationContext,
                            tz: pytz.BaseTzInfo) -> List[TeamMember]:
        wanted = {e.lower() for e in emails}
        if context.team_availability is not None:
            team = context.team_availability
        else:
            team = await fetch_with_fallback(
                lambda: self.team_provider.get_members(list(emails)), [],
                self.config.provider_timeout_seconds, "Team availability",
            )
            team = [
                m.model_copy(update={"availability": [localize_slot(s, tz) for s in m.availability]})
                for m in team
            ]
        return [m for m in team if m.email.lower() in wanted]

    def _check_skills(self, meeting: MeetingContext, members: List[TeamMember]):
        if not meeting.required_skills:
            return
        for skill in meeting.required_skills:
            if not any(has_skills(m, [skill]) for m in members):
                logger.warning(f"No participant covers required skill '{skill}'")

    def _common_slots(self, availability: List[List[TimeSlot]], duration_minutes: int,
                      existing_events: List[CalendarEvent], now: datetime) -> List[TimeSlot]:
        """Windows every participant is free in, sliced at the slot stride."""
        common = [(s.start_time, s.end_time) for s in availability[0]]
        for slots in availability[1:]:
            intersected = []
            for start_a, end_a in common:
                for slot in slots:
                    start, end = max(start_a, slot.start_time), min(end_a, slot.end_time)
                    if start < end:
                        intersected.append((start, end))
            common = intersected

        duration = timedelta(minutes=duration_minutes)
        stride = timedelta(minutes=self.config.slot_stride_minutes)
        candidates = {}
        for window_start, window_end in common:
            start = window_start
            while start + duration <= window_end:
                if (start >= now and start not in candidates
                        and not find_overlapping_events(start, start + duration, existing_events)):
                    candidates[start] = make_slot(start, duration_minutes)
                start += stride
        return [candidates[start] for start in sorted(candidates)]

    async def calculate_optimal_travel_time(self, from_location: str, to_location: str, departure: datetime,
                                            mode: TransportMode = TransportMode.DRIVING) -> TravelTimeInfo:
        weather = await fetch_with_fallback(
            lambda: self.weather_provider.get_weather(departure), None,
            self.config.provider_timeout_seconds, "Weather",
        )
        traffic = await self._fetch_traffic(from_location, to_location, departure)
        return self.estimator.estimate(from_location, to_location, departure, mode, weather=weather, traffic=traffic)

    def optimize_team_workload(self, members: List[TeamMember], events: List[CalendarEvent],
                               timeframe: TimeFrame) -> TeamWorkloadResult:
        # No user timezone here; naive datetimes are read as UTC
        events = [localize_event(e, pytz.utc) for e in events]
        timeframe = TimeFrame(start=localize(timeframe.start, pytz.utc), end=localize(timeframe.end, pytz.utc))
        return balance_team_workload(members, events, timeframe, self.config)

    async def generate_meeting_preparation(self, event: CalendarEvent, context: OptimizationContext) -> MeetingPreparation:
        context, tz, _ = self._prepare_context(context)
        event = localize_event(event, tz)

        team = context.team_availability
        if team is None:
            team = await fetch_with_fallback(
                lambda: self.team_provider.get_members([a.email for a in event.attendees]), [],
                self.config.provider_timeout_seconds, "Team availability",
            )

        weather = await self._weather_for(context, event.start_time)
        traffic = await self._traffic_for(
            context, context.user_preferences.default_location, event.location, event.start_time,
        )
        return generate_meeting_preparation(
            event, context.user_preferences, self.estimator, team=team, weather=weather, traffic=traffic,
        )

    def check_conflicts(self, event: CalendarEvent, context: OptimizationContext) -> List[ConflictInfo]:
        context, tz, _ = self._prepare_context(context)
        return detect_event_conflicts(localize_event(event, tz), context.existing_events, self.estimator, self.config)
