from pydantic import BaseModel, Field, EmailStr, field_validator, model_validator
from datetime import datetime, date, time
from typing import Optional, List, Set
import pytz
from .models import (
    EventType, EventPriority, EventStatus, AttendeeStatus, SchedulingFlexibility, TransportMode,
    WeatherCondition, CongestionLevel, ImpactLevel, ConflictType, ConflictSeverity, ResolutionType,
    WEEKDAY_NAMES,
)

def _ends_before(end: datetime, start: datetime, inclusive: bool = False) -> bool:
    try:
        return end <= start if inclusive else end < start
    except TypeError:
        raise ValueError("start and end must both be naive or both timezone-aware")

# ----------------- Time Slot Schemas ---------------------

class TimeSlot(BaseModel):
    start_time: datetime
    end_time: datetime
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    reason: str = "Available time slot"

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_range(self):
        if _ends_before(self.end_time, self.start_time, inclusive=True):
            raise ValueError("end_time must be after start_time")
        return self

    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)

# ----------------- Working Calendar Schemas ---------------------

class TimeBreak(BaseModel):
    start_time: time
    end_time: time
    title: str = "Break"

class DaySchedule(BaseModel):
    is_working_day: bool = True
    start_time: time = time(9, 0)
    end_time: time = time(17, 0)
    breaks: List[TimeBreak] = []

    @model_validator(mode="after")
    def check_hours(self):
        if self.end_time <= self.start_time:
            raise ValueError("Working day must end after it starts")
        return self

def _weekday_schedule() -> DaySchedule:
    return DaySchedule()

def _weekend_schedule() -> DaySchedule:
    return DaySchedule(is_working_day=False)

class WorkingHours(BaseModel):
    monday: DaySchedule = Field(default_factory=_weekday_schedule)
    tuesday: DaySchedule = Field(default_factory=_weekday_schedule)
    wednesday: DaySchedule = Field(default_factory=_weekday_schedule)
    thursday: DaySchedule = Field(default_factory=_weekday_schedule)
    friday: DaySchedule = Field(default_factory=_weekday_schedule)
    saturday: DaySchedule = Field(default_factory=_weekend_schedule)
    sunday: DaySchedule = Field(default_factory=_weekend_schedule)

    def for_weekday(self, weekday: int) -> DaySchedule:
        """Resolve the schedule for a datetime.weekday() index."""
        return getattr(self, WEEKDAY_NAMES[weekday])

class CalendarPreferences(BaseModel):
    working_hours: WorkingHours = Field(default_factory=WorkingHours)
    time_zone: str = "UTC"
    default_event_duration: int = Field(default=60, gt=0)
    default_location: str = "current_location"

    @field_validator("time_zone")
    @classmethod
    def check_time_zone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

# ----------------- Event Schemas ---------------------

class EventAttendee(BaseModel):
    email: EmailStr
    name: str = ""
    status: AttendeeStatus = AttendeeStatus.PENDING
    is_optional: bool = False

class CalendarEvent(BaseModel):
    id: str
    title: str = ""
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    is_all_day: bool = False
    type: EventType = EventType.MEETING
    priority: EventPriority = EventPriority.MEDIUM
    status: EventStatus = EventStatus.CONFIRMED
    organizer_id: Optional[str] = None
    attendees: List[EventAttendee] = []
    scheduling_flexibility: SchedulingFlexibility = SchedulingFlexibility.FLEXIBLE
    required_skills: List[str] = []
    project_id: Optional[str] = None
    client_id: Optional[str] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_range(self):
        if _ends_before(self.end_time, self.start_time):
            raise ValueError("end_time must not be before start_time")
        return self

# ----------------- Scheduling Request Schemas ---------------------

class SchedulingConstraints(BaseModel):
    must_be_within_working_hours: bool = False
    allow_weekends: bool = False
    minimum_notice_hours: int = Field(default=0, ge=0)
    maximum_advance_days: int = Field(default=30, gt=0)
    preferred_days_of_week: Optional[List[int]] = None  # datetime.weekday() values
    avoid_time_slots: List[TimeSlot] = []

    @field_validator("preferred_days_of_week")
    @classmethod
    def check_days(cls, value):
        if value is not None and any(day < 0 or day > 6 for day in value):
            raise ValueError("preferred_days_of_week entries must be 0 (Monday) to 6 (Sunday)")
        return value

class SchedulingRequest(BaseModel):
    title: str = Field(..., min_length=1)
    duration: int = Field(..., gt=0, description="Meeting length in minutes")
    attendee_emails: Set[EmailStr] = set()
    priority: EventPriority = EventPriority.MEDIUM
    constraints: Optional[SchedulingConstraints] = None
    preferred_times: List[TimeSlot] = []
    location: Optional[str] = None

class MeetingContext(BaseModel):
    participants: List[EmailStr]
    required_skills: List[str] = []
    estimated_duration: int = Field(..., gt=0)
    priority: EventPriority = EventPriority.MEDIUM
    location: Optional[str] = None
    is_virtual: bool = False

# ----------------- External Data Schemas ---------------------

class WeatherInfo(BaseModel):
    forecast_date: Optional[date] = None
    condition: WeatherCondition
    temperature: float
    precipitation: float = Field(default=0.0, ge=0.0)

class TrafficInfo(BaseModel):
    congestion_level: CongestionLevel = CongestionLevel.LOW
    # Conditions observed around this time; a snapshot without one describes no trip
    observed_at: Optional[datetime] = None
    # Route the snapshot was taken for; None matches any route
    from_location: Optional[str] = None
    to_location: Optional[str] = None

class TeamMember(BaseModel):
    id: str
    name: str
    email: EmailStr
    availability: List[TimeSlot] = []
    skills: List[str] = []
    workload: float = Field(default=0.0, ge=0.0, le=1.0)

class OptimizationContext(BaseModel):
    user_preferences: CalendarPreferences = Field(default_factory=CalendarPreferences)
    existing_events: List[CalendarEvent] = []
    weather_data: Optional[WeatherInfo] = None
    traffic_data: Optional[TrafficInfo] = None
    team_availability: Optional[List[TeamMember]] = None
    reference_time: Optional[datetime] = None

class TimeFrame(BaseModel):
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def check_range(self):
        if _ends_before(self.end, self.start, inclusive=True):
            raise ValueError("Timeframe end must be after start")
        return self

# ----------------- Result Schemas ---------------------

class TravelTimeInfo(BaseModel):
    from_location: str
    to_location: str
    estimated_minutes: int
    mode: TransportMode

class ConflictResolution(BaseModel):
    type: ResolutionType
    description: str

class ConflictInfo(BaseModel):
    conflicting_event_id: str
    conflict_type: ConflictType
    severity: ConflictSeverity
    suggested_resolution: Optional[ConflictResolution] = None

class SchedulingResult(BaseModel):
    suggested_times: List[TimeSlot] = []
    conflicts: List[ConflictInfo] = []
    travel_time_considerations: List[TravelTimeInfo] = []
    preparation_suggestions: List[str] = []

class ScheduleImprovement(BaseModel):
    type: str
    description: str
    impact: ImpactLevel
    times_saved_minutes: int

class ScheduleOptimizationResult(BaseModel):
    optimized_events: List[CalendarEvent]
    improvements: List[ScheduleImprovement] = []
    energy_score: float

class WorkloadRecommendation(BaseModel):
    member_id: str
    recommendation: str
    impact: ImpactLevel

class RedistributionSuggestion(BaseModel):
    from_member_id: str
    to_member_id: str
    event_id: str
    reason: str

class TeamWorkloadResult(BaseModel):
    recommendations: List[WorkloadRecommendation] = []
    redistribution_suggestions: List[RedistributionSuggestion] = []
    team_efficiency_score: float

class ParticipantInsight(BaseModel):
    email: str
    name: str
    recent_interactions: List[str] = []
    preferred_communication_style: str = "direct"
    expertise: List[str] = []

class MeetingPreparation(BaseModel):
    preparation_items: List[str] = []
    document_suggestions: List[str] = []
    participant_insights: List[ParticipantInsight] = []
    optimal_preparation_minutes: int

# ----------------- API Body Schemas ---------------------

class FindOptimalTimesIn(BaseModel):
    request: SchedulingRequest
    context: OptimizationContext = Field(default_factory=OptimizationContext)

class OptimizeScheduleIn(BaseModel):
    events: List[CalendarEvent]
    context: OptimizationContext = Field(default_factory=OptimizationContext)

class SuggestMeetingTimesIn(BaseModel):
    meeting: MeetingContext
    context: OptimizationContext = Field(default_factory=OptimizationContext)

class TravelTimeIn(BaseModel):
    from_location: str = Field(..., min_length=1)
    to_location: str = Field(..., min_length=1)
    departure_time: datetime
    mode: TransportMode = TransportMode.DRIVING

class TeamWorkloadIn(BaseModel):
    members: List[TeamMember]
    events: List[CalendarEvent] = []
    timeframe: TimeFrame

class MeetingPreparationIn(BaseModel):
    event: CalendarEvent
    context: OptimizationContext = Field(default_factory=OptimizationContext)

class ConflictCheckIn(BaseModel):
    event: CalendarEvent
    context: OptimizationContext = Field(default_factory=OptimizationContext)
