import enum

# Enums

class EventType(str, enum.Enum):
    MEETING = "MEETING"
    APPOINTMENT = "APPOINTMENT"
    TASK = "TASK"
    REMINDER = "REMINDER"
    DEADLINE = "DEADLINE"
    PERSONAL = "PERSONAL"
    TRAVEL = "TRAVEL"
    BREAK = "BREAK"

class EventPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

class EventStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    TENTATIVE = "TENTATIVE"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

class AttendeeStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    TENTATIVE = "TENTATIVE"

class SchedulingFlexibility(str, enum.Enum):
    FIXED = "fixed"           # Cannot be moved at all (time and day locked)
    STRICT = "strict"         # Cannot be moved to different days, but can move time within same day
    FLEXIBLE = "flexible"     # Can be moved freely within the same week

class TransportMode(str, enum.Enum):
    WALKING = "WALKING"
    DRIVING = "DRIVING"
    PUBLIC_TRANSPORT = "PUBLIC_TRANSPORT"
    CYCLING = "CYCLING"

class WeatherCondition(str, enum.Enum):
    SUNNY = "sunny"
    RAINY = "rainy"
    CLOUDY = "cloudy"
    STORMY = "stormy"

class CongestionLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class ImpactLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class ConflictType(str, enum.Enum):
    OVERLAP = "OVERLAP"
    BACK_TO_BACK = "BACK_TO_BACK"
    TRAVEL_TIME = "TRAVEL_TIME"
    WORKLOAD = "WORKLOAD"

class ConflictSeverity(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

class ResolutionType(str, enum.Enum):
    RESCHEDULE = "RESCHEDULE"
    SHORTEN = "SHORTEN"
    SPLIT = "SPLIT"
    DELEGATE = "DELEGATE"
    CANCEL = "CANCEL"

# Weekday names indexed by datetime.weekday() (Monday=0)
WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
