"""
Environment configuration and the tunable scoring model.

Every weight, threshold and lookup table used by the engine lives on
ScoringConfig so the model can be tuned (or replaced in tests) without
touching generation or ranking code.
"""

import os
from typing import Dict, List, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

SCHEDULING_HORIZON_DAYS = int(os.getenv("SCHEDULING_HORIZON_DAYS", "30"))
SCHEDULING_SLOT_STRIDE_MINUTES = int(os.getenv("SCHEDULING_SLOT_STRIDE_MINUTES", "30"))
SCHEDULING_BUFFER_MINUTES = int(os.getenv("SCHEDULING_BUFFER_MINUTES", "15"))
PROVIDER_TIMEOUT_SECONDS = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "2.0"))
DEFAULT_TRAVEL_MINUTES = float(os.getenv("DEFAULT_TRAVEL_MINUTES", "30"))
MAX_SUGGESTIONS = int(os.getenv("MAX_SUGGESTIONS", "5"))

# Energy levels throughout the day (circadian rhythm approximation)
DEFAULT_ENERGY_CURVE: Dict[int, float] = {
    6: 0.4, 7: 0.6, 8: 0.8, 9: 1.0, 10: 1.0, 11: 0.9,
    12: 0.7, 13: 0.5, 14: 0.8, 15: 0.9, 16: 0.8, 17: 0.7,
    18: 0.6, 19: 0.5, 20: 0.4, 21: 0.3, 22: 0.2,
}


class ScoringConfig(BaseModel):
    """Weights, thresholds and tables of the multi-factor scoring model."""

    # Composite weights (must sum to 1.0)
    time_weight: float = 0.30
    availability_weight: float = 0.25
    travel_weight: float = 0.20
    workload_weight: float = 0.15
    weather_weight: float = 0.05
    energy_weight: float = 0.05

    # Candidate generation
    horizon_days: int = Field(default=SCHEDULING_HORIZON_DAYS, gt=0)
    slot_stride_minutes: int = Field(default=SCHEDULING_SLOT_STRIDE_MINUTES, gt=0)
    max_suggestions: int = Field(default=MAX_SUGGESTIONS, gt=0)

    # Time score (hour ranges are inclusive)
    peak_hours: List[Tuple[int, int]] = [(9, 11), (14, 16)]
    good_hours: Tuple[int, int] = (8, 17)

    # Availability / conflicts
    buffer_minutes: int = Field(default=SCHEDULING_BUFFER_MINUTES, ge=0)
    back_to_back_minutes: int = 5

    # Travel
    default_travel_minutes: float = DEFAULT_TRAVEL_MINUTES
    travel_slack_minutes: int = 15
    rush_hours: List[Tuple[int, int]] = [(7, 9), (17, 19)]
    rush_hour_multiplier: float = 1.5
    congestion_multipliers: Dict[str, float] = {"low": 1.0, "medium": 1.25, "high": 1.5}
    traffic_validity_minutes: int = 60
    stormy_travel_multiplier: float = 1.3
    rainy_travel_multiplier: float = 1.2
    heavy_precipitation: float = 0.5

    # Workload: (hours already booked, score) checked in order
    workload_thresholds: List[Tuple[float, float]] = [(8.0, 0.3), (6.0, 0.6), (4.0, 0.8)]

    # Weather score
    default_weather_score: float = 0.8
    indoor_weather_score: float = 0.9
    mild_weather_score: float = 1.0
    mild_temperature_range: Tuple[float, float] = (15.0, 25.0)

    # Energy score
    energy_curve: Dict[int, float] = Field(default_factory=lambda: dict(DEFAULT_ENERGY_CURVE))
    default_energy: float = 0.3

    # Schedule optimizer
    neutral_schedule_score: float = 0.8
    max_optimizer_rounds: int = 50

    # Team workload
    high_load_threshold: float = 0.8
    low_load_threshold: float = 0.5
    team_capacity_hours_per_day: float = 8.0

    # External providers
    provider_timeout_seconds: float = Field(default=PROVIDER_TIMEOUT_SECONDS, gt=0)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_weights(self):
        total = (
            self.time_weight + self.availability_weight + self.travel_weight +
            self.workload_weight + self.weather_weight + self.energy_weight
        )
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total}")
        return self


DEFAULT_SCORING_CONFIG = ScoringConfig()
