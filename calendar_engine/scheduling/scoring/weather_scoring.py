"""
Weather scoring for slot evaluation.
"""

from typing import Optional

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.models import WeatherCondition
from calendar_engine.schemas import TimeSlot, WeatherInfo


def calculate_weather_score(slot: TimeSlot, weather: Optional[WeatherInfo],
                            config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """
    Bad weather slightly favours a slot for an indoor meeting;
    sunny and mild is ideal; everything else is neutral.
    """
    if weather is None:
        return config.default_weather_score

    # A forecast for another day says nothing about this slot
    if weather.forecast_date is not None and weather.forecast_date != slot.start_time.date():
        return config.default_weather_score

    if weather.condition == WeatherCondition.STORMY or weather.precipitation > config.heavy_precipitation:
        return config.indoor_weather_score

    low, high = config.mild_temperature_range
    if weather.condition == WeatherCondition.SUNNY and low < weather.temperature < high:
        return config.mild_weather_score

    return config.default_weather_score
