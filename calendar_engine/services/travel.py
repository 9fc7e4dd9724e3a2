"""
Travel time estimation: a base route time adjusted for traffic and weather.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from calendar_engine.config import ScoringConfig, DEFAULT_SCORING_CONFIG
from calendar_engine.models import TransportMode, WeatherCondition
from calendar_engine.schemas import TravelTimeInfo, WeatherInfo, TrafficInfo
from .providers import TravelTimeProvider, StaticTravelTimeProvider

logger = logging.getLogger(__name__)

VIRTUAL_MARKER = "virtual"


def is_virtual_location(location: Optional[str]) -> bool:
    return bool(location) and VIRTUAL_MARKER in location.lower()


def is_physical_location(location: Optional[str]) -> bool:
    return bool(location) and not is_virtual_location(location)


def _same_place(a: Optional[str], b: Optional[str]) -> bool:
    return a is not None and b is not None and a.strip().lower() == b.strip().lower()


class TravelTimeEstimator:
    """
    estimated_minutes = base(from, to, mode) * traffic(departure) * weather(departure)

    Pure given its inputs; weather and traffic data are passed in by the caller
    (already fetched from providers) rather than looked up here.
    """

    def __init__(self, base_provider: Optional[TravelTimeProvider] = None,
                 config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        self.base_provider = base_provider or StaticTravelTimeProvider()
        self.config = config

    def base_minutes(self, from_location: str, to_location: str, mode: TransportMode) -> float:
        minutes = self.base_provider.base_minutes(from_location, to_location, mode)
        if minutes is None:
            return self.config.default_travel_minutes
        return minutes

    def traffic_applies(self, traffic: Optional[TrafficInfo], departure: datetime,
                        from_location: Optional[str] = None, to_location: Optional[str] = None) -> bool:
        """
        A traffic snapshot describes a trip only when it was observed within
        traffic_validity_minutes of the departure and, if it names a route,
        on that route.
        """
        if traffic is None or traffic.observed_at is None:
            return False
        window = timedelta(minutes=self.config.traffic_validity_minutes)
        if abs(departure - traffic.observed_at) > window:
            return False
        if traffic.from_location is not None and not _same_place(traffic.from_location, from_location):
            return False
        if traffic.to_location is not None and not _same_place(traffic.to_location, to_location):
            return False
        return True

    def traffic_multiplier(self, departure: datetime, traffic: Optional[TrafficInfo] = None,
                           from_location: Optional[str] = None, to_location: Optional[str] = None) -> float:
        """Live congestion wins over the rush-hour heuristic when it describes this trip."""
        if self.traffic_applies(traffic, departure, from_location, to_location):
            return self.config.congestion_multipliers.get(traffic.congestion_level.value, 1.0)

        hour = departure.hour
        if any(low <= hour <= high for low, high in self.config.rush_hours):
            return self.config.rush_hour_multiplier
        return 1.0

    def weather_multiplier(self, departure: datetime, weather: Optional[WeatherInfo] = None) -> float:
        if weather is None:
            return 1.0
        if weather.forecast_date is not None and weather.forecast_date != departure.date():
            return 1.0
        if weather.condition == WeatherCondition.STORMY:
            return self.config.stormy_travel_multiplier
        if weather.condition == WeatherCondition.RAINY or weather.precipitation > self.config.heavy_precipitation:
            return self.config.rainy_travel_multiplier
        return 1.0

    def estimate(self, from_location: str, to_location: str, departure: datetime,
                 mode: TransportMode = TransportMode.DRIVING,
                 weather: Optional[WeatherInfo] = None,
                 traffic: Optional[TrafficInfo] = None) -> TravelTimeInfo:
        base = self.base_minutes(from_location, to_location, mode)
        minutes = round(
            base
            * self.traffic_multiplier(departure, traffic, from_location, to_location)
            * self.weather_multiplier(departure, weather)
        )

        logger.debug(f"Travel {from_location} -> {to_location} ({mode.value}) at {departure}: {minutes} min")
        return TravelTimeInfo(
            from_location=from_location,
            to_location=to_location,
            estimated_minutes=minutes,
            mode=mode,
        )
