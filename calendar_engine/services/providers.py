"""
Pluggable providers for external data the engine consults: base travel
times, weather, traffic and team availability.

Every provider has a default implementation that works offline. Async
providers are awaited through fetch_with_fallback so a slow or failing
provider degrades to a default value instead of failing the request.
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional, Protocol, Tuple, TypeVar

from calendar_engine.models import TransportMode
from calendar_engine.schemas import WeatherInfo, TrafficInfo, TeamMember

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TravelTimeProvider(Protocol):
    def base_minutes(self, from_location: str, to_location: str, mode: TransportMode) -> Optional[float]:
        """Uncongested travel time, or None when the route is unknown."""
        ...


class WeatherProvider(Protocol):
    async def get_weather(self, when: datetime) -> Optional[WeatherInfo]:
        ...


class TrafficProvider(Protocol):
    async def get_traffic(self, from_location: str, to_location: str, when: datetime) -> Optional[TrafficInfo]:
        ...


class TeamAvailabilityProvider(Protocol):
    async def get_members(self, emails: List[str]) -> List[TeamMember]:
        ...


class StaticTravelTimeProvider:
    """
    Lookup-table travel times keyed by (from, to, mode).
    Routes are symmetric; identical locations take no travel time.
    """

    def __init__(self, routes: Optional[Dict[Tuple[str, str, TransportMode], float]] = None):
        self.routes: Dict[Tuple[str, str, TransportMode], float] = {}
        for (origin, destination, mode), minutes in (routes or {}).items():
            self.add_route(origin, destination, mode, minutes)

    @staticmethod
    def _key(location: str) -> str:
        return location.strip().lower()

    def add_route(self, from_location: str, to_location: str, mode: TransportMode, minutes: float):
        self.routes[(self._key(from_location), self._key(to_location), mode)] = minutes
        self.routes[(self._key(to_location), self._key(from_location), mode)] = minutes

    def base_minutes(self, from_location: str, to_location: str, mode: TransportMode) -> Optional[float]:
        if self._key(from_location) == self._key(to_location):
            return 0.0
        return self.routes.get((self._key(from_location), self._key(to_location), mode))


class NullWeatherProvider:
    """No weather feed configured."""

    async def get_weather(self, when: datetime) -> Optional[WeatherInfo]:
        return None


class NullTrafficProvider:
    """No traffic feed configured."""

    async def get_traffic(self, from_location: str, to_location: str, when: datetime) -> Optional[TrafficInfo]:
        return None


class NullTeamAvailabilityProvider:
    """No team directory configured."""

    async def get_members(self, emails: List[str]) -> List[TeamMember]:
        return []


async def fetch_with_fallback(fetch: Callable[[], Awaitable[T]], default: T, timeout: float, label: str) -> T:
    """
    Await a provider call with a bounded timeout.
    Any timeout or provider error is logged and replaced by default.
    """
    try:
        return await asyncio.wait_for(fetch(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{label} provider timed out after {timeout}s, using default")
    except Exception as e:
        logger.warning(f"{label} provider failed ({e!r}), using default")
    return default
