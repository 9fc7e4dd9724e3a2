"""
Shared fixtures for the calendar engine tests.
"""

import pytest
from fastapi.testclient import TestClient

from calendar_engine.config import ScoringConfig
from calendar_engine.main import create_app
from calendar_engine.schemas import CalendarPreferences
from calendar_engine.services.scheduler_service import SchedulingOptimizationService
from calendar_engine.services.travel import TravelTimeEstimator


@pytest.fixture
def config():
    return ScoringConfig()


@pytest.fixture
def preferences():
    """Standard Monday-Friday 09:00-17:00 calendar in UTC."""
    return CalendarPreferences()


@pytest.fixture
def estimator(config):
    return TravelTimeEstimator(config=config)


@pytest.fixture
def service(config):
    return SchedulingOptimizationService(config=config)


@pytest.fixture
def client(service):
    return TestClient(create_app(service))
