"""
Exception taxonomy for the scheduling engine.

The engine only raises for structurally invalid input. Degraded data
(missing weather, slow providers, impossible constraints) lowers scores or
empties results instead.
"""

from typing import Optional


class SchedulingError(Exception):
    """Base class for errors raised by the scheduling engine."""


class InvalidSchedulingRequestError(SchedulingError, ValueError):
    """Raised when a request cannot be scheduled as submitted."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
