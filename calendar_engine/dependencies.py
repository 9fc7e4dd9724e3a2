"""
FastAPI dependencies shared by the routers.
"""

from fastapi import Request

from .services.scheduler_service import SchedulingOptimizationService


def get_scheduling_service(request: Request) -> SchedulingOptimizationService:
    """The service instance owned by the running application."""
    return request.app.state.scheduling_service
