"""
Scheduling API endpoints: slot suggestions, schedule optimization and travel estimates.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_scheduling_service
from ..exceptions import InvalidSchedulingRequestError
from ..schemas import (
    FindOptimalTimesIn, OptimizeScheduleIn, SuggestMeetingTimesIn, TravelTimeIn,
    SchedulingResult, ScheduleOptimizationResult, TimeSlot, TravelTimeInfo,
)
from ..services.scheduler_service import SchedulingOptimizationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/optimal-times", response_model=SchedulingResult)
async def find_optimal_times(
    body: FindOptimalTimesIn,
    service: SchedulingOptimizationService = Depends(get_scheduling_service),
):
    """Best times for a new meeting, most favourable first."""
    try:
        return await service.find_optimal_times(body.request, body.context)
    except InvalidSchedulingRequestError as e:
        logger.info(f"Rejected scheduling request: {e.message}")
        raise HTTPException(status_code=400, detail={"message": e.message, "field": e.field})


@router.post("/optimize", response_model=ScheduleOptimizationResult)
def optimize_schedule(
    body: OptimizeScheduleIn,
    service: SchedulingOptimizationService = Depends(get_scheduling_service),
):
    """Rearrange movable events to reduce travel, overload and off-peak placement."""
    return service.optimize_schedule(body.events, body.context)


@router.post("/suggest", response_model=List[TimeSlot])
async def suggest_meeting_times(
    body: SuggestMeetingTimesIn,
    service: SchedulingOptimizationService = Depends(get_scheduling_service),
):
    """Times that suit every participant with published availability."""
    try:
        return await service.suggest_meeting_times(body.meeting, body.context)
    except InvalidSchedulingRequestError as e:
        raise HTTPException(status_code=400, detail={"message": e.message, "field": e.field})


@router.post("/travel-time", response_model=TravelTimeInfo)
async def calculate_travel_time(
    body: TravelTimeIn,
    service: SchedulingOptimizationService = Depends(get_scheduling_service),
):
    return await service.calculate_optimal_travel_time(
        body.from_location, body.to_location, body.departure_time, body.mode,
    )
