"""
Event API endpoints: preparation advice and conflict checks for a single event.
"""

from typing import List

from fastapi import APIRouter, Depends

from ..dependencies import get_scheduling_service
from ..schemas import MeetingPreparationIn, ConflictCheckIn, MeetingPreparation, ConflictInfo
from ..services.scheduler_service import SchedulingOptimizationService

router = APIRouter()


@router.post("/preparation", response_model=MeetingPreparation)
async def generate_meeting_preparation(
    body: MeetingPreparationIn,
    service: SchedulingOptimizationService = Depends(get_scheduling_service),
):
    """Checklist, documents and lead time for an upcoming event."""
    return await service.generate_meeting_preparation(body.event, body.context)


@router.post("/conflicts", response_model=List[ConflictInfo])
def check_conflicts(
    body: ConflictCheckIn,
    service: SchedulingOptimizationService = Depends(get_scheduling_service),
):
    """Overlaps, tight transitions, travel and workload problems with existing events."""
    return service.check_conflicts(body.event, body.context)
