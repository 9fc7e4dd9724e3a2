"""
Team API endpoints
"""

from fastapi import APIRouter, Depends

from ..dependencies import get_scheduling_service
from ..schemas import TeamWorkloadIn, TeamWorkloadResult
from ..services.scheduler_service import SchedulingOptimizationService

router = APIRouter()


@router.post("/workload", response_model=TeamWorkloadResult)
def optimize_team_workload(
    body: TeamWorkloadIn,
    service: SchedulingOptimizationService = Depends(get_scheduling_service),
):
    return service.optimize_team_workload(body.members, body.events, body.timeframe)
