import logging
from typing import Optional

from fastapi import FastAPI

from calendar_engine.config import LOG_LEVEL, API_HOST, API_PORT
from calendar_engine.routes import schedule, events, team
from calendar_engine.services.scheduler_service import SchedulingOptimizationService

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(service: Optional[SchedulingOptimizationService] = None) -> FastAPI:
    """Build the API around one scheduling service instance."""
    app = FastAPI(
        title="Calendar Engine API",
        description="Meeting slot suggestions, schedule optimization, team workload balancing and meeting preparation",
        version="1.0.0"
    )
    app.state.scheduling_service = service or SchedulingOptimizationService()

    # Include routers
    app.include_router(schedule.router, prefix="/schedule", tags=["schedule"])
    app.include_router(events.router, prefix="/events", tags=["events"])
    app.include_router(team.router, prefix="/team", tags=["team"])

    @app.get("/")
    def read_root():
        """Root endpoint with API information"""
        return {
            "message": "Welcome to Calendar Engine API",
            "version": "1.0.0",
            "endpoints": {
                "optimal_times": "POST /schedule/optimal-times - Best times for a new meeting",
                "optimize": "POST /schedule/optimize - Rearrange an existing schedule",
                "suggest": "POST /schedule/suggest - Times that suit all participants",
                "travel_time": "POST /schedule/travel-time - Travel estimate between two locations",
                "preparation": "POST /events/preparation - Meeting preparation checklist",
                "conflicts": "POST /events/conflicts - Conflicts of an event with a calendar",
                "team_workload": "POST /team/workload - Team workload balance",
            },
            "swagger_ui": "/docs - Interactive API documentation",
            "redoc": "/redoc - Alternative API documentation"
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "message": "API is running"}

    return app


app = create_app()

# This allows running the app directly with: python -m calendar_engine.main
if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Calendar Engine API on {API_HOST}:{API_PORT}")
    uvicorn.run("calendar_engine.main:app", host=API_HOST, port=API_PORT, reload=True)
