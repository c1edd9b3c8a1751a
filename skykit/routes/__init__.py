"""Routes package for API endpoints."""

from .events_routes import router as events_router
from .simulation_routes import router as simulation_router
from .status_routes import router as status_router

__all__ = ["events_router", "simulation_router", "status_router"]
