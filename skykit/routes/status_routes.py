"""Routes for read-only session status."""

import logging
from typing import List
from fastapi import APIRouter
from ..schemas.status_schemas import (
    AdaptiveSummaryResponse,
    AirportStockResponse,
    FlightInfoResponse,
    GameStateSnapshot,
    HealthResponse,
    StatsResponse,
)
from ..services.singleton import get_simulation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["status"])


@router.get("/health", response_model=HealthResponse)
async def get_health():
    """Liveness check, also telling whether a game is running."""
    return HealthResponse(**get_simulation_service().get_health())


@router.get("/state", response_model=GameStateSnapshot)
async def get_state():
    """
    Get the full dashboard snapshot.

    Returns:
        Clock, stats, airport stocks, active flights, recent events and penalties
    """
    return GameStateSnapshot(**get_simulation_service().get_state())


@router.get("/airports", response_model=List[AirportStockResponse])
async def get_airports():
    """Current and expected stock per airport, hub first."""
    return get_simulation_service().get_airports()


@router.get("/flights", response_model=List[FlightInfoResponse])
async def get_flights():
    """Known flights that have not landed."""
    return get_simulation_service().get_flights()


@router.get("/stats", response_model=StatsResponse)
async def get_stats():
    return StatsResponse(**get_simulation_service().get_stats())


@router.get("/adaptive", response_model=AdaptiveSummaryResponse)
async def get_adaptive():
    """Adaptive tuner snapshot (mode, buffer multiplier, economy boost, hot airports)."""
    return AdaptiveSummaryResponse(**get_simulation_service().get_adaptive())
