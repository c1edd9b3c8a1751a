"""API schemas for request/response models."""

from .simulation_schemas import StartSimulationRequest, SimulationStatusResponse
from .status_schemas import (
    AdaptiveSummaryResponse,
    AirportStockResponse,
    EventResponse,
    FlightInfoResponse,
    GameStateSnapshot,
    HealthResponse,
    PenaltyInfoResponse,
    StatsResponse,
)

__all__ = [
    "StartSimulationRequest",
    "SimulationStatusResponse",
    "AdaptiveSummaryResponse",
    "AirportStockResponse",
    "EventResponse",
    "FlightInfoResponse",
    "GameStateSnapshot",
    "HealthResponse",
    "PenaltyInfoResponse",
    "StatsResponse",
]
