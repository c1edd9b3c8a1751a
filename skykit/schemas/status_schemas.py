"""Schemas for the read-only status endpoints."""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str = "ok"
    game_running: bool


class StatsResponse(BaseModel):
    """Running totals of the current (or last) session."""

    total_cost: float = 0.0
    total_cost_formatted: Optional[str] = Field(None, description="Formatted cost string with thousand separators")
    penalty_cost: float = 0.0
    total_penalties: int = 0
    total_events: int = 0
    rounds_completed: int = 0
    loads_sent: int = 0
    kits_loaded: int = 0
    kits_purchased: int = 0


class AirportStockResponse(BaseModel):
    """Stock of one airport as seen by the engine."""

    code: str
    name: str
    is_hub: bool
    stock: Dict[str, int]
    capacity: Dict[str, int]
    expected_stock: Dict[str, int] = Field(default_factory=dict, description="Stock expected within the horizon")
    is_low_stock: bool = False


class FlightInfoResponse(BaseModel):
    """A flight that has not landed yet."""

    flight_id: str
    flight_number: str
    origin: str
    destination: str
    departure_day: int
    departure_hour: int
    arrival_day: int
    arrival_hour: int
    passengers: Dict[str, int]
    aircraft_type: str
    status: str


class PenaltyInfoResponse(BaseModel):
    """A penalty issued by the platform."""

    code: str
    amount: float
    reason: Optional[str] = ""
    flightId: Optional[str] = None
    flightNumber: Optional[str] = None
    issuedDay: int
    issuedHour: int


class EventResponse(BaseModel):
    """A notable event of the session (landing, purchase, warning)."""

    type: str
    text: str
    timestamp: str


class AdaptiveSummaryResponse(BaseModel):
    """Snapshot of the adaptive tuner."""

    mode: str = "balanced"
    bufferMultiplier: float = 1.0
    economyBoost: float = 0.0
    hotAirports: List[str] = Field(default_factory=list)
    recentPenaltyAvg: float = 0.0


class GameStateSnapshot(BaseModel):
    """Everything a dashboard needs in one response."""

    day: int = 0
    hour: int = 0
    round: int = 0
    is_starting: bool = False
    is_running: bool = False
    is_complete: bool = False
    error: Optional[str] = None
    stats: StatsResponse
    airports: List[AirportStockResponse] = Field(default_factory=list)
    active_flights: List[FlightInfoResponse] = Field(default_factory=list)
    events: List[EventResponse] = Field(default_factory=list)
    recent_penalties: List[PenaltyInfoResponse] = Field(default_factory=list)
    adaptive: AdaptiveSummaryResponse = Field(default_factory=AdaptiveSummaryResponse)

    class Config:
        json_schema_extra = {
            "example": {
                "day": 3,
                "hour": 14,
                "round": 86,
                "is_starting": False,
                "is_running": True,
                "is_complete": False,
                "stats": {"total_cost": 1250000.0, "rounds_completed": 86},
                "airports": [],
                "active_flights": [],
                "events": [],
                "recent_penalties": [],
                "adaptive": {"mode": "balanced", "bufferMultiplier": 1.0},
            }
        }
