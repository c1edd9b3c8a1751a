"""Schemas for simulation control endpoints."""

from pydantic import BaseModel, Field
from typing import Optional


class StartSimulationRequest(BaseModel):
    """Request model for starting a simulation."""

    stop_existing: bool = Field(True, description="End an active platform session before starting")
    max_rounds: Optional[int] = Field(None, ge=1, le=720, description="Stop after this many rounds")


class SimulationStatusResponse(BaseModel):
    """Response model for simulation control."""

    message: str
    status: str
    session_id: Optional[str] = None
