"""Routes for session events and penalties."""

import logging
from typing import Dict, List
from fastapi import APIRouter
from ..schemas.status_schemas import EventResponse, PenaltyInfoResponse
from ..services.singleton import get_simulation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["events"])


@router.get("/events", response_model=List[EventResponse])
async def get_events():
    """The most recent events."""
    return get_simulation_service().get_events()


@router.get("/events/history", response_model=List[EventResponse])
async def get_event_history():
    """Every event of the session."""
    return get_simulation_service().get_event_history()


@router.get("/penalties", response_model=List[PenaltyInfoResponse])
async def get_penalties():
    """The most recent penalties."""
    return get_simulation_service().get_penalties()


@router.get("/penalties/history", response_model=Dict[int, List[PenaltyInfoResponse]])
async def get_penalty_history():
    """
    Every penalty of the session grouped by issued day.

    Returns:
        Mapping of day to penalties
    """
    return get_simulation_service().get_penalty_history()
