"""Routes for simulation control (start, stop)."""

import logging
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, HTTPException
from ..schemas.simulation_schemas import StartSimulationRequest, SimulationStatusResponse
from ..services.singleton import get_simulation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/game", tags=["simulation"])


@router.post("/start", response_model=SimulationStatusResponse)
async def start_simulation(
    background_tasks: BackgroundTasks,
    request: Optional[StartSimulationRequest] = None,
):
    """
    Start a game session (runs in background).

    Args:
        background_tasks: FastAPI background tasks
        request: Optional start options

    Returns:
        Confirmation message
    """
    request = request or StartSimulationRequest()
    simulation_service = get_simulation_service()

    try:
        simulation_service.start_simulation(
            stop_existing=request.stop_existing, max_rounds=request.max_rounds
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error starting simulation: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    background_tasks.add_task(simulation_service.run_simulation_task)
    return SimulationStatusResponse(message="Game simulation started", status="started")


@router.post("/stop", response_model=SimulationStatusResponse)
async def stop_simulation():
    """
    Stop the running game at the next round boundary.

    The session on the evaluation platform is ended by the game loop itself.
    """
    simulation_service = get_simulation_service()

    try:
        simulation_service.stop_simulation()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    runner = simulation_service.simulation_runner
    return SimulationStatusResponse(
        message="Stop requested",
        status="stopping",
        session_id=runner.session_id if runner is not None else None,
    )
