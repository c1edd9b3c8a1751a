"""Singleton pattern for shared service instances."""

from typing import Optional

from .simulation_service import SimulationService

# Global service instance (singleton pattern)
_simulation_service: Optional[SimulationService] = None


def get_simulation_service() -> SimulationService:
    """
    Get or create the singleton simulation service instance.

    Returns:
        SimulationService instance
    """
    global _simulation_service
    if _simulation_service is None:
        _simulation_service = SimulationService()
    return _simulation_service


def set_simulation_service(service: Optional[SimulationService]) -> None:
    """Replace the singleton (None drops it so the next call builds a fresh one)."""
    global _simulation_service
    _simulation_service = service
