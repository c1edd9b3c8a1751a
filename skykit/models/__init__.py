"""Engine models package."""

from .airport import Airport
from .aircraft import AircraftType
from .flight import Flight, FlightEventType, ReferenceHour
from .flight_plan import FlightPlanEntry
from .kit import KitLoadDecision, KitPurchaseOrder
from .game_state import AirportRiskProfile, InFlightBatch, PenaltyRecord, ProcessingBatch

__all__ = [
    "Airport",
    "AircraftType",
    "Flight",
    "FlightEventType",
    "ReferenceHour",
    "FlightPlanEntry",
    "KitLoadDecision",
    "KitPurchaseOrder",
    "AirportRiskProfile",
    "InFlightBatch",
    "PenaltyRecord",
    "ProcessingBatch",
]
