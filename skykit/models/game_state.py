"""Engine state records: kit batches, penalties and airport risk."""

from typing import Dict, Optional
from pydantic import BaseModel
from .flight import ReferenceHour


class InFlightBatch(BaseModel):
    """Kits loaded on a flight that has not landed yet."""

    flight_id: str
    destination: str
    kits: Dict[str, int]
    arrival: ReferenceHour


class ProcessingBatch(BaseModel):
    """Kits at an airport that are not usable until `ready`."""

    airport_code: str
    kits: Dict[str, int]
    ready: ReferenceHour
    source: str = "LANDING"  # "LANDING" or "PURCHASE"

    def is_ready(self, now: ReferenceHour) -> bool:
        return self.ready <= now


class PenaltyRecord(BaseModel):
    """A classified penalty issued by the platform."""

    day: int
    hour: int
    type: str  # INVENTORY_EXCEEDS_CAPACITY, FLIGHT_UNFULFILLED, NEGATIVE_INVENTORY
    amount: float
    airport_code: Optional[str] = None
    kit_class: Optional[str] = None


class AirportRiskProfile(BaseModel):
    """Learned overflow risk of a single airport."""

    overflow_count: int = 0
    unfulfilled_count: int = 0
    last_overflow_day: int = -1
    risk_score: float = 0.5  # 0.1-1.0, higher = more overflow-prone
