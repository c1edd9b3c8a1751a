"""Aircraft model."""

from typing import Dict
from pydantic import BaseModel


class AircraftType(BaseModel):
    """Represents an aircraft type with per-class seat and kit capacity."""

    type_code: str
    passenger_capacity: Dict[str, int]  # per class
    kit_capacity: Dict[str, int]  # per class

    class Config:
        json_schema_extra = {
            "example": {
                "type_code": "A320",
                "passenger_capacity": {"FIRST": 0, "BUSINESS": 20, "PREMIUM_ECONOMY": 30, "ECONOMY": 120},
                "kit_capacity": {"FIRST": 0, "BUSINESS": 20, "PREMIUM_ECONOMY": 30, "ECONOMY": 120},
            }
        }
