"""Kit decision models."""

from typing import Dict
from pydantic import BaseModel
from .flight import ReferenceHour
from ..utils import per_class_to_api, per_class_total


class KitLoadDecision(BaseModel):
    """Represents a decision to load kits onto a flight."""

    flight_id: str
    kits_per_class: Dict[str, int]

    class Config:
        json_schema_extra = {
            "example": {
                "flight_id": "7c4b3a9e-0d1f-4c55-9a8e-3f1c2b7d6e10",
                "kits_per_class": {"FIRST": 8, "BUSINESS": 40, "PREMIUM_ECONOMY": 24, "ECONOMY": 180},
            }
        }

    @property
    def total(self) -> int:
        return per_class_total(self.kits_per_class)

    def to_api(self) -> Dict:
        """Convert to the platform's FlightLoadDto."""
        return {
            "flightId": self.flight_id,
            "loadedKits": per_class_to_api(self.kits_per_class),
        }


class KitPurchaseOrder(BaseModel):
    """Represents a purchase order for kits delivered to the hub."""

    kits_per_class: Dict[str, int]
    order_time: ReferenceHour

    class Config:
        json_schema_extra = {
            "example": {
                "kits_per_class": {"FIRST": 0, "BUSINESS": 0, "PREMIUM_ECONOMY": 0, "ECONOMY": 1000},
                "order_time": {"day": 3, "hour": 0},
            }
        }

    @property
    def total(self) -> int:
        return per_class_total(self.kits_per_class)

    def to_api(self) -> Dict[str, int]:
        """Convert to the platform's PerClassAmount (every class present)."""
        return per_class_to_api(self.kits_per_class)
