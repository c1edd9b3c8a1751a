"""Airport model."""

from typing import Dict
from pydantic import BaseModel, Field


class Airport(BaseModel):
    """Represents an airport with its storage and processing properties."""

    code: str
    name: str
    is_hub: bool
    storage_capacity: Dict[str, int]  # per class
    processing_times: Dict[str, int]  # per class in hours
    initial_stock: Dict[str, int] = Field(default_factory=dict)  # per class

    class Config:
        json_schema_extra = {
            "example": {
                "code": "HUB1",
                "name": "Main Hub",
                "is_hub": True,
                "storage_capacity": {"FIRST": 2000, "BUSINESS": 8000, "PREMIUM_ECONOMY": 4000, "ECONOMY": 90000},
                "processing_times": {"FIRST": 2, "BUSINESS": 2, "PREMIUM_ECONOMY": 2, "ECONOMY": 2},
                "initial_stock": {"FIRST": 1200, "BUSINESS": 5000, "PREMIUM_ECONOMY": 2500, "ECONOMY": 60000},
            }
        }

    @property
    def max_processing_time(self) -> int:
        """Longest processing time across all classes."""
        return max(self.processing_times.values(), default=0)

    def capacity_for(self, class_type: str) -> int:
        return self.storage_capacity.get(class_type, 0)
