"""Weekly flight plan model."""

from typing import List
from pydantic import BaseModel, Field

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class FlightPlanEntry(BaseModel):
    """A recurring route from the static weekly schedule."""

    origin: str
    destination: str
    scheduled_hour: int
    distance_km: float = 0.0
    weekdays: List[bool] = Field(default_factory=lambda: [True] * 7)

    def departs_on(self, day: int) -> bool:
        """Check whether the route operates on game day `day` (weekday = day % 7)."""
        return bool(self.weekdays[day % 7])
