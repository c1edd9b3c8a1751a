"""Flight model."""

from enum import Enum
from typing import Dict, Mapping

from pydantic import BaseModel

from ..config import HOURS_PER_DAY
from ..utils import per_class_from_api


class ReferenceHour(BaseModel):
    """Represents a reference hour (day and hour)."""

    day: int
    hour: int

    def __lt__(self, other: "ReferenceHour") -> bool:
        """Compare two reference hours for ordering."""
        if self.day != other.day:
            return self.day < other.day
        return self.hour < other.hour

    def __le__(self, other: "ReferenceHour") -> bool:
        """Less than or equal comparison."""
        return self < other or (self.day == other.day and self.hour == other.hour)

    def __gt__(self, other: "ReferenceHour") -> bool:
        """Greater than comparison."""
        return not self <= other

    def __ge__(self, other: "ReferenceHour") -> bool:
        """Greater than or equal comparison."""
        return not self < other

    def to_hours(self) -> int:
        """Convert to total hours since game start."""
        return self.day * HOURS_PER_DAY + self.hour

    @classmethod
    def from_hours(cls, total_hours: int) -> "ReferenceHour":
        """Build a reference hour from total hours since game start."""
        day, hour = divmod(total_hours, HOURS_PER_DAY)
        return cls(day=day, hour=hour)

    def plus_hours(self, hours: int) -> "ReferenceHour":
        """Return the reference hour `hours` later, carrying into the next day."""
        return ReferenceHour.from_hours(self.to_hours() + hours)

    @classmethod
    def from_api(cls, data: Mapping) -> "ReferenceHour":
        return cls(day=int(data.get("day", 0)), hour=int(data.get("hour", 0)))

    def __str__(self) -> str:
        return f"D{self.day}H{self.hour}"


class FlightEventType(str, Enum):
    """Lifecycle state of a flight as reported by the platform."""

    SCHEDULED = "SCHEDULED"
    CHECKED_IN = "CHECKED_IN"
    LANDED = "LANDED"


LOADABLE_EVENT_TYPES = (FlightEventType.SCHEDULED, FlightEventType.CHECKED_IN)


class Flight(BaseModel):
    """A flight as last reported by a lifecycle event."""

    flight_id: str
    flight_number: str
    origin: str
    destination: str
    departure: ReferenceHour
    arrival: ReferenceHour
    passengers: Dict[str, int]  # per class
    aircraft_type: str
    event_type: FlightEventType = FlightEventType.SCHEDULED

    class Config:
        json_schema_extra = {
            "example": {
                "flight_id": "7c4b3a9e-0d1f-4c55-9a8e-3f1c2b7d6e10",
                "flight_number": "SK100",
                "origin": "HUB1",
                "destination": "ZRH",
                "departure": {"day": 0, "hour": 6},
                "arrival": {"day": 0, "hour": 9},
                "passengers": {"FIRST": 8, "BUSINESS": 40, "PREMIUM_ECONOMY": 24, "ECONOMY": 180},
                "aircraft_type": "A320",
                "event_type": "CHECKED_IN",
            }
        }

    @property
    def is_loadable(self) -> bool:
        """True while the flight can still receive kits."""
        return self.event_type in LOADABLE_EVENT_TYPES

    @property
    def has_landed(self) -> bool:
        return self.event_type == FlightEventType.LANDED

    @classmethod
    def from_api(cls, event: Mapping) -> "Flight":
        """
        Build a flight from a platform FlightEvent.

        Args:
            event: FlightEvent dictionary (camelCase keys)

        Returns:
            Flight instance
        """
        return cls(
            flight_id=str(event.get("flightId")),
            flight_number=str(event.get("flightNumber", "")),
            origin=str(event.get("originAirport", "")),
            destination=str(event.get("destinationAirport", "")),
            departure=ReferenceHour.from_api(event.get("departure") or {}),
            arrival=ReferenceHour.from_api(event.get("arrival") or {}),
            passengers=per_class_from_api(event.get("passengers")),
            aircraft_type=str(event.get("aircraftType", "")),
            event_type=FlightEventType(event.get("eventType", "SCHEDULED")),
        )
