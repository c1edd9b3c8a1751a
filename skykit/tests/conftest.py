"""Shared fixtures: a small hub-and-spoke network."""

import pytest
from skykit.models.aircraft import AircraftType
from skykit.models.airport import Airport
from skykit.models.flight import Flight, FlightEventType, ReferenceHour
from skykit.models.flight_plan import FlightPlanEntry
from skykit.state_manager import InventoryState


def per_class(first=0, business=0, premium_economy=0, economy=0):
    return {
        "FIRST": first,
        "BUSINESS": business,
        "PREMIUM_ECONOMY": premium_economy,
        "ECONOMY": economy,
    }


def uniform(value):
    return per_class(value, value, value, value)


@pytest.fixture
def airports():
    """HUB1 plus a slow-processing spoke (ZRH) and a fast one (FRA)."""
    return {
        "HUB1": Airport(
            code="HUB1",
            name="Main Hub",
            is_hub=True,
            storage_capacity=per_class(1000, 5000, 2000, 20000),
            processing_times=uniform(6),
            initial_stock=per_class(100, 500, 200, 4000),
        ),
        "ZRH": Airport(
            code="ZRH",
            name="Zurich",
            is_hub=False,
            storage_capacity=per_class(100, 200, 150, 1000),
            processing_times=per_class(4, 4, 4, 6),
            initial_stock=per_class(10, 20, 15, 100),
        ),
        "FRA": Airport(
            code="FRA",
            name="Frankfurt",
            is_hub=False,
            storage_capacity=uniform(500),
            processing_times=uniform(1),
            initial_stock=per_class(0, 0, 0, 50),
        ),
    }


@pytest.fixture
def aircraft_types():
    return {
        "A320": AircraftType(
            type_code="A320",
            passenger_capacity=per_class(10, 30, 20, 250),
            kit_capacity=per_class(10, 30, 20, 250),
        ),
    }


@pytest.fixture
def state(airports, aircraft_types):
    return InventoryState(airports, aircraft_types)


@pytest.fixture
def make_flight():
    """Factory for flights; departure and arrival are (day, hour) tuples."""

    def _make(
        flight_id="F1",
        origin="HUB1",
        destination="ZRH",
        departure=(0, 0),
        arrival=(0, 3),
        passengers=None,
        aircraft_type="A320",
        event_type=FlightEventType.SCHEDULED,
    ):
        return Flight(
            flight_id=flight_id,
            flight_number=f"SK{flight_id}",
            origin=origin,
            destination=destination,
            departure=ReferenceHour(day=departure[0], hour=departure[1]),
            arrival=ReferenceHour(day=arrival[0], hour=arrival[1]),
            passengers=passengers if passengers is not None else per_class(5, 10, 10, 100),
            aircraft_type=aircraft_type,
            event_type=event_type,
        )

    return _make


@pytest.fixture
def flight_plan():
    """Daily HUB1->ZRH at 06:00 and ZRH->HUB1 at 12:00, FRA only on Mondays."""
    return [
        FlightPlanEntry(origin="HUB1", destination="ZRH", scheduled_hour=6, distance_km=800.0),
        FlightPlanEntry(origin="ZRH", destination="HUB1", scheduled_hour=12, distance_km=800.0),
        FlightPlanEntry(
            origin="HUB1",
            destination="FRA",
            scheduled_hour=8,
            distance_km=1500.0,
            weekdays=[True, False, False, False, False, False, False],
        ),
    ]
