"""Tests for the flight load allocator."""

import pytest
from conftest import per_class
from skykit.solution.adaptive import AdaptiveTuner
from skykit.solution.allocator import FlightLoadAllocator
from skykit.solution.config import SolutionConfig
from skykit.solution.forecasting import DemandForecaster
from skykit.state_manager import InventoryState


@pytest.fixture
def make_state(airports, aircraft_types):
    """State with overridden starting stock, economy only unless given."""

    def _make(**stocks):
        initial = {code: dict(airport.initial_stock) for code, airport in airports.items()}
        for code, stock in stocks.items():
            initial[code] = stock
        return InventoryState(airports, aircraft_types, initial_stocks=initial)

    return _make


@pytest.fixture
def allocator(flight_plan):
    config = SolutionConfig.default()
    return FlightLoadAllocator(config, DemandForecaster(flight_plan, config), AdaptiveTuner(config))


def depart(state, *flights):
    state.apply_lifecycle_events(flights)
    state.advance_to(0, 0)


def loads_by_flight(decisions):
    return {d.flight_id: d.kits_per_class for d in decisions}


def test_base_load_limited_by_origin_stock(allocator, make_state, make_flight):
    """Demand 300, stock 200, aircraft capacity 250: load 200."""
    state = make_state(FRA=per_class(economy=200))
    flight = make_flight("F1", origin="FRA", destination="ZRH", passengers=per_class(economy=300))
    depart(state, flight)

    decisions = allocator.allocate(state)

    assert loads_by_flight(decisions)["F1"]["ECONOMY"] == 200
    assert state.stock_level("FRA", "ECONOMY") == 0
    assert state.in_flight_to("ZRH", "ECONOMY") == 200


def test_base_load_limited_by_aircraft_capacity(allocator, make_state, make_flight):
    state = make_state(FRA=per_class(economy=500))
    depart(state, make_flight("F1", origin="FRA", destination="ZRH", passengers=per_class(economy=300)))

    decisions = allocator.allocate(state)

    assert loads_by_flight(decisions)["F1"]["ECONOMY"] == 250


def test_hub_push_fills_destination_deficit(allocator, make_state, make_flight):
    """ZRH needs 400 economy over 48h and holds 300: push 100 on top of the base load."""
    state = make_state(ZRH=per_class(10, 20, 15, 300))
    depart(state, make_flight("F1", origin="HUB1", destination="ZRH", passengers=per_class(economy=20)))

    decisions = allocator.allocate(state)

    assert loads_by_flight(decisions)["F1"]["ECONOMY"] == 120


def test_hub_push_bounded_by_fill_limit(allocator, make_state, make_flight):
    """A big known ZRH departure makes a large deficit; ZRH may only fill to 95% of 1000."""
    state = make_state(ZRH=per_class(10, 20, 15, 900))
    depart(
        state,
        make_flight("F1", origin="HUB1", destination="ZRH", passengers=per_class(economy=20)),
        make_flight("F2", origin="ZRH", destination="HUB1", departure=(0, 5), passengers=per_class(economy=2000)),
    )

    decisions = allocator.allocate(state)

    assert loads_by_flight(decisions)["F1"]["ECONOMY"] == 20 + 50


def test_fill_limit_is_capacity_without_tuner(flight_plan, make_state, make_flight):
    config = SolutionConfig.default()
    allocator = FlightLoadAllocator(config, DemandForecaster(flight_plan, config))
    state = make_state(ZRH=per_class(10, 20, 15, 900))
    depart(
        state,
        make_flight("F1", origin="HUB1", destination="ZRH", passengers=per_class(economy=20)),
        make_flight("F2", origin="ZRH", destination="HUB1", departure=(0, 5), passengers=per_class(economy=2000)),
    )

    decisions = allocator.allocate(state)

    assert loads_by_flight(decisions)["F1"]["ECONOMY"] == 20 + 100


def test_hub_push_disabled(flight_plan, make_state, make_flight):
    config = SolutionConfig(ENABLE_EXTRA_LOADING_TO_SPOKES=False)
    allocator = FlightLoadAllocator(config, DemandForecaster(flight_plan, config))
    state = make_state()
    depart(state, make_flight("F1", origin="HUB1", destination="ZRH", passengers=per_class(economy=20)))

    decisions = allocator.allocate(state)

    assert loads_by_flight(decisions)["F1"] == per_class(economy=20)


def test_spoke_returns_surplus_to_hub(allocator, make_state, make_flight):
    """ZRH holds 600 and needs 50 + 2 * 200 over 48h: 100 surplus rides back."""
    state = make_state(ZRH=per_class(economy=600))
    depart(state, make_flight("F1", origin="ZRH", destination="HUB1", passengers=per_class(economy=50)))

    decisions = allocator.allocate(state)

    assert loads_by_flight(decisions)["F1"]["ECONOMY"] == 150
    assert state.stock_level("ZRH", "ECONOMY") == 450


def test_spoke_without_surplus_loads_base_only(allocator, make_state, make_flight):
    state = make_state(ZRH=per_class(economy=300))
    depart(state, make_flight("F1", origin="ZRH", destination="HUB1", passengers=per_class(economy=50)))

    decisions = allocator.allocate(state)

    assert loads_by_flight(decisions)["F1"]["ECONOMY"] == 50


def test_longest_route_is_served_first(allocator, make_state, make_flight):
    """With only 150 economy at the hub, the 1500 km FRA flight gets its full load."""
    state = make_state(HUB1=per_class(100, 500, 200, 150))
    depart(
        state,
        make_flight("F1", origin="HUB1", destination="ZRH", passengers=per_class(economy=100)),
        make_flight("F2", origin="HUB1", destination="FRA", passengers=per_class(economy=100)),
    )

    decisions = allocator.allocate(state)

    assert [d.flight_id for d in decisions] == ["F2", "F1"]
    assert decisions[0].kits_per_class["ECONOMY"] == 100
    assert decisions[1].kits_per_class["ECONOMY"] == 50
    assert state.stock_level("HUB1", "ECONOMY") == 0


def test_flights_with_missing_data_are_skipped(allocator, make_state, make_flight):
    state = make_state()
    depart(
        state,
        make_flight("F1", aircraft_type="B747"),
        make_flight("F2", origin="XYZ", destination="HUB1"),
        make_flight("F3", origin="FRA", destination="ZRH"),
    )

    decisions = allocator.allocate(state)

    assert [d.flight_id for d in decisions] == ["F3"]


def test_loads_never_exceed_capacity_or_stock(allocator, make_state, make_flight, aircraft_types):
    state = make_state()
    depart(
        state,
        make_flight("F1", origin="HUB1", destination="ZRH", passengers=per_class(50, 50, 50, 500)),
        make_flight("F2", origin="HUB1", destination="FRA", passengers=per_class(50, 50, 50, 500)),
        make_flight("F3", origin="ZRH", destination="HUB1", passengers=per_class(50, 50, 50, 500)),
    )
    capacity = aircraft_types["A320"].kit_capacity

    decisions = allocator.allocate(state)

    assert len(decisions) == 3
    for decision in decisions:
        for class_type, quantity in decision.kits_per_class.items():
            assert 0 <= quantity <= capacity[class_type]
    assert state.negative_stocks() == []
    assert state.stock_level("ZRH", "ECONOMY") == 0
