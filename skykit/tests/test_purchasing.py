"""Tests for hub purchasing."""

import logging

import pytest
from conftest import per_class
from skykit.logger import ProblemTracker
from skykit.models.flight import ReferenceHour
from skykit.solution.adaptive import AdaptiveTuner
from skykit.solution.config import SolutionConfig
from skykit.solution.purchasing import PurchaseDecisionMaker
from skykit.state_manager import InventoryState


class FixedForecaster:
    """Forecaster stand-in returning the same demand for every query."""

    def __init__(self, value):
        self.value = value

    def demand(self, airport_code, kit_class, from_time, window_hours, known_flights):
        return self.value


@pytest.fixture
def purchaser():
    return PurchaseDecisionMaker(SolutionConfig.default(), FixedForecaster(10000))


def test_order_capped_by_request_limit(purchaser, state):
    """Hub 4000, 48h demand 10000, threshold 15000, 5000 budget left: order 1000."""
    purchaser.total_ordered = 15000

    order = purchaser.decide(state)

    assert order is not None
    assert order.kits_per_class == per_class(economy=1000)
    assert order.order_time == ReferenceHour(day=0, hour=0)
    assert purchaser.total_ordered == 16000


def test_order_bounded_by_remaining_budget(purchaser, state):
    purchaser.total_ordered = 19500

    order = purchaser.decide(state)

    assert order.kits_per_class["ECONOMY"] == 500
    assert purchaser.total_ordered == 20000


def test_no_order_once_budget_spent(purchaser, state):
    purchaser.total_ordered = 20000

    assert purchaser.decide(state) is None


def test_no_order_after_cutoff_day(purchaser, state, caplog):
    purchaser.problems = ProblemTracker()
    state.advance_to(20, 0)

    with caplog.at_level(logging.INFO, logger="skykit.logger"):
        assert purchaser.decide(state) is None
        assert purchaser.decide(state) is None

    assert caplog.text.count("[DEADLINE]") == 1


def test_orders_only_at_purchase_hour(purchaser, state):
    state.advance_to(3, 5)
    assert purchaser.decide(state) is None

    state.advance_to(4, 0)
    assert purchaser.decide(state) is not None


def test_no_order_above_threshold(purchaser, airports, aircraft_types):
    initial = {code: dict(airport.initial_stock) for code, airport in airports.items()}
    initial["HUB1"] = per_class(economy=15000)
    state = InventoryState(airports, aircraft_types, initial_stocks=initial)

    assert purchaser.decide(state) is None


def test_small_orders_are_suppressed(state):
    purchaser = PurchaseDecisionMaker(SolutionConfig.default(), FixedForecaster(4100))

    # deficit of exactly 100 is not worth ordering
    assert purchaser.decide(state) is None
    assert purchaser.total_ordered == 0


def test_no_order_without_deficit(state):
    purchaser = PurchaseDecisionMaker(SolutionConfig.default(), FixedForecaster(3000))

    assert purchaser.decide(state) is None


def test_tuner_scales_the_deficit(state):
    tuner = AdaptiveTuner()
    unfulfilled = {"code": "FLIGHT_UNFULFILLED", "penalty": 10.0, "reason": "Economy kits missing"}
    tuner.record_penalties([unfulfilled] * 11, day=0, hour=0)
    purchaser = PurchaseDecisionMaker(SolutionConfig.default(), FixedForecaster(4500), tuner=tuner)

    order = purchaser.decide(state)

    # deficit 500 * 1.2
    assert order.kits_per_class["ECONOMY"] == 600


def test_only_purchasable_class_is_ordered(purchaser, state):
    order = purchaser.decide(state)

    assert order.kits_per_class["FIRST"] == 0
    assert order.kits_per_class["BUSINESS"] == 0
    assert order.kits_per_class["PREMIUM_ECONOMY"] == 0
    assert order.total == order.kits_per_class["ECONOMY"]


def test_pending_purchases_count_toward_threshold(state):
    """Pending deliveries are part of the hub pipeline."""
    purchaser = PurchaseDecisionMaker(SolutionConfig.default(), FixedForecaster(20000))
    for day in range(11):
        state.advance_to(day, 0)
        order = purchaser.decide(state)
        state.record_purchase(order, {"ECONOMY": 24 * 30})

    # 4000 + 11000 pending reaches the threshold
    state.advance_to(11, 0)
    assert purchaser.decide(state) is None
    assert purchaser.total_ordered == 11000


def test_reset_clears_total(purchaser, state):
    purchaser.decide(state)
    purchaser.reset()

    assert purchaser.total_ordered == 0
