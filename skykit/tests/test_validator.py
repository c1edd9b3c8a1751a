"""Tests for validator module."""

import pytest
from conftest import per_class
from skykit.models.flight import ReferenceHour
from skykit.models.kit import KitLoadDecision, KitPurchaseOrder
from skykit.validator import DecisionValidationError, Validator


@pytest.fixture
def validator(aircraft_types):
    return Validator(aircraft_types)


@pytest.fixture
def departing(state, make_flight):
    """One flight departing HUB1 at D0H0 with its load committed."""
    flight = make_flight("F1", passengers=per_class(5, 10, 10, 100))
    state.apply_lifecycle_events([flight])
    state.advance_to(0, 0)
    return flight


def load(flight_id="F1", **kits):
    return KitLoadDecision(flight_id=flight_id, kits_per_class=per_class(**kits))


def test_valid_decisions(validator, state, departing):
    decision = load(first=5, business=10, premium_economy=10, economy=100)
    state.commit_load(departing, decision.kits_per_class)

    report = validator.validate_decisions([decision], None, state)

    assert report.is_valid()
    assert report.warnings == []


def test_unfulfilled_passengers_only_warn(validator, state, departing):
    report = validator.validate_decisions([load(economy=50)], None, state)

    assert report.is_valid()
    assert any("unfulfilled ECONOMY" in warning for warning in report.warnings)


def test_capacity_exceeded(validator, state, departing):
    report = validator.validate_decisions([load(economy=251)], None, state)

    assert not report.is_valid()
    assert "capacity exceeded" in report.errors[0]


def test_unknown_and_duplicate_flights(validator, state, departing):
    report = validator.validate_decisions([load(), load(), load("F404")], None, state)

    assert any("loaded 2 times" in error for error in report.errors)
    assert any("F404 does not exist" in error for error in report.errors)


def test_flight_not_departing_now(validator, state, make_flight):
    state.apply_lifecycle_events([make_flight("F2", departure=(0, 5))])

    report = validator.validate_decisions([load("F2")], None, state)

    assert any("departs D0H5" in error for error in report.errors)


def test_negative_load(validator, state, departing):
    report = validator.validate_decisions([load(economy=-1)], None, state)

    assert any("negative ECONOMY load" in error for error in report.errors)


def test_unknown_aircraft_warns(validator, state, make_flight):
    state.apply_lifecycle_events([make_flight("F3", aircraft_type="B747")])
    state.advance_to(0, 0)

    report = validator.validate_decisions([load("F3")], None, state)

    assert report.is_valid()
    assert any("Unknown aircraft type B747" in warning for warning in report.warnings)


def test_purchase_of_non_purchasable_class(validator, state):
    purchase = KitPurchaseOrder(kits_per_class=per_class(first=10, economy=500), order_time=ReferenceHour(day=0, hour=0))

    report = validator.validate_decisions([], purchase, state)

    assert report.errors == ["Purchase of FIRST kits is not allowed"]


def test_negative_purchase(validator, state):
    purchase = KitPurchaseOrder(kits_per_class=per_class(economy=-5), order_time=ReferenceHour(day=0, hour=0))

    report = validator.validate_decisions([], purchase, state)

    assert not report.is_valid()


def test_ensure_valid_raises_with_errors(validator, state, departing):
    with pytest.raises(DecisionValidationError) as exc_info:
        validator.ensure_valid([load(economy=251)], None, state)

    assert len(exc_info.value.errors) == 1


def test_ensure_valid_returns_report(validator, state, departing):
    report = validator.ensure_valid([load(economy=100)], None, state)

    assert report.is_valid()
