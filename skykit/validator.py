"""Validator module for pre-submission validation."""

import logging
from collections import Counter
from typing import Dict, List, Optional

from pydantic import BaseModel

from .config import CLASS_TYPES
from .models.aircraft import AircraftType
from .models.kit import KitLoadDecision, KitPurchaseOrder
from .state_manager import InventoryState

logger = logging.getLogger(__name__)


class DecisionValidationError(Exception):
    """Raised when a round's decisions must not be sent to the platform."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class ValidationReport(BaseModel):
    """Validation report with errors and warnings."""

    errors: List[str]
    warnings: List[str]

    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return len(self.errors) == 0


class Validator:
    """Checks a round's decisions against the committed state before submission."""

    def __init__(self, aircraft: Dict[str, AircraftType], purchase_class: str = "ECONOMY"):
        """
        Initialize validator.

        Args:
            aircraft: Dictionary of aircraft types
            purchase_class: The only class a purchase order may contain
        """
        self.aircraft = aircraft
        self.purchase_class = purchase_class

    def validate_decisions(
        self,
        loads: List[KitLoadDecision],
        purchase: Optional[KitPurchaseOrder],
        state: InventoryState,
    ) -> ValidationReport:
        """
        Validate loads and purchase for the state's current hour.

        Loads are expected to be committed already, so stock is checked
        after deduction.

        Args:
            loads: Kit load decisions
            purchase: Purchase order or None
            state: Inventory state the decisions were committed to

        Returns:
            ValidationReport with errors and warnings
        """
        errors = []
        warnings = []
        known_flights = state.known_flights

        counts = Counter(load.flight_id for load in loads)
        for flight_id, count in counts.items():
            if count > 1:
                errors.append(f"Flight {flight_id} loaded {count} times")

        for load in loads:
            flight = known_flights.get(load.flight_id)
            if flight is None:
                errors.append(f"Flight {load.flight_id} does not exist")
                continue

            if flight.departure != state.current_time:
                errors.append(
                    f"Flight {flight.flight_number} departs {flight.departure}, not {state.current_time}"
                )

            for class_type, quantity in load.kits_per_class.items():
                if quantity < 0:
                    errors.append(f"Flight {flight.flight_number}: negative {class_type} load {quantity}")

            aircraft_type = self.aircraft.get(flight.aircraft_type)
            if aircraft_type is None:
                warnings.append(
                    f"Unknown aircraft type {flight.aircraft_type} for flight {flight.flight_number}"
                )
            else:
                for class_type in CLASS_TYPES:
                    quantity = load.kits_per_class.get(class_type, 0)
                    capacity = aircraft_type.kit_capacity.get(class_type, 0)
                    if quantity > capacity:
                        errors.append(
                            f"Flight {flight.flight_number}: {class_type} capacity exceeded "
                            f"({quantity} > {capacity})"
                        )

            for class_type in CLASS_TYPES:
                kit_count = load.kits_per_class.get(class_type, 0)
                passenger_count = flight.passengers.get(class_type, 0)
                if kit_count < passenger_count:
                    warnings.append(
                        f"Flight {flight.flight_number}: unfulfilled {class_type} "
                        f"({kit_count} < {passenger_count})"
                    )

        for code, class_type, quantity in state.negative_stocks():
            errors.append(f"Negative {class_type} stock at {code}: {quantity}")

        if purchase is not None:
            for class_type, quantity in purchase.kits_per_class.items():
                if quantity < 0:
                    errors.append(f"Negative {class_type} purchase {quantity}")
                elif quantity > 0 and class_type != self.purchase_class:
                    errors.append(f"Purchase of {class_type} kits is not allowed")

        return ValidationReport(errors=errors, warnings=warnings)

    def ensure_valid(
        self,
        loads: List[KitLoadDecision],
        purchase: Optional[KitPurchaseOrder],
        state: InventoryState,
    ) -> ValidationReport:
        """
        Validate and raise on errors.

        Raises:
            DecisionValidationError: if any error was found
        """
        report = self.validate_decisions(loads, purchase, state)
        if not report.is_valid():
            logger.error(f"Validation errors at {state.current_time}: {report.errors}")
            raise DecisionValidationError(
                f"{len(report.errors)} invalid decisions at {state.current_time}", report.errors
            )
        if report.warnings:
            logger.debug(f"Validation warnings at {state.current_time}: {len(report.warnings)}")
        return report
