"""Inventory state: stock, kit batches and known flights, advanced hour by hour."""

import logging
import threading
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .config import CLASS_TYPES
from .logger import ProblemTracker
from .models.aircraft import AircraftType
from .models.airport import Airport
from .models.flight import Flight, ReferenceHour
from .models.game_state import InFlightBatch, ProcessingBatch
from .models.kit import KitPurchaseOrder
from .utils import empty_per_class

logger = logging.getLogger(__name__)


class InventoryState:
    """
    Owns per-airport stock, in-flight and processing kit batches, and the
    registry of known flights.

    This is the only writer of those tables; everything else goes through the
    read accessors. Stock never goes negative and every addition is clamped to
    the airport's storage capacity.

    Writers and the copying read accessors hold an internal lock, so the status
    server can read while the game loop advances the state.
    """

    def __init__(
        self,
        airports: Dict[str, Airport],
        aircraft_types: Dict[str, AircraftType],
        initial_stocks: Optional[Dict[str, Dict[str, int]]] = None,
        hub_code: Optional[str] = None,
        fast_processing_hours: int = 2,
        problems: Optional[ProblemTracker] = None,
    ):
        """
        Initialize inventory state.

        Args:
            airports: Airport reference data keyed by code
            aircraft_types: Aircraft reference data keyed by type code
            initial_stocks: Starting stock per airport (defaults to each airport's initial_stock)
            hub_code: Hub airport code (defaults to the airport flagged is_hub)
            fast_processing_hours: Destinations processing at least this fast skip the processing queue
            problems: Optional problem tracker for overflow reporting
        """
        self.airports = airports
        self.aircraft_types = aircraft_types
        self.fast_processing_hours = fast_processing_hours
        self.problems = problems
        self._lock = threading.RLock()

        if initial_stocks is None:
            initial_stocks = {code: airport.initial_stock for code, airport in airports.items()}
        self._stocks: Dict[str, Dict[str, int]] = {}
        for code, stock in initial_stocks.items():
            self._stocks[code] = {
                class_type: max(0, int(stock.get(class_type, 0))) for class_type in CLASS_TYPES
            }

        if hub_code is None:
            hub_code = next((code for code, a in airports.items() if a.is_hub), None)
        self.hub_code = hub_code

        self.current_time = ReferenceHour(day=0, hour=0)
        self.departing_flights: List[Flight] = []
        self._known_flights: Dict[str, Flight] = {}
        self._in_flight: Dict[str, InFlightBatch] = {}
        self._processing: List[ProcessingBatch] = []

        logger.info(
            f"InventoryState initialized: {len(self._stocks)} airports, hub={self.hub_code}"
        )

    # ------------------------------------------------------------------
    # Time and lifecycle transitions
    # ------------------------------------------------------------------

    def advance_to(self, day: int, hour: int) -> List[Flight]:
        """
        Move the clock to (day, hour).

        Releases processing batches that are ready, then recomputes the
        flights departing at exactly this hour that can still be loaded.

        Returns:
            The flights departing now
        """
        with self._lock:
            self.current_time = ReferenceHour(day=day, hour=hour)
            self._release_ready_batches()

            self.departing_flights = [
                flight
                for flight in self._known_flights.values()
                if flight.is_loadable and flight.departure == self.current_time
            ]
            return self.departing_flights

    def _release_ready_batches(self) -> None:
        still_processing = []
        for batch in self._processing:
            if batch.is_ready(self.current_time):
                self._add_to_stock(batch.airport_code, batch.kits)
            else:
                still_processing.append(batch)
        self._processing = still_processing

    def apply_lifecycle_events(self, events: Iterable[Flight]) -> List[Flight]:
        """
        Upsert flights from lifecycle events and deliver kits of landed flights.

        Args:
            events: Flights parsed from the platform's flightUpdates

        Returns:
            Flights whose in-flight batch was delivered
        """
        delivered = []
        with self._lock:
            for event in events:
                self._known_flights[event.flight_id] = event

                if not event.has_landed:
                    continue

                batch = self._in_flight.pop(event.flight_id, None)
                if batch is None:
                    logger.debug(f"Landed flight {event.flight_number} has no tracked kits, ignoring")
                    continue

                self._deliver(batch, event)
                delivered.append(event)
        return delivered

    def _deliver(self, batch: InFlightBatch, event: Flight) -> None:
        airport = self.airports.get(batch.destination)

        if airport is None:
            # No capacity data: keep the kits rather than lose them
            logger.warning(
                f"No airport data for {batch.destination}, adding kits of flight "
                f"{event.flight_number} without capacity check"
            )
            stock = self._stocks.setdefault(batch.destination, empty_per_class())
            for class_type in CLASS_TYPES:
                stock[class_type] += batch.kits.get(class_type, 0)
            return

        processing_time = airport.max_processing_time
        if airport.is_hub or processing_time <= self.fast_processing_hours:
            self._add_to_stock(batch.destination, batch.kits)
            return

        self._processing.append(
            ProcessingBatch(
                airport_code=batch.destination,
                kits=dict(batch.kits),
                ready=event.arrival.plus_hours(processing_time),
            )
        )

    def _add_to_stock(self, airport_code: str, kits: Mapping[str, int]) -> Dict[str, int]:
        """Add kits clamped to capacity; returns what was actually added."""
        stock = self._stocks.setdefault(airport_code, empty_per_class())
        airport = self.airports.get(airport_code)
        added = empty_per_class()

        for class_type in CLASS_TYPES:
            incoming = kits.get(class_type, 0)
            if airport is None:
                added[class_type] = max(0, incoming)
            else:
                capacity = airport.capacity_for(class_type)
                added[class_type] = max(0, min(incoming, capacity - stock[class_type]))
                dropped = incoming - added[class_type]
                if dropped > 0 and self.problems is not None:
                    self.problems.warn_overflow(
                        self.current_time.day, self.current_time.hour,
                        airport_code, class_type, dropped, capacity,
                    )
            stock[class_type] += added[class_type]

        return added

    # ------------------------------------------------------------------
    # Writes driven by decisions
    # ------------------------------------------------------------------

    def commit_load(self, flight: Flight, kits: Mapping[str, int]) -> InFlightBatch:
        """
        Deduct a flight's load from its origin and track it as in flight.

        Raises:
            ValueError: if the flight was already loaded, a quantity is
                negative, or the origin does not hold enough stock
        """
        with self._lock:
            if flight.flight_id in self._in_flight:
                raise ValueError(f"Flight {flight.flight_id} already has a committed load")

            origin_stock = self._stocks.get(flight.origin)
            if origin_stock is None:
                raise ValueError(f"No tracked stock at origin {flight.origin}")

            for class_type in CLASS_TYPES:
                quantity = kits.get(class_type, 0)
                if quantity < 0:
                    raise ValueError(f"Negative {class_type} load for flight {flight.flight_id}")
                if quantity > origin_stock[class_type]:
                    raise ValueError(
                        f"Load of {quantity} {class_type} exceeds stock "
                        f"{origin_stock[class_type]} at {flight.origin}"
                    )

            loaded = empty_per_class()
            for class_type in CLASS_TYPES:
                loaded[class_type] = int(kits.get(class_type, 0))
                origin_stock[class_type] -= loaded[class_type]

            batch = InFlightBatch(
                flight_id=flight.flight_id,
                destination=flight.destination,
                kits=loaded,
                arrival=flight.arrival,
            )
            self._in_flight[flight.flight_id] = batch
            return batch

    def record_purchase(self, order: KitPurchaseOrder, lead_times: Mapping[str, int]) -> None:
        """Queue purchased kits at the hub until their lead time has passed."""
        if self.hub_code is None:
            logger.warning("Purchase recorded without a hub, ignoring")
            return

        for class_type in CLASS_TYPES:
            quantity = order.kits_per_class.get(class_type, 0)
            if quantity <= 0:
                continue
            kits = empty_per_class()
            kits[class_type] = quantity
            ready = order.order_time.plus_hours(lead_times.get(class_type, 0))
            with self._lock:
                self._processing.append(
                    ProcessingBatch(
                        airport_code=self.hub_code,
                        kits=kits,
                        ready=ready,
                        source="PURCHASE",
                    )
                )
            logger.info(f"Purchase of {quantity} {class_type} kits due at {self.hub_code} {ready}")

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def known_flights(self) -> Mapping[str, Flight]:
        """Read-only view of every flight seen so far."""
        return MappingProxyType(self._known_flights)

    @property
    def in_flight_batches(self) -> Tuple[InFlightBatch, ...]:
        with self._lock:
            return tuple(self._in_flight.values())

    @property
    def processing_batches(self) -> Tuple[ProcessingBatch, ...]:
        with self._lock:
            return tuple(self._processing)

    def has_stock(self, airport_code: str) -> bool:
        return airport_code in self._stocks

    def is_hub(self, airport_code: str) -> bool:
        airport = self.airports.get(airport_code)
        if airport is not None:
            return airport.is_hub
        return airport_code == self.hub_code

    def stock(self, airport_code: str) -> Dict[str, int]:
        """Copy of the available stock at an airport."""
        with self._lock:
            return dict(self._stocks.get(airport_code, empty_per_class()))

    def all_stocks(self) -> Dict[str, Dict[str, int]]:
        with self._lock:
            return {code: dict(stock) for code, stock in self._stocks.items()}

    def stock_level(self, airport_code: str, kit_class: str) -> int:
        return self._stocks.get(airport_code, {}).get(kit_class, 0)

    def in_flight_to(self, airport_code: str, kit_class: str) -> int:
        """Kits of a class currently on planes heading to an airport."""
        return sum(
            batch.kits.get(kit_class, 0)
            for batch in self.in_flight_batches
            if batch.destination == airport_code
        )

    def processing_at(self, airport_code: str, kit_class: str) -> int:
        """Kits of a class waiting in processing at an airport."""
        return sum(
            batch.kits.get(kit_class, 0)
            for batch in self.processing_batches
            if batch.airport_code == airport_code
        )

    def pipeline_total(self, airport_code: str, kit_class: str) -> int:
        """Current stock plus everything committed en route or in processing."""
        return (
            self.stock_level(airport_code, kit_class)
            + self.in_flight_to(airport_code, kit_class)
            + self.processing_at(airport_code, kit_class)
        )

    def expected_stock(self, airport_code: str, within_hours: int = 24) -> Dict[str, int]:
        """Stock expected at an airport within a horizon (arrivals and ready batches included)."""
        with self._lock:
            result = self.stock(airport_code)
            horizon = self.current_time.plus_hours(within_hours)

            for batch in self._in_flight.values():
                if batch.destination == airport_code and batch.arrival <= horizon:
                    for class_type in CLASS_TYPES:
                        result[class_type] += batch.kits.get(class_type, 0)

            for batch in self._processing:
                if batch.airport_code == airport_code and batch.ready <= horizon:
                    for class_type in CLASS_TYPES:
                        result[class_type] += batch.kits.get(class_type, 0)

        return result

    def active_flights(self) -> List[Flight]:
        """Known flights that have not landed."""
        with self._lock:
            return [f for f in self._known_flights.values() if not f.has_landed]

    def negative_stocks(self) -> List[Tuple[str, str, int]]:
        """List of (airport_code, class_type, quantity) with negative stock."""
        return [
            (code, class_type, quantity)
            for code, stock in self.all_stocks().items()
            for class_type, quantity in stock.items()
            if quantity < 0
        ]
