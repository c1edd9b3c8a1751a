"""
Flight load allocation.

For every flight departing this hour, decides how many kits of each class to
load. Flights are handled longest route first, since an unfulfilled passenger
costs more the farther the flight goes. Per class:

1. Base load: min(passengers, origin stock, aircraft capacity)
2. Hub push: flights out of the hub top up the destination's 48h deficit,
   bounded by the destination's fill limit
3. Spoke pull: flights into the hub carry the origin's surplus back home
"""

import logging
import math
from typing import Dict, List, Optional

from ..config import CLASS_TYPES
from ..logger import ProblemTracker
from ..models.flight import Flight
from ..models.kit import KitLoadDecision
from ..state_manager import InventoryState
from ..utils import empty_per_class
from .adaptive import AdaptiveTuner
from .config import SolutionConfig
from .forecasting import DemandForecaster

logger = logging.getLogger(__name__)


class FlightLoadAllocator:
    """Greedy per-flight, per-class load planner."""

    def __init__(
        self,
        config: SolutionConfig,
        forecaster: DemandForecaster,
        tuner: Optional[AdaptiveTuner] = None,
        problems: Optional[ProblemTracker] = None,
    ):
        self.config = config
        self.forecaster = forecaster
        self.tuner = tuner
        self.problems = problems

    def allocate(self, state: InventoryState) -> List[KitLoadDecision]:
        """
        Plan and commit loads for every flight departing at the state's current hour.

        Each load is committed to the state before the next flight is
        planned, so later flights see the reduced origin stock.

        Args:
            state: Inventory state already advanced to the current hour

        Returns:
            One decision per loaded flight
        """
        flights = sorted(
            state.departing_flights,
            key=lambda f: self.forecaster.route_distance(f.origin, f.destination),
            reverse=True,
        )

        decisions = []
        for flight in flights:
            aircraft = state.aircraft_types.get(flight.aircraft_type)
            if aircraft is None or not state.has_stock(flight.origin):
                logger.warning(
                    f"Missing data for flight {flight.flight_number} from {flight.origin} "
                    f"(aircraft {flight.aircraft_type}), skipping load"
                )
                continue

            loads = self._plan_flight(state, flight, aircraft.kit_capacity)
            state.commit_load(flight, loads)
            decisions.append(KitLoadDecision(flight_id=flight.flight_id, kits_per_class=loads))

        return decisions

    def _plan_flight(self, state: InventoryState, flight: Flight, kit_capacity: Dict[str, int]) -> Dict[str, int]:
        loads = empty_per_class()
        now = state.current_time
        origin_is_hub = state.is_hub(flight.origin)
        destination_is_hub = state.is_hub(flight.destination)
        destination = state.airports.get(flight.destination)

        for class_type in CLASS_TYPES:
            passengers = max(0, flight.passengers.get(class_type, 0))
            available = max(0, state.stock_level(flight.origin, class_type))
            capacity = max(0, kit_capacity.get(class_type, 0))

            to_load = min(passengers, available, capacity)

            if self.problems is not None:
                self.problems.warn_unfulfilled(
                    now.day, now.hour, flight.flight_number, class_type, passengers, to_load
                )

            if (
                self.config.ENABLE_EXTRA_LOADING_TO_SPOKES
                and origin_is_hub
                and destination is not None
                and to_load < capacity
            ):
                to_load += self._hub_push(
                    state,
                    flight.destination,
                    class_type,
                    destination.capacity_for(class_type),
                    spare_capacity=capacity - to_load,
                    spare_stock=available - to_load,
                )
            elif (
                self.config.ENABLE_RETURN_TO_HUB
                and destination_is_hub
                and to_load < capacity
            ):
                upcoming = self.forecaster.demand(
                    flight.origin, class_type, now, self.config.FORECAST_HOURS, state.known_flights
                )
                surplus = max(0, (available - to_load) - upcoming)
                to_load += min(capacity - to_load, surplus)

            loads[class_type] = to_load

        return loads

    def _hub_push(
        self,
        state: InventoryState,
        destination_code: str,
        class_type: str,
        destination_capacity: int,
        spare_capacity: int,
        spare_stock: int,
    ) -> int:
        """Extra kits to send from the hub to a spoke."""
        pipeline = state.pipeline_total(destination_code, class_type)
        upcoming = self.forecaster.demand(
            destination_code, class_type, state.current_time, self.config.FORECAST_HOURS, state.known_flights
        )
        deficit = max(0, upcoming - pipeline)
        room = max(0, self._fill_limit(destination_code, class_type, destination_capacity) - pipeline)
        return max(0, min(deficit, room, spare_capacity, spare_stock))

    def _fill_limit(self, airport_code: str, class_type: str, capacity: int) -> int:
        if not self.config.USE_ADAPTIVE_FILL or self.tuner is None:
            return capacity
        percent = self.tuner.buffer_percent(airport_code, class_type, self.config.DESTINATION_FILL_BASE)
        return math.floor(capacity * percent)
