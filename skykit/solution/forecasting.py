"""
Demand forecasting.

Predicts kit demand at an airport over a time window from two additive
sources: the exact passenger counts of flights already announced by the
platform, and the recurring weekly flight plan for everything else. Planned
departures are valued with a per-class baseline learned from the passenger
counts seen so far, so the forecast calibrates itself to the dataset.
"""

import logging
import math
from collections import defaultdict, deque
from typing import Deque, Dict, Iterable, List, Mapping, Optional, Tuple

from ..config import CLASS_TYPES, HOURS_PER_DAY
from ..models.flight import Flight, ReferenceHour
from ..models.flight_plan import FlightPlanEntry
from .config import SolutionConfig

logger = logging.getLogger(__name__)


class DemandForecaster:
    """Forecasts per-class kit demand from known flights and the weekly plan."""

    def __init__(self, flight_plans: Iterable[FlightPlanEntry], config: Optional[SolutionConfig] = None):
        self.config = config or SolutionConfig.default()
        self.flight_plans: List[FlightPlanEntry] = list(flight_plans)

        self._plans_by_slot: Dict[Tuple[str, int], List[FlightPlanEntry]] = defaultdict(list)
        self._distances: Dict[Tuple[str, str], float] = {}
        for plan in self.flight_plans:
            self._plans_by_slot[(plan.origin, plan.scheduled_hour)].append(plan)
            self._distances.setdefault((plan.origin, plan.destination), plan.distance_km)

        self._observations: Dict[str, Deque[int]] = {}
        self._cached_means: Dict[str, float] = {}
        self.reset()

    def reset(self) -> None:
        """Forget every observed passenger count."""
        self._observations = {
            class_type: deque(maxlen=self.config.OBSERVATION_WINDOW) for class_type in CLASS_TYPES
        }
        self._cached_means = {}

    # ------------------------------------------------------------------
    # Adaptive baseline
    # ------------------------------------------------------------------

    def record_observed_demand(self, passengers: Mapping[str, int]) -> None:
        """Record the passenger counts of a SCHEDULED or CHECKED_IN flight."""
        for class_type in CLASS_TYPES:
            count = passengers.get(class_type, 0)
            if count > 0:
                self._observations[class_type].append(count)
        self._cached_means = {}

    def observation_count(self, kit_class: str) -> int:
        return len(self._observations[kit_class])

    def baseline(self, kit_class: str) -> int:
        """Estimated kits needed by one planned departure."""
        observations = self._observations[kit_class]
        if len(observations) < self.config.MIN_OBSERVATIONS:
            return self.config.FALLBACK_DEMAND.get(kit_class, 0)

        mean = self._cached_means.get(kit_class)
        if mean is None:
            mean = sum(observations) / len(observations)
            self._cached_means[kit_class] = mean
        return math.ceil(mean * self.config.DEMAND_BUFFER_FACTOR)

    # ------------------------------------------------------------------
    # Demand
    # ------------------------------------------------------------------

    def demand(
        self,
        airport_code: str,
        kit_class: str,
        from_time: ReferenceHour,
        window_hours: int,
        known_flights: Mapping[str, Flight],
    ) -> int:
        """
        Kits of one class needed by departures from an airport.

        Args:
            airport_code: Origin airport
            kit_class: Kit class
            from_time: Window start
            window_hours: Window length in hours
            known_flights: Flights announced by the platform, keyed by id

        Returns:
            Known passengers departing in [from_time, from_time + window]
            plus one baseline per planned departure in the window
        """
        until = from_time.plus_hours(window_hours)
        total = 0

        for flight in known_flights.values():
            if flight.origin == airport_code and from_time <= flight.departure <= until:
                total += flight.passengers.get(kit_class, 0)

        planned = self.planned_departures(airport_code, from_time, window_hours)
        if planned:
            total += planned * self.baseline(kit_class)

        return total

    def planned_departures(self, airport_code: str, from_time: ReferenceHour, window_hours: int) -> int:
        """Number of weekly-plan departures from an airport over the next window_hours."""
        count = 0
        start = from_time.to_hours()
        for offset in range(window_hours):
            day, hour = divmod(start + offset, HOURS_PER_DAY)
            for plan in self._plans_by_slot.get((airport_code, hour), ()):
                if plan.departs_on(day):
                    count += 1
        return count

    def total_demand(
        self,
        airport_code: str,
        from_time: ReferenceHour,
        window_hours: int,
        known_flights: Mapping[str, Flight],
    ) -> Dict[str, int]:
        """Demand for every class."""
        return {
            class_type: self.demand(airport_code, class_type, from_time, window_hours, known_flights)
            for class_type in CLASS_TYPES
        }

    def route_distance(self, origin: str, destination: str) -> float:
        """Distance of a planned route; 0.0 when the route is not in the plan."""
        return self._distances.get((origin, destination), 0.0)
