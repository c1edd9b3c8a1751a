"""Main decision maker - composes forecasting, tuning, loading and purchasing."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import CLASS_TYPES, LEAD_TIMES
from ..logger import ProblemTracker
from ..models.flight import Flight
from ..models.flight_plan import FlightPlanEntry
from ..models.game_state import PenaltyRecord
from ..models.kit import KitLoadDecision, KitPurchaseOrder
from ..state_manager import InventoryState
from .adaptive import AdaptiveTuner
from .allocator import FlightLoadAllocator
from .config import SolutionConfig
from .forecasting import DemandForecaster
from .purchasing import PurchaseDecisionMaker

logger = logging.getLogger(__name__)


class DecisionMaker:
    """
    Per-session decision step.

    Owns one forecaster and one tuner and hands them to the allocator and the
    purchaser, so every component of a session sees the same learned state.
    """

    def __init__(
        self,
        flight_plans: Iterable[FlightPlanEntry],
        config: Optional[SolutionConfig] = None,
        tuner: Optional[AdaptiveTuner] = None,
        problems: Optional[ProblemTracker] = None,
    ):
        if config is None:
            config = SolutionConfig.default()

        self.config = config
        self.problems = problems
        self.forecaster = DemandForecaster(flight_plans, config)
        self.tuner = tuner or AdaptiveTuner(config)
        self.allocator = FlightLoadAllocator(config, self.forecaster, self.tuner, problems)
        self.purchaser = PurchaseDecisionMaker(config, self.forecaster, self.tuner, problems)

        logger.info(f"DecisionMaker initialized with {len(self.forecaster.flight_plans)} planned routes")

    def observe_flight_updates(self, flights: Iterable[Flight]) -> None:
        """Feed passenger counts of announced flights into the demand baseline."""
        for flight in flights:
            if flight.is_loadable:
                self.forecaster.record_observed_demand(flight.passengers)

    def record_penalties(self, penalties: List[Dict], day: int, hour: int) -> List[PenaltyRecord]:
        """Forward a round's penalties to the tuner."""
        return self.tuner.record_penalties(penalties, day, hour)

    def make_decisions(
        self, state: InventoryState
    ) -> Tuple[List[KitLoadDecision], Optional[KitPurchaseOrder]]:
        """
        Make all decisions for the current round.

        Loads are committed to the state as they are planned. A purchase is
        recorded as pending hub stock when delivery tracking is enabled.

        Args:
            state: Inventory state already advanced to the current hour

        Returns:
            Tuple of (load_decisions, purchase_order or None)
        """
        now = state.current_time
        loads = self.allocator.allocate(state)
        purchase = self.purchaser.decide(state)

        if purchase is not None and self.config.TRACK_PURCHASE_DELIVERIES:
            state.record_purchase(purchase, LEAD_TIMES)

        if self.problems is not None and state.hub_code is not None:
            for class_type in CLASS_TYPES:
                self.problems.warn_low_stock(
                    now.day,
                    now.hour,
                    class_type,
                    state.stock_level(state.hub_code, class_type),
                    self.config.EMERGENCY_STOCK.get(class_type, 0),
                )

        logger.debug(
            f"Decisions for {now}: {len(loads)} loads, "
            f"purchase={purchase.total if purchase else 0}"
        )
        return loads, purchase

    def reset(self) -> None:
        """Forget everything learned in the session."""
        self.forecaster.reset()
        self.tuner.reset()
        self.purchaser.reset()
