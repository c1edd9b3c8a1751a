"""Hub replenishment purchasing."""

import logging
import math
from typing import Optional

from ..logger import ProblemTracker
from ..models.kit import KitPurchaseOrder
from ..state_manager import InventoryState
from ..utils import empty_per_class
from .adaptive import AdaptiveTuner
from .config import SolutionConfig
from .forecasting import DemandForecaster

logger = logging.getLogger(__name__)


class PurchaseDecisionMaker:
    """
    Decides economy kit purchases for the hub.

    Orders are placed at most once a day, only before the cutoff day, only
    while the hub pipeline is below the threshold, and never beyond the
    lifetime budget. Only the purchasable class is ever non-zero.
    """

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
        self.total_ordered = 0

    def reset(self) -> None:
        self.total_ordered = 0

    def decide(self, state: InventoryState) -> Optional[KitPurchaseOrder]:
        """
        Compute this hour's purchase order, if any.

        Args:
            state: Inventory state already advanced to the current hour

        Returns:
            The order, or None when a gate blocks purchasing or the quantity is too small
        """
        now = state.current_time
        kit_class = self.config.PURCHASE_CLASS

        if now.day >= self.config.PURCHASE_CUTOFF_DAY:
            if self.problems is not None:
                self.problems.info_deadline(now.day, now.hour, kit_class)
            return None

        if self.total_ordered >= self.config.MAX_TOTAL_PURCHASE:
            return None

        if now.hour != self.config.PURCHASE_HOUR:
            return None

        hub = state.hub_code
        if hub is None or not state.has_stock(hub):
            return None

        expected = state.pipeline_total(hub, kit_class)
        if expected >= self.config.PURCHASE_THRESHOLD:
            return None

        upcoming = self.forecaster.demand(
            hub, kit_class, now, self.config.FORECAST_HOURS, state.known_flights
        )
        deficit = max(0, upcoming - expected)
        if self.tuner is not None:
            deficit = math.ceil(deficit * self.tuner.purchase_adjustment(kit_class))

        quantity = min(
            deficit,
            self.config.API_PURCHASE_CAP,
            self.config.MAX_TOTAL_PURCHASE - self.total_ordered,
            max(0, self.config.PURCHASE_THRESHOLD - expected),
        )
        if quantity <= self.config.MIN_PURCHASE_QUANTITY:
            return None

        self.total_ordered += quantity
        logger.info(
            f"[PURCHASE] Day {now.day}: ordering {quantity} {kit_class} kits "
            f"(total: {self.total_ordered})"
        )

        kits = empty_per_class()
        kits[kit_class] = quantity
        return KitPurchaseOrder(kits_per_class=kits, order_time=now)
