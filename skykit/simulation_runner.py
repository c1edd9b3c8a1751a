"""Simulation runner for orchestrating the 720-round simulation loop."""

import logging
import threading
from collections import deque
from datetime import datetime
from typing import Callable, Deque, Dict, List, Optional

import requests

from .api_client import ExternalAPIClient, PlatformError
from .config import HOURS_PER_DAY, TOTAL_ROUNDS, Config
from .logger import ProblemTracker, RoundLogger, write_final_report
from .models.flight import Flight
from .solution.decision_maker import DecisionMaker
from .state_manager import InventoryState
from .validator import Validator

logger = logging.getLogger(__name__)

RECENT_EVENTS = 50
RECENT_PENALTIES = 20


def _now() -> str:
    return datetime.now().isoformat()


class SimulationRunner:
    """
    Orchestrates the simulation loop.

    Each round applies the previous round's flight updates, advances the
    state to the round's hour, makes and validates decisions, plays the round
    and feeds the response back into the engine. Decisions for a round only
    ever see feedback up to the previous round.
    """

    def __init__(
        self,
        api_client: ExternalAPIClient,
        state: InventoryState,
        decision_maker: DecisionMaker,
        validator: Validator,
        config: Config,
        round_logger: Optional[RoundLogger] = None,
        problems: Optional[ProblemTracker] = None,
    ):
        """
        Initialize simulation runner.

        Args:
            api_client: External API client
            state: Inventory state for this session
            decision_maker: Decision maker for this session
            validator: Validator instance
            config: Configuration object
            round_logger: Optional JSON-lines round logger
            problems: Optional problem tracker summarised at the end
        """
        self.api_client = api_client
        self.state = state
        self.decision_maker = decision_maker
        self.validator = validator
        self.config = config
        self.round_logger = round_logger
        self.problems = problems

        self._stop_event = threading.Event()
        # Held while a round mutates state, stats and feeds; readers take it too
        self.lock = threading.RLock()
        self.is_running = False
        self.is_complete = False
        self.session_id: Optional[str] = None

        self.stats: Dict = {
            "total_cost": 0.0,
            "penalty_cost": 0.0,
            "total_penalties": 0,
            "total_events": 0,
            "rounds_completed": 0,
            "loads_sent": 0,
            "kits_loaded": 0,
            "kits_purchased": 0,
        }
        self.recent_events: Deque[Dict] = deque(maxlen=RECENT_EVENTS)
        self.all_events: List[Dict] = []
        self.recent_penalties: Deque[Dict] = deque(maxlen=RECENT_PENALTIES)
        self.penalties_by_day: Dict[int, List[Dict]] = {}
        self.all_penalties: List[Dict] = []

    def stop(self) -> None:
        """Ask the loop to stop at the next round boundary."""
        self._stop_event.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    def add_event(self, event_type: str, text: str) -> None:
        event = {"type": event_type, "text": text, "timestamp": _now()}
        with self.lock:
            self.stats["total_events"] += 1
            self.all_events.append(event)
            self.recent_events.append(event)

    def _add_penalty(self, penalty: Dict, day: int, hour: int) -> None:
        issued_day = penalty.get("issuedDay")
        issued_hour = penalty.get("issuedHour")
        info = {
            "code": penalty.get("code", "UNKNOWN"),
            "amount": float(penalty.get("penalty", 0.0) or 0.0),
            "reason": penalty.get("reason", ""),
            "flightId": penalty.get("flightId"),
            "flightNumber": penalty.get("flightNumber"),
            "issuedDay": int(issued_day) if issued_day is not None else day,
            "issuedHour": int(issued_hour) if issued_hour is not None else hour,
        }
        self.all_penalties.append(penalty)
        self.recent_penalties.append(info)
        self.penalties_by_day.setdefault(info["issuedDay"], []).append(info)

    def run(
        self,
        max_rounds: int = TOTAL_ROUNDS,
        stop_existing: bool = True,
        progress_callback: Optional[Callable[[int, float, List[Dict]], None]] = None,
    ) -> Dict:
        """
        Run the main simulation loop.

        Args:
            max_rounds: Maximum number of rounds to run
            stop_existing: End an already active session on the platform first
            progress_callback: Called after every round with (round_num, total_cost, penalties)

        Returns:
            Final summary dictionary

        Raises:
            PlatformError, requests.RequestException: transport failures end the run
            DecisionValidationError: invalid decisions end the run
        """
        logger.info(f"Starting simulation with max_rounds={max_rounds}")
        if self._stop_event.is_set():
            logger.info("Stop requested before the session started, not starting")
            self.add_event("warning", "Game stopped before start")
            if self.round_logger is not None:
                self.round_logger.close()
            return self.summary()

        self.session_id = self.api_client.start_session(stop_existing=stop_existing)
        self.is_running = True
        self.add_event("flight", "Game session started")

        pending_updates: List[Flight] = []
        round_num = 0
        final_response: Dict = {}

        try:
            while round_num < max_rounds and not self._stop_event.is_set():
                day, hour = divmod(round_num, HOURS_PER_DAY)
                response = self._play_round(round_num, day, hour, pending_updates)
                pending_updates = self._parse_updates(response)
                round_num += 1

                if progress_callback is not None:
                    progress_callback(round_num, self.stats["total_cost"], response.get("penalties") or [])

            self.state.apply_lifecycle_events(pending_updates)
            if self._stop_event.is_set():
                logger.info(f"Stop requested, ending session after {round_num} rounds")

            final_response = self.api_client.end_session(self.session_id) or {}
            if "totalCost" in final_response:
                self.stats["total_cost"] = float(final_response["totalCost"])
            self.is_complete = not self._stop_event.is_set()
            self.add_event("flight", f"Game completed! Final score: {self.stats['total_cost']:.2f}")

        except Exception as e:
            logger.error(f"Simulation failed in round {round_num}: {e}")
            self.add_event("warning", f"Game error: {e}")
            self._end_session_quietly()
            raise
        finally:
            self.is_running = False
            if self.round_logger is not None:
                self.round_logger.close()

        summary = self.summary()
        if self.problems is not None:
            self.problems.log_summary()
        if self.config.REPORT_PATH:
            write_final_report(summary, self.all_penalties, self.config.REPORT_PATH)

        logger.info(
            f"Simulation completed: {round_num} rounds, total cost: {self.stats['total_cost']:.2f}"
        )
        return summary

    def _play_round(self, round_num: int, day: int, hour: int, pending_updates: List[Flight]) -> Dict:
        with self.lock:
            delivered = self.state.apply_lifecycle_events(pending_updates)
            for flight in pending_updates:
                if flight.has_landed:
                    self.add_event("flight", f"Flight {flight.flight_number} landed at {flight.destination}")
            if delivered:
                logger.debug(f"Delivered kits of {len(delivered)} landed flights")

            self.state.advance_to(day, hour)
            loads, purchase = self.decision_maker.make_decisions(self.state)
            self.validator.ensure_valid(loads, purchase, self.state)

        response = self.api_client.play_round(day, hour, loads, purchase, session_id=self.session_id)

        penalties = response.get("penalties") or []
        with self.lock:
            self.decision_maker.record_penalties(penalties, day, hour)
            for penalty in penalties:
                self._add_penalty(penalty, day, hour)

            round_penalty_cost = sum(float(p.get("penalty", 0.0) or 0.0) for p in penalties)
            self.stats["total_cost"] = float(response.get("totalCost", self.stats["total_cost"]))
            self.stats["penalty_cost"] += round_penalty_cost
            self.stats["total_penalties"] += len(penalties)
            self.stats["rounds_completed"] = round_num + 1
            self.stats["loads_sent"] += len(loads)
            self.stats["kits_loaded"] += sum(load.total for load in loads)
            if purchase is not None:
                self.stats["kits_purchased"] += purchase.total
                self.add_event("purchase", f"Ordered {purchase.total} kits at {self.state.hub_code}")
            adaptive = self.decision_maker.tuner.summary()

        if hour == 0:
            logger.info(
                f"[DAY {day:02d}] Cost: {self.stats['total_cost']:.2f} | "
                f"Flights: {len(self.state.known_flights)} | Loads sent: {len(loads)}"
            )
        if len(penalties) > 5:
            logger.info(f"  [PENALTIES] {len(penalties)} penalties, total: {round_penalty_cost:.2f}")

        if self.round_logger is not None:
            self.round_logger.log_round(
                round_num=round_num,
                day=day,
                hour=hour,
                loads=[load.to_api() for load in loads],
                purchase=purchase.to_api() if purchase is not None else None,
                total_cost=self.stats["total_cost"],
                penalties=penalties,
                adaptive=adaptive,
            )
        return response

    def _parse_updates(self, response: Dict) -> List[Flight]:
        updates = [Flight.from_api(event) for event in response.get("flightUpdates") or []]
        self.decision_maker.observe_flight_updates(updates)
        return updates

    def _end_session_quietly(self) -> None:
        """End the session after a failure; a second failure is only logged."""
        if not self.session_id:
            return
        try:
            self.api_client.end_session(self.session_id)
        except (PlatformError, requests.RequestException) as e:
            logger.error(f"Error ending session after failure: {e}")

    def summary(self) -> Dict:
        """Run summary used by the final report and the status server."""
        return {
            "session_id": self.session_id,
            "rounds_completed": self.stats["rounds_completed"],
            "total_cost": self.stats["total_cost"],
            "penalty_cost": self.stats["penalty_cost"],
            "total_penalties": self.stats["total_penalties"],
            "kits_loaded": self.stats["kits_loaded"],
            "kits_purchased": self.stats["kits_purchased"],
            "adaptive": self.decision_maker.tuner.summary(),
            "problems": self.problems.grouped() if self.problems is not None else {},
        }
