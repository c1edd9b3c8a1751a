"""Service for simulation management."""

import logging
from typing import Callable, Dict, List, Optional

from ..api_client import ExternalAPIClient
from ..config import TOTAL_ROUNDS, Config
from ..data_loader import load_reference_data
from ..logger import ProblemTracker, RoundLogger
from ..simulation_runner import SimulationRunner
from ..solution.config import SolutionConfig
from ..solution.decision_maker import DecisionMaker
from ..state_manager import InventoryState
from ..utils import format_cost
from ..validator import Validator

logger = logging.getLogger(__name__)

LOW_STOCK_RATIO = 0.2
EXPECTED_STOCK_HOURS = 24


class SimulationService:
    """Owns the current session's runner and answers status queries from it."""

    def __init__(
        self,
        config: Optional[Config] = None,
        runner_factory: Optional[Callable[[], SimulationRunner]] = None,
    ):
        """
        Initialize simulation service.

        Args:
            config: Application configuration (read from the environment by default)
            runner_factory: Builds a fresh runner per session (defaults to initialize_simulation)
        """
        self.config = config or Config()
        self.runner_factory = runner_factory or self.initialize_simulation
        self.simulation_runner: Optional[SimulationRunner] = None
        self.is_starting = False
        self.error: Optional[str] = None
        self.max_rounds = TOTAL_ROUNDS
        self.stop_existing = True

    def initialize_simulation(self) -> SimulationRunner:
        """
        Build every component of a session from reference data and configuration.

        Returns:
            Initialized SimulationRunner
        """
        airports, aircraft, flight_plan = load_reference_data(self.config)
        solution_config = SolutionConfig.default()
        problems = ProblemTracker(hub_code=self.config.HUB_CODE)

        hub_code = self.config.HUB_CODE if self.config.HUB_CODE in airports else None
        state = InventoryState(
            airports,
            aircraft,
            hub_code=hub_code,
            fast_processing_hours=solution_config.FAST_PROCESSING_HOURS,
            problems=problems,
        )
        decision_maker = DecisionMaker(flight_plan, solution_config, problems=problems)
        validator = Validator(aircraft, purchase_class=solution_config.PURCHASE_CLASS)
        api_client = ExternalAPIClient(
            base_url=self.config.API_BASE_URL,
            api_key=self.config.API_KEY,
            api_key_header=self.config.API_KEY_HEADER,
            session_id_header=self.config.SESSION_ID_HEADER,
            timeout=self.config.REQUEST_TIMEOUT,
            endpoints={
                "start": self.config.ENDPOINT_START_SESSION,
                "play": self.config.ENDPOINT_PLAY_ROUND,
                "end": self.config.ENDPOINT_STOP_SESSION,
            },
        )
        round_logger = RoundLogger(self.config.ROUND_LOG_FILE) if self.config.ROUND_LOG_FILE else None

        return SimulationRunner(
            api_client=api_client,
            state=state,
            decision_maker=decision_maker,
            validator=validator,
            config=self.config,
            round_logger=round_logger,
            problems=problems,
        )

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.simulation_runner is not None and self.simulation_runner.is_running

    def start_simulation(self, stop_existing: bool = True, max_rounds: Optional[int] = None) -> None:
        """
        Prepare a new session; the loop itself runs in run_simulation_task.

        Raises:
            ValueError: if a session is starting or running
        """
        if self.is_starting:
            raise ValueError("Game is already starting")
        if self.is_running:
            raise ValueError("Game is already running")

        self.simulation_runner = self.runner_factory()
        self.is_starting = True
        self.error = None
        self.stop_existing = stop_existing
        self.max_rounds = max_rounds or TOTAL_ROUNDS
        logger.info("Simulation runner initialized")

    def run_simulation_task(self) -> None:
        """Background task running the whole session."""
        runner = self.simulation_runner
        if runner is None:
            logger.error("run_simulation_task called without a runner")
            self.is_starting = False
            return

        def update_progress(round_num: int, total_cost: float, penalties: list):
            self.is_starting = False
            if round_num % 50 == 0:
                logger.info(f"Progress update: Round {round_num}, Cost {total_cost:.2f}")

        try:
            summary = runner.run(
                max_rounds=self.max_rounds,
                stop_existing=self.stop_existing,
                progress_callback=update_progress,
            )
            logger.info(f"Simulation task completed: {summary['rounds_completed']} rounds")
            logger.info(f"Final cost: {format_cost(summary['total_cost'])}")
        except Exception as e:
            logger.error(f"Error in simulation task: {e}", exc_info=True)
            self.error = str(e)
        finally:
            self.is_starting = False

    def stop_simulation(self) -> None:
        """
        Ask the running session to stop at the next round boundary.

        Raises:
            ValueError: if no session is running
        """
        if self.simulation_runner is None or not (self.is_running or self.is_starting):
            raise ValueError("No simulation running")
        self.simulation_runner.stop()
        logger.info("Stop requested")

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_health(self) -> Dict:
        return {"status": "ok", "game_running": self.is_running}

    def get_stats(self) -> Dict:
        runner = self.simulation_runner
        if runner is None:
            stats: Dict = {}
        else:
            with runner.lock:
                stats = dict(runner.stats)
        stats["total_cost_formatted"] = format_cost(stats.get("total_cost", 0.0))
        return stats

    def get_airports(self) -> List[Dict]:
        """Stock per airport, hub first then by code."""
        runner = self.simulation_runner
        if runner is None:
            return []

        state = runner.state
        result = []
        with runner.lock:
            for code, stock in state.all_stocks().items():
                airport = state.airports.get(code)
                capacity = dict(airport.storage_capacity) if airport is not None else {}
                is_low_stock = any(
                    cap > 0 and stock.get(class_type, 0) < cap * LOW_STOCK_RATIO
                    for class_type, cap in capacity.items()
                )
                result.append({
                    "code": code,
                    "name": airport.name if airport is not None else code,
                    "is_hub": state.is_hub(code),
                    "stock": stock,
                    "capacity": capacity,
                    "expected_stock": state.expected_stock(code, EXPECTED_STOCK_HOURS),
                    "is_low_stock": is_low_stock,
                })

        result.sort(key=lambda a: (not a["is_hub"], a["code"]))
        return result

    def get_flights(self) -> List[Dict]:
        """Known flights that have not landed."""
        runner = self.simulation_runner
        if runner is None:
            return []
        with runner.lock:
            flights = runner.state.active_flights()
        return [
            {
                "flight_id": flight.flight_id,
                "flight_number": flight.flight_number,
                "origin": flight.origin,
                "destination": flight.destination,
                "departure_day": flight.departure.day,
                "departure_hour": flight.departure.hour,
                "arrival_day": flight.arrival.day,
                "arrival_hour": flight.arrival.hour,
                "passengers": dict(flight.passengers),
                "aircraft_type": flight.aircraft_type,
                "status": flight.event_type.value,
            }
            for flight in flights
        ]

    def get_adaptive(self) -> Dict:
        runner = self.simulation_runner
        if runner is None:
            return {}
        with runner.lock:
            return runner.decision_maker.tuner.summary()

    def get_penalties(self) -> List[Dict]:
        runner = self.simulation_runner
        if runner is None:
            return []
        with runner.lock:
            return list(runner.recent_penalties)

    def get_penalty_history(self) -> Dict[int, List[Dict]]:
        runner = self.simulation_runner
        if runner is None:
            return {}
        with runner.lock:
            return {day: list(items) for day, items in runner.penalties_by_day.items()}

    def get_events(self) -> List[Dict]:
        runner = self.simulation_runner
        if runner is None:
            return []
        with runner.lock:
            return list(runner.recent_events)

    def get_event_history(self) -> List[Dict]:
        runner = self.simulation_runner
        if runner is None:
            return []
        with runner.lock:
            return list(runner.all_events)

    def get_state(self) -> Dict:
        """Full dashboard snapshot, read under the runner's lock."""
        runner = self.simulation_runner
        if runner is None:
            return self._build_state(None)
        with runner.lock:
            return self._build_state(runner)

    def _build_state(self, runner: Optional[SimulationRunner]) -> Dict:
        day = hour = 0
        is_complete = False
        if runner is not None:
            day = runner.state.current_time.day
            hour = runner.state.current_time.hour
            is_complete = runner.is_complete

        return {
            "day": day,
            "hour": hour,
            "round": runner.stats["rounds_completed"] if runner is not None else 0,
            "is_starting": self.is_starting,
            "is_running": self.is_running,
            "is_complete": is_complete,
            "error": self.error,
            "stats": self.get_stats(),
            "airports": self.get_airports(),
            "active_flights": self.get_flights(),
            "events": self.get_events(),
            "recent_penalties": self.get_penalties(),
            "adaptive": self.get_adaptive(),
        }
