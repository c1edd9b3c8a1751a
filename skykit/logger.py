"""Logging and reporting module."""

import json
import logging
import logging.handlers
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from .utils import format_cost

logger = logging.getLogger(__name__)

_HANDLER_MARKER = "_skykit_handler"


def configure_logging(level: str = "INFO", log_file: Optional[str] = "simulation.log") -> None:
    """
    Configure structured logging.

    Safe to call more than once: handlers installed by a previous call are
    replaced rather than duplicated.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file, or None for console only
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_file, maxBytes=10 * 1024 * 1024, backupCount=5
            )
        )

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
        root_logger.addHandler(handler)

    root_logger.setLevel(log_level)


class RoundLogger:
    """JSON-lines logger with one record per played round."""

    def __init__(self, log_file: str = "rounds.jsonl"):
        """
        Initialize round logger.

        Args:
            log_file: Path to JSON lines file
        """
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.file_handle = open(self.log_file, "a")

    def log_round(
        self,
        round_num: int,
        day: int,
        hour: int,
        loads: List[Dict],
        purchase: Optional[Dict],
        total_cost: float,
        penalties: List[Dict],
        adaptive: Dict,
    ) -> None:
        """Append one round record."""
        entry = {
            "timestamp": datetime.now().isoformat(),
            "round": round_num,
            "day": day,
            "hour": hour,
            "loads": loads,
            "purchase": purchase,
            "total_cost": total_cost,
            "penalties": penalties,
            "adaptive": adaptive,
        }
        json.dump(entry, self.file_handle)
        self.file_handle.write("\n")
        self.file_handle.flush()

    def close(self) -> None:
        """Close log file."""
        self.file_handle.close()


def write_final_report(summary: Dict, penalties: List[Dict], output_path: str) -> Tuple[Path, Path]:
    """
    Write the end-of-session report as JSON plus a short text summary.

    Args:
        summary: Run summary (rounds_completed, total_cost, adaptive, ...)
        penalties: All penalties received, as platform dictionaries
        output_path: Output path; suffixes .json and .txt are applied

    Returns:
        Tuple of (json_path, text_path)
    """
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    penalty_breakdown: Dict[str, Dict[str, float]] = {}
    for penalty in penalties:
        code = penalty.get("code", "UNKNOWN")
        entry = penalty_breakdown.setdefault(code, {"count": 0, "total": 0.0})
        entry["count"] += 1
        entry["total"] += float(penalty.get("penalty", 0.0))

    report = {"summary": summary, "penalty_breakdown": penalty_breakdown}

    json_path = output_file.with_suffix(".json")
    with open(json_path, "w") as f:
        json.dump(report, f, indent=2, default=str)

    text_path = output_file.with_suffix(".txt")
    with open(text_path, "w") as f:
        f.write("=" * 80 + "\n")
        f.write("SKYKIT SIMULATION REPORT\n")
        f.write("=" * 80 + "\n\n")
        f.write(f"Rounds completed: {summary.get('rounds_completed', 0)}\n")
        f.write(f"Total cost: {format_cost(summary.get('total_cost', 0.0))}\n")
        f.write(f"Penalty cost: {format_cost(summary.get('penalty_cost', 0.0))}\n\n")
        f.write("Penalty breakdown:\n")
        for code, data in penalty_breakdown.items():
            f.write(f"  {code}: {int(data['count'])}x = {format_cost(data['total'])}\n")
        f.write("\n" + "=" * 80 + "\n")

    logger.info(f"Final report generated: {json_path} and {text_path}")
    return json_path, text_path


class ProblemTracker:
    """
    Logs only problems that matter, each at most once per window.

    - real overflow of the local stock mirror (once per day per airport/class, never the hub)
    - hub stock below an emergency level (once per day per class)
    - passengers left without kits on a departing flight
    - purchase window closing (once per class)
    """

    def __init__(self, hub_code: str = "HUB1"):
        self.hub_code = hub_code
        self.problems: List[str] = []
        self._logged_deadlines: Set[str] = set()
        self._logged_low_stock: Dict[str, int] = {}
        self._logged_overflow: Dict[str, int] = {}

    def reset(self) -> None:
        self.problems = []
        self._logged_deadlines.clear()
        self._logged_low_stock.clear()
        self._logged_overflow.clear()

    def warn_overflow(self, day: int, hour: int, airport: str, kit_class: str, dropped: int, capacity: int) -> None:
        if airport == self.hub_code or dropped <= 0:
            return
        key = f"{airport}-{kit_class}"
        if day <= self._logged_overflow.get(key, -1):
            return
        logger.warning(
            f"[OVERFLOW] D{day}H{hour}: {airport} {kit_class} over capacity {capacity} by {dropped}"
        )
        self.problems.append(f"OVERFLOW at {airport} ({kit_class})")
        self._logged_overflow[key] = day

    def warn_low_stock(self, day: int, hour: int, kit_class: str, stock: int, emergency: int) -> None:
        if stock >= emergency or day <= self._logged_low_stock.get(kit_class, -1):
            return
        logger.warning(
            f"[CRITICAL STOCK] D{day}H{hour}: {self.hub_code} {kit_class} stock {stock} "
            f"(emergency threshold: {emergency})"
        )
        self.problems.append(f"LOW STOCK {kit_class}")
        self._logged_low_stock[kit_class] = day

    def warn_unfulfilled(
        self, day: int, hour: int, flight_number: str, kit_class: str, demand: int, loaded: int
    ) -> None:
        shortfall = demand - loaded
        if shortfall <= 0:
            return
        logger.debug(
            f"[UNFULFILLED] D{day}H{hour}: flight {flight_number} {kit_class} "
            f"demand={demand} loaded={loaded} shortfall={shortfall}"
        )
        self.problems.append(f"UNFULFILLED {kit_class} on {flight_number}")

    def info_deadline(self, day: int, hour: int, kit_class: str) -> None:
        if kit_class in self._logged_deadlines:
            return
        logger.info(f"[DEADLINE] D{day}H{hour}: {kit_class} purchasing closed")
        self._logged_deadlines.add(kit_class)

    def had_problems(self) -> bool:
        return bool(self.problems)

    def grouped(self) -> Dict[str, int]:
        """Problem counts grouped by type (details stripped)."""
        return dict(Counter(p.split(" at ")[0].split(" on ")[0] for p in self.problems))

    def log_summary(self) -> None:
        if not self.problems:
            return
        logger.info(f"[PROBLEMS] {len(self.problems)} issues during simulation")
        for problem_type, count in self.grouped().items():
            logger.info(f"  - {problem_type}: {count}x")
