"""
Adaptive tuning from penalty feedback.

Every round the platform's penalties are classified, attributed to an airport
and kit class where possible, and folded into three knobs:

- a global buffer multiplier driven by the trend of per-round penalty totals
- an economy boost that shrinks economy fill limits while economy overflows persist
- a per-airport risk score that shrinks fill limits at overflow-prone destinations
"""

import logging
from collections import deque
from enum import Enum
from typing import Deque, Dict, Iterable, List, Mapping, Optional

from ..config import PENALTY_FLIGHT_UNFULFILLED, PENALTY_INVENTORY_EXCEEDS_CAPACITY
from ..models.game_state import AirportRiskProfile, PenaltyRecord
from ..utils import clamp
from .config import SolutionConfig
from .penalties import to_penalty_record

logger = logging.getLogger(__name__)


class StrategyMode(str, Enum):
    """Loading stance derived from the penalty trend."""

    AGGRESSIVE = "aggressive"
    BALANCED = "balanced"
    CONSERVATIVE = "conservative"


def _average(values: List[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


class AdaptiveTuner:
    """Penalty feedback loop shared by the allocator and the purchaser."""

    def __init__(self, config: Optional[SolutionConfig] = None):
        self.config = config or SolutionConfig.default()
        self.reset()

    def reset(self) -> None:
        """Return to the neutral state with no history."""
        self.mode = StrategyMode.BALANCED
        self.buffer_multiplier = 1.0
        self.economy_boost = 0.0
        self.penalty_history: Deque[PenaltyRecord] = deque(
            maxlen=self.config.PENALTY_HISTORY_HOURS * 24
        )
        self.round_totals: Deque[float] = deque(maxlen=self.config.TREND_WINDOW)
        self._profiles: Dict[str, AirportRiskProfile] = {}

    @property
    def airport_profiles(self) -> Dict[str, AirportRiskProfile]:
        """Copies of the risk profiles learned so far."""
        return {code: profile.model_copy() for code, profile in self._profiles.items()}

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    def record_penalties(self, penalties: Iterable[Mapping], day: int, hour: int) -> List[PenaltyRecord]:
        """
        Ingest one round of platform penalties and adapt.

        Must be called once per round, also when the round had no penalties,
        so the trend sees the quiet rounds too.

        Args:
            penalties: PenaltyDto dictionaries from the round response
            day: Day of the round
            hour: Hour of the round

        Returns:
            The classified penalty records
        """
        records = []
        round_total = 0.0

        for penalty in penalties:
            record = to_penalty_record(penalty, day, hour)
            round_total += record.amount
            self.penalty_history.append(record)
            records.append(record)

            if record.airport_code:
                self._update_profile(record)

        self.round_totals.append(round_total)
        self._adapt(day)
        return records

    def _adapt(self, day: int) -> None:
        sample = self.config.TREND_SAMPLE
        if len(self.round_totals) < sample:
            return

        totals = list(self.round_totals)
        recent_avg = _average(totals[-sample:])
        older = totals[-2 * sample:-sample]
        older_avg = _average(older) if older else recent_avg

        previous_mode = self.mode

        if recent_avg > older_avg * self.config.WORSENING_RATIO:
            self.mode = StrategyMode.CONSERVATIVE
            self.buffer_multiplier = min(
                self.config.MULTIPLIER_MAX, self.buffer_multiplier + self.config.MULTIPLIER_STEP_UP
            )
        elif recent_avg < older_avg * self.config.IMPROVING_RATIO and self.mode != StrategyMode.AGGRESSIVE:
            self.mode = StrategyMode.AGGRESSIVE
            self.buffer_multiplier = max(
                self.config.MULTIPLIER_MIN, self.buffer_multiplier - self.config.MULTIPLIER_STEP_DOWN
            )
        else:
            self.mode = StrategyMode.BALANCED
            relax = self.config.MULTIPLIER_RELAX
            self.buffer_multiplier = self.buffer_multiplier * (1.0 - relax) + relax

        economy_overflows = sum(
            1
            for record in self.penalty_history
            if record.type == PENALTY_INVENTORY_EXCEEDS_CAPACITY
            and record.kit_class == "ECONOMY"
            and record.day >= day - 1
        )
        if economy_overflows > self.config.ECONOMY_OVERFLOW_TRIGGER:
            self.economy_boost = min(
                self.config.ECONOMY_BOOST_MAX, self.economy_boost + self.config.ECONOMY_BOOST_STEP
            )
        elif economy_overflows == 0 and self.economy_boost > 0:
            self.economy_boost = max(0.0, self.economy_boost - self.config.ECONOMY_BOOST_DECAY)

        if previous_mode != self.mode:
            logger.info(
                f"[ADAPTIVE] Mode: {previous_mode.value} -> {self.mode.value} | "
                f"Buffer: {self.buffer_multiplier * 100:.0f}% | "
                f"Economy boost: -{self.economy_boost * 100:.0f}%"
            )

    def _update_profile(self, record: PenaltyRecord) -> None:
        profile = self._profiles.get(record.airport_code)
        if profile is None:
            profile = AirportRiskProfile(risk_score=self.config.RISK_INITIAL)
            self._profiles[record.airport_code] = profile

        if record.type == PENALTY_INVENTORY_EXCEEDS_CAPACITY:
            profile.overflow_count += 1
            profile.last_overflow_day = record.day
            profile.risk_score = min(self.config.RISK_MAX, profile.risk_score + self.config.RISK_OVERFLOW_STEP)
        elif record.type == PENALTY_FLIGHT_UNFULFILLED:
            profile.unfulfilled_count += 1
            profile.risk_score = max(self.config.RISK_MIN, profile.risk_score - self.config.RISK_UNFULFILLED_STEP)

        profile.risk_score = max(self.config.RISK_MIN, profile.risk_score * self.config.RISK_DECAY)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def buffer_percent(self, airport_code: str, kit_class: str, base: float) -> float:
        """Fraction of a destination's capacity that may be filled."""
        buffer = base * self.buffer_multiplier

        if kit_class == "ECONOMY":
            buffer -= self.economy_boost

        profile = self._profiles.get(airport_code)
        if profile is not None and profile.risk_score > self.config.HIGH_RISK_THRESHOLD:
            buffer -= (profile.risk_score - self.config.HIGH_RISK_THRESHOLD) * 0.1

        return clamp(buffer, self.config.BUFFER_MIN, self.config.BUFFER_MAX)

    def risk_score(self, airport_code: str) -> float:
        profile = self._profiles.get(airport_code)
        return profile.risk_score if profile is not None else self.config.RISK_INITIAL

    def is_hot_airport(self, airport_code: str, day: int) -> bool:
        """An airport with more than three overflows, the latest within two days."""
        profile = self._profiles.get(airport_code)
        if profile is None:
            return False
        return profile.last_overflow_day >= day - 2 and profile.overflow_count > 3

    def purchase_adjustment(self, kit_class: str) -> float:
        """Multiplier for purchase sizing learned from the penalty history."""
        unfulfilled = sum(
            1 for r in self.penalty_history
            if r.type == PENALTY_FLIGHT_UNFULFILLED and r.kit_class == kit_class
        )
        if unfulfilled > 10:
            return 1.2
        if unfulfilled > 5:
            return 1.1

        overflows = sum(
            1 for r in self.penalty_history
            if r.type == PENALTY_INVENTORY_EXCEEDS_CAPACITY and r.kit_class == kit_class
        )
        if overflows > 5:
            return 0.9
        return 1.0

    def summary(self) -> Dict:
        """Snapshot for logging and the status server."""
        hot_airports = [
            code for code, profile in self._profiles.items()
            if profile.risk_score > self.config.HIGH_RISK_THRESHOLD
        ]
        return {
            "mode": self.mode.value,
            "bufferMultiplier": self.buffer_multiplier,
            "economyBoost": self.economy_boost,
            "hotAirports": hot_airports,
            "recentPenaltyAvg": _average(list(self.round_totals)[-self.config.TREND_SAMPLE:]),
        }
