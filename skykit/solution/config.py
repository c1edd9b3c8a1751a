"""Configuration for engine thresholds and tuning parameters."""

from dataclasses import asdict, dataclass, field
from typing import Dict


def _fallback_demand() -> Dict[str, int]:
    return {"FIRST": 10, "BUSINESS": 50, "PREMIUM_ECONOMY": 25, "ECONOMY": 200}


def _emergency_stock() -> Dict[str, int]:
    return {"FIRST": 400, "BUSINESS": 2000, "PREMIUM_ECONOMY": 400, "ECONOMY": 10000}


@dataclass
class SolutionConfig:
    """Configuration for forecasting, loading, purchasing and adaptation."""

    # === FORECASTING ===

    FORECAST_HOURS: int = 48
    OBSERVATION_WINDOW: int = 100  # passenger counts kept per class
    MIN_OBSERVATIONS: int = 5
    DEMAND_BUFFER_FACTOR: float = 1.3  # 30% on top of the observed mean
    FALLBACK_DEMAND: Dict[str, int] = field(default_factory=_fallback_demand)

    # === LANDING / PROCESSING ===

    # Spokes processing within this many hours put landed kits straight into stock
    FAST_PROCESSING_HOURS: int = 2

    # === FLIGHT LOADING ===

    ENABLE_EXTRA_LOADING_TO_SPOKES: bool = True
    ENABLE_RETURN_TO_HUB: bool = True

    # Destination fill limit = capacity * tuner.buffer_percent(dest, class, base)
    USE_ADAPTIVE_FILL: bool = True
    DESTINATION_FILL_BASE: float = 0.95

    # === HUB PURCHASING ===

    PURCHASE_CLASS: str = "ECONOMY"
    PURCHASE_CUTOFF_DAY: int = 20  # later orders cannot arrive in time
    PURCHASE_HOUR: int = 0  # evaluated once per day
    MAX_TOTAL_PURCHASE: int = 20000  # lifetime ceiling in kits
    PURCHASE_THRESHOLD: int = 15000  # order only while expected hub stock is below
    API_PURCHASE_CAP: int = 1000  # per request
    MIN_PURCHASE_QUANTITY: int = 100  # orders of this size or less are not worth it
    TRACK_PURCHASE_DELIVERIES: bool = True
    EMERGENCY_STOCK: Dict[str, int] = field(default_factory=_emergency_stock)

    # === ADAPTIVE TUNING ===

    PENALTY_HISTORY_HOURS: int = 48
    TREND_WINDOW: int = 24  # round totals kept
    TREND_SAMPLE: int = 6  # rounds per compared block
    WORSENING_RATIO: float = 1.3
    IMPROVING_RATIO: float = 0.7
    MULTIPLIER_MIN: float = 0.9
    MULTIPLIER_MAX: float = 1.2
    MULTIPLIER_STEP_UP: float = 0.05
    MULTIPLIER_STEP_DOWN: float = 0.03
    MULTIPLIER_RELAX: float = 0.02  # pull toward 1.0 per balanced round
    ECONOMY_OVERFLOW_TRIGGER: int = 5
    ECONOMY_BOOST_STEP: float = 0.02
    ECONOMY_BOOST_DECAY: float = 0.01
    ECONOMY_BOOST_MAX: float = 0.15
    RISK_INITIAL: float = 0.5
    RISK_OVERFLOW_STEP: float = 0.1
    RISK_UNFULFILLED_STEP: float = 0.02
    RISK_MIN: float = 0.1
    RISK_MAX: float = 1.0
    RISK_DECAY: float = 0.99
    HIGH_RISK_THRESHOLD: float = 0.7
    BUFFER_MIN: float = 0.5
    BUFFER_MAX: float = 0.95

    @classmethod
    def default(cls) -> "SolutionConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def conservative(cls) -> "SolutionConfig":
        """Keep more stock at home: slower spoke pushes, earlier purchases."""
        return cls(
            DESTINATION_FILL_BASE=0.8,
            PURCHASE_THRESHOLD=20000,
            MAX_TOTAL_PURCHASE=30000,
            DEMAND_BUFFER_FACTOR=1.4,
        )

    @classmethod
    def aggressive(cls) -> "SolutionConfig":
        """Spend less: tighter purchase budget, fuller spokes."""
        return cls(
            DESTINATION_FILL_BASE=0.95,
            PURCHASE_THRESHOLD=10000,
            MAX_TOTAL_PURCHASE=10000,
            DEMAND_BUFFER_FACTOR=1.2,
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return asdict(self)
