"""Solution package - Contains all decision logic."""

from .adaptive import AdaptiveTuner, StrategyMode
from .allocator import FlightLoadAllocator
from .config import SolutionConfig
from .decision_maker import DecisionMaker
from .forecasting import DemandForecaster
from .penalties import classify_penalty, parse_penalty_reason, to_penalty_record
from .purchasing import PurchaseDecisionMaker

__all__ = [
    "AdaptiveTuner",
    "StrategyMode",
    "FlightLoadAllocator",
    "SolutionConfig",
    "DecisionMaker",
    "DemandForecaster",
    "PurchaseDecisionMaker",
    "classify_penalty",
    "parse_penalty_reason",
    "to_penalty_record",
]
