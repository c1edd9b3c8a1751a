"""Configuration module for constants, penalty codes, and settings."""

from typing import Dict, Optional
from pydantic_settings import BaseSettings


# Game constants
TOTAL_DAYS = 30
HOURS_PER_DAY = 24
TOTAL_ROUNDS = TOTAL_DAYS * HOURS_PER_DAY  # 720
CLASS_TYPES = ["FIRST", "BUSINESS", "PREMIUM_ECONOMY", "ECONOMY"]

# Wire names used by the evaluation platform (PerClassAmount)
API_CLASS_KEYS = {
    "FIRST": "first",
    "BUSINESS": "business",
    "PREMIUM_ECONOMY": "premiumEconomy",
    "ECONOMY": "economy",
}


# Penalty codes issued by the evaluation platform
PENALTY_INVENTORY_EXCEEDS_CAPACITY = "INVENTORY_EXCEEDS_CAPACITY"
PENALTY_NEGATIVE_INVENTORY = "NEGATIVE_INVENTORY"
PENALTY_FLIGHT_UNFULFILLED = "FLIGHT_UNFULFILLED"


# Hours until purchased kits are usable at the hub, per KitType on the evaluation platform
# (A_FIRST_CLASS, B_BUSINESS, C_PREMIUM_ECONOMY, D_ECONOMY)
LEAD_TIMES: Dict[str, int] = {
    "FIRST": 48,
    "BUSINESS": 36,
    "PREMIUM_ECONOMY": 24,
    "ECONOMY": 12,
}


# Reference data file names (semicolon separated)
AIRPORTS_CSV = "airports_with_stocks.csv"
AIRCRAFT_TYPES_CSV = "aircraft_types.csv"
FLIGHT_PLAN_CSV = "flight_plan.csv"


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    # API Configuration
    API_BASE_URL: str = "http://127.0.0.1:8080"
    API_KEY: str = ""
    API_KEY_HEADER: str = "API-KEY"
    SESSION_ID_HEADER: str = "SESSION-ID"
    REQUEST_TIMEOUT: int = 30

    # API Endpoints
    ENDPOINT_START_SESSION: str = "/api/v1/session/start"
    ENDPOINT_PLAY_ROUND: str = "/api/v1/play/round"
    ENDPOINT_STOP_SESSION: str = "/api/v1/session/end"

    # Reference data
    DATA_DIR: str = "data"
    HUB_CODE: str = "HUB1"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "simulation.log"
    ROUND_LOG_FILE: Optional[str] = None
    REPORT_PATH: Optional[str] = None

    # Status server
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 3001

    # Conservative defaults for missing CSV data
    DEFAULT_PROCESSING_TIME: int = 2  # hours
    DEFAULT_STORAGE_CAPACITY: int = 100
    DEFAULT_HUB_INVENTORY: int = 50
    DEFAULT_OUTSTATION_INVENTORY: int = 20

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "SKYKIT_",
    }
