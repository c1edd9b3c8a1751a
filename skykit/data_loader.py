"""Data loader module for parsing the reference CSV files."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from .config import AIRCRAFT_TYPES_CSV, AIRPORTS_CSV, CLASS_TYPES, FLIGHT_PLAN_CSV, Config
from .models.aircraft import AircraftType
from .models.airport import Airport
from .models.flight_plan import WEEKDAYS, FlightPlanEntry

logger = logging.getLogger(__name__)

# Column prefixes per class in airports_with_stocks.csv
_AIRPORT_CLASS_COLUMNS = {
    "FIRST": ("fc", "first"),
    "BUSINESS": ("bc", "business"),
    "PREMIUM_ECONOMY": ("pe", "premium_economy"),
    "ECONOMY": ("ec", "economy"),
}

# (seats column, kits column) per class in aircraft_types.csv
_AIRCRAFT_CLASS_COLUMNS = {
    "FIRST": ("first_class_seats", "first_class_kits_capacity"),
    "BUSINESS": ("business_seats", "business_kits_capacity"),
    "PREMIUM_ECONOMY": ("premium_economy_seats", "premium_economy_kits_capacity"),
    "ECONOMY": ("economy_seats", "economy_kits_capacity"),
}

_TRUE_STRINGS = {"1", "true", "yes", "y"}


def _read_csv(csv_path: str, required_cols: List[str]) -> Optional[pd.DataFrame]:
    """Read a semicolon separated CSV; None when the file does not exist."""
    if not Path(csv_path).exists():
        logger.warning(f"CSV not found at {csv_path}, using empty table")
        return None

    df = pd.read_csv(csv_path, sep=";")
    df.columns = [str(col).strip() for col in df.columns]
    logger.info(f"Loaded {Path(csv_path).name} with {len(df)} rows")

    for col in required_cols:
        if col not in df.columns:
            raise ValueError(f"Missing required column in {csv_path}: {col}")
    return df


def _value(row: pd.Series, col: str, default: Any) -> Any:
    value = row.get(col, default)
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return default
    return value


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def load_airports(csv_path: str, config: Config) -> Dict[str, Airport]:
    """
    Parse airports_with_stocks.csv and produce Airport instances.

    Args:
        csv_path: Path to airports CSV file
        config: Configuration object with defaults for missing cells

    Returns:
        Dictionary mapping airport code to Airport instance
    """
    df = _read_csv(csv_path, ["code"])
    if df is None:
        return {}

    airports = {}
    for _, row in df.iterrows():
        code = str(row["code"]).strip()
        is_hub = code.upper().startswith("HUB") or _flag(_value(row, "is_hub", False))

        storage_capacity = {}
        processing_times = {}
        initial_stock = {}

        for class_type in CLASS_TYPES:
            abbrev, prefix = _AIRPORT_CLASS_COLUMNS[class_type]
            storage_capacity[class_type] = int(
                _value(row, f"capacity_{abbrev}", config.DEFAULT_STORAGE_CAPACITY)
            )
            processing_times[class_type] = int(
                _value(row, f"{prefix}_processing_time", config.DEFAULT_PROCESSING_TIME)
            )
            default_stock = config.DEFAULT_HUB_INVENTORY if is_hub else config.DEFAULT_OUTSTATION_INVENTORY
            initial_stock[class_type] = int(_value(row, f"initial_{abbrev}_stock", default_stock))

        airports[code] = Airport(
            code=code,
            name=str(_value(row, "name", code)),
            is_hub=is_hub,
            storage_capacity=storage_capacity,
            processing_times=processing_times,
            initial_stock=initial_stock,
        )

    logger.info(f"Successfully loaded {len(airports)} airports")
    return airports


def load_aircraft_types(csv_path: str) -> Dict[str, AircraftType]:
    """
    Parse aircraft_types.csv and produce AircraftType instances.

    Args:
        csv_path: Path to aircraft types CSV file

    Returns:
        Dictionary mapping type code to AircraftType instance
    """
    df = _read_csv(csv_path, ["type_code"])
    if df is None:
        return {}

    aircraft_types = {}
    for _, row in df.iterrows():
        type_code = str(row["type_code"]).strip()
        passenger_capacity = {}
        kit_capacity = {}

        for class_type in CLASS_TYPES:
            seats_col, kits_col = _AIRCRAFT_CLASS_COLUMNS[class_type]
            passenger_capacity[class_type] = int(_value(row, seats_col, 0))
            kit_capacity[class_type] = int(_value(row, kits_col, 0))

        aircraft_types[type_code] = AircraftType(
            type_code=type_code,
            passenger_capacity=passenger_capacity,
            kit_capacity=kit_capacity,
        )
        logger.debug(f"Loaded aircraft type {type_code}: kits={kit_capacity}")

    logger.info(f"Successfully loaded {len(aircraft_types)} aircraft types")
    return aircraft_types


def load_flight_plan(csv_path: str) -> List[FlightPlanEntry]:
    """
    Parse flight_plan.csv into weekly schedule entries.

    Weekday columns are Mon..Sun holding 0/1 (any case of the header works).

    Args:
        csv_path: Path to flight plan CSV file

    Returns:
        List of FlightPlanEntry
    """
    df = _read_csv(csv_path, ["depart_code", "arrival_code", "scheduled_hour"])
    if df is None:
        return []

    columns_by_lower = {col.lower(): col for col in df.columns}
    weekday_cols = [columns_by_lower.get(day.lower()) for day in WEEKDAYS]

    plans = []
    for _, row in df.iterrows():
        weekdays = [
            _flag(_value(row, col, 1)) if col is not None else True
            for col in weekday_cols
        ]
        plans.append(
            FlightPlanEntry(
                origin=str(row["depart_code"]).strip(),
                destination=str(row["arrival_code"]).strip(),
                scheduled_hour=int(row["scheduled_hour"]),
                distance_km=float(_value(row, "distance_km", 0.0)),
                weekdays=weekdays,
            )
        )

    logger.info(f"Successfully loaded {len(plans)} flight plan entries")
    return plans


def load_reference_data(
    config: Config,
) -> Tuple[Dict[str, Airport], Dict[str, AircraftType], List[FlightPlanEntry]]:
    """Load airports, aircraft types and the flight plan from config.DATA_DIR."""
    data_dir = Path(config.DATA_DIR)
    airports = load_airports(str(data_dir / AIRPORTS_CSV), config)
    aircraft_types = load_aircraft_types(str(data_dir / AIRCRAFT_TYPES_CSV))
    flight_plan = load_flight_plan(str(data_dir / FLIGHT_PLAN_CSV))
    return airports, aircraft_types, flight_plan
