"""
Penalty classification and attribution.

The platform reports penalties as a code, an amount and a free-text reason.
Structured fields win when present; otherwise the airport and kit class are
recovered from the reason:

    airport:  "airport <CODE>", keyword in any case, code in upper case
              e.g. "Airport ZRH", "for airport HUB1"
    class:    first | business | premium economy | economy
              (case-insensitive; "premium_economy" and "premium-economy" too,
              so kit type codes like C_PREMIUM_ECONOMY or D_ECONOMY match)

The platform's own reasons read like
"Negative inventory for airport ZRH kit type D_ECONOMY of -12 kits".

The leftmost class match wins, so "Premium Economy" is never read as
"Economy". Anything that does not match leaves the attribution empty.
"""

import re
from typing import Mapping, Optional, Tuple

from ..config import (
    PENALTY_FLIGHT_UNFULFILLED,
    PENALTY_INVENTORY_EXCEEDS_CAPACITY,
    PENALTY_NEGATIVE_INVENTORY,
)
from ..models.game_state import PenaltyRecord

_AIRPORT_PATTERN = re.compile(r"(?i:airport)\s+([A-Z0-9]{3,})\b")
_CLASS_PATTERN = re.compile(r"(first|business|premium[ _-]?economy|economy)", re.IGNORECASE)

_CLASS_NAMES = {
    "first": "FIRST",
    "business": "BUSINESS",
    "economy": "ECONOMY",
}

_STRUCTURED_CLASS_NAMES = {
    "first": "FIRST",
    "business": "BUSINESS",
    "premiumeconomy": "PREMIUM_ECONOMY",
    "premium_economy": "PREMIUM_ECONOMY",
    "economy": "ECONOMY",
}


def classify_penalty(code: str) -> str:
    """Map a platform penalty code to one of the three tracked types."""
    if code == PENALTY_INVENTORY_EXCEEDS_CAPACITY:
        return PENALTY_INVENTORY_EXCEEDS_CAPACITY
    if code == PENALTY_NEGATIVE_INVENTORY:
        return PENALTY_NEGATIVE_INVENTORY
    return PENALTY_FLIGHT_UNFULFILLED


def parse_penalty_reason(reason: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Recover (airport_code, kit_class) from a penalty reason.

    >>> parse_penalty_reason("Airport ZRH exceeds Economy capacity")
    ('ZRH', 'ECONOMY')
    >>> parse_penalty_reason("Flight SK100 unfulfilled Premium Economy kits")
    (None, 'PREMIUM_ECONOMY')
    """
    if not reason:
        return None, None

    airport_match = _AIRPORT_PATTERN.search(reason)
    class_match = _CLASS_PATTERN.search(reason)

    kit_class = None
    if class_match:
        name = class_match.group(1).lower()
        kit_class = "PREMIUM_ECONOMY" if name.startswith("premium") else _CLASS_NAMES[name]

    return (airport_match.group(1) if airport_match else None), kit_class


def _structured_class(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return _STRUCTURED_CLASS_NAMES.get(str(value).replace(" ", "").lower())


def to_penalty_record(penalty: Mapping, day: int, hour: int) -> PenaltyRecord:
    """
    Classify and attribute a platform PenaltyDto.

    Args:
        penalty: Penalty dictionary (code, penalty, reason, optional structured fields)
        day: Day of the round that produced it
        hour: Hour of the round that produced it
    """
    airport_code, kit_class = parse_penalty_reason(penalty.get("reason"))
    airport_code = penalty.get("airportCode") or penalty.get("airport") or airport_code
    kit_class = (
        _structured_class(penalty.get("kitClass"))
        or _structured_class(penalty.get("category"))
        or kit_class
    )

    return PenaltyRecord(
        day=day,
        hour=hour,
        type=classify_penalty(str(penalty.get("code", ""))),
        amount=float(penalty.get("penalty", 0.0) or 0.0),
        airport_code=airport_code,
        kit_class=kit_class,
    )
