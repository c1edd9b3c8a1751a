"""Utility functions shared across the engine."""

from typing import Dict, Mapping, Optional

from .config import API_CLASS_KEYS, CLASS_TYPES


def format_cost(cost: float) -> str:
    """
    Format cost with thousand separators (dot) and 2 decimal places.

    Args:
        cost: Cost value to format

    Returns:
        Formatted string like "12.345,67" for European format

    Examples:
        >>> format_cost(12345.67)
        '12.345,67'
        >>> format_cost(123.45)
        '123,45'
    """
    formatted = f"{cost:,.2f}"
    # US format (12,345.67) -> European format (12.345,67)
    return formatted.replace(",", "|").replace(".", ",").replace("|", ".")


def empty_per_class() -> Dict[str, int]:
    """Return a zeroed per-class amount."""
    return {class_type: 0 for class_type in CLASS_TYPES}


def per_class_total(amounts: Mapping[str, int]) -> int:
    """Sum a per-class amount across all classes."""
    return sum(amounts.get(class_type, 0) for class_type in CLASS_TYPES)


def per_class_to_api(amounts: Mapping[str, int]) -> Dict[str, int]:
    """Convert FIRST/BUSINESS/... keys to the platform's camelCase keys."""
    return {
        API_CLASS_KEYS[class_type]: int(amounts.get(class_type, 0))
        for class_type in CLASS_TYPES
    }


def per_class_from_api(amounts: Optional[Mapping[str, int]]) -> Dict[str, int]:
    """Convert a platform PerClassAmount into FIRST/BUSINESS/... keys."""
    amounts = amounts or {}
    return {
        class_type: int(amounts.get(API_CLASS_KEYS[class_type], 0) or 0)
        for class_type in CLASS_TYPES
    }


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))
