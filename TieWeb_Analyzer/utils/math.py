"""
Mathematical utility functions for TieWeb.

This module contains small numeric helpers and formatting functions.
"""

from typing import Union

Number = Union[int, float]


def format_time_duration(seconds: float) -> str:
    """
    Format time duration in human-readable format.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted time string (e.g., "45.2 seconds" or "1 minute 8 seconds")

    Raises:
        ValueError: If seconds is negative
    """
    if seconds < 0:
        raise ValueError("Duration cannot be negative")

    if seconds < 60.0:
        return f"{seconds:.1f} seconds"

    total_seconds = round(seconds)
    minutes = total_seconds // 60
    remaining_seconds = total_seconds % 60

    minute_text = "1 minute" if minutes == 1 else f"{minutes} minutes"
    if remaining_seconds == 0:
        return minute_text
    return f"{minute_text} {remaining_seconds} seconds"


def safe_divide(numerator: Number, denominator: Number, default: float = 0.0) -> float:
    """Divide, returning ``default`` when the denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def clamp_value(value: Number, minimum: Number, maximum: Number) -> float:
    """
    Clamp a value into [minimum, maximum].

    Raises:
        ValueError: If minimum is greater than maximum
    """
    if minimum > maximum:
        raise ValueError("minimum cannot be greater than maximum")
    return float(max(minimum, min(maximum, value)))
