"""
Centralized color palette for TieWeb layouts.

This module defines the colors assigned to actors by prominence-based
layouts and the utility functions used to blend them.
"""

from typing import List, Optional, Tuple


class ProminenceColors:
    """Cold-to-warm color stops for node-color prominence layouts."""

    COLD = "#2C7BB6"
    COOL = "#00A6CA"
    NEUTRAL = "#FFFFBF"
    WARM = "#F98E52"
    HOT = "#D7191C"

    # Least prominent first
    GRADIENT = [COLD, COOL, NEUTRAL, WARM, HOT]


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert a hex color string to an RGB tuple.

    Args:
        hex_color: Hex color string (e.g., "#62CB89")

    Returns:
        RGB tuple with values in range [0, 255]

    Raises:
        ValueError: If hex_color is not a valid hex color string
    """
    hex_color = hex_color.lstrip("#")

    if len(hex_color) != 6:
        raise ValueError(f"Invalid hex color: #{hex_color}")

    try:
        return (int(hex_color[0:2], 16), int(hex_color[2:4], 16), int(hex_color[4:6], 16))
    except ValueError as e:
        raise ValueError(f"Invalid hex color: #{hex_color}") from e


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert RGB components (clamped to [0, 255]) to a hex color string."""
    r, g, b = (max(0, min(255, int(round(c)))) for c in (r, g, b))
    return f"#{r:02x}{g:02x}{b:02x}"


def interpolate_color(start: str, end: str, fraction: float) -> str:
    """
    Blend two hex colors.

    Args:
        start: Color at fraction 0.0
        end: Color at fraction 1.0
        fraction: Position between the two colors, clamped to [0.0, 1.0]

    Returns:
        Blended hex color string
    """
    fraction = max(0.0, min(1.0, fraction))
    start_rgb = hex_to_rgb(start)
    end_rgb = hex_to_rgb(end)
    return rgb_to_hex(*(s + (e - s) * fraction for s, e in zip(start_rgb, end_rgb)))


def prominence_color(value: float, gradient: Optional[List[str]] = None) -> str:
    """
    Color of a standardized prominence value on the cold-to-warm gradient.

    Args:
        value: Prominence in [0.0, 1.0] (clamped); 1.0 is the warmest color
        gradient: Color stops, least prominent first

    Returns:
        Hex color string
    """
    stops = gradient or ProminenceColors.GRADIENT
    if len(stops) == 1:
        return stops[0]
    value = max(0.0, min(1.0, value))
    position = value * (len(stops) - 1)
    index = min(int(position), len(stops) - 2)
    return interpolate_color(stops[index], stops[index + 1], position - index)
