"""
Layout components for TieWeb.

This module computes actor coordinates for drawing:
- Prominence-based placement (radial, leveled, node size, node color)
- Force-directed layouts (Eades, Fruchterman-Reingold, Kamada-Kawai)
- The cold-to-warm prominence color palette
"""

from .color_palette import ProminenceColors, interpolate_color, prominence_color
from .forces import eades_layout, fruchterman_reingold_layout, kamada_kawai_layout
from .layouts import (
    FORCE_METHODS,
    PROMINENCE_MODES,
    circular_layout,
    compute_layout,
    prominence_layout,
)

__all__ = [
    "ProminenceColors",
    "interpolate_color",
    "prominence_color",
    "eades_layout",
    "fruchterman_reingold_layout",
    "kamada_kawai_layout",
    "PROMINENCE_MODES",
    "FORCE_METHODS",
    "circular_layout",
    "compute_layout",
    "prominence_layout",
]
