"""
Layout computation for TieWeb graphs.

Prominence-based layouts place actors by one prominence index: on concentric
circles (more prominent actors closer to the center), on vertical levels
(more prominent actors higher up), or keep positions and encode prominence
in node size or a cold-to-warm node color. Force-directed layouts live in
``forces``; ``compute_layout`` dispatches over every method.
"""

import logging
import math
from typing import Dict, Optional, Union

from ..analysis.indices import ProminenceIndex
from ..config import AnalysisOptions, IterationConfig, LayoutConfig
from ..core.graph import Graph
from ..core.types import CentralityResult, LayoutResult
from ..utils.math import clamp_value
from ..utils.validation import CancellationToken, ProgressObserver, validate_choice
from .color_palette import ProminenceColors, prominence_color
from .forces import eades_layout, fruchterman_reingold_layout, kamada_kawai_layout

logger = logging.getLogger(__name__)

PROMINENCE_MODES = ["radial", "leveled", "node-size", "node-color"]
FORCE_METHODS = {
    "eades": eades_layout,
    "fruchterman-reingold": fruchterman_reingold_layout,
    "kamada-kawai": kamada_kawai_layout,
}


def circular_layout(graph: Graph, layout: Optional[LayoutConfig] = None) -> LayoutResult:
    """Place every actor evenly on one circle, in vertex id order."""
    layout = layout or LayoutConfig()
    ids = graph.vertex_ids()
    center_x, center_y = layout.canvas_width / 2, layout.canvas_height / 2
    radius = min(layout.canvas_width, layout.canvas_height) / 2 - layout.margin
    positions = {}
    for i, vertex_id in enumerate(ids):
        angle = 2 * math.pi * i / len(ids)
        positions[vertex_id] = (center_x + radius * math.cos(angle), center_y + radius * math.sin(angle))
    return LayoutResult(positions=positions, method="circle")


def relative_prominence(result: CentralityResult) -> Dict[int, float]:
    """Standardized scores rescaled to [0, 1] by the maximum (0 when all are 0)."""
    top = max(result.standardized.values(), default=0.0)
    if top <= 0:
        return {v: 0.0 for v in result.standardized}
    return {v: clamp_value(s / top, 0.0, 1.0) for v, s in result.standardized.items()}


def prominence_layout(
    graph: Graph,
    index: Union[str, ProminenceIndex],
    mode: str = "radial",
    options: Optional[AnalysisOptions] = None,
    layout: Optional[LayoutConfig] = None,
    iterations: Optional[IterationConfig] = None,
    threshold: Optional[int] = None,
    confirmed: bool = False,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LayoutResult:
    """
    Lay out actors by a prominence index.

    Actors left out of the index (dropped isolates) are treated as the least
    prominent. Errors of the index computation, such as
    DisconnectedGraphError for closeness, propagate to the caller.

    Args:
        graph: Graph to lay out
        index: ProminenceIndex member or code
        mode: "radial", "leveled", "node-size" or "node-color"
        options: Analysis options for the index
        layout: Canvas and node size settings
        iterations: Solver settings for iterative indices
        threshold: Size above which guarded indices require confirmation
        confirmed: Whether the caller confirmed running on a large graph
        observer: Progress callback
        token: Cancellation token

    Returns:
        LayoutResult: Positions, plus sizes or colors for the node modes

    Raises:
        InvalidParameterError: If the mode or index is unknown
    """
    validate_choice(mode, "mode", PROMINENCE_MODES)
    index = ProminenceIndex.from_code(index)
    layout = layout or LayoutConfig()
    result = index.compute(graph, options, iterations, threshold, confirmed, observer, token)
    prominence = relative_prominence(result)
    ids = graph.vertex_ids()
    values = {v: prominence.get(v, 0.0) for v in ids}
    current = {v: graph.vertex(v).position for v in ids}
    method = f"{index.code} {mode}"

    if mode == "node-size":
        sizes = {v: layout.base_node_size + layout.node_size_multiplier * p for v, p in values.items()}
        return LayoutResult(positions=current, method=method, sizes=sizes)

    if mode == "node-color":
        colors = {
            v: prominence_color(p) if v in prominence else ProminenceColors.COLD
            for v, p in values.items()
        }
        return LayoutResult(positions=current, method=method, colors=colors)

    center_x, center_y = layout.canvas_width / 2, layout.canvas_height / 2
    positions = {}
    if mode == "radial":
        max_radius = min(layout.canvas_width, layout.canvas_height) / 2 - layout.margin
        for i, vertex_id in enumerate(ids):
            radius = max_radius * (1.0 - values[vertex_id])
            angle = 2 * math.pi * i / len(ids)
            positions[vertex_id] = (center_x + radius * math.cos(angle), center_y + radius * math.sin(angle))
    else:
        top = layout.margin
        usable = layout.canvas_height - 2 * layout.margin
        for vertex_id in ids:
            x = clamp_value(current[vertex_id][0], layout.margin, layout.canvas_width - layout.margin)
            positions[vertex_id] = (x, top + usable * (1.0 - values[vertex_id]))

    logger.debug(f"Computed {method} layout for {len(ids)} actors")
    return LayoutResult(positions=positions, method=method)


def compute_layout(
    graph: Graph,
    method: str,
    layout: Optional[LayoutConfig] = None,
    seed: Optional[int] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LayoutResult:
    """
    Run a geometric or force-directed layout by name.

    Args:
        graph: Graph to lay out
        method: "circle", "eades", "fruchterman-reingold" or "kamada-kawai"
        layout: Canvas and layout settings
        seed: Random seed for force-directed starting positions
        observer: Progress callback
        token: Cancellation token

    Returns:
        LayoutResult: Final positions

    Raises:
        InvalidParameterError: If the method is unknown
    """
    validate_choice(method, "method", ["circle"] + list(FORCE_METHODS))
    if method == "circle":
        return circular_layout(graph, layout)
    return FORCE_METHODS[method](graph, layout, seed, observer, token)
