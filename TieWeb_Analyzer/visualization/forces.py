"""
Force-directed layouts: Eades spring embedder, Fruchterman-Reingold and
Kamada-Kawai.

All three run a fixed iteration budget over numpy position arrays and keep
every actor inside the canvas. Ties are taken as undirected. Results are
deterministic given the seed (or, without a seed, the current positions).
"""

import logging
from typing import Optional, Tuple

import numpy as np

from ..config import (
    EadesLayoutConfig,
    FruchtermanReingoldConfig,
    KamadaKawaiLayoutConfig,
    LayoutConfig,
)
from ..core.graph import Graph
from ..core.types import LayoutResult
from ..utils.validation import CancellationToken, ProgressObserver, ProgressTracker, check_revision

logger = logging.getLogger(__name__)

# Smallest distance used when two actors coincide
MIN_DISTANCE = 0.01


def _bounds(layout: LayoutConfig) -> Tuple[np.ndarray, np.ndarray]:
    low = np.array([layout.margin, layout.margin])
    high = np.array([layout.canvas_width - layout.margin, layout.canvas_height - layout.margin])
    return low, high


def initial_positions(graph: Graph, layout: LayoutConfig, seed: Optional[int] = None) -> np.ndarray:
    """
    Starting positions in vertex id order.

    With a seed, actors are scattered uniformly over the canvas; otherwise
    their current positions are used. Coinciding actors are nudged apart
    deterministically.
    """
    low, high = _bounds(layout)
    ids = graph.vertex_ids()
    if seed is not None:
        rng = np.random.default_rng(seed)
        positions = low + rng.random((len(ids), 2)) * (high - low)
    else:
        positions = np.array([graph.vertex(v).position for v in ids], dtype=float).reshape(len(ids), 2)
        seen = {}
        for i, point in enumerate(map(tuple, positions)):
            repeats = seen.get(point, 0)
            if repeats:
                angle = 2.399963 * repeats
                positions[i] += MIN_DISTANCE * 100 * repeats * np.array([np.cos(angle), np.sin(angle)])
            seen[point] = repeats + 1
    return np.clip(positions, low, high)


def _tie_pattern(graph: Graph) -> np.ndarray:
    """Symmetric boolean tie matrix without self-loops, in vertex id order."""
    ids = graph.vertex_ids()
    positions = {v: i for i, v in enumerate(ids)}
    tied = np.zeros((len(ids), len(ids)), dtype=bool)
    for edge in graph.edges():
        if edge.source != edge.target:
            tied[positions[edge.source], positions[edge.target]] = True
    return tied | tied.T


def _pairwise(positions: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Difference vectors delta[i, j] = p_i - p_j and their lengths."""
    delta = positions[:, None, :] - positions[None, :, :]
    distance = np.sqrt((delta ** 2).sum(axis=2))
    np.fill_diagonal(distance, 1.0)
    return delta, np.maximum(distance, MIN_DISTANCE)


def _result(graph: Graph, positions: np.ndarray, method: str, iterations: int) -> LayoutResult:
    return LayoutResult(
        positions={v: (float(x), float(y)) for v, (x, y) in zip(graph.vertex_ids(), positions)},
        method=method,
        iterations=iterations,
    )


def eades_layout(
    graph: Graph,
    layout: Optional[LayoutConfig] = None,
    seed: Optional[int] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LayoutResult:
    """
    Eades spring embedder.

    Every pair of actors pushes apart with force c3 / d^2 and tied actors
    also pull each other with force c1 * log(d / c2). Each iteration moves
    every actor by ``step`` times its net force.

    Args:
        graph: Graph to lay out
        layout: Canvas and Eades settings
        seed: Random seed for the starting positions
        observer: Progress callback
        token: Cancellation token

    Returns:
        LayoutResult: Final positions
    """
    layout = layout or LayoutConfig()
    config: EadesLayoutConfig = layout.eades
    revision = graph.revision
    low, high = _bounds(layout)
    positions = initial_positions(graph, layout, seed)
    tied = _tie_pattern(graph)
    others = ~np.eye(len(positions), dtype=bool)

    with ProgressTracker(config.iterations, "Eades layout", logger, observer, token) as tracker:
        for iteration in range(1, config.iterations + 1):
            delta, distance = _pairwise(positions)
            unit = delta / distance[:, :, None]
            spring = config.spring_constant * np.log(distance / config.natural_length) * tied
            repulsion = config.repulsion / distance ** 2 * others
            # Positive magnitudes push i away from j
            magnitude = repulsion - spring
            force = (unit * magnitude[:, :, None]).sum(axis=1)
            positions = np.clip(positions + config.step * force, low, high)
            tracker.update(iteration)

    check_revision(graph, revision, "Eades layout")
    return _result(graph, positions, "eades", config.iterations)


def fruchterman_reingold_layout(
    graph: Graph,
    layout: Optional[LayoutConfig] = None,
    seed: Optional[int] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LayoutResult:
    """
    Fruchterman-Reingold layout with a cooling schedule.

    With optimal distance k = sqrt(area / n), every pair repels with k^2 / d
    and tied pairs attract with d^2 / k. Displacements are capped by a
    temperature that shrinks by ``cooling`` every iteration.
    """
    layout = layout or LayoutConfig()
    config: FruchtermanReingoldConfig = layout.fruchterman_reingold
    revision = graph.revision
    low, high = _bounds(layout)
    positions = initial_positions(graph, layout, seed)
    n = len(positions)
    tied = _tie_pattern(graph)
    others = ~np.eye(n, dtype=bool)

    area = float(np.prod(high - low))
    k = np.sqrt(area / max(n, 1))
    temperature = config.initial_temperature or (high - low).min() / 10

    with ProgressTracker(config.iterations, "Fruchterman-Reingold layout", logger, observer, token) as tracker:
        for iteration in range(1, config.iterations + 1):
            delta, distance = _pairwise(positions)
            unit = delta / distance[:, :, None]
            magnitude = (k ** 2 / distance) * others - (distance ** 2 / k) * tied
            displacement = (unit * magnitude[:, :, None]).sum(axis=1)
            length = np.maximum(np.sqrt((displacement ** 2).sum(axis=1)), MIN_DISTANCE)
            capped = displacement / length[:, None] * np.minimum(length, temperature)[:, None]
            positions = np.clip(positions + capped, low, high)
            temperature *= config.cooling
            tracker.update(iteration)

    check_revision(graph, revision, "Fruchterman-Reingold layout")
    return _result(graph, positions, "fruchterman-reingold", config.iterations)


def _graph_distances(tied: np.ndarray) -> np.ndarray:
    """Breadth-first hop counts over a symmetric tie matrix (unreachable stays inf)."""
    n = tied.shape[0]
    distances = np.full((n, n), np.inf)
    for source in range(n):
        distances[source, source] = 0.0
        frontier = np.zeros(n, dtype=bool)
        frontier[source] = True
        seen = frontier.copy()
        hops = 0
        while frontier.any():
            hops += 1
            frontier = tied[frontier].any(axis=0) & ~seen
            distances[source, frontier] = hops
            seen |= frontier
    return distances


def _fit_to_canvas(positions: np.ndarray, low: np.ndarray, high: np.ndarray) -> np.ndarray:
    if positions.size == 0:
        return positions
    minimum = positions.min(axis=0)
    span = positions.max(axis=0) - minimum
    scale = np.min(np.where(span > 0, (high - low) / np.where(span > 0, span, 1.0), np.inf))
    if not np.isfinite(scale):
        scale = 1.0
    fitted = low + (positions - minimum) * scale
    # Center the drawing along the axis with spare room
    fitted += ((high - low) - span * scale) / 2
    return np.clip(fitted, low, high)


def kamada_kawai_layout(
    graph: Graph,
    layout: Optional[LayoutConfig] = None,
    seed: Optional[int] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LayoutResult:
    """
    Kamada-Kawai layout.

    Springs join every pair of actors with natural length proportional to
    their graph distance and strength K / d^2. The actor with the largest
    energy gradient is moved by Newton-Raphson steps until its gradient drops
    below ``epsilon``; this repeats up to ``max_iterations`` times. Pairs in
    different components are treated as one step further apart than the
    largest finite distance.
    """
    layout = layout or LayoutConfig()
    config: KamadaKawaiLayoutConfig = layout.kamada_kawai
    revision = graph.revision
    low, high = _bounds(layout)
    positions = initial_positions(graph, layout, seed)
    n = len(positions)
    if n < 2:
        check_revision(graph, revision, "Kamada-Kawai layout")
        return _result(graph, positions, "kamada-kawai", 0)

    hops = _graph_distances(_tie_pattern(graph))
    finite = np.isfinite(hops)
    longest = hops[finite].max() if finite.any() else 1.0
    hops = np.where(finite, hops, longest + 1.0)
    np.fill_diagonal(hops, 1.0)

    unit_length = (high - low).min() / max(hops.max(), 1.0)
    lengths = unit_length * hops
    strengths = config.spring_strength / hops ** 2
    np.fill_diagonal(strengths, 0.0)

    def gradients(points: np.ndarray) -> np.ndarray:
        delta, distance = _pairwise(points)
        factor = strengths * (1.0 - lengths / distance)
        return (delta * factor[:, :, None]).sum(axis=1)

    steps = 0
    with ProgressTracker(config.max_iterations, "Kamada-Kawai layout", logger, observer, token) as tracker:
        for iteration in range(1, config.max_iterations + 1):
            grad = gradients(positions)
            energy = np.sqrt((grad ** 2).sum(axis=1))
            m = int(np.argmax(energy))
            if energy[m] < config.epsilon:
                break
            for _ in range(config.inner_iterations):
                delta = positions[m] - positions
                distance = np.maximum(np.sqrt((delta ** 2).sum(axis=1)), MIN_DISTANCE)
                distance[m] = 1.0
                k_m, l_m = strengths[m], lengths[m]
                cube = distance ** 3
                dx, dy = delta[:, 0], delta[:, 1]
                e_x = np.sum(k_m * (dx - l_m * dx / distance))
                e_y = np.sum(k_m * (dy - l_m * dy / distance))
                e_xx = np.sum(k_m * (1.0 - l_m * dy ** 2 / cube))
                e_yy = np.sum(k_m * (1.0 - l_m * dx ** 2 / cube))
                e_xy = np.sum(k_m * l_m * dx * dy / cube)
                determinant = e_xx * e_yy - e_xy ** 2
                if abs(determinant) < 1e-12:
                    break
                step_x = (e_xy * e_y - e_yy * e_x) / determinant
                step_y = (e_xy * e_x - e_xx * e_y) / determinant
                positions[m] += (step_x, step_y)
                if np.hypot(e_x, e_y) < config.epsilon:
                    break
            steps = iteration
            tracker.update(iteration)

    positions = _fit_to_canvas(positions, low, high)
    logger.debug(f"Kamada-Kawai layout settled after {steps} iterations")
    check_revision(graph, revision, "Kamada-Kawai layout")
    return _result(graph, positions, "kamada-kawai", steps)
