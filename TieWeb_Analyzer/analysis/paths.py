"""
Shortest-path algebra for the TieWeb analysis engine.

Geodesics are found with breadth-first search when ties are unweighted and
with Dijkstra's algorithm when weights are considered. Every search counts the
number of distinct shortest paths (sigma) while it relaxes ties, so distance
and geodesic-count matrices come out of the same pass. Unreachable pairs hold
``math.inf``.
"""

import heapq
import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config import AnalysisOptions
from ..core.exceptions import InvalidParameterError, VertexNotFoundError
from ..core.graph import Graph
from ..utils.validation import CancellationToken, ProgressObserver, ProgressTracker

logger = logging.getLogger(__name__)

# Relative tolerance used to decide that two weighted path lengths are equal
PATH_TOLERANCE = 1e-9

DEFAULT_OPTIONS = AnalysisOptions()


def analysis_vertices(graph: Graph, options: Optional[AnalysisOptions] = None) -> List[int]:
    """
    Vertex ids an analysis runs over, in ascending order.

    Args:
        graph: Graph to analyze
        options: Analysis options; isolates are left out when drop_isolates is set

    Returns:
        List[int]: Sorted vertex ids
    """
    options = options or DEFAULT_OPTIONS
    if options.drop_isolates:
        return [v for v in graph.vertex_ids() if not graph.is_isolated(v)]
    return graph.vertex_ids()


def tie_cost(weight: float, options: AnalysisOptions) -> float:
    """
    Length contributed by one tie to a path.

    Raises:
        InvalidParameterError: If weights are considered and the weight is not positive
    """
    if not options.consider_weights:
        return 1.0
    if weight <= 0:
        raise InvalidParameterError(
            f"Weighted geodesics need positive tie weights, found {weight:g}", "weight"
        )
    return 1.0 / weight if options.inverse_weights else float(weight)


def _same_length(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=PATH_TOLERANCE, abs_tol=PATH_TOLERANCE)


def single_source(
    graph: Graph,
    source: int,
    options: Optional[AnalysisOptions] = None,
    allowed: Optional[set] = None,
) -> Tuple[Dict[int, float], Dict[int, float]]:
    """
    Geodesic lengths and shortest-path counts from one source.

    Args:
        graph: Graph to search
        source: Source vertex id
        options: Analysis options (weights, inverse weights)
        allowed: Restrict the search to these vertex ids

    Returns:
        Tuple of (distance per reached vertex, sigma per reached vertex).
        The source itself has distance 0 and sigma 1.
    """
    options = options or DEFAULT_OPTIONS
    if not graph.has_vertex(source):
        raise VertexNotFoundError(source)

    distance: Dict[int, float] = {source: 0.0}
    sigma: Dict[int, float] = {source: 1.0}

    if not options.consider_weights:
        queue = deque([source])
        while queue:
            u = queue.popleft()
            for v in graph.out_neighbors(u):
                if v == u or (allowed is not None and v not in allowed):
                    continue
                if v not in distance:
                    distance[v] = distance[u] + 1.0
                    sigma[v] = 0.0
                    queue.append(v)
                if distance[v] == distance[u] + 1.0:
                    sigma[v] += sigma[u]
        return distance, sigma

    settled = set()
    heap = [(0.0, source)]
    while heap:
        d_u, u = heapq.heappop(heap)
        if u in settled:
            continue
        settled.add(u)
        for v, weight in graph.out_neighbors(u).items():
            if v == u or (allowed is not None and v not in allowed):
                continue
            candidate = d_u + tie_cost(weight, options)
            current = distance.get(v, math.inf)
            if current != math.inf and _same_length(candidate, current):
                if v not in settled:
                    sigma[v] += sigma[u]
            elif candidate < current:
                distance[v] = candidate
                sigma[v] = sigma[u]
                heapq.heappush(heap, (candidate, v))
    return distance, sigma


def geodesic_distance(
    graph: Graph, source: int, target: int, options: Optional[AnalysisOptions] = None
) -> float:
    """
    Length of the shortest path from source to target.

    Returns:
        float: The geodesic distance, ``math.inf`` when target is unreachable

    Raises:
        VertexNotFoundError: If an endpoint does not exist
    """
    if not graph.has_vertex(target):
        raise VertexNotFoundError(target)
    distance, _ = single_source(graph, source, options)
    return distance.get(target, math.inf)


@dataclass
class ShortestPaths:
    """
    All-pairs geodesic data over a fixed list of vertex ids.

    Attributes:
        vertex_ids: Row/column order of the matrices
        distances: distances[i, j] = geodesic length, inf when unreachable
        sigma: sigma[i, j] = number of distinct shortest paths (sigma[i, i] = 1)
    """

    vertex_ids: List[int]
    distances: np.ndarray
    sigma: np.ndarray
    _positions: Dict[int, int] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        self._positions = {v: i for i, v in enumerate(self.vertex_ids)}

    @property
    def size(self) -> int:
        return len(self.vertex_ids)

    def position(self, vertex_id: int) -> int:
        try:
            return self._positions[vertex_id]
        except KeyError:
            raise VertexNotFoundError(vertex_id) from None

    def distance(self, source: int, target: int) -> float:
        return float(self.distances[self.position(source), self.position(target)])

    def reachable_from(self, vertex_id: int) -> List[int]:
        """Vertex ids reachable from ``vertex_id`` (itself excluded)."""
        row = self.distances[self.position(vertex_id)]
        return [v for i, v in enumerate(self.vertex_ids) if v != vertex_id and np.isfinite(row[i])]

    def reaching(self, vertex_id: int) -> List[int]:
        """Vertex ids that can reach ``vertex_id`` (itself excluded)."""
        column = self.distances[:, self.position(vertex_id)]
        return [v for i, v in enumerate(self.vertex_ids) if v != vertex_id and np.isfinite(column[i])]


def shortest_paths(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    vertex_ids: Optional[Sequence[int]] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> ShortestPaths:
    """
    Compute all-pairs geodesic distances and shortest-path counts.

    Args:
        graph: Graph to analyze
        options: Analysis options
        vertex_ids: Vertex ids to include; defaults to ``analysis_vertices``
        observer: Progress callback
        token: Cancellation token

    Returns:
        ShortestPaths: Distance and sigma matrices
    """
    options = options or DEFAULT_OPTIONS
    ids = list(vertex_ids) if vertex_ids is not None else analysis_vertices(graph, options)
    n = len(ids)
    positions = {v: i for i, v in enumerate(ids)}
    allowed = set(ids)

    distances = np.full((n, n), math.inf)
    sigma = np.zeros((n, n))

    with ProgressTracker(n, "geodesic computation", logger, observer, token) as tracker:
        for i, source in enumerate(ids):
            dist, counts = single_source(graph, source, options, allowed)
            for target, d in dist.items():
                j = positions[target]
                distances[i, j] = d
                sigma[i, j] = counts[target]
            tracker.update(i + 1)

    logger.debug(f"Computed geodesics over {n} vertices")
    return ShortestPaths(vertex_ids=ids, distances=distances, sigma=sigma)
