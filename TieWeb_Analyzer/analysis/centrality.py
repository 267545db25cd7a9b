"""
Centrality index calculations for network analysis.

This module provides the actor-level centrality indices: degree, closeness,
influence-range closeness, betweenness, stress, eccentricity, power,
information and eigenvector centrality. Every function takes the graph and an
AnalysisOptions value and returns a CentralityResult keyed by vertex id.
"""

# Standard library imports
import logging
from typing import List, Optional, Sequence, Tuple

# Third-party imports
import numpy as np

# Local imports
from ..config import AnalysisOptions, IterationConfig
from ..core.exceptions import DisconnectedGraphError
from ..core.graph import Graph
from ..core.types import CentralityResult
from ..utils.math import safe_divide
from ..utils.validation import (
    CancellationToken,
    ProgressObserver,
    ProgressTracker,
    check_revision,
    require_confirmation,
)
from .indices import ProminenceIndex
from .matrices import adjacency_matrix, invert_matrix
from .paths import DEFAULT_OPTIONS, PATH_TOLERANCE, ShortestPaths, analysis_vertices, shortest_paths

logger = logging.getLogger(__name__)


def excluded_vertices(graph: Graph, ids: Sequence[int]) -> List[int]:
    kept = set(ids)
    return [v for v in graph.vertex_ids() if v not in kept]


def build_result(
    index: ProminenceIndex,
    ids: Sequence[int],
    scores: np.ndarray,
    standardized: np.ndarray,
    excluded: List[int],
    weighted: bool,
    centralization: Optional[float] = None,
    use_variance: bool = True,
) -> CentralityResult:
    """
    Assemble a CentralityResult from per-vertex score arrays.

    Args:
        index: Index that was computed
        ids: Vertex ids in array order
        scores: Raw scores
        standardized: Standardized scores
        excluded: Vertex ids left out of the computation
        weighted: Whether weights were considered
        centralization: Group centralization when already known
        use_variance: Use the variance of standardized scores when
            ``centralization`` is None

    Returns:
        CentralityResult: The assembled result
    """
    result = CentralityResult(
        index=index,
        scores={v: float(s) for v, s in zip(ids, scores)},
        standardized={v: float(s) for v, s in zip(ids, standardized)},
        excluded=list(excluded),
        weighted=weighted,
    )
    if centralization is not None:
        result.centralization = float(centralization)
    elif use_variance and ids:
        result.centralization = result.variance
    return result


def freeman_centralization(standardized: np.ndarray, maximum_sum: float) -> Optional[float]:
    """
    Freeman centralization: sum of differences from the top score over the
    largest sum any graph of the same size can reach (the star).
    """
    if standardized.size < 3 or maximum_sum <= 0:
        return None
    return float(np.sum(standardized.max() - standardized) / maximum_sum)


def scale_by_max(scores: np.ndarray) -> np.ndarray:
    top = scores.max() if scores.size else 0.0
    if top <= 0:
        return np.zeros_like(scores)
    return scores / top


def degree_centrality(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """
    Degree centrality: sum of outbound tie weights (out-degree).

    Standardized by n-1 when ties are unweighted and by the total degree when
    weights are considered. Self-loops do not count.

    Args:
        graph: Graph to analyze
        options: Analysis options
        observer: Progress callback (unused, accepted for a uniform interface)
        token: Cancellation token

    Returns:
        CentralityResult: DC scores with Freeman centralization
    """
    options = options or DEFAULT_OPTIONS
    revision = graph.revision
    ids = analysis_vertices(graph, options)
    adjacency = adjacency_matrix(graph, options, ids).data
    np.fill_diagonal(adjacency, 0.0)
    scores = adjacency.sum(axis=1)
    n = len(ids)

    weighted = options.consider_weights
    if weighted:
        standardized = scores / scores.sum() if scores.sum() > 0 else np.zeros_like(scores)
        centralization = None
    else:
        standardized = scores / (n - 1) if n > 1 else np.zeros_like(scores)
        # Star maximum: undirected (n-1)(n-2) raw, directed (n-1)^2 raw
        maximum = (n - 2) if not graph.directed else (n - 1)
        centralization = freeman_centralization(standardized, maximum)

    check_revision(graph, revision, "degree centrality")
    return build_result(
        ProminenceIndex.DC, ids, scores, standardized, excluded_vertices(graph, ids), weighted,
        centralization, use_variance=weighted,
    )


def _paths(graph, options, observer, token) -> Tuple[ShortestPaths, List[int]]:
    ids = analysis_vertices(graph, options)
    return shortest_paths(graph, options, ids, observer, token), ids


def closeness_centrality(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """
    Closeness centrality: inverse of the sum of distances to every other actor.

    Raises:
        DisconnectedGraphError: If any pair of actors is mutually unreachable
    """
    options = options or DEFAULT_OPTIONS
    revision = graph.revision
    paths, ids = _paths(graph, options, observer, token)
    n = len(ids)

    if not np.all(np.isfinite(paths.distances)):
        raise DisconnectedGraphError(
            "Closeness centrality is undefined on disconnected graphs; "
            "use influence range closeness instead",
            ProminenceIndex.CC.code,
        )

    totals = paths.distances.sum(axis=1)
    scores = np.array([safe_divide(1.0, total) for total in totals])
    standardized = scores * (n - 1)
    centralization = freeman_centralization(standardized, (n - 1) * (n - 2) / (2 * n - 3)) if n >= 3 else None

    check_revision(graph, revision, "closeness centrality")
    return build_result(
        ProminenceIndex.CC, ids, scores, standardized, excluded_vertices(graph, ids),
        options.consider_weights, centralization, use_variance=False,
    )


def influence_range_closeness(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """
    Influence range closeness: share of reachable actors over their mean distance.

    IRCC(u) = (|J| / (n-1)) / (sum of d(u, j) over J / |J|) where J is the set
    of actors u reaches; 0 when J is empty. Defined on disconnected graphs.
    """
    options = options or DEFAULT_OPTIONS
    revision = graph.revision
    paths, ids = _paths(graph, options, observer, token)
    scores = reach_ratio(paths.distances, len(ids))
    check_revision(graph, revision, "influence range closeness")
    return build_result(
        ProminenceIndex.IRCC, ids, scores, scale_by_max(scores), excluded_vertices(graph, ids),
        options.consider_weights,
    )


def reach_ratio(distances: np.ndarray, n: int) -> np.ndarray:
    """(|J|/(n-1)) / mean distance over J, row by row."""
    scores = np.zeros(n)
    for i in range(n):
        row = np.delete(distances[i], i)
        reached = row[np.isfinite(row)]
        if reached.size == 0 or n < 2:
            continue
        mean_distance = reached.sum() / reached.size
        scores[i] = safe_divide(reached.size / (n - 1), mean_distance)
    return scores


def betweenness_and_stress(
    paths: ShortestPaths,
    directed: bool,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Betweenness and stress counts from all-pairs distances and path counts.

    A vertex u lies on a geodesic s -> t iff d(s,u) + d(u,t) = d(s,t); it then
    carries sigma(s,u)*sigma(u,t) of the sigma(s,t) geodesics. Undirected
    pairs are counted once.

    Returns:
        Tuple of (betweenness, stress) arrays in ``paths.vertex_ids`` order
    """
    n = paths.size
    distances = paths.distances
    sigma = paths.sigma
    betweenness = np.zeros(n)
    stress = np.zeros(n)
    finite = np.isfinite(distances)
    off_diagonal = ~np.eye(n, dtype=bool)

    with ProgressTracker(n, "betweenness and stress", logger, observer, token) as tracker:
        for u in range(n):
            through = distances[:, u][:, None] + distances[u, :][None, :]
            on_path = finite & off_diagonal & np.isclose(
                through, distances, rtol=PATH_TOLERANCE, atol=PATH_TOLERANCE
            )
            on_path[u, :] = False
            on_path[:, u] = False
            pair_counts = sigma[:, u][:, None] * sigma[u, :][None, :]
            stress[u] = pair_counts[on_path].sum()
            betweenness[u] = (pair_counts[on_path] / sigma[on_path]).sum()
            tracker.update(u + 1)

    if not directed:
        betweenness /= 2.0
        stress /= 2.0
    return betweenness, stress


def betweenness_centrality(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """
    Betweenness centrality: share of geodesics between other pairs through an actor.

    Standardized by (n-1)(n-2)/2 on undirected graphs and (n-1)(n-2) on
    directed ones.
    """
    options = options or DEFAULT_OPTIONS
    revision = graph.revision
    paths, ids = _paths(graph, options, observer, token)
    n = len(ids)
    scores, _ = betweenness_and_stress(paths, graph.directed, observer, token)

    pairs = (n - 1) * (n - 2) if graph.directed else (n - 1) * (n - 2) / 2
    standardized = scores / pairs if pairs > 0 else np.zeros_like(scores)
    centralization = freeman_centralization(standardized, n - 1)

    check_revision(graph, revision, "betweenness centrality")
    return build_result(
        ProminenceIndex.BC, ids, scores, standardized, excluded_vertices(graph, ids),
        options.consider_weights, centralization, use_variance=False,
    )


def stress_centrality(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """Stress centrality: number of geodesics between other pairs through an actor."""
    options = options or DEFAULT_OPTIONS
    revision = graph.revision
    paths, ids = _paths(graph, options, observer, token)
    _, scores = betweenness_and_stress(paths, graph.directed, observer, token)
    total = scores.sum()
    standardized = scores / total if total > 0 else np.zeros_like(scores)
    check_revision(graph, revision, "stress centrality")
    return build_result(
        ProminenceIndex.SC, ids, scores, standardized, excluded_vertices(graph, ids), options.consider_weights
    )


def eccentricity_centrality(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """Eccentricity centrality: inverse of the longest geodesic to a reachable actor."""
    options = options or DEFAULT_OPTIONS
    revision = graph.revision
    paths, ids = _paths(graph, options, observer, token)
    scores = np.zeros(len(ids))
    for i in range(len(ids)):
        row = np.delete(paths.distances[i], i)
        reached = row[np.isfinite(row)]
        if reached.size:
            scores[i] = safe_divide(1.0, reached.max())
    check_revision(graph, revision, "eccentricity centrality")
    return build_result(
        ProminenceIndex.EC, ids, scores, scale_by_max(scores), excluded_vertices(graph, ids),
        options.consider_weights,
    )


def power_centrality(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """
    Gil-Schmidt power centrality.

    Sum over distance levels k of N_k(u)/k, where N_k(u) is the number of
    actors at distance k, normalized by the size of u's reachable set.
    """
    options = options or DEFAULT_OPTIONS
    revision = graph.revision
    paths, ids = _paths(graph, options, observer, token)
    scores = np.zeros(len(ids))
    for i in range(len(ids)):
        row = np.delete(paths.distances[i], i)
        reached = row[np.isfinite(row)]
        if reached.size:
            scores[i] = np.sum(1.0 / reached) / reached.size
    check_revision(graph, revision, "power centrality")
    return build_result(
        ProminenceIndex.PC, ids, scores, scale_by_max(scores), excluded_vertices(graph, ids),
        options.consider_weights,
    )


def information_centrality(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    threshold: Optional[int] = None,
    confirmed: bool = False,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """
    Stephenson-Zelen information centrality.

    Isolates are always left out and directed ties are symmetrized (the
    stronger direction wins). With M[i][i] = 1 + weighted degree,
    M[i][j] = 1 - w(i,j) for tied pairs and 1 otherwise, and C = M^-1:
    IC(i) = 1 / (C[i][i] + (T - 2R) / n), T the trace and R a row sum of C.

    Args:
        graph: Graph to analyze
        options: Analysis options
        threshold: Size above which ``confirmed`` is required
        confirmed: Whether the caller confirmed running on a large graph
        observer: Progress callback
        token: Cancellation token

    Raises:
        SingularMatrixError: If M cannot be inverted
        ConfirmationRequiredError: If the graph exceeds the threshold unconfirmed
    """
    options = options or DEFAULT_OPTIONS
    revision = graph.revision
    ids = [v for v in graph.vertex_ids() if not graph.is_isolated(v)]
    n = len(ids)
    if threshold is not None:
        require_confirmation("Information centrality", n, threshold, confirmed)
    if n == 0:
        return build_result(ProminenceIndex.IC, [], np.zeros(0), np.zeros(0), graph.vertex_ids(),
                            options.consider_weights)

    adjacency = adjacency_matrix(graph, options, ids).data
    np.fill_diagonal(adjacency, 0.0)
    weights = np.maximum(adjacency, adjacency.T)
    tied = weights != 0

    m = np.where(tied, 1.0 - weights, 1.0)
    np.fill_diagonal(m, 1.0 + weights.sum(axis=1))
    inverse = invert_matrix(m, observer, token)

    trace = np.trace(inverse)
    row_sums = inverse.sum(axis=1)
    scores = 1.0 / (np.diag(inverse) + (trace - 2.0 * row_sums) / n)
    total = scores.sum()
    standardized = scores / total if total > 0 else np.zeros_like(scores)

    check_revision(graph, revision, "information centrality")
    return build_result(
        ProminenceIndex.IC, ids, scores, standardized, excluded_vertices(graph, ids), options.consider_weights
    )


def eigenvector_centrality(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    iterations: Optional[IterationConfig] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """
    Eigenvector centrality: the principal eigenvector of the adjacency matrix.

    Found by power iteration on A + I; the shift keeps the iteration from
    oscillating on bipartite graphs without changing the eigenvectors. The
    vector is scaled to a maximum of 1 after every step, so scores are
    non-negative.
    """
    options = options or DEFAULT_OPTIONS
    iterations = iterations or IterationConfig()
    revision = graph.revision
    ids = analysis_vertices(graph, options)
    n = len(ids)
    adjacency = adjacency_matrix(graph, options, ids).data
    shifted = adjacency + np.eye(n)

    vector = np.ones(n)
    converged = n == 0
    steps = 0
    with ProgressTracker(iterations.eigenvector_max_iterations, "eigenvector centrality",
                         logger, observer, token) as tracker:
        while not converged and steps < iterations.eigenvector_max_iterations:
            steps += 1
            following = shifted @ vector
            top = following.max()
            if top <= 0:
                following = np.zeros(n)
                converged = True
            else:
                following /= top
                converged = np.max(np.abs(following - vector)) < iterations.tolerance
            vector = following
            tracker.update(steps)

    if not converged:
        logger.warning(
            f"Eigenvector centrality did not converge in {iterations.eigenvector_max_iterations} iterations"
        )
    else:
        logger.debug(f"Eigenvector centrality converged after {steps} iterations")

    # The A + I shift adds one to the eigenvalue, not to the eigenvector
    scores = np.clip(vector, 0.0, None)
    check_revision(graph, revision, "eigenvector centrality")
    return build_result(
        ProminenceIndex.EVC, ids, scores, scale_by_max(scores), excluded_vertices(graph, ids),
        options.consider_weights,
    )
