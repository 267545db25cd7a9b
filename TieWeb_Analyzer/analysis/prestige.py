"""
Prestige index calculations for network analysis.

Prestige indices measure how much an actor is chosen by others: degree
prestige (inbound ties), PageRank prestige and proximity prestige.
"""

import logging
from typing import Optional

import numpy as np

from ..config import AnalysisOptions, IterationConfig
from ..core.graph import Graph
from ..core.types import CentralityResult
from ..utils.validation import CancellationToken, ProgressObserver, ProgressTracker, check_revision
from .centrality import build_result, excluded_vertices, reach_ratio, scale_by_max
from .indices import ProminenceIndex
from .matrices import adjacency_matrix
from .paths import DEFAULT_OPTIONS, analysis_vertices, shortest_paths

logger = logging.getLogger(__name__)


def degree_prestige(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """
    Degree prestige: sum of inbound tie weights (in-degree).

    Standardized like degree centrality. On undirected graphs DP equals DC.
    """
    options = options or DEFAULT_OPTIONS
    revision = graph.revision
    ids = analysis_vertices(graph, options)
    adjacency = adjacency_matrix(graph, options, ids).data
    np.fill_diagonal(adjacency, 0.0)
    scores = adjacency.sum(axis=0)
    n = len(ids)
    if options.consider_weights:
        standardized = scores / scores.sum() if scores.sum() > 0 else np.zeros_like(scores)
    else:
        standardized = scores / (n - 1) if n > 1 else np.zeros_like(scores)
    check_revision(graph, revision, "degree prestige")
    return build_result(
        ProminenceIndex.DP, ids, scores, standardized, excluded_vertices(graph, ids), options.consider_weights
    )


def pagerank_prestige(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    iterations: Optional[IterationConfig] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """
    PageRank prestige.

    Iterates x = (1-d)/n + d * (M^T x + dangling/n) where M is the adjacency
    matrix normalized by each sender's out-degree and ``dangling`` is the
    score held by actors without outbound ties, spread uniformly. Scores sum
    to 1.

    Args:
        graph: Graph to analyze
        options: Analysis options
        iterations: Damping factor, tolerance and iteration cap
        observer: Progress callback
        token: Cancellation token

    Returns:
        CentralityResult: PRP scores, standardized by the maximum
    """
    options = options or DEFAULT_OPTIONS
    iterations = iterations or IterationConfig()
    damping = iterations.pagerank_damping
    revision = graph.revision
    ids = analysis_vertices(graph, options)
    n = len(ids)

    adjacency = adjacency_matrix(graph, options, ids).data
    out_strength = adjacency.sum(axis=1)
    dangling = out_strength == 0
    transition = np.divide(
        adjacency, out_strength[:, None], out=np.zeros_like(adjacency), where=~dangling[:, None]
    )

    scores = np.full(n, 1.0 / n) if n else np.zeros(0)
    converged = n == 0
    steps = 0
    with ProgressTracker(iterations.pagerank_max_iterations, "PageRank prestige",
                         logger, observer, token) as tracker:
        while not converged and steps < iterations.pagerank_max_iterations:
            steps += 1
            dangling_mass = scores[dangling].sum()
            following = (1.0 - damping) / n + damping * (transition.T @ scores + dangling_mass / n)
            following /= following.sum()
            converged = np.abs(following - scores).sum() < iterations.tolerance
            scores = following
            tracker.update(steps)

    if not converged:
        logger.warning(
            f"PageRank did not converge in {iterations.pagerank_max_iterations} iterations"
        )
    else:
        logger.debug(f"PageRank converged after {steps} iterations")

    check_revision(graph, revision, "PageRank prestige")
    return build_result(
        ProminenceIndex.PRP, ids, scores, scale_by_max(scores), excluded_vertices(graph, ids),
        options.consider_weights,
    )


def proximity_prestige(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> CentralityResult:
    """
    Proximity prestige: share of actors reaching u over their mean distance to u.

    PP(u) = (|I| / (n-1)) / (sum of d(j, u) over I / |I|) where I is the set
    of actors that reach u; 0 when nobody does.
    """
    options = options or DEFAULT_OPTIONS
    revision = graph.revision
    ids = analysis_vertices(graph, options)
    paths = shortest_paths(graph, options, ids, observer, token)
    scores = reach_ratio(paths.distances.T, len(ids))
    check_revision(graph, revision, "proximity prestige")
    return build_result(
        ProminenceIndex.PP, ids, scores, scale_by_max(scores), excluded_vertices(graph, ids),
        options.consider_weights,
    )
