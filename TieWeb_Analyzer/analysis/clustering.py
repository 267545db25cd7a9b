"""
Agglomerative hierarchical clustering of actors.

Clusters start as single actors and the closest pair is merged repeatedly.
Distances between a merged cluster and the rest follow the Lance-Williams
update of the chosen linkage; candidate pairs sit in a heap with lazy
invalidation, giving O(n^2 log n) overall.
"""

import heapq
import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..config import AnalysisOptions
from ..core.exceptions import InvalidParameterError
from ..core.graph import Graph
from ..core.matrix import LabeledMatrix
from ..core.types import Dendrogram, MergeStep
from ..utils.validation import (
    CancellationToken,
    ProgressObserver,
    ProgressTracker,
    require_confirmation,
    validate_choice,
)
from .equivalence import DISSIMILARITY_METRICS, dissimilarity_matrix, pearson_correlation_matrix

logger = logging.getLogger(__name__)

LINKAGES = ["single", "complete", "average"]


def _lance_williams(linkage: str, d_ik: np.ndarray, d_jk: np.ndarray, size_i: int, size_j: int) -> np.ndarray:
    if linkage == "single":
        return np.minimum(d_ik, d_jk)
    if linkage == "complete":
        return np.maximum(d_ik, d_jk)
    return (size_i * d_ik + size_j * d_jk) / (size_i + size_j)


def hierarchical_clustering(
    matrix: LabeledMatrix,
    linkage: str = "average",
    similarity: bool = False,
    threshold: Optional[int] = None,
    confirmed: bool = False,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> Dendrogram:
    """
    Cluster the labels of a symmetric (dis)similarity matrix.

    Args:
        matrix: Square symmetric matrix of pairwise values
        linkage: "single", "complete" or "average"
        similarity: True when higher values mean closer actors
        threshold: Size above which ``confirmed`` is required
        confirmed: Whether the caller confirmed running on a large matrix
        observer: Progress callback
        token: Cancellation token

    Returns:
        Dendrogram: Merge steps in order, with their levels

    Raises:
        InvalidParameterError: If the linkage is unknown or the matrix is not square and symmetric
        ConfirmationRequiredError: If the matrix exceeds the threshold unconfirmed
    """
    validate_choice(linkage, "linkage", LINKAGES)
    if not matrix.is_square:
        raise InvalidParameterError(f"Clustering needs a square matrix, got {matrix.shape}", "matrix")
    data = matrix.data
    finite = np.isfinite(data)
    if not (np.array_equal(finite, finite.T) and np.allclose(data[finite], data.T[finite])):
        raise InvalidParameterError("Clustering needs a symmetric matrix", "matrix")

    n = matrix.rows
    if threshold is not None:
        require_confirmation("Hierarchical clustering", n, threshold, confirmed)

    labels = list(matrix.row_labels)
    # Similarities are negated so the smallest key is always merged first
    keys = -data.copy() if similarity else data.copy()
    members: Dict[int, Tuple[int, ...]] = {i: (labels[i],) for i in range(n)}
    version = [0] * n
    active = set(range(n))

    heap: List[Tuple[float, int, int, int, int]] = []
    for i in range(n):
        for j in range(i + 1, n):
            heap.append((keys[i, j], i, j, 0, 0))
    heapq.heapify(heap)

    steps: List[MergeStep] = []
    with ProgressTracker(max(n - 1, 0), f"{linkage} linkage clustering", logger, observer, token) as tracker:
        while len(active) > 1 and heap:
            key, i, j, version_i, version_j = heapq.heappop(heap)
            if i not in active or j not in active or version[i] != version_i or version[j] != version_j:
                continue

            level = float(-key if similarity else key)
            steps.append(MergeStep(level=level, left=members[i], right=members[j]))

            others = np.array(sorted(active - {i, j}), dtype=int)
            if others.size:
                updated = _lance_williams(
                    linkage, keys[i, others], keys[j, others], len(members[i]), len(members[j])
                )
                keys[i, others] = updated
                keys[others, i] = updated

            members[i] = tuple(sorted(members[i] + members[j]))
            del members[j]
            active.discard(j)
            version[i] += 1
            for k in others:
                k = int(k)
                a, b = (i, k) if i < k else (k, i)
                heapq.heappush(heap, (keys[a, b], a, b, version[a], version[b]))
            tracker.update(len(steps))

    logger.debug(f"Clustered {n} actors in {len(steps)} merges ({linkage} linkage)")
    return Dendrogram(
        leaves=labels,
        steps=steps,
        linkage=linkage,
        metric=matrix.name,
        similarity=similarity,
    )


def cluster_actors(
    graph: Graph,
    metric: str = "euclidean",
    linkage: str = "average",
    variables: str = "rows",
    include_diagonal: bool = False,
    options: Optional[AnalysisOptions] = None,
    threshold: Optional[int] = None,
    confirmed: bool = False,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> Dendrogram:
    """
    Hierarchical clustering of the actors of a graph by tie-profile similarity.

    Args:
        graph: Graph to analyze
        metric: A dissimilarity metric, or "pearson" to cluster by correlation
        linkage: "single", "complete" or "average"
        variables: "rows", "columns" or "both"
        include_diagonal: Compare the positions of the two actors themselves
        options: Analysis options
        threshold: Size above which ``confirmed`` is required
        confirmed: Whether the caller confirmed running on a large graph
        observer: Progress callback
        token: Cancellation token

    Returns:
        Dendrogram: The merge sequence
    """
    validate_choice(metric, "metric", DISSIMILARITY_METRICS + ["pearson"])
    validate_choice(linkage, "linkage", LINKAGES)
    if threshold is not None:
        require_confirmation("Hierarchical clustering", graph.vertex_count, threshold, confirmed)

    if metric == "pearson":
        matrix = pearson_correlation_matrix(graph, "adjacency", variables, options)
        return hierarchical_clustering(matrix, linkage, similarity=True, observer=observer, token=token)
    matrix = dissimilarity_matrix(graph, metric, variables, include_diagonal, options, observer, token)
    return hierarchical_clustering(matrix, linkage, similarity=False, observer=observer, token=token)
