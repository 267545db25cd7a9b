"""
Structural equivalence measures for network analysis.

Two actors are structurally equivalent when they have the same ties to the
same others. This module compares the tie profiles of every pair of actors
(rows, columns or both of the adjacency or distance matrix) by Pearson
correlation and by matching, Jaccard, Hamming, cosine, Euclidean, Manhattan
and Chebyshev measures.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from ..config import AnalysisOptions
from ..core.graph import Graph
from ..core.matrix import LabeledMatrix
from ..utils.validation import (
    CancellationToken,
    ProgressObserver,
    ProgressTracker,
    check_revision,
    validate_choice,
)
from .matrices import adjacency_matrix, distance_matrix
from .paths import DEFAULT_OPTIONS

logger = logging.getLogger(__name__)

PROFILE_MATRICES = ["adjacency", "distances"]
PROFILE_VARIABLES = ["rows", "columns", "both"]
SIMILARITY_MEASURES = ["simple", "jaccard", "hamming", "cosine", "euclidean", "manhattan", "chebyshev"]
DISSIMILARITY_METRICS = ["euclidean", "manhattan", "jaccard", "hamming", "chebyshev"]

MEASURE_NAMES = {
    "simple": "Simple matching",
    "jaccard": "Jaccard index",
    "hamming": "Hamming distance",
    "cosine": "Cosine similarity",
    "euclidean": "Euclidean distance",
    "manhattan": "Manhattan distance",
    "chebyshev": "Chebyshev distance",
}


def tie_profiles(
    graph: Graph,
    matrix: str = "adjacency",
    variables: str = "rows",
    options: Optional[AnalysisOptions] = None,
) -> Tuple[List[int], np.ndarray]:
    """
    Tie profile of every actor.

    Args:
        graph: Graph to read
        matrix: "adjacency" or "distances" (unreachable distances become n)
        variables: "rows" (outbound ties), "columns" (inbound ties) or
            "both" (the two concatenated)
        options: Analysis options

    Returns:
        Tuple of (vertex ids, profiles) where profiles[k] is the profile of ids[k]

    Raises:
        InvalidParameterError: If matrix or variables is unknown
    """
    validate_choice(matrix, "matrix", PROFILE_MATRICES)
    validate_choice(variables, "variables", PROFILE_VARIABLES)
    options = options or DEFAULT_OPTIONS

    if matrix == "adjacency":
        source = adjacency_matrix(graph, options)
        data = source.data
    else:
        source = distance_matrix(graph, options)
        data = np.where(np.isfinite(source.data), source.data, float(source.rows))

    if variables == "rows":
        profiles = data.copy()
    elif variables == "columns":
        profiles = data.T.copy()
    else:
        profiles = np.hstack([data, data.T])
    return list(source.row_labels), profiles


def pearson_correlation_matrix(
    graph: Graph,
    matrix: str = "adjacency",
    variables: str = "rows",
    options: Optional[AnalysisOptions] = None,
) -> LabeledMatrix:
    """
    Pearson correlation coefficients between the tie profiles of all actors.

    Profiles without variance correlate 0 with every other profile and 1 with
    themselves.

    Returns:
        LabeledMatrix: Symmetric correlation matrix with a unit diagonal
    """
    revision = graph.revision
    ids, profiles = tie_profiles(graph, matrix, variables, options)
    centered = profiles - profiles.mean(axis=1, keepdims=True) if profiles.size else profiles
    norms = np.sqrt((centered ** 2).sum(axis=1)) if profiles.size else np.zeros(len(ids))
    products = centered @ centered.T if profiles.size else np.zeros((len(ids), len(ids)))

    scale = np.outer(norms, norms)
    correlation = np.divide(products, scale, out=np.zeros_like(products), where=scale > 0)
    np.fill_diagonal(correlation, 1.0)
    check_revision(graph, revision, "Pearson correlation")
    return LabeledMatrix(correlation, ids, name=f"Pearson correlation ({matrix}, {variables})")


def _excluded_positions(n: int, variables: str, i: int) -> np.ndarray:
    """Boolean mask (n actors x profile length) hiding positions i and j for every row j."""
    length = 2 * n if variables == "both" else n
    mask = np.ones((n, length), dtype=bool)
    mask[:, i] = False
    mask[np.arange(n), np.arange(n)] = False
    if variables == "both":
        mask[:, n + i] = False
        mask[np.arange(n), n + np.arange(n)] = False
    return mask


def _compare(reference: np.ndarray, profiles: np.ndarray, mask: np.ndarray, measure: str) -> np.ndarray:
    """Compare one profile with every profile under a position mask."""
    a = np.broadcast_to(reference, profiles.shape)
    b = profiles
    counted = mask.sum(axis=1)

    if measure == "simple":
        equal = ((a == b) & mask).sum(axis=1)
        return np.divide(equal, counted, out=np.zeros(len(b)), where=counted > 0)
    if measure == "jaccard":
        a_tied = a != 0
        b_tied = b != 0
        both = (a_tied & b_tied & mask).sum(axis=1)
        either = ((a_tied | b_tied) & mask).sum(axis=1)
        return np.divide(both, either, out=np.zeros(len(b)), where=either > 0)
    if measure == "hamming":
        return ((a != b) & mask).sum(axis=1).astype(float)
    if measure == "cosine":
        dot = (a * b * mask).sum(axis=1)
        scale = np.sqrt((a * a * mask).sum(axis=1) * (b * b * mask).sum(axis=1))
        return np.divide(dot, scale, out=np.zeros(len(b)), where=scale > 0)

    difference = np.abs(a - b) * mask
    if measure == "euclidean":
        return np.sqrt((difference ** 2).sum(axis=1))
    if measure == "manhattan":
        return difference.sum(axis=1)
    return difference.max(axis=1) if difference.shape[1] else np.zeros(len(b))


def _pairwise(
    ids: List[int],
    profiles: np.ndarray,
    measure: str,
    variables: str,
    include_diagonal: bool,
    observer: Optional[ProgressObserver],
    token: Optional[CancellationToken],
) -> np.ndarray:
    n = len(ids)
    result = np.zeros((n, n))
    full_mask = np.ones_like(profiles, dtype=bool)
    with ProgressTracker(n, f"{MEASURE_NAMES[measure]} comparison", logger, observer, token) as tracker:
        for i in range(n):
            mask = full_mask if include_diagonal else _excluded_positions(n, variables, i)
            result[i] = _compare(profiles[i], profiles, mask, measure)
            tracker.update(i + 1)
    return result


def similarity_matrix(
    graph: Graph,
    measure: str = "simple",
    variables: str = "rows",
    include_diagonal: bool = False,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LabeledMatrix:
    """
    Pairwise comparison of adjacency tie profiles by a similarity measure.

    Matching, Jaccard and cosine are similarities in [0, 1]; Hamming,
    Euclidean, Manhattan and Chebyshev values grow as profiles differ.

    Args:
        graph: Graph to analyze
        measure: One of SIMILARITY_MEASURES
        variables: "rows", "columns" or "both"
        include_diagonal: When False, the positions of i and j themselves are
            ignored when comparing actors i and j
        options: Analysis options
        observer: Progress callback
        token: Cancellation token

    Returns:
        LabeledMatrix: Actor-by-actor matrix of measure values

    Raises:
        InvalidParameterError: If measure or variables is unknown
    """
    validate_choice(measure, "measure", SIMILARITY_MEASURES)
    revision = graph.revision
    ids, profiles = tie_profiles(graph, "adjacency", variables, options)
    values = _pairwise(ids, profiles, measure, variables, include_diagonal, observer, token)
    check_revision(graph, revision, "similarity matrix")
    return LabeledMatrix(values, ids, name=f"{MEASURE_NAMES[measure]} ({variables})")


def dissimilarity_matrix(
    graph: Graph,
    metric: str = "euclidean",
    variables: str = "rows",
    include_diagonal: bool = False,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LabeledMatrix:
    """
    Pairwise tie-profile dissimilarities (Jaccard becomes 1 - Jaccard index).

    Raises:
        InvalidParameterError: If metric or variables is unknown
    """
    validate_choice(metric, "metric", DISSIMILARITY_METRICS)
    revision = graph.revision
    ids, profiles = tie_profiles(graph, "adjacency", variables, options)
    values = _pairwise(ids, profiles, metric, variables, include_diagonal, observer, token)
    if metric == "jaccard":
        values = 1.0 - values
        np.fill_diagonal(values, 0.0)
    check_revision(graph, revision, "dissimilarity matrix")
    name = "Jaccard dissimilarity" if metric == "jaccard" else MEASURE_NAMES[metric]
    return LabeledMatrix(values, ids, name=f"{name} ({variables})")
