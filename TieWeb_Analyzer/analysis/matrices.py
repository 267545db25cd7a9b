"""
Matrix engine for the TieWeb analysis engine.

Builds the labeled matrices of the current relation (adjacency, cocitation,
degree, Laplacian, distance, geodesic counts, reachability, walks) and inverts
square matrices through LU decomposition with partial pivoting. Every matrix
is labeled with the vertex ids it was built over, so results stay
addressable by id regardless of which vertices were dropped.
"""

import logging
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ..config import AnalysisOptions
from ..core.exceptions import InvalidParameterError, SingularMatrixError
from ..core.graph import Graph
from ..core.matrix import LabeledMatrix
from ..utils.validation import (
    CancellationToken,
    ProgressObserver,
    ProgressTracker,
    check_revision,
    require_confirmation,
)
from .paths import DEFAULT_OPTIONS, analysis_vertices, shortest_paths

logger = logging.getLogger(__name__)

# Pivots below this fraction of the largest entry are treated as zero
SINGULAR_TOLERANCE = 1e-12


def _adjacency_array(graph: Graph, ids: Sequence[int], options: AnalysisOptions) -> np.ndarray:
    positions = {v: i for i, v in enumerate(ids)}
    data = np.zeros((len(ids), len(ids)))
    for i, source in enumerate(ids):
        for target, weight in graph.out_neighbors(source).items():
            j = positions.get(target)
            if j is None:
                continue
            data[i, j] = weight if options.consider_weights else 1.0
    return data


def adjacency_matrix(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    vertex_ids: Optional[Sequence[int]] = None,
) -> LabeledMatrix:
    """
    Adjacency matrix of the current relation.

    A[i][j] is the weight of the tie i -> j when weights are considered and 1
    otherwise; 0 when there is no tie. Undirected graphs produce a symmetric
    matrix.

    Args:
        graph: Graph to read
        options: Analysis options
        vertex_ids: Explicit row/column order; defaults to ``analysis_vertices``

    Returns:
        LabeledMatrix: The adjacency matrix
    """
    options = options or DEFAULT_OPTIONS
    ids = list(vertex_ids) if vertex_ids is not None else analysis_vertices(graph, options)
    return LabeledMatrix(_adjacency_array(graph, ids, options), ids, name="Adjacency")


def transpose_matrix(graph: Graph, options: Optional[AnalysisOptions] = None) -> LabeledMatrix:
    """Transpose of the adjacency matrix."""
    adjacency = adjacency_matrix(graph, options)
    return adjacency.with_data(adjacency.data.T.copy(), "Transpose")


def cocitation_matrix(graph: Graph, options: Optional[AnalysisOptions] = None) -> LabeledMatrix:
    """
    Cocitation matrix: C[i][j] is the number of actors with ties to both i and j.

    Computed on the binary tie pattern as Aᵗ·A. The diagonal holds each
    actor's in-degree.
    """
    options = options or DEFAULT_OPTIONS
    ids = analysis_vertices(graph, options)
    binary = (_adjacency_array(graph, ids, options) != 0).astype(float)
    return LabeledMatrix(binary.T @ binary, ids, name="Cocitation")


def degree_matrix(graph: Graph, options: Optional[AnalysisOptions] = None) -> LabeledMatrix:
    """Diagonal matrix of the adjacency row sums (out-degrees)."""
    adjacency = adjacency_matrix(graph, options)
    return adjacency.with_data(np.diag(adjacency.data.sum(axis=1)), "Degree")


def laplacian_matrix(graph: Graph, options: Optional[AnalysisOptions] = None) -> LabeledMatrix:
    """Laplacian matrix, exactly Degree - Adjacency."""
    adjacency = adjacency_matrix(graph, options)
    degree = np.diag(adjacency.data.sum(axis=1))
    return adjacency.with_data(degree - adjacency.data, "Laplacian")


def distance_matrix(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LabeledMatrix:
    """
    All-pairs geodesic distances; ``inf`` marks unreachable pairs.

    Args:
        graph: Graph to analyze
        options: Analysis options (weights, inverse weights, isolates)
        observer: Progress callback
        token: Cancellation token

    Returns:
        LabeledMatrix: Distance matrix with a zero diagonal
    """
    revision = graph.revision
    paths = shortest_paths(graph, options, observer=observer, token=token)
    check_revision(graph, revision, "distance matrix")
    return LabeledMatrix(paths.distances, paths.vertex_ids, name="Distances")


def geodesics_matrix(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LabeledMatrix:
    """Number of distinct shortest paths between every pair (diagonal = 1)."""
    revision = graph.revision
    paths = shortest_paths(graph, options, observer=observer, token=token)
    check_revision(graph, revision, "geodesics matrix")
    return LabeledMatrix(paths.sigma, paths.vertex_ids, name="Geodesics")


def reachability_matrix(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LabeledMatrix:
    """R[i][j] = 1 iff the distance from i to j is finite (diagonal = 1)."""
    distances = distance_matrix(graph, options, observer, token)
    return distances.with_data(np.isfinite(distances.data).astype(float), "Reachability")


def walks_matrix(graph: Graph, length: int, options: Optional[AnalysisOptions] = None) -> LabeledMatrix:
    """
    Number of walks of exactly ``length`` ties between every pair (A^length).

    Raises:
        InvalidParameterError: If length is not a positive integer
    """
    if not isinstance(length, int) or length < 1:
        raise InvalidParameterError(f"Walk length must be a positive integer, got {length!r}", "length")
    adjacency = adjacency_matrix(graph, options)
    return adjacency.with_data(np.linalg.matrix_power(adjacency.data, length), f"Walks of length {length}")


def total_walks_matrix(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    threshold: Optional[int] = None,
    confirmed: bool = False,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LabeledMatrix:
    """
    Total number of walks of every length from 1 to n-1 between every pair.

    Args:
        graph: Graph to analyze
        options: Analysis options
        threshold: Size above which ``confirmed`` is required
        confirmed: Whether the caller confirmed running on a large graph
        observer: Progress callback
        token: Cancellation token

    Returns:
        LabeledMatrix: Sum of A^k for k = 1..n-1

    Raises:
        ConfirmationRequiredError: If the graph exceeds the threshold unconfirmed
    """
    revision = graph.revision
    adjacency = adjacency_matrix(graph, options)
    n = adjacency.rows
    if threshold is not None:
        require_confirmation("Total walks", n, threshold, confirmed)

    total = np.zeros_like(adjacency.data)
    power = np.eye(n)
    with ProgressTracker(max(n - 1, 0), "total walks", logger, observer, token) as tracker:
        for k in range(1, n):
            power = power @ adjacency.data
            total += power
            tracker.update(k)

    check_revision(graph, revision, "total walks")
    return adjacency.with_data(total, "Total walks")


def lu_decompose(
    data: np.ndarray,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    LU decomposition with partial pivoting (Doolittle, combined storage).

    Args:
        data: Square matrix
        observer: Progress callback
        token: Cancellation token

    Returns:
        Tuple of (LU, permutation): L below the diagonal with an implicit unit
        diagonal, U on and above it; ``permutation[i]`` is the original row now
        at position i.

    Raises:
        SingularMatrixError: If a zero pivot is met
    """
    lu = np.array(data, dtype=float, copy=True)
    n = lu.shape[0]
    permutation = np.arange(n)
    scale = np.abs(lu).max() if n else 0.0
    tolerance = SINGULAR_TOLERANCE * max(scale, 1.0)

    with ProgressTracker(n, "LU decomposition", logger, observer, token) as tracker:
        for k in range(n):
            pivot = k + int(np.argmax(np.abs(lu[k:, k])))
            if abs(lu[pivot, k]) <= tolerance:
                raise SingularMatrixError(f"Matrix is singular (zero pivot in column {k})", n)
            if pivot != k:
                lu[[k, pivot]] = lu[[pivot, k]]
                permutation[[k, pivot]] = permutation[[pivot, k]]
            lu[k + 1:, k] /= lu[k, k]
            lu[k + 1:, k + 1:] -= np.outer(lu[k + 1:, k], lu[k, k + 1:])
            tracker.update(k + 1)

    return lu, permutation


def lu_solve(lu: np.ndarray, permutation: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """Solve A·X = rhs given the pivoted LU factors of A."""
    n = lu.shape[0]
    x = np.array(rhs, dtype=float)[permutation]
    for i in range(n):
        x[i] -= lu[i, :i] @ x[:i]
    for i in range(n - 1, -1, -1):
        x[i] = (x[i] - lu[i, i + 1:] @ x[i + 1:]) / lu[i, i]
    return x


def invert_matrix(
    matrix: Union[LabeledMatrix, np.ndarray],
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> Union[LabeledMatrix, np.ndarray]:
    """
    Invert a square matrix through LU decomposition with partial pivoting.

    Args:
        matrix: Labeled matrix or plain array to invert
        observer: Progress callback
        token: Cancellation token

    Returns:
        The inverse, of the same kind (labeled or plain) as the input

    Raises:
        InvalidParameterError: If the matrix is not square
        SingularMatrixError: If the matrix is singular
    """
    data = matrix.data if isinstance(matrix, LabeledMatrix) else np.asarray(matrix, dtype=float)
    if data.ndim != 2 or data.shape[0] != data.shape[1]:
        raise InvalidParameterError(f"Only square matrices can be inverted, got shape {data.shape}", "matrix")

    lu, permutation = lu_decompose(data, observer, token)
    inverse = lu_solve(lu, permutation, np.eye(data.shape[0]))
    if not np.all(np.isfinite(inverse)):
        raise SingularMatrixError("Matrix is numerically singular", data.shape[0])

    if isinstance(matrix, LabeledMatrix):
        return matrix.with_data(inverse, f"Inverse of {matrix.name}".strip())
    return inverse


def adjacency_inverse(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    threshold: Optional[int] = None,
    confirmed: bool = False,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> LabeledMatrix:
    """
    Inverse of the adjacency matrix.

    Raises:
        SingularMatrixError: If the adjacency matrix is singular
        ConfirmationRequiredError: If the graph exceeds the threshold unconfirmed
    """
    revision = graph.revision
    adjacency = adjacency_matrix(graph, options)
    if threshold is not None:
        require_confirmation("Adjacency inverse", adjacency.rows, threshold, confirmed)
    inverse = invert_matrix(adjacency, observer, token)
    check_revision(graph, revision, "adjacency inverse")
    return inverse


def diameter(graph: Graph, options: Optional[AnalysisOptions] = None) -> float:
    """Largest finite geodesic distance (0 for graphs without ties)."""
    distances = shortest_paths(graph, options).distances
    finite = distances[np.isfinite(distances)]
    return float(finite.max()) if finite.size else 0.0


def average_distance(graph: Graph, options: Optional[AnalysisOptions] = None) -> float:
    """Mean geodesic distance over ordered pairs of distinct actors where the second is reachable."""
    distances = shortest_paths(graph, options).distances
    n = distances.shape[0]
    mask = np.isfinite(distances) & ~np.eye(n, dtype=bool)
    if not mask.any():
        return 0.0
    return float(distances[mask].mean())


def is_connected(graph: Graph, options: Optional[AnalysisOptions] = None) -> bool:
    """
    True when every actor reaches every other actor.

    For directed graphs this is strong connectivity. Empty graphs are not
    connected.
    """
    distances = shortest_paths(graph, options).distances
    if distances.size == 0:
        return False
    return bool(np.all(np.isfinite(distances)))

