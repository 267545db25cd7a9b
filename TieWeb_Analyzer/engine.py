"""
Facade over the TieWeb analysis engines.

NetworkEngine holds one graph and one TieWebConfig and exposes every engine
operation as a method returning an OperationResult. User-facing errors
(TieWebError and its subclasses) are logged and returned as failures; an
InvariantViolationError means internal bookkeeping is broken and is always
re-raised.

Example:
    >>> engine = NetworkEngine()
    >>> engine.generate("erdos-renyi", nodes=30, probability=0.2, seed=7).unwrap()
    >>> result = engine.compute_index("BC")
    >>> if result.ok:
    ...     print(result.value.ranked(5))
"""

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from .analysis import clustering, community, connectivity, equivalence, matrices
from .analysis.indices import ProminenceIndex
from .analysis.paths import geodesic_distance
from .config import AnalysisOptions, TieWebConfig
from .core import transforms
from .core.exceptions import InvalidParameterError, InvariantViolationError, TieWebError
from .core.graph import Graph
from .core.types import OperationResult
from .data.generators import generate_network
from .output.formatters import EmojiFormatter
from .utils.validation import CancellationToken, ProgressObserver, validate_choice
from .visualization.layouts import PROMINENCE_MODES, compute_layout, prominence_layout

MATRIX_KINDS = [
    "adjacency",
    "transpose",
    "cocitation",
    "degree",
    "laplacian",
    "distances",
    "geodesics",
    "reachability",
]

TRANSFORMS = {
    "symmetrize": transforms.symmetrize,
    "symmetrize-strong-ties": transforms.symmetrize_strong_ties,
    "symmetrize-cocitation": transforms.symmetrize_cocitation,
    "dichotomize": transforms.dichotomize,
    "add-clique": transforms.add_clique,
    "add-star": transforms.add_star,
    "add-cycle": transforms.add_cycle,
    "add-line": transforms.add_line,
}


class NetworkEngine:
    """
    Runs analysis operations over one graph and wraps their outcomes.

    Size guards use the thresholds of the configuration: guarded indices and
    clique census use ``expensive_node_threshold``, total walks and matrix
    inversion use ``walks_node_threshold`` and clustering uses
    ``clustering_node_threshold``.
    """

    def __init__(
        self,
        graph: Optional[Graph] = None,
        config: Optional[TieWebConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the engine.

        Args:
            graph: Graph to analyze (an empty undirected graph by default)
            config: Engine configuration
            logger: Logger for operation outcomes
        """
        self.graph = graph if graph is not None else Graph(directed=False)
        self.config = config or TieWebConfig()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def options(self) -> AnalysisOptions:
        return self.config.options

    def set_options(self, **changes: Any) -> AnalysisOptions:
        """
        Replace the analysis options with a modified copy.

        Raises:
            ValueError: If the new combination is invalid
        """
        self.config.options = replace(self.config.options, **changes)
        return self.config.options

    def run(self, operation: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> OperationResult:
        """
        Call ``func`` and wrap its outcome.

        Args:
            operation: Name reported in the result and the log
            func: Engine function to call
            *args: Positional arguments for ``func``
            **kwargs: Keyword arguments for ``func``

        Returns:
            OperationResult: The value on success, the error on failure

        Raises:
            InvariantViolationError: If internal bookkeeping is found broken
        """
        try:
            value = func(*args, **kwargs)
        except InvariantViolationError:
            self.logger.error(EmojiFormatter.format("error", f"{operation}: internal invariant violated"))
            raise
        except TieWebError as e:
            self.logger.warning(EmojiFormatter.format("warning", f"{operation} failed: {e.message}"))
            return OperationResult.failure(operation, e)
        self.logger.debug(f"{operation} completed")
        return OperationResult.success(operation, value)

    # ------------------------------------------------------------------
    # Prominence indices
    # ------------------------------------------------------------------

    def compute_index(
        self,
        index: Union[str, ProminenceIndex],
        confirmed: bool = False,
        observer: Optional[ProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> OperationResult:
        """Compute one prominence index (member or code such as "BC")."""
        operation = f"index {index.code if isinstance(index, ProminenceIndex) else index}"
        return self.run(operation, self._compute_index, index, confirmed, observer, token)

    def _compute_index(self, index, confirmed, observer, token):
        member = ProminenceIndex.from_code(index)
        return member.compute(
            self.graph,
            self.options,
            self.config.iterations,
            self.config.thresholds.expensive_node_threshold,
            confirmed,
            observer,
            token,
        )

    def compute_indices(
        self, indices: Iterable[Union[str, ProminenceIndex]], confirmed: bool = False
    ) -> Dict[str, OperationResult]:
        """Compute several indices; each gets its own result keyed by code."""
        results = {}
        for index in indices:
            key = index.code if isinstance(index, ProminenceIndex) else str(index).upper()
            results[key] = self.compute_index(index, confirmed)
        return results

    # ------------------------------------------------------------------
    # Matrices and distances
    # ------------------------------------------------------------------

    def matrix(
        self,
        kind: str,
        observer: Optional[ProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> OperationResult:
        """
        Build a graph matrix by kind.

        Args:
            kind: One of MATRIX_KINDS
            observer: Progress callback (path-based matrices)
            token: Cancellation token (path-based matrices)
        """
        return self.run(f"{kind} matrix", self._matrix, kind, observer, token)

    def _matrix(self, kind, observer, token):
        validate_choice(kind, "kind", MATRIX_KINDS)
        simple = {
            "adjacency": matrices.adjacency_matrix,
            "transpose": matrices.transpose_matrix,
            "cocitation": matrices.cocitation_matrix,
            "degree": matrices.degree_matrix,
            "laplacian": matrices.laplacian_matrix,
        }
        if kind in simple:
            return simple[kind](self.graph, self.options)
        path_based = {
            "distances": matrices.distance_matrix,
            "geodesics": matrices.geodesics_matrix,
            "reachability": matrices.reachability_matrix,
        }
        return path_based[kind](self.graph, self.options, observer, token)

    def walks(self, length: int) -> OperationResult:
        return self.run(f"walks of length {length}", matrices.walks_matrix, self.graph, length, self.options)

    def total_walks(
        self,
        confirmed: bool = False,
        observer: Optional[ProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> OperationResult:
        return self.run(
            "total walks",
            matrices.total_walks_matrix,
            self.graph,
            self.options,
            self.config.thresholds.walks_node_threshold,
            confirmed,
            observer,
            token,
        )

    def adjacency_inverse(
        self,
        confirmed: bool = False,
        observer: Optional[ProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> OperationResult:
        return self.run(
            "adjacency inverse",
            matrices.adjacency_inverse,
            self.graph,
            self.options,
            self.config.thresholds.walks_node_threshold,
            confirmed,
            observer,
            token,
        )

    def distance(self, source: int, target: int) -> OperationResult:
        """Geodesic distance between two actors (``inf`` when unreachable)."""
        return self.run(
            f"distance {source} -> {target}", geodesic_distance, self.graph, source, target, self.options
        )

    def connectivity(self) -> OperationResult:
        """Graph-level metrics: components, density, reciprocity, diameter."""
        return self.run(
            "connectivity metrics",
            connectivity.calculate_connectivity_metrics,
            self.graph,
            self.options,
            self.logger,
        )

    # ------------------------------------------------------------------
    # Structural equivalence
    # ------------------------------------------------------------------

    def pearson_correlation(self, matrix: str = "adjacency", variables: str = "rows") -> OperationResult:
        return self.run(
            "Pearson correlation",
            equivalence.pearson_correlation_matrix,
            self.graph,
            matrix,
            variables,
            self.options,
        )

    def similarity(
        self, measure: str = "simple", variables: str = "rows", include_diagonal: bool = False
    ) -> OperationResult:
        return self.run(
            f"{measure} similarity",
            equivalence.similarity_matrix,
            self.graph,
            measure,
            variables,
            include_diagonal,
            self.options,
        )

    def dissimilarity(
        self, metric: str = "euclidean", variables: str = "rows", include_diagonal: bool = False
    ) -> OperationResult:
        return self.run(
            f"{metric} dissimilarity",
            equivalence.dissimilarity_matrix,
            self.graph,
            metric,
            variables,
            include_diagonal,
            self.options,
        )

    def cluster(
        self,
        metric: str = "euclidean",
        linkage: str = "average",
        variables: str = "rows",
        include_diagonal: bool = False,
        confirmed: bool = False,
        observer: Optional[ProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> OperationResult:
        """Hierarchical clustering of the actors by tie-profile (dis)similarity."""
        return self.run(
            f"{linkage}-linkage clustering",
            clustering.cluster_actors,
            self.graph,
            metric,
            linkage,
            variables,
            include_diagonal,
            self.options,
            self.config.thresholds.clustering_node_threshold,
            confirmed,
            observer,
            token,
        )

    # ------------------------------------------------------------------
    # Communities
    # ------------------------------------------------------------------

    def clique_census(self, min_size: int = 2, confirmed: bool = False) -> OperationResult:
        return self.run(
            "clique census",
            community.clique_census,
            self.graph,
            min_size,
            self.config.thresholds.expensive_node_threshold,
            confirmed,
        )

    def triad_census(
        self, observer: Optional[ProgressObserver] = None, token: Optional[CancellationToken] = None
    ) -> OperationResult:
        return self.run("triad census", community.triad_census, self.graph, observer, token)

    # ------------------------------------------------------------------
    # Generators, layouts and edits
    # ------------------------------------------------------------------

    def generate(self, model: Optional[str] = None, **params: Any) -> OperationResult:
        """
        Replace the graph with a random network.

        Args:
            model: Generator model; defaults to the configured one
            **params: GeneratorConfig fields overriding the configured values

        Returns:
            OperationResult: The generated Graph on success
        """
        if params.get("edges") is not None:
            # G(n,M) replaces G(n,p)
            params.setdefault("probability", None)
        try:
            generator = replace(self.config.generator, model=model or self.config.generator.model, **params)
        except (TypeError, ValueError) as e:
            return OperationResult.failure("generate", InvalidParameterError(str(e), "generator"))

        result = self.run(f"generate {generator.model}", generate_network, generator, self.config.layout)
        if result.ok:
            self.graph = result.value
            self.config.generator = generator
            self.logger.info(EmojiFormatter.format("success", f"Generated {self.graph!r}"))
        return result

    def layout(
        self,
        method: str,
        index: Optional[Union[str, ProminenceIndex]] = None,
        apply: bool = True,
        seed: Optional[int] = None,
        confirmed: bool = False,
        observer: Optional[ProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ) -> OperationResult:
        """
        Compute a layout and (by default) write it back to the graph.

        Args:
            method: A prominence mode ("radial", "leveled", "node-size",
                "node-color", which need ``index``) or "circle", "eades",
                "fruchterman-reingold", "kamada-kawai"
            index: Prominence index for the prominence modes
            apply: Write positions (and sizes or colors) to the graph
            seed: Random seed for force-directed starting positions
            confirmed: Whether the caller confirmed running on a large graph
            observer: Progress callback
            token: Cancellation token
        """
        return self.run(f"{method} layout", self._layout, method, index, apply, seed, confirmed, observer, token)

    def _layout(self, method, index, apply, seed, confirmed, observer, token):
        if method in PROMINENCE_MODES:
            if index is None:
                raise InvalidParameterError(f"The {method} layout needs a prominence index", "index")
            result = prominence_layout(
                self.graph,
                index,
                method,
                self.options,
                self.config.layout,
                self.config.iterations,
                self.config.thresholds.expensive_node_threshold,
                confirmed,
                observer,
                token,
            )
        else:
            result = compute_layout(self.graph, method, self.config.layout, seed, observer, token)
        if apply:
            result.apply_to(self.graph)
        return result

    def transform(self, name: str, *args: Any, **kwargs: Any) -> OperationResult:
        """
        Apply a structural edit by name (see TRANSFORMS), e.g.
        ``transform("dichotomize", 2.0)`` or ``transform("add-star", [1, 2, 3])``.
        """
        return self.run(name, self._transform, name, args, kwargs)

    def _transform(self, name: str, args: Sequence[Any], kwargs: Dict[str, Any]):
        validate_choice(name, "transform", list(TRANSFORMS))
        return TRANSFORMS[name](self.graph, *args, **kwargs)

    def check_integrity(self) -> None:
        """Verify graph bookkeeping; raises InvariantViolationError when broken."""
        self.graph.check_integrity()


def failed_operations(results: Dict[str, OperationResult]) -> List[str]:
    """Keys of the results that hold an error."""
    return [code for code, result in results.items() if not result.ok]
