"""
Type definitions and data structures for TieWeb network analysis.

This module contains the dataclass definitions for graph elements (vertices
and ties) and for the plain result values handed to collaborators: score
maps, distribution series, censuses, dendrograms and layouts.
"""

import math
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Generic, List, Optional, Tuple, TypeVar

import pandas as pd
from typing_extensions import TypeAlias

from .exceptions import ConfirmationRequiredError, InvariantViolationError, TieWebError
from .matrix import LabeledMatrix

if TYPE_CHECKING:
    from ..analysis.indices import ProminenceIndex
    from .graph import Graph

ScoreMap: TypeAlias = Dict[int, float]
Position: TypeAlias = Tuple[float, float]
PositionDict: TypeAlias = Dict[int, Position]

T = TypeVar("T")


class EdgeType(Enum):
    """Type tag of a tie, derived from the presence of its mirror."""

    DIRECTED = "directed"
    UNDIRECTED = "undirected"
    RECIPROCATED = "reciprocated"


@dataclass
class Vertex:
    """
    An actor of the network.

    Attributes:
        id: Stable identifier, never reused within a graph
        label: Display label
        x: Horizontal position
        y: Vertical position
        size: Display size (payload only)
        color: Display color (payload only)
        shape: Display shape (payload only)
    """

    id: int
    label: str = ""
    x: float = 0.0
    y: float = 0.0
    size: float = 8.0
    color: str = "#FF0000"
    shape: str = "circle"

    @property
    def position(self) -> Position:
        return (self.x, self.y)


@dataclass
class Edge:
    """
    A tie between two actors within one relation.

    An undirected tie is stored once and is visible from both endpoints.

    Attributes:
        source: Source vertex id
        target: Target vertex id
        weight: Real-valued tie strength (or cost)
        relation: Index of the relation the tie belongs to
        undirected: Whether the tie was created as an undirected edge
        label: Display label (payload only)
        color: Display color (payload only)
    """

    source: int
    target: int
    weight: float = 1.0
    relation: int = 0
    undirected: bool = False
    label: str = ""
    color: str = "#666666"

    @property
    def endpoints(self) -> Tuple[int, int]:
        return (self.source, self.target)


@dataclass
class DistributionSeries:
    """
    Frequency distribution of an index, ready for charting.

    Attributes:
        name: Name of the index the values belong to
        frequencies: Mapping of value to number of actors holding it
        min_value: Smallest observed value
        max_value: Largest observed value
    """

    name: str
    frequencies: Dict[float, int]
    min_value: float
    max_value: float

    @classmethod
    def from_scores(cls, name: str, scores: ScoreMap, precision: int = 6) -> "DistributionSeries":
        """
        Build a distribution from a score map.

        Args:
            name: Index name
            scores: Mapping of vertex id to score
            precision: Decimal places used to bucket equal values

        Returns:
            DistributionSeries: Sorted value -> frequency series
        """
        counts = Counter(round(value, precision) for value in scores.values())
        frequencies = {value: counts[value] for value in sorted(counts)}
        if frequencies:
            min_value = min(frequencies)
            max_value = max(frequencies)
        else:
            min_value = max_value = 0.0
        return cls(name=name, frequencies=frequencies, min_value=min_value, max_value=max_value)

    def to_series(self) -> pd.Series:
        return pd.Series(self.frequencies, name=self.name, dtype="int64")


@dataclass
class CentralityResult:
    """
    Output of one prominence index computation.

    Attributes:
        index: The prominence index that was computed
        scores: Raw score per vertex id
        standardized: Standardized score per vertex id
        centralization: Group-level centralization (None when undefined)
        excluded: Isolated vertex ids left out of the computation
        weighted: Whether tie weights were considered
    """

    index: "ProminenceIndex"
    scores: ScoreMap
    standardized: ScoreMap
    centralization: Optional[float] = None
    excluded: List[int] = field(default_factory=list)
    weighted: bool = False

    @property
    def name(self) -> str:
        return self.index.long_name

    @property
    def total(self) -> float:
        return float(sum(self.scores.values()))

    @property
    def mean(self) -> float:
        """Mean of the standardized scores."""
        if not self.standardized:
            return 0.0
        return float(sum(self.standardized.values()) / len(self.standardized))

    @property
    def variance(self) -> float:
        """Population variance of the standardized scores."""
        if not self.standardized:
            return 0.0
        mean = self.mean
        return float(
            sum((value - mean) ** 2 for value in self.standardized.values())
            / len(self.standardized)
        )

    @property
    def max_value(self) -> float:
        return max(self.scores.values()) if self.scores else 0.0

    @property
    def min_value(self) -> float:
        return min(self.scores.values()) if self.scores else 0.0

    @property
    def max_vertices(self) -> List[int]:
        """Vertex ids holding the maximum raw score."""
        top = self.max_value
        return sorted(v for v, s in self.scores.items() if math.isclose(s, top, abs_tol=1e-12))

    @property
    def min_vertices(self) -> List[int]:
        """Vertex ids holding the minimum raw score."""
        bottom = self.min_value
        return sorted(v for v, s in self.scores.items() if math.isclose(s, bottom, abs_tol=1e-12))

    def ranked(self, top_n: Optional[int] = None) -> List[Tuple[int, float]]:
        """Return (vertex id, score) pairs, highest score first, ties by id."""
        ranking = sorted(self.scores.items(), key=lambda item: (-item[1], item[0]))
        return ranking if top_n is None else ranking[:top_n]

    def distribution(self, standardized: bool = True) -> DistributionSeries:
        values = self.standardized if standardized else self.scores
        return DistributionSeries.from_scores(self.index.code, values)

    def to_dataframe(self) -> pd.DataFrame:
        """Score table with one row per vertex id."""
        df = pd.DataFrame(
            {
                self.index.code: pd.Series(self.scores, dtype="float64"),
                f"{self.index.code}'": pd.Series(self.standardized, dtype="float64"),
            }
        )
        df.index.name = "vertex"
        return df.sort_index()


@dataclass
class TriadCensus:
    """
    Network-wide tally of the 16 M-A-N triad classes.

    Attributes:
        counts: Count per triad class, in the canonical class order
    """

    counts: Dict[str, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def __getitem__(self, triad_type: str) -> int:
        return self.counts[triad_type]

    def to_series(self) -> pd.Series:
        return pd.Series(self.counts, name="triads", dtype="int64")


@dataclass
class CliqueCensus:
    """
    Maximal cliques of a network and the derived membership structures.

    Attributes:
        cliques: Maximal cliques as sorted tuples of vertex ids
        by_size: Number of maximal cliques per clique size
        membership: Actor-by-clique matrix (1 when the actor belongs to the clique)
        co_membership: Actor-by-actor matrix of shared clique counts
    """

    cliques: List[Tuple[int, ...]]
    by_size: Dict[int, int]
    membership: LabeledMatrix
    co_membership: LabeledMatrix

    @property
    def count(self) -> int:
        return len(self.cliques)

    @property
    def largest_size(self) -> int:
        return max(self.by_size) if self.by_size else 0

    def cliques_of(self, vertex_id: int) -> List[Tuple[int, ...]]:
        return [clique for clique in self.cliques if vertex_id in clique]


@dataclass
class MergeStep:
    """One agglomeration step of a hierarchical clustering."""

    level: float
    left: Tuple[int, ...]
    right: Tuple[int, ...]

    @property
    def merged(self) -> Tuple[int, ...]:
        return tuple(sorted(self.left + self.right))


@dataclass
class Dendrogram:
    """
    Merge sequence produced by agglomerative clustering.

    Attributes:
        leaves: Vertex ids that were clustered
        steps: Merge steps in the order they happened
        linkage: Linkage criterion name
        metric: Name of the dissimilarity or similarity measure
        similarity: True when levels are similarities (higher merges first)
    """

    leaves: List[int]
    steps: List[MergeStep]
    linkage: str
    metric: str
    similarity: bool = False

    def clusters_at(self, level: float) -> List[Tuple[int, ...]]:
        """
        Partition of the leaves after applying every merge up to ``level``.

        For dissimilarities a merge applies when its level is <= ``level``;
        for similarities when it is >= ``level``.
        """
        clusters = {leaf: (leaf,) for leaf in self.leaves}
        for step in self.steps:
            applies = step.level >= level if self.similarity else step.level <= level
            if not applies:
                break
            for member in step.left + step.right:
                clusters[member] = step.merged
        return sorted(set(clusters.values()))

    def leaf_order(self) -> List[int]:
        """Leaf order of the cluster diagram (merged clusters stay adjacent)."""
        if not self.steps:
            return list(self.leaves)
        owner: Dict[int, Tuple[int, ...]] = {leaf: (leaf,) for leaf in self.leaves}
        order: Dict[Tuple[int, ...], List[int]] = {(leaf,): [leaf] for leaf in self.leaves}
        for step in self.steps:
            left = owner[step.left[0]]
            right = owner[step.right[0]]
            sequence = order.pop(left) + order.pop(right)
            order[step.merged] = sequence
            for member in sequence:
                owner[member] = step.merged
        result: List[int] = []
        for sequence in order.values():
            result.extend(sequence)
        return result


@dataclass
class LayoutResult:
    """
    Coordinates (and optional visual attributes) computed by a layout.

    Attributes:
        positions: (x, y) per vertex id
        method: Name of the layout that produced the positions
        sizes: Node size per vertex id (node-size prominence layouts)
        colors: Hex color per vertex id (node-color prominence layouts)
        iterations: Number of iterations run by force-directed layouts
    """

    positions: PositionDict
    method: str
    sizes: Optional[Dict[int, float]] = None
    colors: Optional[Dict[int, str]] = None
    iterations: int = 0

    def apply_to(self, graph: "Graph") -> None:
        """Write the computed positions (and sizes/colors) back to the graph."""
        for vertex_id, (x, y) in self.positions.items():
            graph.set_vertex_position(vertex_id, x, y)
        if self.sizes:
            for vertex_id, size in self.sizes.items():
                graph.vertex(vertex_id).size = size
        if self.colors:
            for vertex_id, color in self.colors.items():
                graph.vertex(vertex_id).color = color


@dataclass
class OperationResult(Generic[T]):
    """
    Typed success/failure outcome returned by the engine facade.

    Attributes:
        operation: Name of the operation that ran
        value: Result value on success
        error: User-facing error on failure
    """

    operation: str
    value: Optional[T] = None
    error: Optional[TieWebError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def needs_confirmation(self) -> bool:
        return isinstance(self.error, ConfirmationRequiredError)

    @classmethod
    def success(cls, operation: str, value: Any) -> "OperationResult":
        return cls(operation=operation, value=value)

    @classmethod
    def failure(cls, operation: str, error: TieWebError) -> "OperationResult":
        if not isinstance(error, TieWebError):
            raise InvariantViolationError(
                f"{operation} failed with a non user-facing error: {error!r}"
            )
        return cls(operation=operation, error=error)

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value
