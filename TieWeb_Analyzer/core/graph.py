"""
Graph store for multi-relational social networks.

The store owns every vertex, tie and relation. Vertices live in an arena keyed
by stable integer ids; ties are addressed through per-relation adjacency maps
(source id -> target id -> Edge). Analysis engines only ever hold ids and
re-query the store, so removing an actor never leaves dangling references.

Classes:
    Graph: The multi-relational graph store
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

from .exceptions import (
    EdgeNotFoundError,
    InvalidParameterError,
    InvariantViolationError,
    MultiRelationConstraintError,
    VertexNotFoundError,
)
from .types import Edge, EdgeType, Vertex

logger = logging.getLogger(__name__)

RelationRef = Union[int, str]

DEFAULT_RELATION_NAME = "default"


@dataclass
class _Relation:
    """Independent tie storage of one relation."""

    name: str
    out: Dict[int, Dict[int, Edge]] = field(default_factory=dict)
    inc: Dict[int, Dict[int, Edge]] = field(default_factory=dict)


class Graph:
    """
    Multi-relational graph of actors and ties.

    The directedness flag decides the default semantics of new ties: in an
    undirected graph every tie is stored once as an undirected edge and is
    visible from both endpoints, so weight(i, j) == weight(j, i) by
    construction. A directed graph may still hold individual undirected ties.

    Attributes:
        directed: Whether new ties default to arcs
        name: Optional network name
        revision: Counter bumped by every mutation
    """

    def __init__(self, directed: bool = True, name: str = "", relation: str = DEFAULT_RELATION_NAME):
        """
        Initialize an empty graph with a single relation.

        Args:
            directed: Whether the network is directed
            name: Optional network name
            relation: Name of the initial relation
        """
        self.directed = directed
        self.name = name
        self.revision = 0
        self._vertices: Dict[int, Vertex] = {}
        self._next_id = 1
        self._relations: List[_Relation] = [_Relation(relation)]
        self._current = 0

    # ==================== Vertices ====================

    def add_vertex(
        self,
        vertex_id: Optional[int] = None,
        label: Optional[str] = None,
        x: float = 0.0,
        y: float = 0.0,
        size: float = 8.0,
        color: str = "#FF0000",
        shape: str = "circle",
    ) -> int:
        """
        Create a new actor.

        Args:
            vertex_id: Explicit id; the next free id is used when omitted
            label: Display label, defaults to the id
            x: Horizontal position
            y: Vertical position
            size: Display size
            color: Display color
            shape: Display shape

        Returns:
            int: The id of the new vertex

        Raises:
            InvalidParameterError: If the id is taken or not a positive integer
        """
        if vertex_id is None:
            vertex_id = self._next_id
        elif not isinstance(vertex_id, int) or isinstance(vertex_id, bool) or vertex_id < 1:
            raise InvalidParameterError(f"Vertex id must be a positive integer, got {vertex_id!r}", "vertex_id")
        elif vertex_id in self._vertices:
            raise InvalidParameterError(f"Vertex {vertex_id} already exists", "vertex_id")

        self._vertices[vertex_id] = Vertex(
            id=vertex_id,
            label=str(vertex_id) if label is None else label,
            x=x,
            y=y,
            size=size,
            color=color,
            shape=shape,
        )
        self._next_id = max(self._next_id, vertex_id + 1)
        self._touch()
        return vertex_id

    def add_vertices(self, count: int) -> List[int]:
        """Create ``count`` actors with fresh ids and return the ids."""
        return [self.add_vertex() for _ in range(count)]

    def remove_vertex(self, vertex_id: int) -> None:
        """
        Remove an actor and every tie incident to it.

        Raises:
            VertexNotFoundError: If the vertex does not exist
            MultiRelationConstraintError: If more than one relation exists
        """
        self._require_vertex(vertex_id)
        if len(self._relations) > 1:
            raise MultiRelationConstraintError(vertex_id, len(self._relations))

        relation = self._relations[0]
        for target in list(relation.out.get(vertex_id, {})):
            self._drop_tie(relation, vertex_id, target)
        for source in list(relation.inc.get(vertex_id, {})):
            self._drop_tie(relation, source, vertex_id)
        relation.out.pop(vertex_id, None)
        relation.inc.pop(vertex_id, None)
        del self._vertices[vertex_id]
        self._touch()
        logger.debug(f"Removed vertex {vertex_id}")

    def has_vertex(self, vertex_id: int) -> bool:
        return vertex_id in self._vertices

    def vertex(self, vertex_id: int) -> Vertex:
        self._require_vertex(vertex_id)
        return self._vertices[vertex_id]

    def vertex_ids(self) -> List[int]:
        """All vertex ids in ascending order."""
        return sorted(self._vertices)

    def vertices(self) -> List[Vertex]:
        return [self._vertices[v] for v in self.vertex_ids()]

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, vertex_id: object) -> bool:
        return vertex_id in self._vertices

    def __iter__(self) -> Iterator[int]:
        return iter(self.vertex_ids())

    def set_vertex_position(self, vertex_id: int, x: float, y: float) -> None:
        vertex = self.vertex(vertex_id)
        vertex.x = float(x)
        vertex.y = float(y)

    def set_vertex_label(self, vertex_id: int, label: str) -> None:
        self.vertex(vertex_id).label = label

    # ==================== Ties ====================

    def add_edge(
        self,
        source: int,
        target: int,
        weight: float = 1.0,
        relation: Optional[RelationRef] = None,
        undirected: Optional[bool] = None,
        label: str = "",
        color: str = "#666666",
    ) -> Edge:
        """
        Create a tie (or update the weight of an existing one).

        Args:
            source: Source vertex id
            target: Target vertex id
            weight: Tie weight
            relation: Relation index or name, defaults to the current relation
            undirected: Create an undirected edge; defaults to the graph's mode
            label: Display label
            color: Display color

        Returns:
            Edge: The stored tie

        Raises:
            VertexNotFoundError: If an endpoint does not exist
        """
        self._require_vertex(source)
        self._require_vertex(target)
        index = self._resolve_relation(relation)
        rel = self._relations[index]
        if undirected is None:
            undirected = not self.directed
        if not self.directed:
            undirected = True

        existing = rel.out.get(source, {}).get(target)
        if existing is not None and (existing.undirected or not undirected):
            existing.weight = float(weight)
            self._touch()
            return existing

        edge = Edge(
            source=source,
            target=target,
            weight=float(weight),
            relation=index,
            undirected=undirected,
            label=label,
            color=color,
        )
        if undirected:
            if existing is not None:
                self._drop_tie(rel, source, target)
            mirror = rel.out.get(target, {}).get(source)
            if mirror is not None:
                self._drop_tie(rel, target, source)
            self._link(rel, source, target, edge)
            if source != target:
                self._link(rel, target, source, edge)
        else:
            self._link(rel, source, target, edge)
        self._touch()
        return edge

    def remove_edge(self, source: int, target: int, relation: Optional[RelationRef] = None) -> None:
        """
        Remove a tie. Removing an undirected tie removes it from both endpoints.

        Raises:
            VertexNotFoundError: If an endpoint does not exist
            EdgeNotFoundError: If there is no such tie in the relation
        """
        rel = self._relations[self._resolve_relation(relation)]
        self._require_tie(rel, source, target)
        self._drop_tie(rel, source, target)
        self._touch()

    def has_edge(self, source: int, target: int, relation: Optional[RelationRef] = None) -> bool:
        rel = self._relations[self._resolve_relation(relation)]
        return target in rel.out.get(source, {})

    def edge(self, source: int, target: int, relation: Optional[RelationRef] = None) -> Edge:
        rel = self._relations[self._resolve_relation(relation)]
        return self._require_tie(rel, source, target)

    def edge_weight(self, source: int, target: int, relation: Optional[RelationRef] = None) -> float:
        """Weight of the tie source -> target, or 0.0 when there is none."""
        self._require_vertex(source)
        self._require_vertex(target)
        rel = self._relations[self._resolve_relation(relation)]
        edge = rel.out.get(source, {}).get(target)
        return edge.weight if edge is not None else 0.0

    def set_edge_weight(
        self, source: int, target: int, weight: float, relation: Optional[RelationRef] = None
    ) -> None:
        edge = self.edge(source, target, relation)
        edge.weight = float(weight)
        self._touch()

    def edge_type(self, source: int, target: int, relation: Optional[RelationRef] = None) -> EdgeType:
        """Type of a tie, derived from whether its mirror exists."""
        rel = self._relations[self._resolve_relation(relation)]
        edge = self._require_tie(rel, source, target)
        if edge.undirected:
            return EdgeType.UNDIRECTED
        if source in rel.out.get(target, {}):
            return EdgeType.RECIPROCATED
        return EdgeType.DIRECTED

    def set_edge_type(
        self,
        source: int,
        target: int,
        edge_type: EdgeType,
        relation: Optional[RelationRef] = None,
    ) -> None:
        """
        Change the type of an existing tie.

        UNDIRECTED merges the tie and its mirror into one undirected edge,
        RECIPROCATED makes sure an arc of equal weight runs the other way, and
        DIRECTED keeps only the source -> target arc.

        Raises:
            EdgeNotFoundError: If the tie does not exist
            InvalidParameterError: If a non-undirected type is requested in an undirected graph
        """
        index = self._resolve_relation(relation)
        rel = self._relations[index]
        edge = self._require_tie(rel, source, target)
        weight, label, color = edge.weight, edge.label, edge.color

        if edge_type is EdgeType.UNDIRECTED:
            self.add_edge(source, target, weight, index, undirected=True, label=label, color=color)
            return
        if not self.directed:
            raise InvalidParameterError(
                f"Ties of an undirected graph cannot become {edge_type.value}", "edge_type"
            )

        self._drop_tie(rel, source, target)
        if source in rel.out.get(target, {}):
            self._drop_tie(rel, target, source)
        self._link(rel, source, target, Edge(source, target, weight, index, False, label, color))
        if edge_type is EdgeType.RECIPROCATED and source != target:
            self._link(rel, target, source, Edge(target, source, weight, index, False, label, color))
        self._touch()

    def edges(self, relation: Optional[RelationRef] = None) -> List[Edge]:
        """Every tie of a relation once, ordered by (source, target)."""
        rel = self._relations[self._resolve_relation(relation)]
        seen = set()
        result = []
        for source in sorted(rel.out):
            for target in sorted(rel.out[source]):
                edge = rel.out[source][target]
                if id(edge) in seen:
                    continue
                seen.add(id(edge))
                result.append(edge)
        return result

    def edge_count(self, relation: Optional[RelationRef] = None) -> int:
        return len(self.edges(relation))

    def out_neighbors(self, vertex_id: int, relation: Optional[RelationRef] = None) -> Dict[int, float]:
        """Targets of the ties leaving a vertex, mapped to the tie weight."""
        self._require_vertex(vertex_id)
        rel = self._relations[self._resolve_relation(relation)]
        return {t: e.weight for t, e in rel.out.get(vertex_id, {}).items()}

    def in_neighbors(self, vertex_id: int, relation: Optional[RelationRef] = None) -> Dict[int, float]:
        """Sources of the ties entering a vertex, mapped to the tie weight."""
        self._require_vertex(vertex_id)
        rel = self._relations[self._resolve_relation(relation)]
        return {s: e.weight for s, e in rel.inc.get(vertex_id, {}).items()}

    def out_degree(self, vertex_id: int, weighted: bool = False) -> float:
        neighbors = self.out_neighbors(vertex_id)
        return float(sum(neighbors.values())) if weighted else float(len(neighbors))

    def in_degree(self, vertex_id: int, weighted: bool = False) -> float:
        neighbors = self.in_neighbors(vertex_id)
        return float(sum(neighbors.values())) if weighted else float(len(neighbors))

    def is_isolated(self, vertex_id: int) -> bool:
        """True when the vertex has no tie to or from another vertex."""
        others_out = [t for t in self.out_neighbors(vertex_id) if t != vertex_id]
        others_in = [s for s in self.in_neighbors(vertex_id) if s != vertex_id]
        return not others_out and not others_in

    def isolates(self) -> List[int]:
        return [v for v in self.vertex_ids() if self.is_isolated(v)]

    def is_weighted(self) -> bool:
        """True when any tie of the current relation has a weight other than 1."""
        return any(edge.weight != 1.0 for edge in self.edges())

    # ==================== Relations ====================

    def add_relation(self, name: str) -> int:
        """
        Append a new, empty relation.

        Returns:
            int: Index of the new relation

        Raises:
            InvalidParameterError: If the name is empty or already used
        """
        if not name:
            raise InvalidParameterError("Relation name cannot be empty", "name")
        if name in self.relation_names:
            raise InvalidParameterError(f"Relation '{name}' already exists", "name")
        self._relations.append(_Relation(name))
        self._touch()
        return len(self._relations) - 1

    def remove_relation(self, relation: RelationRef) -> None:
        """
        Remove a relation and its ties.

        Raises:
            InvalidParameterError: If it is the only relation or does not exist
        """
        index = self._resolve_relation(relation)
        if len(self._relations) == 1:
            raise InvalidParameterError("The last relation of a graph cannot be removed", "relation")
        del self._relations[index]
        for position, rel in enumerate(self._relations):
            for edge in self._unique_edges(rel):
                edge.relation = position
        if self._current >= len(self._relations) or self._current > index:
            self._current = max(0, self._current - 1)
        self._touch()

    def set_current_relation(self, relation: RelationRef) -> None:
        """Switch the relation every analysis runs over."""
        self._current = self._resolve_relation(relation)
        self._touch()

    @property
    def current_relation(self) -> int:
        return self._current

    @property
    def current_relation_name(self) -> str:
        return self._relations[self._current].name

    @property
    def relation_names(self) -> List[str]:
        return [rel.name for rel in self._relations]

    @property
    def relation_count(self) -> int:
        return len(self._relations)

    def relation_index(self, relation: RelationRef) -> int:
        return self._resolve_relation(relation)

    # ==================== Graph-wide operations ====================

    def set_directed(self, directed: bool) -> None:
        """
        Change the directedness of the whole network.

        Turning a graph undirected merges every arc with its mirror into one
        undirected tie (keeping the larger weight). Turning it directed splits
        every undirected tie into two reciprocated arcs.
        """
        if directed == self.directed:
            return
        for index, rel in enumerate(self._relations):
            ties = self._unique_edges(rel)
            if directed:
                for edge in ties:
                    if not edge.undirected:
                        continue
                    self._drop_tie(rel, edge.source, edge.target)
                    self._link(rel, edge.source, edge.target, Edge(
                        edge.source, edge.target, edge.weight, index, False, edge.label, edge.color))
                    if edge.source != edge.target:
                        self._link(rel, edge.target, edge.source, Edge(
                            edge.target, edge.source, edge.weight, index, False, edge.label, edge.color))
            else:
                merged: Dict[tuple, Edge] = {}
                for edge in ties:
                    key = (min(edge.source, edge.target), max(edge.source, edge.target))
                    if key not in merged or edge.weight > merged[key].weight:
                        merged[key] = edge
                rel.out.clear()
                rel.inc.clear()
                for (a, b), edge in merged.items():
                    tie = Edge(a, b, edge.weight, index, True, edge.label, edge.color)
                    self._link(rel, a, b, tie)
                    if a != b:
                        self._link(rel, b, a, tie)
        self.directed = directed
        self._touch()
        logger.debug(f"Graph switched to {'directed' if directed else 'undirected'} mode")

    def copy(self) -> "Graph":
        """Deep copy of the whole store (vertices, relations and ties)."""
        return copy.deepcopy(self)

    def check_integrity(self) -> None:
        """
        Verify the id bookkeeping of every relation.

        Raises:
            InvariantViolationError: If an adjacency map references a missing
                vertex or the outbound and inbound maps disagree
        """
        for index, rel in enumerate(self._relations):
            for source, targets in rel.out.items():
                if source not in self._vertices:
                    raise InvariantViolationError(
                        f"Relation {rel.name!r} holds ties of missing vertex {source}")
                for target, edge in targets.items():
                    if target not in self._vertices:
                        raise InvariantViolationError(
                            f"Relation {rel.name!r} holds a tie to missing vertex {target}")
                    if rel.inc.get(target, {}).get(source) is not edge:
                        raise InvariantViolationError(
                            f"Inbound map of relation {rel.name!r} misses {source} -> {target}")
                    if edge.relation != index:
                        raise InvariantViolationError(
                            f"Tie {source} -> {target} is tagged with relation {edge.relation}, "
                            f"stored in {index}")
            for target, sources in rel.inc.items():
                for source in sources:
                    if rel.out.get(source, {}).get(target) is None:
                        raise InvariantViolationError(
                            f"Outbound map of relation {rel.name!r} misses {source} -> {target}")

    def __repr__(self) -> str:
        kind = "directed" if self.directed else "undirected"
        return (
            f"<Graph {self.name!r} {kind}: {self.vertex_count} vertices, "
            f"{self.edge_count()} ties, relation {self.current_relation_name!r}>"
        )

    # ==================== Internals ====================

    def _touch(self) -> None:
        self.revision += 1

    def _require_vertex(self, vertex_id: int) -> None:
        if vertex_id not in self._vertices:
            raise VertexNotFoundError(vertex_id)

    def _require_tie(self, rel: _Relation, source: int, target: int) -> Edge:
        self._require_vertex(source)
        self._require_vertex(target)
        edge = rel.out.get(source, {}).get(target)
        if edge is None:
            raise EdgeNotFoundError(source, target, rel.name)
        return edge

    def _resolve_relation(self, relation: Optional[RelationRef]) -> int:
        if relation is None:
            return self._current
        if isinstance(relation, str):
            for index, rel in enumerate(self._relations):
                if rel.name == relation:
                    return index
            raise InvalidParameterError(f"Unknown relation '{relation}'", "relation")
        if isinstance(relation, int) and 0 <= relation < len(self._relations):
            return relation
        raise InvalidParameterError(f"Unknown relation {relation!r}", "relation")

    @staticmethod
    def _link(rel: _Relation, source: int, target: int, edge: Edge) -> None:
        rel.out.setdefault(source, {})[target] = edge
        rel.inc.setdefault(target, {})[source] = edge

    @staticmethod
    def _unlink(rel: _Relation, source: int, target: int) -> None:
        rel.out.get(source, {}).pop(target, None)
        rel.inc.get(target, {}).pop(source, None)

    def _drop_tie(self, rel: _Relation, source: int, target: int) -> None:
        edge = rel.out.get(source, {}).get(target)
        if edge is None:
            return
        self._unlink(rel, source, target)
        if edge.undirected and source != target:
            self._unlink(rel, target, source)

    @staticmethod
    def _unique_edges(rel: _Relation) -> List[Edge]:
        seen = set()
        ties = []
        for targets in rel.out.values():
            for edge in targets.values():
                if id(edge) not in seen:
                    seen.add(id(edge))
                    ties.append(edge)
        return ties
