"""
Structural edits of a graph: symmetrization, dichotomization and building
cliques, stars, cycles and lines among selected actors.

Every function mutates the graph through its public API only. Functions that
derive a new tie pattern store it in a new relation and make it current,
leaving the original relation untouched.
"""

import itertools
import logging
from typing import List, Optional, Sequence

from .exceptions import InsufficientSelectionError, InvalidParameterError
from .graph import Graph

logger = logging.getLogger(__name__)


def symmetrize(graph: Graph) -> int:
    """
    Add the mirror of every arc of the current relation ("all arcs" rule).

    Mirrors get the weight of the arc they mirror. Existing mirrors are kept.

    Args:
        graph: Graph to modify

    Returns:
        int: Number of arcs added
    """
    added = 0
    for edge in graph.edges():
        if edge.undirected or edge.source == edge.target:
            continue
        if not graph.has_edge(edge.target, edge.source):
            graph.add_edge(edge.target, edge.source, edge.weight)
            added += 1
    logger.debug(f"Symmetrized relation {graph.current_relation_name!r}: {added} arcs added")
    return added


def _unique_relation_name(graph: Graph, base: str) -> str:
    name = base
    suffix = 2
    while name in graph.relation_names:
        name = f"{base} {suffix}"
        suffix += 1
    return name


def symmetrize_strong_ties(graph: Graph, all_relations: bool = False, name: Optional[str] = None) -> int:
    """
    Create a relation holding only strong (reciprocated) ties.

    Args:
        graph: Graph to modify
        all_relations: Count a tie as strong when it is reciprocated in any
            relation, instead of the current one only
        name: Name of the new relation

    Returns:
        int: Index of the new relation (which becomes current)
    """
    sources = range(graph.relation_count) if all_relations else [graph.current_relation]
    strong = {}
    for relation in sources:
        for edge in graph.edges(relation):
            if edge.source == edge.target:
                continue
            reciprocated = edge.undirected or graph.has_edge(edge.target, edge.source, relation)
            if reciprocated:
                key = (min(edge.source, edge.target), max(edge.source, edge.target))
                strong[key] = max(strong.get(key, 0.0), edge.weight)

    index = graph.add_relation(name or _unique_relation_name(graph, "Strong ties"))
    for (a, b), weight in sorted(strong.items()):
        graph.add_edge(a, b, weight, relation=index, undirected=True)
    graph.set_current_relation(index)
    logger.debug(f"Strong-tie symmetrization kept {len(strong)} ties")
    return index


def symmetrize_cocitation(graph: Graph, name: Optional[str] = None) -> int:
    """
    Create a relation tying i and j whenever some actor cites both of them.

    Args:
        graph: Graph to modify
        name: Name of the new relation

    Returns:
        int: Index of the new relation (which becomes current)
    """
    ids = graph.vertex_ids()
    citers = {v: set(graph.in_neighbors(v)) for v in ids}
    pairs = []
    for i, j in itertools.combinations(ids, 2):
        shared = len(citers[i] & citers[j])
        if shared > 0:
            pairs.append((i, j, shared))

    index = graph.add_relation(name or _unique_relation_name(graph, "Cocitation"))
    for i, j, shared in pairs:
        graph.add_edge(i, j, float(shared), relation=index, undirected=True)
    graph.set_current_relation(index)
    return index


def dichotomize(graph: Graph, threshold: float, name: Optional[str] = None) -> int:
    """
    Create a binary relation keeping the ties whose weight exceeds a threshold.

    Args:
        graph: Graph to modify
        threshold: Ties with weight > threshold become 1, the rest are dropped
        name: Name of the new relation

    Returns:
        int: Index of the new relation (which becomes current)
    """
    kept = [edge for edge in graph.edges() if edge.weight > threshold]
    index = graph.add_relation(name or _unique_relation_name(graph, f"Binary > {threshold:g}"))
    for edge in kept:
        graph.add_edge(edge.source, edge.target, 1.0, relation=index, undirected=edge.undirected)
    graph.set_current_relation(index)
    logger.debug(f"Dichotomized at {threshold:g}: {len(kept)} ties kept")
    return index


def _validated_selection(graph: Graph, vertex_ids: Sequence[int], operation: str) -> List[int]:
    selection = list(dict.fromkeys(vertex_ids))
    if len(selection) < 3:
        raise InsufficientSelectionError(operation, len(selection))
    for vertex_id in selection:
        graph.vertex(vertex_id)
    return selection


def add_clique(graph: Graph, vertex_ids: Sequence[int], weight: float = 1.0) -> int:
    """
    Tie every pair of the selected actors in both directions.

    Raises:
        InsufficientSelectionError: If fewer than 3 distinct actors are selected
        VertexNotFoundError: If a selected actor does not exist

    Returns:
        int: Number of ties created or updated
    """
    selection = _validated_selection(graph, vertex_ids, "Clique")
    created = 0
    for a, b in itertools.combinations(selection, 2):
        if graph.directed:
            graph.add_edge(a, b, weight)
            graph.add_edge(b, a, weight)
            created += 2
        else:
            graph.add_edge(a, b, weight)
            created += 1
    return created


def add_star(graph: Graph, vertex_ids: Sequence[int], center: Optional[int] = None,
             weight: float = 1.0) -> int:
    """
    Tie a center actor to every other selected actor.

    Args:
        graph: Graph to modify
        vertex_ids: Selected actors
        center: Center actor, defaults to the first selected one
        weight: Tie weight

    Returns:
        int: Number of ties created or updated
    """
    selection = _validated_selection(graph, vertex_ids, "Star")
    if center is None:
        center = selection[0]
    elif center not in selection:
        raise InvalidParameterError(f"Star center {center} is not among the selected actors", "center")
    created = 0
    for leaf in selection:
        if leaf == center:
            continue
        graph.add_edge(center, leaf, weight)
        if graph.directed:
            graph.add_edge(leaf, center, weight)
        created += 1
    return created


def add_cycle(graph: Graph, vertex_ids: Sequence[int], weight: float = 1.0) -> int:
    """Tie the selected actors in order and close the loop (last -> first)."""
    selection = _validated_selection(graph, vertex_ids, "Cycle")
    for a, b in zip(selection, selection[1:] + selection[:1]):
        graph.add_edge(a, b, weight)
    return len(selection)


def add_line(graph: Graph, vertex_ids: Sequence[int], weight: float = 1.0) -> int:
    """Tie the selected actors in order without closing the loop."""
    selection = _validated_selection(graph, vertex_ids, "Line")
    for a, b in zip(selection, selection[1:]):
        graph.add_edge(a, b, weight)
    return len(selection) - 1
