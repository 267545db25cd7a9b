"""
Cohesive subgroup analysis: clique census and triad census.
"""

import logging
from collections import Counter
from typing import Optional

import networkx as nx
import numpy as np

from ..core.graph import Graph
from ..core.matrix import LabeledMatrix
from ..core.types import CliqueCensus, TriadCensus
from ..data.networkx_bridge import to_networkx
from ..utils.validation import (
    CancellationToken,
    ProgressObserver,
    ProgressTracker,
    check_revision,
    require_confirmation,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

TRIAD_TYPES = (
    "003", "012", "102", "021D", "021U", "021C", "111D", "111U",
    "030T", "030C", "201", "120D", "120U", "120C", "210", "300",
)


def reciprocated_graph(graph: Graph) -> nx.Graph:
    """
    Undirected networkx graph of the ties that count for cliques.

    Undirected ties always count; arcs only count when reciprocated.
    Self-loops are ignored.
    """
    symmetric = nx.Graph()
    symmetric.add_nodes_from(graph.vertex_ids())
    for edge in graph.edges():
        if edge.source == edge.target:
            continue
        if edge.undirected or graph.has_edge(edge.target, edge.source):
            symmetric.add_edge(edge.source, edge.target)
    return symmetric


def clique_census(
    graph: Graph,
    min_size: int = 2,
    threshold: Optional[int] = None,
    confirmed: bool = False,
) -> CliqueCensus:
    """
    Find every maximal clique and derive the membership structures.

    Args:
        graph: Graph to analyze
        min_size: Smallest clique size to report
        threshold: Size above which ``confirmed`` is required
        confirmed: Whether the caller confirmed running on a large graph

    Returns:
        CliqueCensus: Cliques (largest first), counts by size, actor-by-clique
        membership and actor-by-actor co-membership matrices

    Raises:
        InvalidParameterError: If min_size is not a positive integer
        ConfirmationRequiredError: If the graph exceeds the threshold unconfirmed
    """
    validate_positive_integer(min_size, "min_size")
    if threshold is not None:
        require_confirmation("Clique census", graph.vertex_count, threshold, confirmed)
    revision = graph.revision

    cliques = [
        tuple(sorted(clique))
        for clique in nx.find_cliques(reciprocated_graph(graph))
        if len(clique) >= min_size
    ]
    cliques.sort(key=lambda clique: (-len(clique), clique))

    ids = graph.vertex_ids()
    positions = {v: i for i, v in enumerate(ids)}
    membership = np.zeros((len(ids), len(cliques)))
    for column, clique in enumerate(cliques):
        for vertex_id in clique:
            membership[positions[vertex_id], column] = 1.0

    by_size = dict(sorted(Counter(len(clique) for clique in cliques).items()))
    check_revision(graph, revision, "clique census")
    logger.debug(f"Found {len(cliques)} maximal cliques of size >= {min_size}")

    clique_numbers = list(range(1, len(cliques) + 1))
    return CliqueCensus(
        cliques=cliques,
        by_size=by_size,
        membership=LabeledMatrix(membership, ids, clique_numbers, name="Clique membership"),
        co_membership=LabeledMatrix(membership @ membership.T, ids, name="Clique co-membership"),
    )


def triad_census(
    graph: Graph,
    observer: Optional[ProgressObserver] = None,
    token: Optional[CancellationToken] = None,
) -> TriadCensus:
    """
    Count every triad of the network by its M-A-N class.

    Undirected ties count as mutual dyads and self-loops are ignored.

    Args:
        graph: Graph to analyze
        observer: Progress callback
        token: Cancellation token

    Returns:
        TriadCensus: Count per class, in the canonical class order
    """
    revision = graph.revision
    nx_graph = to_networkx(graph)
    if not nx_graph.is_directed():
        nx_graph = nx_graph.to_directed()
    nx_graph.remove_edges_from(list(nx.selfloop_edges(nx_graph)))

    with ProgressTracker(1, "triad census", logger, observer, token) as tracker:
        census = nx.triadic_census(nx_graph)
        tracker.update(1)

    check_revision(graph, revision, "triad census")
    return TriadCensus(counts={triad: census[triad] for triad in TRIAD_TYPES})
