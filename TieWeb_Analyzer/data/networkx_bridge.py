"""
Conversion between TieWeb graphs and networkx graphs.

Import and export codecs (GraphML, Pajek, adjacency lists and so on) are
handled by networkx readers and writers; this module moves one relation of a
TieWeb graph to and from the networkx representation they work with.
"""

import logging
from typing import Optional, Union

import networkx as nx

from ..core.exceptions import InvalidParameterError
from ..core.graph import Graph, RelationRef

logger = logging.getLogger(__name__)

NODE_ATTRIBUTES = ("label", "x", "y", "size", "color", "shape")


def to_networkx(graph: Graph, relation: Optional[RelationRef] = None) -> Union[nx.DiGraph, nx.Graph]:
    """
    Export one relation of a graph to networkx.

    Directed graphs become ``nx.DiGraph`` (undirected ties become two arcs);
    undirected graphs become ``nx.Graph``. Node and edge attributes carry the
    display payload and the tie weight.

    Args:
        graph: Graph to export
        relation: Relation index or name, defaults to the current relation

    Returns:
        The networkx graph, nodes keyed by vertex id
    """
    result = nx.DiGraph() if graph.directed else nx.Graph()
    result.graph["name"] = graph.name
    result.graph["relation"] = graph.relation_names[graph.relation_index(relation)]

    for vertex in graph.vertices():
        result.add_node(vertex.id, **{attr: getattr(vertex, attr) for attr in NODE_ATTRIBUTES})

    for edge in graph.edges(relation):
        attrs = {"weight": edge.weight, "label": edge.label, "color": edge.color}
        result.add_edge(edge.source, edge.target, **attrs)
        if graph.directed and edge.undirected and edge.source != edge.target:
            result.add_edge(edge.target, edge.source, **attrs)

    logger.debug(
        f"Exported {result.number_of_nodes()} nodes and {result.number_of_edges()} edges to networkx"
    )
    return result


def from_networkx(
    nx_graph: Union[nx.Graph, nx.DiGraph],
    weight: str = "weight",
    relation: str = "default",
    name: str = "",
) -> Graph:
    """
    Build a graph from a networkx graph.

    Integer node keys >= 1 are kept as vertex ids; any other keys are
    numbered 1..n in node order and kept as labels.

    Args:
        nx_graph: Source graph (multigraphs are not supported)
        weight: Edge attribute holding the tie weight (1.0 when missing)
        relation: Name of the relation the ties go into
        name: Network name, defaults to the networkx graph name

    Returns:
        Graph: A new graph with a single relation

    Raises:
        InvalidParameterError: If the source is a multigraph
    """
    if nx_graph.is_multigraph():
        raise InvalidParameterError("Multigraphs cannot be converted; collapse parallel edges first", "nx_graph")

    graph = Graph(
        directed=nx_graph.is_directed(),
        name=name or nx_graph.graph.get("name", ""),
        relation=relation,
    )
    nodes = list(nx_graph.nodes(data=True))
    keep_keys = all(isinstance(node, int) and not isinstance(node, bool) and node >= 1 for node, _ in nodes)

    ids = {}
    for position, (node, attrs) in enumerate(nodes, start=1):
        vertex_id = node if keep_keys else position
        payload = {attr: attrs[attr] for attr in NODE_ATTRIBUTES if attr in attrs}
        payload.setdefault("label", str(node))
        ids[node] = graph.add_vertex(vertex_id, **payload)

    for source, target, attrs in nx_graph.edges(data=True):
        graph.add_edge(
            ids[source],
            ids[target],
            attrs.get(weight, 1.0),
            label=attrs.get("label", ""),
            color=attrs.get("color", "#666666"),
        )

    logger.debug(f"Imported {graph!r} from networkx")
    return graph
