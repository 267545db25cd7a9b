"""
Connectivity analysis module for network connectivity metrics.

This module provides functions for calculating graph-level structure metrics
and validating graph connectivity: connected components, density,
reciprocity, clustering coefficients, diameter and average distance.
"""

# Standard library imports
import logging
from typing import Any, Dict, Optional

# Third-party imports
import networkx as nx

# Local imports
from ..config import AnalysisOptions
from ..core.graph import Graph
from ..data.networkx_bridge import to_networkx
from .matrices import average_distance, diameter
from .paths import DEFAULT_OPTIONS


def density(graph: Graph) -> float:
    """
    Share of possible ties that are present (self-loops excluded).

    Directed graphs count ordered pairs, undirected graphs unordered ones.
    """
    n = graph.vertex_count
    if n < 2:
        return 0.0
    ties = sum(len([t for t in graph.out_neighbors(v) if t != v]) for v in graph.vertex_ids())
    # Undirected ties are visible from both endpoints, so ordered pairs are counted either way
    return ties / (n * (n - 1))


def reciprocity(graph: Graph) -> Dict[str, float]:
    """
    Arc and dyad reciprocity of the current relation.

    Returns:
        Dictionary with:
            - arc_reciprocity (float): Share of ties whose mirror exists
            - dyad_reciprocity (float): Share of connected pairs tied both ways
    """
    arcs = 0
    reciprocated = 0
    pairs = set()
    mutual_pairs = set()
    for v in graph.vertex_ids():
        for t in graph.out_neighbors(v):
            if t == v:
                continue
            arcs += 1
            pair = (min(v, t), max(v, t))
            pairs.add(pair)
            if graph.has_edge(t, v):
                reciprocated += 1
                mutual_pairs.add(pair)
    return {
        "arc_reciprocity": reciprocated / arcs if arcs else 0.0,
        "dyad_reciprocity": len(mutual_pairs) / len(pairs) if pairs else 0.0,
    }


def clustering_coefficients(graph: Graph) -> Dict[int, float]:
    """Local clustering coefficient of every actor (ties taken as undirected)."""
    undirected = to_networkx(graph).to_undirected(as_view=False)
    undirected.remove_edges_from(nx.selfloop_edges(undirected))
    return {v: float(c) for v, c in nx.clustering(undirected).items()}


def calculate_connectivity_metrics(
    graph: Graph,
    options: Optional[AnalysisOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Calculate graph-level connectivity metrics.

    Args:
        graph: Graph to analyze
        options: Analysis options used for the distance-based metrics
        logger: Optional logger instance

    Returns:
        Dictionary containing connectivity metrics:
            - num_components (int): Number of weakly connected components
            - num_strong_components (int): Number of strongly connected components
            - largest_component_size (int): Number of nodes in largest component
            - largest_component_pct (float): Percentage of nodes in largest component
            - avg_clustering (float): Average clustering coefficient
            - density (float): Graph density (0 to 1)
            - arc_reciprocity (float): Share of reciprocated ties
            - dyad_reciprocity (float): Share of mutual dyads
            - diameter (float): Largest finite geodesic distance
            - average_distance (float): Mean finite geodesic distance
            - is_connected (bool): Whether every actor reaches every other
    """
    if logger is None:
        logger = logging.getLogger(__name__)
    options = options or DEFAULT_OPTIONS

    graph_size = graph.vertex_count
    if graph_size == 0:
        logger.warning("Empty graph provided for connectivity analysis")
        return {
            "num_components": 0,
            "num_strong_components": 0,
            "largest_component_size": 0,
            "largest_component_pct": 0.0,
            "avg_clustering": 0.0,
            "density": 0.0,
            "arc_reciprocity": 0.0,
            "dyad_reciprocity": 0.0,
            "diameter": 0.0,
            "average_distance": 0.0,
            "is_connected": False,
        }

    logger.debug(f"Calculating connectivity metrics for graph with {graph_size:,} nodes")

    nx_graph = to_networkx(graph)
    undirected = nx_graph.to_undirected(as_view=True) if graph.directed else nx_graph
    components = list(nx.connected_components(undirected))
    if graph.directed:
        num_strong = nx.number_strongly_connected_components(nx_graph)
    else:
        num_strong = len(components)

    largest_component_size = max(len(component) for component in components)
    largest_component_pct = (largest_component_size / graph_size) * 100

    coefficients = clustering_coefficients(graph)
    avg_clustering = sum(coefficients.values()) / graph_size
    graph_density = density(graph)

    metrics = {
        "num_components": len(components),
        "num_strong_components": num_strong,
        "largest_component_size": largest_component_size,
        "largest_component_pct": largest_component_pct,
        "avg_clustering": avg_clustering,
        "density": graph_density,
        **reciprocity(graph),
        "diameter": diameter(graph, options),
        "average_distance": average_distance(graph, options),
        "is_connected": num_strong == 1,
    }

    logger.debug(
        f"Connectivity metrics: {len(components)} components, "
        f"{largest_component_pct:.1f}% in largest, "
        f"density={graph_density:.4f}, clustering={avg_clustering:.4f}"
    )
    return metrics


def validate_connectivity(graph: Graph, logger: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """
    Validate graph connectivity and identify disconnected components.

    Args:
        graph: Graph to validate
        logger: Optional logger instance for logging warnings

    Returns:
        Dictionary containing validation results:
            - is_connected (bool): Whether the graph is (weakly) connected
            - num_components (int): Number of connected components
            - component_sizes (list[int]): Sizes of all components (sorted descending)
            - isolated_nodes (list[int]): Isolated vertex ids
            - num_isolated_nodes (int): Count of isolated nodes
            - largest_component_pct (float): Percentage of nodes in largest component
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    graph_size = graph.vertex_count
    if graph_size == 0:
        logger.warning("Empty graph provided for connectivity validation")
        return {
            "is_connected": False,
            "num_components": 0,
            "component_sizes": [],
            "isolated_nodes": [],
            "num_isolated_nodes": 0,
            "largest_component_pct": 0.0,
        }

    nx_graph = to_networkx(graph)
    undirected = nx_graph.to_undirected(as_view=True) if graph.directed else nx_graph
    components = list(nx.connected_components(undirected))
    num_components = len(components)
    component_sizes = sorted((len(component) for component in components), reverse=True)
    largest_component_pct = (component_sizes[0] / graph_size) * 100

    isolated_nodes = graph.isolates()
    is_connected = num_components == 1

    if is_connected:
        logger.debug("Graph is fully connected")
    else:
        logger.warning(f"Graph is not fully connected: {num_components} components found")
        logger.warning(f"Largest component contains {largest_component_pct:.1f}% of nodes")
        if isolated_nodes:
            logger.warning(f"Found {len(isolated_nodes)} isolated nodes (degree = 0)")
        if num_components <= 10:
            logger.debug(f"Component sizes: {component_sizes}")
        else:
            logger.debug(
                f"Component sizes (top 10): {component_sizes[:10]} (+{num_components - 10} more)"
            )

    return {
        "is_connected": is_connected,
        "num_components": num_components,
        "component_sizes": component_sizes,
        "isolated_nodes": isolated_nodes,
        "num_isolated_nodes": len(isolated_nodes),
        "largest_component_pct": largest_component_pct,
    }


__all__ = [
    "density",
    "reciprocity",
    "clustering_coefficients",
    "calculate_connectivity_metrics",
    "validate_connectivity",
]
