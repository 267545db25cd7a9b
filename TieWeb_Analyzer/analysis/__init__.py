"""
Analysis layer for TieWeb social network analysis.

This module provides the network analysis algorithms: graph matrices and
shortest paths, centrality and prestige indices, structural equivalence and
hierarchical clustering, clique and triad censuses, and graph-level
connectivity metrics.
"""

from .centrality import (
    betweenness_centrality,
    closeness_centrality,
    degree_centrality,
    eccentricity_centrality,
    eigenvector_centrality,
    influence_range_closeness,
    information_centrality,
    power_centrality,
    stress_centrality,
)
from .clustering import LINKAGES, cluster_actors, hierarchical_clustering
from .community import clique_census, triad_census
from .connectivity import calculate_connectivity_metrics, validate_connectivity
from .equivalence import (
    dissimilarity_matrix,
    pearson_correlation_matrix,
    similarity_matrix,
    tie_profiles,
)
from .indices import ProminenceIndex, compute_index
from .matrices import (
    adjacency_inverse,
    adjacency_matrix,
    average_distance,
    cocitation_matrix,
    degree_matrix,
    diameter,
    distance_matrix,
    geodesics_matrix,
    invert_matrix,
    is_connected,
    laplacian_matrix,
    reachability_matrix,
    total_walks_matrix,
    transpose_matrix,
    walks_matrix,
)
from .paths import ShortestPaths, geodesic_distance, shortest_paths
from .prestige import degree_prestige, pagerank_prestige, proximity_prestige

__all__ = [
    "ProminenceIndex",
    "compute_index",
    "degree_centrality",
    "closeness_centrality",
    "influence_range_closeness",
    "betweenness_centrality",
    "stress_centrality",
    "eccentricity_centrality",
    "power_centrality",
    "information_centrality",
    "eigenvector_centrality",
    "degree_prestige",
    "pagerank_prestige",
    "proximity_prestige",
    "ShortestPaths",
    "geodesic_distance",
    "shortest_paths",
    "adjacency_matrix",
    "transpose_matrix",
    "cocitation_matrix",
    "degree_matrix",
    "laplacian_matrix",
    "distance_matrix",
    "geodesics_matrix",
    "reachability_matrix",
    "walks_matrix",
    "total_walks_matrix",
    "invert_matrix",
    "adjacency_inverse",
    "diameter",
    "average_distance",
    "is_connected",
    "tie_profiles",
    "pearson_correlation_matrix",
    "similarity_matrix",
    "dissimilarity_matrix",
    "LINKAGES",
    "hierarchical_clustering",
    "cluster_actors",
    "clique_census",
    "triad_census",
    "calculate_connectivity_metrics",
    "validate_connectivity",
]
