"""
Unit tests for structural equivalence measures.

Tests tie profiles, Pearson correlation and the similarity and dissimilarity
measures with and without the actors' own positions.
"""

import math

import numpy as np
import pytest

from TieWeb_Analyzer.analysis.equivalence import (
    dissimilarity_matrix,
    pearson_correlation_matrix,
    similarity_matrix,
    tie_profiles,
)
from TieWeb_Analyzer.core.exceptions import InvalidParameterError
from TieWeb_Analyzer.core.graph import Graph

pytestmark = [pytest.mark.unit, pytest.mark.analysis]


class TestTieProfiles:
    """Test tie profile extraction."""

    def test_rows_columns_and_both(self, directed_triangle):
        """Rows hold outbound ties, columns inbound ties, both concatenates them."""
        ids, rows = tie_profiles(directed_triangle, variables="rows")
        _, columns = tie_profiles(directed_triangle, variables="columns")
        _, both = tie_profiles(directed_triangle, variables="both")
        assert ids == [1, 2, 3]
        np.testing.assert_array_equal(rows[0], [0.0, 1.0, 0.0])
        np.testing.assert_array_equal(columns[0], [0.0, 0.0, 1.0])
        assert both.shape == (3, 6)

    def test_unreachable_distances_become_n(self, two_triangles):
        """Distance profiles replace infinity by the number of actors."""
        _, profiles = tie_profiles(two_triangles, matrix="distances")
        np.testing.assert_array_equal(profiles[0], [0.0, 1.0, 1.0, 6.0, 6.0, 6.0])

    def test_unknown_matrix_rejected(self, star_graph):
        """Only adjacency and distance profiles exist."""
        with pytest.raises(InvalidParameterError):
            tie_profiles(star_graph, matrix="laplacian")


class TestPearsonCorrelation:
    """Test Pearson correlation of tie profiles."""

    def test_star_profiles(self, star_graph):
        """Leaves are perfectly correlated with each other and anti-correlated with the center."""
        correlation = pearson_correlation_matrix(star_graph)
        assert correlation.value(2, 3) == pytest.approx(1.0)
        assert correlation.value(1, 2) == pytest.approx(-1.0)
        np.testing.assert_array_equal(np.diag(correlation.data), np.ones(5))
        np.testing.assert_allclose(correlation.data, correlation.data.T)

    def test_constant_profiles_correlate_zero(self):
        """Profiles without variance correlate 0 with others and 1 with themselves."""
        graph = Graph(directed=False)
        graph.add_vertices(3)
        correlation = pearson_correlation_matrix(graph)
        np.testing.assert_array_equal(correlation.data, np.eye(3))


class TestSimilarityMeasures:
    """Test similarity measures."""

    def test_simple_matching_between_leaves(self, star_graph):
        """Two leaves have identical profiles."""
        for include_diagonal in (True, False):
            similarity = similarity_matrix(star_graph, "simple", include_diagonal=include_diagonal)
            assert similarity.value(2, 3) == pytest.approx(1.0)

    def test_own_positions_are_ignored_by_default(self, star_graph):
        """Without the diagonal, center and leaf agree nowhere on the other three actors."""
        assert similarity_matrix(star_graph, "simple").value(1, 2) == 0.0
        with_diagonal = similarity_matrix(star_graph, "simple", include_diagonal=True)
        assert with_diagonal.value(1, 2) == 0.0
        assert similarity_matrix(star_graph, "hamming", include_diagonal=True).value(1, 2) == 5.0
        assert similarity_matrix(star_graph, "hamming").value(1, 2) == 3.0

    def test_jaccard(self, star_graph):
        """Shared ties over ties held by either actor."""
        assert similarity_matrix(star_graph, "jaccard").value(1, 2) == 0.0
        assert similarity_matrix(star_graph, "jaccard").value(2, 3) == pytest.approx(1.0)

    def test_jaccard_of_empty_profiles_is_zero(self):
        """Jaccard is 0 when neither actor has any tie."""
        graph = Graph(directed=False)
        graph.add_vertices(3)
        np.testing.assert_array_equal(similarity_matrix(graph, "jaccard").data, np.zeros((3, 3)))

    def test_cosine(self, star_graph):
        """Identical non-zero profiles have cosine 1, disjoint ones 0."""
        cosine = similarity_matrix(star_graph, "cosine", include_diagonal=True)
        assert cosine.value(2, 4) == pytest.approx(1.0)
        assert cosine.value(1, 4) == 0.0

    def test_unknown_measure_rejected(self, star_graph):
        """Measure names are validated."""
        with pytest.raises(InvalidParameterError):
            similarity_matrix(star_graph, "mahalanobis")


class TestDissimilarityMetrics:
    """Test dissimilarity metrics."""

    def test_euclidean(self, star_graph):
        """Leaves coincide; center and leaf differ in three positions."""
        distances = dissimilarity_matrix(star_graph, "euclidean")
        assert distances.value(2, 5) == 0.0
        assert distances.value(1, 2) == pytest.approx(math.sqrt(3))
        np.testing.assert_allclose(distances.data, distances.data.T)

    def test_manhattan_and_chebyshev(self, star_graph):
        """Manhattan sums and Chebyshev takes the largest per-position difference."""
        assert dissimilarity_matrix(star_graph, "manhattan").value(1, 3) == 3.0
        assert dissimilarity_matrix(star_graph, "chebyshev").value(1, 3) == 1.0

    def test_jaccard_dissimilarity(self, star_graph):
        """Jaccard dissimilarity is one minus the index, with a zero diagonal."""
        distances = dissimilarity_matrix(star_graph, "jaccard")
        assert distances.value(2, 3) == pytest.approx(0.0)
        assert distances.value(1, 2) == 1.0
        np.testing.assert_array_equal(np.diag(distances.data), np.zeros(5))

    def test_cosine_is_not_a_dissimilarity(self, star_graph):
        """Only distance-type metrics are accepted."""
        with pytest.raises(InvalidParameterError):
            dissimilarity_matrix(star_graph, "cosine")
