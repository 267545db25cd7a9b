"""
Unit tests for agglomerative hierarchical clustering.

Tests merge order and levels for every linkage, similarity input, dendrogram
cuts and clustering actors of a graph by tie profiles.
"""

import math

import numpy as np
import pytest

from TieWeb_Analyzer.analysis.clustering import cluster_actors, hierarchical_clustering
from TieWeb_Analyzer.core.exceptions import ConfirmationRequiredError, InvalidParameterError
from TieWeb_Analyzer.core.matrix import LabeledMatrix

pytestmark = [pytest.mark.unit, pytest.mark.analysis]


@pytest.fixture
def distances():
    """Two tight pairs, {1, 2} at 1 and {3, 4} at 2, far from each other."""
    data = np.array(
        [
            [0.0, 1.0, 4.0, 10.0],
            [1.0, 0.0, 6.0, 8.0],
            [4.0, 6.0, 0.0, 2.0],
            [10.0, 8.0, 2.0, 0.0],
        ]
    )
    return LabeledMatrix(data, [1, 2, 3, 4], name="Test distances")


class TestHierarchicalClustering:
    """Test the merge sequence."""

    @pytest.mark.parametrize("linkage,final_level", [("single", 4.0), ("complete", 10.0), ("average", 7.0)])
    def test_linkage_levels(self, distances, linkage, final_level):
        """The two pairs merge first; the last merge level depends on the linkage."""
        dendrogram = hierarchical_clustering(distances, linkage)
        assert [(s.left, s.right) for s in dendrogram.steps] == [
            ((1,), (2,)),
            ((3,), (4,)),
            ((1, 2), (3, 4)),
        ]
        assert [s.level for s in dendrogram.steps[:2]] == [1.0, 2.0]
        assert dendrogram.steps[-1].level == pytest.approx(final_level)
        assert dendrogram.linkage == linkage
        assert dendrogram.metric == "Test distances"

    def test_cuts_and_leaf_order(self, distances):
        """Cutting the tree between merge levels gives the partition at that level."""
        dendrogram = hierarchical_clustering(distances, "average")
        assert dendrogram.clusters_at(0.5) == [(1,), (2,), (3,), (4,)]
        assert dendrogram.clusters_at(2.0) == [(1, 2), (3, 4)]
        assert dendrogram.clusters_at(100.0) == [(1, 2, 3, 4)]
        assert dendrogram.leaf_order() == [1, 2, 3, 4]

    def test_similarities_merge_highest_first(self):
        """With similarity input the most similar pair merges first."""
        data = np.array(
            [
                [1.0, 0.9, 0.1, 0.1],
                [0.9, 1.0, 0.1, 0.1],
                [0.1, 0.1, 1.0, 0.8],
                [0.1, 0.1, 0.8, 1.0],
            ]
        )
        dendrogram = hierarchical_clustering(LabeledMatrix(data, [1, 2, 3, 4]), "average", similarity=True)
        assert [s.level for s in dendrogram.steps] == pytest.approx([0.9, 0.8, 0.1])
        assert dendrogram.clusters_at(0.85) == [(1, 2), (3,), (4,)]

    def test_single_actor_has_no_merges(self):
        """One actor yields an empty merge sequence."""
        dendrogram = hierarchical_clustering(LabeledMatrix(np.zeros((1, 1)), [7]))
        assert dendrogram.steps == []
        assert dendrogram.leaf_order() == [7]

    def test_asymmetric_matrix_rejected(self):
        """Clustering needs a symmetric matrix."""
        matrix = LabeledMatrix(np.array([[0.0, 1.0], [2.0, 0.0]]), [1, 2])
        with pytest.raises(InvalidParameterError):
            hierarchical_clustering(matrix)

    def test_unknown_linkage_rejected(self, distances):
        """Only single, complete and average linkage exist."""
        with pytest.raises(InvalidParameterError):
            hierarchical_clustering(distances, "ward")

    def test_threshold_requires_confirmation(self, distances):
        """Matrices larger than the threshold need confirmation."""
        with pytest.raises(ConfirmationRequiredError):
            hierarchical_clustering(distances, threshold=3)
        assert len(hierarchical_clustering(distances, threshold=3, confirmed=True).steps) == 3


class TestClusterActors:
    """Test clustering the actors of a graph."""

    def test_star_leaves_merge_first(self, star_graph):
        """Structurally equivalent leaves merge at distance 0 before the center joins."""
        dendrogram = cluster_actors(star_graph, "euclidean", "average")
        assert [s.level for s in dendrogram.steps[:3]] == [0.0, 0.0, 0.0]
        assert dendrogram.steps[-1].merged == (1, 2, 3, 4, 5)
        assert dendrogram.steps[-1].level == pytest.approx(math.sqrt(3))

    def test_pearson_clusters_by_correlation(self, star_graph):
        """Correlation is a similarity: leaves merge at 1, the center at -1."""
        dendrogram = cluster_actors(star_graph, "pearson", "single")
        assert dendrogram.similarity
        assert dendrogram.steps[0].level == pytest.approx(1.0)
        assert dendrogram.steps[-1].level == pytest.approx(-1.0)

    def test_unknown_metric_rejected(self, star_graph):
        """Metrics are validated before any work is done."""
        with pytest.raises(InvalidParameterError):
            cluster_actors(star_graph, "cosine")
