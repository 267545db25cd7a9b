"""
Unit tests for prestige indices and the prominence index registry.

Tests degree, PageRank and proximity prestige, index lookup by code and the
aggregate views of a CentralityResult.
"""

import pytest

from TieWeb_Analyzer.analysis.centrality import degree_centrality
from TieWeb_Analyzer.analysis.indices import ProminenceIndex, compute_index
from TieWeb_Analyzer.analysis.prestige import degree_prestige, pagerank_prestige, proximity_prestige
from TieWeb_Analyzer.config import IterationConfig
from TieWeb_Analyzer.core.exceptions import InvalidParameterError, InvariantViolationError

pytestmark = [pytest.mark.unit, pytest.mark.analysis]


class TestDegreePrestige:
    """Test degree prestige."""

    def test_directed_triangle(self, directed_triangle):
        """Every actor of a directed cycle receives one tie."""
        result = degree_prestige(directed_triangle)
        assert result.scores == {1: 1.0, 2: 1.0, 3: 1.0}
        assert result.standardized[1] == pytest.approx(0.5)

    def test_counts_inbound_ties_only(self, make_graph):
        """Only received ties count."""
        graph = make_graph(3, [(1, 3), (2, 3)], directed=True)
        result = degree_prestige(graph)
        assert result.scores == {1: 0.0, 2: 0.0, 3: 2.0}

    def test_equals_degree_centrality_on_undirected_graph(self, star_graph):
        """In- and out-degree coincide when ties are undirected."""
        assert degree_prestige(star_graph).scores == degree_centrality(star_graph).scores


class TestPageRankPrestige:
    """Test PageRank prestige."""

    def test_directed_triangle_is_uniform(self, directed_triangle):
        """A directed cycle spreads rank evenly."""
        result = pagerank_prestige(directed_triangle)
        assert all(score == pytest.approx(1 / 3) for score in result.scores.values())

    def test_scores_sum_to_one_with_dangling_actors(self, make_graph):
        """Rank held by actors without outbound ties is redistributed."""
        graph = make_graph(4, [(1, 2), (1, 3), (1, 4)], directed=True)
        result = pagerank_prestige(graph)
        assert sum(result.scores.values()) == pytest.approx(1.0)
        assert result.scores[2] == pytest.approx(result.scores[3])
        assert result.scores[2] > result.scores[1]

    def test_known_values_for_a_small_graph(self, make_graph):
        """Two actors pointing at a third: closed-form PageRank values."""
        graph = make_graph(3, [(1, 3), (2, 3)], directed=True)
        result = pagerank_prestige(graph, iterations=IterationConfig(pagerank_damping=0.5))
        # x1 = x2 = a, x3 = b with a = 0.5/3 + 0.5*b/3 and b = 0.5/3 + 0.5*(2a + b/3)
        assert result.scores[1] == pytest.approx(0.25, abs=1e-8)
        assert result.scores[3] == pytest.approx(0.5, abs=1e-8)
        assert result.standardized[3] == pytest.approx(1.0)

    def test_mutation_from_observer_is_fatal(self, directed_triangle):
        """Editing the graph while PageRank iterates raises InvariantViolationError."""
        edits = []

        def mutate(current, total):
            if not edits:
                edits.append(directed_triangle.add_vertex())

        with pytest.raises(InvariantViolationError):
            pagerank_prestige(directed_triangle, observer=mutate)


class TestProximityPrestige:
    """Test proximity prestige."""

    def test_directed_path(self, make_graph):
        """PP grows with the number of actors reaching u and shrinks with their distance."""
        graph = make_graph(3, [(1, 2), (2, 3)], directed=True)
        result = proximity_prestige(graph)
        assert result.scores[1] == 0.0
        assert result.scores[2] == pytest.approx(0.5)
        assert result.scores[3] == pytest.approx(2 / 3)


class TestProminenceIndex:
    """Test the index registry and result aggregates."""

    def test_lookup_is_case_insensitive(self):
        """Codes are matched regardless of case."""
        assert ProminenceIndex.from_code("prp") is ProminenceIndex.PRP
        assert ProminenceIndex.from_code(ProminenceIndex.DC) is ProminenceIndex.DC

    def test_unknown_code_rejected(self):
        """Unknown codes raise InvalidParameterError."""
        with pytest.raises(InvalidParameterError):
            ProminenceIndex.from_code("XYZ")

    def test_member_flags(self):
        """Prestige, iterative and guarded flags follow the index family."""
        assert {m for m in ProminenceIndex if m.is_prestige} == {
            ProminenceIndex.DP, ProminenceIndex.PRP, ProminenceIndex.PP
        }
        assert ProminenceIndex.EVC.is_iterative
        assert ProminenceIndex.IC.is_guarded
        assert ProminenceIndex.CC.requires_connected
        assert ProminenceIndex.BC.long_name == "Betweenness Centrality"

    def test_compute_index_dispatches_by_code(self, star_graph):
        """compute_index runs the index named by its code."""
        result = compute_index(star_graph, "dc")
        assert result.index is ProminenceIndex.DC
        assert result.name == "Degree Centrality"
        assert result.scores == degree_centrality(star_graph).scores

    def test_result_aggregates(self, star_graph):
        """Totals, ranking, distribution and table views of a result."""
        result = compute_index(star_graph, ProminenceIndex.DC)
        assert result.total == 8.0
        assert result.mean == pytest.approx(0.4)
        assert result.variance == pytest.approx(0.09)
        assert result.ranked(2) == [(1, 4.0), (2, 1.0)]
        assert result.distribution().frequencies == {0.25: 4, 1.0: 1}
        df = result.to_dataframe()
        assert list(df.columns) == ["DC", "DC'"]
        assert df.index.name == "vertex"
