"""
Unit tests for cohesive subgroup analysis.

Tests the clique census (maximal cliques, membership and co-membership
matrices, reciprocity rule) and the triad census, cross-checked against
networkx.
"""

import networkx as nx
import pytest

from TieWeb_Analyzer.analysis.community import TRIAD_TYPES, clique_census, triad_census
from TieWeb_Analyzer.core.exceptions import (
    ConfirmationRequiredError,
    InvalidParameterError,
    OperationCancelledError,
)
from TieWeb_Analyzer.data.generators import erdos_renyi
from TieWeb_Analyzer.data.networkx_bridge import to_networkx
from TieWeb_Analyzer.utils import CancellationToken

pytestmark = [pytest.mark.unit, pytest.mark.analysis]


@pytest.fixture
def clique_with_pendant(make_graph):
    """Complete graph on 1..4 plus the tie 4 - 5."""
    ties = [(i, j) for i in range(1, 5) for j in range(i + 1, 5)] + [(4, 5)]
    return make_graph(5, ties)


class TestCliqueCensus:
    """Test the maximal clique census."""

    def test_maximal_cliques_largest_first(self, clique_with_pendant):
        """The 4-clique is listed before the pendant tie."""
        census = clique_census(clique_with_pendant)
        assert census.cliques == [(1, 2, 3, 4), (4, 5)]
        assert census.by_size == {2: 1, 4: 1}
        assert census.count == 2
        assert census.largest_size == 4
        assert census.cliques_of(4) == [(1, 2, 3, 4), (4, 5)]

    def test_membership_matrices(self, clique_with_pendant):
        """Membership is actor x clique; co-membership counts shared cliques."""
        census = clique_census(clique_with_pendant)
        assert census.membership.value(4, 1) == 1.0
        assert census.membership.value(4, 2) == 1.0
        assert census.membership.value(5, 1) == 0.0
        assert census.co_membership.value(4, 4) == 2.0
        assert census.co_membership.value(1, 2) == 1.0
        assert census.co_membership.value(1, 5) == 0.0

    def test_only_reciprocated_arcs_count(self, make_graph):
        """In a directed graph an unreciprocated arc does not join a clique."""
        graph = make_graph(3, [(1, 2), (2, 1), (2, 3)], directed=True)
        assert clique_census(graph).cliques == [(1, 2)]

    def test_min_size_filters_small_cliques(self, clique_with_pendant):
        """Cliques below min_size are not reported."""
        assert clique_census(clique_with_pendant, min_size=3).cliques == [(1, 2, 3, 4)]

    def test_matches_networkx_on_random_graph(self):
        """The number of maximal cliques agrees with networkx."""
        graph = erdos_renyi(30, probability=0.3, seed=4)
        expected = [c for c in nx.find_cliques(to_networkx(graph)) if len(c) >= 2]
        assert clique_census(graph).count == len(expected)

    def test_invalid_min_size_and_guard(self, clique_with_pendant):
        """min_size must be positive; large graphs need confirmation."""
        with pytest.raises(InvalidParameterError):
            clique_census(clique_with_pendant, min_size=0)
        with pytest.raises(ConfirmationRequiredError):
            clique_census(clique_with_pendant, threshold=4)


class TestTriadCensus:
    """Test the triad census."""

    def test_classes_in_canonical_order(self, directed_triangle):
        """Every class is reported, in the M-A-N order."""
        census = triad_census(directed_triangle)
        assert list(census.counts) == list(TRIAD_TYPES)
        assert census["030C"] == 1
        assert census.total == 1

    def test_undirected_triangle_is_mutual(self, make_graph):
        """Undirected ties count as mutual dyads."""
        census = triad_census(make_graph(3, [(1, 2), (2, 3), (1, 3)]))
        assert census["300"] == 1

    def test_total_is_n_choose_3(self, star_graph):
        """Counts add up to all triads, with 003 as the remainder."""
        census = triad_census(star_graph)
        assert census.total == 10
        assert census["201"] == 6
        assert census["003"] == 4

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_matches_networkx(self, seed):
        """Counts agree with networkx on random directed graphs."""
        graph = erdos_renyi(15, probability=0.2, directed=True, seed=seed)
        expected = nx.triadic_census(to_networkx(graph))
        census = triad_census(graph)
        assert census.counts == {triad: expected[triad] for triad in TRIAD_TYPES}

    def test_self_loops_ignored(self, make_graph):
        """Self-loops do not change the class of a triad."""
        graph = make_graph(3, [(1, 2), (2, 3)], directed=True)
        graph.add_edge(2, 2)
        census = triad_census(graph)
        assert census["021C"] == 1
        assert census.total == 1

    def test_undirected_tie_in_directed_graph(self, make_graph):
        """An undirected tie in a directed graph counts as a mutual dyad."""
        graph = make_graph(3, [], directed=True)
        graph.add_edge(1, 2, undirected=True)
        census = triad_census(graph)
        assert census["102"] == 1

    def test_cancelled_census(self, star_graph):
        """A cancelled token stops the census."""
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            triad_census(star_graph, token=token)

    def test_series_view(self, directed_triangle):
        """The census converts to a pandas Series indexed by class."""
        series = triad_census(directed_triangle).to_series()
        assert series["030C"] == 1
        assert len(series) == 16
