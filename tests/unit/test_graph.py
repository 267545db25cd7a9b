"""
Unit tests for the graph store.

Tests vertex id bookkeeping, tie creation and typing, relations, switching
the directedness of a whole network and the integrity check.
"""

import pytest

from TieWeb_Analyzer.core.exceptions import (
    EdgeNotFoundError,
    InvalidParameterError,
    InvariantViolationError,
    MultiRelationConstraintError,
    VertexNotFoundError,
)
from TieWeb_Analyzer.core.graph import Graph
from TieWeb_Analyzer.core.types import EdgeType

pytestmark = [pytest.mark.unit]


class TestVertices:
    """Test vertex creation and removal."""

    def test_ids_start_at_one_and_increase(self):
        """New vertices get ids 1, 2, 3..."""
        graph = Graph()
        assert graph.add_vertices(3) == [1, 2, 3]
        assert graph.vertex_count == 3
        assert len(graph) == 3
        assert 2 in graph

    def test_removed_ids_are_not_reused(self):
        """Removing the highest id does not hand it out again."""
        graph = Graph()
        graph.add_vertices(3)
        graph.remove_vertex(3)
        assert graph.add_vertex() == 4
        assert graph.vertex_ids() == [1, 2, 4]

    def test_explicit_id_moves_the_counter(self):
        """An explicit id bumps the next free id past it."""
        graph = Graph()
        graph.add_vertex(vertex_id=10)
        assert graph.add_vertex() == 11

    @pytest.mark.parametrize("bad_id", [0, -3])
    def test_non_positive_id_rejected(self, bad_id):
        """Ids must be positive integers."""
        with pytest.raises(InvalidParameterError):
            Graph().add_vertex(vertex_id=bad_id)

    def test_duplicate_id_rejected(self):
        """An id cannot be used twice."""
        graph = Graph()
        graph.add_vertex(vertex_id=5)
        with pytest.raises(InvalidParameterError):
            graph.add_vertex(vertex_id=5)

    def test_default_label_is_the_id(self):
        """Vertices without a label are labeled by their id."""
        graph = Graph()
        vertex_id = graph.add_vertex(x=10.0, y=20.0)
        assert graph.vertex(vertex_id).label == "1"
        assert graph.vertex(vertex_id).position == (10.0, 20.0)

    def test_remove_vertex_drops_incident_ties(self, star_graph):
        """Removing the center of a star leaves isolated leaves."""
        star_graph.remove_vertex(1)
        assert star_graph.edge_count() == 0
        assert star_graph.isolates() == [2, 3, 4, 5]
        star_graph.check_integrity()

    def test_missing_vertex_raises(self):
        """Looking up an unknown vertex raises VertexNotFoundError."""
        with pytest.raises(VertexNotFoundError):
            Graph().vertex(1)

    def test_remove_vertex_with_several_relations_raises(self, star_graph):
        """Vertex removal is refused while more than one relation exists."""
        star_graph.add_relation("friends")
        with pytest.raises(MultiRelationConstraintError):
            star_graph.remove_vertex(2)


class TestTies:
    """Test tie creation, lookup and typing."""

    def test_undirected_tie_visible_from_both_ends(self):
        """An undirected tie is stored once and has symmetric weight."""
        graph = Graph(directed=False)
        graph.add_vertices(2)
        graph.add_edge(1, 2, weight=2.5)
        assert graph.edge_count() == 1
        assert graph.has_edge(2, 1)
        assert graph.edge_weight(2, 1) == graph.edge_weight(1, 2) == 2.5
        assert graph.edge_type(1, 2) is EdgeType.UNDIRECTED

    def test_undirected_graph_ignores_directed_request(self):
        """Ties of an undirected graph are always undirected."""
        graph = Graph(directed=False)
        graph.add_vertices(2)
        edge = graph.add_edge(1, 2, undirected=False)
        assert edge.undirected

    def test_arc_and_reciprocated_types(self):
        """A single arc is directed; an arc plus its mirror is reciprocated."""
        graph = Graph(directed=True)
        graph.add_vertices(2)
        graph.add_edge(1, 2)
        assert graph.edge_type(1, 2) is EdgeType.DIRECTED
        assert not graph.has_edge(2, 1)
        graph.add_edge(2, 1)
        assert graph.edge_type(1, 2) is EdgeType.RECIPROCATED
        assert graph.edge_count() == 2

    def test_adding_existing_tie_updates_weight(self):
        """Re-adding a tie changes its weight without duplicating it."""
        graph = Graph()
        graph.add_vertices(2)
        graph.add_edge(1, 2)
        graph.add_edge(1, 2, weight=3.0)
        assert graph.edge_count() == 1
        assert graph.edge_weight(1, 2) == 3.0

    def test_missing_tie_weight_is_zero(self):
        """A tie that does not exist weighs 0."""
        graph = Graph()
        graph.add_vertices(2)
        assert graph.edge_weight(1, 2) == 0.0

    def test_tie_to_missing_vertex_raises(self):
        """Both endpoints must exist."""
        graph = Graph()
        graph.add_vertex()
        with pytest.raises(VertexNotFoundError):
            graph.add_edge(1, 7)

    def test_remove_missing_tie_raises(self):
        """Removing a tie that does not exist raises EdgeNotFoundError."""
        graph = Graph()
        graph.add_vertices(2)
        with pytest.raises(EdgeNotFoundError):
            graph.remove_edge(1, 2)

    def test_set_type_undirected_merges_mirror(self):
        """Making a reciprocated pair undirected leaves one tie."""
        graph = Graph(directed=True)
        graph.add_vertices(2)
        graph.add_edge(1, 2)
        graph.add_edge(2, 1)
        graph.set_edge_type(1, 2, EdgeType.UNDIRECTED)
        assert graph.edge_count() == 1
        assert graph.edge_type(2, 1) is EdgeType.UNDIRECTED

    def test_set_type_reciprocated_adds_mirror(self):
        """Reciprocating an arc adds the mirror with the same weight."""
        graph = Graph(directed=True)
        graph.add_vertices(2)
        graph.add_edge(1, 2, weight=2.0)
        graph.set_edge_type(1, 2, EdgeType.RECIPROCATED)
        assert graph.edge_weight(2, 1) == 2.0

    def test_set_type_directed_drops_mirror(self):
        """Making a reciprocated arc directed keeps only source -> target."""
        graph = Graph(directed=True)
        graph.add_vertices(2)
        graph.add_edge(1, 2)
        graph.add_edge(2, 1)
        graph.set_edge_type(1, 2, EdgeType.DIRECTED)
        assert graph.has_edge(1, 2)
        assert not graph.has_edge(2, 1)

    def test_weighted_degrees(self):
        """Weighted degrees sum tie weights."""
        graph = Graph(directed=True)
        graph.add_vertices(3)
        graph.add_edge(1, 2, weight=2.0)
        graph.add_edge(1, 3, weight=0.5)
        assert graph.out_degree(1) == 2.0
        assert graph.out_degree(1, weighted=True) == 2.5
        assert graph.in_degree(3, weighted=True) == 0.5

    def test_self_loop_does_not_break_isolation(self):
        """An actor with only a self-loop is still isolated."""
        graph = Graph()
        graph.add_vertices(2)
        graph.add_edge(1, 1)
        assert graph.is_isolated(1)


class TestRelations:
    """Test multi-relational storage."""

    def test_relations_hold_independent_ties(self, star_graph):
        """A new relation starts empty and shares the vertex set."""
        index = star_graph.add_relation("friends")
        assert index == 1
        star_graph.set_current_relation("friends")
        assert star_graph.edge_count() == 0
        assert star_graph.vertex_count == 5
        assert star_graph.edge_count(0) == 4

    def test_duplicate_relation_name_rejected(self, star_graph):
        """Relation names are unique."""
        with pytest.raises(InvalidParameterError):
            star_graph.add_relation("default")

    def test_last_relation_cannot_be_removed(self, star_graph):
        """A graph always keeps at least one relation."""
        with pytest.raises(InvalidParameterError):
            star_graph.remove_relation(0)

    def test_remove_relation_retags_ties(self, star_graph):
        """Ties of later relations follow their relation's new index."""
        star_graph.add_relation("a")
        star_graph.add_relation("b")
        star_graph.add_edge(2, 3, relation="b")
        star_graph.remove_relation("a")
        assert star_graph.relation_names == ["default", "b"]
        assert star_graph.edges("b")[0].relation == 1
        star_graph.check_integrity()


class TestGraphWide:
    """Test whole-network operations and bookkeeping."""

    def test_set_undirected_merges_arcs_keeping_max_weight(self):
        """Arc and mirror collapse into one tie with the larger weight."""
        graph = Graph(directed=True)
        graph.add_vertices(3)
        graph.add_edge(1, 2, weight=1.0)
        graph.add_edge(2, 1, weight=3.0)
        graph.add_edge(2, 3)
        graph.set_directed(False)
        assert graph.edge_count() == 2
        assert graph.edge_weight(1, 2) == 3.0
        assert graph.has_edge(3, 2)
        graph.check_integrity()

    def test_set_directed_splits_ties(self, star_graph):
        """Undirected ties become reciprocated arcs."""
        star_graph.set_directed(True)
        assert star_graph.edge_count() == 8
        assert star_graph.edge_type(1, 2) is EdgeType.RECIPROCATED
        star_graph.check_integrity()

    def test_mutations_bump_revision(self):
        """Every mutation changes the revision counter."""
        graph = Graph()
        before = graph.revision
        graph.add_vertex()
        assert graph.revision > before

    def test_copy_is_independent(self, star_graph):
        """Mutating a copy leaves the original untouched."""
        clone = star_graph.copy()
        clone.add_edge(2, 3)
        assert not star_graph.has_edge(2, 3)

    def test_integrity_check_detects_dangling_ties(self, star_graph):
        """A tie to a vertex that does not exist is a fatal inconsistency."""
        star_graph._relations[0].out[1][99] = star_graph.edge(1, 2)
        with pytest.raises(InvariantViolationError):
            star_graph.check_integrity()
