"""
Unit tests for random network generators.

Tests Erdős–Rényi, ring lattice, small-world, d-regular, scale-free and
lattice models: tie counts, degree sequences, parameter validation,
reproducibility by seed and the directed and self-loop variants.
"""

import math

import pytest

from TieWeb_Analyzer.config import GeneratorConfig, LayoutConfig
from TieWeb_Analyzer.core.exceptions import InvalidParameterError, OperationCancelledError
from TieWeb_Analyzer.core.types import EdgeType
from TieWeb_Analyzer.data.generators import (
    barabasi_albert,
    erdos_renyi,
    generate_network,
    lattice,
    regular,
    ring_lattice,
    watts_strogatz,
)
from TieWeb_Analyzer.utils.validation import CancellationToken

pytestmark = [pytest.mark.unit]


def degrees(graph):
    return [len(graph.out_neighbors(v)) for v in graph.vertex_ids()]


def tie_set(graph):
    return [(e.source, e.target) for e in graph.edges()]


class TestErdosRenyi:
    """Test the Erdős–Rényi model."""

    def test_gnp_tie_count_near_expectation(self):
        """G(100, 0.5) holds about half of the 4950 possible ties."""
        graph = erdos_renyi(100, probability=0.5, seed=42)
        assert graph.vertex_count == 100
        assert abs(graph.edge_count() - 2475) < 200
        assert not graph.directed

    def test_gnm_exact_tie_count(self):
        """G(n, M) draws exactly M ties."""
        graph = erdos_renyi(20, edges=37, seed=1)
        assert graph.edge_count() == 37

    def test_directed_variant(self):
        """Directed G(n, p) draws arcs over ordered pairs."""
        graph = erdos_renyi(10, probability=1.0, directed=True)
        assert graph.edge_count() == 90
        assert graph.edge_type(1, 2) is EdgeType.RECIPROCATED

    def test_self_loops_only_with_diag(self):
        """Self-loops are candidates only when diag is set."""
        assert not any(e.source == e.target for e in erdos_renyi(8, probability=1.0).edges())
        with_loops = erdos_renyi(8, probability=1.0, diag=True)
        assert with_loops.has_edge(3, 3)

    def test_same_seed_same_network(self):
        """A seed makes generation reproducible."""
        first = erdos_renyi(30, probability=0.2, seed=9)
        second = erdos_renyi(30, probability=0.2, seed=9)
        assert tie_set(first) == tie_set(second)

    @pytest.mark.parametrize("kwargs", [{}, {"probability": 0.1, "edges": 5}])
    def test_exactly_one_of_p_and_m(self, kwargs):
        """Neither or both of probability and edges is an error."""
        with pytest.raises(InvalidParameterError):
            erdos_renyi(10, **kwargs)

    def test_invalid_parameters(self):
        """Out-of-range p, too many ties and non-positive n are rejected."""
        with pytest.raises(InvalidParameterError):
            erdos_renyi(10, probability=1.5)
        with pytest.raises(InvalidParameterError):
            erdos_renyi(4, edges=7)
        with pytest.raises(InvalidParameterError):
            erdos_renyi(0, probability=0.5)

    def test_actors_placed_on_a_circle(self):
        """New actors sit evenly on a circle inside the canvas margin."""
        layout = LayoutConfig()
        graph = erdos_renyi(12, probability=0.0, layout=layout)
        radius = min(layout.canvas_width, layout.canvas_height) / 2 - layout.margin
        for vertex in graph.vertices():
            distance = math.hypot(vertex.x - layout.canvas_width / 2, vertex.y - layout.canvas_height / 2)
            assert distance == pytest.approx(radius)

    def test_cancellation(self):
        """A cancelled token stops generation."""
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            erdos_renyi(20, probability=0.5, token=token)


class TestLatticeModels:
    """Test ring lattice, small-world and d-regular models."""

    def test_ring_lattice_degrees(self):
        """Every actor is tied to degree/2 neighbors on each side."""
        graph = ring_lattice(10, 4)
        assert set(degrees(graph)) == {4}
        assert graph.edge_count() == 20
        assert graph.has_edge(1, 10) and graph.has_edge(1, 9)

    @pytest.mark.parametrize("degree", [3, 0, 10])
    def test_ring_lattice_rejects_bad_degree(self, degree):
        """Odd degrees are never rounded; degree must be in (0, n)."""
        with pytest.raises(InvalidParameterError):
            ring_lattice(10, degree)

    def test_directed_lattice_is_reciprocated(self):
        """Directed symmetric models create mutual arcs."""
        graph = ring_lattice(6, 2, directed=True)
        assert graph.edge_count() == 12
        assert graph.edge_type(1, 2) is EdgeType.RECIPROCATED

    def test_diag_adds_self_loops(self):
        """diag ties every actor to itself."""
        graph = ring_lattice(6, 2, diag=True)
        assert all(graph.has_edge(v, v) for v in graph.vertex_ids())

    def test_small_world_without_rewiring_is_a_ring(self):
        """beta = 0 leaves the ring lattice untouched."""
        assert tie_set(watts_strogatz(20, 4, 0.0, seed=3)) == tie_set(ring_lattice(20, 4))

    def test_small_world_preserves_tie_count(self):
        """Rewiring moves ties without creating or losing any."""
        graph = watts_strogatz(30, 4, 0.3, seed=3)
        assert graph.edge_count() == 60
        assert tie_set(graph) != tie_set(ring_lattice(30, 4))

    def test_small_world_rejects_bad_beta(self):
        """beta must be a probability."""
        with pytest.raises(InvalidParameterError):
            watts_strogatz(20, 4, 1.2)

    def test_regular_degrees(self):
        """Degree-preserving swaps keep every actor at degree d."""
        graph = regular(20, 4, seed=8)
        assert set(degrees(graph)) == {4}
        assert graph.edge_count() == 40

    def test_regular_rejects_odd_degree(self):
        """Odd degrees raise instead of being rounded."""
        with pytest.raises(InvalidParameterError):
            regular(20, 5)


class TestScaleFree:
    """Test the Barabási–Albert model."""

    def test_tie_count(self):
        """A clique of m0 actors plus m ties for every later actor."""
        graph = barabasi_albert(50, initial_nodes=3, edges_per_step=2, seed=5)
        assert graph.vertex_count == 50
        assert graph.edge_count() == 3 + 47 * 2

    def test_new_actors_tie_to_distinct_targets(self):
        """Every later actor has exactly m distinct ties when it arrives."""
        graph = barabasi_albert(30, initial_nodes=4, edges_per_step=3, seed=2)
        assert min(degrees(graph)) >= 3

    def test_directed_attachments_are_one_way(self):
        """Only the seed clique is mutual; each newcomer sends arcs to older actors."""
        graph = barabasi_albert(20, initial_nodes=3, edges_per_step=2, directed=True, seed=4)
        arcs = [(edge.source, edge.target) for edge in graph.edges()]
        assert len(arcs) == 6 + 17 * 2
        mutual = [(s, t) for s, t in arcs if graph.has_edge(t, s)]
        assert sorted(mutual) == [(1, 2), (1, 3), (2, 1), (2, 3), (3, 1), (3, 2)]
        assert all(source > target for source, target in arcs if source > 3)

    def test_invalid_parameters(self):
        """m > m0, m0 < 1 and n < m0 are rejected."""
        with pytest.raises(InvalidParameterError):
            barabasi_albert(20, initial_nodes=2, edges_per_step=3)
        with pytest.raises(InvalidParameterError):
            barabasi_albert(20, initial_nodes=0)
        with pytest.raises(InvalidParameterError):
            barabasi_albert(2, initial_nodes=3)


class TestLattice:
    """Test the regular lattice model."""

    def test_bounded_grid(self):
        """A 4x4 grid has 24 ties."""
        graph = lattice(4, 2)
        assert graph.vertex_count == 16
        assert graph.edge_count() == 24

    def test_circular_grid(self):
        """Wrapping the boundaries makes a 4-regular torus."""
        graph = lattice(4, 2, circular=True)
        assert graph.edge_count() == 32
        assert set(degrees(graph)) == {4}

    def test_zero_neighborhood_means_one(self):
        """Neighborhood 0 behaves like 1."""
        assert tie_set(lattice(3, 2, neighborhood=0)) == tie_set(lattice(3, 2))

    def test_larger_neighborhood(self):
        """Neighborhood 2 on a line ties actors two steps apart."""
        graph = lattice(5, 1, neighborhood=2)
        assert graph.has_edge(1, 3)
        assert not graph.has_edge(1, 4)


class TestGenerateNetwork:
    """Test dispatch from a generator configuration."""

    def test_dispatch_by_model(self):
        """Each model name builds the matching network."""
        assert generate_network(GeneratorConfig(model="lattice", length=3)).vertex_count == 9
        ring = generate_network(GeneratorConfig(model="ring-lattice", nodes=8, degree=2))
        assert set(degrees(ring)) == {2}
        gnm = generate_network(GeneratorConfig(model="erdos-renyi", nodes=10, probability=None, edges=12))
        assert gnm.edge_count() == 12

    def test_invalid_model_parameters(self):
        """Model parameters are validated by the generator."""
        with pytest.raises(InvalidParameterError):
            generate_network(GeneratorConfig(model="regular", nodes=10, degree=3))
