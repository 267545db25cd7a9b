"""
Unit tests for layout computation.

Tests prominence-based placement, the circular layout and the force-directed
layouts (bounds, determinism, distance preservation, cancellation).
"""

import math

import numpy as np
import pytest

from TieWeb_Analyzer.config import LayoutConfig
from TieWeb_Analyzer.core.exceptions import (
    DisconnectedGraphError,
    InvalidParameterError,
    OperationCancelledError,
)
from TieWeb_Analyzer.utils.validation import CancellationToken
from TieWeb_Analyzer.visualization import (
    ProminenceColors,
    circular_layout,
    compute_layout,
    prominence_layout,
)

pytestmark = [pytest.mark.unit, pytest.mark.visualization]


@pytest.fixture
def canvas():
    """Default canvas settings."""
    return LayoutConfig()


def inside(positions, layout):
    return all(
        layout.margin - 1e-9 <= x <= layout.canvas_width - layout.margin + 1e-9
        and layout.margin - 1e-9 <= y <= layout.canvas_height - layout.margin + 1e-9
        for x, y in positions.values()
    )


class TestCircularLayout:
    """Test the circular layout."""

    def test_actors_on_one_circle(self, complete_graph, canvas):
        """Every actor sits at the same distance from the canvas center."""
        result = circular_layout(complete_graph, canvas)
        center = (canvas.canvas_width / 2, canvas.canvas_height / 2)
        radii = {round(math.dist(p, center), 6) for p in result.positions.values()}
        assert len(radii) == 1
        assert inside(result.positions, canvas)
        assert result.method == "circle"


class TestProminenceLayout:
    """Test prominence-based layouts on the star."""

    def test_radial_places_center_in_the_middle(self, star_graph, canvas):
        """The most prominent actor sits at the center, leaves further out."""
        result = prominence_layout(star_graph, "DC", "radial", layout=canvas)
        center = (canvas.canvas_width / 2, canvas.canvas_height / 2)
        max_radius = min(canvas.canvas_width, canvas.canvas_height) / 2 - canvas.margin
        assert result.positions[1] == pytest.approx(center)
        for leaf in (2, 3, 4, 5):
            assert math.dist(result.positions[leaf], center) == pytest.approx(max_radius * 0.75)

    def test_leveled_puts_prominent_actors_on_top(self, star_graph, canvas):
        """Level height follows relative prominence."""
        result = prominence_layout(star_graph, "DC", "leveled", layout=canvas)
        usable = canvas.canvas_height - 2 * canvas.margin
        assert result.positions[1][1] == pytest.approx(canvas.margin)
        assert result.positions[2][1] == pytest.approx(canvas.margin + usable * 0.75)
        assert inside(result.positions, canvas)

    def test_node_size_keeps_positions(self, star_graph, canvas):
        """Node size grows with prominence; positions are untouched."""
        before = {v: star_graph.vertex(v).position for v in star_graph.vertex_ids()}
        result = prominence_layout(star_graph, "DC", "node-size", layout=canvas)
        assert result.positions == before
        assert result.sizes[1] == pytest.approx(canvas.base_node_size + canvas.node_size_multiplier)
        assert result.sizes[2] == pytest.approx(canvas.base_node_size + canvas.node_size_multiplier * 0.25)

    def test_node_color_warmest_for_most_prominent(self, star_graph):
        """The center gets the hottest color."""
        result = prominence_layout(star_graph, "DC", "node-color")
        assert result.colors[1].lower() == ProminenceColors.HOT.lower()
        assert result.colors[2].lower() == ProminenceColors.COOL.lower()

    def test_apply_to_writes_back(self, star_graph):
        """Applying a result updates vertex positions and sizes."""
        result = prominence_layout(star_graph, "DC", "node-size")
        result.apply_to(star_graph)
        assert star_graph.vertex(1).size == result.sizes[1]
        result = prominence_layout(star_graph, "DC", "radial")
        result.apply_to(star_graph)
        assert star_graph.vertex(3).position == pytest.approx(result.positions[3])

    def test_index_errors_propagate(self, two_triangles):
        """Closeness on a disconnected graph cannot be laid out."""
        with pytest.raises(DisconnectedGraphError):
            prominence_layout(two_triangles, "CC", "radial")

    def test_unknown_mode_rejected(self, star_graph):
        """Only the four prominence modes exist."""
        with pytest.raises(InvalidParameterError):
            prominence_layout(star_graph, "DC", "spiral")


class TestForceLayouts:
    """Test force-directed layouts."""

    @pytest.mark.parametrize("method", ["eades", "fruchterman-reingold", "kamada-kawai"])
    def test_positions_stay_on_canvas(self, method, two_triangles, canvas):
        """Every actor remains inside the canvas margins."""
        result = compute_layout(two_triangles, method, canvas, seed=7)
        assert set(result.positions) == {1, 2, 3, 4, 5, 6}
        assert inside(result.positions, canvas)

    @pytest.mark.parametrize("method", ["eades", "fruchterman-reingold", "kamada-kawai"])
    def test_same_seed_same_layout(self, method, path_graph):
        """Layouts are deterministic given the seed."""
        first = compute_layout(path_graph, method, seed=3)
        second = compute_layout(path_graph, method, seed=3)
        for vertex_id in path_graph.vertex_ids():
            assert first.positions[vertex_id] == pytest.approx(second.positions[vertex_id])

    def test_kamada_kawai_respects_graph_distance(self, path_graph):
        """Neighbors on a path end up closer than its endpoints."""
        positions = compute_layout(path_graph, "kamada-kawai", seed=1).positions
        assert math.dist(positions[1], positions[2]) < math.dist(positions[1], positions[4])

    def test_eades_repels_tied_actors(self, make_graph):
        """Tied actors at the natural length still push each other apart."""
        layout = LayoutConfig(canvas_width=600.0, canvas_height=600.0)
        graph = make_graph(2, [(1, 2)])
        graph.set_vertex_position(1, 300.0, 300.0)
        graph.set_vertex_position(2, 370.0, 300.0)
        positions = compute_layout(graph, "eades", layout).positions
        assert positions[1][0] < 300.0
        assert positions[2][0] > 370.0
        assert (positions[1][0] + positions[2][0]) / 2 == pytest.approx(335.0)
        assert positions[1][1] == pytest.approx(300.0)

    def test_fruchterman_reingold_separates_actors(self, complete_graph):
        """No two actors of a clique collapse onto each other."""
        positions = np.array(list(compute_layout(complete_graph, "fruchterman-reingold", seed=2).positions.values()))
        gaps = [np.linalg.norm(a - b) for i, a in enumerate(positions) for b in positions[i + 1:]]
        assert min(gaps) > 1.0

    def test_unknown_method_rejected(self, path_graph):
        """Method names are validated."""
        with pytest.raises(InvalidParameterError):
            compute_layout(path_graph, "hyperbolic")

    def test_cancellation(self, path_graph):
        """A cancelled token stops the layout."""
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            compute_layout(path_graph, "eades", seed=1, token=token)
