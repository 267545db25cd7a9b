"""
Unit tests for output formatters.

Tests emoji styling, index tables and reports, matrix rendering and the
census, dendrogram and metric formatters.
"""

import logging

import numpy as np
import pytest

from TieWeb_Analyzer.analysis.centrality import degree_centrality
from TieWeb_Analyzer.analysis.clustering import hierarchical_clustering
from TieWeb_Analyzer.analysis.community import clique_census, triad_census
from TieWeb_Analyzer.config import AnalysisOptions
from TieWeb_Analyzer.core.matrix import LabeledMatrix
from TieWeb_Analyzer.output import (
    EmojiFormatter,
    centrality_table,
    format_centrality_report,
    format_clique_census,
    format_dendrogram,
    format_matrix,
    format_metrics,
    format_triad_census,
    log_lines,
)

pytestmark = [pytest.mark.unit]


class TestEmojiFormatter:
    """Test EmojiFormatter functionality."""

    @pytest.mark.parametrize(
        "message_type,prefix",
        [("progress", "🔄"), ("success", "✅"), ("error", "❌"), ("warning", "⚠️"), ("info", "ℹ️")],
    )
    def test_known_types(self, message_type, prefix):
        """Known message types get their emoji."""
        assert EmojiFormatter.format(message_type, "Done") == f"{prefix} Done"

    def test_unknown_type_left_plain(self):
        """Unknown types leave the message unchanged."""
        assert EmojiFormatter.format("debug", "Plain") == "Plain"


class TestCentralityOutput:
    """Test index tables and reports."""

    def test_table_sorted_by_score(self, star_graph):
        """The most prominent actor comes first; ties keep id order."""
        table = centrality_table(degree_centrality(star_graph))
        assert list(table.index) == [1, 2, 3, 4, 5]
        assert list(table.columns) == ["DC", "DC'"]
        assert list(centrality_table(degree_centrality(star_graph), top_n=2).index) == [1, 2]

    def test_report_lines(self, star_graph):
        """The report lists the table, aggregates and centralization."""
        lines = format_centrality_report(degree_centrality(star_graph), top_n=3)
        assert lines[0] == "---- Degree Centrality (DC) ----"
        assert "Sum = 8, mean' = 0.4, variance' = 0.09" in lines
        assert "Max = 4 (actors [1]), min = 1 (actors [2, 3, 4, 5])" in lines
        assert "Group centralization = 1" in lines

    def test_report_lists_excluded_actors(self, star_graph):
        """Dropped isolates are named in the report."""
        star_graph.add_vertices(1)
        result = degree_centrality(star_graph, AnalysisOptions(drop_isolates=True))
        assert format_centrality_report(result)[-1] == "Excluded actors: [6]"

    def test_log_lines(self, star_graph, caplog):
        """Every report line is logged at INFO."""
        logger = logging.getLogger("tieweb.test.report")
        with caplog.at_level(logging.INFO, logger="tieweb.test.report"):
            log_lines(["first", "second"], logger)
        assert [record.message for record in caplog.records] == ["first", "second"]


class TestTableFormatters:
    """Test matrix, census, dendrogram and metric formatters."""

    def test_matrix_with_infinity(self):
        """Infinite distances print as inf and values are rounded."""
        matrix = LabeledMatrix(np.array([[0.0, np.inf], [1 / 3, 0.0]]), [1, 2])
        text = format_matrix(matrix, precision=2)
        assert "inf" in text
        assert "0.33" in text

    def test_triad_census_row(self, directed_triangle):
        """All sixteen classes appear as column headers."""
        text = format_triad_census(triad_census(directed_triangle))
        assert "030C" in text and "003" in text
        assert len(text.splitlines()) == 2

    def test_clique_census_lines(self, complete_graph):
        """The clique census lists the counts and every clique."""
        lines = format_clique_census(clique_census(complete_graph))
        assert lines[0] == "Maximal cliques: 1 (largest size 5)"
        assert lines[-1] == "  1: [1, 2, 3, 4, 5]"

    def test_clique_census_truncates(self, make_graph):
        """Cliques beyond the limit are summarized."""
        graph = make_graph(6, [(1, 2), (3, 4), (5, 6)])
        lines = format_clique_census(clique_census(graph), limit=2)
        assert lines[-1] == "  ... 1 more"

    def test_dendrogram(self):
        """Merge steps print one per row."""
        distances = LabeledMatrix(np.array([[0.0, 1.0], [1.0, 0.0]]), ["a", "b"])
        text = format_dendrogram(hierarchical_clustering(distances, "single"))
        assert "level" in text
        assert "['a']" in text

    def test_metrics(self):
        """Metrics print as a two-column table."""
        text = format_metrics({"density": 0.5, "num_components": 2})
        assert "density" in text
        assert "num_components" in text
