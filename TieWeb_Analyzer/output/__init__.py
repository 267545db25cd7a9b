"""
Output formatting for TieWeb reports.
"""

from .formatters import (
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

__all__ = [
    "EmojiFormatter",
    "centrality_table",
    "format_centrality_report",
    "format_clique_census",
    "format_dendrogram",
    "format_matrix",
    "format_metrics",
    "format_triad_census",
    "log_lines",
]
