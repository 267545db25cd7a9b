"""
Text formatting utilities for TieWeb output.

This module contains formatters for console output and logging: status
message styling and pandas-based tables for index results, matrices and
censuses.
"""

import logging
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ..core.matrix import LabeledMatrix
from ..core.types import CentralityResult, CliqueCensus, Dendrogram, TriadCensus


class EmojiFormatter:
    """
    Formatter for adding emojis and styling to console output.
    """

    @staticmethod
    def format(message_type: str, message: str) -> str:
        """
        Format a message with appropriate emoji and styling.

        Args:
            message_type: Type of message (progress, success, error, etc.)
            message: The message to format

        Returns:
            Formatted message string
        """
        emoji_map = {
            "progress": "🔄",
            "success": "✅",
            "error": "❌",
            "warning": "⚠️",
            "info": "ℹ️",
        }

        emoji = emoji_map.get(message_type, "")
        if emoji:
            return f"{emoji} {message}"
        return message


def centrality_table(result: CentralityResult, top_n: Optional[int] = None) -> pd.DataFrame:
    """
    Scores of one index as a table, most prominent actors first.

    Args:
        result: Index result
        top_n: Keep only the first ``top_n`` rows

    Returns:
        pd.DataFrame: Columns ``<code>`` and ``<code>'`` indexed by vertex id
    """
    df = result.to_dataframe()
    if df.empty:
        return df
    df = df.sort_values(result.index.code, ascending=False, kind="mergesort")
    return df.head(top_n) if top_n else df


def format_matrix(matrix: LabeledMatrix, precision: int = 3) -> str:
    """Render a labeled matrix; infinite cells print as 'inf'."""
    df = matrix.to_dataframe().round(precision)
    return df.replace([np.inf, -np.inf], ["inf", "-inf"]).to_string()


def format_centrality_report(result: CentralityResult, top_n: Optional[int] = 10) -> List[str]:
    """
    Lines describing one index result: the table and the group aggregates.

    Args:
        result: Index result
        top_n: Number of actors listed

    Returns:
        List[str]: Report lines, ready to be logged
    """
    lines = [f"---- {result.name} ({result.index.code}) ----"]
    table = centrality_table(result, top_n)
    if table.empty:
        lines.append("No actors to report.")
        return lines

    lines.append(f"{table}")
    lines.append(
        f"Sum = {result.total:.6g}, mean' = {result.mean:.6g}, variance' = {result.variance:.6g}"
    )
    lines.append(
        f"Max = {result.max_value:.6g} (actors {result.max_vertices}), "
        f"min = {result.min_value:.6g} (actors {result.min_vertices})"
    )
    if result.centralization is not None:
        lines.append(f"Group centralization = {result.centralization:.6g}")
    else:
        lines.append("Group centralization undefined")
    if result.excluded:
        lines.append(f"Excluded actors: {result.excluded}")
    return lines


def format_triad_census(census: TriadCensus) -> str:
    return census.to_series().to_frame().T.to_string(index=False)


def format_clique_census(census: CliqueCensus, limit: int = 20) -> List[str]:
    """Lines listing the maximal cliques (largest first) and counts by size."""
    lines = [f"Maximal cliques: {census.count} (largest size {census.largest_size})"]
    sizes = pd.Series(census.by_size, name="cliques", dtype="int64")
    sizes.index.name = "size"
    if not sizes.empty:
        lines.append(f"{sizes.to_frame()}")
    for number, clique in enumerate(census.cliques[:limit], start=1):
        lines.append(f"  {number}: {list(clique)}")
    if census.count > limit:
        lines.append(f"  ... {census.count - limit} more")
    return lines


def format_dendrogram(dendrogram: Dendrogram) -> str:
    """Table of merge steps: level and the two clusters joined."""
    rows = [
        {"level": step.level, "left": list(step.left), "right": list(step.right)}
        for step in dendrogram.steps
    ]
    if not rows:
        return "No merges"
    return pd.DataFrame(rows).to_string()


def format_metrics(metrics: Dict[str, Any]) -> str:
    """Two-column table of graph-level metrics."""
    series = pd.Series(metrics, name="value")
    series.index.name = "metric"
    return series.to_string()


def log_lines(lines: List[str], logger: logging.Logger) -> None:
    for line in lines:
        logger.info(line)
