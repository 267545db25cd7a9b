"""
Pytest configuration and shared fixtures for TieWeb tests.

This module provides small reference networks whose index values are known
in closed form, plus helpers used across the unit and integration suites.
"""

import logging
from typing import Iterable, Tuple

import pytest

from TieWeb_Analyzer.core.graph import Graph


def build_graph(n: int, ties: Iterable[Tuple[int, int]], directed: bool = False) -> Graph:
    """Graph with actors 1..n and the given ties (weight 1)."""
    graph = Graph(directed=directed)
    graph.add_vertices(n)
    for source, target in ties:
        graph.add_edge(source, target)
    return graph


@pytest.fixture
def make_graph():
    """Fixture exposing ``build_graph`` to tests."""
    return build_graph


@pytest.fixture
def mock_logger():
    """Fixture providing a logger for functions that report through one."""
    return logging.getLogger(__name__)


@pytest.fixture
def star_graph() -> Graph:
    """Undirected star: center 1 tied to leaves 2..5."""
    return build_graph(5, [(1, 2), (1, 3), (1, 4), (1, 5)])


@pytest.fixture
def complete_graph() -> Graph:
    """Undirected complete graph on 5 actors."""
    return build_graph(5, [(i, j) for i in range(1, 6) for j in range(i + 1, 6)])


@pytest.fixture
def directed_triangle() -> Graph:
    """Directed cycle 1 -> 2 -> 3 -> 1."""
    return build_graph(3, [(1, 2), (2, 3), (3, 1)], directed=True)


@pytest.fixture
def path_graph() -> Graph:
    """Undirected path 1 - 2 - 3 - 4."""
    return build_graph(4, [(1, 2), (2, 3), (3, 4)])


@pytest.fixture
def two_triangles() -> Graph:
    """Two disconnected undirected triangles: 1-2-3 and 4-5-6."""
    return build_graph(6, [(1, 2), (2, 3), (1, 3), (4, 5), (5, 6), (4, 6)])
