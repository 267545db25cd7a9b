"""
Closed enumeration of the prominence indices.

Each ProminenceIndex member carries its short code, long name, whether it is a
prestige index and which compute function produces it. ``compute_index``
dispatches by member or by code.
"""

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional, Union

from ..core.exceptions import InvalidParameterError
from ..utils.validation import require_confirmation

if TYPE_CHECKING:
    from ..config import AnalysisOptions, IterationConfig
    from ..core.graph import Graph
    from ..core.types import CentralityResult
    from ..utils.validation import CancellationToken, ProgressObserver


class ProminenceIndex(Enum):
    """Actor prominence indices (centrality and prestige)."""

    DC = ("DC", "Degree Centrality", False)
    CC = ("CC", "Closeness Centrality", False)
    IRCC = ("IRCC", "Influence Range Closeness Centrality", False)
    BC = ("BC", "Betweenness Centrality", False)
    SC = ("SC", "Stress Centrality", False)
    EC = ("EC", "Eccentricity Centrality", False)
    PC = ("PC", "Power Centrality", False)
    IC = ("IC", "Information Centrality", False)
    EVC = ("EVC", "Eigenvector Centrality", False)
    DP = ("DP", "Degree Prestige", True)
    PRP = ("PRP", "PageRank Prestige", True)
    PP = ("PP", "Proximity Prestige", True)

    def __init__(self, code: str, long_name: str, is_prestige: bool):
        self.code = code
        self.long_name = long_name
        self.is_prestige = is_prestige

    @property
    def is_iterative(self) -> bool:
        return self in (ProminenceIndex.EVC, ProminenceIndex.PRP)

    @property
    def is_guarded(self) -> bool:
        """Whether the index needs confirmation on large graphs."""
        return self in (ProminenceIndex.IC, ProminenceIndex.BC, ProminenceIndex.SC)

    @property
    def requires_connected(self) -> bool:
        return self is ProminenceIndex.CC

    @property
    def compute_function(self) -> Callable[..., "CentralityResult"]:
        return _compute_functions()[self]

    @classmethod
    def from_code(cls, code: Union[str, "ProminenceIndex"]) -> "ProminenceIndex":
        """
        Look up an index by its short code (case-insensitive).

        Raises:
            InvalidParameterError: If the code is unknown
        """
        if isinstance(code, cls):
            return code
        for member in cls:
            if member.code == str(code).upper():
                return member
        raise InvalidParameterError(
            f"Unknown prominence index '{code}'. Must be one of: {[m.code for m in cls]}", "index"
        )

    def compute(
        self,
        graph: "Graph",
        options: Optional["AnalysisOptions"] = None,
        iterations: Optional["IterationConfig"] = None,
        threshold: Optional[int] = None,
        confirmed: bool = False,
        observer: Optional["ProgressObserver"] = None,
        token: Optional["CancellationToken"] = None,
    ) -> "CentralityResult":
        """
        Compute this index over the current relation of a graph.

        Args:
            graph: Graph to analyze
            options: Weight and isolate handling
            iterations: Solver settings for EVC and PRP
            threshold: Size above which guarded indices require confirmation
            confirmed: Whether the caller confirmed running on a large graph
            observer: Progress callback
            token: Cancellation token

        Returns:
            CentralityResult: Scores and group aggregates
        """
        kwargs = {"observer": observer, "token": token}
        if self.is_iterative:
            kwargs["iterations"] = iterations
        if self.is_guarded and self is not ProminenceIndex.IC and threshold is not None:
            # IC checks its own (isolate-free) size
            require_confirmation(self.long_name, graph.vertex_count, threshold, confirmed)
        if self is ProminenceIndex.IC:
            kwargs["threshold"] = threshold
            kwargs["confirmed"] = confirmed
        return self.compute_function(graph, options, **kwargs)


def _compute_functions() -> Dict[ProminenceIndex, Callable[..., "CentralityResult"]]:
    # Imported here because the index modules tag their results with ProminenceIndex
    from . import centrality, prestige

    return {
        ProminenceIndex.DC: centrality.degree_centrality,
        ProminenceIndex.CC: centrality.closeness_centrality,
        ProminenceIndex.IRCC: centrality.influence_range_closeness,
        ProminenceIndex.BC: centrality.betweenness_centrality,
        ProminenceIndex.SC: centrality.stress_centrality,
        ProminenceIndex.EC: centrality.eccentricity_centrality,
        ProminenceIndex.PC: centrality.power_centrality,
        ProminenceIndex.IC: centrality.information_centrality,
        ProminenceIndex.EVC: centrality.eigenvector_centrality,
        ProminenceIndex.DP: prestige.degree_prestige,
        ProminenceIndex.PRP: prestige.pagerank_prestige,
        ProminenceIndex.PP: prestige.proximity_prestige,
    }


def compute_index(
    graph: "Graph",
    index: Union[str, ProminenceIndex],
    options: Optional["AnalysisOptions"] = None,
    **kwargs,
) -> "CentralityResult":
    """
    Compute a prominence index given by member or code.

    Args:
        graph: Graph to analyze
        index: ProminenceIndex member or its code (e.g. "BC")
        options: Weight and isolate handling
        **kwargs: Passed to ``ProminenceIndex.compute``

    Returns:
        CentralityResult: Scores and group aggregates
    """
    return ProminenceIndex.from_code(index).compute(graph, options, **kwargs)
