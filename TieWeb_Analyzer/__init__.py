"""
TieWeb Network Analysis Package

A social network analysis engine: a multi-relational graph store with
centrality and prestige indices, distance and walk matrices, structural
equivalence, clique and triad censuses, random network generators and
prominence-based or force-directed layouts.

This package provides:
- Twelve prominence indices with standardized scores and group centralization
- Dense labeled matrices exportable to pandas
- Size guards, progress reporting and cooperative cancellation for long runs
- A facade returning typed success/failure results

Modules:
    engine: NetworkEngine facade
    config: Configuration management and validation
    core: Graph store, matrices, result types and exceptions
    analysis: Network analysis algorithms
    data: Random network generators and networkx conversion
    visualization: Layout computation
    output: Report formatting
    utils: Shared utilities and helper functions

Example:
    >>> from TieWeb_Analyzer import NetworkEngine
    >>>
    >>> engine = NetworkEngine()
    >>> engine.generate("scale-free", nodes=100, seed=3)
    >>> result = engine.compute_index("PRP").unwrap()
    >>> result.ranked(5)
"""

__version__ = "1.0.0"
__author__ = "Alex Marshall - github.com/AlexM1010"

from .analysis import ProminenceIndex, compute_index
from .config import (
    AnalysisOptions,
    TieWebConfig,
    get_configuration_manager,
    load_config_from_dict,
)
from .core import (
    CentralityResult,
    Graph,
    LabeledMatrix,
    OperationResult,
    TieWebError,
)
from .engine import NetworkEngine
from .utils import CancellationToken, ProgressTracker

__all__ = [
    "__version__",
    "NetworkEngine",
    "Graph",
    "LabeledMatrix",
    "CentralityResult",
    "OperationResult",
    "TieWebError",
    "ProminenceIndex",
    "compute_index",
    "AnalysisOptions",
    "TieWebConfig",
    "get_configuration_manager",
    "load_config_from_dict",
    "CancellationToken",
    "ProgressTracker",
]
