"""
Core foundation components for TieWeb network analysis.

This module contains the functionality every engine builds on:
- Custom exception classes and error hierarchy
- Type definitions and result data structures
- The labeled dense matrix
- The multi-relational graph store and its structural edits

Modules:
    exceptions: Custom exception classes (TieWebError hierarchy)
    types: Type definitions (Vertex, Edge, CentralityResult, LayoutResult, etc.)
    matrix: LabeledMatrix, the dense row-major matrix with vertex-id labels
    graph: Graph, the multi-relational graph store
    transforms: Symmetrization, dichotomization and selection-based builders
"""

from .exceptions import (
    ConfirmationRequiredError,
    DisconnectedGraphError,
    EdgeNotFoundError,
    InsufficientSelectionError,
    InvalidParameterError,
    InvariantViolationError,
    MultiRelationConstraintError,
    OperationCancelledError,
    SingularMatrixError,
    TieWebError,
    VertexNotFoundError,
)
from .graph import Graph
from .matrix import LabeledMatrix
from .types import (
    CentralityResult,
    CliqueCensus,
    Dendrogram,
    DistributionSeries,
    Edge,
    EdgeType,
    LayoutResult,
    MergeStep,
    OperationResult,
    TriadCensus,
    Vertex,
)

__all__ = [
    # Exceptions
    "TieWebError",
    "VertexNotFoundError",
    "EdgeNotFoundError",
    "DisconnectedGraphError",
    "SingularMatrixError",
    "InvalidParameterError",
    "InsufficientSelectionError",
    "MultiRelationConstraintError",
    "ConfirmationRequiredError",
    "OperationCancelledError",
    "InvariantViolationError",
    # Types
    "Vertex",
    "Edge",
    "EdgeType",
    "CentralityResult",
    "DistributionSeries",
    "TriadCensus",
    "CliqueCensus",
    "MergeStep",
    "Dendrogram",
    "LayoutResult",
    "OperationResult",
    # Store
    "Graph",
    "LabeledMatrix",
]
