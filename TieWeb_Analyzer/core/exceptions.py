"""
Exception classes for the TieWeb analysis engine.

Provides a hierarchy of exceptions for user-facing input errors raised by the
graph store and the analysis engines, plus a separate fatal error for broken
internal bookkeeping.
"""

from typing import Optional


class TieWebError(Exception):
    """
    Base exception for user-facing engine errors.

    Every error caused by caller input (unknown ids, invalid parameters,
    structurally unsuitable graphs) inherits from this class, so callers can
    catch all of them in one place.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """
        Initialize engine error.

        Args:
            message: Error description
        """
        self.message = message
        super().__init__(message)


class VertexNotFoundError(TieWebError):
    """Raised when a referenced vertex id does not exist in the graph."""

    def __init__(self, vertex_id: int) -> None:
        self.vertex_id = vertex_id
        super().__init__(f"Vertex {vertex_id} does not exist")


class EdgeNotFoundError(TieWebError):
    """Raised when a referenced tie does not exist in the given relation."""

    def __init__(self, source: int, target: int, relation: Optional[str] = None) -> None:
        self.source = source
        self.target = target
        self.relation = relation
        error_msg = f"No tie {source} -> {target}"
        if relation is not None:
            error_msg = f"{error_msg} (relation: {relation})"
        super().__init__(error_msg)


class DisconnectedGraphError(TieWebError):
    """
    Raised when an index requires a connected graph.

    Ordinary closeness centrality (and anything built on it) is undefined
    when some actor cannot reach another one.
    """

    def __init__(self, message: str, index_name: Optional[str] = None) -> None:
        self.index_name = index_name
        error_msg = message
        if index_name:
            error_msg = f"{message} (index: {index_name})"
        super().__init__(error_msg)


class SingularMatrixError(TieWebError):
    """Raised when inversion is requested on a non-invertible matrix."""

    def __init__(self, message: str = "Matrix is singular", size: Optional[int] = None) -> None:
        self.size = size
        error_msg = message
        if size is not None:
            error_msg = f"{message} (size: {size}x{size})"
        super().__init__(error_msg)


class InvalidParameterError(TieWebError):
    """
    Raised for structurally invalid parameters.

    Examples are an odd degree for a ring lattice, a probability outside
    [0, 1] or a negative number of nodes.
    """

    def __init__(self, message: str, parameter: Optional[str] = None) -> None:
        self.parameter = parameter
        error_msg = message
        if parameter:
            error_msg = f"{message} (parameter: {parameter})"
        super().__init__(error_msg)


class InsufficientSelectionError(TieWebError):
    """Raised when an operation needs more selected actors than it got."""

    def __init__(self, operation: str, selected: int, required: int = 3) -> None:
        self.operation = operation
        self.selected = selected
        self.required = required
        super().__init__(
            f"{operation} needs at least {required} actors, got {selected}"
        )


class MultiRelationConstraintError(TieWebError):
    """Raised when a vertex removal is attempted while several relations exist."""

    def __init__(self, vertex_id: int, relation_count: int) -> None:
        self.vertex_id = vertex_id
        self.relation_count = relation_count
        super().__init__(
            f"Cannot remove vertex {vertex_id} while the graph has "
            f"{relation_count} relations"
        )


class ConfirmationRequiredError(TieWebError):
    """
    Raised before an expensive operation runs on a large graph.

    The caller is expected to ask the user and repeat the call with
    ``confirmed=True``.

    Attributes:
        operation: Name of the guarded operation
        size: Number of actors the operation would process
        threshold: Size above which confirmation is required
    """

    def __init__(self, operation: str, size: int, threshold: int) -> None:
        self.operation = operation
        self.size = size
        self.threshold = threshold
        super().__init__(
            f"{operation} on {size} actors exceeds the threshold of {threshold} "
            f"actors and may take several minutes; confirmation required"
        )


class OperationCancelledError(TieWebError):
    """Raised when a running computation observes a cancellation request."""

    def __init__(self, operation: str, progress: int = 0, total: int = 0) -> None:
        self.operation = operation
        self.progress = progress
        self.total = total
        super().__init__(f"{operation} cancelled at {progress}/{total}")


class InvariantViolationError(Exception):
    """
    Fatal error for corrupted internal state.

    Not a TieWebError, so catching user-facing errors never hides it. It
    signals a bug, for example broken id bookkeeping or a graph mutated
    during a computation.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
