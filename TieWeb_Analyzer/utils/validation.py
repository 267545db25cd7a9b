"""
Validation and progress utilities for the TieWeb analysis engine.

This module provides parameter validation helpers that raise the engine's
user-facing InvalidParameterError, the size guard used by expensive
operations, and the progress tracker long-running computations report through.
"""

import logging
import time
from typing import Any, Callable, List, Optional, Union

from ..core.exceptions import (
    ConfirmationRequiredError,
    InvalidParameterError,
    InvariantViolationError,
    OperationCancelledError,
)

ProgressObserver = Callable[[int, int], None]


class CancellationToken:
    """
    Cooperative cancellation flag shared between a caller and a computation.

    The computation checks the token at every progress tick and stops with
    OperationCancelledError once ``cancel()`` has been called.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ProgressTracker:
    """
    Simple progress tracker for long-running operations.

    Besides logging, each update is forwarded to an optional observer
    callback ``(current, total)`` and checks an optional cancellation token.
    """

    def __init__(
        self,
        total: int,
        title: str = "Processing",
        logger: Optional[logging.Logger] = None,
        observer: Optional[ProgressObserver] = None,
        token: Optional[CancellationToken] = None,
    ):
        """
        Initialize the progress tracker.

        Args:
            total: Total number of items to process
            title: Title for the progress display
            logger: Logger instance for output
            observer: Callback receiving (current, total) on every update
            token: Cancellation token checked on every update
        """
        self.total = total
        self.title = title
        self.logger = logger or logging.getLogger(__name__)
        self.observer = observer
        self.token = token
        self.current = 0
        self.start_time = None

    def __enter__(self):
        """Enter context manager."""
        self.start_time = time.time()
        self.logger.info(f"Starting {self.title}...")
        self._check_cancelled()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager."""
        if self.start_time and exc_type is None:
            duration = time.time() - self.start_time
            self.logger.info(f"Completed {self.title} in {duration:.2f} seconds")
        elif exc_type is OperationCancelledError:
            self.logger.info(f"Cancelled {self.title} at {self.current}/{self.total}")

    def update(self, current: int):
        """
        Update the progress.

        Args:
            current: Current progress value

        Raises:
            OperationCancelledError: If the cancellation token was triggered
        """
        self.current = current
        if self.total > 0:
            percentage = (current / self.total) * 100
            if current % max(1, self.total // 10) == 0:  # Log every 10%
                self.logger.debug(f"{self.title}: {percentage:.1f}% ({current}/{self.total})")
        if self.observer is not None:
            self.observer(current, self.total)
        self._check_cancelled()

    def _check_cancelled(self) -> None:
        if self.token is not None and self.token.cancelled:
            raise OperationCancelledError(self.title, self.current, self.total)


def require_confirmation(operation: str, size: int, threshold: int, confirmed: bool) -> None:
    """
    Guard an expensive operation behind an explicit confirmation.

    Args:
        operation: Name of the operation
        size: Number of actors the operation would run over
        threshold: Size above which confirmation is required
        confirmed: Whether the caller already confirmed

    Raises:
        ConfirmationRequiredError: If size exceeds the threshold without confirmation
    """
    if size > threshold and not confirmed:
        raise ConfirmationRequiredError(operation, size, threshold)


def check_revision(graph: Any, revision: int, operation: str) -> None:
    """
    Verify a graph was not mutated while a computation ran over it.

    Raises:
        InvariantViolationError: If the graph revision changed
    """
    if graph.revision != revision:
        raise InvariantViolationError(
            f"Graph was modified during {operation} (revision {revision} -> {graph.revision})"
        )


def validate_positive_integer(value: Any, param_name: str) -> int:
    """
    Validate that a parameter is a positive integer.

    Args:
        value: Value to validate
        param_name: Name of the parameter for error messages

    Returns:
        int: The validated integer value

    Raises:
        InvalidParameterError: If value is not a positive integer
    """
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise InvalidParameterError(f"{param_name} must be a positive integer, got {value!r}", param_name)
    return value


def validate_non_negative_integer(value: Any, param_name: str) -> int:
    """
    Validate that a parameter is a non-negative integer.

    Raises:
        InvalidParameterError: If value is not a non-negative integer
    """
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise InvalidParameterError(f"{param_name} cannot be negative, got {value!r}", param_name)
    return value


def validate_positive_number(value: Any, param_name: str) -> Union[int, float]:
    """
    Validate that a parameter is a positive number (int or float).

    Raises:
        InvalidParameterError: If value is not a positive number
    """
    if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
        raise InvalidParameterError(f"{param_name} must be positive, got {value!r}", param_name)
    return value


def validate_range(
    value: Any, param_name: str, min_val: Union[int, float], max_val: Union[int, float]
) -> Union[int, float]:
    """
    Validate that a parameter is within a specified range.

    Args:
        value: Value to validate
        param_name: Name of the parameter for error messages
        min_val: Minimum allowed value (inclusive)
        max_val: Maximum allowed value (inclusive)

    Returns:
        Union[int, float]: The validated value

    Raises:
        InvalidParameterError: If value is not within the specified range
    """
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise InvalidParameterError(f"{param_name} must be a number", param_name)

    if not (min_val <= value <= max_val):
        raise InvalidParameterError(
            f"{param_name} must be between {min_val} and {max_val}, got {value}", param_name
        )

    return value


def validate_choice(value: Any, param_name: str, valid_choices: List[Any]) -> Any:
    """
    Validate that a parameter is one of the allowed choices.

    Raises:
        InvalidParameterError: If value is not in the list of valid choices
    """
    if value not in valid_choices:
        raise InvalidParameterError(
            f"Invalid {param_name} '{value}'. Must be one of: {valid_choices}", param_name
        )
    return value


def validate_even(value: int, param_name: str) -> int:
    """Validate that an integer is even (odd values are never rounded)."""
    if value % 2 != 0:
        raise InvalidParameterError(f"{param_name} must be even, got {value}", param_name)
    return value
