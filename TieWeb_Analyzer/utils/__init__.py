"""
Utility components for TieWeb Network Analysis.

This module provides shared utility functions and helpers:
- Input validation and size guards
- Progress reporting and cooperative cancellation
- Mathematical operations and formatting

Modules:
    validation: Parameter validation, ProgressTracker and CancellationToken
    math: Mathematical utility functions
"""

from .math import clamp_value, format_time_duration, safe_divide
from .validation import (
    CancellationToken,
    ProgressObserver,
    ProgressTracker,
    check_revision,
    require_confirmation,
    validate_choice,
    validate_even,
    validate_non_negative_integer,
    validate_positive_integer,
    validate_positive_number,
    validate_range,
)

__all__ = [
    # Progress
    "ProgressTracker",
    "ProgressObserver",
    "CancellationToken",
    # Guards
    "require_confirmation",
    "check_revision",
    # Validation functions
    "validate_positive_integer",
    "validate_non_negative_integer",
    "validate_positive_number",
    "validate_range",
    "validate_choice",
    "validate_even",
    # Mathematical functions
    "format_time_duration",
    "safe_divide",
    "clamp_value",
]
