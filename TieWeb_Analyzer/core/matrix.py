"""
Labeled dense matrix used by every analysis engine.

A LabeledMatrix is a row-major numpy buffer with explicit dimensions whose
rows and columns are tagged with stable vertex ids (or any other hashable
label, such as clique numbers). Operations always return new matrices; no
routine writes into a matrix it also reads from.
"""

from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Sequence

import numpy as np
import pandas as pd

from .exceptions import InvalidParameterError, VertexNotFoundError


@dataclass(eq=False)
class LabeledMatrix:
    """
    Dense two-dimensional real matrix with labeled rows and columns.

    Attributes:
        data: C-contiguous float64 array of shape (rows, cols)
        row_labels: Label of every row (vertex ids for actor matrices)
        col_labels: Label of every column; defaults to row_labels
        name: Short description used in reports
    """

    data: np.ndarray
    row_labels: List[Hashable]
    col_labels: Optional[List[Hashable]] = None
    name: str = ""
    _row_index: Dict[Hashable, int] = field(default_factory=dict, init=False, repr=False)
    _col_index: Dict[Hashable, int] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self.data = np.ascontiguousarray(self.data, dtype=float)
        if self.data.ndim != 2:
            raise InvalidParameterError(
                f"Matrix data must be two-dimensional, got {self.data.ndim} dimensions"
            )
        self.row_labels = list(self.row_labels)
        if self.col_labels is None:
            self.col_labels = list(self.row_labels)
        else:
            self.col_labels = list(self.col_labels)
        if self.data.shape != (len(self.row_labels), len(self.col_labels)):
            raise InvalidParameterError(
                f"Matrix shape {self.data.shape} does not match "
                f"{len(self.row_labels)} row and {len(self.col_labels)} column labels"
            )
        self._row_index = {label: i for i, label in enumerate(self.row_labels)}
        self._col_index = {label: j for j, label in enumerate(self.col_labels)}

    @property
    def rows(self) -> int:
        return self.data.shape[0]

    @property
    def cols(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self):
        return self.data.shape

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    def row_position(self, label: Hashable) -> int:
        """Return the row position of a label."""
        try:
            return self._row_index[label]
        except KeyError:
            raise VertexNotFoundError(label) from None

    def col_position(self, label: Hashable) -> int:
        """Return the column position of a label."""
        try:
            return self._col_index[label]
        except KeyError:
            raise VertexNotFoundError(label) from None

    def value(self, row_label: Hashable, col_label: Hashable) -> float:
        """
        Look up a cell by its row and column labels.

        Args:
            row_label: Label of the row (usually a vertex id)
            col_label: Label of the column

        Returns:
            float: The stored value

        Raises:
            VertexNotFoundError: If either label is unknown
        """
        return float(self.data[self.row_position(row_label), self.col_position(col_label)])

    def row(self, label: Hashable) -> np.ndarray:
        return self.data[self.row_position(label)].copy()

    def column(self, label: Hashable) -> np.ndarray:
        return self.data[:, self.col_position(label)].copy()

    def transpose(self) -> "LabeledMatrix":
        return LabeledMatrix(
            self.data.T.copy(),
            list(self.col_labels),
            list(self.row_labels),
            name=f"{self.name} (transposed)" if self.name else "",
        )

    def with_data(self, data: np.ndarray, name: Optional[str] = None) -> "LabeledMatrix":
        """Return a matrix with the same labels and new contents."""
        return LabeledMatrix(
            data, list(self.row_labels), list(self.col_labels), name=name or self.name
        )

    def submatrix(self, labels: Sequence[Hashable]) -> "LabeledMatrix":
        """Restrict a square matrix to the given labels (same order for rows and columns)."""
        positions = [self.row_position(label) for label in labels]
        col_positions = [self.col_position(label) for label in labels]
        data = self.data[np.ix_(positions, col_positions)]
        return LabeledMatrix(data, list(labels), list(labels), name=self.name)

    def same_labels(self, other: "LabeledMatrix") -> bool:
        return self.row_labels == other.row_labels and self.col_labels == other.col_labels

    def equals(self, other: "LabeledMatrix", tolerance: float = 0.0) -> bool:
        """
        Compare two matrices cell by cell.

        Infinite cells compare equal when both are infinite with the same sign.

        Args:
            other: Matrix to compare with
            tolerance: Absolute tolerance; 0.0 means exact equality

        Returns:
            bool: True if labels and contents match
        """
        if not self.same_labels(other):
            return False
        if tolerance == 0.0:
            return bool(np.array_equal(self.data, other.data))
        return bool(np.allclose(self.data, other.data, atol=tolerance, rtol=0.0))

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame indexed by the row and column labels."""
        return pd.DataFrame(self.data, index=self.row_labels, columns=self.col_labels)

    def to_dict(self) -> Dict[Hashable, Dict[Hashable, float]]:
        return {
            row_label: {
                col_label: float(self.data[i, j])
                for j, col_label in enumerate(self.col_labels)
            }
            for i, row_label in enumerate(self.row_labels)
        }

    def __repr__(self) -> str:
        title = self.name or "LabeledMatrix"
        return f"<{title} {self.rows}x{self.cols}>"
