"""
Named Matrix implementation for eigenstats.

This module provides a data structure for numeric tables with named rows and
columns. It is the input and output shape of every analysis: data tables,
correlation matrices, component scores and reconstructions.
"""

import numpy as np
import pandas as pd
from typing import List, Optional, Union, Any, Sequence

from eigenstats.errors import DimensionMismatchError
from eigenstats.utils.general import sequential_labels


class IndexHash:
    """
    Maintains an ordered index of names with fast lookup.
    """

    def __init__(self, names: Optional[Sequence[Any]] = None):
        """
        Initialize an IndexHash with optional initial names.

        Args:
            names: Optional list of initial names
        """
        self._names = [] if names is None else list(names)
        self._index_hash = {}
        for idx, name in enumerate(self._names):
            # First occurrence wins for duplicated (e.g. empty) labels
            self._index_hash.setdefault(name, idx)

    def get_names(self) -> List[Any]:
        """Return the ordered list of names."""
        return self._names.copy()

    def index(self, name: Any) -> Optional[int]:
        """
        Get the index for a given name, or None if not found.

        Args:
            name: The name to look up

        Returns:
            The index if found, None otherwise
        """
        return self._index_hash.get(name)

    def __len__(self) -> int:
        """Return the number of names in the index."""
        return len(self._names)

    def __contains__(self, name: Any) -> bool:
        """Check if a name is in the index."""
        return name in self._index_hash


class NamedMatrix:
    """
    A matrix with named rows and columns.

    Uses a pandas DataFrame as the underlying storage. Instances are treated
    as immutable: every modifying operation returns a new NamedMatrix.
    """

    def __init__(self,
                 matrix: Optional[Union[np.ndarray, pd.DataFrame, List[List[float]]]] = None,
                 rownames: Optional[Sequence[Any]] = None,
                 colnames: Optional[Sequence[Any]] = None):
        """
        Initialize a NamedMatrix with optional initial data.

        Args:
            matrix: Initial matrix data (numpy array, nested lists or DataFrame)
            rownames: List of row names
            colnames: List of column names
        """
        if matrix is None:
            n_rows = 0 if rownames is None else len(rownames)
            n_cols = 0 if colnames is None else len(colnames)
            matrix = np.zeros((n_rows, n_cols))

        if isinstance(matrix, pd.DataFrame):
            df = matrix.copy()
            if rownames is not None:
                df.index = list(rownames)
            if colnames is not None:
                df.columns = list(colnames)
        else:
            values = np.asarray(matrix, dtype=np.float64)
            if values.ndim == 1:
                values = values.reshape(1, -1)
            if values.ndim != 2:
                raise DimensionMismatchError(
                    f"A NamedMatrix needs two-dimensional data, got {values.ndim} dimensions")
            rows = list(rownames) if rownames is not None else list(range(values.shape[0]))
            cols = list(colnames) if colnames is not None else list(range(values.shape[1]))
            if len(rows) != values.shape[0] or len(cols) != values.shape[1]:
                raise DimensionMismatchError(
                    f"Got {len(rows)} row names and {len(cols)} column names "
                    f"for a {values.shape[0]}x{values.shape[1]} matrix")
            df = pd.DataFrame(values, index=rows, columns=cols)

        self._matrix = df
        self._row_index = IndexHash(df.index.tolist())
        self._col_index = IndexHash(df.columns.tolist())

    @classmethod
    def zeros(cls, n_rows: int, n_cols: int,
              rownames: Optional[Sequence[Any]] = None,
              colnames: Optional[Sequence[Any]] = None) -> 'NamedMatrix':
        """
        Create a NamedMatrix of the given shape filled with zeros.

        Args:
            n_rows: Number of rows
            n_cols: Number of columns
            rownames: Optional row names
            colnames: Optional column names

        Returns:
            A new NamedMatrix
        """
        return cls(np.zeros((n_rows, n_cols)), rownames, colnames)

    @property
    def matrix(self) -> pd.DataFrame:
        """Get the underlying DataFrame."""
        return self._matrix

    @property
    def values(self) -> np.ndarray:
        """Get the matrix as a float numpy array."""
        return self._matrix.to_numpy(dtype=np.float64)

    @property
    def shape(self):
        return self._matrix.shape

    @property
    def n_rows(self) -> int:
        return self._matrix.shape[0]

    @property
    def n_cols(self) -> int:
        return self._matrix.shape[1]

    def rownames(self) -> List[Any]:
        """Get the list of row names."""
        return self._row_index.get_names()

    def colnames(self) -> List[Any]:
        """Get the list of column names."""
        return self._col_index.get_names()

    def get(self, row: int, col: int) -> float:
        """
        Get a cell by position.

        Args:
            row: Zero-based row position
            col: Zero-based column position

        Returns:
            The cell value
        """
        return float(self._matrix.iat[row, col])

    def get_by_name(self, row_name: Any, col_name: Any) -> float:
        """
        Get a cell by row and column name.

        Args:
            row_name: The name of the row
            col_name: The name of the column

        Returns:
            The cell value
        """
        row = self._row_index.index(row_name)
        col = self._col_index.index(col_name)
        if row is None:
            raise KeyError(f"Row name '{row_name}' not found")
        if col is None:
            raise KeyError(f"Column name '{col_name}' not found")
        return self.get(row, col)

    def with_rownames(self, rownames: Sequence[Any]) -> 'NamedMatrix':
        """
        Return a copy with all row names replaced.

        Args:
            rownames: New row names, one per row

        Returns:
            A new NamedMatrix
        """
        if len(rownames) != self.n_rows:
            raise DimensionMismatchError(
                f"Expected {self.n_rows} row names, got {len(rownames)}")
        return NamedMatrix(self.values, rownames, self.colnames())

    def with_colnames(self, colnames: Sequence[Any]) -> 'NamedMatrix':
        """
        Return a copy with all column names replaced.

        Args:
            colnames: New column names, one per column

        Returns:
            A new NamedMatrix
        """
        if len(colnames) != self.n_cols:
            raise DimensionMismatchError(
                f"Expected {self.n_cols} column names, got {len(colnames)}")
        return NamedMatrix(self.values, self.rownames(), colnames)

    def with_sequential_rownames(self, prefix: str) -> 'NamedMatrix':
        """Return a copy with rows named prefix1, prefix2, ..."""
        return self.with_rownames(sequential_labels(prefix, self.n_rows))

    def with_sequential_colnames(self, prefix: str) -> 'NamedMatrix':
        """Return a copy with columns named prefix1, prefix2, ..."""
        return self.with_colnames(sequential_labels(prefix, self.n_cols))

    def transpose(self) -> 'NamedMatrix':
        """
        Transpose the matrix, swapping row and column names.

        Returns:
            Transposed NamedMatrix
        """
        return NamedMatrix(
            matrix=self.values.T,
            rownames=self.colnames(),
            colnames=self.rownames()
        )

    def __repr__(self) -> str:
        return f"NamedMatrix(rows={self.n_rows}, cols={self.n_cols})"

    def __str__(self) -> str:
        return (f"NamedMatrix with {self.n_rows} rows and "
                f"{self.n_cols} columns\n{self._matrix}")


def as_named_matrix(data: Union[NamedMatrix, np.ndarray, pd.DataFrame, List[List[float]]]) -> NamedMatrix:
    """
    Wrap data in a NamedMatrix unless it already is one.

    Args:
        data: NamedMatrix, DataFrame, numpy array or nested lists

    Returns:
        A NamedMatrix view of the data
    """
    if isinstance(data, NamedMatrix):
        return data
    return NamedMatrix(data)


def create_named_matrix(matrix_data: Optional[Union[np.ndarray, List[List[Any]]]] = None,
                        rownames: Optional[List[Any]] = None,
                        colnames: Optional[List[Any]] = None) -> NamedMatrix:
    """
    Create a NamedMatrix from data.

    Args:
        matrix_data: Initial matrix data (numpy array or nested lists)
        rownames: List of row names
        colnames: List of column names

    Returns:
        A new NamedMatrix
    """
    if matrix_data is not None and not isinstance(matrix_data, np.ndarray):
        matrix_data = np.array(matrix_data, dtype=np.float64)
    return NamedMatrix(matrix_data, rownames, colnames)
