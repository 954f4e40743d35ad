"""
Correlation matrices for eigenstats.

This module computes Pearson correlation matrices between the columns of a
table. The result is a square NamedMatrix labeled by column names, the shape
consumed by the canonical correlation analyses.
"""

import logging
from typing import Any, List

import numpy as np

from eigenstats.errors import InvalidInputError
from eigenstats.math.named_matrix import NamedMatrix, as_named_matrix
from eigenstats.utils.general import all_finite

logger = logging.getLogger(__name__)


def correlation_values(values: np.ndarray) -> np.ndarray:
    """
    Compute the Pearson correlation matrix between the columns of an array.

    Args:
        values: Observations in rows, variables in columns

    Returns:
        Correlation matrix as numpy array
    """
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 2 or values.shape[0] < 2:
        raise InvalidInputError("Need at least two observations to compute correlations")
    if not all_finite(values):
        raise InvalidInputError("All table elements should be defined.")

    with np.errstate(divide='ignore', invalid='ignore'):
        corr = np.atleast_2d(np.corrcoef(values, rowvar=False))

    constant = np.flatnonzero(np.ptp(values, axis=0) == 0)
    if constant.size > 0:
        logger.warning(f"Columns {constant.tolist()} are constant; their correlations are set to zero")

    # Replace NaN values with zeros
    corr = np.nan_to_num(corr, nan=0.0)

    # Set diagonal to 1
    np.fill_diagonal(corr, 1.0)

    return corr


def correlation_matrix(table: Any) -> NamedMatrix:
    """
    Compute the correlation matrix between the columns of a table.

    Args:
        table: NamedMatrix (or array) with observations in rows

    Returns:
        Square NamedMatrix with the table's column names on both axes
    """
    nmat = as_named_matrix(table)
    corr = correlation_values(nmat.values)
    names: List[Any] = nmat.colnames()
    return NamedMatrix(corr, rownames=names, colnames=names)
