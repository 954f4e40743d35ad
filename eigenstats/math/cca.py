"""
Canonical correlation analysis for eigenstats.

A CCAModel holds two eigenstructures: the canonical weights of the dependent
set (y) and of the independent set (x). Both carry the squared canonical
correlations as eigenvalues.
"""

import logging
from typing import Any, List, Optional, Sequence

import numpy as np
import scipy.linalg

from eigenstats.errors import (
    DegenerateInputError, DimensionMismatchError, InvalidInputError
)
from eigenstats.math.corr import correlation_values
from eigenstats.math.eigen import EigenModel, normalize_vector, orient_vector
from eigenstats.math.named_matrix import as_named_matrix
from eigenstats.utils.general import all_finite

logger = logging.getLogger(__name__)


class CCAModel:
    """
    Canonical structure of a dependent (y) and an independent (x) variable set.
    """

    def __init__(self,
                 y: EigenModel,
                 x: EigenModel,
                 number_of_coefficients: Optional[int] = None,
                 labels: Optional[Sequence[Any]] = None):
        """
        Initialize a CCAModel.

        Args:
            y: Canonical weights of the dependent set, one variate per row
            x: Canonical weights of the independent set, one variate per row
            number_of_coefficients: Number of canonical variate pairs
                (default: the smaller of the two component counts)
            labels: Variable labels, dependent set first
        """
        if number_of_coefficients is None:
            number_of_coefficients = min(y.n_components, x.n_components)
        if number_of_coefficients < 0 or number_of_coefficients > min(x.dimension, y.dimension):
            raise DimensionMismatchError(
                f"The number of coefficients ({number_of_coefficients}) must lie in "
                f"[0, {min(x.dimension, y.dimension)}]")
        if number_of_coefficients > min(y.n_components, x.n_components):
            raise DimensionMismatchError(
                f"Both sets need at least {number_of_coefficients} canonical variates")
        if labels is not None and len(labels) != y.dimension + x.dimension:
            raise DimensionMismatchError(
                f"Got {len(labels)} labels for {y.dimension + x.dimension} variables")

        self._y = y
        self._x = x
        self._number_of_coefficients = int(number_of_coefficients)
        self._labels = None if labels is None else list(labels)

    @property
    def y(self) -> EigenModel:
        return self._y

    @property
    def x(self) -> EigenModel:
        return self._x

    @property
    def number_of_coefficients(self) -> int:
        return self._number_of_coefficients

    @property
    def labels(self) -> Optional[List[Any]]:
        return None if self._labels is None else list(self._labels)

    def canonical_correlations(self) -> np.ndarray:
        """Canonical correlations, largest first."""
        k = self._number_of_coefficients
        return np.sqrt(np.clip(self._y.eigenvalues[:k], 0.0, None))

    def __repr__(self) -> str:
        return (f"CCAModel(ny={self._y.dimension}, nx={self._x.dimension}, "
                f"number_of_coefficients={self._number_of_coefficients})")


def fit_cca(table: Any, n_dependent: int) -> CCAModel:
    """
    Fit a canonical correlation model.

    The first n_dependent columns form the dependent set, the remaining
    columns the independent set. The dependent weights a solve
        Ryx Rxx^-1 Rxy a = rho^2 Ryy a
    and the independent weights are b ~ Rxx^-1 Rxy a. Weights are scaled to
    unit length.

    Args:
        table: NamedMatrix (or array), observations in rows
        n_dependent: Number of dependent variables

    Returns:
        A new CCAModel with min(ny, nx) coefficients
    """
    nmat = as_named_matrix(table)
    values = nmat.values
    n_obs, n_vars = values.shape
    ny = int(n_dependent)
    nx = n_vars - ny

    if ny < 1 or nx < 1:
        raise InvalidInputError(
            f"Both variable sets need at least one variable (dependent: {ny}, independent: {nx})")
    if not all_finite(values):
        raise InvalidInputError("All table elements should be defined.")
    if n_obs <= n_vars:
        raise InvalidInputError(
            f"The number of observations ({n_obs}) should exceed the number of variables ({n_vars})")

    r = correlation_values(values)
    ryy = r[:ny, :ny]
    rxx = r[ny:, ny:]
    ryx = r[:ny, ny:]

    try:
        m = ryx @ scipy.linalg.solve(rxx, ryx.T, assume_a='pos')
        m = (m + m.T) / 2.0
        w, a = scipy.linalg.eigh(m, ryy)
    except (np.linalg.LinAlgError, ValueError) as e:
        raise DegenerateInputError(f"The within-set correlation matrices are singular: {e}") from e

    k = min(ny, nx)
    order = np.argsort(-w, kind='stable')[:k]
    rho2 = np.clip(w[order], 0.0, 1.0)

    y_vectors = []
    x_vectors = []
    for i in order:
        ai = orient_vector(normalize_vector(a[:, i]))
        bi = scipy.linalg.solve(rxx, ryx.T @ ai, assume_a='pos')
        y_vectors.append(ai)
        x_vectors.append(normalize_vector(bi))

    logger.debug(f"Fitted CCA with {k} canonical pairs; correlations {np.sqrt(rho2).round(4).tolist()}")

    y = EigenModel(rho2, np.array(y_vectors))
    x = EigenModel(rho2, np.array(x_vectors))
    labels = [str(name) for name in nmat.colnames()]
    return CCAModel(y, x, k, labels)
