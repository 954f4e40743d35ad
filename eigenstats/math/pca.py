"""
PCA (Principal Component Analysis) implementation for eigenstats.

This module fits principal component models from tabular data and provides
the analyses built on them: projection into component space, z-scores,
reconstruction, fraction of variance explained and the test for equality of
the trailing eigenvalues.
"""

import logging
import math
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Union

import numpy as np
import pandas as pd

from eigenstats.components.config import ConfigManager
from eigenstats.errors import (
    DegenerateInputError, DimensionMismatchError, InvalidInputError
)
from eigenstats.math.eigen import EigenModel
from eigenstats.math.named_matrix import NamedMatrix, as_named_matrix
from eigenstats.math.stats import chi_square_q, fraction_of_variation, sscp
from eigenstats.utils.general import all_finite, long_matmul

logger = logging.getLogger(__name__)

TableLike = Union[NamedMatrix, np.ndarray, pd.DataFrame, List[List[float]]]


class EqualityTest(NamedTuple):
    """Result of the test for equality of eigenvalues. None means undefined."""
    probability: Optional[float]
    chi_square: Optional[float]
    degrees_of_freedom: Optional[float]


class PCAModel:
    """
    A principal component model.

    Composes an EigenModel of the covariance matrix with the centroid and
    variable labels of the data it was fitted on.
    """

    def __init__(self,
                 eigen: EigenModel,
                 centroid: Sequence[float],
                 labels: Optional[Sequence[str]] = None,
                 number_of_observations: int = 0):
        """
        Initialize a PCAModel.

        Args:
            eigen: Eigenstructure of the covariance matrix
            centroid: Column means of the fitting data
            labels: Variable labels (default: empty strings)
            number_of_observations: Row count of the fitting data
        """
        centroid = np.array(centroid, dtype=np.float64).reshape(-1)
        if centroid.shape[0] != eigen.dimension:
            raise DimensionMismatchError(
                f"Centroid has length {centroid.shape[0]}, model dimension is {eigen.dimension}")
        labels = [''] * eigen.dimension if labels is None else [str(label) for label in labels]
        if len(labels) != eigen.dimension:
            raise DimensionMismatchError(
                f"Got {len(labels)} labels for dimension {eigen.dimension}")

        centroid.flags.writeable = False
        self._eigen = eigen
        self._centroid = centroid
        self._labels = labels
        self.number_of_observations = int(number_of_observations)

    @classmethod
    def create(cls, n_components: int, dimension: int) -> 'PCAModel':
        """
        Create an empty model with zero eigenstructure and centroid.

        Used when a model is rebuilt from stored state rather than fitted.
        """
        eigen = EigenModel(np.zeros(n_components), np.zeros((n_components, dimension)))
        return cls(eigen, np.zeros(dimension))

    @property
    def eigen(self) -> EigenModel:
        return self._eigen

    @property
    def eigenvalues(self) -> np.ndarray:
        return self._eigen.eigenvalues

    @property
    def eigenvectors(self) -> np.ndarray:
        return self._eigen.eigenvectors

    @property
    def dimension(self) -> int:
        return self._eigen.dimension

    @property
    def n_components(self) -> int:
        return self._eigen.n_components

    @property
    def centroid(self) -> np.ndarray:
        return self._centroid

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def to_eigen(self) -> EigenModel:
        """Return a copy of the underlying eigenstructure."""
        return self._eigen.copy()

    def info(self) -> Dict[str, Any]:
        return {
            'n_components': self.n_components,
            'dimension': self.dimension,
            'number_of_observations': self.number_of_observations,
        }

    def __repr__(self) -> str:
        return (f"PCAModel(n_components={self.n_components}, dimension={self.dimension}, "
                f"number_of_observations={self.number_of_observations})")


def _component_prefix() -> str:
    return ConfigManager.get_config().get('pca.component-label-prefix', 'pc')


def fit_pca(data: TableLike, by_columns: bool = False) -> PCAModel:
    """
    Fit a principal component model.

    Args:
        data: Table of numbers. Rows are observations unless by_columns is set,
            in which case columns are observations and rows are variables.
        by_columns: Whether observations are the columns of the table

    Returns:
        A new PCAModel
    """
    try:
        nmat = as_named_matrix(data)
        values = nmat.values
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"All matrix elements should be numbers: {e}") from e

    if values.size == 0:
        raise InvalidInputError("Cannot fit a PCA on an empty table")
    if not all_finite(values):
        raise InvalidInputError("All matrix elements should be defined.")
    if np.linalg.norm(values) <= 0.0:
        raise DegenerateInputError("Not all values in your table should be zero: all values are zero.")

    if by_columns:
        a = values.T.copy()
        names = nmat.rownames()
    else:
        a = values.copy()
        names = nmat.colnames()

    n_observations, n_variables = a.shape
    if n_observations < 2:
        raise DegenerateInputError(
            "At least two observations are needed to estimate a covariance matrix")

    if n_observations < n_variables and ConfigManager.get_config().get('pca.warn-few-observations', True):
        logger.warning(
            f"The number of observations ({n_observations}) is less than the number of "
            f"variables ({n_variables}); the smallest components are not estimable")

    centroid = a.mean(axis=0)
    a -= centroid

    raw = EigenModel.from_square_root(a)
    # The SVD gives the spectrum of A'A; the covariance matrix is A'A / (N - 1)
    eigen = EigenModel(raw.eigenvalues / (n_observations - 1), raw.eigenvectors)

    labels = [''] * n_variables if not isinstance(data, (NamedMatrix, pd.DataFrame)) else [str(n) for n in names]

    logger.debug(f"Fitted PCA with {eigen.n_components} components on "
                 f"{n_observations} observations of {n_variables} variables")

    return PCAModel(eigen, centroid, labels, n_observations)


def _check_table(model: PCAModel, table: TableLike) -> NamedMatrix:
    nmat = as_named_matrix(table)
    if nmat.n_cols != model.dimension:
        raise DimensionMismatchError(
            f"The table has {nmat.n_cols} columns, the PCA has dimension {model.dimension}")
    if not all_finite(nmat.values):
        raise InvalidInputError("All table elements should be defined.")
    return nmat


def _clamp_dims(model: PCAModel, dims: int) -> int:
    if dims <= 0 or dims > model.n_components:
        return model.n_components
    return dims


def project_to_component_scores(model: PCAModel, table: TableLike, dims: int = 0) -> NamedMatrix:
    """
    Project the rows of a table on the principal components.

    The rows are not centered: score[i, j] = sum_k eigenvector[j, k] * table[i, k].

    Args:
        model: Fitted PCA model
        table: Rows of dimension model.dimension
        dims: Number of components to keep; 0 or too many means all

    Returns:
        NamedMatrix of shape (rows, dims) with columns pc1..pcK
    """
    nmat = _check_table(model, table)
    dims = _clamp_dims(model, dims)
    scores = model.eigen.project_rows(nmat.values, dims)
    return NamedMatrix(scores, nmat.rownames()).with_sequential_colnames(_component_prefix())


def project_to_z_scores(model: PCAModel, table: TableLike, dims: int = 0) -> NamedMatrix:
    """
    Standardized component scores.

    Each row is centered on the model centroid, projected on a component and
    divided by the standard deviation of that component.

    Args:
        model: Fitted PCA model
        table: Rows of dimension model.dimension
        dims: Number of components to keep; 0 or too many means all

    Returns:
        NamedMatrix of shape (rows, dims) with columns pc1..pcK
    """
    nmat = _check_table(model, table)
    dims = _clamp_dims(model, dims)

    eigenvalues = model.eigenvalues[:dims]
    bad = np.flatnonzero(eigenvalues <= 0)
    if bad.size > 0:
        raise DegenerateInputError(
            f"Component {bad[0] + 1} has eigenvalue {eigenvalues[bad[0]]}; "
            f"z-scores need positive eigenvalues")

    centered = nmat.values - model.centroid
    scores = model.eigen.project_rows(centered, dims) / np.sqrt(eigenvalues)
    return NamedMatrix(scores, nmat.rownames()).with_sequential_colnames(_component_prefix())


def reconstruct_from_scores(model: PCAModel, scores: TableLike) -> NamedMatrix:
    """
    Map component scores back to the original variable space.

    This is the inverse of project_to_component_scores: the centroid is not
    added back.

    Args:
        model: Fitted PCA model
        scores: Table with one column per component used (at most n_components)

    Returns:
        NamedMatrix of shape (rows, dimension) labeled with the model labels
    """
    nmat = as_named_matrix(scores)
    n_scores = nmat.n_cols
    if n_scores > model.dimension:
        raise DimensionMismatchError(
            f"The number of score columns ({n_scores}) should be less than or equal "
            f"to the dimension of the PCA ({model.dimension})")
    if n_scores > model.n_components:
        raise DimensionMismatchError(
            f"The number of score columns ({n_scores}) exceeds the number of "
            f"components ({model.n_components})")
    if not all_finite(nmat.values):
        raise InvalidInputError("All score elements should be defined.")

    data = long_matmul(nmat.values, model.eigenvectors[:n_scores])
    return NamedMatrix(data, nmat.rownames(), model.labels)


def reconstruct_single(model: PCAModel, scores: Sequence[float]) -> np.ndarray:
    """
    Reconstruct one row from its component scores.

    Args:
        model: Fitted PCA model
        scores: Score per component, first component first

    Returns:
        Vector of length model.dimension
    """
    row = np.asarray(scores, dtype=np.float64).reshape(1, -1)
    return reconstruct_from_scores(model, row).values[0]


def fraction_of_variance_explained(model: PCAModel, table: TableLike,
                                   from_: int, to: int) -> Optional[float]:
    """
    Fraction of the variance of a table explained by components from_..to.

    The sums of squares of the table are expressed in the component basis and
    the share of components from_..to (1-based, inclusive) in its trace is
    returned.

    Returns:
        The fraction, or None if the range is invalid or the computation fails
    """
    try:
        nmat = as_named_matrix(table)
        if from_ < 1 or from_ > to or to > nmat.n_cols:
            return None
        if not all_finite(nmat.values):
            logger.debug("Fraction of variance undefined: the table has undefined values")
            return None
        s = sscp(nmat.values)
        projected = model.eigen.project_sscp(s)
        fraction = fraction_of_variation(projected, from_, to)
        if fraction is None or not math.isfinite(fraction):
            return None
        return fraction
    except (ValueError, np.linalg.LinAlgError) as e:
        logger.debug(f"Fraction of variance undefined: {e}")
        return None


def equality_of_eigenvalues(model: PCAModel, from_: int = 0, to: int = 0,
                            conservative: bool = False) -> EqualityTest:
    """
    Test whether eigenvalues from_..to are equal (sphericity).

    With from_ == to == 0 the trailing eigenvalue is tested on its own.
    The test statistic is
        chi_square = n * (r * ln(sum / r) - sum_of_logs)
    with r(r + 1)/2 - 1 degrees of freedom, n the number of observations
    minus one, optionally reduced by Bartlett's correction
        from_ + (r(2r + 1) + 2) / (6r).

    Args:
        model: Fitted PCA model
        from_: First eigenvalue (1-based)
        to: Last eigenvalue (inclusive)
        conservative: Apply Bartlett's correction

    Returns:
        EqualityTest with probability, chi_square and degrees_of_freedom;
        fields are None when undefined
    """
    undefined = EqualityTest(None, None, None)
    n_components = model.n_components

    if from_ == 0 and to == 0:
        if n_components < 1:
            return undefined
        from_ = to = n_components
    elif not (0 < from_ < to <= n_components):
        return undefined

    total = 0.0
    sum_of_logs = 0.0
    r = 0
    for value in model.eigenvalues[from_ - 1:to]:
        if value <= 0:
            break
        total += value
        sum_of_logs += math.log(value)
        r += 1

    if total == 0.0:
        return undefined

    n = model.number_of_observations - 1
    if conservative:
        n -= from_ + (r * (2 * r + 1) + 2) / (6.0 * r)

    df = r * (r + 1) / 2 - 1
    chi_square = n * (r * math.log(total / r) - sum_of_logs)
    return EqualityTest(chi_square_q(chi_square, df), chi_square, df)
