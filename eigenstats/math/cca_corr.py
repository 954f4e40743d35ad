"""
Analyses relating a canonical correlation model to a correlation matrix.

The correlation matrix covers the dependent variables first and the
independent variables after them, in the same order as the CCA model.

For the formulas see Cooley & Lohnes (1971), Multivariate Data Analysis,
p. 170 ff. For one canonical variate with weights e of a set with
correlation matrix R and dimension n,

    variance fraction = (e' R' R e) / (e' R e) / n

which is s's / n for the structure coefficients s = R c, c = e / sqrt(e' R e).
"""

import logging
from typing import Any, Optional

import numpy as np

from eigenstats.components.config import ConfigManager
from eigenstats.errors import (
    DimensionMismatchError, InvalidInputError, InvalidRangeError
)
from eigenstats.math.cca import CCAModel
from eigenstats.math.named_matrix import NamedMatrix, as_named_matrix
from eigenstats.utils.general import all_finite, long_dot, long_matmul, sequential_labels

logger = logging.getLogger(__name__)

DEPENDENT = 'y'
INDEPENDENT = 'x'

_SET_NAMES = {
    'y': DEPENDENT,
    'dependent': DEPENDENT,
    'x': INDEPENDENT,
    'independent': INDEPENDENT,
}


def _check_correlation(cca: CCAModel, corr: NamedMatrix) -> None:
    if cca.y.dimension + cca.x.dimension != corr.n_cols:
        raise DimensionMismatchError(
            f"The number of columns in the correlation matrix ({corr.n_cols}) should equal "
            f"the sum of the dimensions in the CCA model ({cca.y.dimension} + {cca.x.dimension})")
    if corr.n_rows != corr.n_cols:
        raise DimensionMismatchError(
            f"A correlation matrix must be square, got {corr.n_rows}x{corr.n_cols}")
    if not all_finite(corr.values):
        raise InvalidInputError("All correlation matrix elements should be defined.")


def _check_range(cca: CCAModel, from_: int, to: int) -> None:
    if to < from_:
        raise InvalidRangeError(
            f"The last canonical variate ({to}) should be equal to or larger than the first ({from_})")
    if from_ < 1 or to > cca.number_of_coefficients:
        raise InvalidRangeError(
            f"The canonical variate range [{from_}, {to}] should lie within "
            f"[1, {cca.number_of_coefficients}]")


def _resolve_set(which: str) -> str:
    try:
        return _SET_NAMES[str(which).lower()]
    except KeyError:
        raise InvalidInputError(
            f"Unknown variable set '{which}'; use 'y'/'dependent' or 'x'/'independent'") from None


def factor_loadings(cca: CCAModel, correlation: Any) -> NamedMatrix:
    """
    Correlations between the variables and the canonical variates.

    Rows dv1..dvK hold, for each variable, the inner product of its
    correlations with the dependent set and the dependent weights of
    variate k; rows iv1..ivK do the same for the independent set.

    Args:
        cca: Canonical correlation model
        correlation: Correlation matrix over the dependent + independent variables

    Returns:
        NamedMatrix of shape (2K, ny + nx), columns labeled as the correlation matrix
    """
    corr = as_named_matrix(correlation)
    _check_correlation(cca, corr)

    ny = cca.y.dimension
    k = cca.number_of_coefficients
    r = corr.values

    dv = long_matmul(cca.y.eigenvectors[:k], r[:, :ny].T)
    iv = long_matmul(cca.x.eigenvectors[:k], r[:, ny:].T)

    config = ConfigManager.get_config()
    rownames = (sequential_labels(config.get('cca.dependent-label-prefix', 'dv'), k)
                + sequential_labels(config.get('cca.independent-label-prefix', 'iv'), k))
    return NamedMatrix(np.vstack([dv, iv]), rownames, corr.colnames())


def variance_fraction(cca: CCAModel, correlation: Any, which: str,
                      from_: int, to: int) -> Optional[float]:
    """
    Fraction of the variance of one variable set extracted by canonical variates from_..to.

    Args:
        cca: Canonical correlation model
        correlation: Correlation matrix over the dependent + independent variables
        which: 'y' (or 'dependent') or 'x' (or 'independent')
        from_: First canonical variate (1-based)
        to: Last canonical variate (inclusive)

    Returns:
        The summed fraction, or None if a variate has zero scaling e' R e
    """
    corr = as_named_matrix(correlation)
    _check_correlation(cca, corr)
    _check_range(cca, from_, to)

    if _resolve_set(which) == DEPENDENT:
        n = cca.y.dimension
        evec = cca.y.eigenvectors
        offset = 0
    else:
        n = cca.x.dimension
        evec = cca.x.eigenvectors
        offset = cca.y.dimension

    block = corr.values[offset:offset + n, offset:offset + n]

    fraction = np.longdouble(0.0)
    for icv in range(from_ - 1, to):
        e = evec[icv]
        s = np.asarray(block, dtype=np.longdouble) @ np.asarray(e, dtype=np.longdouble)
        variance = np.dot(s, s)
        scaling = np.dot(np.asarray(e, dtype=np.longdouble), s)
        if scaling == 0:
            logger.debug(f"Canonical variate {icv + 1} has zero scaling; variance fraction undefined")
            return None
        fraction += (variance / scaling) / n

    return float(fraction)


def redundancy(cca: CCAModel, correlation: Any, which: str,
               from_: int, to: int) -> Optional[float]:
    """
    Stewart-Love redundancy index of one variable set for variates from_..to.

    Sums, per canonical variate, the variance fraction times the squared
    canonical correlation.

    Returns:
        The index, or None if any variance fraction is undefined
    """
    corr = as_named_matrix(correlation)
    _check_correlation(cca, corr)
    _check_range(cca, from_, to)

    total = np.longdouble(0.0)
    for icv in range(from_, to + 1):
        fraction = variance_fraction(cca, corr, which, icv, icv)
        if fraction is None:
            return None
        total += fraction * np.longdouble(cca.y.eigenvalues[icv - 1])

    return float(total)


def structure_correlation(cca: CCAModel, correlation: Any, which: str, variate: int) -> np.ndarray:
    """
    Correlations of the variables of one set with one of its own canonical variates.

    These are the structure coefficients s = R c with c = e / sqrt(e' R e).

    Args:
        cca: Canonical correlation model
        correlation: Correlation matrix over the dependent + independent variables
        which: 'y' (or 'dependent') or 'x' (or 'independent')
        variate: Canonical variate (1-based)

    Returns:
        Vector with one correlation per variable of the set
    """
    corr = as_named_matrix(correlation)
    _check_correlation(cca, corr)
    _check_range(cca, variate, variate)

    if _resolve_set(which) == DEPENDENT:
        n, evec, offset = cca.y.dimension, cca.y.eigenvectors, 0
    else:
        n, evec, offset = cca.x.dimension, cca.x.eigenvectors, cca.y.dimension

    block = corr.values[offset:offset + n, offset:offset + n]
    e = evec[variate - 1]
    s = long_matmul(block, e)
    scaling = long_dot(e, s)
    if scaling <= 0:
        raise InvalidInputError(f"Canonical variate {variate} has non-positive variance")
    return s / np.sqrt(scaling)
