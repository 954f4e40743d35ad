"""
Statistical helpers shared by the PCA and CCA analyses.
"""

import math
from typing import Optional

import numpy as np
from scipy import stats as scipy_stats


def chi_square_q(chi_square: float, df: float) -> Optional[float]:
    """
    Upper-tail probability of the chi-square distribution.

    Args:
        chi_square: Test statistic
        df: Degrees of freedom

    Returns:
        P(X > chi_square), or None when the distribution is undefined
        (non-positive degrees of freedom or a non-finite statistic)
    """
    if df is None or chi_square is None:
        return None
    if df <= 0 or not math.isfinite(chi_square):
        return None
    if chi_square <= 0:
        return 1.0
    return float(scipy_stats.chi2.sf(chi_square, df))


def sscp(data: np.ndarray) -> np.ndarray:
    """
    Sums of squares and cross products about the column means.

    Args:
        data: Observations in rows, variables in columns

    Returns:
        Square matrix of size n_columns
    """
    data = np.asarray(data, dtype=np.float64)
    centered = data - data.mean(axis=0)
    return centered.T @ centered


def fraction_of_variation(m: np.ndarray, from_: int, to: int) -> Optional[float]:
    """
    Fraction of the trace of m carried by diagonal elements from_..to.

    Indices are 1-based and inclusive.

    Args:
        m: Square (co)variance-like matrix
        from_: First diagonal element
        to: Last diagonal element

    Returns:
        The fraction, or None if the range is invalid or the trace is zero
    """
    diag = np.diag(m)
    if from_ < 1 or from_ > to or to > len(diag):
        return None
    total = math.fsum(diag)
    if total == 0.0:
        return None
    return math.fsum(diag[from_ - 1:to]) / total
