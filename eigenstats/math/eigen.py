"""
Eigenstructure container shared by the PCA and CCA models.

An EigenModel holds eigenvalues sorted in descending order together with the
matching unit-length eigenvectors, stored one per row.
"""

from typing import Optional

import numpy as np

from eigenstats.errors import DimensionMismatchError, InvalidInputError
from eigenstats.utils.general import all_finite, long_matmul


def normalize_vector(v: np.ndarray) -> np.ndarray:
    """
    Normalize a vector to unit length.

    Args:
        v: Vector to normalize

    Returns:
        Normalized vector (zero vectors are returned unchanged)
    """
    norm = np.linalg.norm(v)
    if norm == 0:
        return v
    return v / norm


def orient_vector(v: np.ndarray, tol: float = 1e-10) -> np.ndarray:
    """
    Flip the sign of a vector so that its first non-negligible element is positive.

    Eigenvectors are only defined up to sign; this makes the choice stable.
    """
    for x in v:
        if abs(x) > tol:
            return -v if x < 0 else v
    return v


class EigenModel:
    """
    Ordered (eigenvalue, eigenvector) pairs of a symmetric matrix.
    """

    def __init__(self, eigenvalues, eigenvectors):
        """
        Initialize an EigenModel.

        Args:
            eigenvalues: Sequence of eigenvalues, sorted descending
            eigenvectors: n_components x dimension array, one eigenvector per row
        """
        values = np.array(eigenvalues, dtype=np.float64).reshape(-1)
        vectors = np.array(eigenvectors, dtype=np.float64)
        if vectors.ndim == 1:
            vectors = vectors.reshape(1, -1)
        if vectors.ndim != 2:
            raise DimensionMismatchError("Eigenvectors must form a two-dimensional array")
        if vectors.shape[0] != values.shape[0]:
            raise DimensionMismatchError(
                f"Got {values.shape[0]} eigenvalues for {vectors.shape[0]} eigenvectors")

        values.flags.writeable = False
        vectors.flags.writeable = False
        self._eigenvalues = values
        self._eigenvectors = vectors

    @classmethod
    def from_square_root(cls, a: np.ndarray) -> 'EigenModel':
        """
        Eigenstructure of A'A computed from A itself.

        The singular value decomposition A = U S V' gives the eigenvalues of
        A'A as the squared singular values and its eigenvectors as the rows
        of V'. A'A is never formed.

        Args:
            a: Rectangular matrix, rows are observations

        Returns:
            EigenModel with min(rows, columns) components of dimension columns
        """
        a = np.asarray(a, dtype=np.float64)
        if a.ndim != 2 or a.size == 0:
            raise DimensionMismatchError("Need a non-empty two-dimensional matrix")
        if not all_finite(a):
            raise InvalidInputError("All matrix elements should be defined")

        _, s, vt = np.linalg.svd(a, full_matrices=False)
        order = np.argsort(-s, kind='stable')
        eigenvalues = s[order] ** 2
        eigenvectors = np.array([orient_vector(vt[i]) for i in order])
        return cls(eigenvalues, eigenvectors)

    @classmethod
    def from_symmetric(cls, m: np.ndarray) -> 'EigenModel':
        """
        Eigenstructure of a symmetric matrix.

        Args:
            m: Symmetric square matrix

        Returns:
            EigenModel with eigenvalues sorted descending
        """
        m = np.asarray(m, dtype=np.float64)
        if m.ndim != 2 or m.shape[0] != m.shape[1]:
            raise DimensionMismatchError(f"Matrix must be square, got shape {m.shape}")
        if not all_finite(m):
            raise InvalidInputError("All matrix elements should be defined")

        values, vectors = np.linalg.eigh(m)
        order = np.argsort(-values, kind='stable')
        eigenvectors = np.array([orient_vector(vectors[:, i]) for i in order])
        return cls(values[order], eigenvectors)

    @property
    def eigenvalues(self) -> np.ndarray:
        return self._eigenvalues

    @property
    def eigenvectors(self) -> np.ndarray:
        return self._eigenvectors

    @property
    def dimension(self) -> int:
        return self._eigenvectors.shape[1]

    @property
    def n_components(self) -> int:
        return self._eigenvalues.shape[0]

    def sum_of_eigenvalues(self, from_: int = 0, to: int = 0) -> Optional[float]:
        """
        Sum of eigenvalues from_..to (1-based, inclusive).

        from_ == 0 starts at the first eigenvalue, to == 0 ends at the last.

        Returns:
            The sum, or None for an invalid range
        """
        from_ = 1 if from_ == 0 else from_
        to = self.n_components if to == 0 else to
        if from_ < 1 or from_ > to or to > self.n_components:
            return None
        return float(np.sum(self._eigenvalues[from_ - 1:to], dtype=np.longdouble))

    def cumulative_fraction(self, from_: int = 0, to: int = 0) -> Optional[float]:
        """
        Fraction of the eigenvalue total carried by eigenvalues from_..to.

        Returns:
            The fraction, or None for an invalid range or a zero total
        """
        partial = self.sum_of_eigenvalues(from_, to)
        total = self.sum_of_eigenvalues()
        if partial is None or not total:
            return None
        return partial / total

    def project_rows(self, data: np.ndarray, n_components: int = 0) -> np.ndarray:
        """
        Change of basis of row vectors into the first n_components eigenvectors.

        Args:
            data: Rows of dimension `dimension`
            n_components: Number of components; 0 means all

        Returns:
            Array of shape (rows, n_components)
        """
        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 2 or data.shape[1] != self.dimension:
            raise DimensionMismatchError(
                f"Data has {data.shape[-1]} columns, the eigenvectors have dimension {self.dimension}")
        if n_components <= 0 or n_components > self.n_components:
            n_components = self.n_components
        return long_matmul(data, self._eigenvectors[:n_components].T)

    def project_sscp(self, s: np.ndarray) -> np.ndarray:
        """
        Express a sums-of-squares matrix in the eigenvector basis: E S E'.

        Args:
            s: Square matrix of size `dimension`

        Returns:
            Square matrix of size n_components
        """
        s = np.asarray(s, dtype=np.float64)
        if s.shape != (self.dimension, self.dimension):
            raise DimensionMismatchError(
                f"SSCP matrix has shape {s.shape}, expected {(self.dimension, self.dimension)}")
        e = self._eigenvectors
        return long_matmul(long_matmul(e, s), e.T)

    def copy(self) -> 'EigenModel':
        return EigenModel(self._eigenvalues.copy(), self._eigenvectors.copy())

    def __repr__(self) -> str:
        return f"EigenModel(n_components={self.n_components}, dimension={self.dimension})"
