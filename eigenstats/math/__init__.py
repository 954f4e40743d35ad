"""
Core multivariate algorithms: eigenstructures, PCA, CCA and correlation analyses.
"""

from eigenstats.math.named_matrix import NamedMatrix, create_named_matrix
from eigenstats.math.eigen import EigenModel
from eigenstats.math.pca import (
    PCAModel, EqualityTest, fit_pca, project_to_component_scores,
    project_to_z_scores, reconstruct_from_scores, reconstruct_single,
    fraction_of_variance_explained, equality_of_eigenvalues
)
from eigenstats.math.corr import correlation_matrix
from eigenstats.math.cca import CCAModel, fit_cca
from eigenstats.math.cca_corr import (
    factor_loadings, variance_fraction, redundancy, structure_correlation
)

__all__ = [
    'NamedMatrix',
    'create_named_matrix',
    'EigenModel',
    'PCAModel',
    'EqualityTest',
    'fit_pca',
    'project_to_component_scores',
    'project_to_z_scores',
    'reconstruct_from_scores',
    'reconstruct_single',
    'fraction_of_variance_explained',
    'equality_of_eigenvalues',
    'correlation_matrix',
    'CCAModel',
    'fit_cca',
    'factor_loadings',
    'variance_fraction',
    'redundancy',
    'structure_correlation',
]
