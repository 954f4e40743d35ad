"""
Eigenstats: eigen-decomposition based multivariate statistics.

Principal component and canonical correlation models, and the analyses
built on them.
"""

__version__ = '0.1.0'

from eigenstats.components.config import Config, ConfigManager
from eigenstats.errors import (
    EigenStatsError, InvalidInputError, DimensionMismatchError,
    DegenerateInputError, InvalidRangeError
)
