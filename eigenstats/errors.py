"""
Exceptions raised by the eigenstats package.

Construction and transformation operations raise these on invalid input.
Best-effort queries return None instead.
"""


class EigenStatsError(Exception):
    """Base class for all eigenstats errors."""


class InvalidInputError(EigenStatsError, ValueError):
    """Input contains undefined or non-finite values, or an unusable argument."""


class DimensionMismatchError(InvalidInputError):
    """The shape of a table disagrees with the model it is combined with."""


class DegenerateInputError(EigenStatsError, ValueError):
    """Input has zero norm or zero variance where a positive one is required."""


class InvalidRangeError(EigenStatsError, IndexError):
    """An index or index range lies outside the valid bounds."""
