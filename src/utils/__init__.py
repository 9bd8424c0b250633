"""Error kinds and linear-algebra helpers shared across the CI kernel."""

from .errors import InvalidConfigurationError, DimensionOverflowError, ConvergenceError
from .linalg import is_unitary, jacobi_rotation_matrix, symmetrize, random_symmetric_matrix

__all__ = [
    'InvalidConfigurationError',
    'DimensionOverflowError',
    'ConvergenceError',
    'is_unitary',
    'jacobi_rotation_matrix',
    'symmetrize',
    'random_symmetric_matrix',
]
