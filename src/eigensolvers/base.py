"""Eigenpairs and the shared result handling of the eigensolvers."""

import numpy as np
from abc import ABC, abstractmethod
from typing import List, Optional

try:
    from ..utils.errors import InvalidConfigurationError
except ImportError:
    from utils.errors import InvalidConfigurationError


class Eigenpair:
    """
    An eigenvalue with its (normalized) eigenvector.

    Args:
        eigenvalue: Eigenvalue
        eigenvector: Eigenvector, shape (dim,)
    """

    def __init__(self, eigenvalue: float, eigenvector: np.ndarray):
        self.eigenvalue = float(eigenvalue)
        self.eigenvector = np.asarray(eigenvector, dtype=np.float64)

    def is_equal(self, other: "Eigenpair", tolerance: float = 1e-8) -> bool:
        """Compare eigenvalues and eigenvectors; eigenvectors may differ by sign."""
        if self.eigenvector.shape != other.eigenvector.shape:
            raise InvalidConfigurationError("Cannot compare eigenpairs of different dimension")

        if abs(self.eigenvalue - other.eigenvalue) > tolerance:
            return False

        return (
            np.allclose(self.eigenvector, other.eigenvector, atol=tolerance)
            or np.allclose(self.eigenvector, -other.eigenvector, atol=tolerance)
        )

    def __repr__(self) -> str:
        return f"Eigenpair(eigenvalue={self.eigenvalue:.10f}, dim={self.eigenvector.shape[0]})"


class BaseEigenproblemSolver(ABC):
    """
    Eigensolver for the lowest eigenpairs of a symmetric matrix.

    The results are only available after a successful solve().

    Args:
        dim: Dimension of the matrix
        number_of_requested_eigenpairs: Number of lowest eigenpairs to find
    """

    def __init__(self, dim: int, number_of_requested_eigenpairs: int = 1):
        if number_of_requested_eigenpairs < 1:
            raise InvalidConfigurationError("At least one eigenpair has to be requested")
        if number_of_requested_eigenpairs > dim:
            raise InvalidConfigurationError(
                f"Cannot request {number_of_requested_eigenpairs} eigenpairs of a {dim}-dimensional matrix"
            )

        self.dim = dim
        self.number_of_requested_eigenpairs = number_of_requested_eigenpairs
        self._eigenpairs: Optional[List[Eigenpair]] = None

    @property
    def is_solved(self) -> bool:
        return self._eigenpairs is not None

    @abstractmethod
    def solve(self) -> List[Eigenpair]:
        pass

    def _check_solved(self, what: str):
        if not self.is_solved:
            raise RuntimeError(f"The eigenvalue problem has not been solved yet: no {what} available")

    @property
    def eigenpairs(self) -> List[Eigenpair]:
        self._check_solved("eigenpairs")
        return list(self._eigenpairs)

    def get_eigenpair(self, index: int = 0) -> Eigenpair:
        self._check_solved("eigenpairs")
        if not 0 <= index < len(self._eigenpairs):
            raise InvalidConfigurationError(
                f"Eigenpair {index} was not requested ({len(self._eigenpairs)} available)"
            )
        return self._eigenpairs[index]

    def get_lowest_eigenvalue(self) -> float:
        return self.get_eigenpair(0).eigenvalue

    def get_lowest_eigenvector(self) -> np.ndarray:
        return self.get_eigenpair(0).eigenvector
