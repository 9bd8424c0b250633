"""
Reference eigensolvers.

DenseSolver diagonalizes the full matrix; SparseSolver runs scipy's Lanczos
(eigsh) over a sparse matrix or a matrix-vector product. Both are meant for
validating the Davidson solver and for small problems.
"""

import numpy as np
from typing import List, Optional, Union
from scipy.sparse import spmatrix
from scipy.sparse.linalg import LinearOperator, eigsh

try:
    from .base import BaseEigenproblemSolver, Eigenpair
    from .options import DenseSolverOptions, SparseSolverOptions
    from ..utils.errors import InvalidConfigurationError
except ImportError:
    from eigensolvers.base import BaseEigenproblemSolver, Eigenpair
    from eigensolvers.options import DenseSolverOptions, SparseSolverOptions
    from utils.errors import InvalidConfigurationError


class DenseSolver(BaseEigenproblemSolver):
    """
    Full diagonalization with numpy.linalg.eigh.

    Args:
        matrix: Symmetric (dim, dim) array
        options: DenseSolverOptions
    """

    def __init__(self, matrix: np.ndarray, options: Optional[DenseSolverOptions] = None):
        options = options or DenseSolverOptions()
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise InvalidConfigurationError(f"Expected a square matrix, got shape {matrix.shape}")

        super().__init__(matrix.shape[0], options.number_of_requested_eigenpairs)
        self.matrix = matrix
        self.verbose = options.verbose

    def solve(self) -> List[Eigenpair]:
        eigenvalues, eigenvectors = np.linalg.eigh(self.matrix)

        r = self.number_of_requested_eigenpairs
        self._eigenpairs = [Eigenpair(eigenvalues[i], eigenvectors[:, i]) for i in range(r)]

        if self.verbose:
            print(f"Dense diagonalization ({self.dim}x{self.dim}): E0 = {eigenvalues[0]:.10f}")

        return self.eigenpairs


class SparseSolver(BaseEigenproblemSolver):
    """
    Lowest eigenpairs with scipy.sparse.linalg.eigsh (implicitly restarted Lanczos).

    Args:
        operator: Sparse matrix or LinearOperator of shape (dim, dim)
        options: SparseSolverOptions
        v0: Optional starting vector
    """

    def __init__(
        self,
        operator: Union[spmatrix, LinearOperator],
        options: Optional[SparseSolverOptions] = None,
        v0: Optional[np.ndarray] = None,
    ):
        options = options or SparseSolverOptions()
        dim = operator.shape[0]

        super().__init__(dim, options.number_of_requested_eigenpairs)

        # ARPACK needs k < n
        if self.number_of_requested_eigenpairs >= dim:
            raise InvalidConfigurationError(
                f"The sparse solver can find at most {dim - 1} eigenpairs of a {dim}-dimensional matrix"
            )

        self.operator = operator
        self.options = options
        self.v0 = v0

    def solve(self) -> List[Eigenpair]:
        eigenvalues, eigenvectors = eigsh(
            self.operator,
            k=self.number_of_requested_eigenpairs,
            which="SA",
            tol=self.options.convergence_threshold,
            maxiter=self.options.maximum_number_of_iterations,
            v0=self.v0,
        )

        # Sort by eigenvalue
        idx = np.argsort(eigenvalues)
        eigenvalues = eigenvalues[idx]
        eigenvectors = eigenvectors[:, idx]

        self._eigenpairs = [
            Eigenpair(eigenvalues[i], eigenvectors[:, i]) for i in range(len(eigenvalues))
        ]

        if self.options.verbose:
            print(f"Sparse diagonalization (dim={self.dim}): E0 = {eigenvalues[0]:.10f}")

        return self.eigenpairs
