"""
Davidson iterative eigensolver.

The Davidson method finds the lowest eigenpairs of a large symmetric matrix
A that is only available through its matrix-vector product and its
diagonal. It is particularly effective when the matrix is diagonally
dominant, as CI Hamiltonians are.

Algorithm:
1. Diagonalize the subspace matrix S = V^T A V
2. Form Ritz vectors X = V Z and residuals R = A V Z - X Lambda
3. If all residual norms are below the threshold, return
4. Precondition the residuals with the diagonal of A
5. Orthogonalize the corrections against V and append them
6. Collapse the subspace when it is full, repeat from step 1

References:
- Davidson, E.R., "The iterative calculation of a few of the lowest
  eigenvalues and corresponding eigenvectors of large real-symmetric
  matrices", J. Comput. Phys. 17, 87 (1975)
"""

import numpy as np
import scipy.linalg
from typing import Callable, Dict, List, Optional

try:
    from .base import BaseEigenproblemSolver, Eigenpair
    from .options import DavidsonSolverOptions
    from ..utils.errors import ConvergenceError, InvalidConfigurationError
except ImportError:
    from eigensolvers.base import BaseEigenproblemSolver, Eigenpair
    from eigensolvers.options import DavidsonSolverOptions
    from utils.errors import ConvergenceError, InvalidConfigurationError


# Corrections with a smaller norm after orthogonalization are dropped
INCLUSION_THRESHOLD = 1e-3


class DavidsonSolver(BaseEigenproblemSolver):
    """
    Davidson solver over a matrix-vector product.

    Args:
        matrix_vector_product: Function x -> A @ x
        diagonal: Diagonal of A, shape (dim,)
        options: DavidsonSolverOptions

    Raises:
        InvalidConfigurationError: if there are fewer guesses than requested
            eigenpairs, if the collapsed subspace is smaller than the number
            of requested eigenpairs or not smaller than the maximum subspace,
            or if the guesses do not match the diagonal's dimension
    """

    def __init__(
        self,
        matrix_vector_product: Callable[[np.ndarray], np.ndarray],
        diagonal: np.ndarray,
        options: Optional[DavidsonSolverOptions] = None,
    ):
        options = options or DavidsonSolverOptions()
        diagonal = np.asarray(diagonal, dtype=np.float64)
        super().__init__(diagonal.shape[0], options.number_of_requested_eigenpairs)

        r = self.number_of_requested_eigenpairs
        X_0 = options.X_0
        if X_0 is None:
            X_0 = self.default_guess(diagonal, r)
        X_0 = np.asarray(X_0, dtype=np.float64)
        if X_0.ndim == 1:
            X_0 = X_0[:, None]

        if X_0.shape[1] < r:
            raise InvalidConfigurationError(
                f"At least {r} initial guesses are needed for {r} requested eigenpairs, got {X_0.shape[1]}"
            )
        if options.collapsed_subspace_dimension < r:
            raise InvalidConfigurationError(
                "The collapsed subspace dimension must be at least the number of requested eigenpairs"
            )
        if options.collapsed_subspace_dimension >= options.maximum_subspace_dimension:
            raise InvalidConfigurationError(
                "The collapsed subspace dimension must be smaller than the maximum subspace dimension"
            )
        if X_0.shape[0] != self.dim:
            raise InvalidConfigurationError(
                f"Initial guesses of dimension {X_0.shape[0]} do not match the diagonal of dimension {self.dim}"
            )

        self.matrix_vector_product = matrix_vector_product
        self.diagonal = diagonal
        self.X_0 = X_0

        self.convergence_threshold = options.convergence_threshold
        self.correction_threshold = options.correction_threshold
        self.maximum_subspace_dimension = options.maximum_subspace_dimension
        self.collapsed_subspace_dimension = options.collapsed_subspace_dimension
        self.maximum_number_of_iterations = options.maximum_number_of_iterations
        self.verbose = options.verbose

        self._number_of_iterations = 0
        self._history: Dict[str, list] = {'eigenvalues': [], 'residuals': [], 'subspace_dimensions': []}

    @classmethod
    def from_matrix(cls, A: np.ndarray, options: Optional[DavidsonSolverOptions] = None) -> "DavidsonSolver":
        """Davidson solver for an explicitly stored (dense or sparse) matrix."""
        if hasattr(A, 'diagonal') and hasattr(A, 'toarray'):
            diagonal = np.asarray(A.diagonal())
        else:
            A = np.asarray(A, dtype=np.float64)
            diagonal = np.diag(A).copy()

        return cls(lambda x: A @ x, diagonal, options)

    @staticmethod
    def default_guess(diagonal: np.ndarray, r: int) -> np.ndarray:
        """
        Hartree-Fock expansion (unit vector at address 0), completed with unit
        vectors at the lowest remaining diagonal elements.
        """
        dim = diagonal.shape[0]
        guess = np.zeros((dim, r))
        guess[0, 0] = 1.0

        others = [i for i in np.argsort(diagonal, kind="stable") if i != 0]
        for column, i in enumerate(others[:r - 1], start=1):
            guess[i, column] = 1.0

        return guess

    @property
    def number_of_iterations(self) -> int:
        self._check_solved("number of iterations")
        return self._number_of_iterations

    @property
    def history(self) -> Dict[str, list]:
        """Per-iteration Ritz values, residual norms and subspace dimensions."""
        self._check_solved("history")
        return self._history

    def _correction(self, residual: np.ndarray, ritz_value: float) -> np.ndarray:
        """Diagonal preconditioner (A_diag - Lambda)^-1, regularized by the correction threshold."""
        denominator = np.abs(self.diagonal - ritz_value)
        correction = np.where(
            denominator > self.correction_threshold,
            residual / np.where(denominator > self.correction_threshold, denominator, 1.0),
            residual / self.correction_threshold,
        )

        norm = np.linalg.norm(correction)
        if norm > 0:
            correction /= norm
        return correction

    def solve(self) -> List[Eigenpair]:
        """
        Run the Davidson iterations until all requested residual norms are
        below the convergence threshold.

        Returns:
            The requested eigenpairs, lowest first

        Raises:
            ConvergenceError: if the maximum number of iterations is reached
        """
        r = self.number_of_requested_eigenpairs
        self._eigenpairs = None
        self._number_of_iterations = 0
        self._history = {'eigenvalues': [], 'residuals': [], 'subspace_dimensions': []}

        # Orthonormalize the initial guesses
        V, _ = np.linalg.qr(self.X_0)
        VA = np.column_stack([self.matrix_vector_product(V[:, j]) for j in range(V.shape[1])])
        S = V.T @ VA
        S = 0.5 * (S + S.T)

        while True:
            subspace_eigenvalues, subspace_eigenvectors = scipy.linalg.eigh(S)
            Lambda = subspace_eigenvalues[:r]
            Z = subspace_eigenvectors[:, :r]

            # Ritz vectors and residuals
            X = V @ Z
            R = VA @ Z - X * Lambda
            residual_norms = np.linalg.norm(R, axis=0)

            self._history['eigenvalues'].append(Lambda.copy())
            self._history['residuals'].append(residual_norms.copy())
            self._history['subspace_dimensions'].append(V.shape[1])

            if self.verbose:
                print(f"Iteration {self._number_of_iterations}: E = {Lambda[0]:.10f}, "
                      f"residual = {residual_norms.max():.2e}, subspace = {V.shape[1]}")

            # Check convergence
            if not np.any(residual_norms > self.convergence_threshold):
                self._eigenpairs = [Eigenpair(Lambda[i], X[:, i]) for i in range(r)]
                break

            self._number_of_iterations += 1
            if self._number_of_iterations >= self.maximum_number_of_iterations:
                raise ConvergenceError(
                    f"The Davidson algorithm did not converge in {self.maximum_number_of_iterations} "
                    f"iterations (residual norms {residual_norms})"
                )

            corrections = [self._correction(R[:, i], Lambda[i]) for i in range(r)]

            for delta in corrections:
                # Project the correction on the orthogonal complement of V
                v = delta - V @ (V.T @ delta)
                norm = np.linalg.norm(v)
                if norm <= INCLUSION_THRESHOLD:
                    continue
                v /= norm

                # Collapse onto the lowest eigenvectors of the current subspace
                # matrix when V is full; v stays orthogonal to the smaller V
                if V.shape[1] >= self.maximum_subspace_dimension:
                    _, current_eigenvectors = scipy.linalg.eigh(S)
                    lowest = current_eigenvectors[:, :self.collapsed_subspace_dimension]
                    V = V @ lowest
                    VA = VA @ lowest
                    S = V.T @ VA
                    S = 0.5 * (S + S.T)

                V = np.column_stack([V, v])
                VA = np.column_stack([VA, self.matrix_vector_product(v)])

                # Extend S with the column of the new subspace vector only
                s = V.T @ VA[:, -1]
                S = np.block([[S, s[:-1, None]], [s[None, :]]])

        if self.verbose:
            print(f"Davidson converged in {self._number_of_iterations} iterations: "
                  f"E = {self._eigenpairs[0].eigenvalue:.10f}")

        return self.eigenpairs
