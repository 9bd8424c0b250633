"""Tests for the Davidson, dense and sparse eigensolvers."""

import pytest
import numpy as np
import sys
from pathlib import Path
from scipy.sparse import csr_matrix

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from eigensolvers import (
    Eigenpair,
    DavidsonSolver,
    DavidsonSolverOptions,
    DenseSolver,
    DenseSolverOptions,
    SparseSolver,
    SparseSolverOptions,
    SolverType,
)
from utils.errors import ConvergenceError, InvalidConfigurationError
from utils.linalg import random_symmetric_matrix


class TestDavidsonSolver:
    """Test cases for the Davidson solver."""

    @pytest.mark.parametrize("dim", [10, 50, 200])
    def test_lowest_eigenpair(self, dim):
        """Test the lowest eigenpair against numpy.linalg.eigh."""
        A = random_symmetric_matrix(dim, seed=dim)
        eigenvalues, eigenvectors = np.linalg.eigh(A)

        options = DavidsonSolverOptions(convergence_threshold=1e-10)
        solver = DavidsonSolver.from_matrix(A, options)
        eigenpairs = solver.solve()

        assert len(eigenpairs) == 1
        assert abs(eigenpairs[0].eigenvalue - eigenvalues[0]) < 1e-10
        assert eigenpairs[0].is_equal(Eigenpair(eigenvalues[0], eigenvectors[:, 0]), tolerance=1e-8)

    def test_several_eigenpairs(self):
        """Test the three lowest eigenpairs."""
        A = random_symmetric_matrix(100, seed=3)
        eigenvalues, _ = np.linalg.eigh(A)

        options = DavidsonSolverOptions(
            number_of_requested_eigenpairs=3,
            convergence_threshold=1e-9,
            collapsed_subspace_dimension=4,
            maximum_subspace_dimension=20,
        )
        solver = DavidsonSolver.from_matrix(A, options)
        eigenpairs = solver.solve()

        computed = [pair.eigenvalue for pair in eigenpairs]
        np.testing.assert_allclose(computed, eigenvalues[:3], atol=1e-9)

        # Ritz vectors are orthonormal
        X = np.column_stack([pair.eigenvector for pair in eigenpairs])
        np.testing.assert_allclose(X.T @ X, np.eye(3), atol=1e-8)

    def test_subspace_collapse(self):
        """Test convergence with a subspace that has to collapse."""
        A = random_symmetric_matrix(150, seed=5)
        eigenvalues, _ = np.linalg.eigh(A)

        options = DavidsonSolverOptions(
            convergence_threshold=1e-8,
            maximum_subspace_dimension=3,
            collapsed_subspace_dimension=1,
            maximum_number_of_iterations=500,
        )
        solver = DavidsonSolver.from_matrix(A, options)
        solver.solve()
        assert abs(solver.get_lowest_eigenvalue() - eigenvalues[0]) < 1e-8

    def test_subspace_never_exceeds_maximum(self):
        """Test that collapsing with several eigenpairs keeps V within its maximum."""
        A = random_symmetric_matrix(120, seed=13)
        eigenvalues, _ = np.linalg.eigh(A)

        options = DavidsonSolverOptions(
            number_of_requested_eigenpairs=2,
            convergence_threshold=1e-8,
            maximum_subspace_dimension=4,
            collapsed_subspace_dimension=3,
            maximum_number_of_iterations=1000,
        )
        solver = DavidsonSolver.from_matrix(A, options)
        eigenpairs = solver.solve()

        dimensions = solver.history['subspace_dimensions']
        assert max(dimensions) <= 4
        assert len(dimensions) == solver.number_of_iterations + 1
        np.testing.assert_allclose([pair.eigenvalue for pair in eigenpairs], eigenvalues[:2], atol=1e-8)

    def test_failed_solve_discards_results(self):
        """Test that a solve ending in a convergence error leaves no eigenpairs behind."""
        A = random_symmetric_matrix(100, seed=14)
        solver = DavidsonSolver.from_matrix(A, DavidsonSolverOptions(convergence_threshold=1e-8))
        solver.solve()
        assert solver.is_solved

        solver.convergence_threshold = 1e-14
        solver.maximum_number_of_iterations = 1
        with pytest.raises(ConvergenceError):
            solver.solve()
        assert not solver.is_solved
        with pytest.raises(RuntimeError):
            solver.get_lowest_eigenvalue()

    def test_matrix_vector_product(self):
        """Test the matrix-free constructor with an explicit guess."""
        A = random_symmetric_matrix(40, seed=6)
        eigenvalues, _ = np.linalg.eigh(A)

        guess = np.zeros((40, 1))
        guess[0, 0] = 1.0
        options = DavidsonSolverOptions(X_0=guess, convergence_threshold=1e-10)
        solver = DavidsonSolver(lambda x: A @ x, np.diag(A), options)
        solver.solve()

        assert abs(solver.get_lowest_eigenvalue() - eigenvalues[0]) < 1e-10
        assert solver.number_of_iterations >= 1
        assert len(solver.history['eigenvalues']) == solver.number_of_iterations + 1
        assert solver.history['residuals'][-1][0] <= 1e-10

    def test_sparse_matrix(self):
        """Test the dense-matrix constructor with a sparse matrix."""
        A = random_symmetric_matrix(60, seed=7)
        eigenvalues, _ = np.linalg.eigh(A)

        solver = DavidsonSolver.from_matrix(csr_matrix(A), DavidsonSolverOptions(convergence_threshold=1e-10))
        solver.solve()
        assert abs(solver.get_lowest_eigenvalue() - eigenvalues[0]) < 1e-10

    def test_collapsed_equals_maximum(self):
        """Test that the collapsed subspace must be smaller than the maximum subspace."""
        A = random_symmetric_matrix(20, seed=8)
        options = DavidsonSolverOptions(maximum_subspace_dimension=4, collapsed_subspace_dimension=4)
        with pytest.raises(InvalidConfigurationError):
            DavidsonSolver.from_matrix(A, options)

    def test_collapsed_too_small(self):
        """Test that the collapsed subspace must hold the requested eigenpairs."""
        A = random_symmetric_matrix(20, seed=8)
        options = DavidsonSolverOptions(number_of_requested_eigenpairs=3, collapsed_subspace_dimension=2)
        with pytest.raises(InvalidConfigurationError):
            DavidsonSolver.from_matrix(A, options)

    def test_too_few_guesses(self):
        """Test that there must be at least one guess per requested eigenpair."""
        A = random_symmetric_matrix(20, seed=9)
        options = DavidsonSolverOptions(
            number_of_requested_eigenpairs=2,
            X_0=np.eye(20, 1),
        )
        with pytest.raises(InvalidConfigurationError):
            DavidsonSolver.from_matrix(A, options)

    def test_guess_dimension_mismatch(self):
        """Test that the guesses must match the diagonal's dimension."""
        A = random_symmetric_matrix(20, seed=10)
        options = DavidsonSolverOptions(X_0=np.eye(21, 1))
        with pytest.raises(InvalidConfigurationError):
            DavidsonSolver.from_matrix(A, options)

    def test_no_matvec_before_validation(self):
        """Test that invalid options fail before any matrix-vector product."""
        calls = []

        def matvec(x):
            calls.append(x)
            return x

        options = DavidsonSolverOptions(maximum_subspace_dimension=2, collapsed_subspace_dimension=2)
        with pytest.raises(InvalidConfigurationError):
            DavidsonSolver(matvec, np.ones(10), options)
        assert calls == []

    def test_not_converged(self):
        """Test that reaching the iteration cap raises."""
        A = random_symmetric_matrix(100, seed=11, diagonal_spread=0.1)
        options = DavidsonSolverOptions(convergence_threshold=1e-14, maximum_number_of_iterations=2)
        solver = DavidsonSolver.from_matrix(A, options)
        with pytest.raises(ConvergenceError):
            solver.solve()

    def test_results_before_solve(self):
        """Test that results are unavailable before solving."""
        solver = DavidsonSolver.from_matrix(random_symmetric_matrix(10, seed=12))
        assert not solver.is_solved
        with pytest.raises(RuntimeError):
            solver.eigenpairs
        with pytest.raises(RuntimeError):
            solver.number_of_iterations
        with pytest.raises(RuntimeError):
            solver.history

    def test_default_guess(self):
        """Test the Hartree-Fock guess completed with the lowest diagonal elements."""
        diagonal = np.array([0.5, 3.0, -1.0, 2.0])
        guess = DavidsonSolver.default_guess(diagonal, 2)
        np.testing.assert_array_equal(guess[:, 0], [1, 0, 0, 0])
        np.testing.assert_array_equal(guess[:, 1], [0, 0, 1, 0])

    def test_options(self):
        """Test option defaults and the solver type tags."""
        options = DavidsonSolverOptions()
        assert options.number_of_requested_eigenpairs == 1
        assert options.collapsed_subspace_dimension < options.maximum_subspace_dimension
        assert options.solver_type == SolverType.DAVIDSON
        assert DenseSolverOptions().solver_type == SolverType.DENSE
        assert SparseSolverOptions().solver_type == SolverType.SPARSE


class TestReferenceSolvers:
    """Test cases for the dense and sparse reference solvers."""

    def test_dense(self):
        """Test full diagonalization."""
        A = random_symmetric_matrix(30, seed=20)
        eigenvalues, _ = np.linalg.eigh(A)

        solver = DenseSolver(A, DenseSolverOptions(number_of_requested_eigenpairs=4))
        eigenpairs = solver.solve()
        assert len(eigenpairs) == 4
        np.testing.assert_allclose([pair.eigenvalue for pair in eigenpairs], eigenvalues[:4])

    def test_dense_rejects_non_square(self):
        """Test that a non-square matrix is rejected."""
        with pytest.raises(InvalidConfigurationError):
            DenseSolver(np.zeros((3, 4)))

    def test_sparse(self):
        """Test Lanczos against full diagonalization."""
        A = random_symmetric_matrix(80, seed=21)
        eigenvalues, _ = np.linalg.eigh(A)

        solver = SparseSolver(csr_matrix(A), SparseSolverOptions(number_of_requested_eigenpairs=2))
        eigenpairs = solver.solve()
        np.testing.assert_allclose([pair.eigenvalue for pair in eigenpairs], eigenvalues[:2], atol=1e-10)

    def test_sparse_too_many_eigenpairs(self):
        """Test that Lanczos cannot return all eigenpairs."""
        with pytest.raises(InvalidConfigurationError):
            SparseSolver(csr_matrix(np.eye(3)), SparseSolverOptions(number_of_requested_eigenpairs=3))

    def test_too_many_eigenpairs(self):
        """Test that more eigenpairs than the dimension are rejected."""
        with pytest.raises(InvalidConfigurationError):
            DenseSolver(np.eye(2), DenseSolverOptions(number_of_requested_eigenpairs=3))

    def test_eigenpair_comparison(self):
        """Test eigenpair equality up to the sign of the eigenvector."""
        v = np.array([0.6, 0.8])
        assert Eigenpair(1.0, v).is_equal(Eigenpair(1.0, -v))
        assert not Eigenpair(1.0, v).is_equal(Eigenpair(1.1, v))
        with pytest.raises(InvalidConfigurationError):
            Eigenpair(1.0, v).is_equal(Eigenpair(1.0, np.ones(3)))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
