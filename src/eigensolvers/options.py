"""Solver options for the CI eigenvalue problem."""

import numpy as np
from enum import Enum
from typing import Optional
from dataclasses import dataclass


class SolverType(Enum):
    """Tag identifying the eigensolver an options object configures."""
    DENSE = "dense"        # full diagonalization of the constructed matrix
    SPARSE = "sparse"      # Lanczos (eigsh) over the matrix-vector product
    DAVIDSON = "davidson"  # Davidson over the matrix-vector product


@dataclass
class BaseSolverOptions:
    """Options shared by all eigensolvers."""

    number_of_requested_eigenpairs: int = 1
    verbose: bool = False

    @property
    def solver_type(self) -> SolverType:
        raise NotImplementedError


@dataclass
class DenseSolverOptions(BaseSolverOptions):
    """Options for full diagonalization with numpy.linalg.eigh."""

    progress: bool = False  # progress bar while building the matrix

    @property
    def solver_type(self) -> SolverType:
        return SolverType.DENSE


@dataclass
class SparseSolverOptions(BaseSolverOptions):
    """Options for scipy.sparse.linalg.eigsh."""

    convergence_threshold: float = 0.0  # 0 means machine precision
    maximum_number_of_iterations: Optional[int] = None

    @property
    def solver_type(self) -> SolverType:
        return SolverType.SPARSE


@dataclass
class DavidsonSolverOptions(BaseSolverOptions):
    """
    Options for the Davidson solver.

    X_0 holds the initial guesses as columns; None selects the Hartree-Fock
    expansion (plus unit vectors on the lowest diagonal elements when more
    than one eigenpair is requested).
    """

    convergence_threshold: float = 1e-8   # on the residual norms
    correction_threshold: float = 1e-3    # regularizes the preconditioner
    maximum_subspace_dimension: int = 15
    collapsed_subspace_dimension: int = 2
    maximum_number_of_iterations: int = 128
    X_0: Optional[np.ndarray] = None

    @property
    def solver_type(self) -> SolverType:
        return SolverType.DAVIDSON
