"""Eigensolvers for the lowest eigenpairs of CI Hamiltonians."""

from .options import (
    SolverType,
    BaseSolverOptions,
    DenseSolverOptions,
    SparseSolverOptions,
    DavidsonSolverOptions,
)
from .base import Eigenpair, BaseEigenproblemSolver
from .dense import DenseSolver, SparseSolver
from .davidson import DavidsonSolver

__all__ = [
    "SolverType",
    "BaseSolverOptions",
    "DenseSolverOptions",
    "SparseSolverOptions",
    "DavidsonSolverOptions",
    "Eigenpair",
    "BaseEigenproblemSolver",
    "DenseSolver",
    "SparseSolver",
    "DavidsonSolver",
]
