"""
CI solver: diagonalizes a Hamiltonian builder for given integrals.

Example usage:
```python
parameters = HamiltonianParameters.random(K=6, seed=1)
doci = DOCI(FockSpace(6, 3))

solver = CISolver(doci, parameters)
solver.solve(DavidsonSolverOptions(convergence_threshold=1e-10))

print(f"DOCI energy: {solver.ground_state_energy():.10f}")
```
"""

import numpy as np
from dataclasses import replace
from typing import List, Optional

# Support both package imports and direct script execution
try:
    from .hamiltonians.base import HamiltonianBuilder
    from .hamiltonians.parameters import HamiltonianParameters
    from .eigensolvers.base import Eigenpair
    from .eigensolvers.options import (
        BaseSolverOptions,
        DavidsonSolverOptions,
        SolverType,
    )
    from .eigensolvers.dense import DenseSolver, SparseSolver
    from .eigensolvers.davidson import DavidsonSolver
    from .utils.errors import InvalidConfigurationError
except ImportError:
    from hamiltonians.base import HamiltonianBuilder
    from hamiltonians.parameters import HamiltonianParameters
    from eigensolvers.base import Eigenpair
    from eigensolvers.options import (
        BaseSolverOptions,
        DavidsonSolverOptions,
        SolverType,
    )
    from eigensolvers.dense import DenseSolver, SparseSolver
    from eigensolvers.davidson import DavidsonSolver
    from utils.errors import InvalidConfigurationError


class CISolver:
    """
    Entry point for configuration interaction calculations.

    The eigenvalues are electronic energies; ground_state_energy() adds the
    scalar offset (nuclear repulsion) of the parameters.

    Args:
        builder: Hamiltonian builder (e.g. DOCI, FrozenCoreDOCI)
        parameters: Integrals over the builder's orbitals

    Raises:
        InvalidConfigurationError: if the number of orbitals of the integrals
            and of the builder's Fock space differ
    """

    def __init__(self, builder: HamiltonianBuilder, parameters: HamiltonianParameters):
        builder.check_parameters(parameters)

        self.builder = builder
        self.parameters = parameters
        self.fock_space = builder.get_fock_space()

        self._eigenpairs: Optional[List[Eigenpair]] = None
        self.number_of_iterations: Optional[int] = None

    def solve(self, options: Optional[BaseSolverOptions] = None) -> List[Eigenpair]:
        """
        Find the lowest eigenpairs of the CI Hamiltonian.

        Args:
            options: DenseSolverOptions, SparseSolverOptions or
                DavidsonSolverOptions (default)

        Returns:
            The requested eigenpairs, lowest first
        """
        options = options or DavidsonSolverOptions()
        self._eigenpairs = None
        self.number_of_iterations = None

        solver_type = options.solver_type

        if solver_type == SolverType.DENSE:
            H = self.builder.construct_hamiltonian(self.parameters, progress=options.progress)
            solver = DenseSolver(H, options)

        elif solver_type == SolverType.SPARSE:
            operator = self.builder.as_linear_operator(self.parameters)
            solver = SparseSolver(operator, options, v0=self._guess(options)[:, 0])

        elif solver_type == SolverType.DAVIDSON:
            diagonal = self.builder.calculate_diagonal(self.parameters)

            def matvec(x: np.ndarray) -> np.ndarray:
                return self.builder.matrix_vector_product(self.parameters, x, diagonal)

            if options.X_0 is None:
                options = replace(options, X_0=self._guess(options))
            solver = DavidsonSolver(matvec, diagonal, options)

        else:
            raise InvalidConfigurationError(f"Unknown solver type: {solver_type}")

        self._eigenpairs = solver.solve()
        if solver_type == SolverType.DAVIDSON:
            self.number_of_iterations = solver.number_of_iterations

        if options.verbose:
            print(f"{type(self.builder).__name__} ({self.fock_space.dimension} configurations): "
                  f"E0 = {self.ground_state_energy():.10f}")

        return self.get_eigenpairs()

    def _guess(self, options: BaseSolverOptions) -> np.ndarray:
        """Hartree-Fock expansion as the first initial guess."""
        guess = self.fock_space.hartree_fock_expansion()[:, None]
        r = options.number_of_requested_eigenpairs
        if r == 1:
            return guess

        diagonal = self.builder.calculate_diagonal(self.parameters)
        return DavidsonSolver.default_guess(diagonal, r)

    @property
    def is_solved(self) -> bool:
        return self._eigenpairs is not None

    def get_eigenpairs(self) -> List[Eigenpair]:
        if not self.is_solved:
            raise RuntimeError("The CI problem has not been solved yet: no eigenpairs available")
        return list(self._eigenpairs)

    def get_eigenpair(self, index: int = 0) -> Eigenpair:
        eigenpairs = self.get_eigenpairs()
        if not 0 <= index < len(eigenpairs):
            raise InvalidConfigurationError(
                f"Eigenpair {index} was not requested ({len(eigenpairs)} available)"
            )
        return eigenpairs[index]

    def ground_state_energy(self) -> float:
        """Lowest eigenvalue plus the scalar offset of the parameters."""
        return self.get_eigenpair(0).eigenvalue + self.parameters.scalar

    def make_wavefunction(self, index: int = 0) -> np.ndarray:
        """
        CI expansion coefficients of an eigenstate.

        Returns:
            Coefficient vector over the Fock space, shape (dimension,)
        """
        return self.get_eigenpair(index).eigenvector.copy()
