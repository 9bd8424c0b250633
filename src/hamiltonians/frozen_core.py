"""
Frozen-core CI: the lowest X spatial orbitals stay doubly occupied.

The core is folded into effective one-electron integrals over the active
orbitals and a constant diagonal shift, after which any builder acting on
the active Fock space can be reused.
"""

import numpy as np
from typing import Iterator, Tuple

try:
    from .base import HamiltonianBuilder
    from .doci import DOCI
    from .parameters import HamiltonianParameters
    from ..fockspace.frozen_fock_space import FrozenFockSpace
    from ..utils.errors import InvalidConfigurationError
except ImportError:
    from hamiltonians.base import HamiltonianBuilder
    from hamiltonians.doci import DOCI
    from hamiltonians.parameters import HamiltonianParameters
    from fockspace.frozen_fock_space import FrozenFockSpace
    from utils.errors import InvalidConfigurationError


def freeze_hamiltonian_parameters(parameters: HamiltonianParameters, X: int) -> HamiltonianParameters:
    """
    Integrals over the active orbitals X..K-1 with the core folded in.

        h'(i,j) = h(i,j) + sum_l [ g(i,j,l,l) + g(l,l,i,j)
                                   - g(i,l,l,j)/2 - g(l,j,i,l)/2 ]

    where l runs over the X frozen orbitals. The two-electron integrals are
    the active block of g; the scalar is unchanged.

    Args:
        parameters: Integrals over all K orbitals
        X: Number of frozen orbitals

    Returns:
        HamiltonianParameters over K - X orbitals
    """
    K = parameters.K
    if X < 0 or X > K:
        raise InvalidConfigurationError(f"Cannot freeze {X} of {K} orbitals")

    h, g = parameters.h, parameters.g
    core = slice(0, X)
    active = slice(X, K)

    h_active = h[active, active].copy()
    if X > 0:
        h_active += np.einsum('ijll->ij', g[active, active, core, core])
        h_active += np.einsum('llij->ij', g[core, core, active, active])
        h_active -= 0.5 * np.einsum('illj->ij', g[active, core, core, active])
        h_active -= 0.5 * np.einsum('ljil->ij', g[core, active, active, core])

    g_active = g[active, active, active, active].copy()

    return HamiltonianParameters(h=h_active, g=g_active, scalar=parameters.scalar)


def calculate_frozen_core_shift(parameters: HamiltonianParameters, X: int) -> float:
    """
    Energy of the doubly occupied core, added to every diagonal element.

        sum_i (2 h_ii + g_iiii)
        + sum_{i<j} (2 g_iijj + 2 g_jjii - g_jiij - g_ijji)
    """
    h, g = parameters.h, parameters.g
    shift = 0.0
    for i in range(X):
        shift += 2 * h[i, i] + g[i, i, i, i]

        for j in range(i + 1, X):
            shift += 2 * g[i, i, j, j] + 2 * g[j, j, i, i] - g[j, i, i, j] - g[i, j, j, i]

    return float(shift)


class FrozenCoreCI(HamiltonianBuilder):
    """
    Wraps a builder over the active Fock space and adds the frozen core.

    The wrapped builder sees the frozen integrals from
    freeze_hamiltonian_parameters(); the core energy enters as a constant
    shift of the diagonal.

    Args:
        active_builder: Builder over the active Fock space (K - X, N - X)
        fock_space: Frozen Fock space (K, N, X) the matrix is addressed in
    """

    def __init__(self, active_builder: HamiltonianBuilder, fock_space: FrozenFockSpace):
        active_space = active_builder.get_fock_space()
        if (active_space.K, active_space.N) != (fock_space.K - fock_space.X, fock_space.N - fock_space.X):
            raise InvalidConfigurationError(
                f"Active builder over {active_space!r} does not match the active part of {fock_space!r}"
            )
        super().__init__(fock_space)

        self.active_builder = active_builder
        self.X = fock_space.X

    def freeze(self, parameters: HamiltonianParameters) -> HamiltonianParameters:
        self.check_parameters(parameters)
        return freeze_hamiltonian_parameters(parameters, self.X)

    def calculate_frozen_core_diagonal(self, parameters: HamiltonianParameters) -> np.ndarray:
        """Constant core energy on every configuration."""
        self.check_parameters(parameters)
        return np.full(self.dimension, calculate_frozen_core_shift(parameters, self.X))

    def calculate_diagonal(self, parameters: HamiltonianParameters) -> np.ndarray:
        frozen = self.freeze(parameters)
        return self.active_builder.calculate_diagonal(frozen) + self.calculate_frozen_core_diagonal(parameters)

    def iter_off_diagonal(
        self,
        parameters: HamiltonianParameters,
        progress: bool = False,
    ) -> Iterator[Tuple[int, int, float]]:
        # Addresses in the frozen space equal addresses in the active space
        yield from self.active_builder.iter_off_diagonal(self.freeze(parameters), progress=progress)

    def construct_hamiltonian(
        self,
        parameters: HamiltonianParameters,
        progress: bool = False,
    ) -> np.ndarray:
        H = self.active_builder.construct_hamiltonian(self.freeze(parameters), progress=progress)
        H += np.diag(self.calculate_frozen_core_diagonal(parameters))
        return H

    def matrix_vector_product(
        self,
        parameters: HamiltonianParameters,
        x: np.ndarray,
        diagonal: np.ndarray,
    ) -> np.ndarray:
        # The given diagonal already carries the core shift
        return self.active_builder.matrix_vector_product(self.freeze(parameters), x, diagonal)


class FrozenCoreDOCI(FrozenCoreCI):
    """
    DOCI with the lowest X orbitals frozen.

    Args:
        fock_space: FrozenFockSpace(K, N, X), N counting electron pairs
    """

    def __init__(self, fock_space: FrozenFockSpace):
        super().__init__(DOCI(fock_space.active_fock_space), fock_space)
