"""
Doubly-occupied configuration interaction (DOCI).

Every configuration is a set of N doubly occupied spatial orbitals (N
electron pairs in K orbitals). Only pair excitations couple configurations:

    <I|H|J> = g(p,q,p,q)    when J is I with the pair in p moved to q

and the diagonal is

    <I|H|I> = sum_p (2 h_pp + g_pppp)
            + sum_{q<p} 2 (2 g_ppqq - g_pqqp)

with p and q running over the doubly occupied orbitals of I.
"""

import numpy as np
import torch
from typing import Iterator, Tuple
from tqdm import tqdm

try:
    from .base import HamiltonianBuilder
    from .parameters import HamiltonianParameters
    from ..fockspace.base import FockSpaceType
    from ..fockspace.fock_space import FockSpace
    from ..utils.errors import InvalidConfigurationError
except ImportError:
    from hamiltonians.base import HamiltonianBuilder
    from hamiltonians.parameters import HamiltonianParameters
    from fockspace.base import FockSpaceType
    from fockspace.fock_space import FockSpace
    from utils.errors import InvalidConfigurationError


class DOCI(HamiltonianBuilder):
    """
    DOCI Hamiltonian builder.

    Args:
        fock_space: Full FockSpace(K, N) where N counts electron PAIRS
    """

    def __init__(self, fock_space: FockSpace):
        if fock_space.fock_space_type != FockSpaceType.FOCK_SPACE:
            raise InvalidConfigurationError(
                f"DOCI requires a full FockSpace, got {type(fock_space).__name__}"
            )
        super().__init__(fock_space)

    @torch.no_grad()
    def calculate_diagonal(self, parameters: HamiltonianParameters) -> np.ndarray:
        """
        Fully vectorized diagonal over all configurations.

        Returns:
            (dimension,) diagonal elements
        """
        self.check_parameters(parameters)

        occupations = torch.from_numpy(self.fock_space.occupation_matrix())  # (dim, K)
        h = torch.from_numpy(parameters.h)
        g = torch.from_numpy(parameters.g)

        # One-body part: 2 h_pp + g_pppp per doubly occupied orbital
        g_pppp = torch.einsum('pppp->p', g)
        diagonal = occupations @ (2 * torch.diagonal(h) + g_pppp)

        # Pair-pair part over q < p: 2 (2 J_pq - K_pq)
        J = torch.einsum('ppqq->pq', g)
        K = torch.einsum('pqqp->pq', g)
        pair_tensor = torch.tril(2 * (2 * J - K), diagonal=-1)
        diagonal += torch.einsum('bp,pq,bq->b', occupations, pair_tensor, occupations)

        return diagonal.numpy()

    def iter_off_diagonal(
        self,
        parameters: HamiltonianParameters,
        progress: bool = False,
    ) -> Iterator[Tuple[int, int, float]]:
        """
        Pair excitations p -> q with q > p, so that J > I.

        The partner address is obtained incrementally: the weight of the
        annihilated pair is removed, occupied orbitals between p and q are
        shifted onto the path with one electron less, and the weight of the
        created pair is added.
        """
        self.check_parameters(parameters)

        fock_space = self.fock_space
        K = fock_space.K
        N = fock_space.N
        g = parameters.g

        for I, onv in enumerate(tqdm(
            fock_space.iter_onvs(),
            total=fock_space.dimension,
            desc="DOCI couplings",
            disable=not progress,
        )):
            for e1 in range(N):
                p = onv.get_occupation_index(e1)

                # Remove the weight of the annihilated pair
                address = I - fock_space.get_vertex_weight(p, e1 + 1)

                # Walk the virtual orbitals above p
                e2 = e1 + 1
                q = p + 1
                address, q, e2 = fock_space.shift_until_next_unoccupied_orbital(onv, address, q, e2)

                while q < K:
                    J = address + fock_space.get_vertex_weight(q, e2)
                    yield I, J, g[p, q, p, q]

                    q += 1
                    address, q, e2 = fock_space.shift_until_next_unoccupied_orbital(onv, address, q, e2)
