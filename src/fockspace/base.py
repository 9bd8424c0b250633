"""Base class for addressing schemes over a Fock space."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterator, Optional
import numpy as np

try:
    from .onv import ONV
except ImportError:
    from fockspace.onv import ONV


class FockSpaceType(Enum):
    """Tag identifying the concrete addressing strategy."""
    FOCK_SPACE = "fock_space"                    # full combinatorial lattice
    SELECTED_FOCK_SPACE = "selected_fock_space"  # explicit configuration list
    FROZEN_FOCK_SPACE = "frozen_fock_space"      # lattice with frozen core orbitals


class BaseFockSpace(ABC):
    """
    Abstract addressing scheme: a bijection between ONVs and dense addresses.

    Concrete schemes provide address(), representation() and the successor
    used to enumerate the space in address order. Everything else (ONV
    construction, enumeration, guess vectors) is shared.

    Attributes:
        K: Number of spatial orbitals
        N: Number of electrons
        dimension: Number of configurations
    """

    def __init__(self, K: int, N: int, dimension: int):
        self.K = K
        self.N = N
        self.dimension = dimension

    @property
    @abstractmethod
    def fock_space_type(self) -> FockSpaceType:
        pass

    @abstractmethod
    def address(self, representation: int) -> int:
        """
        Address (ordering number) of a configuration.

        Args:
            representation: Unsigned bit representation of the ONV

        Returns:
            Integer in [0, dimension)
        """
        pass

    @abstractmethod
    def representation(self, address: int) -> int:
        """
        Inverse of address().

        Args:
            address: Integer in [0, dimension)

        Returns:
            Unsigned bit representation of the configuration
        """
        pass

    @abstractmethod
    def next_representation(self, representation: int) -> int:
        """Representation of the configuration with the next address."""
        pass

    def get_address(self, onv: ONV) -> int:
        return self.address(onv.representation)

    def make_onv(self, address: int) -> ONV:
        """Create the ONV that lives at the given address."""
        return ONV(self.K, self.N, self.representation(address))

    def set_next_onv(self, onv: ONV):
        """Advance the ONV in place to the next address and resync its indices."""
        onv.set_representation(self.next_representation(onv.representation))

    def iter_onvs(self) -> Iterator[ONV]:
        """
        Enumerate all ONVs in ascending address order.

        A single ONV instance is yielded and advanced in place; copy it if it
        needs to outlive the loop body.
        """
        if self.dimension == 0:
            return

        onv = self.make_onv(0)
        for I in range(self.dimension):
            yield onv

            # Skip the last permutation
            if I < self.dimension - 1:
                self.set_next_onv(onv)

    def occupation_matrix(self) -> np.ndarray:
        """
        Occupation numbers of all configurations.

        Returns:
            (dimension, K) array of 0/1 entries, row I = configuration I
        """
        occupations = np.zeros((self.dimension, self.K), dtype=np.float64)
        for I, onv in enumerate(self.iter_onvs()):
            occupations[I, onv.occupation_indices] = 1.0
        return occupations

    def hartree_fock_expansion(self) -> np.ndarray:
        """Coefficient vector of the single configuration at address 0."""
        expansion = np.zeros(self.dimension)
        expansion[0] = 1.0
        return expansion

    def random_expansion(self, seed: Optional[int] = None) -> np.ndarray:
        """Normalized random coefficient vector over this space."""
        rng = np.random.default_rng(seed)
        expansion = rng.standard_normal(self.dimension)
        return expansion / np.linalg.norm(expansion)

    def __len__(self) -> int:
        return self.dimension

    def __repr__(self) -> str:
        return f"{type(self).__name__}(K={self.K}, N={self.N}, dimension={self.dimension})"
