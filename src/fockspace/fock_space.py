"""
Full Fock space with combinatorial (vertex-weight) addressing.

The addressing scheme is the one from Helgaker, Jørgensen & Olsen,
"Molecular Electronic-Structure Theory" (2000): every ONV is a path through a
(K+1) x (N+1) lattice and its address is the sum of the vertex weights of the
diagonal (occupied) moves along that path.
"""

from math import comb
from typing import List, Optional, Tuple, Union

try:
    from .base import BaseFockSpace, FockSpaceType
    from .onv import ONV
    from ..utils.errors import InvalidConfigurationError, DimensionOverflowError
except ImportError:
    from fockspace.base import BaseFockSpace, FockSpaceType
    from fockspace.onv import ONV
    from utils.errors import InvalidConfigurationError, DimensionOverflowError


# Addresses are stored as unsigned 64-bit integers
MAX_ADDRESS = 2 ** 64 - 1


class FockSpace(BaseFockSpace):
    """
    All C(K, N) ways of placing N electrons in K spatial orbitals.

    Example vertex weights for K=5, N=2 (rows p = 0..K, columns m = 0..N):

        [ 1 0 0 ]
        [ 1 1 0 ]
        [ 1 2 1 ]
        [ 1 3 3 ]
        [ 0 4 6 ]
        [ 0 0 10]

    Args:
        K: Number of spatial orbitals
        N: Number of electrons
    """

    def __init__(self, K: int, N: int):
        super().__init__(K, N, FockSpace.calculate_dimension(K, N))
        self._weights = self._build_vertex_weights(K, N)

    @property
    def fock_space_type(self) -> FockSpaceType:
        return FockSpaceType.FOCK_SPACE

    @staticmethod
    def calculate_dimension(K: int, N: int) -> int:
        """
        Binomial coefficient C(K, N).

        Raises:
            InvalidConfigurationError: if N > K or either argument is negative
            DimensionOverflowError: if the result exceeds the 64-bit address range
        """
        if K < 0 or N < 0 or N > K:
            raise InvalidConfigurationError(
                f"Cannot place {N} electrons in {K} orbitals"
            )

        dimension = comb(K, N)
        if dimension > MAX_ADDRESS:
            raise DimensionOverflowError(
                f"Fock space dimension C({K}, {N}) = {dimension} exceeds the 64-bit address range"
            )
        return dimension

    @staticmethod
    def _build_vertex_weights(K: int, N: int) -> List[List[int]]:
        weights = [[0] * (N + 1) for _ in range(K + 1)]

        # Every vertical move from (p, m) to (p+1, m) means "orbital p is empty".
        # The largest string has its first K-N orbitals empty, so only the
        # first K-N+1 vertices of column 0 are reachable.
        for p in range(K - N + 1):
            weights[p][0] = 1

        # W(p, m) = W(p-1, m) + W(p-1, m-1)
        for m in range(1, N + 1):
            for p in range(m, K - N + m + 1):
                weights[p][m] = weights[p - 1][m] + weights[p - 1][m - 1]

        return weights

    def get_vertex_weight(self, p: int, m: int) -> int:
        """Vertex weight W(p, m); zero outside the lattice."""
        if m < 0 or m > self.N or p < 0 or p > self.K:
            return 0
        return self._weights[p][m]

    def get_vertex_weights(self) -> List[List[int]]:
        """Copy of the full (K+1) x (N+1) vertex weight table."""
        return [list(row) for row in self._weights]

    def address(self, representation: int) -> int:
        bits = int(representation)
        if bits < 0 or bits >> self.K or bin(bits).count("1") != self.N:
            raise InvalidConfigurationError(
                f"Representation {bits:#b} is not a configuration of {self.N} electrons "
                f"in {self.K} orbitals"
            )

        weights = self._weights
        address = 0
        electron_count = 0

        # Remove the least significant set bit each loop
        while bits:
            lowest = bits & -bits
            p = lowest.bit_length() - 1
            electron_count += 1
            address += weights[p][electron_count]
            bits ^= lowest

        return address

    def representation(self, address: int) -> int:
        if not 0 <= address < self.dimension:
            raise InvalidConfigurationError(
                f"Address {address} is outside [0, {self.dimension})"
            )

        representation = 0
        if self.N == 0:
            return representation

        m = self.N  # electrons still to be placed
        for p in range(self.K - 1, -1, -1):
            weight = self._weights[p][m]

            # A diagonal move is possible: orbital p is occupied
            if weight <= address:
                address -= weight
                representation |= 1 << p

                m -= 1
                if m == 0:
                    break

        return representation

    @staticmethod
    def next_permutation(representation: int) -> int:
        """
        Next larger integer with the same number of set bits.

        Examples:
            011 -> 101
            101 -> 110
        """
        representation = int(representation)
        if representation <= 0:
            raise InvalidConfigurationError("The empty ONV has no successor")

        # t gets the least significant 0 bits of the representation set to 1
        t = representation | (representation - 1)
        trailing_zeros = (representation & -representation).bit_length() - 1

        # Set the most significant bit to change, clear the least significant
        # ones and add the necessary 1 bits
        return (t + 1) | (((~t & (t + 1)) - 1) >> (trailing_zeros + 1))

    def next_representation(self, representation: int) -> int:
        return FockSpace.next_permutation(representation)

    def shift_until_next_unoccupied_orbital(
        self,
        onv: ONV,
        address: int,
        q: int,
        e: int,
        annihilated: int = 1,
        sign: Optional[int] = None,
    ) -> Union[Tuple[int, int, int], Tuple[int, int, int, int]]:
        """
        Move the orbital cursor q forward to the next unoccupied orbital.

        Every occupied orbital that is passed contributes the difference
        between its vertex weight on a path with `annihilated` fewer
        electrons and its original weight, so the address stays consistent
        with the partially annihilated ONV.

        Args:
            onv: The (unmodified) ONV whose occupation indices are scanned
            address: Running address
            q: Orbital cursor
            e: Electron cursor (index of the next electron to compare against)
            annihilated: Number of electrons removed below the cursor
            sign: Optional running sign, flipped once per skipped orbital

        Returns:
            (address, q, e) or (address, q, e, sign) when a sign is given
        """
        occupation = onv.occupation_indices
        while e < self.N and q == occupation[e]:
            # +1 on the electron index because of how the lattice is arrayed
            address += self.get_vertex_weight(q, e + 1 - annihilated) - self._weights[q][e + 1]

            e += 1
            q += 1
            if sign is not None:
                sign = -sign

        if sign is None:
            return address, q, e
        return address, q, e, sign

    def shift_until_previous_unoccupied_orbital(
        self,
        onv: ONV,
        address: int,
        q: int,
        e: int,
        created: int = 1,
        sign: Optional[int] = None,
    ) -> Union[Tuple[int, int, int], Tuple[int, int, int, int]]:
        """
        Move the orbital cursor q backward to the previous unoccupied orbital.

        Every occupied orbital that is passed contributes the difference
        between its vertex weight on a path with `created` more electrons and
        its original weight.

        Args:
            onv: The (unmodified) ONV whose occupation indices are scanned
            address: Running address
            q: Orbital cursor
            e: Electron cursor, -1 once all lower electrons are passed
            created: Number of electrons added below the cursor
            sign: Optional running sign, flipped once per skipped orbital

        Returns:
            (address, q, e) or (address, q, e, sign) when a sign is given
        """
        occupation = onv.occupation_indices
        while e != -1 and q == occupation[e]:
            address += self.get_vertex_weight(q, e + 1 + created) - self._weights[q][e + 1]

            e -= 1
            q -= 1
            if sign is not None:
                sign = -sign

        if sign is None:
            return address, q, e
        return address, q, e, sign

    def count_one_electron_couplings(self, onv: ONV) -> int:
        """Number of larger-address ONVs reached by a single excitation."""
        V = self.K - self.N  # number of virtual orbitals
        coupling_count = 0

        for e1 in range(self.N):
            p = onv.get_occupation_index(e1)
            coupling_count += V + e1 - p  # virtuals with an index larger than p

        return coupling_count

    def count_two_electron_couplings(self, onv: ONV) -> int:
        """Number of larger-address ONVs reached by a single or double excitation."""
        V = self.K - self.N
        coupling_count = 0

        for e1 in range(self.N):
            p = onv.get_occupation_index(e1)
            coupling_count += V + e1 - p  # one-electron part

            for e2 in range(e1 + 1, self.N):
                q = onv.get_occupation_index(e2)
                coupling_count2 = V + e2 - q
                coupling_count += (V - coupling_count2) * coupling_count2

                if coupling_count2 > 1:
                    coupling_count += FockSpace.calculate_dimension(coupling_count2, 2)

        return coupling_count

    def count_total_one_electron_couplings(self) -> int:
        """Number of non-zero off-diagonal one-electron couplings in the whole space."""
        return (self.K - self.N) * self.N * self.dimension

    def count_total_two_electron_couplings(self) -> int:
        """Number of non-zero off-diagonal two-electron couplings in the whole space."""
        two_electron_permutations = 0
        if self.K - self.N >= 2:
            two_electron_permutations = (
                FockSpace.calculate_dimension(self.K - self.N, 2)
                * self.N * (self.N - 1) * self.dimension // 2
            )

        return two_electron_permutations + self.count_total_one_electron_couplings()
