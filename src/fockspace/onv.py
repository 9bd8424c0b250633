"""
Occupation number vectors (ONVs).

An ONV is a string of creation operators acting on the vacuum. For 3
electrons in 4 spatial orbitals:

    a_0^+ a_1^+ a_2^+ |vac> = |1,1,1,0>

Bitstrings are read in REVERSE LEXICAL order: the least significant bit is
orbital 0. The example above is therefore stored as "0111" (7).
"""

import numpy as np
from typing import Tuple

try:
    from ..utils.errors import InvalidConfigurationError
except ImportError:
    from utils.errors import InvalidConfigurationError


class ONV:
    """
    Bit-packed occupation of K spatial orbitals by N electrons.

    The creation and annihilation operators mutate the bit representation in
    place but do NOT refresh the occupation indices: call
    update_occupation_indices() once a batch of operators has been applied.

    Args:
        K: Number of spatial orbitals
        N: Number of electrons
        representation: Unsigned integer bitmask, bit p = orbital p occupied
    """

    def __init__(self, K: int, N: int, representation: int):
        if K < 0 or N < 0 or N > K:
            raise InvalidConfigurationError(
                f"Cannot place {N} electrons in {K} orbitals"
            )

        self.K = K
        self.N = N
        self.representation = 0
        self.occupation_indices = np.zeros(N, dtype=np.int64)
        self.set_representation(representation)

    def set_representation(self, representation: int):
        """Set a new bitmask and resynchronize the occupation indices."""
        representation = int(representation)
        if representation < 0 or representation >= (1 << self.K):
            raise InvalidConfigurationError(
                f"Representation {representation} does not fit in {self.K} orbitals"
            )
        if bin(representation).count("1") != self.N:
            raise InvalidConfigurationError(
                f"Representation {representation:0{self.K}b} does not hold {self.N} electrons"
            )

        self.representation = representation
        self.update_occupation_indices()

    def update_occupation_indices(self):
        """Extract the positions of the set bits into occupation_indices."""
        indices = []
        bits = self.representation
        while bits:
            lowest = bits & -bits
            indices.append(lowest.bit_length() - 1)
            bits ^= lowest

        self.occupation_indices = np.array(indices, dtype=np.int64)

    def get_occupation_index(self, electron: int) -> int:
        """Orbital index occupied by the given electron (0 = lowest orbital)."""
        return int(self.occupation_indices[electron])

    def is_occupied(self, p: int) -> bool:
        """Test whether orbital p is occupied."""
        return bool((self.representation >> p) & 1)

    def count_occupied_below(self, p: int) -> int:
        """Number of occupied orbitals with an index strictly smaller than p."""
        return bin(self.representation & ((1 << p) - 1)).count("1")

    def operator_phase_factor(self, p: int) -> int:
        """
        Fermionic phase factor for an operator acting on orbital p.

        +1 if an even number of orbitals below p is occupied, -1 if odd.
        """
        return -1 if self.count_occupied_below(p) % 2 else 1

    def annihilate(self, p: int, sign: int = None):
        """
        Apply a_p in place.

        Args:
            p: Orbital index
            sign: Optional running sign; multiplied by the phase factor of p
                before the bit is cleared

        Returns:
            success if sign is None, otherwise (success, sign). On failure
            (orbital p empty) the ONV and the sign are left untouched.
        """
        if not self.is_occupied(p):
            return False if sign is None else (False, sign)

        if sign is not None:
            sign *= self.operator_phase_factor(p)

        self.representation &= ~(1 << p)
        return True if sign is None else (True, sign)

    def create(self, p: int, sign: int = None):
        """
        Apply a_p^+ in place.

        Args:
            p: Orbital index
            sign: Optional running sign; multiplied by the phase factor of p
                before the bit is set

        Returns:
            success if sign is None, otherwise (success, sign). On failure
            (orbital p already occupied) nothing changes.
        """
        if self.is_occupied(p):
            return False if sign is None else (False, sign)

        if sign is not None:
            sign *= self.operator_phase_factor(p)

        self.representation |= 1 << p
        return True if sign is None else (True, sign)

    def slice(self, index_start: int, index_end: int) -> int:
        """
        Representation of the orbitals in [index_start, index_end).

        Example:
            "010011".slice(1, 4) => "01[001]1" -> "001"
        """
        if not 0 <= index_start < index_end <= self.K:
            raise InvalidConfigurationError(
                f"Invalid slice [{index_start}, {index_end}) for {self.K} orbitals"
            )
        width = index_end - index_start
        return (self.representation >> index_start) & ((1 << width) - 1)

    def copy(self) -> "ONV":
        return ONV(self.K, self.N, self.representation)

    def to_bitstring(self) -> str:
        """K-wide bitstring, orbital 0 rightmost."""
        return format(self.representation, f"0{self.K}b") if self.K else ""

    def __eq__(self, other) -> bool:
        if not isinstance(other, ONV):
            return NotImplemented
        return self.representation == other.representation

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.K, self.N, self.representation))

    def __str__(self) -> str:
        return self.to_bitstring()

    def __repr__(self) -> str:
        return f"ONV(K={self.K}, N={self.N}, '{self.to_bitstring()}')"


def onv_from_bitstring(bitstring: str) -> Tuple[int, int, int]:
    """
    Parse a reverse-lexical bitstring into (K, N, representation).

    Args:
        bitstring: String of '0'/'1' characters, orbital 0 rightmost

    Returns:
        (K, N, representation)
    """
    if not bitstring or any(c not in "01" for c in bitstring):
        raise InvalidConfigurationError(f"Not a bitstring: {bitstring!r}")
    return len(bitstring), bitstring.count("1"), int(bitstring, 2)
