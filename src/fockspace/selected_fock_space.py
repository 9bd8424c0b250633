"""
Selected Fock space: an explicit list of configurations.

Addresses are insertion positions rather than lattice paths, so this space
can hold any subset of a full Fock space (e.g. configurations picked by a
selection procedure).
"""

from typing import Dict, Iterable, List, Optional, Union

try:
    from .base import BaseFockSpace, FockSpaceType
    from .onv import onv_from_bitstring
    from ..utils.errors import InvalidConfigurationError
except ImportError:
    from fockspace.base import BaseFockSpace, FockSpaceType
    from fockspace.onv import onv_from_bitstring
    from utils.errors import InvalidConfigurationError


class SelectedFockSpace(BaseFockSpace):
    """
    Fock space spanned by an explicit list of ONVs.

    Args:
        K: Number of spatial orbitals
        N: Number of electrons
        configurations: Optional initial configurations (bitstrings or ints)
    """

    def __init__(
        self,
        K: int,
        N: int,
        configurations: Optional[Iterable[Union[str, int]]] = None,
    ):
        if K < 0 or N < 0 or N > K:
            raise InvalidConfigurationError(
                f"Cannot place {N} electrons in {K} orbitals"
            )
        super().__init__(K, N, 0)

        self._representations: List[int] = []
        self._addresses: Dict[int, int] = {}

        if configurations is not None:
            self.add_configurations(configurations)

    @classmethod
    def from_fock_space(cls, fock_space: BaseFockSpace) -> "SelectedFockSpace":
        """Select every configuration of another Fock space, in its address order."""
        selected = cls(fock_space.K, fock_space.N)
        for onv in fock_space.iter_onvs():
            selected.add_configuration(onv.representation)
        return selected

    @property
    def fock_space_type(self) -> FockSpaceType:
        return FockSpaceType.SELECTED_FOCK_SPACE

    @property
    def configurations(self) -> List[int]:
        return list(self._representations)

    def _parse(self, configuration: Union[str, int]) -> int:
        if isinstance(configuration, str):
            K, N, representation = onv_from_bitstring(configuration)
            if K != self.K:
                raise InvalidConfigurationError(
                    f"Bitstring {configuration!r} has {K} orbitals, expected {self.K}"
                )
        else:
            representation = int(configuration)
            if representation < 0 or representation >= (1 << self.K):
                raise InvalidConfigurationError(
                    f"Representation {representation} does not fit in {self.K} orbitals"
                )
            N = bin(representation).count("1")

        if N != self.N:
            raise InvalidConfigurationError(
                f"Configuration {representation:0{self.K}b} holds {N} electrons, expected {self.N}"
            )
        return representation

    def add_configuration(self, configuration: Union[str, int]) -> int:
        """
        Append a configuration to the space.

        Args:
            configuration: Reverse-lexical bitstring (orbital 0 rightmost) or
                unsigned integer representation

        Returns:
            The address assigned to the configuration
        """
        representation = self._parse(configuration)
        if representation in self._addresses:
            raise InvalidConfigurationError(
                f"Configuration {representation:0{self.K}b} is already in the space"
            )

        address = len(self._representations)
        self._representations.append(representation)
        self._addresses[representation] = address
        self.dimension = len(self._representations)
        return address

    def add_configurations(self, configurations: Iterable[Union[str, int]]):
        for configuration in configurations:
            self.add_configuration(configuration)

    def address(self, representation: int) -> int:
        try:
            return self._addresses[int(representation)]
        except KeyError:
            raise InvalidConfigurationError(
                f"Configuration {int(representation):0{self.K}b} is not in the selected space"
            ) from None

    def representation(self, address: int) -> int:
        if not 0 <= address < self.dimension:
            raise InvalidConfigurationError(
                f"Address {address} is outside [0, {self.dimension})"
            )
        return self._representations[address]

    def next_representation(self, representation: int) -> int:
        return self._representations[self.address(representation) + 1]

    def __contains__(self, configuration: Union[str, int]) -> bool:
        try:
            return self._parse(configuration) in self._addresses
        except InvalidConfigurationError:
            return False
