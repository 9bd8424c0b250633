"""Fock space with a frozen (always occupied) core."""

try:
    from .base import BaseFockSpace, FockSpaceType
    from .fock_space import FockSpace
    from ..utils.errors import InvalidConfigurationError
except ImportError:
    from fockspace.base import BaseFockSpace, FockSpaceType
    from fockspace.fock_space import FockSpace
    from utils.errors import InvalidConfigurationError


class FrozenFockSpace(BaseFockSpace):
    """
    Configurations of K orbitals and N electrons whose lowest X orbitals are
    always occupied.

    The space is addressed through the active FockSpace(K - X, N - X): a
    configuration's address is the address of its bits above the core.

    Args:
        K: Total number of spatial orbitals
        N: Total number of electrons
        X: Number of frozen orbitals
    """

    def __init__(self, K: int, N: int, X: int):
        if X < 0 or X > N or X > K:
            raise InvalidConfigurationError(
                f"Cannot freeze {X} orbitals with {N} electrons in {K} orbitals"
            )

        self.active_fock_space = FockSpace(K - X, N - X)
        super().__init__(K, N, self.active_fock_space.dimension)

        self.X = X
        self._core_mask = (1 << X) - 1

    @property
    def fock_space_type(self) -> FockSpaceType:
        return FockSpaceType.FROZEN_FOCK_SPACE

    def address(self, representation: int) -> int:
        representation = int(representation)
        if representation & self._core_mask != self._core_mask:
            raise InvalidConfigurationError(
                f"Configuration {representation:0{self.K}b} does not occupy the {self.X} frozen orbitals"
            )
        return self.active_fock_space.address(representation >> self.X)

    def representation(self, address: int) -> int:
        active = self.active_fock_space.representation(address)
        return (active << self.X) | self._core_mask

    def next_representation(self, representation: int) -> int:
        active = FockSpace.next_permutation(int(representation) >> self.X)
        return (active << self.X) | self._core_mask
