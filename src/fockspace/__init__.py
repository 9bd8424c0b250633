"""Configurations (ONVs) and the addressing schemes that enumerate them."""

from .onv import ONV, onv_from_bitstring
from .base import BaseFockSpace, FockSpaceType
from .fock_space import FockSpace
from .selected_fock_space import SelectedFockSpace
from .frozen_fock_space import FrozenFockSpace

__all__ = [
    "ONV",
    "onv_from_bitstring",
    "BaseFockSpace",
    "FockSpaceType",
    "FockSpace",
    "SelectedFockSpace",
    "FrozenFockSpace",
]
