"""Hamiltonian parameters and CI Hamiltonian builders."""

from .parameters import (
    HamiltonianParameters,
    compute_molecular_integrals,
    create_h2_parameters,
    create_lih_parameters,
)
from .base import HamiltonianBuilder
from .doci import DOCI
from .frozen_core import (
    FrozenCoreCI,
    FrozenCoreDOCI,
    freeze_hamiltonian_parameters,
    calculate_frozen_core_shift,
)

__all__ = [
    "HamiltonianParameters",
    "compute_molecular_integrals",
    "create_h2_parameters",
    "create_lih_parameters",
    "HamiltonianBuilder",
    "DOCI",
    "FrozenCoreCI",
    "FrozenCoreDOCI",
    "freeze_hamiltonian_parameters",
    "calculate_frozen_core_shift",
]
