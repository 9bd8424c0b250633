"""
FockCI: configuration interaction over combinatorially addressed Fock spaces.

Modules:
    - fockspace: ONVs and addressing schemes (full, selected, frozen-core)
    - hamiltonians: Integrals and Hamiltonian builders (DOCI, frozen-core DOCI)
    - eigensolvers: Davidson, dense and sparse eigensolvers
    - solver: CI solver entry point
"""

__version__ = "0.1.0"

from .solver import CISolver

__all__ = [
    "CISolver",
    "__version__",
]
