"""
Example: DOCI binding curves of H2 and LiH

DOCI restricts the wavefunction to seniority-zero configurations: every
spatial orbital is either empty or doubly occupied. For H2 in a minimal
basis this is exact (2 electrons, 2 orbitals); for LiH the 1s core of
lithium can be frozen.

Requires PySCF for the molecular integrals.

Run with:
    python examples/h2_doci.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np

from solver import CISolver
from fockspace import FockSpace, FrozenFockSpace
from hamiltonians import DOCI, FrozenCoreDOCI, create_h2_parameters, create_lih_parameters
from eigensolvers import DavidsonSolverOptions, DenseSolverOptions


def run_h2_binding_curve():
    """Compute the H2 DOCI binding curve in STO-3G."""
    print("=" * 70)
    print("DOCI: H2 Binding Curve (STO-3G)")
    print("=" * 70)

    bond_lengths = np.linspace(0.5, 2.0, 7)

    for r in bond_lengths:
        parameters = create_h2_parameters(bond_length=r)
        solver = CISolver(DOCI(FockSpace(parameters.K, 1)), parameters)
        solver.solve(DenseSolverOptions())
        print(f"R = {r:.2f} Å: E = {solver.ground_state_energy():.8f} Ha")


def run_lih_frozen_core(bond_length: float = 1.6):
    """Compare full and frozen-core DOCI for LiH in 6-31G."""
    print("\n" + "=" * 70)
    print(f"DOCI: LiH at {bond_length} Å (6-31G)")
    print("=" * 70)

    parameters = create_lih_parameters(bond_length=bond_length, basis="6-31g")
    K = parameters.K
    N = 2  # electron pairs

    options = DavidsonSolverOptions(convergence_threshold=1e-8, verbose=False)

    full = CISolver(DOCI(FockSpace(K, N)), parameters)
    full.solve(options)
    print(f"DOCI ({full.fock_space.dimension} configurations):             "
          f"E = {full.ground_state_energy():.8f} Ha")

    frozen = CISolver(FrozenCoreDOCI(FrozenFockSpace(K, N, 1)), parameters)
    frozen.solve(options)
    print(f"Frozen-core DOCI ({frozen.fock_space.dimension} configurations): "
          f"E = {frozen.ground_state_energy():.8f} Ha")


if __name__ == "__main__":
    try:
        import pyscf  # noqa: F401
    except ImportError:
        print("PySCF not available. Install with: pip install pyscf")
        sys.exit(0)

    run_h2_binding_curve()
    run_lih_frozen_core()
