"""
Hamiltonian parameters: one- and two-electron integrals in an orthonormal
orbital basis.

The two-electron integrals are stored in chemist's notation,

    g(p,q,r,s) = (pq|rs)

and obey the 8-fold permutational symmetry of real orbitals. Integrals can be
obtained from PySCF (optional dependency) or generated randomly for tests.
"""

import numpy as np
from typing import List, Optional, Tuple
from dataclasses import dataclass

try:
    from ..utils.errors import InvalidConfigurationError
    from ..utils.linalg import is_unitary, jacobi_rotation_matrix, symmetrize
except ImportError:
    from utils.errors import InvalidConfigurationError
    from utils.linalg import is_unitary, jacobi_rotation_matrix, symmetrize


# Axis permutations generating the 8-fold symmetry of (pq|rs)
_EIGHTFOLD_PERMUTATIONS = [
    (0, 1, 2, 3), (1, 0, 2, 3), (0, 1, 3, 2), (1, 0, 3, 2),
    (2, 3, 0, 1), (3, 2, 0, 1), (2, 3, 1, 0), (3, 2, 1, 0),
]


@dataclass
class HamiltonianParameters:
    """
    Container for the integrals that define a second-quantized Hamiltonian.

        H = scalar + sum_pq h_pq E_pq + 1/2 sum_pqrs g_pqrs (E_pq E_rs - delta_qr E_ps)

    Attributes:
        h: One-electron integrals (K, K)
        g: Two-electron integrals (K, K, K, K), chemist's notation
        scalar: Constant energy offset (e.g. nuclear repulsion)
    """

    h: np.ndarray
    g: np.ndarray
    scalar: float = 0.0

    def __post_init__(self):
        self.h = np.asarray(self.h, dtype=np.float64)
        self.g = np.asarray(self.g, dtype=np.float64)

        if self.h.ndim != 2 or self.h.shape[0] != self.h.shape[1]:
            raise InvalidConfigurationError(
                f"One-electron integrals must be a square matrix, got shape {self.h.shape}"
            )

        K = self.h.shape[0]
        if self.g.shape != (K, K, K, K):
            raise InvalidConfigurationError(
                f"Two-electron integrals must have shape {(K, K, K, K)}, got {self.g.shape}"
            )

        self.scalar = float(self.scalar)

    @property
    def K(self) -> int:
        """Number of spatial orbitals."""
        return self.h.shape[0]

    def copy(self) -> "HamiltonianParameters":
        return HamiltonianParameters(self.h.copy(), self.g.copy(), self.scalar)

    def transform(self, T: np.ndarray):
        """
        Transform the integrals in place to the basis C' = C T.

            h'(p,q)     = T(a,p) h(a,b) T(b,q)
            g'(p,q,r,s) = T(a,p) T(b,q) T(c,r) T(d,s) g(a,b,c,d)

        Args:
            T: (K, K) transformation matrix
        """
        T = np.asarray(T, dtype=np.float64)
        if T.shape != (self.K, self.K):
            raise InvalidConfigurationError(
                f"Transformation matrix must have shape {(self.K, self.K)}, got {T.shape}"
            )

        self.h = T.T @ self.h @ T
        self.g = np.einsum("ap,bq,cr,ds,abcd->pqrs", T, T, T, T, self.g, optimize=True)

    def rotate(self, U: np.ndarray):
        """
        Rotate the integrals in place to another orthonormal basis.

        Args:
            U: (K, K) unitary matrix

        Raises:
            InvalidConfigurationError: if U is not unitary
        """
        U = np.asarray(U, dtype=np.float64)
        if not is_unitary(U):
            raise InvalidConfigurationError("The given transformation matrix is not unitary")

        self.transform(U)

    def rotate_jacobi(self, p: int, q: int, angle: float):
        """Rotate the integrals with the Jacobi rotation over the (p, q) plane."""
        self.rotate(jacobi_rotation_matrix(p, q, angle, self.K))

    def is_symmetric(self, tolerance: float = 1e-12) -> bool:
        """Check the symmetry of h and the 8-fold symmetry of g."""
        if not np.allclose(self.h, self.h.T, atol=tolerance):
            return False
        return all(
            np.allclose(self.g, self.g.transpose(axes), atol=tolerance)
            for axes in _EIGHTFOLD_PERMUTATIONS
        )

    @classmethod
    def random(cls, K: int, seed: Optional[int] = None) -> "HamiltonianParameters":
        """
        Random integrals with the symmetry of real orbitals.

        Args:
            K: Number of spatial orbitals
            seed: Seed for numpy's default_rng

        Returns:
            HamiltonianParameters with symmetric h and 8-fold symmetric g
        """
        rng = np.random.default_rng(seed)

        h = symmetrize(rng.uniform(-1.0, 1.0, size=(K, K)))

        g_raw = rng.uniform(-1.0, 1.0, size=(K, K, K, K))
        g = sum(g_raw.transpose(axes) for axes in _EIGHTFOLD_PERMUTATIONS) / 8.0

        return cls(h=h, g=g, scalar=float(rng.uniform(0.0, 1.0)))

    @classmethod
    def from_pyscf(
        cls,
        geometry: List[Tuple[str, Tuple[float, float, float]]],
        basis: str = "sto-3g",
        charge: int = 0,
        spin: int = 0,
    ) -> "HamiltonianParameters":
        return compute_molecular_integrals(geometry, basis=basis, charge=charge, spin=spin)


def compute_molecular_integrals(
    geometry: List[Tuple[str, Tuple[float, float, float]]],
    basis: str = "sto-3g",
    charge: int = 0,
    spin: int = 0,
) -> HamiltonianParameters:
    """
    Compute molecular integrals in the canonical RHF orbital basis using PySCF.

    Args:
        geometry: List of (atom_symbol, (x, y, z)) tuples, in Angstrom
        basis: Basis set name
        charge: Molecular charge
        spin: 2S (number of unpaired electrons)

    Returns:
        HamiltonianParameters with the nuclear repulsion as scalar
    """
    try:
        from pyscf import gto, scf, ao2mo
    except ImportError:
        raise ImportError("PySCF is required for molecular integrals")

    # Build molecule
    mol = gto.Mole()
    mol.atom = geometry
    mol.basis = basis
    mol.charge = charge
    mol.spin = spin
    mol.verbose = 0
    mol.build()

    # Run HF to get orbitals
    if spin == 0:
        mf = scf.RHF(mol)
    else:
        mf = scf.ROHF(mol)
    mf.kernel()

    # Get integrals in MO basis
    h = mf.mo_coeff.T @ mf.get_hcore() @ mf.mo_coeff

    # Two-electron integrals
    g = ao2mo.kernel(mol, mf.mo_coeff)
    g = ao2mo.restore(1, g, mf.mo_coeff.shape[1])  # Restore to 4-index tensor

    return HamiltonianParameters(h=h, g=g, scalar=mol.energy_nuc())


def create_h2_parameters(bond_length: float = 0.74, basis: str = "sto-3g") -> HamiltonianParameters:
    """Integrals for H2 at the given bond length (Angstrom)."""
    geometry = [
        ("H", (0.0, 0.0, 0.0)),
        ("H", (0.0, 0.0, bond_length)),
    ]
    return compute_molecular_integrals(geometry, basis=basis)


def create_lih_parameters(bond_length: float = 1.6, basis: str = "sto-3g") -> HamiltonianParameters:
    """Integrals for LiH at the given bond length (Angstrom)."""
    geometry = [
        ("Li", (0.0, 0.0, 0.0)),
        ("H", (0.0, 0.0, bond_length)),
    ]
    return compute_molecular_integrals(geometry, basis=basis)
