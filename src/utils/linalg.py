"""
Small dense linear-algebra helpers shared by the integral container and the
eigensolvers.
"""

import numpy as np
from typing import Optional


def is_unitary(U: np.ndarray, tolerance: float = 1e-12) -> bool:
    """
    Check whether a real square matrix satisfies U^T U = I.

    Args:
        U: Square matrix
        tolerance: Maximum allowed absolute deviation from the identity

    Returns:
        True if U is unitary within the tolerance
    """
    U = np.asarray(U)
    if U.ndim != 2 or U.shape[0] != U.shape[1]:
        return False
    deviation = U.conj().T @ U - np.eye(U.shape[0])
    return bool(np.max(np.abs(deviation), initial=0.0) <= tolerance)


def jacobi_rotation_matrix(p: int, q: int, angle: float, dim: int) -> np.ndarray:
    """
    Build the Jacobi rotation matrix for the (p, q) plane.

    Uses the (cos, sin, -sin, cos) convention:
        U[p,p] = U[q,q] = cos(angle)
        U[p,q] = sin(angle), U[q,p] = -sin(angle)

    Args:
        p, q: Orbital indices spanning the rotation plane (p != q)
        angle: Rotation angle in radians
        dim: Dimension of the returned matrix

    Returns:
        (dim, dim) orthogonal matrix
    """
    if p == q or not (0 <= p < dim and 0 <= q < dim):
        raise ValueError(
            f"Jacobi rotation needs two distinct indices in [0, {dim}), got ({p}, {q})"
        )

    c = np.cos(angle)
    s = np.sin(angle)

    U = np.eye(dim)
    U[p, p] = c
    U[q, q] = c
    U[p, q] = s
    U[q, p] = -s
    return U


def symmetrize(A: np.ndarray) -> np.ndarray:
    """Return 0.5 * (A + A^T), removing round-off asymmetry."""
    return 0.5 * (A + A.T)


def random_symmetric_matrix(
    dim: int,
    seed: Optional[int] = None,
    diagonal_spread: float = 10.0,
) -> np.ndarray:
    """
    Random symmetric test matrix with a dominant, well-separated diagonal.

    The diagonal is linearly spaced over [0, diagonal_spread) and the
    off-diagonal part is small, which gives a clear spectral gap between the
    lowest eigenvalues.

    Args:
        dim: Matrix dimension
        seed: Seed for numpy's default_rng
        diagonal_spread: Range of the diagonal entries

    Returns:
        (dim, dim) symmetric matrix
    """
    rng = np.random.default_rng(seed)
    A = 0.01 * rng.standard_normal((dim, dim))
    A = symmetrize(A)
    A += np.diag(np.linspace(0.0, diagonal_spread, dim, endpoint=False))
    return A
