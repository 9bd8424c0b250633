"""Base class for Hamiltonian builders over a Fock space."""

from abc import ABC, abstractmethod
from typing import Iterator, Tuple
import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.linalg import LinearOperator

try:
    from .parameters import HamiltonianParameters
    from ..fockspace.base import BaseFockSpace
    from ..utils.errors import InvalidConfigurationError
except ImportError:
    from hamiltonians.parameters import HamiltonianParameters
    from fockspace.base import BaseFockSpace
    from utils.errors import InvalidConfigurationError


class HamiltonianBuilder(ABC):
    """
    Abstract builder of the CI Hamiltonian matrix over a Fock space.

    Concrete builders provide the diagonal and the off-diagonal couplings
    (I, J, value) with I < J. The dense matrix, the sparse matrix and the
    matrix-vector product are all assembled from the same couplings, so the
    three representations agree element by element.

    Attributes:
        fock_space: The addressing scheme the matrix is expressed in
    """

    def __init__(self, fock_space: BaseFockSpace):
        self.fock_space = fock_space

    def get_fock_space(self) -> BaseFockSpace:
        return self.fock_space

    @property
    def dimension(self) -> int:
        return self.fock_space.dimension

    def check_parameters(self, parameters: HamiltonianParameters):
        """Raise if the integrals do not match the number of orbitals of the Fock space."""
        if parameters.K != self.fock_space.K:
            raise InvalidConfigurationError(
                f"Basis functions of the Fock space ({self.fock_space.K}) and "
                f"the Hamiltonian parameters ({parameters.K}) are incompatible"
            )

    @abstractmethod
    def calculate_diagonal(self, parameters: HamiltonianParameters) -> np.ndarray:
        """
        Diagonal of the Hamiltonian matrix.

        Args:
            parameters: One- and two-electron integrals

        Returns:
            Array of shape (dimension,)
        """
        pass

    @abstractmethod
    def iter_off_diagonal(
        self,
        parameters: HamiltonianParameters,
        progress: bool = False,
    ) -> Iterator[Tuple[int, int, float]]:
        """
        Off-diagonal couplings of the upper triangle.

        Args:
            parameters: One- and two-electron integrals
            progress: Show a progress bar over the configurations

        Yields:
            (I, J, value) with I < J; the matrix element (J, I) has the same value
        """
        pass

    def construct_hamiltonian(
        self,
        parameters: HamiltonianParameters,
        progress: bool = False,
    ) -> np.ndarray:
        """
        Dense Hamiltonian matrix.

        Warning: quadratic memory in the Fock space dimension.

        Returns:
            Symmetric array of shape (dimension, dimension)
        """
        self.check_parameters(parameters)

        H = np.diag(self.calculate_diagonal(parameters))
        for I, J, value in self.iter_off_diagonal(parameters, progress=progress):
            H[I, J] += value
            H[J, I] += value

        return H

    def to_sparse(
        self,
        parameters: HamiltonianParameters,
        progress: bool = False,
    ) -> csr_matrix:
        """
        Sparse Hamiltonian matrix in CSR format.

        Duplicate (I, J) entries are summed, as in the dense builder.
        """
        self.check_parameters(parameters)
        n = self.dimension

        diagonal = self.calculate_diagonal(parameters)
        rows = list(range(n))
        cols = list(range(n))
        data = list(diagonal)

        for I, J, value in self.iter_off_diagonal(parameters, progress=progress):
            rows.extend((I, J))
            cols.extend((J, I))
            data.extend((value, value))

        return csr_matrix((data, (rows, cols)), shape=(n, n))

    def matrix_vector_product(
        self,
        parameters: HamiltonianParameters,
        x: np.ndarray,
        diagonal: np.ndarray,
    ) -> np.ndarray:
        """
        Compute H @ x without storing H.

        Args:
            parameters: One- and two-electron integrals
            x: Vector of shape (dimension,)
            diagonal: Precomputed diagonal, see calculate_diagonal()

        Returns:
            H @ x, shape (dimension,)
        """
        self.check_parameters(parameters)
        x = np.asarray(x, dtype=np.float64)
        if x.shape != (self.dimension,) or diagonal.shape != (self.dimension,):
            raise InvalidConfigurationError(
                f"Expected vectors of length {self.dimension}, got {x.shape} and {diagonal.shape}"
            )

        matvec = diagonal * x
        for I, J, value in self.iter_off_diagonal(parameters):
            matvec[I] += value * x[J]
            matvec[J] += value * x[I]

        return matvec

    def as_linear_operator(self, parameters: HamiltonianParameters) -> LinearOperator:
        """Wrap the matrix-vector product for scipy's iterative solvers."""
        self.check_parameters(parameters)
        diagonal = self.calculate_diagonal(parameters)
        n = self.dimension

        def matvec(x):
            return self.matrix_vector_product(parameters, np.ravel(x), diagonal)

        return LinearOperator((n, n), matvec=matvec, dtype=np.float64)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.fock_space!r})"
