import numpy as np

from beckegrid import types


def check_density_matrix(P: types.Array, n_basis: int) -> np.ndarray:
    """Validates a density matrix against the size of the basis.

    Raises:
        ValueError: If P is not square or its dimension is not n_basis.
    """
    P = np.asarray(P, dtype=np.float64)
    if P.ndim != 2 or P.shape[0] != P.shape[1]:
        raise ValueError(f"The density matrix must be square. Got {P.shape}")
    if P.shape[0] != n_basis:
        raise ValueError(
            f"The density matrix has dimension {P.shape[0]} but the basis "
            f"has {n_basis} functions."
        )
    return P


def evaluate(amplitudes: types.Array, P: types.Array) -> np.ndarray:
    """Evaluate the electron density from basis function amplitudes.

    rho(r) = sum_ij P_ij phi_i(r) phi_j(r)

    Args:
        amplitudes: The basis function values phi, shape (..., n_basis).
        P: The density matrix, shape (n_basis, n_basis).

    Returns:
        The density at each point, shape (...).
    """
    phi = np.asarray(amplitudes, dtype=np.float64)
    if phi.ndim == 0 or phi.shape[-1] == 0:
        raise ValueError("The basis function amplitudes are empty.")
    P = check_density_matrix(P, phi.shape[-1])

    # phi_P: (..., n_basis)
    phi_P = np.matmul(phi, P)

    # rho: (...)
    return np.sum(phi_P * phi, axis=-1)
