import numpy as np

from beckegrid import types
from beckegrid.basis import basis_block


def evaluate(block: basis_block.BasisBlock, points: types.Array) -> np.ndarray:
    """Evaluates every function of a basis block at the given points.

    Args:
        block: The basis block.
        points: Cartesian points in Bohr, shape (..., 3).

    Returns:
        The function values, shape (..., block.n_basis).
    """
    points = types.as_points(points)
    contraction = np.asarray(block.contraction_matrix, dtype=np.float64)

    # offsets: (..., 3)
    offsets = points - np.asarray(block.center, dtype=np.float64)

    # primitives: (..., K)
    r_sq = np.einsum("...i,...i->...", offsets, offsets)
    primitives = np.exp(
        -np.multiply.outer(r_sq, np.asarray(block.exponents, dtype=np.float64))
    )

    # (x - A_x)^i (y - A_y)^j (z - A_z)^k
    # monomials: (..., n_basis)
    monomials = np.prod(
        offsets[..., None, :] ** block.cartesian_powers, axis=-1
    )

    return monomials * (primitives @ contraction.T)
