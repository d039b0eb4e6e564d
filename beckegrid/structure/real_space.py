import numpy as np

from beckegrid import types
from beckegrid.basis import real_space as basis_real_space
from beckegrid.structure import molecular_basis


def evaluate(
    basis: molecular_basis.MolecularBasis, points: types.Array
) -> np.ndarray:
    """Evaluate the basis functions at specified points.

    Args:
        basis: The molecular basis containing basis blocks.
        points: The points at which to evaluate the basis functions,
            shape (..., 3).
    Returns:
        The evaluated basis functions at each point, shape
        (..., basis.n_basis).
    """
    points = types.as_points(points)
    if not basis.basis_blocks:
        return np.zeros(points.shape[:-1] + (0,), dtype=np.float64)

    block_evals = [
        basis_real_space.evaluate(block, points) for block in basis.basis_blocks
    ]
    return np.concatenate(block_evals, axis=-1)
