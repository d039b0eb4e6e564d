"""Becke's multicenter partition of unity.

A. D. Becke, "A multicenter numerical integration scheme for polyatomic
molecules", J. Chem. Phys. 88, 2547 (1988).

For a point r and atoms I, J the confocal elliptical coordinate is

mu_IJ(r) = (|r - I| - |r - J|) / |I - J|

The cell function of atom I is P_I(r) = prod_{J != I} s(mu_IJ(r)) where
s(mu) = 0.5 (1 - f_k(mu)) and f_k is k iterations of p(x) = 1.5 x - 0.5 x^3.
The weight of atom A at r is P_A(r) / sum_K P_K(r), and the weights of all
atoms sum to 1 at every point.
"""

import functools

import jax
from jax import jit
from jax import numpy as jnp
import numpy as np

from beckegrid import types

DEFAULT_SMOOTHING_ORDER = 3

# Atoms closer than this (in Bohr) are treated as coincident.
MIN_ATOM_SEPARATION = 1e-8


def fk(k: int, mu: types.Array) -> jax.Array:
    """Applies the smoothing polynomial p(x) = 1.5 x - 0.5 x^3 k times to mu.

    p fixes -1, 0 and 1 and is odd, so f_k maps [-1, 1] onto itself.
    """
    if k < 0:
        raise ValueError(f"The smoothing order must be non-negative. Got {k}")

    f = jnp.asarray(mu)
    for _ in range(k):
        f = 1.5 * f - 0.5 * f**3
    return f


def cutoff(mu: types.Array, k: int = DEFAULT_SMOOTHING_ORDER) -> jax.Array:
    """The cell step function s(mu) = 0.5 (1 - f_k(mu)).

    s(-1) = 1, s(0) = 0.5 and s(1) = 0.
    """
    return 0.5 * (1.0 - fk(k, mu))


def check_geometry(centers: types.Array) -> np.ndarray:
    """Validates the atomic positions used for the Becke partition.

    Args:
        centers: The atomic positions, shape (n_atoms, 3).

    Returns:
        The positions as a float64 array.

    Raises:
        ValueError: If two atoms coincide.
    """
    centers = types.as_points(centers)
    if centers.ndim != 2:
        raise ValueError(
            f"Expected centers with shape (n_atoms, 3). Got {centers.shape}"
        )

    separations = np.linalg.norm(
        centers[:, None, :] - centers[None, :, :], axis=-1
    )
    i, j = np.triu_indices(centers.shape[0], k=1)
    coincident = separations[i, j] < MIN_ATOM_SEPARATION
    if np.any(coincident):
        a, b = i[coincident][0], j[coincident][0]
        raise ValueError(
            f"Atoms {a} and {b} are at the same position {centers[a]}. "
            "The Becke partition is undefined for coincident atoms."
        )

    return centers


@functools.partial(jit, static_argnames="k")
def cell_functions(
    points: jax.Array, centers: jax.Array, k: int = DEFAULT_SMOOTHING_ORDER
) -> jax.Array:
    """Computes the unnormalized cell functions P_I(r).

    The centers must be pairwise distinct, see check_geometry.

    Args:
        points: The grid points, shape (n_points, 3).
        centers: The atomic positions, shape (n_atoms, 3).
        k: The smoothing order.

    Returns:
        P with shape (n_points, n_atoms) where P[p, I] = P_I(points[p]).
    """
    n_atoms = centers.shape[0]

    # |r - I|
    # dist: (n_points, n_atoms)
    dist = jnp.sqrt(
        jnp.sum((points[:, None, :] - centers[None, :, :]) ** 2, axis=-1)
    )

    # |I - J|
    # sep: (n_atoms, n_atoms)
    sep = jnp.sqrt(
        jnp.sum((centers[:, None, :] - centers[None, :, :]) ** 2, axis=-1)
    )
    off_diagonal = ~jnp.eye(n_atoms, dtype=bool)
    sep = jnp.where(off_diagonal, sep, 1.0)

    # mu[p, I, J] = (|r_p - I| - |r_p - J|) / |I - J|
    # Rounding can push mu slightly outside [-1, 1], where s is negative.
    mu = (dist[:, :, None] - dist[:, None, :]) / sep
    mu = jnp.clip(mu, -1.0, 1.0)

    s = jnp.where(off_diagonal, cutoff(mu, k), 1.0)
    return jnp.prod(s, axis=-1)


@functools.partial(jit, static_argnames="k")
def _normalized_weights(
    points: jax.Array, centers: jax.Array, k: int
) -> jax.Array:
    P = cell_functions(points, centers, k)
    # The atom nearest to a point has P >= 0.5^(n_atoms - 1), so the sum
    # never vanishes.
    return P / jnp.sum(P, axis=-1, keepdims=True)


def becke_weights(
    points: types.Array,
    centers: types.Array,
    k: int = DEFAULT_SMOOTHING_ORDER,
) -> np.ndarray:
    """Computes the normalized Becke weights of every atom at every point.

    Args:
        points: The grid points, shape (n_points, 3).
        centers: The atomic positions, shape (n_atoms, 3).
        k: The smoothing order.

    Returns:
        w with shape (n_points, n_atoms), w[p, A] in [0, 1] and
        sum_A w[p, A] = 1.

    Raises:
        ValueError: If two atoms coincide or k is negative.
    """
    if k < 0:
        raise ValueError(f"The smoothing order must be non-negative. Got {k}")
    centers = check_geometry(centers)
    points = types.as_points(points).reshape(-1, 3)

    return np.asarray(
        _normalized_weights(jnp.asarray(points), jnp.asarray(centers), k)
    )
