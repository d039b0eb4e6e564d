import functools
import math

import numpy as np

from beckegrid import types


@functools.cache
def _cartesian_powers(l: int) -> tuple[tuple[int, int, int], ...]:
    return tuple(
        (i, j, l - i - j)
        for i in range(l, -1, -1)
        for j in range(l - i, -1, -1)
    )


def generate_cartesian_powers(l: int) -> np.ndarray:
    """Generates the Cartesian powers for the given angular momentum.

    Returns:
        A numpy array of shape (M, 3) where M is the total number of
        triples (i, j, k) of non-negative integers satisfying:
        i + j + k = l. The triples are in descending lexicographic order.
    """
    if l < 0:
        raise ValueError(f"Angular momentum must be non-negative. Got {l}")

    return np.array(_cartesian_powers(l), dtype=np.int32)


def _double_factorial(n: int) -> int:
    # (-1)!! == 1
    return math.prod(range(n, 0, -2))


def compute_normalization_constants(
    powers: types.StaticArray, exponents: types.Array
) -> np.ndarray:
    """Computes the inverse L^2 norms of primitive Cartesian Gaussians.

    The primitive x^i y^j z^k e^(-a r^2) has norm N^-1 where

    N = (2a / pi)^(3/4) (4a)^(l/2) / sqrt((2i-1)!! (2j-1)!! (2k-1)!!)

    and l = i + j + k.

    Args:
        powers: Cartesian powers (i, j, k), shape (N, 3).
        exponents: The primitive exponents, shape (K,).

    Returns:
        The normalization constants, shape (N, K).
    """
    powers = np.asarray(powers, dtype=np.int64)
    exponents = np.asarray(exponents, dtype=np.float64)

    l = np.sum(powers, axis=-1)  # shape (N,)
    df = np.array(
        [
            math.prod(_double_factorial(2 * int(p) - 1) for p in row)
            for row in powers
        ],
        dtype=np.float64,
    )  # shape (N,)

    # shape (N, K)
    radial = (2.0 * exponents / np.pi) ** 0.75
    angular = (4.0 * exponents[None, :]) ** (l[:, None] / 2.0)
    return radial[None, :] * angular / np.sqrt(df)[:, None]
