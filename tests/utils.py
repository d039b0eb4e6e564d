import numpy as np

import beckegrid as bg


def s_overlap_matrix(basis: bg.MolecularBasis) -> np.ndarray:
    """Analytic overlap matrix of a basis made of s-type blocks only."""
    blocks = basis.basis_blocks
    for block in blocks:
        assert np.all(block.cartesian_powers == 0), "Only s functions."

    n = len(blocks)
    S = np.zeros((n, n))
    for i, bi in enumerate(blocks):
        for j, bj in enumerate(blocks):
            a = np.asarray(bi.exponents)[:, None]
            b = np.asarray(bj.exponents)[None, :]
            r_sq = np.sum((np.asarray(bi.center) - np.asarray(bj.center)) ** 2)
            # shape (K_i, K_j)
            primitive = (np.pi / (a + b)) ** 1.5 * np.exp(
                -a * b / (a + b) * r_sq
            )
            ci = np.asarray(bi.contraction_matrix)[0]
            cj = np.asarray(bj.contraction_matrix)[0]
            S[i, j] = ci @ primitive @ cj
    return S


def gaussian(points: np.ndarray, center, exponent: float = 1.0) -> np.ndarray:
    r_sq = np.sum((points - np.asarray(center)) ** 2, axis=-1)
    return np.exp(-exponent * r_sq)


def gaussian_integral(exponent: float = 1.0) -> float:
    return (np.pi / exponent) ** 1.5


def assert_no_nan(array: np.ndarray):
    assert not np.any(np.isnan(array)), "Array contains NaN values."
