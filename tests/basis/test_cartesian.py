import dataclasses
import pytest

import numpy as np

from beckegrid.basis import cartesian


@dataclasses.dataclass
class _GenerateCartesianPowersTestCase:
    l: int
    expected: np.ndarray


@dataclasses.dataclass
class _ComputeNormalizationConstantsTestCase:
    cartesian_powers: np.ndarray
    exponents: np.ndarray
    expected: np.ndarray


@pytest.mark.parametrize(
    "case",
    [
        _GenerateCartesianPowersTestCase(
            l=0,
            expected=np.array([[0, 0, 0]]),
        ),
        _GenerateCartesianPowersTestCase(
            l=1,
            expected=np.array(
                [
                    [1, 0, 0],
                    [0, 1, 0],
                    [0, 0, 1],
                ]
            ),
        ),
        _GenerateCartesianPowersTestCase(
            l=2,
            expected=np.array(
                [
                    [2, 0, 0],
                    [1, 1, 0],
                    [1, 0, 1],
                    [0, 2, 0],
                    [0, 1, 1],
                    [0, 0, 2],
                ]
            ),
        ),
    ],
)
def test_generate_cartesian_powers(case):
    powers = cartesian.generate_cartesian_powers(case.l)

    np.testing.assert_array_equal(powers, case.expected)


def test_generate_cartesian_powers_invalid_l():
    with pytest.raises(ValueError):
        cartesian.generate_cartesian_powers(-1)


# The expected values are 1 / sqrt(S) with
# S = int (x^i y^j z^k e^(-a r^2))^2 dV
#   = (pi / 2a)^(3/2) (2i-1)!! (2j-1)!! (2k-1)!! / (4a)^(i+j+k)
@pytest.mark.parametrize(
    "case",
    [
        _ComputeNormalizationConstantsTestCase(
            cartesian_powers=np.array([[0, 0, 0]]),
            exponents=np.array([0.1, 0.2, 0.3]),
            expected=np.array([[0.12673895, 0.21314865, 0.28890234]]),
        ),
        _ComputeNormalizationConstantsTestCase(
            cartesian_powers=np.array([[1, 0, 0], [0, 0, 1]]),
            exponents=np.array([0.1]),
            expected=np.array([[0.08015675], [0.08015675]]),
        ),
        _ComputeNormalizationConstantsTestCase(
            cartesian_powers=np.array([[2, 0, 0], [1, 1, 0]]),
            exponents=np.array([1.0]),
            expected=np.array([[1.6459228], [2.8508219]]),
        ),
    ],
)
def test_compute_normalization_constants(case):
    result = cartesian.compute_normalization_constants(
        case.cartesian_powers, case.exponents
    )

    np.testing.assert_allclose(result, case.expected, rtol=1e-6)
