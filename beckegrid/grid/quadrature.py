"""Atom-centred radial and angular quadratures.

The radial part is a Gauss-Chebyshev rule of the second kind mapped to
[0, inf) with Becke's transform r = rm (1 + x) / (1 - x). The angular part
is a Lebedev rule on the unit sphere.
"""

import dataclasses
import enum
import functools
import logging

import numpy as np
from scipy import integrate

from beckegrid import types
from beckegrid.structure import units

logger = logging.getLogger(__name__)


class Fineness(enum.Enum):
    """Quality level of the per-atom quadrature."""

    COARSE = 0
    MEDIUM = 1
    FINE = 2
    ULTRAFINE = 3

    @classmethod
    def parse(cls, value: "Fineness | str") -> "Fineness":
        """Returns the Fineness for a member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        raise ValueError(
            f"Unsupported grid fineness {value!r}. Expected one of "
            f"{', '.join(cls.__members__)}."
        )

    @property
    def n_radial(self) -> int:
        return _QUADRATURE_SIZES[self][0]

    @property
    def lebedev_order(self) -> int:
        return _QUADRATURE_SIZES[self][1]


# (number of radial points, Lebedev order). The Lebedev orders correspond to
# 50, 110, 302 and 590 directions.
_QUADRATURE_SIZES = {
    Fineness.COARSE: (20, 11),
    Fineness.MEDIUM: (35, 17),
    Fineness.FINE: (50, 29),
    Fineness.ULTRAFINE: (75, 41),
}

# Bragg-Slater radii in Angstrom (J. C. Slater, J. Chem. Phys. 41, 3199).
# Hydrogen uses 0.35 following Becke.
_BRAGG_SLATER_RADII = {
    1: 0.35,
    3: 1.45,
    4: 1.05,
    5: 0.85,
    6: 0.70,
    7: 0.65,
    8: 0.60,
    9: 0.50,
    11: 1.80,
    12: 1.50,
    13: 1.25,
    14: 1.10,
    15: 1.00,
    16: 1.00,
    17: 1.00,
    19: 2.20,
    20: 1.80,
    21: 1.60,
    22: 1.40,
    23: 1.35,
    24: 1.40,
    25: 1.40,
    26: 1.40,
    27: 1.35,
    28: 1.35,
    29: 1.35,
    30: 1.35,
    31: 1.30,
    32: 1.25,
    33: 1.15,
    34: 1.15,
    35: 1.15,
}
_DEFAULT_RADIUS = 1.0  # Angstrom


def becke_radius(number: int) -> float:
    """Returns the radial scale rm in Bohr for the given atomic number.

    rm is half the Bragg-Slater radius, except for hydrogen which uses the
    full radius.
    """
    radius = _BRAGG_SLATER_RADII.get(number)
    if radius is None:
        logger.warning(
            "No Bragg-Slater radius for Z=%d, using %.2f Angstrom",
            number,
            _DEFAULT_RADIUS,
        )
        radius = _DEFAULT_RADIUS
    if number != 1:
        radius *= 0.5
    return radius * units.ANGSTROM_TO_BOHR


@dataclasses.dataclass(frozen=True)
class RadialQuadrature:
    # Radial distances, all strictly positive. shape (n,)
    points: np.ndarray

    # Gauss-Chebyshev weights. shape (n,)
    weights: np.ndarray

    # r^2 dr/dx / sqrt(1 - x^2) at each node. shape (n,)
    jacobian: np.ndarray

    def integrate(self, values: types.Array) -> float:
        """Integrates f(r) r^2 dr over [0, inf) for f sampled at the points."""
        return float(np.sum(self.weights * self.jacobian * np.asarray(values)))


@dataclasses.dataclass(frozen=True)
class AngularQuadrature:
    # Unit vectors. shape (n, 3)
    directions: np.ndarray

    # Weights summing to 4 pi. shape (n,)
    weights: np.ndarray


def radial_quadrature(n: int, rm: float) -> RadialQuadrature:
    """Builds an n-point Gauss-Chebyshev radial quadrature with scale rm.

    With x_i = cos(i pi / (n + 1)) and w_i = pi / (n + 1) sin^2(i pi / (n + 1)),

    int_0^inf f(r) r^2 dr ~= sum_i w_i jacobian_i f(r_i).
    """
    if n < 1:
        raise ValueError(f"The number of radial points must be >= 1. Got {n}")
    if rm <= 0:
        raise ValueError(f"The radial scale must be positive. Got {rm}")

    theta = np.arange(1, n + 1, dtype=np.float64) * np.pi / (n + 1)
    x = np.cos(theta)
    sin_theta = np.sin(theta)
    weights = np.pi / (n + 1) * sin_theta**2

    r = rm * (1.0 + x) / (1.0 - x)
    dr_dx = 2.0 * rm / (1.0 - x) ** 2
    jacobian = r**2 * dr_dx / sin_theta

    return RadialQuadrature(points=r, weights=weights, jacobian=jacobian)


@functools.cache
def angular_quadrature(order: int) -> AngularQuadrature:
    """Builds the Lebedev rule that is exact up to the given polynomial order."""
    try:
        directions, weights = integrate.lebedev_rule(order)
    except (NotImplementedError, ValueError) as e:
        raise ValueError(f"Unsupported Lebedev order {order}.") from e

    weights = np.asarray(weights, dtype=np.float64)
    return AngularQuadrature(
        directions=np.ascontiguousarray(directions.T, dtype=np.float64),
        weights=weights * (4.0 * np.pi / np.sum(weights)),
    )


def atomic_grid(
    center: types.Array, n_radial: int, order: int, rm: float
) -> tuple[np.ndarray, np.ndarray]:
    """Builds the atom-centred grid before any multicenter weighting.

    Points are ordered radial-major, angular-minor.

    Args:
        center: The atomic position, shape (3,).
        n_radial: The number of radial points.
        order: The Lebedev order of the angular rule.
        rm: The radial scale in Bohr.

    Returns:
        A tuple (points, weights) of shapes (n_radial * n_angular, 3) and
        (n_radial * n_angular,). The weights include the Jacobian of the
        radial transform and the r^2 volume element.
    """
    center = types.as_points(center)
    radial = radial_quadrature(n_radial, rm)
    angular = angular_quadrature(order)

    # points: (n_radial, n_angular, 3)
    points = (
        center
        + radial.points[:, None, None] * angular.directions[None, :, :]
    )

    # weights: (n_radial, n_angular)
    weights = (radial.weights * radial.jacobian)[:, None] * angular.weights

    return points.reshape(-1, 3), weights.reshape(-1)
