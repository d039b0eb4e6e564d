"""The molecular integration grid.

For each atom an atomic grid is built from a radial and an angular
quadrature. The atomic grids overlap, so the weight of every point is
multiplied by the Becke weight of the atom it was generated around:

A multicenter numerical integration scheme for polyatomic molecules
A. D. Becke
The Journal of Chemical Physics 88, 2547 (1988); doi: 10.1063/1.454033
"""

from collections.abc import Iterator
from concurrent import futures
import dataclasses
import logging
from typing import Callable, Optional

import numpy as np

from beckegrid import types
from beckegrid.grid import becke
from beckegrid.grid import density as density_lib
from beckegrid.grid import grid_point
from beckegrid.grid import quadrature
from beckegrid.structure import molecular_basis
from beckegrid.structure import molecule as molecule_lib
from beckegrid.structure import real_space

logger = logging.getLogger(__name__)

# Maps an atomic number to the radial scale rm in Bohr.
RadialScale = Callable[[int], float]


@dataclasses.dataclass
class GridOptions:
    fineness: quadrature.Fineness | str = quadrature.Fineness.MEDIUM
    smoothing_order: int = becke.DEFAULT_SMOOTHING_ORDER
    radial_scale: RadialScale = quadrature.becke_radius

    # Number of threads used to build the atomic grids.
    n_workers: int = 1

    def __post_init__(self):
        self.fineness = quadrature.Fineness.parse(self.fineness)

        if self.smoothing_order < 0:
            raise ValueError("smoothing_order must be >= 0")
        if self.n_workers < 1:
            raise ValueError("n_workers must be >= 1")


@dataclasses.dataclass
class _AtomicGrid:
    points: np.ndarray  # shape (n, 3)
    weights: np.ndarray  # shape (n,)


class MolecularGrid:
    """Set of weighted points for numerical integration over a molecule.

    The grid is built once at construction. Points are ordered by atom, then
    radial shell, then angular direction.

    The molecule is borrowed. The grid is invalid if the molecule changes
    after construction.
    """

    def __init__(
        self,
        molecule: molecule_lib.Molecule,
        options: Optional[GridOptions] = None,
    ):
        if not isinstance(molecule, molecule_lib.Molecule):
            raise TypeError(f"Expected a Molecule, got {type(molecule)}")
        if molecule.n_atoms == 0:
            raise ValueError("Cannot build a grid for a molecule without atoms.")

        self.molecule = molecule
        self.options = options if options is not None else GridOptions()
        self.basis = molecular_basis.build(molecule)

        self._centers = becke.check_geometry(molecule.positions)
        self._create_grid()
        self._amplitudes = real_space.evaluate(self.basis, self._positions)
        self._densities: Optional[np.ndarray] = None
        self._density_matrix: Optional[np.ndarray] = None
        self._density_scale = 1.0

    @property
    def fineness(self) -> quadrature.Fineness:
        return self.options.fineness

    @property
    def n_points(self) -> int:
        return self._positions.shape[0]

    @property
    def n_basis(self) -> int:
        return self._amplitudes.shape[-1]

    def __len__(self) -> int:
        return self.n_points

    def __getitem__(self, index: int) -> grid_point.GridPoint:
        """Returns a snapshot of the point at the given index."""
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise TypeError(
                f"Grid indices must be integers. Got {type(index).__name__}"
            )
        index = int(index)
        if index < 0:
            index += self.n_points
        if not 0 <= index < self.n_points:
            raise IndexError(f"Grid point index {index} out of range.")

        point = grid_point.GridPoint(self._positions[index])
        point.set_weight(self._weights[index])
        point.set_atom(self.molecule.atoms, int(self._atom_indices[index]))
        point.set_basis_amplitudes(self._amplitudes[index])
        if self._density_matrix is not None:
            point.set_density(self._density_matrix)
            point.scale_density(self._density_scale)
        return point

    def __iter__(self) -> Iterator[grid_point.GridPoint]:
        for index in range(self.n_points):
            yield self[index]

    @property
    def points(self) -> list[grid_point.GridPoint]:
        return list(self)

    def set_density(self, P: types.Array) -> None:
        """Computes the density at every grid point from a density matrix.

        Args:
            P: The density matrix, shape (n_basis, n_basis).
        """
        P = density_lib.check_density_matrix(P, self.n_basis)
        self._densities = density_lib.evaluate(self._amplitudes, P)
        self._density_matrix = P
        self._density_scale = 1.0

    def calculate_density(self) -> float:
        """Calculates the number of electrons as sum(weight * density)."""
        return self.integrate(self._require_densities())

    def scale_density(self, target_electron_count: float) -> None:
        """Rescales the densities so that calculate_density() returns the
        target electron count.
        """
        total = self.calculate_density()
        if total == 0.0:
            raise ValueError("Cannot rescale a density that integrates to 0.")

        factor = target_electron_count / total
        logger.debug(
            "Rescaling density by %.12f (integrated %.10f, target %.10f)",
            factor,
            total,
            target_electron_count,
        )
        self._densities = self._densities * factor
        self._density_scale *= factor

    def integrate(self, values: types.Array) -> float:
        """Integrates a function sampled at the grid points."""
        values = np.asarray(values)
        if values.shape != (self.n_points,):
            raise ValueError(
                f"Expected values with shape ({self.n_points},). "
                f"Got {values.shape}"
            )
        return float(np.dot(self._weights, values))

    def get_weights(self) -> np.ndarray:
        """The grid weights in point order, shape (n_points,)."""
        return self._weights.copy()

    def get_densities(self) -> np.ndarray:
        """The densities in point order, shape (n_points,)."""
        return self._require_densities().copy()

    def get_amplitudes(self) -> np.ndarray:
        """The basis function amplitudes, shape (n_basis, n_points)."""
        return self._amplitudes.T.copy()

    def get_positions(self) -> np.ndarray:
        """The grid point positions, shape (n_points, 3)."""
        return self._positions.copy()

    def get_atom_indices(self) -> np.ndarray:
        """The index of the atom each point was generated around."""
        return self._atom_indices.copy()

    def _require_densities(self) -> np.ndarray:
        if self._densities is None:
            raise ValueError("The density has not been set on this grid.")
        return self._densities

    def _create_grid(self) -> None:
        n_atoms = self.molecule.n_atoms
        if self.options.n_workers > 1 and n_atoms > 1:
            with futures.ThreadPoolExecutor(
                max_workers=self.options.n_workers
            ) as executor:
                atomic_grids = list(
                    executor.map(self._create_atomic_grid, range(n_atoms))
                )
        else:
            atomic_grids = [self._create_atomic_grid(i) for i in range(n_atoms)]

        self._positions = np.concatenate([g.points for g in atomic_grids])
        self._weights = np.concatenate([g.weights for g in atomic_grids])
        self._atom_indices = np.concatenate(
            [
                np.full(g.weights.shape[0], i, dtype=np.int64)
                for i, g in enumerate(atomic_grids)
            ]
        )

        logger.info(
            "Built molecular grid with %d points for %d atoms (fineness=%s)",
            self.n_points,
            n_atoms,
            self.fineness.name,
        )

    def _create_atomic_grid(self, index: int) -> _AtomicGrid:
        atom = self.molecule.atoms[index]
        fineness = self.fineness

        points, weights = quadrature.atomic_grid(
            center=self._centers[index],
            n_radial=fineness.n_radial,
            order=fineness.lebedev_order,
            rm=self.options.radial_scale(atom.number),
        )

        # w_A(r) = P_A(r) / sum_K P_K(r)
        cell_weights = becke.becke_weights(
            points, self._centers, k=self.options.smoothing_order
        )
        weights = weights * cell_weights[:, index]

        logger.debug(
            "Atom %d (%s): %d points, Becke weight sum %.6f",
            index,
            atom.symbol,
            points.shape[0],
            float(np.sum(cell_weights[:, index])),
        )
        return _AtomicGrid(points=points, weights=weights)


def build(
    molecule: molecule_lib.Molecule,
    fineness: quadrature.Fineness | str = quadrature.Fineness.MEDIUM,
    **kwargs,
) -> MolecularGrid:
    """Builds a MolecularGrid with the given fineness.

    Remaining keyword arguments are forwarded to GridOptions.
    """
    return MolecularGrid(molecule, GridOptions(fineness=fineness, **kwargs))
