from collections.abc import Sequence
from typing import Optional

import numpy as np

from beckegrid import types
from beckegrid.grid import density as density_lib
from beckegrid.structure import atom as atom_lib
from beckegrid.structure import molecular_basis
from beckegrid.structure import real_space


class GridPoint:
    """A single point of a molecular integration grid.

    The weight combines the radial and angular quadrature weights, the
    Jacobian of the spherical coordinates and the Becke cell weight, so
    that the integral of f is approximated by the sum of weight * f(position)
    over all points.

    The owning atom is the atom whose radial and angular grid generated this
    point. It is stored as an index into an atom table and does not imply
    that the point belongs to that atom's cell only.
    """

    def __init__(self, position: types.Array):
        position = types.as_points(position)
        if position.shape != (3,):
            raise ValueError(
                f"Expected a position with shape (3,). Got {position.shape}"
            )
        self._position = position.copy()
        self._position.flags.writeable = False

        self._weight: Optional[float] = None
        self._atoms: Optional[Sequence[atom_lib.Atom]] = None
        self._atom_index: Optional[int] = None
        self._basis_amplitudes: Optional[np.ndarray] = None
        self._density: Optional[float] = None

    def __repr__(self) -> str:
        return (
            f"GridPoint(position={self._position.tolist()}, "
            f"weight={self._weight}, atom_index={self._atom_index})"
        )

    @property
    def position(self) -> np.ndarray:
        return self._position

    @property
    def weight(self) -> Optional[float]:
        return self._weight

    @property
    def density(self) -> Optional[float]:
        return self._density

    @property
    def basis_amplitudes(self) -> Optional[np.ndarray]:
        return self._basis_amplitudes

    @property
    def atom_index(self) -> Optional[int]:
        return self._atom_index

    @property
    def atom_position(self) -> np.ndarray:
        """The position of the atom this point was generated around."""
        if self._atoms is None:
            raise ValueError("No atom has been set for this grid point.")
        return np.asarray(self._atoms[self._atom_index].position)

    def set_weight(self, w: float) -> None:
        if not w >= 0:
            raise ValueError(f"Grid weights must be non-negative. Got {w}")
        self._weight = float(w)

    def multiply_weight(self, w: float) -> None:
        if self._weight is None:
            raise ValueError("The weight must be set before it is rescaled.")
        if not w >= 0:
            raise ValueError(f"Weight factors must be non-negative. Got {w}")
        self._weight *= float(w)

    def set_atom(self, atoms: Sequence[atom_lib.Atom], index: int) -> None:
        if not 0 <= index < len(atoms):
            raise IndexError(
                f"Atom index {index} out of range for {len(atoms)} atoms."
            )
        self._atoms = atoms
        self._atom_index = index

    def set_basis_func_amp(
        self, basis: molecular_basis.MolecularBasis
    ) -> None:
        """Evaluates every basis function of the basis at this point."""
        self._basis_amplitudes = real_space.evaluate(basis, self._position)

    def set_basis_amplitudes(self, amplitudes: types.Array) -> None:
        """Stores precomputed basis function values at this point."""
        self._basis_amplitudes = np.asarray(amplitudes, dtype=np.float64)

    def set_density(self, D: types.Array) -> None:
        """Computes rho = phi^T D phi from the basis function amplitudes.

        Raises:
            ValueError: If the amplitudes are not set, or D is not a square
                matrix matching the number of basis functions.
        """
        if self._basis_amplitudes is None:
            raise ValueError(
                "The basis function amplitudes must be set before the density."
            )
        self._density = float(density_lib.evaluate(self._basis_amplitudes, D))

    def scale_density(self, factor: float) -> None:
        if self._density is None:
            raise ValueError("The density must be set before it is scaled.")
        self._density *= float(factor)
