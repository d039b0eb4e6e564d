from collections.abc import Sequence
import dataclasses

from jax.tree_util import register_pytree_node_class
import numpy as np

from beckegrid.adapters.bse import load as load_basis
from beckegrid.structure import atom as atom_lib


@register_pytree_node_class
@dataclasses.dataclass
class Molecule:
    atoms: Sequence[atom_lib.Atom]

    @property
    def n_atoms(self) -> int:
        return len(self.atoms)

    @property
    def n_electrons(self) -> int:
        """The total number of electrons in the neutral molecule."""
        return sum(atom.number for atom in self.atoms)

    @property
    def positions(self) -> np.ndarray:
        """The atomic positions in Bohr, shape (n_atoms, 3)."""
        if not self.atoms:
            return np.zeros((0, 3), dtype=np.float64)
        return np.stack(
            [np.asarray(atom.position, dtype=np.float64) for atom in self.atoms]
        )

    def tree_flatten(self):
        return (tuple(self.atoms),), None

    @classmethod
    def tree_unflatten(
        cls, aux_data: None, children: tuple[Sequence[atom_lib.Atom],]
    ) -> "Molecule":
        (atoms,) = children
        return cls(atoms)

    @classmethod
    def from_geometry(
        cls, atoms: Sequence[atom_lib.Atom], basis_name: str
    ) -> "Molecule":
        """Builds a Molecule from atomic positions and a basis set name.

        The shells of the input atoms are ignored and replaced by the shells
        of the named basis set.
        """
        return cls(
            atoms=[
                dataclasses.replace(
                    a,
                    shells=load_basis(basis_name=basis_name, element=a.number),
                )
                for a in atoms
            ]
        )
