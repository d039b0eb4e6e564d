import dataclasses
from typing import Callable, Optional
from collections.abc import Sequence

from jax.tree_util import register_pytree_node_class
import numpy as np

from beckegrid.basis import basis_block
from beckegrid.basis import contracted_gto
from beckegrid.structure import atom
from beckegrid.structure import molecule

# Maps an atomic number to the contractions of that element.
BasisFetcher = Callable[[int], Sequence[contracted_gto.ContractedGTO]]


@register_pytree_node_class
@dataclasses.dataclass
class MolecularBasis:
    """All basis blocks of a molecule, in atom order.

    Basis function columns follow the order of basis_blocks, so the grid
    amplitudes and the density matrix share one indexing.
    """

    atoms: Sequence[atom.Atom]
    basis_blocks: Sequence[basis_block.BasisBlock]

    # The index into atoms of the atom each block is centered on.
    block_atoms: tuple[int, ...] = ()

    @property
    def molecule(self) -> molecule.Molecule:
        return molecule.Molecule(atoms=self.atoms)

    @property
    def n_basis(self) -> int:
        return sum(block.n_basis for block in self.basis_blocks)

    @property
    def n_electrons(self) -> int:
        """The electron count of the neutral molecule."""
        return sum(a.number for a in self.atoms)

    @property
    def function_atoms(self) -> np.ndarray:
        """The atom index of every basis function, shape (n_basis,)."""
        counts = [block.n_basis for block in self.basis_blocks]
        return np.repeat(
            np.asarray(self.block_atoms, dtype=np.int64),
            np.asarray(counts, dtype=np.int64),
        )

    def tree_flatten(self):
        return (tuple(self.atoms), tuple(self.basis_blocks)), tuple(
            self.block_atoms
        )

    @classmethod
    def tree_unflatten(
        cls,
        aux_data: tuple[int, ...],
        children: tuple[
            Sequence[atom.Atom],
            Sequence[basis_block.BasisBlock],
        ],
    ) -> "MolecularBasis":
        atoms, basis_blocks = children
        return cls(atoms, basis_blocks, aux_data)


def build(
    molecule: molecule.Molecule,
    basis_fetcher: Optional[BasisFetcher] = None,
) -> MolecularBasis:
    """Places the contractions of every atom at the atom's position.

    Args:
        molecule: The molecule.
        basis_fetcher: Returns the contractions for an atomic number. If None,
            the shells stored on each atom are used.
    """
    blocks = []
    block_atoms = []
    for index, a in enumerate(molecule.atoms):
        gtos = a.shells if basis_fetcher is None else basis_fetcher(a.number)
        for gto in gtos:
            blocks.append(basis_block.build_basis_block(gto, a.position))
            block_atoms.append(index)

    return MolecularBasis(
        atoms=molecule.atoms,
        basis_blocks=blocks,
        block_atoms=tuple(block_atoms),
    )
