import numpy as np
import pubchempy as pcp

from beckegrid.structure import atom
from beckegrid.structure import units


def _load_atom(atom_data: pcp.Atom) -> atom.Atom:
    position = (
        np.array([atom_data.x, atom_data.y, atom_data.z], dtype=np.float64)
        * units.ANGSTROM_TO_BOHR
    )

    return atom.Atom(
        symbol=atom_data.element,
        number=atom_data.number,
        position=position,
    )


def load_geometry(compound: pcp.Compound) -> list[atom.Atom]:
    """Reads the 3D geometry of a PubChem compound, converted to Bohr.

    The returned atoms carry no basis shells; pass them to
    Molecule.from_geometry to attach a basis set.
    """
    if compound.coordinate_type != "3d":
        raise ValueError("Compound must have 3D coordinates.")

    return [_load_atom(atom_data) for atom_data in compound.atoms]
