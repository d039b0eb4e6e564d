from .atom import Atom
from .molecule import Molecule
from .molecular_basis import MolecularBasis
from .molecular_basis import build as build_molecular_basis
from . import real_space
from . import units
