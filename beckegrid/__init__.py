import jax

# Grid weights and densities are compared at double precision.
jax.config.update("jax_enable_x64", True)

from .types import Array

from . import adapters

from . import basis
from .basis.basis_block import BasisBlock
from .basis.contracted_gto import ContractedGTO, PrimitiveType

from . import structure
from .structure.atom import Atom
from .structure.molecular_basis import MolecularBasis
from .structure.molecule import Molecule

from . import grid
from .grid.quadrature import Fineness
from .grid.grid_point import GridPoint
from .grid.molecular_grid import GridOptions, MolecularGrid
