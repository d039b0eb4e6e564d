from .quadrature import Fineness
from .grid_point import GridPoint
from .molecular_grid import GridOptions, MolecularGrid, build
from . import becke
from . import density
from . import quadrature
