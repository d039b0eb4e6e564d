from . import bse
from . import pubchem
