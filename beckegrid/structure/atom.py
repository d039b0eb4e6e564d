from collections.abc import Sequence
import dataclasses

import jax
from jax.tree_util import register_pytree_node_class

from beckegrid import types
from beckegrid.basis import contracted_gto


@register_pytree_node_class
@dataclasses.dataclass
class Atom:
    """A nucleus of the molecule and the contractions centered on it."""

    symbol: str
    number: int

    # Bohr
    position: types.Array

    shells: Sequence[contracted_gto.ContractedGTO] = ()

    def __post_init__(self):
        types.promote_dataclass_fields(self)

    def tree_flatten(self):
        return (self.position, tuple(self.shells)), (self.symbol, self.number)

    @classmethod
    def tree_unflatten(
        cls, aux_data: tuple[str, int], children: tuple[jax.Array, tuple]
    ) -> "Atom":
        symbol, number = aux_data
        position, shells = children
        return cls(symbol, number, position, shells)
