import dataclasses
import enum

import jax
from jax.tree_util import register_pytree_node_class

from beckegrid import types


class PrimitiveType(enum.Enum):
    CARTESIAN = 1
    SPHERICAL = 2


@register_pytree_node_class
@dataclasses.dataclass
class ContractedGTO:
    """One contraction of a basis set, as listed by the Basis Set Exchange.

    All shells of the contraction share the primitive exponents. Shell s
    contributes, for every Cartesian power (i, j, k) with i + j + k = l_s,
    the function

    x^i y^j z^k sum_d coefficients[s, d] N_d e^(-exponents[d] r^2)

    relative to the atom it is placed on, where N_d normalizes the primitive.
    An SP contraction therefore has angular_momentum = (0, 1).
    """

    primitive_type: PrimitiveType

    # shape (n_shells,)
    angular_momentum: tuple[int, ...]

    # shape (K,)
    exponents: types.Array

    # shape (n_shells, K)
    coefficients: types.Array

    def __post_init__(self):
        types.promote_dataclass_fields(self)

    @property
    def n_shells(self) -> int:
        return len(self.angular_momentum)

    def tree_flatten(self):
        return (self.exponents, self.coefficients), (
            self.primitive_type,
            self.angular_momentum,
        )

    @classmethod
    def tree_unflatten(
        cls,
        aux_data: tuple[PrimitiveType, tuple[int, ...]],
        children: tuple[jax.Array, jax.Array],
    ) -> "ContractedGTO":
        primitive_type, angular_momentum = aux_data
        exponents, coefficients = children
        return cls(primitive_type, angular_momentum, exponents, coefficients)
