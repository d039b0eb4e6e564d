import dataclasses

import jax
from jax.tree_util import register_pytree_node_class
import numpy as np

from beckegrid import types
from beckegrid.basis import cartesian
from beckegrid.basis import contracted_gto


@register_pytree_node_class
@dataclasses.dataclass
class BasisBlock:
    """The Cartesian basis functions of one contraction, ready for evaluation.

    Each row i of the block is the function

    phi_i(r) = (r - center)^powers[i] sum_k contraction_matrix[i, k]
               e^(-exponents[k] |r - center|^2)

    where the primitive normalization is already folded into
    contraction_matrix. A contraction with shells of angular momentum
    l_1, ..., l_n has sum_s (l_s + 1)(l_s + 2) / 2 rows.
    """

    # shape (3,)
    center: types.Array

    # shape (K,)
    exponents: types.Array

    # shape (n_basis, 3)
    cartesian_powers: types.StaticArray

    # shape (n_basis, K)
    contraction_matrix: types.Array

    def __post_init__(self):
        types.promote_dataclass_fields(self)

    @property
    def n_exponents(self) -> int:
        return self.exponents.shape[0]

    @property
    def n_basis(self) -> int:
        return self.cartesian_powers.shape[0]

    @property
    def angular_momenta(self) -> np.ndarray:
        """The total angular momentum of each basis function, shape (n_basis,)."""
        return np.sum(self.cartesian_powers, axis=-1)

    def tree_flatten(self):
        children = (self.center, self.exponents, self.contraction_matrix)
        powers = tuple(tuple(row) for row in self.cartesian_powers.tolist())
        return children, powers

    @classmethod
    def tree_unflatten(
        cls,
        aux_data: tuple[tuple[int, int, int], ...],
        children: tuple[jax.Array, jax.Array, jax.Array],
    ) -> "BasisBlock":
        center, exponents, contraction_matrix = children
        powers = np.array(aux_data, dtype=np.int32).reshape(-1, 3)
        return cls(center, exponents, powers, contraction_matrix)


def build_basis_block(
    gto: contracted_gto.ContractedGTO, center: types.Array
) -> BasisBlock:
    """Expands a contraction placed at center into its Cartesian functions.

    Raises:
        NotImplementedError: For spherical contractions.
        ValueError: If the coefficient rows do not match the shells.
    """
    if gto.primitive_type != contracted_gto.PrimitiveType.CARTESIAN:
        raise NotImplementedError(
            f"{gto.primitive_type.name} contractions cannot be evaluated on "
            "the grid; only Cartesian ones are supported."
        )

    coefficients = np.atleast_2d(np.asarray(gto.coefficients, dtype=np.float64))
    if coefficients.shape[0] != gto.n_shells:
        raise ValueError(
            f"Expected {gto.n_shells} rows of contraction coefficients. "
            f"Got {coefficients.shape[0]}"
        )

    rows = []
    powers = []
    for shell_coefficients, l in zip(coefficients, gto.angular_momentum):
        shell_powers = cartesian.generate_cartesian_powers(l)
        powers.append(shell_powers)
        rows.append(np.tile(shell_coefficients, (shell_powers.shape[0], 1)))
    cartesian_powers = np.concatenate(powers)

    norms = cartesian.compute_normalization_constants(
        cartesian_powers, gto.exponents
    )
    return BasisBlock(
        center=center,
        exponents=gto.exponents,
        cartesian_powers=cartesian_powers,
        contraction_matrix=norms * np.concatenate(rows),
    )
