import functools

import numpy as np
import basis_set_exchange as bse

from beckegrid.basis import contracted_gto

_FUNCTION_TYPES = {
    "gto": contracted_gto.PrimitiveType.CARTESIAN,
    "gto_cartesian": contracted_gto.PrimitiveType.CARTESIAN,
    "gto_spherical": contracted_gto.PrimitiveType.SPHERICAL,
}


def _to_contracted_gto(shell: dict) -> contracted_gto.ContractedGTO:
    coefficients = np.array(shell["coefficients"], dtype=np.float64)

    # General contractions list one angular momentum for several rows.
    angular_momentum = tuple(shell["angular_momentum"])
    if len(angular_momentum) == 1:
        angular_momentum *= coefficients.shape[0]

    return contracted_gto.ContractedGTO(
        primitive_type=_FUNCTION_TYPES[shell["function_type"]],
        angular_momentum=angular_momentum,
        exponents=np.array(shell["exponents"], dtype=np.float64),
        coefficients=coefficients,
    )


@functools.cache
def _load_cached(
    basis_name: str, element: int
) -> tuple[contracted_gto.ContractedGTO, ...]:
    elements = bse.get_basis(basis_name, elements=[element])["elements"]
    if str(element) not in elements:
        raise ValueError(
            f"Basis set {basis_name} has no functions for element {element}."
        )
    return tuple(
        _to_contracted_gto(shell)
        for shell in elements[str(element)]["electron_shells"]
    )


def load(basis_name: str, element: int) -> list[contracted_gto.ContractedGTO]:
    """Loads the contractions of an element from the Basis Set Exchange.

    Results are cached per (basis_name, element), so building grids for
    many molecules in the same basis reads each element once.

    Raises:
        ValueError: If the basis set does not define the element.
    """
    return list(_load_cached(basis_name.lower(), element))


def fetcher(basis_name: str):
    """Returns a BasisFetcher for structure.build_molecular_basis."""
    return functools.partial(load, basis_name)
