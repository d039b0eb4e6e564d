import pytest

import numpy as np

import beckegrid as bg


def _hydrogen_basis() -> bg.MolecularBasis:
    atoms = [
        bg.Atom(
            symbol="H",
            number=1,
            position=np.zeros(3),
            shells=[
                bg.ContractedGTO(
                    primitive_type=bg.PrimitiveType.CARTESIAN,
                    angular_momentum=(0,),
                    exponents=np.array([1.0]),
                    coefficients=np.array([[1.0]]),
                )
            ],
        )
    ]
    return bg.structure.build_molecular_basis(bg.Molecule(atoms=atoms))


def test_initial_state():
    point = bg.GridPoint(np.array([1.0, 2.0, 3.0]))

    np.testing.assert_array_equal(point.position, [1.0, 2.0, 3.0])
    assert point.weight is None
    assert point.density is None
    assert point.basis_amplitudes is None
    assert point.atom_index is None


def test_position_is_read_only():
    position = np.array([1.0, 2.0, 3.0])
    point = bg.GridPoint(position)

    # The point keeps its own copy.
    position[0] = 10.0
    np.testing.assert_array_equal(point.position, [1.0, 2.0, 3.0])

    with pytest.raises(ValueError):
        point.position[0] = 5.0


def test_invalid_position():
    with pytest.raises(ValueError, match="shape"):
        bg.GridPoint(np.zeros((2, 3)))


def test_weight():
    point = bg.GridPoint(np.zeros(3))

    point.set_weight(2.0)
    assert point.weight == 2.0

    point.multiply_weight(0.25)
    assert point.weight == 0.5


@pytest.mark.parametrize("weight", [-1.0, -1e-12, float("nan")])
def test_set_negative_weight(weight):
    point = bg.GridPoint(np.zeros(3))

    with pytest.raises(ValueError, match="non-negative"):
        point.set_weight(weight)


def test_multiply_weight_errors():
    point = bg.GridPoint(np.zeros(3))

    with pytest.raises(ValueError, match="must be set"):
        point.multiply_weight(2.0)

    point.set_weight(1.0)
    with pytest.raises(ValueError, match="non-negative"):
        point.multiply_weight(-2.0)
    with pytest.raises(ValueError, match="non-negative"):
        point.multiply_weight(float("nan"))
    assert point.weight == 1.0


def test_atom():
    atoms = [
        bg.Atom(symbol="O", number=8, position=np.array([0.0, 0.0, 0.0])),
        bg.Atom(symbol="H", number=1, position=np.array([1.4, 1.1, 0.0])),
    ]
    point = bg.GridPoint(np.array([1.0, 1.0, 0.0]))

    with pytest.raises(ValueError, match="No atom"):
        point.atom_position

    point.set_atom(atoms, 1)

    assert point.atom_index == 1
    np.testing.assert_array_equal(point.atom_position, [1.4, 1.1, 0.0])


@pytest.mark.parametrize("index", [-1, 2, 5])
def test_atom_index_out_of_range(index):
    atoms = [
        bg.Atom(symbol="H", number=1, position=np.zeros(3)),
        bg.Atom(symbol="H", number=1, position=np.ones(3)),
    ]
    point = bg.GridPoint(np.zeros(3))

    with pytest.raises(IndexError):
        point.set_atom(atoms, index)


def test_set_basis_func_amp():
    point = bg.GridPoint(np.array([0.0, 0.0, 1.0]))

    point.set_basis_func_amp(_hydrogen_basis())

    np.testing.assert_allclose(
        point.basis_amplitudes, [(2 / np.pi) ** 0.75 * np.exp(-1.0)]
    )


def test_set_density():
    point = bg.GridPoint(np.zeros(3))
    point.set_basis_amplitudes([1.0, 2.0])

    point.set_density(np.array([[1.0, 2.0], [3.0, 4.0]]))

    # 1*1*1 + 1*2*2 + 2*3*1 + 2*4*2
    assert point.density == pytest.approx(27.0)

    point.scale_density(0.5)
    assert point.density == pytest.approx(13.5)


def test_set_density_from_basis():
    point = bg.GridPoint(np.array([0.0, 0.0, 1.0]))
    point.set_basis_func_amp(_hydrogen_basis())

    point.set_density(np.array([[2.0]]))

    expected = 2.0 * ((2 / np.pi) ** 0.75 * np.exp(-1.0)) ** 2
    assert point.density == pytest.approx(expected)


def test_set_density_errors():
    point = bg.GridPoint(np.zeros(3))

    with pytest.raises(ValueError, match="amplitudes must be set"):
        point.set_density(np.eye(2))

    point.set_basis_amplitudes([1.0, 2.0])

    with pytest.raises(ValueError, match="square"):
        point.set_density(np.ones((2, 3)))

    with pytest.raises(ValueError, match="dimension 3"):
        point.set_density(np.eye(3))


def test_scale_density_before_set():
    point = bg.GridPoint(np.zeros(3))

    with pytest.raises(ValueError, match="density must be set"):
        point.scale_density(2.0)


def test_repr():
    point = bg.GridPoint(np.array([1.0, 0.0, 0.0]))
    point.set_weight(0.5)

    assert repr(point) == (
        "GridPoint(position=[1.0, 0.0, 0.0], weight=0.5, atom_index=None)"
    )
