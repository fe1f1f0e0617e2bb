"""Test suite for the 3D solid elements (TETRA1, HEXA8)."""

import numpy as np
import pytest

from fem_kernel.core.config import AnalysisContext
from fem_kernel.core.errors import GeometryError
from fem_kernel.elements.SOLID import HEXA8, TETRA1


@pytest.fixture
def context():
    return AnalysisContext(n_dim=3)


@pytest.fixture
def unit_tetra_nodes():
    return np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])


@pytest.fixture
def unit_cube_nodes():
    return (HEXA8.NODE_SIGNS + 1) / 2


@pytest.fixture
def shear_map():
    """Affine map with determinant 3."""
    return np.array([[2.0, 0.5, 0.0], [0.0, 1.0, 0.3], [0.0, 0.0, 1.5]])


def integrated_volume(element):
    return sum(element.get_weight(g) * element.get_J_X(g) for g in range(element.gauss_point_count))


class TestTETRA1:
    def test_unit_tetra(self, context, unit_tetra_nodes):
        element = TETRA1(context)
        element.set_ref_coords(unit_tetra_nodes)
        element.compute_grad_linear()
        assert element.get_J_X(0) == pytest.approx(1.0)
        assert integrated_volume(element) == pytest.approx(1 / 6)
        expected = np.array([[-1, -1, -1], [1, 0, 0], [0, 1, 0], [0, 0, 1]], dtype=float)
        assert np.allclose(element.get_grad_N(0), expected)

    def test_scaled_tetra_volume(self, context):
        element = TETRA1(context)
        element.set_ref_coords([[0, 0, 0], [2, 0, 0], [0, 3, 0], [0, 0, 4]])
        element.compute_grad_linear()
        assert element.get_J_X(0) == pytest.approx(24.0)
        assert integrated_volume(element) == pytest.approx(4.0)

    def test_left_handed_ordering_raises(self, context, unit_tetra_nodes):
        element = TETRA1(context)
        element.set_ref_coords(unit_tetra_nodes[[0, 2, 1, 3]])
        with pytest.raises(GeometryError):
            element.compute_grad_linear()

    def test_coplanar_nodes_raise(self, context):
        element = TETRA1(context)
        element.set_ref_coords([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]])
        with pytest.raises(GeometryError):
            element.compute_grad_linear()

    def test_linear_field_reproduced(self, context, unit_tetra_nodes, shear_map):
        nodes = unit_tetra_nodes @ shear_map.T
        slope = np.array([1.0, -2.0, 0.5])
        element = TETRA1(context)
        element.set_ref_coords(nodes)
        element.compute_grad_linear()
        assert np.allclose((nodes @ slope) @ element.get_grad_N(0), slope)
        assert np.allclose(element.get_grad_N(0).sum(axis=0), 0.0)


class TestHEXA8:
    def test_unit_cube(self, context, unit_cube_nodes):
        element = HEXA8(context)
        element.set_ref_coords(unit_cube_nodes)
        element.compute_grad_linear()
        for g in range(8):
            assert element.get_J_X(g) == pytest.approx(0.125)
        assert integrated_volume(element) == pytest.approx(1.0)

    def test_parallelepiped_volume(self, context, unit_cube_nodes, shear_map):
        element = HEXA8(context)
        element.set_ref_coords(unit_cube_nodes @ shear_map.T + [1.0, 2.0, 3.0])
        element.compute_grad_linear()
        assert integrated_volume(element) == pytest.approx(3.0)

    def test_partition_of_unity(self, context, unit_cube_nodes):
        nodes = unit_cube_nodes.copy()
        nodes[6] += [0.2, 0.1, 0.3]
        element = HEXA8(context)
        element.set_ref_coords(nodes)
        element.compute_grad_linear()
        for g in range(8):
            assert sum(element.get_N(a, g) for a in range(8)) == pytest.approx(1.0)
            assert np.allclose(element.get_grad_N(g).sum(axis=0), 0.0)

    def test_current_configuration(self, context, unit_cube_nodes):
        element = HEXA8(context)
        element.set_ref_coords(unit_cube_nodes)
        element.set_curr_coords(unit_cube_nodes * [1.0, 2.0, 0.5])
        element.compute_grad_nonlinear()
        for g in range(8):
            assert element.get_J_x(g) == pytest.approx(0.125)
        assert element.get_grad_N_X(6, 0, 1) == pytest.approx(element.get_grad_N_X(6, 0, 0) / 2)

    def test_flattened_hexa_raises(self, context, unit_cube_nodes):
        nodes = unit_cube_nodes.copy()
        nodes[:, 2] = 0.0
        element = HEXA8(context)
        element.set_ref_coords(nodes)
        with pytest.raises(GeometryError):
            element.compute_grad_linear()


def test_solid_element_rejects_2d_analysis():
    with pytest.raises(ValueError):
        HEXA8(AnalysisContext(n_dim=2))
