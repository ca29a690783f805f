"""Test suite for the shell kinematics: shell Jacobian, B matrix and T matrix."""

import numpy as np
import pytest

from ahmad_shell.core.config import ShellKernelConfig
from ahmad_shell.core.exceptions import ArgumentError, DegenerateGeometryError
from ahmad_shell.elements.geometry import AhmadElement, nodal_triads
from ahmad_shell.elements.kinematics import (
    GaussPointKinematics,
    gauss_point_kinematics,
    shell_jacobian,
    strain_displacement_matrix,
    strain_transformation_matrix,
)
from ahmad_shell.elements.shape_functions import (
    node_parametric_coordinates,
    shape_function_derivatives,
)

THICKNESS = 0.2

ELEMENT_CONFIGS = {
    "Q4": {"nodes": 4},
    "Q8": {"nodes": 8},
    "Q9": {"nodes": 9},
    "AHMAD4": {"nodes": 4},
    "AHMAD8": {"nodes": 8},
    "AHMAD9": {"nodes": 9},
}


def flat_reference_element(element_type):
    """
    Flat element coinciding with the reference square [-1, 1]^2 in the xy-plane.

    The in-plane Jacobian block is the identity and the directors point along z.
    """
    param = node_parametric_coordinates(element_type)
    n = len(param)
    coords = np.column_stack([param, np.zeros(n)])
    thickness = np.full(n, THICKNESS)
    triads = np.tile(np.eye(3), (n, 1, 1))
    return coords, thickness, triads


def engineering_strain(E):
    """Tensor -> [xx, yy, zz, xy, yz, zx] with engineering shears."""
    return np.array([E[0, 0], E[1, 1], E[2, 2], 2 * E[0, 1], 2 * E[1, 2], 2 * E[2, 0]])


@pytest.fixture
def rotation():
    """Proper rotation whose rows are the local axes."""
    a, b = 0.6, -0.4
    Rz = np.array([[np.cos(a), -np.sin(a), 0], [np.sin(a), np.cos(a), 0], [0, 0, 1]])
    Rx = np.array([[1, 0, 0], [0, np.cos(b), -np.sin(b)], [0, np.sin(b), np.cos(b)]])
    return Rx @ Rz


class TestShellJacobian:
    @pytest.mark.parametrize("element_type", list(ELEMENT_CONFIGS))
    @pytest.mark.parametrize("zeta", [0.0, 0.5, -1.0])
    def test_flat_reference_element(self, element_type, zeta):
        coords, thickness, triads = flat_reference_element(element_type)
        jac = shell_jacobian(element_type, coords, thickness, triads[:, :, 2], 0.3, -0.4, zeta)
        expected = np.diag([1.0, 1.0, THICKNESS / 2])
        assert np.allclose(jac, expected), f"{element_type} Jacobian:\n{jac}"

    def test_wrong_node_count(self):
        coords, thickness, triads = flat_reference_element("Q4")
        with pytest.raises(ArgumentError, match="xyz"):
            shell_jacobian("AHMAD8", coords, thickness, triads[:, :, 2], 0, 0, 0)

    def test_wrong_thickness_shape(self):
        coords, thickness, triads = flat_reference_element("Q4")
        with pytest.raises(ArgumentError, match="t should"):
            shell_jacobian("Q4", coords, thickness[:3], triads[:, :, 2], 0, 0, 0)

    def test_out_of_range_zeta(self):
        coords, thickness, triads = flat_reference_element("Q4")
        with pytest.raises(ArgumentError):
            shell_jacobian("Q4", coords, thickness, triads[:, :, 2], 0, 0, -1.2)


class TestStrainDisplacementMatrix:
    @pytest.mark.parametrize("element_type", list(ELEMENT_CONFIGS))
    @pytest.mark.parametrize("dofs_per_node", [5, 6, 7])
    def test_shape(self, element_type, dofs_per_node):
        coords, thickness, triads = flat_reference_element(element_type)
        B = strain_displacement_matrix(
            element_type, dofs_per_node, coords, thickness, triads, 0.2, 0.1, 0.3
        )
        n_nodes = ELEMENT_CONFIGS[element_type]["nodes"]
        assert B.shape == (6, n_nodes * dofs_per_node)

    def test_extra_dofs_zero_filled(self):
        coords, thickness, triads = flat_reference_element("AHMAD9")
        B = strain_displacement_matrix("AHMAD9", 6, coords, thickness, triads, 0.2, 0.1, 0.3)
        assert np.all(B[:, 5::6] == 0), "Drilling columns must be left at zero"

    @pytest.mark.parametrize("element_type", ["AHMAD4", "AHMAD8", "AHMAD9"])
    def test_translational_block_mid_surface(self, element_type):
        """At zeta = 0 on the reference element dN/dx = dN/dxi and dN/dy = dN/deta."""
        xi, eta = 0.3, -0.6
        coords, thickness, triads = flat_reference_element(element_type)
        B = strain_displacement_matrix(element_type, 5, coords, thickness, triads, xi, eta, 0.0)
        dN = shape_function_derivatives((xi, eta), element_type)[0]

        assert np.allclose(B[0, 0::5], dN[0]), "dN/dx mismatch"
        assert np.allclose(B[1, 1::5], dN[1]), "dN/dy mismatch"
        assert np.allclose(B[2, 2::5], 0.0), "dN/dz must vanish on a flat element"
        assert np.allclose(B[3, 0::5], dN[1])
        assert np.allclose(B[3, 1::5], dN[0])

    @pytest.mark.parametrize("element_type", list(ELEMENT_CONFIGS))
    @pytest.mark.parametrize("point", [(0.0, 0.0, 0.0), (0.5, -0.3, 0.8), (-0.9, 0.9, -0.5)])
    def test_rigid_translation(self, element_type, point):
        coords, thickness, triads = flat_reference_element(element_type)
        B = strain_displacement_matrix(element_type, 5, coords, thickness, triads, *point)
        n = len(coords)
        for direction in range(3):
            d = np.zeros(5 * n)
            d[direction::5] = 1.0
            assert np.allclose(B @ d, 0.0, atol=1e-12)

    @pytest.mark.parametrize("point", [(0.0, 0.0, 0.0), (0.5, -0.3, 0.8), (-0.2, 0.7, -1.0)])
    def test_rigid_rotation_about_director(self, point):
        """In-plane rotation u = -y, v = x with fixed directors produces no strain."""
        coords, thickness, triads = flat_reference_element("AHMAD9")
        B = strain_displacement_matrix("AHMAD9", 5, coords, thickness, triads, *point)
        d = np.zeros(5 * len(coords))
        d[0::5] = -coords[:, 1]
        d[1::5] = coords[:, 0]
        assert np.allclose(B @ d, 0.0, atol=1e-12)

    @pytest.mark.parametrize("zeta", [-1.0, 0.0, 0.4])
    def test_uniform_director_rotation_is_transverse_shear(self, zeta):
        """A uniform rotation about v2 tilts the director along x: gamma_zx = 1."""
        coords, thickness, triads = flat_reference_element("AHMAD4")
        B = strain_displacement_matrix("AHMAD4", 5, coords, thickness, triads, 0.1, 0.2, zeta)
        d = np.zeros(20)
        d[4::5] = 1.0
        assert np.allclose(B @ d, [0, 0, 0, 0, 0, 1.0])

    def test_bending_strain_varies_through_thickness(self):
        """Director rotation varying linearly in x gives eps_xx proportional to zeta."""
        coords, thickness, triads = flat_reference_element("AHMAD4")
        d = np.zeros(20)
        d[4::5] = coords[:, 0]
        eps_top = strain_displacement_matrix("AHMAD4", 5, coords, thickness, triads, 0, 0, 1.0) @ d
        eps_bot = strain_displacement_matrix("AHMAD4", 5, coords, thickness, triads, 0, 0, -1.0) @ d
        assert np.isclose(eps_top[0], THICKNESS / 2)
        assert np.isclose(eps_bot[0], -THICKNESS / 2)

    def test_distorted_element_via_geometry(self):
        coords = np.array([[0.0, 0.0, 0.0], [2.0, 0.1, 0.2], [2.2, 1.9, 0.1], [0.1, 2.0, -0.1]])
        normals = np.array([[0.0, 0.0, 0.1], [0.01, 0.0, 0.1], [0.0, 0.01, 0.1], [0.0, 0.0, 0.12]])
        element = AhmadElement(coords, normals)
        B = strain_displacement_matrix(
            "AHMAD4", 5, coords, element.thickness_at_node, element.triads, 0.57, -0.57, 0.57
        )
        assert B.shape == (6, 20)
        assert np.all(np.isfinite(B))

    @pytest.mark.parametrize("dofs_per_node", [3, 4, 5.5])
    def test_invalid_dofs_per_node(self, dofs_per_node):
        coords, thickness, triads = flat_reference_element("AHMAD4")
        with pytest.raises(ArgumentError):
            strain_displacement_matrix("AHMAD4", dofs_per_node, coords, thickness, triads, 0, 0, 0)

    def test_wrong_triads_shape(self):
        coords, thickness, triads = flat_reference_element("AHMAD4")
        with pytest.raises(ArgumentError, match="triads"):
            strain_displacement_matrix("AHMAD4", 5, coords, thickness, triads[:, :, :2], 0, 0, 0)

    def test_zero_thickness_is_degenerate(self):
        coords, thickness, triads = flat_reference_element("AHMAD4")
        with pytest.raises(DegenerateGeometryError):
            strain_displacement_matrix("AHMAD4", 5, coords, np.zeros(4), triads, 0, 0, 0)

    def test_degenerate_error_is_linalg_error(self):
        coords, thickness, triads = flat_reference_element("AHMAD4")
        coords[:, 1] = 0.0
        with pytest.raises(np.linalg.LinAlgError):
            strain_displacement_matrix("AHMAD4", 5, coords, thickness, triads, 0, 0, 0)


class TestStrainTransformation:
    @pytest.mark.parametrize(
        "jac",
        [
            np.eye(3),
            np.diag([0.5, 0.5, 0.05]),
            np.array([[1.0, 0.2, 0.1], [0.3, 0.9, -0.2], [0.0, 0.1, 0.05]]),
        ],
    )
    def test_shape(self, jac):
        assert strain_transformation_matrix(jac).shape == (5, 6)

    @pytest.mark.parametrize("jac", [np.eye(3), np.diag([0.5, 0.5, 0.05])])
    def test_aligned_axes(self, jac):
        """Axes aligned with x, y, z leave the strains unchanged (sigma_zz row dropped)."""
        T = strain_transformation_matrix(jac)
        assert np.allclose(T, np.delete(np.eye(6), 2, axis=0))

    def test_rotates_strain_tensor(self, rotation):
        rng = np.random.default_rng(7)
        A = rng.normal(size=(3, 3))
        E = 0.5 * (A + A.T)

        # Scaling the rows must not change the local axes
        jac = np.diag([0.7, 1.3, 0.05]) @ rotation
        T = strain_transformation_matrix(jac)

        local = engineering_strain(rotation @ E @ rotation.T)
        assert np.allclose(T @ engineering_strain(E), np.delete(local, 2))

    def test_parallel_rows_are_degenerate(self):
        jac = np.array([[1.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, 0.0, 0.1]])
        with pytest.raises(DegenerateGeometryError):
            strain_transformation_matrix(jac)

    def test_wrong_shape(self):
        with pytest.raises(ArgumentError):
            strain_transformation_matrix(np.eye(2))


class TestGaussPointKinematics:
    def test_unit_square_volume(self):
        coords = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
        element = AhmadElement(coords, np.tile([0.0, 0.0, 0.1], (4, 1)))

        records = list(element.gauss_point_kinematics())

        assert len(records) == 8
        assert all(isinstance(r, GaussPointKinematics) for r in records)
        volume = sum(r.det_jacobian * r.weight for r in records)
        assert np.isclose(volume, 0.1)
        for r in records:
            assert r.B.shape == (6, 20)
            assert r.T.shape == (5, 6)
            assert np.allclose(r.jacobian, element.jacobian(*r.point))

    def test_configured_quadratic_element(self):
        config = ShellKernelConfig(
            element_type="AHMAD8", dofs_per_node=6, in_plane_order=3, thickness_order=2
        )
        param = node_parametric_coordinates("AHMAD8")
        coords = np.column_stack([2.0 * param, np.zeros(8)])
        normals = np.tile([0.0, 0.0, 0.05], (8, 1))
        triads = nodal_triads("AHMAD8", coords, normals)

        records = list(gauss_point_kinematics(coords, np.full(8, 0.05), triads, config))

        assert len(records) == 18
        assert records[0].B.shape == (6, 48)
        # 4 x 4 plate, 0.05 thick
        assert np.isclose(sum(r.det_jacobian * r.weight for r in records), 0.8)

    def test_records_match_pointwise_builders(self):
        coords = np.array([[0.0, 0.0, 0.0], [2.0, 0.2, 0.1], [2.3, 1.8, 0.3], [-0.2, 1.5, 0.0]])
        thickness = np.array([0.1, 0.12, 0.08, 0.1])
        normals = np.tile([0.0, 0.0, 1.0], (4, 1)) * thickness[:, np.newaxis]
        triads = nodal_triads("AHMAD4", coords, normals)
        config = ShellKernelConfig(dofs_per_node=6)

        for r in gauss_point_kinematics(coords, thickness, triads, config):
            xi, eta, zeta = r.point
            expected_B = strain_displacement_matrix("AHMAD4", 6, coords, thickness, triads, xi, eta, zeta)
            assert np.allclose(r.B, expected_B)
            expected_jac = shell_jacobian("AHMAD4", coords, thickness, triads[:, :, 2], xi, eta, zeta)
            assert np.allclose(r.jacobian, expected_jac)

    def test_element_rejects_mismatched_config(self):
        coords = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
        element = AhmadElement(coords, np.tile([0.0, 0.0, 0.1], (4, 1)))
        with pytest.raises(ArgumentError):
            element.gauss_point_kinematics(ShellKernelConfig(element_type="AHMAD9"))
