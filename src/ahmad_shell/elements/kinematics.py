"""
Degenerated Shell Kinematics (Jacobian, B and T matrices).

Implements the isoparametric kinematics of the Ahmad degenerated shell: the
mid-surface is interpolated with the element shape functions and every node
carries a director scaled by its thickness, so that

    x(xi, eta, zeta) = sum_i N_i(xi, eta) * (x_i + zeta * t_i * v3_i / 2)

Formulation (Cook, Concepts and Applications of FEA):
    Jacobian:  [6.7-2], [12.5-2], [12.5-4]
    B matrix:  translational solid block + rotational block per node
    T matrix:  strain transformation [7.3-5], sigma_zz row removed

Strain ordering used throughout:
    [eps_xx, eps_yy, eps_zz, gamma_xy, gamma_yz, gamma_zx]
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from ahmad_shell.core.config import MIN_DOFS_PER_NODE, ShellKernelConfig
from ahmad_shell.core.exceptions import ArgumentError, DegenerateGeometryError
from ahmad_shell.core.quadrature import shell_gauss_points
from ahmad_shell.elements.shape_functions import (
    ElementType,
    check_parametric,
    shape_function_derivatives,
    shape_functions,
)

logger = logging.getLogger(__name__)


def _nodal_array(values, name: str, shape: tuple) -> np.ndarray:
    try:
        array = np.asarray(values, dtype=float)
    except (TypeError, ValueError):
        raise ArgumentError(f"{name} should be numeric") from None
    if array.shape != shape:
        raise ArgumentError(f"{name} should have shape {shape}, got {array.shape}")
    return array


def _jacobian(
    element_type: ElementType,
    xyz: np.ndarray,
    directors: np.ndarray,
    xi: float,
    eta: float,
    zeta: float,
) -> np.ndarray:
    """
    Shell Jacobian from thickness-scaled nodal directors.

    Rows 0-1 hold the xi/eta derivatives of (x_i + zeta * V3_i / 2) and row 2
    the zeta rate sum_i N_i V3_i / 2, where V3_i = t_i * v3_i.
    """
    check_parametric(xi, eta, zeta)
    Ni, _ = shape_functions((xi, eta), element_type)
    dN = shape_function_derivatives((xi, eta), element_type)[0]
    half_directors = directors / 2
    return np.vstack([dN @ (xyz + zeta * half_directors), Ni[0] @ half_directors])


def shell_jacobian(element_type, xyz, t, v3, xi: float, eta: float, zeta: float) -> np.ndarray:
    """
    Compute the isoparametric Jacobian of a shell element.

    Parameters
    ----------
    element_type : ElementType or str
        One of Q4, Q8, Q9, AHMAD4, AHMAD8, AHMAD9
    xyz : array_like
        Mid-surface nodal coordinates (n_nodes x 3)
    t : array_like
        Nodal thickness (n_nodes,)
    v3 : array_like
        Unit nodal directors, the local e3 axes (n_nodes x 3)
    xi, eta, zeta : float
        Parametric coordinates in [-1, 1]

    Returns
    -------
    np.ndarray
        Jacobian matrix (3 x 3); row k holds d(x, y, z)/d(xi, eta, zeta)[k]

    Notes
    -----
    No determinant check is made. A singular Jacobian surfaces when the
    caller inverts it.
    """
    element_type = ElementType.from_tag(element_type)
    n = element_type.node_count
    xyz = _nodal_array(xyz, "xyz", (n, 3))
    t = _nodal_array(t, "t", (n,))
    v3 = _nodal_array(v3, "v3", (n, 3))
    return _jacobian(element_type, xyz, v3 * t[:, np.newaxis], xi, eta, zeta)


def _invert_jacobian(jac: np.ndarray) -> np.ndarray:
    try:
        return np.linalg.solve(jac, np.eye(3))
    except np.linalg.LinAlgError as exc:
        logger.debug("Singular shell Jacobian:\n%s", jac)
        raise DegenerateGeometryError(
            f"Singular Jacobian (det={np.linalg.det(jac):.3e}): element geometry is "
            "degenerate or inverted"
        ) from exc


def strain_displacement_matrix(
    element_type,
    dofs_per_node: int,
    nodal_coords,
    t_ele,
    triads,
    xi: float,
    eta: float,
    zeta: float,
) -> np.ndarray:
    """
    Compute the strain-displacement matrix B at a point of the shell.

    Strain components:
    [eps_xx, eps_yy, eps_zz, gamma_xy, gamma_yz, gamma_zx]ᵀ = B * d

    with nodal DOFs d_i = [u, v, w, alpha, beta], where alpha and beta
    rotate the director about the nodal axes v1 and v2.

    Parameters
    ----------
    element_type : ElementType or str
        One of Q4, Q8, Q9, AHMAD4, AHMAD8, AHMAD9
    dofs_per_node : int
        Columns per node in B (>= 5). Columns past the fifth are left at zero
    nodal_coords : array_like
        Mid-surface nodal coordinates (n_nodes x 3)
    t_ele : array_like
        Nodal thickness (n_nodes,)
    triads : array_like
        Nodal triads (n_nodes x 3 x 3); columns are the local axes v1, v2, v3
    xi, eta, zeta : float
        Parametric coordinates in [-1, 1]

    Returns
    -------
    np.ndarray
        B matrix (6 x n_nodes*dofs_per_node)

    Raises
    ------
    DegenerateGeometryError
        If the Jacobian at the point is singular.
    """
    element_type = ElementType.from_tag(element_type)
    n = element_type.node_count
    if int(dofs_per_node) != dofs_per_node or dofs_per_node < MIN_DOFS_PER_NODE:
        raise ArgumentError(
            f"dofs_per_node must be an integer >= {MIN_DOFS_PER_NODE}, got {dofs_per_node}"
        )
    dofs_per_node = int(dofs_per_node)
    nodal_coords = _nodal_array(nodal_coords, "nodal_coords", (n, 3))
    t_ele = _nodal_array(t_ele, "t_ele", (n,))
    triads = _nodal_array(triads, "triads", (n, 3, 3))

    v3 = triads[:, :, 2]
    jac = _jacobian(element_type, nodal_coords, v3 * t_ele[:, np.newaxis], xi, eta, zeta)
    return _strain_displacement_from_jacobian(
        element_type, dofs_per_node, jac, t_ele, triads, xi, eta, zeta
    )


def _strain_displacement_from_jacobian(
    element_type: ElementType,
    dofs_per_node: int,
    jac: np.ndarray,
    t_ele: np.ndarray,
    triads: np.ndarray,
    xi: float,
    eta: float,
    zeta: float,
) -> np.ndarray:
    """B matrix for validated inputs and the shell Jacobian already evaluated at the point."""
    n = element_type.node_count
    inv_jac = _invert_jacobian(jac)

    Ni, _ = shape_functions((xi, eta), element_type)
    Ni = Ni[0]
    # Cartesian derivatives of N_i: {d/dx} = J^-1 {d/dxi}
    dN = inv_jac[:, :2] @ shape_function_derivatives((xi, eta), element_type)[0]

    B = np.zeros((6, n * dofs_per_node))
    for i in range(n):
        v1 = triads[i, :, 0]
        v2 = triads[i, :, 1]
        dx, dy, dz = dN[:, i]
        # Cartesian derivatives of zeta * N_i
        dZN = dN[:, i] * zeta + Ni[i] * inv_jac[:, 2]

        b_trans = np.array([
            [dx, 0, 0],
            [0, dy, 0],
            [0, 0, dz],
            [dy, dx, 0],
            [0, dz, dy],
            [dz, 0, dx],
        ])

        b_rot = 0.5 * t_ele[i] * np.array([
            [-v2[0] * dZN[0], v1[0] * dZN[0]],
            [-v2[1] * dZN[1], v1[1] * dZN[1]],
            [-v2[2] * dZN[2], v1[2] * dZN[2]],
            [-v2[0] * dZN[1] - v2[1] * dZN[0], v1[0] * dZN[1] + v1[1] * dZN[0]],
            [-v2[1] * dZN[2] - v2[2] * dZN[1], v1[1] * dZN[2] + v1[2] * dZN[1]],
            [-v2[0] * dZN[2] - v2[2] * dZN[0], v1[0] * dZN[2] + v1[2] * dZN[0]],
        ])

        start = i * dofs_per_node
        B[:, start : start + 3] = b_trans
        B[:, start + 3 : start + 5] = b_rot

    return B


def strain_transformation_matrix(jac) -> np.ndarray:
    """
    Strain transformation from global axes to the local shell axes.

    The local system 123 is built from the Jacobian: 1 along xi, 3 normal to
    the xi-eta tangent plane and 2 = 3 x 1. The full 6x6 transformation
    (Cook [7.3-5]) is assembled from cyclic permutations of the direction
    cosines and the eps_zz row is removed, since sigma_zz is ignored.

    Parameters
    ----------
    jac : array_like
        Shell Jacobian (3 x 3)

    Returns
    -------
    np.ndarray
        T matrix (5 x 6)
    """
    jac = _nodal_array(jac, "jac", (3, 3))

    dir1 = jac[0]
    dir3 = np.cross(dir1, jac[1])
    dir2 = np.cross(dir3, dir1)
    directions = np.array([dir1, dir2, dir3])
    norms = np.linalg.norm(directions, axis=1)
    if np.any(norms == 0.0):
        raise DegenerateGeometryError(
            "Jacobian rows 1 and 2 are parallel or zero: no local shell axes"
        )

    cycle = [1, 2, 0]
    M1 = directions / norms[:, np.newaxis]
    M2 = M1[:, cycle]
    M3 = M1[cycle, :]
    M4 = M2[cycle, :]

    T = np.block([
        [M1**2, M1 * M2],
        [2 * M1 * M3, M1 * M4 + M3 * M2],
    ])
    return np.delete(T, 2, axis=0)


@dataclass(frozen=True)
class GaussPointKinematics:
    """Kinematic quantities at one integration point of a shell element."""

    point: np.ndarray
    weight: float
    jacobian: np.ndarray
    det_jacobian: float
    B: np.ndarray
    T: np.ndarray


def gauss_point_kinematics(
    nodal_coords,
    t_ele,
    triads,
    config: Optional[ShellKernelConfig] = None,
) -> Iterator[GaussPointKinematics]:
    """
    Evaluate B, T and the Jacobian at every point of the configured shell rule.

    The integrator consuming these records accumulates e.g.
    K += B.T @ T.T @ C @ T @ B * det_jacobian * weight.

    Parameters
    ----------
    nodal_coords : array_like
        Mid-surface nodal coordinates (n_nodes x 3)
    t_ele : array_like
        Nodal thickness (n_nodes,)
    triads : array_like
        Nodal triads (n_nodes x 3 x 3)
    config : ShellKernelConfig, optional
        Element type, DOFs per node and integration orders. Defaults to
        ShellKernelConfig()

    Yields
    ------
    GaussPointKinematics
        One record per integration point
    """
    config = config or ShellKernelConfig()
    element_type = ElementType.from_tag(config.element_type)
    n = element_type.node_count
    nodal_coords = _nodal_array(nodal_coords, "nodal_coords", (n, 3))
    t_ele = _nodal_array(t_ele, "t_ele", (n,))
    triads = _nodal_array(triads, "triads", (n, 3, 3))
    directors = triads[:, :, 2] * t_ele[:, np.newaxis]

    points, weights = shell_gauss_points(config.in_plane_order, config.thickness_order)
    for (xi, eta, zeta), w in zip(points, weights):
        jac = _jacobian(element_type, nodal_coords, directors, xi, eta, zeta)
        det_jac = float(np.linalg.det(jac))
        if det_jac <= 0:
            logger.debug(
                f"Non-positive Jacobian determinant {det_jac:.3e} at ({xi}, {eta}, {zeta})"
            )
        B = _strain_displacement_from_jacobian(
            element_type, config.dofs_per_node, jac, t_ele, triads, xi, eta, zeta
        )
        yield GaussPointKinematics(
            point=np.array([xi, eta, zeta]),
            weight=float(w),
            jacobian=jac,
            det_jacobian=det_jac,
            B=B,
            T=strain_transformation_matrix(jac),
        )
