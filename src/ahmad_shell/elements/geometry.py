"""
Ahmad Shell Element Geometry.

Holds the mid-surface coordinates and nodal directors of a 4-node degenerated
shell element and derives the nodal thickness and the nodal triads
{v1, v2, v3} used by the rotational DOFs (Cook [12.5-1] to [12.5-4]).

The director stored at each node is V3_i = t_i * v3_i: its length is the
shell thickness at the node and its direction the local e3 axis.
"""

from typing import Optional

import numpy as np

from ahmad_shell.core.config import ShellKernelConfig
from ahmad_shell.core.exceptions import ArgumentError, DegenerateGeometryError
from ahmad_shell.elements.kinematics import _jacobian, gauss_point_kinematics
from ahmad_shell.elements.shape_functions import (
    ElementType,
    node_parametric_coordinates,
    shape_function_derivatives,
)


def nodal_thickness(directors) -> np.ndarray:
    """
    Shell thickness at each node, the length of the nodal director.

    Parameters
    ----------
    directors : array_like
        Nodal directors V3_i (n_nodes x 3)

    Returns
    -------
    np.ndarray
        Thickness t_i (n_nodes,)
    """
    directors = np.asarray(directors, dtype=float)
    if directors.ndim != 2 or directors.shape[1] != 3:
        raise ArgumentError(f"directors should have shape (n, 3), got {directors.shape}")
    return np.linalg.norm(directors, axis=1)


def nodal_triads(element_type, coords, directors) -> np.ndarray:
    """
    Compute the orthonormal local triad at every node.

    At node i the eta-tangent of the mid-surface, evaluated at the node's own
    parametric coordinates, gives v2 (after removing its component along
    v3); v3 is the unit director and v1 = -(v3 x v2) / |v3 x v2| completes a
    right-handed system.

    Parameters
    ----------
    element_type : ElementType or str
        One of Q4, Q8, Q9, AHMAD4, AHMAD8, AHMAD9
    coords : array_like
        Mid-surface nodal coordinates (n_nodes x 3)
    directors : array_like
        Nodal directors (n_nodes x 3), any non-zero length

    Returns
    -------
    np.ndarray
        Triads (n_nodes x 3 x 3); triads[i][:, k] is axis v(k+1) of node i

    Raises
    ------
    DegenerateGeometryError
        If a director or an eta-tangent vanishes, or the two are parallel.
    """
    element_type = ElementType.from_tag(element_type)
    n = element_type.node_count
    coords = np.asarray(coords, dtype=float)
    directors = np.asarray(directors, dtype=float)
    if coords.shape != (n, 3) or directors.shape != (n, 3):
        raise ArgumentError(
            f"{element_type.value} needs coords and directors of shape ({n}, 3), "
            f"got {coords.shape} and {directors.shape}"
        )

    dN = shape_function_derivatives(node_parametric_coordinates(element_type), element_type)
    # eta-derivative of the mid-surface position at each node
    V1 = dN[:, 1, :] @ coords

    triads = np.zeros((n, 3, 3))
    for node in range(n):
        t = np.linalg.norm(directors[node])
        if t == 0.0:
            raise DegenerateGeometryError(f"Zero-length director at node {node}")
        v3 = directors[node] / t

        tangent = V1[node] - np.dot(V1[node], v3) * v3
        tangent_norm = np.linalg.norm(tangent)
        if tangent_norm <= 1e-12 * max(np.linalg.norm(V1[node]), 1.0):
            raise DegenerateGeometryError(
                f"eta-tangent at node {node} is zero or parallel to the director"
            )
        v2 = tangent / tangent_norm
        v1 = -np.cross(v3, v2)
        v1 /= np.linalg.norm(v1)

        triads[node] = np.column_stack([v1, v2, v3])

    return triads


class AhmadElement:
    """
    Four-node degenerated shell element geometry.

    Node ordering:
    3-------2
    |       |
    |       |
    0-------1

    Parameters
    ----------
    coords : array_like
        Mid-surface nodal coordinates (4 x 3)
    normals : array_like
        Nodal directors (4 x 3), length equal to the nodal thickness

    Raises
    ------
    ArgumentError
        Unless coords has 4 rows of 3 components and normals the same shape.
    """

    element_type = ElementType.AHMAD4

    def __init__(self, coords, normals):
        try:
            coords = np.array(coords, dtype=float)
            normals = np.array(normals, dtype=float)
        except (TypeError, ValueError):
            raise ArgumentError("coords and normals should be numeric arrays") from None

        if coords.ndim != 2 or coords.shape[0] != 4:
            raise ArgumentError(f"only 4 nodes: coords has shape {coords.shape}")
        if coords.shape[1] != 3:
            raise ArgumentError(f"coords should have 3 components per node, got {coords.shape}")
        if coords.shape != normals.shape:
            raise ArgumentError(
                f"coords and normals should have same size: {coords.shape} != {normals.shape}"
            )

        coords.setflags(write=False)
        normals.setflags(write=False)
        self._coords = coords
        self._normals = normals

    @property
    def coords(self) -> np.ndarray:
        return self._coords

    @property
    def normals(self) -> np.ndarray:
        return self._normals

    @property
    def n_nodes(self) -> int:
        return self._coords.shape[0]

    @property
    def thickness_at_node(self) -> np.ndarray:
        """Original shell thickness at each node, Cook [12.5-1] t_i (4,)."""
        return nodal_thickness(self._normals)

    @property
    def triads(self) -> np.ndarray:
        """Nodal triads [v1, v2, v3] as columns (4 x 3 x 3)."""
        return nodal_triads(self.element_type, self._coords, self._normals)

    @property
    def mu_matrix(self) -> np.ndarray:
        """In-plane nodal axes [v1, v2] as columns, Cook [12.5-3] (4 x 3 x 2)."""
        return self.triads[:, :, :2]

    def jacobian(self, xi: float, eta: float, mu: float) -> np.ndarray:
        """
        Jacobian of the flat 4-node shell, Cook [12.5-4].

        Parameters
        ----------
        xi, eta, mu : float
            Parametric coordinates in [-1, 1]; mu runs through the thickness

        Returns
        -------
        np.ndarray
            Jacobian matrix (3 x 3)
        """
        return _jacobian(self.element_type, self._coords, self._normals, xi, eta, mu)

    def gauss_point_kinematics(self, config: Optional[ShellKernelConfig] = None):
        """Kinematics at every integration point, see kinematics.gauss_point_kinematics."""
        config = config or ShellKernelConfig(element_type=self.element_type.value)
        if ElementType.from_tag(config.element_type).node_count != self.n_nodes:
            raise ArgumentError(
                f"config element_type {config.element_type} does not describe a "
                f"{self.n_nodes}-node element"
            )
        return gauss_point_kinematics(self._coords, self.thickness_at_node, self.triads, config)

    def __repr__(self):
        return f"<AhmadElement nodes={self.n_nodes} thickness={self.thickness_at_node}>"
