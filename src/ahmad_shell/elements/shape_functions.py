"""Isoparametric Shape Functions for Quadrilateral Shell Elements (Q4, Q8, Q9)

Evaluates shape functions and their parametric derivatives at arbitrary
(xi, eta) points for the scalar families Q4, Q8 and Q9, and their vector
expansions AHMAD4, AHMAD8 and AHMAD9 used to interpolate 3-component nodal
fields (directors, translations).

Elements supported:
- Q4: 4-node bilinear Lagrange quadrilateral
- Q8: 8-node serendipity quadrilateral
- Q9: 9-node biquadratic Lagrange quadrilateral

Interpolation:
    Scalar field: u(xi, eta) = sum_i Ni(xi, eta) u_i
    Q family:     N = [N1 0 N2 0 ...; 0 N1 0 N2 ...]          (2 x 2n)
    AHMAD family: N = [N1*I3, N2*I3, ...]                     (3 x 3n)

Node numbering convention:

    Q4             Q8             Q9
    3---2         3---6---2       3---6---2
    |   |         |       |       |   |   |
    0---1         7       5       7---8---5
                  |       |       |   |   |
                  0---4---1       0---4---1
"""

import numbers
from enum import Enum
from typing import Callable, Dict, Tuple

import numpy as np

from ahmad_shell.core.exceptions import ArgumentError, UnsupportedElementTypeError

# Slack allowed beyond [-1, 1] when validating parametric coordinates
PARAMETRIC_TOLERANCE = 1e-12


class ElementType(str, Enum):
    """Element type tags accepted by the shape function library."""

    Q4 = "Q4"
    Q8 = "Q8"
    Q9 = "Q9"
    AHMAD4 = "AHMAD4"
    AHMAD8 = "AHMAD8"
    AHMAD9 = "AHMAD9"

    @classmethod
    def from_tag(cls, tag) -> "ElementType":
        """Resolve a tag (enum member or string) to an ElementType.

        Raises
        ------
        UnsupportedElementTypeError
            If the tag does not name one of the six supported types.
        """
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().upper())
        except ValueError:
            valid_types = [t.value for t in cls]
            raise UnsupportedElementTypeError(
                f"Unsupported element type: '{tag}'. Must be one of {valid_types}."
            ) from None

    @property
    def node_count(self) -> int:
        return int(self.value[-1])

    @property
    def field_dimension(self) -> int:
        """Components interpolated per node by the expanded N matrix."""
        return 3 if self.is_vector else 2

    @property
    def is_vector(self) -> bool:
        return self.value.startswith("AHMAD")

    @property
    def scalar_family(self) -> "ElementType":
        return ElementType(f"Q{self.node_count}")


_NODE_COORDINATES = {
    4: np.array([[-1.0, -1.0], [1.0, -1.0], [1.0, 1.0], [-1.0, 1.0]]),
    8: np.array([
        [-1.0, -1.0],
        [1.0, -1.0],
        [1.0, 1.0],
        [-1.0, 1.0],  # Corner nodes
        [0.0, -1.0],
        [1.0, 0.0],
        [0.0, 1.0],
        [-1.0, 0.0],  # Mid-side nodes
    ]),
}
_NODE_COORDINATES[9] = np.vstack([_NODE_COORDINATES[8], [[0.0, 0.0]]])


def node_parametric_coordinates(element_type) -> np.ndarray:
    """
    Parametric (xi, eta) coordinates of the element nodes.

    Returns
    -------
    np.ndarray
        Array of nodal coordinates (n_nodes x 2), in node order
    """
    element_type = ElementType.from_tag(element_type)
    return _NODE_COORDINATES[element_type.node_count].copy()


def _q4_shape(xi: float, eta: float) -> np.ndarray:
    """Bilinear shape functions

    N0 = 0.25(1 - xi)(1 - eta)
    N1 = 0.25(1 + xi)(1 - eta)
    N2 = 0.25(1 + xi)(1 + eta)
    N3 = 0.25(1 - xi)(1 + eta)
    """
    return 0.25 * np.array([
        (1 - xi) * (1 - eta),
        (1 + xi) * (1 - eta),
        (1 + xi) * (1 + eta),
        (1 - xi) * (1 + eta),
    ])


def _q4_derivatives(xi: float, eta: float) -> np.ndarray:
    dN_dxi = 0.25 * np.array([-(1 - eta), (1 - eta), (1 + eta), -(1 + eta)])
    dN_deta = 0.25 * np.array([-(1 - xi), -(1 + xi), (1 + xi), (1 - xi)])
    return np.vstack([dN_dxi, dN_deta])


def _q8_shape(xi: float, eta: float) -> np.ndarray:
    """Serendipity shape functions

    Mid-side functions are the quadratic edge bubbles; each corner takes the
    bilinear function minus half of its two adjacent mid-side functions.
    """
    N4 = 0.5 * (1 - xi**2) * (1 - eta)
    N5 = 0.5 * (1 + xi) * (1 - eta**2)
    N6 = 0.5 * (1 - xi**2) * (1 + eta)
    N7 = 0.5 * (1 - xi) * (1 - eta**2)
    N0 = 0.25 * (1 - xi) * (1 - eta) - 0.5 * (N4 + N7)
    N1 = 0.25 * (1 + xi) * (1 - eta) - 0.5 * (N4 + N5)
    N2 = 0.25 * (1 + xi) * (1 + eta) - 0.5 * (N5 + N6)
    N3 = 0.25 * (1 - xi) * (1 + eta) - 0.5 * (N6 + N7)
    return np.array([N0, N1, N2, N3, N4, N5, N6, N7])


def _q8_derivatives(xi: float, eta: float) -> np.ndarray:
    dN_dxi = np.array([
        0.25 * (1 - eta) * (2 * xi + eta),  # N0
        0.25 * (1 - eta) * (2 * xi - eta),  # N1
        0.25 * (1 + eta) * (2 * xi + eta),  # N2
        0.25 * (1 + eta) * (2 * xi - eta),  # N3
        -xi * (1 - eta),  # N4
        0.5 * (1 - eta**2),  # N5
        -xi * (1 + eta),  # N6
        -0.5 * (1 - eta**2),  # N7
    ])

    dN_deta = np.array([
        0.25 * (1 - xi) * (xi + 2 * eta),  # N0
        0.25 * (1 + xi) * (2 * eta - xi),  # N1
        0.25 * (1 + xi) * (xi + 2 * eta),  # N2
        0.25 * (1 - xi) * (2 * eta - xi),  # N3
        -0.5 * (1 - xi**2),  # N4
        -(1 + xi) * eta,  # N5
        0.5 * (1 - xi**2),  # N6
        -(1 - xi) * eta,  # N7
    ])

    return np.vstack([dN_dxi, dN_deta])


def _q9_shape(xi: float, eta: float) -> np.ndarray:
    """Biquadratic Lagrange shape functions

    Built hierarchically from the centre bubble: each mid-side function takes
    its edge bubble minus half the centre function, and each corner takes the
    bilinear function minus half of its two adjacent mid-side functions and a
    quarter of the centre function.
    """
    N8 = (1 - xi**2) * (1 - eta**2)
    N4 = 0.5 * (1 - xi**2) * (1 - eta) - 0.5 * N8
    N5 = 0.5 * (1 + xi) * (1 - eta**2) - 0.5 * N8
    N6 = 0.5 * (1 - xi**2) * (1 + eta) - 0.5 * N8
    N7 = 0.5 * (1 - xi) * (1 - eta**2) - 0.5 * N8
    N0 = 0.25 * (1 - xi) * (1 - eta) - 0.5 * (N4 + N7 + 0.5 * N8)
    N1 = 0.25 * (1 + xi) * (1 - eta) - 0.5 * (N4 + N5 + 0.5 * N8)
    N2 = 0.25 * (1 + xi) * (1 + eta) - 0.5 * (N5 + N6 + 0.5 * N8)
    N3 = 0.25 * (1 - xi) * (1 + eta) - 0.5 * (N6 + N7 + 0.5 * N8)
    return np.array([N0, N1, N2, N3, N4, N5, N6, N7, N8])


def _q9_derivatives(xi: float, eta: float) -> np.ndarray:
    dN_dxi = np.array([
        0.25 * eta * (eta - 1) * (2 * xi - 1),  # N0
        0.25 * eta * (eta - 1) * (2 * xi + 1),  # N1
        0.25 * eta * (eta + 1) * (2 * xi + 1),  # N2
        0.25 * eta * (eta + 1) * (2 * xi - 1),  # N3
        -xi * eta * (eta - 1),  # N4
        0.5 * (1 - eta**2) * (2 * xi + 1),  # N5
        -xi * eta * (eta + 1),  # N6
        0.5 * (1 - eta**2) * (2 * xi - 1),  # N7
        -2 * xi * (1 - eta**2),  # N8
    ])

    dN_deta = np.array([
        0.25 * xi * (xi - 1) * (2 * eta - 1),  # N0
        0.25 * xi * (xi + 1) * (2 * eta - 1),  # N1
        0.25 * xi * (xi + 1) * (2 * eta + 1),  # N2
        0.25 * xi * (xi - 1) * (2 * eta + 1),  # N3
        0.5 * (1 - xi**2) * (2 * eta - 1),  # N4
        -xi * (xi + 1) * eta,  # N5
        0.5 * (1 - xi**2) * (2 * eta + 1),  # N6
        -xi * (xi - 1) * eta,  # N7
        -2 * eta * (1 - xi**2),  # N8
    ])

    return np.vstack([dN_dxi, dN_deta])


Evaluator = Callable[[float, float], np.ndarray]

# One (shape, derivative) pair per scalar family, keyed by node count
_EVALUATORS: Dict[int, Tuple[Evaluator, Evaluator]] = {
    4: (_q4_shape, _q4_derivatives),
    8: (_q8_shape, _q8_derivatives),
    9: (_q9_shape, _q9_derivatives),
}


def check_parametric(*coords: float, names: str = "xi, eta, zeta") -> None:
    """
    Validate scalar parametric coordinates.

    Raises
    ------
    ArgumentError
        If any coordinate is non-numeric, non-finite or outside [-1, 1].
    """
    labels = [name.strip() for name in names.split(",")]
    for label, value in zip(labels, coords):
        if isinstance(value, np.ndarray) and value.ndim == 0:
            value = value.item()
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
            raise ArgumentError(f"{label} should be a real number, got {value!r}")
        value = float(value)
        if not np.isfinite(value) or abs(value) > 1 + PARAMETRIC_TOLERANCE:
            raise ArgumentError(f"{label} should be -1 <= {label} <= 1, got {value}")


def _as_points(points) -> np.ndarray:
    """Coerce a single (xi, eta) pair or a sequence of pairs to an (n x 2) array."""
    try:
        points = np.atleast_2d(np.asarray(points, dtype=float))
    except (TypeError, ValueError):
        raise ArgumentError(f"Parametric points should be numeric, got {points!r}") from None

    if points.ndim != 2 or points.shape[1] != 2:
        raise ArgumentError(
            f"Parametric points should be (xi, eta) pairs, got array of shape {points.shape}"
        )
    if not np.all(np.isfinite(points)):
        raise ArgumentError("Parametric points should be finite")
    if np.any(np.abs(points) > 1 + PARAMETRIC_TOLERANCE):
        raise ArgumentError("Parametric points should lie in [-1, 1] x [-1, 1]")
    return points


def shape_functions(points, element_type) -> Tuple[np.ndarray, np.ndarray]:
    """
    Evaluate shape functions at one or more parametric points.

    Parameters
    ----------
    points : array_like
        A single (xi, eta) pair or a sequence of pairs, one per Gauss point
    element_type : ElementType or str
        One of Q4, Q8, Q9, AHMAD4, AHMAD8, AHMAD9

    Returns
    -------
    Ni : np.ndarray
        Scalar shape function values (n_points x n_nodes)
    N : np.ndarray
        DOF-expanded interpolation matrices (n_points x dim x dim*n_nodes), with
        dim = 2 for the Q family (interleaved u, v) and dim = 3 for the AHMAD
        family (N_i * I3 blocks side by side)

    Raises
    ------
    UnsupportedElementTypeError
        If element_type is not one of the six supported tags.
    ArgumentError
        If a point is malformed or lies outside the reference square.
    """
    element_type = ElementType.from_tag(element_type)
    points = _as_points(points)
    shape, _ = _EVALUATORS[element_type.node_count]

    n = element_type.node_count
    Ni = np.array([shape(xi, eta) for xi, eta in points]).reshape(len(points), n)

    if element_type.is_vector:
        N = np.kron(Ni[:, np.newaxis, :], np.eye(3))
    else:
        N = np.zeros((len(points), 2, 2 * n))
        N[:, 0, 0::2] = Ni  # u-components
        N[:, 1, 1::2] = Ni  # v-components

    return Ni, N


def shape_function_derivatives(points, element_type) -> np.ndarray:
    """
    Evaluate parametric shape function derivatives at one or more points.

    Parameters
    ----------
    points : array_like
        A single (xi, eta) pair or a sequence of pairs
    element_type : ElementType or str
        One of Q4, Q8, Q9, AHMAD4, AHMAD8, AHMAD9

    Returns
    -------
    np.ndarray
        Derivatives (n_points x 2 x n_nodes); row 0 holds dN/dxi, row 1 dN/deta
    """
    element_type = ElementType.from_tag(element_type)
    points = _as_points(points)
    _, derivatives = _EVALUATORS[element_type.node_count]
    n = element_type.node_count
    return np.array([derivatives(xi, eta) for xi, eta in points]).reshape(len(points), 2, n)
