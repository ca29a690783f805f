"""
Gauss-Legendre quadrature rules over the shell reference volume.

The in-plane rule is the tensor product of two 1-D rules over [-1, 1]^2 and
the shell rule adds a third direction through the thickness (zeta).
"""

from typing import Tuple

import numpy as np


def gauss_legendre(order: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    One dimensional Gauss-Legendre rule on [-1, 1].

    Parameters
    ----------
    order : int
        Number of integration points (exact for polynomials of degree 2*order - 1).

    Returns
    -------
    points : np.ndarray
        Abscissae (order,)
    weights : np.ndarray
        Weights (order,), summing to 2
    """
    if int(order) != order or order < 1:
        raise ValueError(f"Quadrature order must be a positive integer, got {order}")
    return np.polynomial.legendre.leggauss(int(order))


def gauss_points_2d(order: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Tensor-product rule over the reference square.

    Returns
    -------
    points : np.ndarray
        Array of (xi, eta) coordinates (order**2 x 2), xi varying fastest
    weights : np.ndarray
        Integration weights (order**2,), summing to 4
    """
    gp, gw = gauss_legendre(order)
    eta, xi = np.meshgrid(gp, gp, indexing="ij")
    w_eta, w_xi = np.meshgrid(gw, gw, indexing="ij")
    points = np.column_stack([xi.ravel(), eta.ravel()])
    weights = (w_xi * w_eta).ravel()
    return points, weights


def shell_gauss_points(in_plane_order: int, thickness_order: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Rule over the shell reference volume [-1, 1]^3.

    Parameters
    ----------
    in_plane_order : int
        Points per in-plane direction (xi, eta)
    thickness_order : int
        Points through the thickness (zeta)

    Returns
    -------
    points : np.ndarray
        Array of (xi, eta, zeta) coordinates (n x 3), grouped by thickness level
    weights : np.ndarray
        Integration weights (n,), summing to 8
    """
    plane_points, plane_weights = gauss_points_2d(in_plane_order)
    zeta_points, zeta_weights = gauss_legendre(thickness_order)

    n_plane = len(plane_weights)
    points = np.column_stack([
        np.tile(plane_points, (len(zeta_points), 1)),
        np.repeat(zeta_points, n_plane),
    ])
    weights = np.repeat(zeta_weights, n_plane) * np.tile(plane_weights, len(zeta_points))
    return points, weights
