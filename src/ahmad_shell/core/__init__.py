"""
Core module for ahmad-shell.

Provides exceptions, quadrature rules and kernel configuration.
"""

from .config import ShellKernelConfig
from .exceptions import ArgumentError, DegenerateGeometryError, UnsupportedElementTypeError
from .quadrature import gauss_legendre, gauss_points_2d, shell_gauss_points

__all__ = [
    "ShellKernelConfig",
    "ArgumentError",
    "DegenerateGeometryError",
    "UnsupportedElementTypeError",
    "gauss_legendre",
    "gauss_points_2d",
    "shell_gauss_points",
]
