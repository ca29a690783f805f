"""
ahmad-shell: geometric and kinematic kernel for degenerated (Ahmad) shell elements.

Provides shape functions for 4, 8 and 9 node quadrilaterals, nodal director
triads, shell Jacobians and the strain-displacement / strain-transformation
operators consumed by an outer integration loop.
"""

from .core.config import ShellKernelConfig
from .core.exceptions import ArgumentError, DegenerateGeometryError, UnsupportedElementTypeError
from .elements import (
    AhmadElement,
    ElementType,
    GaussPointKinematics,
    gauss_point_kinematics,
    nodal_thickness,
    nodal_triads,
    node_parametric_coordinates,
    shape_function_derivatives,
    shape_functions,
    shell_jacobian,
    strain_displacement_matrix,
    strain_transformation_matrix,
)

__all__ = [
    "AhmadElement",
    "ArgumentError",
    "DegenerateGeometryError",
    "ElementType",
    "GaussPointKinematics",
    "ShellKernelConfig",
    "UnsupportedElementTypeError",
    "gauss_point_kinematics",
    "nodal_thickness",
    "nodal_triads",
    "node_parametric_coordinates",
    "shape_function_derivatives",
    "shape_functions",
    "shell_jacobian",
    "strain_displacement_matrix",
    "strain_transformation_matrix",
]
