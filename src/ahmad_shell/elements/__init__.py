from .geometry import AhmadElement, nodal_thickness, nodal_triads
from .kinematics import (
    GaussPointKinematics,
    gauss_point_kinematics,
    shell_jacobian,
    strain_displacement_matrix,
    strain_transformation_matrix,
)
from .shape_functions import (
    ElementType,
    node_parametric_coordinates,
    shape_function_derivatives,
    shape_functions,
)

__all__ = [
    "AhmadElement",
    "ElementType",
    "GaussPointKinematics",
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
