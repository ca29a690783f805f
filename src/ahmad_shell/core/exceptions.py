"""Exceptions raised by the shell kernel."""

import numpy as np


class ArgumentError(ValueError):
    """Malformed input: wrong shapes, node counts or parametric coordinates."""


class UnsupportedElementTypeError(ArgumentError):
    """Element type tag outside Q4, Q8, Q9, AHMAD4, AHMAD8, AHMAD9."""


class DegenerateGeometryError(np.linalg.LinAlgError):
    """
    Element geometry is inverted or degenerate.

    Raised when the shell Jacobian cannot be inverted or a nodal triad
    cannot be built from a zero-length tangent or director.
    """
