"""
Shell kernel configuration.

Collects the choices an assembly layer makes once per analysis (element
family, DOFs per node, integration orders) in a validated dataclass that can
be read from or written to YAML.

Example YAML configuration:
    element_type: "AHMAD8"
    dofs_per_node: 5
    in_plane_order: 3
    thickness_order: 2
"""

import logging
import numbers
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import numpy as np
import yaml

from .quadrature import shell_gauss_points

logger = logging.getLogger(__name__)

# Translations (3) + rotations about the two tangent axes (2)
MIN_DOFS_PER_NODE = 5


def _is_integral(value) -> bool:
    """True for whole-valued real numbers; bools, strings and None are rejected."""
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        return False
    return np.isfinite(value) and int(value) == value


@dataclass
class ShellKernelConfig:
    """
    Configuration of the shell kinematic kernel.

    Parameters
    ----------
    element_type : str
        Element tag, one of Q4, Q8, Q9, AHMAD4, AHMAD8, AHMAD9.
    dofs_per_node : int
        Columns reserved per node in the B matrix. Columns beyond the five
        populated by the kernel (e.g. a drilling DOF) are left at zero.
    in_plane_order : int
        Gauss points per in-plane direction.
    thickness_order : int
        Gauss points through the thickness.
    """

    element_type: str = "AHMAD4"
    dofs_per_node: int = 5
    in_plane_order: int = 2
    thickness_order: int = 2

    def __post_init__(self):
        """Validate all configuration parameters."""
        self._validate()

    def _validate(self):
        self._validate_element_type()
        self._validate_numerical_params()
        self._log_integration_warnings()

    def _validate_element_type(self):
        from ahmad_shell.elements.shape_functions import ElementType

        try:
            self.element_type = ElementType.from_tag(self.element_type).value
        except ValueError:
            valid_types = [t.value for t in ElementType]
            raise ValueError(
                f"Invalid element_type: '{self.element_type}'. Must be one of {valid_types}."
            ) from None

    def _validate_numerical_params(self):
        if not _is_integral(self.dofs_per_node) or self.dofs_per_node < MIN_DOFS_PER_NODE:
            raise ValueError(
                f"dofs_per_node must be an integer >= {MIN_DOFS_PER_NODE}, got {self.dofs_per_node!r}"
            )
        self.dofs_per_node = int(self.dofs_per_node)
        for name in ("in_plane_order", "thickness_order"):
            value = getattr(self, name)
            if not _is_integral(value) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
            setattr(self, name, int(value))

    def _log_integration_warnings(self):
        """Log warnings for integration rules likely to produce spurious modes."""
        quadratic = self.element_type.endswith(("8", "9"))
        if quadratic and self.in_plane_order < 2:
            logger.warning(
                "One-point in-plane integration on %s elements leaves spurious "
                "zero-energy modes. Use in_plane_order >= 2.",
                self.element_type,
            )
        if self.dofs_per_node > MIN_DOFS_PER_NODE:
            logger.info(
                "dofs_per_node=%d: columns beyond %d per node are zero-filled by the kernel.",
                self.dofs_per_node,
                MIN_DOFS_PER_NODE,
            )

    @property
    def nodes_per_element(self) -> int:
        from ahmad_shell.elements.shape_functions import ElementType

        return ElementType(self.element_type).node_count

    @property
    def dofs_per_element(self) -> int:
        return self.nodes_per_element * self.dofs_per_node

    def integration_points(self) -> Tuple[np.ndarray, np.ndarray]:
        """Gauss points (xi, eta, zeta) and weights for the configured rule."""
        return shell_gauss_points(self.in_plane_order, self.thickness_order)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShellKernelConfig":
        """Create configuration from a dictionary, ignoring unknown keys with a warning."""
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", unknown)
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "ShellKernelConfig":
        """Load configuration from a YAML file.

        Parameters
        ----------
        yaml_path : str or Path
            Path to the YAML configuration file.

        Returns
        -------
        ShellKernelConfig
            Validated configuration.
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping at the top of {yaml_path}")

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "element_type": self.element_type,
            "dofs_per_node": self.dofs_per_node,
            "in_plane_order": self.in_plane_order,
            "thickness_order": self.thickness_order,
        }

    def save_yaml(self, yaml_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        with open(yaml_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def __str__(self) -> str:
        lines = [
            "Shell Kernel Configuration",
            "=" * 40,
            f"Element: {self.element_type} ({self.nodes_per_element} nodes)",
            f"  DOFs per node: {self.dofs_per_node} ({self.dofs_per_element} per element)",
            f"Integration: {self.in_plane_order}x{self.in_plane_order} in-plane, "
            f"{self.thickness_order} through thickness",
        ]
        return "\n".join(lines)
