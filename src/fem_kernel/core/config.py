"""
Kernel configuration module.

The element kernel needs very little from the simulation configuration: the
spatial dimension shared by every element of an analysis and the element type
to build. Both are described by small dataclasses that can be loaded from
YAML.

Example YAML configuration:
    analysis:
      n_dim: 2
      nonlinear: false

    elements:
      kind: "QUAD4"
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

logger = logging.getLogger(__name__)


class ElementKind(str, Enum):
    TRIA1 = "TRIA1"
    QUAD4 = "QUAD4"
    TETRA1 = "TETRA1"
    HEXA8 = "HEXA8"


@dataclass(frozen=True)
class AnalysisContext:
    """Analysis-wide values shared read-only by every element.

    Parameters
    ----------
    n_dim : int
        Spatial dimension of the problem (2 or 3).
    nonlinear : bool
        Whether the analysis is geometrically nonlinear, i.e. whether the
        current-configuration gradients are needed.
    """

    n_dim: int = 2
    nonlinear: bool = False

    def __post_init__(self):
        if self.n_dim not in (2, 3):
            raise ValueError(f"n_dim must be 2 or 3: {self.n_dim}")


@dataclass
class ElementConfig:
    """Element type selection."""

    kind: str = ElementKind.QUAD4.value

    def __post_init__(self):
        valid = [k.value for k in ElementKind]
        if self.kind not in valid:
            raise ValueError(f"Invalid element kind: {self.kind}. Valid: {valid}")


@dataclass
class KernelConfig:
    """Complete element kernel configuration."""

    analysis: AnalysisContext = field(default_factory=AnalysisContext)
    elements: ElementConfig = field(default_factory=ElementConfig)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "KernelConfig":
        """Load configuration from YAML file.

        Parameters
        ----------
        yaml_path : str or Path
            Path to the YAML configuration file.

        Returns
        -------
        KernelConfig
            Validated configuration object.

        Raises
        ------
        FileNotFoundError
            If the YAML file does not exist.
        ValueError
            If the configuration is invalid.
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f)

        logger.debug("Loaded kernel configuration from %s", yaml_path)
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KernelConfig":
        """Create configuration from dictionary.

        Parameters
        ----------
        data : dict
            Configuration dictionary.

        Returns
        -------
        KernelConfig
            Validated configuration object.
        """
        analysis_data = data.get("analysis", {})
        analysis = AnalysisContext(
            n_dim=int(analysis_data.get("n_dim", 2)),
            nonlinear=bool(analysis_data.get("nonlinear", False)),
        )

        elem_data = data.get("elements", {})
        elements = ElementConfig(kind=str(elem_data.get("kind", ElementKind.QUAD4.value)))

        return cls(analysis=analysis, elements=elements)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analysis": {
                "n_dim": self.analysis.n_dim,
                "nonlinear": self.analysis.nonlinear,
            },
            "elements": {"kind": self.elements.kind},
        }

    def save_yaml(self, yaml_path: Union[str, Path]) -> None:
        """Save configuration to YAML file.

        Parameters
        ----------
        yaml_path : str or Path
            Path to the output YAML file.
        """
        with open(yaml_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def validate(self) -> List[str]:
        """Validate the complete configuration.

        Returns
        -------
        list of str
            List of validation warnings (empty if all OK).
        """
        warnings = []

        planar = (ElementKind.TRIA1.value, ElementKind.QUAD4.value)
        if self.elements.kind in planar and self.analysis.n_dim != 2:
            warnings.append(f"{self.elements.kind} requires n_dim = 2")
        elif self.elements.kind not in planar and self.analysis.n_dim != 3:
            warnings.append(f"{self.elements.kind} requires n_dim = 3")

        return warnings

    def __str__(self) -> str:
        lines = [
            "Element Kernel Configuration",
            "=" * 40,
            f"Dimension: {self.analysis.n_dim}",
            f"Nonlinear: {self.analysis.nonlinear}",
            f"Element: {self.elements.kind}",
        ]
        return "\n".join(lines)
