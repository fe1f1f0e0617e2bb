"""
fem-kernel: isoparametric finite element kernel.

Shape function gradients, mapping Jacobians and nodal stiffness block storage
for TRIA1, QUAD4, TETRA1 and HEXA8 elements.
"""

from .core import AnalysisContext, ElementStateError, GeometryError, KernelConfig
from .elements import ElementFactory, FemElement

__version__ = "0.1.0"

__all__ = [
    "AnalysisContext",
    "ElementFactory",
    "ElementStateError",
    "FemElement",
    "GeometryError",
    "KernelConfig",
]
