from .elements import ElementFactory, FemElement, check_consistent_dimension
from .gauss import GaussPoint
from .QUAD import QUAD4
from .quadrature import QuadratureRule
from .SOLID import HEXA8, TETRA1
from .TRIA import TRIA1

__all__ = [
    "ElementFactory",
    "FemElement",
    "GaussPoint",
    "QuadratureRule",
    "check_consistent_dimension",
    "TRIA1",
    "QUAD4",
    "TETRA1",
    "HEXA8",
]
