"""Bilinear Quadrilateral Element (QUAD4)

Node numbering convention:

    3-------2
    |       |
    |       |
    0-------1

Parent coordinates: ξ, η ∈ [-1, 1]

    N0 = 0.25(1 - ξ)(1 - η)
    N1 = 0.25(1 + ξ)(1 - η)
    N2 = 0.25(1 + ξ)(1 + η)
    N3 = 0.25(1 - ξ)(1 + η)

The gradients vary over the element, so the Jacobian is evaluated at each of
the 2x2 Gauss points.
"""

from typing import Tuple

import numpy as np

from fem_kernel.core.config import ElementKind
from fem_kernel.elements.elements import FemElement
from fem_kernel.elements.quadrature import gauss_legendre_2pt


class QUAD4(FemElement):
    """4-node quadrilateral with 4 Gauss points."""

    kind = ElementKind.QUAD4

    @classmethod
    def integration_points(cls) -> Tuple[np.ndarray, np.ndarray]:
        """2x2 Gauss quadrature, counter-clockwise from (-1/√3, -1/√3)

        Returns
        -------
        points : np.ndarray
            Array of (xi, eta) coordinates (4 x 2)
        weights : np.ndarray
            Integration weights (4,)
        """
        lo, hi = gauss_legendre_2pt()
        points = np.array([(lo, lo), (hi, lo), (hi, hi), (lo, hi)])
        weights = np.ones(4)
        return points, weights

    @staticmethod
    def shape_functions(xi: np.ndarray) -> np.ndarray:
        x, e = xi
        return 0.25 * np.array(
            [
                (1 - x) * (1 - e),
                (1 + x) * (1 - e),
                (1 + x) * (1 + e),
                (1 - x) * (1 + e),
            ]
        )

    @staticmethod
    def shape_function_derivatives(xi: np.ndarray) -> np.ndarray:
        """Columns are ∂N/∂ξ and ∂N/∂η."""
        x, e = xi
        dN_dxi = 0.25 * np.array([-(1 - e), (1 - e), (1 + e), -(1 + e)])
        dN_deta = 0.25 * np.array([-(1 - x), -(1 + x), (1 + x), (1 - x)])
        return np.column_stack([dN_dxi, dN_deta])
