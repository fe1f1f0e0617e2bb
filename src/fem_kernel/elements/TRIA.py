"""Linear Triangle Element (TRIA1)

3-node simplex with the standard barycentric shape functions and a single
Gauss point at the centroid:

    2
    |\\
    | \\
    |  \\
    0---1

Parent coordinates: ξ, η ∈ [0, 1] with ξ + η ≤ 1

    N0 = 1 - ξ - η
    N1 = ξ
    N2 = η

The shape functions are affine, so the Jacobian is constant over the element.
"""

from typing import Tuple

import numpy as np

from fem_kernel.core.config import ElementKind
from fem_kernel.elements.elements import FemElement


class TRIA1(FemElement):
    """3-node triangle with 1 Gauss point."""

    kind = ElementKind.TRIA1
    affine_mapping = True

    @classmethod
    def integration_points(cls) -> Tuple[np.ndarray, np.ndarray]:
        """Centroid rule, weight equal to the area of the parent triangle."""
        points = np.array([[1 / 3, 1 / 3]])
        weights = np.array([0.5])
        return points, weights

    @staticmethod
    def shape_functions(xi: np.ndarray) -> np.ndarray:
        return np.array([1 - xi[0] - xi[1], xi[0], xi[1]])

    @staticmethod
    def shape_function_derivatives(xi: np.ndarray) -> np.ndarray:
        return np.array(
            [
                [-1.0, -1.0],
                [1.0, 0.0],
                [0.0, 1.0],
            ]
        )
