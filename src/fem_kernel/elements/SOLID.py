"""3D Solid Elements (TETRA1, HEXA8)

Volumetric counterparts of the planar families, used when the analysis is
three-dimensional. The Jacobian is 3x3 and is inverted with LAPACK.

Elements supported:
- TETRA1: 4-node linear tetrahedron, 1 Gauss point
- HEXA8: 8-node trilinear hexahedron, 2x2x2 Gauss points
"""

from typing import Tuple

import numpy as np

from fem_kernel.core.config import ElementKind
from fem_kernel.elements.elements import FemElement
from fem_kernel.elements.quadrature import gauss_legendre_2pt


class TETRA1(FemElement):
    """4-node linear tetrahedron element.

    Node ordering:
            3
           /|\\
          / | \\
         /  |  \\
        /   2   \\
       /  .'  `. \\
      0---------1

    Natural coordinates: ξ, η, ζ ∈ [0, 1] with ξ + η + ζ ≤ 1
    """

    kind = ElementKind.TETRA1
    affine_mapping = True

    @classmethod
    def integration_points(cls) -> Tuple[np.ndarray, np.ndarray]:
        """1-point centroid rule for linear tetrahedron."""
        points = np.array([[0.25, 0.25, 0.25]])
        weights = np.array([1 / 6])  # Volume of unit tetrahedron
        return points, weights

    @staticmethod
    def shape_functions(xi: np.ndarray) -> np.ndarray:
        """Linear tetrahedral shape functions (volume coordinates)."""
        return np.array([1 - xi[0] - xi[1] - xi[2], xi[0], xi[1], xi[2]])

    @staticmethod
    def shape_function_derivatives(xi: np.ndarray) -> np.ndarray:
        return np.array(
            [
                [-1.0, -1.0, -1.0],
                [1.0, 0.0, 0.0],
                [0.0, 1.0, 0.0],
                [0.0, 0.0, 1.0],
            ]
        )


class HEXA8(FemElement):
    """8-node linear hexahedron (brick) element.

    Node ordering:
            7-------6
           /|      /|
          / |     / |
         4-------5  |
         |  3----|--2
         | /     | /
         |/      |/
         0-------1

    Natural coordinates: ξ, η, ζ ∈ [-1, 1]
    """

    kind = ElementKind.HEXA8

    # parent coordinates of the nodes, the shape functions are
    # N_a = 1/8 (1 + ξ_a ξ)(1 + η_a η)(1 + ζ_a ζ)
    NODE_SIGNS = np.array(
        [
            [-1, -1, -1],
            [1, -1, -1],
            [1, 1, -1],
            [-1, 1, -1],
            [-1, -1, 1],
            [1, -1, 1],
            [1, 1, 1],
            [-1, 1, 1],
        ],
        dtype=float,
    )

    @classmethod
    def integration_points(cls) -> Tuple[np.ndarray, np.ndarray]:
        """2×2×2 Gauss quadrature."""
        pts_1d = gauss_legendre_2pt()
        points = [[i, j, k] for k in pts_1d for j in pts_1d for i in pts_1d]
        return np.array(points), np.ones(8)

    @staticmethod
    def shape_functions(xi: np.ndarray) -> np.ndarray:
        """Trilinear shape functions."""
        factors = 1 + HEXA8.NODE_SIGNS * np.asarray(xi)
        return 0.125 * np.prod(factors, axis=1)

    @staticmethod
    def shape_function_derivatives(xi: np.ndarray) -> np.ndarray:
        factors = 1 + HEXA8.NODE_SIGNS * np.asarray(xi)
        dN = np.empty((8, 3))
        for k in range(3):
            others = [m for m in range(3) if m != k]
            dN[:, k] = 0.125 * HEXA8.NODE_SIGNS[:, k] * np.prod(factors[:, others], axis=1)
        return dN
