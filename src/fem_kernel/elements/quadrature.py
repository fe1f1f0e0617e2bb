"""Fixed Gauss quadrature tables for the isoparametric element families.

A :class:`QuadratureRule` stores, for every Gauss point ``g`` and local node
``a``, the shape function value ``N[g, a]`` and its parent-space derivatives
``dN_dxi[g, a, k]``. Tables are evaluated once per element type and shared
read-only by every element instance of that type.
"""

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

ShapeFunctions = Callable[[np.ndarray], np.ndarray]
ShapeDerivatives = Callable[[np.ndarray], np.ndarray]


@dataclass(frozen=True)
class QuadratureRule:
    """Gauss points, weights and tabulated shape functions.

    Attributes
    ----------
    points : np.ndarray
        Parent coordinates of the Gauss points (n_gauss x parent_dim)
    weights : np.ndarray
        Integration weights (n_gauss,)
    N : np.ndarray
        Shape function values (n_gauss x n_nodes)
    dN_dxi : np.ndarray
        Parent-space derivatives (n_gauss x n_nodes x parent_dim)
    """

    points: np.ndarray
    weights: np.ndarray
    N: np.ndarray
    dN_dxi: np.ndarray

    @classmethod
    def tabulate(
        cls,
        points: Sequence[Sequence[float]],
        weights: Sequence[float],
        shape_functions: ShapeFunctions,
        shape_function_derivatives: ShapeDerivatives,
    ) -> "QuadratureRule":
        """Evaluate shape functions and derivatives at every Gauss point.

        Parameters
        ----------
        points : sequence
            Parent coordinates of the Gauss points.
        weights : sequence
            Integration weight of each point.
        shape_functions : callable
            ``f(xi) -> (n_nodes,)`` for a parent point ``xi``.
        shape_function_derivatives : callable
            ``f(xi) -> (n_nodes, parent_dim)`` for a parent point ``xi``.
        """
        points = np.array(points, dtype=float)
        weights = np.array(weights, dtype=float)
        if points.ndim != 2 or points.shape[0] != weights.shape[0]:
            raise ValueError(
                f"Inconsistent quadrature table: points {points.shape}, weights {weights.shape}"
            )

        N = np.array([shape_functions(xi) for xi in points], dtype=float)
        dN_dxi = np.array([shape_function_derivatives(xi) for xi in points], dtype=float)
        if dN_dxi.shape != (points.shape[0], N.shape[1], points.shape[1]):
            raise ValueError(f"Unexpected shape function derivative table shape {dN_dxi.shape}")

        for array in (points, weights, N, dN_dxi):
            array.setflags(write=False)
        return cls(points=points, weights=weights, N=N, dN_dxi=dN_dxi)

    @property
    def n_points(self) -> int:
        return self.weights.shape[0]

    @property
    def n_nodes(self) -> int:
        return self.N.shape[1]

    @property
    def parent_dim(self) -> int:
        return self.points.shape[1]


def gauss_legendre_2pt() -> np.ndarray:
    """Abscissae of the 2-point Gauss-Legendre rule on [-1, 1]."""
    gp = 1 / np.sqrt(3)
    return np.array([-gp, gp])
