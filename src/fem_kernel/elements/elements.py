"""Isoparametric element base class.

An element owns the reference and current coordinates of its nodes, the
derived state of each of its Gauss points and the nodal stiffness blocks
``Kab`` accumulated by the constitutive routines. Concrete element types only
provide their quadrature rule and shape functions; the Jacobian inversion and
gradient transformation are shared:

    J = Σ_a x_a ⊗ ∂N_a/∂ξ
    ∂N_a/∂x = J⁻ᵀ ∂N_a/∂ξ

Typical use by an assembler::

    element = ElementFactory.get_element("QUAD4", context)
    element.set_ref_coords(X)
    for iteration in ...:
        element.set_curr_coords(x)
        element.compute_grad_nonlinear()
        element.clear_element()
        ...  # add_Kab / add_Kab_T
        ...  # scatter get_Kab(a, b)
"""

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, Iterable, Optional, Tuple, Union

import numpy as np

from fem_kernel.core.config import AnalysisContext, ElementKind, KernelConfig
from fem_kernel.core.errors import ElementStateError, GeometryError
from fem_kernel.elements.gauss import CURRENT, REFERENCE, GaussPoint
from fem_kernel.elements.quadrature import QuadratureRule

logger = logging.getLogger(__name__)

# det(J) is treated as zero below this fraction of the product of column norms
DET_J_RTOL = 1e-12


class FemElement(ABC):
    """Base class for isoparametric elements.

    Parameters
    ----------
    context : AnalysisContext
        Analysis-wide values; ``context.n_dim`` must match the parent
        dimension of the element type.
    element_id : int, optional
        Identifier of the mesh entity this element was built for.

    Attributes
    ----------
    kind : ElementKind
        Tag of the concrete element type.
    affine_mapping : bool
        True when the shape functions are linear so that the Jacobian is
        constant over the element.
    """

    kind: ClassVar[ElementKind]
    affine_mapping: ClassVar[bool] = False
    _quadrature: ClassVar[Optional[QuadratureRule]] = None

    def __init__(self, context: AnalysisContext, element_id: Optional[int] = None):
        self.name = self.kind.value
        rule = self.quadrature_rule()
        if rule.parent_dim != context.n_dim:
            raise ValueError(
                f"{self.name} is a {rule.parent_dim}D element, "
                f"the analysis is {context.n_dim}D"
            )
        self.context = context
        self.id = element_id

        n_nodes, n_dim = rule.n_nodes, context.n_dim
        self._ref_coord = np.zeros((n_nodes, n_dim))
        self._curr_coord = np.zeros((n_nodes, n_dim))
        self._ref_set = np.zeros((n_nodes, n_dim), dtype=bool)
        self._curr_set = np.zeros((n_nodes, n_dim), dtype=bool)
        self._gauss_points = tuple(GaussPoint(g, n_nodes, n_dim) for g in range(rule.n_points))
        self._Kab = np.zeros((n_nodes, n_nodes, n_dim, n_dim))

    # ------------------------------------------------------------------
    # Quadrature data supplied by the concrete types
    # ------------------------------------------------------------------

    @classmethod
    @abstractmethod
    def integration_points(cls) -> Tuple[np.ndarray, np.ndarray]:
        """Gauss points (n_points x parent_dim) and weights (n_points,)."""

    @staticmethod
    @abstractmethod
    def shape_functions(xi: np.ndarray) -> np.ndarray:
        """Shape function values (n_nodes,) at parent point ``xi``."""

    @staticmethod
    @abstractmethod
    def shape_function_derivatives(xi: np.ndarray) -> np.ndarray:
        """Parent-space derivatives (n_nodes x parent_dim) at ``xi``."""

    @classmethod
    def quadrature_rule(cls) -> QuadratureRule:
        """Tabulated quadrature rule of the element type, built on first use."""
        rule = cls.__dict__.get("_quadrature")
        if rule is None:
            points, weights = cls.integration_points()
            rule = QuadratureRule.tabulate(
                points, weights, cls.shape_functions, cls.shape_function_derivatives
            )
            cls._quadrature = rule
        return rule

    # ------------------------------------------------------------------
    # Sizes
    # ------------------------------------------------------------------

    @property
    def n_dim(self) -> int:
        return self.context.n_dim

    @property
    def node_count(self) -> int:
        return self.quadrature_rule().n_nodes

    @property
    def gauss_point_count(self) -> int:
        return self.quadrature_rule().n_points

    @property
    def dofs_count(self) -> int:
        return self.node_count * self.n_dim

    @property
    def gauss_points(self) -> Tuple[GaussPoint, ...]:
        return self._gauss_points

    # ------------------------------------------------------------------
    # Index checks
    # ------------------------------------------------------------------

    def _check_node(self, node: int) -> int:
        if not 0 <= node < self.node_count:
            raise IndexError(f"Node index {node} out of range for {self.name} ({self.node_count} nodes)")
        return node

    def _check_dim(self, dim: int) -> int:
        if not 0 <= dim < self.n_dim:
            raise IndexError(f"Dimension index {dim} out of range for a {self.n_dim}D analysis")
        return dim

    def _check_gauss(self, gauss: int) -> int:
        if not 0 <= gauss < self.gauss_point_count:
            raise IndexError(
                f"Gauss point index {gauss} out of range for {self.name} "
                f"({self.gauss_point_count} points)"
            )
        return gauss

    # ------------------------------------------------------------------
    # Coordinates
    # ------------------------------------------------------------------

    def set_ref_coord(self, value: float, node: int, dim: int) -> None:
        """Set one coordinate of a node in the reference configuration."""
        self._ref_coord[self._check_node(node), self._check_dim(dim)] = value
        self._ref_set[node, dim] = True

    def set_curr_coord(self, value: float, node: int, dim: int) -> None:
        """Set one coordinate of a node in the current configuration."""
        self._curr_coord[self._check_node(node), self._check_dim(dim)] = value
        self._curr_set[node, dim] = True

    def get_ref_coord(self, node: int, dim: int) -> float:
        return float(self._ref_coord[self._check_node(node), self._check_dim(dim)])

    def get_curr_coord(self, node: int, dim: int) -> float:
        return float(self._curr_coord[self._check_node(node), self._check_dim(dim)])

    def set_ref_coords(self, coords: Union[np.ndarray, Iterable[Iterable[float]]]) -> None:
        """Set all reference coordinates from an (n_nodes x n_dim) array."""
        self._ref_coord[...] = self._check_coords(coords)
        self._ref_set[...] = True

    def set_curr_coords(self, coords: Union[np.ndarray, Iterable[Iterable[float]]]) -> None:
        """Set all current coordinates from an (n_nodes x n_dim) array."""
        self._curr_coord[...] = self._check_coords(coords)
        self._curr_set[...] = True

    def _check_coords(self, coords) -> np.ndarray:
        coords = np.asarray(coords, dtype=float)
        if coords.shape != (self.node_count, self.n_dim):
            raise ValueError(
                f"{self.name} expects coordinates of shape {(self.node_count, self.n_dim)}, "
                f"got {coords.shape}"
            )
        return coords

    @property
    def ref_coords(self) -> np.ndarray:
        return self._ref_coord.copy()

    @property
    def curr_coords(self) -> np.ndarray:
        return self._curr_coord.copy()

    # ------------------------------------------------------------------
    # Quadrature queries
    # ------------------------------------------------------------------

    def get_weight(self, gauss: int) -> float:
        return float(self.quadrature_rule().weights[self._check_gauss(gauss)])

    def get_N(self, node: int, gauss: int) -> float:
        """Value of the shape function of ``node`` at Gauss point ``gauss``."""
        return float(self.quadrature_rule().N[self._check_gauss(gauss), self._check_node(node)])

    def get_J_X(self, gauss: int) -> float:
        """Jacobian determinant of the reference configuration at ``gauss``."""
        return self._gauss_points[self._check_gauss(gauss)].J_X

    def get_J_x(self, gauss: int) -> float:
        """Jacobian determinant of the current configuration at ``gauss``."""
        return self._gauss_points[self._check_gauss(gauss)].J_x

    def get_grad_N_X(self, node: int, gauss: int, dim: int) -> float:
        """Physical gradient component of the shape function of ``node``.

        Reflects whichever of :meth:`compute_grad_linear` or
        :meth:`compute_grad_nonlinear` ran last.
        """
        gp = self._computed_gauss_point(gauss)
        return float(gp.grad_N_X[self._check_node(node), self._check_dim(dim)])

    def get_grad_N(self, gauss: int) -> np.ndarray:
        """All physical shape function gradients (n_nodes x n_dim) at ``gauss``."""
        return self._computed_gauss_point(gauss).grad_N_X.copy()

    def _computed_gauss_point(self, gauss: int) -> GaussPoint:
        gp = self._gauss_points[self._check_gauss(gauss)]
        if not gp.is_computed:
            raise ElementStateError(
                f"Shape function gradients of {self.name} queried before any gradient computation"
            )
        return gp

    # ------------------------------------------------------------------
    # Gradient computation
    # ------------------------------------------------------------------

    def compute_grad_linear(self) -> None:
        """Compute the shape function gradients in the reference configuration.

        Stores ``∂N/∂X`` and ``J_X`` at every Gauss point.

        Raises
        ------
        ElementStateError
            If a reference coordinate has not been set.
        GeometryError
            If the element is degenerate or inverted.
        """
        self._require(self._ref_set, REFERENCE)
        self._compute_grad(self._ref_coord, REFERENCE)

    def compute_grad_nonlinear(self) -> None:
        """Compute the shape function gradients in the current configuration.

        Stores ``∂N/∂x`` and ``J_x`` at every Gauss point. ``J_X`` is left as
        computed by the last :meth:`compute_grad_linear` call.

        Raises
        ------
        ElementStateError
            If a reference or current coordinate has not been set.
        GeometryError
            If the deformed element is degenerate or inverted.
        """
        self._require(self._ref_set, REFERENCE)
        self._require(self._curr_set, CURRENT)
        self._compute_grad(self._curr_coord, CURRENT)

    def _require(self, mask: np.ndarray, configuration: str) -> None:
        if not mask.all():
            missing = sorted({int(node) for node in np.nonzero(~mask)[0]})
            raise ElementStateError(
                f"{self.name}: {configuration} coordinates not set for local nodes {missing}"
            )

    def _compute_grad(self, coords: np.ndarray, configuration: str) -> None:
        rule = self.quadrature_rule()
        det_J = inv_J = None
        for gp, dN_dxi in zip(self._gauss_points, rule.dN_dxi):
            if inv_J is None or not self.affine_mapping:
                J = coords.T @ dN_dxi
                det_J, inv_J = self._invert_jacobian(J, gp.index, configuration)
            gp.update(dN_dxi @ inv_J, det_J, configuration)

        logger.debug(
            "%s %s: %s gradients computed at %d Gauss points",
            self.name,
            self.id,
            configuration,
            rule.n_points,
        )

    def _invert_jacobian(
        self, J: np.ndarray, gauss: int, configuration: str
    ) -> Tuple[float, np.ndarray]:
        """Determinant and inverse of the mapping Jacobian.

        Closed form for 2x2, LAPACK for 3x3.
        """
        if J.shape == (2, 2):
            det_J = J[0, 0] * J[1, 1] - J[0, 1] * J[1, 0]
        else:
            det_J = np.linalg.det(J)

        scale = np.prod(np.linalg.norm(J, axis=0))
        if not np.isfinite(det_J) or det_J <= DET_J_RTOL * scale:
            logger.warning(
                "%s %s: non-positive %s Jacobian at Gauss point %d (det = %g)",
                self.name,
                self.id,
                configuration,
                gauss,
                det_J,
            )
            raise GeometryError(self.name, gauss, float(det_J), configuration)

        if J.shape == (2, 2):
            inv_J = np.array([[J[1, 1], -J[0, 1]], [-J[1, 0], J[0, 0]]]) / det_J
        else:
            try:
                inv_J = np.linalg.inv(J)
            except np.linalg.LinAlgError as exc:
                raise GeometryError(self.name, gauss, float(det_J), configuration) from exc
        return float(det_J), inv_J

    # ------------------------------------------------------------------
    # Stiffness blocks
    # ------------------------------------------------------------------

    def _check_block(self, block) -> np.ndarray:
        block = np.asarray(block, dtype=float)
        n = self.n_dim
        if block.shape == (n * n,):
            block = block.reshape(n, n)
        if block.shape != (n, n):
            raise ValueError(f"Stiffness block must be {n}x{n}, got shape {block.shape}")
        return block

    def add_Kab(self, block, node_a: int, node_b: int) -> None:
        """Accumulate the block coupling ``node_a`` to ``node_b``.

        Parameters
        ----------
        block : array_like
            n_dim x n_dim sub-matrix (or its row-major flattening).
        node_a, node_b : int
            Local node indices.
        """
        block = self._check_block(block)
        self._check_node(node_a)
        self._check_node(node_b)
        self._Kab[node_a, node_b] += block

    def add_Kab_T(self, block, node_a: int, node_b: int) -> None:
        """Accumulate the transpose of ``block`` for the pair (a, b).

        Used when the caller computed the block of the symmetric pair (b, a)
        and registers its partner without recomputing it.
        """
        block = self._check_block(block)
        self._check_node(node_a)
        self._check_node(node_b)
        self._Kab[node_a, node_b] += block.T

    def get_Kab(self, node_a: int, node_b: int) -> np.ndarray:
        """Accumulated block for (a, b), flattened row-major (n_dim * n_dim,)."""
        self._check_node(node_a)
        self._check_node(node_b)
        return self._Kab[node_a, node_b].ravel().copy()

    def clear_element(self) -> None:
        """Zero the stiffness blocks. Coordinates and gradients are kept."""
        self._Kab.fill(0.0)
        logger.debug("%s %s: stiffness blocks cleared", self.name, self.id)

    @property
    def K(self) -> np.ndarray:
        """Element stiffness matrix assembled from the nodal blocks.

        Returns
        -------
        np.ndarray
            (n_nodes * n_dim) x (n_nodes * n_dim), node-major DOF ordering.
        """
        n = self.n_dim
        K = np.zeros((self.dofs_count, self.dofs_count))
        for a in range(self.node_count):
            for b in range(self.node_count):
                K[a * n : (a + 1) * n, b * n : (b + 1) * n] = self.get_Kab(a, b).reshape(n, n)
        return K

    def __repr__(self):
        return f"<{type(self).__name__} id={self.id} n_dim={self.n_dim}>"


ELEMENT_TYPES = {}


def _element_map():
    if not ELEMENT_TYPES:
        from .QUAD import QUAD4
        from .SOLID import HEXA8, TETRA1
        from .TRIA import TRIA1

        ELEMENT_TYPES.update(
            {
                ElementKind.TRIA1: TRIA1,
                ElementKind.QUAD4: QUAD4,
                ElementKind.TETRA1: TETRA1,
                ElementKind.HEXA8: HEXA8,
            }
        )
    return ELEMENT_TYPES


class ElementFactory:
    @staticmethod
    def get_element(
        kind: Union[ElementKind, str], context: AnalysisContext, element_id: Optional[int] = None
    ) -> FemElement:
        """Build an element of the requested type.

        Raises
        ------
        ValueError
            If the kind is unknown or does not match ``context.n_dim``.
        """
        try:
            element = _element_map()[ElementKind(kind)]
        except ValueError:
            raise ValueError(
                f"Unknown element kind: {kind}. Valid: {[k.value for k in ElementKind]}"
            ) from None
        return element(context, element_id=element_id)

    @staticmethod
    def from_config(config: KernelConfig, element_id: Optional[int] = None) -> FemElement:
        return ElementFactory.get_element(config.elements.kind, config.analysis, element_id)


def check_consistent_dimension(elements: Iterable[FemElement]) -> int:
    """Return the spatial dimension shared by ``elements``.

    Raises
    ------
    ValueError
        If the elements do not all use the same dimension, or none is given.
    """
    dims = {element.n_dim for element in elements}
    if len(dims) != 1:
        raise ValueError(f"Elements must share a single spatial dimension, got {sorted(dims)}")
    return dims.pop()
