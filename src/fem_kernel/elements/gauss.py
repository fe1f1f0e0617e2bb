from typing import Dict, Optional

import numpy as np

from fem_kernel.core.errors import ElementStateError

REFERENCE = "reference"
CURRENT = "current"


class GaussPoint:
    """Derived state of one quadrature point of an element.

    Holds the physical gradient of every shape function and the Jacobian
    determinants of the reference (``J_X``) and current (``J_x``)
    configurations. The arrays are overwritten in place on every gradient
    computation.

    Parameters
    ----------
    index : int
        Position of the point in the element's quadrature rule.
    n_nodes : int
        Number of nodes of the owning element.
    n_dim : int
        Spatial dimension of the analysis.
    """

    def __init__(self, index: int, n_nodes: int, n_dim: int):
        self.index = index
        self.grad_N_X = np.zeros((n_nodes, n_dim))
        self._J_X: Optional[float] = None
        self._J_x: Optional[float] = None
        self.configuration: Optional[str] = None

    @property
    def J_X(self) -> float:
        if self._J_X is None:
            raise ElementStateError(
                f"Reference Jacobian of Gauss point {self.index} queried before compute_grad_linear"
            )
        return self._J_X

    @property
    def J_x(self) -> float:
        if self._J_x is None:
            raise ElementStateError(
                f"Current Jacobian of Gauss point {self.index} queried before compute_grad_nonlinear"
            )
        return self._J_x

    def computed_jacobians(self) -> Dict[str, float]:
        """Jacobian determinants available so far, keyed by name."""
        jacobians = {}
        if self._J_X is not None:
            jacobians["J_X"] = self._J_X
        if self._J_x is not None:
            jacobians["J_x"] = self._J_x
        return jacobians

    @property
    def is_computed(self) -> bool:
        return self.configuration is not None

    def update(self, grad_N: np.ndarray, det_J: float, configuration: str) -> None:
        """Store the result of one gradient computation."""
        self.grad_N_X[...] = grad_N
        if configuration == REFERENCE:
            self._J_X = det_J
        else:
            self._J_x = det_J
        self.configuration = configuration

    def __repr__(self):
        return f"<GaussPoint index={self.index} configuration={self.configuration}>"
