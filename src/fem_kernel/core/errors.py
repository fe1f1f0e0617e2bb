"""Exceptions raised by the element kernel."""

from typing import Optional


class GeometryError(ValueError):
    """Degenerate or inverted element: the mapping Jacobian is not positive.

    Parameters
    ----------
    element : str
        Name of the element type that failed.
    gauss : int
        Index of the quadrature point where the failure was detected.
    det_J : float
        Offending Jacobian determinant.
    configuration : str, optional
        ``"reference"`` or ``"current"``.
    """

    def __init__(
        self, element: str, gauss: int, det_J: float, configuration: Optional[str] = None
    ):
        self.element = element
        self.gauss = gauss
        self.det_J = det_J
        self.configuration = configuration
        where = f" ({configuration} configuration)" if configuration else ""
        super().__init__(
            f"Non-positive Jacobian determinant in {element} at Gauss point {gauss}{where}: {det_J}"
        )


class ElementStateError(RuntimeError):
    """Element queried or computed in an invalid state."""
