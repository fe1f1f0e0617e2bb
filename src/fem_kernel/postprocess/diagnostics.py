"""
Diagnostic dump of computed shape function gradients.

The element kernel knows nothing about the mesh, so mesh information used to
label the report (global node ids and nodal positions) is passed in by the
caller. Nothing here feeds back into the computation.
"""

import logging
from typing import Callable, Optional, Sequence, TextIO

import numpy as np

from fem_kernel.core.errors import ElementStateError
from fem_kernel.core.helpers import format_matrix
from fem_kernel.elements.elements import FemElement

logger = logging.getLogger(__name__)

AXES = ("x", "y", "z")


def output_grad_N_X(
    element: FemElement,
    node_ids: Optional[Sequence[int]] = None,
    coordinates: Optional[Callable[[int], Sequence[float]]] = None,
    stream: Optional[TextIO] = None,
) -> str:
    """
    Write the shape function gradients of every Gauss point as tables.

    Parameters
    ----------
    element : FemElement
        Element whose gradients have been computed.
    node_ids : sequence of int, optional
        Global id of each local node, used as row labels. Local indices are
        used when omitted.
    coordinates : callable, optional
        Mesh accessor returning the position of a global node id. Requires
        ``node_ids`` to be useful; positions are appended to the row labels.
    stream : file-like, optional
        Destination of the report. When omitted the report is only logged at
        DEBUG level.

    Returns
    -------
    str
        The report.

    Raises
    ------
    ElementStateError
        If no gradient computation has run on the element.
    """
    if node_ids is not None and len(node_ids) != element.node_count:
        raise ValueError(
            f"{element.name} has {element.node_count} nodes, got {len(node_ids)} node ids"
        )
    ids = list(node_ids) if node_ids is not None else list(range(element.node_count))

    labels = []
    for global_id in ids:
        label = f"node {global_id}"
        if coordinates is not None:
            position = np.asarray(coordinates(global_id), dtype=float)
            label += " (" + ", ".join(f"{c:.3g}" for c in position) + ")"
        labels.append(label)
    columns = [f"dN/d{AXES[i]}" for i in range(element.n_dim)]

    lines = [f"{element.name} element {element.id}"]
    for gp in element.gauss_points:
        if not gp.is_computed:
            raise ElementStateError(f"No gradients computed for {element.name} element {element.id}")
        header = f"Gauss point {gp.index}: weight = {element.get_weight(gp.index):.6g}"
        for name, det_J in gp.computed_jacobians().items():
            header += f", {name} = {det_J:.6g}"
        header += f" [{gp.configuration} configuration]"
        lines.append(header)
        lines.append(
            format_matrix(
                gp.grad_N_X,
                max_size=max(8, element.node_count),
                row_labels=labels,
                col_labels=columns,
            )
        )

    report = "\n".join(lines)
    if stream is not None:
        stream.write(report + "\n")
    logger.debug(report)
    return report
