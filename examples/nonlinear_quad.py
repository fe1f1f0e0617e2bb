"""
Drive a single QUAD4 element through a few load increments the way a global
assembler would: update the current coordinates, recompute gradients, clear
and re-accumulate the nodal blocks, then harvest them.
"""

import logging
from pathlib import Path

import numpy as np

from fem_kernel import ElementFactory, KernelConfig
from fem_kernel.core.helpers import format_matrix
from fem_kernel.postprocess import output_grad_N_X

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("nonlinear_quad")

config = KernelConfig.from_yaml(Path(__file__).parent / "kernel.yaml")
element = ElementFactory.from_config(config, element_id=0)

X = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
node_ids = [0, 1, 4, 3]
element.set_ref_coords(X)
element.compute_grad_linear()

for step, stretch in enumerate(np.linspace(1.0, 1.3, 4)):
    element.set_curr_coords(X * [stretch, 1.0])
    element.compute_grad_nonlinear()
    element.clear_element()

    for g in range(element.gauss_point_count):
        grad = element.get_grad_N(g)
        dv = element.get_weight(g) * element.get_J_x(g)
        for a in range(element.node_count):
            for b in range(a, element.node_count):
                K_ab = grad[a] @ grad[b] * dv * np.eye(2)
                element.add_Kab(K_ab, a, b)
                if a != b:
                    element.add_Kab_T(K_ab, b, a)

    volume = sum(
        element.get_weight(g) * element.get_J_x(g) for g in range(element.gauss_point_count)
    )
    logger.info("step %d: stretch %.2f, current area %.4f", step, stretch, volume)

print(output_grad_N_X(element, node_ids=node_ids, coordinates=lambda i: X[node_ids.index(i)]))
print(format_matrix(element.K))
