from .diagnostics import output_grad_N_X

__all__ = ["output_grad_N_X"]
