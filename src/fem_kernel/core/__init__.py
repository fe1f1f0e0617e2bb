"""
Core module for fem-kernel.

Provides the analysis configuration, error types and formatting helpers.
"""

from .config import AnalysisContext, ElementConfig, ElementKind, KernelConfig
from .errors import ElementStateError, GeometryError

__all__ = [
    "AnalysisContext",
    "ElementConfig",
    "ElementKind",
    "KernelConfig",
    "ElementStateError",
    "GeometryError",
]
