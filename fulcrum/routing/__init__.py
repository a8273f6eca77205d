"""
Fulcrum routing - Route value objects and the path router.
"""

from .route import Route
from .router import Router, compile_pattern, positional_params, POSITIONAL_FLAG

__all__ = [
    "Route",
    "Router",
    "compile_pattern",
    "positional_params",
    "POSITIONAL_FLAG",
]
