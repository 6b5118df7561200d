"""CLI command modules."""

from .analyze import analyze
from .profile import merge, refine, reset, show
from .serve import serve

__all__ = [
    "merge",
    "refine",
    "show",
    "reset",
    "analyze",
    "serve",
]
