"""
Strategies Package - Concrete strategy implementations.

Import this module to register all built-in strategies.
"""

from .breadth_first import BreadthFirstStrategy, DEFAULT_MAX_STEPS, search, solve

__all__ = [
    "BreadthFirstStrategy",
    "DEFAULT_MAX_STEPS",
    "search",
    "solve",
]
