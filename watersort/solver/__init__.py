"""
Solver Package - Search engine for the liquid-sorting puzzle.

This package models tubes of colored layers, the pour rules between them,
and a pluggable strategy framework whose built-in breadth-first strategy
finds a solution with the fewest pours. Wildcard layers in a puzzle
definition are expanded into concrete possibilities before solving.

Public API:
    - Tube, PuzzleState: Immutable puzzle representation
    - clone_state(), canonical_key(): Copying and deduplication keys
    - Move: One pour between two tubes
    - can_pour(), pour_once(), is_solved(): Pour rules
    - Solution, SolutionMetrics, SolveStatus, History: Results
    - solve(), search(): Breadth-first solving
    - expand_wildcards(), iter_possibilities(): Wildcard expansion
    - SolverStrategy, create_strategy(), register_strategy(): Strategies

Usage:
    from watersort.solver import PuzzleState, solve

    state = PuzzleState.from_lists(4, [["A", "A", "B", "B"], ["B", "B"], ["A", "A"]])
    moves = solve(state)
    for move in moves:
        print(f"Pour {move.source} into {move.target}")
"""

# Core data structures
from .state import Tube, PuzzleState, WILDCARD, clone_state, canonical_key
from .move import Move
from .rules import can_pour, pour_once, is_solved
from .solution import Solution, SolutionMetrics, SolveStatus, History

# Strategy framework
from .base import SolverStrategy
from .factory import (
    create_strategy,
    get_strategy_names,
    get_default_strategy_name,
    register_strategy,
)

# Import strategies to register them
from . import strategies
from .strategies import DEFAULT_MAX_STEPS, search, solve

from .wildcards import (
    find_wildcards,
    count_possibilities,
    iter_possibilities,
    expand_wildcards,
)

__all__ = [
    # Data structures
    "Tube",
    "PuzzleState",
    "WILDCARD",
    "clone_state",
    "canonical_key",
    "Move",
    # Rules
    "can_pour",
    "pour_once",
    "is_solved",
    # Results
    "Solution",
    "SolutionMetrics",
    "SolveStatus",
    "History",
    # Strategy framework
    "SolverStrategy",
    "create_strategy",
    "get_strategy_names",
    "get_default_strategy_name",
    "register_strategy",
    "DEFAULT_MAX_STEPS",
    "search",
    "solve",
    # Wildcards
    "find_wildcards",
    "count_possibilities",
    "iter_possibilities",
    "expand_wildcards",
]
