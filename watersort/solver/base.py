"""
Base Strategy Module - Abstract base class for solving strategies.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Tuple

from .rules import pour_once
from .solution import Solution
from .state import PuzzleState


class SolverStrategy(ABC):
    """
    Abstract base class for all solving strategies.

    Subclasses must implement the solve() method and define
    name and description class attributes.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description
    """
    name: str = "base"
    description: str = "Base strategy"

    @abstractmethod
    def solve(self, state: PuzzleState) -> Solution:
        """
        Compute a solution for the given wildcard-free puzzle state.

        Args:
            state: Initial puzzle state

        Returns:
            Solution with moves, status and metrics
        """
        pass

    def find_legal_moves(self, state: PuzzleState) -> Iterator[Tuple[int, int, PuzzleState]]:
        """
        Generate every legal pour from ``state``.

        Pairs are visited with the source index ascending in the outer
        loop and the target index ascending in the inner loop.

        Args:
            state: Current puzzle state

        Yields:
            (source, target, resulting state) tuples
        """
        n = len(state.tubes)
        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                next_state = pour_once(state, i, j)
                if next_state is not None:
                    yield i, j, next_state
