"""
Breadth-First Strategy - Minimal-move search over pour transitions.

Every pour costs one move, so the first solved state reached in BFS order
uses the fewest moves. Visited states are keyed by canonical_key and the
first path to a state is kept.
"""

import logging
import time
from collections import deque
from typing import Deque, List, Optional, Set, Tuple

from ..base import SolverStrategy
from ..factory import register_strategy
from ..move import Move
from ..rules import is_solved
from ..solution import Solution, SolutionMetrics, SolveStatus
from ..state import PuzzleState, canonical_key, clone_state

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 2000


@register_strategy
class BreadthFirstStrategy(SolverStrategy):
    """
    Breadth-first search returning a shortest solving move sequence.

    The budget counts dequeued search nodes, not generated moves. When it
    runs out with nodes still queued the result is EXHAUSTED; when the
    queue empties first the puzzle is UNSOLVABLE.
    """
    name = "bfs"
    description = "Breadth-first search (fewest moves)"

    def __init__(self, max_steps: int = DEFAULT_MAX_STEPS):
        if max_steps < 0:
            raise ValueError(f"max_steps must be >= 0, got {max_steps}")
        self.max_steps = max_steps

    def solve(self, state: PuzzleState) -> Solution:
        start_time = time.perf_counter()

        if is_solved(state):
            return self._build_solution([], SolveStatus.SOLVED, 0, 0, start_time)

        logger.debug(f"BFS start: {state.tube_count} tubes, budget {self.max_steps}")

        initial = clone_state(state)
        queue: Deque[Tuple[PuzzleState, List[Move]]] = deque([(initial, [])])
        visited: Set = {canonical_key(initial)}
        steps = 0

        while queue and steps < self.max_steps:
            current, path = queue.popleft()
            steps += 1

            for i, j, next_state in self.find_legal_moves(current):
                key = canonical_key(next_state)
                if key in visited:
                    continue
                visited.add(key)

                moves = path + [Move(i, j)]
                if is_solved(next_state):
                    return self._build_solution(
                        moves, SolveStatus.SOLVED, steps, len(visited) - 1, start_time
                    )
                queue.append((next_state, moves))

        status = SolveStatus.EXHAUSTED if queue else SolveStatus.UNSOLVABLE
        return self._build_solution([], status, steps, len(visited) - 1, start_time)

    def _build_solution(
        self,
        moves: List[Move],
        status: SolveStatus,
        states_explored: int,
        states_generated: int,
        start_time: float
    ) -> Solution:
        """Build Solution object from computation results."""
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        logger.debug(
            f"BFS {status.value}: {len(moves)} moves, "
            f"{states_explored} explored, {elapsed_ms:.1f}ms"
        )

        return Solution(
            moves=moves,
            status=status,
            metrics=SolutionMetrics(
                computation_time_ms=elapsed_ms,
                states_explored=states_explored,
                states_generated=states_generated,
                strategy_name=self.name
            )
        )


def search(initial: PuzzleState, max_steps: int = DEFAULT_MAX_STEPS) -> Solution:
    """
    Run a breadth-first search and return the full result.

    Args:
        initial: Wildcard-free puzzle state
        max_steps: Budget of dequeued search nodes

    Returns:
        Solution with SOLVED, UNSOLVABLE or EXHAUSTED status
    """
    return BreadthFirstStrategy(max_steps=max_steps).solve(initial)


def solve(initial: PuzzleState, max_steps: int = DEFAULT_MAX_STEPS) -> Optional[List[Move]]:
    """
    Find a minimal solving move sequence.

    Args:
        initial: Wildcard-free puzzle state
        max_steps: Budget of dequeued search nodes

    Returns:
        List of moves (empty if already solved), or None if no solution
        was found within the budget
    """
    solution = search(initial, max_steps)
    if not solution.is_solved:
        return None
    return solution.moves
