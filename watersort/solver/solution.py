"""
Solution Module - Result of a solve and replayable solution history.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .move import Move
from .rules import pour_once
from .state import PuzzleState, clone_state


class SolveStatus(Enum):
    """
    Outcome of a search.

    States:
        SOLVED: A solving move sequence was found (empty if already solved)
        UNSOLVABLE: Every reachable state was visited without a solution
        EXHAUSTED: The step budget ran out before the search space did
    """
    SOLVED = "solved"
    UNSOLVABLE = "unsolvable"
    EXHAUSTED = "exhausted"


@dataclass
class SolutionMetrics:
    """
    Performance metrics for solution computation.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        states_explored: Number of search nodes dequeued
        states_generated: Number of new states added to the visited set
        strategy_name: Name of strategy that computed this solution
    """
    computation_time_ms: float = 0.0
    states_explored: int = 0
    states_generated: int = 0
    strategy_name: str = ""


@dataclass
class Solution:
    """
    Result of a strategy computation.

    Attributes:
        moves: Ordered sequence of moves (empty unless status is SOLVED)
        status: Search outcome
        metrics: Performance statistics
    """
    moves: List[Move] = field(default_factory=list)
    status: SolveStatus = SolveStatus.EXHAUSTED
    metrics: SolutionMetrics = field(default_factory=SolutionMetrics)

    @property
    def is_solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    @property
    def move_count(self) -> int:
        """Number of moves in solution."""
        return len(self.moves)

    @property
    def has_moves(self) -> bool:
        """Check if solution has any moves."""
        return len(self.moves) > 0


@dataclass
class History:
    """
    Replayable record of a solution.

    ``states[0]`` is the initial state and ``states[k]`` is the result of
    applying ``moves[0..k-1]``.

    Attributes:
        states: Puzzle states, one more than there are moves
        moves: Moves linking consecutive states
    """
    states: List[PuzzleState] = field(default_factory=list)
    moves: List[Move] = field(default_factory=list)

    @classmethod
    def replay(cls, initial: PuzzleState, moves: Sequence[Move]) -> 'History':
        """
        Rebuild the state sequence by applying each move in turn.

        Args:
            initial: Starting state (cloned, never referenced)
            moves: Moves to apply in order

        Returns:
            History with len(moves) + 1 states

        Raises:
            ValueError: If a move is not legal in the state it is applied to
        """
        current = clone_state(initial)
        states = [current]
        for step, move in enumerate(moves):
            next_state = pour_once(current, move.source, move.target)
            if next_state is None:
                raise ValueError(f"Move {step} ({move}) is not legal in its state")
            states.append(next_state)
            current = next_state
        return cls(states=states, moves=list(moves))

    @property
    def step_count(self) -> int:
        return len(self.moves)

    @property
    def initial_state(self) -> Optional[PuzzleState]:
        return self.states[0] if self.states else None

    @property
    def final_state(self) -> Optional[PuzzleState]:
        return self.states[-1] if self.states else None

    def state_after(self, move_index: int) -> PuzzleState:
        """
        Get the state after executing the move at ``move_index``.

        Raises:
            IndexError: If index out of range
        """
        if not 0 <= move_index < len(self.moves):
            raise IndexError(f"Move index {move_index} out of range")
        return self.states[move_index + 1]
