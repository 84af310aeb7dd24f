"""
Batch Runner Module - Solve every wildcard possibility of a puzzle.

The BatchRunner expands a puzzle definition, solves each possibility in
order and collects the ones that have a solution. It suspends only between
possibilities: iter_run() yields a progress event after each one, and the
cancellation flag is checked before the next one starts. A solve already
in progress always runs to completion.

State Flow:
    IDLE -> RUNNING -> COMPLETED
                   \\-> CANCELLED
    (terminal states return to IDLE before the next run)

For the search itself, see the watersort.solver package.
"""

import logging
import queue
import threading
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterator, List, Optional, Sequence

from watersort.solver import (
    DEFAULT_MAX_STEPS, History, Move, PuzzleState, SolverStrategy,
    count_possibilities, create_strategy, get_default_strategy_name,
    iter_possibilities,
)

logger = logging.getLogger(__name__)


__all__ = [
    "BatchState",
    "BatchProgress",
    "PossibilitySolution",
    "BatchResult",
    "BatchRunner",
    "BatchHandle",
    "run_batch",
]


class BatchState(Enum):
    """
    Batch state machine states.

    States:
        IDLE: No run in progress; a new run may start
        RUNNING: Possibilities are being solved
        CANCELLED: Stopped early on request
        COMPLETED: Every possibility was processed
    """
    IDLE = auto()
    RUNNING = auto()
    CANCELLED = auto()
    COMPLETED = auto()


@dataclass(frozen=True)
class BatchProgress:
    """Progress event emitted after each possibility."""
    tested_possibilities: int
    total_possibilities: int
    solutions_found: int


@dataclass
class PossibilitySolution:
    """
    A solved possibility.

    Attributes:
        index: Position of the possibility in expansion order
        possibility: Wildcard-free puzzle that was solved
        moves: Minimal move sequence
        history: States visited while replaying the moves
    """
    index: int
    possibility: PuzzleState
    moves: List[Move]
    history: History


@dataclass
class BatchResult:
    """Accumulated outcome of a batch run."""
    solutions: List[PossibilitySolution] = field(default_factory=list)
    tested_possibilities: int = 0
    total_possibilities: int = 0
    state: BatchState = BatchState.IDLE

    @property
    def was_cancelled(self) -> bool:
        return self.state is BatchState.CANCELLED

    @property
    def solutions_found(self) -> int:
        return len(self.solutions)


class BatchRunner:
    """
    Runs the solver over every possibility of a puzzle definition.

    Example:
        runner = BatchRunner(max_steps=2000)
        for progress in runner.iter_run(definition, colors):
            print(progress.tested_possibilities, "/", progress.total_possibilities)
            if should_stop():
                runner.cancel()
        result = runner.result
    """

    def __init__(self, max_steps: int = DEFAULT_MAX_STEPS,
                 strategy_name: Optional[str] = None,
                 progress_callback: Optional[Callable[[BatchProgress], None]] = None):
        """
        Initialize the batch runner.

        Args:
            max_steps: Search budget passed to the strategy for each possibility
            strategy_name: Name of solving strategy (default "bfs")
            progress_callback: Optional callback receiving each BatchProgress
        """
        self.max_steps = max_steps
        self.progress_callback = progress_callback
        self._strategy: SolverStrategy = create_strategy(
            strategy_name or get_default_strategy_name(), max_steps=max_steps
        )

        self._state = BatchState.IDLE
        self._cancel_flag = threading.Event()

        self._solutions: List[PossibilitySolution] = []
        self._tested = 0
        self._total = 0

    @property
    def state(self) -> BatchState:
        """Get current state machine state."""
        return self._state

    @property
    def strategy_name(self) -> str:
        return self._strategy.name

    @property
    def result(self) -> BatchResult:
        """Snapshot of the solutions and counters accumulated so far."""
        return BatchResult(
            solutions=list(self._solutions),
            tested_possibilities=self._tested,
            total_possibilities=self._total,
            state=self._state,
        )

    def solutions_since(self, start: int) -> List[PossibilitySolution]:
        """
        Solutions recorded at or after position ``start``.

        Only that tail is copied.
        """
        return self._solutions[start:]

    def cancel(self) -> None:
        """
        Request cancellation.

        Takes effect before the next possibility starts. A request made
        while idle applies to the next run.
        """
        logger.info("Batch cancellation requested")
        self._cancel_flag.set()

    def reset(self) -> None:
        """
        Return a finished runner to IDLE.

        Raises:
            RuntimeError: If a batch is running
        """
        if self._state is BatchState.RUNNING:
            raise RuntimeError("Cannot reset while a batch is running")
        self._state = BatchState.IDLE
        self._cancel_flag.clear()

    def iter_run(self, definition: PuzzleState, colors: Sequence[str]) -> Iterator[BatchProgress]:
        """
        Solve every possibility, yielding progress after each one.

        Each yield is a suspension point where the caller may observe
        progress or call cancel(). Closing the generator early counts as
        a cancellation.

        Args:
            definition: Puzzle definition, possibly holding wildcards
            colors: Available concrete colors for wildcard expansion

        Yields:
            BatchProgress after each possibility

        Raises:
            RuntimeError: If a batch is already running
        """
        if self._state is BatchState.RUNNING:
            raise RuntimeError("A batch is already running")
        if self._state is not BatchState.IDLE:
            self.reset()

        self._solutions = []
        self._tested = 0
        self._total = count_possibilities(definition, colors)
        self._state = BatchState.RUNNING
        logger.info(f"Batch started: {self._total} possibilities, strategy={self.strategy_name}")

        outcome = BatchState.CANCELLED
        try:
            for index, possibility in enumerate(iter_possibilities(definition, colors)):
                if self._cancel_flag.is_set():
                    break

                self._process_possibility(index, possibility)
                self._tested = index + 1

                progress = BatchProgress(
                    tested_possibilities=self._tested,
                    total_possibilities=self._total,
                    solutions_found=len(self._solutions),
                )
                if self.progress_callback:
                    self.progress_callback(progress)
                yield progress
            else:
                outcome = BatchState.COMPLETED
        except Exception:
            outcome = BatchState.IDLE
            raise
        finally:
            self._state = outcome
            if outcome is not BatchState.IDLE:
                logger.info(
                    f"Batch {outcome.name.lower()}: {self._tested}/{self._total} tested, "
                    f"{len(self._solutions)} solutions"
                )

    def run(self, definition: PuzzleState, colors: Sequence[str]) -> BatchResult:
        """
        Run a whole batch synchronously.

        Args:
            definition: Puzzle definition, possibly holding wildcards
            colors: Available concrete colors for wildcard expansion

        Returns:
            Final BatchResult (COMPLETED or CANCELLED)
        """
        for _ in self.iter_run(definition, colors):
            pass
        return self.result

    def _process_possibility(self, index: int, possibility: PuzzleState) -> None:
        """Solve one possibility and record it if it needs at least one move."""
        solution = self._strategy.solve(possibility)

        if not solution.is_solved:
            logger.debug(f"Possibility {index}: {solution.status.value}")
            return
        if not solution.has_moves:
            logger.debug(f"Possibility {index}: already solved, skipped")
            return

        history = History.replay(possibility, solution.moves)
        self._solutions.append(PossibilitySolution(
            index=index,
            possibility=possibility,
            moves=list(solution.moves),
            history=history,
        ))
        logger.debug(f"Possibility {index}: solved in {solution.move_count} moves")


class BatchHandle:
    """
    Handle to a batch running on a background thread.

    Example:
        handle = run_batch(definition, colors)
        for progress in handle.events():
            if progress.tested_possibilities >= 10:
                handle.cancel()
        result = handle.wait()
    """

    def __init__(self, runner: BatchRunner, definition: PuzzleState, colors: Sequence[str]):
        self._runner = runner
        self._events: "queue.Queue[Optional[BatchProgress]]" = queue.Queue()
        self._error: Optional[BaseException] = None
        self._thread = threading.Thread(
            target=self._run,
            args=(definition, list(colors)),
            name="watersort-batch",
            daemon=True,
        )

    def start(self) -> None:
        self._thread.start()

    def _run(self, definition: PuzzleState, colors: List[str]) -> None:
        try:
            for progress in self._runner.iter_run(definition, colors):
                self._events.put(progress)
        except Exception as e:
            logger.exception("Error in batch thread")
            self._error = e
        finally:
            # End-of-stream marker
            self._events.put(None)

    def cancel(self) -> None:
        """Request cancellation before the next possibility."""
        self._runner.cancel()

    def is_running(self) -> bool:
        return self._thread.is_alive()

    def events(self) -> Iterator[BatchProgress]:
        """
        Iterate progress events until the batch ends.

        The stream can be consumed once.
        """
        while True:
            progress = self._events.get()
            if progress is None:
                return
            yield progress

    def wait(self, timeout: Optional[float] = None) -> BatchResult:
        """
        Block until the batch ends.

        Args:
            timeout: Seconds to wait, or None to wait forever

        Returns:
            Final BatchResult

        Raises:
            TimeoutError: If the batch is still running after timeout
        """
        self._thread.join(timeout)
        if self._thread.is_alive():
            raise TimeoutError("Batch still running")
        if self._error is not None:
            raise self._error
        return self._runner.result


def run_batch(definition: PuzzleState, colors: Sequence[str],
              max_steps: int = DEFAULT_MAX_STEPS,
              strategy_name: Optional[str] = None) -> BatchHandle:
    """
    Start a batch on a background thread.

    Args:
        definition: Puzzle definition, possibly holding wildcards
        colors: Available concrete colors for wildcard expansion
        max_steps: Search budget for each possibility
        strategy_name: Name of solving strategy (default "bfs")

    Returns:
        Started BatchHandle
    """
    runner = BatchRunner(max_steps=max_steps, strategy_name=strategy_name)
    handle = BatchHandle(runner, definition, colors)
    handle.start()
    return handle
