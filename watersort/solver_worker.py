"""
Solver Worker Module for the Water Sort solver

Provides a background QThread worker that drives a BatchRunner over every
wildcard possibility of a puzzle. Communicates with the host via Qt
signals for thread-safe progress updates.
"""

import logging
from typing import Optional, Sequence

from PyQt5.QtCore import QThread, pyqtSignal

from watersort.batch_runner import BatchResult, BatchRunner, BatchState
from watersort.solver import DEFAULT_MAX_STEPS, PuzzleState


# Configure module logger
logger = logging.getLogger(__name__)


class BatchWorker(QThread):
    """
    Background worker thread for a batch solve.

    Solves possibilities one at a time, pausing ``yield_delay_ms`` between
    them so a host event loop stays responsive. Stop requests are honored
    before the next possibility starts.

    Signals:
        status_changed(str): Emitted when worker status changes
        progress_changed(int, int, int): (tested, total, solutions found)
        solution_found(object): Emitted with each new PossibilitySolution
        batch_finished(object): Emitted with the final BatchResult
        error_occurred(str): Emitted when an error occurs

    Example:
        worker = BatchWorker(definition, colors)
        worker.progress_changed.connect(ui.set_progress)
        worker.batch_finished.connect(ui.show_solutions)
        worker.start()
        # ...
        worker.request_stop()
        worker.wait()
    """

    # Signals for host updates (thread-safe)
    status_changed = pyqtSignal(str)
    progress_changed = pyqtSignal(int, int, int)  # (tested, total, found)
    solution_found = pyqtSignal(object)           # PossibilitySolution
    batch_finished = pyqtSignal(object)           # BatchResult
    error_occurred = pyqtSignal(str)

    # Pause between possibilities used by the interactive editor
    DEFAULT_YIELD_DELAY_MS = 50

    def __init__(self, definition: PuzzleState, colors: Sequence[str],
                 max_steps: int = DEFAULT_MAX_STEPS,
                 yield_delay_ms: int = DEFAULT_YIELD_DELAY_MS,
                 strategy_name: Optional[str] = None):
        """
        Initialize the batch worker.

        Args:
            definition: Puzzle definition, possibly holding wildcards
            colors: Available concrete colors for wildcard expansion
            max_steps: Search budget for each possibility
            yield_delay_ms: Pause between possibilities in milliseconds
            strategy_name: Name of solving strategy (default "bfs")
        """
        super().__init__()
        self.definition = definition
        self.colors = list(colors)
        self.yield_delay_ms = yield_delay_ms
        self._runner = BatchRunner(max_steps=max_steps, strategy_name=strategy_name)
        self._result: Optional[BatchResult] = None

    @property
    def result(self) -> Optional[BatchResult]:
        """Final result, or None until the batch has finished."""
        return self._result

    def run(self):
        """
        Worker body. Called when thread starts.

        May also be called directly to run the batch on the calling thread.
        """
        logger.info("Batch worker started")
        self.status_changed.emit("Running")

        reported = 0
        try:
            for progress in self._runner.iter_run(self.definition, self.colors):
                if progress.solutions_found > reported:
                    for solution in self._runner.solutions_since(reported):
                        self.solution_found.emit(solution)
                    reported = progress.solutions_found

                self.progress_changed.emit(
                    progress.tested_possibilities,
                    progress.total_possibilities,
                    progress.solutions_found,
                )

                if self.yield_delay_ms > 0 and progress.tested_possibilities < progress.total_possibilities:
                    self.msleep(self.yield_delay_ms)
        except Exception as e:
            logger.exception("Error in batch worker")
            self.error_occurred.emit(str(e))
            self.status_changed.emit("Error")
            return

        self._result = self._runner.result
        if self._result.was_cancelled:
            self.status_changed.emit(
                f"Stopped ({self._result.solutions_found} solutions so far)"
            )
        else:
            self.status_changed.emit(
                f"Completed ({self._result.solutions_found} solutions)"
            )
        self.batch_finished.emit(self._result)
        logger.info("Batch worker stopped")

    def request_stop(self):
        """
        Request the worker to stop gracefully.

        The possibility being solved runs to completion first.
        Use wait() after calling this to block until stopped.
        """
        logger.info("Stop requested")
        self._runner.cancel()

    def is_running(self) -> bool:
        """
        Check if the batch is currently running.

        Returns:
            True if possibilities are being processed, False otherwise
        """
        return self._runner.state is BatchState.RUNNING
