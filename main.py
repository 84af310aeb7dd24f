"""
Water Sort Solver - Entry Point

Loads a puzzle file, expands its wildcard layers and solves every
possibility on a background worker thread, printing progress and the
moves of each solution found.

The puzzle file uses the editor's export format:
    {
      "availableColors": ["#cfcecd", "#28cf99"],
      "tubes": [{"capacity": 4, "layers": ["#cfcecd", "?"]}, ...]
    }

Example:
    python main.py puzzle.json
    python main.py puzzle.json --max-steps 5000 --delay-ms 0
"""

import sys
import signal
import json
import logging
import argparse
from typing import List, Optional

from PyQt5.QtCore import QCoreApplication, QTimer

from watersort.batch_runner import BatchResult, PossibilitySolution
from watersort.settings import load_settings, update_settings
from watersort.solver import PuzzleState, count_possibilities
from watersort.solver_worker import BatchWorker


logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Configure console logging."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_puzzle(path: str) -> tuple:
    """
    Read a puzzle file.

    Args:
        path: Path to a JSON puzzle file

    Returns:
        (PuzzleState, list of available colors)
    """
    with open(path, 'r', encoding='utf-8') as f:
        config = json.load(f)
    definition = PuzzleState.from_dict(config)
    colors = list(config.get("availableColors", []))
    return definition, colors


class Application:
    """
    Command-line controller.

    Owns the worker thread and prints its signals to stdout.
    """

    # How often the event loop hands control back to Python signal handlers
    INTERRUPT_POLL_MS = 200

    def __init__(self, definition: PuzzleState, colors: List[str],
                 max_steps: int, yield_delay_ms: int, strategy_name: Optional[str] = None):
        self.definition = definition
        self.colors = colors
        self.max_steps = max_steps
        self.yield_delay_ms = yield_delay_ms
        self.strategy_name = strategy_name
        self.worker: Optional[BatchWorker] = None
        self.result: Optional[BatchResult] = None
        self.failed = False

    def setup(self, app: QCoreApplication):
        """Create the worker and connect signals."""
        self.worker = BatchWorker(
            self.definition,
            self.colors,
            max_steps=self.max_steps,
            yield_delay_ms=self.yield_delay_ms,
            strategy_name=self.strategy_name,
        )
        self.worker.status_changed.connect(self._on_status)
        self.worker.progress_changed.connect(self._on_progress)
        self.worker.solution_found.connect(self._on_solution)
        self.worker.batch_finished.connect(self._on_finished)
        self.worker.error_occurred.connect(self._on_error)
        self.worker.finished.connect(app.quit)

    def _on_status(self, status: str):
        logger.info(f"Status: {status}")

    def _on_progress(self, tested: int, total: int, found: int):
        print(f"Tested {tested}/{total} possibilities, {found} solutions")

    def _on_solution(self, solution: PossibilitySolution):
        moves = ", ".join(str(move) for move in solution.moves)
        print(f"Possibility {solution.index}: {len(solution.moves)} moves: {moves}")

    def _on_finished(self, result: BatchResult):
        self.result = result

    def _on_error(self, error_msg: str):
        logger.error(f"Worker error: {error_msg}")
        self.failed = True

    def request_stop(self):
        """Ask the worker to stop before its next possibility."""
        if self.worker and self.worker.isRunning():
            logger.info("Interrupted, stopping after the current possibility")
            self.worker.request_stop()

    def install_interrupt_handler(self) -> QTimer:
        """
        Route Ctrl+C to a graceful stop.

        Python signal handlers only run between bytecodes, so the returned
        timer keeps handing control back to the interpreter while Qt's
        event loop is running. Keep a reference to it.
        """
        signal.signal(signal.SIGINT, lambda *_: self.request_stop())
        timer = QTimer()
        timer.timeout.connect(lambda: None)
        timer.start(self.INTERRUPT_POLL_MS)
        return timer


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Water Sort Solver - Solve every wildcard possibility of a puzzle"
    )
    parser.add_argument("puzzle", help="Path to puzzle JSON file")
    parser.add_argument(
        "--colors", "-c",
        default=None,
        help="Available colors separated by ';' (overrides the puzzle file)"
    )
    parser.add_argument(
        "--max-steps", "-m",
        type=int,
        default=None,
        help="Search budget per possibility (default from settings: 2000)"
    )
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Pause between possibilities in milliseconds (default from settings: 50)"
    )
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="Store --max-steps and --delay-ms in config.json as new defaults"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the solver from the command line."""
    args = parse_args(argv)
    settings = load_settings()
    configure_logging(args.debug or settings.get("debug_enabled", False))

    if args.save_settings:
        settings = update_settings({
            "max_steps": args.max_steps,
            "yield_delay_ms": args.delay_ms,
        })

    try:
        definition, colors = load_puzzle(args.puzzle)
        if args.colors is not None:
            colors = [c.strip() for c in args.colors.split(";") if c.strip()]
        total = count_possibilities(definition, colors)
    except (OSError, KeyError, TypeError, ValueError) as e:
        logger.error(f"Cannot load puzzle {args.puzzle}: {e}")
        return 1

    max_steps = args.max_steps if args.max_steps is not None else settings["max_steps"]
    delay_ms = args.delay_ms if args.delay_ms is not None else settings["yield_delay_ms"]
    logger.info(f"Loaded {definition.tube_count} tubes, {total} possibilities")

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    application = Application(
        definition, colors, max_steps, delay_ms, settings.get("strategy_name")
    )
    application.setup(app)

    previous_handler = signal.getsignal(signal.SIGINT)
    interrupt_timer = application.install_interrupt_handler()
    application.worker.start()
    try:
        app.exec_()
    finally:
        interrupt_timer.stop()
        signal.signal(signal.SIGINT, previous_handler)
    application.worker.wait()

    if application.failed or application.result is None:
        return 1
    result = application.result
    if result.was_cancelled:
        print("Search stopped.")
    print(f"{result.solutions_found} solutions found "
          f"({result.tested_possibilities}/{result.total_possibilities} tested)")
    return 0 if result.solutions_found else 1


if __name__ == "__main__":
    sys.exit(main())
