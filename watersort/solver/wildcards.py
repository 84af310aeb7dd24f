"""
Wildcard Module - Resolve placeholder layers into concrete puzzles.

A definition with ``w`` wildcards and ``c`` available colors expands to
exactly ``c ** w`` possibilities. Callers bound ``w`` and ``c`` before
expanding.
"""

import itertools
from typing import Iterator, List, Sequence, Tuple

from .state import PuzzleState, WILDCARD, clone_state


def find_wildcards(state: PuzzleState) -> List[Tuple[int, int]]:
    """
    Locate every wildcard layer.

    Args:
        state: Puzzle definition

    Returns:
        (tube index, layer index) pairs, tube ascending then layer ascending
    """
    return [
        (tube_idx, layer_idx)
        for tube_idx, tube in enumerate(state.tubes)
        for layer_idx, color in enumerate(tube.layers)
        if color == WILDCARD
    ]


def _check_colors(colors: Sequence[str], wildcard_count: int) -> None:
    if WILDCARD in colors:
        raise ValueError(f"Available colors must not contain the wildcard '{WILDCARD}'")
    if wildcard_count and not colors:
        raise ValueError("Available colors must be non-empty when wildcards are present")


def count_possibilities(state: PuzzleState, colors: Sequence[str]) -> int:
    """
    Count the possibilities expand_wildcards() would produce.

    Args:
        state: Puzzle definition
        colors: Available concrete colors

    Returns:
        ``len(colors) ** wildcard_count`` (1 when there are no wildcards)
    """
    wildcard_count = len(find_wildcards(state))
    _check_colors(colors, wildcard_count)
    return len(colors) ** wildcard_count


def iter_possibilities(state: PuzzleState, colors: Sequence[str]) -> Iterator[PuzzleState]:
    """
    Lazily generate every wildcard assignment.

    The first wildcard in scan order varies slowest, so the possibility at
    flat index ``k`` is ``k`` read in base ``len(colors)``, one digit per
    wildcard.

    Args:
        state: Puzzle definition, possibly holding wildcards
        colors: Available concrete colors (order sets output order)

    Yields:
        Independent, wildcard-free PuzzleState objects

    Raises:
        ValueError: If wildcards exist and colors is empty, or colors
            contains the wildcard token
    """
    positions = find_wildcards(state)
    _check_colors(colors, len(positions))

    if not positions:
        yield clone_state(state)
        return

    for choice in itertools.product(colors, repeat=len(positions)):
        possibility = state
        for (tube_idx, layer_idx), color in zip(positions, choice):
            possibility = possibility.with_layer(tube_idx, layer_idx, color)
        yield clone_state(possibility)


def expand_wildcards(state: PuzzleState, colors: Sequence[str]) -> List[PuzzleState]:
    """
    Expand a definition into the full list of concrete possibilities.

    Args:
        state: Puzzle definition, possibly holding wildcards
        colors: Available concrete colors

    Returns:
        List of ``len(colors) ** wildcards`` states, or a single clone when
        the definition has no wildcards
    """
    return list(iter_possibilities(state, colors))
