"""
Pour Rules Module - Move legality and state transitions.

Illegal pours are an expected outcome during search and are reported as
None. Out-of-range tube indices and wildcard layers are caller errors and
raise immediately.
"""

from typing import Optional

from .state import PuzzleState, Tube, WILDCARD


def _require_concrete(tube: Tube) -> None:
    if tube.has_wildcard:
        raise ValueError(
            f"Tube contains wildcard '{WILDCARD}'; resolve wildcards before pouring or solving"
        )


def _require_index(state: PuzzleState, index: int) -> None:
    if not 0 <= index < len(state.tubes):
        raise IndexError(f"Tube index {index} out of range for {len(state.tubes)} tubes")


def can_pour(from_tube: Tube, to_tube: Tube) -> bool:
    """
    Check whether ``from_tube`` can pour into ``to_tube``.

    Legal iff the source is non-empty, the target is not full, and the
    target is either empty or has the same top color as the source.

    Args:
        from_tube: Tube poured from
        to_tube: Tube poured into

    Returns:
        True if the pour is legal

    Raises:
        ValueError: If either tube contains a wildcard
    """
    _require_concrete(from_tube)
    _require_concrete(to_tube)

    if from_tube.is_empty or to_tube.is_full:
        return False
    if to_tube.is_empty:
        return True
    return from_tube.top == to_tube.top


def pour_once(state: PuzzleState, from_idx: int, to_idx: int) -> Optional[PuzzleState]:
    """
    Pour the top color run of one tube into another.

    Moves ``min(top_run, free_space)`` layers. The given state is left
    unchanged.

    Args:
        state: Current puzzle state
        from_idx: Source tube index
        to_idx: Target tube index

    Returns:
        New PuzzleState, or None if from_idx == to_idx or the pour is illegal

    Raises:
        IndexError: If a tube index is out of range
        ValueError: If an addressed tube contains a wildcard
    """
    _require_index(state, from_idx)
    _require_index(state, to_idx)
    if from_idx == to_idx:
        return None

    source = state.tubes[from_idx]
    target = state.tubes[to_idx]
    if not can_pour(source, target):
        return None

    count = min(source.top_run, target.free_space)
    poured = source.layers[len(source.layers) - count:]

    tubes = list(state.tubes)
    tubes[from_idx] = Tube(source.capacity, source.layers[:len(source.layers) - count])
    tubes[to_idx] = Tube(target.capacity, target.layers + poured)
    return PuzzleState(tubes=tuple(tubes))


def is_solved(state: PuzzleState) -> bool:
    """
    Check whether every tube is empty or full of a single color.

    Args:
        state: Puzzle state to check

    Returns:
        True if the puzzle is sorted

    Raises:
        ValueError: If any tube contains a wildcard
    """
    for tube in state.tubes:
        _require_concrete(tube)
        if tube.is_empty:
            continue
        if not tube.is_full:
            return False
        if any(color != tube.layers[0] for color in tube.layers):
            return False
    return True
