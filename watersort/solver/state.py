"""
Puzzle State Module - Immutable tube and puzzle representation.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .move import Move


# Placeholder layer, only valid in a puzzle definition
WILDCARD = "?"


@dataclass(frozen=True)
class Tube:
    """
    Immutable capacity-bounded stack of color layers.

    Attributes:
        capacity: Maximum number of layers the tube can hold
        layers: Color tokens, index 0 = bottom, last index = top
    """
    capacity: int
    layers: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.capacity, int) or self.capacity <= 0:
            raise ValueError(f"Tube capacity must be a positive int, got {self.capacity!r}")
        if not isinstance(self.layers, tuple):
            object.__setattr__(self, "layers", tuple(self.layers))
        if len(self.layers) > self.capacity:
            raise ValueError(
                f"Tube holds {len(self.layers)} layers but capacity is {self.capacity}"
            )

    @property
    def is_empty(self) -> bool:
        return not self.layers

    @property
    def is_full(self) -> bool:
        return len(self.layers) == self.capacity

    @property
    def free_space(self) -> int:
        """Number of layers that can still be poured in."""
        return self.capacity - len(self.layers)

    @property
    def top(self):
        """Top color, or None for an empty tube."""
        return self.layers[-1] if self.layers else None

    @property
    def top_run(self) -> int:
        """
        Length of the run of the top color.

        Scans downward from the top until a different color or the
        bottom is reached. Empty tubes have a run of 0.
        """
        if not self.layers:
            return 0
        top = self.layers[-1]
        count = 0
        for color in reversed(self.layers):
            if color != top:
                break
            count += 1
        return count

    @property
    def has_wildcard(self) -> bool:
        return WILDCARD in self.layers


@dataclass(frozen=True)
class PuzzleState:
    """
    Immutable puzzle snapshot.

    Tube identity is the positional index into ``tubes``; the order is
    fixed for a puzzle and defines the move address space.

    Attributes:
        tubes: Tuple of Tube objects
    """
    tubes: Tuple[Tube, ...]

    def __post_init__(self):
        if not isinstance(self.tubes, tuple):
            object.__setattr__(self, "tubes", tuple(self.tubes))

    @classmethod
    def from_lists(cls, capacity: int, layers_per_tube: Sequence[Sequence[str]]) -> 'PuzzleState':
        """
        Create a PuzzleState where every tube shares one capacity.

        Args:
            capacity: Capacity of every tube
            layers_per_tube: Bottom-to-top layers for each tube

        Returns:
            PuzzleState instance
        """
        return cls(tubes=tuple(Tube(capacity, tuple(layers)) for layers in layers_per_tube))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PuzzleState':
        """
        Create a PuzzleState from its dict form.

        Args:
            data: ``{"tubes": [{"capacity": int, "layers": [...]}, ...]}``

        Returns:
            PuzzleState instance
        """
        return cls(tubes=tuple(
            Tube(int(tube["capacity"]), tuple(tube.get("layers", ())))
            for tube in data["tubes"]
        ))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dict form accepted by from_dict()."""
        return {
            "tubes": [
                {"capacity": tube.capacity, "layers": list(tube.layers)}
                for tube in self.tubes
            ]
        }

    def to_list(self) -> List[List[str]]:
        """
        Convert to mutable nested list representation.

        Returns:
            One list of layers per tube (bottom to top)
        """
        return [list(tube.layers) for tube in self.tubes]

    @property
    def tube_count(self) -> int:
        return len(self.tubes)

    @property
    def has_wildcards(self) -> bool:
        return any(tube.has_wildcard for tube in self.tubes)

    def with_layer(self, tube_idx: int, layer_idx: int, color: str) -> 'PuzzleState':
        """
        Return a copy with a single layer replaced.

        Args:
            tube_idx: Tube index
            layer_idx: Layer index inside the tube (0 = bottom)
            color: New color token for that layer

        Returns:
            New PuzzleState; this one is unchanged
        """
        tube = self.tubes[tube_idx]
        layers = list(tube.layers)
        layers[layer_idx] = color
        tubes = list(self.tubes)
        tubes[tube_idx] = Tube(tube.capacity, tuple(layers))
        return PuzzleState(tubes=tuple(tubes))

    def apply_move(self, move: 'Move') -> 'PuzzleState | None':
        """
        Apply a move to create a new puzzle state.

        Args:
            move: Move to apply

        Returns:
            New PuzzleState, or None if the pour is not legal
        """
        from .rules import pour_once
        return pour_once(self, move.source, move.target)

    def __str__(self) -> str:
        return " ".join(
            "[" + ",".join(tube.layers) + "]" + f"/{tube.capacity}"
            for tube in self.tubes
        )


def clone_state(state: PuzzleState) -> PuzzleState:
    """
    Copy a puzzle state into new Tube and PuzzleState objects.

    Args:
        state: State to copy

    Returns:
        Independent PuzzleState equal to ``state``
    """
    return PuzzleState(tubes=tuple(
        Tube(tube.capacity, tuple(tube.layers)) for tube in state.tubes
    ))


def canonical_key(state: PuzzleState) -> Tuple[Tuple[int, Tuple[str, ...]], ...]:
    """
    Build the deduplication key for a state.

    Two states share a key iff they have the same tube count and, tube by
    tube in index order, the same capacity and layer sequence.

    Args:
        state: State to key

    Returns:
        Hashable tuple of (capacity, layers) pairs
    """
    return tuple((tube.capacity, tube.layers) for tube in state.tubes)
