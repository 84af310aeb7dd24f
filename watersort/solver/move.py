"""
Move Module - Represents one pour between two tubes.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Move:
    """
    Represents a pour from one tube into another.

    A move only has meaning relative to the state it was computed from,
    since tubes are addressed by their positional index.

    Attributes:
        source: Index of the tube poured from
        target: Index of the tube poured into
    """
    source: int
    target: int

    def to_dict(self) -> Dict[str, int]:
        """Convert to ``{"from": source, "to": target}``."""
        return {"from": self.source, "to": self.target}

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"
