"""
Wildcard expansion tests

Usage:
    pytest tests/test_wildcards.py
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from watersort.solver import (
    WILDCARD,
    PuzzleState,
    count_possibilities,
    expand_wildcards,
    find_wildcards,
    iter_possibilities,
)


COLORS = ["R", "G", "B"]


def make_definition():
    return PuzzleState.from_lists(4, [
        [WILDCARD, "A"],
        [],
        [WILDCARD],
    ])


def test_find_wildcards_scan_order():
    definition = PuzzleState.from_lists(4, [
        ["A", WILDCARD, WILDCARD],
        [WILDCARD],
        ["B"],
    ])
    assert find_wildcards(definition) == [(0, 1), (0, 2), (1, 0)]


def test_expansion_count():
    definition = make_definition()
    possibilities = expand_wildcards(definition, COLORS)
    assert len(possibilities) == 3 ** 2
    assert count_possibilities(definition, COLORS) == 9
    assert all(not p.has_wildcards for p in possibilities)


def test_expansion_order_matches_base_c_index():
    """Flat index k, read in base len(colors), gives each wildcard's color."""
    definition = make_definition()
    possibilities = expand_wildcards(definition, COLORS)

    for k, possibility in enumerate(possibilities):
        first, second = divmod(k, len(COLORS))
        assert possibility.tubes[0].layers == (COLORS[first], "A")
        assert possibility.tubes[2].layers == (COLORS[second],)
        assert possibility.tubes[1].layers == ()


def test_duplicate_colors_are_kept():
    definition = PuzzleState.from_lists(4, [[WILDCARD]])
    possibilities = expand_wildcards(definition, ["R", "R", "G"])
    assert [p.tubes[0].layers[0] for p in possibilities] == ["R", "R", "G"]


def test_no_wildcards_returns_single_clone():
    definition = PuzzleState.from_lists(4, [["A", "B"], []])
    possibilities = expand_wildcards(definition, COLORS)
    assert possibilities == [definition]
    assert possibilities[0] is not definition
    assert count_possibilities(definition, []) == 1
    assert expand_wildcards(definition, []) == [definition]


def test_definition_is_unchanged():
    definition = make_definition()
    before = definition.to_list()
    expand_wildcards(definition, COLORS)
    assert definition.to_list() == before


def test_iter_possibilities_is_lazy():
    definition = PuzzleState.from_lists(4, [[WILDCARD] * 4] * 5)
    generator = iter_possibilities(definition, COLORS)
    first = next(generator)
    assert first.to_list() == [["R"] * 4] * 5
    second = next(generator)
    assert second.tubes[4].layers == ("R", "R", "R", "G")


def test_empty_colors_with_wildcards_rejected():
    with pytest.raises(ValueError):
        expand_wildcards(make_definition(), [])
    with pytest.raises(ValueError):
        count_possibilities(make_definition(), [])


def test_wildcard_color_rejected():
    with pytest.raises(ValueError):
        expand_wildcards(make_definition(), ["R", WILDCARD])
