"""
Solver tests

Covers:
1. Tube and PuzzleState creation, cloning and canonical keys
2. Pour rules (can_pour, pour_once, is_solved)
3. Breadth-first strategy: minimality, status and budget
4. History replay

Usage:
    pytest tests/test_solver.py
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from watersort.solver import (
    WILDCARD,
    History,
    Move,
    PuzzleState,
    SolveStatus,
    Tube,
    can_pour,
    canonical_key,
    clone_state,
    create_strategy,
    get_default_strategy_name,
    get_strategy_names,
    is_solved,
    pour_once,
    search,
    solve,
)


def make_state(*tubes, capacity=4):
    return PuzzleState.from_lists(capacity, tubes)


# Solved in exactly two pours: (0,1) then (0,3)
TWO_MOVE_TUBES = (["A", "A", "A", "B"], ["B", "B", "B"], [], ["A"])


# ============================================================
# State model
# ============================================================

def test_tube_properties():
    """Tube helpers report fill level and the top color run."""
    tube = Tube(4, ("A", "B", "B"))
    assert not tube.is_empty
    assert not tube.is_full
    assert tube.free_space == 1
    assert tube.top == "B"
    assert tube.top_run == 2

    empty = Tube(3)
    assert empty.is_empty
    assert empty.top is None
    assert empty.top_run == 0


def test_tube_rejects_overfill_and_bad_capacity():
    with pytest.raises(ValueError):
        Tube(2, ("A", "A", "A"))
    with pytest.raises(ValueError):
        Tube(0)


def test_clone_is_independent():
    """Mutating a clone's list form never reaches the source."""
    state = make_state(["A", "B"], ["B"], [])
    cloned = clone_state(state)

    assert cloned == state
    assert cloned is not state
    assert all(a is not b for a, b in zip(cloned.tubes, state.tubes))

    layers = cloned.to_list()
    layers[0].append("Z")
    layers[1].clear()
    assert state.to_list() == [["A", "B"], ["B"], []]


def test_canonical_key_includes_capacity_and_order():
    a = PuzzleState((Tube(4, ("A",)), Tube(4)))
    b = PuzzleState((Tube(4, ("A",)), Tube(4)))
    assert canonical_key(a) == canonical_key(b)
    assert hash(canonical_key(a)) == hash(canonical_key(b))

    different_capacity = PuzzleState((Tube(5, ("A",)), Tube(4)))
    swapped = PuzzleState((Tube(4), Tube(4, ("A",))))
    assert canonical_key(a) != canonical_key(different_capacity)
    assert canonical_key(a) != canonical_key(swapped)


def test_dict_round_trip_and_with_layer():
    data = {"tubes": [{"capacity": 4, "layers": ["A", WILDCARD]}, {"capacity": 2, "layers": []}]}
    state = PuzzleState.from_dict(data)
    assert state.to_dict() == data
    assert state.has_wildcards

    resolved = state.with_layer(0, 1, "B")
    assert resolved.tubes[0].layers == ("A", "B")
    assert state.tubes[0].layers == ("A", WILDCARD)
    assert not resolved.has_wildcards


# ============================================================
# Pour rules
# ============================================================

def test_can_pour_rules():
    assert can_pour(Tube(4, ("A",)), Tube(4))
    assert can_pour(Tube(4, ("B", "A")), Tube(4, ("A",)))
    assert not can_pour(Tube(4), Tube(4))
    assert not can_pour(Tube(4, ("A",)), Tube(2, ("A", "A")))
    assert not can_pour(Tube(4, ("A",)), Tube(4, ("B",)))


def test_pour_once_noop_cases():
    state = make_state(["A"], ["B"], ["A", "A", "A", "A"])
    for i in range(state.tube_count):
        assert pour_once(state, i, i) is None
    assert pour_once(state, 0, 1) is None
    assert pour_once(state, 0, 2) is None


def test_pour_once_moves_run_limited_by_free_space():
    """Only as many layers as fit are poured; the source state is unchanged."""
    state = make_state(["A", "B", "B", "B"], ["C", "C", "B"])
    result = pour_once(state, 0, 1)

    assert result is not None
    assert result.to_list() == [["A", "B", "B"], ["C", "C", "B", "B"]]
    assert state.to_list() == [["A", "B", "B", "B"], ["C", "C", "B"]]


def test_pour_once_moves_whole_run():
    state = make_state(["A", "B", "B"], [])
    result = pour_once(state, 0, 1)
    assert result.to_list() == [["A"], ["B", "B"]]


def test_pour_once_preconditions():
    state = make_state(["A"], [])
    with pytest.raises(IndexError):
        pour_once(state, 0, 2)
    with pytest.raises(IndexError):
        pour_once(state, -1, 0)

    wild = make_state(["A", WILDCARD], [])
    with pytest.raises(ValueError):
        pour_once(wild, 0, 1)
    with pytest.raises(ValueError):
        can_pour(wild.tubes[0], wild.tubes[1])


def test_is_solved():
    assert is_solved(make_state(["A"] * 4, [], ["B"] * 4))
    assert is_solved(make_state([], []))
    assert not is_solved(make_state(["A"] * 3, ["A"]))
    assert not is_solved(make_state(["A", "A", "B", "B"], []))
    with pytest.raises(ValueError):
        is_solved(make_state([WILDCARD] * 4))


def test_apply_move():
    state = make_state(["A", "B"], [])
    assert state.apply_move(Move(0, 1)).to_list() == [["A"], ["B"]]
    assert state.apply_move(Move(1, 0)) is None


# ============================================================
# Breadth-first search
# ============================================================

def test_already_solved_returns_empty():
    state = make_state(["A"] * 4, [])
    assert solve(state) == []
    result = search(state)
    assert result.status is SolveStatus.SOLVED
    assert result.moves == []


def test_minimal_two_move_solution():
    """The fixture needs exactly two pours and BFS finds them in index order."""
    state = make_state(*TWO_MOVE_TUBES)
    moves = solve(state)
    assert moves == [Move(0, 1), Move(0, 3)]


def test_minimal_solution_other_fixture():
    state = make_state(["A", "A", "B", "B"], ["B", "B"], ["A", "A"])
    assert solve(state) == [Move(0, 1), Move(0, 2)]


def test_single_pour_is_not_a_solution():
    """[A,A,B,B] and [] take one pour to [A,A],[B,B], which is not solved."""
    state = make_state(["A", "A", "B", "B"], [])
    after = pour_once(state, 0, 1)
    assert after.to_list() == [["A", "A"], ["B", "B"]]
    assert not is_solved(after)
    assert solve(state) is None


def test_solution_replays_to_solved_state():
    state = make_state(["A", "B", "A", "B"], ["B", "A", "B", "A"], [], [])
    moves = solve(state)
    assert moves is not None

    current = state
    for move in moves:
        current = pour_once(current, move.source, move.target)
        assert current is not None
        assert all(len(t.layers) <= t.capacity for t in current.tubes)
    assert is_solved(current)


def test_unsolvable_is_reported_distinctly():
    """Three A layers can never fill a tube of four."""
    state = make_state(["A", "A", "A", "B"], ["B", "B", "B"], [])
    result = search(state)
    assert result.status is SolveStatus.UNSOLVABLE
    assert result.moves == []
    assert solve(state) is None


def test_budget_exhaustion():
    state = make_state(*TWO_MOVE_TUBES)
    result = search(state, max_steps=1)
    assert result.status is SolveStatus.EXHAUSTED
    assert result.metrics.states_explored == 1
    assert solve(state, max_steps=1) is None
    assert search(state, max_steps=0).status is SolveStatus.EXHAUSTED


def test_search_does_not_modify_input():
    state = make_state(*TWO_MOVE_TUBES)
    before = state.to_list()
    search(state)
    assert state.to_list() == before


def test_solve_rejects_wildcards():
    with pytest.raises(ValueError):
        solve(make_state(["A", WILDCARD], []))


def test_metrics_are_filled():
    result = search(make_state(*TWO_MOVE_TUBES))
    assert result.metrics.strategy_name == "bfs"
    assert result.metrics.states_explored == 2
    assert result.metrics.states_generated > 0
    assert result.metrics.computation_time_ms >= 0


# ============================================================
# Strategy framework
# ============================================================

def test_strategy_registry():
    assert "bfs" in get_strategy_names()
    assert get_default_strategy_name() == "bfs"

    strategy = create_strategy("bfs", max_steps=10)
    assert strategy.max_steps == 10

    with pytest.raises(ValueError):
        create_strategy("does-not-exist")
    with pytest.raises(ValueError):
        create_strategy("bfs", max_steps=-1)


def test_find_legal_moves_order():
    state = make_state(["A"], [], ["A"])
    strategy = create_strategy("bfs")
    pairs = [(i, j) for i, j, _ in strategy.find_legal_moves(state)]
    assert pairs == [(0, 1), (0, 2), (2, 0), (2, 1)]


# ============================================================
# History
# ============================================================

def test_history_replay():
    state = make_state(*TWO_MOVE_TUBES)
    moves = solve(state)
    history = History.replay(state, moves)

    assert history.step_count == 2
    assert len(history.states) == 3
    assert history.initial_state == state
    assert history.initial_state is not state
    assert history.state_after(0) == pour_once(state, 0, 1)
    assert is_solved(history.final_state)
    with pytest.raises(IndexError):
        history.state_after(2)


def test_history_rejects_illegal_move():
    state = make_state(["A"], [])
    with pytest.raises(ValueError):
        History.replay(state, [Move(1, 0)])
