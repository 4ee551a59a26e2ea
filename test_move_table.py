#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Verify the move table:
1. Every move is a bijection over the 54 state positions
2. Every inverse is exact
3. The table is deterministic and shared
4. Token parsing/inversion follows the move grammar
"""

import sys
import os
sys.path.insert(0, os.path.dirname(__file__))

import pytest

from cube_moves import (
    MOVE_NAMES,
    STATE_SIZE,
    InvalidMoveError,
    Modifier,
    MoveTable,
    MoveToken,
    UnknownMoveError,
    apply_move,
    apply_permutation,
    get_move_table,
    invert_move,
    invert_permutation,
    parse_move,
)


def test_moves_are_bijections():
    """Each forward permutation uses every position exactly once"""
    table = get_move_table()
    assert table.names == MOVE_NAMES
    for name in MOVE_NAMES:
        forward, inverse = table.lookup(name)
        assert len(forward) == STATE_SIZE
        assert sorted(forward) == list(range(STATE_SIZE)), f"{name} is not a bijection"
        assert sorted(inverse) == list(range(STATE_SIZE))

def test_inverse_is_exact():
    table = get_move_table()
    for name in MOVE_NAMES:
        forward, inverse = table.lookup(name)
        for i in range(STATE_SIZE):
            assert inverse[forward[i]] == i
            assert forward[inverse[i]] == i

def test_moves_are_distinct():
    table = get_move_table()
    forwards = {table.lookup(name)[0] for name in MOVE_NAMES}
    assert len(forwards) == len(MOVE_NAMES)

def test_table_is_deterministic():
    """A freshly built table with the same seed matches the shared one"""
    shared = get_move_table()
    rebuilt = MoveTable()
    for name in MOVE_NAMES:
        assert rebuilt.lookup(name) == shared.lookup(name)

def test_table_depends_on_seed():
    other = MoveTable(seed=7)
    shared = get_move_table()
    assert any(other.lookup(n) != shared.lookup(n) for n in MOVE_NAMES)

def test_table_is_built_once():
    assert get_move_table() is get_move_table()

def test_table_is_read_only():
    forward, _ = get_move_table().lookup("U")
    with pytest.raises(TypeError):
        forward[0] = 1

def test_unknown_name_lookup():
    assert get_move_table().lookup("X") is None
    assert get_move_table().lookup("u") is None
    assert "X" not in get_move_table()

def test_invert_permutation():
    assert invert_permutation([2, 0, 1]) == (1, 2, 0)

def test_apply_permutation_is_gather():
    state = list("abc")
    apply_permutation(state, [2, 0, 1])
    assert state == list("cab")

def test_apply_permutation_size_mismatch():
    with pytest.raises(ValueError):
        apply_permutation(list("ab"), [0, 1, 2])

def test_forward_then_inverse_restores_state():
    original = [chr(0x41 + i) for i in range(STATE_SIZE)]
    for name in MOVE_NAMES:
        state = list(original)
        apply_move(state, name)
        apply_move(state, name + "'")
        assert state == original

        state = list(original)
        apply_move(state, name + "'")
        apply_move(state, name)
        assert state == original

def test_double_equals_two_singles():
    original = [chr(0x41 + i) for i in range(STATE_SIZE)]
    for name in MOVE_NAMES:
        doubled = list(original)
        apply_move(doubled, name + "2")

        twice = list(original)
        apply_move(twice, name)
        apply_move(twice, name)
        assert doubled == twice

def test_inverted_double_equals_two_reverse_moves():
    original = [chr(0x41 + i) for i in range(STATE_SIZE)]
    for name in MOVE_NAMES:
        state = list(original)
        apply_move(state, invert_move(name + "2"))

        expected = list(original)
        apply_move(expected, name + "'")
        apply_move(expected, name + "'")
        assert state == expected

        # and it undoes the double move
        apply_move(state, name + "2")
        assert state == original

def test_parse_move():
    assert parse_move("U") == MoveToken("U", Modifier.NORMAL)
    assert parse_move("R'") == MoveToken("R", Modifier.REVERSED)
    assert parse_move("F2") == MoveToken("F", Modifier.DOUBLE)
    assert parse_move("B'2") == MoveToken("B", Modifier.REVERSED_DOUBLE)
    assert str(parse_move("B'2")) == "B'2"

@pytest.mark.parametrize("token", ["", "'", "2", "U2'", "U''", "U22", "U R", "U,R", 5, None])
def test_parse_move_rejects_bad_tokens(token):
    with pytest.raises(InvalidMoveError):
        parse_move(token)

def test_invert_move_table():
    assert str(invert_move("U")) == "U'"
    assert str(invert_move("U'")) == "U"
    assert str(invert_move("U2")) == "U'2"
    assert str(invert_move("U'2")) == "U2"

def test_modifier_properties():
    assert Modifier.REVERSED.reversed and Modifier.REVERSED_DOUBLE.reversed
    assert not Modifier.DOUBLE.reversed
    assert Modifier.DOUBLE.times == 2
    assert Modifier.NORMAL.times == 1

def test_unknown_move_is_noop():
    original = list("x" * (STATE_SIZE - 1) + "y")
    state = list(original)
    assert apply_move(state, "X") is False
    assert state == original

def test_unknown_move_strict():
    state = list("_" * STATE_SIZE)
    with pytest.raises(UnknownMoveError):
        apply_move(state, "X2", strict=True)


if __name__ == '__main__':
    print("=" * 70)
    print("MOVE TABLE TESTS")
    print("=" * 70)
    sys.exit(pytest.main([__file__, "-q"]))
