"""Tests for turn advancement."""

import pytest
from stackuno.engine.turns import count_skips, next_seated_index, resolve_turn

from builders import cards


def test_plain_card_advances_one() -> None:
    result = resolve_turn(0, 1, cards("red 3"), 4)
    assert result.next_index == 1
    assert result.direction == 1
    assert result.skipped == ()


def test_wraps_around_table() -> None:
    assert resolve_turn(3, 1, cards("red 3"), 4).next_index == 0
    assert resolve_turn(0, -1, cards("red 3"), 4).next_index == 3


def test_two_player_reverse_acts_as_skip() -> None:
    result = resolve_turn(0, 1, cards("red reverse"), 2)
    assert result.direction == -1
    assert result.skipped == (1,)
    assert result.next_index == 0


def test_reverse_flips_direction_without_skip() -> None:
    result = resolve_turn(0, 1, cards("red reverse"), 4)
    assert result.direction == -1
    assert result.next_index == 3
    assert result.skipped == ()


def test_even_reverses_cancel() -> None:
    result = resolve_turn(1, 1, cards("red reverse", "blue reverse"), 4)
    assert result.direction == 1
    assert result.next_index == 2


def test_skip_and_stacked_skips() -> None:
    single = resolve_turn(0, 1, cards("red skip"), 4)
    assert single.next_index == 2
    assert single.skipped == (1,)

    double = resolve_turn(0, 1, cards("red skip", "green skip"), 4)
    assert double.next_index == 3
    assert double.skipped == (1, 2)

    backwards = resolve_turn(0, -1, cards("red skip"), 3)
    assert backwards.next_index == 1
    assert backwards.skipped == (2,)


def test_draw_cards_do_not_skip() -> None:
    result = resolve_turn(0, 1, cards("red draw2", "blue draw2"), 3)
    assert result.next_index == 1
    assert result.skipped == ()


def test_count_skips() -> None:
    assert count_skips(cards("red reverse", "blue reverse"), 2) == 2
    assert count_skips(cards("red reverse", "blue reverse"), 3) == 0
    assert count_skips(cards("red skip", "wild4"), 5) == 1


def test_next_seated_index() -> None:
    assert next_seated_index(2, 1, 3) == 0
    assert next_seated_index(0, -1, 3) == 2
    assert next_seated_index(0, 1, 5, skip_count=2) == 3


def test_resolve_turn_requires_players() -> None:
    with pytest.raises(ValueError):
        resolve_turn(0, 1, cards("red 1"), 0)
