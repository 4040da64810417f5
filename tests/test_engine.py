"""Unit tests for deck construction and dealing."""

import random
from collections import Counter

import pytest
from stackuno.engine import (
    Card,
    Color,
    EngineError,
    Kind,
    Phase,
    RuleOptions,
    SeatingError,
    create_deck,
    create_session,
    draw_initial_discard,
    join,
    shuffle,
    start_round,
)

from builders import card


def test_create_deck_size() -> None:
    deck = create_deck()
    assert len(deck) == 108
    assert len({c.id for c in deck}) == 108


def test_create_deck_composition() -> None:
    deck = create_deck()
    numbers = Counter(c.number for c in deck if c.kind == Kind.NUMBER)
    assert numbers[0] == 4
    for n in range(1, 10):
        assert numbers[n] == 8
    kinds = Counter(c.kind for c in deck)
    assert kinds[Kind.SKIP] == kinds[Kind.REVERSE] == kinds[Kind.DRAW2] == 8
    assert kinds[Kind.WILD] == kinds[Kind.WILD4] == 4
    assert all(c.color == Color.WILD for c in deck if c.is_wild)


def test_create_deck_doubled() -> None:
    deck = create_deck(deck_count=2)
    assert len(deck) == 216
    assert len({c.id for c in deck}) == 216
    numbers = Counter(c.number for c in deck if c.kind == Kind.NUMBER)
    assert numbers[0] == 8
    assert numbers[7] == 16


def test_create_deck_rejects_other_counts() -> None:
    with pytest.raises(ValueError):
        create_deck(deck_count=3)


def test_shuffle_reproducible_and_copies() -> None:
    deck = create_deck()
    original = list(deck)
    d1 = shuffle(deck, random.Random(123))
    d2 = shuffle(deck, random.Random(123))
    assert [c.id for c in d1] == [c.id for c in d2]
    assert deck == original
    assert sorted(c.id for c in d1) == sorted(c.id for c in original)


def test_card_validation() -> None:
    with pytest.raises(ValueError):
        Card(id="x", color=Color.RED, kind=Kind.NUMBER)
    with pytest.raises(ValueError):
        Card(id="x", color=Color.RED, kind=Kind.WILD)
    with pytest.raises(ValueError):
        Card(id="x", color=Color.WILD, kind=Kind.SKIP)
    with pytest.raises(ValueError):
        Card(id="x", color=Color.BLUE, kind=Kind.SKIP, number=3)


def test_initial_discard_never_wild4() -> None:
    starter = card("red 5")
    wild4 = card("wild4")
    deck = [starter, wild4]  # wild4 on top
    first = draw_initial_discard(deck, random.Random(1))
    assert first == starter
    assert deck == [wild4]


def test_initial_discard_keeps_every_card() -> None:
    for seed in range(20):
        deck = shuffle(create_deck(), random.Random(seed))
        first = draw_initial_discard(deck, random.Random(seed))
        assert first.kind != Kind.WILD4
        assert len(deck) == 107
        assert first.id not in {c.id for c in deck}


def test_initial_discard_all_wild4_raises() -> None:
    with pytest.raises(EngineError):
        draw_initial_discard([card("wild4"), card("wild4")], random.Random(0))


def _lobby(n: int, options: RuleOptions = None):
    state = create_session("s1", "p1", "P1", options=options)
    for i in range(2, n + 1):
        state = join(state, f"p{i}", f"P{i}", auto_seat=True)
    return state


def test_start_round() -> None:
    state = start_round(_lobby(3), random.Random(1))
    assert state.phase == Phase.AWAITING_PLAY
    for pid in ("p1", "p2", "p3"):
        assert len(state.get_player(pid).hand) == 7
    assert len(state.discard_pile) == 1
    assert len(state.draw_pile) == 108 - 7 * 3 - 1
    assert state.current_player().id == "p1"
    assert state.direction == 1
    assert state.current_color != Color.WILD
    assert state.pending_draw_total == 0
    assert state.total_cards() == 108
    assert state.play_history[0].actor == "Game Start"


def test_start_round_stacking_mode() -> None:
    state = start_round(_lobby(4, RuleOptions(deck_count=2)), random.Random(7))
    assert state.total_cards() == 216
    assert len(state.draw_pile) == 216 - 7 * 4 - 1


def test_start_round_needs_two_seated() -> None:
    with pytest.raises(SeatingError):
        start_round(_lobby(1), random.Random(0))


def test_start_round_reproducible() -> None:
    a = start_round(_lobby(3), random.Random(99))
    b = start_round(_lobby(3), random.Random(99))
    assert [c.id for c in a.draw_pile] == [c.id for c in b.draw_pile]
    assert a.top_discard() == b.top_discard()
