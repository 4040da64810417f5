"""Deck creation and shuffling."""

import random
from typing import List, Sequence

from stackuno.engine.card import PLAYABLE_COLORS, Card, Color, Kind
from stackuno.engine.errors import EngineError

SET_SIZE = 108
ACTION_KINDS = (Kind.SKIP, Kind.REVERSE, Kind.DRAW2)


def create_deck(deck_count: int = 1) -> List[Card]:
    """Create ``deck_count`` standard 108-card UNO sets, unshuffled.

    - 4 colors x (one 0, two each of 1-9, Skip, Reverse, Draw Two): 100 cards
    - 4 Wild, 4 Wild Draw Four: 8 cards
    - Total: 108 cards per set (216 in stacking mode)
    """
    if deck_count not in (1, 2):
        raise ValueError(f"deck_count must be 1 or 2, got {deck_count}")

    cards: List[Card] = []
    for d in range(deck_count):
        for color in PLAYABLE_COLORS:
            # One zero per color
            cards.append(Card(id=f"{color.value}-0-{d}a", color=color, kind=Kind.NUMBER, number=0))
            # Two of each 1-9 and action cards per color
            for number in range(1, 10):
                for copy in "ab":
                    cards.append(Card(
                        id=f"{color.value}-{number}-{d}{copy}",
                        color=color,
                        kind=Kind.NUMBER,
                        number=number,
                    ))
            for kind in ACTION_KINDS:
                for copy in "ab":
                    cards.append(Card(id=f"{color.value}-{kind.value}-{d}{copy}", color=color, kind=kind))

        for i in range(4):
            cards.append(Card(id=f"wild-{d}{i}", color=Color.WILD, kind=Kind.WILD))
            cards.append(Card(id=f"wild4-{d}{i}", color=Color.WILD, kind=Kind.WILD4))

    return cards


def shuffle(cards: Sequence[Card], rng: random.Random) -> List[Card]:
    """Return a uniformly shuffled copy of ``cards``."""
    shuffled = list(cards)
    rng.shuffle(shuffled)
    return shuffled


def draw_initial_discard(deck: List[Card], rng: random.Random) -> Card:
    """Pop the starting discard off ``deck``.

    A Wild Draw Four may not start a round: it goes back into the deck, which
    is reshuffled in place before the next attempt.
    """
    if not deck:
        raise EngineError("Cannot start a round from an empty deck")
    if all(c.kind == Kind.WILD4 for c in deck):
        raise EngineError("Deck holds no valid starting card")

    card = deck.pop()
    while card.kind == Kind.WILD4:
        deck.append(card)
        rng.shuffle(deck)
        card = deck.pop()
    return card
