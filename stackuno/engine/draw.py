"""Drawing cards and recycling the discard pile."""

import random
from dataclasses import dataclass
from typing import Sequence, Tuple

from stackuno.engine.card import Card


@dataclass(frozen=True)
class DrawResult:
    hand: Tuple[Card, ...]
    draw_pile: Tuple[Card, ...]
    discard_pile: Tuple[Card, ...]
    drawn: Tuple[Card, ...]
    shortfall: int = 0  # cards that could not be supplied
    reshuffled: bool = False


def recycle_discard(
    draw_pile: Sequence[Card],
    discard_pile: Sequence[Card],
    rng: random.Random,
) -> Tuple[Tuple[Card, ...], Tuple[Card, ...]]:
    """Shuffle everything but the top discard under the draw pile.

    Returns the new (draw_pile, discard_pile).
    """
    if len(discard_pile) <= 1:
        return tuple(draw_pile), tuple(discard_pile)
    top = discard_pile[-1]
    recycled = list(discard_pile[:-1])
    rng.shuffle(recycled)
    return tuple(recycled) + tuple(draw_pile), (top,)


def draw_cards(
    n: int,
    hand: Sequence[Card],
    draw_pile: Sequence[Card],
    discard_pile: Sequence[Card],
    rng: random.Random,
) -> DrawResult:
    """Move up to ``n`` cards from the draw pile into ``hand``.

    When the draw pile runs out the discard pile (minus its top card) is
    reshuffled into it. If both together still cannot cover ``n`` the draw
    stops and the missing count is reported as ``shortfall``.
    """
    new_hand = list(hand)
    draw = list(draw_pile)
    discard = tuple(discard_pile)
    drawn = []
    reshuffled = False

    for _ in range(n):
        if not draw:
            recycled, discard = recycle_discard(draw, discard, rng)
            draw = list(recycled)
            if not draw:
                break
            reshuffled = True
        card = draw.pop()
        new_hand.append(card)
        drawn.append(card)

    return DrawResult(
        hand=tuple(new_hand),
        draw_pile=tuple(draw),
        discard_pile=discard,
        drawn=tuple(drawn),
        shortfall=n - len(drawn),
        reshuffled=reshuffled,
    )
