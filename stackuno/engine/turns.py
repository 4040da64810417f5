"""Turn order over the seated players."""

from dataclasses import dataclass
from typing import Sequence, Tuple

from stackuno.engine.card import Card, Kind


@dataclass(frozen=True)
class TurnResult:
    next_index: int
    direction: int
    skipped: Tuple[int, ...]  # seated indices passed over, in order


def count_skips(cards: Sequence[Card], seated_count: int) -> int:
    """One per skip; a reverse also skips when only two players are seated.

    Draw cards never count here: the next player answers them instead.
    """
    skips = sum(1 for c in cards if c.kind == Kind.SKIP)
    if seated_count == 2:
        skips += sum(1 for c in cards if c.kind == Kind.REVERSE)
    return skips


def next_seated_index(current: int, direction: int, seated_count: int, skip_count: int = 0) -> int:
    """Advance once, then once more per skip, wrapping around the table."""
    return (current + direction * (1 + skip_count)) % seated_count


def resolve_turn(current: int, direction: int, cards: Sequence[Card], seated_count: int) -> TurnResult:
    """Compute who plays after ``cards`` were played from seat index ``current``.

    Every reverse flips direction, so an even number of them cancels out while
    their skip contributions (two players only) still count.
    """
    if seated_count <= 0:
        raise ValueError("No seated players")

    for card in cards:
        if card.kind == Kind.REVERSE:
            direction = -direction

    skips = count_skips(cards, seated_count)
    index = (current + direction) % seated_count
    skipped = []
    for _ in range(skips):
        skipped.append(index)
        index = (index + direction) % seated_count

    return TurnResult(next_index=index, direction=direction, skipped=tuple(skipped))
