"""Pending draw bookkeeping for stacked Draw Two / Wild Draw Four chains.

The pending total, its type and the response deadline always change
together. ``draw_epoch`` is bumped every time a deadline is armed or cleared
so a timer that fires for an old deadline can be recognised and ignored.
"""

from dataclasses import replace
from typing import Sequence

from stackuno.engine.card import Card
from stackuno.engine.game_state import DRAW_RESPONSE_SECONDS, GameState

__all__ = ["DRAW_RESPONSE_SECONDS", "draw_total", "arm_pending", "clear_pending", "is_timeout_current"]


def draw_total(cards: Sequence[Card]) -> int:
    return sum(c.draw_amount for c in cards)


def arm_pending(state: GameState, cards: Sequence[Card], now: float) -> GameState:
    """Add the play's draw cards to the pending total and restart the window.

    The type is taken from the first draw card of the play. Returns ``state``
    unchanged when the play holds no draw cards.
    """
    added = draw_total(cards)
    if added == 0:
        return state
    first_draw = next(c for c in cards if c.draw_amount)
    return replace(
        state,
        pending_draw_total=state.pending_draw_total + added,
        pending_draw_type=first_draw.kind,
        draw_deadline=now + state.options.draw_window_seconds,
        draw_epoch=state.draw_epoch + 1,
    )


def clear_pending(state: GameState) -> GameState:
    if state.pending_draw_total == 0 and state.draw_deadline is None:
        return state
    return replace(
        state,
        pending_draw_total=0,
        pending_draw_type=None,
        draw_deadline=None,
        draw_epoch=state.draw_epoch + 1,
    )


def is_timeout_current(state: GameState, epoch: int) -> bool:
    """True only for the expiry of the deadline that is still armed."""
    return state.pending_draw_total > 0 and state.draw_deadline is not None and epoch == state.draw_epoch
