"""UNO rules: move legality, stacking and legal action enumeration."""

import itertools
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from stackuno.engine.card import PLAYABLE_COLORS, Card, Color, Kind
from stackuno.engine.errors import IllegalMoveError
from stackuno.engine.game_state import GameState, Phase


@dataclass(frozen=True)
class PlayCards:
    """Action: play one card, or several stacked cards, in hand order.

    chosen_color may be supplied up front when the play contains a wild;
    otherwise the engine waits for a ChooseColor action.
    """

    cards: Tuple[Card, ...]
    chosen_color: Optional[Color] = None


@dataclass(frozen=True)
class ChooseColor:
    """Action: pick the new color after a wild play."""

    color: Color


@dataclass(frozen=True)
class DrawCard:
    """Action: draw. Takes the whole pending total if a draw is pending, else one card."""

    pass


@dataclass(frozen=True)
class DrawTimeout:
    """Engine-issued: the draw-response deadline of ``epoch`` expired."""

    epoch: int


Action = Union[PlayCards, ChooseColor, DrawCard, DrawTimeout]


def is_legal_first_play(
    card: Card,
    top: Optional[Card],
    current_color: Color,
    pending_type: Optional[Kind] = None,
    wild4_answers_draw2: bool = False,
) -> bool:
    """Check whether ``card`` may open a play against the table."""
    if pending_type is not None:
        if card.kind == pending_type:
            return True
        # House variant: a +4 may answer a +2 chain
        return wild4_answers_draw2 and pending_type == Kind.DRAW2 and card.kind == Kind.WILD4

    # Wild can always be played
    if card.color == Color.WILD:
        return True
    # Match by color
    if card.color == current_color:
        return True
    if top is None:
        return False
    # Match by number
    if card.kind == Kind.NUMBER and top.kind == Kind.NUMBER:
        return card.number == top.number
    # Match by action symbol
    return card.kind == top.kind and card.kind not in (Kind.NUMBER, Kind.WILD, Kind.WILD4)


def can_stack(first: Card, candidate: Card) -> bool:
    """Whether ``candidate`` may go on top of ``first`` in the same play. Color is ignored."""
    if first.kind != candidate.kind:
        return False
    return first.kind != Kind.NUMBER or first.number == candidate.number


def validate_play(cards: Sequence[Card], state: GameState) -> None:
    """Raise IllegalMoveError unless ``cards`` is a legal play on ``state``."""
    if not cards:
        raise IllegalMoveError("A play needs at least one card")
    ids = [c.id for c in cards]
    if len(set(ids)) != len(ids):
        raise IllegalMoveError("The same card cannot be played twice")

    first = cards[0]
    if not is_legal_first_play(
        first,
        state.top_discard(),
        state.current_color,
        state.pending_draw_type,
        state.options.wild4_answers_draw2,
    ):
        if state.pending_draw_type is not None:
            raise IllegalMoveError(
                f"Must answer the pending {state.pending_draw_type.value} with the same card or draw"
            )
        raise IllegalMoveError(f"Can't play {first} on {state.top_discard()}")

    for card in cards[1:]:
        if not can_stack(first, card):
            raise IllegalMoveError(f"Can't stack {card} on {first}")


def _stack_options(first: Card, hand: Sequence[Card]) -> List[Tuple[Card, ...]]:
    """Every distinct play opening with ``first``.

    Any subset of the matching cards may follow it. Only the last card changes
    the outcome (it sets the color), so each subset is listed once per color
    it can end on.
    """
    extras = [c for c in hand if c.id != first.id and can_stack(first, c)]
    stacks: List[Tuple[Card, ...]] = [(first,)]
    for size in range(1, len(extras) + 1):
        for subset in itertools.combinations(extras, size):
            endings: Dict[Color, Card] = {}
            for c in subset:
                endings.setdefault(c.color, c)
            for last in endings.values():
                stacks.append((first, *(c for c in subset if c is not last), last))
    return stacks


def get_legal_actions(state: GameState, player_id: str) -> List[Action]:
    """Return all legal actions for ``player_id``; empty unless it is their turn."""
    if state.phase not in (Phase.AWAITING_PLAY, Phase.AWAITING_COLOR, Phase.AWAITING_DRAW_RESPONSE):
        return []
    if not state.is_players_turn(player_id):
        return []

    if state.phase == Phase.AWAITING_COLOR:
        return [ChooseColor(color=c) for c in PLAYABLE_COLORS]

    player = state.get_player(player_id)
    hand = player.hand if player else ()
    top = state.top_discard()

    actions: List[Action] = []
    # Plays with the same cards and the same resulting color are one move
    seen = set()
    for card in hand:
        if not is_legal_first_play(
            card,
            top,
            state.current_color,
            state.pending_draw_type,
            state.options.wild4_answers_draw2,
        ):
            continue
        for stack in _stack_options(card, hand):
            ids = frozenset(c.id for c in stack)
            for color in (PLAYABLE_COLORS if card.is_wild else (None,)):
                key = (ids, color or stack[-1].color)
                if key in seen:
                    continue
                seen.add(key)
                actions.append(PlayCards(cards=stack, chosen_color=color))

    # Drawing is always allowed: one card normally, the whole total when a draw is pending
    actions.append(DrawCard())
    return actions
