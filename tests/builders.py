"""Helpers for building explicit table states in tests."""

import itertools
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from stackuno.engine import Card, Color, GameState, Kind, Phase, PlayerState, RuleOptions

_ids = itertools.count()


def card(spec: str) -> Card:
    """Card from text: "red 7", "blue skip", "green draw2", "wild", "wild4"."""
    parts = spec.split()
    if parts[0] in ("wild", "wild4"):
        return Card(id=f"t{next(_ids)}", color=Color.WILD, kind=Kind(parts[0]))
    color = Color(parts[0])
    if parts[1].isdigit():
        return Card(id=f"t{next(_ids)}", color=color, kind=Kind.NUMBER, number=int(parts[1]))
    return Card(id=f"t{next(_ids)}", color=color, kind=Kind(parts[1]))


def cards(*specs: str) -> List[Card]:
    return [card(s) for s in specs]


def filler(n: int) -> List[Card]:
    return [card(f"yellow {i % 10}") for i in range(n)]


def table(
    hands: Dict[str, Sequence[str]],
    top: str = "red 5",
    color: Optional[Color] = None,
    draw: Optional[Sequence[Card]] = None,
    discard_below: Sequence[Card] = (),
    current: int = 0,
    direction: int = 1,
    options: Optional[RuleOptions] = None,
    phase: Phase = Phase.AWAITING_PLAY,
) -> GameState:
    """A round in progress. Players are seated in the order of ``hands``; the first is host."""
    players = tuple(
        PlayerState(
            id=pid,
            name=pid.upper(),
            hand=tuple(cards(*specs)),
            seated=True,
            seated_position=i,
            is_host=i == 0,
        )
        for i, (pid, specs) in enumerate(hands.items())
    )
    top_card = card(top)
    return GameState(
        session_id="test",
        options=options or RuleOptions(),
        phase=phase,
        players=players,
        current_player_index=current,
        direction=direction,
        draw_pile=tuple(filler(20) if draw is None else draw),
        discard_pile=tuple(discard_below) + (top_card,),
        stacked_discard=(top_card,),
        current_color=color or (top_card.color if not top_card.is_wild else Color.RED),
    )


def hand_of(state: GameState, player_id: str) -> List[Card]:
    return list(state.get_player(player_id).hand)


def find(state: GameState, player_id: str, spec: str) -> Card:
    """The first card in the player's hand printed as ``spec``."""
    for c in state.get_player(player_id).hand:
        if str(c) == spec:
            return c
    raise AssertionError(f"{player_id} has no {spec}")


def with_hand(state: GameState, player_id: str, specs: Sequence[str]) -> GameState:
    player = state.get_player(player_id)
    return state.with_player(replace(player, hand=tuple(cards(*specs))))
