"""State transitions: dealing rounds and applying player actions.

``apply_action`` is a pure reducer. It either returns a new ``GameState``
(with ``version`` bumped) or raises; a rejected action never produces a
partially updated state.
"""

import logging
import random
from dataclasses import replace
from typing import List, Optional, Tuple

from stackuno.engine.card import Card, Color
from stackuno.engine.deck import create_deck, draw_initial_discard, shuffle
from stackuno.engine.draw import draw_cards
from stackuno.engine.errors import (
    DeckExhaustedError,
    EngineError,
    IllegalMoveError,
    SeatingError,
    TurnViolationError,
)
from stackuno.engine.game_state import PLAY_PHASES, GameState, LogEntry, Phase, PlayerState
from stackuno.engine.pending import arm_pending, clear_pending, draw_total, is_timeout_current
from stackuno.engine.rules import Action, ChooseColor, DrawCard, DrawTimeout, PlayCards, validate_play
from stackuno.engine.scoring import record_round, start_match
from stackuno.engine.seating import can_start, compact_seats, unseat_players
from stackuno.engine.turns import next_seated_index, resolve_turn

logger = logging.getLogger(__name__)

GAME_START = "Game Start"
# Starting on a plain wild leaves the color open; red is the table default.
DEFAULT_COLOR = Color.RED


def _bump(state: GameState) -> GameState:
    return replace(state, version=state.version + 1)


def _describe(cards: Tuple[Card, ...], chosen_color: Optional[Color]) -> str:
    desc = " + ".join(str(c) for c in cards)
    if chosen_color is not None:
        desc += f" (chose {chosen_color.value})"
    return desc


def start_round(state: GameState, rng: random.Random) -> GameState:
    """Deal a fresh round to the seated players.

    Works from the lobby and between rounds of a match. Hands, piles,
    direction, turn and pending draws all reset.
    """
    if not can_start(state):
        raise SeatingError("Need at least 2 seated players to start")

    match = state.match
    if state.options.scoring_enabled:
        if match is None:
            match = start_match(state.options.score_limit)
        elif state.phase == Phase.ROUND_ENDED:
            match = replace(match, current_match_number=match.current_match_number + 1)

    players = compact_seats(state.players)
    seated_ids = [p.id for p in sorted(
        (p for p in players if p.seated), key=lambda p: p.seated_position
    )]

    deck = shuffle(create_deck(state.options.deck_count), rng)
    if len(seated_ids) * state.options.hand_size >= len(deck):
        raise EngineError("Not enough cards to deal to every seated player")

    hands: dict[str, List[Card]] = {pid: [] for pid in seated_ids}
    for _ in range(state.options.hand_size):
        for pid in seated_ids:
            hands[pid].append(deck.pop())
    first = draw_initial_discard(deck, rng)

    players = tuple(replace(p, hand=tuple(hands.get(p.id, ()))) for p in players)
    state = clear_pending(state)
    state = replace(
        state,
        phase=Phase.AWAITING_PLAY,
        players=players,
        current_player_index=0,
        direction=1,
        draw_pile=tuple(deck),
        discard_pile=(first,),
        stacked_discard=(first,),
        current_color=DEFAULT_COLOR if first.is_wild else first.color,
        play_history=(LogEntry(GAME_START, str(first)),),
        winner_id=None,
        match=match,
    )
    logger.info(
        "Round dealt session=%s players=%d decks=%d starter=%s",
        state.session_id, len(seated_ids), state.options.deck_count, first,
    )
    return _bump(state)


def apply_action(
    state: GameState,
    player_id: Optional[str],
    action: Action,
    *,
    rng: random.Random,
    now: float = 0.0,
) -> GameState:
    """Apply an action and return the new game state.

    ``player_id`` is ignored for DrawTimeout, which the engine issues itself.
    """
    if isinstance(action, DrawTimeout):
        return _apply_timeout(state, action.epoch, rng)

    if state.phase not in PLAY_PHASES:
        raise IllegalMoveError("No round in progress")
    current = state.current_player()
    if current is None or current.id != player_id:
        raise TurnViolationError(f"It is not {player_id}'s turn")

    if state.phase == Phase.AWAITING_COLOR:
        if not isinstance(action, ChooseColor):
            raise IllegalMoveError("Choose a color for the wild card first")
        return _choose_color(state, current, action.color, now)

    if isinstance(action, ChooseColor):
        raise IllegalMoveError("No wild card is waiting for a color")
    if isinstance(action, DrawCard):
        return _draw(state, current, rng)
    if isinstance(action, PlayCards):
        return _play(state, current, action, now)
    raise IllegalMoveError(f"Unknown action: {action!r}")


def _play(state: GameState, player: PlayerState, play: PlayCards, now: float) -> GameState:
    cards = tuple(play.cards)
    validate_play(cards, state)

    in_hand = {c.id for c in player.hand}
    for card in cards:
        if card.id not in in_hand:
            raise IllegalMoveError(f"Card {card} not in hand")

    if play.chosen_color is not None:
        if play.chosen_color == Color.WILD:
            raise IllegalMoveError("Choose red, blue, green or yellow")
        if not cards[0].is_wild:
            raise IllegalMoveError("Only wild cards let you choose a color")

    played = {c.id for c in cards}
    player = replace(player, hand=tuple(c for c in player.hand if c.id not in played))
    state = state.with_player(player)
    state = replace(state, discard_pile=state.discard_pile + cards, stacked_discard=cards)

    if not player.hand:
        return _end_round(state, player, cards, play.chosen_color)

    if cards[0].is_wild and play.chosen_color is None:
        if state.pending_draw_total:
            raise IllegalMoveError("Name a color when answering a pending draw")
        logger.debug("session=%s %s played %s, waiting for color", state.session_id, player.id, cards[0])
        return _bump(replace(state, phase=Phase.AWAITING_COLOR))

    return _resolve_play(state, player, cards, play.chosen_color, now)


def _choose_color(state: GameState, player: PlayerState, color: Color, now: float) -> GameState:
    if color == Color.WILD:
        raise IllegalMoveError("Choose red, blue, green or yellow")
    return _resolve_play(state, player, state.stacked_discard, color, now)


def _resolve_play(
    state: GameState,
    player: PlayerState,
    cards: Tuple[Card, ...],
    chosen_color: Optional[Color],
    now: float,
) -> GameState:
    """Apply color, skips, reverses and draw effects of a completed play."""
    color = chosen_color if cards[-1].is_wild else cards[-1].color

    history = [LogEntry(player.name, _describe(cards, chosen_color))]
    if len(player.hand) == 1:
        history.append(LogEntry(player.name, "UNO!"))

    seated = state.seated_players()
    turn = resolve_turn(state.current_player_index, state.direction, cards, len(seated))
    for index in turn.skipped:
        history.append(LogEntry(seated[index].name, "was skipped"))

    state = replace(
        state,
        current_color=color,
        current_player_index=turn.next_index,
        direction=turn.direction,
        play_history=state.play_history + tuple(history),
    )

    if draw_total(cards):
        state = arm_pending(state, cards, now)
        phase = Phase.AWAITING_DRAW_RESPONSE
        logger.debug(
            "session=%s pending draw %d (%s) epoch=%d",
            state.session_id, state.pending_draw_total,
            state.pending_draw_type.value, state.draw_epoch,
        )
    else:
        phase = Phase.AWAITING_PLAY
    return _bump(replace(state, phase=phase))


def _take(state: GameState, player: PlayerState, n: int, rng: random.Random) -> GameState:
    """Move ``n`` cards into ``player``'s hand, recycling the discard pile as needed."""
    result = draw_cards(n, player.hand, state.draw_pile, state.discard_pile, rng)
    if result.shortfall:
        logger.error(
            "session=%s deck exhausted: %s needed %d, short %d",
            state.session_id, player.id, n, result.shortfall,
        )
        raise DeckExhaustedError(n, result.shortfall)
    if result.reshuffled:
        logger.info("session=%s reshuffled discard pile into draw pile", state.session_id)

    state = state.with_player(replace(player, hand=result.hand))
    return replace(
        state,
        draw_pile=result.draw_pile,
        discard_pile=result.discard_pile,
        stacked_discard=result.discard_pile[-1:] if result.reshuffled else state.stacked_discard,
    )


def _draw(state: GameState, player: PlayerState, rng: random.Random) -> GameState:
    if state.pending_draw_total > 0:
        return _force_draw(state, player, rng, f"drew {state.pending_draw_total} cards")

    # House rule: a voluntary draw keeps the turn
    state = _take(state, player, 1, rng)
    state = replace(
        state,
        phase=Phase.AWAITING_PLAY,
        play_history=state.play_history + (LogEntry(player.name, "drew a card"),),
    )
    return _bump(state)


def _force_draw(state: GameState, player: PlayerState, rng: random.Random, text: str) -> GameState:
    """Give ``player`` the whole pending total and pass the turn on."""
    state = _take(state, player, state.pending_draw_total, rng)
    state = clear_pending(state)
    seated_count = len(state.seated_players())
    state = replace(
        state,
        phase=Phase.AWAITING_PLAY,
        current_player_index=next_seated_index(state.current_player_index, state.direction, seated_count),
        play_history=state.play_history + (LogEntry(player.name, text),),
    )
    return _bump(state)


def _apply_timeout(state: GameState, epoch: int, rng: random.Random) -> GameState:
    if state.phase != Phase.AWAITING_DRAW_RESPONSE or not is_timeout_current(state, epoch):
        logger.debug(
            "session=%s ignoring stale draw timeout epoch=%d (current=%d)",
            state.session_id, epoch, state.draw_epoch,
        )
        return state
    player = state.current_player()
    logger.info(
        "session=%s draw window expired, %s forced to draw %d",
        state.session_id, player.id, state.pending_draw_total,
    )
    return _force_draw(state, player, rng, f"ran out of time and drew {state.pending_draw_total} cards")


def _end_round(
    state: GameState,
    player: PlayerState,
    cards: Tuple[Card, ...],
    chosen_color: Optional[Color],
) -> GameState:
    if chosen_color is not None:
        color = chosen_color
    elif not cards[-1].is_wild:
        color = cards[-1].color
    else:
        color = state.current_color

    state = clear_pending(state)
    state = replace(
        state,
        phase=Phase.ROUND_ENDED,
        winner_id=player.id,
        current_color=color,
        play_history=state.play_history + (
            LogEntry(player.name, _describe(cards, chosen_color)),
            LogEntry(player.name, "won the round"),
        ),
    )
    logger.info("session=%s round won by %s", state.session_id, player.id)

    if state.match is not None:
        state = _score_round(state)
    return _bump(state)


def _score_round(state: GameState) -> GameState:
    before = set(state.match.eliminated_players)
    hands = {p.id: p.hand for p in state.seated_players()}
    sitting_out = [p.id for p in state.players if p.id not in hands]
    match = record_round(state.match, hands, state.winner_id, sitting_out)

    history = list(state.play_history)
    newly_out = [pid for pid in match.eliminated_players if pid not in before]
    for pid in newly_out:
        history.append(LogEntry(state.get_player(pid).name, "was eliminated"))

    phase = state.phase
    if match.final_winner_id is not None:
        phase = Phase.MATCH_ENDED
        history.append(LogEntry(state.get_player(match.final_winner_id).name, "won the match"))
        logger.info("session=%s match won by %s", state.session_id, match.final_winner_id)

    return replace(
        state,
        phase=phase,
        match=match,
        players=unseat_players(state.players, newly_out),
        play_history=tuple(history),
    )
