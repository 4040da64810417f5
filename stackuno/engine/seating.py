"""Session roster and seating.

Players join in arrival order; the host places them on numbered seats before
a round starts. Turn order is the seated players sorted by seat number, and
seat numbers are compacted to 0..k-1 whenever a round is dealt or players are
removed from the table.
"""

from dataclasses import replace
from typing import Iterable, Optional, Tuple

from stackuno.engine.errors import SeatingError
from stackuno.engine.game_state import GameState, Phase, PlayerState, RuleOptions

MIN_PLAYERS = 2
SEAT_CHANGE_PHASES = (Phase.WAITING, Phase.ROUND_ENDED)


def create_session(
    session_id: str,
    host_id: str,
    host_name: str,
    options: Optional[RuleOptions] = None,
    invite_code: str = "",
    host_is_bot: bool = False,
) -> GameState:
    """New session in the lobby with the host already seated at seat 0."""
    host = PlayerState(
        id=host_id,
        name=host_name,
        seated=True,
        seated_position=0,
        is_host=True,
        is_bot=host_is_bot,
    )
    return GameState(
        session_id=session_id,
        options=options or RuleOptions(),
        invite_code=invite_code,
        players=(host,),
    )


def _touch(state: GameState) -> GameState:
    return replace(state, version=state.version + 1)


def _vacant_seat(state: GameState) -> Optional[int]:
    taken = {p.seated_position for p in state.players if p.seated}
    for seat in range(state.options.max_players):
        if seat not in taken:
            return seat
    return None


def join(
    state: GameState,
    player_id: str,
    name: str,
    is_bot: bool = False,
    auto_seat: bool = False,
) -> GameState:
    """Add a participant.

    Once play has begun only scoring sessions accept newcomers, and they wait
    unseated for the next round.
    """
    if state.get_player(player_id) is not None:
        raise SeatingError(f"{player_id} already joined")
    if len(state.players) >= state.options.max_players:
        raise SeatingError("Table is full")
    if state.phase == Phase.MATCH_ENDED:
        raise SeatingError("Session is over")

    late = state.phase != Phase.WAITING
    if late and not state.options.scoring_enabled:
        raise SeatingError("Round already started")

    player = PlayerState(id=player_id, name=name, is_bot=is_bot)
    state = replace(state, players=state.players + (player,))
    if auto_seat and state.phase in SEAT_CHANGE_PHASES:
        state = _seat(state, player_id, _vacant_seat(state))
    return _touch(state)


def _require_host(state: GameState, actor_id: str) -> None:
    actor = state.get_player(actor_id)
    if actor is None or not actor.is_host:
        raise SeatingError("Only the host can change seats")
    if state.phase not in SEAT_CHANGE_PHASES:
        raise SeatingError("Seats are fixed while a round is in progress")


def _seat(state: GameState, player_id: str, seat: Optional[int]) -> GameState:
    player = state.get_player(player_id)
    if player is None:
        raise SeatingError(f"Unknown player {player_id}")
    if seat is None or not 0 <= seat < state.options.max_players:
        raise SeatingError(f"No such seat: {seat}")
    if state.match is not None and state.match.is_eliminated(player_id):
        raise SeatingError(f"{player.name} has been eliminated")
    for other in state.players:
        if other.id != player_id and other.seated and other.seated_position == seat:
            raise SeatingError(f"Seat {seat} is taken by {other.name}")
    return state.with_player(replace(player, seated=True, seated_position=seat))


def assign_seat(state: GameState, actor_id: str, player_id: str, seat: int) -> GameState:
    """Host puts ``player_id`` on vacant ``seat`` (moving them if already seated)."""
    _require_host(state, actor_id)
    return _touch(_seat(state, player_id, seat))


def unassign_seat(state: GameState, actor_id: str, player_id: str) -> GameState:
    _require_host(state, actor_id)
    player = state.get_player(player_id)
    if player is None:
        raise SeatingError(f"Unknown player {player_id}")
    return _touch(state.with_player(replace(player, seated=False, seated_position=None)))


def compact_seats(players: Tuple[PlayerState, ...]) -> Tuple[PlayerState, ...]:
    """Renumber seated players 0..k-1 keeping their relative order."""
    seated = sorted(
        (p for p in players if p.seated and p.seated_position is not None),
        key=lambda p: p.seated_position,
    )
    positions = {p.id: i for i, p in enumerate(seated)}
    return tuple(
        replace(p, seated_position=positions[p.id]) if p.id in positions
        else replace(p, seated=False, seated_position=None)
        for p in players
    )


def unseat_players(players: Tuple[PlayerState, ...], player_ids: Iterable[str]) -> Tuple[PlayerState, ...]:
    """Take ``player_ids`` off the table and close the gaps."""
    ids = set(player_ids)
    return compact_seats(tuple(
        replace(p, seated=False, seated_position=None) if p.id in ids else p
        for p in players
    ))


def can_start(state: GameState) -> bool:
    return state.phase in SEAT_CHANGE_PHASES and len(state.seated_players()) >= MIN_PLAYERS
