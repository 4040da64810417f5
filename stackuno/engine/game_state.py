"""Game state for UNO.

``GameState`` is the single record a session stores: lobby roster, the
current round, and the match scoreboard. It is immutable; transitions build a
new value with ``dataclasses.replace``. Everything derived from it (top card,
whose turn it is, time left to answer a draw) is computed on demand.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from stackuno.engine.card import Card, Color, Kind

# Seconds a player has to answer a pending draw before it is forced on them.
DRAW_RESPONSE_SECONDS = 6.0


class Phase(str, Enum):
    WAITING = "waiting"
    AWAITING_PLAY = "awaiting_play"
    AWAITING_COLOR = "awaiting_color"
    AWAITING_DRAW_RESPONSE = "awaiting_draw_response"
    ROUND_ENDED = "round_ended"
    MATCH_ENDED = "match_ended"


PLAY_PHASES = (Phase.AWAITING_PLAY, Phase.AWAITING_COLOR, Phase.AWAITING_DRAW_RESPONSE)


@dataclass(frozen=True)
class RuleOptions:
    """Table rules chosen when the session is created.

    deck_count=2 is the "stacking" mode: two full sets shuffled together.
    wild4_answers_draw2 lets a Wild Draw Four answer a Draw Two chain.
    """

    deck_count: int = 1
    hand_size: int = 7
    draw_window_seconds: float = DRAW_RESPONSE_SECONDS
    wild4_answers_draw2: bool = False
    max_players: int = 6
    scoring_enabled: bool = False
    score_limit: int = 500

    def __post_init__(self) -> None:
        if self.deck_count not in (1, 2):
            raise ValueError(f"deck_count must be 1 or 2, got {self.deck_count}")
        if self.max_players < 2:
            raise ValueError("max_players must be at least 2")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "deck_count": self.deck_count,
            "hand_size": self.hand_size,
            "draw_window_seconds": self.draw_window_seconds,
            "wild4_answers_draw2": self.wild4_answers_draw2,
            "max_players": self.max_players,
            "scoring_enabled": self.scoring_enabled,
            "score_limit": self.score_limit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuleOptions":
        return cls(**data)


@dataclass(frozen=True)
class PlayerState:
    """A participant. seated_position is dense 0..k-1 among seated players."""

    id: str
    name: str
    hand: Tuple[Card, ...] = ()
    seated: bool = False
    seated_position: Optional[int] = None
    is_host: bool = False
    is_bot: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "hand": [c.to_dict() for c in self.hand],
            "seated": self.seated,
            "seated_position": self.seated_position,
            "is_host": self.is_host,
            "is_bot": self.is_bot,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerState":
        return cls(
            id=data["id"],
            name=data["name"],
            hand=tuple(Card.from_dict(c) for c in data.get("hand", [])),
            seated=data.get("seated", False),
            seated_position=data.get("seated_position"),
            is_host=data.get("is_host", False),
            is_bot=data.get("is_bot", False),
        )


@dataclass(frozen=True)
class LogEntry:
    actor: str
    action: str

    def __str__(self) -> str:
        return f"{self.actor}: {self.action}"


@dataclass(frozen=True)
class MatchSession:
    """Scoreboard across rounds when scoring is enabled."""

    score_limit: int
    match_scores: Tuple[Dict[str, int], ...] = ()  # one {player_id: points} per round
    player_total_scores: Dict[str, int] = field(default_factory=dict)
    eliminated_players: Tuple[str, ...] = ()
    current_match_number: int = 1
    final_winner_id: Optional[str] = None

    def is_eliminated(self, player_id: str) -> bool:
        return player_id in self.eliminated_players

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score_limit": self.score_limit,
            "match_scores": [dict(s) for s in self.match_scores],
            "player_total_scores": dict(self.player_total_scores),
            "eliminated_players": list(self.eliminated_players),
            "current_match_number": self.current_match_number,
            "final_winner_id": self.final_winner_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchSession":
        return cls(
            score_limit=data["score_limit"],
            match_scores=tuple(dict(s) for s in data.get("match_scores", [])),
            player_total_scores=dict(data.get("player_total_scores", {})),
            eliminated_players=tuple(data.get("eliminated_players", [])),
            current_match_number=data.get("current_match_number", 1),
            final_winner_id=data.get("final_winner_id"),
        )


@dataclass(frozen=True)
class GameState:
    """Immutable UNO session state."""

    session_id: str
    options: RuleOptions = field(default_factory=RuleOptions)
    invite_code: str = ""
    phase: Phase = Phase.WAITING
    players: Tuple[PlayerState, ...] = ()  # join order
    current_player_index: int = 0  # index into seated_players()
    direction: int = 1  # 1 = clockwise, -1 = counter-clockwise
    draw_pile: Tuple[Card, ...] = ()  # top is last
    discard_pile: Tuple[Card, ...] = ()  # top is last
    stacked_discard: Tuple[Card, ...] = ()  # most recent play, tail of discard_pile
    current_color: Color = Color.RED
    pending_draw_total: int = 0
    pending_draw_type: Optional[Kind] = None
    draw_deadline: Optional[float] = None
    draw_epoch: int = 0
    play_history: Tuple[LogEntry, ...] = ()
    winner_id: Optional[str] = None
    match: Optional[MatchSession] = None
    version: int = 0

    def top_discard(self) -> Optional[Card]:
        """Return the top card on the discard pile."""
        return self.discard_pile[-1] if self.discard_pile else None

    def seated_players(self) -> Tuple[PlayerState, ...]:
        """Seated players in turn order."""
        seated = [p for p in self.players if p.seated and p.seated_position is not None]
        return tuple(sorted(seated, key=lambda p: p.seated_position))

    def current_player(self) -> Optional[PlayerState]:
        seated = self.seated_players()
        if not seated or self.phase not in PLAY_PHASES:
            return None
        return seated[self.current_player_index % len(seated)]

    def get_player(self, player_id: str) -> Optional[PlayerState]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def is_players_turn(self, player_id: str) -> bool:
        current = self.current_player()
        return current is not None and current.id == player_id

    def seconds_remaining(self, now: float) -> Optional[float]:
        """Time left to answer the pending draw, or None when nothing is pending."""
        if self.draw_deadline is None:
            return None
        return max(0.0, self.draw_deadline - now)

    def total_cards(self) -> int:
        return (
            len(self.draw_pile)
            + len(self.discard_pile)
            + sum(len(p.hand) for p in self.players)
        )

    def with_player(self, player: PlayerState) -> "GameState":
        """Return a copy with ``player`` replacing the entry with the same id."""
        players = tuple(player if p.id == player.id else p for p in self.players)
        return replace(self, players=players)

    def to_dict(self) -> Dict[str, Any]:
        """Flat JSON-compatible record of the whole session."""
        return {
            "session_id": self.session_id,
            "options": self.options.to_dict(),
            "invite_code": self.invite_code,
            "phase": self.phase.value,
            "players": [p.to_dict() for p in self.players],
            "current_player_index": self.current_player_index,
            "direction": self.direction,
            "draw_pile": [c.to_dict() for c in self.draw_pile],
            "discard_pile": [c.to_dict() for c in self.discard_pile],
            "stacked_discard": [c.to_dict() for c in self.stacked_discard],
            "current_color": self.current_color.value,
            "pending_draw_total": self.pending_draw_total,
            "pending_draw_type": self.pending_draw_type.value if self.pending_draw_type else None,
            "draw_deadline": self.draw_deadline,
            "draw_epoch": self.draw_epoch,
            "play_history": [{"player": e.actor, "action": e.action} for e in self.play_history],
            "winner_id": self.winner_id,
            "match": self.match.to_dict() if self.match else None,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        pending_type = data.get("pending_draw_type")
        match = data.get("match")
        return cls(
            session_id=data["session_id"],
            options=RuleOptions.from_dict(data.get("options", {})),
            invite_code=data.get("invite_code", ""),
            phase=Phase(data.get("phase", Phase.WAITING.value)),
            players=tuple(PlayerState.from_dict(p) for p in data.get("players", [])),
            current_player_index=data.get("current_player_index", 0),
            direction=data.get("direction", 1),
            draw_pile=tuple(Card.from_dict(c) for c in data.get("draw_pile", [])),
            discard_pile=tuple(Card.from_dict(c) for c in data.get("discard_pile", [])),
            stacked_discard=tuple(Card.from_dict(c) for c in data.get("stacked_discard", [])),
            current_color=Color(data.get("current_color", Color.RED.value)),
            pending_draw_total=data.get("pending_draw_total", 0),
            pending_draw_type=Kind(pending_type) if pending_type else None,
            draw_deadline=data.get("draw_deadline"),
            draw_epoch=data.get("draw_epoch", 0),
            play_history=tuple(
                LogEntry(actor=e["player"], action=e["action"])
                for e in data.get("play_history", [])
            ),
            winner_id=data.get("winner_id"),
            match=MatchSession.from_dict(match) if match else None,
            version=data.get("version", 0),
        )


@dataclass
class PlayerView:
    """Filtered game state visible to a single player.

    Contains only that player's hand and public info.
    """

    my_hand: List[Card]
    top_discard: Optional[Card]
    current_color: Color
    current_player: Optional[str]
    direction: int
    phase: Phase
    pending_draw_total: int
    pending_draw_type: Optional[Kind]
    seconds_remaining: Optional[float]
    winner: Optional[str]
    seat_order: Tuple[str, ...]
    num_cards_per_player: Dict[str, int]
    history: List[str]  # Recent game events
    total_scores: Dict[str, int]

    @classmethod
    def from_state(cls, state: GameState, player_id: str, now: float = 0.0) -> "PlayerView":
        """Create a player view from full game state, hiding other players' hands."""
        me = state.get_player(player_id)
        current = state.current_player()
        seated = state.seated_players()
        return cls(
            my_hand=list(me.hand) if me else [],
            top_discard=state.top_discard(),
            current_color=state.current_color,
            current_player=current.id if current else None,
            direction=state.direction,
            phase=state.phase,
            pending_draw_total=state.pending_draw_total,
            pending_draw_type=state.pending_draw_type,
            seconds_remaining=state.seconds_remaining(now),
            winner=state.winner_id,
            seat_order=tuple(p.id for p in seated),
            num_cards_per_player={p.id: len(p.hand) for p in seated},
            history=[str(e) for e in state.play_history[-10:]],  # Last 10 events
            total_scores=dict(state.match.player_total_scores) if state.match else {},
        )
