"""Game engine for UNO."""

from stackuno.engine.card import PLAYABLE_COLORS, Card, Color, Kind
from stackuno.engine.deck import create_deck, draw_initial_discard, shuffle
from stackuno.engine.errors import (
    DeckExhaustedError,
    EngineError,
    IllegalMoveError,
    MoveRejected,
    SeatingError,
    StaleStateError,
    TurnViolationError,
    UnoError,
)
from stackuno.engine.game_state import (
    DRAW_RESPONSE_SECONDS,
    GameState,
    LogEntry,
    MatchSession,
    Phase,
    PlayerState,
    PlayerView,
    RuleOptions,
)
from stackuno.engine.rules import (
    Action,
    ChooseColor,
    DrawCard,
    DrawTimeout,
    PlayCards,
    can_stack,
    get_legal_actions,
    is_legal_first_play,
)
from stackuno.engine.seating import assign_seat, create_session, join, unassign_seat
from stackuno.engine.transitions import apply_action, start_round

__all__ = [
    "PLAYABLE_COLORS",
    "Card",
    "Color",
    "Kind",
    "create_deck",
    "draw_initial_discard",
    "shuffle",
    "DeckExhaustedError",
    "EngineError",
    "IllegalMoveError",
    "MoveRejected",
    "SeatingError",
    "StaleStateError",
    "TurnViolationError",
    "UnoError",
    "DRAW_RESPONSE_SECONDS",
    "GameState",
    "LogEntry",
    "MatchSession",
    "Phase",
    "PlayerState",
    "PlayerView",
    "RuleOptions",
    "Action",
    "ChooseColor",
    "DrawCard",
    "DrawTimeout",
    "PlayCards",
    "can_stack",
    "get_legal_actions",
    "is_legal_first_play",
    "assign_seat",
    "create_session",
    "join",
    "unassign_seat",
    "apply_action",
    "start_round",
]
