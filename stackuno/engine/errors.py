"""Engine exceptions.

``MoveRejected`` and its subclasses are recoverable: the offending action is
refused and the game state is left exactly as it was. ``DeckExhaustedError``
is fatal for the round.
"""


class UnoError(Exception):
    """Base class for all engine errors."""


class EngineError(UnoError):
    """Internal consistency problem (bad setup, unknown session, ...)."""


class MoveRejected(UnoError):
    """An action was refused. Shown to the acting player only."""


class IllegalMoveError(MoveRejected):
    """The play or draw breaks the rules for the current table state."""


class TurnViolationError(MoveRejected):
    """Someone other than the active player tried to act."""


class SeatingError(MoveRejected):
    """Join or seat change refused (full table, not host, seat taken, ...)."""


class DeckExhaustedError(UnoError):
    """Draw and discard piles together cannot supply the requested cards."""

    def __init__(self, requested: int, shortfall: int):
        super().__init__(f"Needed {requested} cards, {shortfall} could not be supplied")
        self.requested = requested
        self.shortfall = shortfall


class StaleStateError(UnoError):
    """A save raced another save and would overwrite a newer version."""
