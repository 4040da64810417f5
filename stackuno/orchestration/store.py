"""Session state storage."""

import copy
import logging
from collections import defaultdict
from typing import Callable, Dict, List, Protocol

from stackuno.engine.errors import EngineError, StaleStateError
from stackuno.engine.game_state import GameState

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str], None]


class StateStore(Protocol):
    """Remote object store holding one ``GameState`` per session."""

    def load(self, session_id: str) -> GameState:
        ...

    def save(self, session_id: str, state: GameState) -> None:
        ...

    def subscribe(self, session_id: str, on_change: ChangeListener) -> Callable[[], None]:
        """Call ``on_change(session_id)`` after every save; returns an unsubscribe function."""
        ...


class InMemoryStateStore:
    """Keeps the JSON-compatible record of each session in memory.

    Saves are last-write-wins. With ``check_versions=True`` a save whose
    ``version`` is not newer than the stored one raises StaleStateError.
    """

    def __init__(self, check_versions: bool = False):
        self._check_versions = check_versions
        self._records: Dict[str, dict] = {}
        self._listeners: Dict[str, List[ChangeListener]] = defaultdict(list)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._records

    def load(self, session_id: str) -> GameState:
        try:
            record = self._records[session_id]
        except KeyError:
            raise EngineError(f"Unknown session {session_id}") from None
        return GameState.from_dict(copy.deepcopy(record))

    def save(self, session_id: str, state: GameState) -> None:
        current = self._records.get(session_id)
        if self._check_versions and current is not None and current["version"] >= state.version:
            raise StaleStateError(
                f"Session {session_id} is at version {current['version']}, refusing {state.version}"
            )
        self._records[session_id] = copy.deepcopy(state.to_dict())
        logger.debug("Saved session=%s version=%d phase=%s", session_id, state.version, state.phase.value)
        for listener in list(self._listeners[session_id]):
            listener(session_id)

    def subscribe(self, session_id: str, on_change: ChangeListener) -> Callable[[], None]:
        self._listeners[session_id].append(on_change)

        def unsubscribe() -> None:
            if on_change in self._listeners[session_id]:
                self._listeners[session_id].remove(on_change)

        return unsubscribe
