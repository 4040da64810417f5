"""Table controller: runs engine transitions against a state store.

Each action is handled as load -> reduce -> save under a per-session lock,
after which the session's draw timer is brought in line with the new state.
"""

import logging
import random
import threading
import uuid
from typing import Callable, Dict, List, Optional

from stackuno.config import config
from stackuno.engine import seating
from stackuno.engine.errors import SeatingError
from stackuno.engine.game_state import GameState, PlayerView, RuleOptions
from stackuno.engine.rules import Action, DrawTimeout, get_legal_actions
from stackuno.engine.transitions import apply_action, start_round
from stackuno.logging_config import session_id_var
from stackuno.orchestration.clock import Clock, Scheduler
from stackuno.orchestration.codes import generate_code
from stackuno.orchestration.store import StateStore
from stackuno.orchestration.timer import DrawTimer

logger = logging.getLogger(__name__)


class TableController:
    """Serialises all writes to a session and owns its draw timer."""

    def __init__(
        self,
        store: StateStore,
        clock: Clock,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ):
        self._store = store
        self._clock = clock
        self._scheduler = scheduler if scheduler is not None else clock
        self._rng = rng or random.Random()
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._timers: Dict[str, DrawTimer] = {}
        self._codes: Dict[str, str] = {}

    def _lock(self, session_id: str) -> threading.RLock:
        with self._locks_guard:
            return self._locks.setdefault(session_id, threading.RLock())

    def _timer(self, session_id: str) -> DrawTimer:
        if session_id not in self._timers:
            self._timers[session_id] = DrawTimer(
                self._scheduler,
                lambda epoch: self._on_draw_timeout(session_id, epoch),
                lock=self._lock(session_id),
            )
        return self._timers[session_id]

    def _commit(self, session_id: str, update: Callable[[GameState], GameState]) -> GameState:
        with self._lock(session_id):
            token = session_id_var.set(session_id)
            try:
                state = self._store.load(session_id)
                new_state = update(state)
                if new_state is not state:
                    self._store.save(session_id, new_state)
                    self._timer(session_id).sync(new_state)
                return new_state
            finally:
                session_id_var.reset(token)

    # Lobby

    def create(
        self,
        host_id: str,
        host_name: str,
        options: Optional[RuleOptions] = None,
        host_is_bot: bool = False,
    ) -> GameState:
        session_id = uuid.uuid4().hex
        code = generate_code(config.INVITE_CODE_LENGTH, self._rng)
        while code in self._codes:
            code = generate_code(config.INVITE_CODE_LENGTH, self._rng)
        self._codes[code] = session_id

        state = seating.create_session(
            session_id,
            host_id,
            host_name,
            options=options or config.rule_options(),
            invite_code=code,
            host_is_bot=host_is_bot,
        )
        self._store.save(session_id, state)
        logger.info("Created session=%s code=%s host=%s", session_id, code, host_id)
        return state

    def session_for_code(self, code: str) -> str:
        try:
            return self._codes[code.strip().upper()]
        except KeyError:
            raise SeatingError(f"No game with code {code}") from None

    def join(
        self,
        session_id: str,
        player_id: str,
        name: str,
        is_bot: bool = False,
        auto_seat: bool = False,
    ) -> GameState:
        return self._commit(
            session_id,
            lambda s: seating.join(s, player_id, name, is_bot=is_bot, auto_seat=auto_seat),
        )

    def assign_seat(self, session_id: str, actor_id: str, player_id: str, seat: int) -> GameState:
        return self._commit(session_id, lambda s: seating.assign_seat(s, actor_id, player_id, seat))

    def unassign_seat(self, session_id: str, actor_id: str, player_id: str) -> GameState:
        return self._commit(session_id, lambda s: seating.unassign_seat(s, actor_id, player_id))

    def start(self, session_id: str, actor_id: str) -> GameState:
        """Host deals the next round."""

        def _start(state: GameState) -> GameState:
            actor = state.get_player(actor_id)
            if actor is None or not actor.is_host:
                raise SeatingError("Only the host can start a round")
            return start_round(state, self._rng)

        return self._commit(session_id, _start)

    # Play

    def dispatch(self, session_id: str, player_id: Optional[str], action: Action) -> GameState:
        return self._commit(
            session_id,
            lambda s: apply_action(s, player_id, action, rng=self._rng, now=self._clock.now()),
        )

    def _on_draw_timeout(self, session_id: str, epoch: int) -> None:
        # Engine errors propagate to whoever drives the scheduler
        self.dispatch(session_id, None, DrawTimeout(epoch=epoch))

    # Read side

    def state(self, session_id: str) -> GameState:
        return self._store.load(session_id)

    def legal_actions(self, session_id: str, player_id: str) -> List[Action]:
        return get_legal_actions(self._store.load(session_id), player_id)

    def view(self, session_id: str, player_id: str) -> PlayerView:
        return PlayerView.from_state(self._store.load(session_id), player_id, now=self._clock.now())

    def close(self, session_id: str) -> None:
        """Cancel the session's timer; the stored state is left alone."""
        timer = self._timers.pop(session_id, None)
        if timer is not None:
            timer.cancel()
