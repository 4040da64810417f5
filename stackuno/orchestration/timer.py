"""Draw-response timer.

One timer per session. Arming a new deadline cancels the previous one, and the
timer is cancelled as soon as the pending draw is resolved. The epoch passed
to ``on_expire`` lets the engine discard a fire that lost a race.
"""

import logging
import threading
from typing import Any, Callable, ContextManager, Optional

from stackuno.engine.game_state import GameState
from stackuno.orchestration.clock import Scheduler

logger = logging.getLogger(__name__)


class DrawTimer:
    """Keeps one scheduled callback in step with a session's draw deadline.

    ``lock`` guards the armed token; the table controller passes the session
    lock so a firing callback and a concurrent ``sync`` never interleave.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_expire: Callable[[int], None],
        lock: Optional[ContextManager[Any]] = None,
    ):
        self._scheduler = scheduler
        self._on_expire = on_expire
        self._lock = lock if lock is not None else threading.RLock()
        self._token: Optional[Any] = None
        self._epoch: Optional[int] = None

    @property
    def armed_epoch(self) -> Optional[int]:
        return self._epoch if self._token is not None else None

    def sync(self, state: GameState) -> None:
        """Match the scheduled callback to the state's deadline."""
        with self._lock:
            if state.draw_deadline is None:
                self.cancel()
            elif state.draw_epoch != self._epoch:
                self.arm(state.draw_deadline, state.draw_epoch)

    def arm(self, deadline: float, epoch: int) -> None:
        with self._lock:
            self.cancel()
            self._epoch = epoch
            self._token = self._scheduler.schedule_once(deadline, lambda: self._fire(epoch))
        logger.debug("Draw timer armed epoch=%d deadline=%.2f", epoch, deadline)

    def cancel(self) -> None:
        with self._lock:
            if self._token is not None:
                self._scheduler.cancel(self._token)
                logger.debug("Draw timer cancelled epoch=%s", self._epoch)
            self._token = None

    def _fire(self, epoch: int) -> None:
        with self._lock:
            if epoch != self._epoch or self._token is None:
                return
            self._token = None
        self._on_expire(epoch)
