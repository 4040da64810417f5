"""Time sources and one-shot schedulers for draw-response deadlines."""

import heapq
import itertools
import threading
import time
from typing import Any, Callable, Dict, List, Protocol, Tuple


class Clock(Protocol):
    def now(self) -> float:
        ...


class Scheduler(Protocol):
    def schedule_once(self, deadline: float, callback: Callable[[], None]) -> Any:
        """Run ``callback`` once at ``deadline``; return a token for ``cancel``."""
        ...

    def cancel(self, token: Any) -> None:
        ...


class SystemClock:
    """Wall clock with threading.Timer based scheduling."""

    def now(self) -> float:
        return time.time()

    def schedule_once(self, deadline: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(0.0, deadline - self.now()), callback)
        timer.daemon = True
        timer.start()
        return timer

    def cancel(self, token: threading.Timer) -> None:
        token.cancel()


class ManualClock:
    """Clock that only moves when told to. Used by tests and bot simulations.

    Callbacks due at or before the new time run inside ``advance``, earliest
    first, with ``now()`` reporting their deadline while they run.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int]] = []
        self._callbacks: Dict[int, Callable[[], None]] = {}
        self._ids = itertools.count()

    def now(self) -> float:
        return self._now

    def schedule_once(self, deadline: float, callback: Callable[[], None]) -> int:
        token = next(self._ids)
        self._callbacks[token] = callback
        heapq.heappush(self._queue, (deadline, token))
        return token

    def cancel(self, token: int) -> None:
        self._callbacks.pop(token, None)

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def next_deadline(self) -> float | None:
        while self._queue and self._queue[0][1] not in self._callbacks:
            heapq.heappop(self._queue)
        return self._queue[0][0] if self._queue else None

    def advance(self, seconds: float) -> None:
        target = self._now + seconds
        while True:
            deadline = self.next_deadline()
            if deadline is None or deadline > target:
                break
            _, token = heapq.heappop(self._queue)
            callback = self._callbacks.pop(token)
            self._now = max(self._now, deadline)
            callback()
        self._now = target
