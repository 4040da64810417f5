"""Game orchestration."""

from stackuno.orchestration.clock import ManualClock, SystemClock
from stackuno.orchestration.game_runner import GameResult, GameRunner
from stackuno.orchestration.store import InMemoryStateStore
from stackuno.orchestration.table import TableController
from stackuno.orchestration.tournament import run_tournament

__all__ = [
    "ManualClock",
    "SystemClock",
    "GameResult",
    "GameRunner",
    "InMemoryStateStore",
    "TableController",
    "run_tournament",
]
