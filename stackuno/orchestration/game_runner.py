"""Single game runner."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

from stackuno.engine import DeckExhaustedError, Phase, RuleOptions
from stackuno.engine.game_state import PLAY_PHASES
from stackuno.engine.rules import DrawCard
from stackuno.orchestration.clock import ManualClock
from stackuno.orchestration.store import InMemoryStateStore
from stackuno.orchestration.table import TableController

if TYPE_CHECKING:
    from stackuno.agent.protocol import AgentProtocol

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Result of a completed game (one round, or a whole scored match)."""

    winner: Optional[str]
    num_turns: int
    player_ids: tuple[str, ...]
    rounds: int = 1
    total_scores: Dict[str, int] = field(default_factory=dict)
    aborted: bool = False


class GameRunner:
    """Runs a UNO game to completion on a simulated clock.

    With ``options.scoring_enabled`` rounds are dealt until a final winner
    emerges; otherwise a single round is played. An agent that answers None
    while a draw is pending lets the response window run out.
    """

    def __init__(
        self,
        agents: dict[str, "AgentProtocol"],
        options: Optional[RuleOptions] = None,
        seed: Optional[int] = None,
        max_turns: int = 5000,
    ):
        self._agents = agents
        self._options = options or RuleOptions()
        self._rng = random.Random(seed)
        self._max_turns = max_turns
        self.clock = ManualClock()
        self.store = InMemoryStateStore(check_versions=True)
        self.table = TableController(self.store, self.clock, rng=self._rng)
        self.session_id: Optional[str] = None

    def _setup(self) -> str:
        player_ids = list(self._agents)
        host_id = player_ids[0]
        state = self.table.create(host_id, self._agents[host_id].name, self._options)
        for pid in player_ids[1:]:
            self.table.join(state.session_id, pid, self._agents[pid].name, auto_seat=True)
        return state.session_id

    def run(self) -> GameResult:
        """Run the game and return the result."""
        player_ids = tuple(self._agents)
        session_id = self.session_id = self._setup()
        host_id = player_ids[0]
        state = self.table.start(session_id, host_id)
        num_turns = 0
        rounds = 1
        aborted = False

        while num_turns < self._max_turns:
            if state.phase == Phase.ROUND_ENDED and self._options.scoring_enabled:
                state = self.table.start(session_id, host_id)
                rounds += 1
                continue
            if state.phase not in PLAY_PHASES:
                break

            pid = state.current_player().id
            legal = self.table.legal_actions(session_id, pid)
            view = self.table.view(session_id, pid)
            action = self._agents[pid].choose_move(view, legal, pid)

            if action is None and state.phase != Phase.AWAITING_DRAW_RESPONSE:
                action = next((a for a in legal if isinstance(a, DrawCard)), legal[0])

            try:
                if action is None:
                    self.clock.advance(state.seconds_remaining(self.clock.now()))
                    state = self.table.state(session_id)
                else:
                    state = self.table.dispatch(session_id, pid, action)
            except DeckExhaustedError:
                logger.error("Round aborted in session=%s: cards ran out", session_id)
                aborted = True
                break
            num_turns += 1

        self.table.close(session_id)
        if state.match is not None:
            winner = state.match.final_winner_id
            totals = dict(state.match.player_total_scores)
        else:
            winner = state.winner_id
            totals = {}
        return GameResult(
            winner=None if aborted else winner,
            num_turns=num_turns,
            player_ids=player_ids,
            rounds=rounds,
            total_scores=totals,
            aborted=aborted,
        )
