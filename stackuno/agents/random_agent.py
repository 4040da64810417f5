"""Random agent - uniformly random legal moves."""

import random
from typing import Optional

from stackuno.engine import Action, PlayerView
from stackuno.engine.rules import PlayCards


class RandomAgent:
    """Picks uniformly among the distinct legal moves.

    A wild play counts as one move whatever color it names; the color is then
    drawn uniformly as well.
    """

    def __init__(self, name: str = "bot", rng: Optional[random.Random] = None):
        self._name = name
        self._rng = rng or random.Random()

    @property
    def name(self) -> str:
        return self._name

    def choose_move(
        self,
        player_view: PlayerView,
        legal_actions: list[Action],
        player_id: str,
    ) -> Action | None:
        if not legal_actions:
            return None

        moves: dict[object, list[Action]] = {}
        for action in legal_actions:
            key = tuple(c.id for c in action.cards) if isinstance(action, PlayCards) else action
            moves.setdefault(key, []).append(action)

        options = list(moves.values())
        return self._rng.choice(self._rng.choice(options))
