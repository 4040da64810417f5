"""Tournament - run many games and aggregate results."""

import random
from collections import defaultdict
from typing import Any, Optional

from stackuno.engine import RuleOptions
from stackuno.orchestration.game_runner import GameRunner


def run_tournament(
    agents: dict[str, Any],
    num_games: int = 100,
    options: Optional[RuleOptions] = None,
    seed: int | None = None,
) -> dict[str, int]:
    """Run ``num_games`` games between the same agents.

    The seating order rotates every game so nobody always leads.

    Returns:
        Dict mapping player_id to number of wins.
    """
    player_ids = list(agents.keys())
    wins: dict[str, int] = defaultdict(int)

    rng = random.Random(seed)
    for g in range(num_games):
        shift = g % len(player_ids)
        order = player_ids[shift:] + player_ids[:shift]
        ordered_agents = {pid: agents[pid] for pid in order}
        runner = GameRunner(ordered_agents, options=options, seed=rng.randint(0, 2**31 - 1))
        result = runner.run()
        if result.winner:
            wins[result.winner] += 1

    return dict(wins)
