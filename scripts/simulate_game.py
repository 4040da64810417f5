"""Simulate a scored match between random agents."""

import random

from stackuno.agents.random_agent import RandomAgent
from stackuno.engine import RuleOptions
from stackuno.logging_config import setup_logging
from stackuno.orchestration.game_runner import GameRunner


def main():
    setup_logging("INFO")
    rng = random.Random(42)
    agents = {
        f"p{i}": RandomAgent(f"Bot{i}", rng=random.Random(rng.random()))
        for i in range(1, 5)
    }

    options = RuleOptions(deck_count=2, scoring_enabled=True, score_limit=300)
    runner = GameRunner(agents, options=options, seed=42)
    result = runner.run()

    state = runner.table.state(runner.session_id)
    for entry in state.play_history[-20:]:
        print(f"> {entry}")

    print(f"Match finished! Winner: {result.winner}")
    print(f"Rounds: {result.rounds}, turns: {result.num_turns}")
    for pid, total in sorted(result.total_scores.items(), key=lambda x: x[1]):
        print(f"  {pid}: {total}")


if __name__ == "__main__":
    main()
