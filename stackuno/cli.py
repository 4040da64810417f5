"""CLI entry point."""

from __future__ import annotations

import random
from typing import Optional

import typer

from stackuno.config import config
from stackuno.logging_config import setup_logging

app = typer.Typer(help="UNO with stacking, draw timers and match scoring")


@app.callback()
def main(
    log_level: str = typer.Option(config.LOG_LEVEL, "--log-level", help="DEBUG, INFO, WARNING, ..."),
    json_logs: bool = typer.Option(config.LOG_JSON, "--json-logs", help="Log JSON lines"),
) -> None:
    setup_logging(log_level, json_output=json_logs)


def _parse_agents(agent_specs: str, seed: Optional[int]) -> dict[str, "AgentProtocol"]:
    from stackuno.agent.protocol import AgentProtocol
    from stackuno.agents.human_agent import HumanAgent
    from stackuno.agents.random_agent import RandomAgent

    rng = random.Random(seed)
    parts = [s.strip().lower() for s in agent_specs.split(",") if s.strip()]
    if len(parts) < 2:
        raise typer.BadParameter("Need at least two agents.")
    agents: dict[str, AgentProtocol] = {}
    for i, kind in enumerate(parts):
        pid = f"player_{i}"
        if kind == "random":
            agents[pid] = RandomAgent(name=f"Bot {i}", rng=random.Random(rng.random()))
        elif kind == "human":
            agents[pid] = HumanAgent(name=f"Human_{i}")
        else:
            raise typer.BadParameter(f"Unknown agent type: {kind}. Use 'random' or 'human'.")
    return agents


def _options(deck_count: Optional[int], scoring: bool, score_limit: Optional[int], wild4_on_draw2: Optional[bool]):
    return config.rule_options(
        deck_count=deck_count,
        scoring_enabled=scoring,
        score_limit=score_limit,
        wild4_answers_draw2=wild4_on_draw2,
    )


def _print_history(history) -> None:
    for entry in history:
        typer.echo(f"  {entry}")


@app.command()
def play(
    agents: str = typer.Option(
        "human,random,random",
        "--agents",
        "-a",
        help="Comma-separated: random or human",
    ),
    deck_count: Optional[int] = typer.Option(None, "--deck-count", "-d", help="1, or 2 for stacking mode"),
    wild4_on_draw2: Optional[bool] = typer.Option(
        None, "--wild4-on-draw2/--strict-draw-responses", help="Let +4 answer a +2 chain"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    show_log: bool = typer.Option(False, "--show-log", help="Print the play history"),
) -> None:
    """Play a single round."""
    from stackuno.orchestration.game_runner import GameRunner

    agent_map = _parse_agents(agents, seed)
    runner = GameRunner(agent_map, options=_options(deck_count, False, None, wild4_on_draw2), seed=seed)
    result = runner.run()
    if show_log:
        _print_history(runner.table.state(runner.session_id).play_history)
    if result.aborted:
        typer.echo("Fatal: the draw and discard piles ran out of cards", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Winner: {result.winner or 'None'}")
    typer.echo(f"Turns: {result.num_turns}")


@app.command()
def match(
    agents: str = typer.Option("random,random,random,random", "--agents", "-a", help="Comma-separated: random or human"),
    score_limit: Optional[int] = typer.Option(None, "--score-limit", "-l", help="Points that eliminate a player"),
    deck_count: Optional[int] = typer.Option(None, "--deck-count", "-d", help="1, or 2 for stacking mode"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
) -> None:
    """Play scored rounds until one player is left."""
    from stackuno.orchestration.game_runner import GameRunner

    agent_map = _parse_agents(agents, seed)
    runner = GameRunner(agent_map, options=_options(deck_count, True, score_limit, None), seed=seed)
    result = runner.run()
    if result.aborted:
        typer.echo(
            f"Fatal: the draw and discard piles ran out of cards in round {result.rounds}",
            err=True,
        )
        raise typer.Exit(code=1)
    typer.echo(f"Final winner: {result.winner or 'None'} after {result.rounds} rounds")
    for pid, total in sorted(result.total_scores.items(), key=lambda x: x[1]):
        typer.echo(f"  {pid}: {total} points")


@app.command()
def tournament(
    agents: str = typer.Option("random,random", "--agents", "-a", help="Comma-separated agent types"),
    games: int = typer.Option(100, "--games", "-g", help="Number of games"),
    scoring: bool = typer.Option(False, "--scoring", help="Each game is a full scored match"),
    deck_count: Optional[int] = typer.Option(None, "--deck-count", "-d", help="1, or 2 for stacking mode"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
) -> None:
    """Run a tournament."""
    from stackuno.orchestration.tournament import run_tournament

    agent_map = _parse_agents(agents, seed)
    wins = run_tournament(
        agent_map,
        num_games=games,
        options=_options(deck_count, scoring, None, None),
        seed=seed,
    )
    typer.echo("Tournament results:")
    for pid, w in sorted(wins.items(), key=lambda x: -x[1]):
        typer.echo(f"  {pid}: {w} wins")


if __name__ == "__main__":
    app()
