"""Tests for the table controller, state store and game runner."""

import json
import random
from dataclasses import replace

import pytest
from stackuno.agents.random_agent import RandomAgent
from stackuno.engine import (
    DrawCard,
    EngineError,
    GameState,
    IllegalMoveError,
    Phase,
    PlayCards,
    RuleOptions,
    SeatingError,
    StaleStateError,
    TurnViolationError,
    create_session,
    join,
)
from stackuno.engine.pending import arm_pending
from stackuno.engine.scoring import record_round, start_match
from stackuno.orchestration import GameRunner, InMemoryStateStore, ManualClock, TableController, run_tournament

from builders import cards, table


def _controller():
    store = InMemoryStateStore()
    return TableController(store, ManualClock(), rng=random.Random(11)), store


def test_create_join_start() -> None:
    controller, store = _controller()
    state = controller.create("host", "Host")
    sid = state.session_id
    assert sid in store
    assert len(state.invite_code) == 6
    assert state.invite_code.isalpha() and state.invite_code.isupper()
    assert controller.session_for_code(state.invite_code.lower()) == sid
    with pytest.raises(SeatingError):
        controller.session_for_code("NOPE")

    controller.join(sid, "p2", "Two", auto_seat=True)
    with pytest.raises(SeatingError):
        controller.start(sid, "p2")

    state = controller.start(sid, "host")
    assert state.phase == Phase.AWAITING_PLAY
    assert controller.legal_actions(sid, "host")
    assert controller.legal_actions(sid, "p2") == []

    view = controller.view(sid, "p2")
    assert len(view.my_hand) == 7
    assert view.current_player == "host"
    assert view.num_cards_per_player == {"host": 7, "p2": 7}
    assert view.history[0].startswith("Game Start")


def test_rejected_action_leaves_store_untouched() -> None:
    controller, _ = _controller()
    sid = controller.create("host", "Host").session_id
    controller.join(sid, "p2", "Two", auto_seat=True)
    before = controller.start(sid, "host")
    with pytest.raises(TurnViolationError):
        controller.dispatch(sid, "p2", DrawCard())
    assert controller.state(sid) == before


def test_subscribers_notified_on_save() -> None:
    controller, store = _controller()
    sid = controller.create("host", "Host").session_id
    events = []
    unsubscribe = store.subscribe(sid, events.append)

    controller.join(sid, "p2", "Two")
    assert events == [sid]

    unsubscribe()
    controller.join(sid, "p3", "Three")
    assert events == [sid]


def test_store_unknown_session() -> None:
    with pytest.raises(EngineError):
        InMemoryStateStore().load("missing")


def test_store_rejects_stale_versions() -> None:
    store = InMemoryStateStore(check_versions=True)
    state = create_session("s1", "host", "Host")
    store.save("s1", state)
    with pytest.raises(StaleStateError):
        store.save("s1", state)
    store.save("s1", join(state, "p2", "Two"))
    assert store.load("s1").version == 1


def test_store_returns_copies() -> None:
    store = InMemoryStateStore()
    state = create_session("s1", "host", "Host")
    store.save("s1", state)
    assert store.load("s1") == state
    assert store.load("s1") is not store.load("s1")


def test_state_record_is_json() -> None:
    state = table({"a": ["red draw2", "wild"], "b": ["blue 3"]}, options=RuleOptions(scoring_enabled=True))
    state = arm_pending(state, cards("red draw2"), now=1.5)
    match = record_round(start_match(500), {"a": cards("red 4"), "b": []}, winner_id="b")
    state = replace(state, phase=Phase.AWAITING_DRAW_RESPONSE, match=match, version=7)

    record = json.loads(json.dumps(state.to_dict()))
    assert GameState.from_dict(record) == state
    assert record["pending_draw_type"] == "draw2"
    assert record["play_history"] == []
    assert record["match"]["player_total_scores"] == {"a": 4, "b": 0}


class SlowAgent(RandomAgent):
    """Never answers a pending draw."""

    def choose_move(self, player_view, legal_actions, player_id):
        if player_view.pending_draw_total:
            return None
        return super().choose_move(player_view, legal_actions, player_id)


def _bots(n, agent_cls=RandomAgent, seed=0):
    return {f"p{i}": agent_cls(name=f"Bot{i}", rng=random.Random(seed + i)) for i in range(n)}


def test_runner_plays_one_round() -> None:
    runner = GameRunner(_bots(3), seed=3)
    result = runner.run()
    assert not result.aborted
    assert result.winner in result.player_ids
    assert result.rounds == 1
    assert result.num_turns > 0

    state = runner.table.state(runner.session_id)
    assert state.phase == Phase.ROUND_ENDED
    assert state.get_player(result.winner).hand == ()
    assert state.total_cards() == 108
    assert runner.clock.pending == 0


def test_runner_lets_window_expire() -> None:
    runner = GameRunner(_bots(2, SlowAgent, seed=20), seed=8)
    result = runner.run()
    assert not result.aborted

    history = runner.table.state(runner.session_id).play_history
    forced = [e.action for e in history if e.action.startswith(("drew", "ran out")) and "cards" in e.action]
    assert all(a.startswith("ran out of time") for a in forced)


def test_runner_plays_scored_match() -> None:
    options = RuleOptions(deck_count=2, scoring_enabled=True, score_limit=100)
    runner = GameRunner(_bots(3, seed=40), options=options, seed=5)
    result = runner.run()
    assert not result.aborted
    assert result.winner in result.player_ids
    assert result.rounds >= 1

    state = runner.table.state(runner.session_id)
    assert state.phase == Phase.MATCH_ENDED
    assert state.match.current_match_number == result.rounds
    assert set(state.match.eliminated_players) == set(result.player_ids) - {result.winner}
    for pid in state.match.eliminated_players:
        assert result.total_scores[pid] >= 100
    assert result.total_scores[result.winner] < 100


def test_tournament_counts_wins() -> None:
    agents = _bots(2, seed=60)
    wins = run_tournament(agents, num_games=4, seed=1)
    assert set(wins) <= set(agents)
    assert sum(wins.values()) == 4


def test_dispatch_rejects_cards_not_in_hand() -> None:
    controller, _ = _controller()
    sid = controller.create("host", "Host").session_id
    controller.join(sid, "p2", "Two", auto_seat=True)
    before = controller.start(sid, "host")
    with pytest.raises(IllegalMoveError):
        controller.dispatch(sid, "host", PlayCards(cards=tuple(cards("wild"))))
    assert controller.state(sid).version == before.version
