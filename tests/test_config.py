"""Tests for configuration, logging setup and the CLI."""

import json
import logging

import pytest
from typer.testing import CliRunner

from stackuno.cli import app
from stackuno.config import Config, get_env_bool, get_env_float, get_env_int
from stackuno.logging_config import DevelopmentFormatter, JSONFormatter, session_id_var


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("STACKUNO_X", "yes")
    assert get_env_bool("STACKUNO_X") is True
    monkeypatch.setenv("STACKUNO_X", "off")
    assert get_env_bool("STACKUNO_X", True) is False
    monkeypatch.setenv("STACKUNO_X", "maybe")
    assert get_env_bool("STACKUNO_X", True) is True

    monkeypatch.setenv("STACKUNO_X", "12")
    assert get_env_int("STACKUNO_X") == 12
    monkeypatch.setenv("STACKUNO_X", "twelve")
    assert get_env_int("STACKUNO_X", 3) == 3
    monkeypatch.setenv("STACKUNO_X", "2.5")
    assert get_env_float("STACKUNO_X") == 2.5


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("STACKUNO_DECK_COUNT", "2")
    monkeypatch.setenv("STACKUNO_SCORE_LIMIT", "300")
    monkeypatch.setenv("STACKUNO_DRAW_WINDOW", "4")
    monkeypatch.setenv("STACKUNO_WILD4_ANSWERS_DRAW2", "true")
    cfg = Config.from_env()
    options = cfg.rule_options()
    assert options.deck_count == 2
    assert options.score_limit == 300
    assert options.draw_window_seconds == 4.0
    assert options.wild4_answers_draw2 is True
    assert options.scoring_enabled is False


def test_rule_option_overrides():
    options = Config().rule_options(scoring_enabled=True, deck_count=None, score_limit=150)
    assert options.scoring_enabled is True
    assert options.deck_count == 1
    assert options.score_limit == 150


def _record(msg="hello"):
    return logging.LogRecord("stackuno.test", logging.INFO, __file__, 1, msg, None, None)


def test_json_formatter_includes_session():
    token = session_id_var.set("abcdef0123456789")
    try:
        data = json.loads(JSONFormatter().format(_record()))
    finally:
        session_id_var.reset(token)
    assert data["message"] == "hello"
    assert data["level"] == "INFO"
    assert data["session_id"] == "abcdef0123456789"


def test_development_formatter_context():
    assert "[session=" not in DevelopmentFormatter().format(_record())
    token = session_id_var.set("abcdef0123456789")
    try:
        line = DevelopmentFormatter().format(_record())
    finally:
        session_id_var.reset(token)
    assert "[session=abcdef01]" in line
    assert line.endswith("stackuno.test [session=abcdef01] - hello")


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_cli_play_bots(restore_logging):
    result = CliRunner().invoke(app, ["play", "--agents", "random,random", "--seed", "4", "--show-log"])
    assert result.exit_code == 0, result.output
    assert "Game Start" in result.output
    assert "Winner: player_" in result.output


def test_cli_needs_two_agents(restore_logging):
    result = CliRunner().invoke(app, ["play", "--agents", "random"])
    assert result.exit_code != 0


def test_cli_match_reports_abort(monkeypatch, restore_logging):
    from stackuno.orchestration.game_runner import GameResult, GameRunner

    def run_out(self):
        return GameResult(winner=None, num_turns=12, player_ids=("player_0", "player_1"), rounds=2, aborted=True)

    monkeypatch.setattr(GameRunner, "run", run_out)
    result = CliRunner().invoke(app, ["match", "--agents", "random,random", "--seed", "1"])
    assert result.exit_code == 1
    assert "Final winner" not in result.output
