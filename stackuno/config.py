"""
Configuration for stackuno.

Loaded from (in order of precedence):
1. Environment variables
2. .env file (if present)
3. Default values

Usage:
    from stackuno.config import config
    options = config.rule_options()
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from stackuno.engine.game_state import DRAW_RESPONSE_SECONDS, RuleOptions

# Load environment variables from .env file
load_dotenv()


def get_env(key: str, default: str = "") -> str:
    """Get environment variable with default."""
    return os.environ.get(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    if val in ("false", "0", "no", "off"):
        return False
    return default


def get_env_int(key: str, default: int = 0) -> int:
    """Get integer environment variable."""
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default


def get_env_float(key: str, default: float = 0.0) -> float:
    try:
        return float(os.environ.get(key, str(default)))
    except ValueError:
        return default


@dataclass
class Config:
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Table defaults
    DECK_COUNT: int = 1
    HAND_SIZE: int = 7
    DRAW_WINDOW_SECONDS: float = DRAW_RESPONSE_SECONDS
    MAX_PLAYERS: int = 6
    SCORE_LIMIT: int = 500
    WILD4_ANSWERS_DRAW2: bool = False

    INVITE_CODE_LENGTH: int = 6

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            LOG_LEVEL=get_env("STACKUNO_LOG_LEVEL", "INFO"),
            LOG_JSON=get_env_bool("STACKUNO_LOG_JSON", False),
            DECK_COUNT=get_env_int("STACKUNO_DECK_COUNT", 1),
            HAND_SIZE=get_env_int("STACKUNO_HAND_SIZE", 7),
            DRAW_WINDOW_SECONDS=get_env_float("STACKUNO_DRAW_WINDOW", DRAW_RESPONSE_SECONDS),
            MAX_PLAYERS=get_env_int("STACKUNO_MAX_PLAYERS", 6),
            SCORE_LIMIT=get_env_int("STACKUNO_SCORE_LIMIT", 500),
            WILD4_ANSWERS_DRAW2=get_env_bool("STACKUNO_WILD4_ANSWERS_DRAW2", False),
            INVITE_CODE_LENGTH=get_env_int("STACKUNO_INVITE_CODE_LENGTH", 6),
        )

    def rule_options(self, **overrides) -> RuleOptions:
        """Table rules from configured defaults; keyword overrides win."""
        values = dict(
            deck_count=self.DECK_COUNT,
            hand_size=self.HAND_SIZE,
            draw_window_seconds=self.DRAW_WINDOW_SECONDS,
            wild4_answers_draw2=self.WILD4_ANSWERS_DRAW2,
            max_players=self.MAX_PLAYERS,
            scoring_enabled=False,
            score_limit=self.SCORE_LIMIT,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return RuleOptions(**values)


config = Config.from_env()
