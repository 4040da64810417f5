"""Built-in agents."""

from stackuno.agents.human_agent import HumanAgent
from stackuno.agents.random_agent import RandomAgent

__all__ = ["HumanAgent", "RandomAgent"]
