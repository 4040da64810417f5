"""Invite codes."""

import random
import string
from typing import Optional


def generate_code(length: int = 6, rng: Optional[random.Random] = None) -> str:
    """Short uppercase code a player can type to join a session."""
    rng = rng or random.Random()
    return "".join(rng.choices(string.ascii_uppercase, k=length))
