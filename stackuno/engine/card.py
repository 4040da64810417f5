"""Card, Color and Kind types for UNO."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Color(str, Enum):
    """Card colors. WILD only ever appears on wild cards, never as the table color."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    WILD = "wild"


PLAYABLE_COLORS: Tuple[Color, ...] = (Color.RED, Color.BLUE, Color.GREEN, Color.YELLOW)


class Kind(str, Enum):
    """Card kinds."""

    NUMBER = "number"
    SKIP = "skip"
    REVERSE = "reverse"
    DRAW2 = "draw2"
    WILD = "wild"
    WILD4 = "wild4"


WILD_KINDS = (Kind.WILD, Kind.WILD4)
DRAW_KINDS = (Kind.DRAW2, Kind.WILD4)


@dataclass(frozen=True)
class Card:
    """A UNO card.

    Number cards carry ``number`` (0-9). Wild and wild4 cards always have
    color=WILD; every other card has one of the four playable colors.
    ``id`` only identifies the physical card; matching and stacking look at
    ``face`` instead.
    """

    id: str
    color: Color
    kind: Kind
    number: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind == Kind.NUMBER:
            if self.number is None or not 0 <= self.number <= 9:
                raise ValueError(f"Number card needs a number 0-9, got {self.number}")
        elif self.number is not None:
            raise ValueError(f"Only number cards carry a number: {self.kind.value}")
        if self.kind in WILD_KINDS and self.color != Color.WILD:
            raise ValueError("Wild cards must have color=wild")
        if self.kind not in WILD_KINDS and self.color == Color.WILD:
            raise ValueError("Non-wild cards must have a playable color")

    @property
    def is_wild(self) -> bool:
        return self.kind in WILD_KINDS

    @property
    def face(self) -> Tuple[Kind, Optional[int]]:
        return (self.kind, self.number)

    @property
    def draw_amount(self) -> int:
        """Cards the next player must draw because of this card."""
        if self.kind == Kind.DRAW2:
            return 2
        if self.kind == Kind.WILD4:
            return 4
        return 0

    def __str__(self) -> str:
        if self.is_wild:
            return self.kind.value
        if self.kind == Kind.NUMBER:
            return f"{self.color.value} {self.number}"
        return f"{self.color.value} {self.kind.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "color": self.color.value,
            "kind": self.kind.value,
            "number": self.number,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        return cls(
            id=data["id"],
            color=Color(data["color"]),
            kind=Kind(data["kind"]),
            number=data.get("number"),
        )
