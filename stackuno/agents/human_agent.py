"""Human agent - reads actions from terminal."""

from stackuno.engine import Action, PlayerView
from stackuno.engine.rules import ChooseColor, DrawCard, PlayCards


def _describe(action: Action) -> str:
    if isinstance(action, DrawCard):
        return "DRAW"
    if isinstance(action, ChooseColor):
        return f"COLOR {action.color.value}"
    cards = " + ".join(str(c) for c in action.cards)
    extra = f" (choose color: {action.chosen_color.value})" if action.chosen_color else ""
    return f"PLAY {cards}{extra}"


class HumanAgent:
    """Agent that prompts the human for input via terminal."""

    def __init__(self, name: str = "human"):
        self._name = name

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

        print("\n--- Your turn ---")
        print("Your hand:", ", ".join(str(c) for c in player_view.my_hand))
        print("Top discard:", player_view.top_discard, f"(color: {player_view.current_color.value})")
        if player_view.pending_draw_total:
            print(
                f"Pending: +{player_view.pending_draw_total} "
                f"({player_view.pending_draw_type.value}) - stack or draw"
            )
        print("\nLegal actions:")
        for i, a in enumerate(legal_actions):
            print(f"  {i}: {_describe(a)}")

        while True:
            try:
                raw = input("Enter number: ").strip()
                idx = int(raw)
                if 0 <= idx < len(legal_actions):
                    return legal_actions[idx]
            except ValueError:
                pass
            except EOFError:
                return None
            print("Invalid. Try again.")
