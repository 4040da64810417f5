"""Round scoring and elimination across a match."""

from dataclasses import replace
from typing import Dict, Iterable, Mapping, Sequence

from stackuno.engine.card import Card, Kind
from stackuno.engine.game_state import MatchSession

ACTION_POINTS = 20
WILD_POINTS = 50


def card_points(card: Card) -> int:
    """Penalty points for a card left in hand."""
    if card.kind == Kind.NUMBER:
        return card.number or 0
    if card.kind in (Kind.WILD, Kind.WILD4):
        return WILD_POINTS
    return ACTION_POINTS


def round_score(hand: Iterable[Card]) -> int:
    return sum(card_points(c) for c in hand)


def start_match(score_limit: int) -> MatchSession:
    return MatchSession(score_limit=score_limit)


def record_round(
    match: MatchSession,
    hands: Mapping[str, Sequence[Card]],
    winner_id: str,
    sitting_out: Iterable[str] = (),
) -> MatchSession:
    """Add one finished round to the scoreboard.

    ``hands`` maps every player who took part in the round to the cards left
    in their hand. The winner scores 0. Players already eliminated neither
    score nor get eliminated again. ``sitting_out`` names players still in
    the match who were not dealt in; they keep their total (0 if new). When
    only one player in the whole match is left standing they become the
    final winner.
    """
    round_scores: Dict[str, int] = {}
    totals = dict(match.player_total_scores)
    eliminated = list(match.eliminated_players)

    for player_id, hand in hands.items():
        if player_id in eliminated:
            continue
        points = 0 if player_id == winner_id else round_score(hand)
        round_scores[player_id] = points
        totals[player_id] = totals.get(player_id, 0) + points
        if totals[player_id] >= match.score_limit and player_id not in eliminated:
            eliminated.append(player_id)

    for player_id in sitting_out:
        totals.setdefault(player_id, 0)

    remaining = [pid for pid in totals if pid not in eliminated]
    final_winner = remaining[0] if len(remaining) == 1 else None

    return replace(
        match,
        match_scores=match.match_scores + (round_scores,),
        player_total_scores=totals,
        eliminated_players=tuple(eliminated),
        final_winner_id=final_winner,
    )
