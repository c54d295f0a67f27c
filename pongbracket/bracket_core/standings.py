"""
Final standings for a single-elimination bracket.

Only the podium is computed. First and second place come from the final.
Third place goes to the loser of the first decided semifinal in the order
the matches are given; no consolation match is played.
"""

from typing import Iterable, List
from dataclasses import dataclass

from pongbracket.bracket_core.structure import Match, Player


@dataclass(frozen=True)
class Placement:
    position: int
    player: Player


def compute_top3(matches: Iterable[Match]) -> List[Player]:
    """Return [1st, 2nd, 3rd], or an empty list until the final is decided.

    The final is the single match of the highest round. Third place is left out when there is no decided semifinal (2-player
    brackets).
    """
    matches = list(matches)
    if not matches:
        return []

    max_round = max(m.round for m in matches)
    last_round = [m for m in matches if m.round == max_round]
    if len(last_round) != 1:
        # The final has not been generated yet
        return []
    final = last_round[0]
    first = final.winner()
    if first is None:
        return []
    podium = [first, final.loser()]

    for match in matches:
        if match.round == max_round - 1 and match.is_decided:
            third = match.loser()
            if third is not None:
                podium.append(third)
                break

    return podium


def compute_placements(matches: Iterable[Match]) -> List[Placement]:
    """Same as compute_top3 with explicit positions."""
    return [
        Placement(position, player)
        for position, player in enumerate(compute_top3(matches), start=1)
    ]
