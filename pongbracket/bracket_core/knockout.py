"""
Knockout bracket utilities for single-elimination Pong tournaments.

This module provides functionality for:
- Validating bracket sizes (must be power of 2)
- Building the first round from the seed order
- Applying a declared winner to a match
- Advancing a completed round into the next one, or detecting the final
"""

from typing import Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field, replace
import logging
import math

from pongbracket.bracket_core.errors import (
    InvalidBracketSizeError,
    InvalidWinnerError,
    MatchAlreadyDecidedError,
)
from pongbracket.bracket_core.structure import (
    Match,
    MatchStatus,
    Player,
    same_player,
)

logger = logging.getLogger(__name__)


def validate_bracket_size(player_count: int) -> bool:
    """Check if player count is a valid power of 2 for a knockout bracket."""
    return player_count > 1 and (player_count & (player_count - 1)) == 0


def calculate_rounds_needed(player_count: int) -> int:
    """Calculate number of rounds needed for a knockout bracket."""
    if not validate_bracket_size(player_count):
        raise InvalidBracketSizeError(f"Player count {player_count} is not a power of 2")
    return int(math.log2(player_count))


def get_knockout_stage_name(players_remaining: int) -> str:
    """Get the standard name for a knockout stage based on players remaining."""
    stage_names = {
        2: "finals",
        4: "semifinals",
        8: "quarterfinals",
    }
    return stage_names.get(players_remaining, f"round-of-{players_remaining}")


def get_round_stage_name(size: int, round_number: int) -> str:
    """Get the stage name of a round in a bracket of the given size."""
    return get_knockout_stage_name(size >> (round_number - 1))


def generate_next_round_pairings(
    players: Sequence[Player],
) -> Tuple[List[Tuple[Player, Player]], List[Player]]:
    """Pair players consecutively (0 with 1, 2 with 3, ...).

    Returns:
        (pairings, leftovers) where leftovers holds the unpaired trailing
        player when the count is odd.
    """
    pairings = []
    for i in range(0, len(players) - 1, 2):
        pairings.append((players[i], players[i + 1]))
    leftovers = list(players[len(pairings) * 2:])
    return pairings, leftovers


def build_initial_matches(players: Sequence[Player], tournament_id: int = 0) -> List[Match]:
    """Build the round 1 matches from the seed order.

    Adjacent players are paired (1v2, 3v4, ...). A trailing player without a
    partner is left out of round 1.

    Args:
        players: Entrants in seed order
        tournament_id: Tournament the matches belong to

    Returns:
        Pending round 1 matches without ids
    """
    pairings, leftovers = generate_next_round_pairings(players)
    if leftovers:
        logger.warning("Dropping unpaired player %s from round 1", leftovers[0])
    return [
        Match(player1=p1, player2=p2, round=1, tournament_id=tournament_id)
        for p1, p2 in pairings
    ]


def apply_result(match: Match, winner: Player) -> Match:
    """Return the match decided in favour of ``winner``.

    Applying the same winner to an already decided match returns it unchanged.

    Raises:
        InvalidWinnerError: If the winner is not one of the two players
        MatchAlreadyDecidedError: If the match already has another winner
    """
    if same_player(match.player1, winner):
        side = match.player1
    elif same_player(match.player2, winner):
        side = match.player2
    else:
        raise InvalidWinnerError(f"{winner} did not play in match {match}")

    if match.is_decided:
        current = match.winner()
        if current is not None and same_player(current, side):
            return match
        raise MatchAlreadyDecidedError(
            f"Match {match} was already won by {current or match.winner_alias}"
        )

    if side.id is not None:
        return replace(match, winner_id=side.id, winner_alias=None, status=MatchStatus.COMPLETED)
    return replace(match, winner_id=None, winner_alias=side.name, status=MatchStatus.COMPLETED)


def is_round_complete(matches: Iterable[Match]) -> bool:
    """A round is complete when it has matches and all of them are decided."""
    matches = list(matches)
    return bool(matches) and all(
        m.is_decided and m.status is not MatchStatus.PENDING for m in matches
    )


@dataclass(frozen=True)
class RoundAdvance:
    """Outcome of inspecting a bracket after a result.

    ``current_round`` is the highest complete round (None if no round is
    complete yet). ``finished`` is set once that round is the final.
    """

    current_round: Optional[int] = None
    next_round_matches: List[Match] = field(default_factory=list)
    byes: List[Player] = field(default_factory=list)
    finished: bool = False


def advance_round(matches: Iterable[Match], size: int) -> RoundAdvance:
    """Work out what follows the latest completed round.

    Args:
        matches: Every match of the tournament, in presentation order
        size: Declared bracket size

    Returns:
        RoundAdvance with the next round's pending matches, or finished=True
        once the final has been decided. Nothing is generated when no round
        is complete or the next round already exists.

    Raises:
        InvalidBracketSizeError: If size is not a power of 2
    """
    total_rounds = calculate_rounds_needed(size)

    rounds = {}
    for match in matches:
        rounds.setdefault(match.round, []).append(match)

    complete = [number for number, ms in rounds.items() if is_round_complete(ms)]
    if not complete:
        return RoundAdvance()
    current_round = max(complete)

    if current_round >= total_rounds:
        return RoundAdvance(current_round=current_round, finished=True)

    next_round = current_round + 1
    if next_round in rounds:
        return RoundAdvance(current_round=current_round)

    source = rounds[current_round]
    winners = [m.winner() for m in source]
    if any(w is None for w in winners):
        raise InvalidWinnerError(f"Round {current_round} has a winner outside its matches")

    pairings, byes = generate_next_round_pairings(winners)
    tournament_id = source[0].tournament_id
    next_matches = [
        Match(player1=p1, player2=p2, round=next_round, tournament_id=tournament_id)
        for p1, p2 in pairings
    ]
    logger.debug("Round %d complete, generated %d matches", current_round, len(next_matches))
    return RoundAdvance(
        current_round=current_round, next_round_matches=next_matches, byes=byes
    )
