"""
Bracket structures for single-elimination Pong tournaments.

This module provides a small, immutable representation of:
- Players (registered users or alias-only guests)
- Matches between two players within a numbered round
- The bracket, a single authoritative match collection keyed by match id
"""

from typing import Dict, Iterable, List, Optional
from dataclasses import dataclass, field, replace
from enum import Enum

from pongbracket.bracket_core.errors import MatchNotFoundError


@dataclass(frozen=True)
class Player:
    """A tournament entrant.

    ``id`` is the registered user id, or None for a guest known only by alias.
    ``name`` is the display name (username or alias).
    """

    id: Optional[int]
    name: str

    @property
    def is_guest(self) -> bool:
        return self.id is None

    def __str__(self) -> str:
        return self.name


def same_player(a: Player, b: Player) -> bool:
    """Return True if both refer to the same entrant.

    Ids are compared when both sides carry one, otherwise the names are
    compared exactly (case-sensitive).
    """
    if a.id is not None and b.id is not None:
        return a.id == b.id
    return a.name == b.name


class MatchStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class TournamentStatus(Enum):
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class Match:
    """A single game of Pong between two players in a bracket round.

    A match is decided once either ``winner_id`` (registered winner) or
    ``winner_alias`` (guest winner) is set. Rounds are 1-based and increase
    toward the final.
    """

    player1: Player
    player2: Player
    round: int = 1
    tournament_id: int = 0
    id: Optional[int] = None
    winner_id: Optional[int] = None
    winner_alias: Optional[str] = None
    status: MatchStatus = MatchStatus.PENDING

    @property
    def players(self) -> List[Player]:
        return [self.player1, self.player2]

    @property
    def is_decided(self) -> bool:
        return self.winner_id is not None or self.winner_alias is not None

    def involves(self, player: Player) -> bool:
        """Return True if the player is one of the two sides of this match."""
        return same_player(self.player1, player) or same_player(self.player2, player)

    def winner(self) -> Optional[Player]:
        """Return the participant who won, or None while undecided."""
        if self.winner_id is not None:
            for player in self.players:
                if player.id == self.winner_id:
                    return player
        elif self.winner_alias is not None:
            for player in self.players:
                if player.id is None and player.name == self.winner_alias:
                    return player
        return None

    def loser(self) -> Optional[Player]:
        """Return the participant who lost, or None while undecided."""
        winner = self.winner()
        if winner is None:
            return None
        return self.player2 if winner is self.player1 else self.player1

    def __str__(self) -> str:
        return f"R{self.round}: {self.player1} vs {self.player2}"


@dataclass
class Bracket:
    """All matches of one tournament, keyed by match id.

    Matches added without an id are assigned the next free one. Insertion
    order is preserved, which is also the presentation order used to pair
    winners and to pick the third place.
    """

    tournament_id: int = 0
    matches_by_id: Dict[int, Match] = field(default_factory=dict)
    _next_id: int = field(default=1, init=False, repr=False)

    def __post_init__(self):
        if self.matches_by_id:
            self._next_id = max(self.matches_by_id) + 1

    @classmethod
    def from_matches(cls, matches: Iterable[Match], tournament_id: int = 0) -> "Bracket":
        bracket = cls(tournament_id=tournament_id)
        bracket.extend(matches)
        return bracket

    @property
    def matches(self) -> List[Match]:
        return list(self.matches_by_id.values())

    @property
    def max_round(self) -> int:
        """Highest round number present, 0 for an empty bracket."""
        return max((m.round for m in self.matches_by_id.values()), default=0)

    def __len__(self) -> int:
        return len(self.matches_by_id)

    def add(self, match: Match) -> Match:
        """Store a match, assigning an id if it has none, and return it."""
        if match.id is None:
            match = replace(match, id=self._next_id, tournament_id=self.tournament_id)
        elif match.id in self.matches_by_id:
            raise ValueError(f"Match {match.id} is already in the bracket")
        self.matches_by_id[match.id] = match
        self._next_id = max(self._next_id, match.id + 1)
        return match

    def extend(self, matches: Iterable[Match]) -> List[Match]:
        return [self.add(match) for match in matches]

    def get(self, match_id: int) -> Match:
        try:
            return self.matches_by_id[match_id]
        except KeyError:
            raise MatchNotFoundError(f"Match {match_id} does not exist") from None

    def replace(self, match: Match) -> Match:
        """Swap in a new version of an existing match (same id)."""
        self.get(match.id)
        self.matches_by_id[match.id] = match
        return match

    def round(self, number: int) -> List[Match]:
        """Return the matches of one round in insertion order."""
        return [m for m in self.matches_by_id.values() if m.round == number]

    def rounds(self) -> Dict[int, List[Match]]:
        """Group matches by round number, lowest round first."""
        grouped: Dict[int, List[Match]] = {}
        for match in self.matches_by_id.values():
            grouped.setdefault(match.round, []).append(match)
        return dict(sorted(grouped.items()))

    def archive(self) -> None:
        """Mark every match archived; winners are kept."""
        for match_id, match in list(self.matches_by_id.items()):
            self.matches_by_id[match_id] = replace(match, status=MatchStatus.ARCHIVED)
