"""
Builder for creating bracket structures with a fluent API.

This module provides a builder class for playing through a bracket by player
name, without any database or HTTP plumbing. It is mostly used by tests and
the simulation command.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, field

from pongbracket.bracket_core.structure import Bracket, Match, MatchStatus, Player
from pongbracket.bracket_core.knockout import (
    advance_round,
    apply_result,
    build_initial_matches,
    calculate_rounds_needed,
)
from pongbracket.bracket_core.standings import compute_top3


@dataclass
class BracketSnapshot:
    """A bracket together with the players that entered it."""

    size: int
    players: List[Player]
    bracket: Bracket
    finished: bool = False
    byes: List[Player] = field(default_factory=list)

    @property
    def matches(self) -> List[Match]:
        return self.bracket.matches

    def player(self, name: str) -> Player:
        for player in self.players:
            if player.name == name:
                return player
        raise ValueError(f"Player not found: {name}")

    def standings(self) -> List[Player]:
        return compute_top3(self.bracket.matches)


class BracketBuilder:
    """Builder for creating and playing brackets easily."""

    def __init__(self, size: Optional[int] = None, tournament_id: int = 1):
        self._size = size
        self._players: Dict[str, Player] = {}
        self.bracket = Bracket(tournament_id=tournament_id)
        self.finished = False
        self.byes: List[Player] = []

    def player(self, name: str, id: Optional[int] = None) -> "BracketBuilder":
        """Add an entrant. Without an id the entrant is an alias-only guest."""
        if name in self._players:
            raise ValueError(f"Player {name} already added")
        self._players[name] = Player(id=id, name=name)
        return self

    def players(self, *names: str) -> "BracketBuilder":
        """Add several guest entrants at once."""
        for name in names:
            self.player(name)
        return self

    def size(self, size: int) -> "BracketBuilder":
        self._size = size
        return self

    def start(self) -> "BracketBuilder":
        """Create round 1 from the players in the order they were added."""
        if self._size is None:
            self._size = len(self._players)
        calculate_rounds_needed(self._size)
        if len(self._players) != self._size:
            raise ValueError(
                f"Bracket of {self._size} needs {self._size} players, got {len(self._players)}"
            )
        self.bracket.extend(
            build_initial_matches(list(self._players.values()), self.bracket.tournament_id)
        )
        return self

    def _get_player(self, name: str) -> Player:
        try:
            return self._players[name]
        except KeyError:
            raise ValueError(f"Player not found: {name}") from None

    def _find_pending_match(self, a: Player, b: Player) -> Match:
        for match in self.bracket.matches:
            if match.status is MatchStatus.PENDING and match.involves(a) and match.involves(b):
                return match
        raise ValueError(f"No pending match between {a} and {b}")

    def win(self, winner_name: str, loser_name: str) -> "BracketBuilder":
        """Decide the pending match between two players and advance the bracket."""
        if not self.bracket:
            self.start()
        winner = self._get_player(winner_name)
        loser = self._get_player(loser_name)
        match = self._find_pending_match(winner, loser)
        self.bracket.replace(apply_result(match, winner))

        advance = advance_round(self.bracket.matches, self._size)
        self.bracket.extend(advance.next_round_matches)
        self.byes.extend(advance.byes)
        self.finished = advance.finished
        return self

    def build(self) -> BracketSnapshot:
        return BracketSnapshot(
            size=self._size or len(self._players),
            players=list(self._players.values()),
            bracket=self.bracket,
            finished=self.finished,
            byes=list(self.byes),
        )
