"""
Tournament lifecycle: creation, registration, start and result recording.

This module drives the bracket_core functions the way the tournament routes
do: a tournament is created in the waiting state, fills up with registered
users and guests, gets its first round when started, and completes once the
final is decided. Records are kept in memory; storing them is up to the
caller.
"""

import logging
import random
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from django.conf import settings
from django.utils import timezone

from pongbracket.bracket_core.errors import (
    InvalidBracketSizeError,
    InvalidWinnerError,
    RegistrationError,
    TournamentNotFoundError,
    TournamentStateError,
)
from pongbracket.bracket_core.knockout import (
    advance_round,
    apply_result,
    build_initial_matches,
    validate_bracket_size,
)
from pongbracket.bracket_core.standings import compute_top3
from pongbracket.bracket_core.structure import (
    Bracket,
    Match,
    Player,
    TournamentStatus,
    same_player,
)
from pongbracket.tournament.cleanup import archive_stale_tournaments

logger = logging.getLogger(__name__)


def get_allowed_sizes():
    return tuple(getattr(settings, "PONGBRACKET_ALLOWED_SIZES", (4, 8)))


@dataclass
class TournamentRecord:
    """A tournament with its entrants and bracket."""

    id: int
    name: str
    size: int
    status: TournamentStatus = TournamentStatus.WAITING
    created_by_id: Optional[int] = None
    participants: List[Player] = field(default_factory=list)
    bracket: Optional[Bracket] = None
    winner: Optional[Player] = None
    created_at: datetime = field(default_factory=timezone.now)
    updated_at: datetime = field(default_factory=timezone.now)

    def __post_init__(self):
        if self.bracket is None:
            self.bracket = Bracket(tournament_id=self.id)

    @property
    def is_full(self) -> bool:
        return len(self.participants) >= self.size

    def touch(self) -> None:
        self.updated_at = timezone.now()


def resolve_winner(
    match: Match, winner_id: Optional[int] = None, winner_alias: Optional[str] = None
) -> Player:
    """Find the side of a match named by a winner id or a guest alias.

    Exactly one of ``winner_id`` and ``winner_alias`` must be given.
    """
    if winner_id is None and winner_alias is None:
        raise InvalidWinnerError("Either winner_id or winner_alias is required")
    if winner_id is not None and winner_alias is not None:
        raise InvalidWinnerError("Only one of winner_id or winner_alias should be provided")

    for player in match.players:
        if winner_id is not None and player.id == winner_id:
            return player
        if winner_alias is not None and player.id is None and player.name == winner_alias:
            return player
    raise InvalidWinnerError(
        f"{winner_alias if winner_id is None else winner_id} did not play in match {match}"
    )


class TournamentService:
    """In-memory owner of tournament records.

    Every bracket change goes through this service, so the bracket of a
    tournament is only ever extended by the round advancer. Writes hold the
    service lock from reading the record to storing the change, so at most
    one decision per match is ever committed.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._tournaments: Dict[int, TournamentRecord] = {}
        self._next_id = 1
        self._rng = rng or random.Random()
        self._lock = threading.RLock()

    def create(self, name: str, size: int, created_by_id: Optional[int] = None) -> TournamentRecord:
        if size not in get_allowed_sizes() or not validate_bracket_size(size):
            raise InvalidBracketSizeError(
                f"Tournament size {size} is not one of {get_allowed_sizes()}"
            )
        with self._lock:
            tournament = TournamentRecord(
                id=self._next_id, name=name, size=size, created_by_id=created_by_id
            )
            self._tournaments[tournament.id] = tournament
            self._next_id += 1
        logger.info("Created tournament %d (%s) for %d players", tournament.id, name, size)
        return tournament

    def get(self, tournament_id: int) -> TournamentRecord:
        try:
            return self._tournaments[tournament_id]
        except KeyError:
            raise TournamentNotFoundError(f"Tournament {tournament_id} not found") from None

    def all(self) -> List[TournamentRecord]:
        """All tournaments, newest first."""
        with self._lock:
            tournaments = list(self._tournaments.values())
        return sorted(tournaments, key=lambda t: (t.created_at, t.id), reverse=True)

    def register(
        self,
        tournament_id: int,
        user_id: Optional[int] = None,
        alias: Optional[str] = None,
        username: Optional[str] = None,
    ) -> Player:
        """Add a registered user or an alias-only guest to a waiting tournament.

        Registered users are shown by username when known, then alias, then
        ``user-<id>``.
        """
        if user_id is None and not alias:
            raise RegistrationError("Either user_id or alias is required")

        if user_id is not None:
            player = Player(id=user_id, name=username or alias or f"user-{user_id}")
        else:
            player = Player(id=None, name=alias)

        with self._lock:
            tournament = self.get(tournament_id)
            if tournament.status is not TournamentStatus.WAITING:
                raise TournamentStateError(
                    f"Tournament {tournament_id} is {tournament.status.value}, registration is closed"
                )
            if tournament.is_full:
                raise RegistrationError(f"Tournament {tournament_id} is full")
            if any(same_player(player, p) for p in tournament.participants):
                raise RegistrationError(f"{player} is already registered")

            tournament.participants.append(player)
            tournament.touch()
            registered = len(tournament.participants)

        logger.info(
            "Registered %s for tournament %d (%d/%d)",
            player, tournament_id, registered, tournament.size,
        )
        return player

    def start(self, tournament_id: int, shuffle: bool = True) -> TournamentRecord:
        """Seed the participants and create round 1.

        The tournament must be waiting and have exactly ``size`` participants.
        """
        with self._lock:
            tournament = self.get(tournament_id)
            if tournament.status is not TournamentStatus.WAITING:
                raise TournamentStateError(f"Tournament {tournament_id} cannot be started")
            if len(tournament.participants) != tournament.size:
                raise TournamentStateError(
                    f"Tournament {tournament_id} needs {tournament.size} participants, "
                    f"has {len(tournament.participants)}"
                )

            seeds = list(tournament.participants)
            if shuffle:
                self._rng.shuffle(seeds)

            matches = tournament.bracket.extend(build_initial_matches(seeds, tournament.id))
            tournament.status = TournamentStatus.IN_PROGRESS
            tournament.touch()

        logger.info("Started tournament %d", tournament_id)
        for match in matches:
            logger.debug("Generated match %d: %s", match.id, match)
        return tournament

    def record_result(self, tournament_id: int, match_id: int, winner: Player) -> Match:
        """Decide a match, then advance the bracket or finish the tournament.

        Raises:
            TournamentStateError: If the tournament is not in progress
            MatchNotFoundError: If the match is not part of the tournament
            InvalidWinnerError: If the winner did not play the match
            MatchAlreadyDecidedError: If the match already has another winner
        """
        with self._lock:
            tournament = self.get(tournament_id)
            if tournament.status is not TournamentStatus.IN_PROGRESS:
                raise TournamentStateError(
                    f"Tournament {tournament_id} is {tournament.status.value}, results are closed"
                )

            bracket = tournament.bracket
            decided = bracket.replace(apply_result(bracket.get(match_id), winner))
            logger.info(
                "Match %d of tournament %d won by %s", match_id, tournament_id, decided.winner()
            )

            advance = advance_round(bracket.matches, tournament.size)
            for match in bracket.extend(advance.next_round_matches):
                logger.debug("Generated match %d: %s", match.id, match)
            for player in advance.byes:
                logger.warning("%s has no opponent in round %d", player, advance.current_round + 1)

            if advance.finished:
                final = bracket.round(bracket.max_round)[0]
                tournament.winner = final.winner()
                tournament.status = TournamentStatus.COMPLETED
                logger.info("Tournament %d finished, won by %s", tournament_id, tournament.winner)

            tournament.touch()
        return decided

    def record_result_by_ref(
        self,
        tournament_id: int,
        match_id: int,
        winner_id: Optional[int] = None,
        winner_alias: Optional[str] = None,
    ) -> Match:
        """Same as record_result with the winner given as an id or guest alias."""
        with self._lock:
            match = self.get(tournament_id).bracket.get(match_id)
            return self.record_result(
                tournament_id, match_id, resolve_winner(match, winner_id, winner_alias)
            )

    def standings(self, tournament_id: int) -> List[Player]:
        with self._lock:
            return compute_top3(self.get(tournament_id).bracket.matches)

    def archive_stale(self, now: Optional[datetime] = None, max_age=None) -> List[TournamentRecord]:
        with self._lock:
            return archive_stale_tournaments(self.all(), now=now, max_age=max_age)
