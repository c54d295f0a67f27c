"""
Stale tournament sweep.

Tournaments left alone for too long (abandoned registrations, brackets that
were never finished, old results) are archived together with their matches.
Run it periodically from whatever scheduler hosts the service.
"""

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Iterable, List, Optional

from django.conf import settings
from django.utils import timezone

from pongbracket.bracket_core.structure import TournamentStatus

if TYPE_CHECKING:
    from pongbracket.tournament.lifecycle import TournamentRecord

logger = logging.getLogger(__name__)


def get_stale_after() -> timedelta:
    return getattr(settings, "PONGBRACKET_STALE_AFTER", timedelta(hours=6))


def archive_stale_tournaments(
    tournaments: Iterable["TournamentRecord"],
    now: Optional[datetime] = None,
    max_age: Optional[timedelta] = None,
) -> List["TournamentRecord"]:
    """Archive every tournament not updated within ``max_age``.

    Args:
        tournaments: Records to inspect
        now: Reference time (default: timezone.now())
        max_age: Allowed idle time (default: PONGBRACKET_STALE_AFTER)

    Returns:
        The records archived by this call
    """
    now = now or timezone.now()
    cutoff = now - (max_age if max_age is not None else get_stale_after())

    archived = []
    for tournament in tournaments:
        if tournament.status is TournamentStatus.ARCHIVED:
            continue
        if tournament.updated_at >= cutoff:
            continue
        tournament.status = TournamentStatus.ARCHIVED
        tournament.bracket.archive()
        archived.append(tournament)

    logger.info("Archived %d stale tournaments", len(archived))
    return archived
