"""
Management command to play a whole knockout tournament with random results:
- Configurable bracket size (must be one of the allowed sizes)
- Registered users and alias-only guests with fake names
- Every match decided at random until the final
"""

import random
from django.core.management.base import BaseCommand, CommandError
from faker import Faker

from pongbracket.bracket_core.errors import BracketError
from pongbracket.bracket_core.knockout import get_round_stage_name
from pongbracket.bracket_core.standings import compute_placements
from pongbracket.bracket_core.structure import MatchStatus, TournamentStatus
from pongbracket.tournament.lifecycle import TournamentService, get_allowed_sizes


class Command(BaseCommand):
    help = "Simulate a single-elimination Pong tournament with random results"

    def add_arguments(self, parser):
        parser.add_argument(
            "--size",
            type=int,
            default=8,
            help="Number of players (default: 8)",
        )
        parser.add_argument(
            "--guests",
            type=int,
            default=0,
            help="How many of the players register as alias-only guests (default: 0)",
        )
        parser.add_argument(
            "--seed",
            type=int,
            help="Random seed for reproducible names and results",
        )
        parser.add_argument(
            "--name",
            type=str,
            default="Pong Cup",
            help="Tournament name (default: Pong Cup)",
        )

    def handle(self, *args, **options):
        size = options["size"]
        guests = options["guests"]
        seed = options.get("seed")
        name = options["name"]

        if size not in get_allowed_sizes():
            raise CommandError(
                f"Size {size} is not supported, use one of {get_allowed_sizes()}"
            )
        if not 0 <= guests <= size:
            raise CommandError(f"Guests must be between 0 and {size}")

        fake = Faker()
        rng = random.Random(seed)
        if seed is not None:
            fake.seed_instance(seed)

        service = TournamentService(rng=rng)
        try:
            tournament = service.create(name, size)
            for i in range(size):
                if i < guests:
                    service.register(tournament.id, alias=fake.unique.first_name())
                else:
                    service.register(
                        tournament.id, user_id=i + 1, username=fake.unique.user_name()
                    )
            service.start(tournament.id)

            while tournament.status is TournamentStatus.IN_PROGRESS:
                match = next(
                    m for m in tournament.bracket.matches if m.status is MatchStatus.PENDING
                )
                service.record_result(tournament.id, match.id, rng.choice(match.players))
        except BracketError as e:
            raise CommandError(f"Simulation failed: {e}")

        self.stdout.write(self.style.WARNING(f"{tournament.name} ({size} players)"))
        for number, matches in tournament.bracket.rounds().items():
            self.stdout.write(f"\nRound {number} - {get_round_stage_name(size, number)}")
            for match in matches:
                self.stdout.write(
                    f"  {match.player1} vs {match.player2} -> {match.winner()}"
                )

        self.stdout.write("")
        for placement in compute_placements(tournament.bracket.matches):
            self.stdout.write(
                self.style.SUCCESS(f"  {placement.position}. {placement.player}")
            )
