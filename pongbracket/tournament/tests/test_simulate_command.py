from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase


class SimulateTournamentCommandTests(SimpleTestCase):
    def run_command(self, *args):
        out = StringIO()
        call_command("simulate_tournament", *args, stdout=out)
        return out.getvalue()

    def test_eight_player_simulation(self):
        output = self.run_command("--size", "8", "--seed", "42", "--guests", "3")

        self.assertIn("Pong Cup (8 players)", output)
        self.assertIn("Round 1 - quarterfinals", output)
        self.assertIn("Round 2 - semifinals", output)
        self.assertIn("Round 3 - finals", output)
        self.assertIn("  1. ", output)
        self.assertIn("  2. ", output)
        self.assertIn("  3. ", output)

    def test_same_seed_gives_same_tournament(self):
        first = self.run_command("--size", "4", "--seed", "7")
        second = self.run_command("--size", "4", "--seed", "7")
        self.assertEqual(first, second)

    def test_four_player_simulation_has_two_rounds(self):
        output = self.run_command("--size", "4", "--seed", "1", "--name", "Lunch Cup")

        self.assertIn("Lunch Cup (4 players)", output)
        self.assertIn("Round 1 - semifinals", output)
        self.assertIn("Round 2 - finals", output)
        self.assertNotIn("Round 3", output)

    def test_invalid_size(self):
        with self.assertRaises(CommandError):
            self.run_command("--size", "6")

    def test_invalid_guest_count(self):
        with self.assertRaises(CommandError):
            self.run_command("--size", "4", "--guests", "5")
