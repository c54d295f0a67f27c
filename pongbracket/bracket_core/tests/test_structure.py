"""
Tests for the bracket entities: players, matches and the bracket collection.
"""

import unittest

from pongbracket.bracket_core.errors import MatchNotFoundError
from pongbracket.bracket_core.structure import (
    Bracket,
    Match,
    MatchStatus,
    Player,
    same_player,
)


class PlayerIdentityTests(unittest.TestCase):
    """Test the single player equality rule."""

    def test_ids_are_compared_when_both_present(self):
        self.assertTrue(same_player(Player(1, "alice"), Player(1, "Alice renamed")))
        self.assertFalse(same_player(Player(1, "alice"), Player(2, "alice")))

    def test_names_are_compared_when_an_id_is_missing(self):
        self.assertTrue(same_player(Player(None, "guest"), Player(None, "guest")))
        self.assertTrue(same_player(Player(7, "guest"), Player(None, "guest")))
        self.assertFalse(same_player(Player(None, "guest"), Player(None, "Guest")))

    def test_guest_flag(self):
        self.assertTrue(Player(None, "guest").is_guest)
        self.assertFalse(Player(3, "bob").is_guest)


class MatchTests(unittest.TestCase):
    """Test winner and loser lookup on matches."""

    def setUp(self):
        self.alice = Player(1, "alice")
        self.guest = Player(None, "guest")

    def test_undecided_match(self):
        match = Match(self.alice, self.guest)
        self.assertFalse(match.is_decided)
        self.assertIsNone(match.winner())
        self.assertIsNone(match.loser())
        self.assertEqual(match.status, MatchStatus.PENDING)

    def test_winner_by_id(self):
        match = Match(self.alice, self.guest, winner_id=1, status=MatchStatus.COMPLETED)
        self.assertTrue(match.is_decided)
        self.assertEqual(match.winner(), self.alice)
        self.assertEqual(match.loser(), self.guest)

    def test_winner_by_alias(self):
        match = Match(self.alice, self.guest, winner_alias="guest", status=MatchStatus.COMPLETED)
        self.assertEqual(match.winner(), self.guest)
        self.assertEqual(match.loser(), self.alice)

    def test_involves(self):
        match = Match(self.alice, self.guest)
        self.assertTrue(match.involves(Player(1, "someone else")))
        self.assertTrue(match.involves(Player(None, "guest")))
        self.assertFalse(match.involves(Player(None, "stranger")))


class BracketTests(unittest.TestCase):
    """Test the match collection keyed by id."""

    def setUp(self):
        self.a = Player(None, "A")
        self.b = Player(None, "B")
        self.c = Player(None, "C")
        self.d = Player(None, "D")

    def test_add_assigns_ids_in_order(self):
        bracket = Bracket(tournament_id=9)
        first, second = bracket.extend([Match(self.a, self.b), Match(self.c, self.d)])

        self.assertEqual(first.id, 1)
        self.assertEqual(second.id, 2)
        self.assertEqual(first.tournament_id, 9)
        self.assertEqual([m.id for m in bracket.matches], [1, 2])
        self.assertEqual(len(bracket), 2)

    def test_add_keeps_existing_ids(self):
        bracket = Bracket()
        bracket.add(Match(self.a, self.b, id=10))
        added = bracket.add(Match(self.c, self.d))

        self.assertEqual(added.id, 11)
        with self.assertRaises(ValueError):
            bracket.add(Match(self.a, self.c, id=10))

    def test_get_and_replace(self):
        bracket = Bracket()
        match = bracket.add(Match(self.a, self.b))
        decided = Match(self.a, self.b, id=match.id, winner_alias="A", status=MatchStatus.COMPLETED)

        bracket.replace(decided)
        self.assertEqual(bracket.get(match.id), decided)

        with self.assertRaises(MatchNotFoundError):
            bracket.get(99)
        with self.assertRaises(MatchNotFoundError):
            bracket.replace(Match(self.a, self.b, id=99))

    def test_rounds_grouping(self):
        bracket = Bracket.from_matches([
            Match(self.a, self.b, round=1),
            Match(self.c, self.d, round=1),
            Match(self.a, self.c, round=2),
        ])

        self.assertEqual(bracket.max_round, 2)
        self.assertEqual(list(bracket.rounds()), [1, 2])
        self.assertEqual(len(bracket.round(1)), 2)
        self.assertEqual(len(bracket.round(3)), 0)
        self.assertEqual(Bracket().max_round, 0)

    def test_archive_keeps_winners(self):
        bracket = Bracket()
        match = bracket.add(Match(self.a, self.b, winner_alias="A", status=MatchStatus.COMPLETED))
        bracket.archive()

        archived = bracket.get(match.id)
        self.assertEqual(archived.status, MatchStatus.ARCHIVED)
        self.assertEqual(archived.winner(), self.a)


if __name__ == "__main__":
    unittest.main()
