"""
Fluent assertion interface for testing brackets.

This module provides a clean, fluent way to assert rounds, pairings and the
final podium of a bracket built with BracketBuilder.
"""

from typing import List, Optional, Tuple
from dataclasses import dataclass

from pongbracket.bracket_core.builder import BracketSnapshot
from pongbracket.bracket_core.structure import Match


# Use the built-in AssertionError for proper test framework integration


@dataclass
class BracketAssertion:
    """Fluent interface for asserting a bracket's state."""

    snapshot: BracketSnapshot

    def round(self, number: int) -> "RoundAssertion":
        """Select a round for assertions."""
        return RoundAssertion(snapshot=self.snapshot, round_number=number)

    def is_finished(self) -> "BracketAssertion":
        if not self.snapshot.finished:
            raise AssertionError("Expected the bracket to be finished")
        return self

    def is_not_finished(self) -> "BracketAssertion":
        if self.snapshot.finished:
            raise AssertionError("Expected the bracket to still be running")
        return self

    def rounds(self, expected: int) -> "BracketAssertion":
        actual = self.snapshot.bracket.max_round
        if actual != expected:
            raise AssertionError(f"Expected {expected} rounds, got {actual}")
        return self

    def podium(self, *names: str) -> "BracketAssertion":
        """Assert the standings, first place first."""
        actual = [p.name for p in self.snapshot.standings()]
        if actual != list(names):
            raise AssertionError(f"Expected podium {list(names)}, got {actual}")
        return self


@dataclass
class RoundAssertion(BracketAssertion):
    """Assertions for one round of the bracket."""

    round_number: Optional[int] = None

    def _matches(self) -> List[Match]:
        return self.snapshot.bracket.round(self.round_number)

    def has_matches(self, expected: int) -> "RoundAssertion":
        actual = len(self._matches())
        if actual != expected:
            raise AssertionError(
                f"Round {self.round_number} expected {expected} matches, got {actual}"
            )
        return self

    def pairs(self, *expected: Tuple[str, str]) -> "RoundAssertion":
        """Assert the (player1, player2) names of the round, in order."""
        actual = [(m.player1.name, m.player2.name) for m in self._matches()]
        if actual != list(expected):
            raise AssertionError(
                f"Round {self.round_number} expected pairs {list(expected)}, got {actual}"
            )
        return self

    def winners(self, *names: str) -> "RoundAssertion":
        actual = [m.winner().name if m.winner() else None for m in self._matches()]
        if actual != list(names):
            raise AssertionError(
                f"Round {self.round_number} expected winners {list(names)}, got {actual}"
            )
        return self


def assert_bracket(snapshot: BracketSnapshot) -> BracketAssertion:
    """Start fluent assertions for a bracket snapshot."""
    return BracketAssertion(snapshot)
