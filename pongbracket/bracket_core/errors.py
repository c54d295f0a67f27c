"""
Errors raised by the bracket logic and the tournament lifecycle.

All of them are input or state errors: the caller should reject the request
(a 4xx at the HTTP layer) rather than retry it.
"""


class BracketError(ValueError):
    """Base class for every bracket and tournament validation failure."""


class InvalidWinnerError(BracketError):
    """The declared winner is not one of the match's two participants."""


class MatchAlreadyDecidedError(BracketError):
    """A decided match was submitted again with a different winner."""


class InvalidBracketSizeError(BracketError):
    """The tournament size is not a supported power of two."""


class TournamentStateError(BracketError):
    """The tournament is not in a state that allows the operation."""


class RegistrationError(BracketError):
    """The entrant cannot be added: tournament full, no id or alias, or duplicate."""


class MatchNotFoundError(BracketError):
    """No match with that id in the tournament."""


class TournamentNotFoundError(BracketError):
    """No tournament with that id."""
