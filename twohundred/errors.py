"""Rule violations raised by the engine and reported back to intent senders."""

from __future__ import annotations


class RuleViolation(ValueError):
    """Base class for rejected intents. The game is never modified."""

    code = "rule_violation"


class InvalidPhase(RuleViolation):
    """Raised when an intent is not legal in the current phase."""

    code = "invalid_phase"


class NotYourTurn(RuleViolation):
    code = "not_your_turn"


class InvalidBid(RuleViolation):
    """Raised for bids off the 5-point grid, outside 50-100 or not above the current bid."""

    code = "invalid_bid"


class AlreadyPassed(RuleViolation):
    code = "already_passed"


class IllegalCard(RuleViolation):
    """Raised when a card is not held or fails the follow-suit check."""

    code = "illegal_card"


class InvalidKittyDiscard(RuleViolation):
    code = "invalid_kitty_discard"


class TrickError(RuleViolation):
    """Raised when trick play breaks ordering constraints."""

    code = "invalid_trick"


class UnknownGame(RuleViolation):
    code = "unknown_game"


class UnknownPlayer(RuleViolation):
    code = "unknown_player"


class GameSetupError(ValueError):
    """Raised when a game cannot be created from the seated players."""
