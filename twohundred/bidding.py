"""Auction rules for Two Hundred."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from .cards import Suit
from .errors import AlreadyPassed, InvalidBid, InvalidPhase, NotYourTurn

MIN_BID = 50
MAX_BID = 100
BID_STEP = 5
PASSES_TO_CLOSE = 3


@dataclass(frozen=True)
class Bid:
    player_id: str
    points: int
    suit: Optional[Suit] = None


def validate_bid(points: int, current: Optional[Bid]) -> None:
    """Raise InvalidBid unless ``points`` is a legal raise over ``current``."""
    if isinstance(points, bool) or not isinstance(points, int):
        raise InvalidBid(f"Bid must be a whole number of points, got {points!r}.")
    if points % BID_STEP != 0:
        raise InvalidBid(f"Bid {points} must be a multiple of {BID_STEP}.")
    if points < MIN_BID or points > MAX_BID:
        raise InvalidBid(f"Bid {points} must be between {MIN_BID} and {MAX_BID}.")
    if current is not None and points <= current.points:
        raise InvalidBid(f"Bid {points} must exceed the current bid of {current.points}.")


@dataclass(frozen=True)
class Auction:
    """Four-seat auction. Every action returns a new auction.

    ``seating`` holds the player ids clockwise by position; bidding opens
    with the player left of the dealer.
    """

    seating: Tuple[str, ...]
    dealer: int
    current_player: Optional[str] = None
    current_bid: Optional[Bid] = None
    passed: Tuple[str, ...] = ()
    bidders: Tuple[str, ...] = ()
    history: Tuple[Tuple[str, str, Optional[int]], ...] = ()
    closed: bool = False

    @classmethod
    def open(cls, seating: Sequence[str], dealer: int) -> "Auction":
        seats = tuple(seating)
        return cls(seating=seats, dealer=dealer, current_player=seats[(dealer + 1) % len(seats)])

    def bid(self, player: str, points: int, suit: Optional[Suit] = None) -> "Auction":
        self._ensure_active(player)
        validate_bid(points, self.current_bid)

        bidders = self.bidders if player in self.bidders else self.bidders + (player,)
        updated = replace(
            self,
            current_bid=Bid(player_id=player, points=points, suit=suit),
            bidders=bidders,
            history=self.history + ((player, "bid", points),),
        )
        if points == MAX_BID or len(updated.passed) >= PASSES_TO_CLOSE:
            return replace(updated, closed=True, current_player=None)
        return replace(updated, current_player=updated._next_active(player))

    def pass_turn(self, player: str) -> "Auction":
        self._ensure_active(player)

        updated = replace(
            self,
            passed=self.passed + (player,),
            history=self.history + ((player, "pass", None),),
        )
        if len(updated.passed) == len(self.seating):
            return replace(updated, closed=True, current_player=None)
        if updated.current_bid is not None and len(updated.passed) >= PASSES_TO_CLOSE:
            return replace(updated, closed=True, current_player=None)
        return replace(updated, current_player=updated._next_active(player))

    def _next_active(self, player: str) -> Optional[str]:
        start = self.seating.index(player)
        for offset in range(1, len(self.seating) + 1):
            candidate = self.seating[(start + offset) % len(self.seating)]
            if candidate not in self.passed:
                return candidate
        return None

    def _ensure_active(self, player: str) -> None:
        if self.closed:
            raise InvalidPhase("Auction already complete.")
        if player in self.passed:
            raise AlreadyPassed(f"Player {player!r} has already passed this auction.")
        if player != self.current_player:
            raise NotYourTurn("Not this player's turn to act in the auction.")

    def is_void(self) -> bool:
        """True once every seat passed without a bid."""
        return self.closed and self.current_bid is None

    def is_complete(self) -> bool:
        return self.closed and self.current_bid is not None

    def result(self) -> Bid:
        if not self.is_complete():
            raise InvalidPhase("Auction has not produced a contractor.")
        assert self.current_bid is not None
        return self.current_bid
