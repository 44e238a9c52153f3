"""Trick representation and resolution."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from .cards import Card, Suit, beats
from .errors import NotYourTurn, TrickError

TRICK_SIZE = 4


@dataclass(frozen=True)
class Trick:
    """Up to four plays, in order, starting with ``order[0]``.

    ``order`` lists the four player ids clockwise from the leader so the trick
    can enforce turn order on its own.
    """

    order: Tuple[str, ...]
    plays: Tuple[Tuple[str, Card], ...] = ()
    winner: Optional[str] = None

    @classmethod
    def start(cls, leader: str, seating: Sequence[str]) -> "Trick":
        """Open an empty trick led by ``leader`` given the clockwise seating."""
        seats = list(seating)
        if leader not in seats:
            raise TrickError(f"Leader {leader!r} is not seated.")
        start = seats.index(leader)
        return cls(order=tuple(seats[start:] + seats[:start]))

    @property
    def leader(self) -> str:
        return self.order[0]

    def is_empty(self) -> bool:
        return not self.plays

    def is_full(self) -> bool:
        return len(self.plays) == TRICK_SIZE

    def next_player(self) -> Optional[str]:
        if self.is_full():
            return None
        return self.order[len(self.plays)]

    def led_suit(self) -> Optional[Suit]:
        return self.plays[0][1].suit if self.plays else None

    def cards(self) -> Tuple[Card, ...]:
        return tuple(card for _, card in self.plays)

    @property
    def points(self) -> int:
        return sum(card.point_value() for _, card in self.plays)

    def add_play(self, player: str, card: Card, trump: Optional[Suit] = None) -> "Trick":
        """Return a new trick with the play appended, resolved once full."""
        if self.is_full():
            raise TrickError("Trick already complete.")
        if any(seen == player for seen, _ in self.plays):
            raise TrickError(f"Player {player!r} already played to this trick.")
        if player != self.next_player():
            raise NotYourTurn(f"Player {player!r} cannot play now; waiting for {self.next_player()!r}.")
        updated = replace(self, plays=self.plays + ((player, card),))
        if updated.is_full():
            winner, _ = updated.winning_play(trump)
            updated = replace(updated, winner=winner)
        return updated

    def winning_play(self, trump: Optional[Suit]) -> Tuple[str, Card]:
        if not self.plays:
            raise TrickError("Cannot determine winner on empty trick.")
        led = self.led_suit()
        assert led is not None
        winning_player, winning_card = self.plays[0]
        for player, card in self.plays[1:]:
            if beats(card, winning_card, led, trump):
                winning_player, winning_card = player, card
        return winning_player, winning_card
