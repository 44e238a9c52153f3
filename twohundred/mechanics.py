"""Legal move generation for Two Hundred."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .cards import Card, Suit


def is_playable(card: Card, lead_suit: Optional[Suit], trump: Optional[Suit], hand: Iterable[Card]) -> bool:
    """Return True if ``card`` may be played from ``hand``.

    Players must follow the lead suit when they can. A player void in the lead
    suit may cut with trump or throw off anything; there is no obligation to
    trump or to try to win, so ``trump`` never restricts the choice.
    """
    cards = list(hand)
    if card not in cards:
        return False
    if lead_suit is None:
        return True
    if any(held.suit is lead_suit for held in cards):
        return card.suit is lead_suit
    return True


def playable_cards(hand: Iterable[Card], lead_suit: Optional[Suit], trump: Optional[Suit] = None) -> List[Card]:
    """Return the subset of ``hand`` that is legal to play, in hand order."""
    cards = list(hand)
    return [card for card in cards if is_playable(card, lead_suit, trump, cards)]
