"""Deck creation and dealing for Two Hundred."""

from __future__ import annotations

from dataclasses import dataclass
from random import Random
from typing import List, Optional, Sequence, Tuple

from .cards import Card, Rank, Suit

HAND_SIZE = 9
KITTY_SIZE = 4
KITTY_BATCH = 2
PLAYERS = 4

# Rank sets per variant, high to low.
VARIANT_RANKS: dict[int, Tuple[Rank, ...]] = {
    36: (
        Rank.ACE,
        Rank.KING,
        Rank.QUEEN,
        Rank.JACK,
        Rank.TEN,
        Rank.NINE,
        Rank.EIGHT,
        Rank.SEVEN,
        Rank.FIVE,
    ),
    40: (
        Rank.ACE,
        Rank.KING,
        Rank.QUEEN,
        Rank.JACK,
        Rank.TEN,
        Rank.NINE,
        Rank.EIGHT,
        Rank.SEVEN,
        Rank.SIX,
        Rank.FIVE,
    ),
}

# Rounds dealt per packet; a kitty batch of KITTY_BATCH cards goes between
# consecutive packets, giving 3-2-3-2-3.
KITTY_PACKETS: Tuple[int, ...] = (3, 3, 3)


def build_deck(variant: int = 36) -> List[Card]:
    """Return the ordered deck for the 36- or 40-card variant."""
    try:
        ranks = VARIANT_RANKS[variant]
    except KeyError as exc:
        raise ValueError(f"Unsupported deck variant: {variant}") from exc
    return [Card(rank, suit) for suit in Suit for rank in ranks]


@dataclass(frozen=True)
class Deal:
    hands: Tuple[Tuple[Card, ...], ...]
    kitty: Tuple[Card, ...]
    undealt: Tuple[Card, ...]


def deal(
    variant: int = 36,
    *,
    dealer: int = 0,
    has_kitty: bool = False,
    rng: Optional[Random] = None,
    deck: Optional[Sequence[Card]] = None,
) -> Deal:
    """Deal nine cards to each seat, starting left of the dealer.

    With the kitty enabled the 40-card deck is dealt in packets of three per
    player with two cards going to the kitty between packets. A 40-card deck
    without a kitty leaves four cards undealt.
    """
    if deck is not None:
        cards = list(deck)
    else:
        cards = build_deck(variant)
        if rng is None:
            rng = Random()
        rng.shuffle(cards)
    if len(cards) != variant:
        raise ValueError(f"Deck must contain exactly {variant} cards.")
    if has_kitty and variant != 40:
        raise ValueError("The kitty requires the 40-card deck.")

    order = [(dealer + offset) % PLAYERS for offset in range(1, PLAYERS + 1)]
    hands: List[List[Card]] = [[] for _ in range(PLAYERS)]
    kitty: List[Card] = []
    index = 0

    def deal_round() -> None:
        nonlocal index
        for seat in order:
            hands[seat].append(cards[index])
            index += 1

    if has_kitty:
        for packet_number, packet in enumerate(KITTY_PACKETS):
            for _ in range(packet):
                deal_round()
            if packet_number < len(KITTY_PACKETS) - 1:
                kitty.extend(cards[index : index + KITTY_BATCH])
                index += KITTY_BATCH
    else:
        for _ in range(HAND_SIZE):
            deal_round()

    return Deal(
        hands=tuple(tuple(hand) for hand in hands),
        kitty=tuple(kitty),
        undealt=tuple(cards[index:]),
    )
