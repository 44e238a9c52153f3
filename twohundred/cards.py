"""Card-related data structures and helpers for Two Hundred."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Mapping, Optional


class Suit(Enum):
    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Rank(Enum):
    FIVE = auto()
    SIX = auto()
    SEVEN = auto()
    EIGHT = auto()
    NINE = auto()
    TEN = auto()
    JACK = auto()
    QUEEN = auto()
    KING = auto()
    ACE = auto()

    def __str__(self) -> str:
        return RANK_SYMBOLS[self]


# Only aces, tens and fives count; every deck variant totals 100.
CARD_POINTS: dict[Rank, int] = {
    Rank.FIVE: 5,
    Rank.SIX: 0,
    Rank.SEVEN: 0,
    Rank.EIGHT: 0,
    Rank.NINE: 0,
    Rank.TEN: 10,
    Rank.JACK: 0,
    Rank.QUEEN: 0,
    Rank.KING: 0,
    Rank.ACE: 10,
}

# Rank order from lowest to highest for trick resolution.
RANK_ORDER: list[Rank] = [
    Rank.FIVE,
    Rank.SIX,
    Rank.SEVEN,
    Rank.EIGHT,
    Rank.NINE,
    Rank.TEN,
    Rank.JACK,
    Rank.QUEEN,
    Rank.KING,
    Rank.ACE,
]

RANK_STRENGTH: dict[Rank, int] = {rank: index for index, rank in enumerate(RANK_ORDER)}

RANK_SYMBOLS: dict[Rank, str] = {
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

_SYMBOL_TO_RANK: dict[str, Rank] = {symbol: rank for rank, symbol in RANK_SYMBOLS.items()}


@dataclass(frozen=True, order=True)
class Card:
    """Immutable representation of a playing card."""

    rank: Rank
    suit: Suit

    @property
    def id(self) -> str:
        """Synthetic identifier used to track the card in hands, e.g. ``hearts-10``."""
        return f"{self.suit}-{RANK_SYMBOLS[self.rank]}"

    def point_value(self) -> int:
        return CARD_POINTS[self.rank]

    def __str__(self) -> str:
        return self.id


def card_strength(card: Card) -> int:
    """Return an integer strength used for ordering cards within a suit."""
    return RANK_STRENGTH[card.rank]


def points_in(cards: Iterable[Card]) -> int:
    return sum(card.point_value() for card in cards)


def beats(candidate: Card, current: Card, led_suit: Suit, trump: Optional[Suit]) -> bool:
    """Return True if candidate wins over current within the trick context."""
    if candidate == current:
        return False

    candidate_trump = trump is not None and candidate.suit is trump
    current_trump = trump is not None and current.suit is trump

    if candidate_trump and not current_trump:
        return True
    if current_trump and not candidate_trump:
        return False

    if candidate.suit is current.suit:
        return card_strength(candidate) > card_strength(current)

    if candidate.suit is led_suit and current.suit is not led_suit:
        return True

    return False


def parse_suit(value: str) -> Suit:
    try:
        return Suit[value.upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown suit: {value!r}") from exc


def parse_rank(value: str) -> Rank:
    symbol = value.upper()
    if symbol in _SYMBOL_TO_RANK:
        return _SYMBOL_TO_RANK[symbol]
    try:
        return Rank[symbol]
    except KeyError as exc:
        raise ValueError(f"Unknown rank: {value!r}") from exc


def card_from_id(card_id: str) -> Card:
    """Parse a synthetic id such as ``spades-A`` back into a card."""
    suit_name, _, rank_symbol = card_id.partition("-")
    if not rank_symbol:
        raise ValueError(f"Malformed card id: {card_id!r}")
    return Card(parse_rank(rank_symbol), parse_suit(suit_name))


def serialize_card(card: Card) -> dict[str, str]:
    return {"rank": RANK_SYMBOLS[card.rank], "suit": str(card.suit), "id": card.id}


def deserialize_card(payload: Mapping[str, str]) -> Card:
    return Card(parse_rank(payload["rank"]), parse_suit(payload["suit"]))


def card_label(card: Card) -> str:
    return f"{card.rank.name.title()} of {card.suit.name.title()}"
