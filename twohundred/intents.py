"""Player intents accepted by the state machine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .cards import Card, Suit


@dataclass(frozen=True)
class PlaceBid:
    player_id: str
    points: int
    suit: Optional[Suit] = None


@dataclass(frozen=True)
class Pass:
    player_id: str


@dataclass(frozen=True)
class TakeKitty:
    player_id: str


@dataclass(frozen=True)
class DiscardToKitty:
    player_id: str
    cards: Tuple[Card, ...]
    trump: Optional[Suit] = None


@dataclass(frozen=True)
class PlayCard:
    player_id: str
    card: Card


@dataclass(frozen=True)
class ForceTimeout:
    """Issued by the scheduler when the current turn's deadline elapses.

    ``player_id`` names the player whose turn expired; the timeout is rejected
    when that player is no longer the one to act.
    """

    player_id: Optional[str] = None


Intent = Union[PlaceBid, Pass, TakeKitty, DiscardToKitty, PlayCard, ForceTimeout]
