"""Domain events emitted after each accepted intent."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .errors import RuleViolation
    from .state import Game


class EventType(str, Enum):
    BID_MADE = "bid_made"
    AUCTION_VOID = "auction_void"
    KITTY_OPENED = "kitty_opened"
    KITTY_RESOLVED = "kitty_resolved"
    CARD_PLAYED = "card_played"
    TRICK_COMPLETED = "trick_completed"
    ROUND_COMPLETED = "round_completed"
    GAME_ENDED = "game_ended"
    GAME_ABORTED = "game_aborted"


@dataclass(frozen=True)
class GameEvent:
    """An event and the game snapshot it describes."""

    type: EventType
    game: "Game"
    payload: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class IntentResult:
    """Outcome of one intent: the next snapshot plus events, or a rejection.

    A rejected intent carries the unchanged game, no events and the rule
    violation that caused it. ``game`` is None only when the intent named a
    game the registry does not know.
    """

    game: Optional["Game"]
    events: Tuple[GameEvent, ...] = ()
    error: Optional["RuleViolation"] = None

    @property
    def accepted(self) -> bool:
        return self.error is None

    def event_types(self) -> Tuple[EventType, ...]:
        return tuple(event.type for event in self.events)
