"""Registry of live games for transports, bots and schedulers.

Each game is a single-writer aggregate: intents for the same game are
serialized by a per-game lock, while different games proceed in parallel.
Subscribers receive the events of every accepted intent, in order, after the
new snapshot has been stored and the game lock released, so a subscriber may
submit to the same game.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, List, Optional, Sequence

from .cards import Card, card_label, serialize_card
from .config import GameConfig
from .errors import UnknownGame
from .events import GameEvent, IntentResult
from .game import apply_intent, create_game, legal_moves
from .intents import ForceTimeout, Intent
from .state import Game, Phase, Player
from .trick import Trick

logger = logging.getLogger(__name__)

Subscriber = Callable[[GameEvent], None]


@dataclass
class TrickPlayView:
    player: str
    card: dict
    label: str


@dataclass
class TrickView:
    leader: str
    plays: list[TrickPlayView]


@dataclass
class GameView:
    game_id: str
    phase: str
    round_number: int
    dealer: int
    current_player: Optional[str]
    contractor: Optional[str]
    trump: Optional[str]
    current_bid: Optional[dict]
    passed_players: list[str]
    team_scores: dict[str, int]
    hand: list[dict]
    hand_labels: list[str]
    legal_moves: list[dict]
    legal_move_labels: list[str]
    hand_sizes: dict[str, int]
    kitty_size: int
    trick: Optional[TrickView]
    tricks_played: int
    winner: Optional[str]


@dataclass
class _Entry:
    game: Game
    lock: threading.Lock
    turn_started: float
    outbox: Deque[GameEvent] = field(default_factory=deque)
    publishing: threading.Lock = field(default_factory=threading.Lock)


class GameRegistry:
    """Owns live games keyed by id.

    Intents run under the game's lock; their events are queued there and
    delivered in order once the lock is released, so a subscriber may submit
    to the same game from its callback.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._games: Dict[str, _Entry] = {}
        self._registry_lock = threading.Lock()
        self._subscribers: List[Subscriber] = []
        self._subscriber_lock = threading.RLock()

    # Lifecycle ---------------------------------------------------------

    def create_game(
        self,
        players: Sequence[Player],
        config: Optional[GameConfig] = None,
        *,
        game_id: Optional[str] = None,
        seed: Optional[int] = None,
        dealer: int = 0,
        deck: Optional[Sequence[Card]] = None,
    ) -> Game:
        game = create_game(players, config, game_id=game_id, seed=seed, dealer=dealer, deck=deck)
        self.add(game)
        return game

    def add(self, game: Game) -> None:
        """Register an existing snapshot, e.g. one restored from storage."""
        with self._registry_lock:
            if game.id in self._games:
                raise ValueError(f"Game {game.id} is already registered.")
            self._games[game.id] = _Entry(game=game, lock=threading.Lock(), turn_started=self._clock())

    def remove(self, game_id: str) -> Game:
        with self._registry_lock:
            entry = self._games.pop(game_id, None)
        if entry is None:
            raise UnknownGame(f"Game {game_id} not found.")
        logger.info("Removed game %s", game_id)
        return entry.game

    def get(self, game_id: str) -> Game:
        return self._entry(game_id).game

    def game_ids(self) -> List[str]:
        with self._registry_lock:
            return list(self._games)

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._games

    def __len__(self) -> int:
        return len(self._games)

    # Events ------------------------------------------------------------

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register ``subscriber`` and return a callable that unsubscribes it."""
        with self._subscriber_lock:
            self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            with self._subscriber_lock:
                if subscriber in self._subscribers:
                    self._subscribers.remove(subscriber)

        return unsubscribe

    def _deliver(self, entry: _Entry) -> None:
        """Publish queued events of one game in order, outside its lock.

        Only one thread delivers a game's events at a time. A submit made
        from inside a subscriber leaves its events queued for the delivery
        loop already running further up the stack.
        """
        while True:
            if not entry.publishing.acquire(blocking=False):
                return
            try:
                while True:
                    with entry.lock:
                        if not entry.outbox:
                            break
                        event = entry.outbox.popleft()
                    with self._subscriber_lock:
                        subscribers = list(self._subscribers)
                    for subscriber in subscribers:
                        try:
                            subscriber(event)
                        except Exception:
                            logger.exception("Subscriber failed on %s for game %s", event.type.value, event.game.id)
            finally:
                entry.publishing.release()
            with entry.lock:
                if not entry.outbox:
                    return

    # Intents -----------------------------------------------------------

    def submit(self, game_id: str, intent: Intent) -> IntentResult:
        """Apply ``intent`` to the game under its lock, then publish the events."""
        try:
            entry = self._entry(game_id)
        except UnknownGame as exc:
            logger.info("Intent %s for unknown game %s", type(intent).__name__, game_id)
            return IntentResult(game=None, error=exc)

        with entry.lock:
            result = self._apply(entry, intent)
        self._deliver(entry)
        return result

    def _apply(self, entry: _Entry, intent: Intent) -> IntentResult:
        # Caller holds entry.lock.
        result = apply_intent(entry.game, intent)
        if result.accepted:
            if result.events:
                entry.turn_started = self._clock()
            entry.game = result.game
            entry.outbox.extend(result.events)
        return result

    def _is_expired(self, entry: _Entry, now: float) -> bool:
        game = entry.game
        if game.phase is Phase.FINISHED or game.current_player is None:
            return False
        return (now - entry.turn_started) * 1000 >= game.config.timeout_duration

    def expired_games(self, now: Optional[float] = None) -> List[str]:
        """Ids of active games whose current turn is past its deadline."""
        now = self._clock() if now is None else now
        with self._registry_lock:
            entries = list(self._games.items())
        return [game_id for game_id, entry in entries if self._is_expired(entry, now)]

    def sweep_timeouts(self, now: Optional[float] = None) -> Dict[str, IntentResult]:
        """Submit ``ForceTimeout`` to every game whose turn deadline elapsed.

        The deadline is checked again under the game's lock and the timeout
        names the player whose turn expired, so a move that lands between
        the scan and the timeout keeps the next player's turn intact.
        """
        now = self._clock() if now is None else now
        results = {}
        for game_id in self.expired_games(now):
            try:
                entry = self._entry(game_id)
            except UnknownGame:
                continue
            with entry.lock:
                if not self._is_expired(entry, now):
                    continue
                result = self._apply(entry, ForceTimeout(entry.game.current_player))
                if result.accepted and not result.events:
                    # A no-op timeout restarts the turn clock.
                    entry.turn_started = self._clock()
            results[game_id] = result
            self._deliver(entry)
        return results

    # Views -------------------------------------------------------------

    def view(self, game_id: str, perspective: str) -> GameView:
        game = self.get(game_id)
        return build_view(game, perspective)

    def _entry(self, game_id: str) -> _Entry:
        with self._registry_lock:
            entry = self._games.get(game_id)
        if entry is None:
            raise UnknownGame(f"Game {game_id} not found.")
        return entry


def build_view(game: Game, perspective: str) -> GameView:
    """Summarize ``game`` as seen by the seated player ``perspective``."""
    player = game.player(perspective)
    moves = legal_moves(game, perspective)
    bid = game.current_bid
    return GameView(
        game_id=game.id,
        phase=game.phase.value,
        round_number=game.round_number,
        dealer=game.dealer,
        current_player=game.current_player,
        contractor=game.contractor,
        trump=str(game.trump) if game.trump is not None else None,
        current_bid=(
            {"player_id": bid.player_id, "points": bid.points, "suit": str(bid.suit) if bid.suit else None}
            if bid is not None
            else None
        ),
        passed_players=list(game.passed_players),
        team_scores=game.team_scores.as_dict(),
        hand=[serialize_card(card) for card in player.hand],
        hand_labels=[card_label(card) for card in player.hand],
        legal_moves=[serialize_card(card) for card in moves],
        legal_move_labels=[card_label(card) for card in moves],
        hand_sizes={seat.id: len(seat.hand) for seat in game.players},
        kitty_size=len(game.kitty),
        trick=_trick_view(game.current_trick),
        tricks_played=len(game.tricks),
        winner=game.winner.value if game.winner is not None else None,
    )


def _trick_view(trick: Optional[Trick]) -> Optional[TrickView]:
    if trick is None or trick.is_empty():
        return None
    return TrickView(
        leader=trick.leader,
        plays=[TrickPlayView(player=p, card=serialize_card(c), label=card_label(c)) for p, c in trick.plays],
    )
