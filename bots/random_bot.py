"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional, Sequence, Tuple

from twohundred.bidding import BID_STEP, MAX_BID, MIN_BID
from twohundred.cards import Card, Suit
from twohundred.game import legal_moves
from twohundred.state import Game

from .base import BotStrategy

# How many steps above the current bid a random raise may jump.
MAX_RAISE_STEPS = 3


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def offer_bid(self, game: Game, player_id: str) -> Optional[Tuple[int, Optional[Suit]]]:
        current = game.current_bid
        floor = current.points + BID_STEP if current is not None else MIN_BID
        legal_above = list(range(floor, MAX_BID + 1, BID_STEP))[:MAX_RAISE_STEPS]
        if not legal_above or self._rng.random() < 0.5:
            return None
        suit = self._rng.choice([None, *Suit])
        return self._rng.choice(legal_above), suit

    def discard(self, game: Game, player_id: str) -> Tuple[Sequence[Card], Optional[Suit]]:
        cards = list(game.hand_of(player_id))
        self._rng.shuffle(cards)
        return cards[:4], None

    def play_card(self, game: Game, player_id: str) -> Card:
        legal = legal_moves(game, player_id)
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        return self._rng.choice(legal)
