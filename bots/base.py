"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from twohundred.cards import Card, Suit
from twohundred.game import legal_moves
from twohundred.intents import DiscardToKitty, Intent, Pass, PlaceBid, PlayCard, TakeKitty
from twohundred.state import Game, Phase


class BotStrategy:
    """Base class for bot policies.

    Subclasses override the decision hooks; :meth:`choose_intent` turns them
    into the intent for whatever the game currently expects from the bot.
    """

    name: str = "BaseBot"

    def offer_bid(self, game: Game, player_id: str) -> Optional[Tuple[int, Optional[Suit]]]:
        """Return ``(points, suit)`` to bid, or None to pass."""
        return None

    def discard(self, game: Game, player_id: str) -> Tuple[Sequence[Card], Optional[Suit]]:
        """Return the four cards to set aside and the trump to name, if any."""
        hand = game.hand_of(player_id)
        return list(hand[-4:]), None

    def play_card(self, game: Game, player_id: str) -> Card:
        legal = legal_moves(game, player_id)
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        return legal[0]

    def choose_intent(self, game: Game, player_id: str) -> Intent:
        if game.phase is Phase.BIDDING:
            decision = self.offer_bid(game, player_id)
            if decision is None:
                return Pass(player_id)
            points, suit = decision
            return PlaceBid(player_id, points, suit)
        if game.phase is Phase.KITTY:
            if not game.kitty_taken:
                return TakeKitty(player_id)
            cards, trump = self.discard(game, player_id)
            return DiscardToKitty(player_id, tuple(cards), trump)
        if game.phase is Phase.PLAYING:
            return PlayCard(player_id, self.play_card(game, player_id))
        raise RuntimeError(f"Bot {self.name} has nothing to do in phase {game.phase.value}.")
