"""Kitty exchange for the auction winner."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence

from .cards import Card, Suit
from .deck import KITTY_SIZE
from .errors import InvalidKittyDiscard, InvalidPhase, NotYourTurn
from .state import Game, Phase
from .trick import Trick


def _ensure_contractor_in_kitty(game: Game, player_id: str) -> None:
    if game.phase is not Phase.KITTY:
        raise InvalidPhase(f"Kitty exchange is not allowed in phase {game.phase.value}.")
    if player_id != game.contractor:
        raise NotYourTurn("Only the contractor may handle the kitty.")


def take_kitty(game: Game, player_id: str) -> Game:
    """Return a new game with the kitty merged into the contractor's hand."""
    _ensure_contractor_in_kitty(game, player_id)
    if game.kitty_taken:
        raise InvalidPhase("Kitty already taken.")
    if len(game.kitty) != KITTY_SIZE:
        raise InvalidPhase(f"Kitty must contain exactly {KITTY_SIZE} cards.")

    hand = game.hand_of(player_id) + game.kitty
    return replace(game.with_hand(player_id, hand), kitty=(), kitty_taken=True)


def discard_to_kitty(
    game: Game,
    player_id: str,
    cards: Sequence[Card],
    trump: Optional[Suit] = None,
) -> Game:
    """Set aside four cards for the defenders and open play.

    The contractor leads the first trick. Trump is the suit named here, else
    the suit named with the bid, else it is fixed by the first card led.
    """
    _ensure_contractor_in_kitty(game, player_id)
    if not game.kitty_taken:
        raise InvalidKittyDiscard("Must take the kitty before discarding.")
    if len(cards) != KITTY_SIZE:
        raise InvalidKittyDiscard(f"Exactly {KITTY_SIZE} cards must be discarded.")
    if len(set(cards)) != len(cards):
        raise InvalidKittyDiscard("Discarded cards must be distinct.")

    new_hand: List[Card] = list(game.hand_of(player_id))
    for card in cards:
        try:
            new_hand.remove(card)
        except ValueError as exc:
            raise InvalidKittyDiscard(f"Discarded card {card} is not in hand.") from exc

    bid = game.current_bid
    resolved_trump = trump if trump is not None else (bid.suit if bid is not None else None)
    return replace(
        game.with_hand(player_id, tuple(new_hand)),
        kitty_discards=tuple(cards),
        trump=resolved_trump,
        phase=Phase.PLAYING,
        current_player=player_id,
        current_trick=Trick.start(player_id, game.seating),
    )
