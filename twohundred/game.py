"""Game state machine for Two Hundred.

``apply_intent`` is the only way a game changes: it validates an intent
against the current snapshot, delegates to the pure rule modules and returns
the next snapshot with the events it produced. Rule violations never escape;
they come back as a rejected :class:`~twohundred.events.IntentResult`.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import replace
from random import Random
from typing import Dict, List, Optional, Sequence, Tuple

from .bidding import Auction
from .cards import Card, Suit, card_strength, points_in
from .config import GameConfig
from .deck import PLAYERS, deal
from .errors import GameSetupError, IllegalCard, InvalidPhase, NotYourTurn, RuleViolation
from .events import EventType, GameEvent, IntentResult
from .intents import DiscardToKitty, ForceTimeout, Intent, Pass, PlaceBid, PlayCard, TakeKitty
from .kitty import discard_to_kitty, take_kitty
from .mechanics import is_playable, playable_cards
from .scoring import game_winner, score_round, tally_trick_points
from .state import Game, Phase, Player, Round, Team
from .trick import Trick

logger = logging.getLogger(__name__)

Transition = Tuple[Game, List[GameEvent]]


# Creation ---------------------------------------------------------------


def create_game(
    players: Sequence[Player],
    config: Optional[GameConfig] = None,
    *,
    game_id: Optional[str] = None,
    seed: Optional[int] = None,
    dealer: int = 0,
    deck: Optional[Sequence[Card]] = None,
) -> Game:
    """Seat four players and deal the first round.

    ``deck`` fixes the order of the first deal; later deals are shuffled from
    ``seed`` so that a snapshot always replays identically.
    """
    seated = _validate_seating(players)
    if dealer not in range(PLAYERS):
        raise GameSetupError(f"Dealer position must be 0-3, got {dealer}.")
    game = Game(
        id=game_id or uuid.uuid4().hex,
        config=config or GameConfig(),
        players=seated,
        seed=seed if seed is not None else random.getrandbits(32),
        dealer=dealer,
    )
    game = _deal_round(game, deck=deck)
    logger.info(
        "Created game %s (deck=%s, target=%s, kitty=%s)",
        game.id,
        game.config.deck_variant,
        game.config.score_target,
        game.config.has_kitty,
    )
    return game


def _validate_seating(players: Sequence[Player]) -> Tuple[Player, ...]:
    if len(players) != PLAYERS:
        raise GameSetupError(f"Exactly {PLAYERS} seated players are required, got {len(players)}.")
    if len({player.id for player in players}) != PLAYERS:
        raise GameSetupError("Player ids must be unique.")
    if sorted(player.position for player in players) != list(range(PLAYERS)):
        raise GameSetupError("Players must occupy positions 0-3 exactly once.")
    if any(player.is_spectator for player in players):
        raise GameSetupError("Spectators cannot take a seat.")
    return tuple(replace(player, hand=()) for player in sorted(players, key=lambda p: p.position))


def _deal_rng(seed: int, round_number: int) -> Random:
    return Random(f"{seed}:{round_number}")


def _deal_round(game: Game, *, deck: Optional[Sequence[Card]] = None) -> Game:
    dealt = deal(
        game.config.deck_variant,
        dealer=game.dealer,
        has_kitty=game.config.has_kitty,
        rng=_deal_rng(game.seed, game.round_number),
        deck=deck,
    )
    players = tuple(replace(player, hand=dealt.hands[player.position]) for player in game.players)
    auction = Auction.open(tuple(player.id for player in players), game.dealer)
    logger.debug("Game %s: dealt round %s, dealer seat %s", game.id, game.round_number, game.dealer)
    return replace(
        game,
        players=players,
        phase=Phase.BIDDING,
        auction=auction,
        current_player=auction.current_player,
        trump=None,
        contractor=None,
        contractor_team=None,
        current_trick=None,
        tricks=(),
        kitty=dealt.kitty,
        kitty_taken=False,
        kitty_discards=(),
    )


def _start_next_deal(game: Game) -> Game:
    rotated = replace(game, dealer=(game.dealer + 1) % PLAYERS, round_number=game.round_number + 1)
    return _deal_round(rotated)


# Intent boundary --------------------------------------------------------


def apply_intent(game: Game, intent: Intent) -> IntentResult:
    """Apply one intent, returning the next snapshot or a rejection."""
    try:
        next_game, events = _dispatch(game, intent)
    except RuleViolation as exc:
        logger.info("Game %s rejected %s: [%s] %s", game.id, type(intent).__name__, exc.code, exc)
        return IntentResult(game=game, error=exc)
    return IntentResult(game=next_game, events=tuple(events))


def _dispatch(game: Game, intent: Intent) -> Transition:
    if game.phase is Phase.FINISHED:
        raise InvalidPhase("The game is finished.")
    if isinstance(intent, ForceTimeout):
        return _force_timeout(game, intent.player_id)

    game.player(intent.player_id)
    if isinstance(intent, PlaceBid):
        return _place_bid(game, intent.player_id, intent.points, intent.suit)
    if isinstance(intent, Pass):
        return _pass(game, intent.player_id)
    if isinstance(intent, TakeKitty):
        return _take_kitty(game, intent.player_id)
    if isinstance(intent, DiscardToKitty):
        return _discard(game, intent.player_id, intent.cards, intent.trump)
    if isinstance(intent, PlayCard):
        return _play_card(game, intent.player_id, intent.card)
    raise TypeError(f"Unsupported intent: {intent!r}")


def _ensure_phase(game: Game, expected: Phase) -> None:
    if game.phase is not expected:
        raise InvalidPhase(f"Action not allowed in phase {game.phase.value}. Expected {expected.value}.")


# Auction ----------------------------------------------------------------


def _place_bid(game: Game, player_id: str, points: int, suit: Optional[Suit]) -> Transition:
    _ensure_phase(game, Phase.BIDDING)
    assert game.auction is not None
    auction = game.auction.bid(player_id, points, suit)
    game = replace(game, auction=auction, current_player=auction.current_player)
    events = [
        GameEvent(
            EventType.BID_MADE,
            game,
            {"player_id": player_id, "points": points, "suit": suit, "passed": False},
        )
    ]
    logger.debug("Game %s: %s bid %s (%s)", game.id, player_id, points, suit or "no trump")
    if auction.closed:
        return _close_auction(game, events)
    return game, events


def _pass(game: Game, player_id: str) -> Transition:
    _ensure_phase(game, Phase.BIDDING)
    assert game.auction is not None
    auction = game.auction.pass_turn(player_id)
    game = replace(game, auction=auction, current_player=auction.current_player)
    events = [GameEvent(EventType.BID_MADE, game, {"player_id": player_id, "points": None, "passed": True})]
    logger.debug("Game %s: %s passed", game.id, player_id)
    if auction.is_void():
        return _void_deal(game, events)
    if auction.closed:
        return _close_auction(game, events)
    return game, events


def _close_auction(game: Game, events: List[GameEvent]) -> Transition:
    assert game.auction is not None
    bid = game.auction.result()
    contractor = bid.player_id
    game = replace(game, contractor=contractor, contractor_team=game.team_of(contractor))
    if game.config.has_kitty:
        game = replace(game, phase=Phase.KITTY, current_player=contractor)
        logger.debug("Game %s: %s won the auction at %s, kitty exchange", game.id, contractor, bid.points)
        return game, events

    game = replace(
        game,
        phase=Phase.PLAYING,
        trump=bid.suit,
        current_player=contractor,
        current_trick=Trick.start(contractor, game.seating),
    )
    logger.debug("Game %s: %s won the auction at %s, play begins", game.id, contractor, bid.points)
    return game, events


def _void_deal(game: Game, events: List[GameEvent]) -> Transition:
    sealed = Round(round_number=game.round_number, dealer=game.dealer)
    game = replace(game, rounds=game.rounds + (sealed,), current_player=None)
    events.append(GameEvent(EventType.AUCTION_VOID, game, {"round_number": sealed.round_number}))
    logger.info("Game %s: all players passed in round %s, redealing", game.id, sealed.round_number)
    return _start_next_deal(game), events


# Kitty ------------------------------------------------------------------


def _take_kitty(game: Game, player_id: str) -> Transition:
    game = take_kitty(game, player_id)
    return game, [GameEvent(EventType.KITTY_OPENED, game, {"player_id": player_id})]


def _discard(game: Game, player_id: str, cards: Sequence[Card], trump: Optional[Suit]) -> Transition:
    game = discard_to_kitty(game, player_id, tuple(cards), trump)
    logger.debug("Game %s: %s discarded to the kitty, trump %s", game.id, player_id, game.trump)
    return game, [GameEvent(EventType.KITTY_RESOLVED, game, {"player_id": player_id, "trump": game.trump})]


# Play -------------------------------------------------------------------


def legal_moves(game: Game, player_id: str) -> List[Card]:
    """Cards ``player_id`` may play right now; empty when it is not their turn."""
    if game.phase is not Phase.PLAYING or game.current_player != player_id or game.current_trick is None:
        return []
    return playable_cards(game.hand_of(player_id), game.current_trick.led_suit(), game.trump)


def _play_card(game: Game, player_id: str, card: Card) -> Transition:
    _ensure_phase(game, Phase.PLAYING)
    if player_id != game.current_player:
        raise NotYourTurn("Not this player's turn.")
    assert game.current_trick is not None

    hand = game.hand_of(player_id)
    if card not in hand:
        raise IllegalCard(f"Card {card} not present in hand.")
    if not is_playable(card, game.current_trick.led_suit(), game.trump, hand):
        raise IllegalCard(f"Card {card} must follow the lead suit {game.current_trick.led_suit()}.")

    trump = game.trump
    if trump is None and not game.tricks and game.current_trick.is_empty():
        # No trump was named: the contractor's opening lead fixes it.
        trump = card.suit

    trick = game.current_trick.add_play(player_id, card, trump)
    remaining = tuple(held for held in hand if held != card)
    game = replace(game.with_hand(player_id, remaining), trump=trump, current_trick=trick)

    if not trick.is_full():
        game = replace(game, current_player=trick.next_player())
        return game, [GameEvent(EventType.CARD_PLAYED, game, {"player_id": player_id, "card": card})]

    events = [GameEvent(EventType.CARD_PLAYED, game, {"player_id": player_id, "card": card})]
    assert trick.winner is not None
    game = replace(game, tricks=game.tricks + (trick,))
    if all(not player.hand for player in game.players):
        game = replace(game, current_trick=None, current_player=None)
        events.append(_trick_event(game, trick))
        return _finish_round(game, events)

    game = replace(game, current_trick=Trick.start(trick.winner, game.seating), current_player=trick.winner)
    events.append(_trick_event(game, trick))
    return game, events


def _trick_event(game: Game, trick: Trick) -> GameEvent:
    return GameEvent(
        EventType.TRICK_COMPLETED,
        game,
        {"trick": trick, "winner": trick.winner, "points": trick.points},
    )


# Round end --------------------------------------------------------------


def _finish_round(game: Game, events: List[GameEvent]) -> Transition:
    assert game.contractor_team is not None and game.auction is not None
    bid = game.auction.result()
    teams: Dict[str, Team] = {player.id: player.team for player in game.players}
    trick_points = tally_trick_points(game.tricks, teams)
    defenders = game.contractor_team.opponent

    result = score_round(
        contractor_team=game.contractor_team,
        bid_points=bid.points,
        contractor_points=trick_points[game.contractor_team],
        defender_points=trick_points[defenders],
        kitty_points=points_in(game.kitty_discards),
        defenders_bid=any(teams[bidder] is defenders for bidder in game.auction.bidders),
        prior_scores=game.team_scores,
    )
    sealed = Round(
        round_number=game.round_number,
        dealer=game.dealer,
        bid=bid,
        trump=game.trump,
        contractor_team=game.contractor_team,
        tricks=game.tricks,
        kitty_discards=game.kitty_discards,
        trick_points=trick_points,
        score_changes=result.score_changes,
        contract_made=result.contract_made,
    )
    game = replace(game, phase=Phase.ROUND_END, team_scores=result.new_scores, rounds=game.rounds + (sealed,))
    events.append(GameEvent(EventType.ROUND_COMPLETED, game, {"round": sealed, "result": result}))
    logger.info(
        "Game %s: round %s %s (bid %s), scores %s",
        game.id,
        sealed.round_number,
        "made" if result.contract_made else "set",
        bid.points,
        result.new_scores.as_dict(),
    )

    winner = game_winner(game.team_scores, game.config.score_target, game.contractor_team)
    if winner is not None:
        game = replace(game, phase=Phase.FINISHED, winner=winner)
        events.append(
            GameEvent(
                EventType.GAME_ENDED,
                game,
                {"winning_team": winner, "final_scores": game.team_scores},
            )
        )
        logger.info("Game %s finished, %s wins %s", game.id, winner.value, game.team_scores.as_dict())
        return game, events

    return _start_next_deal(game), events


# Timeouts ---------------------------------------------------------------


def _force_timeout(game: Game, expected_player: Optional[str] = None) -> Transition:
    policy = game.config.timeout_policy
    player_id = game.current_player
    if expected_player is not None and expected_player != player_id:
        raise NotYourTurn(f"Timeout for {expected_player!r} is stale; {player_id!r} is to act.")
    logger.info("Game %s: turn of %s timed out (policy %s)", game.id, player_id, policy)

    if policy == "abort":
        game = replace(game, phase=Phase.FINISHED, winner=None)
        return game, [GameEvent(EventType.GAME_ABORTED, game, {"player_id": player_id})]

    if player_id is None:
        return game, []
    if game.phase is Phase.BIDDING:
        return _pass(game, player_id)
    if policy == "pass":
        return game, []

    if game.phase is Phase.KITTY:
        events: List[GameEvent] = []
        if not game.kitty_taken:
            game, events = _take_kitty(game, player_id)
        discards = sorted(game.hand_of(player_id), key=_throwaway_order)[:4]
        game, resolved = _discard(game, player_id, discards, None)
        return game, events + resolved

    if game.phase is Phase.PLAYING:
        card = min(legal_moves(game, player_id), key=_throwaway_order)
        return _play_card(game, player_id, card)
    return game, []


def _throwaway_order(card: Card) -> Tuple[int, int]:
    return card.point_value(), card_strength(card)
