"""JSON-compatible snapshots of a game.

``game_from_dict(game_to_dict(game))`` rebuilds an equal game, so the next
intent produces the same result on either copy.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .bidding import Auction, Bid
from .cards import Card, Suit, card_from_id, parse_suit
from .config import GameConfig
from .state import Game, Phase, Player, Round, Team, TeamScores
from .trick import Trick

SNAPSHOT_VERSION = 1


def _cards(cards: Iterable[Card]) -> List[str]:
    return [card.id for card in cards]


def _parse_cards(ids: Iterable[str]) -> Tuple[Card, ...]:
    return tuple(card_from_id(card_id) for card_id in ids)


def _suit(suit: Optional[Suit]) -> Optional[str]:
    return str(suit) if suit is not None else None


def _parse_optional_suit(value: Optional[str]) -> Optional[Suit]:
    return parse_suit(value) if value is not None else None


def _team(team: Optional[Team]) -> Optional[str]:
    return team.value if team is not None else None


def _parse_team(value: Optional[str]) -> Optional[Team]:
    return Team(value) if value is not None else None


def encode_bid(bid: Optional[Bid]) -> Optional[Dict[str, Any]]:
    if bid is None:
        return None
    return {"player_id": bid.player_id, "points": bid.points, "suit": _suit(bid.suit)}


def decode_bid(payload: Optional[Mapping[str, Any]]) -> Optional[Bid]:
    if payload is None:
        return None
    return Bid(
        player_id=payload["player_id"],
        points=int(payload["points"]),
        suit=_parse_optional_suit(payload.get("suit")),
    )


def encode_trick(trick: Optional[Trick]) -> Optional[Dict[str, Any]]:
    if trick is None:
        return None
    return {
        "order": list(trick.order),
        "plays": [[player, card.id] for player, card in trick.plays],
        "winner": trick.winner,
        "points": trick.points,
    }


def decode_trick(payload: Optional[Mapping[str, Any]]) -> Optional[Trick]:
    if payload is None:
        return None
    return Trick(
        order=tuple(payload["order"]),
        plays=tuple((player, card_from_id(card_id)) for player, card_id in payload["plays"]),
        winner=payload.get("winner"),
    )


def encode_auction(auction: Optional[Auction]) -> Optional[Dict[str, Any]]:
    if auction is None:
        return None
    return {
        "seating": list(auction.seating),
        "dealer": auction.dealer,
        "current_player": auction.current_player,
        "current_bid": encode_bid(auction.current_bid),
        "passed": list(auction.passed),
        "bidders": list(auction.bidders),
        "history": [[player, action, points] for player, action, points in auction.history],
        "closed": auction.closed,
    }


def decode_auction(payload: Optional[Mapping[str, Any]]) -> Optional[Auction]:
    if payload is None:
        return None
    return Auction(
        seating=tuple(payload["seating"]),
        dealer=int(payload["dealer"]),
        current_player=payload.get("current_player"),
        current_bid=decode_bid(payload.get("current_bid")),
        passed=tuple(payload.get("passed", ())),
        bidders=tuple(payload.get("bidders", ())),
        history=tuple((player, action, points) for player, action, points in payload.get("history", ())),
        closed=bool(payload.get("closed", False)),
    )


def encode_round(round_: Round) -> Dict[str, Any]:
    return {
        "round_number": round_.round_number,
        "dealer": round_.dealer,
        "bid": encode_bid(round_.bid),
        "trump": _suit(round_.trump),
        "contractor_team": _team(round_.contractor_team),
        "tricks": [encode_trick(trick) for trick in round_.tricks],
        "kitty_discards": _cards(round_.kitty_discards),
        "trick_points": round_.trick_points.as_dict(),
        "score_changes": round_.score_changes.as_dict(),
        "contract_made": round_.contract_made,
    }


def decode_round(payload: Mapping[str, Any]) -> Round:
    return Round(
        round_number=int(payload["round_number"]),
        dealer=int(payload["dealer"]),
        bid=decode_bid(payload.get("bid")),
        trump=_parse_optional_suit(payload.get("trump")),
        contractor_team=_parse_team(payload.get("contractor_team")),
        tricks=tuple(decode_trick(trick) for trick in payload.get("tricks", ())),
        kitty_discards=_parse_cards(payload.get("kitty_discards", ())),
        trick_points=TeamScores(**payload.get("trick_points", {})),
        score_changes=TeamScores(**payload.get("score_changes", {})),
        contract_made=payload.get("contract_made"),
    )


def game_to_dict(game: Game) -> Dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "id": game.id,
        "config": game.config.model_dump(),
        "seed": game.seed,
        "players": [
            {
                "id": player.id,
                "name": player.name,
                "position": player.position,
                "is_bot": player.is_bot,
                "is_spectator": player.is_spectator,
                "hand": _cards(player.hand),
            }
            for player in game.players
        ],
        "phase": game.phase.value,
        "dealer": game.dealer,
        "round_number": game.round_number,
        "current_player": game.current_player,
        "auction": encode_auction(game.auction),
        "trump": _suit(game.trump),
        "contractor": game.contractor,
        "contractor_team": _team(game.contractor_team),
        "current_trick": encode_trick(game.current_trick),
        "tricks": [encode_trick(trick) for trick in game.tricks],
        "kitty": _cards(game.kitty),
        "kitty_taken": game.kitty_taken,
        "kitty_discards": _cards(game.kitty_discards),
        "rounds": [encode_round(round_) for round_ in game.rounds],
        "team_scores": game.team_scores.as_dict(),
        "winner": _team(game.winner),
    }


def game_from_dict(payload: Mapping[str, Any]) -> Game:
    version = payload.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise ValueError(f"Unsupported snapshot version: {version!r}")
    return Game(
        id=payload["id"],
        config=GameConfig.model_validate(payload["config"]),
        seed=int(payload["seed"]),
        players=tuple(
            Player(
                id=player["id"],
                name=player["name"],
                position=int(player["position"]),
                is_bot=bool(player.get("is_bot", False)),
                is_spectator=bool(player.get("is_spectator", False)),
                hand=_parse_cards(player.get("hand", ())),
            )
            for player in payload["players"]
        ),
        phase=Phase(payload["phase"]),
        dealer=int(payload["dealer"]),
        round_number=int(payload["round_number"]),
        current_player=payload.get("current_player"),
        auction=decode_auction(payload.get("auction")),
        trump=_parse_optional_suit(payload.get("trump")),
        contractor=payload.get("contractor"),
        contractor_team=_parse_team(payload.get("contractor_team")),
        current_trick=decode_trick(payload.get("current_trick")),
        tricks=tuple(decode_trick(trick) for trick in payload.get("tricks", ())),
        kitty=_parse_cards(payload.get("kitty", ())),
        kitty_taken=bool(payload.get("kitty_taken", False)),
        kitty_discards=_parse_cards(payload.get("kitty_discards", ())),
        rounds=tuple(decode_round(round_) for round_ in payload.get("rounds", ())),
        team_scores=TeamScores(**payload.get("team_scores", {})),
        winner=_parse_team(payload.get("winner")),
    )
