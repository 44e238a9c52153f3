"""Game aggregate for Two Hundred.

All records are frozen; the state machine in :mod:`twohundred.game` derives
new snapshots with :func:`dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from .bidding import Auction, Bid
from .cards import Card, Suit
from .config import GameConfig
from .errors import UnknownPlayer
from .trick import Trick


class Phase(str, Enum):
    BIDDING = "bidding"
    KITTY = "kitty"
    PLAYING = "playing"
    ROUND_END = "round_end"
    FINISHED = "finished"


class Team(str, Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"

    @property
    def opponent(self) -> "Team":
        return Team.TEAM2 if self is Team.TEAM1 else Team.TEAM1


def team_for_position(position: int) -> Team:
    return Team.TEAM1 if position % 2 == 0 else Team.TEAM2


@dataclass(frozen=True)
class TeamScores:
    team1: int = 0
    team2: int = 0

    def __getitem__(self, team: Team) -> int:
        return self.team1 if team is Team.TEAM1 else self.team2

    def with_score(self, team: Team, value: int) -> "TeamScores":
        if team is Team.TEAM1:
            return replace(self, team1=value)
        return replace(self, team2=value)

    def as_dict(self) -> Dict[str, int]:
        return {Team.TEAM1.value: self.team1, Team.TEAM2.value: self.team2}


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    position: int
    is_bot: bool = False
    is_spectator: bool = False
    hand: Tuple[Card, ...] = ()

    @property
    def team(self) -> Team:
        return team_for_position(self.position)


@dataclass(frozen=True)
class Round:
    """Sealed record of one deal."""

    round_number: int
    dealer: int
    bid: Optional[Bid] = None
    trump: Optional[Suit] = None
    contractor_team: Optional[Team] = None
    tricks: Tuple[Trick, ...] = ()
    kitty_discards: Tuple[Card, ...] = ()
    trick_points: TeamScores = field(default_factory=TeamScores)
    score_changes: TeamScores = field(default_factory=TeamScores)
    contract_made: Optional[bool] = None

    @property
    def is_void(self) -> bool:
        return self.bid is None


@dataclass(frozen=True)
class Game:
    id: str
    config: GameConfig
    players: Tuple[Player, ...]
    seed: int
    phase: Phase = Phase.BIDDING
    dealer: int = 0
    round_number: int = 1
    current_player: Optional[str] = None
    auction: Optional[Auction] = None
    trump: Optional[Suit] = None
    contractor: Optional[str] = None
    contractor_team: Optional[Team] = None
    current_trick: Optional[Trick] = None
    tricks: Tuple[Trick, ...] = ()
    kitty: Tuple[Card, ...] = ()
    kitty_taken: bool = False
    kitty_discards: Tuple[Card, ...] = ()
    rounds: Tuple[Round, ...] = ()
    team_scores: TeamScores = field(default_factory=TeamScores)
    winner: Optional[Team] = None

    # Lookups ------------------------------------------------------------

    @property
    def seating(self) -> Tuple[str, ...]:
        return tuple(player.id for player in self.players)

    def player(self, player_id: str) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise UnknownPlayer(f"Player {player_id!r} is not seated in game {self.id}.")

    def player_at(self, position: int) -> Player:
        return self.players[position % len(self.players)]

    def hand_of(self, player_id: str) -> Tuple[Card, ...]:
        return self.player(player_id).hand

    def team_of(self, player_id: str) -> Team:
        return self.player(player_id).team

    @property
    def current_bid(self) -> Optional[Bid]:
        return self.auction.current_bid if self.auction is not None else None

    @property
    def passed_players(self) -> Tuple[str, ...]:
        return self.auction.passed if self.auction is not None else ()

    @property
    def defending_team(self) -> Optional[Team]:
        return self.contractor_team.opponent if self.contractor_team is not None else None

    def is_finished(self) -> bool:
        return self.phase is Phase.FINISHED

    # Derivation helpers -------------------------------------------------

    def with_hand(self, player_id: str, hand: Tuple[Card, ...]) -> "Game":
        players = tuple(
            replace(player, hand=tuple(hand)) if player.id == player_id else player
            for player in self.players
        )
        return replace(self, players=players)

    def cards_played_this_round(self) -> int:
        played = sum(len(trick.plays) for trick in self.tricks)
        if self.current_trick is not None:
            played += len(self.current_trick.plays)
        return played
