"""Round scoring and game-end rules for Two Hundred."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from .state import Team, TeamScores
from .trick import Trick

# Defenders at or above this score gain no trick points unless one of them bid.
DEFENDER_LOCK = 100


@dataclass(frozen=True)
class RoundScoreResult:
    new_scores: TeamScores
    score_changes: TeamScores
    contract_made: bool
    contractor_points: int
    defender_trick_points: int
    kitty_points: int
    defender_points_added: int
    defenders_locked: bool


def tally_trick_points(tricks: Iterable[Trick], teams: Mapping[str, Team]) -> TeamScores:
    """Sum the points of completed tricks by the winner's team."""
    totals = {Team.TEAM1: 0, Team.TEAM2: 0}
    for trick in tricks:
        if trick.winner is None:
            continue
        totals[teams[trick.winner]] += trick.points
    return TeamScores(team1=totals[Team.TEAM1], team2=totals[Team.TEAM2])


def score_round(
    *,
    contractor_team: Team,
    bid_points: int,
    contractor_points: int,
    defender_points: int,
    kitty_points: int,
    defenders_bid: bool,
    prior_scores: TeamScores,
) -> RoundScoreResult:
    """Apply one round's result to the cumulative scores.

    The contractor team gains its trick points when they reach the bid and
    loses the bid otherwise. Defenders gain their trick points unless they
    already hold ``DEFENDER_LOCK`` points without having bid; kitty discards
    are always credited to them.
    """
    if bid_points <= 0:
        raise ValueError("A scored round needs a positive bid.")

    defenders = contractor_team.opponent
    contract_made = contractor_points >= bid_points
    contractor_delta = contractor_points if contract_made else -bid_points

    locked = prior_scores[defenders] >= DEFENDER_LOCK and not defenders_bid
    defender_trick_delta = 0 if locked else defender_points
    defender_delta = defender_trick_delta + kitty_points

    changes = TeamScores().with_score(contractor_team, contractor_delta).with_score(defenders, defender_delta)
    new_scores = (
        prior_scores
        .with_score(contractor_team, prior_scores[contractor_team] + contractor_delta)
        .with_score(defenders, prior_scores[defenders] + defender_delta)
    )
    return RoundScoreResult(
        new_scores=new_scores,
        score_changes=changes,
        contract_made=contract_made,
        contractor_points=contractor_points,
        defender_trick_points=defender_points,
        kitty_points=kitty_points,
        defender_points_added=defender_delta,
        defenders_locked=locked,
    )


def game_winner(scores: TeamScores, target: int, contractor_team: Optional[Team]) -> Optional[Team]:
    """Return the winning team once the game is over, else None.

    A team at or below ``-target`` loses outright while the other team is not
    negative. Otherwise reaching ``target`` wins, and when both teams reach it
    on the same deal the contractor team takes the game.
    """
    for team in (Team.TEAM1, Team.TEAM2):
        if scores[team] <= -target and scores[team.opponent] >= 0:
            return team.opponent

    reached = [team for team in (Team.TEAM1, Team.TEAM2) if scores[team] >= target]
    if len(reached) == 2:
        if contractor_team is not None:
            return contractor_team
        return Team.TEAM1 if scores.team1 >= scores.team2 else Team.TEAM2
    if reached:
        return reached[0]
    return None
