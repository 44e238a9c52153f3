import pytest

from twohundred.scoring import game_winner, score_round, tally_trick_points
from twohundred.state import Team, TeamScores
from twohundred.cards import Card, Rank, Suit
from twohundred.trick import Trick


def score(contractor_points, bid=75, prior=TeamScores(), kitty=0, defenders_bid=False):
    return score_round(
        contractor_team=Team.TEAM1,
        bid_points=bid,
        contractor_points=contractor_points,
        defender_points=100 - contractor_points - kitty,
        kitty_points=kitty,
        defenders_bid=defenders_bid,
        prior_scores=prior,
    )


def test_contract_made_scores_trick_points():
    result = score(85)
    assert result.contract_made
    assert result.new_scores == TeamScores(team1=85, team2=15)


def test_contract_set_loses_the_bid():
    result = score(70)
    assert not result.contract_made
    assert result.score_changes == TeamScores(team1=-75, team2=30)
    assert result.new_scores == TeamScores(team1=-75, team2=30)


def test_defenders_at_lock_gain_no_trick_points():
    result = score(60, prior=TeamScores(team1=0, team2=120))
    assert result.defenders_locked
    assert result.new_scores.team2 == 120


def test_defenders_who_bid_still_score_at_lock():
    result = score(60, prior=TeamScores(team1=0, team2=120), defenders_bid=True)
    assert not result.defenders_locked
    assert result.new_scores.team2 == 160


def test_kitty_points_are_credited_even_when_locked():
    result = score(60, prior=TeamScores(team1=0, team2=130), kitty=15)
    assert result.defenders_locked
    assert result.score_changes.team2 == 15


def test_bid_must_be_positive():
    with pytest.raises(ValueError):
        score(50, bid=0)


def test_tally_trick_points_by_team():
    trick = Trick(
        order=("a", "b", "c", "d"),
        plays=(
            ("a", Card(Rank.ACE, Suit.HEARTS)),
            ("b", Card(Rank.TEN, Suit.HEARTS)),
            ("c", Card(Rank.FIVE, Suit.HEARTS)),
            ("d", Card(Rank.KING, Suit.HEARTS)),
        ),
        winner="a",
    )
    teams = {"a": Team.TEAM1, "b": Team.TEAM2, "c": Team.TEAM1, "d": Team.TEAM2}
    assert tally_trick_points([trick], teams) == TeamScores(team1=25, team2=0)


def test_reaching_target_wins():
    assert game_winner(TeamScores(team1=205, team2=90), 200, Team.TEAM2) is Team.TEAM1
    assert game_winner(TeamScores(team1=195, team2=90), 200, Team.TEAM1) is None


def test_contractor_wins_when_both_reach_target():
    assert game_winner(TeamScores(team1=230, team2=210), 200, Team.TEAM2) is Team.TEAM2


def test_deeply_negative_team_loses_when_opponent_not_negative():
    assert game_winner(TeamScores(team1=-200, team2=0), 200, Team.TEAM1) is Team.TEAM2
    assert game_winner(TeamScores(team1=-210, team2=-5), 200, Team.TEAM1) is None
