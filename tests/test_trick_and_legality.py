import pytest

from twohundred.cards import Card, Rank, Suit
from twohundred.errors import NotYourTurn, TrickError
from twohundred.mechanics import is_playable, playable_cards
from twohundred.trick import Trick

SEATING = ("a", "b", "c", "d")


def sample_hand():
    return [
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.TEN, Suit.SPADES),
        Card(Rank.KING, Suit.CLUBS),
    ]


def test_must_follow_lead_suit_when_held():
    hand = sample_hand()
    assert playable_cards(hand, Suit.HEARTS, Suit.SPADES) == hand[:2]
    assert not is_playable(Card(Rank.TEN, Suit.SPADES), Suit.HEARTS, Suit.SPADES, hand)


def test_void_in_lead_suit_may_play_anything():
    hand = sample_hand()
    assert playable_cards(hand, Suit.DIAMONDS, Suit.SPADES) == hand


def test_leader_may_play_any_held_card():
    hand = sample_hand()
    assert playable_cards(hand, None) == hand
    assert not is_playable(Card(Rank.FIVE, Suit.CLUBS), None, None, hand)


def play_cut_trick(trump):
    trick = Trick.start("a", SEATING)
    trick = trick.add_play("a", Card(Rank.NINE, Suit.HEARTS), trump)
    trick = trick.add_play("b", Card(Rank.KING, Suit.HEARTS), trump)
    trick = trick.add_play("c", Card(Rank.FIVE, Suit.SPADES), trump)
    return trick.add_play("d", Card(Rank.SEVEN, Suit.HEARTS), trump)


def test_trump_cut_wins_the_trick():
    trick = play_cut_trick(Suit.SPADES)
    assert trick.is_full()
    assert trick.winner == "c"
    assert trick.points == 5


def test_highest_of_led_suit_wins_without_trump():
    trick = play_cut_trick(None)
    assert trick.winner == "b"


def test_trick_follows_seating_from_leader():
    trick = Trick.start("c", SEATING)
    assert trick.order == ("c", "d", "a", "b")
    assert trick.next_player() == "c"
    with pytest.raises(NotYourTurn):
        trick.add_play("a", Card(Rank.ACE, Suit.CLUBS))


def test_full_trick_rejects_more_plays():
    trick = play_cut_trick(Suit.SPADES)
    with pytest.raises(TrickError):
        trick.add_play("a", Card(Rank.ACE, Suit.CLUBS))


def test_winner_of_empty_trick_is_an_error():
    with pytest.raises(TrickError):
        Trick.start("a", SEATING).winning_play(None)
