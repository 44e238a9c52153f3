import pytest

from twohundred.bidding import Auction, Bid, validate_bid
from twohundred.cards import Suit
from twohundred.errors import AlreadyPassed, InvalidBid, InvalidPhase, NotYourTurn

SEATING = ("a", "b", "c", "d")


def open_auction(dealer: int = 0) -> Auction:
    return Auction.open(SEATING, dealer)


def test_bidding_opens_left_of_dealer():
    assert open_auction(0).current_player == "b"
    assert open_auction(3).current_player == "a"


@pytest.mark.parametrize("points", [45, 52, 105, 0, True, "60", 57.5])
def test_invalid_bid_amounts(points):
    with pytest.raises(InvalidBid):
        validate_bid(points, None)


def test_bid_must_exceed_current():
    current = Bid("b", 60)
    with pytest.raises(InvalidBid):
        validate_bid(60, current)
    validate_bid(65, current)


def test_basic_auction_flow():
    auction = open_auction()
    auction = auction.bid("b", 50, Suit.HEARTS)
    auction = auction.bid("c", 55)
    auction = auction.pass_turn("d")
    auction = auction.pass_turn("a")

    assert auction.current_player == "b"
    auction = auction.bid("b", 60, Suit.SPADES)
    assert auction.current_player == "c"
    auction = auction.pass_turn("c")

    assert auction.is_complete()
    assert auction.result() == Bid("b", 60, Suit.SPADES)
    assert auction.passed == ("d", "a", "c")
    assert auction.bidders == ("b", "c")


def test_auction_returns_new_instances():
    auction = open_auction()
    after = auction.bid("b", 50)
    assert auction.current_bid is None
    assert after.current_bid == Bid("b", 50)


def test_passed_player_cannot_rejoin():
    auction = open_auction().pass_turn("b")
    with pytest.raises(AlreadyPassed):
        auction.bid("b", 50)


def test_out_of_turn_bid_rejected():
    with pytest.raises(NotYourTurn):
        open_auction().bid("c", 50)


def test_maximum_bid_closes_immediately():
    auction = open_auction().bid("b", 100, Suit.CLUBS)
    assert auction.closed
    assert auction.current_player is None
    assert auction.result().points == 100
    with pytest.raises(InvalidPhase):
        auction.pass_turn("c")


def test_four_passes_void_the_auction():
    auction = open_auction()
    for player in ("b", "c", "d", "a"):
        auction = auction.pass_turn(player)
    assert auction.is_void()
    assert not auction.is_complete()
    with pytest.raises(InvalidPhase):
        auction.result()


def test_last_player_may_still_bid_after_three_passes():
    auction = open_auction()
    for player in ("b", "c", "d"):
        auction = auction.pass_turn(player)
    assert not auction.closed
    assert auction.current_player == "a"
    auction = auction.bid("a", 50)
    assert auction.is_complete()
    assert auction.result().player_id == "a"


def test_turn_never_returns_to_highest_bidder():
    auction = open_auction().bid("b", 50)
    auction = auction.bid("c", 55)
    for player in ("d", "a", "b"):
        assert auction.current_player != auction.current_bid.player_id
        auction = auction.pass_turn(player)
    assert auction.closed
    assert auction.current_player is None
    assert auction.result() == Bid("c", 55)
