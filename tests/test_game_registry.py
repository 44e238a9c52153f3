import threading

import pytest

from twohundred.config import GameConfig
from twohundred.errors import UnknownGame, UnknownPlayer
from twohundred.events import EventType
from twohundred.intents import Pass, PlaceBid, PlayCard
from twohundred.service import GameRegistry
from twohundred.state import Phase, Player


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def sample_players():
    return [Player(id=f"p{position}", name=f"Player {position}", position=position) for position in range(4)]


def new_registry(config=None):
    clock = FakeClock()
    registry = GameRegistry(clock=clock)
    game = registry.create_game(sample_players(), config, game_id="g1", seed=21)
    return registry, clock, game


def test_submit_stores_next_snapshot():
    registry, _, game = new_registry()
    result = registry.submit("g1", PlaceBid("p1", 50))
    assert result.accepted
    assert registry.get("g1") is result.game
    assert registry.get("g1").current_bid.points == 50


def test_rejected_intent_keeps_snapshot():
    registry, _, game = new_registry()
    result = registry.submit("g1", Pass("p3"))
    assert result.error.code == "not_your_turn"
    assert registry.get("g1") is game


def test_unknown_game_is_reported():
    registry, _, _ = new_registry()
    result = registry.submit("missing", Pass("p1"))
    assert not result.accepted
    assert isinstance(result.error, UnknownGame)
    with pytest.raises(UnknownGame):
        registry.get("missing")


def test_duplicate_game_id_rejected():
    registry, _, game = new_registry()
    with pytest.raises(ValueError):
        registry.add(game)


def test_subscribers_receive_events():
    registry, _, _ = new_registry()
    received = []
    unsubscribe = registry.subscribe(received.append)

    registry.submit("g1", PlaceBid("p1", 50))
    registry.submit("g1", Pass("p1"))
    assert [event.type for event in received] == [EventType.BID_MADE]
    assert received[0].game is registry.get("g1")

    unsubscribe()
    registry.submit("g1", Pass("p2"))
    assert len(received) == 1


def test_sweep_passes_for_expired_bidder():
    registry, clock, _ = new_registry(GameConfig(timeout_duration=30000))
    clock.now = 10.0
    assert registry.sweep_timeouts() == {}

    clock.now = 31.0
    results = registry.sweep_timeouts()
    assert list(results) == ["g1"]
    assert results["g1"].event_types() == (EventType.BID_MADE,)
    game = registry.get("g1")
    assert game.passed_players == ("p1",)
    assert game.current_player == "p2"

    # The next player gets a fresh deadline.
    assert registry.expired_games(now=40.0) == []


def test_sweep_abort_policy_finishes_game():
    registry, clock, _ = new_registry(GameConfig(timeout_policy="abort", timeout_duration=1000))
    results = registry.sweep_timeouts(now=2.0)
    assert results["g1"].event_types() == (EventType.GAME_ABORTED,)
    assert registry.get("g1").phase is Phase.FINISHED
    assert registry.expired_games(now=100.0) == []


def test_view_for_seated_player():
    registry, _, _ = new_registry()
    view = registry.view("g1", "p1")
    assert view.phase == "bidding"
    assert view.current_player == "p1"
    assert len(view.hand) == 9
    assert view.legal_moves == []
    assert view.trick is None
    assert view.team_scores == {"team1": 0, "team2": 0}

    for intent in (PlaceBid("p1", 50), Pass("p2"), Pass("p3"), Pass("p0")):
        registry.submit("g1", intent)
    view = registry.view("g1", "p1")
    assert view.phase == "playing"
    assert view.current_bid["points"] == 50
    assert len(view.legal_moves) == 9

    card = registry.get("g1").hand_of("p1")[0]
    registry.submit("g1", PlayCard("p1", card))
    view = registry.view("g1", "p2")
    assert view.trick.leader == "p1"
    assert view.trick.plays[0].card["id"] == card.id
    assert view.hand_sizes["p1"] == 8


def test_view_rejects_unseated_player():
    registry, _, _ = new_registry()
    with pytest.raises(UnknownPlayer):
        registry.view("g1", "nobody")


def test_remove_game():
    registry, _, game = new_registry()
    assert registry.remove("g1") is game
    assert "g1" not in registry
    with pytest.raises(UnknownGame):
        registry.remove("g1")


class MoveDuringSweepRegistry(GameRegistry):
    """Lets p1 bid after the deadline scan and before the timeout lands."""

    def expired_games(self, now=None):
        expired = super().expired_games(now)
        self.submit("g1", PlaceBid("p1", 50))
        return expired


def test_sweep_skips_turn_that_changed_after_scan():
    clock = FakeClock()
    registry = MoveDuringSweepRegistry(clock=clock)
    registry.create_game(sample_players(), GameConfig(timeout_duration=30000), game_id="g1", seed=21)

    clock.now = 31.0
    results = registry.sweep_timeouts()
    assert results == {}
    game = registry.get("g1")
    assert game.current_bid.points == 50
    assert game.passed_players == ()
    assert game.current_player == "p2"


def test_subscriber_may_submit_to_same_game():
    registry, _, _ = new_registry()
    received = []

    def relay(event):
        received.append((event.type, event.payload["player_id"]))
        if event.payload["player_id"] == "p1":
            registry.submit("g1", Pass("p2"))

    registry.subscribe(relay)
    worker = threading.Thread(target=registry.submit, args=("g1", PlaceBid("p1", 50)))
    worker.start()
    worker.join(timeout=2)

    assert not worker.is_alive()
    assert received == [(EventType.BID_MADE, "p1"), (EventType.BID_MADE, "p2")]
    assert registry.get("g1").current_player == "p3"


def test_failing_subscriber_does_not_stop_delivery():
    registry, _, _ = new_registry()
    received = []

    def broken(event):
        raise RuntimeError("subscriber down")

    registry.subscribe(broken)
    registry.subscribe(received.append)
    result = registry.submit("g1", PlaceBid("p1", 50))

    assert result.accepted
    assert [event.type for event in received] == [EventType.BID_MADE]
