import pytest
from pydantic import ValidationError

from twohundred.config import GameConfig, load_config


def test_defaults():
    config = GameConfig()
    assert config.deck_variant == 36
    assert config.score_target == 200
    assert not config.has_kitty
    assert config.timeout_duration == 30000
    assert config.timeout_policy == "pass"


def test_numeric_strings_are_accepted():
    config = load_config({"deck_variant": "40", "score_target": "500", "has_kitty": True})
    assert config.deck_variant == 40
    assert config.score_target == 500
    assert config.has_kitty


@pytest.mark.parametrize(
    "settings",
    [
        {"deck_variant": 32},
        {"score_target": 250},
        {"has_kitty": True},
        {"timeout_duration": 0},
        {"timeout_policy": "skip"},
        {"unknown": 1},
    ],
)
def test_invalid_settings_raise(settings):
    with pytest.raises(ValidationError):
        load_config(settings)


def test_config_is_frozen():
    config = GameConfig()
    with pytest.raises(ValidationError):
        config.deck_variant = 40
