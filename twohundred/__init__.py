"""Rules engine for the Two Hundred trick-taking card game."""

__all__ = [
    "cards",
    "deck",
    "errors",
    "bidding",
    "kitty",
    "state",
    "trick",
    "mechanics",
    "scoring",
    "intents",
    "events",
    "game",
    "config",
    "snapshot",
    "service",
]
