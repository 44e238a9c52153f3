"""Bot strategies for Two Hundred."""

from .base import BotStrategy
from .random_bot import RandomBot

__all__ = ["BotStrategy", "RandomBot"]
