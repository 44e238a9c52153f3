"""Validation schema for Two Hundred table configuration."""

from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TimeoutPolicy = Literal["pass", "auto_play", "abort"]


class GameConfig(BaseModel):
    """Settings fixed at game creation and immutable thereafter."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    deck_variant: Literal[36, 40] = Field(36, description="Number of cards in the deck.")
    score_target: Literal[200, 300, 500, 1000] = Field(200, description="Cumulative team score that wins the game.")
    has_kitty: bool = Field(False, description="Deal a 4-card kitty for the contractor to exchange (40-card deck only).")
    timeout_duration: int = Field(30000, gt=0, description="Per-turn deadline in milliseconds.")
    timeout_policy: TimeoutPolicy = Field(
        "pass",
        description="Effect of a forced timeout: implicit pass, automatic legal play, or aborting the game.",
    )

    @field_validator("deck_variant", "score_target", mode="before")
    @classmethod
    def coerce_numeric_strings(cls, value: Any) -> Any:
        # Table setup sends "36"/"40" as strings.
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return value

    @model_validator(mode="after")
    def kitty_requires_forty_cards(self) -> "GameConfig":
        if self.has_kitty and self.deck_variant != 40:
            raise ValueError("The kitty is only available with the 40-card deck.")
        return self


def load_config(data: Mapping[str, Any] | None = None) -> GameConfig:
    """Build a validated config from table-setup settings."""
    return GameConfig.model_validate(dict(data or {}))
