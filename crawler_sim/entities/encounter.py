"""
Beasts, obstacles and game settings.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from crawler_sim.core.constants import (
    MAX_TIER,
    SPECIAL_PREFIX_POOL,
    SPECIAL_SUFFIX_POOL,
    SPECIAL_UNLOCK_LEVEL,
    StatsMode,
)
from crawler_sim.core.content import GameTables, default_tables


class Beast(BaseModel):
    """A beast the adventurer is fighting."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(
        description="The beast identifier, implies attack type, armor and tier.",
        ge=1,
    )
    level: int = Field(
        description="The beast level.",
        ge=1,
    )
    health: int = Field(
        description="The beast's full health.",
        ge=0,
    )
    tier: int | None = Field(
        default=None,
        description="Explicit tier, derived from the id when omitted.",
        ge=1,
        le=MAX_TIER,
    )
    special_prefix: int | None = Field(
        default=None,
        description="Prefix affix index, only counts once the beast reaches the unlock level.",
        ge=1,
        le=SPECIAL_PREFIX_POOL,
    )
    special_suffix: int | None = Field(
        default=None,
        description="Suffix affix index, only counts once the beast reaches the unlock level.",
        ge=1,
        le=SPECIAL_SUFFIX_POOL,
    )
    name: str = Field(
        default="",
        description="Display name.",
    )

    @property
    def specials_active(self) -> bool:
        return self.level >= SPECIAL_UNLOCK_LEVEL and (
            self.special_prefix is not None or self.special_suffix is not None
        )

    def resolved_tier(self, tables: GameTables | None = None) -> int:
        """Returns the explicit tier or the one implied by the id."""
        if self.tier is not None:
            return self.tier
        return (tables or default_tables()).beast_tier_of(self.id)


class Obstacle(BaseModel):
    """A trap met while exploring."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="The obstacle identifier.", ge=1)
    level: int = Field(description="The obstacle level.", ge=1)


class Settings(BaseModel):
    """Per-game settings that change how damage is mitigated."""

    model_config = ConfigDict(frozen=True)

    base_damage_reduction: int = Field(
        default=0,
        description="Flat percentage removed from ambush and obstacle damage.",
        ge=0,
        le=100,
    )
    stats_mode: StatsMode = Field(
        default=StatsMode.DODGE,
        description="Whether defensive stats avoid hits or reduce them.",
    )

    def model_post_init(self, _: Any) -> None:
        assert isinstance(
            self.stats_mode, StatsMode
        ), "Stats mode must be an instance of StatsMode."
