"""
Adventurer attributes.
"""

from pydantic import BaseModel, ConfigDict, Field

STAT_NAMES: tuple[str, ...] = (
    "strength",
    "dexterity",
    "vitality",
    "intelligence",
    "wisdom",
    "charisma",
    "luck",
)


class Stats(BaseModel):
    """The seven adventurer attributes."""

    model_config = ConfigDict(frozen=True)

    strength: int = Field(default=0, ge=0, description="Adds damage to every hit.")
    dexterity: int = Field(default=0, ge=0, description="Helps fleeing.")
    vitality: int = Field(default=0, ge=0, description="Raises maximum health.")
    intelligence: int = Field(default=0, ge=0, description="Guards against obstacles.")
    wisdom: int = Field(default=0, ge=0, description="Guards against beast ambushes.")
    charisma: int = Field(default=0, ge=0, description="Lowers market prices.")
    luck: int = Field(default=0, ge=0, description="Critical hit chance in percent.")

    def add(self, boosts: dict[str, int], sign: int = 1) -> "Stats":
        """
        Returns a copy with the given stat boosts added (or removed).

        Args:
            boosts (dict[str, int]): Stat name to amount.
            sign (int): 1 to add, -1 to remove.

        Returns:
            Stats: The updated stats, never below zero.

        """
        if not boosts:
            return self
        update = {
            name: max(0, getattr(self, name) + sign * amount)
            for name, amount in boosts.items()
            if name in STAT_NAMES
        }
        return self.model_copy(update=update)
