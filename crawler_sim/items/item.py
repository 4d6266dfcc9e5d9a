"""
Item module for the simulator.

An item is identified by a numeric id, which implies its slot, tier and type
through the lookup tables, and carries experience that determines its level.
"""

from math import isqrt

from pydantic import BaseModel, ConfigDict, Field

from crawler_sim.core.content import GameTables, default_tables


def calculate_level(xp: int) -> int:
    """
    Returns the level implied by an experience value.

    Args:
        xp (int): The experience value.

    Returns:
        int: 1 when there is no experience, otherwise floor(sqrt(xp)).

    """
    if xp <= 0:
        return 1
    return isqrt(xp)


class Item(BaseModel):
    """A single piece of equipment, either equipped or carried in the bag."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(
        default=0,
        description="The item identifier, 0 means an empty slot.",
        ge=0,
    )
    xp: int = Field(
        default=0,
        description="Experience accumulated by the item.",
        ge=0,
    )

    @property
    def level(self) -> int:
        return calculate_level(self.xp)

    @property
    def is_empty(self) -> bool:
        return self.id == 0

    def label(self, tables: GameTables | None = None) -> str:
        """Returns a short human readable label such as ``Katana#8``."""
        if self.is_empty:
            return "none"
        tables = tables or default_tables()
        return f"{tables.name_of(self.id)}#{self.id}"

    def signature(self) -> str:
        return f"{self.id}:{self.xp}"


EMPTY_ITEM = Item()
