"""
Adventurer module for the simulator.

Defines the equipment loadout and the adventurer snapshot the engine reads.
Both are immutable; changes are expressed as derived copies.
"""

from pydantic import BaseModel, ConfigDict, Field

from crawler_sim.core.constants import EQUIPMENT_SLOTS, Slot
from crawler_sim.entities.stats import Stats
from crawler_sim.items.item import EMPTY_ITEM, Item, calculate_level


class Equipment(BaseModel):
    """One item per equipment slot, empty slots hold item id 0."""

    model_config = ConfigDict(frozen=True)

    weapon: Item = Field(default=EMPTY_ITEM, description="The equipped weapon.")
    chest: Item = Field(default=EMPTY_ITEM, description="The equipped chest armor.")
    head: Item = Field(default=EMPTY_ITEM, description="The equipped head armor.")
    waist: Item = Field(default=EMPTY_ITEM, description="The equipped waist armor.")
    foot: Item = Field(default=EMPTY_ITEM, description="The equipped foot armor.")
    hand: Item = Field(default=EMPTY_ITEM, description="The equipped hand armor.")
    neck: Item = Field(default=EMPTY_ITEM, description="The equipped neck piece.")
    ring: Item = Field(default=EMPTY_ITEM, description="The equipped ring.")

    def get(self, slot: Slot) -> Item:
        return getattr(self, slot.value)

    def with_items(self, changes: dict[Slot, Item]) -> "Equipment":
        """Returns a copy with the given slots replaced."""
        if not changes:
            return self
        return self.model_copy(update={slot.value: item for slot, item in changes.items()})

    def items(self) -> list[tuple[Slot, Item]]:
        return [(slot, self.get(slot)) for slot in EQUIPMENT_SLOTS]


class Adventurer(BaseModel):
    """A read-only snapshot of the adventurer the engine reasons about."""

    model_config = ConfigDict(frozen=True)

    health: int = Field(
        description="Current health points.",
        ge=0,
    )
    xp: int = Field(
        default=0,
        description="Experience, determines the adventurer level.",
        ge=0,
    )
    gold: int = Field(
        default=0,
        description="Gold carried.",
        ge=0,
    )
    beast_health: int = Field(
        default=0,
        description="Remaining health of the beast being fought, 0 if the fight has not started.",
        ge=0,
    )
    stats: Stats = Field(
        default_factory=Stats,
        description="The adventurer attributes, including equipped item boosts.",
    )
    equipment: Equipment = Field(
        default_factory=Equipment,
        description="The equipped items.",
    )
    item_specials_seed: int = Field(
        default=0,
        description="Seed that determines item specials, 0 until revealed.",
        ge=0,
    )

    @property
    def level(self) -> int:
        return calculate_level(self.xp)
