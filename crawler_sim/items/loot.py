"""
Item specials and stat boosts.

Once an item reaches the unlock level it gains a named prefix and suffix,
derived deterministically from the adventurer's specials seed. Suffixes
grant stat points while the item is equipped.
"""

from pydantic import BaseModel, ConfigDict

from crawler_sim.core.constants import (
    SPECIAL_PREFIX_POOL,
    SPECIAL_SUFFIX_POOL,
    SPECIAL_UNLOCK_LEVEL,
)
from crawler_sim.core.content import GameTables, default_tables
from crawler_sim.core.rng import seed_from
from crawler_sim.entities.stats import Stats
from crawler_sim.items.item import Item


class ItemSpecials(BaseModel):
    """Affix indices of an item, None until unlocked."""

    model_config = ConfigDict(frozen=True)

    prefix: int | None = None
    suffix: int | None = None

    @property
    def active(self) -> bool:
        return self.prefix is not None or self.suffix is not None


NO_SPECIALS = ItemSpecials()


def get_specials(item_id: int, level: int, specials_seed: int) -> ItemSpecials:
    """
    Returns the affixes an item carries for a given specials seed.

    Args:
        item_id (int): The item identifier.
        level (int): The item level.
        specials_seed (int): The adventurer's item specials seed, 0 when
            specials have not been revealed yet.

    Returns:
        ItemSpecials: The prefix (1-69) and suffix (1-18), or no specials.

    """
    if item_id == 0 or specials_seed == 0 or level < SPECIAL_UNLOCK_LEVEL:
        return NO_SPECIALS
    h = seed_from(specials_seed, item_id)
    return ItemSpecials(
        prefix=1 + h % SPECIAL_PREFIX_POOL,
        suffix=1 + (h >> 8) % SPECIAL_SUFFIX_POOL,
    )


def item_specials(item: Item, specials_seed: int) -> ItemSpecials:
    return get_specials(item.id, item.level, specials_seed)


def item_boosts(
    item: Item, specials_seed: int, tables: GameTables | None = None
) -> dict[str, int]:
    """Returns the stat points an item's suffix grants."""
    specials = item_specials(item, specials_seed)
    if specials.suffix is None:
        return {}
    tables = tables or default_tables()
    return tables.suffix_boosts.get(specials.suffix, {})


def add_item_boosts(
    item: Item, specials_seed: int, stats: Stats, tables: GameTables | None = None
) -> Stats:
    return stats.add(item_boosts(item, specials_seed, tables))


def remove_item_boosts(
    item: Item, specials_seed: int, stats: Stats, tables: GameTables | None = None
) -> Stats:
    return stats.add(item_boosts(item, specials_seed, tables), sign=-1)


def special_name(item: Item, specials_seed: int, tables: GameTables | None = None) -> str:
    """Returns the item name with its suffix, e.g. ``Katana of Power``."""
    tables = tables or default_tables()
    name = tables.name_of(item.id)
    specials = item_specials(item, specials_seed)
    if specials.suffix is not None and specials.suffix in tables.suffix_names:
        return f"{name} {tables.suffix_names[specials.suffix]}"
    return name
