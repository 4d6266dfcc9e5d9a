"""
Tests for items, levels and specials.
"""

from crawler_sim.items.item import EMPTY_ITEM, Item, calculate_level
from crawler_sim.items.loot import get_specials, item_boosts, special_name


def test_calculate_level():
    assert calculate_level(0) == 1
    assert calculate_level(1) == 1
    assert calculate_level(99) == 9
    assert calculate_level(100) == 10
    assert calculate_level(225) == 15


def test_empty_item():
    assert EMPTY_ITEM.is_empty
    assert EMPTY_ITEM.label() == "none"
    assert not Item(id=1).is_empty


def test_label_includes_id(tables):
    assert Item(id=19).label(tables).endswith("#19")


def test_specials_locked_below_unlock_level():
    """Test that items below level 15 have no affixes."""
    assert not get_specials(1, 14, 123).active


def test_specials_need_a_seed():
    assert not get_specials(1, 20, 0).active


def test_specials_need_an_item():
    assert not get_specials(0, 20, 123).active


def test_specials_are_deterministic_and_in_range():
    first = get_specials(7, 15, 123)
    again = get_specials(7, 15, 123)
    assert first == again
    assert 1 <= first.prefix <= 69
    assert 1 <= first.suffix <= 18


def test_boosts_follow_the_suffix(tables):
    """Test that the suffix index picks the stat boosts."""
    item = Item(id=7, xp=225)
    specials = get_specials(item.id, item.level, 123)
    assert item_boosts(item, 123, tables) == tables.suffix_boosts[specials.suffix]
    assert item_boosts(Item(id=7, xp=1), 123, tables) == {}


def test_special_name_appends_suffix(tables):
    item = Item(id=7, xp=225)
    specials = get_specials(item.id, item.level, 123)
    name = special_name(item, 123, tables)
    assert name.endswith(tables.suffix_names[specials.suffix])
    assert special_name(Item(id=7), 123, tables) == tables.name_of(7)
