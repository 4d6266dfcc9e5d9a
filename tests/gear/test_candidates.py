"""
Tests for candidate generation and pruning.
"""

from crawler_sim.core.constants import EQUIPMENT_SLOTS, Slot
from crawler_sim.entities.encounter import Beast
from crawler_sim.gear.candidates import build_candidates
from crawler_sim.gear.evaluation import evaluate_selections
from crawler_sim.gear.search import single_slot_selections
from crawler_sim.items.item import Item


def test_empty_bag_yields_singletons(metal_adventurer, magic_beast, tables):
    candidates = build_candidates(metal_adventurer, [], magic_beast, tables)
    for slot in EQUIPMENT_SLOTS:
        assert candidates[slot] == [metal_adventurer.equipment.get(slot)]


def test_tied_weapons_are_all_kept(make_adventurer, tables):
    """Test that every weapon tying for top damage survives, equipped first."""
    equipped = Item(id=1, xp=100)
    adventurer = make_adventurer(weapon=equipped)
    beast = Beast(id=1, level=1, health=10)
    bag = [Item(id=6, xp=1), Item(id=1, xp=101), Item(id=1, xp=100)]
    candidates = build_candidates(adventurer, bag, beast, tables)
    assert candidates[Slot.WEAPON] == [equipped, Item(id=1, xp=101)]


def test_weaker_weapons_are_pruned(make_adventurer, tables):
    adventurer = make_adventurer(weapon=Item(id=6, xp=1))
    beast = Beast(id=1, level=1, health=10)
    candidates = build_candidates(adventurer, [Item(id=1, xp=100)], beast, tables)
    assert candidates[Slot.WEAPON] == [Item(id=1, xp=100)]


def test_one_armor_piece_per_material(make_adventurer, magic_beast, tables):
    """Test that dominated pieces of the same material are dropped."""
    equipped = Item(id=19, xp=100)
    adventurer = make_adventurer(chest=equipped)
    bag = [Item(id=20, xp=100), Item(id=29, xp=100), Item(id=34, xp=100)]
    candidates = build_candidates(adventurer, bag, magic_beast, tables)
    assert candidates[Slot.CHEST] == [equipped, Item(id=29, xp=100)]
    assert Item(id=34, xp=100) in candidates[Slot.HEAD]


def test_armor_ties_prefer_higher_tier_number(make_adventurer, tables):
    """Test that equal damage goes to the higher tier number, then more xp."""
    adventurer = make_adventurer()
    beast = Beast(id=1, level=1, health=10)
    bag = [Item(id=19, xp=25), Item(id=23, xp=25)]
    candidates = build_candidates(adventurer, bag, beast, tables)
    assert Item(id=23, xp=25) in candidates[Slot.CHEST]
    assert Item(id=19, xp=25) not in candidates[Slot.CHEST]


def test_jewellery_is_not_pruned(make_adventurer, magic_beast, tables):
    adventurer = make_adventurer()
    bag = [Item(id=94, xp=1), Item(id=95, xp=400), Item(id=97, xp=4)]
    candidates = build_candidates(adventurer, bag, magic_beast, tables)
    assert candidates[Slot.NECK][0].is_empty
    assert set(candidates[Slot.NECK][1:]) == {Item(id=94, xp=1), Item(id=95, xp=400)}
    assert candidates[Slot.RING][1:] == [Item(id=97, xp=4)]


def test_pruning_keeps_best_single_change(metal_adventurer, armor_set, magic_beast, tables):
    """Test that dropping dominated pieces never loses the best single change."""
    bag = [
        *armor_set("hide").values(),
        *armor_set("hide", xp=4).values(),
        *armor_set("cloth").values(),
        *armor_set("metal", tier=3).values(),
        Item(id=2, xp=100),
    ]
    unpruned = [{tables.slot_of(item.id): item} for item in bag]
    pruned = single_slot_selections(
        metal_adventurer, build_candidates(metal_adventurer, bag, magic_beast, tables)
    )
    assert len(pruned) < len(unpruned)

    best_unpruned = evaluate_selections(
        metal_adventurer, magic_beast, unpruned, early_terminate=False, tables=tables
    )
    best_pruned = evaluate_selections(
        metal_adventurer, magic_beast, pruned, early_terminate=False, tables=tables
    )
    assert best_pruned.score == best_unpruned.score
