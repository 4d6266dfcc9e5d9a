"""
Tests for loadout scoring and the merge rule.
"""

import crawler_sim.gear.evaluation as evaluation
from crawler_sim.combat.simulation import OutcomeScore
from crawler_sim.core.constants import Slot
from crawler_sim.entities.encounter import Beast
from crawler_sim.gear.evaluation import SelectionResult, evaluate_selections, merge_results, prefer
from crawler_sim.items.item import Item


def result(win_rate: float, changes: int) -> SelectionResult:
    selection = {slot: Item(id=1) for slot in list(Slot)[:changes]}
    return SelectionResult(
        score=OutcomeScore(win_rate=win_rate), selection=selection, change_count=changes
    )


def test_prefer_strictly_better():
    assert prefer(result(60, 3), result(50, 1))
    assert not prefer(result(40, 1), result(50, 3))


def test_prefer_fewer_changes_on_tie():
    """Test that an equal score with fewer changes wins."""
    assert prefer(result(50, 1), result(50, 2))
    assert not prefer(result(50, 2), result(50, 1))
    assert not prefer(result(50, 1), result(50, 1))


def test_prefer_handles_missing():
    assert prefer(result(0, 0), None)
    assert not prefer(None, result(0, 0))


def test_merge_results():
    best = merge_results(result(50, 2), None, result(70, 4), result(70, 1))
    assert best.score.win_rate == 70
    assert best.change_count == 1
    assert merge_results() is None


def test_evaluate_selections_empty(metal_adventurer, magic_beast, tables):
    assert evaluate_selections(metal_adventurer, magic_beast, [], tables=tables) is None


def test_evaluate_selections_stops_on_single_change_win(mocker, make_adventurer, tables):
    """Test that a guaranteed win from one change ends the batch."""
    adventurer = make_adventurer(health=1_000)
    beast = Beast(id=1, level=1, health=40)
    spy = mocker.spy(evaluation, "score_selection")
    selections = [{Slot.WEAPON: Item(id=1, xp=400)}, {Slot.WEAPON: Item(id=2, xp=400)}]
    best = evaluate_selections(adventurer, beast, selections, tables=tables)
    assert best.selection == selections[0]
    assert spy.call_count == 1
