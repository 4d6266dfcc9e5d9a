"""
Tests for the exploration lethal-chance estimator.
"""

from crawler_sim.core.constants import StatsMode
from crawler_sim.core.error_handling import ErrorHandler
from crawler_sim.entities.encounter import Settings
from crawler_sim.entities.stats import Stats
from crawler_sim.exploration.lethal import (
    NO_RISK,
    ExplorationLethalChances,
    compute_exploration_lethal_chances,
)

SAMPLES = 200


def test_missing_inputs_are_riskless(make_adventurer):
    assert compute_exploration_lethal_chances(None, Settings()) == NO_RISK
    assert compute_exploration_lethal_chances(make_adventurer(), None) == NO_RISK
    assert NO_RISK == ExplorationLethalChances(ambush_lethal_percent=0, trap_lethal_percent=0)


def test_estimate_is_deterministic(make_adventurer, armor_set, config):
    """Test that the same snapshot always yields the same estimate."""
    adventurer = make_adventurer(health=20, xp=400, item_specials_seed=77, **armor_set("cloth"))
    first = compute_exploration_lethal_chances(
        adventurer, Settings(), samples_per_slot=SAMPLES, config=config
    )
    second = compute_exploration_lethal_chances(
        adventurer, Settings(), samples_per_slot=SAMPLES, config=config
    )
    assert first == second
    assert 0 <= first.ambush_lethal_percent <= 100
    assert 0 <= first.trap_lethal_percent <= 100


def test_one_health_without_defenses_is_always_lethal(make_adventurer):
    adventurer = make_adventurer(health=1, xp=400)
    chances = compute_exploration_lethal_chances(adventurer, Settings(), samples_per_slot=SAMPLES)
    assert chances.ambush_lethal_percent == 100.0
    assert chances.trap_lethal_percent == 100.0


def test_huge_health_is_never_lethal(make_adventurer):
    adventurer = make_adventurer(health=100_000, xp=400)
    chances = compute_exploration_lethal_chances(adventurer, Settings(), samples_per_slot=SAMPLES)
    assert chances == NO_RISK


def test_full_dodge_avoids_everything(make_adventurer):
    """Test that wisdom and intelligence at the adventurer level dodge every threat."""
    adventurer = make_adventurer(health=1, stats=Stats(wisdom=10, intelligence=10))
    chances = compute_exploration_lethal_chances(adventurer, Settings(), samples_per_slot=SAMPLES)
    assert chances == NO_RISK


def test_full_reduction_keeps_damage_floors(make_adventurer):
    """
    Test that full stat reduction still leaves the minimum damage.

    Beasts always deal at least 2 and obstacles at least 4, so with 3
    health only traps remain lethal.
    """
    adventurer = make_adventurer(health=3, stats=Stats(wisdom=10, intelligence=10))
    chances = compute_exploration_lethal_chances(
        adventurer,
        Settings(stats_mode=StatsMode.REDUCTION),
        samples_per_slot=SAMPLES,
    )
    assert chances.ambush_lethal_percent == 0.0
    assert chances.trap_lethal_percent == 100.0


def test_base_reduction_lowers_risk(make_adventurer, armor_set, config):
    adventurer = make_adventurer(health=40, xp=900, **armor_set("hide"))
    plain = compute_exploration_lethal_chances(
        adventurer, Settings(), samples_per_slot=SAMPLES, config=config
    )
    reduced = compute_exploration_lethal_chances(
        adventurer, Settings(base_damage_reduction=100), samples_per_slot=SAMPLES, config=config
    )
    assert reduced.ambush_lethal_percent <= plain.ambush_lethal_percent
    assert reduced.trap_lethal_percent <= plain.trap_lethal_percent
    assert reduced == NO_RISK


def test_failure_reports_no_risk(mocker, make_adventurer):
    mocker.patch(
        "crawler_sim.exploration.lethal._compute", side_effect=RuntimeError("broken tables")
    )
    chances = compute_exploration_lethal_chances(make_adventurer(health=1), Settings())
    assert chances == NO_RISK


def test_failure_is_recorded_on_given_handler(mocker, make_adventurer):
    mocker.patch(
        "crawler_sim.exploration.lethal._compute", side_effect=RuntimeError("broken tables")
    )
    handler = ErrorHandler()
    compute_exploration_lethal_chances(
        make_adventurer(health=1), Settings(), error_handler=handler
    )
    assert len(handler.error_history) == 1
    assert "broken tables" in handler.error_history[0].message


def test_separate_calls_do_not_share_errors(mocker, make_adventurer):
    mocker.patch(
        "crawler_sim.exploration.lethal._compute", side_effect=RuntimeError("broken tables")
    )
    first, second = ErrorHandler(), ErrorHandler()
    compute_exploration_lethal_chances(make_adventurer(), Settings(), error_handler=first)
    compute_exploration_lethal_chances(make_adventurer(), Settings(), error_handler=second)
    assert len(first.error_history) == 1
    assert len(second.error_history) == 1
