"""
Loadout evaluation.

Scores selections against a beast and keeps the best one. This module is
what worker processes run, so it only depends on picklable inputs.
"""

from pydantic import BaseModel, ConfigDict, Field

from crawler_sim.combat.simulation import (
    OutcomeScore,
    SimulationOptions,
    is_better_score,
    is_perfect_score,
    simulate_combat_outcome,
)
from crawler_sim.core.config import EngineConfig
from crawler_sim.core.content import GameTables
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.encounter import Beast, Settings
from crawler_sim.gear.selection import Selection, apply_gear_set


class SelectionResult(BaseModel):
    """The best selection found in a batch and its score."""

    model_config = ConfigDict(frozen=True)

    score: OutcomeScore
    selection: Selection = Field(default_factory=dict)
    change_count: int = Field(default=0, ge=0)


def prefer(candidate: SelectionResult | None, current: SelectionResult | None) -> bool:
    """
    Returns True if ``candidate`` should replace ``current``.

    A candidate wins when it scores strictly better, or when it needs fewer
    changes and scores no worse.
    """
    if candidate is None:
        return False
    if current is None:
        return True
    return is_better_score(candidate.score, current.score) or (
        candidate.change_count < current.change_count
        and not is_better_score(current.score, candidate.score)
    )


def merge_results(*results: SelectionResult | None) -> SelectionResult | None:
    best: SelectionResult | None = None
    for result in results:
        if prefer(result, best):
            best = result
    return best


def score_selection(
    adventurer: Adventurer,
    beast: Beast,
    selection: Selection,
    config: EngineConfig | None = None,
    tables: GameTables | None = None,
    settings: Settings | None = None,
) -> OutcomeScore:
    """
    Scores the adventurer after applying ``selection``.

    Changing gear mid-fight hands the beast a free strike, so any non-empty
    selection is simulated with the beast striking first. The empty
    selection reproduces the current loadout's score exactly.
    """
    candidate = apply_gear_set(adventurer, selection, tables)
    options = SimulationOptions(first_strike=bool(selection), settings=settings)
    return simulate_combat_outcome(candidate, beast, options, config, tables)


def evaluate_selections(
    adventurer: Adventurer,
    beast: Beast,
    selections: list[Selection],
    early_terminate: bool = True,
    config: EngineConfig | None = None,
    tables: GameTables | None = None,
    settings: Settings | None = None,
) -> SelectionResult | None:
    """
    Scores every selection and returns the preferred one.

    Args:
        adventurer (Adventurer): The adventurer snapshot.
        beast (Beast): The beast being fought.
        selections (list[Selection]): Selections to score.
        early_terminate (bool): Stop at the first single-slot change that
            guarantees a win.
        config (EngineConfig | None): Engine configuration.
        tables (GameTables | None): Lookup tables.
        settings (Settings | None): Game settings for the opening strike.

    Returns:
        SelectionResult | None: None when ``selections`` is empty.

    """
    best: SelectionResult | None = None
    for selection in selections:
        result = SelectionResult(
            score=score_selection(adventurer, beast, selection, config, tables, settings),
            selection=selection,
            change_count=len(selection),
        )
        if prefer(result, best):
            best = result
            if early_terminate and is_perfect_score(result.score) and result.change_count == 1:
                break
    return best
