"""
Gear search.

Finds the loadout that maximizes the combat outcome against a beast. The
search runs in two phases: every single-slot change is scored inline first,
and a single change that guarantees the win ends the search. Otherwise
every keep/switch combination of the pruned candidates is enumerated and
scored, in parallel when a worker pool is available.
"""

from pydantic import BaseModel, ConfigDict, Field

from crawler_sim.combat.simulation import OutcomeScore, is_perfect_score
from crawler_sim.core.config import EngineConfig
from crawler_sim.core.constants import EQUIPMENT_SLOTS, Slot
from crawler_sim.core.content import GameTables, default_tables
from crawler_sim.core.logging import log_debug
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.encounter import Beast, Settings
from crawler_sim.gear.candidates import Candidates, build_candidates
from crawler_sim.gear.evaluation import (
    SelectionResult,
    evaluate_selections,
    merge_results,
    score_selection,
)
from crawler_sim.gear.selection import (
    Selection,
    apply_gear_set,
    build_updated_bag,
    changed_slots,
    describe_selection,
    selection_signature,
)
from crawler_sim.items.item import Item
from crawler_sim.workers.dispatcher import WorkDispatcher
from crawler_sim.workers.pool import WorkerPool


class GearSuggestion(BaseModel):
    """A recommended loadout and what it changes."""

    model_config = ConfigDict(frozen=True)

    adventurer: Adventurer = Field(description="The adventurer wearing the loadout.")
    bag: list[Item] = Field(description="The bag after the swap.")
    score: OutcomeScore
    changed_slots: list[Slot] = Field(default_factory=list)


def single_slot_selections(adventurer: Adventurer, candidates: Candidates) -> list[Selection]:
    """Every selection that changes exactly one slot."""
    selections: list[Selection] = []
    for slot in EQUIPMENT_SLOTS:
        equipped = adventurer.equipment.get(slot)
        for item in candidates.get(slot, []):
            if item != equipped:
                selections.append({slot: item})
    return selections


def loadout_selections(adventurer: Adventurer, candidates: Candidates) -> list[Selection]:
    """
    Every keep/switch combination of the candidates.

    Enumerated depth first in slot order, deduplicated by change signature
    and without the empty selection.
    """
    selections: list[Selection] = []
    seen: set[str] = set()

    def visit(index: int, current: Selection) -> None:
        if index == len(EQUIPMENT_SLOTS):
            if not current:
                return
            signature = selection_signature(current)
            if signature not in seen:
                seen.add(signature)
                selections.append(dict(current))
            return
        slot = EQUIPMENT_SLOTS[index]
        equipped = adventurer.equipment.get(slot)
        visit(index + 1, current)
        for item in candidates.get(slot, []):
            if item == equipped:
                continue
            current[slot] = item
            visit(index + 1, current)
            del current[slot]

    visit(0, {})
    return selections


class GearSearchEngine:
    """
    Searches loadouts for one adventurer and beast at a time.

    Args:
        config (EngineConfig | None): Engine configuration.
        pool (WorkerPool | None): Optional started worker pool for phase two.
        dispatcher (WorkDispatcher | None): Dispatcher to reuse, built over
            ``pool`` when None.
        tables (GameTables | None): Lookup tables.

    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        pool: WorkerPool | None = None,
        dispatcher: WorkDispatcher | None = None,
        tables: GameTables | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.tables = tables or default_tables()
        self.pool = pool
        self.dispatcher = dispatcher or WorkDispatcher(pool, self.config, self.tables)

    def _use_workers(self, count: int) -> bool:
        pool = self.dispatcher.pool
        return (
            pool is not None and pool.running and count >= self.config.parallel_min_selections
        )

    def _evaluate(
        self,
        adventurer: Adventurer,
        beast: Beast,
        selections: list[Selection],
        settings: Settings | None,
    ) -> SelectionResult | None:
        if self._use_workers(len(selections)):
            return self.dispatcher.evaluate(adventurer, beast, selections, settings=settings)
        return evaluate_selections(
            adventurer,
            beast,
            selections,
            early_terminate=False,
            config=self.config,
            tables=self.tables,
            settings=settings,
        )

    def _suggestion(
        self, adventurer: Adventurer, bag: list[Item], result: SelectionResult
    ) -> GearSuggestion:
        return GearSuggestion(
            adventurer=apply_gear_set(adventurer, result.selection, self.tables),
            bag=build_updated_bag(adventurer, bag, result.selection),
            score=result.score,
            changed_slots=changed_slots(adventurer, result.selection),
        )

    def suggest(
        self,
        adventurer: Adventurer | None,
        bag: list[Item] | None,
        beast: Beast | None,
        settings: Settings | None = None,
        exhaustive: bool = False,
    ) -> GearSuggestion | None:
        """
        Returns the best loadout change, or None when nothing beats the
        current one.

        Args:
            adventurer (Adventurer | None): The adventurer snapshot.
            bag (list[Item] | None): Items carried but not equipped.
            beast (Beast | None): The beast being fought.
            settings (Settings | None): Game settings for the opening strike.
            exhaustive (bool): Skip the single-slot phase and score every
                combination.

        """
        if adventurer is None or beast is None or not bag:
            return None

        baseline = SelectionResult(
            score=score_selection(adventurer, beast, {}, self.config, self.tables, settings),
            selection={},
            change_count=0,
        )
        candidates = build_candidates(adventurer, bag, beast, self.tables)

        best: SelectionResult | None = baseline
        if not exhaustive:
            singles = single_slot_selections(adventurer, candidates)
            phase_one = evaluate_selections(
                adventurer,
                beast,
                singles,
                early_terminate=True,
                config=self.config,
                tables=self.tables,
                settings=settings,
            )
            best = merge_results(best, phase_one)
            if phase_one is not None and best is phase_one and is_perfect_score(phase_one.score):
                log_debug(
                    "Single slot change guarantees the win",
                    {"change": describe_selection(phase_one.selection, self.tables)},
                )
                return self._suggestion(adventurer, bag, phase_one)

        loadouts = loadout_selections(adventurer, candidates)
        log_debug(
            "Scoring loadouts",
            {"loadouts": len(loadouts), "parallel": self._use_workers(len(loadouts))},
        )
        best = merge_results(best, self._evaluate(adventurer, beast, loadouts, settings))

        if best is None or not best.selection:
            return None
        return self._suggestion(adventurer, bag, best)


def suggest_best_combat_gear(
    adventurer: Adventurer | None,
    bag: list[Item] | None,
    beast: Beast | None,
    *,
    pool: WorkerPool | None = None,
    config: EngineConfig | None = None,
    tables: GameTables | None = None,
    settings: Settings | None = None,
    exhaustive: bool = False,
) -> GearSuggestion | None:
    """Finds the best combat loadout for ``adventurer`` against ``beast``."""
    engine = GearSearchEngine(config=config, pool=pool, tables=tables)
    return engine.suggest(adventurer, bag, beast, settings=settings, exhaustive=exhaustive)
