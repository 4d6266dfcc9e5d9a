"""
Work dispatcher.

Splits a list of selections into contiguous chunks, fans them out over the
worker pool and merges the replies with the loadout ranking rule. Replies
tagged with a run id other than the current one are stale and dropped.
Chunks whose worker failed are scored inline, and an unusable pool makes
the whole batch run inline.
"""

import concurrent.futures
import math
from concurrent.futures.process import BrokenProcessPool

from crawler_sim.core.config import EngineConfig
from crawler_sim.core.content import GameTables
from crawler_sim.core.error_handling import ErrorHandler, ErrorSeverity, WorkerPoolError
from crawler_sim.core.logging import log_debug, log_warning
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.encounter import Beast, Settings
from crawler_sim.gear.evaluation import SelectionResult, evaluate_selections, merge_results
from crawler_sim.gear.selection import Selection
from crawler_sim.workers.pool import (
    EvaluationRequest,
    EvaluationResponse,
    WorkerPool,
    evaluate_request,
)


def chunk_selections(selections: list[Selection], workers: int) -> list[list[Selection]]:
    """
    Splits selections into at most ``workers`` contiguous chunks.

    Args:
        selections (list[Selection]): Selections in enumeration order.
        workers (int): Number of workers available.

    Returns:
        list[list[Selection]]: Chunks of ``ceil(n / workers)`` selections,
            never more chunks than selections.

    """
    if not selections:
        return []
    workers = min(max(1, workers), len(selections))
    size = math.ceil(len(selections) / workers)
    return [selections[i : i + size] for i in range(0, len(selections), size)]


def response_to_result(response: EvaluationResponse) -> SelectionResult | None:
    if response.best_score is None or response.best_selection is None:
        return None
    return SelectionResult(
        score=response.best_score,
        selection=response.best_selection,
        change_count=response.change_count,
    )


class WorkDispatcher:
    """
    Distributes selection scoring over a ``WorkerPool``.

    Every selection of a batch is scored, so the merged best is the same
    whichever chunk it lands in.
    Worker failures are recorded on ``error_handler``.
    """

    def __init__(
        self,
        pool: WorkerPool | None = None,
        config: EngineConfig | None = None,
        tables: GameTables | None = None,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self.pool = pool
        self.config = config or EngineConfig()
        self.tables = tables
        self.error_handler = error_handler or ErrorHandler()
        self.current_run_id = 0

    def begin_run(self) -> int:
        """Starts a new run, making every earlier run stale."""
        self.current_run_id += 1
        return self.current_run_id

    def is_current(self, run_id: int) -> bool:
        return run_id == self.current_run_id

    def _inline(
        self,
        adventurer: Adventurer,
        beast: Beast,
        selections: list[Selection],
        settings: Settings | None,
    ) -> SelectionResult | None:
        return evaluate_selections(
            adventurer,
            beast,
            selections,
            early_terminate=False,
            config=self.config,
            tables=self.tables,
            settings=settings,
        )

    def evaluate(
        self,
        adventurer: Adventurer,
        beast: Beast,
        selections: list[Selection],
        run_id: int | None = None,
        settings: Settings | None = None,
    ) -> SelectionResult | None:
        """
        Scores ``selections`` and returns the preferred one.

        Args:
            adventurer (Adventurer): The adventurer snapshot.
            beast (Beast): The beast being fought.
            selections (list[Selection]): Selections to score.
            run_id (int | None): Run the batch belongs to, a new run is
                started when None.
            settings (Settings | None): Game settings for the opening strike.

        Returns:
            SelectionResult | None: None when nothing was scored or the run
                went stale while waiting for workers.

        """
        if run_id is None:
            run_id = self.begin_run()
        if not selections:
            return None

        pool = self.pool
        if pool is None or not pool.running:
            log_debug("No worker pool, evaluating inline", {"selections": len(selections)})
            return self._inline(adventurer, beast, selections, settings)

        chunks = chunk_selections(selections, pool.workers)
        futures: dict[concurrent.futures.Future, int] = {}
        try:
            for chunk in chunks:
                request = EvaluationRequest(
                    run_id=run_id,
                    adventurer=adventurer,
                    beast=beast,
                    selections=chunk,
                    config=self.config,
                    tables=self.tables,
                    settings=settings,
                )
                futures[pool.submit(evaluate_request, request)] = len(futures)
        except (WorkerPoolError, BrokenProcessPool, OSError) as e:
            log_warning(
                "Worker pool unavailable, falling back to synchronous evaluation",
                {"error": e},
            )
            for future in futures:
                future.cancel()
            return self._inline(adventurer, beast, selections, settings)

        log_debug(
            "Dispatched selections to workers",
            {"run_id": run_id, "chunks": len(chunks), "selections": len(selections)},
        )

        # Merged in chunk order so ties resolve as they would inline.
        results: list[SelectionResult | None] = [None] * len(chunks)
        for future in concurrent.futures.as_completed(futures):
            index = futures[future]
            chunk = chunks[index]
            try:
                response: EvaluationResponse = future.result()
            except Exception as e:
                response = EvaluationResponse(run_id=run_id, error=f"{type(e).__name__}: {e}")

            if not self.is_current(response.run_id):
                log_debug(
                    "Dropping stale worker response",
                    {"run_id": response.run_id, "current_run_id": self.current_run_id},
                )
                continue

            if response.error is not None:
                self.error_handler.handle(
                    "Gear evaluation worker failed, scoring chunk inline",
                    ErrorSeverity.HIGH,
                    {"run_id": run_id, "chunk_size": len(chunk), "error": response.error},
                )
                result = self._inline(adventurer, beast, chunk, settings)
            else:
                result = response_to_result(response)
            results[index] = result

        if not self.is_current(run_id):
            return None
        return merge_results(*results)
