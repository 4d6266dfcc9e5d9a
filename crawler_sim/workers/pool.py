"""
Worker pool and the message protocol spoken with it.

The pool is an explicit, caller-owned object with a start/submit/shutdown
lifecycle around a process pool. Workers receive immutable requests and
reply with responses; they share no state with the coordinator.
"""

import concurrent.futures
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from crawler_sim.combat.simulation import OutcomeScore
from crawler_sim.core.config import EngineConfig
from crawler_sim.core.content import GameTables
from crawler_sim.core.error_handling import WorkerPoolError
from crawler_sim.core.logging import log_debug
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.encounter import Beast, Settings
from crawler_sim.gear.evaluation import evaluate_selections
from crawler_sim.gear.selection import Selection


class EvaluationRequest(BaseModel):
    """A chunk of selections sent to a worker."""

    model_config = ConfigDict(frozen=True)

    run_id: int = Field(description="Run the chunk belongs to.")
    adventurer: Adventurer
    beast: Beast
    selections: list[Selection]
    early_terminate: bool = Field(
        default=False,
        description="Stop at the first single change that guarantees the win.",
    )
    config: EngineConfig = Field(default_factory=EngineConfig)
    tables: GameTables | None = None
    settings: Settings | None = None


class EvaluationResponse(BaseModel):
    """The best selection of a chunk, or the error that stopped it."""

    model_config = ConfigDict(frozen=True)

    run_id: int
    best_score: OutcomeScore | None = None
    best_selection: Selection | None = None
    change_count: int = 0
    error: str | None = None


def evaluate_request(request: EvaluationRequest) -> EvaluationResponse:
    """Worker entry point: scores one chunk."""
    try:
        result = evaluate_selections(
            request.adventurer,
            request.beast,
            request.selections,
            early_terminate=request.early_terminate,
            config=request.config,
            tables=request.tables,
            settings=request.settings,
        )
    except Exception as e:
        return EvaluationResponse(run_id=request.run_id, error=f"{type(e).__name__}: {e}")
    if result is None:
        return EvaluationResponse(run_id=request.run_id)
    return EvaluationResponse(
        run_id=request.run_id,
        best_score=result.score,
        best_selection=result.selection,
        change_count=result.change_count,
    )


@dataclass
class WorkerPool:
    """Caller-owned process pool."""

    max_workers: Optional[int] = None
    config: EngineConfig = field(default_factory=EngineConfig)
    executor: Optional[concurrent.futures.ProcessPoolExecutor] = None
    workers: int = 0

    @property
    def running(self) -> bool:
        return self.executor is not None

    def start(self) -> "WorkerPool":
        if self.executor is None:
            self.workers = self.max_workers or self.config.resolve_worker_count()
            self.executor = concurrent.futures.ProcessPoolExecutor(max_workers=self.workers)
            log_debug("Worker pool started", {"workers": self.workers})
        return self

    def submit(self, fn: Callable[..., Any], *args: Any) -> concurrent.futures.Future:
        """
        Schedules ``fn(*args)`` on a worker.

        Raises:
            WorkerPoolError: If the pool is not started or can no longer run work.

        """
        if self.executor is None:
            raise WorkerPoolError("Worker pool is not running.")
        try:
            return self.executor.submit(fn, *args)
        except (BrokenProcessPool, RuntimeError) as e:
            raise WorkerPoolError(f"Worker pool rejected work: {e}") from e

    def shutdown(self, wait: bool = True) -> None:
        if self.executor is not None:
            self.executor.shutdown(wait=wait, cancel_futures=not wait)
            self.executor = None
            self.workers = 0
            log_debug("Worker pool stopped")

    def __enter__(self) -> "WorkerPool":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
