"""
Parallel evaluation and recomputation scheduling.

The pool and dispatcher fan loadout scoring out over worker processes; the
scheduler decides when a changed snapshot is recomputed.
"""

from .dispatcher import WorkDispatcher, chunk_selections
from .pool import EvaluationRequest, EvaluationResponse, WorkerPool
from .scheduler import ChangeScheduler, combat_state_hash, exploration_state_hash

__all__ = [
    "ChangeScheduler",
    "EvaluationRequest",
    "EvaluationResponse",
    "WorkDispatcher",
    "WorkerPool",
    "chunk_selections",
    "combat_state_hash",
    "exploration_state_hash",
]
