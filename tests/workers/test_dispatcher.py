"""
Tests for distributing selection scoring over workers.
"""

from concurrent.futures import Future

import pytest

from crawler_sim.core.error_handling import ErrorHandler, ErrorSeverity, WorkerPoolError
from crawler_sim.gear.candidates import build_candidates
from crawler_sim.gear.evaluation import evaluate_selections
from crawler_sim.gear.search import loadout_selections
from crawler_sim.workers.dispatcher import WorkDispatcher, chunk_selections
from crawler_sim.workers.pool import EvaluationResponse


class InlinePool:
    """Runs submitted work immediately in the calling process."""

    running = True

    def __init__(self, workers: int = 3) -> None:
        self.workers = workers
        self.submitted = 0

    def submit(self, fn, *args):
        self.submitted += 1
        future = Future()
        future.set_result(fn(*args))
        return future


@pytest.fixture
def loadouts(metal_adventurer, hide_bag, magic_beast, tables):
    candidates = build_candidates(metal_adventurer, hide_bag, magic_beast, tables)
    return loadout_selections(metal_adventurer, candidates)


def test_chunk_selections():
    """Test contiguous chunks of ceil(n / workers), never more than n."""
    items = [{} for _ in range(10)]
    assert [len(c) for c in chunk_selections(items, 3)] == [4, 4, 2]
    assert [len(c) for c in chunk_selections(items[:2], 8)] == [1, 1]
    assert chunk_selections([], 4) == []
    assert [len(c) for c in chunk_selections(items, 0)] == [10]


def test_dispatch_matches_inline(metal_adventurer, magic_beast, loadouts, tables):
    pool = InlinePool()
    dispatcher = WorkDispatcher(pool, tables=tables)
    result = dispatcher.evaluate(metal_adventurer, magic_beast, loadouts)
    expected = evaluate_selections(
        metal_adventurer, magic_beast, loadouts, early_terminate=False, tables=tables
    )
    assert pool.submitted == 3
    assert result.selection == expected.selection
    assert result.score == expected.score


def test_no_pool_runs_inline(mocker, metal_adventurer, magic_beast, loadouts, tables):
    dispatcher = WorkDispatcher(None, tables=tables)
    spy = mocker.spy(dispatcher, "_inline")
    assert dispatcher.evaluate(metal_adventurer, magic_beast, loadouts) is not None
    assert spy.call_count == 1


def test_unusable_pool_falls_back_inline(mocker, metal_adventurer, magic_beast, loadouts, tables):
    """Test that a pool refusing work makes the whole batch run inline."""
    pool = InlinePool()
    mocker.patch.object(pool, "submit", side_effect=WorkerPoolError("broken"))
    dispatcher = WorkDispatcher(pool, tables=tables)
    spy = mocker.spy(dispatcher, "_inline")
    result = dispatcher.evaluate(metal_adventurer, magic_beast, loadouts)
    assert result is not None
    spy.assert_called_once()
    assert spy.call_args.args[2] == loadouts


def test_failed_chunk_is_scored_inline(mocker, metal_adventurer, magic_beast, loadouts, tables):
    """Test that a chunk whose worker failed is re-scored inline and logged."""
    dispatcher = WorkDispatcher(tables=tables)

    calls = []

    def failing_submit(fn, request):
        calls.append(request)
        future = Future()
        if len(calls) == 1:
            future.set_result(EvaluationResponse(run_id=request.run_id, error="boom"))
        else:
            future.set_result(fn(request))
        return future

    pool = InlinePool()
    mocker.patch.object(pool, "submit", side_effect=failing_submit)
    dispatcher.pool = pool
    handle = mocker.patch.object(dispatcher.error_handler, "handle")
    spy = mocker.spy(dispatcher, "_inline")

    result = dispatcher.evaluate(metal_adventurer, magic_beast, loadouts)
    expected = evaluate_selections(
        metal_adventurer, magic_beast, loadouts, early_terminate=False, tables=tables
    )

    assert handle.call_count == 1
    assert spy.call_count == 1
    assert result.selection == expected.selection


def test_raising_future_is_scored_inline(mocker, metal_adventurer, magic_beast, loadouts, tables):
    def raising_submit(fn, request):
        future = Future()
        future.set_exception(RuntimeError("worker died"))
        return future

    pool = InlinePool()
    mocker.patch.object(pool, "submit", side_effect=raising_submit)
    handler = ErrorHandler()
    dispatcher = WorkDispatcher(pool, tables=tables, error_handler=handler)
    spy = mocker.spy(dispatcher, "_inline")

    result = dispatcher.evaluate(metal_adventurer, magic_beast, loadouts)
    assert spy.call_count == 3
    assert len(handler.error_history) == 3
    assert all(e.severity == ErrorSeverity.HIGH for e in handler.error_history)
    assert result.score.win_rate == 100.0


def test_stale_responses_are_dropped(mocker, metal_adventurer, magic_beast, loadouts, tables):
    """Test that a run superseded while workers ran yields nothing."""
    dispatcher = WorkDispatcher(tables=tables)
    pool = InlinePool()

    def superseding_submit(fn, request):
        dispatcher.begin_run()
        future = Future()
        future.set_result(fn(request))
        return future

    mocker.patch.object(pool, "submit", side_effect=superseding_submit)
    dispatcher.pool = pool
    assert dispatcher.evaluate(metal_adventurer, magic_beast, loadouts) is None


def test_run_ids_increase():
    dispatcher = WorkDispatcher()
    first = dispatcher.begin_run()
    second = dispatcher.begin_run()
    assert second == first + 1
    assert dispatcher.is_current(second)
    assert not dispatcher.is_current(first)
