"""
Refresh controller tests: tick chain lifecycle, completion and cancellation.
"""

import asyncio
import json

import pytest

from conftest import FakeClock, single_document
from tasketa.engine import COMPLETION_NOTICE
from tasketa.models import RefreshState
from tasketa.tasks import RefreshController, stop_all_refreshes
from tasketa.tasks.refresh import TICK_ERROR_MESSAGE

INTERVAL = 0.01


class Recorder:
    """Display collaborator collecting every update."""

    def __init__(self):
        self.updates = []

    def __call__(self, update):
        self.updates.append(update)

    @property
    def states(self):
        return [update.state for update in self.updates]


class BrokenClock:
    """Returns one sample, then raises on every later call."""

    def __init__(self, first: int):
        self.first = first
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        if self.calls > 1:
            raise RuntimeError("clock unavailable")
        return self.first


@pytest.mark.asyncio
async def test_ticks_until_estimated_complete(single_task_text):
    """1 doc/ms from t=0: running at 200 and 500 ms, complete at 1000 ms."""
    display = Recorder()
    controller = RefreshController(display, interval_seconds=INTERVAL, clock=FakeClock(200, 500, 1000))

    assert await controller.start(single_task_text) is RefreshState.RUNNING
    assert await controller.wait() is RefreshState.COMPLETED

    assert display.states == [RefreshState.RUNNING, RefreshState.RUNNING, RefreshState.COMPLETED]
    assert controller.ticks == 3
    assert [update.display_progress for update in display.updates] == [20.0, 50.0, 100.0]

    final = display.updates[-1]
    assert final.message == COMPLETION_NOTICE
    assert final.text.endswith(f"\n{COMPLETION_NOTICE}")
    assert not controller.running


@pytest.mark.asyncio
async def test_complete_on_first_tick_schedules_nothing(single_task_text):
    display = Recorder()
    controller = RefreshController(display, interval_seconds=INTERVAL, clock=FakeClock(5_000))

    assert await controller.start(single_task_text) is RefreshState.COMPLETED
    assert not controller.running
    assert display.states == [RefreshState.COMPLETED]


@pytest.mark.asyncio
async def test_parse_failure_aborts_before_ticking():
    display = Recorder()
    controller = RefreshController(display, interval_seconds=INTERVAL, clock=FakeClock(200))

    assert await controller.start('{"completed": false, "task": ') is RefreshState.FAILED
    await asyncio.sleep(INTERVAL * 3)

    assert len(display.updates) == 1
    update = display.updates[0]
    assert update.report is None
    assert update.display_progress == -1
    assert update.text == "Invalid JSON input. Please check your format."
    assert controller.ticks == 0
    assert not controller.running


@pytest.mark.asyncio
async def test_domain_failure_message_is_shown_verbatim(completed_task_text, null_slices_text):
    display = Recorder()
    controller = RefreshController(display, interval_seconds=INTERVAL, clock=FakeClock(200))

    assert await controller.start(completed_task_text) is RefreshState.FAILED
    assert display.updates[-1].text == "Task is already completed."

    assert await controller.start(null_slices_text) is RefreshState.FAILED
    assert "parent_task_id=node-a:1&filter_path=" in display.updates[-1].text


@pytest.mark.asyncio
async def test_stop_prevents_further_ticks(single_task_text):
    display = Recorder()
    # Clock never advances, so the task never completes.
    controller = RefreshController(display, interval_seconds=INTERVAL, clock=FakeClock(200))

    await controller.start(single_task_text)
    await asyncio.sleep(INTERVAL * 10)
    await controller.stop()

    assert controller.state is RefreshState.STOPPED
    assert not controller.running
    seen = len(display.updates)
    assert seen >= 2

    await asyncio.sleep(INTERVAL * 5)
    assert len(display.updates) == seen


@pytest.mark.asyncio
async def test_restart_replaces_previous_chain(single_task_text):
    display = Recorder()
    controller = RefreshController(display, interval_seconds=INTERVAL, clock=FakeClock(200))

    await controller.start(single_task_text)
    first = controller._handle

    other = json.dumps(single_document(description="second run"))
    await controller.start(other)
    second = controller._handle

    assert first is not second
    assert first.done
    assert not second.done
    assert display.updates[-1].report.title == "20% second run"

    await controller.stop()


@pytest.mark.asyncio
async def test_overlapping_starts_leave_one_chain(single_task_text):
    display = Recorder()
    controller = RefreshController(display, interval_seconds=INTERVAL, clock=FakeClock(200))
    await controller.start(single_task_text)
    first = controller._handle

    texts = [json.dumps(single_document(description=name)) for name in ("run a", "run b")]
    results = await asyncio.gather(*(controller.start(text) for text in texts))

    assert results == [RefreshState.RUNNING, RefreshState.RUNNING]
    assert first.done
    assert controller.running

    seen = len(display.updates)
    await asyncio.sleep(INTERVAL * 10)
    await controller.stop()

    # Only the last caller's chain keeps ticking.
    titles = {update.report.title for update in display.updates[seen:]}
    assert titles == {"20% run b"}


@pytest.mark.asyncio
async def test_unexpected_tick_error_is_displayed(single_task_text):
    display = Recorder()
    controller = RefreshController(display, interval_seconds=INTERVAL, clock=BrokenClock(200))

    assert await controller.start(single_task_text) is RefreshState.RUNNING
    assert await controller.wait() is RefreshState.FAILED

    assert display.states == [RefreshState.RUNNING, RefreshState.FAILED]
    final = display.updates[-1]
    assert final.report is None
    assert final.text == TICK_ERROR_MESSAGE
    assert not controller.running


@pytest.mark.asyncio
async def test_stop_all_refreshes(single_task_text):
    controllers = [
        RefreshController(Recorder(), interval_seconds=INTERVAL, clock=FakeClock(200))
        for _ in range(2)
    ]
    for controller in controllers:
        await controller.start(single_task_text)

    assert await stop_all_refreshes() >= 2
    assert all(not controller.running for controller in controllers)
    assert all(controller.state is RefreshState.STOPPED for controller in controllers)


@pytest.mark.asyncio
async def test_stop_when_idle_is_noop():
    controller = RefreshController(Recorder(), interval_seconds=INTERVAL)
    await controller.stop()
    assert controller.state is RefreshState.IDLE
