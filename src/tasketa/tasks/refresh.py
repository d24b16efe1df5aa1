"""Periodic estimate refresh.

A pasted status is parsed once; the resulting ProgressInput is then
re-estimated against a fresh clock sample on every tick until the
projection reaches the task total or the run is stopped.

State machine:
- IDLE -> RUNNING: start() parsed the input and the first tick succeeded
- RUNNING -> COMPLETED: estimated processed >= total
- RUNNING -> STOPPED: stop() or host teardown
- any -> FAILED: parsing, extraction or estimation raised

Each controller owns at most one tick chain. start() calls are serialized
and each clears the previous chain before scheduling a new one, so the
last caller wins.
"""

import asyncio
import logging
import weakref
from typing import Callable, Optional

from tasketa.config import settings
from tasketa.engine import COMPLETION_NOTICE, TaskEtaError, build_progress_input, evaluate
from tasketa.models import ProgressInput, RefreshState, RefreshUpdate
from tasketa.utils.time import now_millis

logger = logging.getLogger("tasketa.refresh")

Display = Callable[[RefreshUpdate], None]

TICK_ERROR_MESSAGE = "Unexpected error while refreshing the estimate."

_controllers: "weakref.WeakSet[RefreshController]" = weakref.WeakSet()


class RefreshHandle:
    """A scheduled tick chain: the asyncio task plus its stop signal."""

    def __init__(self, task: asyncio.Task, stop_event: asyncio.Event):
        self.task = task
        self._stop_event = stop_event

    @property
    def done(self) -> bool:
        return self.task.done()

    async def cancel(self, timeout: float = 10.0) -> None:
        """Signal the chain to stop and wait for it to exit."""
        self._stop_event.set()
        try:
            await asyncio.wait_for(self.task, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Refresh chain did not stop gracefully, cancelling")
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass


class RefreshController:
    """Drives one display with periodically refreshed estimates."""

    def __init__(
        self,
        display: Display,
        interval_seconds: Optional[float] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.display = display
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else settings.refresh_interval_seconds
        )
        self.clock = clock or now_millis
        self.state = RefreshState.IDLE
        self.progress_input: Optional[ProgressInput] = None
        self.ticks = 0
        self._handle: Optional[RefreshHandle] = None
        self._start_lock = asyncio.Lock()
        _controllers.add(self)

    @property
    def running(self) -> bool:
        return self._handle is not None and not self._handle.done

    async def start(self, text: str) -> RefreshState:
        """Parse ``text``, render the first estimate and schedule refreshes."""
        async with self._start_lock:
            return await self._start(text)

    async def _start(self, text: str) -> RefreshState:
        # Handles are only installed under the lock, so one stop() clears them.
        await self.stop()

        self.ticks = 0
        self.progress_input = None
        try:
            self.progress_input = build_progress_input(text)
        except TaskEtaError as e:
            self._fail(e)
            return self.state

        self.state = RefreshState.RUNNING
        if not self._tick():
            return self.state

        stop_event = asyncio.Event()
        task = asyncio.create_task(self._run(stop_event))
        self._handle = RefreshHandle(task, stop_event)
        logger.info(
            f"Refresh started for {self.progress_input.task_id} "
            f"(interval: {self.interval_seconds}s)"
        )
        return self.state

    async def stop(self) -> None:
        """Stop the current tick chain, if any. No tick fires afterwards."""
        handle, self._handle = self._handle, None
        if handle is None:
            return
        if not handle.done and self.state is RefreshState.RUNNING:
            self.state = RefreshState.STOPPED
            logger.info("Refresh stopped")
        await handle.cancel()

    async def wait(self) -> RefreshState:
        """Wait until the current chain ends on its own."""
        if self._handle is not None:
            await self._handle.task
        return self.state

    def _fail(self, error: TaskEtaError) -> None:
        self.state = RefreshState.FAILED
        logger.info(f"Refresh failed: {error.code}")
        self.display(RefreshUpdate(state=self.state, message=error.message))

    def _tick(self) -> bool:
        """Render one estimate. Returns True while further ticks are needed."""
        try:
            _, report, complete = evaluate(self.progress_input, self.clock())
        except TaskEtaError as e:
            self._fail(e)
            return False

        self.ticks += 1
        if complete:
            self.state = RefreshState.COMPLETED
            logger.info(f"Task {self.progress_input.task_id} estimated complete")
            self.display(
                RefreshUpdate(
                    state=self.state,
                    report=report,
                    message=COMPLETION_NOTICE,
                    display_progress=report.display_progress,
                )
            )
            return False

        self.display(
            RefreshUpdate(
                state=self.state,
                report=report,
                display_progress=report.display_progress,
            )
        )
        return True

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass  # Next tick

            if stop_event.is_set():
                break

            try:
                if not self._tick():
                    break
            except Exception as e:
                logger.error(f"Refresh tick error: {e}", exc_info=True)
                self.state = RefreshState.FAILED
                self.display(RefreshUpdate(state=self.state, message=TICK_ERROR_MESSAGE))
                break


async def stop_all_refreshes() -> int:
    """Stop every running controller. Returns how many were stopped."""
    active = [controller for controller in list(_controllers) if controller.running]
    for controller in active:
        await controller.stop()
    return len(active)
