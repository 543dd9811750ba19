"""Fire-and-forget scheduling for clipboard coroutines.

Clipboard I/O must never block the UI thread, and its result is never
awaited by the caller.  Failures are logged and dropped.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Coroutine, Protocol

logger = logging.getLogger(__name__)


class TaskRunner(Protocol):
    def spawn(self, coro: Coroutine[Any, Any, Any], name: str = "") -> None: ...


def _log_outcome(name: str, future: asyncio.Future | concurrent.futures.Future) -> None:
    if future.cancelled():
        logger.debug("Task %s cancelled", name)
        return
    exc = future.exception()
    if exc is not None:
        logger.warning("Task %s failed: %s", name, exc)


class LoopRunner:
    """Schedule coroutines as detached tasks on *loop*.

    Callable from the loop's own thread or from any other thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        # Strong refs so pending tasks are not garbage-collected mid-flight.
        self._tasks: set[asyncio.Task] = set()

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str = "") -> None:
        name = name or getattr(coro, "__qualname__", "task")
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            task = self._loop.create_task(coro, name=name)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            task.add_done_callback(lambda t: _log_outcome(name, t))
            return

        if self._loop.is_closed() or not self._loop.is_running():
            logger.warning("Event loop not running, dropping task %s", name)
            coro.close()
            return
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        future.add_done_callback(lambda f: _log_outcome(name, f))


class BackgroundLoop:
    """An asyncio event loop running on a daemon thread.

    For hosts (like tkinter) that own the main thread with their own loop.
    """

    def __init__(self, name: str = "termctx-async") -> None:
        self._name = name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._started = threading.Event()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            raise RuntimeError("BackgroundLoop not started")
        return self._loop

    def start(self) -> None:
        """Start the loop thread and wait until the loop is running."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        self._started.wait(timeout=5.0)
        logger.debug("Background loop %s started", self._name)

    def stop(self) -> None:
        if self._loop is None or self._thread is None:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=2.0)
        self._thread = None
        self._loop = None
        self._started.clear()
        logger.debug("Background loop %s stopped", self._name)

    def runner(self) -> LoopRunner:
        return LoopRunner(self.loop)

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        loop.call_soon(self._started.set)
        try:
            loop.run_forever()
        finally:
            loop.close()
