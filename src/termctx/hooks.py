"""OS-wide pointer hook using pynput.

Clicks outside the application never reach tkinter, so an open popup would
stay up while the user works in another window.  This hook forwards
primary-button releases from anywhere on screen into the listener hub.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from pynput import mouse

from termctx.events import CLICK, ListenerHub, PointerEvent

logger = logging.getLogger(__name__)


class GlobalPointerHook:
    """Forward screen-wide left-button releases to *hub*.

    pynput calls back on its own thread; events are handed to *call_soon*
    (e.g. :meth:`UiDispatcher.call_soon`) so dispatch happens on the UI
    thread.  Points for which *ignore* returns True (typically inside the
    application's own windows, which tkinter already reports) are dropped.
    """

    def __init__(
        self,
        hub: ListenerHub,
        call_soon: Callable[..., None],
        ignore: Callable[[int, int], bool] | None = None,
    ) -> None:
        self._hub = hub
        self._call_soon = call_soon
        self._ignore = ignore
        self._listener: mouse.Listener | None = None

    def start(self) -> None:
        """Start the pynput listener in a daemon background thread."""
        if self._listener is not None:
            logger.warning("Pointer hook already running")
            return
        self._listener = mouse.Listener(on_click=self._on_click)
        self._listener.daemon = True
        self._listener.start()
        logger.info("Global pointer hook started")

    def stop(self) -> None:
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
            logger.info("Global pointer hook stopped")

    def _on_click(self, x: Any, y: Any, button: mouse.Button, pressed: bool) -> None:
        if pressed or button != mouse.Button.left:
            return
        self._call_soon(self._deliver, int(x), int(y))

    def _deliver(self, x: int, y: int) -> None:
        # Runs on the UI thread, so *ignore* may query widgets.
        if self._ignore is not None and self._ignore(x, y):
            return
        self._hub.dispatch(CLICK, PointerEvent(x, y, 1))
