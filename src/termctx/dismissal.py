"""One-shot outside-click / key-down listeners that dismiss an open menu."""

from __future__ import annotations

import logging
from typing import Callable

from termctx.events import CLICK, KEYDOWN, KeyEvent, ListenerHub, PointerEvent, Subscription

logger = logging.getLogger(__name__)


class DismissalRegistration:
    """An armed pair of global listeners for one visible menu.

    The first click anywhere, or an Escape key-down, releases both listeners
    and calls *on_dismiss* exactly once.  Any other key consumes the one-shot
    key listener, which is immediately re-armed so the menu stays
    dismissable from the keyboard.
    """

    def __init__(self, hub: ListenerHub, on_dismiss: Callable[[], None]) -> None:
        self._hub = hub
        self._on_dismiss = on_dismiss
        self._released = False
        self._click_sub: Subscription = hub.add(CLICK, self._on_click, once=True)
        self._key_sub: Subscription = hub.add(KEYDOWN, self._on_key, once=True)

    @property
    def live(self) -> bool:
        return not self._released

    def release(self) -> None:
        """Drop both listeners.  Idempotent."""
        if self._released:
            return
        self._released = True
        self._click_sub.cancel()
        self._key_sub.cancel()

    def _on_click(self, event: PointerEvent) -> None:
        self._fire("click")

    def _on_key(self, event: KeyEvent) -> None:
        if self._released:
            return
        if not event.is_escape:
            self._key_sub = self._hub.add(KEYDOWN, self._on_key, once=True)
            return
        self._fire("escape")

    def _fire(self, reason: str) -> None:
        if self._released:
            return
        self.release()
        logger.debug("Menu dismissed (%s)", reason)
        self._on_dismiss()
