"""Input events and the global listener hub that dismissal hooks attach to.

Event sources (tkinter ``bind_all``, the pynput pointer hook, tests) push
events into a :class:`ListenerHub` via :meth:`ListenerHub.dispatch`.
Subscribers register with :meth:`ListenerHub.add`; one-shot subscriptions are
dropped before their handler runs, so a handler may freely re-subscribe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

CLICK = "click"
KEYDOWN = "keydown"

_KINDS = (CLICK, KEYDOWN)

# Modifier aliases -> canonical name
_MODIFIER_ALIASES: dict[str, str] = {
    "ctrl": "ctrl",
    "control": "ctrl",
    "ctrl_l": "ctrl",
    "ctrl_r": "ctrl",
    "alt": "alt",
    "alt_l": "alt",
    "alt_r": "alt",
    "alt_gr": "alt",
    "option": "alt",
    "shift": "shift",
    "shift_l": "shift",
    "shift_r": "shift",
    "cmd": "cmd",
    "cmd_l": "cmd",
    "cmd_r": "cmd",
    "command": "cmd",
    "meta": "cmd",
    "win": "cmd",
    "super": "cmd",
}

# Special key names (tkinter keysyms) -> canonical name
_KEY_ALIASES: dict[str, str] = {
    "esc": "Escape",
    "escape": "Escape",
    "enter": "Enter",
    "return": "Enter",
    "tab": "Tab",
    "space": "Space",
    "backspace": "Backspace",
    "delete": "Delete",
}


def normalize_modifier(name: str) -> str:
    """Return the canonical modifier name for *name*.

    Raises:
        ValueError: If *name* is not a known modifier.
    """
    canonical = _MODIFIER_ALIASES.get(name.strip().lower())
    if canonical is None:
        raise ValueError(
            f"Unknown modifier {name!r}. Supported modifiers: alt, ctrl, shift, cmd/win"
        )
    return canonical


def normalize_key(name: str) -> str:
    """Return a canonical key name for a tkinter keysym or key string.

    Single characters are returned as-is; named keys map to the names used
    by :class:`KeyEvent` (``"Escape"``, ``"Enter"`` ...).
    """
    if len(name) == 1:
        return name
    return _KEY_ALIASES.get(name.lower(), name)


@dataclass(frozen=True)
class PointerEvent:
    """A pointer activation in viewport coordinates."""

    x: int
    y: int
    button: int = 1
    modifiers: frozenset[str] = field(default_factory=frozenset)

    def has_modifier(self, name: str) -> bool:
        return normalize_modifier(name) in self.modifiers


@dataclass(frozen=True)
class KeyEvent:
    key: str

    @property
    def is_escape(self) -> bool:
        return self.key == "Escape"


Handler = Callable[[Any], None]


class Subscription:
    """Handle for a listener added to a :class:`ListenerHub`."""

    def __init__(self, hub: ListenerHub, kind: str, handler: Handler, once: bool) -> None:
        self._hub = hub
        self.kind = kind
        self.handler = handler
        self.once = once
        self.active = True

    def cancel(self) -> None:
        """Remove the listener.  Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self._hub._discard(self)

    def __repr__(self) -> str:
        state = "active" if self.active else "cancelled"
        return f"<Subscription {self.kind} once={self.once} {state}>"


class ListenerHub:
    """Registry of process-wide listeners keyed by event kind."""

    def __init__(self) -> None:
        self._subs: dict[str, list[Subscription]] = {kind: [] for kind in _KINDS}

    def add(self, kind: str, handler: Handler, once: bool = True) -> Subscription:
        if kind not in self._subs:
            raise ValueError(f"Unknown event kind {kind!r}")
        sub = Subscription(self, kind, handler, once)
        self._subs[kind].append(sub)
        return sub

    def count(self, kind: str | None = None) -> int:
        """Return the number of live listeners (for *kind*, or all kinds)."""
        if kind is not None:
            return len(self._subs[kind])
        return sum(len(subs) for subs in self._subs.values())

    def dispatch(self, kind: str, event: Any) -> None:
        """Deliver *event* to every listener registered for *kind*.

        Listeners added while dispatching are not called for this event.
        """
        for sub in list(self._subs.get(kind, ())):
            if not sub.active:
                continue
            if sub.once:
                sub.cancel()
            try:
                sub.handler(event)
            except Exception:
                logger.exception("Error in %s listener", kind)

    def _discard(self, sub: Subscription) -> None:
        try:
            self._subs[sub.kind].remove(sub)
        except ValueError:
            pass
