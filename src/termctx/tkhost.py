"""tkinter host: popup menu view, text-widget terminal and event wiring.

tkinter is not thread-safe, so work arriving from other threads (clipboard
tasks, pynput hooks) goes through :class:`UiDispatcher`, which the tkinter
thread drains via ``after()`` polling.
"""

from __future__ import annotations

import logging
import queue
import sys
import tkinter as tk
from typing import Any, Callable, Iterable

from termctx.events import CLICK, KEYDOWN, KeyEvent, ListenerHub, PointerEvent, normalize_key
from termctx.state import MenuItem

logger = logging.getLogger(__name__)

_POLL_INTERVAL_MS = 16

# Tk event.state bit masks
_STATE_SHIFT = 0x0001
_STATE_CONTROL = 0x0004
_STATE_MOD1 = 0x0008  # Alt on X11/Windows
_STATE_MOD2_DARWIN = 0x0010  # Command on macOS

_SECONDARY_BUTTONS = ("<Button-2>",) if sys.platform == "darwin" else ("<Button-3>",)

# Menu appearance
_MENU_BG = "#2b2b2b"
_MENU_FG = "#e6e6e6"
_MENU_HOVER_BG = "#3d6db5"
_MENU_FONT = ("Segoe UI", 10)
_CHECK_MARK = "✓ "
_NO_MARK = "   "


def modifiers_from_state(state: int) -> frozenset[str]:
    """Translate a Tk ``event.state`` bitmask into canonical modifier names."""
    mods: set[str] = set()
    if state & _STATE_SHIFT:
        mods.add("shift")
    if state & _STATE_CONTROL:
        mods.add("ctrl")
    if sys.platform == "darwin":
        if state & _STATE_MOD2_DARWIN:
            mods.add("cmd")
    elif state & _STATE_MOD1:
        mods.add("alt")
    return frozenset(mods)


class UiDispatcher:
    """Thread-safe queue of callables executed on the tkinter thread."""

    def __init__(self, root: tk.Misc) -> None:
        self._root = root
        self._queue: queue.Queue[tuple[Callable[..., Any], tuple]] = queue.Queue()
        self._polling = False

    def start(self) -> None:
        if not self._polling:
            self._polling = True
            self._root.after(_POLL_INTERVAL_MS, self._poll)

    def stop(self) -> None:
        self._polling = False

    def call_soon(self, fn: Callable[..., Any], *args: Any) -> None:
        """Queue ``fn(*args)`` for the tkinter thread.  Callable from any thread."""
        self._queue.put((fn, args))

    def _poll(self) -> None:
        if not self._polling:
            return
        try:
            while True:
                fn, args = self._queue.get_nowait()
                try:
                    fn(*args)
                except Exception:
                    logger.exception("Error in queued UI call %r", fn)
        except queue.Empty:
            pass
        self._root.after(_POLL_INTERVAL_MS, self._poll)


class TkMenuView:
    """Borderless popup listing the menu items, with a check mark per layout.

    Parameters
    ----------
    on_activate:
        Called on the tkinter thread with the clicked :class:`MenuItem`, or
        ``None`` when the click landed between items.
    """

    def __init__(
        self,
        root: tk.Misc,
        items: Iterable[MenuItem],
        on_activate: Callable[[MenuItem | None], None],
    ) -> None:
        self._on_activate = on_activate
        self._window = tk.Toplevel(root)
        self._window.withdraw()
        self._window.overrideredirect(True)
        self._window.attributes("-topmost", True)

        self._frame = tk.Frame(self._window, bg=_MENU_BG, padx=2, pady=4)
        self._frame.pack(fill="both", expand=True)
        self._frame.bind("<ButtonRelease-1>", lambda e: self._on_activate(None))

        self._labels: dict[str, tk.Label] = {}
        self._layout_labels: dict[str, tuple[tk.Label, str]] = {}
        for item in items:
            self._add_item(item)

    def _add_item(self, item: MenuItem) -> None:
        text = item.label or (item.command or item.layout or "").capitalize()
        mark = _NO_MARK if item.layout is not None else ""
        label = tk.Label(
            self._frame,
            text=mark + text,
            anchor="w",
            bg=_MENU_BG,
            fg=_MENU_FG,
            font=_MENU_FONT,
            padx=10,
            pady=3,
        )
        label.pack(fill="x")
        label.bind("<Enter>", lambda e: label.configure(bg=_MENU_HOVER_BG))
        label.bind("<Leave>", lambda e: label.configure(bg=_MENU_BG))
        label.bind("<ButtonRelease-1>", lambda e, it=item: self._on_activate(it))
        if item.layout is not None:
            self._layout_labels[item.layout] = (label, text)

    # ------------------------------------------------------------------
    # MenuView
    # ------------------------------------------------------------------

    def show(self, x: int, y: int) -> None:
        self._window.update_idletasks()
        width = self._window.winfo_reqwidth()
        height = self._window.winfo_reqheight()
        screen_w = self._window.winfo_screenwidth()
        screen_h = self._window.winfo_screenheight()
        # Keep the popup fully on screen
        x = max(0, min(x, screen_w - width))
        y = max(0, min(y, screen_h - height))
        self._window.geometry(f"+{x}+{y}")
        self._window.deiconify()
        self._window.lift()

    def hide(self) -> None:
        self._window.withdraw()

    def set_checked(self, layout: str, checked: bool) -> None:
        entry = self._layout_labels.get(layout)
        if entry is None:
            return
        label, text = entry
        label.configure(text=(_CHECK_MARK if checked else _NO_MARK) + text)

    def contains(self, x: int, y: int) -> bool:
        """Return True if screen point (*x*, *y*) is inside the visible popup."""
        if not self._window.winfo_viewable():
            return False
        left, top = self._window.winfo_rootx(), self._window.winfo_rooty()
        return (
            left <= x < left + self._window.winfo_width()
            and top <= y < top + self._window.winfo_height()
        )


class TkTerminal:
    """Terminal capability over a ``tk.Text`` widget."""

    def __init__(self, widget: tk.Text, ui: UiDispatcher) -> None:
        self._widget = widget
        self._ui = ui

    def has_selection(self) -> bool:
        return bool(self._widget.tag_ranges("sel"))

    def get_selection(self) -> str:
        try:
            return self._widget.get("sel.first", "sel.last")
        except tk.TclError:
            return ""

    def paste(self, text: str) -> None:
        # Called from the clipboard thread
        self._ui.call_soon(self._insert, text)

    def _insert(self, text: str) -> None:
        self._widget.insert("insert", text)
        self._widget.see("insert")


class TkEventSource:
    """Feed tkinter input into a :class:`ListenerHub` and the menu trigger.

    Primary-button releases anywhere in the application become ``click``
    events; key presses become ``keydown`` events.  Secondary clicks on
    *target* are offered to *on_trigger*, whose True return suppresses the
    widget's default handling.
    """

    def __init__(
        self,
        root: tk.Misc,
        hub: ListenerHub,
        target: tk.Misc,
        on_trigger: Callable[[PointerEvent], bool],
    ) -> None:
        self._root = root
        self._hub = hub
        self._target = target
        self._on_trigger = on_trigger
        self._bound = False

    def bind(self) -> None:
        if self._bound:
            return
        self._root.bind_all("<ButtonRelease-1>", self._on_click, add="+")
        self._root.bind_all("<KeyPress>", self._on_key, add="+")
        for sequence in _SECONDARY_BUTTONS:
            self._target.bind(sequence, self._on_secondary, add="+")
        self._bound = True

    def unbind(self) -> None:
        if not self._bound:
            return
        self._root.unbind_all("<ButtonRelease-1>")
        self._root.unbind_all("<KeyPress>")
        for sequence in _SECONDARY_BUTTONS:
            self._target.unbind(sequence)
        self._bound = False

    def _on_click(self, event: tk.Event) -> None:
        self._hub.dispatch(
            CLICK,
            PointerEvent(event.x_root, event.y_root, 1, modifiers_from_state(event.state)),
        )

    def _on_key(self, event: tk.Event) -> None:
        self._hub.dispatch(KEYDOWN, KeyEvent(normalize_key(event.keysym)))

    def _on_secondary(self, event: tk.Event) -> str | None:
        pointer = PointerEvent(
            event.x_root,
            event.y_root,
            3,
            modifiers_from_state(event.state),
        )
        if self._on_trigger(pointer):
            return "break"
        return None
