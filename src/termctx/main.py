"""Main entry point: a terminal-like tkinter window with the context menu."""

from __future__ import annotations

import logging
import tkinter as tk

from termctx.capabilities import PyperclipClipboard
from termctx.config import AppConfig, load_config
from termctx.controller import ContextMenuController
from termctx.dispatcher import COPY, PASTE
from termctx.events import ListenerHub
from termctx.state import MenuItem
from termctx.tasks import BackgroundLoop
from termctx.tkhost import TkEventSource, TkMenuView, TkTerminal, UiDispatcher

logger = logging.getLogger(__name__)

_TERM_BG = "#111111"
_TERM_FG = "#d0d0d0"
_TERM_FONT = ("Consolas", 11)


def build_menu_items(layouts: list[str]) -> list[MenuItem]:
    """Copy, Paste, then one checkable entry per layout."""
    items = [MenuItem(command=COPY, label="Copy"), MenuItem(command=PASTE, label="Paste")]
    items.extend(MenuItem(layout=layout, label=layout.capitalize()) for layout in layouts)
    return items


class TermCtxApp:
    """Wires the tkinter host, clipboard loop and menu controller together."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config

        self._root = tk.Tk()
        self._root.title("termctx")
        self._root.geometry("800x480")
        self._text = tk.Text(
            self._root,
            bg=_TERM_BG,
            fg=_TERM_FG,
            insertbackground=_TERM_FG,
            font=_TERM_FONT,
            wrap="char",
        )
        self._text.pack(fill="both", expand=True)

        self._ui = UiDispatcher(self._root)
        self._loop = BackgroundLoop(name="termctx-clipboard")
        self._hub = ListenerHub()

        menu_cfg = config.menu
        self._view = TkMenuView(
            self._root,
            build_menu_items(menu_cfg.layouts),
            on_activate=self._on_activate,
        )

        logger.info("Starting clipboard loop...")
        self._loop.start()

        self._controller = ContextMenuController(
            view=self._view,
            hub=self._hub,
            clipboard=PyperclipClipboard(),
            runner=self._loop.runner(),
            terminal=TkTerminal(self._text, self._ui),
            layouts=menu_cfg.layouts,
            default_layout=menu_cfg.default_layout,
            trigger_modifier=menu_cfg.trigger_modifier,
            on_layout_change=self._on_layout_change,
        )

        self._events = TkEventSource(
            self._root, self._hub, self._text, on_trigger=self._controller.handle_trigger,
        )

        self._pointer_hook = None
        if config.hooks.global_pointer:
            from termctx.hooks import GlobalPointerHook

            self._pointer_hook = GlobalPointerHook(
                self._hub, self._ui.call_soon, ignore=self._inside_app,
            )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Bind input, start background hooks and block in the tkinter loop."""
        self._events.bind()
        self._ui.start()
        if self._pointer_hook is not None:
            self._pointer_hook.start()
        self._root.protocol("WM_DELETE_WINDOW", self._on_quit)
        logger.info("termctx ready (%s + right-click opens the menu)", self._config.menu.trigger_modifier)
        self._root.mainloop()

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def _on_activate(self, item: MenuItem | None) -> None:
        self._controller.activate(item)

    def _on_layout_change(self, layout: str) -> None:
        self._root.title(f"termctx [{layout}]")

    def _inside_app(self, x: int, y: int) -> bool:
        if self._view.contains(x, y):
            return True
        root = self._root
        left, top = root.winfo_rootx(), root.winfo_rooty()
        return left <= x < left + root.winfo_width() and top <= y < top + root.winfo_height()

    def _on_quit(self) -> None:
        logger.info("Shutting down...")
        self._controller.dispose()
        self._events.unbind()
        self._ui.stop()
        if self._pointer_hook is not None:
            self._pointer_hook.stop()
        self._loop.stop()
        self._root.destroy()


# ======================================================================
# Entry point
# ======================================================================


def main() -> None:
    """Entry point for the termctx application."""
    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    app = TermCtxApp(config)
    app.run()


if __name__ == "__main__":
    main()
