"""Context menu controller: owns menu state and its dismissal listeners."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Protocol

from termctx.capabilities import Clipboard, Terminal
from termctx.dismissal import DismissalRegistration
from termctx.dispatcher import CommandDispatcher
from termctx.events import ListenerHub, PointerEvent, normalize_modifier
from termctx.state import MenuItem, MenuState, Position
from termctx.tasks import TaskRunner

logger = logging.getLogger(__name__)

DEFAULT_LAYOUTS = ("qwerty", "dvorak", "colemak")


class MenuView(Protocol):
    """The on-screen menu.  The controller only positions and toggles it."""

    def show(self, x: int, y: int) -> None: ...

    def hide(self) -> None: ...

    def set_checked(self, layout: str, checked: bool) -> None: ...


class ContextMenuController:
    """Open/close lifecycle, command dispatch and layout selection.

    Parameters
    ----------
    view:
        Menu widget shown at the trigger position.
    hub:
        Global listener hub the dismissal listeners attach to.
    clipboard, runner:
        Clipboard capability and the runner its coroutines are spawned on.
    terminal:
        Host terminal; may be attached later via :attr:`terminal`.
    layouts:
        Known layout identifiers; *default_layout* must be one of them.
    on_layout_change:
        Called synchronously with the new layout after every selection.
    """

    def __init__(
        self,
        view: MenuView,
        hub: ListenerHub,
        clipboard: Clipboard,
        runner: TaskRunner,
        terminal: Terminal | None = None,
        layouts: Iterable[str] = DEFAULT_LAYOUTS,
        default_layout: str = "qwerty",
        trigger_modifier: str = "ctrl",
        on_layout_change: Callable[[str], None] | None = None,
    ) -> None:
        self._layouts: tuple[str, ...] = tuple(dict.fromkeys(layouts))
        if not self._layouts:
            raise ValueError("At least one layout is required")
        if default_layout not in self._layouts:
            raise ValueError(
                f"Default layout {default_layout!r} is not one of {list(self._layouts)}"
            )
        self._trigger_modifier = normalize_modifier(trigger_modifier)

        self._view = view
        self._hub = hub
        self._dispatcher = CommandDispatcher(clipboard, runner, terminal)
        self._on_layout_change = on_layout_change

        self._state = MenuState(current_layout=default_layout)
        self._registration: DismissalRegistration | None = None

        self._refresh_layout_indicator()
        logger.debug(
            "ContextMenuController ready (layouts=%s, default=%s, trigger=%s)",
            self._layouts,
            default_layout,
            self._trigger_modifier,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> MenuState:
        return self._state

    @property
    def visible(self) -> bool:
        return self._state.visible

    @property
    def current_layout(self) -> str:
        return self._state.current_layout

    @property
    def layouts(self) -> tuple[str, ...]:
        return self._layouts

    @property
    def registration(self) -> DismissalRegistration | None:
        """The live dismissal registration, or None while hidden."""
        return self._registration

    @property
    def terminal(self) -> Terminal | None:
        return self._dispatcher.terminal

    @terminal.setter
    def terminal(self, terminal: Terminal | None) -> None:
        self._dispatcher.terminal = terminal

    # ------------------------------------------------------------------
    # Host-facing API
    # ------------------------------------------------------------------

    def handle_trigger(self, event: PointerEvent) -> bool:
        """Open the menu for a secondary-click *event*.

        Returns True when the menu was opened (the host should suppress its
        default handling), False when the trigger modifier was not held.
        """
        if not event.has_modifier(self._trigger_modifier):
            return False
        self.open(event.x, event.y)
        return True

    def open(self, x: int, y: int) -> None:
        """Show the menu at (*x*, *y*) and arm fresh dismissal listeners."""
        self._release_registration()
        self._state.visible = True
        self._state.position = Position(x, y)
        self._view.show(x, y)
        self._registration = DismissalRegistration(self._hub, self._on_dismiss)
        self._refresh_layout_indicator()
        logger.debug("Menu opened at (%d, %d)", x, y)

    def close(self) -> None:
        """Hide the menu.  No-op if already hidden."""
        self._release_registration()
        if not self._state.visible:
            return
        self._state.visible = False
        try:
            self._view.hide()
        except Exception:
            logger.exception("Error hiding menu view")
        logger.debug("Menu closed")

    def activate(self, item: MenuItem | None) -> None:
        """Handle a click on *item* (None for a click on the menu background)."""
        if item is None:
            return
        self.close()
        if item.command is not None:
            self.handle_command(item.command)
        if item.layout is not None:
            self.select_layout(item.layout)

    def handle_command(self, command: str) -> None:
        """Run *command* against the terminal and clipboard."""
        try:
            self._dispatcher.dispatch(command)
        except Exception:
            logger.exception("Error running menu command %r", command)

    def select_layout(self, layout: str) -> None:
        """Make *layout* current and notify the layout-change callback."""
        if layout not in self._layouts:
            logger.debug("Ignoring unknown layout %r", layout)
            return
        self._state.current_layout = layout
        self._refresh_layout_indicator()
        logger.info("Keyboard layout set to %s", layout)
        if self._on_layout_change is not None:
            try:
                self._on_layout_change(layout)
            except Exception:
                logger.exception("Error in on_layout_change callback")

    def dispose(self) -> None:
        """Close the menu and drop any armed listeners."""
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_dismiss(self) -> None:
        # The registration already released itself; forget it and hide.
        self._registration = None
        self.close()

    def _release_registration(self) -> None:
        if self._registration is not None:
            self._registration.release()
            self._registration = None

    def _refresh_layout_indicator(self) -> None:
        current = self._state.current_layout
        for layout in self._layouts:
            self._view.set_checked(layout, layout == current)
