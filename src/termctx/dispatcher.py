"""Menu command dispatch: copy and paste through the clipboard."""

from __future__ import annotations

import logging

from termctx.capabilities import Clipboard, Terminal, terminal_has_selection
from termctx.tasks import TaskRunner

logger = logging.getLogger(__name__)

COPY = "copy"
PASTE = "paste"


class CommandDispatcher:
    """Run menu commands against a terminal and clipboard.

    Clipboard work is handed to *runner* and never awaited.  Unknown
    commands and a missing terminal are no-ops.
    """

    def __init__(
        self,
        clipboard: Clipboard,
        runner: TaskRunner,
        terminal: Terminal | None = None,
    ) -> None:
        self.terminal = terminal
        self._clipboard = clipboard
        self._runner = runner

    def dispatch(self, command: str | None) -> None:
        if command == COPY:
            self.copy()
        elif command == PASTE:
            self.paste()
        elif command is not None:
            logger.debug("Ignoring unknown command %r", command)

    def copy(self) -> None:
        """Copy the terminal selection to the clipboard, if there is one."""
        terminal = self.terminal
        if not terminal_has_selection(terminal):
            logger.debug("Copy: nothing selected")
            return
        text = terminal.get_selection()
        self._runner.spawn(self._clipboard.write_text(text), name="clipboard-write")

    def paste(self) -> None:
        """Read the clipboard and paste it into the terminal once it arrives."""
        terminal = self.terminal
        if terminal is None:
            logger.debug("Paste: no terminal attached")
            return
        self._runner.spawn(self._paste_into(terminal), name="clipboard-paste")

    async def _paste_into(self, terminal: Terminal) -> None:
        text = await self._clipboard.read_text()
        terminal.paste(text)
