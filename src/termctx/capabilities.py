"""Capabilities the menu drives: the host terminal and the system clipboard."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

import pyperclip

logger = logging.getLogger(__name__)


class ClipboardError(Exception):
    """Raised when the system clipboard cannot be read or written."""


@runtime_checkable
class Terminal(Protocol):
    """Host terminal operations used by the copy/paste commands.

    ``has_selection()`` is optional; terminals without it are treated as
    having nothing selected.
    """

    def get_selection(self) -> str: ...

    def paste(self, text: str) -> None: ...


@runtime_checkable
class Clipboard(Protocol):
    async def write_text(self, text: str) -> None: ...

    async def read_text(self) -> str: ...


def terminal_has_selection(terminal: Terminal | None) -> bool:
    """Return True if *terminal* reports an active selection."""
    if terminal is None:
        return False
    has_selection = getattr(terminal, "has_selection", None)
    if not callable(has_selection):
        return False
    return bool(has_selection())


class PyperclipClipboard:
    """:class:`Clipboard` backed by pyperclip.

    pyperclip blocks on the platform clipboard tool, so each call is pushed
    to a worker thread.
    """

    async def write_text(self, text: str) -> None:
        await asyncio.to_thread(self._copy, text)

    async def read_text(self) -> str:
        return await asyncio.to_thread(self._paste)

    @staticmethod
    def _copy(text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            logger.warning("Clipboard write failed: %s", exc)
            raise ClipboardError(str(exc)) from exc

    @staticmethod
    def _paste() -> str:
        try:
            return pyperclip.paste()
        except pyperclip.PyperclipException as exc:
            logger.warning("Clipboard read failed: %s", exc)
            raise ClipboardError(str(exc)) from exc
