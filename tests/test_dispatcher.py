"""Tests for CommandDispatcher running on a real event loop."""

from __future__ import annotations

import asyncio

from termctx.dispatcher import CommandDispatcher
from termctx.tasks import LoopRunner

from conftest import FakeClipboard, FakeTerminal


class _NoSelectionQuery:
    """Terminal without has_selection(): treated as having no selection."""

    def __init__(self) -> None:
        self.pasted: list[str] = []

    def get_selection(self) -> str:
        return "should not be read"

    def paste(self, text: str) -> None:
        self.pasted.append(text)


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


def test_copy_and_paste_on_running_loop(log: list[str]) -> None:
    terminal = FakeTerminal(log, selection="hello")
    clipboard = FakeClipboard(log, content="xyz")

    async def scenario() -> None:
        dispatcher = CommandDispatcher(clipboard, LoopRunner(asyncio.get_running_loop()), terminal)
        dispatcher.dispatch("copy")
        assert clipboard.writes == []  # fire-and-forget: not run synchronously
        await _settle()
        assert clipboard.writes == ["hello"]

        clipboard.content = "xyz"
        dispatcher.dispatch("paste")
        await _settle()
        assert terminal.pasted == ["xyz"]

    asyncio.run(scenario())


def test_paste_failure_is_swallowed(log: list[str]) -> None:
    terminal = FakeTerminal(log)
    clipboard = FakeClipboard(log)
    clipboard.fail_read = True

    async def scenario() -> None:
        dispatcher = CommandDispatcher(clipboard, LoopRunner(asyncio.get_running_loop()), terminal)
        dispatcher.dispatch("paste")
        await _settle()

    asyncio.run(scenario())
    assert terminal.pasted == []


def test_copy_write_failure_is_swallowed(log: list[str]) -> None:
    terminal = FakeTerminal(log, selection="sel")
    clipboard = FakeClipboard(log)
    clipboard.fail_write = True

    async def scenario() -> None:
        dispatcher = CommandDispatcher(clipboard, LoopRunner(asyncio.get_running_loop()), terminal)
        dispatcher.dispatch("copy")
        await _settle()

    asyncio.run(scenario())
    assert log == ["write"]
    assert clipboard.writes == []


def test_terminal_without_selection_query_never_copies(log, runner) -> None:
    clipboard = FakeClipboard(log)
    dispatcher = CommandDispatcher(clipboard, runner, _NoSelectionQuery())
    dispatcher.dispatch("copy")
    assert runner.pending == []


def test_unknown_and_absent_commands(log, runner) -> None:
    dispatcher = CommandDispatcher(FakeClipboard(log), runner, FakeTerminal(log, "x"))
    dispatcher.dispatch("cut")
    dispatcher.dispatch(None)
    assert runner.pending == []
    assert log == []
