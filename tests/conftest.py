"""Shared fakes and fixtures for termctx tests."""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine

import pytest

from termctx.controller import ContextMenuController
from termctx.events import ListenerHub

LAYOUTS = ("qwerty", "dvorak", "colemak")


class FakeView:
    """Records calls; mirrors the checked flag per layout."""

    def __init__(self, log: list[str]) -> None:
        self.log = log
        self.shown_at: tuple[int, int] | None = None
        self.visible = False
        self.checked: dict[str, bool] = {}

    def show(self, x: int, y: int) -> None:
        self.log.append("show")
        self.shown_at = (x, y)
        self.visible = True

    def hide(self) -> None:
        self.log.append("hide")
        self.visible = False

    def set_checked(self, layout: str, checked: bool) -> None:
        self.checked[layout] = checked


class FakeTerminal:
    def __init__(self, log: list[str], selection: str = "") -> None:
        self.log = log
        self.selection = selection
        self.pasted: list[str] = []

    def has_selection(self) -> bool:
        return bool(self.selection)

    def get_selection(self) -> str:
        return self.selection

    def paste(self, text: str) -> None:
        self.log.append("paste")
        self.pasted.append(text)


class FakeClipboard:
    def __init__(self, log: list[str], content: str = "") -> None:
        self.log = log
        self.content = content
        self.writes: list[str] = []
        self.fail_read = False
        self.fail_write = False

    async def write_text(self, text: str) -> None:
        self.log.append("write")
        if self.fail_write:
            raise OSError("clipboard unavailable")
        self.writes.append(text)
        self.content = text

    async def read_text(self) -> str:
        self.log.append("read")
        await asyncio.sleep(0)
        if self.fail_read:
            raise OSError("clipboard unavailable")
        return self.content


class RecordingRunner:
    """Collects spawned coroutines so tests decide when they run."""

    def __init__(self) -> None:
        self.pending: list[Coroutine[Any, Any, Any]] = []

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str = "") -> None:
        self.pending.append(coro)

    def run_all(self) -> list[BaseException | None]:
        async def _drain() -> list[BaseException | None]:
            results = await asyncio.gather(*self.pending, return_exceptions=True)
            return [r if isinstance(r, BaseException) else None for r in results]

        try:
            return asyncio.run(_drain())
        finally:
            self.pending.clear()


@pytest.fixture
def log() -> list[str]:
    return []


@pytest.fixture
def hub() -> ListenerHub:
    return ListenerHub()


@pytest.fixture
def view(log: list[str]) -> FakeView:
    return FakeView(log)


@pytest.fixture
def terminal(log: list[str]) -> FakeTerminal:
    return FakeTerminal(log)


@pytest.fixture
def clipboard(log: list[str]) -> FakeClipboard:
    return FakeClipboard(log)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def layout_changes() -> list[str]:
    return []


@pytest.fixture
def controller(
    view: FakeView,
    hub: ListenerHub,
    clipboard: FakeClipboard,
    runner: RecordingRunner,
    terminal: FakeTerminal,
    layout_changes: list[str],
) -> ContextMenuController:
    return ContextMenuController(
        view=view,
        hub=hub,
        clipboard=clipboard,
        runner=runner,
        terminal=terminal,
        layouts=LAYOUTS,
        on_layout_change=layout_changes.append,
    )
