"""Menu state and menu item records."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    x: int = 0
    y: int = 0


@dataclass
class MenuState:
    """Visibility, placement and selected layout of the context menu."""

    current_layout: str
    visible: bool = False
    position: Position = Position()


@dataclass(frozen=True)
class MenuItem:
    """A clickable entry: a command, a layout choice, or both."""

    command: str | None = None
    layout: str | None = None
    label: str = ""

    def __post_init__(self) -> None:
        if self.command is None and self.layout is None:
            raise ValueError("MenuItem needs a command or a layout")
