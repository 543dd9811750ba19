"""Tests for the listener hub and event helpers."""

from __future__ import annotations

import pytest

from termctx.events import (
    CLICK,
    KEYDOWN,
    KeyEvent,
    ListenerHub,
    PointerEvent,
    normalize_key,
    normalize_modifier,
)


class TestListenerHub:
    def test_once_listener_fires_a_single_time(self) -> None:
        hub = ListenerHub()
        seen: list[str] = []
        sub = hub.add(KEYDOWN, lambda e: seen.append(e.key))
        hub.dispatch(KEYDOWN, KeyEvent("a"))
        hub.dispatch(KEYDOWN, KeyEvent("b"))
        assert seen == ["a"]
        assert sub.active is False
        assert hub.count() == 0

    def test_persistent_listener(self) -> None:
        hub = ListenerHub()
        seen: list[int] = []
        hub.add(CLICK, lambda e: seen.append(e.x), once=False)
        hub.dispatch(CLICK, PointerEvent(1, 0))
        hub.dispatch(CLICK, PointerEvent(2, 0))
        assert seen == [1, 2]

    def test_cancel_is_idempotent(self) -> None:
        hub = ListenerHub()
        sub = hub.add(CLICK, lambda e: None)
        sub.cancel()
        sub.cancel()
        assert hub.count(CLICK) == 0

    def test_kinds_are_independent(self) -> None:
        hub = ListenerHub()
        seen: list[str] = []
        hub.add(CLICK, lambda e: seen.append("click"))
        hub.dispatch(KEYDOWN, KeyEvent("Escape"))
        assert seen == []
        assert hub.count(CLICK) == 1

    def test_listener_added_during_dispatch_waits_for_next_event(self) -> None:
        hub = ListenerHub()
        seen: list[str] = []

        def rearm(event: KeyEvent) -> None:
            seen.append(event.key)
            hub.add(KEYDOWN, rearm)

        hub.add(KEYDOWN, rearm)
        hub.dispatch(KEYDOWN, KeyEvent("a"))
        assert seen == ["a"]
        hub.dispatch(KEYDOWN, KeyEvent("b"))
        assert seen == ["a", "b"]
        assert hub.count(KEYDOWN) == 1

    def test_listener_cancelled_by_earlier_listener_is_skipped(self) -> None:
        hub = ListenerHub()
        seen: list[str] = []
        second = None

        def first(event: PointerEvent) -> None:
            seen.append("first")
            second.cancel()

        hub.add(CLICK, first)
        second = hub.add(CLICK, lambda e: seen.append("second"))
        hub.dispatch(CLICK, PointerEvent(0, 0))
        assert seen == ["first"]

    def test_handler_error_is_contained(self) -> None:
        hub = ListenerHub()
        seen: list[str] = []

        def broken(event: PointerEvent) -> None:
            raise RuntimeError("boom")

        hub.add(CLICK, broken)
        hub.add(CLICK, lambda e: seen.append("ok"))
        hub.dispatch(CLICK, PointerEvent(0, 0))
        assert seen == ["ok"]

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValueError):
            ListenerHub().add("scroll", lambda e: None)



class TestNormalization:
    @pytest.mark.parametrize("name", ["Escape", "esc", "ESC", "escape"])
    def test_escape_aliases(self, name: str) -> None:
        assert normalize_key(name) == "Escape"
        assert KeyEvent(normalize_key(name)).is_escape

    def test_single_characters_kept(self) -> None:
        assert normalize_key("a") == "a"
        assert normalize_key("A") == "A"

    def test_unknown_named_key_passes_through(self) -> None:
        assert normalize_key("F5") == "F5"

    def test_modifiers(self) -> None:
        assert normalize_modifier("Control") == "ctrl"
        assert normalize_modifier("win") == "cmd"
        with pytest.raises(ValueError):
            normalize_modifier("hyper")

    def test_pointer_has_modifier(self) -> None:
        event = PointerEvent(0, 0, 3, frozenset({"ctrl"}))
        assert event.has_modifier("control")
        assert not event.has_modifier("alt")
