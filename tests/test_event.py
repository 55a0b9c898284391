"""Tests for strata.tui.event -- events, relativization and EventResult."""

from __future__ import annotations

import pytest

from strata.tui.event import (
    EXIT,
    Char,
    EventResult,
    Key,
    KeyEvent,
    Mouse,
    MouseButton,
    MouseEvent,
    to_event,
)
from strata.tui.vec import Vec2


class Recorder:
    """Stand-in controller recording the callbacks run against it."""

    def __init__(self) -> None:
        self.calls: list[str] = []


class TestEvents:
    def test_events_are_hashable_and_comparable(self) -> None:
        table = {Char("q"): 1, KeyEvent(Key.ESC): 2}
        assert table[Char("q")] == 1
        assert table[KeyEvent(Key.ESC)] == 2
        assert KeyEvent(Key.ESC) != KeyEvent(Key.ESC, shift=True)

    def test_relativized_is_identity_for_keys(self) -> None:
        event = Char("a")
        assert event.relativized((3, 4)) is event

    def test_mouse_relativized_accumulates_offset(self) -> None:
        event = Mouse(MouseEvent.press(MouseButton.LEFT), Vec2(10, 5))
        moved = event.relativized((2, 1)).relativized((3, 1))
        assert moved.offset == Vec2(5, 2)
        assert moved.relative_position() == Vec2(5, 3)

    def test_relative_position_above_the_view_is_none(self) -> None:
        event = Mouse(MouseEvent.press(MouseButton.LEFT), Vec2(1, 1))
        assert event.relativized((2, 0)).relative_position() is None

    def test_only_presses_grab_focus(self) -> None:
        assert MouseEvent.press(MouseButton.LEFT).grabs_focus()
        assert not MouseEvent.release(MouseButton.LEFT).grabs_focus()
        assert not MouseEvent.wheel_up().grabs_focus()

    def test_to_event(self) -> None:
        assert to_event("q") == Char("q")
        assert to_event(Key.ENTER) == KeyEvent(Key.ENTER)
        assert to_event(EXIT) is EXIT
        with pytest.raises(TypeError):
            to_event("too long")


class TestEventResult:
    def test_ignored_and_consumed(self) -> None:
        assert not EventResult.ignored().is_consumed()
        assert EventResult.consumed().is_consumed()
        assert not EventResult.consumed().has_callback()

    def test_with_cb_runs_on_process(self) -> None:
        recorder = Recorder()
        result = EventResult.with_cb(lambda tui: tui.calls.append("cb"))
        assert result.is_consumed()
        result.process(recorder)  # type: ignore[arg-type]
        assert recorder.calls == ["cb"]

    def test_and_then_runs_both_callbacks_in_order(self) -> None:
        recorder = Recorder()
        first = EventResult.with_cb(lambda tui: tui.calls.append("first"))
        second = EventResult.with_cb(lambda tui: tui.calls.append("second"))
        combined = first.and_then(second)
        combined.process(recorder)  # type: ignore[arg-type]
        assert recorder.calls == ["first", "second"]

    def test_and_then_with_ignored(self) -> None:
        assert not EventResult.ignored().and_then(EventResult.ignored()).is_consumed()
        assert EventResult.ignored().and_then(EventResult.consumed()).is_consumed()
