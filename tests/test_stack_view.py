"""Tests for strata.tui.views.stack_view -- the layered compositor."""

from __future__ import annotations

import pytest

from strata.tui.backend.puppet import PuppetBackend
from strata.tui.direction import Direction
from strata.tui.event import (
    WINDOW_RESIZE,
    Char,
    Event,
    EventResult,
    Mouse,
    MouseButton,
    MouseEvent,
)
from strata.tui.position import Position
from strata.tui.printer import Printer
from strata.tui.theme import load_default
from strata.tui.utils import visible_width
from strata.tui.vec import Vec2
from strata.tui.view import Selector, View
from strata.tui.views import LayerPosition, NamedView, StackView


# ---------------------------------------------------------------------------
# Helper views
# ---------------------------------------------------------------------------


class TextView(View):
    """Single line of static text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.focus_calls = 0

    def required_size(self, constraint: Vec2) -> Vec2:
        return Vec2(visible_width(self.text), 1)

    def draw(self, printer: Printer) -> None:
        printer.print((0, 0), self.text)

    def take_focus(self, source: Direction) -> bool:
        self.focus_calls += 1
        return True


class EventRecorder(View):
    """Consumes every event and keeps it, with the mouse position it saw."""

    def __init__(self) -> None:
        self.events: list[Event] = []
        self.positions: list[Vec2 | None] = []

    def required_size(self, constraint: Vec2) -> Vec2:
        return Vec2(4, 2)

    def on_event(self, event: Event) -> EventResult:
        self.events.append(event)
        if isinstance(event, Mouse):
            self.positions.append(event.relative_position())
        return EventResult.consumed()


class Host:
    """Minimal controller for callbacks returned by the stack."""

    def __init__(self, stack: StackView) -> None:
        self.stack = stack

    def pop_layer(self) -> View | None:
        return self.stack.pop_layer()


def press(x: int, y: int) -> Mouse:
    return Mouse(MouseEvent.press(MouseButton.LEFT), Vec2(x, y))


SCREEN = Vec2(40, 12)


# ---------------------------------------------------------------------------
# Stack discipline
# ---------------------------------------------------------------------------


class TestStackDiscipline:
    def test_push_pop(self) -> None:
        stack = StackView()
        a, b = TextView("a"), TextView("b")
        stack.add_layer(a)
        stack.add_layer(b)
        assert len(stack) == 2
        assert stack.pop_layer() is b
        assert stack.pop_layer() is a
        assert stack.pop_layer() is None
        assert stack.is_empty()

    def test_move_to_front_then_pop_removes_moved_layer(self) -> None:
        stack = StackView()
        views = [TextView(name) for name in ("a", "b", "c")]
        for view in views:
            stack.add_layer(view)
        stack.move_to_front(LayerPosition.from_back(0))
        assert stack.pop_layer() is views[0]
        assert stack.get(LayerPosition.from_front(0)) is views[2]

    def test_move_to_back(self) -> None:
        stack = StackView()
        views = [TextView(name) for name in ("a", "b", "c")]
        for view in views:
            stack.add_layer(view)
        stack.move_to_back(LayerPosition.from_front(0))
        assert stack.get(LayerPosition.from_back(0)) is views[2]

    def test_get_out_of_range(self) -> None:
        stack = StackView()
        stack.add_layer(TextView("a"))
        assert stack.get(LayerPosition.from_back(1)) is None
        assert stack.get(LayerPosition.from_front(1)) is None

    def test_remove_layer(self) -> None:
        stack = StackView()
        a, b = TextView("a"), TextView("b")
        stack.add_layer(a)
        stack.add_layer(b)
        stack.bg_dirty = False
        assert stack.remove_layer(LayerPosition.from_back(0)) is a
        assert stack.bg_dirty
        assert len(stack) == 1

    def test_bad_positions_raise(self) -> None:
        stack = StackView()
        stack.add_layer(TextView("a"))
        with pytest.raises(IndexError):
            stack.remove_layer(LayerPosition.from_back(3))
        with pytest.raises(IndexError):
            stack.move_layer(LayerPosition.from_back(0), LayerPosition.from_back(5))


# ---------------------------------------------------------------------------
# Ids and names
# ---------------------------------------------------------------------------


class TestIds:
    def test_duplicate_id_rejected(self) -> None:
        stack = StackView()
        stack.add_layer(TextView("a"), "main")
        with pytest.raises(ValueError):
            stack.add_fullscreen_layer(TextView("b"), "main")

    def test_child_pos_with_view_id(self) -> None:
        stack = StackView()
        stack.add_layer(TextView("a"), "first")
        stack.add_layer(TextView("b"), "second")
        assert stack.child_pos_with_view_id("second") == 1
        assert stack.child_pos_with_view_id("missing") is None

    def test_move_id_to_front_and_back(self) -> None:
        stack = StackView()
        a, b = TextView("a"), TextView("b")
        stack.add_layer(a, "a")
        stack.add_layer(b, "b")
        stack.move_id_to_front("a")
        assert stack.get(LayerPosition.from_front(0)) is a
        stack.move_id_to_back("a")
        assert stack.get(LayerPosition.from_back(0)) is a
        stack.move_id_to_front("missing")
        assert stack.get(LayerPosition.from_back(0)) is a

    def test_find_layer_from_name(self) -> None:
        stack = StackView()
        stack.add_layer(TextView("a"))
        stack.add_layer(NamedView(TextView("b"), "bee"))
        assert stack.find_layer_from_name("bee") == LayerPosition.from_back(1)
        assert stack.find_layer_from_name("wasp") is None

    def test_call_on_any_with_predicate(self) -> None:
        stack = StackView()
        stack.add_layer(TextView("a"))
        stack.add_layer(EventRecorder())
        stack.add_layer(TextView("b"))
        found: list[View] = []
        stack.call_on_any(Selector.predicate(lambda v: isinstance(v, TextView)), found.append)
        assert [v.text for v in found] == ["a", "b"]  # type: ignore[attr-defined]

    def test_focus_view(self) -> None:
        stack = StackView()
        stack.add_layer(NamedView(TextView("a"), "a"))
        assert stack.focus_view(Selector.name("a"))
        assert not stack.focus_view(Selector.name("b"))


# ---------------------------------------------------------------------------
# Layout and placement
# ---------------------------------------------------------------------------


class TestLayout:
    def test_virgin_flag_flips_once(self) -> None:
        stack = StackView()
        view = TextView("a")
        stack.add_layer(view)
        front = LayerPosition.from_front(0)
        assert stack.is_virgin(front) is True
        stack.layout(SCREEN)
        assert stack.is_virgin(front) is False
        stack.layout(SCREEN)
        assert stack.is_virgin(front) is False
        assert view.focus_calls == 1

    def test_is_virgin_missing_layer(self) -> None:
        assert StackView().is_virgin(LayerPosition.from_back(0)) is None

    def test_centered_layer_gets_padding_and_shadow(self) -> None:
        stack = StackView()
        stack.add_layer(TextView("hello"))
        stack.layout(SCREEN)
        assert stack.layer_sizes() == [Vec2(7, 3)]
        assert stack.offset() == Vec2(16, 4)

    def test_size_is_capped_by_the_available_space(self) -> None:
        stack = StackView()
        stack.add_layer(TextView("x" * 100))
        stack.layout(SCREEN)
        assert stack.layer_sizes() == [Vec2(40, 3)]

    def test_chained_parent_placement(self) -> None:
        stack = StackView()
        stack.add_layer_at(Position.absolute((2, 2)), TextView("ab"))
        stack.add_layer_at(Position.parent((3, 1)), TextView("cd"))
        stack.layout(SCREEN)
        assert stack.offset() == Vec2(5, 3)

    def test_fullscreen_layer_at_origin(self) -> None:
        stack = StackView()
        stack.add_fullscreen_layer(TextView("full"))
        stack.layout(SCREEN)
        assert stack.offset() == Vec2(0, 0)
        assert stack.layer_sizes() == [Vec2(4, 1)]

    def test_reposition_layer(self) -> None:
        stack = StackView()
        stack.add_layer_at(Position.absolute((1, 1)), TextView("ab"))
        stack.layout(SCREEN)
        stack.bg_dirty = False
        stack.reposition_layer(LayerPosition.from_front(0), Position.absolute((6, 2)))
        assert stack.bg_dirty
        assert stack.offset() == Vec2(6, 2)

    def test_reposition_fullscreen_or_missing_is_a_noop(self) -> None:
        stack = StackView()
        stack.add_fullscreen_layer(TextView("full"))
        stack.layout(SCREEN)
        stack.bg_dirty = False
        stack.reposition_layer(LayerPosition.from_front(0), Position.absolute((6, 2)))
        stack.reposition_layer(LayerPosition.from_back(4), Position.absolute((6, 2)))
        assert not stack.bg_dirty
        assert stack.offset() == Vec2(0, 0)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TestEvents:
    def test_only_front_layer_receives_events(self) -> None:
        stack = StackView()
        back, front = EventRecorder(), EventRecorder()
        stack.add_layer(back)
        stack.add_layer(front)
        stack.layout(SCREEN)
        assert stack.on_event(Char("x")).is_consumed()
        assert front.events == [Char("x")]
        assert back.events == []

    def test_empty_stack_ignores(self) -> None:
        assert not StackView().on_event(Char("x")).is_consumed()

    def test_mouse_is_relativized_to_the_layer(self) -> None:
        stack = StackView()
        view = EventRecorder()
        stack.add_layer_at(Position.absolute((5, 3)), view)
        stack.layout(SCREEN)
        stack.on_event(press(6, 4))
        assert view.positions == [Vec2(1, 1)]

    def test_resize_marks_background_dirty(self) -> None:
        stack = StackView()
        stack.bg_dirty = False
        stack.on_event(WINDOW_RESIZE)
        assert stack.bg_dirty

    def test_transient_layer_pops_on_outside_press(self) -> None:
        stack = StackView()
        stack.add_layer(TextView("base"))
        stack.add_layer_at(Position.absolute((5, 3)), TextView("tip"), transient=True)
        stack.layout(SCREEN)

        inside = stack.on_event(press(6, 3))
        assert not inside.has_callback()

        outside = stack.on_event(press(30, 10))
        assert outside.has_callback()
        outside.process(Host(stack))  # type: ignore[arg-type]
        assert len(stack) == 1

    def test_non_transient_layer_stays(self) -> None:
        stack = StackView()
        stack.add_layer_at(Position.absolute((5, 3)), TextView("tip"))
        stack.layout(SCREEN)
        assert not stack.on_event(press(30, 10)).has_callback()


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------


class TestDrawing:
    def render(self, stack: StackView) -> PuppetBackend:
        backend = PuppetBackend(size=SCREEN)
        stack.layout(SCREEN)
        stack.draw(Printer(SCREEN, load_default(), backend))
        return backend

    def test_text_is_drawn_inside_the_padding(self) -> None:
        stack = StackView()
        stack.add_layer(TextView("hello"))
        backend = self.render(stack)
        hits = backend.current_frame.find_occurrences("hello")
        assert [hit.min() for hit in hits] == [Vec2(17, 5)]

    def test_front_layer_covers_back_layer(self) -> None:
        stack = StackView()
        stack.add_layer_at(Position.absolute((0, 0)), TextView("under"))
        stack.add_layer_at(Position.absolute((0, 0)), TextView("top"))
        backend = self.render(stack)
        frame = backend.current_frame
        assert frame.find_occurrences("top")
        assert not frame.find_occurrences("under")

    def test_background_is_painted_only_when_dirty(self) -> None:
        stack = StackView()
        backend = self.render(stack)
        assert not stack.bg_dirty
        assert backend.current_frame[0, 0] is not None

        backend.current_frame[0, 0] = None
        stack.draw(Printer(SCREEN, load_default(), backend))
        assert backend.current_frame[0, 0] is None
