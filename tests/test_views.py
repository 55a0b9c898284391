"""Tests for the wrapper views and the debug console."""

from __future__ import annotations

import logging

from strata.tui import logger as log_buffer
from strata.tui.backend.puppet import PuppetBackend
from strata.tui.event import Char, EventResult, Mouse, MouseButton, MouseEvent
from strata.tui.printer import Printer
from strata.tui.theme import ColorStyle, Theme, load_default
from strata.tui.tui import DEBUG_VIEW_ID, TUI
from strata.tui.vec import Vec2
from strata.tui.view import Selector, View
from strata.tui.views import DebugView, Layer, NamedView, ShadowView


class TextView(View):
    def __init__(self, text: str) -> None:
        self.text = text
        self.events: list = []

    def required_size(self, constraint: Vec2) -> Vec2:
        return Vec2(len(self.text), 1)

    def draw(self, printer: Printer) -> None:
        printer.print((0, 0), self.text)

    def on_event(self, event) -> EventResult:
        self.events.append(event)
        return EventResult.consumed()


def render(view: View, size: tuple[int, int], theme: Theme | None = None) -> PuppetBackend:
    backend = PuppetBackend(size=size)
    theme = theme or load_default()
    view.layout(Vec2.of(size))
    view.draw(Printer(size, theme, backend))
    return backend


# ---------------------------------------------------------------------------
# View defaults
# ---------------------------------------------------------------------------


class TestViewDefaults:
    def test_base_view(self) -> None:
        view = View()
        assert view.required_size(Vec2(5, 5)) == Vec2(1, 1)
        assert not view.on_event(Char("a")).is_consumed()
        assert view.needs_relayout()

    def test_wrapper_forwards(self) -> None:
        inner = TextView("abc")
        wrapper = Layer(inner)
        assert wrapper.required_size(Vec2(10, 10)) == Vec2(3, 1)
        assert wrapper.on_event(Char("x")).is_consumed()
        assert inner.events == [Char("x")]


# ---------------------------------------------------------------------------
# Layer / ShadowView
# ---------------------------------------------------------------------------


class TestLayer:
    def test_fills_its_area(self) -> None:
        backend = render(Layer(TextView("x")), (3, 2))
        frame = backend.current_frame
        assert frame.as_strings() == ["x  ", "   "]
        view_colors = ColorStyle.view().resolve(load_default().palette)
        cell = frame[2, 1]
        assert cell is not None and cell.style.colors == view_colors


class TestShadowView:
    def test_required_size_adds_padding_and_shadow(self) -> None:
        assert ShadowView(TextView("ab")).required_size(Vec2(20, 20)) == Vec2(4, 3)
        unpadded = ShadowView(TextView("ab"), top_padding=False, left_padding=False)
        assert unpadded.required_size(Vec2(20, 20)) == Vec2(3, 2)

    def test_draws_view_and_shadow(self) -> None:
        backend = render(ShadowView(TextView("ab")), (4, 3))
        frame = backend.current_frame
        assert frame.as_strings()[1] == " ab "
        shadow_colors = ColorStyle.shadow().resolve(load_default().palette)
        for pos in ((2, 2), (3, 2)):
            cell = frame[pos]
            assert cell is not None and cell.style.colors == shadow_colors

    def test_no_shadow_when_theme_disables_it(self) -> None:
        backend = render(ShadowView(TextView("ab")), (4, 3), Theme(shadow=False))
        assert backend.current_frame[3, 2] is None

    def test_events_are_relativized_by_padding(self) -> None:
        inner = TextView("ab")
        ShadowView(inner).on_event(Mouse(MouseEvent.press(MouseButton.LEFT), Vec2(2, 1)))
        (event,) = inner.events
        assert event.relative_position() == Vec2(1, 0)


# ---------------------------------------------------------------------------
# NamedView
# ---------------------------------------------------------------------------


class TestNamedView:
    def test_call_on_any_hands_over_inner_view(self) -> None:
        inner = TextView("x")
        found: list[View] = []
        NamedView(inner, "label").call_on_any(Selector.name("label"), found.append)
        assert found == [inner]

    def test_other_names_do_not_match(self) -> None:
        found: list[View] = []
        NamedView(TextView("x"), "label").call_on_any(Selector.name("other"), found.append)
        assert found == []

    def test_nested_names(self) -> None:
        inner = TextView("x")
        found: list[View] = []
        NamedView(NamedView(inner, "inner"), "outer").call_on_any(Selector.name("inner"), found.append)
        assert found == [inner]

    def test_focus_view_matches_name(self) -> None:
        assert NamedView(TextView("x"), "label").focus_view(Selector.name("label"))
        assert not NamedView(TextView("x"), "label").focus_view(Selector.name("other"))


# ---------------------------------------------------------------------------
# DebugView
# ---------------------------------------------------------------------------


class TestDebugView:
    def test_empty_buffer(self, log_records: log_buffer.BufferHandler) -> None:
        assert DebugView().required_size(Vec2(80, 20)) == Vec2(1, 1)

    def test_shows_records_with_level(self, log_records: log_buffer.BufferHandler) -> None:
        logging.getLogger("strata.test").error("bad thing")
        view = DebugView()
        size = view.required_size(Vec2(80, 20))
        assert size.y == 1
        backend = render(view, (size.x, size.y))
        frame = backend.current_frame
        assert frame.find_occurrences("bad thing")
        (level,) = frame.find_occurrences("[   ERROR]")
        cell = frame[level.min()]
        assert cell is not None
        assert cell.style.colors == ColorStyle.title_primary().resolve(load_default().palette)

    def test_keeps_newest_records_that_fit(self, log_records: log_buffer.BufferHandler) -> None:
        log = logging.getLogger("strata.test")
        for i in range(5):
            log.info("line %d", i)
        backend = render(DebugView(), (40, 2))
        frame = backend.current_frame
        assert not frame.find_occurrences("line 2")
        assert frame.find_occurrences("line 3")
        assert frame.find_occurrences("line 4")


class TestDebugConsole:
    def test_toggle(self, tui: TUI, log_records: log_buffer.BufferHandler) -> None:
        tui.toggle_debug_console()
        assert isinstance(tui.find_name(DEBUG_VIEW_ID), DebugView)
        tui.toggle_debug_console()
        assert tui.find_name(DEBUG_VIEW_ID) is None

    def test_console_shows_logged_messages(
        self, tui: TUI, backend: PuppetBackend, log_records: log_buffer.BufferHandler
    ) -> None:
        logging.getLogger("strata.test").warning("boom")
        tui.show_debug_console()
        tui.refresh()
        assert backend.last_frame is not None
        assert backend.last_frame.find_occurrences("boom")
