"""Tests for strata.tui.backend.puppet -- in-memory capture backend."""

from __future__ import annotations

import queue
from typing import Optional

from strata.tui.backend import InputRequest
from strata.tui.backend.puppet import DEFAULT_SIZE, PuppetBackend
from strata.tui.event import EXIT, Char, Event
from strata.tui.theme import BaseColor, Color, ColorPair, Effect
from strata.tui.vec import Vec2


def row(backend: PuppetBackend, y: int = 0) -> str:
    return backend.current_frame.as_strings()[y]


class TestDrawing:
    def test_default_size(self) -> None:
        assert PuppetBackend().screen_size() == DEFAULT_SIZE

    def test_print_round_trip(self) -> None:
        backend = PuppetBackend(size=(6, 2))
        backend.print_at((1, 1), "hey")
        frame = backend.current_frame
        assert [frame[x, 1].letter.unwrap() for x in (1, 2, 3)] == ["h", "e", "y"]  # type: ignore[union-attr]
        assert frame[0, 0] is None
        assert frame[4, 1] is None

    def test_print_stops_at_the_right_edge(self) -> None:
        backend = PuppetBackend(size=(4, 1))
        backend.print_at((2, 0), "abc")
        assert row(backend) == "  ab"

    def test_wide_grapheme_occupies_two_cells(self) -> None:
        backend = PuppetBackend(size=(4, 1))
        backend.print_at((0, 0), "日x")
        frame = backend.current_frame
        assert frame[1, 0] is not None and frame[1, 0].letter.is_continuation()
        assert row(backend) == "日x "
        assert len(frame.find_occurrences("日x")) == 1

    def test_overwriting_a_continuation_blanks_its_owner(self) -> None:
        backend = PuppetBackend(size=(4, 1))
        backend.print_at((0, 0), "日")
        backend.print_at((1, 0), "a")
        assert row(backend) == " a  "

    def test_narrow_text_over_a_wide_grapheme(self) -> None:
        backend = PuppetBackend(size=(6, 1))
        backend.print_at((0, 0), "中")
        backend.print_at((0, 0), "ab")
        frame = backend.current_frame
        assert row(backend) == "ab    "
        assert frame[1, 0] is not None and frame[1, 0].letter.unwrap() == "b"

    def test_text_spanning_two_wide_graphemes(self) -> None:
        backend = PuppetBackend(size=(6, 1))
        backend.print_at((0, 0), "日本")
        backend.print_at((1, 0), "xyz")
        assert row(backend) == " xyz  "

    def test_overwriting_the_start_blanks_orphans(self) -> None:
        backend = PuppetBackend(size=(4, 1))
        backend.print_at((0, 0), "日")
        backend.print_at((0, 0), "a")
        frame = backend.current_frame
        assert frame[1, 0] is not None and frame[1, 0].letter.unwrap() == " "

    def test_cells_record_style(self) -> None:
        backend = PuppetBackend(size=(4, 1))
        pair = ColorPair(Color.dark(BaseColor.RED), Color.dark(BaseColor.BLUE))
        backend.set_color(pair)
        backend.set_effect(Effect.BOLD)
        backend.print_at((0, 0), "a")
        backend.unset_effect(Effect.BOLD)
        backend.print_at((1, 0), "b")
        frame = backend.current_frame
        assert frame[0, 0].style.colors == pair  # type: ignore[union-attr]
        assert frame[0, 0].style.effects == frozenset({Effect.BOLD})  # type: ignore[union-attr]
        assert frame[1, 0].style.effects == frozenset()  # type: ignore[union-attr]

    def test_set_color_returns_previous(self) -> None:
        backend = PuppetBackend()
        first = backend.current_style().colors
        pair = ColorPair(Color.dark(BaseColor.RED), Color.dark(BaseColor.BLUE))
        assert backend.set_color(pair) == first
        assert backend.set_color(first) == pair

    def test_clear(self) -> None:
        backend = PuppetBackend(size=(3, 2))
        backend.print_at((0, 0), "abc")
        backend.clear(Color.dark(BaseColor.BLUE))
        cell = backend.current_frame[0, 0]
        assert cell is not None
        assert cell.letter.unwrap() == " "
        assert cell.style.colors.back == Color.dark(BaseColor.BLUE)


class TestFrames:
    def test_refresh_snapshots_to_last_frame_and_stream(self) -> None:
        backend = PuppetBackend(size=(5, 1))
        assert backend.last_frame is None
        backend.print_at((0, 0), "one")
        backend.refresh()
        snapshot = backend.stream().get_nowait()
        assert snapshot is backend.last_frame
        backend.print_at((0, 0), "two")
        assert snapshot.as_strings() == ["one  "]

    def test_each_refresh_produces_a_frame(self) -> None:
        backend = PuppetBackend(size=(2, 1))
        backend.refresh()
        backend.refresh()
        assert backend.stream().qsize() == 2


class TestInput:
    def test_poll_event(self) -> None:
        backend = PuppetBackend()
        assert backend.poll_event() is None
        backend.input().put(Char("a"))
        assert backend.poll_event() == Char("a")

    def test_prepare_input_pushes_exit(self) -> None:
        backend = PuppetBackend()
        backend.prepare_input(InputRequest.PEEK)
        assert backend.poll_event() == EXIT

    def test_input_thread_forwards_until_closed(self) -> None:
        backend = PuppetBackend()
        sink: queue.Queue[Optional[Event]] = queue.Queue()
        requests: queue.Queue[Optional[InputRequest]] = queue.Queue()
        thread = backend.start_input_thread(sink, requests)

        backend.input().put(Char("a"))
        requests.put(InputRequest.BLOCK)
        assert sink.get(timeout=2) == Char("a")

        backend.finish()
        requests.put(InputRequest.BLOCK)
        thread.join(timeout=2)
        assert not thread.is_alive()

    def test_input_thread_exits_when_requests_close(self) -> None:
        backend = PuppetBackend()
        sink: queue.Queue[Optional[Event]] = queue.Queue()
        requests: queue.Queue[Optional[InputRequest]] = queue.Queue()
        thread = backend.start_input_thread(sink, requests)
        requests.put(None)
        thread.join(timeout=2)
        assert not thread.is_alive()
        assert sink.empty()

    def test_screen_size_is_a_vec(self) -> None:
        assert PuppetBackend(size=(3, 4)).screen_size() == Vec2(3, 4)
