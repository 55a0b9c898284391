"""Tests for strata.tui.printer, rendered through the puppet backend."""

from __future__ import annotations

from strata.tui.backend.puppet import PuppetBackend
from strata.tui.printer import Printer
from strata.tui.theme import ColorStyle, PaletteColor, load_default


def make_printer(size: tuple[int, int] = (10, 3)) -> tuple[Printer, PuppetBackend]:
    backend = PuppetBackend(size=size)
    return Printer(size, load_default(), backend), backend


def rows(backend: PuppetBackend) -> list[str]:
    return backend.current_frame.as_strings()


class TestPrint:
    def test_print_clips_to_width(self) -> None:
        printer, backend = make_printer()
        printer.print((0, 0), "hello world")
        assert rows(backend)[0] == "hello worl"

    def test_print_outside_is_ignored(self) -> None:
        printer, backend = make_printer()
        printer.print((0, 5), "nope")
        printer.print((10, 0), "nope")
        assert rows(backend) == [" " * 10] * 3

    def test_wide_grapheme_that_does_not_fit_is_dropped(self) -> None:
        printer, backend = make_printer((3, 1))
        printer.print((0, 0), "日本")
        frame = backend.current_frame
        assert frame[0, 0] is not None and frame[0, 0].letter.unwrap() == "日"
        assert frame[1, 0] is not None and frame[1, 0].letter.is_continuation()
        assert frame[2, 0] is None

    def test_hline_and_vline(self) -> None:
        printer, backend = make_printer((5, 3))
        printer.print_hline((1, 0), 10, "-")
        printer.print_vline((0, 0), 10, "|")
        assert rows(backend) == ["|----", "|    ", "|    "]

    def test_box(self) -> None:
        printer, backend = make_printer((4, 3))
        printer.print_box((0, 0), (4, 3), False)
        assert rows(backend) == ["┌──┐", "│  │", "└──┘"]


class TestDerivedPrinters:
    def test_translated(self) -> None:
        printer, backend = make_printer()
        printer.translated((2, 1)).print((0, 0), "ab")
        assert rows(backend)[1] == "  ab      "

    def test_cropped(self) -> None:
        printer, backend = make_printer()
        printer.cropped((3, 1)).print((0, 0), "abcdef")
        printer.cropped((3, 1)).print((0, 1), "abcdef")
        assert rows(backend)[0] == "abc       "
        assert rows(backend)[1] == " " * 10

    def test_shrinked_centered(self) -> None:
        printer, _backend = make_printer((10, 4))
        inner = printer.shrinked_centered((2, 2))
        assert inner.offset.pair() == (1, 1)
        assert inner.size.pair() == (8, 2)

    def test_sub_printer_focus_requires_both(self) -> None:
        printer, _backend = make_printer()
        assert printer.sub_printer((0, 0), (2, 2), True).focused
        assert not printer.refocused(False).sub_printer((0, 0), (2, 2), True).focused
        assert not printer.sub_printer((0, 0), (2, 2), False).focused


class TestStyling:
    def test_with_color_restores_previous_colors(self) -> None:
        printer, backend = make_printer()
        before = backend.current_style().colors
        seen = []
        printer.with_color(ColorStyle.highlight(), lambda p: seen.append(backend.current_style().colors))
        assert seen == [ColorStyle.highlight().resolve(printer.theme.palette)]
        assert backend.current_style().colors == before

    def test_with_selection_dims_when_unfocused(self) -> None:
        printer, backend = make_printer()
        palette = printer.theme.palette
        backs = []
        printer.with_selection(True, lambda p: backs.append(backend.current_style().colors.back))
        printer.refocused(False).with_selection(
            True, lambda p: backs.append(backend.current_style().colors.back)
        )
        assert backs == [palette[PaletteColor.HIGHLIGHT], palette[PaletteColor.HIGHLIGHT_INACTIVE]]

    def test_printed_cells_carry_the_current_style(self) -> None:
        printer, backend = make_printer()
        printer.with_color(ColorStyle.title_primary(), lambda p: p.print((0, 0), "x"))
        cell = backend.current_frame[0, 0]
        assert cell is not None
        assert cell.style.colors == ColorStyle.title_primary().resolve(printer.theme.palette)
