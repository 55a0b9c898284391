"""Clipped, offset drawing surface handed to :meth:`View.draw`.

A :class:`Printer` describes the rectangle a view may draw in: its
absolute ``offset`` on screen, its logical ``size`` and the part of it that
is actually visible (``output_size``).  Derived printers (``translated``,
``cropped``, ``sub_printer`` ...) never widen that rectangle, so a view
cannot draw outside the area the layout phase granted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from strata.tui.theme import BorderStyle, ColorStyle, Effect, Theme
from strata.tui.utils import simple_prefix, visible_width
from strata.tui.vec import Vec2, VecLike

if TYPE_CHECKING:
    from strata.tui.backend import Backend

__all__ = ["Printer"]


class Printer:
    """Drawing surface for one view."""

    def __init__(
        self,
        size: VecLike,
        theme: Theme,
        backend: Backend,
        *,
        offset: VecLike = (0, 0),
        output_size: VecLike | None = None,
        focused: bool = True,
    ) -> None:
        self.size = Vec2.of(size)
        self.theme = theme
        self.backend = backend
        self.offset = Vec2.of(offset)
        self.output_size = self.size if output_size is None else Vec2.of(output_size)
        self.focused = focused

    def _derive(self, **changes: object) -> Printer:
        params: dict[str, object] = {
            "offset": self.offset,
            "output_size": self.output_size,
            "focused": self.focused,
        }
        size = changes.pop("size", self.size)
        params.update(changes)
        return Printer(size, self.theme, self.backend, **params)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Printing primitives
    # ------------------------------------------------------------------

    def print(self, start: VecLike, text: str) -> None:
        """Print *text* at *start*, clipped to the visible area."""
        start = Vec2.of(start)
        if start.x >= self.output_size.x or start.y >= self.output_size.y:
            return
        fitted = simple_prefix(text, self.output_size.x - start.x)
        if fitted.length == 0:
            return
        self.backend.print_at(self.offset + start, text[: fitted.length])

    def print_hline(self, start: VecLike, length: int, s: str) -> None:
        """Repeat *s* horizontally over *length* cells from *start*."""
        start = Vec2.of(start)
        if start.x >= self.output_size.x or start.y >= self.output_size.y:
            return
        length = min(length, self.output_size.x - start.x)
        width = max(1, visible_width(s))
        self.print(start, s * (length // width))

    def print_vline(self, start: VecLike, height: int, s: str) -> None:
        """Repeat *s* vertically over *height* rows from *start*."""
        start = Vec2.of(start)
        end = min(start.y + height, self.output_size.y)
        for y in range(start.y, end):
            self.print((start.x, y), s)

    def print_box(self, start: VecLike, size: VecLike, invert: bool) -> None:
        """Draw a box outline of *size* with its top-left corner at *start*."""
        start, size = Vec2.of(start), Vec2.of(size)
        if size.x < 2 or size.y < 2:
            return
        end = start + size - (1, 1)

        def _high(printer: Printer) -> None:
            printer.print(start, "┌")
            printer.print((start.x, end.y), "└")
            printer.print_hline(start + (1, 0), size.x - 2, "─")
            printer.print_vline(start + (0, 1), size.y - 2, "│")

        def _low(printer: Printer) -> None:
            printer.print((end.x, start.y), "┐")
            printer.print(end, "┘")
            printer.print_hline((start.x + 1, end.y), size.x - 2, "─")
            printer.print_vline((end.x, start.y + 1), size.y - 2, "│")

        self.with_high_border(invert, _high)
        self.with_low_border(invert, _low)

    # ------------------------------------------------------------------
    # Styling
    # ------------------------------------------------------------------

    def with_color(self, style: ColorStyle, fn: Callable[[Printer], None]) -> None:
        """Run *fn* with *style* applied, restoring the previous colors after."""
        previous = self.backend.set_color(style.resolve(self.theme.palette))
        try:
            fn(self)
        finally:
            self.backend.set_color(previous)

    def with_effect(self, effect: Effect, fn: Callable[[Printer], None]) -> None:
        self.backend.set_effect(effect)
        try:
            fn(self)
        finally:
            self.backend.unset_effect(effect)

    def with_selection(self, selected: bool, fn: Callable[[Printer], None]) -> None:
        """Run *fn* highlighted when *selected*; dimmer if this printer is unfocused."""
        if not selected:
            fn(self)
            return
        style = ColorStyle.highlight() if self.focused else ColorStyle.highlight_inactive()
        self.with_color(style, fn)

    def with_high_border(self, invert: bool, fn: Callable[[Printer], None]) -> None:
        borders = self.theme.borders
        if borders is BorderStyle.NONE:
            return
        if borders is BorderStyle.OUTSET and not invert:
            self.with_color(ColorStyle.tertiary(), fn)
        else:
            self.with_color(ColorStyle.primary(), fn)

    def with_low_border(self, invert: bool, fn: Callable[[Printer], None]) -> None:
        borders = self.theme.borders
        if borders is BorderStyle.NONE:
            return
        if borders is BorderStyle.OUTSET and invert:
            self.with_color(ColorStyle.tertiary(), fn)
        else:
            self.with_color(ColorStyle.primary(), fn)

    # ------------------------------------------------------------------
    # Derived printers
    # ------------------------------------------------------------------

    def translated(self, offset: VecLike) -> Printer:
        """Printer whose origin is moved by *offset*."""
        return self._derive(
            offset=self.offset + offset,
            output_size=self.output_size.saturating_sub(offset),
            size=self.size.saturating_sub(offset),
        )

    def refocused(self, focused: bool) -> Printer:
        return self._derive(focused=focused)

    def cropped(self, size: VecLike) -> Printer:
        """Printer restricted to at most *size*."""
        return self._derive(
            size=Vec2.min(self.size, size),
            output_size=Vec2.min(self.output_size, size),
        )

    def shrinked(self, borders: VecLike) -> Printer:
        """Printer with *borders* removed from the bottom-right."""
        return self.cropped(self.size.saturating_sub(borders))

    def shrinked_centered(self, borders: VecLike) -> Printer:
        """Printer with *borders* split evenly between both sides."""
        borders = Vec2.of(borders)
        half = borders // 2
        return self.shrinked(borders - half).translated(half)

    def sub_printer(self, offset: VecLike, size: VecLike, focused: bool) -> Printer:
        """Printer for a child at *offset* of *size*; focused only if both are."""
        return self.translated(offset).cropped(size).refocused(self.focused and focused)
