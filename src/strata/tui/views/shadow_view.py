"""Wrapper adding a drop shadow, and optional padding, around a view."""

from __future__ import annotations

from typing import TYPE_CHECKING

from strata.tui.event import Event, EventResult
from strata.tui.theme import ColorStyle
from strata.tui.vec import Vec2
from strata.tui.view import View, ViewWrapper

if TYPE_CHECKING:
    from strata.tui.printer import Printer

__all__ = ["ShadowView"]


class ShadowView(ViewWrapper):
    """Reserves one cell right and below the inner view for its shadow.

    With ``top_padding``/``left_padding`` an extra blank row/column is kept
    above/left of the view as well, so centered dialogs look balanced.
    """

    def __init__(self, view: View, *, top_padding: bool = True, left_padding: bool = True) -> None:
        super().__init__(view)
        self.top_padding = top_padding
        self.left_padding = left_padding

    def _top_left(self) -> Vec2:
        return Vec2(int(self.left_padding), int(self.top_padding))

    def _padding(self) -> Vec2:
        return self._top_left() + (1, 1)

    def required_size(self, constraint: Vec2) -> Vec2:
        padding = self._padding()
        return self.view.required_size(constraint.saturating_sub(padding)) + padding

    def layout(self, size: Vec2) -> None:
        self.view.layout(size.saturating_sub(self._padding()))

    def on_event(self, event: Event) -> EventResult:
        return self.view.on_event(event.relativized(self._top_left()))

    def draw(self, printer: Printer) -> None:
        top_left = self._top_left()
        if printer.size.x <= top_left.x or printer.size.y <= top_left.y:
            return
        printer = printer.translated(top_left)

        if printer.theme.shadow:
            w, h = printer.size.x, printer.size.y
            if w == 0 or h == 0:
                return

            def _shadow(p: Printer) -> None:
                p.print_hline((1, h - 1), w - 1, " ")
                p.print_vline((w - 1, 1), h - 1, " ")

            printer.with_color(ColorStyle.shadow(), _shadow)

        self.view.draw(printer.shrinked((1, 1)))
