"""Opaque wrapper painting its whole area before drawing the inner view."""

from __future__ import annotations

from typing import TYPE_CHECKING

from strata.tui.theme import ColorStyle
from strata.tui.view import ViewWrapper

if TYPE_CHECKING:
    from strata.tui.printer import Printer

__all__ = ["Layer"]


class Layer(ViewWrapper):
    """Fills its area with the ``view`` palette color, hiding what is below."""

    def draw(self, printer: Printer) -> None:
        def _fill(p: Printer) -> None:
            for y in range(p.size.y):
                p.print_hline((0, y), p.size.x, " ")

        printer.with_color(ColorStyle.view(), _fill)
        self.view.draw(printer)
