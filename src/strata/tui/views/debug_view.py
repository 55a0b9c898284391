"""View displaying the log buffer of :mod:`strata.tui.logger`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from strata.tui import logger as log_buffer
from strata.tui.theme import ColorStyle
from strata.tui.utils import visible_width
from strata.tui.vec import Vec2
from strata.tui.view import View

if TYPE_CHECKING:
    from strata.tui.printer import Printer

__all__ = ["DebugView"]


def _level_style(level: int) -> ColorStyle:
    if level >= logging.ERROR:
        return ColorStyle.title_primary()
    if level >= logging.WARNING:
        return ColorStyle.title_secondary()
    return ColorStyle.secondary()


class DebugView(View):
    """Shows the most recent log records that fit, newest at the bottom."""

    def _lines(self) -> list[tuple[int, str, str]]:
        return [
            (r.level, f"{r.time:%H:%M:%S} | [{r.level_name:>8}] ", r.message)
            for r in log_buffer.records()
        ]

    def required_size(self, constraint: Vec2) -> Vec2:
        lines = self._lines()
        width = max((visible_width(head + msg) for _, head, msg in lines), default=1)
        return Vec2(max(1, width), max(1, len(lines)))

    def draw(self, printer: Printer) -> None:
        lines = self._lines()
        visible = lines[-printer.size.y :] if printer.size.y else []
        for y, (level, head, message) in enumerate(visible):
            printer.with_color(_level_style(level), lambda p, y=y, head=head: p.print((0, y), head))
            printer.print((visible_width(head), y), message)
