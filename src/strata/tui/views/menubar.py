"""Menu bar shown on the first row of the screen.

The bar has three states:

* ``INACTIVE`` -- not focused; hidden when ``autohide`` is on;
* ``SELECTED`` -- focused, receives every event (Left/Right pick a menu,
  Enter/Down open it, Esc leaves);
* ``SUBMENU``  -- one of its menus is open as a popup on the active screen.

The controller owns the bar and routes events to it while it is selected.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from strata.tui.event import Callback, Event, EventResult, Key, KeyEvent, Mouse
from strata.tui.menu import MenuTree
from strata.tui.position import Position
from strata.tui.theme import ColorStyle
from strata.tui.utils import visible_width
from strata.tui.vec import Vec2
from strata.tui.view import View
from strata.tui.views.menu_popup import FallbackKeys, MenuPopup

if TYPE_CHECKING:
    from strata.tui.printer import Printer
    from strata.tui.tui import TUI

logger = logging.getLogger(__name__)

__all__ = ["Menubar", "MenubarState"]


class MenubarState(Enum):
    INACTIVE = "inactive"
    SELECTED = "selected"
    SUBMENU = "submenu"


class Menubar(View):
    """Horizontal list of titled menus."""

    def __init__(self) -> None:
        self.autohide = True
        self.state = MenubarState.INACTIVE
        self.focus = 0
        self._menus: list[tuple[str, MenuTree]] = []

    # -- state -------------------------------------------------------------

    def visible(self) -> bool:
        """Whether the bar takes a row on screen."""
        return not self.autohide or self.state is not MenubarState.INACTIVE

    def receive_events(self) -> bool:
        """Whether the bar, rather than the active screen, gets input."""
        return self.state is MenubarState.SELECTED

    def has_submenu(self) -> bool:
        return self.state is MenubarState.SUBMENU

    def select(self) -> None:
        self.state = MenubarState.SELECTED

    def hide(self) -> None:
        self.state = MenubarState.INACTIVE

    # -- menus -------------------------------------------------------------

    def add_subtree(self, title: str, menu: MenuTree) -> Menubar:
        self._menus.append((title, menu))
        return self

    def insert_subtree(self, index: int, title: str, menu: MenuTree) -> Menubar:
        self._menus.insert(index, (title, menu))
        return self

    def find_position(self, title: str) -> int | None:
        for i, (name, _menu) in enumerate(self._menus):
            if name == title:
                return i
        return None

    def find_subtree(self, title: str) -> MenuTree | None:
        index = self.find_position(title)
        return None if index is None else self._menus[index][1]

    def get_subtree(self, index: int) -> MenuTree | None:
        if not 0 <= index < len(self._menus):
            return None
        return self._menus[index][1]

    def remove(self, index: int) -> None:
        del self._menus[index]
        self.focus = min(self.focus, max(0, len(self._menus) - 1))

    def clear(self) -> None:
        self._menus.clear()
        self.focus = 0

    def __len__(self) -> int:
        return len(self._menus)

    def is_empty(self) -> bool:
        return not self._menus

    def _title_x(self, index: int) -> int:
        """Column where the title of menu *index* starts (including its padding)."""
        x = 1
        for title, _menu in self._menus[:index]:
            x += visible_width(title) + 2
        return x

    def _child_at(self, x: int) -> int | None:
        for i in range(len(self._menus)):
            start = self._title_x(i)
            if start <= x < start + visible_width(self._menus[i][0]) + 2:
                return i
        return None

    # -- View --------------------------------------------------------------

    def required_size(self, constraint: Vec2) -> Vec2:
        return Vec2(self._title_x(len(self._menus)), 1)

    def draw(self, printer: Printer) -> None:
        printer.with_color(
            ColorStyle.primary(), lambda p: p.print_hline((0, 0), p.size.x, " ")
        )
        for i, (title, _menu) in enumerate(self._menus):
            selected = self.state is not MenubarState.INACTIVE and i == self.focus
            x = self._title_x(i)
            printer.with_selection(selected, lambda p, x=x, title=title: p.print((x, 0), f" {title} "))

    def on_event(self, event: Event) -> EventResult:
        if isinstance(event, KeyEvent) and not (event.shift or event.alt or event.ctrl):
            if event.key is Key.ESC:
                self.hide()
                return EventResult.with_cb(_clear)
            if event.key is Key.LEFT:
                if self._menus:
                    self.focus = (self.focus - 1) % len(self._menus)
                return EventResult.consumed()
            if event.key is Key.RIGHT:
                if self._menus:
                    self.focus = (self.focus + 1) % len(self._menus)
                return EventResult.consumed()
            if event.key in (Key.DOWN, Key.ENTER):
                return self._open_child()
            return EventResult.ignored()

        if isinstance(event, Mouse) and event.event.is_press:
            position = event.relative_position()
            if position is not None and position.y == 0:
                child = self._child_at(position.x)
                if child is not None:
                    self.focus = child
                    return self._open_child()
            self.hide()
            return EventResult.with_cb(_clear)

        return EventResult.ignored()

    # -- popups ------------------------------------------------------------

    def _open_child(self) -> EventResult:
        menu = self.get_subtree(self.focus)
        if menu is None or menu.is_empty():
            return EventResult.consumed()
        self.state = MenubarState.SUBMENU
        # Screens start below a pinned bar; a hidden one overlaps them.
        offset = Vec2(self._title_x(self.focus), 1 if self.autohide else 0)

        def _show(tui: TUI) -> None:
            popup = MenuPopup(menu, on_dismiss=_select_menubar, on_action=_deactivate)
            tui.screen().add_layer_at(
                Position.absolute(offset),
                FallbackKeys(
                    popup,
                    {
                        KeyEvent(Key.LEFT): _switch(Key.LEFT),
                        KeyEvent(Key.RIGHT): _switch(Key.RIGHT),
                    },
                ),
            )

        logger.debug("Opening menu %d at %r", self.focus, offset)
        return EventResult.with_cb(_show)


# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------


def _clear(tui: TUI) -> None:
    tui.clear()


def _select_menubar(tui: TUI) -> None:
    tui.select_menubar()


def _deactivate(tui: TUI) -> None:
    tui.menubar().hide()
    tui.clear()


def _switch(key: Key) -> Callback:
    """Close the open popup and open the neighbouring menu."""

    def _callback(tui: TUI) -> None:
        tui.pop_layer()
        tui.select_menubar()
        tui.menubar().on_event(KeyEvent(key)).process(tui)
        tui.menubar().on_event(KeyEvent(Key.DOWN)).process(tui)

    return _callback
