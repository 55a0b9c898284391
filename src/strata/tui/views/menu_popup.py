"""Popup listing the entries of a :class:`~strata.tui.menu.MenuTree`.

Keys: Up/Down move (cycling), PageUp/PageDown move by five, Home/End jump,
Enter activates, Right opens a subtree, Esc dismisses.  A mouse press on an
entry focuses it and releasing the left button on it activates it; a press
anywhere else dismisses the popup.

Activating a leaf pops the popup, runs the ``on_action`` callback and then
the leaf's own callback.  Subtrees open as a new layer anchored to the
focused entry (``Position.parent``), so nested popups cascade.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from strata.tui.direction import Direction
from strata.tui.event import (
    Callback,
    Event,
    EventResult,
    Key,
    KeyEvent,
    Mouse,
    MouseButton,
    MouseEvent,
)
from strata.tui.menu import MenuTree
from strata.tui.position import Position
from strata.tui.vec import Vec2
from strata.tui.view import View, ViewWrapper

if TYPE_CHECKING:
    from strata.tui.printer import Printer
    from strata.tui.tui import TUI

__all__ = ["MenuPopup", "FallbackKeys"]

_PAGE = 5


class FallbackKeys(ViewWrapper):
    """Runs a callback for some events, but only when the inner view ignores them."""

    def __init__(self, view: View, callbacks: Mapping[Event, Callback]) -> None:
        super().__init__(view)
        self.callbacks = dict(callbacks)

    def on_event(self, event: Event) -> EventResult:
        result = self.view.on_event(event)
        if result.is_consumed():
            return result
        callback = self.callbacks.get(event)
        if callback is None:
            return result
        return EventResult.with_cb(callback)


class MenuPopup(View):
    def __init__(
        self,
        menu: MenuTree,
        *,
        on_dismiss: Callback | None = None,
        on_action: Callback | None = None,
    ) -> None:
        self.menu = menu
        self.focus = 0
        self.on_dismiss = on_dismiss
        self.on_action = on_action
        self._last_size = Vec2.zero()

    def set_focus(self, focus: int) -> None:
        self.focus = min(max(0, focus), max(0, len(self.menu) - 1))

    def set_on_dismiss(self, callback: Callback | None) -> None:
        """Callback run when the popup is actively dismissed (Esc, outside press)."""
        self.on_dismiss = callback

    def set_on_action(self, callback: Callback | None) -> None:
        """Callback run when a leaf, here or in a nested subtree, is activated."""
        self.on_action = callback

    # -- View --------------------------------------------------------------

    def required_size(self, constraint: Vec2) -> Vec2:
        return Vec2(self.menu.max_width() + 2, len(self.menu)) + (2, 2)

    def layout(self, size: Vec2) -> None:
        self._last_size = size

    def draw(self, printer: Printer) -> None:
        if printer.size.x < 2 or printer.size.y < 2:
            return
        printer.print_box((0, 0), printer.size, False)
        inner = printer.shrinked_centered((2, 2))

        for i, item in enumerate(self.menu):
            if i >= inner.size.y:
                break
            row = inner.translated((0, i))

            def _entry(p: Printer, item=item) -> None:
                if item.is_delimiter():
                    p.print_hline((0, 0), p.size.x, "─")
                    return
                if p.size.x < (4 if item.is_subtree() else 2):
                    return
                p.print_hline((0, 0), p.size.x, " ")
                p.print((1, 0), item.label)
                if item.is_subtree():
                    p.print((max(0, p.size.x - 3), 0), ">>")

            row.with_selection(i == self.focus, _entry)

    def take_focus(self, source: Direction) -> bool:
        return True

    def on_event(self, event: Event) -> EventResult:
        if self.menu.is_empty():
            if event == KeyEvent(Key.ESC) or _is_press(event):
                return self._dismiss()
            return EventResult.ignored()

        if isinstance(event, KeyEvent) and not (event.shift or event.alt or event.ctrl):
            return self._on_key(event.key)
        if isinstance(event, Mouse):
            return self._on_mouse(event.relativized((1, 1)))
        return EventResult.ignored()

    # -- keyboard ----------------------------------------------------------

    def _on_key(self, key: Key) -> EventResult:
        children = self.menu.children
        if key is Key.UP:
            self._scroll_up(1, cycle=True)
        elif key is Key.PAGE_UP:
            self._scroll_up(_PAGE, cycle=False)
        elif key is Key.DOWN:
            self._scroll_down(1, cycle=True)
        elif key is Key.PAGE_DOWN:
            self._scroll_down(_PAGE, cycle=False)
        elif key is Key.HOME:
            self.focus = 0
        elif key is Key.END:
            self.focus = len(children) - 1
        elif key is Key.RIGHT and children[self.focus].is_subtree():
            return self._open_subtree()
        elif key is Key.ENTER and not children[self.focus].is_delimiter():
            return self._submit()
        elif key is Key.ESC:
            return self._dismiss()
        else:
            return EventResult.ignored()
        return EventResult.consumed()

    def _scroll_up(self, n: int, cycle: bool) -> None:
        children = self.menu.children
        while n > 0:
            if self.focus > 0:
                self.focus -= 1
            elif cycle:
                self.focus = len(children) - 1
            else:
                break
            if not children[self.focus].is_delimiter():
                n -= 1

    def _scroll_down(self, n: int, cycle: bool) -> None:
        children = self.menu.children
        while n > 0:
            if self.focus + 1 < len(children):
                self.focus += 1
            elif cycle:
                self.focus = 0
            else:
                break
            if not children[self.focus].is_delimiter():
                n -= 1

    # -- mouse -------------------------------------------------------------

    def _on_mouse(self, event: Mouse) -> EventResult:
        """Handle a mouse event relative to the content area (inside the box)."""
        inner_size = self._last_size.saturating_sub((2, 2))
        position = event.relative_position()
        inside = (
            position is not None
            and position.strictly_lt(inner_size)
            and position.y < len(self.menu)
        )

        if event.event.is_press:
            if not inside:
                return self._dismiss()
            if not self.menu[position.y].is_delimiter():
                self.focus = position.y
            return EventResult.consumed()

        if (
            event.event == MouseEvent.release(MouseButton.LEFT)
            and inside
            and position.y == self.focus
            and not self.menu[self.focus].is_delimiter()
        ):
            return self._submit()
        return EventResult.ignored()

    # -- callbacks ---------------------------------------------------------

    def _submit(self) -> EventResult:
        item = self.menu[self.focus]
        if item.is_subtree():
            return self._open_subtree()
        leaf_cb = item.callback
        action_cb = self.on_action

        def _activate(tui: TUI) -> None:
            tui.pop_layer()
            if action_cb is not None:
                action_cb(tui)
            if leaf_cb is not None:
                leaf_cb(tui)

        return EventResult.with_cb(_activate)

    def _dismiss(self) -> EventResult:
        dismiss_cb = self.on_dismiss

        def _close(tui: TUI) -> None:
            if dismiss_cb is not None:
                dismiss_cb(tui)
            tui.pop_layer()

        return EventResult.with_cb(_close)

    def _open_subtree(self) -> EventResult:
        tree = self.menu[self.focus].tree
        assert tree is not None
        offset = Vec2(self.menu.max_width() + 4, self.focus)
        action_cb = self.on_action

        def _child_action(tui: TUI) -> None:
            # The activated leaf already closed its own popup; close ours.
            tui.pop_layer()
            if action_cb is not None:
                action_cb(tui)

        def _open(tui: TUI) -> None:
            popup = MenuPopup(tree, on_action=_child_action)
            tui.screen().add_layer_at(
                Position.parent(offset),
                FallbackKeys(popup, {KeyEvent(Key.LEFT): _pop}),
            )

        return EventResult.with_cb(_open)


def _is_press(event: Event) -> bool:
    return isinstance(event, Mouse) and event.event.is_press


def _pop(tui: TUI) -> None:
    tui.pop_layer()
