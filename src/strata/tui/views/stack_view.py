"""Layered compositor: a stack of views where only the front one is active.

Layers are kept back to front.  Each is either *floating* (placed by a
:class:`~strata.tui.position.Position`, wrapped with a shadow) or
*fullscreen* (placed at the origin, no shadow).  Placement is chained: a
floating layer using ``Offset.parent`` is positioned relative to the layer
right below it, which is how a submenu anchors to the popup that opened it.

The background is repainted only when something may have exposed it
(creation, resize, reposition, removal of a layer).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator

from strata.tui.direction import Direction
from strata.tui.event import WINDOW_RESIZE, Event, EventResult, Mouse
from strata.tui.position import Position
from strata.tui.theme import ColorStyle
from strata.tui.vec import Vec2
from strata.tui.view import Selector, View
from strata.tui.views.layer import Layer
from strata.tui.views.shadow_view import ShadowView

if TYPE_CHECKING:
    from strata.tui.printer import Printer
    from strata.tui.tui import TUI

logger = logging.getLogger(__name__)

__all__ = ["LayerPosition", "Placement", "StackView"]


# ---------------------------------------------------------------------------
# Placement and layer positions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Placement:
    """Where a layer goes: ``floating(position)`` or ``fullscreen()``."""

    position: Position | None = None

    @classmethod
    def floating(cls, position: Position) -> Placement:
        return cls(position)

    @classmethod
    def fullscreen(cls) -> Placement:
        return cls(None)

    @property
    def is_fullscreen(self) -> bool:
        return self.position is None

    def compute_offset(self, size: Vec2, available: Vec2, parent: Vec2) -> Vec2:
        if self.position is None:
            return Vec2.zero()
        return self.position.compute_offset(size, available, parent)


@dataclass(frozen=True)
class LayerPosition:
    """Index of a layer, counted from the back or from the front of the stack."""

    index: int
    from_front_: bool = False

    @classmethod
    def from_back(cls, index: int) -> LayerPosition:
        return cls(index, False)

    @classmethod
    def from_front(cls, index: int) -> LayerPosition:
        return cls(index, True)

    def resolve(self, length: int) -> int:
        """Index into a back-to-front list of *length* layers (may be out of range)."""
        return length - self.index - 1 if self.from_front_ else self.index

    def __repr__(self) -> str:
        kind = "from_front" if self.from_front_ else "from_back"
        return f"LayerPosition.{kind}({self.index})"


class _Child:
    """A layer: the wrapped view plus its placement bookkeeping."""

    __slots__ = ("view", "inner", "size", "id", "placement", "virgin", "transient")

    def __init__(
        self,
        view: View,
        inner: View,
        placement: Placement,
        id: str | None,
        transient: bool,
    ) -> None:
        self.view = view
        self.inner = inner
        self.size = Vec2.zero()
        self.id = id
        self.placement = placement
        # take_focus is only trusted after the first layout
        self.virgin = True
        self.transient = transient


# ---------------------------------------------------------------------------
# StackView
# ---------------------------------------------------------------------------


class StackView(View):
    """A stack of layers; only the front layer receives input and focus."""

    def __init__(self) -> None:
        self._layers: list[_Child] = []
        self._last_size = Vec2.zero()
        self.bg_dirty = True

    # -- adding layers -----------------------------------------------------

    def add_fullscreen_layer(self, view: View, id: str | None = None) -> None:
        """Push *view* on top, covering the whole stack, without shadow."""
        self._push(_Child(Layer(view), view, Placement.fullscreen(), id, False))

    def add_layer(self, view: View, id: str | None = None, *, transient: bool = False) -> None:
        """Push *view* on top, centered."""
        self.add_layer_at(Position.center(), view, id, transient=transient)

    def add_layer_at(
        self,
        position: Position,
        view: View,
        id: str | None = None,
        *,
        transient: bool = False,
    ) -> None:
        """Push *view* on top at *position*.

        A *transient* layer is popped when a mouse press it ignores lands
        outside of it.
        """
        wrapped = ShadowView(
            Layer(view),
            top_padding=position.y.is_center,
            left_padding=position.x.is_center,
        )
        self._push(_Child(wrapped, view, Placement.floating(position), id, transient))

    def _push(self, child: _Child) -> None:
        if child.id is not None and self.child_pos_with_view_id(child.id) is not None:
            raise ValueError(f"duplicate layer id {child.id!r}")
        self._layers.append(child)
        logger.debug("Pushed layer %r (depth %d)", child.id, len(self._layers))

    # -- removing layers ---------------------------------------------------

    def pop_layer(self) -> View | None:
        """Remove the front layer and return its view, or ``None`` if empty."""
        self.bg_dirty = True
        if not self._layers:
            return None
        return self._layers.pop().inner

    def remove_layer(self, position: LayerPosition) -> View:
        """Remove the layer at *position* and return its view."""
        index = self._index(position)
        self.bg_dirty = True
        return self._layers.pop(index).inner

    # -- queries -----------------------------------------------------------

    def __len__(self) -> int:
        return len(self._layers)

    def is_empty(self) -> bool:
        return not self._layers

    def get(self, position: LayerPosition) -> View | None:
        """The view at *position*, or ``None`` if there is no such layer."""
        index = position.resolve(len(self._layers))
        if not 0 <= index < len(self._layers):
            return None
        return self._layers[index].inner

    def child_pos_with_view_id(self, id: str) -> int | None:
        """Back-to-front index of the layer registered under *id*."""
        for i, child in enumerate(self._layers):
            if child.id == id:
                return i
        return None

    def find_layer_from_name(self, name: str) -> LayerPosition | None:
        """Position of the layer containing the view named *name*."""
        selector = Selector.name(name)
        for i, child in enumerate(self._layers):
            found: list[bool] = []
            child.view.call_on_any(selector, lambda _view: found.append(True))
            if found:
                return LayerPosition.from_back(i)
        return None

    def layer_sizes(self) -> list[Vec2]:
        return [child.size for child in self._layers]

    def offset(self) -> Vec2:
        """Offset of the front layer."""
        previous = Vec2.zero()
        for _child, previous in self._positions(self._last_size):
            pass
        return previous

    def _positions(self, available: Vec2) -> Iterator[tuple[_Child, Vec2]]:
        previous = Vec2.zero()
        for child in self._layers:
            previous = child.placement.compute_offset(child.size, available, previous)
            yield child, previous

    def _index(self, position: LayerPosition) -> int:
        index = position.resolve(len(self._layers))
        if not 0 <= index < len(self._layers):
            raise IndexError(f"no layer at {position!r} (depth {len(self._layers)})")
        return index

    # -- z-order and placement ---------------------------------------------

    def move_layer(self, source: LayerPosition, target: LayerPosition) -> None:
        """Change the elevation of a layer; its screen position is unaffected."""
        from_i = self._index(source)
        to_i = self._index(target)
        self._layers.insert(to_i, self._layers.pop(from_i))

    def move_to_front(self, layer: LayerPosition) -> None:
        self.move_layer(layer, LayerPosition.from_front(0))

    def move_to_back(self, layer: LayerPosition) -> None:
        self.move_layer(layer, LayerPosition.from_back(0))

    def move_id_to_front(self, id: str) -> None:
        """Bring the layer registered under *id* to the front, if there is one."""
        index = self.child_pos_with_view_id(id)
        if index is not None:
            self.move_layer(LayerPosition.from_back(index), LayerPosition.from_front(0))

    def move_id_to_back(self, id: str) -> None:
        index = self.child_pos_with_view_id(id)
        if index is not None:
            self.move_layer(LayerPosition.from_back(index), LayerPosition.from_back(0))

    def reposition_layer(self, layer: LayerPosition, position: Position) -> None:
        """Move a floating layer on screen.  No effect on fullscreen or missing layers."""
        index = layer.resolve(len(self._layers))
        if not 0 <= index < len(self._layers):
            return
        child = self._layers[index]
        if child.placement.is_fullscreen:
            return
        child.placement = Placement.floating(position)
        self.bg_dirty = True

    # -- drawing -----------------------------------------------------------

    def draw_bg(self, printer: Printer) -> None:
        """Repaint the background if something may have exposed it."""
        if not self.bg_dirty:
            return

        def _fill(p: Printer) -> None:
            for y in range(p.size.y):
                p.print_hline((0, y), p.size.x, " ")

        printer.with_color(ColorStyle.background(), _fill)
        self.bg_dirty = False

    def draw_fg(self, printer: Printer) -> None:
        """Draw every layer, back to front; only the front one is focused."""
        last = len(self._layers)

        def _layers(p: Printer) -> None:
            for i, (child, offset) in enumerate(self._positions(p.size)):
                child.view.draw(p.sub_printer(offset, child.size, i + 1 == last))

        printer.with_color(ColorStyle.primary(), _layers)

    def draw(self, printer: Printer) -> None:
        self.draw_bg(printer)
        self.draw_fg(printer)

    # -- View --------------------------------------------------------------

    def on_event(self, event: Event) -> EventResult:
        if event == WINDOW_RESIZE:
            self.bg_dirty = True
        if not self._layers:
            return EventResult.ignored()

        front, offset = None, Vec2.zero()
        for front, offset in self._positions(self._last_size):
            pass
        assert front is not None
        result = front.view.on_event(event.relativized(offset))

        if (
            not result.is_consumed()
            and front.transient
            and isinstance(event, Mouse)
            and event.event.is_press
        ):
            position = event.relative_position()
            if position is None or not position.fits_in_rect(offset, front.size):
                return EventResult.with_cb(_pop_layer)
        return result

    def layout(self, size: Vec2) -> None:
        self._last_size = size
        for child in self._layers:
            child.size = Vec2.min(size, child.view.required_size(size))
            child.view.layout(child.size)
            if child.virgin:
                child.view.take_focus(Direction.NONE)
                child.virgin = False

    def required_size(self, constraint: Vec2) -> Vec2:
        size = Vec2(1, 1)
        for child in self._layers:
            size = Vec2.max(size, child.view.required_size(constraint))
        return size

    def take_focus(self, source: Direction) -> bool:
        if not self._layers:
            return False
        return self._layers[-1].view.take_focus(source)

    def call_on_any(self, selector: Selector, callback: Callable[[View], Any]) -> None:
        super().call_on_any(selector, callback)
        for child in self._layers:
            child.view.call_on_any(selector, callback)

    def focus_view(self, selector: Selector) -> bool:
        return any(child.view.focus_view(selector) for child in self._layers)

    def is_virgin(self, position: LayerPosition) -> bool | None:
        """Whether the layer at *position* has not been laid out yet."""
        index = position.resolve(len(self._layers))
        if not 0 <= index < len(self._layers):
            return None
        return self._layers[index].virgin

    def __repr__(self) -> str:
        return f"StackView(layers={len(self._layers)})"


def _pop_layer(tui: TUI) -> None:
    tui.pop_layer()
