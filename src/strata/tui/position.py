"""Placement rules for floating layers.

A :class:`Position` holds one :class:`Offset` per axis.  Each offset turns
``(size, available, parent)`` into a coordinate:

* ``center``   -- centered in the available space;
* ``absolute`` -- a fixed coordinate, clamped so the layer stays on screen;
* ``parent``   -- relative to the previous layer's offset, clamped likewise.
"""

from __future__ import annotations

from dataclasses import dataclass

from strata.tui.vec import Vec2, VecLike

__all__ = ["Offset", "Position"]


@dataclass(frozen=True)
class Offset:
    """Placement rule for a single axis."""

    kind: str  # "center" | "absolute" | "parent"
    value: int = 0

    @classmethod
    def center(cls) -> Offset:
        return cls("center")

    @classmethod
    def absolute(cls, value: int) -> Offset:
        return cls("absolute", value)

    @classmethod
    def parent(cls, value: int) -> Offset:
        return cls("parent", value)

    @property
    def is_center(self) -> bool:
        return self.kind == "center"

    def compute_offset(self, size: int, available: int, parent: int) -> int:
        room = max(0, available - size)
        if self.kind == "center":
            return room // 2
        if self.kind == "absolute":
            return min(max(0, self.value), room)
        # parent
        return min(max(0, parent + self.value), room)


@dataclass(frozen=True)
class Position:
    """Where a floating layer goes on screen."""

    x: Offset
    y: Offset

    @classmethod
    def center(cls) -> Position:
        return cls(Offset.center(), Offset.center())

    @classmethod
    def absolute(cls, offset: VecLike) -> Position:
        o = Vec2.of(offset)
        return cls(Offset.absolute(o.x), Offset.absolute(o.y))

    @classmethod
    def parent(cls, offset: VecLike) -> Position:
        o = Vec2.of(offset)
        return cls(Offset.parent(o.x), Offset.parent(o.y))

    def compute_offset(
        self, size: VecLike, available: VecLike, parent: VecLike
    ) -> Vec2:
        size, available, parent = Vec2.of(size), Vec2.of(available), Vec2.of(parent)
        return Vec2(
            self.x.compute_offset(size.x, available.x, parent.x),
            self.y.compute_offset(size.y, available.y, parent.y),
        )
