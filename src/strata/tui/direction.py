"""Directions used when moving focus between views."""

from __future__ import annotations

from enum import Enum


class Direction(Enum):
    """Where focus comes from when a view is asked to take it.

    ``NONE`` is used when focus is granted programmatically, for instance
    the first time a layer is laid out.
    """

    NONE = "none"
    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.NONE: Direction.NONE,
    Direction.FRONT: Direction.BACK,
    Direction.BACK: Direction.FRONT,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
}
