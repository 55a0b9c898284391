"""Input events and the result of handing one to a view.

Events are small frozen dataclasses, so they can be compared and used as
dictionary keys (global callbacks are keyed by event).  Mouse events carry
both an absolute ``position`` and the ``offset`` of the view receiving
them; containers call :meth:`Event.relativized` as they route an event down
the tree.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Callable, Union

from strata.tui.vec import Vec2, VecLike

if TYPE_CHECKING:
    from strata.tui.tui import TUI

__all__ = [
    "Callback",
    "Event",
    "Char",
    "CtrlChar",
    "AltChar",
    "Key",
    "KeyEvent",
    "MouseButton",
    "MouseEvent",
    "Mouse",
    "Signal",
    "Unknown",
    "WINDOW_RESIZE",
    "REFRESH",
    "EXIT",
    "EventResult",
    "to_event",
]

# A deferred action run against the root controller.
Callback = Callable[["TUI"], None]


# ---------------------------------------------------------------------------
# Keys and mouse
# ---------------------------------------------------------------------------


class Key(Enum):
    """Non-character keys."""

    ENTER = "enter"
    TAB = "tab"
    BACKSPACE = "backspace"
    ESC = "esc"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    INS = "insert"
    DEL = "delete"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageUp"
    PAGE_DOWN = "pageDown"
    F1 = "f1"
    F2 = "f2"
    F3 = "f3"
    F4 = "f4"
    F5 = "f5"
    F6 = "f6"
    F7 = "f7"
    F8 = "f8"
    F9 = "f9"
    F10 = "f10"
    F11 = "f11"
    F12 = "f12"


class MouseButton(Enum):
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"
    OTHER = "other"


@dataclass(frozen=True)
class MouseEvent:
    """What the mouse did: ``press``, ``release``, ``hold``, ``wheel_up`` or ``wheel_down``."""

    kind: str
    button: MouseButton | None = None

    @classmethod
    def press(cls, button: MouseButton) -> MouseEvent:
        return cls("press", button)

    @classmethod
    def release(cls, button: MouseButton) -> MouseEvent:
        return cls("release", button)

    @classmethod
    def hold(cls, button: MouseButton) -> MouseEvent:
        return cls("hold", button)

    @classmethod
    def wheel_up(cls) -> MouseEvent:
        return cls("wheel_up")

    @classmethod
    def wheel_down(cls) -> MouseEvent:
        return cls("wheel_down")

    @property
    def is_press(self) -> bool:
        return self.kind == "press"

    def grabs_focus(self) -> bool:
        """Return ``True`` if this event should move focus to its target."""
        return self.kind == "press"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class Event:
    """Base class for every input event."""

    def relativized(self, offset: VecLike) -> Event:
        """Return this event as seen by a child placed at *offset*."""
        return self


@dataclass(frozen=True)
class Char(Event):
    ch: str


@dataclass(frozen=True)
class CtrlChar(Event):
    ch: str


@dataclass(frozen=True)
class AltChar(Event):
    ch: str


@dataclass(frozen=True)
class KeyEvent(Event):
    key: Key
    shift: bool = False
    alt: bool = False
    ctrl: bool = False


@dataclass(frozen=True)
class Mouse(Event):
    event: MouseEvent
    position: Vec2
    offset: Vec2 = Vec2(0, 0)

    def relativized(self, offset: VecLike) -> Mouse:
        return replace(self, offset=self.offset + offset)

    def relative_position(self) -> Vec2 | None:
        """Position relative to the receiving view, or ``None`` if above/left of it."""
        return self.position.checked_sub(self.offset)


@dataclass(frozen=True)
class Signal(Event):
    name: str


@dataclass(frozen=True)
class Unknown(Event):
    data: str


WINDOW_RESIZE = Signal("window_resize")
REFRESH = Signal("refresh")
EXIT = Signal("exit")


def to_event(value: Event | Key | str) -> Event:
    """Normalise the shorthand accepted by callback registration.

    A one-character string is a :class:`Char`, a :class:`Key` a plain
    :class:`KeyEvent`; events pass through unchanged.
    """
    if isinstance(value, Event):
        return value
    if isinstance(value, Key):
        return KeyEvent(value)
    if isinstance(value, str) and len(value) == 1:
        return Char(value)
    raise TypeError(f"cannot convert {value!r} to an event")


EventLike = Union[Event, Key, str]


# ---------------------------------------------------------------------------
# EventResult
# ---------------------------------------------------------------------------


class EventResult:
    """Outcome of :meth:`View.on_event`.

    Either the event was ignored, or it was consumed -- optionally producing
    a callback to run against the controller once the view tree has been
    released.
    """

    __slots__ = ("_consumed", "callback")

    def __init__(self, consumed: bool, callback: Callback | None = None) -> None:
        self._consumed = consumed
        self.callback = callback

    @classmethod
    def ignored(cls) -> EventResult:
        return cls(False)

    @classmethod
    def consumed(cls) -> EventResult:
        return cls(True)

    @classmethod
    def with_cb(cls, callback: Callback) -> EventResult:
        return cls(True, callback)

    def is_consumed(self) -> bool:
        return self._consumed

    def has_callback(self) -> bool:
        return self.callback is not None

    def process(self, tui: TUI) -> None:
        """Run the callback, if any."""
        if self.callback is not None:
            self.callback(tui)

    def and_then(self, other: EventResult) -> EventResult:
        """Combine two results: consumed if either is, callbacks run in order."""
        if self.callback is None or other.callback is None:
            return EventResult(
                self._consumed or other._consumed,
                self.callback or other.callback,
            )
        first, second = self.callback, other.callback

        def _both(tui: TUI) -> None:
            first(tui)
            second(tui)

        return EventResult(True, _both)

    def __repr__(self) -> str:
        if not self._consumed:
            return "EventResult.ignored()"
        if self.callback is None:
            return "EventResult.consumed()"
        return f"EventResult.with_cb({self.callback!r})"
