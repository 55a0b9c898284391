"""Backend abstraction for terminal I/O.

The controller and the views only ever talk to a :class:`Backend`; swapping
the terminal driver requires no change elsewhere.  Three drivers ship with
the package:

* :class:`strata.tui.backend.ansi.AnsiBackend` -- a real terminal, driven
  with ANSI escape sequences;
* :class:`strata.tui.backend.dummy.DummyBackend` -- discards everything;
* :class:`strata.tui.backend.puppet.PuppetBackend` -- records frames in
  memory for tests.

Channels are modelled with :mod:`queue` queues; putting ``None`` on a queue
closes it.
"""

from __future__ import annotations

import queue
import threading
from enum import Enum
from typing import Optional, Protocol

from strata.tui.event import Event
from strata.tui.theme import Color, ColorPair, Effect
from strata.tui.vec import Vec2, VecLike

__all__ = ["Backend", "InputRequest"]


class InputRequest(Enum):
    """What an input thread is asked to deliver next."""

    # Deliver the next event, waiting for it if needed.
    BLOCK = "block"
    # Deliver an event only if one is already pending (``None`` otherwise).
    PEEK = "peek"


class Backend(Protocol):
    """Interface every terminal driver implements."""

    def screen_size(self) -> Vec2: ...

    def has_colors(self) -> bool: ...

    def set_color(self, colors: ColorPair) -> ColorPair:
        """Apply *colors* and return the pair that was active before."""
        ...

    def set_effect(self, effect: Effect) -> None: ...

    def unset_effect(self, effect: Effect) -> None: ...

    def print_at(self, pos: VecLike, text: str) -> None: ...

    def clear(self, color: Color) -> None:
        """Fill the whole surface with *color*."""
        ...

    def poll_event(self) -> Event | None:
        """Return a pending event without blocking, or ``None``."""
        ...

    def prepare_input(self, input_request: InputRequest) -> None: ...

    def start_input_thread(
        self,
        event_sink: queue.Queue[Optional[Event]],
        input_requests: queue.Queue[Optional[InputRequest]],
    ) -> threading.Thread:
        """Spawn a thread answering *input_requests* with events on *event_sink*.

        The thread exits when the request queue is closed or when its own
        upstream closes.
        """
        ...

    def refresh(self) -> None:
        """Flush everything drawn since the last refresh."""
        ...

    def finish(self) -> None:
        """Release the terminal."""
        ...
