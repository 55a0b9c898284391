"""In-memory backend for tests.

:class:`PuppetBackend` performs no I/O.  Drawing goes into an
:class:`~strata.tui.backend.puppet.observed.ObservedScreen`; every
:meth:`~PuppetBackend.refresh` snapshots it into :attr:`~PuppetBackend.last_frame`
and onto the :meth:`~PuppetBackend.stream` queue.  Input is fed by putting
events on :meth:`~PuppetBackend.input`::

    backend = PuppetBackend(size=(40, 10))
    tui = TUI(backend=backend)
    backend.input().put(Char("q"))
    tui.step()
    assert backend.last_frame.find_occurrences("Hello")
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import replace
from typing import Optional

from strata.tui.backend import InputRequest
from strata.tui.backend.puppet.observed import ObservedCell, ObservedScreen, ObservedStyle
from strata.tui.event import EXIT, Event
from strata.tui.theme import Color, ColorPair, Effect
from strata.tui.utils import grapheme_width, graphemes
from strata.tui.vec import Vec2, VecLike

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_SIZE", "DEFAULT_OBSERVED_STYLE", "PuppetBackend"]

DEFAULT_SIZE = Vec2(120, 80)

DEFAULT_OBSERVED_STYLE = ObservedStyle(
    colors=ColorPair(Color.terminal_default(), Color.terminal_default()),
    effects=frozenset(),
)


class PuppetBackend:
    """Backend recording frames in memory."""

    def __init__(self, size: VecLike = DEFAULT_SIZE) -> None:
        self._size = Vec2.of(size)
        self._inner: queue.Queue[Optional[Event]] = queue.Queue()
        self._stream: queue.Queue[ObservedScreen] = queue.Queue()
        self._style = DEFAULT_OBSERVED_STYLE
        self.current_frame = ObservedScreen(self._size)
        self.last_frame: ObservedScreen | None = None

    # ------------------------------------------------------------------
    # Test hooks
    # ------------------------------------------------------------------

    def input(self) -> queue.Queue[Optional[Event]]:
        """Queue of events to deliver; put ``None`` to close it."""
        return self._inner

    def stream(self) -> queue.Queue[ObservedScreen]:
        """Queue receiving a snapshot on every refresh."""
        return self._stream

    def current_style(self) -> ObservedStyle:
        return self._style

    # ------------------------------------------------------------------
    # Backend
    # ------------------------------------------------------------------

    def screen_size(self) -> Vec2:
        return self._size

    def has_colors(self) -> bool:
        return True

    def set_color(self, colors: ColorPair) -> ColorPair:
        previous = self._style.colors
        if colors != previous:
            self._style = replace(self._style, colors=colors)
        return previous

    def set_effect(self, effect: Effect) -> None:
        if effect not in self._style.effects:
            self._style = replace(self._style, effects=self._style.effects | {effect})

    def unset_effect(self, effect: Effect) -> None:
        if effect in self._style.effects:
            self._style = replace(self._style, effects=self._style.effects - {effect})

    def print_at(self, pos: VecLike, text: str) -> None:
        pos = Vec2.of(pos)
        frame = self.current_frame
        if not (0 <= pos.y < self._size.y) or pos.x < 0:
            return
        x = pos.x
        style = self._style
        for g in graphemes(text):
            width = grapheme_width(g)
            if width == 0:
                continue
            if x + width > self._size.x:
                break
            if x == pos.x:
                # Cells right of the start are all rewritten by this call.
                self._release(pos)
            frame[x, pos.y] = ObservedCell.new((x, pos.y), style, g)
            for dx in range(1, width):
                frame[x + dx, pos.y] = ObservedCell.new((x + dx, pos.y), style, None)
            x += width
        if x > pos.x:
            self._blank_orphans(Vec2(x, pos.y))

    def _release(self, pos: Vec2) -> None:
        """Blank the start of a wide grapheme about to be partly overwritten."""
        frame = self.current_frame
        cell = frame[pos]
        if cell is None or not cell.letter.is_continuation():
            return
        x = pos.x - 1
        while x >= 0:
            owner = frame[x, pos.y]
            if owner is None or not owner.letter.is_continuation():
                break
            x -= 1
        if x >= 0 and frame[x, pos.y] is not None:
            owner = frame[x, pos.y]
            frame[x, pos.y] = ObservedCell.new((x, pos.y), owner.style, " ")

    def _blank_orphans(self, pos: Vec2) -> None:
        """Blank continuation cells left behind by an overwritten wide grapheme."""
        frame = self.current_frame
        x = pos.x
        while x < self._size.x:
            cell = frame[x, pos.y]
            if cell is None or not cell.letter.is_continuation():
                break
            frame[x, pos.y] = ObservedCell.new((x, pos.y), cell.style, " ")
            x += 1

    def clear(self, color: Color) -> None:
        self.current_frame.clear(
            ObservedStyle(colors=ColorPair(color, color), effects=self._style.effects)
        )

    def poll_event(self) -> Event | None:
        try:
            return self._inner.get_nowait()
        except queue.Empty:
            return None

    def prepare_input(self, input_request: InputRequest) -> None:
        self._inner.put(EXIT)

    def start_input_thread(
        self,
        event_sink: queue.Queue[Optional[Event]],
        input_requests: queue.Queue[Optional[InputRequest]],
    ) -> threading.Thread:
        inner = self._inner

        def _forward() -> None:
            for _request in iter(input_requests.get, None):
                event = inner.get()
                if event is None:
                    logger.debug("Puppet input closed")
                    return
                event_sink.put(event)
            logger.debug("Puppet input requests closed")

        thread = threading.Thread(target=_forward, name="puppet-input", daemon=True)
        thread.start()
        return thread

    def refresh(self) -> None:
        snapshot = self.current_frame.copy()
        self.last_frame = snapshot
        self._stream.put(snapshot)

    def finish(self) -> None:
        # Wakes a forwarding thread blocked on the input queue.
        self._inner.put(None)
