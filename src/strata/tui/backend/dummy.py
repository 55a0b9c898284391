"""Backend that draws nothing and never produces input."""

from __future__ import annotations

import queue
import threading
from typing import Optional

from strata.tui.backend import InputRequest
from strata.tui.event import Event
from strata.tui.theme import Color, ColorPair, Effect
from strata.tui.vec import Vec2, VecLike

__all__ = ["DummyBackend"]


class DummyBackend:
    """A 1x1 backend discarding all output."""

    def __init__(self) -> None:
        self._colors = ColorPair(Color.terminal_default(), Color.terminal_default())

    def screen_size(self) -> Vec2:
        return Vec2(1, 1)

    def has_colors(self) -> bool:
        return False

    def set_color(self, colors: ColorPair) -> ColorPair:
        previous, self._colors = self._colors, colors
        return previous

    def set_effect(self, effect: Effect) -> None:
        pass

    def unset_effect(self, effect: Effect) -> None:
        pass

    def print_at(self, pos: VecLike, text: str) -> None:
        pass

    def clear(self, color: Color) -> None:
        pass

    def poll_event(self) -> Event | None:
        return None

    def prepare_input(self, input_request: InputRequest) -> None:
        pass

    def start_input_thread(
        self,
        event_sink: queue.Queue[Optional[Event]],
        input_requests: queue.Queue[Optional[InputRequest]],
    ) -> threading.Thread:
        def _drain() -> None:
            # Answers nothing; exits once the request queue is closed.
            for _request in iter(input_requests.get, None):
                pass

        thread = threading.Thread(target=_drain, name="dummy-input", daemon=True)
        thread.start()
        return thread

    def refresh(self) -> None:
        pass

    def finish(self) -> None:
        pass
