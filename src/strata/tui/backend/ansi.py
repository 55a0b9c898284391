"""Backend driving a real terminal with ANSI escape sequences.

On construction the terminal is switched to raw mode and the alternate
screen, the cursor is hidden and SGR mouse reporting plus bracketed paste
are enabled.  :meth:`AnsiBackend.finish` undoes all of it.

Output is buffered and written in one go on :meth:`AnsiBackend.refresh`.
When ``STRATA_TUI_WRITE_LOG`` names a file, everything written to the
terminal is appended to it as well.
"""

from __future__ import annotations

import codecs
import logging
import os
import queue
import select
import signal
import sys
import termios
import threading
import tty
from collections import deque
from typing import IO, Optional

from strata.tui.backend import InputRequest
from strata.tui.event import EXIT, WINDOW_RESIZE, Event
from strata.tui.keys import parse_event, paste_events
from strata.tui.stdin_buffer import InputChunk, StdinBuffer
from strata.tui.theme import Color, ColorPair, Effect
from strata.tui.vec import Vec2, VecLike

logger = logging.getLogger(__name__)

__all__ = ["AnsiBackend", "color_sgr", "colors_sequence", "effect_sequence", "move_to"]

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_ALT_SCREEN_ENABLE = "\x1b[?1049h"
_ALT_SCREEN_DISABLE = "\x1b[?1049l"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_MOUSE_ENABLE = "\x1b[?1000h\x1b[?1002h\x1b[?1006h"
_MOUSE_DISABLE = "\x1b[?1006l\x1b[?1002l\x1b[?1000l"
_BRACKETED_PASTE_ENABLE = "\x1b[?2004h"
_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"
_CLEAR_SCREEN = "\x1b[2J"
_RESET = "\x1b[0m"

# Seconds to wait for the rest of an escape sequence before giving up on it
_ESCAPE_TIMEOUT = 0.01

_EFFECT_ON: dict[Effect, str] = {
    Effect.BOLD: "1",
    Effect.ITALIC: "3",
    Effect.UNDERLINE: "4",
    Effect.REVERSE: "7",
    Effect.STRIKETHROUGH: "9",
}

_EFFECT_OFF: dict[Effect, str] = {
    Effect.BOLD: "22",
    Effect.ITALIC: "23",
    Effect.UNDERLINE: "24",
    Effect.REVERSE: "27",
    Effect.STRIKETHROUGH: "29",
}


# ---------------------------------------------------------------------------
# SGR helpers
# ---------------------------------------------------------------------------


def color_sgr(color: Color, background: bool) -> str:
    """SGR parameter selecting *color* as foreground or background."""
    if color.kind == "default":
        return "49" if background else "39"
    if color.kind == "rgb":
        assert color.rgb is not None
        r, g, b = color.rgb
        return f"{48 if background else 38};2;{r};{g};{b}"
    assert color.base is not None
    base = (100 if background else 90) if color.kind == "light" else (40 if background else 30)
    return str(base + color.base.value)


def colors_sequence(colors: ColorPair) -> str:
    return f"\x1b[{color_sgr(colors.front, False)};{color_sgr(colors.back, True)}m"


def effect_sequence(effect: Effect, enabled: bool) -> str:
    """Sequence turning *effect* on or off; empty for :attr:`Effect.SIMPLE`."""
    table = _EFFECT_ON if enabled else _EFFECT_OFF
    code = table.get(effect)
    return f"\x1b[{code}m" if code else ""


def move_to(pos: VecLike) -> str:
    """Cursor positioning sequence for the zero-based cell *pos*."""
    pos = Vec2.of(pos)
    return f"\x1b[{pos.y + 1};{pos.x + 1}H"


# ---------------------------------------------------------------------------
# AnsiBackend
# ---------------------------------------------------------------------------


class AnsiBackend:
    """Concrete backend on top of ``sys.stdin``/``sys.stdout``.

    Manages raw mode via :mod:`tty` and :mod:`termios` and SIGWINCH-based
    resize detection.  Input is read either by :meth:`poll_event` or by the
    thread from :meth:`start_input_thread`; use one of the two, not both.
    """

    def __init__(
        self,
        *,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
        write_log: str | None = None,
    ) -> None:
        self._in_fd = (stdin or sys.stdin).fileno()
        self._out = stdout or sys.stdout
        self._write_log_path = (
            write_log if write_log is not None else os.environ.get("STRATA_TUI_WRITE_LOG", "")
        )
        self._buffer: list[str] = []
        self._colors = ColorPair(Color.terminal_default(), Color.terminal_default())
        self._effects: set[Effect] = set()
        self._stdin_buffer = StdinBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: deque[Event] = deque()
        self._resized = False
        self._finished = False
        self._eof = False
        self._original_termios: list | None = None
        self._prev_sigwinch_handler: signal.Handlers | None = None
        self._start()

    # -- start / stop -------------------------------------------------------

    def _start(self) -> None:
        self._original_termios = termios.tcgetattr(self._in_fd)
        tty.setraw(self._in_fd)

        try:
            self._prev_sigwinch_handler = signal.getsignal(signal.SIGWINCH)
            signal.signal(signal.SIGWINCH, self._on_sigwinch)
        except ValueError:
            # Not on the main thread: resizes will only be seen on redraw.
            logger.warning("Cannot install SIGWINCH handler outside the main thread")
            self._prev_sigwinch_handler = None

        self._raw_write(
            _ALT_SCREEN_ENABLE + _HIDE_CURSOR + _MOUSE_ENABLE + _BRACKETED_PASTE_ENABLE
        )
        logger.debug("Terminal switched to raw mode (fd=%d)", self._in_fd)

    def finish(self) -> None:
        """Restore the terminal to the state it was found in."""
        if self._finished:
            return
        self._finished = True

        self._raw_write(
            _RESET
            + _BRACKETED_PASTE_DISABLE
            + _MOUSE_DISABLE
            + _SHOW_CURSOR
            + _ALT_SCREEN_DISABLE
        )

        if self._prev_sigwinch_handler is not None:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler)
            self._prev_sigwinch_handler = None

        if self._original_termios is not None:
            try:
                termios.tcsetattr(self._in_fd, termios.TCSADRAIN, self._original_termios)
            except termios.error:
                logger.warning("Could not restore terminal attributes", exc_info=True)
            self._original_termios = None
        logger.debug("Terminal restored")

    # -- geometry -----------------------------------------------------------

    def screen_size(self) -> Vec2:
        try:
            size = os.get_terminal_size(self._out.fileno())
        except (ValueError, OSError):
            return Vec2(80, 24)
        return Vec2(size.columns, size.lines)

    def has_colors(self) -> bool:
        return True

    # -- styling ------------------------------------------------------------

    def set_color(self, colors: ColorPair) -> ColorPair:
        previous = self._colors
        if colors != previous:
            self._colors = colors
            self._buffer.append(colors_sequence(colors))
        return previous

    def set_effect(self, effect: Effect) -> None:
        self._effects.add(effect)
        self._buffer.append(effect_sequence(effect, True))

    def unset_effect(self, effect: Effect) -> None:
        self._effects.discard(effect)
        self._buffer.append(effect_sequence(effect, False))

    # -- drawing ------------------------------------------------------------

    def print_at(self, pos: VecLike, text: str) -> None:
        self._buffer.append(move_to(pos) + text)

    def clear(self, color: Color) -> None:
        self._buffer.append(
            colors_sequence(ColorPair(color, color)) + _CLEAR_SCREEN + colors_sequence(self._colors)
        )

    def refresh(self) -> None:
        if not self._buffer:
            return
        data = "".join(self._buffer)
        self._buffer.clear()
        self._write(data)

    # -- input --------------------------------------------------------------

    def poll_event(self) -> Event | None:
        if self._resized:
            self._resized = False
            return WINDOW_RESIZE
        if not self._pending and not self._fill(0.0):
            return EXIT
        return self._pending.popleft() if self._pending else None

    def prepare_input(self, input_request: InputRequest) -> None:
        # Input is read on demand by poll_event or the input thread.
        pass

    def start_input_thread(
        self,
        event_sink: queue.Queue[Optional[Event]],
        input_requests: queue.Queue[Optional[InputRequest]],
    ) -> threading.Thread:
        def _serve() -> None:
            for request in iter(input_requests.get, None):
                event_sink.put(self._next_event(block=request is InputRequest.BLOCK))
                if self._eof:
                    event_sink.put(None)
                    return
            logger.debug("Input requests closed")

        thread = threading.Thread(target=_serve, name="ansi-input", daemon=True)
        thread.start()
        return thread

    def _next_event(self, block: bool) -> Event | None:
        while True:
            if self._resized:
                self._resized = False
                return WINDOW_RESIZE
            if self._pending:
                return self._pending.popleft()
            if not self._fill(None if block else 0.0):
                return EXIT
            if not block or self._pending:
                return self._pending.popleft() if self._pending else None

    def _fill(self, timeout: float | None) -> bool:
        """Read whatever input is ready into the pending queue.

        Returns ``False`` once stdin has reached end of file.
        """
        if not self._readable(timeout):
            return True
        try:
            raw = os.read(self._in_fd, 4096)
        except InterruptedError:
            return True
        if not raw:
            logger.debug("Standard input closed")
            self._eof = True
            return False

        chunks = self._stdin_buffer.feed(self._decoder.decode(raw))
        if self._stdin_buffer.pending() and not self._readable(_ESCAPE_TIMEOUT):
            chunks.extend(self._stdin_buffer.flush())
        self._pending.extend(_chunk_events(chunks))
        return True

    def _readable(self, timeout: float | None) -> bool:
        try:
            ready, _, _ = select.select([self._in_fd], [], [], timeout)
        except InterruptedError:
            # SIGWINCH interrupted the wait.
            return False
        return bool(ready)

    # -- private: SIGWINCH -------------------------------------------------

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        self._resized = True

    # -- private: writing --------------------------------------------------

    def _write(self, data: str) -> None:
        """Write to stdout and, if configured, to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                pass

    def _raw_write(self, data: str) -> None:
        try:
            self._out.write(data)
            self._out.flush()
        except OSError:
            pass


def _chunk_events(chunks: list[InputChunk]) -> list[Event]:
    events: list[Event] = []
    for chunk in chunks:
        if chunk.paste:
            events.extend(paste_events(chunk.text))
            continue
        event = parse_event(chunk.text)
        if event is not None:
            events.append(event)
    return events
