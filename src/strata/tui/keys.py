"""Decoding of terminal input sequences into events.

:func:`parse_event` takes one complete sequence, as split by
:class:`~strata.tui.stdin_buffer.StdinBuffer`, and returns the matching
:class:`~strata.tui.event.Event`.  Covers legacy xterm/VT sequences with
their ``;modifier`` parameter, SS3 keys, control and meta characters and
SGR (1006) mouse reports.
"""

from __future__ import annotations

import re

from strata.tui.event import (
    AltChar,
    Char,
    CtrlChar,
    Event,
    Key,
    KeyEvent,
    Mouse,
    MouseButton,
    MouseEvent,
    Unknown,
)
from strata.tui.vec import Vec2

__all__ = ["parse_event", "paste_events", "MODIFIERS"]

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

LOCK_MASK = 64 + 128

# Final byte of ``CSI [1;mod] X`` and ``SS3 X``
_LETTER_KEYS: dict[str, Key] = {
    "A": Key.UP,
    "B": Key.DOWN,
    "C": Key.RIGHT,
    "D": Key.LEFT,
    "H": Key.HOME,
    "F": Key.END,
    "P": Key.F1,
    "Q": Key.F2,
    "R": Key.F3,
    "S": Key.F4,
}

# Number of ``CSI n [;mod] ~``
_TILDE_KEYS: dict[int, Key] = {
    1: Key.HOME,
    2: Key.INS,
    3: Key.DEL,
    4: Key.END,
    5: Key.PAGE_UP,
    6: Key.PAGE_DOWN,
    7: Key.HOME,
    8: Key.END,
    15: Key.F5,
    17: Key.F6,
    18: Key.F7,
    19: Key.F8,
    20: Key.F9,
    21: Key.F10,
    23: Key.F11,
    24: Key.F12,
}

_SINGLE_KEYS: dict[str, Key] = {
    "\x1b": Key.ESC,
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    "\t": Key.TAB,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
}

_CSI_RE = re.compile(r"^\x1b\[(?:(\d+)(?:;(\d+))?)?([A-DFHPQRS~])$")
_SS3_RE = re.compile(r"^\x1bO(\d?)([A-DFHPQRS])$")
_SGR_MOUSE_RE = re.compile(r"^\x1b\[<(\d+);(\d+);(\d+)([Mm])$")

_BUTTONS = (MouseButton.LEFT, MouseButton.MIDDLE, MouseButton.RIGHT, MouseButton.OTHER)


def _modified(key: Key, modifier: int) -> KeyEvent:
    mod = (modifier - 1) & ~LOCK_MASK
    return KeyEvent(
        key,
        shift=bool(mod & MODIFIERS["shift"]),
        alt=bool(mod & MODIFIERS["alt"]),
        ctrl=bool(mod & MODIFIERS["ctrl"]),
    )


def _parse_mouse(match: re.Match[str]) -> Mouse:
    code, x, y, final = int(match.group(1)), int(match.group(2)), int(match.group(3)), match.group(4)
    position = Vec2(max(0, x - 1), max(0, y - 1))
    if code & 64:
        event = MouseEvent.wheel_down() if code & 1 else MouseEvent.wheel_up()
    else:
        button = _BUTTONS[code & 3]
        if final == "m":
            event = MouseEvent.release(button)
        elif code & 32:
            event = MouseEvent.hold(button)
        else:
            event = MouseEvent.press(button)
    return Mouse(event, position)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_event(data: str) -> Event | None:  # noqa: C901
    """Decode one complete input sequence, or return ``None`` for empty input.

    Sequences that are recognised as escapes but not understood become
    :class:`~strata.tui.event.Unknown`.
    """
    if not data:
        return None

    mouse = _SGR_MOUSE_RE.match(data)
    if mouse:
        return _parse_mouse(mouse)

    if data == "\x1b[Z":
        return KeyEvent(Key.TAB, shift=True)

    csi = _CSI_RE.match(data)
    if csi:
        number, modifier, final = csi.groups()
        if final == "~":
            key = _TILDE_KEYS.get(int(number)) if number else None
        else:
            key = _LETTER_KEYS.get(final)
        if key is None:
            return Unknown(data)
        return _modified(key, int(modifier) if modifier else 1)

    ss3 = _SS3_RE.match(data)
    if ss3:
        modifier, final = ss3.groups()
        return _modified(_LETTER_KEYS[final], int(modifier) if modifier else 1)

    single = _SINGLE_KEYS.get(data)
    if single is not None:
        return KeyEvent(single)

    if data == "\x00":
        return CtrlChar(" ")

    # Ctrl + letter (0x01 - 0x1a)
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return CtrlChar(chr(ord(data) + ord("a") - 1))

    # Alt + key (ESC prefix)
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        key = _SINGLE_KEYS.get(ch)
        if key is not None:
            return KeyEvent(key, alt=True)
        if ch.isprintable():
            return AltChar(ch)
        return Unknown(data)

    if len(data) == 1 and data.isprintable():
        return Char(data)

    return Unknown(data)


def paste_events(text: str) -> list[Event]:
    """Events typing out pasted *text*, one per character."""
    events: list[Event] = []
    for ch in text.replace("\r\n", "\n"):
        if ch in ("\r", "\n"):
            events.append(KeyEvent(Key.ENTER))
        elif ch == "\t":
            events.append(KeyEvent(Key.TAB))
        elif ch.isprintable():
            events.append(Char(ch))
    return events
