"""StdinBuffer splits raw terminal input into complete sequences.

Terminal reads can end in the middle of an escape sequence (mouse reports
are the usual culprit).  The buffer keeps the incomplete tail until more
data arrives, so a partial sequence is never decoded as separate key
presses.  Bracketed paste content is returned as a single chunk.

The buffer is synchronous: the input thread calls :meth:`StdinBuffer.feed`
after every read and :meth:`StdinBuffer.flush` once the terminal has gone
quiet, which turns a lone ``ESC`` into an Escape key press.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["InputChunk", "StdinBuffer", "BRACKETED_PASTE_START", "BRACKETED_PASTE_END"]

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


@dataclass(frozen=True)
class InputChunk:
    """One complete key/mouse sequence, or the content of one paste."""

    text: str
    paste: bool = False


def _is_complete_sequence(data: str) -> str:
    """Classify *data* as ``"complete"``, ``"incomplete"`` or ``"not-escape"``."""
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI: ESC [
    if after_esc.startswith("["):
        if after_esc.startswith("[M"):
            # X10 mouse: ESC [ M b x y
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    # OSC: ESC ]
    if after_esc.startswith("]"):
        return "complete" if data.endswith((f"{ESC}\\", "\x07")) else "incomplete"

    # DCS / APC: ESC P, ESC _
    if after_esc.startswith(("P", "_")):
        return "complete" if data.endswith(f"{ESC}\\") else "incomplete"

    # SS3: ESC O
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Meta: ESC followed by a single character
    return "complete"


def _is_complete_csi_sequence(data: str) -> str:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    last_char = payload[-1]

    if not 0x40 <= ord(last_char) <= 0x7E:
        return "incomplete"

    if payload.startswith("<"):
        # SGR mouse reports may contain 'M' only as their final byte
        return "complete" if _SGR_MOUSE_RE.match(payload) else "incomplete"
    return "complete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences and an incomplete remainder."""
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        seq_end = 1
        while seq_end <= len(remaining):
            candidate = remaining[:seq_end]
            if _is_complete_sequence(candidate) == "incomplete":
                seq_end += 1
                continue
            sequences.append(candidate)
            pos += seq_end
            break
        else:
            return sequences, remaining

    return sequences, ""


class StdinBuffer:
    """Accumulates terminal input and hands back complete chunks."""

    def __init__(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""

    def feed(self, data: str) -> list[InputChunk]:
        """Add *data* and return every chunk it completes, in order."""
        chunks: list[InputChunk] = []
        self._buffer += data

        while self._buffer:
            if self._paste_mode:
                self._paste_buffer += self._buffer
                self._buffer = ""
                end_index = self._paste_buffer.find(BRACKETED_PASTE_END)
                if end_index == -1:
                    break
                chunks.append(InputChunk(self._paste_buffer[:end_index], paste=True))
                self._buffer = self._paste_buffer[end_index + len(BRACKETED_PASTE_END) :]
                self._paste_buffer = ""
                self._paste_mode = False
                continue

            start_index = self._buffer.find(BRACKETED_PASTE_START)
            if start_index != -1:
                sequences, _ = _extract_complete_sequences(self._buffer[:start_index])
                chunks.extend(InputChunk(s) for s in sequences)
                self._buffer = self._buffer[start_index + len(BRACKETED_PASTE_START) :]
                self._paste_mode = True
                continue

            sequences, self._buffer = _extract_complete_sequences(self._buffer)
            chunks.extend(InputChunk(s) for s in sequences)
            break

        return chunks

    def flush(self) -> list[InputChunk]:
        """Give up waiting and return whatever incomplete input is buffered."""
        if not self._buffer:
            return []
        pending, self._buffer = self._buffer, ""
        return [InputChunk(pending)]

    def clear(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""

    def pending(self) -> str:
        return self._buffer

    def in_paste(self) -> bool:
        return self._paste_mode
