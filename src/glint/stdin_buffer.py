"""StdinBuffer splits raw stdin chunks into complete key sequences.

A single ``read`` can return several keypresses at once, or only the first
half of an escape sequence.  The buffer keeps the incomplete tail until more
data arrives (or the caller gives up waiting and flushes it).
"""

from __future__ import annotations

import re

import grapheme

from glint.keys import is_control_char

ESC = "\x1b"

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> str:
    """Classify *data* as ``complete``, ``incomplete`` or ``not-escape``."""
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI sequences: ESC [
    if after_esc.startswith("["):
        if after_esc.startswith("[M"):
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    # OSC / DCS / APC are terminated by ST (ESC \) or BEL
    if after_esc[0] in "]P_":
        if data.endswith(f"{ESC}\\") or data.endswith("\x07"):
            return "complete"
        return "incomplete"

    # SS3 sequences: ESC O
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Meta key: ESC followed by a single character
    return "complete"


def _is_complete_csi_sequence(data: str) -> str:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    if not 0x40 <= ord(payload[-1]) <= 0x7E:
        return "incomplete"

    if payload.startswith("<") and not _SGR_MOUSE_RE.match(payload):
        return "incomplete"
    return "complete"


def extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences plus an incomplete remainder."""
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            # Plain text up to the next escape is a run of keypresses
            end = remaining.find(ESC)
            chunk = remaining if end == -1 else remaining[:end]
            sequences.extend(_split_plain(chunk))
            pos += len(chunk)
            continue

        seq_end = 1
        while seq_end <= len(remaining):
            status = _is_complete_sequence(remaining[:seq_end])
            if status == "incomplete":
                seq_end += 1
                continue
            sequences.append(remaining[:seq_end])
            pos += seq_end
            break
        else:
            return sequences, remaining

    return sequences, ""


def _split_plain(chunk: str) -> list[str]:
    """Split plain text into one keypress per grapheme cluster.

    Control characters always stand alone, so ``"hi\\r"`` becomes
    ``["h", "i", "\\r"]`` and a base letter arriving together with its
    combining marks stays one keypress.
    """
    parts: list[str] = []
    for g in grapheme.graphemes(chunk):
        if any(is_control_char(ch) for ch in g):
            # "\r\n" is a single cluster but two keypresses
            parts.extend(g)
        else:
            parts.append(g)
    return parts


class StdinBuffer:
    """Buffers stdin input and returns complete sequences.

    Handles partial escape sequences that arrive across multiple chunks.
    """

    def __init__(self) -> None:
        self._buffer: str = ""

    @property
    def pending(self) -> bool:
        """Whether an incomplete sequence is waiting for more input."""
        return bool(self._buffer)

    def process(self, data: str) -> list[str]:
        """Feed *data* in and return every sequence it completed."""
        self._buffer += data
        sequences, self._buffer = extract_complete_sequences(self._buffer)
        return sequences

    def flush(self) -> list[str]:
        """Give up on the incomplete tail and return it as-is."""
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def clear(self) -> None:
        self._buffer = ""
