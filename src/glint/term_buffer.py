"""Double-buffered frame renderer.

A prompt pushes every line of the next frame plus the wanted cursor position,
then calls :meth:`TermBuffer.render_frame`.  The new frame is diffed against
the previous one and only the rows that changed are rewritten; the cursor is
then moved to the requested position.  :meth:`TermBuffer.flush` pushes the
written bytes out to the terminal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from glint import string

if TYPE_CHECKING:
    from glint.terminal import Terminal

logger = logging.getLogger(__name__)

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_TO_END_OF_SCREEN = "\x1b[J"
_CLEAR_TO_END_OF_LINE = "\x1b[K"


class TermBuffer:
    """Render surface owned by one prompt at a time."""

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal

        # Frame being assembled
        self._next_lines: list[str] = []
        self._next_cursor: tuple[int, int] = (0, 0)

        # Previous frame (for differential updates)
        self._previous_lines: list[str] = []
        self._previous_width: int = 0
        self._force_full: bool = False

        # Terminal cursor row, relative to the top of the frame
        self._cursor_row: int = 0

        # Metrics
        self._full_redraw_count: int = 0

    # ------------------------------------------------------------------
    # Frame assembly
    # ------------------------------------------------------------------

    def push_line(self, line: str) -> None:
        self._next_lines.append(line)

    def lines(self) -> int:
        """Number of lines pushed so far for the next frame."""
        return len(self._next_lines)

    def set_next_cursor(self, position: tuple[int, int]) -> None:
        """Place the cursor at ``(column, row)`` once the frame is drawn.

        *column* counts terminal cells, *row* counts frame lines.
        """
        self._next_cursor = position

    def invalidate(self) -> None:
        """Forget the previous frame so the next one is drawn in full."""
        self._force_full = True

    @property
    def full_redraws(self) -> int:
        return self._full_redraw_count

    @property
    def previous_lines(self) -> list[str]:
        return list(self._previous_lines)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_frame(self) -> None:
        """Write the differences between the last frame and the new one."""
        term_width = max(1, self.terminal.columns)
        term_height = max(1, self.terminal.rows)

        lines = [
            string.truncate_to_width(line, term_width)
            for line in self._next_lines[:term_height]
        ]
        cursor_col, cursor_row = self._next_cursor
        cursor_row = max(0, min(cursor_row, len(lines) - 1))
        cursor_col = max(0, min(cursor_col, term_width - 1))

        self._next_lines = []
        self._next_cursor = (0, 0)

        force_full = self._force_full or (
            bool(self._previous_lines) and term_width != self._previous_width
        )
        self._force_full = False

        out: list[str] = []

        # Navigate to row 0 of the frame
        if self._cursor_row > 0:
            out.append(f"\x1b[{self._cursor_row}A")
        out.append("\r")
        out.append(_HIDE_CURSOR)

        num_new = len(lines)
        num_old = len(self._previous_lines)

        if force_full:
            self._full_redraw_count += 1
            logger.debug("full redraw of %d lines", num_new)
            out.append(_CLEAR_TO_END_OF_SCREEN)
            for i, line in enumerate(lines):
                if i > 0:
                    out.append("\r\n")
                out.append(line)
                out.append(_CLEAR_TO_END_OF_LINE)
            last_written_row = max(0, num_new - 1)
        else:
            total = max(num_new, num_old)
            for i in range(total):
                if i > 0:
                    out.append("\r\n")
                if i >= num_new:
                    # Line existed before but not now
                    out.append(_CLEAR_TO_END_OF_LINE)
                elif i >= num_old or lines[i] != self._previous_lines[i]:
                    out.append(lines[i])
                    out.append(_CLEAR_TO_END_OF_LINE)
                # else: unchanged, the "\r\n" above still moves down a row
            last_written_row = max(0, total - 1)

        self._previous_lines = lines
        self._previous_width = term_width

        delta = last_written_row - cursor_row
        if delta > 0:
            out.append(f"\x1b[{delta}A")
        elif delta < 0:
            out.append(f"\x1b[{-delta}B")
        self._cursor_row = cursor_row

        out.append("\r")
        if cursor_col > 0:
            out.append(f"\x1b[{cursor_col}C")
        out.append(_SHOW_CURSOR)

        self.terminal.write("".join(out))

    def flush(self) -> None:
        self.terminal.flush()

    def finish(self) -> None:
        """Park the cursor on a fresh line below the last frame."""
        if not self._previous_lines:
            return
        below = len(self._previous_lines) - 1 - self._cursor_row
        out = f"\x1b[{below}B" if below > 0 else ""
        self.terminal.write(out + "\r\n")
        self.terminal.flush()
        self._cursor_row = 0
        self._previous_lines = []
