"""Multi-line commit message editor.

The cursor is a ``(column, row)`` pair counted in grapheme clusters, so a
letter with combining accents or a flag emoji moves and deletes as one
character.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from glint import string
from glint.config import Config
from glint.keys import printable_text
from glint.prompt.base import Cancelled, Prompt, Terminated
from glint.term_buffer import TermBuffer
from glint.theme import PromptTheme

if TYPE_CHECKING:
    from glint.terminal import Terminal

INSTRUCTIONS = "Commit message (arrow keys for multiple lines):"


@dataclass(frozen=True)
class Submitted:
    message: str


MessagePromptResult = Union[Submitted, Cancelled, Terminated]


class MessagePrompt(Prompt[Submitted]):
    """Edit a commit message; ``enter`` submits, ``alt+enter`` adds a line."""

    def __init__(
        self,
        terminal: Terminal,
        *,
        config: Config | None = None,
        theme: PromptTheme | None = None,
    ) -> None:
        super().__init__(terminal, config=config, theme=theme)
        self.lines: list[str] = [""]
        self.cursor: tuple[int, int] = (0, 0)

    # -- state ---------------------------------------------------------------

    def _line(self, row: int) -> str:
        assert 0 <= row < len(self.lines), f"row {row} outside {len(self.lines)} lines"
        return self.lines[row]

    def _check_cursor(self) -> None:
        x, y = self.cursor
        line = self._line(y)
        assert 0 <= x <= string.length(line), f"column {x} outside {line!r}"

    def get_text(self) -> str:
        return "\n".join(self.lines)

    def insert_text(self, text: str) -> None:
        x, y = self.cursor
        line = self._line(y)
        self.lines[y] = string.insert(line, x, text)
        # Combining marks may merge into the grapheme before the cursor
        self.cursor = (string.length(self.lines[y]) - (string.length(line) - x), y)

    def add_new_line(self) -> None:
        _, y = self.cursor
        self.lines.insert(y + 1, "")
        self.cursor = (0, y + 1)

    def move_left(self) -> None:
        x, y = self.cursor
        self.cursor = (max(0, x - 1), y)

    def move_right(self) -> None:
        x, y = self.cursor
        if string.length(self._line(y)) < x + 1:
            self.lines[y] += " "
        self.cursor = (x + 1, y)

    def move_up(self) -> None:
        x, y = self.cursor
        if y == 0:
            return
        self.cursor = (min(x, string.length(self._line(y - 1))), y - 1)

    def move_down(self) -> None:
        _, y = self.cursor
        if y + 1 >= len(self.lines):
            self.lines.append("")
        self.cursor = (0, y + 1)

    def move_line_start(self) -> None:
        self.cursor = (0, self.cursor[1])

    def move_line_end(self) -> None:
        _, y = self.cursor
        self.cursor = (string.length(self._line(y)), y)

    def move_word_left(self) -> None:
        x, y = self.cursor
        self.cursor = (string.prev_word_grapheme(self._line(y), x), y)

    def move_word_right(self) -> None:
        x, y = self.cursor
        self.cursor = (string.next_word_grapheme(self._line(y), x), y)

    def backspace(self) -> None:
        x, y = self.cursor
        if x == 0 and y == 0:
            return
        if x == 0:
            current = self.lines.pop(y)
            previous = self._line(y - 1)
            self.lines[y - 1] = previous + current
            self.cursor = (string.length(previous), y - 1)
            return
        self.lines[y] = string.remove(self._line(y), x - 1)
        self.cursor = (x - 1, y)

    def handle_input(self, data: str) -> MessagePromptResult | None:
        kb = self._keys

        if kb.matches(data, "terminate"):
            return Terminated()
        if kb.matches(data, "cancel"):
            return Cancelled()
        if kb.matches(data, "newLine"):
            self.add_new_line()
        elif kb.matches(data, "confirm"):
            return Submitted(self.get_text())
        elif kb.matches(data, "cursorLineStart"):
            self.move_line_start()
        elif kb.matches(data, "cursorLineEnd"):
            self.move_line_end()
        elif kb.matches(data, "cursorWordLeft"):
            self.move_word_left()
        elif kb.matches(data, "cursorWordRight"):
            self.move_word_right()
        elif kb.matches(data, "cursorLeft"):
            self.move_left()
        elif kb.matches(data, "cursorRight"):
            self.move_right()
        elif kb.matches(data, "cursorUp"):
            self.move_up()
        elif kb.matches(data, "cursorDown"):
            self.move_down()
        elif kb.matches(data, "deleteCharBackward"):
            self.backspace()
        else:
            text = printable_text(data)
            if text is not None:
                self.insert_text(text)

        self._check_cursor()
        return None

    # -- rendering -----------------------------------------------------------

    def render_lines(self) -> list[str]:
        """Editor rows, with the subject's overflow past the limit highlighted."""
        limit = self._config.subject_limit
        rows: list[str] = []
        for i, line in enumerate(self.lines):
            if i == 0 and string.length(line) > limit:
                good, bad = string.split_at(line, limit)
                rows.append(good + self._theme.overflow(bad))
            else:
                rows.append(line)
        return rows

    def render(self, buffer: TermBuffer) -> None:
        buffer.push_line(INSTRUCTIONS)
        buffer.push_line(self._theme.hint("-" * len(INSTRUCTIONS)))

        editor_y = buffer.lines()
        for row in self.render_lines():
            buffer.push_line(row)

        x, y = self.cursor
        column = string.width(string.split_at(self._line(y), x)[0])
        buffer.set_next_cursor((column, editor_y + y))
