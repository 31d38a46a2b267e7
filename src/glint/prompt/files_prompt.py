"""Checklist prompt for picking the files to stage."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence, Union

from glint.config import Config
from glint.git.repo import GitError
from glint.prompt.base import Cancelled, Prompt, Terminated
from glint.term_buffer import TermBuffer
from glint.theme import PromptTheme

if TYPE_CHECKING:
    from glint.terminal import Terminal

logger = logging.getLogger(__name__)

ALL_LABEL = "<all>"
INSTRUCTIONS = "Toggle files to commit (with <space>):"
CHECKED = "☑"
UNCHECKED = "□"


@dataclass(frozen=True)
class Candidate:
    path: str
    label: str | None = None

    @property
    def display(self) -> str:
        return self.label or self.path


@dataclass(frozen=True)
class Confirmed:
    files: list[str]


FilesPromptResult = Union[Confirmed, Cancelled, Terminated]

DiffViewer = Callable[[Sequence[str]], None]


class FilesPrompt(Prompt[Confirmed]):
    """Toggle candidates on and off, then confirm the checked ones.

    Row 0 is the synthetic ``<all>`` row; row ``i`` for ``i >= 1`` is
    ``candidates[i - 1]``.
    """

    def __init__(
        self,
        terminal: Terminal,
        candidates: Sequence[Candidate | str],
        *,
        diff_viewer: DiffViewer | None = None,
        config: Config | None = None,
        theme: PromptTheme | None = None,
    ) -> None:
        super().__init__(terminal, config=config, theme=theme)
        self.candidates: list[Candidate] = [
            c if isinstance(c, Candidate) else Candidate(c) for c in candidates
        ]
        self.checked: list[bool] = [False] * len(self.candidates)
        self.selected_index: int = 0
        self._diff_viewer = diff_viewer
        self._status: str | None = None
        self._needs_full_redraw = False

    # -- state ---------------------------------------------------------------

    def all_checked(self) -> bool:
        return all(self.checked)

    def toggle(self) -> None:
        index = self.selected_index
        if index == 0:
            set_to = not self.all_checked()
            self.checked = [set_to] * len(self.checked)
        else:
            self.checked[index - 1] = not self.checked[index - 1]

    def move(self, delta: int) -> None:
        self.selected_index = max(0, min(self.selected_index + delta, len(self.candidates)))

    def selected_files(self) -> list[str]:
        return [c.path for c, on in zip(self.candidates, self.checked) if on]

    def view_diff(self) -> None:
        if self._diff_viewer is None:
            return
        paths = [] if self.selected_index == 0 else [self.candidates[self.selected_index - 1].path]
        try:
            with self._terminal.suspended():
                self._diff_viewer(paths)
        except (GitError, OSError) as e:
            logger.warning("diff view failed for %s: %s", paths or "all files", e)
            self._status = f"diff failed: {e}"
        self._needs_full_redraw = True

    def handle_input(self, data: str) -> FilesPromptResult | None:
        kb = self._keys
        self._status = None

        if kb.matches(data, "terminate"):
            return Terminated()
        if kb.matches(data, "cancel"):
            return Cancelled()
        if kb.matches(data, "confirm"):
            return Confirmed(self.selected_files())
        if kb.matches(data, "toggle"):
            self.toggle()
        elif kb.matches(data, "selectUp"):
            self.move(-1)
        elif kb.matches(data, "selectDown"):
            self.move(1)
        elif kb.matches(data, "viewDiff"):
            self.view_diff()
        return None

    # -- rendering -----------------------------------------------------------

    def visible_count(self) -> int:
        """How many real candidates are listed under the ``<all>`` row."""
        total = len(self.candidates)
        if total > self._config.max_files:
            return self._config.max_files - 3
        return total

    def render_rows(self) -> list[str]:
        """The checklist rows: ``<all>``, candidates, then the summary line."""
        shown = self.visible_count()
        hidden = len(self.candidates) - shown

        rows: list[str] = []
        labels = [ALL_LABEL] + [c.display for c in self.candidates[:shown]]
        for i, label in enumerate(labels):
            checked = self.all_checked() if i == 0 else self.checked[i - 1]
            line = f"{CHECKED if checked else UNCHECKED} {label}"
            if i == self.selected_index:
                line = self._theme.selected(line)
            rows.append(line)

        if hidden > 0:
            summary = f"and {hidden} more"
            if self.selected_index > shown:
                summary = self._theme.selected(summary)
            rows.append(summary)
        return rows

    def cursor_row(self) -> int:
        """Row of the checklist the cursor sits on."""
        return min(self.selected_index, self.visible_count() + 1)

    def render(self, buffer: TermBuffer) -> None:
        if self._needs_full_redraw:
            buffer.invalidate()
            self._needs_full_redraw = False

        for line in self._config.banner:
            buffer.push_line(self._theme.banner(line))

        buffer.push_line("")
        buffer.push_line(INSTRUCTIONS)
        buffer.push_line(self._theme.hint("-" * len(INSTRUCTIONS)))

        y_offset = buffer.lines()
        for row in self.render_rows():
            buffer.push_line(row)

        if self._status:
            buffer.push_line(self._theme.error(self._status))

        buffer.set_next_cursor((0, y_offset + self.cursor_row()))
