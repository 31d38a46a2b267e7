"""Shared event loop for the interactive prompts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from glint.config import Config
from glint.keybindings import PromptKeybindingsManager
from glint.term_buffer import TermBuffer
from glint.theme import DefaultTheme, PromptTheme

if TYPE_CHECKING:
    from glint.terminal import Terminal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cancelled:
    """The user backed out with escape."""


@dataclass(frozen=True)
class Terminated:
    """The user hit ctrl-c, or input was closed."""


R = TypeVar("R")


class Prompt(Generic[R]):
    """An interactive session that owns the terminal until it returns.

    Subclasses implement :meth:`handle_input`, returning a result to end the
    session or ``None`` to keep going, and :meth:`render`, which pushes the
    whole frame into the buffer.
    """

    def __init__(
        self,
        terminal: Terminal,
        *,
        config: Config | None = None,
        theme: PromptTheme | None = None,
    ) -> None:
        self._terminal = terminal
        self._config = config or Config()
        self._theme: PromptTheme = theme or DefaultTheme()
        self._keys = PromptKeybindingsManager(self._config.keybindings)  # type: ignore[arg-type]

    def handle_input(self, data: str) -> R | Cancelled | Terminated | None:
        raise NotImplementedError

    def render(self, buffer: TermBuffer) -> None:
        raise NotImplementedError

    def run(self) -> R | Cancelled | Terminated:
        """Paint once, then handle one key and repaint until a result."""
        buffer = TermBuffer(self._terminal)
        with self._terminal.raw_mode():
            try:
                first_iteration = True
                while True:
                    if first_iteration:
                        first_iteration = False
                    else:
                        try:
                            data = self._terminal.read_key()
                        except EOFError:
                            logger.debug("input closed")
                            return Terminated()
                        if data is None:
                            continue

                        result = self.handle_input(data)
                        if result is not None:
                            return result

                    self.render(buffer)
                    buffer.render_frame()
                    buffer.flush()
            finally:
                buffer.finish()
