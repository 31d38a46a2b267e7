"""Terminal abstraction for raw-mode keyboard input and output.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` backed by
``sys.stdin``/``sys.stdout``.  Input is pulled one key at a time with a
blocking :meth:`ProcessTerminal.read_key`; raw mode is only held inside the
:meth:`ProcessTerminal.raw_mode` context.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import sys
import termios
import tty
from collections import deque
from contextlib import contextmanager
from typing import Iterator, Protocol

from glint.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

_SHOW_CURSOR = "\x1b[?25h"

# How long to wait for the rest of an escape sequence before treating a
# lone ESC as the escape key.
_ESCAPE_TIMEOUT = 0.05


class Terminal(Protocol):
    """Interface the prompts use to talk to the terminal."""

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def write(self, data: str) -> None: ...

    def flush(self) -> None: ...

    def read_key(self) -> str | None:
        """Block for the next keypress.

        Returns ``None`` when the wait ended without a complete key and
        raises ``EOFError`` once input is closed.
        """
        ...

    def raw_mode(self):
        """Context manager holding raw mode for its duration."""
        ...

    def suspended(self):
        """Context manager temporarily handing the terminal back to a child."""
        ...


class ProcessTerminal:
    """Concrete terminal implementation backed by the process's stdio."""

    def __init__(self) -> None:
        self._stdin_buffer = StdinBuffer()
        self._pending: deque[str] = deque()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._original_termios: list | None = None

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        sys.stdout.write(data)

    def flush(self) -> None:
        sys.stdout.flush()

    # -- input --------------------------------------------------------------

    def read_key(self) -> str | None:
        if self._pending:
            return self._pending.popleft()

        fd = sys.stdin.fileno()
        timeout = _ESCAPE_TIMEOUT if self._stdin_buffer.pending else None
        ready, _, _ = select.select([fd], [], [], timeout)

        if not ready:
            self._pending.extend(self._stdin_buffer.flush())
        else:
            raw = os.read(fd, 4096)
            if not raw:
                raise EOFError("stdin closed")
            data = self._decoder.decode(raw)
            self._pending.extend(self._stdin_buffer.process(data))

        if self._pending:
            return self._pending.popleft()
        return None

    # -- modes --------------------------------------------------------------

    @contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Enable raw mode; restore the saved attributes and cursor on exit."""
        fd = sys.stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)
        logger.debug("entered raw mode")
        try:
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._original_termios)
            self._original_termios = None
            self._stdin_buffer.clear()
            self._pending.clear()
            self.write(_SHOW_CURSOR)
            self.flush()
            logger.debug("left raw mode")

    @contextmanager
    def suspended(self) -> Iterator[None]:
        """Drop back to cooked mode while a child process owns the tty."""
        if self._original_termios is None:
            yield
            return

        fd = sys.stdin.fileno()
        raw_attrs = termios.tcgetattr(fd)
        termios.tcsetattr(fd, termios.TCSADRAIN, self._original_termios)
        self.write(_SHOW_CURSOR)
        self.flush()
        try:
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, raw_attrs)
