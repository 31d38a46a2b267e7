"""ANSI styling for prompts and log output."""

from __future__ import annotations

from typing import Callable, Protocol

RESET = "\x1b[0m"


def _fg(code: int) -> Callable[[str], str]:
    def style(text: str) -> str:
        return f"\x1b[{code}m{text}{RESET}"

    return style


red = _fg(31)
yellow = _fg(33)
blue = _fg(34)
magenta = _fg(35)
grey = _fg(90)


class PromptTheme(Protocol):
    banner: Callable[[str], str]
    selected: Callable[[str], str]
    overflow: Callable[[str], str]
    hint: Callable[[str], str]
    error: Callable[[str], str]


class DefaultTheme:
    """Colors used when no theme is passed in."""

    banner = staticmethod(magenta)
    selected = staticmethod(blue)
    overflow = staticmethod(red)
    hint = staticmethod(grey)
    error = staticmethod(red)
