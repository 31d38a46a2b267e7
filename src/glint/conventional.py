"""Conventional-commit header parsing (``type(scope)!: subject``)."""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEADER_RE = re.compile(
    r"^(?P<ty>[A-Za-z][A-Za-z0-9_-]*)"
    r"(?:\((?P<scope>[^()\n]*)\))?"
    r"(?P<breaking>!)?"
    r": ?(?P<message>.*)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class Conventional:
    ty: str
    scope: str | None
    message: str
    breaking: bool = False


def parse_conventional(message: str) -> Conventional | None:
    """Split *message* into type, scope and the rest, or ``None``."""
    m = _HEADER_RE.match(message)
    if m is None:
        return None
    return Conventional(
        ty=m.group("ty"),
        scope=m.group("scope") or None,
        message=m.group("message"),
        breaking=m.group("breaking") is not None,
    )
