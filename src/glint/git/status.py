"""Parsing of ``git status --porcelain -z`` output."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StatusItem:
    """One changed path in the working tree."""

    index: str
    worktree: str
    path: str
    orig_path: str | None = None

    def label(self) -> str:
        if self.orig_path:
            return f"{self.orig_path} -> {self.path}"
        return self.path


def parse_status(output: str) -> list[StatusItem]:
    """Parse NUL-separated porcelain v1 entries.

    Renames and copies are followed by an extra entry holding the source path.
    """
    items: list[StatusItem] = []
    entries = iter(output.split("\0"))
    for entry in entries:
        if len(entry) < 4:
            continue
        index, worktree, path = entry[0], entry[1], entry[3:]
        orig_path = None
        if index in ("R", "C"):
            orig_path = next(entries, None)
        items.append(StatusItem(index, worktree, path, orig_path))
    return items
