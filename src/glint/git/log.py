"""Parser for ``git log --raw --pretty=raw`` output.

The parser is a small state machine.  Each state is a frozen dataclass and
:func:`transition` maps ``(state, line)`` to the next state without mutating
anything; :func:`extract` pulls a finished :class:`CommitRecord` out of a
:class:`Complete` state.  :func:`iter_logs` and :func:`parse_logs` drive the
machine over a sequence of lines.

A raw entry looks like::

    commit 18d90e52cf8d6a486bee299b3949ebd213c85f2a
    tree f221c23e63d1fe5b52d5acf39599fa02e2a69fc0
    parent 089918cea42077b499ff092113ced60451214912
    author A U Thor <a@example.com> 1568585467 -0700
    committer A U Thor <a@example.com> 1568585467 -0700

        docs(gif): updates usage gif

    :100644 100644 6bbe237 4fe5fc6 M	assets/usage.gif

Lines that do not fit the current state are skipped, so leading garbage
and unknown footer lines are tolerated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Union

_HEADER_PREFIX = "commit "
_COMMITTER_PREFIX = "committer "
_INDENT = 4

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_DIGITS_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class CommitRecord:
    """One parsed history entry."""

    commit: str
    epoch_secs: int
    message: str
    files: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Parser states
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SeekingHeader:
    pass


@dataclass(frozen=True)
class HeaderSeen:
    commit: str


@dataclass(frozen=True)
class TimestampSeen:
    commit: str
    epoch_secs: int


@dataclass(frozen=True)
class AwaitingBody:
    commit: str
    epoch_secs: int


@dataclass(frozen=True)
class AccumulatingBody:
    commit: str
    epoch_secs: int
    message: str
    files: tuple[str, ...] = field(default=())


@dataclass(frozen=True)
class Complete:
    # ``None`` is reserved for abandoning an entry; no transition produces it.
    record: CommitRecord | None = None


ParserState = Union[
    SeekingHeader,
    HeaderSeen,
    TimestampSeen,
    AwaitingBody,
    AccumulatingBody,
    Complete,
]


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------


def _strip_indent(line: str) -> str | None:
    """Return *line* without its 4-column body indent, or ``None``."""
    if len(line) >= _INDENT and line[:_INDENT].isspace():
        return line[_INDENT:]
    return None


def _committer_time(line: str) -> int | None:
    """Find the epoch seconds on a ``committer`` line, scanning right to left."""
    for word in reversed(line.split()):
        if not word[0].isascii() or not word[0].isdigit():
            continue
        if not _DIGITS_RE.fullmatch(word):
            continue
        value = int(word)
        if _INT64_MIN <= value <= _INT64_MAX:
            return value
    return None


def _chomp(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


def transition(state: ParserState, line: str) -> ParserState:
    """Return the state that follows *state* after reading *line*."""
    if isinstance(state, SeekingHeader):
        if line.startswith(_HEADER_PREFIX):
            return HeaderSeen(line[len(_HEADER_PREFIX):])
        return state

    if isinstance(state, HeaderSeen):
        if line.startswith(_COMMITTER_PREFIX):
            epoch_secs = _committer_time(line)
            if epoch_secs is not None:
                return TimestampSeen(state.commit, epoch_secs)
        return state

    if isinstance(state, TimestampSeen):
        if line == "":
            return AwaitingBody(state.commit, state.epoch_secs)
        return state

    if isinstance(state, AwaitingBody):
        stripped = _strip_indent(line)
        return AccumulatingBody(
            state.commit,
            state.epoch_secs,
            stripped if stripped is not None else line,
        )

    if isinstance(state, AccumulatingBody):
        return _accumulate(state, line)

    return state


def _accumulate(state: AccumulatingBody, line: str) -> ParserState:
    if line == "" and not state.files:
        # Blank line inside the message body
        return AccumulatingBody(
            state.commit, state.epoch_secs, state.message + "\n", state.files
        )

    stripped = _strip_indent(line)
    if stripped is not None:
        message = state.message + "\n" + stripped if state.message else stripped
        return AccumulatingBody(state.commit, state.epoch_secs, message, state.files)

    if line.startswith(":"):
        path = line.split()[-1]
        return AccumulatingBody(
            state.commit, state.epoch_secs, state.message, state.files + (path,)
        )

    if line == "":
        return Complete(
            CommitRecord(
                commit=state.commit,
                epoch_secs=state.epoch_secs,
                message=state.message.rstrip(),
                files=state.files,
            )
        )

    return state


def extract(state: ParserState) -> tuple[ParserState, CommitRecord | None]:
    """Reset a :class:`Complete` state, handing back its record.

    Any other state is returned unchanged with no record.
    """
    if isinstance(state, Complete):
        return SeekingHeader(), state.record
    return state, None


# ---------------------------------------------------------------------------
# Drivers
# ---------------------------------------------------------------------------


def iter_logs(lines: Iterable[str]) -> Iterator[CommitRecord]:
    """Yield records as entries complete.

    An entry still open when *lines* runs out is dropped.
    """
    state: ParserState = SeekingHeader()
    for line in lines:
        state, record = extract(transition(state, _chomp(line)))
        if record is not None:
            yield record


def parse_logs(lines: Iterable[str]) -> list[CommitRecord]:
    """Parse every complete entry in *lines*."""
    return list(iter_logs(lines))
