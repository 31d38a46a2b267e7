"""Grapheme-safe string helpers.

All cursor arithmetic in the prompts is done in grapheme clusters (user
perceived characters), never in code points.  These helpers convert between
grapheme offsets and ``str`` indices, split strings, step over words, and
measure terminal display width.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# CSI sequences: ESC[ <params> <final byte>
_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

_PUNCTUATION_REGEX = re.compile(r"[(){}\[\]<>.,;:'\"!?\+\-=*/\\|&%\^$#@~`]")


# ---------------------------------------------------------------------------
# Grapheme offsets
# ---------------------------------------------------------------------------


def graphemes(s: str) -> list[str]:
    """Split *s* into grapheme clusters."""
    return list(grapheme.graphemes(s))


def length(s: str) -> int:
    """Number of grapheme clusters in *s*."""
    return grapheme.length(s)


def to_index(s: str, offset: int) -> int:
    """Convert a grapheme *offset* into a ``str`` index.

    Offsets past the end of *s* map to ``len(s)``.
    """
    index = 0
    for i, g in enumerate(grapheme.graphemes(s)):
        if i >= offset:
            break
        index += len(g)
    return index


def to_range(s: str, offset: int) -> tuple[int, int]:
    """Return the ``(start, end)`` str indices of the grapheme at *offset*.

    An out-of-range offset yields an empty range at the end of *s*.
    """
    start = to_index(s, offset)
    end = start
    for g in grapheme.graphemes(s[start:]):
        end = start + len(g)
        break
    return start, end


def split_at(s: str, offset: int) -> tuple[str, str]:
    """Split *s* after *offset* graphemes."""
    index = to_index(s, offset)
    return s[:index], s[index:]


def insert(s: str, offset: int, text: str) -> str:
    """Insert *text* before the grapheme at *offset*."""
    before, after = split_at(s, offset)
    return before + text + after


def remove(s: str, offset: int) -> str:
    """Remove the single grapheme at *offset*; no-op when out of range."""
    start, end = to_range(s, offset)
    return s[:start] + s[end:]


# ---------------------------------------------------------------------------
# Word stepping
# ---------------------------------------------------------------------------


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character."""
    return char in (" ", "\t", "\n", "\r", "\f", "\v")


def is_punctuation_char(char: str) -> bool:
    """Return ``True`` if *char* is a punctuation character."""
    return bool(_PUNCTUATION_REGEX.match(char))


def _word_class(g: str) -> int:
    if is_whitespace_char(g):
        return 0
    if is_punctuation_char(g):
        return 1
    return 2


def prev_word_grapheme(s: str, offset: int) -> int:
    """Grapheme offset of the start of the word before *offset*.

    Trailing whitespace is skipped first, then one run of either word
    characters or punctuation.
    """
    before = graphemes(s)[:offset]
    while before and _word_class(before[-1]) == 0:
        before.pop()
    if before:
        kind = _word_class(before[-1])
        while before and _word_class(before[-1]) == kind:
            before.pop()
    return len(before)


def next_word_grapheme(s: str, offset: int) -> int:
    """Grapheme offset just past the word at or after *offset*."""
    parts = graphemes(s)
    pos = min(offset, len(parts))
    while pos < len(parts) and _word_class(parts[pos]) == 0:
        pos += 1
    if pos < len(parts):
        kind = _word_class(parts[pos])
        while pos < len(parts) and _word_class(parts[pos]) == kind:
            pos += 1
    return pos


# ---------------------------------------------------------------------------
# Display width
# ---------------------------------------------------------------------------


def _grapheme_width(g: str) -> int:
    """Terminal columns taken by a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        # VS16, ZWJ, skin tones, regional indicators
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first)[0] == "M" or unicodedata.category(first) == "Cf":
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def width(text: str) -> int:
    """Visible terminal width of *text*, ignoring SGR escape codes."""
    stripped = strip_ansi(text)
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)
    return sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))


def truncate(text: str, max_graphemes: int) -> str:
    """Cut *text* down to at most *max_graphemes* graphemes."""
    return split_at(text, max_graphemes)[0]


def truncate_to_width(text: str, max_width: int) -> str:
    """Cut *text* to *max_width* terminal columns, keeping SGR codes intact.

    A reset is appended when styled text had to be cut so the style does
    not leak into the rest of the row.
    """
    if width(text) <= max_width:
        return text

    out: list[str] = []
    used = 0
    pos = 0
    while pos < len(text):
        m = _ANSI_RE.match(text, pos)
        if m:
            out.append(m.group())
            pos = m.end()
            continue
        end = _ANSI_RE.search(text, pos)
        plain = text[pos:end.start() if end else len(text)]
        for g in grapheme.graphemes(plain):
            w = _grapheme_width(g)
            if used + w > max_width:
                return "".join(out) + "\x1b[0m"
            out.append(g)
            used += w
        pos += len(plain)
    return "".join(out)
