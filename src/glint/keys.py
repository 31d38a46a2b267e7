"""Keyboard input decoding.

Turns raw terminal input (single bytes, legacy escape sequences, xterm
modified sequences, modifyOtherKeys and kitty ``CSI u`` sequences) into key
identifiers such as ``"a"``, ``"ctrl+c"``, ``"alt+enter"`` or ``"left"``.
"""

from __future__ import annotations

import re

KeyId = str


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Caps lock / num lock bits reported by kitty
LOCK_MASK = 64 + 128

CODEPOINTS: dict[int, str] = {
    27: "escape",
    9: "tab",
    13: "enter",
    32: "space",
    127: "backspace",
    57414: "enter",  # keypad enter
}

LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[Z": "shift+tab",
}

# Final byte of ``CSI 1 ; <mod> <final>`` sequences
_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

# Number of ``CSI <n> ; <mod> ~`` sequences
_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
}

_MODIFIED_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)(?::\d+)?([ABCDHF])$")
_MODIFIED_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)(?::\d+)?~$")
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")
_KITTY_CSI_U_RE = re.compile(
    r"^\x1b\[(\d+)(?::\d*(?::\d+)?)?(?:;(\d+)(?::(\d+))?)?u$"
)

_MODIFIER_ORDER = ("ctrl", "shift", "alt")


def _modifier_prefix(modifier: int) -> str:
    """Build ``"ctrl+shift+alt+"``-style prefixes from an xterm modifier field."""
    mod = (modifier - 1) & ~LOCK_MASK
    return "".join(f"{name}+" for name in _MODIFIER_ORDER if mod & MODIFIERS[name])


def _codepoint_key(codepoint: int) -> str | None:
    name = CODEPOINTS.get(codepoint)
    if name is not None:
        return name
    if 0 < codepoint <= 0x10FFFF:
        ch = chr(codepoint)
        if ch.isprintable():
            return ch.lower()
    return None


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


def parse_key(data: str) -> KeyId | None:  # noqa: C901
    """Return the key identifier for raw input *data*, or ``None``."""
    if not data:
        return None

    m = _KITTY_CSI_U_RE.match(data)
    if m:
        # Key release events are not keypresses
        if m.group(3) == "3":
            return None
        key = _codepoint_key(int(m.group(1)))
        if key is None:
            return None
        return _modifier_prefix(int(m.group(2) or 1)) + key

    m = _MODIFY_OTHER_KEYS_RE.match(data)
    if m:
        key = _codepoint_key(int(m.group(2)))
        if key is None:
            return None
        return _modifier_prefix(int(m.group(1))) + key

    m = _MODIFIED_LETTER_RE.match(data)
    if m:
        return _modifier_prefix(int(m.group(1))) + _LETTER_KEYS[m.group(2)]

    m = _MODIFIED_TILDE_RE.match(data)
    if m:
        key = _TILDE_KEYS.get(int(m.group(1)))
        if key is None:
            return None
        return _modifier_prefix(int(m.group(2))) + key

    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return "escape"
    if data == "\r" or data == "\n":
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data == "\x7f" or data == "\x08":
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch == "\r" or ch == "\n":
            return "alt+enter"
        if ch == "\x7f" or ch == "\x08":
            return "alt+backspace"
        if ch == " ":
            return "alt+space"
        if ch.isprintable():
            return "alt+" + ch.lower()

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return data

    return None


_KEY_ALIASES: dict[str, str] = {
    "esc": "escape",
    "return": "enter",
    "pageup": "pageUp",
    "pagedown": "pageDown",
}


def normalize_key_id(key_id: KeyId) -> KeyId:
    """Canonicalize *key_id*: alias names, ``ctrl+shift+alt+`` modifier order."""
    if len(key_id) == 1:
        return key_id
    *mods, base = key_id.split("+")
    if base == "" and mods:
        # "ctrl++" binds the plus key itself
        mods, base = mods[:-1], "+"
    if len(base) > 1:
        base = _KEY_ALIASES.get(base.lower(), base.lower())
    elif mods:
        base = base.lower()
    wanted = {m.lower() for m in mods}
    return "".join(f"{name}+" for name in _MODIFIER_ORDER if name in wanted) + base


def matches_key(data: str, key_id: KeyId) -> bool:
    """Check whether raw input *data* is the key *key_id*."""
    parsed = parse_key(data)
    if parsed is None:
        return False
    if parsed == key_id:
        return True
    return parsed == normalize_key_id(key_id)


def is_control_char(ch: str) -> bool:
    """C0 and C1 control characters, DEL included."""
    cp = ord(ch)
    return cp < 0x20 or 0x7F <= cp <= 0x9F


def printable_text(data: str) -> str | None:
    """Return *data* when it is text to insert rather than a control key."""
    if not data or any(is_control_char(ch) for ch in data):
        return None
    return data
