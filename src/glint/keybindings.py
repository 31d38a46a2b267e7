"""Prompt keybindings manager."""

from __future__ import annotations

from typing import Literal

from glint.keys import KeyId, matches_key

PromptAction = Literal[
    # Shared
    "cancel",
    "terminate",
    "confirm",
    # Checklist
    "toggle",
    "viewDiff",
    "selectUp",
    "selectDown",
    # Message editor
    "newLine",
    "cursorUp",
    "cursorDown",
    "cursorLeft",
    "cursorRight",
    "cursorWordLeft",
    "cursorWordRight",
    "cursorLineStart",
    "cursorLineEnd",
    "deleteCharBackward",
]

PromptKeybindingsConfig = dict[PromptAction, KeyId | list[KeyId]]

DEFAULT_PROMPT_KEYBINDINGS: dict[PromptAction, KeyId | list[KeyId]] = {
    "cancel": "escape",
    "terminate": "ctrl+c",
    "confirm": "enter",
    "toggle": "space",
    "viewDiff": "d",
    "selectUp": ["up", "k"],
    "selectDown": ["down", "j"],
    "newLine": ["shift+enter", "alt+enter", "ctrl+enter"],
    "cursorUp": "up",
    "cursorDown": "down",
    "cursorLeft": "left",
    "cursorRight": "right",
    "cursorWordLeft": ["alt+left", "ctrl+left", "alt+b"],
    "cursorWordRight": ["alt+right", "ctrl+right", "alt+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    "deleteCharBackward": "backspace",
}


class PromptKeybindingsManager:
    """Maps prompt actions to the keys that trigger them."""

    def __init__(self, config: PromptKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[PromptAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: PromptKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_PROMPT_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        # User overrides replace the defaults for that action
        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, data: str, action: PromptAction) -> bool:
        """Check if input matches a specific action."""
        for key in self._action_to_keys.get(action, []):
            if matches_key(data, key):
                return True
        return False

    def get_keys(self, action: PromptAction) -> list[KeyId]:
        return self._action_to_keys.get(action, [])

    def set_config(self, config: PromptKeybindingsConfig) -> None:
        self._build_maps(config)
