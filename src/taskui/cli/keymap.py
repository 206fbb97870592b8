# src/taskui/cli/keymap.py

"""
Static key -> intent mapping.

Key names follow Textual's naming ("up", "enter", "escape", "ctrl+c", "a").
The controller never sees key names, only Intents.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.intents import Action, EditOp, Intent


@dataclass(frozen=True, slots=True)
class KeyBinding:
    keys: tuple[str, ...]
    action: Action
    help_key: str
    help_text: str


@dataclass(frozen=True, slots=True)
class KeyMap:
    up: KeyBinding
    down: KeyBinding
    add: KeyBinding
    delete: KeyBinding
    edit: KeyBinding
    enter: KeyBinding
    escape: KeyBinding
    quit: KeyBinding

    def bindings(self) -> tuple[KeyBinding, ...]:
        return (
            self.up,
            self.down,
            self.add,
            self.edit,
            self.delete,
            self.enter,
            self.escape,
            self.quit,
        )

    def short_help(self) -> str:
        return " | ".join(f"{b.help_key} - {b.help_text}" for b in self.bindings())

    def resolve(self, key: str, character: str | None = None) -> Intent | None:
        """Map one key press to an Intent, or None if the key means nothing."""
        text = character if character and len(character) == 1 and character.isprintable() else ""

        for binding in self.bindings():
            if key in binding.keys:
                return Intent(binding.action, text=text)

        op = EDIT_KEYS.get(key)
        if op is not None:
            return Intent.editing(op)

        if text:
            return Intent.typed(text)
        return None


EDIT_KEYS: dict[str, EditOp] = {
    "backspace": EditOp.BACKSPACE,
    "delete": EditOp.DELETE,
    "left": EditOp.LEFT,
    "right": EditOp.RIGHT,
    "home": EditOp.HOME,
    "end": EditOp.END,
    "ctrl+u": EditOp.CLEAR,
}

DEFAULT_KEYMAP = KeyMap(
    up=KeyBinding(("k", "up"), Action.UP, "↑/k", "move up"),
    down=KeyBinding(("j", "down"), Action.DOWN, "↓/j", "move down"),
    add=KeyBinding(("a",), Action.ADD, "a", "add task"),
    delete=KeyBinding(("d",), Action.DELETE, "d", "delete task"),
    edit=KeyBinding(("e",), Action.EDIT, "e", "edit task"),
    enter=KeyBinding(("enter",), Action.CONFIRM, "enter", "confirm / toggle"),
    escape=KeyBinding(("escape",), Action.ESCAPE, "esc", "cancel"),
    quit=KeyBinding(("q", "ctrl+c"), Action.QUIT, "q", "quit"),
)
