# src/taskui/core/intents.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class View(StrEnum):
    LIST = "list"
    ADD = "add"
    EDIT = "edit"

    @property
    def takes_text(self) -> bool:
        return self is not View.LIST


class Action(StrEnum):
    """Discrete user intents, independent of the physical keys bound to them."""

    UP = "up"
    DOWN = "down"
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"
    CONFIRM = "confirm"
    ESCAPE = "escape"
    QUIT = "quit"
    TEXT = "text"


class EditOp(StrEnum):
    INSERT = "insert"
    BACKSPACE = "backspace"
    DELETE = "delete"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    CLEAR = "clear"  # erase from line start to caret


@dataclass(frozen=True, slots=True)
class Intent:
    """
    One input event as seen by the controller.

    `text` is the printable character that produced the intent, if any.
    Command intents carry it too ("a" for ADD), so that in ADD/EDIT views
    the same key is typed into the input instead of being run as a command.
    """

    action: Action
    text: str = ""
    edit: EditOp | None = None

    @classmethod
    def typed(cls, text: str) -> Intent:
        return cls(Action.TEXT, text=text, edit=EditOp.INSERT)

    @classmethod
    def editing(cls, op: EditOp) -> Intent:
        return cls(Action.TEXT, edit=op)

    def as_text(self) -> Intent | None:
        """The TEXT intent this event means inside a text view, or None."""
        if self.action is Action.TEXT:
            return self
        if self.text and self.text.isprintable():
            return Intent.typed(self.text)
        return None
