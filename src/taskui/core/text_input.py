# src/taskui/core/text_input.py

from __future__ import annotations

from .intents import EditOp

DEFAULT_CHAR_LIMIT = 156


class TextInput:
    """
    Single-line text field state: value, caret position and a character limit.

    Pure in-memory; rendering is the renderer's job.
    """

    def __init__(self, char_limit: int = DEFAULT_CHAR_LIMIT) -> None:
        self.char_limit = max(1, int(char_limit))
        self._value = ""
        self._caret = 0

    @property
    def value(self) -> str:
        return self._value

    @property
    def caret(self) -> int:
        return self._caret

    def set_value(self, value: str) -> None:
        self._value = value[: self.char_limit]
        self._caret = len(self._value)

    def reset(self) -> None:
        self._value = ""
        self._caret = 0

    def apply(self, op: EditOp, text: str = "") -> None:
        v, c = self._value, self._caret

        if op is EditOp.INSERT:
            room = self.char_limit - len(v)
            if room <= 0 or not text:
                return
            chunk = "".join(ch for ch in text if ch.isprintable())[:room]
            self._value = v[:c] + chunk + v[c:]
            self._caret = c + len(chunk)
        elif op is EditOp.BACKSPACE:
            if c > 0:
                self._value = v[: c - 1] + v[c:]
                self._caret = c - 1
        elif op is EditOp.DELETE:
            if c < len(v):
                self._value = v[:c] + v[c + 1 :]
        elif op is EditOp.LEFT:
            self._caret = max(0, c - 1)
        elif op is EditOp.RIGHT:
            self._caret = min(len(v), c + 1)
        elif op is EditOp.HOME:
            self._caret = 0
        elif op is EditOp.END:
            self._caret = len(v)
        elif op is EditOp.CLEAR:
            self._value = v[c:]
            self._caret = 0
