"""Editable text buffer with an explicit cursor and a suggestion list."""
from __future__ import annotations

from typing import Iterable

from .stateful_list import StatefulList


class InputField:
    """Single-line text input.

    ``cursor`` is an offset into ``value`` and always lies in
    [0, len(value)]. ``suggestions`` holds completion candidates for fields
    that offer them (the download path).
    """

    def __init__(self, value: str = ""):
        self.value = value
        self.cursor = len(value)
        self.suggestions: StatefulList[str] = StatefulList()

    @property
    def cursor_at_end(self) -> bool:
        return self.cursor == len(self.value)

    def set_value(self, value: str) -> None:
        """Replace the text and move the cursor to the end."""
        self.value = value
        self.cursor = len(value)

    def insert(self, ch: str) -> None:
        self.insert_text(ch)

    def insert_text(self, text: str) -> None:
        """Insert text at the cursor (typing and paste)."""
        if not text:
            return
        self.value = self.value[: self.cursor] + text + self.value[self.cursor :]
        self.cursor += len(text)

    def backspace(self) -> None:
        """Remove the character before the cursor."""
        if self.cursor <= 0:
            return
        self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
        self.cursor -= 1

    def delete(self) -> None:
        """Remove the character under the cursor."""
        if self.cursor >= len(self.value):
            return
        self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]

    def move_left(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_right(self) -> None:
        if self.cursor < len(self.value):
            self.cursor += 1

    def move_home(self) -> None:
        self.cursor = 0

    def move_end(self) -> None:
        self.cursor = len(self.value)

    def set_suggestions(self, suggestions: Iterable[str]) -> None:
        self.suggestions = StatefulList.with_items(list(suggestions), 0)

    def clear_suggestions(self) -> None:
        self.suggestions = StatefulList()

    def __repr__(self) -> str:
        return f"InputField(value={self.value!r}, cursor={self.cursor})"


__all__ = ["InputField"]
