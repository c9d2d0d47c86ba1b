"""Curses front end for the kata browser.

Translates terminal keys into state-machine events and paints AppState.
Layout: search panel on the left (30%), results on the right, the download
modal drawn over the results, one status line at the bottom.
"""
from __future__ import annotations

import curses
from typing import List, Optional, Union

from kata_api.catalog import option_label
from kata_api.query import FilterField

from .input_field import InputField
from .state_machine import (
    AppState,
    DownloadStep,
    Event,
    FIELD_CYCLE,
    InteractionMode,
    Key,
    SELECT_MODES,
)
from .stateful_list import StatefulList

APP_KEYS_DESC = [
    "s / Tab     search panel",
    "S           search",
    "l / Right   result list",
    "Tab/S-Tab   next/previous field",
    "Enter       open dropdown / confirm",
    "o           open kata in browser",
    "d           download selected kata",
    "Esc         back",
    "q           quit",
]

_SPECIAL_KEYS = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    curses.KEY_BTAB: Key.BACKTAB,
    curses.KEY_BACKSPACE: Key.BACKSPACE,
    curses.KEY_DC: Key.DELETE,
    curses.KEY_HOME: Key.HOME,
    curses.KEY_END: Key.END,
    curses.KEY_ENTER: Key.ENTER,
}

_CONTROL_CHARS = {
    "\t": Key.TAB,
    "\n": Key.ENTER,
    "\r": Key.ENTER,
    "\x1b": Key.ESC,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
}

_FIELD_LABELS = {
    InteractionMode.SORT_SELECT: "Sort By",
    InteractionMode.LANGUAGE_SELECT: "Language",
    InteractionMode.DIFFICULTY_SELECT: "Difficulty",
    InteractionMode.TAG_SELECT: "Tags",
}


def translate_key(ch: Union[int, str]) -> Optional[Event]:
    """Map a curses get_wch() value to an Event (None for keys without meaning)."""
    if isinstance(ch, int):
        key = _SPECIAL_KEYS.get(ch)
        return Event(key) if key else None
    if ch in _CONTROL_CHARS:
        return Event(_CONTROL_CHARS[ch])
    if ch.isprintable():
        return Event.of_char(ch)
    return None


def _put(win, y: int, x: int, text: str, attr: int = 0) -> None:
    height, width = win.getmaxyx()
    if y < 0 or y >= height or x >= width:
        return
    try:
        win.addnstr(y, x, text, max(0, width - x - 1), attr)
    except curses.error:
        # Writing the bottom-right cell raises after drawing
        pass


def visible_window(lst: StatefulList, rows: int) -> range:
    """Indexes to draw so that the cursor stays on screen."""
    if rows <= 0 or lst.is_empty():
        return range(0)
    start = max(0, lst.cursor - rows + 1)
    return range(start, min(len(lst), start + rows))


class ConsoleUI:
    """Paints AppState onto a curses screen."""

    def __init__(self, stdscr):
        self.stdscr = stdscr
        curses.curs_set(0)
        stdscr.keypad(True)
        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(1, curses.COLOR_YELLOW, -1)
            curses.init_pair(2, curses.COLOR_GREEN, -1)
            curses.init_pair(3, curses.COLOR_RED, -1)
        self.active_attr = curses.color_pair(1) | curses.A_BOLD
        self.ok_attr = curses.color_pair(2)
        self.error_attr = curses.color_pair(3)

    def read_event(self) -> Optional[Event]:
        try:
            ch = self.stdscr.get_wch()
        except curses.error:
            return None
        if ch == curses.KEY_RESIZE:
            return None
        return translate_key(ch)

    def render(self, state: AppState) -> None:
        scr = self.stdscr
        scr.erase()
        height, width = scr.getmaxyx()
        left_w = max(20, width * 30 // 100)

        self._draw_search_panel(state, 0, 0, height - 1, left_w)
        self._draw_results(state, 0, left_w + 1, height - 1, width - left_w - 1)
        if state.download.active:
            self._draw_download_modal(state, 2, left_w + 3, height - 5, width - left_w - 6)
        _put(scr, height - 1, 0, state.status_message, self.ok_attr)
        scr.refresh()

    def _field_line(self, label: str, value: str, active: bool) -> tuple:
        marker = ">" if active else " "
        return f"{marker} {label:<11} {value}", self.active_attr if active else 0

    def _input_text(self, field: InputField, active: bool) -> str:
        if not active:
            return field.value
        return field.value[: field.cursor] + "|" + field.value[field.cursor :]

    def _draw_search_panel(self, state: AppState, y: int, x: int, h: int, w: int) -> None:
        scr = self.stdscr
        _put(scr, y, x, " Search Katas ".center(w, "-"), curses.A_BOLD)
        row = y + 2

        if state.dropdown is not None:
            dropdown = state.dropdown
            _put(scr, row, x + 1, dropdown.field.title, curses.A_BOLD)
            for i in visible_window(dropdown.options, h - row - 2):
                row += 1
                is_active = i == dropdown.options.cursor
                text = (">> " if is_active else "   ") + dropdown.options.items[i]
                _put(scr, row, x + 1, text, self.active_attr if is_active else 0)
            return

        for line in APP_KEYS_DESC:
            _put(scr, row, x + 1, line, curses.A_DIM)
            row += 1
        row += 1

        for mode in FIELD_CYCLE:
            active = state.mode is mode
            if mode is InteractionMode.SEARCH_INPUT:
                text, attr = self._field_line("Search", self._input_text(state.search, active), active)
            else:
                filter_field: FilterField = SELECT_MODES[mode]
                value = option_label(filter_field.options, filter_field.get(state.filters))
                text, attr = self._field_line(_FIELD_LABELS[mode], value, active)
            _put(scr, row, x + 1, text, attr)
            row += 2

    def _draw_results(self, state: AppState, y: int, x: int, h: int, w: int) -> None:
        scr = self.stdscr
        _put(scr, y, x, f" List of katas ({len(state.results)}) ".center(w, "-"), curses.A_BOLD)
        list_active = state.mode is InteractionMode.RESULT_LIST
        rows_per_item = 3
        row = y + 2
        for i in visible_window(state.results, max(1, (h - 2) // rows_per_item)):
            kata = state.results.items[i]
            is_active = list_active and i == state.results.cursor
            attr = self.active_attr if is_active else 0
            _put(scr, row, x + 1, f"{'>>' if is_active else '  '} [{kata.rank}] {kata.name}", attr)
            _put(
                scr, row + 1, x + 4,
                f"by {kata.author or '?'} - {kata.total_completed:,} completed - {', '.join(kata.languages)}",
                curses.A_DIM,
            )
            if kata.tags:
                _put(scr, row + 2, x + 4, " ".join(f"#{t}" for t in kata.tags), curses.A_DIM)
            row += rows_per_item

    def _draw_download_modal(self, state: AppState, y: int, x: int, h: int, w: int) -> None:
        scr = self.stdscr
        modal = state.download
        kata = state.results.items[modal.kata_index] if modal.kata_index < len(state.results) else None
        for r in range(y, y + h):
            _put(scr, r, x, " " * w)
        _put(scr, y, x, f" Download {kata.name if kata else ''} ".center(w, "="), curses.A_BOLD)

        row = y + 2
        choosing = modal.step is DownloadStep.CHOOSING_LANGUAGE
        text, attr = self._field_line("Language", modal.languages.selected or "", choosing)
        _put(scr, row, x + 1, text, attr)
        if choosing:
            for i in visible_window(modal.languages, 5):
                row += 1
                mark = ">> " if i == modal.languages.cursor else "   "
                _put(scr, row, x + 15, mark + modal.languages.items[i])
        row += 2

        editing_path = modal.step is DownloadStep.EDITING_PATH
        text, attr = self._field_line("Path", self._input_text(modal.path, editing_path), editing_path)
        _put(scr, row, x + 1, text, attr)
        if editing_path:
            for i in visible_window(modal.path.suggestions, 5):
                row += 1
                mark = ">> " if i == modal.path.suggestions.cursor else "   "
                _put(scr, row, x + 15, mark + modal.path.suggestions.items[i], curses.A_DIM)
        row += 2

        editing_editor = modal.step is DownloadStep.EDITING_EDITOR_COMMAND
        text, attr = self._field_line(
            "Editor", self._input_text(modal.editor, editing_editor), editing_editor
        )
        _put(scr, row, x + 1, text, attr)
        row += 2

        confirming = modal.step is DownloadStep.CONFIRM_SUBMIT
        _put(scr, row, x + 1, "[ Download ]", self.active_attr if confirming else 0)
        row += 2

        errors: List[str] = modal.errors
        for message in errors:
            _put(scr, row, x + 1, message, self.error_attr)
            row += 1


__all__ = ["APP_KEYS_DESC", "ConsoleUI", "translate_key", "visible_window"]
