"""Unit tests for kata_cli.console_ui helpers that do not need a terminal."""
from __future__ import annotations

import curses

from kata_cli.console_ui import translate_key, visible_window
from kata_cli.state_machine import Event, Key
from kata_cli.stateful_list import StatefulList


class TestTranslateKey:
    """Tests for translate_key function."""

    def test_special_keys(self):
        """curses key codes map to abstract keys."""
        assert translate_key(curses.KEY_UP) == Event(Key.UP)
        assert translate_key(curses.KEY_BTAB) == Event(Key.BACKTAB)
        assert translate_key(curses.KEY_BACKSPACE) == Event(Key.BACKSPACE)

    def test_control_characters(self):
        """Tab, Enter, Esc and DEL are recognised."""
        assert translate_key("\t") == Event(Key.TAB)
        assert translate_key("\n") == Event(Key.ENTER)
        assert translate_key("\x1b") == Event(Key.ESC)
        assert translate_key("\x7f") == Event(Key.BACKSPACE)

    def test_printable_characters(self):
        """Printable characters become CHAR events."""
        assert translate_key("q") == Event.of_char("q")
        assert translate_key("é") == Event.of_char("é")

    def test_unknown_keys_ignored(self):
        """Unmapped codes and control characters yield None."""
        assert translate_key(curses.KEY_F5) is None
        assert translate_key("\x01") is None


class TestVisibleWindow:
    """Tests for visible_window function."""

    def test_fits(self):
        """Short lists are shown whole."""
        lst = StatefulList.with_items(["a", "b"])
        assert list(visible_window(lst, 5)) == [0, 1]

    def test_scrolls_with_cursor(self):
        """The cursor row stays inside the window."""
        lst = StatefulList.with_items(list("abcdefgh"), 6)
        assert list(visible_window(lst, 3)) == [4, 5, 6]

    def test_empty(self):
        """Empty lists and zero rows draw nothing."""
        assert list(visible_window(StatefulList(), 3)) == []
        assert list(visible_window(StatefulList.with_items(["a"]), 0)) == []
