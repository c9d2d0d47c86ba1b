"""Interaction state machine for the kata browser.

All UI-facing state lives in one AppState. InteractionStateMachine.handle()
consumes one input event at a time, mutates the state synchronously and
calls out to injected collaborators for searches, downloads and URL opening.
Nothing here touches the terminal, so transitions can be driven directly
from tests.

Modes (keyboard focus):
    NORMAL -> SEARCH_INPUT -> SORT -> LANGUAGE -> DIFFICULTY -> TAG -> (SEARCH_INPUT)
    RESULT_LIST for browsing results; the download modal lives on top of it.

Dropdowns may only be open while a select mode is active. The download modal
walks CHOOSING_LANGUAGE -> EDITING_PATH -> EDITING_EDITOR_COMMAND ->
CONFIRM_SUBMIT, with backward moves allowed and ESC closing it from any step.
"""
from __future__ import annotations

import logging
import webbrowser
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from kata_api.catalog import LANGUAGES, option_label
from kata_api.core.config import get_download_config
from kata_api.core.naming import language_path_segment
from kata_api.core.network import fetch_page
from kata_api.model import ChallengePreview, FilesystemError, KataError
from kata_api.parser import parse_search_results
from kata_api.query import FilterField, FilterState, build_search_url

from .autocomplete import ListDirectory, accept_suggestion, list_directory, update_suggestions
from .download import DownloadPipeline
from .input_field import InputField
from .settings import Settings, SettingsStore
from .stateful_list import StatefulList

logger = logging.getLogger(__name__)


class InteractionMode(Enum):
    """UI region that currently owns keyboard focus."""

    NORMAL = "normal"
    SEARCH_INPUT = "search_input"
    SORT_SELECT = "sort_select"
    LANGUAGE_SELECT = "language_select"
    DIFFICULTY_SELECT = "difficulty_select"
    TAG_SELECT = "tag_select"
    RESULT_LIST = "result_list"


class DownloadStep(Enum):
    """Download modal sub-state."""

    DISABLED = "disabled"
    CHOOSING_LANGUAGE = "choosing_language"
    EDITING_PATH = "editing_path"
    EDITING_EDITOR_COMMAND = "editing_editor_command"
    CONFIRM_SUBMIT = "confirm_submit"


class Key(Enum):
    """Abstract input keys; the front end translates terminal input into these."""

    CHAR = "char"
    ENTER = "enter"
    ESC = "esc"
    TAB = "tab"
    BACKTAB = "backtab"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    BACKSPACE = "backspace"
    DELETE = "delete"
    HOME = "home"
    END = "end"
    PASTE = "paste"


@dataclass(frozen=True)
class Event:
    """One input event. ``char`` is set for CHAR, ``text`` for PASTE."""

    key: Key
    char: str = ""
    text: str = ""

    @classmethod
    def of_char(cls, ch: str) -> "Event":
        return cls(Key.CHAR, char=ch)

    @classmethod
    def paste(cls, text: str) -> "Event":
        return cls(Key.PASTE, text=text)


SELECT_MODES = {
    InteractionMode.SORT_SELECT: FilterField.SORT,
    InteractionMode.LANGUAGE_SELECT: FilterField.LANGUAGE,
    InteractionMode.DIFFICULTY_SELECT: FilterField.DIFFICULTY,
    InteractionMode.TAG_SELECT: FilterField.TAG,
}

# Tab order of the search panel
FIELD_CYCLE = (
    InteractionMode.SEARCH_INPUT,
    InteractionMode.SORT_SELECT,
    InteractionMode.LANGUAGE_SELECT,
    InteractionMode.DIFFICULTY_SELECT,
    InteractionMode.TAG_SELECT,
)

MODAL_STEPS = (
    DownloadStep.CHOOSING_LANGUAGE,
    DownloadStep.EDITING_PATH,
    DownloadStep.EDITING_EDITOR_COMMAND,
    DownloadStep.CONFIRM_SUBMIT,
)


@dataclass
class Dropdown:
    """An open dropdown over one filter field's option table."""

    field: FilterField
    options: StatefulList[str]


@dataclass
class DownloadModal:
    step: DownloadStep = DownloadStep.DISABLED
    kata_index: int = 0
    languages: StatefulList[str] = field(default_factory=StatefulList)
    path: InputField = field(default_factory=InputField)
    editor: InputField = field(default_factory=InputField)
    errors: List[str] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self.step is not DownloadStep.DISABLED


@dataclass
class AppState:
    mode: InteractionMode = InteractionMode.NORMAL
    filters: FilterState = field(default_factory=FilterState)
    search: InputField = field(default_factory=InputField)
    dropdown: Optional[Dropdown] = None
    results: StatefulList[ChallengePreview] = field(default_factory=StatefulList)
    download: DownloadModal = field(default_factory=DownloadModal)
    status_message: str = ""
    settings_loaded: bool = False
    search_seq: int = 0


@dataclass
class Services:
    """External collaborators used by the state machine."""

    fetch_page: Callable[[str], str] = fetch_page
    parse_results: Callable[[str], List[ChallengePreview]] = parse_search_results
    build_url: Callable[[FilterState], str] = build_search_url
    pipeline: DownloadPipeline = field(default_factory=DownloadPipeline)
    list_directory: ListDirectory = list_directory
    open_url: Callable[[str], object] = webbrowser.open
    settings: SettingsStore = field(default_factory=SettingsStore)


class InteractionStateMachine:
    """Owns AppState and applies input events to it."""

    def __init__(self, services: Optional[Services] = None, state: Optional[AppState] = None):
        self.services = services or Services()
        self.state = state or AppState()

    # ------------------------------------------------------------------
    # Mode and dropdown transitions
    # ------------------------------------------------------------------

    def change_mode(self, mode: InteractionMode) -> None:
        self.state.mode = mode
        if mode not in SELECT_MODES:
            self.close_dropdown()

    def _cycle_field(self, step: int) -> None:
        try:
            idx = FIELD_CYCLE.index(self.state.mode)
        except ValueError:
            return
        self.change_mode(FIELD_CYCLE[(idx + step) % len(FIELD_CYCLE)])

    def open_dropdown(self) -> None:
        """Show the option table for the active select mode, starting at the committed value."""
        filter_field = SELECT_MODES.get(self.state.mode)
        if filter_field is None:
            return
        options = StatefulList.with_items(filter_field.options, filter_field.get(self.state.filters))
        self.state.dropdown = Dropdown(field=filter_field, options=options)

    def close_dropdown(self) -> None:
        self.state.dropdown = None

    def confirm_dropdown(self) -> None:
        """Commit the dropdown cursor into its filter field and search again."""
        dropdown = self.state.dropdown
        if dropdown is None:
            return
        dropdown.field.set(self.state.filters, dropdown.options.cursor)
        self.close_dropdown()
        self.submit_search()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def submit_search(self) -> bool:
        """Run a search with the current filters.

        On failure the previous results and mode are left untouched.

        Returns:
            True if the result list was replaced
        """
        self.state.filters.query = self.state.search.value
        self.state.search_seq += 1
        seq = self.state.search_seq

        url = self.services.build_url(self.state.filters)
        logger.info("Searching %s", url)
        try:
            html = self.services.fetch_page(url)
            results = self.services.parse_results(html)
        except KataError as e:
            logger.warning("Search failed: %s", e.message)
            self.state.status_message = f"Search failed: {e.message}"
            return False

        if seq != self.state.search_seq:
            logger.debug("Discarding stale search response #%d", seq)
            return False

        if self.state.download.active:
            self.close_download_modal()
        self.state.results = StatefulList.with_items(results, 0)
        self.state.status_message = f"{len(results)} kata(s) found"
        self.change_mode(InteractionMode.RESULT_LIST)
        return True

    # ------------------------------------------------------------------
    # Result list
    # ------------------------------------------------------------------

    def open_selected(self) -> None:
        kata = self.state.results.selected
        if kata is None:
            return
        try:
            self.services.open_url(kata.url)
        except (OSError, webbrowser.Error) as e:
            logger.warning("Could not open %s: %s", kata.url, e)
            self.state.status_message = f"Could not open {kata.url}: {e}"

    # ------------------------------------------------------------------
    # Download modal
    # ------------------------------------------------------------------

    def _prefill_download_fields(self) -> None:
        modal = self.state.download
        dl = get_download_config()
        settings = self.services.settings.load()
        modal.path.set_value(settings.download_path or dl["default_path"])
        modal.editor.set_value(settings.editor_command or dl["default_editor"])
        self.state.settings_loaded = True

    def open_download_modal(self) -> bool:
        """Start the download modal for the selected kata."""
        kata = self.state.results.selected
        if kata is None:
            return False
        if not kata.languages:
            self.state.status_message = f"No downloadable language for {kata.name}"
            return False

        modal = self.state.download
        wanted = language_path_segment(option_label(LANGUAGES, self.state.filters.language))
        initial = kata.languages.index(wanted) if wanted in kata.languages else 0
        modal.languages = StatefulList.with_items(kata.languages, initial)
        modal.kata_index = self.state.results.cursor
        modal.errors = []
        if not self.state.settings_loaded:
            self._prefill_download_fields()
        modal.step = DownloadStep.CHOOSING_LANGUAGE
        return True

    def close_download_modal(self) -> None:
        modal = self.state.download
        modal.step = DownloadStep.DISABLED
        modal.languages = StatefulList()
        modal.path.clear_suggestions()
        modal.errors = []

    def _set_modal_step(self, step: DownloadStep) -> None:
        modal = self.state.download
        modal.step = step
        if step is DownloadStep.EDITING_PATH:
            self._refresh_path_suggestions()
        else:
            modal.path.clear_suggestions()

    def advance_modal(self) -> None:
        idx = MODAL_STEPS.index(self.state.download.step)
        if idx < len(MODAL_STEPS) - 1:
            self._set_modal_step(MODAL_STEPS[idx + 1])

    def retreat_modal(self) -> None:
        idx = MODAL_STEPS.index(self.state.download.step)
        if idx > 0:
            self._set_modal_step(MODAL_STEPS[idx - 1])

    def _refresh_path_suggestions(self) -> None:
        update_suggestions(self.state.download.path, self.services.list_directory)

    def submit_download(self) -> bool:
        """Run the download pipeline for the modal's kata and language.

        Success closes the modal and stores path/editor as new defaults.
        Failure keeps the modal on CONFIRM_SUBMIT with the error listed.
        """
        modal = self.state.download
        if not 0 <= modal.kata_index < len(self.state.results):
            self.close_download_modal()
            return False
        kata = self.state.results.items[modal.kata_index]
        language = modal.languages.selected
        path = modal.path.value.strip()
        editor = modal.editor.value.strip()

        if language is None:
            modal.errors = ["No language selected"]
            return False
        if not path:
            modal.errors = ["Download path is empty"]
            return False

        try:
            result = self.services.pipeline.run(
                kata.id, kata.name, language, path, editor_command=editor or None, url=kata.url
            )
        except KataError as e:
            logger.error("Download of %s failed: %s", kata.id, e.message)
            modal.errors = [e.message]
            self.state.status_message = f"Download failed: {e.message}"
            return False

        try:
            self.services.settings.save(Settings(editor_command=editor, download_path=path))
        except FilesystemError as e:
            logger.warning("Settings not saved: %s", e.message)

        self.close_download_modal()
        self.state.status_message = f"Downloaded {kata.name} to {result.directory}"
        return True

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    def handle(self, event: Event) -> bool:
        """Apply one input event.

        Returns:
            False when the user asked to quit, True otherwise
        """
        if self.state.dropdown is not None:
            self._handle_dropdown(event)
            return True

        mode = self.state.mode
        if mode is InteractionMode.NORMAL:
            return self._handle_normal(event)
        if mode is InteractionMode.SEARCH_INPUT:
            self._handle_search_input(event)
        elif mode in SELECT_MODES:
            self._handle_select(event)
        elif mode is InteractionMode.RESULT_LIST:
            if self.state.download.active:
                self._handle_download_modal(event)
            else:
                return self._handle_result_list(event)
        return True

    def _handle_dropdown(self, event: Event) -> None:
        options = self.state.dropdown.options
        if event.key is Key.UP:
            options.previous()
        elif event.key is Key.DOWN:
            options.next()
        elif event.key is Key.ENTER:
            self.confirm_dropdown()
        elif event.key is Key.ESC:
            self.close_dropdown()

    def _handle_normal(self, event: Event) -> bool:
        if event.key is Key.CHAR:
            if event.char == "q":
                return False
            if event.char == "s":
                self.change_mode(InteractionMode.SEARCH_INPUT)
            elif event.char == "S":
                self.submit_search()
            elif event.char == "l" and not self.state.results.is_empty():
                self.change_mode(InteractionMode.RESULT_LIST)
        elif event.key is Key.TAB:
            self.change_mode(InteractionMode.SEARCH_INPUT)
        elif event.key is Key.RIGHT and not self.state.results.is_empty():
            self.change_mode(InteractionMode.RESULT_LIST)
        return True

    def _handle_search_input(self, event: Event) -> None:
        if event.key is Key.ENTER:
            self.submit_search()
        elif event.key in (Key.TAB, Key.DOWN):
            self._cycle_field(1)
        elif event.key is Key.BACKTAB:
            self._cycle_field(-1)
        elif event.key is Key.ESC:
            self.change_mode(InteractionMode.NORMAL)
        else:
            _edit_field(self.state.search, event)

    def _handle_select(self, event: Event) -> None:
        if event.key is Key.ENTER:
            self.open_dropdown()
        elif event.key in (Key.TAB, Key.DOWN):
            self._cycle_field(1)
        elif event.key in (Key.BACKTAB, Key.UP):
            self._cycle_field(-1)
        elif event.key is Key.ESC:
            self.change_mode(InteractionMode.NORMAL)

    def _handle_result_list(self, event: Event) -> bool:
        results = self.state.results
        if event.key is Key.UP:
            results.previous()
        elif event.key is Key.DOWN:
            results.next()
        elif event.key is Key.ENTER:
            self.open_selected()
        elif event.key in (Key.ESC, Key.LEFT):
            self.change_mode(InteractionMode.NORMAL)
        elif event.key is Key.CHAR:
            if event.char == "q":
                return False
            if event.char == "o":
                self.open_selected()
            elif event.char == "d":
                self.open_download_modal()
        return True

    def _handle_download_modal(self, event: Event) -> None:
        modal = self.state.download
        if event.key is Key.ESC:
            self.close_download_modal()
            return

        step = modal.step
        if step is DownloadStep.CHOOSING_LANGUAGE:
            if event.key is Key.UP:
                modal.languages.previous()
            elif event.key is Key.DOWN:
                modal.languages.next()
            elif event.key in (Key.ENTER, Key.TAB):
                self.advance_modal()

        elif step is DownloadStep.EDITING_PATH:
            if event.key is Key.UP:
                modal.path.suggestions.previous()
            elif event.key is Key.DOWN:
                modal.path.suggestions.next()
            elif event.key is Key.TAB:
                if accept_suggestion(modal.path):
                    self._refresh_path_suggestions()
                else:
                    self.advance_modal()
            elif event.key is Key.ENTER:
                self.advance_modal()
            elif event.key is Key.BACKTAB:
                self.retreat_modal()
            elif _edit_field(modal.path, event):
                self._refresh_path_suggestions()

        elif step is DownloadStep.EDITING_EDITOR_COMMAND:
            if event.key in (Key.ENTER, Key.TAB):
                self.advance_modal()
            elif event.key is Key.BACKTAB:
                self.retreat_modal()
            else:
                _edit_field(modal.editor, event)

        elif step is DownloadStep.CONFIRM_SUBMIT:
            if event.key is Key.ENTER:
                self.submit_download()
            elif event.key in (Key.BACKTAB, Key.UP):
                self.retreat_modal()


def _edit_field(input_field: InputField, event: Event) -> bool:
    """Apply a text-editing event to a field; returns True if the event was an edit."""
    key = event.key
    if key is Key.CHAR and event.char:
        input_field.insert(event.char)
    elif key is Key.PASTE:
        input_field.insert_text(event.text)
    elif key is Key.BACKSPACE:
        input_field.backspace()
    elif key is Key.DELETE:
        input_field.delete()
    elif key is Key.LEFT:
        input_field.move_left()
    elif key is Key.RIGHT:
        input_field.move_right()
    elif key is Key.HOME:
        input_field.move_home()
    elif key is Key.END:
        input_field.move_end()
    else:
        return False
    return True


__all__ = [
    "AppState",
    "DownloadModal",
    "DownloadStep",
    "Dropdown",
    "Event",
    "InteractionMode",
    "InteractionStateMachine",
    "Key",
    "Services",
    "FIELD_CYCLE",
    "MODAL_STEPS",
    "SELECT_MODES",
]
