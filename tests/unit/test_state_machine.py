"""Unit tests for kata_cli.state_machine module."""
from __future__ import annotations

import os
from typing import List
from unittest.mock import MagicMock

import pytest

import kata_api.core.config as config_module
from kata_api.catalog import LANGUAGES, SORT_BY
from kata_api.model import FilesystemError, NetworkError
from kata_cli.download import DownloadResult
from kata_cli.settings import Settings
from kata_cli.state_machine import (
    DownloadStep,
    Event,
    InteractionMode,
    InteractionStateMachine,
    Key,
    Services,
)


def key(k: Key) -> Event:
    return Event(k)


def char(ch: str) -> Event:
    return Event.of_char(ch)


def type_text(machine: InteractionStateMachine, text: str) -> None:
    for ch in text:
        machine.handle(char(ch))


@pytest.fixture
def services(sample_previews) -> Services:
    """Services with every collaborator faked."""
    pipeline = MagicMock()
    pipeline.run.return_value = DownloadResult(directory="/tmp/katas/Multiply")
    settings = MagicMock()
    settings.load.return_value = Settings()
    return Services(
        fetch_page=MagicMock(return_value="<html></html>"),
        parse_results=MagicMock(return_value=list(sample_previews)),
        build_url=MagicMock(return_value="https://example.test/kata/search/?q="),
        pipeline=pipeline,
        list_directory=MagicMock(return_value=[]),
        open_url=MagicMock(),
        settings=settings,
    )


@pytest.fixture
def machine(services) -> InteractionStateMachine:
    return InteractionStateMachine(services)


@pytest.fixture
def searched(machine) -> InteractionStateMachine:
    """A machine that already holds the sample results."""
    machine.submit_search()
    return machine


class TestModes:
    """Tests for focus transitions."""

    def test_initial_state(self, machine):
        """The machine starts in NORMAL with nothing open."""
        assert machine.state.mode is InteractionMode.NORMAL
        assert machine.state.dropdown is None
        assert not machine.state.download.active

    def test_quit_from_normal(self, machine):
        """q in NORMAL asks to quit."""
        assert machine.handle(char("q")) is False

    def test_enter_search_input(self, machine):
        """s and Tab focus the search input."""
        machine.handle(char("s"))
        assert machine.state.mode is InteractionMode.SEARCH_INPUT
        machine.handle(key(Key.ESC))
        machine.handle(key(Key.TAB))
        assert machine.state.mode is InteractionMode.SEARCH_INPUT

    def test_tab_cycles_fields_and_wraps(self, machine):
        """Tab walks the search panel and wraps from Tag to Search."""
        machine.handle(char("s"))
        visited = []
        for _ in range(5):
            machine.handle(key(Key.TAB))
            visited.append(machine.state.mode)
        assert visited == [
            InteractionMode.SORT_SELECT,
            InteractionMode.LANGUAGE_SELECT,
            InteractionMode.DIFFICULTY_SELECT,
            InteractionMode.TAG_SELECT,
            InteractionMode.SEARCH_INPUT,
        ]

    def test_backtab_goes_backwards(self, machine):
        """BackTab from the search input wraps to Tag."""
        machine.handle(char("s"))
        machine.handle(key(Key.BACKTAB))
        assert machine.state.mode is InteractionMode.TAG_SELECT

    def test_result_list_needs_results(self, machine):
        """l does nothing without results."""
        machine.handle(char("l"))
        assert machine.state.mode is InteractionMode.NORMAL

    def test_typing_edits_search_field(self, machine):
        """Characters typed in the search input are appended, q included."""
        machine.handle(char("s"))
        type_text(machine, "sqrt")
        machine.handle(key(Key.BACKSPACE))
        assert machine.state.search.value == "sqr"
        assert machine.state.mode is InteractionMode.SEARCH_INPUT

    def test_paste_into_search(self, machine):
        """Pasted text is inserted whole."""
        machine.handle(char("s"))
        machine.handle(Event.paste("sum of pairs"))
        assert machine.state.search.value == "sum of pairs"


class TestDropdown:
    """Tests for dropdown open, navigation and commit."""

    def _to_sort(self, machine):
        machine.handle(char("s"))
        machine.handle(key(Key.TAB))
        assert machine.state.mode is InteractionMode.SORT_SELECT

    def test_open_starts_at_committed_value(self, machine):
        """The dropdown cursor starts at the committed option."""
        machine.state.filters.sort = 3
        self._to_sort(machine)
        machine.handle(key(Key.ENTER))
        assert machine.state.dropdown is not None
        assert machine.state.dropdown.options.cursor == 3
        assert len(machine.state.dropdown.options) == len(SORT_BY)

    def test_escape_discards_navigation(self, machine, services):
        """Esc closes without committing or searching."""
        self._to_sort(machine)
        machine.handle(key(Key.ENTER))
        machine.handle(key(Key.DOWN))
        machine.handle(key(Key.DOWN))
        machine.handle(key(Key.ESC))
        assert machine.state.dropdown is None
        assert machine.state.filters.sort == 0
        assert machine.state.mode is InteractionMode.SORT_SELECT
        services.fetch_page.assert_not_called()

    def test_up_wraps_to_last_option(self, machine):
        """Moving up from the first option wraps."""
        self._to_sort(machine)
        machine.handle(key(Key.ENTER))
        machine.handle(key(Key.UP))
        assert machine.state.dropdown.options.cursor == len(SORT_BY) - 1

    def test_confirm_commits_and_searches(self, machine, services):
        """Enter commits the option, closes the dropdown and searches."""
        self._to_sort(machine)
        machine.handle(key(Key.ENTER))
        machine.handle(key(Key.DOWN))
        machine.handle(key(Key.ENTER))
        assert machine.state.filters.sort == 1
        assert machine.state.dropdown is None
        services.fetch_page.assert_called_once()
        assert machine.state.mode is InteractionMode.RESULT_LIST

    def test_language_commit(self, machine):
        """Committing in the language select updates the language filter."""
        self._to_sort(machine)
        machine.handle(key(Key.TAB))
        machine.handle(key(Key.ENTER))
        machine.handle(key(Key.DOWN))
        machine.handle(key(Key.DOWN))
        machine.handle(key(Key.ENTER))
        assert machine.state.filters.language == 2

    def test_dropdown_closed_when_leaving_select_mode(self, machine):
        """Only select modes may hold an open dropdown."""
        self._to_sort(machine)
        machine.open_dropdown()
        machine.change_mode(InteractionMode.NORMAL)
        assert machine.state.dropdown is None

    def test_open_dropdown_outside_select_mode(self, machine):
        """Opening a dropdown outside a select mode does nothing."""
        machine.open_dropdown()
        assert machine.state.dropdown is None


class TestSearch:
    """Tests for submit_search."""

    def test_success_replaces_results(self, machine, services, sample_previews):
        """A successful search fills the list and focuses it."""
        machine.handle(char("s"))
        type_text(machine, "mul")
        machine.handle(key(Key.ENTER))

        assert machine.state.filters.query == "mul"
        services.build_url.assert_called_once_with(machine.state.filters)
        assert list(machine.state.results) == sample_previews
        assert machine.state.results.cursor == 0
        assert machine.state.mode is InteractionMode.RESULT_LIST
        assert machine.state.status_message == "3 kata(s) found"

    def test_capital_s_searches_from_normal(self, machine, services):
        """S triggers a search from NORMAL."""
        machine.handle(char("S"))
        services.fetch_page.assert_called_once()

    def test_failure_keeps_previous_state(self, searched, services):
        """A failed search leaves results and mode untouched."""
        searched.handle(key(Key.DOWN))
        searched.change_mode(InteractionMode.SEARCH_INPUT)
        services.fetch_page.side_effect = NetworkError("https://example.test", "HTTP 503")

        assert searched.submit_search() is False
        assert len(searched.state.results) == 3
        assert searched.state.results.cursor == 1
        assert searched.state.mode is InteractionMode.SEARCH_INPUT
        assert "HTTP 503" in searched.state.status_message

    def test_empty_results(self, machine, services):
        """Zero results still switch to the (empty) list."""
        services.parse_results.return_value = []
        assert machine.submit_search() is True
        assert machine.state.results.is_empty()

    def test_stale_response_discarded(self, machine, services, sample_previews):
        """A response that finishes after a newer search is dropped."""
        calls = []

        def fetch(url):
            calls.append(url)
            if len(calls) == 1:
                services.parse_results.return_value = sample_previews[:1]
                machine.submit_search()
                services.parse_results.return_value = sample_previews
            return "<html></html>"

        services.fetch_page.side_effect = fetch
        assert machine.submit_search() is False
        assert len(machine.state.results) == 1

    def test_search_closes_download_modal(self, searched):
        """New results invalidate an open download modal."""
        searched.open_download_modal()
        searched.submit_search()
        assert not searched.state.download.active


class TestResultList:
    """Tests for result list navigation."""

    def test_navigation_wraps(self, searched):
        """Up from the first result selects the last."""
        searched.handle(key(Key.UP))
        assert searched.state.results.cursor == 2
        searched.handle(key(Key.DOWN))
        assert searched.state.results.cursor == 0

    def test_open_selected(self, searched, services):
        """Enter and o open the selected kata URL."""
        searched.handle(key(Key.ENTER))
        searched.handle(char("o"))
        assert services.open_url.call_count == 2
        services.open_url.assert_called_with("https://www.codewars.com/kata/5a1b2c")

    def test_open_failure_reported(self, searched, services):
        """Browser errors become a status message."""
        services.open_url.side_effect = OSError("no browser")
        searched.handle(char("o"))
        assert "no browser" in searched.state.status_message

    def test_escape_returns_to_normal(self, searched):
        """Esc and Left leave the list."""
        searched.handle(key(Key.ESC))
        assert searched.state.mode is InteractionMode.NORMAL
        searched.handle(char("l"))
        assert searched.state.mode is InteractionMode.RESULT_LIST
        searched.handle(key(Key.LEFT))
        assert searched.state.mode is InteractionMode.NORMAL

    def test_quit_from_list(self, searched):
        """q in the list asks to quit."""
        assert searched.handle(char("q")) is False


class TestDownloadModal:
    """Tests for the download modal flow."""

    def test_open_seeds_languages(self, searched):
        """d opens the modal on the selected kata's languages."""
        searched.handle(char("d"))
        modal = searched.state.download
        assert modal.step is DownloadStep.CHOOSING_LANGUAGE
        assert list(modal.languages) == ["python", "javascript"]
        assert modal.languages.cursor == 0
        assert modal.kata_index == 0

    def test_language_filter_preselected(self, searched):
        """The active language filter is preselected when offered."""
        searched.state.filters.language = LANGUAGES.index("JavaScript")
        searched.handle(char("d"))
        assert searched.state.download.languages.selected == "javascript"

    def test_no_languages_does_not_open(self, searched):
        """A kata without languages cannot be downloaded."""
        searched.handle(key(Key.UP))
        assert searched.open_download_modal() is False
        assert not searched.state.download.active
        assert "No downloadable language" in searched.state.status_message

    def test_prefill_from_config_defaults(self, searched, services, sample_config):
        """Without saved settings the config defaults are used."""
        config_module._CONFIG_CACHE = sample_config
        searched.handle(char("d"))
        assert searched.state.download.path.value == "/tmp/katas"
        assert searched.state.download.editor.value == "vim"
        assert searched.state.settings_loaded is True

    def test_prefill_from_settings_once(self, searched, services):
        """Saved settings prefill the fields the first time only."""
        services.settings.load.return_value = Settings("nvim", "/home/me/katas")
        searched.handle(char("d"))
        modal = searched.state.download
        assert modal.path.value == "/home/me/katas"
        assert modal.editor.value == "nvim"

        modal.path.set_value("/elsewhere")
        searched.handle(key(Key.ESC))
        searched.handle(char("d"))
        assert modal.path.value == "/elsewhere"
        services.settings.load.assert_called_once()

    def test_escape_closes_from_any_step(self, searched):
        """Esc closes the modal without downloading."""
        searched.handle(char("d"))
        searched.handle(key(Key.ENTER))
        searched.handle(key(Key.ENTER))
        searched.handle(key(Key.ESC))
        assert not searched.state.download.active
        assert searched.state.mode is InteractionMode.RESULT_LIST
        searched.services.pipeline.run.assert_not_called()

    def test_steps_forward_and_back(self, searched):
        """Enter advances, BackTab retreats."""
        searched.handle(char("d"))
        modal = searched.state.download
        searched.handle(key(Key.DOWN))
        searched.handle(key(Key.ENTER))
        assert modal.step is DownloadStep.EDITING_PATH
        searched.handle(key(Key.ENTER))
        assert modal.step is DownloadStep.EDITING_EDITOR_COMMAND
        searched.handle(key(Key.ENTER))
        assert modal.step is DownloadStep.CONFIRM_SUBMIT
        searched.handle(key(Key.BACKTAB))
        assert modal.step is DownloadStep.EDITING_EDITOR_COMMAND
        searched.handle(key(Key.BACKTAB))
        searched.handle(key(Key.BACKTAB))
        assert modal.step is DownloadStep.CHOOSING_LANGUAGE
        assert modal.languages.selected == "javascript"

    def _to_confirm(self, machine, path: str = "/tmp/katas", editor: str = "code"):
        machine.handle(char("d"))
        modal = machine.state.download
        modal.path.set_value(path)
        modal.editor.set_value(editor)
        machine.handle(key(Key.ENTER))
        machine.handle(key(Key.ENTER))
        machine.handle(key(Key.ENTER))
        assert modal.step is DownloadStep.CONFIRM_SUBMIT

    def test_submit_success(self, searched, services):
        """A successful download closes the modal and stores the settings."""
        self._to_confirm(searched)
        searched.handle(key(Key.ENTER))

        services.pipeline.run.assert_called_once_with(
            "5a1b2c", "Multiply", "python", "/tmp/katas",
            editor_command="code", url="https://www.codewars.com/kata/5a1b2c",
        )
        services.settings.save.assert_called_once_with(Settings("code", "/tmp/katas"))
        assert not searched.state.download.active
        assert "Downloaded Multiply" in searched.state.status_message

    def test_submit_blank_editor_skips_postinstall(self, searched, services):
        """A blank editor command is passed as None."""
        self._to_confirm(searched, editor="  ")
        searched.handle(key(Key.ENTER))
        assert services.pipeline.run.call_args.kwargs["editor_command"] is None

    def test_submit_failure_keeps_modal(self, searched, services):
        """A failed download keeps the modal open with the error."""
        services.pipeline.run.side_effect = NetworkError("u", "HTTP 500 for u")
        self._to_confirm(searched)
        searched.handle(key(Key.ENTER))

        modal = searched.state.download
        assert modal.step is DownloadStep.CONFIRM_SUBMIT
        assert modal.errors == ["HTTP 500 for u"]
        services.settings.save.assert_not_called()

    def test_submit_empty_path(self, searched, services):
        """An empty path is rejected before downloading."""
        self._to_confirm(searched, path="   ")
        searched.handle(key(Key.ENTER))
        assert searched.state.download.errors == ["Download path is empty"]
        services.pipeline.run.assert_not_called()

    def test_settings_save_failure_is_not_fatal(self, searched, services):
        """The download still succeeds when settings cannot be saved."""
        services.settings.save.side_effect = FilesystemError("/ro/settings.json")
        self._to_confirm(searched)
        assert searched.submit_download() is True
        assert not searched.state.download.active

    def test_modal_keys_do_not_leak_to_list(self, searched):
        """While the modal is open, list keys are not applied."""
        searched.handle(char("d"))
        assert searched.handle(char("q")) is True
        assert searched.state.results.cursor == 0


class TestPathAutocomplete:
    """Tests for path completion inside the modal."""

    def _to_path(self, machine, services, value: str, names: List[str]):
        services.list_directory.return_value = names
        machine.handle(char("d"))
        machine.state.download.path.set_value(value)
        machine.handle(key(Key.ENTER))
        assert machine.state.download.step is DownloadStep.EDITING_PATH

    def test_suggestions_on_entering_step(self, searched, services):
        """Entering the path step lists matching entries."""
        base = os.sep + "home" + os.sep
        self._to_path(searched, services, base + "k", ["katas", "kotlin", "music"])
        assert list(searched.state.download.path.suggestions) == ["katas", "kotlin"]
        services.list_directory.assert_called_with(base)

    def test_typing_refreshes_suggestions(self, searched, services):
        """Each edit at the end refreshes the list."""
        base = os.sep + "home" + os.sep
        self._to_path(searched, services, base, ["katas", "kotlin", "music"])
        searched.handle(char("m"))
        assert list(searched.state.download.path.suggestions) == ["music"]

    def test_tab_accepts_highlighted(self, searched, services):
        """Tab applies the highlighted suggestion and stays on the step."""
        base = os.sep + "home" + os.sep
        self._to_path(searched, services, base + "k", ["katas", "kotlin"])
        searched.handle(key(Key.DOWN))
        searched.handle(key(Key.TAB))
        modal = searched.state.download
        assert modal.path.value == base + "kotlin"
        assert modal.step is DownloadStep.EDITING_PATH

    def test_tab_without_suggestions_advances(self, searched, services):
        """Tab with nothing to complete moves to the editor step."""
        self._to_path(searched, services, os.sep + "zzz", [])
        searched.handle(key(Key.TAB))
        assert searched.state.download.step is DownloadStep.EDITING_EDITOR_COMMAND

    def test_suggestions_cleared_when_leaving_step(self, searched, services):
        """Suggestions only exist on the path step."""
        self._to_path(searched, services, os.sep + "k", ["katas"])
        searched.handle(key(Key.ENTER))
        assert searched.state.download.path.suggestions.is_empty()

    def test_tab_accepts_then_advances(self, searched, services):
        """After a completion, the next Tab moves on to the editor step."""
        base = os.sep + "home" + os.sep + "me" + os.sep
        self._to_path(searched, services, base + "ka", ["katas", "other"])
        searched.handle(key(Key.TAB))
        modal = searched.state.download
        assert modal.path.value == base + "katas"
        assert modal.step is DownloadStep.EDITING_PATH
        assert modal.path.suggestions.is_empty()

        searched.handle(key(Key.TAB))
        assert modal.step is DownloadStep.EDITING_EDITOR_COMMAND

    def test_tab_on_complete_prefilled_path_advances(self, searched, services):
        """A prefilled path that already names a folder does not hold Tab."""
        base = os.sep + "home" + os.sep + "me" + os.sep
        self._to_path(searched, services, base + "katas", ["katas", "other"])
        assert searched.state.download.path.suggestions.is_empty()
        searched.handle(key(Key.TAB))
        assert searched.state.download.step is DownloadStep.EDITING_EDITOR_COMMAND
