"""Single-level path completion for the download destination field."""
from __future__ import annotations

import logging
import os
from typing import Callable, List, Tuple

from kata_api.model import KataError

from .input_field import InputField

logger = logging.getLogger(__name__)

ListDirectory = Callable[[str], List[str]]


def list_directory(path: str) -> List[str]:
    """Default directory lister; expands ``~`` and lists names only."""
    return os.listdir(os.path.expanduser(path))


def split_path(value: str, sep: str = os.sep) -> Tuple[str, str]:
    """Split a typed path into (directory part incl. trailing separator, last segment)."""
    head, found, tail = value.rpartition(sep)
    if not found:
        return "", value
    return head + sep, tail


def suggest(value: str, lister: ListDirectory = list_directory, sep: str = os.sep) -> List[str]:
    """Propose completions for the last segment of ``value``.

    Everything before the last separator is listed (the current directory when
    there is none) and the last segment is a case-insensitive prefix filter.
    A name equal to the typed segment is already complete and is not offered.
    Listing failures yield no suggestions.
    """
    directory, prefix = split_path(value, sep)
    try:
        names = lister(directory or ".")
    except (OSError, KataError) as e:
        logger.debug("Cannot list %r for completion: %s", directory or ".", e)
        return []

    needle = prefix.lower()
    show_hidden = prefix.startswith(".")
    return sorted(
        name for name in names
        if name.lower().startswith(needle)
        and name.lower() != needle
        and (show_hidden or not name.startswith("."))
    )


def update_suggestions(field: InputField, lister: ListDirectory = list_directory, sep: str = os.sep) -> None:
    """Refresh ``field.suggestions``; only an edit at the end of the text proposes anything."""
    if not field.cursor_at_end:
        field.clear_suggestions()
        return
    field.set_suggestions(suggest(field.value, lister, sep))


def accept_suggestion(field: InputField, sep: str = os.sep) -> bool:
    """Replace the last path segment with the highlighted suggestion.

    Returns:
        True if a suggestion was applied
    """
    choice = field.suggestions.selected
    if choice is None:
        return False
    directory, _prefix = split_path(field.value, sep)
    field.set_value(directory + choice)
    field.clear_suggestions()
    return True


__all__ = ["accept_suggestion", "list_directory", "split_path", "suggest", "update_suggestions"]
