"""Search URL construction from the current filter fields.

The URL layout is fixed so identical filters always produce byte-identical
URLs:

    {search_url}/{language-segment}?q={query}&order_by={sort}&r[]=-{kyu}&tags={tag}

Every parameter after ``q`` is omitted while its field sits at index 0.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
from urllib.parse import quote

from .catalog import DIFFICULTY, LANGUAGES, SORT_BY, SORT_KEYS, TAGS, option_label
from .core.config import get_endpoint_config
from .core.naming import language_path_segment


@dataclass
class FilterState:
    """Committed search filters; selector fields are indexes into the option tables."""

    query: str = ""
    sort: int = 0
    language: int = 0
    difficulty: int = 0
    tag: int = 0


class FilterField(Enum):
    """The four dropdown-backed filter fields."""

    SORT = "sort"
    LANGUAGE = "language"
    DIFFICULTY = "difficulty"
    TAG = "tag"

    @property
    def options(self) -> Tuple[str, ...]:
        return _FIELD_OPTIONS[self]

    @property
    def title(self) -> str:
        return _FIELD_TITLES[self]

    def get(self, filters: FilterState) -> int:
        return getattr(filters, self.value)

    def set(self, filters: FilterState, index: int) -> None:
        setattr(filters, self.value, index)


_FIELD_OPTIONS = {
    FilterField.SORT: SORT_BY,
    FilterField.LANGUAGE: LANGUAGES,
    FilterField.DIFFICULTY: DIFFICULTY,
    FilterField.TAG: TAGS,
}

_FIELD_TITLES = {
    FilterField.SORT: "Sort by",
    FilterField.LANGUAGE: "Select Programming Languages",
    FilterField.DIFFICULTY: "Select Difficulty",
    FilterField.TAG: "Select Tags",
}


def encode(value: str) -> str:
    """Percent-encode everything except unreserved characters."""
    return quote(value, safe="")


def sort_parameter(index: int) -> str:
    """Render the order_by value for a sort index ("" for the default ordering)."""
    key: Optional[Tuple[str, str]] = SORT_KEYS[index] if 0 <= index < len(SORT_KEYS) else None
    if key is None:
        return ""
    field_name, direction = key
    return f"{field_name}%20{direction}"


def build_search_url(filters: FilterState, base_url: Optional[str] = None) -> str:
    """Render filters into a search URL.

    Args:
        filters: Current filter fields
        base_url: Search endpoint (defaults to endpoints.search_url from config)

    Returns:
        The full search URL
    """
    base = (base_url or get_endpoint_config()["search_url"]).rstrip("/")

    language = language_path_segment(option_label(LANGUAGES, filters.language))
    url = f"{base}/{language}?q={encode(filters.query)}"

    sort_value = sort_parameter(filters.sort)
    if sort_value:
        url += f"&order_by={sort_value}"

    if 0 < filters.difficulty < len(DIFFICULTY):
        url += f"&r[]=-{filters.difficulty}"

    if 0 < filters.tag < len(TAGS):
        url += f"&tags={encode(TAGS[filters.tag])}"

    return url


__all__ = ["FilterField", "FilterState", "build_search_url", "encode", "sort_parameter"]
