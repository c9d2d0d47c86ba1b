"""Data models and error types for the kata catalog client.

Provides the ChallengePreview record produced by the search-result parser,
the ChallengeAssets bundle returned by the asset fetcher, and the error
taxonomy shared by the search and download workflows.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class ChallengePreview:
    """One search-result card, as shown in the result list.

    Attributes:
        id: Stable kata identifier (the card's DOM id)
        name: Display name
        url: Canonical kata URL built from the identifier
        tags: Tag labels in page order
        languages: Language identifiers the kata is available in, in page order
        author: Author name
        total_completed: Completion count
        rank: Difficulty label (e.g., "6 kyu")
    """

    id: str = ""
    name: str = ""
    url: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)
    languages: Tuple[str, ...] = field(default_factory=tuple)
    author: str = ""
    total_completed: int = 0
    rank: str = ""


@dataclass
class ChallengeAssets:
    """Downloadable material for one kata in one language."""

    description: str
    solution_lines: list = field(default_factory=list)
    test_lines: list = field(default_factory=list)


class KataError(Exception):
    """Base class for every recoverable error raised by the client."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NetworkError(KataError):
    """A fetch failed or returned a non-success status."""

    def __init__(self, url: str, message: Optional[str] = None):
        self.url = url
        super().__init__(message or f"Request failed for {url}")

    def __repr__(self) -> str:
        return f"NetworkError(url={self.url!r}, message={self.message!r})"


class AssetExtractionError(KataError):
    """A code-editor pane was not found or was empty on the train page."""

    def __init__(self, kata_id: str, pane: str, message: Optional[str] = None):
        self.kata_id = kata_id
        self.pane = pane
        super().__init__(message or f"Could not extract '{pane}' pane for kata {kata_id}")


class FilesystemError(KataError):
    """A directory or file could not be created or written."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Filesystem error for {path}")


class PreinstallError(KataError):
    """Language scaffolding failed; the download continues without a prefix."""


class PostinstallError(KataError):
    """Opening the editor failed; never fatal to a download."""


__all__ = [
    "ChallengePreview",
    "ChallengeAssets",
    "KataError",
    "NetworkError",
    "AssetExtractionError",
    "FilesystemError",
    "PreinstallError",
    "PostinstallError",
]
