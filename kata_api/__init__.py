"""Kata catalog API package.

Everything that talks to, or describes, the remote kata catalog.

Key modules:
- core: Config loading, HTTP session and naming helpers
- model: ChallengePreview / ChallengeAssets and the error taxonomy
- catalog: Option tables for the search filters
- query: FilterState and search URL construction
- parser: Search-result page parsing
- assets: Instructions and sample code for one kata

Usage:
    from kata_api.query import FilterState, build_search_url
    from kata_api.parser import parse_search_results
"""

from .model import (
    AssetExtractionError,
    ChallengeAssets,
    ChallengePreview,
    FilesystemError,
    KataError,
    NetworkError,
)

__all__ = [
    "AssetExtractionError",
    "ChallengeAssets",
    "ChallengePreview",
    "FilesystemError",
    "KataError",
    "NetworkError",
]
