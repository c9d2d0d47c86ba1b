"""Connector for kata assets (instructions, sample solution, sample tests).

Description:
  - Fetched from the JSON code-challenge endpoint (endpoints.api_url).

Sample code:
  - Read from the train page for the chosen language (endpoints.train_url).
  - The page holds two editor panes, ``#code`` (solution) and ``#fixture``
    (tests). Lines are taken from the rendered ``.CodeMirror-line`` elements,
    falling back to the pane's ``textarea`` content.
  - A missing or empty pane raises AssetExtractionError, which callers report
    separately from NetworkError.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .core.config import get_endpoint_config
from .core.network import fetch_json, fetch_page
from .model import AssetExtractionError, ChallengeAssets, NetworkError

logger = logging.getLogger(__name__)

SOLUTION_PANE = "code"
TEST_PANE = "fixture"


def _pane_lines(soup: BeautifulSoup, pane: str) -> Optional[List[str]]:
    root: Optional[Tag] = soup.select_one(f"#{pane}")
    if root is None:
        return None

    lines = [el.get_text() for el in root.select(".CodeMirror-line")]
    if lines:
        return lines

    textarea = root if root.name == "textarea" else root.select_one("textarea")
    if textarea is not None:
        text = textarea.get_text()
        if text.strip():
            return text.splitlines()
    return None


def extract_editor_panes(html: str, kata_id: str) -> tuple[List[str], List[str]]:
    """Extract (solution_lines, test_lines) from a train page.

    Raises:
        AssetExtractionError: If either pane is missing or empty
    """
    soup = BeautifulSoup(html or "", "html.parser")
    panes = []
    for pane in (SOLUTION_PANE, TEST_PANE):
        lines = _pane_lines(soup, pane)
        if not lines:
            logger.warning("Editor pane '%s' not found for kata %s", pane, kata_id)
            raise AssetExtractionError(kata_id, pane)
        panes.append(lines)
    return panes[0], panes[1]


def fetch_challenge_assets(kata_id: str, language: str) -> ChallengeAssets:
    """Fetch description and sample code for one kata in one language.

    Args:
        kata_id: Kata identifier
        language: Catalog language identifier (e.g., "python")

    Returns:
        ChallengeAssets bundle

    Raises:
        NetworkError: If the detail or train page request fails
        AssetExtractionError: If an editor pane cannot be extracted
    """
    endpoints = get_endpoint_config()

    detail_url = endpoints["api_url"].format(id=kata_id)
    detail = fetch_json(detail_url)
    if not isinstance(detail, dict):
        raise NetworkError(detail_url, f"Unexpected detail payload for kata {kata_id}")
    description = str(detail.get("description") or "")

    train_url = endpoints["train_url"].format(id=kata_id, language=language)
    solution_lines, test_lines = extract_editor_panes(fetch_page(train_url), kata_id)

    logger.info(
        "Fetched assets for kata %s (%s): %d solution line(s), %d test line(s)",
        kata_id, language, len(solution_lines), len(test_lines)
    )
    return ChallengeAssets(
        description=description,
        solution_lines=solution_lines,
        test_lines=test_lines,
    )


__all__ = ["extract_editor_panes", "fetch_challenge_assets"]
