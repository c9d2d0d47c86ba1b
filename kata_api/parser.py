"""Search-result page parser.

Turns a fetched search page into ChallengePreview records in document order.

The selectors below are tied to one fixed page layout. A missing or
unparsable field falls back to "" or 0 and never discards the card; a page
without cards yields an empty list. There is no layout versioning, so a
markup change upstream shows up as empty fields rather than as an error.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .core.config import get_endpoint_config
from .model import ChallengePreview

logger = logging.getLogger(__name__)

# Layout selectors, relative to one result card
SELECTORS = {
    "card": "main .list-item-kata",
    "name": "a",
    "tags": ".keyword-tag",
    "languages": "div > div:nth-child(2) li > a",
    "author": "div > div:nth-child(1) a:nth-child(5)",
    "total_completed": "div > div:nth-child(1) span:nth-child(4)",
    "rank": "div > div:nth-child(1) span",
}

_THOUSANDS_SEPARATORS = re.compile(r"[,\s\u00a0\u202f'_]")


def _text(el: Optional[Tag]) -> str:
    if el is None:
        return ""
    return el.get_text(strip=True)


def parse_count(text: str) -> int:
    """Parse a completion count such as "12,345", returning 0 when unparsable."""
    cleaned = _THOUSANDS_SEPARATORS.sub("", text or "")
    try:
        return int(cleaned)
    except ValueError:
        return 0


def _parse_card(card: Tag, kata_url: str) -> ChallengePreview:
    kata_id = str(card.get("id") or "")

    name = str(card.get("data-title") or "").strip()
    if not name:
        name = _text(card.select_one(SELECTORS["name"]))

    tags = tuple(
        t for t in (_text(el) for el in card.select(SELECTORS["tags"])) if t
    )
    languages = tuple(
        str(el.get("data-language") or "") for el in card.select(SELECTORS["languages"])
    )

    return ChallengePreview(
        id=kata_id,
        name=name,
        url=kata_url.format(id=kata_id),
        tags=tags,
        languages=tuple(lang for lang in languages if lang),
        author=_text(card.select_one(SELECTORS["author"])),
        total_completed=parse_count(_text(card.select_one(SELECTORS["total_completed"]))),
        rank=_text(card.select_one(SELECTORS["rank"])),
    )


def parse_search_results(html: str, kata_url: Optional[str] = None) -> List[ChallengePreview]:
    """Parse a search page into previews, preserving document order.

    Args:
        html: Raw page markup
        kata_url: Canonical URL template with an {id} placeholder
            (defaults to endpoints.kata_url from config)

    Returns:
        List of ChallengePreview (empty when the page has no result cards)
    """
    template = kata_url or get_endpoint_config()["kata_url"]
    soup = BeautifulSoup(html or "", "html.parser")

    results = [_parse_card(card, template) for card in soup.select(SELECTORS["card"])]
    logger.debug("Parsed %d result card(s)", len(results))
    return results


__all__ = ["SELECTORS", "parse_count", "parse_search_results"]
