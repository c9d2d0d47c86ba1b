"""Pytest configuration and shared fixtures for kata-cli tests."""
from __future__ import annotations

import json
import os
import shutil
import tempfile
from typing import Any, Dict, Generator, List
from unittest.mock import MagicMock

import pytest

import kata_api.core.config as config_module
from kata_api.model import ChallengeAssets, ChallengePreview


# ============================================================================
# Path and Configuration Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for test files."""
    dirpath = tempfile.mkdtemp(prefix="kata_test_")
    yield dirpath
    shutil.rmtree(dirpath, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config():
    """Run every test against an empty config unless it loads one explicitly."""
    previous = config_module._CONFIG_CACHE
    config_module._CONFIG_CACHE = {}
    yield
    config_module._CONFIG_CACHE = previous


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Return a sample configuration dictionary."""
    return {
        "general": {"log_level": "DEBUG"},
        "network": {"max_attempts": 2, "base_backoff_s": 0.0, "delay_ms": 0},
        "endpoints": {"search_url": "https://example.test/kata/search"},
        "download": {"default_path": "/tmp/katas", "default_editor": "vim"},
    }


@pytest.fixture
def config_file(temp_dir: str, sample_config: Dict[str, Any]) -> str:
    """Create a temporary config file."""
    config_path = os.path.join(temp_dir, "config.json")
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(sample_config, f)
    return config_path


# ============================================================================
# Search Page Fixtures
# ============================================================================

def make_card(
    kata_id: str,
    name: str,
    rank: str = "8 kyu",
    completed: str = "12,345",
    author: str = "alice",
    languages: List[str] | None = None,
    tags: List[str] | None = None,
    data_title: bool = True,
    completed_element: bool = True,
) -> str:
    """Render one result card in the search page layout."""
    languages = ["python", "javascript"] if languages is None else languages
    tags = ["Fundamentals", "Mathematics"] if tags is None else tags
    title_attr = f' data-title="{name}"' if data_title else ""
    completed_html = (
        f'<span class="completed">{completed}</span>' if completed_element else "<em>-</em>"
    )
    language_items = "".join(
        f'<li><a data-language="{lang}" href="#">{lang.title()}</a></li>' for lang in languages
    )
    tag_items = "".join(f'<span class="keyword-tag">{tag}</span>' for tag in tags)
    return (
        f'<div class="list-item-kata" id="{kata_id}"{title_attr}>'
        '<div class="w-full">'
        '<div class="info">'
        f'<span class="rank"><span>{rank}</span></span>'
        f'<a href="/kata/{kata_id}">{name}</a>'
        '<span class="satisfaction">92% of 1,000</span>'
        f"{completed_html}"
        f'<a class="author" href="/users/{author}">{author}</a>'
        "</div>"
        f'<div class="languages"><ul>{language_items}</ul></div>'
        f'<div class="tags">{tag_items}</div>'
        "</div>"
        "</div>"
    )


def make_page(*cards: str) -> str:
    """Wrap cards in a search page."""
    return "<html><body><main><div class='results'>" + "".join(cards) + "</div></main></body></html>"


@pytest.fixture
def search_page() -> str:
    """A search page with two result cards."""
    return make_page(
        make_card("5a1b2c", "Multiply"),
        make_card(
            "6d7e8f",
            "Sum of Pairs",
            rank="5 kyu",
            completed="987",
            author="bob",
            languages=["rust"],
            tags=["Arrays"],
        ),
    )


@pytest.fixture
def empty_page() -> str:
    """A search page without results."""
    return make_page()


# ============================================================================
# Domain Fixtures
# ============================================================================

@pytest.fixture
def sample_previews() -> List[ChallengePreview]:
    """Return a small result set."""
    return [
        ChallengePreview(
            id="5a1b2c",
            name="Multiply",
            url="https://www.codewars.com/kata/5a1b2c",
            tags=("Fundamentals",),
            languages=("python", "javascript"),
            author="alice",
            total_completed=12345,
            rank="8 kyu",
        ),
        ChallengePreview(
            id="6d7e8f",
            name="Sum of Pairs",
            url="https://www.codewars.com/kata/6d7e8f",
            tags=("Arrays",),
            languages=("rust",),
            author="bob",
            total_completed=987,
            rank="5 kyu",
        ),
        ChallengePreview(id="000000", name="No Languages"),
    ]


@pytest.fixture
def sample_assets() -> ChallengeAssets:
    """Return assets for one kata."""
    return ChallengeAssets(
        description="Multiply two numbers.",
        solution_lines=["def multiply(a, b):", "    return a * b"],
        test_lines=["import codewars_test as test", "test.assert_equals(multiply(2, 3), 6)"],
    )


@pytest.fixture
def mock_response():
    """Create a mock HTTP response."""
    def _create_mock(
        status_code: int = 200,
        text: str = "",
        json_data: Any = None,
        headers: Dict[str, str] | None = None,
    ) -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.text = text
        response.content = text.encode("utf-8")
        response.headers = headers or {"Content-Type": "text/html"}
        if json_data is None:
            response.json.side_effect = ValueError("No JSON")
        else:
            response.json.return_value = json_data
        return response

    return _create_mock
