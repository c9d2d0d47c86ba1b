"""Unit tests for kata_api.model module."""
from __future__ import annotations

import dataclasses

import pytest

from kata_api.model import (
    AssetExtractionError,
    ChallengePreview,
    FilesystemError,
    KataError,
    NetworkError,
    PostinstallError,
    PreinstallError,
)


class TestChallengePreview:
    """Tests for ChallengePreview dataclass."""

    def test_defaults(self):
        """Missing fields default to empty values."""
        preview = ChallengePreview(id="abc", name="Multiply")
        assert preview.tags == ()
        assert preview.languages == ()
        assert preview.total_completed == 0
        assert preview.author == ""

    def test_frozen(self, sample_previews):
        """Previews are immutable."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_previews[0].name = "Other"


class TestErrors:
    """Tests for the error taxonomy."""

    @pytest.mark.parametrize("error", [
        NetworkError("https://x"),
        AssetExtractionError("abc", "code"),
        FilesystemError("/tmp/x"),
        PreinstallError("cargo failed"),
        PostinstallError("editor failed"),
    ])
    def test_all_are_kata_errors(self, error):
        """Every error derives from KataError and carries a message."""
        assert isinstance(error, KataError)
        assert error.message
        assert str(error) == error.message

    def test_network_error_fields(self):
        """NetworkError keeps the URL and a default message."""
        err = NetworkError("https://x/kata/1")
        assert err.url == "https://x/kata/1"
        assert "https://x/kata/1" in err.message

    def test_asset_error_fields(self):
        """AssetExtractionError names the kata and pane."""
        err = AssetExtractionError("abc", "fixture")
        assert err.kata_id == "abc"
        assert err.pane == "fixture"
        assert "fixture" in err.message
