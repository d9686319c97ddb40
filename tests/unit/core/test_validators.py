"""
test_validators.py
------------------
Unit tests for gallerydb.core.validators module.

Tests the DataValidator argument checks and the tag parser shared by the
metadata and tag managers.
"""
import pytest

from gallerydb.core.exceptions import ValidationError
from gallerydb.core.validators import DataValidator


class TestRequire:
    """Test require method."""

    def test_returns_value(self):
        """Non-None values are returned unchanged."""
        album = object()
        assert DataValidator.require(album, "album") is album

    def test_none_raises(self):
        """None raises ValidationError naming the argument."""
        with pytest.raises(ValidationError, match="album cannot be None"):
            DataValidator.require(None, "album")

    def test_falsy_values_are_accepted(self):
        """Only None is rejected, not zero or empty strings."""
        assert DataValidator.require(0, "gallery_id") == 0
        assert DataValidator.require("", "value") == ""


class TestNormalizeString:
    """Test normalize_string method."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("  Vacation ", "Vacation"),
            ("", None),
            ("   ", None),
            (None, None),
            (2013, "2013"),
        ],
    )
    def test_normalization(self, value, expected):
        assert DataValidator.normalize_string(value) == expected


class TestParseTags:
    """Test parse_tags method."""

    def test_comma_space_separated(self):
        """The usual ', ' separator yields trimmed tokens."""
        assert DataValidator.parse_tags("Vacation, New York, 2013") == [
            "Vacation",
            "New York",
            "2013",
        ]

    def test_bare_comma_separated(self):
        """A bare comma separates tokens too."""
        assert DataValidator.parse_tags("Vacation,New York") == ["Vacation", "New York"]

    def test_empty_tokens_discarded(self):
        """Empty and whitespace-only tokens are dropped."""
        assert DataValidator.parse_tags(" ,Vacation,, , 2013,") == ["Vacation", "2013"]

    def test_exact_repeats_collapsed(self):
        """Exact repeats keep their first position."""
        assert DataValidator.parse_tags("Beach, Sun, Beach") == ["Beach", "Sun"]

    def test_case_variants_are_kept(self):
        """Tokens differing only by case are distinct tags."""
        assert DataValidator.parse_tags("Beach, beach") == ["Beach", "beach"]

    @pytest.mark.parametrize("value", [None, "", "   ", ",,"])
    def test_nothing_to_parse(self, value):
        assert DataValidator.parse_tags(value) == []
