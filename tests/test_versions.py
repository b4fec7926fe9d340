"""Tests for version helpers."""

import pytest

from krlib.errors import VersionError
from krlib.versions import (
    compare_versions,
    extract_pinned_version,
    is_older,
    max_version,
    parse_remote_tags,
    replace_pinned_version,
)


class TestCompareVersions:
    """Tests for compare_versions."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("1.0.0", "1.0.0", 0),
            ("1.0.0", "1.0.1", -1),
            ("1.2.0", "1.10.0", -1),
            ("2.0.0", "1.99.99", 1),
            ("", "0.0.1", -1),
            ("0.0.1", "", 1),
            ("", "", 0),
        ],
    )
    def test_ordering(self, a, b, expected):
        """Test semantic ordering, with empty versions first."""
        assert compare_versions(a, b) == expected

    def test_invalid_version(self):
        """Test that garbage raises VersionError."""
        with pytest.raises(VersionError, match="Invalid version"):
            compare_versions("not-a-version", "1.0.0")

    def test_is_older(self):
        assert is_older("1.9.9", "1.10.0") is True
        assert is_older("1.10.0", "1.10.0") is False


class TestMaxVersion:
    """Tests for max_version."""

    def test_semantic_not_lexical(self):
        """Test that 1.2.0 beats 1.1.5 and 1.10.0 beats 1.9.0."""
        assert max_version(["1.0.0", "1.2.0", "1.1.5"]) == "1.2.0"
        assert max_version(["1.9.0", "1.10.0"]) == "1.10.0"

    def test_empty(self):
        with pytest.raises(VersionError):
            max_version([])


class TestPins:
    """Tests for #semver: pin handling."""

    def test_extract(self):
        spec = "git+git@github.com:gcleyser/kr-library.git#semver:1.4.2"
        assert extract_pinned_version(spec) == "1.4.2"

    def test_extract_missing(self):
        assert extract_pinned_version("^1.4.2") is None

    def test_replace(self):
        spec = "git+git@github.com:gcleyser/kr-library.git#semver:1.4.2"
        assert (
            replace_pinned_version(spec, "2.0.0")
            == "git+git@github.com:gcleyser/kr-library.git#semver:2.0.0"
        )


class TestParseRemoteTags:
    """Tests for parse_remote_tags."""

    def test_parse(self):
        output = (
            "1111111111111111111111111111111111111111\trefs/tags/v1.0.0\n"
            "2222222222222222222222222222222222222222\trefs/tags/v1.2.0\n"
            "3333333333333333333333333333333333333333\trefs/tags/release-candidate\n"
            "4444444444444444444444444444444444444444\trefs/tags/v1.1.5\n"
        )
        assert parse_remote_tags(output) == ["1.0.0", "1.2.0", "1.1.5"]

    def test_parse_empty(self):
        assert parse_remote_tags("") == []
