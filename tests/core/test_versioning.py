"""
Tests for version extraction and comparison.
"""

import logging

import pytest

from toolsetkit.core.versioning import (
    compare_versions,
    extract_version,
    is_valid_version,
    satisfies_minimum,
)


class TestExtractVersion:
    """Test extract_version."""

    @pytest.mark.parametrize(
        "output,expected",
        [
            ("typos-cli 1.16.23", "1.16.23"),
            ("cargo-deny 0.14.3", "0.14.3"),
            ("git-cliff 2.1.2\n", "2.1.2"),
            ("cargo-nextest 0.9.67 (3a0a5b5f2 2024-01-10)", "0.9.67"),
            ("pre-commit 3.6.0", "3.6.0"),
            ("tool v1.2.3", "1.2.3"),
            ("tool version 2.1", "2.1"),
            ("tool 1.0.0-beta.2", "1.0.0-beta.2"),
        ],
    )
    def test_common_formats(self, output, expected):
        assert extract_version(output) == expected

    def test_no_version(self):
        assert extract_version("usage: tool [options]") is None

    def test_empty_output(self):
        assert extract_version("") is None

    def test_custom_pattern_wins(self):
        output = "built with rustc 1.75.0\ntypos-cli 1.16.23"
        assert extract_version(output, r"typos-cli (\S+)") == "1.16.23"
        assert extract_version(output) == "1.75.0"

    def test_custom_pattern_falls_back(self):
        assert extract_version("tool 4.5.6", r"other (\S+)") == "4.5.6"


class TestCompareVersions:
    """Test compare_versions and satisfies_minimum."""

    @pytest.mark.parametrize(
        "installed,expected",
        [("1.1.9", False), ("1.2.0", True), ("1.3.0", True), ("1.10.0", True)],
    )
    def test_minimum_1_2_0(self, installed, expected):
        assert satisfies_minimum(installed, "1.2.0") is expected

    def test_no_minimum_always_satisfies(self):
        assert satisfies_minimum("0.0.1", None) is True
        assert satisfies_minimum(None, None) is True

    def test_unknown_version_with_minimum(self):
        assert satisfies_minimum(None, "1.0.0") is False

    def test_short_versions_compare_componentwise(self):
        assert compare_versions("1.2", "1.2.0") == 0
        assert compare_versions("2.0", "1.99.99") > 0

    def test_lexicographic_fallback_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = compare_versions("2024-snapshot", "2023-snapshot")

        assert result > 0
        assert "Low-confidence" in caplog.text

    def test_is_valid_version(self):
        assert is_valid_version("1.2.3")
        assert not is_valid_version("not-a-version")

    def test_valid_versions_compare_without_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert compare_versions("1.10.0", "1.9.0") > 0

        assert "Low-confidence" not in caplog.text
