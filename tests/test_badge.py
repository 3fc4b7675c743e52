"""Tests for shields.io badge generation."""

import json

import pytest

from core.models import VulnerabilityStats
from outputs.badge import (
    build_badge_label,
    build_badge_message,
    determine_badge_color,
    escape_json,
    format_badge_message,
    generate_badge_json,
    generate_badge_url,
)


class TestFormatBadgeMessage:
    """Tests for the count portion of the message."""

    def test_clean_scan(self):
        """Test zero findings."""
        assert format_badge_message(VulnerabilityStats()) == "0"

    def test_legacy_zero_text(self):
        """Test the zero text can be overridden."""
        assert format_badge_message(VulnerabilityStats(), zero_text="none") == "none"

    def test_only_non_zero_buckets(self):
        """Test zero buckets are omitted."""
        stats = VulnerabilityStats(total=5, critical=2, low=3)
        assert format_badge_message(stats) == "2 critical | 3 low"

    def test_all_buckets(self, sample_stats):
        """Test severity order."""
        assert format_badge_message(sample_stats) == "1 critical | 2 high | 1 medium | 1 low"

    def test_only_other(self):
        """Test findings that are all outside the main buckets."""
        assert format_badge_message(VulnerabilityStats(total=2, other=2)) == "2 other"


class TestDetermineBadgeColor:
    """Tests for badge color selection."""

    @pytest.mark.parametrize(
        "stats,color",
        [
            (VulnerabilityStats(total=1, critical=1, low=3), "critical"),
            (VulnerabilityStats(total=1, high=1), "orange"),
            (VulnerabilityStats(total=1, medium=1), "yellow"),
            (VulnerabilityStats(total=1, low=1), "yellowgreen"),
            (VulnerabilityStats(total=1, other=1), "yellowgreen"),
            (VulnerabilityStats(), "brightgreen"),
        ],
    )
    def test_color(self, stats, color):
        """Test the most severe bucket picks the color."""
        assert determine_badge_color(stats) == color


class TestBuildBadgeMessage:
    """Tests for the full badge message."""

    def test_with_db_date(self):
        """Test the database date is prefixed."""
        message = build_badge_message(VulnerabilityStats(), "2026-01-30T12:34:56Z", "release")
        assert message == "db 2026-01-30: 0 CVEs in release"

    def test_without_db_date(self):
        """Test no prefix without a date."""
        assert build_badge_message(VulnerabilityStats(), "", "head") == "0 CVEs in head"

    def test_escaped_dashes(self):
        """Test dashes are doubled for static badges."""
        message = build_badge_message(VulnerabilityStats(), "2026-01-30T00:00:00Z", "image", escape_dashes=True)
        assert message == "db 2026--01--30: 0 CVEs in image"


class TestGenerateBadgeUrl:
    """Tests for static badge URLs."""

    def test_clean_scan_without_date(self):
        """Test a minimal URL."""
        url = generate_badge_url(VulnerabilityStats(), "grype", "", "head")
        assert url == "https://img.shields.io/badge/grype-0%20CVEs%20in%20head-brightgreen"

    def test_label_and_message_encoding(self):
        """Test spaces, pipes and emoji are percent-encoded."""
        stats = VulnerabilityStats(total=3, critical=1, high=2)
        url = generate_badge_url(stats, build_badge_label("0.87.0"), "2026-01-30T12:34:56Z", "release")
        assert url.startswith("https://img.shields.io/badge/%E2%9C%8A%20grype%200.87.0-")
        assert "db%202026--01--30:%201%20critical%20%7C%202%20high%20CVEs%20in%20release" in url
        assert url.endswith("-critical")


class TestBadgeJson:
    """Tests for endpoint badge JSON."""

    def test_generate_badge_json(self, sample_stats):
        """Test the document decodes to the shields.io schema."""
        document = json.loads(generate_badge_json(sample_stats, "0.87.0", "2026-01-30T12:34:56Z", "release"))
        assert document == {
            "schemaVersion": 1,
            "label": "✊ grype 0.87.0",
            "message": "db 2026-01-30: 1 critical | 2 high | 1 medium | 1 low CVEs in release",
            "color": "critical",
        }

    def test_escapes_version(self):
        """Test JSON-significant characters in the version."""
        document = json.loads(generate_badge_json(VulnerabilityStats(), 'x"y\\z', "", "head"))
        assert document["label"] == '✊ grype x"y\\z'

    def test_escape_json(self):
        """Test escaping."""
        assert escape_json('a"b\\c\nd\te') == 'a\\"b\\\\c\\nd\\te'
