"""Tests for display helpers."""

from gemini_consistency.reporting import progress_text
from gemini_consistency.utils.formatting import format_bytes, format_rate, truncate


class TestTruncate:
    def test_short_text_untouched(self):
        assert truncate("Paris") == "Paris"

    def test_long_text_cut(self):
        assert truncate("x" * 300) == "x" * 220 + "…"

    def test_empty(self):
        assert truncate(None) == ""


class TestFormatBytes:
    def test_units(self):
        assert format_bytes(0) == "0 KB"
        assert format_bytes(512) == "512 Bytes"
        assert format_bytes(2048) == "2 KB"
        assert format_bytes(1536) == "1.5 KB"
        assert format_bytes(3 * 1024 * 1024) == "3 MB"


class TestFormatRate:
    def test_percent(self):
        assert format_rate(0.6, 5) == "60.0%"

    def test_no_samples(self):
        assert format_rate(0.0, 0) == "–"


class TestProgressText:
    def test_format(self):
        assert progress_text(2, 5) == "Progress: 2/5 (40%)"
        assert progress_text(1, 3) == "Progress: 1/3 (33%)"
