"""Tests for utils/common.py: byte and elapsed-time formatting."""
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.common import elapsed, format_bytes


class TestFormatBytes:
    def test_bytes(self):
        assert format_bytes(0) == "0 B"
        assert format_bytes(512) == "512 B"

    def test_kilobytes(self):
        assert format_bytes(5120) == "5 KB"

    def test_megabytes(self):
        assert format_bytes(int(1.5 * 1024 * 1024)) == "1.5 MB"

    def test_gigabytes(self):
        assert format_bytes(2 * 1024 ** 3) == "2.00 GB"


class TestElapsed:
    def test_seconds(self):
        assert elapsed(time.time() - 30) == "0m 30s"

    def test_minutes(self):
        assert elapsed(time.time() - 135) == "2m 15s"

    def test_hours(self):
        assert elapsed(time.time() - 3930) == "1h 05m 30s"
