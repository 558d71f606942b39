"""
Tests for answersheets/policy.py: fetch / skip / refetch decisions.

Decisions are checked through their return value and their effect on the
output directory, never through log text.
"""
import sys
from dataclasses import replace
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from answersheets.policy import Action, PathPolicy


def _write(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture()
def out_dir(tmp_path):
    d = tmp_path / "output" / "quiz"
    d.mkdir(parents=True)
    return d


class TestNoFilter:
    def test_missing_file_is_fetched(self, config, out_dir):
        decision = PathPolicy(config, out_dir).decide("alice/essay.docx")
        assert decision.action is Action.FETCH
        assert decision.path == out_dir / "alice" / "essay.docx"
        assert decision.should_fetch

    def test_existing_file_is_skipped(self, config, out_dir):
        _write(out_dir / "alice" / "essay.docx", 10)
        decision = PathPolicy(config, out_dir).decide("alice/essay.docx")
        assert decision.action is Action.SKIP_ALREADY_PRESENT
        assert not decision.should_fetch

    def test_existing_primary_without_threshold_is_skipped(self, config, out_dir):
        _write(out_dir / "alice" / "responses.pdf", 1)
        decision = PathPolicy(config, out_dir).decide("alice/responses.pdf")
        assert decision.action is Action.SKIP_ALREADY_PRESENT


class TestSizeThreshold:
    def test_small_primary_clears_directory(self, config, out_dir):
        cfg = replace(config, redownload_smaller_than=5 * 1024)
        _write(out_dir / "alice" / "responses.pdf", 2000)
        _write(out_dir / "alice" / "essay.docx", 50)
        _write(out_dir / "bob" / "responses.pdf", 2000)

        decision = PathPolicy(cfg, out_dir).decide("alice/responses.pdf")

        assert decision.action is Action.REFETCH_TOO_SMALL
        assert decision.should_fetch
        assert not (out_dir / "alice").exists()
        assert (out_dir / "bob" / "responses.pdf").exists()

    def test_large_enough_primary_is_skipped(self, config, out_dir):
        cfg = replace(config, redownload_smaller_than=5 * 1024)
        _write(out_dir / "alice" / "responses.pdf", 6000)
        decision = PathPolicy(cfg, out_dir).decide("alice/responses.pdf")
        assert decision.action is Action.SKIP_ALREADY_PRESENT
        assert (out_dir / "alice" / "responses.pdf").stat().st_size == 6000

    def test_exactly_threshold_is_skipped(self, config, out_dir):
        cfg = replace(config, redownload_smaller_than=5120)
        _write(out_dir / "alice" / "responses.pdf", 5120)
        assert PathPolicy(cfg, out_dir).decide("alice/responses.pdf").action \
            is Action.SKIP_ALREADY_PRESENT

    def test_threshold_ignores_other_files(self, config, out_dir):
        cfg = replace(config, redownload_smaller_than=5120)
        _write(out_dir / "alice" / "essay.pdf", 10)
        decision = PathPolicy(cfg, out_dir).decide("alice/essay.pdf")
        assert decision.action is Action.SKIP_ALREADY_PRESENT
        assert (out_dir / "alice" / "essay.pdf").exists()

    def test_attachment_with_primary_suffix_is_not_primary(self, config, out_dir):
        cfg = replace(config, redownload_smaller_than=5120)
        _write(out_dir / "alice" / "responses.pdf", 9000)
        _write(out_dir / "alice" / "old-responses.pdf", 10)

        decision = PathPolicy(cfg, out_dir).decide("alice/old-responses.pdf")

        assert decision.action is Action.SKIP_ALREADY_PRESENT
        assert (out_dir / "alice" / "responses.pdf").stat().st_size == 9000
        assert (out_dir / "alice" / "old-responses.pdf").exists()

    def test_top_level_primary_only_removes_file(self, config, out_dir):
        cfg = replace(config, redownload_smaller_than=5120)
        _write(out_dir / "responses.pdf", 10)
        _write(out_dir / "other.txt", 10)
        decision = PathPolicy(cfg, out_dir).decide("responses.pdf")
        assert decision.action is Action.REFETCH_TOO_SMALL
        assert out_dir.exists()
        assert (out_dir / "other.txt").exists()
        assert not (out_dir / "responses.pdf").exists()


class TestSubjectFilter:
    def test_only_subject_primary_is_fetched(self, config, out_dir):
        policy = PathPolicy(replace(config, subject="alice"), out_dir)
        assert policy.decide("alice/responses.pdf").action is Action.FETCH
        assert policy.decide("bob/responses.pdf").action is Action.SKIP_NOT_OF_INTEREST

    def test_subject_attachments_are_not_of_interest(self, config, out_dir):
        policy = PathPolicy(replace(config, subject="alice"), out_dir)
        assert policy.decide("alice/essay.docx").action is Action.SKIP_NOT_OF_INTEREST

    def test_existing_subject_primary_is_fetched_again(self, config, out_dir):
        _write(out_dir / "alice" / "responses.pdf", 9000)
        policy = PathPolicy(replace(config, subject="alice"), out_dir)
        assert policy.decide("alice/responses.pdf").action is Action.FETCH

    def test_other_subject_skipped_even_when_missing(self, config, out_dir):
        policy = PathPolicy(replace(config, subject="alice"), out_dir)
        decision = policy.decide("bob/responses.pdf")
        assert decision.action is Action.SKIP_NOT_OF_INTEREST
        assert not (out_dir / "bob").exists()

    def test_prefix_of_another_subject_does_not_match(self, config, out_dir):
        policy = PathPolicy(replace(config, subject="al"), out_dir)
        assert policy.decide("alice/responses.pdf").action is Action.SKIP_NOT_OF_INTEREST

    def test_filter_overrides_threshold(self, config, out_dir):
        cfg = replace(config, subject="alice", redownload_smaller_than=5120)
        _write(out_dir / "alice" / "responses.pdf", 10)
        _write(out_dir / "alice" / "essay.docx", 10)
        decision = PathPolicy(cfg, out_dir).decide("alice/responses.pdf")
        assert decision.action is Action.FETCH
        assert (out_dir / "alice" / "essay.docx").exists()
