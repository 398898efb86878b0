"""Tests for CSV result persistence."""

from __future__ import annotations

import csv
from datetime import date, datetime
from pathlib import Path

import pytest

from tosarchive.scraper.models import ScrapeOutcome, TermRecord, WordToken
from tosarchive.storage.results import SUMMARY_FIELDS, ResultStore, slugify


@pytest.fixture()
def store(tmp_path: Path) -> ResultStore:
    s = ResultStore("Spotify", root=tmp_path)
    s.initialise()
    return s


def _ok_outcome() -> ScrapeOutcome:
    record = TermRecord(
        type="primary",
        policy_name="End User Agreement",
        target_url="https://www.spotify.com/us/legal/end-user-agreement/",
        target_date=date(2019, 1, 1),
        snapshot_timestamp=datetime(2019, 1, 3, 12, 15),
        snapshot_url="http://web.archive.org/web/20190103121500/https://www.spotify.com/us/legal/end-user-agreement/",
        word_count=3,
    )
    tokens = [WordToken(1, "spotify"), WordToken(1, "terms"), WordToken(2, "apply")]
    return ScrapeOutcome(record=record, tokens=tokens)


def _failed_outcome() -> ScrapeOutcome:
    record = TermRecord(
        type="secondary",
        policy_name="Privacy Policy",
        target_url="https://www.spotify.com/us/legal/privacy-policy/",
        target_date=date(2010, 1, 1),
        error="NotFoundError: No archived snapshot",
    )
    return ScrapeOutcome(record=record)


class TestSlugify:
    def test_lowercases_and_dashes(self) -> None:
        assert slugify("End User Agreement") == "end-user-agreement"

    def test_empty_name_falls_back(self) -> None:
        assert slugify("!!!") == "document"


class TestResultStore:
    def test_initialise_writes_header_only(self, store: ResultStore) -> None:
        with store.summary_path.open(newline="") as f:
            assert list(csv.reader(f)) == [SUMMARY_FIELDS]
        assert store.words_dir.is_dir()

    def test_initialise_truncates_previous_run(self, store: ResultStore) -> None:
        store.save(_ok_outcome())
        store.initialise()
        assert store.load_summary() == []

    def test_save_success_writes_row_and_word_file(self, store: ResultStore) -> None:
        store.save(_ok_outcome())

        words = store.words_path(_ok_outcome().record)
        assert words.parent == store.words_dir
        assert words.name.startswith("20190103_end-user-agreement_")
        with words.open(newline="") as f:
            assert list(csv.reader(f)) == [
                ["paragraph", "word"], ["1", "spotify"], ["1", "terms"], ["2", "apply"],
            ]
        [record] = store.load_summary()
        assert record == _ok_outcome().record

    def test_failed_row_has_blank_word_count_and_no_word_file(self, store: ResultStore) -> None:
        store.save(_failed_outcome())

        with store.summary_path.open(newline="") as f:
            [row] = list(csv.DictReader(f))
        assert row["word_count"] == ""
        assert row["error"].startswith("NotFoundError")
        assert list(store.words_dir.iterdir()) == []
        assert store.load_summary() == [_failed_outcome().record]

    def test_rows_are_appended_in_save_order(self, store: ResultStore) -> None:
        store.save(_ok_outcome())
        store.save(_failed_outcome())
        assert [r.type for r in store.load_summary()] == ["primary", "secondary"]

    def test_same_name_different_documents_get_separate_word_files(self, store: ResultStore) -> None:
        legal = _ok_outcome()
        legal.record.policy_name = "privacy"
        legal.record.target_url = "https://site.com/legal/privacy"
        eu = _ok_outcome()
        eu.record.policy_name = "privacy"
        eu.record.target_url = "https://site.com/eu/privacy"
        eu.tokens = [WordToken(1, "gdpr")]

        store.save(legal)
        store.save(eu)

        assert store.words_path(legal.record) != store.words_path(eu.record)
        assert len(list(store.words_dir.iterdir())) == 2
        with store.words_path(legal.record).open(newline="") as f:
            assert len(list(csv.reader(f))) == 4

    def test_word_file_name_ignores_url_spelling(self, store: ResultStore) -> None:
        a = _ok_outcome().record
        b = _ok_outcome().record
        b.target_url = "http://spotify.com/us/legal/end-user-agreement"
        assert store.words_path(a) == store.words_path(b)

    def test_write_summary_replaces_rows_in_given_order(self, store: ResultStore) -> None:
        store.save(_ok_outcome())
        store.save(_failed_outcome())

        store.write_summary([_failed_outcome().record, _ok_outcome().record])

        assert [r.type for r in store.load_summary()] == ["secondary", "primary"]
        assert sorted(p.name for p in store.platform_dir.iterdir()) == ["summary.csv", "words"]

    def test_save_without_initialise_creates_file(self, tmp_path: Path) -> None:
        fresh = ResultStore("twitter", root=tmp_path)
        fresh.save(_failed_outcome())
        assert len(fresh.load_summary()) == 1

    def test_missing_summary_loads_empty(self, tmp_path: Path) -> None:
        assert ResultStore("nobody", root=tmp_path).load_summary() == []

    def test_default_root_comes_from_settings(self) -> None:
        from tosarchive.config import settings

        assert ResultStore("spotify").platform_dir == settings.output_dir / "spotify"
