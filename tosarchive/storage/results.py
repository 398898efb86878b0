"""CSV persistence for batch results.

Layout under ``<root>/<platform>/``::

    summary.csv                         one row per (document, target date)
    words/<YYYYMMDD>_<policy>_<id>.csv  paragraph,word pairs of one snapshot

``<id>`` is a short digest of the document's host and path, since two
documents on one date may share a policy name.

The summary is truncated once by :meth:`ResultStore.initialise` and then
appended to row by row, so an interrupted run leaves only complete rows.
A finished run rewrites it in merged order with :meth:`ResultStore.write_summary`.
"""

from __future__ import annotations

import csv
import hashlib
import re
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional

from tosarchive.config import settings
from tosarchive.scraper.links import document_key
from tosarchive.scraper.models import ScrapeOutcome, TermRecord

SUMMARY_FIELDS = [
    "type",
    "policy_name",
    "target_url",
    "target_date",
    "snapshot_timestamp",
    "snapshot_url",
    "word_count",
    "error",
]

WORD_FIELDS = ["paragraph", "word"]


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "document"


def _record_to_row(record: TermRecord) -> dict:
    return {
        "type": record.type,
        "policy_name": record.policy_name,
        "target_url": record.target_url,
        "target_date": record.target_date.isoformat(),
        "snapshot_timestamp": (
            record.snapshot_timestamp.isoformat() if record.snapshot_timestamp else ""
        ),
        "snapshot_url": record.snapshot_url or "",
        "word_count": "" if record.word_count is None else record.word_count,
        "error": record.error or "",
    }


def _row_to_record(row: dict) -> TermRecord:
    return TermRecord(
        type=row["type"],  # type: ignore[arg-type]
        policy_name=row["policy_name"],
        target_url=row["target_url"],
        target_date=date.fromisoformat(row["target_date"]),
        snapshot_timestamp=(
            datetime.fromisoformat(row["snapshot_timestamp"]) if row["snapshot_timestamp"] else None
        ),
        snapshot_url=row["snapshot_url"] or None,
        word_count=int(row["word_count"]) if row["word_count"] != "" else None,
        error=row["error"] or None,
    )


class ResultStore:
    """Writes summary rows and word corpora for one platform."""

    def __init__(self, platform: str, root: Optional[Path] = None) -> None:
        self.platform = platform
        self.root = Path(root) if root is not None else settings.output_dir
        self.platform_dir = self.root / slugify(platform)

    @property
    def summary_path(self) -> Path:
        return self.platform_dir / "summary.csv"

    @property
    def words_dir(self) -> Path:
        return self.platform_dir / "words"

    def words_path(self, record: TermRecord) -> Path:
        when = record.snapshot_timestamp or record.target_date
        digest = hashlib.sha1(document_key(record.target_url).encode("utf-8")).hexdigest()[:8]
        return self.words_dir / f"{when:%Y%m%d}_{slugify(record.policy_name)}_{digest}.csv"

    def initialise(self) -> None:
        """Create/overwrite the summary CSV and write its header."""
        self.words_dir.mkdir(parents=True, exist_ok=True)
        with self.summary_path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
            writer.writeheader()

    def save(self, outcome: ScrapeOutcome) -> None:
        """Append *outcome*'s summary row; write its word corpus if it succeeded."""
        if not self.summary_path.exists():
            self.initialise()

        record = outcome.record
        if record.ok:
            with self.words_path(record).open("w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(WORD_FIELDS)
                writer.writerows((t.paragraph_index, t.word) for t in outcome.tokens)

        with self.summary_path.open("a", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
            writer.writerow(_record_to_row(record))

    def write_summary(self, records: Iterable[TermRecord]) -> None:
        """Replace the summary CSV with *records*, in the order given.

        Written to a sibling file and renamed over the original, so the
        appended copy stays intact until the rewrite is complete.
        """
        self.platform_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = self.summary_path.with_suffix(".csv.tmp")
        with tmp_path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
            writer.writeheader()
            writer.writerows(_record_to_row(r) for r in records)
        tmp_path.replace(self.summary_path)

    def load_summary(self) -> List[TermRecord]:
        """Read the summary CSV back; missing file gives an empty list."""
        if not self.summary_path.exists():
            return []
        with self.summary_path.open(newline="", encoding="utf-8") as f:
            return [_row_to_record(row) for row in csv.DictReader(f)]
