"""Data models for the snapshot scraping pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Literal, Optional

RecordType = Literal["primary", "secondary"]


@dataclass(frozen=True)
class SnapshotQuery:
    """A request for the snapshot of *target_url* closest to *target_date*."""

    target_url: str
    target_date: Optional[date] = None


@dataclass(frozen=True)
class SnapshotResult:
    """The archive's closest snapshot for a :class:`SnapshotQuery`."""

    snapshot_timestamp: datetime
    snapshot_url: str


@dataclass
class RawPage:
    """The raw HTTP response for a single snapshot fetch."""

    url: str
    html: str
    status_code: int


@dataclass(frozen=True)
class RawLink:
    """An anchor as found in the page: its href and visible label."""

    href: str
    label: str


@dataclass(frozen=True)
class ResolvedLink:
    """A policy-relevant link with an absolute URL and a cleaned label."""

    absolute_url: str
    display_label: str


@dataclass
class ExtractedDocument:
    """Content of one snapshot, taken from the first matching selector."""

    url: str
    selector: str
    paragraphs: List[str] = field(default_factory=list)
    links: List[RawLink] = field(default_factory=list)


@dataclass(frozen=True)
class WordToken:
    paragraph_index: int
    word: str


@dataclass
class TermRecord:
    """Summary row for one (document, target date) scrape.

    ``word_count`` is ``None`` exactly when ``error`` is set.
    """

    type: RecordType
    policy_name: str
    target_url: str
    target_date: date
    snapshot_timestamp: Optional[datetime] = None
    snapshot_url: Optional[str] = None
    word_count: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ScrapeOutcome:
    """Everything one pipeline run produced for a single (url, date) pair."""

    record: TermRecord
    tokens: List[WordToken] = field(default_factory=list)
    links: List[ResolvedLink] = field(default_factory=list)


@dataclass
class BatchResult:
    """Merged output of a two-round platform run."""

    platform: str
    outcomes: List[ScrapeOutcome] = field(default_factory=list)

    @property
    def records(self) -> List[TermRecord]:
        return [o.record for o in self.outcomes]

    def primary(self) -> List[TermRecord]:
        return [r for r in self.records if r.type == "primary"]

    def secondary(self) -> List[TermRecord]:
        return [r for r in self.records if r.type == "secondary"]

    def errors(self) -> List[TermRecord]:
        return [r for r in self.records if not r.ok]
