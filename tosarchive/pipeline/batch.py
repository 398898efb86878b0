"""Two-round batch scrape for one platform.

Round 1 scrapes the platform's primary terms page(s) for every month in the
configured range.  The policy links found in those pages are pooled per
target date, unwrapped from the archive's replay URLs, and scraped in round
2 for the same dates.  Links found in secondary documents are kept on their
outcomes but never scheduled, so recursion stops at depth one.

Every (url, date) pair is independent: a failure at any stage becomes an
errored :class:`~tosarchive.scraper.models.TermRecord` and the rest of the
batch carries on.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence

from tosarchive.config import settings
from tosarchive.platforms import PlatformConfig
from tosarchive.scraper.errors import ScrapeError
from tosarchive.scraper.extractor import extract_document
from tosarchive.scraper.links import document_key, filter_links, original_url
from tosarchive.scraper.locator import locate
from tosarchive.scraper.models import BatchResult, RecordType, ScrapeOutcome, TermRecord
from tosarchive.scraper.tokenizer import tokenize


@dataclass(frozen=True)
class ScrapeJob:
    """One (url, target date) work item."""

    kind: RecordType
    policy_name: str
    url: str
    target_date: date

    def failed(self, message: str) -> ScrapeOutcome:
        record = TermRecord(
            type=self.kind,
            policy_name=self.policy_name,
            target_url=self.url,
            target_date=self.target_date,
            error=message,
        )
        return ScrapeOutcome(record=record)


def _describe(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"


def _merge_key(outcome: ScrapeOutcome):
    r = outcome.record
    return (r.target_date, 0 if r.type == "primary" else 1, r.policy_name, r.target_url)


# ---------------------------------------------------------------------------
# Single pipeline run
# ---------------------------------------------------------------------------

def scrape_document(
    kind: RecordType,
    policy_name: str,
    url: str,
    target_date: date,
    selectors: Sequence[str],
) -> ScrapeOutcome:
    """locate → extract → tokenize/filter for one (url, date) pair.

    Never raises :class:`ScrapeError`; the failure is recorded on the
    returned outcome's record instead.  A document with no text is a
    success with ``word_count == 0``.
    """
    record = TermRecord(
        type=kind, policy_name=policy_name, target_url=url, target_date=target_date
    )
    try:
        snapshot = locate(url, target_date)
        record.snapshot_timestamp = snapshot.snapshot_timestamp
        record.snapshot_url = snapshot.snapshot_url
        document = extract_document(snapshot.snapshot_url, selectors)
    except ScrapeError as exc:
        record.error = _describe(exc)
        return ScrapeOutcome(record=record)

    tokens = tokenize(document.paragraphs)
    record.word_count = len(tokens)
    links = filter_links(document.links, document.url or snapshot.snapshot_url)
    return ScrapeOutcome(record=record, tokens=tokens, links=links)


# ---------------------------------------------------------------------------
# Link aggregation between rounds
# ---------------------------------------------------------------------------

def aggregate_links(
    outcomes: Iterable[ScrapeOutcome],
    exclude: Iterable[str] = (),
) -> List[ScrapeJob]:
    """Turn links found in successful round-1 outcomes into round-2 jobs.

    Jobs are keyed by (target date, original URL); the first label seen for
    a key names the policy.  Links to any spelling of a URL in *exclude*
    (the primary documents themselves) are skipped.
    """
    excluded = {document_key(u) for u in exclude}
    seen: set[tuple[date, str]] = set()
    jobs: List[ScrapeJob] = []

    for outcome in sorted(outcomes, key=_merge_key):
        record = outcome.record
        if not record.ok:
            continue
        for link in outcome.links:
            target = original_url(link.absolute_url)
            key = (record.target_date, target)
            if key in seen or document_key(target) in excluded:
                continue
            seen.add(key)
            jobs.append(
                ScrapeJob(
                    kind="secondary",
                    policy_name=link.display_label,
                    url=target,
                    target_date=record.target_date,
                )
            )
    return jobs


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

class BatchRunner:
    """Run both scrape rounds for one platform with a bounded worker pool.

    Args:
        config: The platform to scrape.
        store: Optional persistence collaborator with ``save(outcome)`` and
            ``write_summary(records)`` methods (e.g.
            :class:`~tosarchive.storage.results.ResultStore`).  ``save`` is
            called from the coordinating thread as each item finishes, so
            rows written before an interruption stay intact;
            ``write_summary`` receives the merged records once both rounds
            are done.
        max_workers: Simultaneous in-flight items.  Defaults to
            ``settings.max_concurrent_scrapes``.
    """

    def __init__(
        self,
        config: PlatformConfig,
        store=None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.max_workers = max(1, max_workers or settings.max_concurrent_scrapes)

    def primary_jobs(self) -> List[ScrapeJob]:
        return [
            ScrapeJob(
                kind="primary",
                policy_name=self.config.name_for(url),
                url=url,
                target_date=target_date,
            )
            for target_date in self.config.target_dates()
            for url in self.config.primary_urls
        ]

    def run(self) -> BatchResult:
        platform = self.config.platform
        jobs = self.primary_jobs()
        print(f"[ROUND 1] {platform}: {len(jobs)} primary scrape(s) …")
        primary = self.run_round(jobs)

        secondary: List[ScrapeOutcome] = []
        if self.config.follow_links:
            follow_up = aggregate_links(primary, exclude=self.config.primary_urls)
            print(f"[ROUND 2] {platform}: {len(follow_up)} secondary scrape(s) …")
            secondary = self.run_round(follow_up)
        else:
            print(f"[ROUND 2] {platform}: skipped (follow_links disabled).")

        result = BatchResult(platform=platform, outcomes=sorted(primary + secondary, key=_merge_key))
        if self.store is not None:
            self.store.write_summary(result.records)
        print(
            f"[DONE] {platform}: {len(result.records)} row(s), "
            f"{len(result.errors())} with errors."
        )
        return result

    def run_round(self, jobs: Sequence[ScrapeJob]) -> List[ScrapeOutcome]:
        """Scrape *jobs* in parallel; returns once every job has finished."""
        outcomes: List[ScrapeOutcome] = []
        if not jobs:
            return outcomes

        selectors = self.config.selectors
        pool = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            future_to_job = {
                pool.submit(
                    scrape_document, job.kind, job.policy_name, job.url, job.target_date, selectors
                ): job
                for job in jobs
            }
            for future in as_completed(future_to_job):
                job = future_to_job[future]
                try:
                    outcome = future.result()
                except Exception as exc:
                    outcome = job.failed(_describe(exc))

                record = outcome.record
                if record.ok:
                    print(
                        f"[SCRAPING] ✓ {record.type} {record.policy_name!r} "
                        f"{record.target_date} — {record.word_count} words"
                    )
                else:
                    print(
                        f"[SCRAPING] ✗ {record.type} {record.policy_name!r} "
                        f"{record.target_date} — {record.error}"
                    )

                if self.store is not None:
                    self.store.save(outcome)
                outcomes.append(outcome)
        finally:
            # On interruption, queued jobs are dropped; in-flight ones finish.
            pool.shutdown(wait=True, cancel_futures=True)

        return sorted(outcomes, key=_merge_key)
