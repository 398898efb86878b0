"""Post-run views over a platform's summary rows."""

from __future__ import annotations

from collections import OrderedDict
from datetime import date
from typing import Any, Dict, Iterable, List

from tosarchive.scraper.models import TermRecord


def error_report(records: Iterable[TermRecord]) -> List[Dict[str, Any]]:
    """Return one row per failed scrape, in input order."""
    return [
        {
            "type": r.type,
            "policy_name": r.policy_name,
            "target_date": r.target_date,
            "target_url": r.target_url,
            "error": r.error,
        }
        for r in records
        if not r.ok
    ]


def word_count_table(records: Iterable[TermRecord]) -> List[Dict[str, Any]]:
    """Total words per target date, split into primary and secondary.

    Failed rows contribute nothing; a date whose every scrape failed is
    omitted.
    """
    totals: "OrderedDict[date, Dict[str, Any]]" = OrderedDict()
    for r in sorted(records, key=lambda rec: rec.target_date):
        if not r.ok:
            continue
        row = totals.setdefault(
            r.target_date,
            {
                "target_date": r.target_date,
                "primary_words": 0,
                "secondary_words": 0,
                "total_words": 0,
                "documents": 0,
            },
        )
        row[f"{r.type}_words"] += r.word_count or 0
        row["total_words"] += r.word_count or 0
        row["documents"] += 1
    return list(totals.values())
