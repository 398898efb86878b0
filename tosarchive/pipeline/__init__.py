"""Batch orchestration package.

Public API::

    from tosarchive.pipeline import BatchRunner
    from tosarchive.platforms import get_platform

    result = BatchRunner(get_platform("spotify")).run()
"""

from tosarchive.pipeline.batch import BatchRunner, aggregate_links, scrape_document
from tosarchive.pipeline.summary import error_report, word_count_table

__all__ = [
    "BatchRunner",
    "aggregate_links",
    "scrape_document",
    "error_report",
    "word_count_table",
]
