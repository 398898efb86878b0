"""Scraper package — snapshot lookup, fetch, extraction, link filtering, tokenization."""

from tosarchive.scraper.extractor import extract_document, parse_document
from tosarchive.scraper.fetcher import fetch_snapshot
from tosarchive.scraper.links import filter_links, original_url
from tosarchive.scraper.locator import locate
from tosarchive.scraper.tokenizer import tokenize

__all__ = [
    "locate",
    "fetch_snapshot",
    "extract_document",
    "parse_document",
    "filter_links",
    "original_url",
    "tokenize",
]
