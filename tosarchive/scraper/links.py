"""Policy-link filtering and Wayback replay-URL helpers.

Links inside an archived page come in three shapes:

* absolute replay URLs  ``http://web.archive.org/web/<ts>/https://site.com/x``
* archive-relative paths ``/web/<ts>/https://site.com/x``
* plain relative hrefs  ``/x`` or ``../x`` (left untouched by the archive)

``filter_links`` keeps the ones that look like legal agreements and makes
them absolute; ``original_url`` peels the replay wrapper back off so the
target can be looked up in the archive afresh.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from tosarchive.scraper.models import RawLink, ResolvedLink

# ---------------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------------
_RELEVANT_RE = re.compile(
    r"\b(?:terms|polic(?:y|ies)|notices?|procedures?|guidelines?|tips|here)\b",
    re.IGNORECASE,
)

# Printable / plain-text variants duplicate a document we already have.
_EXCLUDED_PHRASES = ("printable", "plain text", "contact", "support")

_HERE_RE = re.compile(r"\bhere\b", re.IGNORECASE)
_SPACES_RE = re.compile(r"\s+")

# ``<host>/web/<timestamp>[modifier_]/<original>``; modifiers are id_, im_, js_ …
_REPLAY_RE = re.compile(
    r"^(?:https?:)?(?://[^/]+)?/web/\d{1,14}(?:[a-z]{2}_)?/(?P<original>.+)$",
    re.IGNORECASE,
)
_COLLAPSED_SCHEME_RE = re.compile(r"^(https?):/+", re.IGNORECASE)


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------

def original_url(url: str) -> str:
    """Strip every Wayback replay wrapper from *url*.

    ``http://web.archive.org/web/20190101000000/https://site.com/terms``
    becomes ``https://site.com/terms``.  URLs that are not replay URLs are
    returned unchanged.
    """
    current = url.strip()
    while True:
        match = _REPLAY_RE.match(current)
        if not match:
            break
        current = match.group("original")
    # The archive sometimes collapses "https://" to "https:/".
    return _COLLAPSED_SCHEME_RE.sub(lambda m: f"{m.group(1)}://", current)


def site_root(url: str) -> str:
    """Return ``scheme://host`` of *url* with the path emptied."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, "", "", ""))


def _strip_query_and_fragment(url: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def resolve_href(href: str, snapshot_url: str) -> Optional[str]:
    """Make *href* absolute relative to the snapshot it was found in.

    Returns ``None`` for hrefs that point nowhere useful: empty, pure
    ``#fragment``/``?query`` links, or non-HTTP schemes.
    """
    href = href.strip()
    if not href:
        return None

    parts = urlsplit(href)
    if parts.scheme and parts.scheme.lower() not in ("http", "https"):
        return None

    clean = _strip_query_and_fragment(href)
    if not clean:
        return None
    if parts.scheme:
        return clean

    site = site_root(original_url(snapshot_url))
    if clean.startswith("//"):
        scheme = urlsplit(site).scheme or "https"
        return f"{scheme}:{clean}"
    if _REPLAY_RE.match(clean):
        return site_root(snapshot_url) + clean
    # Replay paths are not directory-structured, so join onto the site root.
    return urljoin(site + "/", clean)


def document_key(url: str) -> str:
    """Scheme-free ``host/path`` identity of the document behind *url*.

    Replay wrappers, a leading ``www.`` and a trailing slash are ignored, so
    every spelling of one page maps to the same key.
    """
    parts = urlsplit(original_url(url))
    host = parts.netloc.lower()
    if host.startswith("www."):
        host = host[4:]
    return f"{host}{parts.path.rstrip('/')}"


def is_self_link(url: str, snapshot_url: str) -> bool:
    """``True`` if *url* points back at the snapshot's own document."""
    if url == snapshot_url:
        return True
    return document_key(url) == document_key(snapshot_url)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

def is_relevant_label(label: str) -> bool:
    """``True`` for anchor text that names a legal agreement."""
    lowered = label.lower()
    if any(phrase in lowered for phrase in _EXCLUDED_PHRASES):
        return False
    return bool(_RELEVANT_RE.search(label))


def clean_label(label: str, absolute_url: str) -> str:
    """Tidy *label*; uninformative "click here" labels become the target's file name."""
    label = _SPACES_RE.sub(" ", label).strip()
    if _HERE_RE.search(label):
        stem = PurePosixPath(urlsplit(original_url(absolute_url)).path).stem
        if stem:
            return stem
    return label


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def filter_links(raw_links: Iterable[RawLink], snapshot_url: str) -> List[ResolvedLink]:
    """Return the policy-relevant links of one document, deduplicated.

    Order follows first appearance in the document.
    """
    seen: set[str] = set()
    resolved: List[ResolvedLink] = []
    for link in raw_links:
        if not is_relevant_label(link.label):
            continue
        absolute = resolve_href(link.href, snapshot_url)
        if absolute is None or absolute in seen:
            continue
        if is_self_link(absolute, snapshot_url):
            continue
        seen.add(absolute)
        resolved.append(
            ResolvedLink(absolute_url=absolute, display_label=clean_label(link.label, absolute))
        )
    return resolved
