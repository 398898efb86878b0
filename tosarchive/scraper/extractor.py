"""Content extraction: turns a snapshot page into an :class:`ExtractedDocument`.

Terms pages change markup across years, so callers pass an ordered list of
CSS selectors.  The first selector matching at least one element supplies
the whole document; later selectors are never consulted and elements from
different selectors are never mixed.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from tosarchive.scraper.errors import MissingUrlError, SelectorMissError
from tosarchive.scraper.fetcher import fetch_snapshot
from tosarchive.scraper.models import ExtractedDocument, RawLink


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

# Markup injected by the Wayback Machine's replay banner.
_ARCHIVE_CHROME = ["#wm-ipp-base", "#wm-ipp", "#donato", "#wm-ipp-print"]

_BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "figcaption", "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header",
    "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table", "td",
    "th", "tr", "ul",
]

_NEWLINES_RE = re.compile(r"\n+")
_SPACES_RE = re.compile(r"\s+")


def _strip_noise(soup: BeautifulSoup) -> None:
    """Remove scripts, styles, comments and the archive's own banner in place."""
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    for selector in _ARCHIVE_CHROME:
        for tag in soup.select(selector):
            tag.decompose()


def _select_content(
    soup: BeautifulSoup, selectors: Sequence[str]
) -> Optional[Tuple[str, List[Tag]]]:
    """Return the first selector with matches and its outermost matching elements."""
    for selector in selectors:
        elements = soup.select(selector)
        if elements:
            # A selector such as "div" can match both a node and its child.
            matched = {id(e) for e in elements}
            outermost = [e for e in elements if not any(id(p) in matched for p in e.parents)]
            return selector, outermost
    return None


def _extract_links(elements: Sequence[Tag]) -> List[RawLink]:
    """Return every ``<a href>`` inside *elements*, in document order."""
    links: List[RawLink] = []
    for element in elements:
        anchors = element.select("a[href]")
        if element.name == "a" and element.has_attr("href"):
            anchors.insert(0, element)
        for a in anchors:
            links.append(RawLink(href=a["href"].strip(), label=a.get_text(" ", strip=True)))
    return links


def _mark_line_breaks(element: Tag) -> None:
    """Surround block elements with newlines and turn ``<br>`` into one."""
    for br in element.find_all("br"):
        br.replace_with(NavigableString("\n"))
    for block in element.find_all(_BLOCK_TAGS):
        block.insert_before(NavigableString("\n"))
        block.insert_after(NavigableString("\n"))


def _split_paragraphs(elements: Sequence[Tag]) -> List[str]:
    """Return the visible text of *elements* as a list of paragraphs."""
    blocks: List[str] = []
    for element in elements:
        _mark_line_breaks(element)
        blocks.append(element.get_text())
    text = "\n\n".join(blocks)

    paragraphs: List[str] = []
    for chunk in _NEWLINES_RE.split(text):
        chunk = _SPACES_RE.sub(" ", chunk).strip()
        if chunk:
            paragraphs.append(chunk)
    return paragraphs


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_document(html: str, selectors: Sequence[str], url: str = "") -> ExtractedDocument:
    """Extract paragraphs and links from *html* using selector fallback.

    Raises:
        SelectorMissError: If no selector matches any element.
    """
    soup = BeautifulSoup(html, "html.parser")
    _strip_noise(soup)
    adopted = _select_content(soup, selectors)
    if adopted is None:
        raise SelectorMissError(url, list(selectors))
    selector, elements = adopted

    # Links first: _split_paragraphs mutates the tree.
    links = _extract_links(elements)
    paragraphs = _split_paragraphs(elements)
    return ExtractedDocument(url=url, selector=selector, paragraphs=paragraphs, links=links)


def extract_document(snapshot_url: str | None, selectors: Sequence[str]) -> ExtractedDocument:
    """Fetch *snapshot_url* and extract its content.

    Raises:
        MissingUrlError: If *snapshot_url* is empty (no snapshot was located).
        FetchError: If the snapshot could not be fetched.
        SelectorMissError: If no selector matched.
    """
    if not snapshot_url:
        raise MissingUrlError()
    raw = fetch_snapshot(snapshot_url)
    return parse_document(raw.html, selectors, url=raw.url)
