"""Failure kinds raised by the scraper stages.

Every stage raises a subclass of :class:`ScrapeError`.  The batch runner
catches them per (url, date) pair and records the message on that pair's
summary row, so none of these ever stops a batch.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base class for all per-item scrape failures."""


class NotFoundError(ScrapeError):
    """The archive holds no snapshot for the requested URL/date."""

    def __init__(self, url: str, timestamp: str | None = None) -> None:
        self.url = url
        self.timestamp = timestamp
        when = f" near {timestamp}" if timestamp else ""
        super().__init__(f"No archived snapshot for {url}{when}")


class TransportError(ScrapeError):
    """A request to the archive failed or returned a non-success status."""

    def __init__(self, url: str, status_code: int | None = None, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            message = f"HTTP {status_code} from {url}"
        else:
            message = f"Request to {url} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class FetchError(TransportError):
    """Fetching the snapshot HTML itself failed."""


class SelectorMissError(ScrapeError):
    """None of the content selectors matched anything in the document."""

    def __init__(self, url: str, selectors: list[str]) -> None:
        self.url = url
        self.selectors = list(selectors)
        super().__init__(
            f"No content selector matched {url} (tried: {', '.join(self.selectors) or 'none'})"
        )


class MissingUrlError(ScrapeError):
    """Extraction was attempted without a snapshot URL."""

    def __init__(self) -> None:
        super().__init__("No snapshot URL to extract from")
