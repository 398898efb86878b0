"""HTTP fetcher for archived snapshot pages."""

from __future__ import annotations

import httpx

from tosarchive.config import settings
from tosarchive.scraper.errors import FetchError, MissingUrlError
from tosarchive.scraper.models import RawPage


def fetch_snapshot(url: str | None) -> RawPage:
    """Fetch the replay page at *url* and return a :class:`RawPage`.

    Redirects are followed (the archive redirects to the nearest capture it
    actually holds).  There is no sleep or retry here; rate limiting lives
    at the batch layer (worker pool size).

    Raises:
        MissingUrlError: If *url* is empty.
        FetchError: On a 4xx/5xx status, a timeout or a network failure.
    """
    if not url:
        raise MissingUrlError()

    try:
        with httpx.Client(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
    except httpx.HTTPError as exc:
        raise FetchError(url, reason=str(exc)) from exc

    if not response.is_success:
        raise FetchError(url, status_code=response.status_code)

    return RawPage(url=str(response.url), html=response.text, status_code=response.status_code)
