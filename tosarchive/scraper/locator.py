"""Closest-snapshot lookup against the Wayback Machine availability API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import httpx

from tosarchive.config import settings
from tosarchive.scraper.errors import NotFoundError, TransportError
from tosarchive.scraper.models import SnapshotQuery, SnapshotResult

ARCHIVE_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def parse_archive_timestamp(timestamp: str) -> datetime:
    """Parse a compact ``YYYYMMDDhhmmss`` archive timestamp.

    Truncated timestamps are accepted: a missing month or day becomes ``01``
    and missing time fields become zero.
    """
    digits = timestamp.strip()
    year = digits[0:4]
    month = digits[4:6] or "01"
    day = digits[6:8] or "01"
    clock = digits[8:14].ljust(6, "0")
    return datetime.strptime(year + month + day + clock, ARCHIVE_TIMESTAMP_FORMAT)


def locate(url: str, target_date: Optional[date] = None) -> SnapshotResult:
    """Return the archived snapshot of *url* closest to *target_date*.

    Which snapshot counts as "closest" (including ties either side of the
    date) is decided entirely by the archive.

    Raises:
        TransportError: Non-2xx status, network failure, timeout or a body
            that is not JSON.
        NotFoundError: The archive reports no available snapshot.
    """
    params = {"url": url}
    timestamp = target_date.strftime("%Y%m%d") if target_date else None
    if timestamp:
        params["timestamp"] = timestamp

    try:
        with httpx.Client(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(settings.archive_api_url, params=params)
    except httpx.HTTPError as exc:
        raise TransportError(settings.archive_api_url, reason=str(exc)) from exc

    if not response.is_success:
        raise TransportError(settings.archive_api_url, status_code=response.status_code)

    try:
        data = response.json()
    except ValueError as exc:
        raise TransportError(
            settings.archive_api_url, response.status_code, "response was not JSON"
        ) from exc

    if not isinstance(data, dict):
        raise NotFoundError(url, timestamp)
    closest = (data.get("archived_snapshots") or {}).get("closest") or {}
    if not closest.get("available") or not closest.get("url"):
        raise NotFoundError(url, timestamp)

    return SnapshotResult(
        snapshot_timestamp=parse_archive_timestamp(str(closest["timestamp"])),
        snapshot_url=closest["url"],
    )


def locate_query(query: SnapshotQuery) -> SnapshotResult:
    """:func:`locate` for a :class:`SnapshotQuery`."""
    return locate(query.target_url, query.target_date)
