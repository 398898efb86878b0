"""Per-platform run configuration and the built-in platform presets.

A :class:`PlatformConfig` is everything the batch runner needs for one
platform: which terms page(s) to start from, which months to cover, and the
ordered list of CSS selectors used to find the agreement text in archived
copies of that platform's pages.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from pathlib import PurePosixPath
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from tosarchive.dates import month_sequence


@dataclass(frozen=True)
class PlatformConfig:
    platform: str
    primary_urls: List[str]
    start: date
    end: date
    selectors: List[str]
    follow_links: bool = True
    primary_name: Optional[str] = None

    def target_dates(self) -> List[date]:
        return month_sequence(self.start, self.end)

    def name_for(self, url: str) -> str:
        """Display name for a primary URL: ``primary_name`` or the URL's last path segment."""
        if self.primary_name:
            return self.primary_name
        stem = PurePosixPath(urlsplit(url).path).stem
        return stem or urlsplit(url).netloc

    def with_range(self, start: Optional[date] = None, end: Optional[date] = None) -> "PlatformConfig":
        return replace(self, start=start or self.start, end=end or self.end)


# Fallback selectors shared by every preset, tried after the platform's own.
_GENERIC_SELECTORS = ["main", "article", "#content", "body"]


def _selectors(*specific: str) -> List[str]:
    return list(specific) + _GENERIC_SELECTORS


PLATFORMS: Dict[str, PlatformConfig] = {
    "spotify": PlatformConfig(
        platform="spotify",
        primary_urls=["https://www.spotify.com/us/legal/end-user-agreement/"],
        start=date(2012, 1, 1),
        end=date(2024, 12, 1),
        selectors=_selectors("div.legal-content", "div#legal-content", "div.col-md-8"),
        primary_name="end-user-agreement",
    ),
    "facebook": PlatformConfig(
        platform="facebook",
        primary_urls=["https://www.facebook.com/legal/terms"],
        start=date(2010, 1, 1),
        end=date(2024, 12, 1),
        selectors=_selectors("div#content div._4-u2", "div._5tkp", "div.UIStandardFrame_Content"),
        primary_name="terms",
    ),
    "twitter": PlatformConfig(
        platform="twitter",
        primary_urls=["https://twitter.com/tos"],
        start=date(2010, 1, 1),
        end=date(2024, 12, 1),
        selectors=_selectors("div.ct11-tos", "div#tos-body", "div.tos-container", "div.content-main"),
        primary_name="tos",
    ),
    "instagram": PlatformConfig(
        platform="instagram",
        primary_urls=["https://help.instagram.com/581066165581870"],
        start=date(2013, 1, 1),
        end=date(2024, 12, 1),
        selectors=_selectors("div._4-u2", "div.hcContent", "div._5tkp"),
        primary_name="terms-of-use",
    ),
    "tiktok": PlatformConfig(
        platform="tiktok",
        primary_urls=["https://www.tiktok.com/legal/terms-of-service"],
        start=date(2018, 8, 1),
        end=date(2024, 12, 1),
        selectors=_selectors("div.tiktok-legal-content", "div[class*='ContentContainer']"),
        primary_name="terms-of-service",
    ),
    "youtube": PlatformConfig(
        platform="youtube",
        primary_urls=["https://www.youtube.com/t/terms"],
        start=date(2010, 1, 1),
        end=date(2024, 12, 1),
        selectors=_selectors("div#yts-article", "div.article-content", "div#terms-of-service"),
        primary_name="terms",
    ),
}


def get_platform(name: str) -> PlatformConfig:
    """Return the preset for *name* (case-insensitive).

    Raises:
        KeyError: If no preset exists; the message lists the known names.
    """
    key = name.strip().lower()
    if key not in PLATFORMS:
        raise KeyError(f"Unknown platform {name!r}; known: {', '.join(sorted(PLATFORMS))}")
    return PLATFORMS[key]
