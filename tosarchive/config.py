"""Centralised settings for tos-archive.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    output_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("TOS_ARCHIVE_OUTPUT", Path.home() / ".tos_archive")
        )
    )

    # ------------------------------------------------------------------
    # Wayback Machine
    # ------------------------------------------------------------------
    archive_api_url: str = field(
        default_factory=lambda: os.environ.get(
            "ARCHIVE_API_URL", "https://archive.org/wayback/available"
        )
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "TOS_ARCHIVE_USER_AGENT",
            "Mozilla/5.0 (compatible; tos-archive/1.0; terms-of-service research)",
        )
    )

    # ------------------------------------------------------------------
    # Scraper
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    max_concurrent_scrapes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONCURRENT_SCRAPES", "3"))
    )

    def ensure_output_dir(self) -> None:
        """Create the output directory if it does not exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton — import this everywhere:
#   from tosarchive.config import settings
settings = Settings()
