"""Centralised settings for the catalog crawler.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() not in ("0", "false", "no", "")


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Source site
    # ------------------------------------------------------------------
    base_url: str = field(
        default_factory=lambda: os.environ.get("CATALOG_BASE_URL", "https://1337x.to")
    )
    uploader: str = field(
        default_factory=lambda: os.environ.get("CATALOG_UPLOADER", "johncena141")
    )

    # ------------------------------------------------------------------
    # Concurrency
    # ------------------------------------------------------------------
    page_buffer_factor: int = field(
        default_factory=lambda: int(os.environ.get("CATALOG_PAGE_BUFFER", "3"))
    )
    item_buffer_factor: int = field(
        default_factory=lambda: int(os.environ.get("CATALOG_ITEM_BUFFER", "10"))
    )

    # ------------------------------------------------------------------
    # Scraper
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    validate_hash: bool = field(
        default_factory=lambda: _env_flag("CATALOG_VALIDATE_HASH", "1")
    )
    # Warn once this many listing pages in a row come back without links.
    # 0 disables the warning.
    empty_page_warning: int = field(
        default_factory=lambda: int(os.environ.get("CATALOG_EMPTY_PAGE_WARNING", "3"))
    )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    output_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("CATALOG_OUTPUT_DIR", Path.home() / ".catalog_data")
        )
    )

    @property
    def default_output_path(self) -> Path:
        """Absolute path of the JSONL file written by ``catalog crawl``."""
        return self.output_dir / f"{self.uploader}-catalog.jsonl"

    def ensure_output_dir(self) -> None:
        """Create the output directory if it does not exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton — import this everywhere:
#   from catalog.config import settings
settings = Settings()
