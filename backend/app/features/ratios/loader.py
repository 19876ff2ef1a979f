"""
Ratio feed loading.

RatioDataLoader downloads the raw CSV feeds and builds a RatioSnapshot.
RatioStore owns the current snapshot and swaps it atomically on refresh;
a failed refresh leaves the previous snapshot in place.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from app.config import settings

from .models import RatioSnapshot
from .parser import build_snapshot

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class RatioDataError(Exception):
    """Ratio feed could not be fetched or parsed."""
    pass


# =============================================================================
# Loader
# =============================================================================

class RatioDataLoader:
    """
    Fetches ratio feeds over HTTP.

    Args:
        default_url: Default ratio feed URL
        eu_url: EU winner feed URL (None = not configured)
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        default_url: str | None = None,
        eu_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.default_url = default_url if default_url is not None else settings.default_ratios_url
        self.eu_url = eu_url if eu_url is not None else settings.eu_winner_url
        self.timeout = timeout if timeout is not None else settings.data_fetch_timeout
        self.transport = transport

    async def fetch_text(self, client: httpx.AsyncClient, url: str) -> str:
        """Download one feed as text (BOM stripped)."""
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise RatioDataError(f"Failed to fetch {url}: {e}") from e

        if not response.is_success:
            raise RatioDataError(
                f"Failed to fetch {url}: HTTP {response.status_code}"
            )
        return response.text.lstrip("\ufeff")

    async def load(self) -> RatioSnapshot:
        """
        Fetch all configured feeds and build a snapshot.

        Raises:
            RatioDataError: Transport error, non-2xx status, or no usable data
        """
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            if self.eu_url:
                default_text, eu_text = await asyncio.gather(
                    self.fetch_text(client, self.default_url),
                    self.fetch_text(client, self.eu_url),
                )
            else:
                default_text = await self.fetch_text(client, self.default_url)
                eu_text = None

        return snapshot_from_text(default_text, eu_text)


def snapshot_from_text(default_text: str | None, eu_text: str | None) -> RatioSnapshot:
    """
    Build a snapshot from already-fetched feed texts.

    Raises:
        RatioDataError: Neither feed produced any ratio
    """
    snapshot = build_snapshot(default_text, eu_text)
    if snapshot.is_empty:
        raise RatioDataError("Ratio feeds contain no usable data")
    return snapshot


# =============================================================================
# Store
# =============================================================================

class RatioStore:
    """
    Holds the current RatioSnapshot.

    Refreshes are serialized with an asyncio.Lock; readers take the
    snapshot reference and never see a half-built table.
    """

    def __init__(self, loader: RatioDataLoader | None = None):
        self._loader = loader
        self._snapshot: RatioSnapshot | None = None
        self._lock = asyncio.Lock()

    @property
    def loader(self) -> RatioDataLoader:
        if self._loader is None:
            self._loader = RatioDataLoader()
        return self._loader

    @property
    def snapshot(self) -> RatioSnapshot | None:
        return self._snapshot

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def replace(self, snapshot: RatioSnapshot) -> None:
        """Swap in a new snapshot."""
        self._snapshot = snapshot
        _log_snapshot(snapshot)

    def load_text(self, default_text: str | None, eu_text: str | None = None) -> RatioSnapshot:
        """Build from raw texts and swap in (CLI / tests)."""
        snapshot = snapshot_from_text(default_text, eu_text)
        self.replace(snapshot)
        return snapshot

    async def refresh(self) -> RatioSnapshot:
        """
        Re-fetch all feeds and swap in the result.

        Raises:
            RatioDataError: Fetch failed; previous snapshot is kept
        """
        async with self._lock:
            try:
                snapshot = await self.loader.load()
            except RatioDataError as e:
                logger.error(f"Ratio data refresh failed: {e}")
                raise
            self.replace(snapshot)
            return snapshot


def _log_snapshot(snapshot: RatioSnapshot) -> None:
    counts = ", ".join(
        f"{mode.value}={len(table)}" for mode, table in snapshot.tables.items()
    )
    logger.info(
        f"Race data loaded: {len(snapshot.race_names)} races, ratios {counts}, "
        f"{len(snapshot.eu_details)} EU race details"
    )


# Module-level store used by the API
ratio_store = RatioStore()
