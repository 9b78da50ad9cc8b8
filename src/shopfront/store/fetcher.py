"""Dual-source fetcher.

Sends the same logical read to the seed and live backends at once. Each side
fails on its own: an unreachable backend, a non-2xx answer or a non-JSON body
leaves ``None`` for that side and the other side is still returned.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from .client import SourceClient
from .exceptions import MalformedPayload, SourceUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DualPayload:
    """Parsed bodies from both backends; None marks a failed side."""

    seed: Any = None
    live: Any = None

    @property
    def any_answered(self) -> bool:
        return self.seed is not None or self.live is not None


async def fetch_one(client: SourceClient, path: str, params: dict | None = None) -> Any:
    """GET one path, returning None instead of raising on source failures."""
    try:
        return await client.get(path, params=params)
    except (SourceUnavailable, MalformedPayload) as e:
        logger.warning("Ignoring %s API for %s: %s", client.label, path, e)
        return None


class DualSourceFetcher:
    """Concurrent, failure-isolated reads from the seed and live backends."""

    def __init__(self, seed: SourceClient, live: SourceClient):
        self.seed = seed
        self.live = live

    async def fetch(self, seed_path: str, live_path: str, params: dict | None = None) -> DualPayload:
        seed_body, live_body = await asyncio.gather(
            fetch_one(self.seed, seed_path, params),
            fetch_one(self.live, live_path, params),
        )
        return DualPayload(seed=seed_body, live=live_body)

    async def fetch_resource(self, resource: str, params: dict | None = None) -> DualPayload:
        """Fetch a collection by resource name using each backend's own path."""
        return await self.fetch(
            self.seed.source.collection_path(resource),
            self.live.source.collection_path(resource),
            params=params,
        )
