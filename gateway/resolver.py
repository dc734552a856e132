"""Entity-by-id resolution with a search fallback."""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from gateway.config import CATALOG_SOURCE
from gateway.outcome import NotFoundError
from gateway.upstream.base import VideoCatalogSource
from gateway.upstream.schemas import AnimeRecord, SearchHit

logger = logging.getLogger(__name__)


class FallbackResolver:
    """
    Resolve a catalog id, degrading to search-then-fetch when it does not map directly.

    1. Fetch the id directly. A record without a name counts as a miss.
    2. On failure or miss, search with the id as free text. No hits is NotFound;
       otherwise fetch the first hit. Errors from that second fetch propagate.
    3. Tag the record with its source.
    """

    def __init__(self, catalog: VideoCatalogSource, source: str = CATALOG_SOURCE):
        self.catalog = catalog
        self.source = source

    async def _direct(self, anime_id: str) -> dict[str, Any] | None:
        try:
            record = await self.catalog.fetch_entity(anime_id)
            if AnimeRecord.model_validate(record).is_complete:
                return record
            logger.info(f"Direct lookup for {anime_id!r} returned an empty record")
        except ValidationError:
            logger.info(f"Direct lookup for {anime_id!r} returned a malformed record")
        except Exception as e:
            logger.warning(f"Direct lookup for {anime_id!r} failed: {e}")
        return None

    async def resolve(self, anime_id: str) -> dict[str, Any]:
        record = await self._direct(anime_id)

        if record is None:
            hits = await self.catalog.search(anime_id)
            if not hits:
                raise NotFoundError()
            first = SearchHit.model_validate(hits[0])
            logger.info(f"Resolved {anime_id!r} through search to {first.id!r}")
            record = await self.catalog.fetch_entity(str(first.id))

        return {**record, "source": self.source}
