"""Upstream fetch functions, one per route.

Each takes the shared ``Upstreams`` bundle plus the route's path parameters
and returns JSON-serializable data. They never catch upstream errors.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from gateway.config import POPULAR_PAGE_SIZE
from gateway.outcome import NotFoundError
from gateway.resolver import FallbackResolver
from gateway.upstream.base import MetadataSource, VideoCatalogSource
from gateway.upstream.schemas import SearchHit


@dataclass
class Upstreams:
    catalog: VideoCatalogSource
    metadata: MetadataSource
    resolver: FallbackResolver


async def fetch_search(upstreams: Upstreams, query: str, page: str) -> list[dict[str, Any]]:
    return await upstreams.catalog.search(query, page)


async def fetch_anime(upstreams: Upstreams, anime_id: str) -> dict[str, Any]:
    return await upstreams.resolver.resolve(anime_id)


async def fetch_episode(upstreams: Upstreams, episode_id: str) -> Any:
    return await upstreams.catalog.fetch_episode(episode_id)


async def fetch_download(upstreams: Upstreams, episode_id: str) -> Any:
    # Tokens are short-lived, so every download request logs in again.
    token = await upstreams.catalog.obtain_auth_token()
    return await upstreams.catalog.fetch_download_links(episode_id, token)


async def fetch_recent(upstreams: Upstreams, page: str) -> list[dict[str, Any]]:
    return await upstreams.catalog.recent(page)


async def fetch_recommendations(upstreams: Upstreams, query: str) -> list[dict[str, Any]]:
    """Recommendations for the best AniList match of query."""
    search = await upstreams.metadata.search(query)
    hits = search.get("results") or []
    if not hits:
        raise NotFoundError()
    first = SearchHit.model_validate(hits[0])
    anime = await upstreams.metadata.fetch_anime(first.id)
    return anime.get("recommendations") or []


async def fetch_popular(upstreams: Upstreams, page: str) -> list[dict[str, Any]]:
    return await upstreams.catalog.popular(page, POPULAR_PAGE_SIZE)


async def fetch_upcoming(upstreams: Upstreams, page: str) -> list[dict[str, Any]]:
    payload = await upstreams.metadata.upcoming(page)
    return payload["results"]
