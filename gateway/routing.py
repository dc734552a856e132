"""Route table and cached dispatch.

Every route is a ``RouteSpec``: the path prefix it answers, the template of
its cache key, its TTL (``None`` for routes that are never cached) and the
fetcher that produces fresh data.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from gateway import fetchers
from gateway.cache import CacheStore, Clock, epoch_seconds
from gateway.config import (
    ANIME_TTL,
    POPULAR_TTL,
    RECENT_TTL,
    RECOMMENDATIONS_TTL,
    SEARCH_TTL,
    UPCOMING_TTL,
)
from gateway.fetchers import Upstreams
from gateway.outcome import NotFound, Ok, Outcome, settle

logger = logging.getLogger(__name__)

Fetcher = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class RouteSpec:
    """Static description of one gateway route."""
    name: str
    path_prefix: str
    fetcher: Fetcher
    cache_key: Optional[str] = None
    ttl_seconds: Optional[int] = None
    empty_is_not_found: bool = False

    @property
    def cached(self) -> bool:
        return self.cache_key is not None and self.ttl_seconds is not None

    def key_for(self, **params: Any) -> str:
        """Render the cache key for a request's parameters."""
        if self.cache_key is None:
            raise ValueError(f"Route {self.name} is not cached")
        return self.cache_key.format(**params)


SEARCH = RouteSpec("search", "/search/", fetchers.fetch_search,
                   "search_{query}_{page}", SEARCH_TTL, empty_is_not_found=True)
ANIME = RouteSpec("anime", "/anime/", fetchers.fetch_anime, "anime_{anime_id}", ANIME_TTL)
EPISODE = RouteSpec("episode", "/episode/", fetchers.fetch_episode)
DOWNLOAD = RouteSpec("download", "/download/", fetchers.fetch_download)
RECENT = RouteSpec("recent", "/recent/", fetchers.fetch_recent, "recent_{page}", RECENT_TTL)
RECOMMENDATIONS = RouteSpec("recommendations", "/recommendations/", fetchers.fetch_recommendations,
                            "recommendations_{query}", RECOMMENDATIONS_TTL)
POPULAR = RouteSpec("gogoPopular", "/gogoPopular/", fetchers.fetch_popular,
                    "gogoPopular_{page}", POPULAR_TTL)
UPCOMING = RouteSpec("upcoming", "/upcoming/", fetchers.fetch_upcoming, "upcoming_{page}", UPCOMING_TTL)

ROUTES: tuple[RouteSpec, ...] = (
    SEARCH,
    ANIME,
    EPISODE,
    DOWNLOAD,
    RECENT,
    RECOMMENDATIONS,
    POPULAR,
    UPCOMING,
)


def match_route(path: str, routes: tuple[RouteSpec, ...] = ROUTES) -> Optional[RouteSpec]:
    """First route whose prefix starts path, or None."""
    for spec in routes:
        if path.startswith(spec.path_prefix):
            return spec
    return None


class Gateway:
    """Serves routes from the cache, falling back to the upstream fetchers."""

    def __init__(self, upstreams: Upstreams, cache: Optional[CacheStore] = None,
                 clock: Clock = epoch_seconds):
        self.upstreams = upstreams
        self.cache = cache if cache is not None else CacheStore()
        self.clock = clock

    async def fetch(self, spec: RouteSpec, **params: Any) -> Any:
        """Fresh or cached data for spec. Upstream errors propagate."""
        compute = partial(spec.fetcher, self.upstreams, **params)
        if not spec.cached:
            return await compute()
        return await self.cache.get_or_compute(
            spec.key_for(**params), spec.ttl_seconds, self.clock(), compute
        )

    async def serve(self, spec: RouteSpec, **params: Any) -> Outcome:
        outcome = await settle(self.fetch(spec, **params))
        if spec.empty_is_not_found and isinstance(outcome, Ok) and not outcome.value:
            return NotFound()
        return outcome
